from __future__ import annotations

"""Keyboard interaction contract for the tree widget.

:class:`KeyCommandResolver` turns a key press on the focused node into a
:class:`KeyCommand` describing what the tree should do. Resolution is pure:
it reads node structure and flags but never mutates them, so the whole
interaction table can be tested without a presentation layer. Mutation is
performed afterwards by :meth:`aria_treeview.core.tree.Tree.apply_command`.

Key table (focused node ``n``):

- RETURN / SPACE on the item: select ``n`` and signal activation.
- RETURN / SPACE on the expand control: left to the platform.
- RIGHT: expand ``n`` and focus its first child; no-op on a leaf.
- LEFT: collapse ``n`` when expanded, else focus the parent (or first root).
- DOWN / UP: focus the next / previous rendered row.
- HOME / END: focus the first / last root.
- TAB and any other key: left to the platform.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from aria_treeview.core import navigation
from aria_treeview.core.exceptions import ConfigurationError
from aria_treeview.core.models import TreeNode

if TYPE_CHECKING:
    from aria_treeview.core.tree import Tree

__all__ = [
    "Key",
    "InputTarget",
    "CommandKind",
    "KeyCommand",
    "KeyMap",
    "KeyCommandResolver",
]

logger = logging.getLogger(__name__)


class Key(IntEnum):
    """Discrete key symbols; values are the classic DOM key codes."""

    TAB = 9
    RETURN = 13
    SPACE = 32
    PAGE_UP = 33
    PAGE_DOWN = 34
    END = 35
    HOME = 36
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40


class InputTarget(str, Enum):
    """Which part of a rendered node received the input."""

    ITEM = "item"
    EXPAND_CONTROL = "expand_control"


class CommandKind(str, Enum):
    NONE = "none"
    SELECT_AND_ACTIVATE = "select_and_activate"
    EXPAND_AND_FOCUS_FIRST_CHILD = "expand_and_focus_first_child"
    COLLAPSE = "collapse"
    FOCUS = "focus"


@dataclass(frozen=True)
class KeyCommand:
    """Resolved action for one key press.

    Attributes
    ----------
    kind
        What the tree should do.
    node
        The node the action applies to (``None`` for :attr:`CommandKind.NONE`).
    consumed
        Whether the adapter should suppress the platform's default handling.
    """

    kind: CommandKind
    node: Optional[TreeNode] = None
    consumed: bool = True

    @classmethod
    def ignored(cls) -> "KeyCommand":
        return cls(CommandKind.NONE, None, consumed=False)

    @classmethod
    def noop(cls) -> "KeyCommand":
        return cls(CommandKind.NONE, None, consumed=True)


class KeyMap:
    """Translate platform key identifiers into :class:`Key` symbols.

    Integer codes are matched against :class:`Key` values directly; names are
    looked up in the configured ``keys`` table and then tried as ``Key``
    member names (case-insensitive).
    """

    def __init__(self, names: Optional[Dict[str, Key]] = None) -> None:
        self._names: Dict[str, Key] = dict(names or {})

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "KeyMap":
        """Build a keymap from the ``keymap`` configuration section.

        Raises
        ------
        ConfigurationError
            If an entry maps to something that is not a ``Key`` member name.
        """
        data = data or {}
        table = data.get("keys", {}) or {}
        if not isinstance(table, Mapping):
            raise ConfigurationError("expected a mapping", section="keymap", key="keys")
        names: Dict[str, Key] = {}
        for platform_name, symbol in table.items():
            try:
                names[str(platform_name)] = Key[str(symbol).strip().upper()]
            except KeyError as exc:
                raise ConfigurationError(
                    f"unknown key symbol {symbol!r} for {platform_name!r}",
                    section="keymap",
                    key="keys",
                ) from exc
        return cls(names)

    def lookup(self, key: Union[Key, int, str, None]) -> Optional[Key]:
        """Return the symbol for ``key`` or ``None`` when it is not recognised."""
        if key is None:
            return None
        if isinstance(key, Key):
            return key
        if isinstance(key, int) and not isinstance(key, bool):
            try:
                return Key(key)
            except ValueError:
                return None
        if isinstance(key, str):
            mapped = self._names.get(key)
            if mapped is not None:
                return mapped
            try:
                return Key[key.strip().upper()]
            except KeyError:
                return None
        return None

    def __len__(self) -> int:
        return len(self._names)


class KeyCommandResolver:
    """Pure mapping from ``(key, focused node, tree)`` to a :class:`KeyCommand`."""

    def resolve(
        self,
        key: Union[Key, int, None],
        node: Optional[TreeNode],
        tree: "Tree",
        target: InputTarget = InputTarget.ITEM,
    ) -> KeyCommand:
        if not isinstance(key, Key):
            # raw codes are accepted; names need a KeyMap
            key = KeyMap().lookup(key) if isinstance(key, int) else None
        if key is None or key is Key.TAB:
            return KeyCommand.ignored()

        if key in (Key.RETURN, Key.SPACE):
            if target is InputTarget.EXPAND_CONTROL or node is None:
                return KeyCommand.ignored()
            return KeyCommand(CommandKind.SELECT_AND_ACTIVATE, node)

        if key is Key.HOME:
            return self._focus(tree.roots[0] if tree.roots else None)
        if key is Key.END:
            return self._focus(tree.roots[-1] if tree.roots else None)

        if node is None:
            return KeyCommand.ignored()

        if key is Key.RIGHT:
            if not node.has_children:
                return KeyCommand.noop()
            return KeyCommand(CommandKind.EXPAND_AND_FOCUS_FIRST_CHILD, node)

        if key is Key.LEFT:
            if node.has_children and node.expanded:
                return KeyCommand(CommandKind.COLLAPSE, node)
            parent = node.parent
            if parent is not None:
                return self._focus(parent)
            return self._focus(tree.roots[0] if tree.roots else None)

        if key is Key.DOWN:
            return self._focus(navigation.next_line(node))
        if key is Key.UP:
            return self._focus(navigation.previous_line(node))

        # PAGE_UP / PAGE_DOWN and anything unrecognised keep platform defaults
        logger.debug("Keys: unhandled key=%s node=%r", key.name, node.id)
        return KeyCommand.ignored()

    @staticmethod
    def _focus(node: Optional[TreeNode]) -> KeyCommand:
        if node is None:
            return KeyCommand.noop()
        return KeyCommand(CommandKind.FOCUS, node)
