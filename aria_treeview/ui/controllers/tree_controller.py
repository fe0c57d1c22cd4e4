from __future__ import annotations

"""Controller turning presentation input events into tree transitions.

The presentation adapter forwards raw input (a handle plus a platform key
name or pointer button); this controller resolves the handle through the
tree's handle index, translates the key through the configured keymap,
asks :class:`KeyCommandResolver` what to do and lets the :class:`Tree`
perform it. Caller-side policy that the engine deliberately does not own
(single vs. multiple selection) is applied here.

No UI toolkit code appears in this module.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Hashable, Optional, Sequence, Union

from aria_treeview.config import ConfigManager
from aria_treeview.core.accessibility import expand_control_label, tree_item_attributes
from aria_treeview.core.adapter import PresentationAdapter
from aria_treeview.core.exceptions import UnknownNodeReferenceError
from aria_treeview.core.keys import CommandKind, InputTarget, Key, KeyCommand, KeyCommandResolver, KeyMap
from aria_treeview.core.models import StateChanges, TreeNode
from aria_treeview.core.models.view_config import TreeViewSettings
from aria_treeview.core.tree import Tree

__all__ = ["InputEventKind", "PointerButton", "InputResult", "TreeController"]

logger = logging.getLogger(__name__)


class InputEventKind(str, Enum):
    KEY = "key"
    POINTER = "pointer"


class PointerButton(IntEnum):
    PRIMARY = 0
    AUXILIARY = 1
    SECONDARY = 2


@dataclass(frozen=True)
class InputResult:
    """Outcome of one forwarded input event.

    Attributes
    ----------
    consumed
        True when the adapter should stop the platform default behaviour.
    changes
        Nodes whose presentation must be refreshed.
    command
        The resolved key command, for key events.
    """

    consumed: bool
    changes: StateChanges = field(default_factory=StateChanges)
    command: Optional[KeyCommand] = None


class TreeController:
    """Coordinate adapter input with the tree engine.

    Parameters
    ----------
    tree : Tree
        The engine instance to drive.
    keymap : KeyMap, optional
        Platform key name translation. Defaults to a keymap that only knows
        ``Key`` member names and integer key codes.
    settings : TreeViewSettings, optional
        Interaction policy; defaults to multiple selection.
    resolver : KeyCommandResolver, optional
        Injected for tests; a fresh resolver is used otherwise.
    """

    def __init__(
        self,
        tree: Tree,
        keymap: Optional[KeyMap] = None,
        settings: Optional[TreeViewSettings] = None,
        resolver: Optional[KeyCommandResolver] = None,
    ) -> None:
        self.tree: Tree = tree
        self.keymap: KeyMap = keymap or KeyMap()
        self.settings: TreeViewSettings = settings or TreeViewSettings()
        self.resolver: KeyCommandResolver = resolver or KeyCommandResolver()

    @classmethod
    def from_config(
        cls,
        source_data: Sequence[Any],
        adapter: Optional[PresentationAdapter] = None,
        config: Optional[ConfigManager] = None,
    ) -> "TreeController":
        """Build a tree and its controller from the loaded configuration."""
        config = config or ConfigManager()
        settings = config.get_tree_view_settings()
        keymap = config.get_keymap()
        tree = Tree(
            source_data,
            adapter,
            scroll_into_view=settings.scroll_into_view,
            scroll_options=settings.scroll_options,
        )
        logger.info(
            "Controller: created selection_mode=%s keymap_entries=%d",
            settings.selection_mode,
            len(keymap),
        )
        return cls(tree, keymap=keymap, settings=settings)

    # ---------------------------------------------------------------------------------
    # Input
    # ---------------------------------------------------------------------------------

    def on_input_event(
        self,
        handle: Hashable,
        event_kind: InputEventKind,
        key_or_button: Union[Key, int, str, None],
        target: InputTarget = InputTarget.ITEM,
    ) -> InputResult:
        """Apply one input event received on the node behind ``handle``.

        Raises
        ------
        UnknownNodeReferenceError
            If ``handle`` was not produced by this tree's adapter.
        """
        try:
            node = self.tree.node_for_handle(handle)
        except UnknownNodeReferenceError:
            logger.warning("Input FAIL: unknown handle=%r kind=%s", handle, event_kind)
            raise

        if event_kind is InputEventKind.KEY:
            return self.handle_key(node, key_or_button, target)
        if event_kind is InputEventKind.POINTER:
            return self.handle_pointer(node, key_or_button, target)
        raise ValueError(f"Unsupported input event kind: {event_kind!r}")

    def handle_key(
        self,
        node: Optional[TreeNode],
        key: Union[Key, int, str, None],
        target: InputTarget = InputTarget.ITEM,
    ) -> InputResult:
        """Resolve and apply a key press on ``node`` (the focused node)."""
        symbol = self.keymap.lookup(key)
        command = self.resolver.resolve(symbol, node, self.tree, target)
        logger.debug(
            "Input: key=%r symbol=%s node=%r command=%s consumed=%s",
            key,
            symbol.name if symbol is not None else None,
            node.id if node is not None else None,
            command.kind.value,
            command.consumed,
        )

        changes = StateChanges()
        if command.kind is CommandKind.SELECT_AND_ACTIVATE and self.settings.single_selection:
            changes.merge(self._deselect_others(command.node))
        changes.merge(self.tree.apply_command(command))
        return InputResult(consumed=command.consumed, changes=changes, command=command)

    def handle_pointer(
        self,
        node: TreeNode,
        button: Union[PointerButton, int, str, None] = PointerButton.PRIMARY,
        target: InputTarget = InputTarget.ITEM,
    ) -> InputResult:
        """Apply a pointer click; only the primary button is handled."""
        if button is None:
            button = PointerButton.PRIMARY
        if isinstance(button, bool) or not isinstance(button, int) or button != PointerButton.PRIMARY:
            return InputResult(consumed=False)

        if target is InputTarget.EXPAND_CONTROL:
            changes = self.tree.toggle_expanded(node)
            logger.debug("Input: toggle node=%r expanded=%s", node.id, node.expanded)
            return InputResult(consumed=True, changes=changes)

        changes = self.tree.set_active(node, scroll_into_view=False)
        changes.merge(self.select(node))
        self.tree.activate(node)
        return InputResult(consumed=True, changes=changes)

    # ---------------------------------------------------------------------------------
    # Selection policy
    # ---------------------------------------------------------------------------------

    def select(self, node: TreeNode) -> StateChanges:
        """Select ``node`` honouring the configured selection mode."""
        changes = StateChanges()
        if self.settings.single_selection:
            changes.merge(self._deselect_others(node))
        return changes.merge(self.tree.set_selected(node, True))

    def _deselect_others(self, keep: Optional[TreeNode]) -> StateChanges:
        changes = StateChanges()
        for other in self.tree.selected_nodes:
            if other is not keep:
                changes.merge(self.tree.set_selected(other, False))
        return changes

    # ---------------------------------------------------------------------------------
    # Presentation helpers
    # ---------------------------------------------------------------------------------

    def accessibility_attributes(self, node: TreeNode) -> Dict[str, str]:
        return tree_item_attributes(node)

    def expand_control_label(self, node: TreeNode) -> Optional[str]:
        return expand_control_label(node, self.settings.expand_control)
