from __future__ import annotations

"""Shared data structures used across the tree engine.

This package exposes the node type mirrored from caller source data and the
small value objects the engine hands back to callers. It is intentionally
free of UI code so that the contained objects can be reused in any context
(unit-tests, terminal front-ends, GUI adapters, etc.).
"""

import weakref
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterator, List, Optional

if TYPE_CHECKING:
    from aria_treeview.core.tree import Tree

__all__ = ["TreeNode", "NodeAspect", "StateChanges"]


class NodeAspect(str, Enum):
    """Interaction state a presentation adapter may need to re-render."""

    EXPANDED = "expanded"
    ACTIVE = "active"
    SELECTED = "selected"


class TreeNode:
    """One node of the mirrored tree.

    Structure (``children``, ``index_in_group``, ``parent``) is fixed when the
    owning :class:`~aria_treeview.core.tree.Tree` builds the node. Interaction
    flags are exposed read-only; they change only through Tree operations so
    the tree-wide invariants (single active node, selection set in lock-step)
    cannot be bypassed.

    Attributes
    ----------
    id
        Caller-supplied identifier, unique within the tree.
    label
        Display text.
    payload
        Caller-opaque data handed to activation handlers.
    children
        Child nodes in tree order. Empty for a leaf.
    index_in_group
        0-based position among siblings.
    source
        The source record this node was built from.
    """

    def __init__(
        self,
        node_id: Any,
        label: str,
        payload: Any,
        index_in_group: int,
        tree: "Tree",
        parent: Optional["TreeNode"] = None,
        source: Any = None,
    ) -> None:
        self.id = node_id
        self.label = label
        self.payload = payload
        self.index_in_group = index_in_group
        self.source = source
        self.children: List[TreeNode] = []
        self._tree_ref = weakref.ref(tree)
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self._expanded = False
        self._active = False
        self._selected = False

    def __repr__(self) -> str:
        return f"TreeNode(id={self.id!r}, label={self.label!r})"

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    @property
    def parent(self) -> Optional["TreeNode"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def tree(self) -> Optional["Tree"]:
        return self._tree_ref()

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def siblings(self) -> List["TreeNode"]:
        """The group this node belongs to: the parent's children or the roots."""
        parent = self.parent
        if parent is not None:
            return parent.children
        tree = self.tree
        if tree is None:
            return [self]
        return tree.roots

    @property
    def level(self) -> int:
        """1-based depth; roots are level 1."""
        depth = 1
        probe = self.parent
        while probe is not None:
            depth += 1
            probe = probe.parent
        return depth

    @property
    def position_in_set(self) -> int:
        return self.index_in_group + 1

    @property
    def set_size(self) -> int:
        return len(self.siblings)

    def ancestors(self) -> Iterator["TreeNode"]:
        """Yield the parent chain, nearest ancestor first."""
        probe = self.parent
        while probe is not None:
            yield probe
            probe = probe.parent

    def iter_subtree(self) -> Iterator["TreeNode"]:
        """Yield this node and all descendants in tree order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def is_visible(self) -> bool:
        """True when every ancestor is expanded (roots are always visible)."""
        return all(ancestor.expanded for ancestor in self.ancestors())

    # ------------------------------------------------------------------
    # Interaction state (mutated by Tree only)
    # ------------------------------------------------------------------
    @property
    def expanded(self) -> bool:
        return self._expanded

    @property
    def active(self) -> bool:
        return self._active

    @property
    def selected(self) -> bool:
        return self._selected


class StateChanges:
    """Nodes whose presentation must be refreshed, with the changed aspects.

    Returned by every mutating Tree operation. Iterating yields
    ``(node, aspects)`` pairs in the order nodes were first touched.
    """

    def __init__(self) -> None:
        self._changes: Dict[int, tuple] = {}

    def mark(self, node: TreeNode, aspect: NodeAspect) -> None:
        key = id(node)
        entry = self._changes.get(key)
        if entry is None:
            self._changes[key] = (node, {aspect})
        else:
            entry[1].add(aspect)

    def merge(self, other: "StateChanges") -> "StateChanges":
        for node, aspects in other:
            for aspect in aspects:
                self.mark(node, aspect)
        return self

    def aspects_for(self, node: TreeNode) -> FrozenSet[NodeAspect]:
        entry = self._changes.get(id(node))
        if entry is None:
            return frozenset()
        return frozenset(entry[1])

    @property
    def nodes(self) -> List[TreeNode]:
        return [node for node, _ in self._changes.values()]

    def __iter__(self) -> Iterator[tuple]:
        for node, aspects in self._changes.values():
            yield node, frozenset(aspects)

    def __len__(self) -> int:
        return len(self._changes)

    def __bool__(self) -> bool:
        return bool(self._changes)

    def __contains__(self, node: object) -> bool:
        return id(node) in self._changes

    def __repr__(self) -> str:
        parts = ", ".join(
            f"{node.id!r}: {sorted(a.value for a in aspects)}" for node, aspects in self
        )
        return f"StateChanges({{{parts}}})"
