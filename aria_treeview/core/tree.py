from __future__ import annotations

"""Tree engine: structure, interaction state and adjacency.

This module owns the mirrored node graph built from caller source data and
every piece of aggregate state the keyboard contract relies on: the single
active node, the selection set, and the bidirectional index between nodes
and the opaque handles the presentation adapter hands back from ``render``.

Scope and guarantees:
- UI-agnostic: all presentation work is delegated to a
  :class:`~aria_treeview.core.adapter.PresentationAdapter`.
- Every mutating operation returns a :class:`StateChanges` listing the nodes
  whose presentation must be refreshed, and pushes the same information to
  the adapter through ``notify_state_changed``.
- No-op requests (expanding a leaf, deselecting with nothing selected,
  activating the active node) succeed and report no changes.
- Operations handed a node, id or handle this tree does not own raise
  :class:`UnknownNodeReferenceError`.

Examples
--------
Basic usage::

    tree = Tree([
        {"id": "a", "label": "A", "children": [{"id": "b", "label": "B"}]},
        {"id": "c", "label": "C"},
    ])
    tree.add_activation_handler(print)
    command = KeyCommandResolver().resolve(Key.RIGHT, tree.get_node("a"), tree)
    changes = tree.apply_command(command)

"""

import logging
from typing import Any, Callable, Dict, FrozenSet, Hashable, Iterator, List, Optional, Sequence, Tuple

from aria_treeview.core import navigation
from aria_treeview.core.adapter import NullPresentationAdapter, PresentationAdapter
from aria_treeview.core.exceptions import (
    DuplicateHandleError,
    DuplicateIdentifierError,
    InvalidSourceDataError,
    UnknownNodeReferenceError,
)
from aria_treeview.core.keys import CommandKind, KeyCommand
from aria_treeview.core.models import NodeAspect, StateChanges, TreeNode
from aria_treeview.core.models.source import record_path, validate_record
from aria_treeview.core.models.view_config import ScrollOptions

__all__ = ["Tree", "NodeQuery", "ActivationHandler"]

logger = logging.getLogger(__name__)

ActivationHandler = Callable[[Any], None]


class NodeQuery:
    """Lazy, restartable read-only query over the nodes of a tree.

    Each iteration walks the tree in tree order again, so the result always
    reflects the current structure. Iterating never mutates node state.
    """

    def __init__(self, tree: "Tree", predicate: Callable[[Any], bool]) -> None:
        self._tree = tree
        self._predicate = predicate

    def __iter__(self) -> Iterator[TreeNode]:
        for node in self._tree.iter_tree_order():
            if self._predicate(node.payload):
                yield node

    def first(self) -> Optional[TreeNode]:
        return next(iter(self), None)

    def to_list(self) -> List[TreeNode]:
        return list(self)


class Tree:
    """Navigation-and-state engine for an accessible tree widget.

    Parameters
    ----------
    source_data : Sequence
        Ordered top-level source records (mappings or ``SourceRecord``),
        nested through ``children``.
    adapter : PresentationAdapter, optional
        Rendering collaborator. Defaults to :class:`NullPresentationAdapter`.
    scroll_into_view : bool, default=True
        Whether :meth:`set_active` asks the adapter to scroll by default.
    scroll_options : ScrollOptions, optional
        Options forwarded with every scroll request.

    Raises
    ------
    DuplicateIdentifierError
        If two records anywhere share an ``id``.
    InvalidSourceDataError
        If a record is malformed.
    DuplicateHandleError
        If the adapter returns the same handle for two nodes.
    """

    def __init__(
        self,
        source_data: Sequence[Any],
        adapter: Optional[PresentationAdapter] = None,
        *,
        scroll_into_view: bool = True,
        scroll_options: Optional[ScrollOptions] = None,
    ) -> None:
        self._adapter: PresentationAdapter = adapter if adapter is not None else NullPresentationAdapter()
        self.scroll_into_view: bool = bool(scroll_into_view)
        self.scroll_options: ScrollOptions = scroll_options or ScrollOptions()

        self._roots: List[TreeNode] = []
        self._nodes_by_id: Dict[Any, TreeNode] = {}
        # id(source record) -> (record, node); the record is kept so its id stays unique
        self._nodes_by_source: Dict[int, Tuple[Any, TreeNode]] = {}
        self._node_by_handle: Dict[Hashable, TreeNode] = {}
        self._handle_by_node: Dict[int, Hashable] = {}

        self._active: Optional[TreeNode] = None
        self._selected: set = set()
        self._activation_handlers: List[ActivationHandler] = []

        if source_data is None:
            source_data = []
        if not isinstance(source_data, (list, tuple)):
            raise InvalidSourceDataError(
                f"Expected a list of records, got {type(source_data).__name__}"
            )
        self._roots = self._build_roots(source_data)
        self._render_all()
        logger.info("Tree: built nodes=%d roots=%d", len(self._nodes_by_id), len(self._roots))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def _build_roots(self, source_data: Sequence[Any]) -> List[TreeNode]:
        """Build the node graph in one pre-order pass without recursing."""
        roots: List[TreeNode] = []
        # frame: [records, parent, parent_path, group, next index]
        stack: List[list] = [[source_data, None, "", roots, 0]]
        while stack:
            frame = stack[-1]
            records, parent, parent_path, group, index = frame
            if index >= len(records):
                stack.pop()
                continue
            frame[4] = index + 1
            if index + 1 >= len(records):
                stack.pop()

            path = record_path(parent_path, index)
            record = validate_record(records[index], path)
            if record.id in self._nodes_by_id:
                logger.warning("Tree FAIL: duplicate id=%r path=%s", record.id, path)
                raise DuplicateIdentifierError(record.id, path)

            node = TreeNode(
                record.id,
                record.label,
                record.payload,
                index,
                self,
                parent=parent,
                source=record.raw,
            )
            self._nodes_by_id[node.id] = node
            self._nodes_by_source[id(record.raw)] = (record.raw, node)
            group.append(node)
            if record.children:
                stack.append([record.children, node, path, node.children, 0])
        return roots

    def _render_all(self) -> None:
        for node in self.iter_tree_order():
            handle = self._adapter.render(node)
            if handle in self._node_by_handle:
                raise DuplicateHandleError(handle, node_id=node.id)
            self._node_by_handle[handle] = node
            self._handle_by_node[id(node)] = handle

    def destroy(self) -> None:
        """Tear the tree down as a unit; the instance is empty afterwards."""
        if self._active is not None:
            self._active._active = False
        self._active = None
        for node in self._selected:
            node._selected = False
        self._selected.clear()
        self._activation_handlers.clear()
        self._node_by_handle.clear()
        self._handle_by_node.clear()
        self._nodes_by_source.clear()
        self._nodes_by_id.clear()
        self._roots = []
        logger.info("Tree: destroyed")

    # ------------------------------------------------------------------
    # Structure and lookup
    # ------------------------------------------------------------------
    @property
    def roots(self) -> List[TreeNode]:
        return self._roots

    @property
    def adapter(self) -> PresentationAdapter:
        return self._adapter

    def __len__(self) -> int:
        return len(self._nodes_by_id)

    def __contains__(self, node_id: object) -> bool:
        try:
            return node_id in self._nodes_by_id
        except TypeError:
            return False

    def __iter__(self) -> Iterator[TreeNode]:
        return self.iter_tree_order()

    def iter_tree_order(self) -> Iterator[TreeNode]:
        return navigation.iter_tree_order(self._roots)

    def iter_visible(self) -> Iterator[TreeNode]:
        return navigation.iter_visible(self._roots)

    def get_node(self, node_id: Any) -> TreeNode:
        node = self._nodes_by_id.get(node_id)
        if node is None:
            raise UnknownNodeReferenceError("No node with this id", node_id=node_id)
        return node

    def node_for_source(self, record: Any) -> TreeNode:
        """Return the node built from ``record`` (matched by identity)."""
        entry = self._nodes_by_source.get(id(record))
        if entry is None or entry[0] is not record:
            raise UnknownNodeReferenceError("Record is not part of this tree's source data")
        return entry[1]

    def node_for_payload(self, payload: Any) -> Optional[TreeNode]:
        """Return the first node in tree order whose payload equals ``payload``."""
        for node in self.iter_tree_order():
            if node.payload == payload:
                return node
        return None

    def node_for_handle(self, handle: Hashable) -> TreeNode:
        try:
            return self._node_by_handle[handle]
        except (KeyError, TypeError):
            raise UnknownNodeReferenceError("Unknown presentation handle", handle=handle) from None

    def handle_for_node(self, node: TreeNode) -> Hashable:
        self._require_owned(node)
        return self._handle_by_node[id(node)]

    def owns(self, node: Any) -> bool:
        if not isinstance(node, TreeNode):
            return False
        return self._nodes_by_id.get(node.id) is node

    def _require_owned(self, node: Any) -> TreeNode:
        if not self.owns(node):
            node_id = getattr(node, "id", None)
            logger.warning("Tree FAIL: unknown node id=%r", node_id)
            raise UnknownNodeReferenceError("Node is not owned by this tree", node_id=node_id)
        return node

    def filter_nodes_by_payload(self, predicate: Callable[[Any], bool]) -> NodeQuery:
        """Return a lazy query of nodes whose payload satisfies ``predicate``."""
        return NodeQuery(self, predicate)

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------
    def parent(self, node: TreeNode) -> Optional[TreeNode]:
        return self._require_owned(node).parent

    def next_sibling(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.next_sibling(self._require_owned(node))

    def previous_sibling(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.previous_sibling(self._require_owned(node))

    def next_visible(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.next_visible(self._require_owned(node))

    def previous_visible(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.previous_visible(self._require_owned(node))

    def next_line(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.next_line(self._require_owned(node))

    def previous_line(self, node: TreeNode) -> Optional[TreeNode]:
        return navigation.previous_line(self._require_owned(node))

    # ------------------------------------------------------------------
    # Expand / collapse
    # ------------------------------------------------------------------
    def set_expanded(self, node: TreeNode, value: bool = True) -> StateChanges:
        self._require_owned(node)
        changes = StateChanges()
        self._set_expanded_flag(node, bool(value), changes)
        return self._publish(changes)

    def toggle_expanded(self, node: TreeNode) -> StateChanges:
        self._require_owned(node)
        return self.set_expanded(node, not node.expanded)

    def collapse_all(self) -> StateChanges:
        changes = StateChanges()
        for node in self.iter_tree_order():
            self._set_expanded_flag(node, False, changes)
        logger.debug("Tree: collapse_all changed=%d", len(changes))
        return self._publish(changes)

    def expand_all(self) -> StateChanges:
        changes = StateChanges()
        for node in self.iter_tree_order():
            self._set_expanded_flag(node, True, changes)
        logger.debug("Tree: expand_all changed=%d", len(changes))
        return self._publish(changes)

    def expand_to_node(self, node: TreeNode) -> StateChanges:
        """Expand every ancestor of ``node`` so that it becomes visible."""
        self._require_owned(node)
        changes = StateChanges()
        for ancestor in node.ancestors():
            self._set_expanded_flag(ancestor, True, changes)
        return self._publish(changes)

    @staticmethod
    def _set_expanded_flag(node: TreeNode, value: bool, changes: StateChanges) -> None:
        if not node.has_children:
            return
        if node._expanded != value:
            node._expanded = value
            changes.mark(node, NodeAspect.EXPANDED)

    # ------------------------------------------------------------------
    # Active node
    # ------------------------------------------------------------------
    @property
    def active_node(self) -> Optional[TreeNode]:
        return self._active

    def set_active(self, node: Optional[TreeNode], scroll_into_view: Optional[bool] = None) -> StateChanges:
        """Make ``node`` the single active node, or clear it with ``None``.

        The adapter is asked to focus the node and, unless disabled, to
        scroll it into view.
        """
        changes = StateChanges()
        if node is None:
            if self._active is not None:
                previous = self._active
                previous._active = False
                self._active = None
                changes.mark(previous, NodeAspect.ACTIVE)
            return self._publish(changes)

        self._require_owned(node)
        previous = self._active
        if previous is not node:
            if previous is not None:
                previous._active = False
                changes.mark(previous, NodeAspect.ACTIVE)
            node._active = True
            self._active = node
            changes.mark(node, NodeAspect.ACTIVE)

        if scroll_into_view is None:
            scroll_into_view = self.scroll_into_view
        handle = self._handle_by_node[id(node)]
        self._adapter.request_focus(handle)
        if scroll_into_view:
            self._adapter.request_scroll_into_view(handle, self.scroll_options)
        logger.debug("Tree: active id=%r", node.id)
        return self._publish(changes)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selected_nodes(self) -> FrozenSet[TreeNode]:
        return frozenset(self._selected)

    def set_selected(self, node: TreeNode, value: bool = True) -> StateChanges:
        self._require_owned(node)
        changes = StateChanges()
        value = bool(value)
        if value:
            self._selected.add(node)
        else:
            self._selected.discard(node)
        if node._selected != value:
            node._selected = value
            changes.mark(node, NodeAspect.SELECTED)
        return self._publish(changes)

    def toggle_selected(self, node: TreeNode) -> StateChanges:
        self._require_owned(node)
        return self.set_selected(node, not node.selected)

    def deselect_all(self) -> StateChanges:
        changes = StateChanges()
        for node in list(self._selected):
            node._selected = False
            changes.mark(node, NodeAspect.SELECTED)
        self._selected.clear()
        return self._publish(changes)

    # ------------------------------------------------------------------
    # Activation
    # ------------------------------------------------------------------
    def add_activation_handler(self, callback: ActivationHandler) -> ActivationHandler:
        """Register ``callback(payload)``; returns it for later removal."""
        self._activation_handlers.append(callback)
        return callback

    def remove_activation_handler(self, callback: ActivationHandler) -> bool:
        try:
            self._activation_handlers.remove(callback)
            return True
        except ValueError:
            return False

    def activate(self, node: TreeNode) -> None:
        """Invoke every activation handler with ``node.payload``."""
        self._require_owned(node)
        logger.info("Tree: activate id=%r handlers=%d", node.id, len(self._activation_handlers))
        for handler in list(self._activation_handlers):
            handler(node.payload)

    # ------------------------------------------------------------------
    # Key commands
    # ------------------------------------------------------------------
    def apply_command(self, command: KeyCommand) -> StateChanges:
        """Perform the state transition a resolved key command describes."""
        kind = command.kind
        if kind is CommandKind.NONE:
            return StateChanges()

        node = self._require_owned(command.node)
        if kind is CommandKind.SELECT_AND_ACTIVATE:
            changes = self.set_selected(node, True)
            self.activate(node)
            return changes
        if kind is CommandKind.EXPAND_AND_FOCUS_FIRST_CHILD:
            changes = self.set_expanded(node, True)
            return changes.merge(self.set_active(node.children[0]))
        if kind is CommandKind.COLLAPSE:
            return self.set_expanded(node, False)
        if kind is CommandKind.FOCUS:
            return self.set_active(node)
        raise ValueError(f"Unsupported command kind: {kind!r}")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _publish(self, changes: StateChanges) -> StateChanges:
        for node, aspects in changes:
            self._adapter.notify_state_changed(node, aspects)
        return changes
