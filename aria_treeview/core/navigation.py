"""Tree-order adjacency helpers.

All queries walk the existing node graph and read the current ``expanded``
flags, so an expand/collapse is reflected immediately without rebuilding
anything. Adjacency is computed on the structural graph: a node hidden
under a collapsed ancestor still has neighbours.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from aria_treeview.core.models import TreeNode

__all__ = [
    "next_sibling",
    "previous_sibling",
    "next_visible",
    "previous_visible",
    "last_visible_descendant",
    "next_line",
    "previous_line",
    "iter_tree_order",
    "iter_visible",
]


def next_sibling(node: TreeNode) -> Optional[TreeNode]:
    """Return the following node in the same group, or ``None`` at the end."""
    group = node.siblings
    idx = node.index_in_group + 1
    if idx < len(group):
        return group[idx]
    return None


def previous_sibling(node: TreeNode) -> Optional[TreeNode]:
    """Return the preceding node in the same group, or ``None`` at the start."""
    idx = node.index_in_group - 1
    if idx < 0:
        return None
    return node.siblings[idx]


def next_visible(node: TreeNode) -> Optional[TreeNode]:
    """Return the first child of an expanded parent, else the next sibling.

    Never climbs past one sibling level; see :func:`next_line`.
    """
    if node.has_children and node.expanded:
        return node.children[0]
    return next_sibling(node)


def last_visible_descendant(node: TreeNode) -> TreeNode:
    """Follow "last child" while the current node is expanded."""
    probe = node
    while probe.has_children and probe.expanded:
        probe = probe.children[-1]
    return probe


def previous_visible(node: TreeNode) -> Optional[TreeNode]:
    """Return the row rendered directly above ``node``.

    That is the deepest visible descendant of the previous sibling, the
    previous sibling itself when it is a leaf or collapsed, or the parent
    when ``node`` is first in its group.
    """
    sibling = previous_sibling(node)
    if sibling is not None:
        return last_visible_descendant(sibling)
    return node.parent


def next_line(node: TreeNode) -> Optional[TreeNode]:
    """Return the row rendered directly below ``node``; ``None`` at the end."""
    candidate = next_visible(node)
    if candidate is not None:
        return candidate
    for ancestor in node.ancestors():
        candidate = next_sibling(ancestor)
        if candidate is not None:
            return candidate
    return None


def previous_line(node: TreeNode) -> Optional[TreeNode]:
    """Return the row rendered directly above ``node``; ``None`` at the top."""
    return previous_visible(node)


def iter_tree_order(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield every node depth-first, pre-order, children in stored order."""
    for root in roots:
        yield from root.iter_subtree()


def iter_visible(roots: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Yield the nodes whose ancestors are all expanded, in tree order."""
    stack = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        yield node
        if node.expanded:
            stack.extend(reversed(node.children))
