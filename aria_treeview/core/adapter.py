from __future__ import annotations

"""Presentation adapter interface.

Defines the contract between the tree engine and whatever paints it (a DOM
bridge, a terminal pane, a toolkit widget). The engine never inspects the
handles an adapter returns; it only stores them in the tree's handle index
and passes them back in focus/scroll requests.
"""

from typing import Any, FrozenSet, Hashable, Protocol, runtime_checkable

from aria_treeview.core.models import NodeAspect, TreeNode
from aria_treeview.core.models.view_config import ScrollOptions

__all__ = ["PresentationAdapter", "NullPresentationAdapter"]


@runtime_checkable
class PresentationAdapter(Protocol):
    """Protocol for the engine's rendering collaborator.

    All engine-to-adapter calls are fire-and-forget notifications; return
    values other than the handle from :meth:`render` are ignored.
    """

    def render(self, node: TreeNode) -> Hashable:
        """Create the presentation for ``node`` and return an opaque handle.

        Called once per node, in tree order, right after the tree has been
        built. The handle must be hashable and unique within the tree.
        """
        ...

    def request_focus(self, handle: Any) -> None:
        """Move platform focus to the presentation behind ``handle``."""
        ...

    def request_scroll_into_view(self, handle: Any, options: ScrollOptions) -> None:
        """Scroll the presentation behind ``handle`` into view."""
        ...

    def notify_state_changed(self, node: TreeNode, aspects: FrozenSet[NodeAspect]) -> None:
        """Re-render ``node``; ``aspects`` lists the flags that changed."""
        ...


class NullPresentationAdapter:
    """Adapter used when the tree is driven headless.

    Uses node identifiers as handles and ignores every notification.
    """

    def render(self, node: TreeNode) -> Hashable:
        return node.id

    def request_focus(self, handle: Any) -> None:
        return None

    def request_scroll_into_view(self, handle: Any, options: ScrollOptions) -> None:
        return None

    def notify_state_changed(self, node: TreeNode, aspects: FrozenSet[NodeAspect]) -> None:
        return None
