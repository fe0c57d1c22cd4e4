"""Accessible state of rendered nodes as plain data.

Adapters copy these attributes onto whatever element represents a node so
assistive technology sees the WAI-ARIA tree pattern: position within the
sibling group, nesting level, expansion and selection.
"""

from __future__ import annotations

from typing import Dict, Optional

from aria_treeview.core.models import TreeNode
from aria_treeview.core.models.view_config import ExpandControlConfig

__all__ = ["tree_item_attributes", "expand_control_label"]


def tree_item_attributes(node: TreeNode) -> Dict[str, str]:
    """Return the ARIA attributes for the element rendering ``node``.

    ``aria-expanded`` is only present on nodes with children and
    ``aria-selected`` only on selected nodes.
    """
    attrs = {
        "role": "treeitem",
        "aria-level": str(node.level),
        "aria-posinset": str(node.position_in_set),
        "aria-setsize": str(node.set_size),
    }
    if node.has_children:
        attrs["aria-expanded"] = "true" if node.expanded else "false"
    if node.selected:
        attrs["aria-selected"] = "true"
    return attrs


def expand_control_label(node: TreeNode, config: Optional[ExpandControlConfig] = None) -> Optional[str]:
    """Return the tooltip/label for the node's expand control, ``None`` for leaves."""
    if not node.has_children:
        return None
    config = config or ExpandControlConfig()
    return config.label_expanded if node.expanded else config.label_collapsed
