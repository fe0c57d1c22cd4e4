"""Presentation-facing layer of aria_treeview (controllers only, no toolkit code)."""
