"""UI controllers package.

Controllers mediate between presentation adapters and the tree engine.
"""

from .tree_controller import InputEventKind, InputResult, PointerButton, TreeController

__all__: list[str] = [
    "InputEventKind",
    "InputResult",
    "PointerButton",
    "TreeController",
]
