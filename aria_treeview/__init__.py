"""Navigation-and-state engine for accessible, keyboard-navigable tree widgets.

Front-ends (DOM bridges, terminal panes, toolkit widgets) should only depend
on the public API exposed here rather than importing internal modules
directly.
"""

from .core.adapter import NullPresentationAdapter, PresentationAdapter
from .core.exceptions import (
    ConfigurationError,
    DuplicateHandleError,
    DuplicateIdentifierError,
    InvalidSourceDataError,
    TreeError,
    UnknownNodeReferenceError,
)
from .core.keys import CommandKind, InputTarget, Key, KeyCommand, KeyCommandResolver, KeyMap
from .core.models import NodeAspect, StateChanges, TreeNode
from .core.models.source import SourceRecord
from .core.tree import Tree
from .ui.controllers import InputEventKind, InputResult, PointerButton, TreeController

__version__ = "0.1.0"

__all__: list[str] = [
    "Tree",
    "TreeNode",
    "SourceRecord",
    "NodeAspect",
    "StateChanges",
    "Key",
    "KeyMap",
    "KeyCommand",
    "KeyCommandResolver",
    "CommandKind",
    "InputTarget",
    "PresentationAdapter",
    "NullPresentationAdapter",
    "TreeController",
    "InputEventKind",
    "InputResult",
    "PointerButton",
    "TreeError",
    "DuplicateIdentifierError",
    "InvalidSourceDataError",
    "UnknownNodeReferenceError",
    "DuplicateHandleError",
    "ConfigurationError",
]
