from __future__ import annotations

"""Tree engine exception classes.

Construction errors (duplicate identifiers, malformed source records) are
fatal to the ``Tree(...)`` call that hit them. Reference errors are raised
whenever an operation is handed a node, identifier or presentation handle
the tree does not own; they are never silently ignored.
"""

from typing import Any, Optional


class TreeError(Exception):
    """Base exception for all tree-engine errors.

    Carries the offending node identifier when one is known so callers can
    report it without parsing the message.
    """

    def __init__(self, message: str, node_id: Optional[Any] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.cause = cause

    def __str__(self) -> str:
        if self.node_id is not None:
            return f"[Node: {self.node_id!r}] {super().__str__()}"
        return super().__str__()


class DuplicateIdentifierError(TreeError):
    """Raised when two source records anywhere in the forest share an id."""

    def __init__(self, node_id: Any, path: str = "") -> None:
        self.path = path
        message = "Duplicate node identifier"
        if path:
            message = f"{message} at {path}"
        super().__init__(message, node_id=node_id)


class InvalidSourceDataError(TreeError):
    """Raised when a source record is malformed.

    ``path`` locates the record inside the input, e.g. ``[0].children[2]``.
    """

    def __init__(self, message: str, path: str = "",
                 node_id: Optional[Any] = None) -> None:
        self.path = path
        if path:
            message = f"{message} (record {path})"
        super().__init__(message, node_id=node_id)


class UnknownNodeReferenceError(TreeError):
    """Raised when a node, id or handle does not belong to the tree."""

    def __init__(self, message: str, node_id: Optional[Any] = None,
                 handle: Optional[Any] = None) -> None:
        super().__init__(message, node_id=node_id)
        self.handle = handle


class DuplicateHandleError(TreeError):
    """Raised when the presentation adapter hands out the same handle twice."""

    def __init__(self, handle: Any, node_id: Optional[Any] = None) -> None:
        super().__init__(f"Presentation handle {handle!r} already bound", node_id=node_id)
        self.handle = handle


class ConfigurationError(TreeError):
    """Raised when a configuration section holds values the engine cannot use."""

    def __init__(self, message: str, section: Optional[str] = None,
                 key: Optional[str] = None) -> None:
        self.section = section
        self.key = key
        if section and key:
            message = f"{section}.{key}: {message}"
        elif section:
            message = f"{section}: {message}"
        super().__init__(message)
