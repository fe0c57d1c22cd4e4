from __future__ import annotations

"""Source record model and validation.

Callers describe the tree as nested records. A record is either a mapping
with the keys below or a :class:`SourceRecord` instance:

- ``id`` (required): ``str`` or ``int``, unique across the whole forest.
- ``label`` (required): display text.
- ``payload`` (optional): opaque data, defaults to ``None``.
- ``children`` (optional): list/tuple of records, defaults to empty.

Validation is shallow (one record at a time) so the builder can report the
exact path of the first malformed record it meets during its single pass.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from aria_treeview.core.exceptions import InvalidSourceDataError

__all__ = ["SourceRecord", "ValidatedRecord", "validate_record", "record_path"]


@dataclass
class SourceRecord:
    """Typed alternative to a plain mapping for one source record."""

    id: Any
    label: str
    payload: Any = None
    children: List["SourceRecord"] = field(default_factory=list)


@dataclass(frozen=True)
class ValidatedRecord:
    """Normalized view of one record; ``raw`` is the caller's object."""

    id: Any
    label: str
    payload: Any
    children: Sequence[Any]
    raw: Any


_MISSING = object()


def record_path(parent_path: str, index: int) -> str:
    """Return the printable path of the record at ``index`` under ``parent_path``."""
    if not parent_path:
        return f"[{index}]"
    return f"{parent_path}.children[{index}]"


def _field(record: Any, name: str) -> Any:
    if isinstance(record, SourceRecord):
        return getattr(record, name)
    return record.get(name, _MISSING)


def validate_record(record: Any, path: str) -> ValidatedRecord:
    """Check one record and return its normalized fields.

    Raises
    ------
    InvalidSourceDataError
        If the record is not a mapping/``SourceRecord``, lacks ``id`` or
        ``label``, or carries values of the wrong type.
    """
    if not isinstance(record, (Mapping, SourceRecord)):
        raise InvalidSourceDataError(
            f"Expected a mapping or SourceRecord, got {type(record).__name__}", path=path
        )

    node_id = _field(record, "id")
    if node_id is _MISSING or node_id is None:
        raise InvalidSourceDataError("Missing required field 'id'", path=path)
    # bool is an int subclass but never a meaningful identifier
    if isinstance(node_id, bool) or not isinstance(node_id, (str, int)):
        raise InvalidSourceDataError(
            f"Field 'id' must be str or int, got {type(node_id).__name__}", path=path
        )

    label = _field(record, "label")
    if label is _MISSING or label is None:
        raise InvalidSourceDataError("Missing required field 'label'", path=path, node_id=node_id)
    if not isinstance(label, str):
        raise InvalidSourceDataError(
            f"Field 'label' must be str, got {type(label).__name__}", path=path, node_id=node_id
        )

    payload = _field(record, "payload")
    if payload is _MISSING:
        payload = None

    children = _field(record, "children")
    if children is _MISSING or children is None:
        children = ()
    elif not isinstance(children, (list, tuple)):
        raise InvalidSourceDataError(
            f"Field 'children' must be a list, got {type(children).__name__}",
            path=path,
            node_id=node_id,
        )

    return ValidatedRecord(id=node_id, label=label, payload=payload, children=children, raw=record)
