"""Uniform named-field access over heterogeneous collection entries.

Entries in a Collection may be mappings, sequences, other Collections, plain
objects, or scalars. Operations that look inside entries (``pluck``,
``implode``, ``unique``, ``group_by``, ``max``, ``min``) do so through the
:class:`Record` capability: :func:`as_record` wraps record-like values and
returns ``None`` for scalars, and each operation decides for itself whether a
missing field is skipped or is an error.
"""

from typing import Any, Hashable, Mapping, Optional, Sequence

import attrs
from typing_extensions import Protocol, runtime_checkable

from . import types

_MISSING = object()


@runtime_checkable
class Record(Protocol):
    """Something that exposes named fields.

    Any class may implement this directly to control how collection
    operations see its fields.
    """

    def has_field(self, name: Hashable) -> bool:
        """Returns True if the field is present."""
        ...

    def get_field(self, name: Hashable) -> Any:
        """Returns the field's value. Raises ``KeyError`` if absent."""
        ...


@attrs.define(frozen=True)
class MappingRecord:
    """Fields of a mapping are its keys."""

    target: Mapping[Any, Any]

    def has_field(self, name: Hashable) -> bool:
        return name in self.target

    def get_field(self, name: Hashable) -> Any:
        return self.target[name]


@attrs.define(frozen=True)
class SequenceRecord:
    """Fields of a sequence are its non-negative in-range positions."""

    target: Sequence[Any]

    def has_field(self, name: Hashable) -> bool:
        return (
            isinstance(name, int)
            and not isinstance(name, bool)
            and 0 <= name < len(self.target)
        )

    def get_field(self, name: Hashable) -> Any:
        if not self.has_field(name):
            raise KeyError(name)
        assert isinstance(name, int)
        return self.target[name]


@attrs.define(frozen=True)
class ObjectRecord:
    """Fields of a plain object are its attributes."""

    target: object

    def has_field(self, name: Hashable) -> bool:
        return isinstance(name, str) and hasattr(self.target, name)

    def get_field(self, name: Hashable) -> Any:
        if not isinstance(name, str):
            raise KeyError(name)
        try:
            return getattr(self.target, name)
        except AttributeError as ae:
            raise KeyError(name) from ae


def as_record(value: object) -> Optional[Record]:
    """Returns a Record view of the value, or None if it is a scalar."""
    if types.is_scalar(value):
        return None
    if isinstance(value, Record):
        return value
    if isinstance(value, Mapping):
        return MappingRecord(value)
    if types.is_nonstringy_sequence(value):
        return SequenceRecord(value)
    return ObjectRecord(value)


def extract(value: object, name: Hashable, default: Any = _MISSING) -> Any:
    """Gets a field from a value in one step.

    Returns ``default`` if the value is a scalar or lacks the field; if no
    default is given, raises ``KeyError`` instead.
    """
    record = as_record(value)
    if record is not None and record.has_field(name):
        return record.get_field(name)
    if default is _MISSING:
        raise KeyError(name)
    return default
