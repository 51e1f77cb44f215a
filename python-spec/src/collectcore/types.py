"""Type and interface declarations that are not specific to one operation.

These are used by collectcore for its own annotations and type checks, and by
callers who want to annotate the callbacks they hand to a Collection.
"""

import enum
import numbers
from typing import Any, Hashable, Sequence, TypeVar

from typing_extensions import Protocol, TypeGuard


def is_nonstringy_sequence(it: object) -> TypeGuard[Sequence]:
    """Returns true if a sequence is a "normal" sequence and not str or bytes.

    str and bytes are "weird" sequences because iterating them gives you
    another str or bytes instance for each character, and when used as a
    sequence is not what users want.
    """
    return not isinstance(it, (str, bytes, bytearray)) and isinstance(it, Sequence)


_SCALARS = (str, bytes, bytearray, bool, numbers.Number, enum.Enum, type(None))


def is_scalar(it: object) -> bool:
    """Returns true for values that have no named fields.

    Scalars are ``None``, booleans, numbers, text and bytes, and enum members.
    """
    return isinstance(it, _SCALARS)


_V_contra = TypeVar("_V_contra", contravariant=True)
_K_contra = TypeVar("_K_contra", bound=Hashable, contravariant=True)


class Predicate(Protocol[_V_contra, _K_contra]):
    """A test applied to each entry, called as ``fn(value, key)``."""

    def __call__(self, __value: _V_contra, __key: _K_contra) -> Any:
        ...


class Comparator(Protocol[_V_contra]):
    """An old-style comparison function.

    Returns a negative number, zero, or a positive number when ``a`` sorts
    before, the same as, or after ``b``.
    """

    def __call__(self, __a: _V_contra, __b: _V_contra) -> int:
        ...
