"""Errors raised by collectcore.

Not-found conditions are not errors: ``get``, ``first``, ``last`` and
``index_of`` return their default, and ``search`` returns ``False``.
"""

from typing import Any, Hashable


class CollectionError(Exception):
    """Base class for the errors raised by collection operations."""


class InvalidArgumentError(CollectionError, ValueError):
    """A numeric argument is outside the range an operation accepts."""


class NotSupportedError(CollectionError, TypeError):
    """A field was required on an entry that does not provide it.

    Raised when the entry is a scalar, or a record without that field.
    """

    def __init__(self, field: Hashable, value: Any):
        super().__init__(
            f"field {field!r} is not available on entry of type"
            f" {type(value).__name__!r}"
        )
        self.field = field
        self.value = value
