"""Definitions of the most fundamental types used by collectcore.

Users should ordinarily not need to import this module directly; relevant
members are exported to the ``collectcore`` namespace.
"""

import abc
from typing import Any, Dict, Generic, Hashable, Iterator, List, Tuple, TypeVar

from typing_extensions import Self

from . import options

_K = TypeVar("_K", bound=Hashable)
"""Key type of a collection."""
_V = TypeVar("_V")
"""Value type of a collection."""


class BaseCollection(Generic[_K, _V], metaclass=abc.ABCMeta):
    """An ordered mapping from unique keys to values.

    This defines the storage contract that every collection implementation
    fulfills, and the Python container protocol built on top of it. Only
    :meth:`set`, :meth:`delete` and :meth:`clear` change a collection; they
    return ``self`` so they can be chained.

    Iterating a collection yields ``(key, value)`` pairs in order, and ``in``
    tests for a key. Use :meth:`all` to get the entries as a ``dict``.
    """

    __slots__ = ("__weakref__",)

    # Storage

    @abc.abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError()

    @abc.abstractmethod
    def items(self) -> List[Tuple[_K, _V]]:
        """Returns the ``(key, value)`` pairs in order."""
        raise NotImplementedError()

    @abc.abstractmethod
    def has(self, key: _K) -> bool:
        """Returns True if the key is present."""
        raise NotImplementedError()

    @abc.abstractmethod
    def get(self, key: _K, default: Any = options.NOT_FOUND) -> Any:
        """Returns the value stored at ``key``, or ``default`` if absent."""
        raise NotImplementedError()

    @abc.abstractmethod
    def set(self, key: _K, value: _V) -> Self:
        """Stores a value at the key.

        An existing key keeps its position; a new key is appended.

        :return: ``self``, to enable method chaining.
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def delete(self, key: _K) -> Self:
        """Removes the key if present. Removing an absent key does nothing.

        :return: ``self``, to enable method chaining.
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def clear(self) -> Self:
        """Removes every entry.

        :return: ``self``, to enable method chaining.
        """
        raise NotImplementedError()

    def all(self) -> Dict[_K, _V]:
        """Returns the entries as a new dict in their current order.

        The dict is a snapshot; the values themselves are not copied.
        """
        return dict(self.items())

    def count(self) -> int:
        return len(self)

    # Container protocol

    def __iter__(self) -> Iterator[Tuple[_K, _V]]:
        """Walks the entries key-then-value::

            for key, value in coll:
                ...
        """
        return iter(self.items())

    def __reversed__(self) -> Iterator[Tuple[_K, _V]]:
        return iter(self.items()[::-1])

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __getitem__(self, key: _K) -> _V:
        if not self.has(key):
            raise KeyError(key)
        return self.get(key)

    def __setitem__(self, key: _K, value: _V) -> None:
        """Sets an entry into this collection. See :meth:`set` for details."""
        self.set(key, value)

    def __delitem__(self, key: _K) -> None:
        self.delete(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.all()!r})"

    # Record protocol, so nested collections can be looked into by field.

    def has_field(self, name: Hashable) -> bool:
        return self.has(name)  # type: ignore[arg-type]

    def get_field(self, name: Hashable) -> Any:
        return self[name]  # type: ignore[index]

    # Explicitly use Python's identity-based equality/hash checks.
    # Two collections holding the same entries are still distinct objects;
    # compare ``all()`` to compare contents.

    __eq__ = object.__eq__
    __hash__ = object.__hash__
