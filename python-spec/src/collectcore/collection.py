"""The in-memory ordered Collection and its operations.

Every operation except :meth:`Collection.set`, :meth:`Collection.delete` and
:meth:`Collection.clear` leaves the receiver untouched and returns a new
Collection, so calls can be chained::

    totals = (
        Collection(orders)
        .filter(lambda order, _: order["paid"])
        .group_by("customer")
        .map(lambda bucket, _: sum(order["amount"] for order in bucket))
        .sort(descending=True)
    )

Operations documented as preserving keys keep each surviving value at its
original key; the others renumber their result ``0..n-1``.
"""

import functools
import itertools
import logging
import numbers
import operator
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

import numpy as np
from typing_extensions import Literal, Self

from . import base
from . import errors
from . import options
from . import records
from . import types

logger = logging.getLogger(__name__)

_K = TypeVar("_K", bound=Hashable)
_V = TypeVar("_V")
_R = TypeVar("_R")
_T = TypeVar("_T")

Selector = Union[None, Hashable, Callable[[Any, Any], Hashable]]
"""What ``group_by`` buckets on: nothing, a field name, or ``fn(value, key)``."""


class Collection(base.BaseCollection[_K, _V]):
    """An ordered mapping with a rich set of query and transform operations.

    A Collection is built from a mapping (whose items it takes, in order),
    from another collection (whose entries it copies), or from any other
    iterable (whose values it keys ``0..n-1``)::

        Collection([15, 42, 30]).all()  # {0: 15, 1: 42, 2: 30}
        Collection({"a": 1, "b": 2}).all()  # {"a": 1, "b": 2}

    ``rng`` is the random source used by :meth:`random` and :meth:`shuffle`.
    Pass a seed or a ``numpy.random.Generator`` to make them reproducible.
    Collections derived from this one share its random source.
    """

    __slots__ = ("_entries", "_rng")

    def __init__(self, data: Any = None, *, rng: options.RandomSeed = None):
        self._entries: Dict[_K, _V] = _entries_from(data)
        self._rng: np.random.Generator = _make_rng(rng)

    @classmethod
    def _wrap(cls, entries: Dict[Any, Any], rng: np.random.Generator) -> Any:
        inst = cls.__new__(cls)
        inst._entries = entries
        inst._rng = rng
        return inst

    def _spawn(self, entries: Dict[Any, Any]) -> Any:
        """Builds a new collection around ``entries`` without copying them."""
        return self._wrap(entries, self._rng)

    def _reindexed(self, values: Iterable[_T]) -> "Collection[int, _T]":
        return self._spawn(dict(enumerate(values)))

    @property
    def rng(self) -> np.random.Generator:
        """The random source this collection samples from."""
        return self._rng

    # Storage

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> List[Tuple[_K, _V]]:
        return list(self._entries.items())

    def all(self) -> Dict[_K, _V]:
        return dict(self._entries)

    def copy(self) -> Self:
        """Returns an independent shallow copy of this collection.

        The copy samples from a child of this collection's generator, so
        drawing from one does not advance the other.
        """
        return self._wrap(dict(self._entries), self._rng.spawn(1)[0])

    def has(self, key: _K) -> bool:
        return key in self._entries

    def get(self, key: _K, default: Any = options.NOT_FOUND) -> Any:
        return self._entries.get(key, default)

    def set(self, key: _K, value: _V) -> Self:
        self._entries[key] = value
        return self

    def delete(self, key: _K) -> Self:
        self._entries.pop(key, None)
        return self

    def clear(self) -> Self:
        self._entries.clear()
        return self

    # Transforms

    def map(self, fn: Callable[[_V, _K], _R]) -> "Collection[_K, _R]":
        """Applies ``fn(value, key)`` to every entry, keeping the keys."""
        return self._spawn({key: fn(value, key) for key, value in self.items()})

    def filter(self, fn: "types.Predicate[_V, _K]") -> Self:
        """Keeps the entries for which ``fn(value, key)`` is truthy."""
        return self._spawn(
            {key: value for key, value in self.items() if fn(value, key)}
        )

    def each(self, fn: Callable[[_V, _K], Any]) -> Self:
        """Calls ``fn(value, key)`` for every entry, in order.

        The callback sees a snapshot, so it may mutate the collection.

        :return: ``self``, to enable method chaining.
        """
        for key, value in self.items():
            fn(value, key)
        return self

    def flatten(self, depth: float = options.INFINITE_DEPTH) -> "Collection[int, Any]":
        """Concatenates nested values into one flat, renumbered collection.

        Lists, tuples and other non-string sequences, mappings (by value)
        and collections are expanded, up to ``depth`` levels deep::

            c = Collection([15, [42, [30, [50]]], Collection([25])])
            c.flatten().all()  # {0: 15, 1: 42, 2: 30, 3: 50, 4: 25}
            c.flatten(1).all()  # {0: 15, 1: 42, 2: [30, [50]], 3: 25}
        """
        if depth < 1:
            raise errors.InvalidArgumentError(
                f"flatten depth must be at least 1, not {depth!r}"
            )
        return self._reindexed(_flatten(self._entries.values(), depth))

    def slice(
        self, offset: int, length: Optional[int] = None, preserve_keys: bool = False
    ) -> "Collection[Any, _V]":
        """Returns a contiguous window of entries.

        :param offset: Position of the first entry. A negative offset counts
            back from the end.
        :param length: How many entries to take. ``None`` takes the rest; a
            negative length stops that many entries before the end.
        :param preserve_keys: Keep the original keys rather than renumbering.
        """
        entries = self.items()
        if length is None:
            window = entries[offset:]
        elif length < 0:
            window = entries[offset:length]
        else:
            start = offset if offset >= 0 else max(len(entries) + offset, 0)
            window = entries[start : start + length]
        if preserve_keys:
            return self._spawn(dict(window))
        return self._reindexed(value for _, value in window)

    def chunk(self, size: int) -> "Collection[int, List[_V]]":
        """Splits the values into lists of at most ``size`` values each."""
        if size < 1:
            raise errors.InvalidArgumentError(
                f"chunk size must be a positive integer, not {size!r}"
            )
        values = list(self._entries.values())
        return self._reindexed(
            values[start : start + size] for start in range(0, len(values), size)
        )

    def partition(self, fn: "types.Predicate[_V, _K]") -> Tuple[Self, Self]:
        """Splits entries into ``(matched, unmatched)`` by ``fn(value, key)``.

        Both halves keep their original keys.
        """
        matched: Dict[_K, _V] = {}
        unmatched: Dict[_K, _V] = {}
        for key, value in self.items():
            if fn(value, key):
                matched[key] = value
            else:
                unmatched[key] = value
        return self._spawn(matched), self._spawn(unmatched)

    def except_(self, keys: Iterable[_K]) -> Self:
        """Drops the entries at the given keys."""
        excluded = frozenset(keys)
        return self._spawn(
            {key: value for key, value in self.items() if key not in excluded}
        )

    def only(self, keys: Iterable[_K]) -> Self:
        """Keeps only the entries at the given keys, in collection order."""
        included = frozenset(keys)
        return self._spawn(
            {key: value for key, value in self.items() if key in included}
        )

    def values(self) -> "Collection[int, _V]":
        """Returns the values renumbered ``0..n-1``."""
        return self._reindexed(self._entries.values())

    def keys(self) -> "Collection[int, _K]":
        """Returns a collection whose values are this collection's keys."""
        return self._reindexed(self._entries.keys())

    def reverse(self, preserve_keys: bool = False) -> "Collection[Any, _V]":
        if preserve_keys:
            return self._spawn(dict(reversed(self.items())))
        return self._reindexed(reversed(list(self._entries.values())))

    def nth(self, step: int, offset: int = 0) -> "Collection[int, _V]":
        """Takes every ``step``-th value, starting at position ``offset``."""
        if step < 1:
            raise errors.InvalidArgumentError(
                f"nth step must be a positive integer, not {step!r}"
            )
        if offset < 0:
            raise errors.InvalidArgumentError(
                f"nth offset must not be negative, not {offset!r}"
            )
        return self._reindexed(
            itertools.islice(self._entries.values(), offset, None, step)
        )

    # Aggregates

    def reduce(
        self, fn: Callable[[_T, _V], _T], initial: _T = None  # type: ignore[assignment]
    ) -> _T:
        """Folds the values from left to right; ``fn`` sees ``(carry, value)``."""
        return functools.reduce(fn, self._entries.values(), initial)

    def every(self, fn: "types.Predicate[_V, _K]") -> bool:
        return all(fn(value, key) for key, value in self.items())

    def some(self, fn: "types.Predicate[_V, _K]") -> bool:
        return any(fn(value, key) for key, value in self.items())

    def first(
        self,
        fn: Optional["types.Predicate[_V, _K]"] = None,
        default: Any = options.NOT_FOUND,
    ) -> Any:
        """Returns the first value, or the first one matching ``fn``.

        Returns ``default`` if the collection is empty or nothing matches.
        """
        for key, value in self.items():
            if fn is None or fn(value, key):
                return value
        return default

    def last(
        self,
        fn: Optional["types.Predicate[_V, _K]"] = None,
        default: Any = options.NOT_FOUND,
    ) -> Any:
        """Returns the last value, or the last one matching ``fn``."""
        for key, value in reversed(self.items()):
            if fn is None or fn(value, key):
                return value
        return default

    def index_of(self, value: Any, default: Any = options.NOT_FOUND) -> Any:
        """Returns the key of the first value equal to ``value``."""
        for key, candidate in self.items():
            if candidate == value:
                return key
        return default

    def search(self, value: Any, strict: bool = False) -> Union[_K, Literal[False]]:
        """Returns the key of the first match, or ``False`` if there is none.

        Loose matching uses ``==``. Strict matching also requires the same
        exact type, so ``1``, ``1.0`` and ``True`` are told apart.
        """
        equal = _strictly_equal if strict else operator.eq
        for key, candidate in self.items():
            if equal(candidate, value):
                return key
        return False

    def implode(
        self, field: Optional[Hashable] = None, glue: str = options.DEFAULT_GLUE
    ) -> str:
        """Joins the values, or their ``field``, as strings.

        :raises NotSupportedError: if ``field`` is given and an entry is a
            scalar or lacks the field.
        """
        if field is None:
            parts: Iterable[Any] = self._entries.values()
        else:
            parts = [_require_field(value, field) for value in self._entries.values()]
        return glue.join(str(part) for part in parts)

    def max(self, field: Optional[Hashable] = None) -> Any:
        """Returns the largest value, or the largest ``field`` among entries.

        Entries lacking the field are ignored. Returns ``None`` if nothing is
        left to compare.
        """
        return max(self._compared(field), default=options.NOT_FOUND)

    def min(self, field: Optional[Hashable] = None) -> Any:
        """Returns the smallest value; see :meth:`max`."""
        return min(self._compared(field), default=options.NOT_FOUND)

    def _compared(self, field: Optional[Hashable]) -> Iterable[Any]:
        if field is None:
            return self._entries.values()
        return self.pluck(field).all().values()

    # Set algebra

    def diff(self, other: Any) -> Self:
        """Keeps the entries whose value does not occur in ``other``.

        ``other`` is anything a Collection can be built from.
        """
        pool = _Membership(_entries_from(other).values())
        return self._spawn(
            {key: value for key, value in self.items() if value not in pool}
        )

    def diff_keys(self, other: Any) -> Self:
        """Keeps the entries whose key is not a key of ``other``."""
        return self.except_(_entries_from(other).keys())

    def intersect(self, other: Any) -> Self:
        """Keeps the entries whose value occurs in ``other``."""
        pool = _Membership(_entries_from(other).values())
        return self._spawn(
            {key: value for key, value in self.items() if value in pool}
        )

    def merge(self, other: Any) -> "Collection[Any, Any]":
        """Appends ``other`` to this collection.

        Integer keys from both sides are renumbered in order. Any other key
        is carried through, and a key present on both sides takes the value
        from ``other``.
        """
        merged: Dict[Any, Any] = {}
        next_index = 0
        for key, value in itertools.chain(
            self._entries.items(), _entries_from(other).items()
        ):
            if isinstance(key, numbers.Integral):
                merged[next_index] = value
                next_index += 1
            else:
                merged[key] = value
        return self._spawn(merged)

    def unique(self, field: Optional[Hashable] = None) -> Self:
        """Drops repeated values, keeping each first occurrence and its key.

        With ``field``, record-like entries are compared by that field while
        scalar entries are still compared by their own value.

        :raises NotSupportedError: if a record-like entry lacks ``field``.
        """
        seen = _Membership(())
        kept: Dict[_K, _V] = {}
        for key, value in self.items():
            identity = value
            if field is not None and records.as_record(value) is not None:
                identity = _require_field(value, field)
            if identity in seen:
                continue
            seen.add(identity)
            kept[key] = value
        return self._spawn(kept)

    # Grouping and extraction

    def pluck(
        self, value_field: Hashable, key_field: Optional[Hashable] = None
    ) -> "Collection[Any, Any]":
        """Extracts one field from every record-like entry.

        Entries lacking ``value_field`` are skipped. With ``key_field``, each
        extracted value is stored under that field of its entry (later
        entries overwrite earlier ones with the same key); entries lacking
        the key field are appended at the next integer key.
        """
        plucked: Dict[Any, Any] = {}
        next_index = 0
        for value in self._entries.values():
            record = records.as_record(value)
            if record is None or not record.has_field(value_field):
                continue
            if key_field is not None and record.has_field(key_field):
                new_key = record.get_field(key_field)
            else:
                new_key = next_index
            plucked[new_key] = record.get_field(value_field)
            if isinstance(new_key, numbers.Integral) and new_key >= next_index:
                next_index = int(new_key) + 1
        return self._spawn(plucked)

    def group_by(self, selector: Selector = None) -> "Collection[Any, List[_V]]":
        """Buckets the values by field or by ``selector(value, key)``.

        The result maps each bucket, in order of first appearance, to a list
        of its values in order. Entries without the field land in the
        ``None`` bucket. A ``None`` or empty selector returns ``self``.

        Buckets become keys of the result, so they must be hashable.

        :raises TypeError: if a bucket is unhashable, such as a list.
        """
        if selector is None or selector == "":
            return self
        if callable(selector):
            bucket_of = selector
        else:

            def bucket_of(value: Any, key: Any) -> Hashable:
                del key  # unused
                return records.extract(value, selector, None)

        groups: Dict[Hashable, List[_V]] = {}
        for key, value in self.items():
            bucket = bucket_of(value, key)
            try:
                groups.setdefault(bucket, []).append(value)
            except TypeError as exc:
                raise TypeError(
                    f"cannot group by unhashable bucket {bucket!r}"
                ) from exc
        return self._spawn(groups)

    # Ordering

    def sort(self, descending: bool = False) -> Self:
        """Sorts by value, keeping each value at its key."""
        return self._spawn(
            dict(sorted(self.items(), key=operator.itemgetter(1), reverse=descending))
        )

    def sort_custom(self, comparator: "types.Comparator[_V]") -> Self:
        """Sorts by value with ``comparator(a, b)``, keeping keys."""
        by_value = functools.cmp_to_key(
            lambda a, b: comparator(a[1], b[1])  # type: ignore[misc]
        )
        return self._spawn(dict(sorted(self.items(), key=by_value)))

    def sort_key(self, descending: bool = False) -> "Collection[Any, _V]":
        """Sorts by key.

        Descending order keeps the keys, but ascending order renumbers the
        result ``0..n-1``. This differs from every other sort and is
        deliberate, for compatibility with existing callers.
        """
        ordered = sorted(self.items(), key=operator.itemgetter(0), reverse=descending)
        if descending:
            return self._spawn(dict(ordered))
        return self._reindexed(value for _, value in ordered)

    def sort_custom_key(self, comparator: "types.Comparator[_K]") -> Self:
        """Sorts by key with ``comparator(a, b)``, keeping keys."""
        by_key = functools.cmp_to_key(
            lambda a, b: comparator(a[0], b[0])  # type: ignore[misc]
        )
        return self._spawn(dict(sorted(self.items(), key=by_key)))

    # Sampling

    def random(self, n: int = 1) -> "Collection[int, _V]":
        """Picks ``n`` distinct entries at random, without replacement.

        The picked values keep their relative order and are renumbered.

        :raises InvalidArgumentError: if ``n`` is negative or larger than
            the collection.
        """
        if not 0 <= n <= len(self):
            raise errors.InvalidArgumentError(
                f"cannot pick {n!r} values from a collection of {len(self)}"
            )
        if n == 0:
            return self._spawn({})
        values = list(self._entries.values())
        picked = np.sort(self._rng.choice(len(values), size=n, replace=False))
        return self._reindexed(values[pos] for pos in picked.tolist())

    def shuffle(self) -> "Collection[int, _V]":
        """Returns the values in a uniformly random order, renumbered."""
        values = list(self._entries.values())
        order = self._rng.permutation(len(values))
        return self._reindexed(values[pos] for pos in order.tolist())


def _make_rng(seed: options.RandomSeed) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is not None:
        logger.debug("Seeding collection random source with %r", seed)
    return np.random.default_rng(seed)


def _entries_from(data: Any) -> Dict[Any, Any]:
    """Reads anything a Collection can be built from as a new dict."""
    if data is None:
        return {}
    if isinstance(data, base.BaseCollection):
        return data.all()
    if isinstance(data, Mapping):
        return dict(data)
    if isinstance(data, (str, bytes, bytearray)) or not isinstance(data, Iterable):
        raise TypeError(f"cannot build a collection from {type(data).__name__!r}")
    return dict(enumerate(data))


def _nested(value: Any) -> Optional[Iterable[Any]]:
    """Returns the values inside ``value`` if flatten should expand it."""
    if isinstance(value, base.BaseCollection):
        return value.all().values()
    if isinstance(value, Mapping):
        return value.values()
    if types.is_nonstringy_sequence(value):
        return value
    return None


def _flatten(values: Iterable[Any], depth: float) -> Iterator[Any]:
    for value in values:
        inner = _nested(value)
        if inner is None:
            yield value
        elif depth <= 1:
            yield from inner
        else:
            yield from _flatten(inner, depth - 1)


def _require_field(value: Any, field: Hashable) -> Any:
    record = records.as_record(value)
    if record is None or not record.has_field(field):
        logger.debug("Entry %r has no field %r", value, field)
        raise errors.NotSupportedError(field, value)
    return record.get_field(field)


def _strictly_equal(a: Any, b: Any) -> bool:
    return a is b or (type(a) is type(b) and a == b)


class _Membership:
    """Answers whether a value equals any value of a pool.

    Hashable values are looked up by hash; unhashable ones (lists, dicts)
    are compared one by one.
    """

    __slots__ = ("_hashed", "_unhashable")

    def __init__(self, pool: Iterable[Any]):
        self._hashed: set = set()
        self._unhashable: List[Any] = []
        for value in pool:
            self.add(value)

    def add(self, value: Any) -> None:
        try:
            self._hashed.add(value)
        except TypeError:
            self._unhashable.append(value)

    def __contains__(self, value: Any) -> bool:
        try:
            if value in self._hashed:
                return True
        except TypeError:
            pass  # Unhashable; only the linear scan can match it.
        return any(value == other for other in self._unhashable)
