import unittest
from typing import Any, List, Tuple

from typing_extensions import Self

import collectcore
from collectcore import base
from collectcore import records


class PairListCollection(base.BaseCollection[Any, Any]):
    """A deliberately naive backing store: a list of key/value pairs."""

    __slots__ = ("_pairs",)

    def __init__(self) -> None:
        self._pairs: List[Tuple[Any, Any]] = []

    def __len__(self) -> int:
        return len(self._pairs)

    def items(self) -> List[Tuple[Any, Any]]:
        return list(self._pairs)

    def has(self, key: Any) -> bool:
        return any(k == key for k, _ in self._pairs)

    def get(self, key: Any, default: Any = None) -> Any:
        return next((v for k, v in self._pairs if k == key), default)

    def set(self, key: Any, value: Any) -> Self:
        for index, (k, _) in enumerate(self._pairs):
            if k == key:
                self._pairs[index] = (key, value)
                return self
        self._pairs.append((key, value))
        return self

    def delete(self, key: Any) -> Self:
        self._pairs = [(k, v) for k, v in self._pairs if k != key]
        return self

    def clear(self) -> Self:
        self._pairs = []
        return self


class BaseCollectionTest(unittest.TestCase):
    def test_abstract(self):
        with self.assertRaises(TypeError):
            base.BaseCollection()  # type: ignore[abstract]

    def test_protocol_from_storage(self):
        # Only the storage methods are implemented above; everything else
        # comes from the base class.
        coll = PairListCollection()
        coll["a"] = 1
        coll.set("b", 2).set("a", 3)
        self.assertEqual({"a": 3, "b": 2}, coll.all())
        self.assertEqual([("a", 3), ("b", 2)], list(coll))
        self.assertEqual([("b", 2), ("a", 3)], list(reversed(coll)))
        self.assertEqual(2, coll.count())
        self.assertIn("b", coll)
        self.assertNotIn(2, coll)
        self.assertEqual(3, coll["a"])
        with self.assertRaises(KeyError):
            coll["z"]
        del coll["a"]
        self.assertEqual("PairListCollection({'b': 2})", repr(coll))

    def test_is_a_record(self):
        coll = PairListCollection().set("k", "v")
        record = records.as_record(coll)
        self.assertIs(coll, record)
        self.assertEqual("v", records.extract(coll, "k"))
        self.assertEqual(None, records.extract(coll, "missing", None))


class VersionTest(unittest.TestCase):
    def test_version_is_exported(self):
        self.assertIsInstance(collectcore.__version__, str)
        self.assertIsInstance(collectcore.__version_tuple__, tuple)
        self.assertEqual(
            str(collectcore.__version_tuple__[0]),
            collectcore.__version__.split(".")[0],
        )
