from types import SimpleNamespace
from typing import Any, Hashable

import attrs
import pytest
from pytest import mark

import collectcore
from collectcore import Collection
from collectcore import records


@attrs.define
class Point:
    x: int
    y: int


class Settings:
    """A hand-written Record exposing only upper-case names as fields."""

    def __init__(self, **values: Any):
        self._values = values

    def has_field(self, name: Hashable) -> bool:
        return isinstance(name, str) and name.upper() in self._values

    def get_field(self, name: Hashable) -> Any:
        assert isinstance(name, str)
        return self._values[name.upper()]


@mark.parametrize(
    "value", [None, True, 0, 1.5, 3j, "text", b"bytes", bytearray(b"ba")]
)
def test_scalars_are_not_records(value: Any) -> None:
    assert records.as_record(value) is None


@mark.parametrize(
    ("value", "field", "want"),
    [
        ({"k": 1}, "k", 1),
        ([10, 20], 1, 20),
        ((10, 20), 0, 10),
        (SimpleNamespace(k=2), "k", 2),
        (Point(3, 4), "y", 4),
        (Collection({"k": 5}), "k", 5),
        (Settings(K=6), "k", 6),
    ],
)
def test_extract(value: Any, field: Hashable, want: Any) -> None:
    record = records.as_record(value)
    assert record is not None
    assert record.has_field(field)
    assert want == record.get_field(field)
    assert want == records.extract(value, field)


@mark.parametrize(
    ("value", "field"),
    [
        ({"k": 1}, "v"),
        ([10, 20], 2),
        ([10, 20], -1),
        ([10, 20], "val"),
        ([10, 20], True),
        (SimpleNamespace(k=2), "v"),
        (SimpleNamespace(k=2), 0),
        (Point(3, 4), "z"),
        (Collection({"k": 5}), "v"),
        (Settings(K=6), "v"),
        (7, "k"),
    ],
)
def test_missing_field(value: Any, field: Hashable) -> None:
    record = records.as_record(value)
    if record is not None:
        assert not record.has_field(field)
        with pytest.raises(KeyError):
            record.get_field(field)
    with pytest.raises(KeyError):
        records.extract(value, field)
    assert "fallback" == records.extract(value, field, "fallback")


def test_record_protocol() -> None:
    assert isinstance(Settings(), collectcore.Record)
    assert isinstance(Collection(), collectcore.Record)
    assert not isinstance({}, collectcore.Record)


def test_records_drive_collection_operations() -> None:
    coll = Collection([Point(1, 2), Point(3, 4), Settings(X=5, Y=6)])
    assert {0: 1, 1: 3, 2: 5} == coll.pluck("x").all()
    assert "2/4/6" == coll.implode("y", "/")
    assert 5 == coll.max("x")
    with pytest.raises(collectcore.NotSupportedError):
        coll.implode("z")


def test_not_supported_is_a_type_error() -> None:
    with pytest.raises(TypeError) as exc_info:
        Collection([1, {"j": 1}]).unique("k")
    err = exc_info.value
    assert isinstance(err, collectcore.CollectionError)
    assert "k" == err.field
    assert {"j": 1} == err.value
