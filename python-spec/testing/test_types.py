import enum
import unittest
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable

import numpy as np

from collectcore import Collection
from collectcore import types


class Color(enum.Enum):
    RED = 1


class TestTypes(unittest.TestCase):
    def test_is_nonstringy_sequence(self):
        seqs: Iterable[Any] = ([], (), range(10))
        for seq in seqs:
            with self.subTest(seq):
                self.assertTrue(types.is_nonstringy_sequence(seq))

        non_seqs: Iterable[Any] = (
            1,
            "hello",
            b"goodbye",
            bytearray(b"bye"),
            {"a": 1},
            Collection([1]),
            (x for x in range(10)),
        )
        for non_seq in non_seqs:
            with self.subTest(non_seq):
                self.assertFalse(types.is_nonstringy_sequence(non_seq))

    def test_is_scalar(self):
        scalars: Iterable[Any] = (
            None,
            False,
            0,
            2.5,
            Decimal("1.1"),
            Fraction(1, 3),
            np.int64(4),
            "s",
            b"b",
            Color.RED,
        )
        for scalar in scalars:
            with self.subTest(scalar):
                self.assertTrue(types.is_scalar(scalar))

        non_scalars: Iterable[Any] = ([], {}, (), object(), Collection())
        for non_scalar in non_scalars:
            with self.subTest(non_scalar):
                self.assertFalse(types.is_scalar(non_scalar))
