from unittest import TestCase
import unittest
import numpy as np

from src.flatnn.infrastructure.tensor._tensor import Tensor
from src.flatnn.domain._errors import (
    InconsistentDataError,
    InvalidRankError,
    TensorError,
)


class TestTensorConstruction(TestCase):
    def test_matrix_stores_flat_row_major_buffer(self):
        t = Tensor([1, 2, 3, 4, 5, 6], (2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(t.numel, 6)
        self.assertEqual(t.data.dtype, np.float32)
        np.testing.assert_array_equal(t.data, np.arange(1, 7, dtype=np.float32))

    def test_vector_shape(self):
        t = Tensor([1.5, -2.0], (2,))
        self.assertEqual(t.shape, (2,))
        self.assertEqual(t.tolist(), [1.5, -2.0])

    def test_length_mismatch_raises_inconsistent_data(self):
        with self.assertRaises(InconsistentDataError) as ctx:
            Tensor([1, 2, 3], (2, 2))
        self.assertEqual(ctx.exception.length, 3)
        self.assertEqual(ctx.exception.shape, (2, 2))

    def test_rank_zero_and_rank_three_raise_invalid_rank(self):
        with self.assertRaises(InvalidRankError):
            Tensor([], ())
        with self.assertRaises(InvalidRankError):
            Tensor([1] * 8, (2, 2, 2))

    def test_rank_checked_before_length(self):
        with self.assertRaises(InvalidRankError):
            Tensor([1, 2, 3], (1, 1, 1, 1))

    def test_negative_dimension_raises_invalid_rank(self):
        with self.assertRaises(InvalidRankError):
            Tensor([], (-1, 2))

    def test_non_integral_dimension_raises_invalid_rank(self):
        with self.assertRaises(InvalidRankError):
            Tensor([0.0] * 6, (2.5, 3))
        with self.assertRaises(InvalidRankError):
            Tensor([0.0], (True,))
        with self.assertRaises(InvalidRankError):
            Tensor.full((2.0, 2), 1.0)

    def test_numpy_integer_dimensions_accepted(self):
        t = Tensor([1, 2, 3, 4], (np.int64(2), np.int32(2)))
        self.assertEqual(t.shape, (2, 2))
        self.assertIsInstance(t.shape[0], int)

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(InvalidRankError, TensorError))
        self.assertTrue(issubclass(TensorError, ValueError))

    def test_constructor_copies_input(self):
        src = np.array([1.0, 2.0], dtype=np.float32)
        t = Tensor(src, (2,))
        src[0] = 99.0
        self.assertEqual(t.tolist(), [1.0, 2.0])

    def test_data_view_is_read_only(self):
        t = Tensor([1, 2], (2,))
        with self.assertRaises(ValueError):
            t.data[0] = 5.0

    def test_zero_sized_matrix_is_valid(self):
        t = Tensor([], (0, 3))
        self.assertEqual(t.shape, (0, 3))
        self.assertEqual(t.numel, 0)


class TestTensorFactories(TestCase):
    def test_one_and_zeros(self):
        np.testing.assert_array_equal(Tensor.one((2, 2)).to_numpy(), np.ones((2, 2)))
        np.testing.assert_array_equal(Tensor.zeros((3,)).to_numpy(), np.zeros(3))

    def test_full(self):
        t = Tensor.full((2, 3), 0.5)
        self.assertTrue(np.all(t.to_numpy() == 0.5))

    def test_factories_validate_rank(self):
        with self.assertRaises(InvalidRankError):
            Tensor.one(())
        with self.assertRaises(InvalidRankError):
            Tensor.zeros((1, 2, 3))

    def test_empty_sentinel(self):
        e = Tensor.empty()
        self.assertTrue(e.is_empty())
        self.assertEqual(e.shape, ())
        self.assertEqual(e.numel, 0)
        self.assertFalse(Tensor.zeros((1,)).is_empty())

    def test_from_numpy_infers_shape(self):
        arr = np.arange(6, dtype=np.float32).reshape(3, 2)
        t = Tensor.from_numpy(arr)
        self.assertEqual(t.shape, (3, 2))
        np.testing.assert_array_equal(t.to_numpy(), arr)

    def test_item(self):
        self.assertAlmostEqual(Tensor([2.5], (1,)).item(), 2.5)
        with self.assertRaises(ValueError):
            Tensor([1, 2], (2,)).item()


class TestTensorDisplay(TestCase):
    def test_matrix_str_uses_aligned_rows(self):
        t = Tensor([1, 2, 3, 4], (2, 2))
        self.assertEqual(
            str(t),
            "  |  1.0000,   2.0000|\n  |  3.0000,   4.0000|\n",
        )

    def test_vector_str_is_list(self):
        self.assertEqual(str(Tensor([1, 2], (2,))), "[1.0, 2.0]")

    def test_repr(self):
        self.assertEqual(
            repr(Tensor([1, 2], (2,))), "Tensor(shape=(2,), data=[1.0, 2.0])"
        )
        self.assertEqual(repr(Tensor.empty()), "Tensor.empty()")


if __name__ == "__main__":
    unittest.main()
