import random
import unittest
from unittest import TestCase

import numpy as np

from src.flatnn.domain._errors import InvalidRankError, ShapeMismatchError
from src.flatnn.domain._layer import ILayer
from src.flatnn.infrastructure._linear import Linear
from src.flatnn.infrastructure.tensor._tensor import Tensor


def _t(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float32))


class TestLinearConstruction(TestCase):
    def test_shapes(self):
        layer = Linear(4, 3, random.Random(0))
        self.assertEqual(layer.weight.shape, (4, 3))
        self.assertEqual(layer.bias.shape, (3,))
        self.assertEqual(len(layer.parameters()), 2)
        self.assertIsInstance(layer, ILayer)

    def test_without_bias(self):
        layer = Linear(4, 3, random.Random(0), bias=False)
        self.assertIsNone(layer.bias)
        self.assertEqual([n for n, _ in layer.named_parameters()], ["weight"])

    def test_bias_trick_adds_weight_row(self):
        layer = Linear(4, 3, random.Random(0), bias_trick=True)
        self.assertEqual(layer.weight.shape, (5, 3))
        self.assertIsNone(layer.bias)

    def test_uniform_init_draws_weights_then_bias_in_row_major_order(self):
        layer = Linear(2, 3, random.Random(42))
        ref = random.Random(42)
        draws = np.array([ref.random() for _ in range(9)], dtype=np.float32)
        np.testing.assert_array_equal(layer.weight.data, draws[:6])
        np.testing.assert_array_equal(layer.bias.data, draws[6:])

    def test_same_seed_same_layer(self):
        a = Linear(3, 2, random.Random(5), weight_init="xavier_uniform")
        b = Linear(3, 2, random.Random(5), weight_init="xavier_uniform")
        self.assertTrue(a.weight.allclose(b.weight, rtol=0, atol=0))

    def test_numpy_generator_is_accepted(self):
        layer = Linear(2, 2, np.random.default_rng(0))
        self.assertTrue(np.all((layer.weight.data >= 0) & (layer.weight.data < 1)))

    def test_default_rng(self):
        layer = Linear(2, 2)
        self.assertEqual(layer.weight.shape, (2, 2))

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            Linear(0, 1)
        with self.assertRaises(ValueError):
            Linear(2, -1)

    def test_unknown_initializer(self):
        with self.assertRaises(ValueError):
            Linear(2, 2, random.Random(0), weight_init="nope")

    def test_get_config(self):
        cfg = Linear(2, 3, random.Random(0), bias=False).get_config()
        self.assertEqual(cfg["in_features"], 2)
        self.assertEqual(cfg["out_features"], 3)
        self.assertFalse(cfg["bias"])
        self.assertIn("Linear(in_features=2", repr(Linear(2, 3, random.Random(0))))


class TestLinearForwardBackward(TestCase):
    def setUp(self):
        self.layer = Linear(2, 3, random.Random(0))
        self.w = np.array([[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]], dtype=np.float32)
        self.b = np.array([0.01, 0.02, 0.03], dtype=np.float32)
        self.layer.set_weight(_t(self.w))
        self.layer.set_bias(_t(self.b))
        self.x = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)

    def test_forward_adds_bias_to_every_row(self):
        y = self.layer.forward(_t(self.x))
        self.assertEqual(y.shape, (2, 3))
        np.testing.assert_allclose(y.to_numpy(), self.x @ self.w + self.b, rtol=1e-6)

    def test_forward_caches_copy_of_input(self):
        x = _t(self.x)
        self.layer(x)
        cached = self.layer.cached_input
        self.assertIsNot(cached, x)
        np.testing.assert_array_equal(cached.to_numpy(), self.x)

    def test_last_output_recomputes_preactivation(self):
        y = self.layer.forward(_t(self.x))
        self.assertTrue(self.layer.last_output().allclose(y))

    def test_backward_uses_pre_update_weights(self):
        lr = 0.1
        g = np.array([[1.0, 0.5, -1.0], [0.0, 2.0, 1.0]], dtype=np.float32)

        self.layer.forward(_t(self.x))
        grad_in = self.layer.backward(_t(g), lr)

        np.testing.assert_allclose(grad_in.to_numpy(), g @ self.w.T, rtol=1e-6)
        np.testing.assert_allclose(
            self.layer.weight.to_numpy(), self.w - lr * (self.x.T @ g), rtol=1e-6
        )
        np.testing.assert_allclose(
            self.layer.bias.to_numpy(), self.b - lr * g.sum(axis=0), rtol=1e-5
        )

    def test_single_sample_backward_uses_outer_product(self):
        lr = 0.5
        x = np.array([1.0, -2.0], dtype=np.float32)
        g = np.array([0.5, 1.0, -1.0], dtype=np.float32)

        y = self.layer.forward(_t(x))
        self.assertEqual(y.shape, (3,))
        grad_in = self.layer.backward(_t(g), lr)

        self.assertEqual(grad_in.shape, (2,))
        np.testing.assert_allclose(grad_in.to_numpy(), self.w @ g, rtol=1e-6)
        np.testing.assert_allclose(
            self.layer.weight.to_numpy(), self.w - lr * np.outer(x, g), rtol=1e-6
        )
        np.testing.assert_allclose(self.layer.bias.to_numpy(), self.b - lr * g, rtol=1e-6)

    def test_zero_learning_rate_leaves_parameters(self):
        self.layer.forward(_t(self.x))
        self.layer.backward(_t(np.ones((2, 3))), 0.0)
        np.testing.assert_array_equal(self.layer.weight.to_numpy(), self.w)

    def test_backward_before_forward(self):
        with self.assertRaises(RuntimeError):
            self.layer.backward(_t(np.ones((2, 3))), 0.1)

    def test_forward_wrong_width(self):
        with self.assertRaises(ShapeMismatchError):
            self.layer.forward(_t(np.ones((2, 5))))

    def test_forward_empty_sentinel(self):
        with self.assertRaises(InvalidRankError):
            self.layer.forward(Tensor.empty())

    def test_backward_gradient_shape_mismatch(self):
        self.layer.forward(_t(self.x))
        with self.assertRaises(ShapeMismatchError):
            self.layer.backward(_t(np.ones((2, 4))), 0.1)

    def test_set_weight_and_bias_validate_shape(self):
        with self.assertRaises(ShapeMismatchError):
            self.layer.set_weight(_t(np.ones((3, 2))))
        with self.assertRaises(ShapeMismatchError):
            self.layer.set_bias(_t(np.ones(2)))
        with self.assertRaises(ValueError):
            Linear(2, 2, random.Random(0), bias=False).set_bias(_t([1.0, 1.0]))

    def test_set_weight_copies(self):
        w = _t(self.w)
        self.layer.set_weight(w)
        self.assertIsNot(self.layer.weight, w)


class TestLinearBiasTrick(TestCase):
    def setUp(self):
        self.layer = Linear(2, 1, random.Random(0), bias_trick=True)
        # last row multiplies the appended constant
        self.w = np.array([[2.0], [3.0], [0.5]], dtype=np.float32)
        self.layer.set_weight(_t(self.w))

    def test_forward_appends_constant_column(self):
        x = np.array([[1.0, 1.0], [2.0, 0.0]], dtype=np.float32)
        y = self.layer.forward(_t(x))
        np.testing.assert_allclose(y.to_numpy(), [[5.5], [4.5]])
        self.assertEqual(self.layer.cached_input.shape, (2, 3))
        np.testing.assert_array_equal(self.layer.cached_input.to_numpy()[:, 2], [1.0, 1.0])

    def test_forward_vector(self):
        y = self.layer.forward(_t([1.0, 2.0]))
        self.assertEqual(y.shape, (1,))
        self.assertAlmostEqual(y.item(), 8.5)
        self.assertEqual(self.layer.cached_input.tolist(), [1.0, 2.0, 1.0])

    def test_backward_drops_constant_column(self):
        x = np.array([[1.0, 1.0], [2.0, 0.0]], dtype=np.float32)
        g = np.array([[1.0], [-1.0]], dtype=np.float32)
        self.layer.forward(_t(x))
        grad_in = self.layer.backward(_t(g), 0.1)

        self.assertEqual(grad_in.shape, (2, 2))
        np.testing.assert_allclose(grad_in.to_numpy(), g @ self.w[:2].T)

        x_aug = np.hstack([x, np.ones((2, 1), dtype=np.float32)])
        np.testing.assert_allclose(
            self.layer.weight.to_numpy(), self.w - 0.1 * (x_aug.T @ g), rtol=1e-6
        )


if __name__ == "__main__":
    unittest.main()
