import unittest
from unittest import TestCase

import numpy as np

from src.flatnn.domain._kinds import ActivationKind
from src.flatnn.domain._errors import ShapeMismatchError
from src.flatnn.infrastructure.tensor._tensor import Tensor
from src.flatnn.infrastructure._activation_functions import (
    LEAKY_RELU_SLOPE,
    activate,
    activation_backward,
    activation_derivative,
    get_activation,
    softmax,
)


def _t(arr) -> Tensor:
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float32))


class TestActivationForward(TestCase):
    def setUp(self):
        self.x_np = np.array([[-2.0, -0.5, 0.0], [0.5, 1.0, 3.0]], dtype=np.float32)
        self.x = _t(self.x_np)

    def test_elementwise_forwards(self):
        x = self.x_np
        expected = {
            ActivationKind.LINEAR: x,
            ActivationKind.RELU: np.maximum(x, 0.0),
            ActivationKind.LEAKY_RELU: np.where(x > 0, x, LEAKY_RELU_SLOPE * x),
            ActivationKind.SIGMOID: 1.0 / (1.0 + np.exp(-x)),
            ActivationKind.TANH: np.tanh(x),
        }
        for kind, ref in expected.items():
            with self.subTest(kind=kind):
                out = activate(kind, self.x)
                self.assertEqual(out.shape, self.x.shape)
                np.testing.assert_allclose(out.to_numpy(), ref, rtol=1e-6, atol=1e-7)

    def test_softmax_rows_sum_to_one(self):
        out = activate(ActivationKind.SOFTMAX, self.x).to_numpy()
        np.testing.assert_allclose(out.sum(axis=1), [1.0, 1.0], rtol=1e-6)
        self.assertTrue(np.all(out > 0))

    def test_softmax_vector_normalizes_whole_vector(self):
        out = softmax(_t([1.0, 2.0, 3.0])).to_numpy()
        e = np.exp(np.array([1.0, 2.0, 3.0]) - 3.0)
        np.testing.assert_allclose(out, e / e.sum(), rtol=1e-6)

    def test_softmax_is_stable_for_large_logits(self):
        out = softmax(_t([1000.0, 1000.0])).to_numpy()
        np.testing.assert_allclose(out, [0.5, 0.5])

    def test_unknown_kind_raises_type_error(self):
        with self.assertRaises(TypeError):
            get_activation("relu")


class TestActivationDerivatives(TestCase):
    def test_derivative_table(self):
        x_np = np.array([-1.5, 0.0, 2.0], dtype=np.float32)
        x = _t(x_np)
        s = 1.0 / (1.0 + np.exp(-x_np))
        expected = {
            ActivationKind.LINEAR: np.ones(3),
            ActivationKind.RELU: np.array([0.0, 0.0, 1.0]),
            ActivationKind.LEAKY_RELU: np.array([LEAKY_RELU_SLOPE, LEAKY_RELU_SLOPE, 1.0]),
            ActivationKind.SIGMOID: s * (1.0 - s),
            ActivationKind.TANH: 1.0 - np.tanh(x_np) ** 2,
        }
        for kind, ref in expected.items():
            with self.subTest(kind=kind):
                np.testing.assert_allclose(
                    activation_derivative(kind, x).to_numpy(), ref, rtol=1e-5, atol=1e-7
                )

    def test_softmax_has_no_elementwise_derivative(self):
        with self.assertRaises(ValueError):
            activation_derivative(ActivationKind.SOFTMAX, _t([1.0, 2.0]))

    def test_elementwise_backward_scales_upstream_gradient(self):
        x = _t([-1.0, 0.5, 2.0])
        g = _t([1.0, 2.0, 3.0])
        out = activation_backward(ActivationKind.RELU, x, g)
        self.assertEqual(out.tolist(), [0.0, 2.0, 3.0])

    def test_backward_shape_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            activation_backward(ActivationKind.SIGMOID, _t([1.0, 2.0]), _t([1.0]))
        with self.assertRaises(ShapeMismatchError):
            activation_backward(ActivationKind.SOFTMAX, _t([1.0, 2.0]), _t([1.0]))

    def test_softmax_backward_matches_jacobian(self):
        x_np = np.array([[0.2, -1.0, 0.7], [1.5, 0.1, -0.3]], dtype=np.float32)
        g_np = np.array([[1.0, 0.0, -2.0], [0.5, 0.5, 1.0]], dtype=np.float32)
        out = activation_backward(ActivationKind.SOFTMAX, _t(x_np), _t(g_np)).to_numpy()

        for r in range(2):
            e = np.exp(x_np[r] - x_np[r].max())
            s = e / e.sum()
            jac = np.diag(s) - np.outer(s, s)
            np.testing.assert_allclose(out[r], jac @ g_np[r], rtol=1e-5, atol=1e-6)


if __name__ == "__main__":
    unittest.main()
