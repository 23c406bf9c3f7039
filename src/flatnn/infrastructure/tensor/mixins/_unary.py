"""
Unary elementwise Tensor operations.

Every operation here is shape-preserving and returns a new tensor, except
`map_`, which rewrites the receiver's buffer and is reserved for parameter
initialization and updates.
"""

from __future__ import annotations

from typing import Callable, Union

import numpy as np

Number = Union[int, float]


class TensorMixinUnary:
    """
    Mixin implementing unary maps (abs, powf, scale, exp, log, relu, ...).
    """

    def _unary_op(self, op: str, fn: Callable[[np.ndarray], np.ndarray]):
        self._require_valid_rank(op)
        return self._wrap(fn(self._data), self.shape)

    def abs(self):
        """Elementwise absolute value."""
        return self._unary_op("abs", np.abs)

    def powf(self, exponent: Number):
        """
        Raise every element to a scalar power.

        Parameters
        ----------
        exponent : Number
            Exponent applied elementwise.

        Returns
        -------
        Tensor
            `x ** exponent`, elementwise.
        """
        e = np.float32(exponent)

        def _pow(x: np.ndarray) -> np.ndarray:
            with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
                return np.power(x, e)

        return self._unary_op("powf", _pow)

    def scale(self, scalar: Number):
        """Multiply every element by `scalar`."""
        s = np.float32(scalar)
        return self._unary_op("scale", lambda x: x * s)

    def exp(self):
        """Elementwise natural exponential (overflows to inf)."""

        def _exp(x: np.ndarray) -> np.ndarray:
            with np.errstate(over="ignore"):
                return np.exp(x)

        return self._unary_op("exp", _exp)

    def log(self):
        """
        Elementwise natural logarithm.

        No epsilon is added here; losses add their own before calling `log`.
        """

        def _log(x: np.ndarray) -> np.ndarray:
            with np.errstate(divide="ignore", invalid="ignore"):
                return np.log(x)

        return self._unary_op("log", _log)

    def relu(self):
        """Elementwise `max(0, x)`."""
        return self._unary_op("relu", lambda x: np.maximum(x, np.float32(0.0)))

    def relu_prime(self):
        """
        Elementwise ReLU derivative.

        Returns 1 where `x > 0` and 0 elsewhere, including at exactly `x == 0`
        where the true derivative is undefined.
        """
        return self._unary_op("relu_prime", lambda x: (x > 0).astype(np.float32))

    def sigmoid(self):
        """Elementwise logistic function `1 / (1 + exp(-x))`."""

        def _sigmoid(x: np.ndarray) -> np.ndarray:
            with np.errstate(over="ignore"):
                return np.float32(1.0) / (np.float32(1.0) + np.exp(-x))

        return self._unary_op("sigmoid", _sigmoid)

    def tanh(self):
        """Elementwise hyperbolic tangent."""
        return self._unary_op("tanh", np.tanh)

    def map(self, fn: Callable[[float], float]):
        """
        Apply a Python scalar function to every element.

        Parameters
        ----------
        fn : Callable[[float], float]
            Function applied to each element.

        Returns
        -------
        Tensor
            New tensor with the mapped values.
        """
        self._require_valid_rank("map")
        return self._wrap(self._map_values(fn), self.shape)

    def map_(self, fn: Callable[[float], float]):
        """
        Apply a Python scalar function to every element, in place.

        Elements are visited in row-major order, so a stateful `fn` (such as
        a random draw) fills the buffer deterministically.

        Returns
        -------
        Tensor
            This tensor.
        """
        self._require_valid_rank("map_")
        self._data[...] = self._map_values(fn)
        return self

    def _map_values(self, fn: Callable[[float], float]) -> np.ndarray:
        return np.fromiter(
            (fn(float(v)) for v in self._data),
            dtype=np.float32,
            count=self._data.size,
        )
