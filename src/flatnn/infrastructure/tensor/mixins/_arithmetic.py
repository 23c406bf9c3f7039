"""
Arithmetic mixin defining elementwise Tensor operations.

Elementwise operations require operands of identical shape; there is no
broadcasting. Scalars are only accepted through the `*` and `/` operators,
which delegate to `scale`.
"""

from __future__ import annotations

import numbers
from typing import Callable, Union

import numpy as np

from ....domain._errors import ShapeMismatchError

Number = Union[int, float]


def _is_scalar(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class TensorMixinArithmetic:
    """
    Mixin implementing `add`, `sub`, `mul`, `div` and their operators.

    Notes
    -----
    - All results are new tensors with the receiver's shape.
    - `sub_` is the single in-place arithmetic operation; layers use it to
      apply gradient steps to the parameter tensors they own.
    """

    def _binary_op(
        self, other, op: str, fn: Callable[[np.ndarray, np.ndarray], np.ndarray]
    ):
        self._require_valid_rank(op)
        other = self._as_tensor(other, op)
        if self.shape != other.shape:
            raise ShapeMismatchError(op, self.shape, other.shape)
        return self._wrap(fn(self._data, other._data), self.shape)

    def add(self, other):
        """
        Elementwise addition.

        Parameters
        ----------
        other : Tensor
            Operand with the same shape as this tensor.

        Returns
        -------
        Tensor
            `self + other`, elementwise.

        Raises
        ------
        ShapeMismatchError
            If the shapes differ.
        """
        return self._binary_op(other, "add", np.add)

    def sub(self, other):
        """Elementwise subtraction; shapes must match."""
        return self._binary_op(other, "sub", np.subtract)

    def mul(self, other):
        """Elementwise (Hadamard) product; shapes must match."""
        return self._binary_op(other, "mul", np.multiply)

    def div(self, other):
        """
        Elementwise division; shapes must match.

        Division by zero is not guarded and follows IEEE-754 (inf / nan).
        """

        def _div(a: np.ndarray, b: np.ndarray) -> np.ndarray:
            with np.errstate(divide="ignore", invalid="ignore"):
                return np.divide(a, b)

        return self._binary_op(other, "div", _div)

    def sub_(self, other):
        """
        In-place elementwise subtraction.

        Parameters
        ----------
        other : Tensor
            Operand with the same shape as this tensor.

        Returns
        -------
        Tensor
            This tensor, after `self -= other`.
        """
        self._require_valid_rank("sub_")
        other = self._as_tensor(other, "sub_")
        if self.shape != other.shape:
            raise ShapeMismatchError("sub_", self.shape, other.shape)
        np.subtract(self._data, other._data, out=self._data)
        return self

    # ----------------------------
    # Operators
    # ----------------------------
    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __mul__(self, other: Union["TensorMixinArithmetic", Number]):
        if _is_scalar(other):
            return self.scale(other)
        return self.mul(other)

    def __rmul__(self, other: Number):
        if _is_scalar(other):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other: Union["TensorMixinArithmetic", Number]):
        if _is_scalar(other):
            return self.scale(1.0 / other)
        return self.div(other)

    def __neg__(self):
        return self.scale(-1.0)
