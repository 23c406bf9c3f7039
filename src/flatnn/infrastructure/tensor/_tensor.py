"""
Flat-buffer Tensor implementation.

`Tensor` stores float32 values in a single contiguous, row-major NumPy buffer
together with a rank-1 or rank-2 shape. Operations are grouped into mixins
(see `mixins/`); this module provides construction, validation, factories and
display.

Invariants
----------
- `len(data) == prod(shape)`
- `len(shape) in (1, 2)` for every tensor except the `Tensor.empty()`
  sentinel, whose shape is `()`.
- A tensor owns its buffer: the constructor copies its input, and results of
  operations are freshly allocated.
"""

from __future__ import annotations

import numbers
from typing import Any, Sequence, Union

import numpy as np

from ...domain._errors import InconsistentDataError, InvalidRankError
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinMatmul,
    TensorMixinMemory,
    TensorMixinReduction,
    TensorMixinUnary,
)

Number = Union[int, float]


def _validate_shape(shape: Sequence[int], op: str) -> tuple[int, ...]:
    """
    Normalize a shape to a tuple of ints and check its rank.

    Raises
    ------
    InvalidRankError
        If the shape is not rank 1 or 2, or has a negative or non-integral
        dimension.
    """
    dims = tuple(shape)
    if any(isinstance(d, bool) or not isinstance(d, numbers.Integral) for d in dims):
        raise InvalidRankError(op, dims, detail="dimensions must be integers")
    shape_t = tuple(int(d) for d in dims)
    if len(shape_t) == 0 or len(shape_t) > 2:
        raise InvalidRankError(op, shape_t)
    if any(d < 0 for d in shape_t):
        raise InvalidRankError(op, shape_t, detail="dimensions must be non-negative")
    return shape_t


class Tensor(
    TensorMixinArithmetic,
    TensorMixinUnary,
    TensorMixinMemory,
    TensorMixinReduction,
    TensorMixinMatmul,
):
    """
    Rank-1/rank-2 float32 tensor backed by a flat buffer.

    Parameters
    ----------
    data : Sequence[float] or np.ndarray
        Values in row-major order. Multi-dimensional arrays are flattened.
    shape : Sequence[int]
        `(n,)` for a vector or `(rows, cols)` for a matrix.

    Raises
    ------
    InvalidRankError
        If `shape` is not rank 1 or 2.
    InconsistentDataError
        If the number of values does not equal the element count of `shape`.

    Examples
    --------
    >>> a = Tensor([1, 2, 3, 4, 5, 6], (2, 3))
    >>> a.transpose().shape
    (3, 2)
    """

    __slots__ = ("_data", "_shape")

    def __init__(self, data: Any, shape: Sequence[int]) -> None:
        shape_t = _validate_shape(shape, "Tensor")
        buf = np.array(data, dtype=np.float32).reshape(-1)
        if buf.size != int(np.prod(shape_t)):
            raise InconsistentDataError(buf.size, shape_t)
        self._data = buf
        self._shape = shape_t

    # ---------------------------------------------------------------------
    # Internal helpers shared with the mixins
    # ---------------------------------------------------------------------
    @classmethod
    def _wrap(cls, buf: np.ndarray, shape: Sequence[int]) -> "Tensor":
        """
        Build a tensor around a freshly computed buffer without re-validating.

        Callers guarantee that `buf` holds `prod(shape)` values.
        """
        out = cls.__new__(cls)
        out._data = np.ascontiguousarray(buf, dtype=np.float32).reshape(-1)
        out._shape = tuple(shape)
        return out

    def _as_tensor(self, other: Any, op: str) -> "Tensor":
        if not isinstance(other, Tensor):
            raise TypeError(f"{op} expects a Tensor operand, got {type(other)}")
        return other

    def _require_valid_rank(self, op: str) -> None:
        if len(self._shape) not in (1, 2):
            raise InvalidRankError(op, self._shape)

    # ---------------------------------------------------------------------
    # Accessors
    # ---------------------------------------------------------------------
    @property
    def data(self) -> np.ndarray:
        """
        Read-only view of the flat float32 buffer.
        """
        view = self._data.view()
        view.flags.writeable = False
        return view

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape tuple: `(n,)` or `(rows, cols)`; `()` for the empty sentinel."""
        return self._shape

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def numel(self) -> int:
        return int(self._data.size)

    def is_empty(self) -> bool:
        """Return True for the `Tensor.empty()` sentinel."""
        return len(self._shape) == 0

    def item(self) -> float:
        """
        Return the value of a single-element tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor does not hold exactly one element.
        """
        if self._data.size != 1:
            raise ValueError(
                f"item() requires a single-element tensor, got shape={self._shape}"
            )
        return float(self._data[0])

    def allclose(self, other: "Tensor", rtol: float = 1e-5, atol: float = 1e-6) -> bool:
        """Return True if shapes match and values agree within tolerance."""
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=rtol, atol=atol)
        )

    # ---------------------------------------------------------------------
    # Factories
    # ---------------------------------------------------------------------
    @classmethod
    def from_numpy(cls, arr: Any) -> "Tensor":
        """
        Create a tensor from a 1D or 2D array-like, inferring the shape.
        """
        arr = np.asarray(arr, dtype=np.float32)
        return cls(arr.reshape(-1), arr.shape)

    @classmethod
    def full(cls, shape: Sequence[int], value: Number) -> "Tensor":
        """
        Create a tensor of the given shape filled with `value`.
        """
        shape_t = _validate_shape(shape, "full")
        return cls._wrap(np.full(int(np.prod(shape_t)), value, dtype=np.float32), shape_t)

    @classmethod
    def one(cls, shape: Sequence[int]) -> "Tensor":
        """Create a tensor of the given shape filled with 1.0."""
        return cls.full(shape, 1.0)

    @classmethod
    def zeros(cls, shape: Sequence[int]) -> "Tensor":
        """Create a tensor of the given shape filled with 0.0."""
        return cls.full(shape, 0.0)

    @classmethod
    def empty(cls) -> "Tensor":
        """
        Zero-length placeholder with shape `()`.

        Used as a layer's cache value before its first forward call; every
        operation other than inspection rejects it with `InvalidRankError`.
        """
        return cls._wrap(np.zeros(0, dtype=np.float32), ())

    # ---------------------------------------------------------------------
    # Display
    # ---------------------------------------------------------------------
    def __str__(self) -> str:
        """
        Human-readable rendering.

        2D tensors are printed one row per line as `  |  1.0000,   2.0000|`;
        other tensors as a bracketed list of values.
        """
        if len(self._shape) != 2:
            return "[" + ", ".join(str(v) for v in self._data) + "]"

        rows, cols = self._shape
        grid = self._data.reshape(rows, cols)
        lines = []
        for r in range(rows):
            cells = ", ".join(f"{float(v):>8.4f}" for v in grid[r])
            lines.append(f"  |{cells}|")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        if self.is_empty():
            return "Tensor.empty()"
        values = ", ".join(str(v) for v in self._data)
        return f"Tensor(shape={self._shape}, data=[{values}])"
