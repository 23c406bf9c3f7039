"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like objects using
structural typing. The interface captures the read-only surface that layers,
losses and external collaborators (e.g., visualizers) rely on, independent of
the concrete flat-buffer implementation.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a rank-1 or rank-2 container of float32 values stored in a
    contiguous, row-major flat buffer.

    Notes
    -----
    - Element (row, col) of a 2D tensor lives at `data[row * cols + col]`.
    - Implementations are immutable values: operations return new tensors.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            `(n,)` for vectors or `(rows, cols)` for matrices.
        """
        ...

    @property
    def data(self) -> Any:
        """
        Return a read-only view of the flat data buffer.

        Returns
        -------
        Any
            Backend-native flat buffer (a 1-D `np.ndarray` of float32).
        """
        ...

    def add(self, other: "ITensor") -> "ITensor":
        """Elementwise addition (identical shapes)."""
        ...

    def sub(self, other: "ITensor") -> "ITensor":
        """Elementwise subtraction (identical shapes)."""
        ...

    def mul(self, other: "ITensor") -> "ITensor":
        """Elementwise (Hadamard) product (identical shapes)."""
        ...

    def div(self, other: "ITensor") -> "ITensor":
        """Elementwise division (identical shapes)."""
        ...

    def scale(self, scalar: Number) -> "ITensor":
        """Multiply every element by a scalar."""
        ...

    def transpose(self) -> "ITensor":
        """Swap rows and columns of a 2D tensor (identity for 1D)."""
        ...

    def sum(self, axis: Optional[int] = None) -> "ITensor":
        """Grand, column-wise (axis=0) or row-wise (axis=1) sum."""
        ...

    def matmul(self, other: "ITensor") -> "ITensor":
        """Generalized dot product over rank-1/rank-2 operands."""
        ...

    def to_numpy(self) -> Any:
        """Return a copy of the values shaped as the tensor."""
        ...
