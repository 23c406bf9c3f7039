"""
CPU matrix-multiply kernels for flatnn tensors.

This module provides the generalized dot product used by `Tensor.matmul`
together with a reference kernel kept for cross-validation:

- `matmul_cpu`: production kernel. The output row is the outermost loop, the
  contraction index sits in the middle and the output column is handled by a
  single vectorised slice update:

      out[i, :] += a[i, k] * b[k, :]

  Both the right-hand operand and the output are streamed row by row, so
  memory access stays sequential and each inner update is a contiguous NumPy
  operation.
- `matmul_naive_cpu`: reference kernel using the textbook
  row / column / contraction ordering with scalar accumulation.

Shape rules
-----------
Rank-1 operands are promoted to `(1, n)` on the left and `(n, 1)` on the
right for compatibility checking; the result collapses back to rank 1 when
either side was a vector:

- (n,)    @ (n,)    -> (1,)
- (n,)    @ (n, c)  -> (c,)
- (r, n)  @ (n,)    -> (r,)
- (r, n)  @ (n, c)  -> (r, c)

Both kernels operate on flat float32 buffers and return a flat buffer plus
the output shape; wrapping into a `Tensor` is left to the caller.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from ...domain._errors import InvalidRankError, ShapeMismatchError


def resolve_matmul_shapes(
    lhs_shape: Sequence[int], rhs_shape: Sequence[int]
) -> Tuple[int, int, int, Tuple[int, ...]]:
    """
    Validate matmul operand shapes and compute the loop bounds.

    Parameters
    ----------
    lhs_shape : Sequence[int]
        Shape of the left operand (rank 1 or 2).
    rhs_shape : Sequence[int]
        Shape of the right operand (rank 1 or 2).

    Returns
    -------
    tuple[int, int, int, tuple[int, ...]]
        `(rows, inner, cols, out_shape)`.

    Raises
    ------
    InvalidRankError
        If either operand is not rank 1 or 2.
    ShapeMismatchError
        If the contraction dimensions disagree.
    """
    lhs_shape = tuple(lhs_shape)
    rhs_shape = tuple(rhs_shape)

    for shape in (lhs_shape, rhs_shape):
        if len(shape) not in (1, 2):
            raise InvalidRankError("matmul", shape)

    if len(lhs_shape) == 1:
        rows, inner = 1, lhs_shape[0]
    else:
        rows, inner = lhs_shape

    if len(rhs_shape) == 1:
        inner_rhs, cols = rhs_shape[0], 1
    else:
        inner_rhs, cols = rhs_shape

    if inner != inner_rhs:
        raise ShapeMismatchError("matmul", lhs_shape, rhs_shape)

    if len(lhs_shape) == 1 and len(rhs_shape) == 1:
        out_shape: Tuple[int, ...] = (1,)
    elif len(lhs_shape) == 1:
        out_shape = (cols,)
    elif len(rhs_shape) == 1:
        out_shape = (rows,)
    else:
        out_shape = (rows, cols)

    return rows, inner, cols, out_shape


def matmul_cpu(
    a: np.ndarray,
    a_shape: Sequence[int],
    b: np.ndarray,
    b_shape: Sequence[int],
) -> Tuple[np.ndarray, Tuple[int, ...]]:
    """
    Compute `a @ b` with row / contraction / column loop ordering.

    Parameters
    ----------
    a : np.ndarray
        Flat float32 buffer of the left operand.
    a_shape : Sequence[int]
        Shape of the left operand.
    b : np.ndarray
        Flat float32 buffer of the right operand.
    b_shape : Sequence[int]
        Shape of the right operand.

    Returns
    -------
    tuple[np.ndarray, tuple[int, ...]]
        Flat float32 output buffer and the output shape.
    """
    rows, inner, cols, out_shape = resolve_matmul_shapes(a_shape, b_shape)

    a2 = a.reshape(rows, inner)
    b2 = b.reshape(inner, cols)
    out = np.zeros((rows, cols), dtype=np.float32)

    for i in range(rows):
        out_row = out[i]
        a_row = a2[i]
        for k in range(inner):
            out_row += a_row[k] * b2[k]

    return out.reshape(-1), out_shape


def matmul_naive_cpu(
    a: np.ndarray,
    a_shape: Sequence[int],
    b: np.ndarray,
    b_shape: Sequence[int],
) -> Tuple[np.ndarray, Tuple[int, ...]]:
    """
    Compute `a @ b` with the textbook row / column / contraction ordering.

    This kernel reads the right-hand operand column-wise (strided) and is only
    used to cross-check `matmul_cpu`.

    Parameters
    ----------
    a : np.ndarray
        Flat float32 buffer of the left operand.
    a_shape : Sequence[int]
        Shape of the left operand.
    b : np.ndarray
        Flat float32 buffer of the right operand.
    b_shape : Sequence[int]
        Shape of the right operand.

    Returns
    -------
    tuple[np.ndarray, tuple[int, ...]]
        Flat float32 output buffer and the output shape.
    """
    rows, inner, cols, out_shape = resolve_matmul_shapes(a_shape, b_shape)

    out = np.zeros(rows * cols, dtype=np.float32)
    for i in range(rows):
        for j in range(cols):
            acc = np.float32(0.0)
            for k in range(inner):
                acc += a[i * inner + k] * b[k * cols + j]
            out[i * cols + j] = acc

    return out, out_shape
