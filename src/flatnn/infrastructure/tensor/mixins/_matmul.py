"""
Matrix-multiply mixin.

Wires `Tensor.matmul` (and the `@` operator) to the loop-reordered CPU
kernel, and exposes the naive kernel as `matmul_naive` for cross-checking.
"""

from __future__ import annotations

from ...ops.matmul_cpu import matmul_cpu, matmul_naive_cpu


class TensorMixinMatmul:
    """
    Mixin implementing the generalized dot product.
    """

    def matmul(self, other):
        """
        Generalized dot product of rank-1/rank-2 tensors.

        Parameters
        ----------
        other : Tensor
            Right-hand operand.

        Returns
        -------
        Tensor
            Product with shape `(1,)`, `(cols,)`, `(rows,)` or `(rows, cols)`
            depending on the operand ranks.

        Raises
        ------
        InvalidRankError
            If either operand is not rank 1 or 2.
        ShapeMismatchError
            If the contraction dimensions disagree.
        """
        other = self._as_tensor(other, "matmul")
        out, shape = matmul_cpu(self._data, self.shape, other._data, other.shape)
        return self._wrap(out, shape)

    def matmul_naive(self, other):
        """
        Same contract as `matmul`, computed with the naive loop ordering.
        """
        other = self._as_tensor(other, "matmul")
        out, shape = matmul_naive_cpu(
            self._data, self.shape, other._data, other.shape
        )
        return self._wrap(out, shape)

    def __matmul__(self, other):
        return self.matmul(other)
