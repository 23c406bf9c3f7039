"""
Shape and memory operations for flatnn tensors.

This module implements the operations that move data between buffers or
reinterpret its layout:

- `transpose` / `T`: 2D transpose into a new row-major buffer
  (`new[col * rows + row] = old[row * cols + col]`); rank-1 tensors are
  returned unchanged (as a copy) since they have no column dimension.
- `reshape`: same buffer contents under a new rank-1/rank-2 shape.
- `clone` and `copy_from`: value copies.
- `to_numpy` and `tolist`: host interop.
"""

from __future__ import annotations

import numbers
from typing import Any, List, Sequence

import numpy as np

from ....domain._errors import (
    InconsistentDataError,
    InvalidRankError,
    ShapeMismatchError,
)


class TensorMixinMemory:
    """
    Mixin implementing transpose, reshape and copy utilities.
    """

    def transpose(self):
        """
        Transpose a 2D tensor.

        Returns
        -------
        Tensor
            `(cols, rows)` tensor for 2D input; an unchanged copy for 1D input.

        Raises
        ------
        InvalidRankError
            If the tensor is not rank 1 or 2.
        """
        self._require_valid_rank("transpose")

        if len(self.shape) == 1:
            return self._wrap(self._data.copy(), self.shape)

        rows, cols = self.shape
        out = np.ascontiguousarray(self._data.reshape(rows, cols).T).reshape(-1)
        return self._wrap(out, (cols, rows))

    @property
    def T(self):
        """Alias for `transpose()`."""
        return self.transpose()

    def reshape(self, shape: Sequence[int]):
        """
        Return a copy of this tensor with a different shape.

        Parameters
        ----------
        shape : Sequence[int]
            New shape; must be rank 1 or 2 with the same element count.

        Raises
        ------
        InvalidRankError
            If the target shape is not rank 1 or 2, or has a non-integral
            dimension.
        InconsistentDataError
            If the element count differs.
        """
        dims = tuple(shape)
        if any(isinstance(d, bool) or not isinstance(d, numbers.Integral) for d in dims):
            raise InvalidRankError("reshape", dims, detail="dimensions must be integers")
        new_shape = tuple(int(d) for d in dims)
        if len(new_shape) not in (1, 2) or any(d < 0 for d in new_shape):
            raise InvalidRankError("reshape", new_shape)
        if int(np.prod(new_shape)) != self._data.size:
            raise InconsistentDataError(self._data.size, new_shape)
        return self._wrap(self._data.copy(), new_shape)

    def clone(self):
        """Return a deep copy of this tensor."""
        return self._wrap(self._data.copy(), self.shape)

    def copy_from(self, other) -> None:
        """
        Overwrite this tensor's values with `other`'s, in place.

        Raises
        ------
        ShapeMismatchError
            If the shapes differ.
        """
        if self.shape != other.shape:
            raise ShapeMismatchError("copy_from", self.shape, other.shape)
        self._data[...] = other._data

    def to_numpy(self) -> np.ndarray:
        """
        Return a float32 NumPy copy shaped as the tensor.
        """
        return self._data.reshape(self.shape).copy()

    def tolist(self) -> List[Any]:
        """
        Return the values as (nested) Python lists.
        """
        return self.to_numpy().tolist()
