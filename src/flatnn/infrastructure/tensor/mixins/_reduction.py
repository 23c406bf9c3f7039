"""
Reduction operations for flatnn tensors.

`sum` supports three modes:

- `axis=None`: grand total, returned as a `(1,)` tensor;
- `axis=0`: column-wise sums of a 2D tensor, shape `(cols,)`;
- `axis=1`: row-wise sums of a 2D tensor, shape `(rows,)`.

For rank-1 tensors both axes fall back to the grand total. Any other axis is
rejected with `InvalidRankError`.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ....domain._errors import InvalidRankError


class TensorMixinReduction:
    """
    Mixin implementing `sum`, `mean` and `max`.
    """

    def sum(self, axis: Optional[int] = None):
        """
        Sum elements of the tensor.

        Parameters
        ----------
        axis : int or None, optional
            None for the grand total, 0 for column sums, 1 for row sums.

        Returns
        -------
        Tensor
            Reduced tensor (see module docstring for shapes).

        Raises
        ------
        InvalidRankError
            If the tensor rank is unsupported or `axis` is not None, 0 or 1.
        """
        self._require_valid_rank("sum")

        if axis is not None and (isinstance(axis, bool) or axis not in (0, 1)):
            raise InvalidRankError(
                "sum", self.shape, detail=f"unsupported reduction axis {axis!r}"
            )

        if axis is None or len(self.shape) == 1:
            total = np.sum(self._data, dtype=np.float32)
            return self._wrap(np.array([total], dtype=np.float32), (1,))

        rows, cols = self.shape
        out = np.sum(self._data.reshape(rows, cols), axis=axis, dtype=np.float32)
        return self._wrap(out, (cols,) if axis == 0 else (rows,))

    def mean(self):
        """
        Mean of all elements, as a `(1,)` tensor.
        """
        self._require_valid_rank("mean")
        n = self._data.size
        return self.sum().scale(1.0 / n if n else 0.0)

    def max(self):
        """
        Maximum element, as a `(1,)` tensor.

        Raises
        ------
        ValueError
            If the tensor has no elements.
        """
        self._require_valid_rank("max")
        if self._data.size == 0:
            raise ValueError("max of an empty tensor is undefined")
        return self._wrap(np.array([self._data.max()], dtype=np.float32), (1,))
