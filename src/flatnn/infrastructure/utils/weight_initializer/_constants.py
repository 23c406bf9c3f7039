"""
Constant weight initializers.

Provided initializers
---------------------
- ``zeros``: all elements set to zero.
- ``ones``: all elements set to one.

These ignore the random source and are typically used for bias parameters or
deterministic test setups.
"""

from ....domain._random import IRandomSource
from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("zeros")
def zeros(tensor: Tensor, rng: IRandomSource) -> Tensor:
    """Fill `tensor` with zeros in-place."""
    return tensor.map_(lambda _: 0.0)


@WeightInitializer.register_initializer("ones")
def ones(tensor: Tensor, rng: IRandomSource) -> Tensor:
    """Fill `tensor` with ones in-place."""
    return tensor.map_(lambda _: 1.0)
