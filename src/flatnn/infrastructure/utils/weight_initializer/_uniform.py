"""
Plain uniform initializers.

- ``uniform``: each element is one raw draw `r` in [0, 1). This is the
  default for `Linear`, so a layer built from a given random source reproduces
  the sequence of draws exactly.
- ``symmetric_uniform``: each element is `2r - 1`, i.e. uniform on [-1, 1).
"""

from ....domain._random import IRandomSource
from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("uniform")
def uniform(tensor: Tensor, rng: IRandomSource) -> Tensor:
    return tensor.map_(lambda _: rng.random())


@WeightInitializer.register_initializer("symmetric_uniform")
def symmetric_uniform(tensor: Tensor, rng: IRandomSource) -> Tensor:
    return tensor.map_(lambda _: 2.0 * rng.random() - 1.0)
