"""
Kaiming/He weight initializer.

- ``kaiming_uniform``:
    ``U(-a, a)`` with ``a = sqrt(6 / fan_in)``, suited to ReLU hidden layers.
"""

import math

from ....domain._random import IRandomSource
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out
from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("kaiming_uniform")
def kaiming_uniform(tensor: Tensor, rng: IRandomSource) -> Tensor:
    fan_in, _ = _calculate_fan_in_and_fan_out(tensor.shape)
    bound = math.sqrt(6.0 / float(max(fan_in, 1)))
    return tensor.map_(lambda _: bound * (2.0 * rng.random() - 1.0))
