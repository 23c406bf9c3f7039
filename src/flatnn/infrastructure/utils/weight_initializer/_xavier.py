"""
Xavier/Glorot weight initializer.

- ``xavier_uniform``:
    ``U(-a, a)`` with ``a = sqrt(6 / (fan_in + fan_out))``, drawn as
    ``a * (2r - 1)`` from the injected random source.

Fan-in and fan-out are computed from the weight shape via
``_calculate_fan_in_and_fan_out`` (`[in_features, out_features]`
convention).
"""

import math

from ....domain._random import IRandomSource
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out
from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(tensor: Tensor, rng: IRandomSource, gain: float = 1.0) -> Tensor:
    """
    Apply Xavier (Glorot) uniform initialization in-place.

    Parameters
    ----------
    tensor : Tensor
        Parameter tensor to fill.
    rng : IRandomSource
        Source of uniform [0, 1) floats.
    gain : float, optional
        Multiplier applied to the bound. Defaults to 1.0.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tensor.shape)
    bound = gain * math.sqrt(6.0 / float(fan_in + fan_out))
    return tensor.map_(lambda _: bound * (2.0 * rng.random() - 1.0))
