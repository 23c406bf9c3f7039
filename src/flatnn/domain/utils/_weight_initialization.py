"""
Domain contract for parameter initialization.

`_WeightInitializer` fixes the shape of the initializer dispatcher used by
`Linear`: a named strategy, resolved once, that fills a parameter tensor
from an injected random source. The registry itself lives in
`infrastructure.utils.weight_initializer`.

`_calculate_fan_in_and_fan_out` derives the fan values used by the scaled
uniform strategies.
"""

from abc import ABC, abstractmethod
from typing import Any, Tuple

from .._random import IRandomSource
from .._tensor import ITensor


class _WeightInitializer(ABC):
    """
    Callable that fills a parameter tensor in place.

    Implementations visit elements in row-major order and draw from `rng`
    once per element (constant strategies draw nothing), so a seeded source
    always produces the same parameters.
    """

    @classmethod
    @abstractmethod
    def available(cls) -> Tuple[str, ...]:
        """Names of the strategies that can be requested."""

    @abstractmethod
    def __call__(self, tensor: ITensor, rng: IRandomSource, **kwargs: Any) -> ITensor:
        """
        Fill `tensor` and return it.

        Parameters
        ----------
        tensor : ITensor
            Parameter tensor, overwritten in place.
        rng : IRandomSource
            Source of floats in [0, 1).
        **kwargs
            Strategy-specific options (e.g., `gain` for Xavier).
        """


def _calculate_fan_in_and_fan_out(shape: Tuple[int, ...]) -> Tuple[int, int]:
    """
    Return `(fan_in, fan_out)` for a parameter shape.

    Weight matrices are stored as `[in_features, out_features]`, so the first
    dimension is the fan-in. A bias vector of length `n` reports `(n, n)`;
    a shapeless tensor reports `(1, 1)`.
    """
    if len(shape) == 0:
        return 1, 1
    if len(shape) == 1:
        return int(shape[0]), int(shape[0])
    return int(shape[0]), int(shape[1])
