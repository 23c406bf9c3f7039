"""
Named registry of parameter initializers.

Strategies register themselves by decorating a function
`(tensor, rng, **kwargs) -> tensor` that overwrites `tensor` in place:

    @WeightInitializer.register_initializer("uniform")
    def uniform(tensor: Tensor, rng: IRandomSource) -> Tensor:
        return tensor.map_(lambda _: rng.random())

`Linear` resolves its `weight_init` / `bias_init` names through this class
once, at construction:

    WeightInitializer("xavier_uniform")(Tensor.zeros((in_f, out_f)), rng)

Registration happens as an import side effect of the package `__init__`.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Tuple, TypeVar

from ....domain._random import IRandomSource
from ....domain.utils._weight_initialization import _WeightInitializer
from ...tensor._tensor import Tensor

InitFn = Callable[..., Tensor]
F = TypeVar("F", bound=InitFn)


class WeightInitializer(_WeightInitializer):
    """
    Dispatcher bound to one registered strategy.

    Parameters
    ----------
    initializer_name : str
        Registry key of the strategy.

    Raises
    ------
    ValueError
        If no strategy is registered under `initializer_name`; the message
        lists the registered names.
    """

    INITIALIZERS: ClassVar[Dict[str, InitFn]] = {}

    def __init__(self, initializer_name: str) -> None:
        if initializer_name not in self.INITIALIZERS:
            names = ", ".join(self.available()) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. "
                f"Available: {names}"
            )
        self.name = initializer_name
        self._fn = self.INITIALIZERS[initializer_name]

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[F], F]:
        """
        Decorator adding a strategy under `name`.

        Raises
        ------
        ValueError
            If `name` is empty, or already taken and `overwrite` is False.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def register(fn: F) -> F:
            if name in cls.INITIALIZERS and not overwrite:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = fn
            return fn

        return register

    @classmethod
    def available(cls) -> Tuple[str, ...]:
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> InitFn:
        """Raw strategy function registered under `name`."""
        return cls.INITIALIZERS[name]

    def __call__(self, tensor: Tensor, rng: IRandomSource, **kwargs: Any) -> Tensor:
        return self._fn(tensor, rng, **kwargs)

    def __repr__(self) -> str:
        return f"WeightInitializer({self.name!r})"
