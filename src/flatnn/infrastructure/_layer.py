"""
Infrastructure layer base class.

This module provides a concrete `Layer` implementation that satisfies the
domain-level `ILayer` protocol. It implements the conveniences shared by the
concrete layers:

- `__call__` forwarding to `forward` for ergonomic invocation
- a single input cache slot with the forward/backward two-phase contract
- named, read-only parameter enumeration for inspection
- `get_config()` for textual summaries

Subclasses implement `forward` and `backward`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Tuple

from ..domain._layer import ILayer
from .tensor._tensor import Tensor


class Layer(ILayer):
    """
    Base class for layers held by a `Network`.

    Attributes
    ----------
    _cached_input : Tensor
        Input of the most recent `forward` call, or `Tensor.empty()` before
        the first one. `backward` reads it; interleaving forward calls between
        a forward and its matching backward is a caller error.
    """

    def __init__(self) -> None:
        self._cached_input: Tensor = Tensor.empty()

    def __call__(self, x: Tensor) -> Tensor:
        return self.forward(x)

    def forward(self, x: Tensor) -> Tensor:  # pragma: no cover - interface
        raise NotImplementedError

    def backward(self, grad_out: Tensor, learning_rate: float) -> Tensor:  # pragma: no cover - interface
        raise NotImplementedError

    @property
    def cached_input(self) -> Tensor:
        """Input cached by the most recent `forward` call."""
        return self._cached_input

    def _cache_input(self, x: Tensor) -> None:
        if not isinstance(x, Tensor):
            raise TypeError(
                f"{type(self).__name__}.forward expects a Tensor, got {type(x)}"
            )
        self._cached_input = x.clone()

    def _require_cached_input(self) -> Tensor:
        if self._cached_input.is_empty():
            raise RuntimeError(
                f"{type(self).__name__}.backward called before forward"
            )
        return self._cached_input

    def named_parameters(self) -> Iterator[Tuple[str, Tensor]]:
        """
        Yield `(name, tensor)` pairs for the layer's learnable tensors.

        Stateless layers yield nothing.
        """
        return iter(())

    def parameters(self) -> Tuple[Tensor, ...]:
        """Return the layer's learnable tensors in declaration order."""
        return tuple(p for _, p in self.named_parameters())

    def get_config(self) -> Dict[str, Any]:
        """Return a JSON-serializable description of the layer's settings."""
        return {}

    def __repr__(self) -> str:
        cfg = ", ".join(f"{k}={v!r}" for k, v in self.get_config().items())
        return f"{type(self).__name__}({cfg})"
