"""
Activation layers.

This module provides `Activation`, a parameter-free layer that applies one of
the registered activation functions (see `_activation_functions`) and
propagates gradients through it.

Fused-loss passthrough
----------------------
Some losses ship a gradient that already includes the derivative of the
output activation (sigmoid + binary cross-entropy, softmax + categorical
cross-entropy). For those, the output `Activation` is switched to
`passthrough_gradient=True` so its backward returns the incoming gradient
unchanged instead of applying the activation derivative a second time.
`NetworkBuilder.build()` does this automatically for the matching loss kind.
"""

from __future__ import annotations

from typing import Any, Dict

from ..domain._kinds import ActivationKind
from ._activation_functions import activate, activation_backward
from ._layer import Layer
from .tensor._tensor import Tensor


class Activation(Layer):
    """
    Elementwise (or row-wise, for softmax) activation layer.

    Parameters
    ----------
    kind : ActivationKind
        Activation function to apply.
    passthrough_gradient : bool, optional
        If True, `backward` returns `grad_out` unchanged. Defaults to False.

    Raises
    ------
    TypeError
        If `kind` is not an `ActivationKind`.
    """

    def __init__(
        self, kind: ActivationKind, *, passthrough_gradient: bool = False
    ) -> None:
        super().__init__()
        if not isinstance(kind, ActivationKind):
            raise TypeError(f"kind must be an ActivationKind, got {type(kind)}")
        self.kind = kind
        self.passthrough_gradient = bool(passthrough_gradient)

    def forward(self, x: Tensor) -> Tensor:
        """
        Apply the activation and cache the pre-activation input.
        """
        self._cache_input(x)
        return activate(self.kind, self._cached_input)

    def backward(self, grad_out: Tensor, learning_rate: float = 0.0) -> Tensor:
        """
        Propagate `grad_out` through the activation.

        `learning_rate` is accepted for protocol compatibility and ignored.

        Raises
        ------
        RuntimeError
            If called before any `forward`.
        ShapeMismatchError
            If `grad_out` does not match the cached input shape.
        """
        x = self._require_cached_input()
        if self.passthrough_gradient:
            return grad_out
        return activation_backward(self.kind, x, grad_out)

    def last_output(self) -> Tensor:
        """Recompute the activation of the most recently cached input."""
        return activate(self.kind, self._require_cached_input())

    def get_config(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "passthrough_gradient": self.passthrough_gradient,
        }
