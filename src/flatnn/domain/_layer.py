"""
Layer interface definitions.

This module defines the domain-level contract shared by every layer that a
`Network` can hold. Layers are polymorphic over a two-phase protocol:

1. `forward(x)` computes the layer output and caches whatever local state the
   backward pass needs (the input, for the layers in this package).
2. `backward(grad_out, learning_rate)` consumes that cache, returns the
   gradient with respect to the layer input and, for trainable layers,
   applies a gradient-descent step to the layer's own parameters.

A `backward` call is only meaningful immediately after, and matched to, the
most recent `forward` call on the same layer.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class ILayer(Protocol):
    """
    Domain-level layer interface.

    Any object implementing both `forward` and `backward` is considered a
    valid layer, independent of inheritance.
    """

    def forward(self, x: ITensor) -> ITensor:
        """
        Execute the forward computation of the layer.

        Parameters
        ----------
        x : ITensor
            Input tensor.

        Returns
        -------
        ITensor
            Output tensor produced by the layer.
        """
        ...

    def backward(self, grad_out: ITensor, learning_rate: float) -> ITensor:
        """
        Propagate a gradient backwards through the layer.

        Parameters
        ----------
        grad_out : ITensor
            Gradient of the loss with respect to the layer output.
        learning_rate : float
            Step size used by layers that update parameters in place.

        Returns
        -------
        ITensor
            Gradient of the loss with respect to the layer input.
        """
        ...
