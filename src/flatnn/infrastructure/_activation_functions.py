"""
Activation function registry.

Each `ActivationKind` maps to a forward function and a backward function:

- forward:  `f(x) -> y`
- backward: `g(x, grad_out) -> grad_in`, where `x` is the pre-activation
  input cached by the layer.

For the elementwise kinds the backward rule is `grad_out * f'(x)`, and
`f'(x)` is also exposed on its own through `activation_derivative`.

Kinds
-----
| kind       | f(x)                      | f'(x)                   |
|------------|---------------------------|-------------------------|
| LINEAR     | x                         | 1                       |
| RELU       | max(0, x)                 | 1 if x > 0 else 0       |
| LEAKY_RELU | x if x > 0 else 0.01 x    | 1 if x > 0 else 0.01    |
| SIGMOID    | 1 / (1 + exp(-x))         | s(x) (1 - s(x))         |
| TANH       | tanh(x)                   | 1 - tanh(x)^2           |
| SOFTMAX    | exp(x - max) / sum(...)   | not elementwise         |

Softmax normalizes a rank-1 tensor over the whole vector and a rank-2 tensor
row by row (one sample per row). Its backward is the Jacobian-vector product
`s * (g - sum(g * s))`; when softmax is paired with categorical
cross-entropy the network skips it entirely and feeds the fused
`pred - target` delta straight through (see `Activation`).
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._kinds import ActivationKind
from .tensor._tensor import Tensor

LEAKY_RELU_SLOPE = 0.01


# ---------------------------------------------------------------------------
# Forward functions
# ---------------------------------------------------------------------------
def linear(x: Tensor) -> Tensor:
    return x.clone()


def relu(x: Tensor) -> Tensor:
    return x.relu()


def leaky_relu(x: Tensor) -> Tensor:
    return x.map(lambda v: v if v > 0.0 else LEAKY_RELU_SLOPE * v)


def sigmoid(x: Tensor) -> Tensor:
    return x.sigmoid()


def tanh(x: Tensor) -> Tensor:
    return x.tanh()


def softmax(x: Tensor) -> Tensor:
    """
    Numerically stable softmax.

    Parameters
    ----------
    x : Tensor
        Rank-1 logits, or a rank-2 batch with one sample per row.

    Returns
    -------
    Tensor
        Probabilities with the same shape as `x`; each vector (or row) sums
        to one.
    """
    x._require_valid_rank("softmax")
    arr = x.to_numpy()
    if arr.ndim == 1:
        shifted = arr - arr.max(initial=-np.inf)
        e = np.exp(shifted)
        out = e / e.sum()
    else:
        shifted = arr - arr.max(axis=1, keepdims=True, initial=-np.inf)
        e = np.exp(shifted)
        out = e / e.sum(axis=1, keepdims=True)
    return Tensor(out.astype(np.float32), x.shape)


# ---------------------------------------------------------------------------
# Derivatives (elementwise kinds only)
# ---------------------------------------------------------------------------
def linear_prime(x: Tensor) -> Tensor:
    return Tensor.one(x.shape)


def relu_prime(x: Tensor) -> Tensor:
    return x.relu_prime()


def leaky_relu_prime(x: Tensor) -> Tensor:
    return x.map(lambda v: 1.0 if v > 0.0 else LEAKY_RELU_SLOPE)


def sigmoid_prime(x: Tensor) -> Tensor:
    s = x.sigmoid()
    return s.mul(Tensor.one(s.shape).sub(s))


def tanh_prime(x: Tensor) -> Tensor:
    t = x.tanh()
    return Tensor.one(t.shape).sub(t.mul(t))


def _softmax_backward(x: Tensor, grad_out: Tensor) -> Tensor:
    """
    Jacobian-vector product of softmax.

    For s = softmax(x) and upstream gradient g (per vector / row):

        grad_in = s * (g - sum(g * s))
    """
    if x.shape != grad_out.shape:
        raise ShapeMismatchError("softmax_backward", x.shape, grad_out.shape)
    s = softmax(x).to_numpy()
    g = grad_out.to_numpy()
    if s.ndim == 1:
        dot = np.sum(g * s)
    else:
        dot = np.sum(g * s, axis=1, keepdims=True)
    return Tensor((s * (g - dot)).astype(np.float32), x.shape)


@dataclass(frozen=True)
class ActivationSpec:
    """
    Behavior bundle for one activation kind.

    Attributes
    ----------
    forward : Callable[[Tensor], Tensor]
        The activation function.
    derivative : Optional[Callable[[Tensor], Tensor]]
        Elementwise derivative `f'(x)`, or None when the activation is not
        elementwise (softmax).
    backward : Callable[[Tensor, Tensor], Tensor]
        Maps `(x, grad_out)` to the gradient with respect to `x`.
    """

    forward: Callable[[Tensor], Tensor]
    derivative: Optional[Callable[[Tensor], Tensor]]
    backward: Callable[[Tensor, Tensor], Tensor]


def _elementwise(
    forward: Callable[[Tensor], Tensor], derivative: Callable[[Tensor], Tensor]
) -> ActivationSpec:
    return ActivationSpec(
        forward=forward,
        derivative=derivative,
        backward=lambda x, grad_out: grad_out.mul(derivative(x)),
    )


ACTIVATIONS: Dict[ActivationKind, ActivationSpec] = {
    ActivationKind.LINEAR: _elementwise(linear, linear_prime),
    ActivationKind.RELU: _elementwise(relu, relu_prime),
    ActivationKind.LEAKY_RELU: _elementwise(leaky_relu, leaky_relu_prime),
    ActivationKind.SIGMOID: _elementwise(sigmoid, sigmoid_prime),
    ActivationKind.TANH: _elementwise(tanh, tanh_prime),
    ActivationKind.SOFTMAX: ActivationSpec(
        forward=softmax, derivative=None, backward=_softmax_backward
    ),
}


def get_activation(kind: ActivationKind) -> ActivationSpec:
    """
    Resolve an activation kind to its behavior bundle.

    Raises
    ------
    TypeError
        If `kind` is not an `ActivationKind`.
    """
    if not isinstance(kind, ActivationKind):
        raise TypeError(f"Expected an ActivationKind, got {type(kind)}")
    return ACTIVATIONS[kind]


def activate(kind: ActivationKind, x: Tensor) -> Tensor:
    """Apply the activation `kind` to `x`."""
    return get_activation(kind).forward(x)


def activation_derivative(kind: ActivationKind, x: Tensor) -> Tensor:
    """
    Elementwise derivative of `kind` evaluated at `x`.

    Raises
    ------
    ValueError
        For softmax, whose derivative is a Jacobian rather than elementwise.
    """
    spec = get_activation(kind)
    if spec.derivative is None:
        raise ValueError(f"{kind.value} has no elementwise derivative")
    return spec.derivative(x)


def activation_backward(kind: ActivationKind, x: Tensor, grad_out: Tensor) -> Tensor:
    """Gradient with respect to the pre-activation input `x`."""
    return get_activation(kind).backward(x, grad_out)
