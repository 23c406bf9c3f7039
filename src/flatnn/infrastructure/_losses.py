"""
Loss functions and their gradients for flatnn.

Every loss takes `(pred, target)` tensors of identical shape and returns a
`(1,)` tensor; every gradient returns a tensor shaped like `pred` holding
dL/dpred. Shapes are checked up front and a mismatch raises
`ShapeMismatchError`.

Currently implemented losses:
- MSE  : mean((target - pred)^2),                 grad 2/n (pred - target)
- L1   : mean(|pred - target|),                   grad sign(pred - target)/n
- BCE  : -mean(t log(p+e) + (1-t) log(1-p+e)),    grad (p - t)/(p(1 - p) + e)
- CCE  : -sum(t log(p+e)),                        grad p - t
- BCE_SIGMOID : BCE, with the fused delta         grad (p - t)/n

Fused gradients
---------------
`cce_loss_gradient` and `bce_sigmoid_delta` are the gradients with respect
to the *pre-activation* input of a softmax / sigmoid output layer. They are
only valid when the network skips that output activation's own derivative,
which `NetworkBuilder.build` arranges for `LossKind.CCE` and
`LossKind.BCE_SIGMOID`.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._kinds import ActivationKind, LossKind
from .tensor._tensor import Tensor

EPSILON = 1e-15

LossFn = Callable[[Tensor, Tensor], Tensor]


def _check_shapes(op: str, pred: Tensor, target: Tensor) -> int:
    """
    Validate matching shapes and return the element count.
    """
    if pred.shape != target.shape:
        raise ShapeMismatchError(op, pred.shape, target.shape)
    return pred.numel


def _eps(shape) -> Tensor:
    return Tensor.full(shape, EPSILON)


# ---------------------------------------------------------------------------
# Mean squared error
# ---------------------------------------------------------------------------
def mse_loss(pred: Tensor, target: Tensor) -> Tensor:
    """
    Mean squared error over all elements.

    Returns
    -------
    Tensor
        `(1,)` tensor holding `mean((target - pred)^2)`.
    """
    n = _check_shapes("mse_loss", pred, target)
    return target.sub(pred).powf(2.0).sum().scale(1.0 / n)


def mse_loss_gradient(pred: Tensor, target: Tensor) -> Tensor:
    """Gradient of `mse_loss`: `2/n * (pred - target)`."""
    n = _check_shapes("mse_loss_gradient", pred, target)
    return pred.sub(target).scale(2.0 / n)


# ---------------------------------------------------------------------------
# Mean absolute error
# ---------------------------------------------------------------------------
def l1_loss(pred: Tensor, target: Tensor) -> Tensor:
    """Mean absolute error over all elements, as a `(1,)` tensor."""
    n = _check_shapes("l1_loss", pred, target)
    return pred.sub(target).abs().sum().scale(1.0 / n)


def l1_loss_gradient(pred: Tensor, target: Tensor) -> Tensor:
    """
    Gradient of `l1_loss`: `sign(pred - target) / n`.

    The subgradient at `pred == target` is taken as 0.
    """
    n = _check_shapes("l1_loss_gradient", pred, target)
    return pred.sub(target).map(lambda v: float(np.sign(v))).scale(1.0 / n)


# ---------------------------------------------------------------------------
# Binary cross-entropy
# ---------------------------------------------------------------------------
def bce_loss(pred: Tensor, target: Tensor) -> Tensor:
    """
    Binary cross-entropy on probabilities.

    Computes `-mean(t log(p + e) + (1 - t) log(1 - p + e))` with `e = 1e-15`.
    """
    n = _check_shapes("bce_loss", pred, target)
    ones = Tensor.one(pred.shape)
    eps = _eps(pred.shape)

    pos = target.mul(pred.add(eps).log())
    neg = ones.sub(target).mul(ones.sub(pred).add(eps).log())
    return pos.add(neg).sum().scale(-1.0 / n)


def bce_loss_gradient(pred: Tensor, target: Tensor) -> Tensor:
    """
    Gradient of BCE with respect to the probabilities:
    `(pred - target) / (pred (1 - pred) + e)`.
    """
    _check_shapes("bce_loss_gradient", pred, target)
    ones = Tensor.one(pred.shape)
    denom = pred.mul(ones.sub(pred)).add(_eps(pred.shape))
    return pred.sub(target).div(denom)


def bce_sigmoid_delta(pred: Tensor, target: Tensor) -> Tensor:
    """
    Fused sigmoid + BCE gradient with respect to the sigmoid's input.

    Chaining `bce_loss_gradient` through the sigmoid derivative simplifies to
    `(pred - target) / n`, which avoids dividing by `p (1 - p)` when the
    output saturates.
    """
    n = _check_shapes("bce_sigmoid_delta", pred, target)
    return pred.sub(target).scale(1.0 / n)


# ---------------------------------------------------------------------------
# Categorical cross-entropy
# ---------------------------------------------------------------------------
def cce_loss(pred: Tensor, target: Tensor) -> Tensor:
    """
    Categorical cross-entropy: `-sum(target * log(pred + e))`.

    The sum runs over every element, i.e. over all classes of all samples.
    """
    _check_shapes("cce_loss", pred, target)
    return target.mul(pred.add(_eps(pred.shape)).log()).sum().scale(-1.0)


def cce_loss_gradient(pred: Tensor, target: Tensor) -> Tensor:
    """
    Fused softmax + CCE gradient with respect to the softmax input:
    `pred - target`.
    """
    _check_shapes("cce_loss_gradient", pred, target)
    return pred.sub(target)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LossSpec:
    """
    Behavior bundle for one loss kind.

    Attributes
    ----------
    loss : LossFn
        Scalar loss `(pred, target) -> (1,) tensor`.
    gradient : LossFn
        Gradient fed into the backward sweep.
    fused_activation : Optional[ActivationKind]
        Output activation whose derivative is already folded into `gradient`,
        or None when the gradient is taken with respect to the prediction.
    """

    loss: LossFn
    gradient: LossFn
    fused_activation: Optional[ActivationKind] = None


LOSSES: Dict[LossKind, LossSpec] = {
    LossKind.MSE: LossSpec(mse_loss, mse_loss_gradient),
    LossKind.L1: LossSpec(l1_loss, l1_loss_gradient),
    LossKind.BCE: LossSpec(bce_loss, bce_loss_gradient),
    LossKind.CCE: LossSpec(cce_loss, cce_loss_gradient, ActivationKind.SOFTMAX),
    LossKind.BCE_SIGMOID: LossSpec(
        bce_loss, bce_sigmoid_delta, ActivationKind.SIGMOID
    ),
}


def get_loss(kind: LossKind) -> LossSpec:
    """
    Resolve a loss kind to its behavior bundle.

    Raises
    ------
    TypeError
        If `kind` is not a `LossKind`.
    """
    if not isinstance(kind, LossKind):
        raise TypeError(f"Expected a LossKind, got {type(kind)}")
    return LOSSES[kind]
