"""
Linear (fully-connected) layer implementation.

This module provides `Linear`, a trainable layer performing an affine
projection and updating its own parameters by gradient descent during
`backward`:

    y = x @ W + b

Shape conventions
-----------------
- x : (batch, in_features) or (in_features,)
- W : (in_features, out_features)
- b : (out_features,)  (omitted if bias=False)
- y : (batch, out_features) or (out_features,)

Bias-trick variant
------------------
With `bias_trick=True` the layer holds no separate bias. Instead every input
row gets a constant 1.0 appended and `W` gains a matching trailing row:

- W : (in_features + 1, out_features)

The cached input is the augmented one, and the returned input gradient drops
the column belonging to the constant so it matches the caller's input.

Backward
--------
For `grad_out = dL/dy` and the cached input `x`, using the pre-update `W`:

1. dL/dx = grad_out @ W^T               (returned)
2. dL/dW = x^T @ grad_out
3. W    -= learning_rate * dL/dW
4. b    -= learning_rate * dL/db,  dL/db = sum(grad_out, axis=0)

For a single rank-1 sample, dL/dW is the outer product of `x` and
`grad_out` and dL/db is `grad_out` itself.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

import numpy as np

from ..domain._errors import InvalidRankError, ShapeMismatchError
from ..domain._random import IRandomSource
from ._layer import Layer
from .tensor._tensor import Tensor
from .utils.weight_initializer import WeightInitializer


def _append_ones(x: Tensor) -> Tensor:
    """
    Append a constant 1.0 to a vector, or a column of ones to a matrix.
    """
    arr = x.to_numpy()
    if arr.ndim == 1:
        return Tensor.from_numpy(np.append(arr, np.float32(1.0)))
    ones = np.ones((arr.shape[0], 1), dtype=np.float32)
    return Tensor.from_numpy(np.hstack([arr, ones]))


def _drop_last_feature(x: Tensor) -> Tensor:
    """
    Inverse of `_append_ones`: remove the trailing element / column.
    """
    arr = x.to_numpy()
    if arr.ndim == 1:
        return Tensor.from_numpy(arr[:-1])
    return Tensor(np.ascontiguousarray(arr[:, :-1]), (arr.shape[0], arr.shape[1] - 1))


class Linear(Layer):
    """
    Fully-connected layer: y = x @ W + b.

    Parameters
    ----------
    in_features : int
        Number of input features per example.
    out_features : int
        Number of output features per example.
    rng : Optional[IRandomSource], optional
        Random source used once, at construction, to draw the weights and then
        the bias in row-major order. Any object with `random() -> float in
        [0, 1)` works (`random.Random`, `numpy.random.Generator`). Defaults to
        a fresh `numpy.random.default_rng()`.
    bias : bool, optional
        If True, include a separate learnable bias vector. Defaults to True.
        Ignored when `bias_trick` is True.
    bias_trick : bool, optional
        If True, fold the bias into the weight matrix via an appended
        constant-1 input column. Defaults to False.
    weight_init : str, optional
        Name of a registered `WeightInitializer` for the weights.
        Defaults to "uniform" (raw [0, 1) draws).
    bias_init : str, optional
        Name of a registered `WeightInitializer` for the bias.
        Defaults to "uniform".

    Raises
    ------
    ValueError
        If `in_features` or `out_features` is not a positive integer, or an
        initializer name is unknown.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        rng: Optional[IRandomSource] = None,
        *,
        bias: bool = True,
        bias_trick: bool = False,
        weight_init: str = "uniform",
        bias_init: str = "uniform",
    ) -> None:
        super().__init__()

        for name, value in (("in_features", in_features), ("out_features", out_features)):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        if rng is None:
            rng = np.random.default_rng()

        self.in_features = in_features
        self.out_features = out_features
        self.bias_trick = bool(bias_trick)
        self.weight_init = weight_init
        self.bias_init = bias_init

        rows = in_features + 1 if self.bias_trick else in_features
        self._weight = WeightInitializer(weight_init)(
            Tensor.zeros((rows, out_features)), rng
        )

        self._bias: Optional[Tensor] = None
        if bias and not self.bias_trick:
            self._bias = WeightInitializer(bias_init)(Tensor.zeros((out_features,)), rng)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def weight(self) -> Tensor:
        """Weight matrix, shape (in_features[+1], out_features)."""
        return self._weight

    @property
    def bias(self) -> Optional[Tensor]:
        """Bias vector, shape (out_features,), or None."""
        return self._bias

    def named_parameters(self) -> Iterator[Tuple[str, Tensor]]:
        yield "weight", self._weight
        if self._bias is not None:
            yield "bias", self._bias

    def set_weight(self, weight: Tensor) -> None:
        """
        Replace the weight values.

        Raises
        ------
        ShapeMismatchError
            If `weight` does not match the current weight shape.
        """
        if weight.shape != self._weight.shape:
            raise ShapeMismatchError("set_weight", self._weight.shape, weight.shape)
        self._weight = weight.clone()

    def set_bias(self, bias: Tensor) -> None:
        """
        Replace the bias values.

        Raises
        ------
        ValueError
            If the layer has no separate bias.
        ShapeMismatchError
            If `bias` does not match the current bias shape.
        """
        if self._bias is None:
            raise ValueError("This Linear layer has no separate bias")
        if bias.shape != self._bias.shape:
            raise ShapeMismatchError("set_bias", self._bias.shape, bias.shape)
        self._bias = bias.clone()

    def get_config(self) -> Dict[str, Any]:
        return {
            "in_features": self.in_features,
            "out_features": self.out_features,
            "bias": self._bias is not None,
            "bias_trick": self.bias_trick,
            "weight_init": self.weight_init,
            "bias_init": self.bias_init,
        }

    # ------------------------------------------------------------------
    # Forward / backward
    # ------------------------------------------------------------------
    def _affine(self, x: Tensor) -> Tensor:
        out = x.matmul(self._weight)
        if self._bias is None:
            return out
        if out.ndim == 1:
            return out.add(self._bias)
        # ones(batch, 1) @ b(1, out) repeats the bias on every row
        rows = out.shape[0]
        bias_rows = Tensor.one((rows, 1)).matmul(
            self._bias.reshape((1, self.out_features))
        )
        return out.add(bias_rows)

    def forward(self, x: Tensor) -> Tensor:
        """
        Compute `x @ W + b` and cache `x` for the backward pass.

        Parameters
        ----------
        x : Tensor
            Input of shape (batch, in_features) or (in_features,).

        Returns
        -------
        Tensor
            Output of shape (batch, out_features) or (out_features,).

        Raises
        ------
        InvalidRankError
            If `x` is not rank 1 or 2.
        ShapeMismatchError
            If the trailing dimension of `x` is not `in_features`.
        """
        if not isinstance(x, Tensor):
            raise TypeError(f"Linear.forward expects a Tensor, got {type(x)}")
        if x.ndim not in (1, 2):
            raise InvalidRankError("linear_forward", x.shape)
        if x.shape[-1] != self.in_features:
            raise ShapeMismatchError("linear_forward", x.shape, self._weight.shape)

        if self.bias_trick:
            x = _append_ones(x)

        self._cache_input(x)
        return self._affine(self._cached_input)

    def backward(self, grad_out: Tensor, learning_rate: float) -> Tensor:
        """
        Backpropagate `grad_out` and apply one gradient-descent step.

        Parameters
        ----------
        grad_out : Tensor
            dL/dy, shaped like the most recent forward output.
        learning_rate : float
            Step size for the weight and bias updates.

        Returns
        -------
        Tensor
            dL/dx, computed with the weights as they were before the update.

        Raises
        ------
        RuntimeError
            If called before any `forward`.
        ShapeMismatchError
            If `grad_out` is incompatible with the cached input or weights.
        """
        x = self._require_cached_input()

        input_grad = grad_out.matmul(self._weight.transpose())

        if x.ndim == 1:
            rows = x.shape[0]
            weight_grad = x.reshape((rows, 1)).matmul(
                grad_out.reshape((1, grad_out.numel))
            )
        else:
            weight_grad = x.transpose().matmul(grad_out)

        bias_grad = None
        if self._bias is not None:
            bias_grad = grad_out if grad_out.ndim == 1 else grad_out.sum(axis=0)
            if bias_grad.shape != self._bias.shape:
                raise ShapeMismatchError("linear_backward", self._bias.shape, bias_grad.shape)

        self._weight.sub_(weight_grad.scale(learning_rate))
        if bias_grad is not None:
            self._bias.sub_(bias_grad.scale(learning_rate))

        if self.bias_trick:
            input_grad = _drop_last_feature(input_grad)
        return input_grad

    def last_output(self) -> Tensor:
        """
        Recompute the pre-activation output for the most recently cached input.

        Raises
        ------
        RuntimeError
            If no forward call has happened yet.
        """
        return self._affine(self._require_cached_input())
