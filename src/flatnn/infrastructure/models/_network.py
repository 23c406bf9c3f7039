"""
Network container and builder.

This module defines `Network`, an ordered stack of layers trained by
full-batch gradient descent, and `NetworkBuilder`, the fluent object used to
assemble one:

    net = (
        NetworkBuilder()
        .add_layer(Linear(2, 16, rng))
        .add_layer(Activation(ActivationKind.RELU))
        .add_layer(Linear(16, 1, rng))
        .add_layer(Activation(ActivationKind.SIGMOID))
        .loss(LossKind.BCE_SIGMOID)
        .build()
    )
    history = net.fit(x, y, epochs=5000, learning_rate=0.1)

Training loop
-------------
One epoch is:

1. `output = x` folded through `layer.forward` in order
2. `grad = loss_gradient(output, y)`
3. `grad` folded through `layer.backward(grad, learning_rate)` in reverse

Each layer applies its own parameter update inside `backward`, so an error
raised midway through step 3 leaves the updates of the layers already
visited in place.

Notes
-----
- The layer sequence is fixed once the network is built.
- `fit` is resumable: epoch indices recorded into `History` continue from
  `epochs_trained`.
"""

from __future__ import annotations

import warnings
from typing import Callable, Iterator, List, Optional, Tuple

from typing_extensions import Self

from ...domain._errors import MissingConfigurationError
from ...domain._kinds import LossKind
from ...domain._layer import ILayer
from .._activations import Activation
from .._losses import get_loss
from ..tensor._tensor import Tensor
from ._history import History

LossFn = Callable[[Tensor, Tensor], Tensor]


class Network:
    """
    Ordered stack of layers with a configured loss gradient.

    Instances are normally created by `NetworkBuilder.build()`.

    Parameters
    ----------
    layers : Tuple[ILayer, ...]
        Layers applied in order during `forward`.
    loss_gradient : LossFn
        Maps `(prediction, target)` to the gradient fed to the last layer.
    loss_fn : Optional[LossFn], optional
        Scalar loss used for reporting (`fit` history, `evaluate`). If None,
        training runs without recording a loss.
    """

    def __init__(
        self,
        layers: Tuple[ILayer, ...],
        loss_gradient: LossFn,
        loss_fn: Optional[LossFn] = None,
    ) -> None:
        self._layers: Tuple[ILayer, ...] = tuple(layers)
        self._loss_gradient = loss_gradient
        self._loss_fn = loss_fn
        self._epochs_trained = 0

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[ILayer]:
        return iter(self._layers)

    def __getitem__(self, idx: int) -> ILayer:
        return self._layers[idx]

    def layers(self) -> Tuple[ILayer, ...]:
        """Return the layers in forward order."""
        return self._layers

    @property
    def epochs_trained(self) -> int:
        """Number of epochs completed over the lifetime of the network."""
        return self._epochs_trained

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------
    def forward(self, x: Tensor) -> Tensor:
        """
        Fold `x` through every layer in order.

        An empty network returns `x` unchanged.
        """
        out = x
        for layer in self._layers:
            out = layer.forward(out)
        return out

    def __call__(self, x: Tensor) -> Tensor:
        return self.forward(x)

    def predict(self, x: Tensor) -> Tensor:
        """Alias of `forward` for inference-style call sites."""
        return self.forward(x)

    def evaluate(self, x: Tensor, y: Tensor) -> float:
        """
        Compute the configured loss of the network's prediction for `x`.

        Raises
        ------
        MissingConfigurationError
            If the network was built without a loss function.
        """
        if self._loss_fn is None:
            raise MissingConfigurationError("loss")
        return self._loss_fn(self.forward(x), y).item()

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def _backward(self, grad: Tensor, learning_rate: float) -> Tensor:
        for layer in reversed(self._layers):
            grad = layer.backward(grad, learning_rate)
        return grad

    def train_epoch(self, x: Tensor, y: Tensor, learning_rate: float) -> Optional[float]:
        """
        Run one full-batch epoch: forward, loss gradient, reverse backward.

        Parameters
        ----------
        x : Tensor
            Input batch.
        y : Tensor
            Targets, shaped like the network output.
        learning_rate : float
            Step size passed to every layer's `backward`.

        Returns
        -------
        Optional[float]
            Loss of the forward output (before this epoch's update), or None
            if no loss function is configured.
        """
        output = self.forward(x)
        loss = None if self._loss_fn is None else self._loss_fn(output, y).item()
        self._backward(self._loss_gradient(output, y), learning_rate)
        self._epochs_trained += 1
        return loss

    def fit(
        self,
        x: Tensor,
        y: Tensor,
        epochs: int,
        learning_rate: float,
        *,
        verbose: int = 0,
    ) -> History:
        """
        Train the network by full-batch gradient descent.

        Parameters
        ----------
        x : Tensor
            Input batch, one sample per row (or a single rank-1 sample).
        y : Tensor
            Targets, shaped like the network output.
        epochs : int
            Number of epochs to run. Zero is a no-op.
        learning_rate : float
            Step size passed to every layer's `backward`.
        verbose : int, optional
            If positive, print a progress line every `verbose` epochs and
            after the last one. Defaults to 0 (silent).

        Returns
        -------
        History
            Per-epoch losses, indexed from `epochs_trained` at call time.

        Raises
        ------
        ValueError
            If `epochs` or `verbose` is negative.
        """
        if epochs < 0:
            raise ValueError("epochs must be >= 0")
        if verbose < 0:
            raise ValueError("verbose must be >= 0")

        hist = History()
        for i in range(epochs):
            loss = self.train_epoch(x, y, learning_rate)
            logs = {} if loss is None else {"loss": loss}
            hist.append_epoch(self._epochs_trained - 1, logs)

            if verbose and ((i + 1) % verbose == 0 or i + 1 == epochs):
                parts = [f"Epoch {i + 1}/{epochs}"]
                for k, v in logs.items():
                    parts.append(f"{k}: {v:.6f}")
                print(" - ".join(parts))

        return hist

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def summary(self) -> str:
        """
        Generate a textual summary listing each layer and its settings.
        """
        lines = [f"{type(self).__name__}("]
        total = 0
        for i, layer in enumerate(self._layers):
            lines.append(f"  ({i}): {layer!r}")
            params = getattr(layer, "parameters", None)
            if callable(params):
                total += sum(p.numel for p in params())
        lines.append(f")  # trainable values: {total}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.summary()


class NetworkBuilder:
    """
    Fluent builder for `Network`.

    A loss gradient is mandatory, either from a registered `LossKind` via
    `loss(kind)` or from a custom callable via `loss_gradient(fn)`.
    """

    def __init__(self) -> None:
        self._layers: List[ILayer] = []
        self._loss_gradient: Optional[LossFn] = None
        self._loss_fn: Optional[LossFn] = None
        self._loss_kind: Optional[LossKind] = None

    def add_layer(self, layer: ILayer) -> Self:
        """
        Append a layer.

        Raises
        ------
        TypeError
            If `layer` does not implement `forward` and `backward`.
        """
        if not isinstance(layer, ILayer):
            raise TypeError(f"add_layer expects a layer, got {type(layer)}")
        self._layers.append(layer)
        return self

    def loss(self, kind: LossKind) -> Self:
        """
        Use a registered loss for both reporting and the gradient.
        """
        spec = get_loss(kind)
        self._loss_kind = kind
        self._loss_fn = spec.loss
        self._loss_gradient = spec.gradient
        return self

    def loss_gradient(self, fn: LossFn, loss_fn: Optional[LossFn] = None) -> Self:
        """
        Use a custom gradient callable, and optionally a loss for reporting.

        Raises
        ------
        TypeError
            If `fn` (or a given `loss_fn`) is not callable.
        """
        if not callable(fn):
            raise TypeError("loss_gradient expects a callable")
        if loss_fn is not None and not callable(loss_fn):
            raise TypeError("loss_fn must be callable")
        self._loss_kind = None
        self._loss_gradient = fn
        self._loss_fn = loss_fn
        return self

    def build(self) -> Network:
        """
        Finalize the network.

        If the selected loss kind fuses its gradient with an output
        activation, a trailing `Activation` of that kind is switched to
        gradient passthrough.

        Raises
        ------
        MissingConfigurationError
            If no loss gradient has been configured.

        Warns
        -----
        RuntimeWarning
            If the loss kind expects a fused output activation that the last
            layer does not provide.
        """
        if self._loss_gradient is None:
            raise MissingConfigurationError("loss_gradient")

        if self._loss_kind is not None:
            fused = get_loss(self._loss_kind).fused_activation
            if fused is not None:
                last = self._layers[-1] if self._layers else None
                if isinstance(last, Activation) and last.kind is fused:
                    last.passthrough_gradient = True
                else:
                    warnings.warn(
                        f"{self._loss_kind.value} loss expects a trailing "
                        f"{fused.value} activation; its gradient will be "
                        "applied to the raw network output.",
                        RuntimeWarning,
                        stacklevel=2,
                    )

        return Network(tuple(self._layers), self._loss_gradient, self._loss_fn)
