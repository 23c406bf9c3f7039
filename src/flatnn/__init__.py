"""
flatnn: a small neural-network engine on flat float32 buffers.

The public API is re-exported here; implementation modules live under
`flatnn.domain` (interfaces, kinds, errors) and `flatnn.infrastructure`
(tensor, layers, registries, network).
"""

from .domain._errors import (
    InconsistentDataError,
    InvalidRankError,
    MissingConfigurationError,
    ShapeMismatchError,
    TensorError,
)
from .domain._kinds import ActivationKind, LossKind
from .infrastructure._activation_functions import (
    activate,
    activation_backward,
    activation_derivative,
)
from .infrastructure._activations import Activation
from .infrastructure._linear import Linear
from .infrastructure._losses import (
    bce_loss,
    bce_loss_gradient,
    bce_sigmoid_delta,
    cce_loss,
    cce_loss_gradient,
    get_loss,
    l1_loss,
    l1_loss_gradient,
    mse_loss,
    mse_loss_gradient,
)
from .infrastructure.models import History, Network, NetworkBuilder
from .infrastructure.tensor import Tensor
from .infrastructure.utils.weight_initializer import WeightInitializer

__all__ = [
    "Activation",
    "ActivationKind",
    "History",
    "InconsistentDataError",
    "InvalidRankError",
    "Linear",
    "LossKind",
    "MissingConfigurationError",
    "Network",
    "NetworkBuilder",
    "ShapeMismatchError",
    "Tensor",
    "TensorError",
    "WeightInitializer",
    "activate",
    "activation_backward",
    "activation_derivative",
    "bce_loss",
    "bce_loss_gradient",
    "bce_sigmoid_delta",
    "cce_loss",
    "cce_loss_gradient",
    "get_loss",
    "l1_loss",
    "l1_loss_gradient",
    "mse_loss",
    "mse_loss_gradient",
]
