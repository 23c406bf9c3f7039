"""
Closed tag types for the activation and loss registries.

Activations and losses are addressed by enumerated kinds rather than by
string keys, so that every supported behavior is known up front and lookups
cannot fail for a misspelled name.
"""

from enum import Enum


class ActivationKind(Enum):
    """
    Supported activation functions.
    """

    LINEAR = "linear"
    RELU = "relu"
    LEAKY_RELU = "leaky_relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    SOFTMAX = "softmax"


class LossKind(Enum):
    """
    Supported loss functions.

    Notes
    -----
    `BCE_SIGMOID` is binary cross-entropy whose gradient is the fused
    sigmoid + BCE delta `(pred - target) / n`. `CCE` likewise uses the fused
    softmax shortcut `pred - target` as its gradient.
    """

    MSE = "mse"
    L1 = "l1"
    BCE = "bce"
    CCE = "cce"
    BCE_SIGMOID = "bce_sigmoid"
