"""
Tensor- and network-related exceptions for flatnn.

This module defines the error taxonomy shared by the tensor algebra, the
layers and the network container:

- `ShapeMismatchError`: operands are structurally incompatible (elementwise
  shapes differ, matmul inner dimensions disagree, a layer receives an input
  whose trailing dimension does not match its weights).
- `InvalidRankError`: an operation received a tensor outside rank 1-2, or an
  unsupported reduction axis was requested.
- `InconsistentDataError`: a flat buffer's length does not match the element
  count of the declared shape.
- `MissingConfigurationError`: a `NetworkBuilder` reached `build()` without
  a required setting.

All tensor errors derive from `TensorError`, which is a `ValueError`, so
callers can either catch the precise kind or treat any of them as a bad
value. Errors are raised at the point of detection and propagated unchanged
by layers and networks.
"""

from typing import Sequence


class TensorError(ValueError):
    """
    Base class for errors raised by tensor operations.
    """


class ShapeMismatchError(TensorError):
    """
    Raised when two operands have structurally incompatible shapes.

    Attributes
    ----------
    op : str
        Name of the operation that was attempted (e.g., "add", "matmul").
    lhs : tuple[int, ...]
        Shape of the left-hand operand.
    rhs : tuple[int, ...]
        Shape of the right-hand operand.
    """

    def __init__(self, op: str, lhs: Sequence[int], rhs: Sequence[int]) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        lhs : Sequence[int]
            Shape of the left-hand operand.
        rhs : Sequence[int]
            Shape of the right-hand operand.
        """
        self.op = op
        self.lhs = tuple(lhs)
        self.rhs = tuple(rhs)
        super().__init__(f"{op}: shape mismatch {self.lhs} vs {self.rhs}.")


class InvalidRankError(TensorError):
    """
    Raised when an operation receives a tensor of unsupported rank, or an
    unsupported reduction axis.

    Attributes
    ----------
    op : str
        Name of the operation that was attempted.
    shape : tuple[int, ...]
        Shape of the offending tensor.
    """

    def __init__(self, op: str, shape: Sequence[int], detail: str = "") -> None:
        self.op = op
        self.shape = tuple(shape)
        msg = f"{op}: only 1D and 2D tensors are supported, got shape={self.shape}."
        if detail:
            msg = f"{op}: {detail} (shape={self.shape})."
        super().__init__(msg)


class InconsistentDataError(TensorError):
    """
    Raised when a flat data buffer does not match the declared shape.

    Attributes
    ----------
    length : int
        Number of elements supplied.
    shape : tuple[int, ...]
        Declared tensor shape.
    """

    def __init__(self, length: int, shape: Sequence[int]) -> None:
        self.length = int(length)
        self.shape = tuple(shape)
        super().__init__(
            f"Data length {self.length} does not match shape {self.shape}."
        )


class MissingConfigurationError(RuntimeError):
    """
    Raised when a builder is finalized without a required setting.

    Attributes
    ----------
    field : str
        Name of the missing configuration entry (e.g., "loss_gradient").
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required configuration: {field}.")
