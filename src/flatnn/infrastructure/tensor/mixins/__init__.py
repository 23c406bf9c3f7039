"""
Tensor operation mixins.

Each mixin groups one family of operations (arithmetic, unary maps, memory
and shape, reductions, matmul). The concrete `Tensor` class composes them and
provides the shared helpers they rely on (`_wrap`, `_as_tensor`,
`_require_valid_rank`).
"""

from ._arithmetic import TensorMixinArithmetic
from ._unary import TensorMixinUnary
from ._memory import TensorMixinMemory
from ._reduction import TensorMixinReduction
from ._matmul import TensorMixinMatmul

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinUnary.__name__,
    TensorMixinMemory.__name__,
    TensorMixinReduction.__name__,
    TensorMixinMatmul.__name__,
]
