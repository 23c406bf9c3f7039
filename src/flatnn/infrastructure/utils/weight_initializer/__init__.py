"""
Weight initialization public API.

Importing this package registers the built-in initializers (uniform,
symmetric_uniform, xavier_uniform, kaiming_uniform, zeros, ones) into the
`WeightInitializer` registry via import side effects.
"""

from ._uniform import *
from ._xavier import *
from ._kaiming import *
from ._constants import *
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
]
