"""
Random source interface.

Layers draw their initial parameters from an injected random source instead
of a hard-coded generator, so determinism is the caller's choice. Both
`random.Random` and `numpy.random.Generator` satisfy this protocol.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IRandomSource(Protocol):
    """
    Object producing pseudo-random floats in the half-open interval [0, 1).
    """

    def random(self) -> float:
        """
        Return the next pseudo-random float in [0, 1).
        """
        ...
