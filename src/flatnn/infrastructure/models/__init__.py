from ._history import History
from ._network import Network, NetworkBuilder

__all__ = [
    History.__name__,
    Network.__name__,
    NetworkBuilder.__name__,
]
