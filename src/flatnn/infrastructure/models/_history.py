"""
Per-epoch training record returned by `Network.fit`.

`History` knows nothing about tensors or layers; the training loop pushes
plain floats into it after every epoch.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union


Number = Union[int, float]


@dataclass
class History:
    """
    Metrics recorded by one `fit` call.

    Attributes
    ----------
    history : Dict[str, List[float]]
        Metric name to its values, one per recorded epoch that reported it.
    epoch : List[int]
        Lifetime epoch index of each recorded epoch. A network trained in
        several `fit` calls continues counting where the previous call
        stopped.

    Notes
    -----
    When the network has no reporting loss, epochs are still appended to
    `epoch` but `history` stays empty.
    """

    history: Dict[str, List[float]] = field(default_factory=dict)
    epoch: List[int] = field(default_factory=list)

    def append_epoch(self, epoch_idx: int, logs: Mapping[str, Number]) -> None:
        """
        Record one finished epoch and its metric values (stored as floats).
        """
        self.epoch.append(int(epoch_idx))
        for name, value in logs.items():
            self.history.setdefault(name, []).append(float(value))

    def last(self) -> Dict[str, float]:
        """Latest value of every metric that has at least one entry."""
        return {name: vals[-1] for name, vals in self.history.items() if vals}

    def __len__(self) -> int:
        return len(self.epoch)
