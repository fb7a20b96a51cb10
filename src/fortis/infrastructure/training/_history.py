"""
Training history container.

`History` records aggregated metrics for every completed epoch, in the manner
of Keras' `History` object. It is returned by `fit()`.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union

Number = Union[int, float]


@dataclass
class History:
    """
    Per-epoch training metrics.

    Attributes
    ----------
    history : Dict[str, List[float]]
        Mapping from metric name (``"loss"``, ``"accuracy"``, ``"skipped"``)
        to its per-epoch values, ordered by epoch.
    epoch : List[int]
        Zero-based epoch indices matching the entries of `history`.
    """

    history: Dict[str, List[float]] = field(default_factory=dict)
    epoch: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.epoch)

    def append_epoch(self, epoch_idx: int, logs: Mapping[str, Number]) -> None:
        """
        Append the aggregated metrics of a completed epoch.

        Values are coerced to `float` before storage.
        """
        self.epoch.append(int(epoch_idx))
        for k, v in logs.items():
            self.history.setdefault(k, []).append(float(v))

    def last(self) -> Dict[str, float]:
        """
        Return metrics from the most recent epoch.
        """
        return {k: float(vs[-1]) for k, vs in self.history.items() if vs}
