"""
Training loop configuration.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TrainingConfig:
    """
    Options of `fit()`.

    Attributes
    ----------
    epochs : int
        Number of passes over the data source. Must be >= 1.
    skip_invalid_samples : bool
        If True, examples whose graph cannot be built (malformed label or
        mismatched shapes) are skipped with a warning instead of aborting
        training.
    log_every : int
        Emit a progress log line every `log_every` examples within an epoch.
        0 disables per-example progress logging.
    """

    epochs: int = 1
    skip_invalid_samples: bool = False
    log_every: int = 0

    def __post_init__(self) -> None:
        if int(self.epochs) < 1:
            raise ValueError(f"epochs must be >= 1, got {self.epochs}")
        if int(self.log_every) < 0:
            raise ValueError(f"log_every must be >= 0, got {self.log_every}")
