"""
Plain gradient-descent trainer.

This module provides the reference trainer for Fortis. It updates every
parameter of a `Model` in place using the gradient buffer written by the last
backward pass and a fixed learning rate, optionally applying classical L2
regularization (coupled weight decay).

Design notes
------------
- The trainer never touches graphs. It only reads `Parameter.grad` and
  mutates `Parameter` values, between graph evaluations.
- Gradient buffers use overwrite semantics, so callers must invoke
  `zero_gradients()` before the next backward pass; otherwise parameters not
  reached by that pass would be updated again with a stale gradient.
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import ParameterGradientSizeMismatchError
from ...domain._model import IModel
from ...domain._trainer import ITrainer


class GradientDescentTrainer(ITrainer):
    """
    Gradient-descent parameter update rule.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0``:
        ``g <- g + weight_decay * p``
    - Parameter update:
        ``p <- p - learning_rate * g``

    Parameters
    ----------
    model : IModel
        Model whose parameters are updated.
    learning_rate : float, optional
        Step size. Must be positive. Defaults to 1e-4.
    weight_decay : float, optional
        Classical L2 weight decay coefficient. Must be non-negative.
        Defaults to 0.0.

    Raises
    ------
    ValueError
        If ``learning_rate <= 0`` or ``weight_decay < 0``.
    """

    def __init__(
        self,
        model: IModel,
        *,
        learning_rate: float = 1e-4,
        weight_decay: float = 0.0,
    ) -> None:
        self.model = model
        self.learning_rate = float(learning_rate)
        self.weight_decay = float(weight_decay)

        if self.learning_rate <= 0.0:
            raise ValueError(f"learning_rate must be > 0, got {self.learning_rate}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

    def __repr__(self) -> str:
        return (
            f"GradientDescentTrainer(learning_rate={self.learning_rate}, "
            f"weight_decay={self.weight_decay})"
        )

    def zero_gradients(self) -> None:
        """
        Reset the gradient buffer of every parameter of the model.
        """
        for p in self.model.parameters():
            p.zero_grad()

    def apply_update(self) -> None:
        """
        Apply one descent step to every parameter of the model.

        Raises
        ------
        ParameterGradientSizeMismatchError
            If a gradient buffer's element count differs from its parameter's.
            No parameter is modified in that case.
        """
        params = list(self.model.parameters())
        for p in params:
            if p.grad.numel() != p.numel():
                raise ParameterGradientSizeMismatchError(p.numel(), p.grad.numel())

        for p in params:
            g = p.grad.to_numpy().astype(np.float32)
            if self.weight_decay != 0.0:
                g = g + self.weight_decay * p.value.to_numpy()
            p.update(-self.learning_rate * g)
