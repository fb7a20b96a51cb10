"""
Domain-level trainer contracts for Fortis.

This module defines the `ITrainer` protocol, which specifies the minimal
interface required for parameter-update rules (e.g., plain gradient
descent).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Trainers read the gradient buffers written by a backward pass and mutate
  parameter values in place. They never run concurrently with a forward
  pass that reads the same parameters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ITrainer(Protocol):
    """
    Trainer interface contract.

    Required methods
    ----------------
    - `apply_update()` applies one update to every managed parameter.
    - `zero_gradients()` resets every managed gradient buffer.
    """

    def apply_update(self) -> None:
        """
        Apply one update step using the current gradient buffers.
        """
        ...

    def zero_gradients(self) -> None:
        """
        Zero the gradient buffers of all managed parameters.

        Callers must invoke this before the next graph's backward pass.
        """
        ...
