"""
Concrete trainable parameter implementation.

This module defines `Parameter`, an infrastructure-level implementation of the
domain contract `IParameter`. A `Parameter` owns a mutable value matrix and a
same-shaped gradient buffer. It is referenced by `ParameterNode`s inside
computation graphs and updated by trainers between graph evaluations.

Design notes
------------
- Unlike `Tensor`, a `Parameter` is mutable: trainers update its value in
  place and backward passes overwrite its gradient buffer.
- Reads (`value`, `grad`) return immutable `Tensor` snapshots so that graph
  nodes can never alias live parameter storage.
- The gradient buffer is always allocated (zero-initialized) and has
  overwrite semantics. Summation across multiple consumers happens inside the
  graph's `ParameterNode`, not here.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ..domain._errors import ParameterGradientSizeMismatchError
from ..domain._parameter import IParameter
from .tensor._tensor import Tensor


class Parameter(IParameter):
    """
    Trainable value plus gradient buffer.

    Parameters
    ----------
    value : array-like
        Initial value. 1-D input is stored as a `(1, n)` row vector.
    name : str, optional
        Debug name used in `repr`.

    Notes
    -----
    - The gradient buffer starts at zero, so a trainer may call
      `apply_update()` on parameters that no graph touched without effect.
    """

    def __init__(self, value, *, name: str = "") -> None:
        arr = np.array(value, dtype=np.float32, copy=True)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        if arr.ndim != 2 or arr.size == 0:
            raise ValueError(
                f"Parameter requires a non-empty vector or 2-D matrix, got shape={arr.shape}"
            )
        self._value: np.ndarray = arr
        self._grad: np.ndarray = np.zeros_like(arr)
        self.name = str(name)

    def __repr__(self) -> str:
        label = f"name={self.name!r}, " if self.name else ""
        return f"Parameter({label}shape={self.shape})"

    @property
    def shape(self) -> Tuple[int, int]:
        r, c = self._value.shape
        return int(r), int(c)

    def numel(self) -> int:
        return int(self._value.size)

    @property
    def value(self) -> Tensor:
        """
        Return an immutable snapshot of the current value.
        """
        return Tensor(self._value)

    @property
    def grad(self) -> Tensor:
        """
        Return an immutable snapshot of the gradient buffer.
        """
        return Tensor(self._grad)

    def set_grad(self, grad: Tensor) -> None:
        """
        Overwrite the gradient buffer (used by `ParameterNode.backward`).

        The incoming gradient is matched by element count and reshaped
        row-major into the parameter's shape, so flattened gradients are
        accepted.

        Parameters
        ----------
        grad : Tensor
            Gradient of the loss with respect to this parameter.

        Raises
        ------
        ParameterGradientSizeMismatchError
            If `grad.numel()` differs from `self.numel()`.
        """
        if grad.numel() != self.numel():
            raise ParameterGradientSizeMismatchError(self.numel(), grad.numel())
        self._grad[...] = grad.to_numpy().reshape(self._value.shape)

    def zero_grad(self) -> None:
        """
        Reset the gradient buffer to zeros.
        """
        self._grad.fill(0.0)

    def update(self, delta: np.ndarray) -> None:
        """
        Add `delta` to the value in place.

        Parameters
        ----------
        delta : np.ndarray
            Array with the same element count as the parameter.

        Raises
        ------
        ParameterGradientSizeMismatchError
            If the element count of `delta` differs from the parameter's.
        """
        delta = np.asarray(delta, dtype=np.float32)
        if delta.size != self._value.size:
            raise ParameterGradientSizeMismatchError(self.numel(), int(delta.size))
        self._value += delta.reshape(self._value.shape)

    def copy_from_numpy(self, arr: np.ndarray) -> None:
        """
        Overwrite the value with the contents of `arr` (same shape required).
        """
        arr = np.asarray(arr, dtype=np.float32)
        if arr.size != self._value.size:
            raise ValueError(
                f"Cannot copy array of shape {arr.shape} into parameter of shape {self.shape}"
            )
        self._value[...] = arr.reshape(self._value.shape)
