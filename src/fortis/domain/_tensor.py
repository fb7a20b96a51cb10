"""
Tensor interface definitions.

This module defines the domain-level interface for the tensor values that
flow along the edges of a computation graph. Fortis only deals with vectors
and 2-D matrices, so every tensor is described by a `(rows, cols)` shape and
a row-major buffer of `rows * cols` floating-point numbers. Vectors are
represented with shape `(1, n)`.

The interface is structural (duck-typed) so that node implementations can be
typed against it without depending on the NumPy-backed implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    Notes
    -----
    - Tensors are immutable once constructed. Operations produce new tensors
      instead of mutating their operands.
    - `to_numpy()` returns a read-only 2-D view of shape `shape`.
    """

    @property
    def shape(self) -> Tuple[int, int]:
        """
        Return the `(rows, cols)` shape of the tensor.
        """
        ...

    @property
    def rows(self) -> int: ...

    @property
    def cols(self) -> int: ...

    def numel(self) -> int:
        """
        Return the total number of elements (`rows * cols`).
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return the tensor contents as a 2-D NumPy array.
        """
        ...
