"""
Concrete Tensor implementation (NumPy backend).

This module provides the immutable `(rows, cols)` tensor value that flows
along the edges of a Fortis computation graph. It satisfies the domain-level
`ITensor` protocol.

Design notes
------------
- Storage is a row-major `float32` NumPy array of exactly two dimensions.
  One-dimensional inputs are promoted to row vectors of shape `(1, n)`.
- The backing array is flagged read-only after construction. Operations
  produce new tensors instead of mutating their operands, which is what makes
  the write-once output contract of graph nodes enforceable.
- Broadcasting is intentionally not implemented; binary ops require exact
  shape matches.
"""

from __future__ import annotations

from typing import Any, Sequence, Tuple, Union

import numpy as np

from ...domain._tensor import ITensor

Number = Union[int, float]


class Tensor(ITensor):
    """
    Immutable 2-D float32 tensor.

    Parameters
    ----------
    data : array-like
        Values of the tensor. Scalars become `(1, 1)` tensors, 1-D sequences
        become `(1, n)` row vectors and 2-D sequences keep their shape.

    Raises
    ------
    ValueError
        If `data` has more than two dimensions.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Any) -> None:
        if isinstance(data, Tensor):
            data = data._data
        arr = np.array(data, dtype=np.float32, copy=True)
        if arr.ndim == 0:
            arr = arr.reshape(1, 1)
        elif arr.ndim == 1:
            arr = arr.reshape(1, -1)
        elif arr.ndim != 2:
            raise ValueError(
                f"Tensor supports vectors and 2-D matrices only, got ndim={arr.ndim}"
            )
        arr.flags.writeable = False
        self._data: np.ndarray = arr

    def __repr__(self) -> str:
        return f"Tensor(shape={self.shape}, data={self._data.reshape(-1).tolist()})"

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @staticmethod
    def zeros(*, shape: Tuple[int, int]) -> "Tensor":
        """
        Create a tensor of the given shape filled with zeros.
        """
        return Tensor(np.zeros(shape, dtype=np.float32))

    @staticmethod
    def from_numpy(arr: np.ndarray, *, shape: Tuple[int, int] | None = None) -> "Tensor":
        """
        Create a tensor from a NumPy array, optionally reshaping it.

        Parameters
        ----------
        arr : np.ndarray
            Source array. It is copied; later mutations of `arr` do not
            affect the tensor.
        shape : tuple[int, int], optional
            Target `(rows, cols)` shape. When given, `arr` must hold exactly
            `rows * cols` elements and is reshaped row-major.
        """
        if shape is not None:
            arr = np.asarray(arr).reshape(shape)
        return Tensor(arr)

    @staticmethod
    def vector(values: Sequence[Number]) -> "Tensor":
        """
        Create a `(1, n)` row vector from a flat sequence.
        """
        return Tensor(np.asarray(values, dtype=np.float32).reshape(1, -1))

    # ------------------------------------------------------------------
    # Shape / access
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Tuple[int, int]:
        r, c = self._data.shape
        return int(r), int(c)

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    def numel(self) -> int:
        """
        Return the total number of elements in the tensor.
        """
        return int(self._data.size)

    def is_vector(self) -> bool:
        """
        Return True if the tensor is a `(1, n)` row vector.
        """
        return self.rows == 1

    def to_numpy(self) -> np.ndarray:
        """
        Return the read-only 2-D backing array.

        Callers that need to modify the values must copy the array first.
        """
        return self._data

    def flat(self) -> np.ndarray:
        """
        Return a read-only row-major 1-D view of the tensor.
        """
        return self._data.reshape(-1)

    def tolist(self) -> list:
        return self._data.tolist()

    def item(self) -> float:
        """
        Return the value of a single-element tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor does not contain exactly one element.
        """
        if self.numel() != 1:
            raise ValueError(
                f"Tensor.item() requires a 1-element tensor, got shape={self.shape}"
            )
        return float(self._data[0, 0])

    def argmax(self) -> int:
        """
        Return the row-major index of the largest element.

        Ties resolve to the lowest index, matching `numpy.argmax`.
        """
        return int(np.argmax(self._data))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    @staticmethod
    def _binary_op_shape_check(a: "Tensor", b: "Tensor") -> None:
        """
        Validate shape compatibility for binary elementwise operations.

        Raises
        ------
        ValueError
            If shapes do not match exactly.
        """
        if a.shape != b.shape:
            raise ValueError(f"Shape mismatch: {a.shape} vs {b.shape}")

    def __add__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            return NotImplemented
        Tensor._binary_op_shape_check(self, other)
        return Tensor(self._data + other._data)

    def __mul__(self, other: Union["Tensor", Number]) -> "Tensor":
        if isinstance(other, Tensor):
            Tensor._binary_op_shape_check(self, other)
            return Tensor(self._data * other._data)
        if isinstance(other, (int, float)):
            return Tensor(self._data * np.float32(other))
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> "Tensor":
        return Tensor(-self._data)

    def allclose(self, other: "Tensor", *, rtol: float = 1e-5, atol: float = 1e-6) -> bool:
        """
        Return True if `other` has the same shape and numerically close values.
        """
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=rtol, atol=atol)
        )
