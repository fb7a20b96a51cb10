"""
Elementwise operation nodes.

This module contains the structural summation node and the elementwise
activations:

- `SummationNode` : out = a + b
- `ReLUNode`      : out = max(0, x)
- `TanHNode`      : out = tanh(x)

Activations cache their diagonal derivative vector on the first backward
call. The vector depends only on forward-pass values, which never change for
the lifetime of a node, so subsequent backward calls (fan-out) reuse it.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Tuple

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._node import INode, OperationKind
from ..tensor._tensor import Tensor
from ._base import Node


class SummationNode(Node):
    """
    Elementwise addition of two equally shaped operands.

    Backward:

        d(a + b)/da = d(a + b)/db = I

    so the upstream gradient is forwarded unchanged to both inputs.

    Raises
    ------
    ShapeMismatchError
        If the operand shapes differ.
    """

    KIND = OperationKind.SUMMATION

    def __init__(self, a: INode, b: INode) -> None:
        super().__init__(a, b)
        left, right = a.output_shape(), b.output_shape()
        if tuple(left) != tuple(right):
            raise ShapeMismatchError(
                "Summation", left, right, "Operands must have identical shapes."
            )
        self._shape: Tuple[int, int] = tuple(left)

    def output_shape(self) -> Tuple[int, int]:
        return self._shape

    def _compute_forward(self) -> Tensor:
        a, b = self._inputs
        return Tensor(a.output.to_numpy() + b.output.to_numpy())

    def _propagate(self, upstream: np.ndarray) -> None:
        self._send(0, upstream)
        self._send(1, upstream)


class _ElementwiseActivation(Node):
    """
    Shared backward logic for unary elementwise activations.

    Subclasses implement `_activate` and `_derivative_from_output`. The
    derivative vector is computed once, on the first backward call, and the
    gradient sent to the input is `upstream * derivative`.
    """

    def __init__(self, x: INode) -> None:
        super().__init__(x)
        self._shape: Tuple[int, int] = tuple(x.output_shape())
        self._derivative: Optional[np.ndarray] = None

    def output_shape(self) -> Tuple[int, int]:
        return self._shape

    @property
    def cached_derivative(self) -> Optional[Tensor]:
        """
        Return the cached derivative vector, or None before the first backward.
        """
        return None if self._derivative is None else Tensor(self._derivative)

    def _compute_forward(self) -> Tensor:
        return Tensor(self._activate(self._inputs[0].output.to_numpy()))

    def _propagate(self, upstream: np.ndarray) -> None:
        if self._derivative is None:
            self._derivative = self._derivative_from_output(self.output.to_numpy())
        self._send(0, upstream * self._derivative)

    @abstractmethod
    def _activate(self, x: np.ndarray) -> np.ndarray: ...

    @abstractmethod
    def _derivative_from_output(self, out: np.ndarray) -> np.ndarray: ...


class ReLUNode(_ElementwiseActivation):
    """
    ReLU activation.

    Implements:

        relu(x) = max(0, x)

    Backward:

        d(relu)/dx = 1 if relu(x) > 0 else 0

    Notes
    -----
    The derivative at exactly 0 is defined as 0.
    """

    KIND = OperationKind.RELU

    def _activate(self, x: np.ndarray) -> np.ndarray:
        return np.maximum(x, np.float32(0.0))

    def _derivative_from_output(self, out: np.ndarray) -> np.ndarray:
        return (out > 0).astype(np.float32)


class TanHNode(_ElementwiseActivation):
    """
    Hyperbolic tangent activation.

    Implements:

        tanh(x) = (1 - exp(-2x)) / (1 + exp(-2x))

    Backward:

        d(tanh)/dx = 1 - tanh(x)^2

    Notes
    -----
    `numpy.tanh` evaluates the same function without overflowing for large
    negative inputs, where `exp(-2x)` would exceed float32 range.
    """

    KIND = OperationKind.TANH

    def _activate(self, x: np.ndarray) -> np.ndarray:
        return np.tanh(x)

    def _derivative_from_output(self, out: np.ndarray) -> np.ndarray:
        return (1.0 - out * out).astype(np.float32)
