"""
Leaf nodes: graph inputs and trainable parameters.

Leaves have no predecessors. `InputNode` carries a constant tensor (a data
sample) and `ParameterNode` exposes a model-owned `Parameter`. Backward
propagation terminates at leaves: input nodes only record the gradient they
receive, parameter nodes additionally write it into the parameter's
gradient buffer.
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from ...domain._errors import (
    MissingUpstreamGradientError,
    ParameterGradientSizeMismatchError,
    StaleOutputAccessError,
)
from ...domain._node import BackwardSignal, OperationKind, Propagate
from ...domain._parameter import IParameter
from ..tensor._tensor import Tensor
from ._base import Node


class InputNode(Node):
    """
    Constant input tensor.

    `forward()` publishes the wrapped tensor as the node output without
    computing anything. `backward()` records the incoming gradient and stops:
    there is no trainable state upstream of an input.

    Parameters
    ----------
    value : Tensor or array-like
        The input values. Array-likes are converted to `Tensor`.
    """

    KIND = OperationKind.INPUT

    def __init__(self, value: Union[Tensor, np.ndarray, list]) -> None:
        super().__init__()
        self._value: Tensor = value if isinstance(value, Tensor) else Tensor(value)

    def output_shape(self) -> Tuple[int, int]:
        return self._value.shape

    def _compute_forward(self) -> Tensor:
        return self._value

    def _propagate(self, upstream: np.ndarray) -> None:
        return None


class ParameterNode(Node):
    """
    Graph view of a model-owned trainable parameter.

    `forward()` snapshots the parameter's current value. `backward()`
    validates the upstream element count, accumulates it, and overwrites the
    parameter's gradient buffer with the node's accumulated total.

    Parameters
    ----------
    parameter : IParameter
        The referenced parameter. The node never mutates its value.

    Notes
    -----
    The buffer is overwritten rather than added to because the trainer zeroes
    it before each graph's backward pass. When the same `ParameterNode` has
    several consumers, the node-level accumulator already holds the sum of
    their contributions, so each overwrite publishes the running total.
    """

    KIND = OperationKind.PARAMETER

    def __init__(self, parameter: IParameter) -> None:
        if not isinstance(parameter, IParameter):
            raise TypeError(
                f"ParameterNode expects a parameter, got {type(parameter).__name__}"
            )
        super().__init__()
        self._parameter = parameter

    @property
    def parameter(self) -> IParameter:
        return self._parameter

    def output_shape(self) -> Tuple[int, int]:
        return tuple(self._parameter.shape)

    def _compute_forward(self) -> Tensor:
        return Tensor(self._parameter.value)

    def backward(self, signal: BackwardSignal) -> None:
        """
        Accumulate the upstream gradient and publish it to the parameter.

        Raises
        ------
        MissingUpstreamGradientError
            If `signal` is not a `Propagate`.
        StaleOutputAccessError
            If `forward()` has not run yet.
        ParameterGradientSizeMismatchError
            If the upstream element count differs from the parameter's.
        """
        if not isinstance(signal, Propagate):
            raise MissingUpstreamGradientError(
                self.kind.value,
                "backward() requires an upstream gradient from a consumer",
            )
        if self._output is None:
            raise StaleOutputAccessError(
                self.kind.value, "backward() called before forward()"
            )
        if signal.gradient.numel() != self._parameter.numel():
            raise ParameterGradientSizeMismatchError(
                self._parameter.numel(), signal.gradient.numel()
            )
        self._accumulate_local(self._as_output_shaped(signal.gradient))
        self._parameter.set_grad(Tensor(self._local_gradient))

    def _propagate(self, upstream: np.ndarray) -> None:
        return None
