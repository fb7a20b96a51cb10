"""
Shared machinery for concrete operation nodes.

`Node` implements the parts of the `INode` contract that do not depend on the
operation: write-once outputs, additive gradient accumulation, forwarding of
gradients to inputs and the `Seed`/`Propagate` dispatch. Subclasses only
provide:

- `output_shape()`   : the shape rule of the operation,
- `_compute_forward` : the forward computation, from input outputs,
- `_propagate`       : the Jacobian-vector products for each input.

Gradient bookkeeping
--------------------
Each node keeps two kinds of accumulators:

- `local_gradient` is the gradient of the loss with respect to the node's
  output, summed over every consumer that called `backward`.
- `input_gradient(i)` is the sum of every gradient this node has sent to its
  i-th input. For elementwise unary nodes this is `upstream * f'(x)`.

Both are additive. A node consumed twice by the same operation (e.g.
`x + x`) therefore receives, and records, two contributions.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import ClassVar, List, Optional, Sequence, Tuple

import numpy as np

from ...domain._errors import MissingUpstreamGradientError, StaleOutputAccessError
from ...domain._node import BackwardSignal, INode, OperationKind, Propagate, Seed
from ..tensor._tensor import Tensor

logger = logging.getLogger(__name__)


class Node(INode):
    """
    Base class for every concrete operation node.

    Parameters
    ----------
    *inputs : INode
        Predecessor nodes, in operand order.

    Raises
    ------
    TypeError
        If any input is not an `INode`.
    """

    KIND: ClassVar[OperationKind]

    def __init__(self, *inputs: INode) -> None:
        for i, inp in enumerate(inputs):
            if not isinstance(inp, INode):
                raise TypeError(
                    f"{type(self).__name__} input #{i} must be a node, got {type(inp).__name__}"
                )
        self._inputs: Tuple[INode, ...] = tuple(inputs)
        self._output: Optional[Tensor] = None
        self._local_gradient: Optional[np.ndarray] = None
        self._input_gradients: List[Optional[np.ndarray]] = [None] * len(inputs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.output_shape()})"

    # ------------------------------------------------------------------
    # INode surface
    # ------------------------------------------------------------------
    @property
    def kind(self) -> OperationKind:
        return self.KIND

    @property
    def inputs(self) -> Sequence[INode]:
        return self._inputs

    @property
    def has_output(self) -> bool:
        return self._output is not None

    @property
    def output(self) -> Tensor:
        if self._output is None:
            raise StaleOutputAccessError(
                self.kind.value, "output read before forward() ran"
            )
        return self._output

    @property
    def local_gradient(self) -> Optional[Tensor]:
        if self._local_gradient is None:
            return None
        return Tensor(self._local_gradient)

    def input_gradient(self, index: int) -> Optional[Tensor]:
        """
        Return the accumulated gradient sent to the input at `index`.
        """
        g = self._input_gradients[index]
        return None if g is None else Tensor(g)

    def forward(self) -> None:
        """
        Compute and store the node output.

        Raises
        ------
        StaleOutputAccessError
            If the output was already computed, or if an input has not been
            forwarded yet.
        """
        if self._output is not None:
            raise StaleOutputAccessError(
                self.kind.value, "forward() called twice on the same node"
            )
        for i, inp in enumerate(self._inputs):
            if not inp.has_output:
                raise StaleOutputAccessError(
                    self.kind.value,
                    f"input #{i} ({inp.kind.value}) has not been forwarded",
                )
        out = self._compute_forward()
        self._output = out
        logger.debug("forward %s -> shape=%s", self.kind.value, out.shape)

    def backward(self, signal: BackwardSignal) -> None:
        """
        Accumulate the upstream gradient and propagate it to the inputs.

        Raises
        ------
        MissingUpstreamGradientError
            If `signal` is a `Seed`; only the terminal loss node accepts one.
        StaleOutputAccessError
            If `forward()` has not run yet.
        """
        if isinstance(signal, Seed):
            raise MissingUpstreamGradientError(
                self.kind.value,
                "backward() requires an upstream gradient from a consumer",
            )
        if not isinstance(signal, Propagate):
            raise TypeError(
                f"backward() expects Seed or Propagate, got {type(signal).__name__}"
            )
        if self._output is None:
            raise StaleOutputAccessError(
                self.kind.value, "backward() called before forward()"
            )
        upstream = self._as_output_shaped(signal.gradient)
        self._accumulate_local(upstream)
        self._propagate(upstream)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------
    def _as_output_shaped(self, gradient: Tensor) -> np.ndarray:
        """
        Return `gradient` as a float32 array with the output's shape.

        Flattened gradients with a matching element count are reshaped
        row-major.

        Raises
        ------
        MissingUpstreamGradientError
            If the element count differs from the output's.
        """
        rows, cols = self.output_shape()
        if gradient.numel() != rows * cols:
            raise MissingUpstreamGradientError(
                self.kind.value,
                f"upstream gradient has {gradient.numel()} elements, "
                f"expected {rows * cols} for output shape {(rows, cols)}",
            )
        return np.asarray(gradient.to_numpy(), dtype=np.float32).reshape(
            self.output_shape()
        )

    def _accumulate_local(self, upstream: np.ndarray) -> None:
        if self._local_gradient is None:
            self._local_gradient = np.array(upstream, dtype=np.float32, copy=True)
        else:
            self._local_gradient += upstream

    def _send(self, index: int, gradient: np.ndarray) -> None:
        """
        Record `gradient` for input `index` and call its `backward`.
        """
        gradient = np.asarray(gradient, dtype=np.float32)
        acc = self._input_gradients[index]
        if acc is None:
            self._input_gradients[index] = np.array(gradient, copy=True)
        else:
            acc += gradient
        self._inputs[index].backward(Propagate(Tensor(gradient)))

    # ------------------------------------------------------------------
    # Operation-specific hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def output_shape(self) -> Tuple[int, int]: ...

    @abstractmethod
    def _compute_forward(self) -> Tensor: ...

    @abstractmethod
    def _propagate(self, upstream: np.ndarray) -> None:
        """
        Send Jacobian-vector products of `upstream` to each input.
        """
        ...
