"""
Operation node interface definitions.

This module defines the abstract contract shared by every vertex of a Fortis
computation graph, the closed set of operation kinds, and the tagged variant
used to drive the backward pass.

Forward/backward protocol
-------------------------
- `forward()` computes the node output from the already-computed outputs of
  its inputs. Outputs are write-once.
- `backward(signal)` receives either a `Seed` (only valid for the terminal
  loss node, which synthesizes its own gradient) or a `Propagate` carrying
  the gradient of the loss with respect to this node's output. A node adds
  the contribution into its local gradient and then invokes `backward` on
  each of its inputs with the corresponding Jacobian-vector product.

Because every node calls `backward` on its own predecessors, propagation
order is governed by the call graph rather than by iterating the graph in
reverse. A node consumed by several downstream nodes (fan-out) receives one
`Propagate` per consumer, which is why local gradients are additive.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from ._tensor import ITensor


class OperationKind(enum.Enum):
    """
    Closed set of operation kinds supported by the graph executor.
    """

    INPUT = "Input"
    PARAMETER = "Parameter"
    SUMMATION = "Summation"
    PRODUCT = "Product"
    RELU = "ReLU"
    TANH = "TanH"
    SOFTMAX = "SoftMax"
    CROSS_ENTROPY_LOSS = "CrossEntropyLoss"


@dataclass(frozen=True)
class Seed:
    """
    Backward signal for the terminal loss node.

    The loss node has no consumer, so it receives no upstream gradient and
    synthesizes its own from the label it is bound to.
    """


@dataclass(frozen=True)
class Propagate:
    """
    Backward signal carrying the upstream gradient for a non-terminal node.

    Attributes
    ----------
    gradient : ITensor
        Gradient of the loss with respect to the receiving node's output.
    """

    gradient: ITensor


BackwardSignal = Union[Seed, Propagate]

SEED = Seed()


class INode(ABC):
    """
    Abstract base class for computation-graph vertices.

    Concrete subclasses implement one operation from `OperationKind`. Each
    node owns references to its input nodes, a write-once output and an
    additive local-gradient accumulator.
    """

    @property
    @abstractmethod
    def kind(self) -> OperationKind:
        """
        Return the operation tag of this node.
        """
        ...

    @property
    @abstractmethod
    def inputs(self) -> Sequence["INode"]:
        """
        Return the ordered predecessor nodes (0, 1 or 2 of them).
        """
        ...

    @property
    @abstractmethod
    def has_output(self) -> bool:
        """
        Return True once `forward()` has stored an output.
        """
        ...

    @property
    @abstractmethod
    def output(self) -> ITensor:
        """
        Return the output computed by `forward()`.

        Raises
        ------
        StaleOutputAccessError
            If `forward()` has not run yet.
        """
        ...

    @property
    @abstractmethod
    def local_gradient(self) -> Optional[ITensor]:
        """
        Return the gradient accumulated from all consumers, or None.
        """
        ...

    @abstractmethod
    def output_shape(self) -> Tuple[int, int]:
        """
        Return the output shape without requiring `forward()` to have run.
        """
        ...

    @abstractmethod
    def forward(self) -> None:
        """
        Compute and store the node output.
        """
        ...

    @abstractmethod
    def backward(self, signal: BackwardSignal) -> None:
        """
        Accumulate the incoming gradient and propagate to inputs.

        Parameters
        ----------
        signal : Seed | Propagate
            `Seed` for terminal loss nodes, `Propagate` for all others.
        """
        ...
