"""
Computation graph executor.

A `Graph` is an arena of operation nodes kept in construction order. Because
every node's inputs must already be in the arena when it is added, insertion
order is a valid topological order, and each node is addressed by a stable
integer index for the lifetime of the graph.

State machine
-------------
    EMPTY -> BUILDING -> FORWARDED -> BACKWARD_COMPLETE
      ^                                      |
      +---------------- renew() -------------+

- `add_node` is only accepted in EMPTY/BUILDING.
- `forward_pass` evaluates every node in insertion order and returns the
  predicted label and the scalar loss.
- `backward_pass` seeds the terminal loss node. Each node then recursively
  calls `backward` on its own inputs, so propagation order follows the call
  graph rather than a reverse iteration over the arena.
- `renew` discards every node. Nothing (outputs, cached derivatives,
  gradient accumulators) survives into the next graph.

A graph is built for a single training example and discarded afterwards.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..domain._errors import GraphStateError
from ..domain._node import SEED, INode, OperationKind

logger = logging.getLogger(__name__)


class GraphState(enum.Enum):
    EMPTY = "empty"
    BUILDING = "building"
    FORWARDED = "forwarded"
    BACKWARD_COMPLETE = "backward_complete"


class Graph:
    """
    Ordered arena of operation nodes with forward/backward drivers.

    Notes
    -----
    - The last node must be a cross-entropy loss node when `forward_pass` is
      launched.
    - The predicted label is read from the last `SoftMaxNode` encountered
      during the forward pass. Graphs whose loss consumes raw logits fall
      back to the loss node's own probabilities.
    """

    def __init__(self) -> None:
        self._nodes: List[INode] = []
        self._index_by_id: Dict[int, int] = {}
        self._input_indices: List[Tuple[int, ...]] = []
        self._bound_parameters: Dict[int, int] = {}
        self._state: GraphState = GraphState.EMPTY
        self._loss: Optional[float] = None
        self._predicted_label: Optional[int] = None

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, state={self._state.value})"

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[INode]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> INode:
        return self._nodes[index]

    @property
    def state(self) -> GraphState:
        return self._state

    @property
    def nodes(self) -> Tuple[INode, ...]:
        return tuple(self._nodes)

    @property
    def loss(self) -> Optional[float]:
        """
        Return the loss computed by the last forward pass, or None.
        """
        return self._loss

    @property
    def predicted_label(self) -> Optional[int]:
        return self._predicted_label

    def contains(self, node: INode) -> bool:
        return id(node) in self._index_by_id

    def index_of(self, node: INode) -> int:
        """
        Return the stable arena index of `node`.

        Raises
        ------
        KeyError
            If the node does not belong to this graph.
        """
        try:
            return self._index_by_id[id(node)]
        except KeyError as e:
            raise KeyError(f"{node!r} is not part of this graph") from e

    def input_indices(self, index: int) -> Tuple[int, ...]:
        """
        Return the arena indices of the inputs of the node at `index`.
        """
        return self._input_indices[index]

    def add_node(self, node: INode) -> int:
        """
        Append a node to the arena.

        Parameters
        ----------
        node : INode
            Node whose inputs have all been added to this graph already.

        Returns
        -------
        int
            The node's stable index.

        Raises
        ------
        GraphStateError
            If the graph has already been evaluated, the node is already in
            the graph, one of its inputs is not, or it is a `ParameterNode`
            for a parameter another node of this graph already binds.
        TypeError
            If `node` is not an `INode`.
        """
        if not isinstance(node, INode):
            raise TypeError(f"Graph.add_node expects a node, got {type(node).__name__}")
        if self._state not in (GraphState.EMPTY, GraphState.BUILDING):
            raise GraphStateError(
                f"cannot add nodes in state {self._state.value!r}; call renew() first"
            )
        if id(node) in self._index_by_id:
            raise GraphStateError(f"{node.kind.value} node was already added to this graph")
        input_indices = []
        for i, inp in enumerate(node.inputs):
            if id(inp) not in self._index_by_id:
                raise GraphStateError(
                    f"{node.kind.value} input #{i} ({inp.kind.value}) must be added "
                    f"to the graph before its consumers"
                )
            input_indices.append(self._index_by_id[id(inp)])
        # ParameterNode overwrites the parameter's gradient buffer, so a
        # second node for the same parameter would drop the first one's sum.
        parameter = None
        if node.kind is OperationKind.PARAMETER:
            parameter = node.parameter
        if parameter is not None and id(parameter) in self._bound_parameters:
            raise GraphStateError(
                f"parameter {parameter!r} is already bound by node "
                f"#{self._bound_parameters[id(parameter)]}; reuse that node instead"
            )

        index = len(self._nodes)
        self._nodes.append(node)
        self._index_by_id[id(node)] = index
        self._input_indices.append(tuple(input_indices))
        if parameter is not None:
            self._bound_parameters[id(parameter)] = index
        self._state = GraphState.BUILDING
        logger.debug("add_node #%d %s", index, node.kind.value)
        return index

    def forward_pass(self) -> Tuple[int, float]:
        """
        Evaluate every node in insertion order.

        Returns
        -------
        tuple[int, float]
            `(predicted_label, loss)`.

        Raises
        ------
        GraphStateError
            If the graph is empty, was already evaluated, or does not end in
            a cross-entropy loss node.
        """
        if self._state is GraphState.EMPTY:
            raise GraphStateError("cannot run a forward pass on an empty graph")
        if self._state is not GraphState.BUILDING:
            raise GraphStateError(
                f"forward pass already ran (state {self._state.value!r}); call renew() first"
            )
        terminal = self._nodes[-1]
        if terminal.kind is not OperationKind.CROSS_ENTROPY_LOSS:
            raise GraphStateError(
                f"the last node must be a CrossEntropyLoss node, got {terminal.kind.value}"
            )

        predicted: Optional[int] = None
        for node in self._nodes:
            node.forward()
            if node.kind is OperationKind.SOFTMAX:
                predicted = node.predicted_label()

        if predicted is None:
            predicted = terminal.predicted_label()

        self._loss = terminal.output.item()
        self._predicted_label = int(predicted)
        self._state = GraphState.FORWARDED
        logger.debug(
            "forward_pass nodes=%d loss=%.6f predicted=%d",
            len(self._nodes),
            self._loss,
            self._predicted_label,
        )
        return self._predicted_label, self._loss

    def backward_pass(self) -> None:
        """
        Propagate the loss gradient from the terminal node to every leaf.

        Raises
        ------
        GraphStateError
            If the forward pass has not run, or backward already ran.
        """
        if self._state is not GraphState.FORWARDED:
            raise GraphStateError(
                f"backward pass requires a completed forward pass (state {self._state.value!r})"
            )
        self._nodes[-1].backward(SEED)
        self._state = GraphState.BACKWARD_COMPLETE
        logger.debug("backward_pass complete")

    def renew(self) -> None:
        """
        Discard all nodes and return to the EMPTY state.
        """
        self._nodes.clear()
        self._index_by_id.clear()
        self._input_indices.clear()
        self._bound_parameters.clear()
        self._loss = None
        self._predicted_label = None
        self._state = GraphState.EMPTY
