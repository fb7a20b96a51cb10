"""
Graph builders for dense classifiers.

A builder appends the nodes of one example's computation to an empty graph
and returns the terminal loss node. Two topologies are provided:

- linear classifier : ``x -> W x + b -> softmax -> cross-entropy``
- multilayer perceptron : a stack of ``W x + b -> ReLU|TanH`` hidden layers
  followed by an output layer ``W x + b -> softmax -> cross-entropy``

Weights are stored as ``(out_features, in_features)`` matrices and biases as
``(1, out_features)`` row vectors, which is the layout `ProductNode(W, x)`
expects.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from ...domain._model import IModel
from ...domain._node import INode
from ...domain._parameter import IParameter
from .._graph import Graph
from ..nodes import (
    CrossEntropyLossNode,
    InputNode,
    ParameterNode,
    ProductNode,
    ReLUNode,
    SoftMaxNode,
    SummationNode,
    TanHNode,
)
from ..tensor._tensor import Tensor

ACTIVATIONS: Dict[str, Type[INode]] = {
    "relu": ReLUNode,
    "tanh": TanHNode,
}

ArrayLike = Union[Tensor, np.ndarray, list]
GraphBuilder = Callable[[Graph, IModel, ArrayLike, ArrayLike], INode]


def _activation_class(name: str) -> Type[INode]:
    try:
        return ACTIVATIONS[name]
    except KeyError as e:
        raise ValueError(
            f"Unsupported activation: {name!r}. Available: {', '.join(sorted(ACTIVATIONS))}"
        ) from e


def _add(graph: Graph, node: INode) -> INode:
    graph.add_node(node)
    return node


def add_dense_layer(
    graph: Graph, weights: IParameter, bias: IParameter, x: INode
) -> INode:
    """
    Append ``W x + b`` to `graph` and return the summation node.
    """
    w_node = _add(graph, ParameterNode(weights))
    b_node = _add(graph, ParameterNode(bias))
    wx = _add(graph, ProductNode(w_node, x))
    return _add(graph, SummationNode(wx, b_node))


def build_linear_classifier_graph(
    graph: Graph,
    weights: IParameter,
    bias: IParameter,
    x: ArrayLike,
    label: ArrayLike,
) -> CrossEntropyLossNode:
    """
    Build ``softmax(W x + b)`` with a cross-entropy loss on `label`.

    Returns
    -------
    CrossEntropyLossNode
        The terminal node (already added to `graph`).
    """
    x_node = _add(graph, InputNode(x))
    logits = add_dense_layer(graph, weights, bias, x_node)
    probs = _add(graph, SoftMaxNode(logits))
    return _add(graph, CrossEntropyLossNode(probs, label))


def build_mlp_graph(
    graph: Graph,
    layers: Sequence[Tuple[IParameter, IParameter]],
    x: ArrayLike,
    label: ArrayLike,
    *,
    activation: str = "relu",
) -> CrossEntropyLossNode:
    """
    Build a multilayer perceptron ending in softmax and cross-entropy.

    Parameters
    ----------
    graph : Graph
        Empty (or building) graph to append to.
    layers : Sequence[tuple[IParameter, IParameter]]
        ``(weights, bias)`` pairs, input layer first. Every layer except the
        last is followed by `activation`.
    x, label : Tensor or array-like
        Input row vector and one-hot label.
    activation : str, optional
        ``"relu"`` (default) or ``"tanh"``.

    Raises
    ------
    ValueError
        If `layers` is empty or `activation` is unknown.
    """
    if not layers:
        raise ValueError("build_mlp_graph requires at least one layer")
    act_cls = _activation_class(activation)

    h: INode = _add(graph, InputNode(x))
    for i, (weights, bias) in enumerate(layers):
        h = add_dense_layer(graph, weights, bias, h)
        if i < len(layers) - 1:
            h = _add(graph, act_cls(h))

    probs = _add(graph, SoftMaxNode(h))
    return _add(graph, CrossEntropyLossNode(probs, label))


class MLPGraphBuilder:
    """
    Callable builder owning the parameter ids of a dense network.

    Constructing the builder allocates one ``(weights, bias)`` pair per layer
    in `model`. Calling it builds the graph of one example, resolving the
    parameters through the model passed to the call.

    Parameters
    ----------
    model : IModel
        Model that receives the new parameters.
    layer_sizes : Sequence[int]
        Feature counts, input first and number of classes last. A two-entry
        sequence describes a linear classifier.
    activation : str, optional
        Hidden-layer activation, ``"relu"`` (default) or ``"tanh"``.
    weight_initializer : str, optional
        Initializer of the weight matrices. Defaults to ``"kaiming"`` for
        ReLU and ``"xavier_tanh"`` for TanH networks.
    bias_initializer : str, optional
        Initializer of the biases. Defaults to ``"zeros"``.

    Examples
    --------
    >>> model = Model(seed=0)
    >>> builder = MLPGraphBuilder(model, [784, 256, 10])
    >>> graph = Graph()
    >>> loss_node = builder(graph, model, x, label)
    """

    def __init__(
        self,
        model: IModel,
        layer_sizes: Sequence[int],
        *,
        activation: str = "relu",
        weight_initializer: Optional[str] = None,
        bias_initializer: str = "zeros",
    ) -> None:
        sizes = [int(s) for s in layer_sizes]
        if len(sizes) < 2 or any(s <= 0 for s in sizes):
            raise ValueError(
                f"layer_sizes needs at least two positive entries, got {list(layer_sizes)}"
            )
        _activation_class(activation)
        if weight_initializer is None:
            weight_initializer = "kaiming" if activation == "relu" else "xavier_tanh"

        self.layer_sizes: Tuple[int, ...] = tuple(sizes)
        self.activation = activation
        self.parameter_ids: List[Tuple[int, int]] = []
        for i, (fan_in, fan_out) in enumerate(zip(sizes[:-1], sizes[1:])):
            w_id = model.add_parameter(
                (fan_out, fan_in), initializer=weight_initializer, name=f"dense{i}.weight"
            )
            b_id = model.add_parameter(
                fan_out, initializer=bias_initializer, name=f"dense{i}.bias"
            )
            self.parameter_ids.append((w_id, b_id))

    def __repr__(self) -> str:
        return f"MLPGraphBuilder(layer_sizes={self.layer_sizes}, activation={self.activation!r})"

    def __call__(
        self, graph: Graph, model: IModel, x: ArrayLike, label: ArrayLike
    ) -> CrossEntropyLossNode:
        layers = [
            (model.get_parameter(w_id), model.get_parameter(b_id))
            for w_id, b_id in self.parameter_ids
        ]
        return build_mlp_graph(graph, layers, x, label, activation=self.activation)
