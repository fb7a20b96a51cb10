"""
NumPy-backed implementations of the Fortis contracts.
"""

from .tensor import Tensor
from ._parameter import Parameter
from .nodes import (
    CrossEntropyLossNode,
    InputNode,
    Node,
    ParameterNode,
    ProductNode,
    ReLUNode,
    SoftMaxNode,
    SummationNode,
    TanHNode,
)
from ._graph import Graph, GraphState
from ._model import Model
from .utils import WeightInitializer
from .trainers import GradientDescentTrainer
from .data import InMemoryDataSource, compute_accuracy, normalize_input, one_hot_encode
from .training import (
    History,
    MLPGraphBuilder,
    TrainingConfig,
    build_linear_classifier_graph,
    build_mlp_graph,
    evaluate,
    fit,
)

__all__ = [
    "Tensor",
    "Parameter",
    "Node",
    "InputNode",
    "ParameterNode",
    "SummationNode",
    "ProductNode",
    "ReLUNode",
    "TanHNode",
    "SoftMaxNode",
    "CrossEntropyLossNode",
    "Graph",
    "GraphState",
    "Model",
    "WeightInitializer",
    "GradientDescentTrainer",
    "InMemoryDataSource",
    "compute_accuracy",
    "normalize_input",
    "one_hot_encode",
    "History",
    "MLPGraphBuilder",
    "TrainingConfig",
    "build_linear_classifier_graph",
    "build_mlp_graph",
    "evaluate",
    "fit",
]
