from ._history import History
from ._config import TrainingConfig
from ._builders import (
    ACTIVATIONS,
    MLPGraphBuilder,
    add_dense_layer,
    build_linear_classifier_graph,
    build_mlp_graph,
)
from ._loop import evaluate, fit

__all__ = [
    History.__name__,
    TrainingConfig.__name__,
    "ACTIVATIONS",
    MLPGraphBuilder.__name__,
    "add_dense_layer",
    "build_linear_classifier_graph",
    "build_mlp_graph",
    "evaluate",
    "fit",
]
