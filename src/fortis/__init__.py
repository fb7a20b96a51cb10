"""
Fortis: a reverse-mode automatic differentiation engine.

Networks are expressed as per-example computation graphs of tensor-valued
operation nodes. A forward pass evaluates the graph to a scalar
cross-entropy loss and a backward pass accumulates exact gradients into the
parameters owned by a `Model`.

Typical usage
-------------
>>> from fortis import Graph, Model, GradientDescentTrainer, InMemoryDataSource
>>> from fortis import MLPGraphBuilder, TrainingConfig, fit
>>> model = Model(seed=0)
>>> builder = MLPGraphBuilder(model, [784, 256, 10])
>>> trainer = GradientDescentTrainer(model, learning_rate=1e-2)
>>> history = fit(model, trainer, data_source, builder, TrainingConfig(epochs=3))
"""

from .domain import (
    SEED,
    FortisError,
    GraphStateError,
    InvalidLabelError,
    MissingUpstreamGradientError,
    OperationKind,
    ParameterGradientSizeMismatchError,
    Propagate,
    Seed,
    ShapeMismatchError,
    StaleOutputAccessError,
)
from .infrastructure import *
from .infrastructure import __all__ as _infrastructure_all

__version__ = "0.1.0"

__all__ = [
    "SEED",
    "FortisError",
    "GraphStateError",
    "InvalidLabelError",
    "MissingUpstreamGradientError",
    "OperationKind",
    "ParameterGradientSizeMismatchError",
    "Propagate",
    "Seed",
    "ShapeMismatchError",
    "StaleOutputAccessError",
    *_infrastructure_all,
]
