"""
Backend-agnostic contracts for Fortis.

The domain layer holds the operation-node contract, the collaborator
protocols (parameter, model, trainer, data source) and the error taxonomy.
It never imports NumPy or infrastructure modules.
"""

from ._errors import (
    FortisError,
    GraphStateError,
    InvalidLabelError,
    MissingUpstreamGradientError,
    ParameterGradientSizeMismatchError,
    ShapeMismatchError,
    StaleOutputAccessError,
)
from ._node import SEED, BackwardSignal, INode, OperationKind, Propagate, Seed
from ._tensor import ITensor
from ._parameter import IParameter
from ._model import IModel
from ._trainer import ITrainer
from ._data_source import IDataSource

__all__ = [
    "FortisError",
    "GraphStateError",
    "InvalidLabelError",
    "MissingUpstreamGradientError",
    "ParameterGradientSizeMismatchError",
    "ShapeMismatchError",
    "StaleOutputAccessError",
    "SEED",
    "BackwardSignal",
    "INode",
    "OperationKind",
    "Propagate",
    "Seed",
    "ITensor",
    "IParameter",
    "IModel",
    "ITrainer",
    "IDataSource",
]
