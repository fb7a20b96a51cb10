from ._encoding import normalize_input, one_hot_encode
from ._metrics import compute_accuracy
from ._data_source import InMemoryDataSource

__all__ = [
    "normalize_input",
    "one_hot_encode",
    "compute_accuracy",
    InMemoryDataSource.__name__,
]
