"""
Parameter initialization public API.

Importing this package registers every built-in initializer (``normal``,
``zeros``, ``ones``, ``xavier``, ``xavier_uniform``, ``xavier_tanh``,
``kaiming``, ``kaiming_uniform``) into the `WeightInitializer` registry via
import side effects.
"""

from ._constants import *
from ._xavier import *
from ._kaiming import *
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
]
