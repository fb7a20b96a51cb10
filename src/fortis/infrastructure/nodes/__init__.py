"""
Operation node implementations.

Exports the closed set of node variants understood by the graph executor:

- leaves        : `InputNode`, `ParameterNode`
- binary        : `SummationNode`, `ProductNode`
- unary         : `ReLUNode`, `TanHNode`, `SoftMaxNode`
- terminal loss : `CrossEntropyLossNode`
"""

from ._base import Node
from ._leaves import InputNode, ParameterNode
from ._elementwise import ReLUNode, SummationNode, TanHNode
from ._product import ProductNode
from ._softmax import SoftMaxNode, stable_softmax
from ._loss import CrossEntropyLossNode, find_positive_label

__all__ = [
    "Node",
    "InputNode",
    "ParameterNode",
    "SummationNode",
    "ProductNode",
    "ReLUNode",
    "TanHNode",
    "SoftMaxNode",
    "CrossEntropyLossNode",
    "stable_softmax",
    "find_positive_label",
]
