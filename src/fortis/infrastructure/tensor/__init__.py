"""
Tensor public API.

Exports
-------
- Tensor:
    Immutable NumPy-backed `(rows, cols)` tensor used for node outputs,
    gradients and inputs.
"""

from ._tensor import Tensor

__all__ = [
    Tensor.__name__,
]
