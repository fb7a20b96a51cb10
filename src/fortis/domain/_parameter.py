"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters
referenced by `ParameterNode`s. A parameter couples a value tensor with a
same-shaped gradient buffer. The gradient buffer is the sink of backward
propagation; it is owned by the model, not by the computation graph, and it
outlives every graph that references the parameter.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - `set_grad` has overwrite semantics: the trainer guarantees the buffer
      is zeroed before each graph's backward pass, so gradients are never
      summed across unrelated samples.
    - `update` is the only mutation path for the parameter value and is
      reserved for trainers.
    """

    @property
    def shape(self) -> Tuple[int, int]:
        """
        Return the `(rows, cols)` shape of the parameter.
        """
        ...

    def numel(self) -> int:
        """
        Return the number of scalar weights held by the parameter.
        """
        ...

    @property
    def value(self) -> Any:
        """
        Return a snapshot of the current parameter value.
        """
        ...

    @property
    def grad(self) -> Any:
        """
        Return a snapshot of the gradient buffer.
        """
        ...

    def set_grad(self, grad: Any) -> None:
        """
        Overwrite the gradient buffer.

        Raises
        ------
        ParameterGradientSizeMismatchError
            If the element count of `grad` differs from `numel()`.
        """
        ...

    def zero_grad(self) -> None:
        """
        Reset the gradient buffer to zeros.
        """
        ...

    def update(self, delta: Any) -> None:
        """
        Add `delta` to the parameter value in place.
        """
        ...
