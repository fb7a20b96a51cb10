"""
Computation-graph exceptions for Fortis.

This module defines the error taxonomy raised by the graph executor and by
operation nodes. Every error is a local construction-time or call-time
failure: the engine never retries internally and never attempts partial
recovery inside a single graph evaluation. Errors are surfaced to the caller
(graph builder or training loop), which decides whether to skip the sample
or abort training.

All exceptions derive from `FortisError` so that callers can catch the whole
family with a single handler when they do not care about the specific cause.
"""

from __future__ import annotations

from typing import Tuple


class FortisError(RuntimeError):
    """
    Base class for all computation-graph errors raised by Fortis.
    """


class ShapeMismatchError(FortisError, ValueError):
    """
    Raised at node construction when operand shapes are incompatible.

    This is the only place where shape errors are raised. Once a node has
    been constructed, its forward and backward passes assume validated
    shapes.

    Attributes
    ----------
    op : str
        Name of the operation whose operands did not match.
    left : tuple[int, int]
        Shape of the first operand.
    right : tuple[int, int]
        Shape of the second operand (or of the label, for losses).
    """

    def __init__(
        self,
        op: str,
        left: Tuple[int, int],
        right: Tuple[int, int],
        reason: str = "",
    ) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            Operation name (e.g., "Summation", "Product").
        left : tuple[int, int]
            Shape of the first operand.
        right : tuple[int, int]
            Shape of the second operand.
        reason : str, optional
            Human-readable description of the violated rule.
        """
        msg = f"Shape mismatch for {op}: {left} vs {right}."
        if reason:
            msg = f"{msg} {reason}"
        super().__init__(msg)
        self.op = op
        self.left = tuple(left)
        self.right = tuple(right)


class MissingUpstreamGradientError(FortisError):
    """
    Raised when a backward call does not carry the gradient it requires.

    Two situations trigger this error:

    - a non-terminal node is asked to propagate without an upstream gradient
      (i.e. it received a `Seed` signal), and
    - a terminal loss node is invoked with an externally supplied upstream
      gradient, which violates its contract of synthesizing its own.
    """

    def __init__(self, node: str, detail: str) -> None:
        super().__init__(f"{node}: {detail}")
        self.node = node


class StaleOutputAccessError(FortisError):
    """
    Raised when a node output is written twice or read before it exists.

    Node outputs are write-once per graph evaluation: calling `forward()` on
    the same node twice, or reading `output` before `forward()` ran, are both
    programming errors.
    """

    def __init__(self, node: str, detail: str) -> None:
        super().__init__(f"{node}: {detail}")
        self.node = node


class InvalidLabelError(FortisError, ValueError):
    """
    Raised when a label vector is not one-hot encoded where one is required.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid label: {detail}")


class ParameterGradientSizeMismatchError(FortisError, ValueError):
    """
    Raised when a gradient's element count disagrees with its parameter.

    Attributes
    ----------
    expected : int
        Number of elements held by the parameter.
    actual : int
        Number of elements carried by the gradient.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Gradient has {actual} elements while the parameter has "
            f"{expected} elements."
        )
        self.expected = int(expected)
        self.actual = int(actual)


class GraphStateError(FortisError):
    """
    Raised when the graph executor is driven out of its state machine order.

    Examples include launching a backward pass before a forward pass,
    appending nodes after the forward pass, or launching a forward pass on a
    graph whose last node is not a loss node.
    """
