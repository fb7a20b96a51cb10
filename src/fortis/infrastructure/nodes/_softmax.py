"""
Softmax normalization node.

Forward (max-subtraction form, stable for arbitrarily large logits):

    m   = max(z)
    p_i = exp(z_i - m) / sum_j exp(z_j - m)

Backward, with Jacobian `J_ij = p_i (δ_ij - p_j)`:

    dL/dz_k = sum_i g_i J_ik = p_k (g_k - sum_i g_i p_i)

The Jacobian-vector product is evaluated directly without materializing `J`.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from ...domain._errors import StaleOutputAccessError
from ...domain._node import INode, OperationKind
from ..tensor._tensor import Tensor
from ._base import Node


def stable_softmax(logits: np.ndarray) -> np.ndarray:
    """
    Compute softmax probabilities using the max-subtraction trick.

    Parameters
    ----------
    logits : np.ndarray
        Array of logits of any shape; normalization runs over all elements.

    Returns
    -------
    np.ndarray
        float64 probabilities of the same shape, summing to 1.
    """
    z = np.asarray(logits, dtype=np.float64)
    e = np.exp(z - z.max())
    return e / e.sum()


class SoftMaxNode(Node):
    """
    Softmax over the elements of a row vector.

    Parameters
    ----------
    logits : INode
        Input node producing the logits.
    """

    KIND = OperationKind.SOFTMAX

    def __init__(self, logits: INode) -> None:
        super().__init__(logits)
        self._shape: Tuple[int, int] = tuple(logits.output_shape())

    def output_shape(self) -> Tuple[int, int]:
        return self._shape

    def predicted_label(self) -> int:
        """
        Return the index of the most probable class.

        Raises
        ------
        StaleOutputAccessError
            If `forward()` has not run yet.
        """
        return self.output.argmax()

    def _compute_forward(self) -> Tensor:
        p = stable_softmax(self._inputs[0].output.to_numpy())
        return Tensor(p)

    def _propagate(self, upstream: np.ndarray) -> None:
        p = self.output.to_numpy().astype(np.float64)
        g = upstream.astype(np.float64)
        grad = p * (g - np.sum(g * p))
        self._send(0, grad)

    def backward_logits(self, grad_logits: Tensor, *, upstream: Tensor) -> None:
        """
        Propagate a gradient already expressed with respect to the logits.

        This is the composed path used by `CrossEntropyLossNode`: the caller
        has applied the softmax Jacobian analytically, so `grad_logits` is
        forwarded to the input unchanged instead of being multiplied by `J`
        a second time.

        Parameters
        ----------
        grad_logits : Tensor
            `Jᵀ · upstream`, the gradient with respect to this node's input.
        upstream : Tensor
            The gradient with respect to this node's output, recorded in the
            local-gradient accumulator.

        Raises
        ------
        StaleOutputAccessError
            If `forward()` has not run yet.
        """
        if self._output is None:
            raise StaleOutputAccessError(
                self.kind.value, "backward() called before forward()"
            )
        self._accumulate_local(self._as_output_shaped(upstream))
        self._send(0, self._as_output_shaped(grad_logits))
