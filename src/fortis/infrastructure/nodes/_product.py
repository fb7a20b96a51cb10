"""
Matrix-vector / vector-vector contraction node.

`ProductNode(W, x)` contracts each row of `W` with the row vector `x`:

    out_i = sum_j W_ij * x_j

Two shape regimes are supported, both requiring `cols(W) == cols(x)`:

- `rows(W) != rows(x)` : matrix-vector product, `x` must be `(1, n)` and the
  output is the `(1, rows(W))` row vector `(W x)ᵀ`;
- `rows(W) == rows(x)` : inner product of two `(1, n)` row vectors, the
  output is `(1, 1)`.

Backward, for upstream gradient `g` of shape `(1, rows(W))`:

    dL/dx  = Wᵀ g            (shape (1, n))
    dL/dW  = outer(g, x)     (shape (rows(W), n))

Both products are evaluated from operand snapshots taken during the forward
pass, so the gradient always matches the values that produced the output.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._node import INode, OperationKind
from ..tensor._tensor import Tensor
from ._base import Node


class ProductNode(Node):
    """
    Contraction of a weight matrix (or vector) with an activation vector.

    Parameters
    ----------
    weights : INode
        Left operand `W`, shape `(m, n)`.
    vector : INode
        Right operand `x`, shape `(1, n)`.

    Raises
    ------
    ShapeMismatchError
        If the column counts differ, or if `x` is not a row vector.
    """

    KIND = OperationKind.PRODUCT

    def __init__(self, weights: INode, vector: INode) -> None:
        super().__init__(weights, vector)
        w_shape = tuple(weights.output_shape())
        x_shape = tuple(vector.output_shape())

        if w_shape[1] != x_shape[1]:
            raise ShapeMismatchError(
                "Product", w_shape, x_shape, "cols(W) must equal cols(x)."
            )
        if w_shape[0] != x_shape[0]:
            if x_shape[0] != 1:
                raise ShapeMismatchError(
                    "Product",
                    w_shape,
                    x_shape,
                    "Matrix-vector product requires x to be a row vector.",
                )
            self._shape: Tuple[int, int] = (1, w_shape[0])
        else:
            if w_shape[0] != 1:
                raise ShapeMismatchError(
                    "Product",
                    w_shape,
                    x_shape,
                    "Inner product requires both operands to be row vectors.",
                )
            self._shape = (1, 1)

        self._w_snapshot: Optional[np.ndarray] = None
        self._x_snapshot: Optional[np.ndarray] = None

    @property
    def is_inner_product(self) -> bool:
        """
        Return True if the node computes a vector-vector inner product.
        """
        return self._inputs[0].output_shape()[0] == self._inputs[1].output_shape()[0]

    def output_shape(self) -> Tuple[int, int]:
        return self._shape

    def _compute_forward(self) -> Tensor:
        self._w_snapshot = self._inputs[0].output.to_numpy()
        self._x_snapshot = self._inputs[1].output.to_numpy()
        out = self._w_snapshot @ self._x_snapshot.reshape(-1)
        return Tensor(out.reshape(self._shape))

    def _propagate(self, upstream: np.ndarray) -> None:
        g = upstream.reshape(-1)
        w = self._w_snapshot
        x = self._x_snapshot.reshape(-1)

        grad_w = np.outer(g, x)
        grad_x = (g @ w).reshape(1, -1)

        self._send(0, grad_w)
        self._send(1, grad_x)
