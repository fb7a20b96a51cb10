"""
Categorical cross-entropy loss node.

`CrossEntropyLossNode` is the terminal vertex of every Fortis graph. It binds
a one-hot label and reduces its input to a scalar loss.

Forward
-------
The loss is always computed from logits `z` with the max-subtraction trick:

    loss = log_sum_exp(z) - z_j,   log_sum_exp(z) = m + log(sum_i exp(z_i - m))

where `j` is the index of the positive label and `m = max(z)`. When the
input node is a `SoftMaxNode`, `z` is that softmax node's input, and the
result equals `-log(p_j)` for the softmax output `p` up to floating-point
tolerance. Otherwise the input itself is treated as the logits.

Backward
--------
The node receives no upstream gradient (`Seed`). It synthesizes

    dL/dz_i = p_i - y_i

which is the derived identity `Jᵀ · (-y / p) = p - y` of the softmax
Jacobian `J` composed with `dL/dp = -y / p`, valid because `y` is one-hot
and sums to 1. The gradient is delivered through the softmax node's
composed path, so the softmax Jacobian is never applied twice.
"""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np

from ...domain._errors import (
    GraphStateError,
    InvalidLabelError,
    MissingUpstreamGradientError,
    ShapeMismatchError,
    StaleOutputAccessError,
)
from ...domain._node import BackwardSignal, INode, OperationKind, Seed
from ..tensor._tensor import Tensor
from ._base import Node
from ._softmax import SoftMaxNode


def find_positive_label(label: np.ndarray) -> int:
    """
    Return the index of the single 1 in a one-hot label.

    Raises
    ------
    InvalidLabelError
        If the label is not one-hot (exactly one entry equal to 1 and all
        others equal to 0).
    """
    flat = np.asarray(label, dtype=np.float32).reshape(-1)
    ones = np.flatnonzero(flat == 1.0)
    if ones.size != 1:
        raise InvalidLabelError(
            f"expected exactly one entry equal to 1, found {ones.size}"
        )
    if np.count_nonzero(flat) != 1:
        raise InvalidLabelError("all entries other than the positive class must be 0")
    return int(ones[0])


class CrossEntropyLossNode(Node):
    """
    Terminal cross-entropy loss bound to a one-hot label.

    Parameters
    ----------
    logits_or_probs : INode
        Either a `SoftMaxNode` or a node producing raw logits.
    label : Tensor or array-like
        One-hot label with as many elements as the input's output.

    Raises
    ------
    ShapeMismatchError
        If the label length differs from the input length.
    InvalidLabelError
        If the label is not one-hot.
    """

    KIND = OperationKind.CROSS_ENTROPY_LOSS

    def __init__(
        self,
        logits_or_probs: INode,
        label: Union[Tensor, np.ndarray, list],
    ) -> None:
        super().__init__(logits_or_probs)
        self._label: Tensor = label if isinstance(label, Tensor) else Tensor(label)

        in_shape = tuple(logits_or_probs.output_shape())
        if in_shape[0] * in_shape[1] != self._label.numel():
            raise ShapeMismatchError(
                "CrossEntropyLoss",
                in_shape,
                self._label.shape,
                "Label length must equal the input length.",
            )
        self._target: int = find_positive_label(self._label.to_numpy())
        self._composed: bool = isinstance(logits_or_probs, SoftMaxNode)
        self._probs: Optional[np.ndarray] = None

    @property
    def label(self) -> Tensor:
        return self._label

    @property
    def target_index(self) -> int:
        return self._target

    @property
    def is_composed_with_softmax(self) -> bool:
        return self._composed

    @property
    def probabilities(self) -> Tensor:
        """
        Return the class probabilities derived during the forward pass.
        """
        if self._probs is None:
            raise StaleOutputAccessError(
                self.kind.value, "probabilities read before forward() ran"
            )
        return Tensor(self._probs.reshape(1, -1))

    def predicted_label(self) -> int:
        return self.probabilities.argmax()

    def output_shape(self) -> Tuple[int, int]:
        return (1, 1)

    def _logits(self) -> np.ndarray:
        source = self._inputs[0].inputs[0] if self._composed else self._inputs[0]
        return source.output.to_numpy().astype(np.float64).reshape(-1)

    def _compute_forward(self) -> Tensor:
        z = self._logits()
        m = z.max()
        lse = m + np.log(np.sum(np.exp(z - m)))
        self._probs = np.exp(z - lse)
        return Tensor([[lse - z[self._target]]])

    def backward(self, signal: Optional[BackwardSignal] = None) -> None:
        """
        Synthesize `p - y` and propagate it toward the logits.

        Parameters
        ----------
        signal : Seed, optional
            Must be a `Seed` (or None, treated as a `Seed`).

        Raises
        ------
        MissingUpstreamGradientError
            If an upstream gradient is supplied.
        StaleOutputAccessError
            If `forward()` has not run yet.
        GraphStateError
            If the loss has already been propagated.
        """
        if signal is not None and not isinstance(signal, Seed):
            raise MissingUpstreamGradientError(
                self.kind.value,
                "terminal loss node must not receive an upstream gradient",
            )
        if self._output is None:
            raise StaleOutputAccessError(
                self.kind.value, "backward() called before forward()"
            )
        if self._local_gradient is not None:
            raise GraphStateError("loss has already been propagated for this graph")

        self._accumulate_local(np.ones((1, 1), dtype=np.float32))

        y = self._label.to_numpy().astype(np.float64).reshape(-1)
        grad_logits = (self._probs - y).reshape(self._inputs[0].output_shape())

        if self._composed:
            softmax: SoftMaxNode = self._inputs[0]
            p = softmax.output.to_numpy().astype(np.float64).reshape(-1)
            tiny = np.finfo(np.float32).tiny
            grad_probs = (-y / np.maximum(p, tiny)).reshape(softmax.output_shape())

            acc = self._input_gradients[0]
            if acc is None:
                self._input_gradients[0] = grad_probs.astype(np.float32)
            else:
                acc += grad_probs.astype(np.float32)
            softmax.backward_logits(Tensor(grad_logits), upstream=Tensor(grad_probs))
        else:
            self._send(0, grad_logits)

    def _propagate(self, upstream: np.ndarray) -> None:
        raise MissingUpstreamGradientError(
            self.kind.value,
            "terminal loss node must not receive an upstream gradient",
        )
