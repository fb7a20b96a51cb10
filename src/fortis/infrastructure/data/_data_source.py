"""
In-memory data source.

`InMemoryDataSource` holds a whole dataset as two NumPy arrays and yields
`(input_vector, one_hot_label)` tensor pairs, one per example. It is the
reference `IDataSource` used by the training loop and by tests.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from ...domain._data_source import IDataSource
from ..tensor._tensor import Tensor
from ._encoding import one_hot_encode


class InMemoryDataSource(IDataSource):
    """
    Iterable dataset of `(input, label)` row-vector pairs.

    Parameters
    ----------
    inputs : array-like
        Input vectors, shape ``(N, d)``. Each row is yielded as a ``(1, d)``
        tensor.
    labels : array-like
        One-hot labels, shape ``(N, C)``. Labels are not validated here; a
        malformed label surfaces as an `InvalidLabelError` when the loss node
        is built.
    shuffle : bool, optional
        If True, every iteration visits the examples in a new random order.
    seed : int, optional
        Seed of the shuffling generator.

    Raises
    ------
    ValueError
        If `inputs` and `labels` do not have the same number of rows.
    """

    def __init__(
        self,
        inputs,
        labels,
        *,
        shuffle: bool = False,
        seed: Optional[int] = None,
    ) -> None:
        x = np.asarray(inputs, dtype=np.float32)
        y = np.asarray(labels, dtype=np.float32)
        if x.ndim == 1:
            x = x.reshape(1, -1)
        if y.ndim == 1:
            y = y.reshape(1, -1)
        if x.ndim != 2 or y.ndim != 2:
            raise ValueError(
                f"inputs and labels must be 2-D, got {x.shape} and {y.shape}"
            )
        if x.shape[0] != y.shape[0]:
            raise ValueError(
                f"inputs has {x.shape[0]} rows while labels has {y.shape[0]}"
            )
        self._inputs = x
        self._labels = y
        self.shuffle = bool(shuffle)
        self._rng = np.random.default_rng(seed)

    @classmethod
    def from_class_indices(
        cls,
        inputs,
        labels: Sequence[int],
        num_classes: int,
        **kwargs,
    ) -> "InMemoryDataSource":
        """
        Build a data source from integer class labels.
        """
        return cls(inputs, one_hot_encode(labels, num_classes), **kwargs)

    def __repr__(self) -> str:
        return (
            f"InMemoryDataSource(n={len(self)}, features={self.num_features}, "
            f"classes={self.num_classes}, shuffle={self.shuffle})"
        )

    def __len__(self) -> int:
        return int(self._inputs.shape[0])

    @property
    def num_features(self) -> int:
        return int(self._inputs.shape[1])

    @property
    def num_classes(self) -> int:
        return int(self._labels.shape[1])

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    def __iter__(self) -> Iterator[Tuple[Tensor, Tensor]]:
        order = np.arange(len(self))
        if self.shuffle:
            order = self._rng.permutation(order)
        for i in order:
            yield Tensor(self._inputs[i]), Tensor(self._labels[i])
