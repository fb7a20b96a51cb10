"""
Domain-level data source contract.

A data source supplies `(input_vector, one_hot_label)` pairs to the training
loop. The engine imposes no file format, only a shape contract: inputs are
row vectors and labels are one-hot row vectors.
"""

from __future__ import annotations

from typing import Iterator, Protocol, Tuple, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IDataSource(Protocol):
    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[Tuple[ITensor, ITensor]]: ...
