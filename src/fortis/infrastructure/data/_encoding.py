"""
Label and input encoding helpers.

These helpers turn raw dataset values into the shapes the graph expects:
class indices become one-hot row vectors and raw feature vectors (for
example 8-bit pixel intensities) are scaled into float32 row vectors.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ...domain._errors import InvalidLabelError
from ..tensor._tensor import Tensor


def one_hot_encode(labels: Sequence[int], num_classes: int) -> np.ndarray:
    """
    Encode integer class labels as one-hot rows.

    Parameters
    ----------
    labels : Sequence[int]
        Class indices in ``[0, num_classes)``.
    num_classes : int
        Length of each encoded vector.

    Returns
    -------
    np.ndarray
        float32 array of shape ``(len(labels), num_classes)``.

    Raises
    ------
    ValueError
        If `num_classes` is not positive.
    InvalidLabelError
        If a label falls outside ``[0, num_classes)``.
    """
    num_classes = int(num_classes)
    if num_classes <= 0:
        raise ValueError(f"num_classes must be > 0, got {num_classes}")

    idx = np.asarray(labels, dtype=np.int64).reshape(-1)
    bad = idx[(idx < 0) | (idx >= num_classes)]
    if bad.size:
        raise InvalidLabelError(
            f"label {int(bad[0])} is outside [0, {num_classes})"
        )

    out = np.zeros((idx.size, num_classes), dtype=np.float32)
    out[np.arange(idx.size), idx] = 1.0
    return out


def normalize_input(
    vector: Union[Sequence[float], np.ndarray], normalizer: float = 255.0
) -> Tensor:
    """
    Divide every element of `vector` by `normalizer`.

    Parameters
    ----------
    vector : array-like
        Raw feature values, any shape; they are flattened row-major.
    normalizer : float, optional
        Scale divisor. Defaults to 255, the maximum of 8-bit pixel data.

    Returns
    -------
    Tensor
        `(1, n)` row vector of scaled values.

    Raises
    ------
    ValueError
        If `normalizer` is zero.
    """
    normalizer = float(normalizer)
    if normalizer == 0.0:
        raise ValueError("normalizer must be non-zero")
    arr = np.asarray(vector, dtype=np.float32).reshape(1, -1)
    return Tensor(arr / np.float32(normalizer))
