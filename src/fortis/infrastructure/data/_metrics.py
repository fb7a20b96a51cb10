"""
Classification metrics.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def compute_accuracy(predicted: Sequence[int], labels) -> float:
    """
    Return the fraction of predictions matching the labels.

    Parameters
    ----------
    predicted : Sequence[int]
        Predicted class indices.
    labels : array-like
        Either one-hot rows of shape ``(N, C)`` or class indices of shape
        ``(N,)``.

    Returns
    -------
    float
        Accuracy in ``[0, 1]``. An empty input yields 0.0.

    Raises
    ------
    ValueError
        If the number of predictions and labels differ.
    """
    pred = np.asarray(predicted, dtype=np.int64).reshape(-1)
    lab = np.asarray(labels)
    if lab.ndim == 2:
        lab = np.argmax(lab, axis=1)
    lab = lab.astype(np.int64).reshape(-1)

    if pred.size != lab.size:
        raise ValueError(
            f"predicted has {pred.size} entries while labels has {lab.size}"
        )
    if pred.size == 0:
        return 0.0
    return float(np.mean(pred == lab))
