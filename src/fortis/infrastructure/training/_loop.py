"""
Per-example training and evaluation loops.

`fit` drives the whole lifecycle described by the graph executor: for every
example it renews the graph, builds the example's computation, runs the
forward and backward passes and lets the trainer update the parameters.
Each epoch's mean loss and accuracy are recorded in a `History`.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Dict, List, Optional, Tuple

import numpy as np

from ...domain._data_source import IDataSource
from ...domain._errors import InvalidLabelError, ShapeMismatchError
from ...domain._model import IModel
from ...domain._trainer import ITrainer
from .._graph import Graph
from ..data._metrics import compute_accuracy
from ..tensor._tensor import Tensor
from ._builders import GraphBuilder
from ._config import TrainingConfig
from ._history import History

logger = logging.getLogger(__name__)

_SAMPLE_ERRORS = (InvalidLabelError, ShapeMismatchError)


def _build(
    graph: Graph,
    model: IModel,
    builder: GraphBuilder,
    x,
    label,
    *,
    skip_invalid: bool,
    position: int,
) -> bool:
    """
    Renew `graph` and build one example into it.

    Returns False when the example was rejected and `skip_invalid` is set.
    """
    graph.renew()
    try:
        builder(graph, model, x, label)
    except _SAMPLE_ERRORS as e:
        if not skip_invalid:
            raise
        logger.warning("skipping example #%d: %s", position, e)
        return False
    return True


def _epoch_logs(
    losses: List[float], predicted: List[int], targets: List[int], skipped: int
) -> Dict[str, float]:
    if not losses:
        warnings.warn(
            "No example was processed during this epoch; loss and accuracy are NaN.",
            RuntimeWarning,
            stacklevel=3,
        )
        return {"loss": math.nan, "accuracy": math.nan, "skipped": skipped}
    return {
        "loss": float(np.mean(losses)),
        "accuracy": compute_accuracy(predicted, targets),
        "skipped": skipped,
    }


def fit(
    model: IModel,
    trainer: ITrainer,
    data_source: IDataSource,
    builder: GraphBuilder,
    config: Optional[TrainingConfig] = None,
) -> History:
    """
    Train `model` with one graph evaluation and one update per example.

    Parameters
    ----------
    model : IModel
        Model owning the parameters referenced by the built graphs.
    trainer : ITrainer
        Update rule applied after every backward pass.
    data_source : IDataSource
        Iterable of `(input_vector, one_hot_label)` pairs.
    builder : GraphBuilder
        Callable ``builder(graph, model, x, label)`` that appends one
        example's computation to an empty graph.
    config : TrainingConfig, optional
        Loop options. Defaults to a single epoch that aborts on invalid
        examples.

    Returns
    -------
    History
        Per-epoch ``loss`` (mean over processed examples), ``accuracy`` and
        ``skipped`` count.

    Raises
    ------
    InvalidLabelError, ShapeMismatchError
        If an example cannot be built and `config.skip_invalid_samples` is
        False.
    """
    config = config or TrainingConfig()
    graph = Graph()
    hist = History()

    for epoch_idx in range(config.epochs):
        losses: List[float] = []
        predicted: List[int] = []
        targets: List[int] = []
        skipped = 0

        for position, (x, label) in enumerate(data_source):
            if not _build(
                graph,
                model,
                builder,
                x,
                label,
                skip_invalid=config.skip_invalid_samples,
                position=position,
            ):
                skipped += 1
                continue

            pred, loss = graph.forward_pass()
            trainer.zero_gradients()
            graph.backward_pass()
            trainer.apply_update()

            losses.append(loss)
            predicted.append(pred)
            targets.append(Tensor(label).argmax())

            if config.log_every and (position + 1) % config.log_every == 0:
                logger.info(
                    "epoch %d example %d running_loss=%.6f",
                    epoch_idx + 1,
                    position + 1,
                    float(np.mean(losses)),
                )

        logs = _epoch_logs(losses, predicted, targets, skipped)
        hist.append_epoch(epoch_idx, logs)
        logger.info(
            "Epoch %d/%d - loss: %.6f - accuracy: %.4f - skipped: %d",
            epoch_idx + 1,
            config.epochs,
            logs["loss"],
            logs["accuracy"],
            skipped,
        )

    graph.renew()
    return hist


def evaluate(
    model: IModel,
    data_source: IDataSource,
    builder: GraphBuilder,
    *,
    skip_invalid_samples: bool = False,
) -> Dict[str, float]:
    """
    Run forward passes only and report mean loss and accuracy.

    Parameters are never modified.

    Returns
    -------
    Dict[str, float]
        ``{"loss": ..., "accuracy": ..., "skipped": ...}``.
    """
    graph = Graph()
    results: List[Tuple[int, float, int]] = []
    skipped = 0

    for position, (x, label) in enumerate(data_source):
        if not _build(
            graph,
            model,
            builder,
            x,
            label,
            skip_invalid=skip_invalid_samples,
            position=position,
        ):
            skipped += 1
            continue
        pred, loss = graph.forward_pass()
        results.append((pred, loss, Tensor(label).argmax()))

    graph.renew()
    predicted = [r[0] for r in results]
    losses = [r[1] for r in results]
    targets = [r[2] for r in results]
    return _epoch_logs(losses, predicted, targets, skipped)
