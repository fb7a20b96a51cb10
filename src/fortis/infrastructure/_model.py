"""
In-memory parameter store.

`Model` owns every trainable `Parameter` of a network and addresses them by
a stable integer id assigned in insertion order. Graph builders resolve
parameters through `get_parameter` and wrap them in `ParameterNode`s; the
trainer iterates over `parameters()`.

Initial values are sampled through the `WeightInitializer` registry from a
`numpy.random.Generator` owned by the model, so two models built with the
same seed and the same sequence of `add_parameter` calls are identical.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from ..domain._model import IModel
from ._parameter import Parameter
from .utils.weight_initializer import WeightInitializer

logger = logging.getLogger(__name__)

ShapeLike = Union[int, Tuple[int, int]]


def _normalize_shape(shape: ShapeLike) -> Tuple[int, int]:
    """
    Return `shape` as a `(rows, cols)` pair.

    A bare integer `n` denotes a `(1, n)` row vector (bias).
    """
    if isinstance(shape, (int, np.integer)):
        dims = (1, int(shape))
    else:
        dims = tuple(int(d) for d in shape)
        if len(dims) == 1:
            dims = (1, dims[0])
    if len(dims) != 2 or dims[0] <= 0 or dims[1] <= 0:
        raise ValueError(
            f"Parameter shape must be a positive int or (rows, cols), got {shape!r}"
        )
    return dims


class Model(IModel):
    """
    Parameter store with id-based lookup.

    Parameters
    ----------
    seed : int, optional
        Seed of the random generator used by initializers. When omitted, the
        generator draws fresh entropy from the OS.

    Examples
    --------
    >>> model = Model(seed=0)
    >>> w = model.add_parameter((10, 784), initializer="xavier")
    >>> b = model.add_parameter(10, initializer="zeros")
    >>> model.get_parameter(w).shape
    (10, 784)
    """

    def __init__(self, *, seed: Optional[int] = None) -> None:
        self._rng = np.random.default_rng(seed)
        self._parameters: List[Parameter] = []
        self._ids_by_name: Dict[str, int] = {}

    def __repr__(self) -> str:
        return (
            f"Model(parameters={len(self._parameters)}, "
            f"elements={self.num_parameters()})"
        )

    def __len__(self) -> int:
        return len(self._parameters)

    def add_parameter(
        self,
        shape: ShapeLike,
        *,
        initializer: str = "normal",
        name: str = "",
    ) -> int:
        """
        Allocate, initialize and register a new parameter.

        Parameters
        ----------
        shape : int or tuple[int, int]
            `(rows, cols)` of the parameter; an int `n` means `(1, n)`.
        initializer : str, optional
            Registered initializer name. Defaults to ``"normal"``.
        name : str, optional
            Unique debug name; also usable with `get_parameter_by_name`.

        Returns
        -------
        int
            The parameter id.

        Raises
        ------
        ValueError
            If the shape is invalid, the initializer is unknown or the name
            is already taken.
        """
        dims = _normalize_shape(shape)
        if name and name in self._ids_by_name:
            raise ValueError(f"Parameter name already registered: {name!r}")

        init = WeightInitializer(initializer)
        parameter = Parameter(init(dims, self._rng), name=name)

        pid = len(self._parameters)
        self._parameters.append(parameter)
        if name:
            self._ids_by_name[name] = pid
        logger.debug(
            "add_parameter id=%d shape=%s initializer=%s", pid, dims, initializer
        )
        return pid

    def get_parameter(self, parameter_id: int) -> Parameter:
        """
        Return the parameter registered under `parameter_id`.

        Raises
        ------
        KeyError
            If no parameter has this id.
        """
        if not 0 <= int(parameter_id) < len(self._parameters):
            raise KeyError(f"Unknown parameter id: {parameter_id}")
        return self._parameters[int(parameter_id)]

    def get_parameter_by_name(self, name: str) -> Parameter:
        try:
            return self._parameters[self._ids_by_name[name]]
        except KeyError as e:
            raise KeyError(f"Unknown parameter name: {name!r}") from e

    def parameters(self) -> Iterator[Parameter]:
        """
        Iterate over all parameters in id order.
        """
        return iter(self._parameters)

    def num_parameters(self) -> int:
        """
        Return the total number of scalar elements across all parameters.
        """
        return sum(p.numel() for p in self._parameters)
