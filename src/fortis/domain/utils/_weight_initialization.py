"""
Abstract interfaces and utilities for parameter initialization.

This module defines the abstract base class for parameter initializers used
by the model, along with a helper computing fan-in and fan-out from a
`(rows, cols)` parameter shape.

The concrete implementation and registry logic live in the infrastructure
layer. This module exists in the domain layer to define contracts and shared
mathematical utilities without binding to any specific backend.
"""

from abc import ABC
from typing import Any, Callable, Dict, Tuple, TypeVar


T = TypeVar("T", bound=Callable[..., Any])


class _WeightInitializer(ABC):
    """
    Abstract base class for parameter initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable `(shape, rng) -> ndarray` returning a
      freshly sampled float32 array of the requested shape.
    - This class does not prescribe how initializers are stored or invoked;
      it only defines the expected interface.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        """
        Construct an initializer dispatcher.

        Parameters
        ----------
        initializer_name:
            The string key identifying a registered initializer.
        """
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register an initializer under a given name.

        Parameters
        ----------
        name:
            Name used to identify the initializer.
        overwrite:
            Whether to allow overwriting an existing registration.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """
        Return the names of all registered initializers.
        """
        ...

    def __call__(self, shape: Tuple[int, int], rng: Any) -> Any:
        """
        Sample initial values for a parameter of the given shape.
        """
        ...


def _calculate_fan_in_and_fan_out(shape: Tuple[int, int]) -> Tuple[int, int]:
    """
    Compute both fan-in and fan-out values for a parameter shape.

    Weight matrices are stored as `(out_features, in_features)`, matching the
    `ProductNode(W, x)` convention where each row of `W` is dotted with `x`.
    Row-vector parameters (biases) report their length for both values.

    Parameters
    ----------
    shape:
        `(rows, cols)` shape of the parameter.

    Returns
    -------
    tuple[int, int]
        A tuple of (fan_in, fan_out).
    """
    rows, cols = int(shape[0]), int(shape[1])
    if rows == 1:
        return cols, cols
    return cols, rows
