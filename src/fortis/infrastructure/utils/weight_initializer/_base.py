"""
Parameter initializer registry and dispatch utilities.

This module defines the concrete `WeightInitializer` used by `Model` to
sample the initial value of every parameter it creates.

Design
------
- Initializers are registered by string name via a decorator-based registry.
- Each initializer is a callable `(shape, rng) -> np.ndarray` that returns a
  freshly sampled float32 array of the requested `(rows, cols)` shape. The
  random generator is owned by the caller, which makes seeding a model-level
  concern.
- The dispatcher resolves an initializer by name at construction time and
  invokes it via `__call__`.

Usage example
-------------
Registering an initializer:

    @WeightInitializer.register_initializer("kaiming")
    def kaiming(shape, rng):
        ...

Applying an initializer:

    init = WeightInitializer("kaiming")
    values = init((10, 784), np.random.default_rng(0))
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, Tuple, TypeVar

import numpy as np

from ....domain.utils._weight_initialization import _WeightInitializer

InitializerFn = Callable[[Tuple[int, int], np.random.Generator], np.ndarray]
T = TypeVar("T", bound=InitializerFn)


class WeightInitializer(_WeightInitializer):
    """
    Registry-backed parameter initializer dispatcher.

    Parameters
    ----------
    initializer_name : str
        Name of a registered initializer.

    Raises
    ------
    ValueError
        If no initializer is registered under `initializer_name`.
    """

    INITIALIZERS: ClassVar[Dict[str, InitializerFn]] = {}

    def __init__(self, initializer_name: str) -> None:
        try:
            self._initializer: InitializerFn = self.INITIALIZERS[initializer_name]
        except KeyError as e:
            available = ", ".join(sorted(self.INITIALIZERS)) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. "
                f"Available: {available}"
            ) from e
        self.name = initializer_name

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Decorator to register an initializer under `name`.

        Parameters
        ----------
        name:
            Registry key used to retrieve the initializer later.
        overwrite:
            If False (default), raises if `name` is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(func: T) -> T:
            if not overwrite and name in cls.INITIALIZERS:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = func
            return func

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return registered initializer names (sorted)."""
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> InitializerFn:
        """Get a registered initializer callable by name."""
        return cls.INITIALIZERS[name]

    def __call__(
        self, shape: Tuple[int, int], rng: np.random.Generator
    ) -> np.ndarray:
        values = self._initializer(tuple(shape), rng)
        return np.asarray(values, dtype=np.float32).reshape(shape)
