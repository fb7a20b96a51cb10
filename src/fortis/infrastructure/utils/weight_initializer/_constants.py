"""
Constant and plain-normal initializers.

Provided initializers
---------------------
- ``normal``:
    Standard normal `N(0, 1)` samples, the default for new parameters.
- ``zeros``:
    All elements set to zero, typically used for biases.
- ``ones``:
    All elements set to one, mostly useful for deterministic tests.
"""

import numpy as np

from ._base import WeightInitializer

NORMAL_MEAN = 0.0
NORMAL_STD = 1.0


@WeightInitializer.register_initializer("normal")
def normal(shape, rng: np.random.Generator) -> np.ndarray:
    """
    Sample every element from `N(NORMAL_MEAN, NORMAL_STD)`.
    """
    return rng.normal(NORMAL_MEAN, NORMAL_STD, size=shape).astype(np.float32)


@WeightInitializer.register_initializer("zeros")
def zeros(shape, rng: np.random.Generator) -> np.ndarray:
    return np.zeros(shape, dtype=np.float32)


@WeightInitializer.register_initializer("ones")
def ones(shape, rng: np.random.Generator) -> np.ndarray:
    return np.ones(shape, dtype=np.float32)
