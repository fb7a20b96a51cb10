"""
Kaiming (He) initializers.

Implemented variants
--------------------
- ``kaiming``:
    Normal initialization using ``std = sqrt(2 / fan_in)``, the canonical
    choice for `ReLUNode` hidden layers.
- ``kaiming_uniform``:
    Uniform initialization on ``[-bound, bound]`` with
    ``bound = sqrt(6 / fan_in)``.
"""

import math

import numpy as np

from ._base import WeightInitializer
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


@WeightInitializer.register_initializer("kaiming")
def kaiming(shape, rng: np.random.Generator) -> np.ndarray:
    """
    Apply Kaiming (He) normal initialization.

        std = sqrt(2 / fan_in)
    """
    fan_in, _ = _calculate_fan_in_and_fan_out(shape)
    fan_in = max(1, int(fan_in))

    std = math.sqrt(2.0 / float(fan_in))
    return (rng.standard_normal(size=shape) * std).astype(np.float32)


@WeightInitializer.register_initializer("kaiming_uniform")
def kaiming_uniform(shape, rng: np.random.Generator) -> np.ndarray:
    fan_in, _ = _calculate_fan_in_and_fan_out(shape)
    fan_in = max(1, int(fan_in))

    bound = math.sqrt(6.0 / float(fan_in))
    return rng.uniform(-bound, bound, size=shape).astype(np.float32)
