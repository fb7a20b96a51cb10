"""
Xavier/Glorot initializers.

Implemented variants
--------------------
- ``xavier``:
    Normal initialization using ``std = sqrt(2 / (fan_in + fan_out))``.
- ``xavier_uniform``:
    Uniform initialization on ``[-bound, bound]`` with
    ``bound = sqrt(6 / (fan_in + fan_out))``.
- ``xavier_tanh``:
    Normal initialization with tanh gain (``gain = 5/3``), suited to
    `TanHNode` hidden layers.

Notes
-----
Fan-in and fan-out are computed from the parameter shape via
``_calculate_fan_in_and_fan_out``.
"""

import math

import numpy as np

from ._base import WeightInitializer
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


def _xavier_std(shape, gain: float = 1.0) -> float:
    fan_in, fan_out = _calculate_fan_in_and_fan_out(shape)
    fan_in = max(1, int(fan_in))
    fan_out = max(1, int(fan_out))
    return gain * math.sqrt(2.0 / float(fan_in + fan_out))


@WeightInitializer.register_initializer("xavier")
def xavier(shape, rng: np.random.Generator) -> np.ndarray:
    """
    Apply Xavier (Glorot) normal initialization.

        std = sqrt(2 / (fan_in + fan_out))
    """
    std = _xavier_std(shape)
    return (rng.standard_normal(size=shape) * std).astype(np.float32)


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(shape, rng: np.random.Generator) -> np.ndarray:
    """
    Apply Xavier (Glorot) uniform initialization.

        U(-bound, +bound), where bound = sqrt(6 / (fan_in + fan_out))
    """
    fan_in, fan_out = _calculate_fan_in_and_fan_out(shape)
    fan_in = max(1, int(fan_in))
    fan_out = max(1, int(fan_out))

    bound = math.sqrt(6.0 / float(fan_in + fan_out))
    return rng.uniform(-bound, bound, size=shape).astype(np.float32)


@WeightInitializer.register_initializer("xavier_tanh")
def xavier_tanh(shape, rng: np.random.Generator) -> np.ndarray:
    std = _xavier_std(shape, gain=5.0 / 3.0)
    return (rng.standard_normal(size=shape) * std).astype(np.float32)
