import math
import unittest

import numpy as np

from src.fortis.infrastructure.utils.weight_initializer import WeightInitializer


class TestKaimingInitializers(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(2)

    def test_kaiming_std_uses_fan_in(self):
        out = WeightInitializer("kaiming")((256, 400), self.rng)
        expected = math.sqrt(2.0 / 400)
        self.assertAlmostEqual(float(out.std()), expected, delta=0.03 * expected)

    def test_kaiming_uniform_bounds(self):
        out = WeightInitializer("kaiming_uniform")((64, 100), self.rng)
        bound = math.sqrt(6.0 / 100)
        self.assertLessEqual(float(out.max()), bound + 1e-6)
        self.assertGreaterEqual(float(out.min()), -bound - 1e-6)

    def test_bias_shape_fan_in_is_length(self):
        out = WeightInitializer("kaiming")((1, 50000), self.rng)
        expected = math.sqrt(2.0 / 50000)
        self.assertAlmostEqual(float(out.std()), expected, delta=0.03 * expected)


if __name__ == "__main__":
    unittest.main()
