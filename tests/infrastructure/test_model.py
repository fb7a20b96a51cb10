import unittest

import numpy as np

from src.fortis.domain._model import IModel
from src.fortis.infrastructure._model import Model


class TestModel(unittest.TestCase):
    def test_ids_follow_insertion_order(self):
        model = Model(seed=0)
        self.assertEqual(model.add_parameter((3, 2)), 0)
        self.assertEqual(model.add_parameter(3), 1)
        self.assertEqual(len(model), 2)
        self.assertEqual(model.get_parameter(0).shape, (3, 2))
        self.assertEqual(model.get_parameter(1).shape, (1, 3))

    def test_one_element_tuple_is_row_vector(self):
        model = Model(seed=0)
        pid = model.add_parameter((5,))
        self.assertEqual(model.get_parameter(pid).shape, (1, 5))

    def test_unknown_id(self):
        model = Model(seed=0)
        model.add_parameter(2)
        with self.assertRaises(KeyError):
            model.get_parameter(1)
        with self.assertRaises(KeyError):
            model.get_parameter(-1)

    def test_invalid_shapes(self):
        model = Model(seed=0)
        for bad in (0, (0, 3), (2, 3, 4), (-1, 2)):
            with self.assertRaises(ValueError, msg=str(bad)):
                model.add_parameter(bad)

    def test_unknown_initializer(self):
        with self.assertRaises(ValueError):
            Model(seed=0).add_parameter(3, initializer="___nope___")

    def test_names(self):
        model = Model(seed=0)
        pid = model.add_parameter((2, 2), name="w")
        self.assertIs(model.get_parameter_by_name("w"), model.get_parameter(pid))
        with self.assertRaises(ValueError):
            model.add_parameter(2, name="w")
        with self.assertRaises(KeyError):
            model.get_parameter_by_name("b")

    def test_seed_reproducibility(self):
        a, b = Model(seed=42), Model(seed=42)
        for m in (a, b):
            m.add_parameter((4, 3))
            m.add_parameter(4, initializer="xavier_uniform")
        for pa, pb in zip(a.parameters(), b.parameters()):
            np.testing.assert_array_equal(pa.value.to_numpy(), pb.value.to_numpy())

    def test_default_initializer_is_standard_normal(self):
        model = Model(seed=1)
        values = model.get_parameter(model.add_parameter((100, 100))).value.to_numpy()
        self.assertAlmostEqual(float(values.mean()), 0.0, delta=0.05)
        self.assertAlmostEqual(float(values.std()), 1.0, delta=0.05)

    def test_num_parameters(self):
        model = Model(seed=0)
        model.add_parameter((10, 4))
        model.add_parameter(10, initializer="zeros")
        self.assertEqual(model.num_parameters(), 50)
        self.assertEqual(len(list(model.parameters())), 2)

    def test_conforms_to_imodel(self):
        self.assertIsInstance(Model(seed=0), IModel)


if __name__ == "__main__":
    unittest.main()
