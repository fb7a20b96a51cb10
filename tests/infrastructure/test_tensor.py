import unittest

import numpy as np

from src.fortis.domain._tensor import ITensor
from src.fortis.infrastructure.tensor._tensor import Tensor


class TestTensorConstruction(unittest.TestCase):
    def test_scalar_becomes_one_by_one(self):
        t = Tensor(3.5)
        self.assertEqual(t.shape, (1, 1))
        self.assertAlmostEqual(t.item(), 3.5)

    def test_flat_sequence_becomes_row_vector(self):
        t = Tensor([1.0, 2.0, 3.0])
        self.assertEqual(t.shape, (1, 3))
        self.assertEqual(t.rows, 1)
        self.assertEqual(t.cols, 3)
        self.assertTrue(t.is_vector())

    def test_matrix_keeps_shape(self):
        t = Tensor(np.zeros((4, 2)))
        self.assertEqual(t.shape, (4, 2))
        self.assertEqual(t.numel(), 8)
        self.assertFalse(t.is_vector())

    def test_rejects_more_than_two_dimensions(self):
        with self.assertRaises(ValueError):
            Tensor(np.zeros((2, 2, 2)))

    def test_storage_is_float32(self):
        t = Tensor(np.arange(3, dtype=np.int64))
        self.assertEqual(t.to_numpy().dtype, np.float32)

    def test_conforms_to_itensor(self):
        self.assertIsInstance(Tensor([1.0]), ITensor)


class TestTensorImmutability(unittest.TestCase):
    def test_backing_array_is_read_only(self):
        t = Tensor([1.0, 2.0])
        with self.assertRaises(ValueError):
            t.to_numpy()[0, 0] = 5.0

    def test_source_array_is_copied(self):
        src = np.array([1.0, 2.0], dtype=np.float32)
        t = Tensor(src)
        src[0] = 100.0
        np.testing.assert_array_equal(t.to_numpy(), [[1.0, 2.0]])

    def test_copy_constructor(self):
        a = Tensor([1.0, 2.0])
        b = Tensor(a)
        self.assertIsNot(a.to_numpy(), b.to_numpy())
        np.testing.assert_array_equal(a.to_numpy(), b.to_numpy())


class TestTensorFactories(unittest.TestCase):
    def test_zeros(self):
        t = Tensor.zeros(shape=(2, 3))
        self.assertEqual(t.shape, (2, 3))
        self.assertEqual(float(t.to_numpy().sum()), 0.0)

    def test_from_numpy_with_shape(self):
        t = Tensor.from_numpy(np.arange(6), shape=(2, 3))
        np.testing.assert_array_equal(t.to_numpy(), [[0, 1, 2], [3, 4, 5]])

    def test_vector(self):
        t = Tensor.vector([4, 5])
        self.assertEqual(t.shape, (1, 2))


class TestTensorOps(unittest.TestCase):
    def test_add_and_mul(self):
        a = Tensor([1.0, 2.0])
        b = Tensor([3.0, -1.0])
        np.testing.assert_allclose((a + b).to_numpy(), [[4.0, 1.0]])
        np.testing.assert_allclose((a * b).to_numpy(), [[3.0, -2.0]])
        np.testing.assert_allclose((2.0 * a).to_numpy(), [[2.0, 4.0]])
        np.testing.assert_allclose((-a).to_numpy(), [[-1.0, -2.0]])

    def test_binary_op_shape_mismatch(self):
        with self.assertRaises(ValueError):
            Tensor([1.0, 2.0]) + Tensor([1.0, 2.0, 3.0])

    def test_item_requires_single_element(self):
        with self.assertRaises(ValueError):
            Tensor([1.0, 2.0]).item()

    def test_argmax_ties_resolve_to_lowest_index(self):
        self.assertEqual(Tensor([0.2, 0.7, 0.7]).argmax(), 1)

    def test_allclose(self):
        a = Tensor([1.0, 2.0])
        self.assertTrue(a.allclose(Tensor([1.0, 2.0 + 1e-7])))
        self.assertFalse(a.allclose(Tensor([[1.0], [2.0]])))


if __name__ == "__main__":
    unittest.main()
