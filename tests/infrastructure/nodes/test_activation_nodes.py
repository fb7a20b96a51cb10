import unittest

import numpy as np

from src.fortis.domain._node import OperationKind, Propagate
from src.fortis.infrastructure.nodes import InputNode, ReLUNode, TanHNode
from src.fortis.infrastructure.tensor._tensor import Tensor


def _forwarded(node_cls, values):
    x = InputNode(values)
    act = node_cls(x)
    x.forward()
    act.forward()
    return x, act


class TestReLUNode(unittest.TestCase):
    def test_forward(self):
        _, act = _forwarded(ReLUNode, [-1.0, 0.0, 2.5])
        self.assertEqual(act.kind, OperationKind.RELU)
        np.testing.assert_array_equal(act.output.to_numpy(), [[0.0, 0.0, 2.5]])

    def test_derivative_is_zero_at_exactly_zero(self):
        x, act = _forwarded(ReLUNode, [-1.0, 0.0, 2.0])
        act.backward(Propagate(Tensor([1.0, 1.0, 1.0])))
        np.testing.assert_array_equal(x.local_gradient.to_numpy(), [[0.0, 0.0, 1.0]])

    def test_upstream_is_scaled_by_derivative(self):
        x, act = _forwarded(ReLUNode, [3.0, -3.0])
        act.backward(Propagate(Tensor([0.5, 7.0])))
        np.testing.assert_allclose(act.input_gradient(0).to_numpy(), [[0.5, 0.0]])
        np.testing.assert_allclose(act.local_gradient.to_numpy(), [[0.5, 7.0]])

    def test_derivative_cached_on_first_backward(self):
        _, act = _forwarded(ReLUNode, [1.0, -1.0])
        self.assertIsNone(act.cached_derivative)
        act.backward(Propagate(Tensor([1.0, 1.0])))
        cached = act.cached_derivative
        np.testing.assert_array_equal(cached.to_numpy(), [[1.0, 0.0]])

        act.backward(Propagate(Tensor([2.0, 2.0])))
        np.testing.assert_array_equal(act.cached_derivative.to_numpy(), cached.to_numpy())
        np.testing.assert_allclose(act.input_gradient(0).to_numpy(), [[3.0, 0.0]])


class TestTanHNode(unittest.TestCase):
    def test_forward_matches_numpy(self):
        values = [-2.0, -0.5, 0.0, 0.5, 2.0]
        _, act = _forwarded(TanHNode, values)
        self.assertEqual(act.kind, OperationKind.TANH)
        np.testing.assert_allclose(
            act.output.to_numpy(), np.tanh(np.array([values])), rtol=1e-6, atol=1e-7
        )

    def test_forward_saturates_without_overflow(self):
        _, act = _forwarded(TanHNode, [-100.0, 100.0])
        out = act.output.to_numpy()
        self.assertTrue(np.all(np.isfinite(out)))
        np.testing.assert_allclose(out, [[-1.0, 1.0]])

    def test_backward_matches_finite_difference(self):
        values = np.array([0.3, -0.7, 1.2], dtype=np.float64)
        x, act = _forwarded(TanHNode, values)
        upstream = np.array([1.0, -2.0, 0.5])
        act.backward(Propagate(Tensor(upstream)))

        eps = 1e-4
        numeric = (np.tanh(values + eps) - np.tanh(values - eps)) / (2 * eps)
        np.testing.assert_allclose(
            x.local_gradient.to_numpy().reshape(-1), upstream * numeric, atol=1e-4
        )

    def test_derivative_is_one_minus_tanh_squared(self):
        x, act = _forwarded(TanHNode, [0.8])
        act.backward(Propagate(Tensor([1.0])))
        t = np.tanh(0.8)
        self.assertAlmostEqual(float(act.cached_derivative.item()), 1 - t * t, places=5)


if __name__ == "__main__":
    unittest.main()
