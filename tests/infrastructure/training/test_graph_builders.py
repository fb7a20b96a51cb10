import unittest

import numpy as np

from src.fortis.domain._node import OperationKind
from src.fortis.infrastructure._graph import Graph
from src.fortis.infrastructure._model import Model
from src.fortis.infrastructure.training import (
    MLPGraphBuilder,
    add_dense_layer,
    build_linear_classifier_graph,
    build_mlp_graph,
)
from src.fortis.infrastructure._parameter import Parameter
from src.fortis.infrastructure.nodes import InputNode


class TestDenseLayer(unittest.TestCase):
    def test_wx_plus_b(self):
        g = Graph()
        x = InputNode([1.0, 2.0])
        g.add_node(x)
        w = Parameter([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        b = Parameter([0.5, 0.5, 0.5])
        out = add_dense_layer(g, w, b, x)
        for node in g:
            node.forward()
        np.testing.assert_allclose(out.output.to_numpy(), [[1.5, 2.5, 3.5]])


class TestBuilders(unittest.TestCase):
    def test_linear_classifier(self):
        g = Graph()
        w = Parameter(np.zeros((3, 2)))
        b = Parameter([0.0, 5.0, 0.0])
        ce = build_linear_classifier_graph(g, w, b, [1.0, 1.0], [0.0, 1.0, 0.0])
        self.assertIs(g[len(g) - 1], ce)
        pred, loss = g.forward_pass()
        self.assertEqual(pred, 1)
        self.assertLess(loss, 0.02)

    def test_mlp_activation_count(self):
        model = Model(seed=0)
        layers = [
            (model.get_parameter(model.add_parameter((4, 2))), model.get_parameter(model.add_parameter(4))),
            (model.get_parameter(model.add_parameter((4, 4))), model.get_parameter(model.add_parameter(4))),
            (model.get_parameter(model.add_parameter((2, 4))), model.get_parameter(model.add_parameter(2))),
        ]
        g = Graph()
        build_mlp_graph(g, layers, [0.5, -0.5], [1.0, 0.0], activation="tanh")
        kinds = [n.kind for n in g]
        self.assertEqual(kinds.count(OperationKind.TANH), 2)
        self.assertEqual(kinds.count(OperationKind.PRODUCT), 3)
        self.assertEqual(kinds[-2:], [OperationKind.SOFTMAX, OperationKind.CROSS_ENTROPY_LOSS])

    def test_mlp_requires_layers(self):
        with self.assertRaises(ValueError):
            build_mlp_graph(Graph(), [], [1.0], [1.0])

    def test_unknown_activation(self):
        with self.assertRaises(ValueError):
            MLPGraphBuilder(Model(seed=0), [2, 2], activation="sigmoid")


class TestMLPGraphBuilder(unittest.TestCase):
    def test_allocates_parameters(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [5, 3, 2])
        self.assertEqual(len(model), 4)
        self.assertEqual(builder.parameter_ids, [(0, 1), (2, 3)])
        self.assertEqual(model.get_parameter(0).shape, (3, 5))
        self.assertEqual(model.get_parameter(1).shape, (1, 3))
        self.assertEqual(model.get_parameter(2).shape, (2, 3))
        np.testing.assert_array_equal(model.get_parameter(1).value.to_numpy(), np.zeros((1, 3)))
        self.assertIs(model.get_parameter_by_name("dense1.weight"), model.get_parameter(2))

    def test_invalid_layer_sizes(self):
        with self.assertRaises(ValueError):
            MLPGraphBuilder(Model(seed=0), [4])
        with self.assertRaises(ValueError):
            MLPGraphBuilder(Model(seed=0), [4, 0, 2])

    def test_relu_network_has_relu_nodes(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 3, 3, 2])
        g = Graph()
        builder(g, model, [1.0, 0.0], [0.0, 1.0])
        self.assertEqual(sum(n.kind is OperationKind.RELU for n in g), 2)


if __name__ == "__main__":
    unittest.main()
