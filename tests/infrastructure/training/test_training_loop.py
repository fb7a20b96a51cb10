import dataclasses
import math
import unittest

import numpy as np

from src.fortis.domain._errors import InvalidLabelError, ShapeMismatchError
from src.fortis.infrastructure._model import Model
from src.fortis.infrastructure.data import InMemoryDataSource
from src.fortis.infrastructure.trainers import GradientDescentTrainer
from src.fortis.infrastructure.training import (
    History,
    MLPGraphBuilder,
    TrainingConfig,
    evaluate,
    fit,
)

X = np.array([[1.0, 0.0], [0.0, 1.0]], dtype=np.float32)
Y = np.array([[1.0, 0.0], [0.0, 1.0]], dtype=np.float32)


class TestTrainingConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = TrainingConfig()
        self.assertEqual(cfg.epochs, 1)
        self.assertFalse(cfg.skip_invalid_samples)

    def test_validation(self):
        with self.assertRaises(ValueError):
            TrainingConfig(epochs=0)
        with self.assertRaises(ValueError):
            TrainingConfig(log_every=-1)

    def test_frozen(self):
        with self.assertRaises(dataclasses.FrozenInstanceError):
            TrainingConfig().epochs = 3  # type: ignore[misc]


class TestHistory(unittest.TestCase):
    def test_append_and_last(self):
        h = History()
        h.append_epoch(0, {"loss": 1.0, "accuracy": 0.5})
        h.append_epoch(1, {"loss": 0.5, "accuracy": 1})
        self.assertEqual(len(h), 2)
        self.assertEqual(h.epoch, [0, 1])
        self.assertEqual(h.history["loss"], [1.0, 0.5])
        self.assertEqual(h.last(), {"loss": 0.5, "accuracy": 1.0})


class TestFit(unittest.TestCase):
    def test_linear_classifier_converges(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 2])
        trainer = GradientDescentTrainer(model, learning_rate=0.5)
        source = InMemoryDataSource(X, Y, shuffle=True, seed=0)

        hist = fit(model, trainer, source, builder, TrainingConfig(epochs=50))

        self.assertEqual(len(hist), 50)
        self.assertEqual(hist.history["accuracy"][-1], 1.0)
        self.assertLess(hist.history["loss"][-1], hist.history["loss"][0])
        self.assertLess(hist.history["loss"][-1], 0.1)
        self.assertEqual(evaluate(model, source, builder)["accuracy"], 1.0)

    def test_tanh_mlp_loss_decreases(self):
        model = Model(seed=4)
        builder = MLPGraphBuilder(model, [2, 6, 2], activation="tanh")
        trainer = GradientDescentTrainer(model, learning_rate=0.05)
        source = InMemoryDataSource(X, Y)

        hist = fit(model, trainer, source, builder, TrainingConfig(epochs=30))
        self.assertLess(hist.history["loss"][-1], hist.history["loss"][0])

    def test_parameters_change_and_gradients_are_written(self):
        model = Model(seed=1)
        builder = MLPGraphBuilder(model, [2, 2])
        before = [p.value.to_numpy().copy() for p in model.parameters()]
        fit(
            model,
            GradientDescentTrainer(model, learning_rate=0.1),
            InMemoryDataSource(X, Y),
            builder,
        )
        after = [p.value.to_numpy() for p in model.parameters()]
        self.assertTrue(any(not np.array_equal(a, b) for a, b in zip(before, after)))

    def test_invalid_label_aborts_by_default(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 2])
        source = InMemoryDataSource(X, [[1.0, 1.0], [0.0, 1.0]])
        with self.assertRaises(InvalidLabelError):
            fit(model, GradientDescentTrainer(model), source, builder)

    def test_shape_mismatch_aborts_by_default(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [3, 2])
        with self.assertRaises(ShapeMismatchError):
            fit(model, GradientDescentTrainer(model), InMemoryDataSource(X, Y), builder)

    def test_invalid_samples_skipped_with_warning(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 2])
        source = InMemoryDataSource(X, [[1.0, 1.0], [0.0, 1.0]])
        cfg = TrainingConfig(epochs=2, skip_invalid_samples=True)

        with self.assertLogs("src.fortis", level="WARNING") as logs:
            hist = fit(model, GradientDescentTrainer(model), source, builder, cfg)

        self.assertEqual(hist.history["skipped"], [1.0, 1.0])
        self.assertTrue(all(math.isfinite(v) for v in hist.history["loss"]))
        self.assertTrue(any("skipping example #0" in line for line in logs.output))

    def test_all_samples_skipped_warns(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 2])
        source = InMemoryDataSource(X, [[1.0, 1.0], [0.0, 0.0]])
        cfg = TrainingConfig(skip_invalid_samples=True)

        with self.assertLogs("src.fortis", level="WARNING"):
            with self.assertWarns(RuntimeWarning):
                hist = fit(model, GradientDescentTrainer(model), source, builder, cfg)
        self.assertTrue(math.isnan(hist.history["loss"][0]))

    def test_epoch_summary_logged(self):
        model = Model(seed=0)
        builder = MLPGraphBuilder(model, [2, 2])
        with self.assertLogs("src.fortis", level="INFO") as logs:
            fit(
                model,
                GradientDescentTrainer(model),
                InMemoryDataSource(X, Y),
                builder,
                TrainingConfig(epochs=1, log_every=1),
            )
        self.assertTrue(any("Epoch 1/1" in line for line in logs.output))
        self.assertTrue(any("example 2" in line for line in logs.output))


class TestEvaluate(unittest.TestCase):
    def test_does_not_modify_parameters(self):
        model = Model(seed=2)
        builder = MLPGraphBuilder(model, [2, 3, 2])
        before = [p.value.to_numpy().copy() for p in model.parameters()]
        logs = evaluate(model, InMemoryDataSource(X, Y), builder)
        for a, p in zip(before, model.parameters()):
            np.testing.assert_array_equal(a, p.value.to_numpy())
        self.assertEqual(set(logs), {"loss", "accuracy", "skipped"})
        self.assertGreater(logs["loss"], 0.0)


if __name__ == "__main__":
    unittest.main()
