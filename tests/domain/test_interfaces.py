import random
import unittest

import numpy as np

from src.flatnn.domain._errors import (
    InconsistentDataError,
    InvalidRankError,
    MissingConfigurationError,
    ShapeMismatchError,
)
from src.flatnn.domain._kinds import ActivationKind, LossKind
from src.flatnn.domain._layer import ILayer
from src.flatnn.domain._random import IRandomSource
from src.flatnn.domain._tensor import ITensor
from src.flatnn.infrastructure._activations import Activation
from src.flatnn.infrastructure._linear import Linear
from src.flatnn.infrastructure.tensor._tensor import Tensor


class TestProtocolConformance(unittest.TestCase):
    def test_tensor_satisfies_itensor(self):
        self.assertIsInstance(Tensor([1.0], (1,)), ITensor)

    def test_layers_satisfy_ilayer(self):
        self.assertIsInstance(Linear(1, 1, random.Random(0)), ILayer)
        self.assertIsInstance(Activation(ActivationKind.RELU), ILayer)
        self.assertNotIsInstance(Tensor([1.0], (1,)), ILayer)

    def test_random_sources(self):
        self.assertIsInstance(random.Random(0), IRandomSource)
        self.assertIsInstance(np.random.default_rng(0), IRandomSource)


class TestKinds(unittest.TestCase):
    def test_activation_kinds(self):
        self.assertEqual(
            {k.value for k in ActivationKind},
            {"linear", "relu", "leaky_relu", "sigmoid", "tanh", "softmax"},
        )

    def test_loss_kinds(self):
        self.assertEqual(
            {k.value for k in LossKind}, {"mse", "l1", "bce", "cce", "bce_sigmoid"}
        )


class TestErrors(unittest.TestCase):
    def test_error_attributes_and_messages(self):
        e = ShapeMismatchError("add", (2, 3), (3, 2))
        self.assertEqual((e.op, e.lhs, e.rhs), ("add", (2, 3), (3, 2)))
        self.assertIn("(2, 3)", str(e))

        r = InvalidRankError("sum", (2, 2), detail="unsupported reduction axis 5")
        self.assertIn("unsupported reduction axis 5", str(r))

        d = InconsistentDataError(3, (2, 2))
        self.assertIn("3", str(d))

        m = MissingConfigurationError("loss_gradient")
        self.assertEqual(m.field, "loss_gradient")


if __name__ == "__main__":
    unittest.main()
