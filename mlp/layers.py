"""
MLP Layers - From Scratch Implementation
========================================

The building blocks of a fully connected network, one sample at a time.

- Neuron: weighted sum of its inputs plus a bias, with its own momentum history
- Layer: ordered neurons that all read the same upstream vector

Weight update rule (online SGD with momentum), for weight k of a neuron:
    delta_k  = delta_coefficient * upstream_k * gradient
    w_k     += delta_k + momentum_coefficient * previous_delta_k
    previous_delta_k = delta_k

The bias follows the same rule with a constant upstream input of 1.
"""

import numpy as np

from .exceptions import DimensionError, RangeError


def random_in_range(rng, lower, upper, size=None):
    """
    Draw uniformly from [lower, upper].

    The bounds are checked before the generator is touched, so a bad
    pair never consumes random state.
    """
    if upper < lower:
        raise RangeError(lower, upper)
    return rng.uniform(lower, upper, size=size)


class Neuron:
    """
    A single weighted-sum unit.

    Args:
        bias: Initial bias
        weights: Initial weights, one per upstream input

    Attributes:
        output: Last activated value, overwritten every forward pass
        gradient: Last error signal, overwritten every backward pass
        previous_weight_deltas: Deltas from the previous update (momentum)
        previous_bias_delta: Bias delta from the previous update
    """

    def __init__(self, bias, weights):
        self.bias = float(bias)
        self.weights = weights
        self.output = 0.0
        self.gradient = 0.0
        self.previous_weight_deltas = np.zeros_like(self.weights)
        self.previous_bias_delta = 0.0

    @property
    def weights(self):
        return self._weights

    @weights.setter
    def weights(self, values):
        self._weights = np.array(values, dtype=np.float64)

    @classmethod
    def random(cls, input_size, rng, weight_bounds, bias_bounds):
        """Create a neuron with uniformly drawn bias and weights."""
        bias = random_in_range(rng, *bias_bounds)
        weights = random_in_range(rng, *weight_bounds, size=input_size)
        return cls(bias, weights)

    def compute_output(self, inputs):
        """Raw weighted sum: dot(weights, inputs) + bias."""
        inputs = np.asarray(inputs, dtype=np.float64)
        if len(self.weights) != len(inputs):
            raise DimensionError(len(self.weights), len(inputs))
        return float(np.dot(self.weights, inputs)) + self.bias

    def update(self, upstream_outputs, delta_coefficient, momentum_coefficient):
        """
        Apply the momentum update using the current gradient.

        Args:
            upstream_outputs: Values this neuron read on the forward pass
            delta_coefficient: Learning rate
            momentum_coefficient: Fraction of the previous delta to add
        """
        upstream_outputs = np.asarray(upstream_outputs, dtype=np.float64)
        if len(self.weights) != len(upstream_outputs):
            raise DimensionError(len(self.weights), len(upstream_outputs))

        weight_deltas = delta_coefficient * upstream_outputs * self.gradient
        self.weights += weight_deltas + momentum_coefficient * self.previous_weight_deltas
        self.previous_weight_deltas = weight_deltas

        bias_delta = delta_coefficient * 1.0 * self.gradient
        self.bias += bias_delta + momentum_coefficient * self.previous_bias_delta
        self.previous_bias_delta = bias_delta

    def __repr__(self):
        return f"Neuron(inputs={len(self.weights)}, bias={self.bias:.4f})"


class Layer:
    """
    Fully connected layer of neurons.

    Every neuron reads the same upstream vector, so all weight vectors
    share one length (input_size). The layer never changes size.

    Args:
        neurons: Sequence of Neuron objects
    """

    def __init__(self, neurons):
        self.neurons = list(neurons)
        sizes = {len(neuron.weights) for neuron in self.neurons}
        if len(sizes) > 1:
            raise DimensionError(min(sizes), max(sizes))
        self.input_size = sizes.pop() if sizes else 0

    @classmethod
    def random(cls, size, input_size, rng, weight_bounds, bias_bounds):
        """Build a layer of `size` randomly initialised neurons."""
        return cls(Neuron.random(input_size, rng, weight_bounds, bias_bounds)
                   for _ in range(size))

    def __len__(self):
        return len(self.neurons)

    def __iter__(self):
        return iter(self.neurons)

    def __getitem__(self, index):
        return self.neurons[index]

    @property
    def outputs(self):
        return np.array([neuron.output for neuron in self.neurons], dtype=np.float64)

    @property
    def gradients(self):
        return np.array([neuron.gradient for neuron in self.neurons], dtype=np.float64)

    def weighted_sums(self, inputs):
        """Raw (pre-activation) value of every neuron for the given inputs."""
        return np.array([neuron.compute_output(inputs) for neuron in self.neurons],
                        dtype=np.float64)

    def weights_from(self, index):
        """Weight each neuron in this layer gives to upstream neuron `index`."""
        return np.array([neuron.weights[index] for neuron in self.neurons], dtype=np.float64)

    def update(self, upstream_outputs, delta_coefficient, momentum_coefficient):
        for neuron in self.neurons:
            neuron.update(upstream_outputs, delta_coefficient, momentum_coefficient)

    def __repr__(self):
        return f"Layer({self.input_size}, {len(self.neurons)})"
