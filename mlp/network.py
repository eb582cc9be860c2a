"""
Network (Multi-Layer Perceptron) Main Class
===========================================

This is the main class that ties everything together:
- Dataset validation and the train/test partition
- Layer construction
- Forward pass
- Backward pass (backpropagation) with immediate momentum updates
- Training and testing loops
- Per-sample outcome reporting

Training is online: every sample is forwarded, then backpropagated, and
the weights move before the next sample is seen. There are no batches.
"""

from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from .exceptions import DimensionError
from .layers import Layer
from .utils import accuracy_score, confusion_matrix, split_samples, validate_samples


@dataclass(frozen=True)
class Outcome:
    """
    What the network made of one sample.

    Attributes:
        predicted: Index of the largest output
        actual: Index of the largest target
        error: Sum of |target - output| over the output layer
        confidence: Share of the error sitting on the predicted class, in percent
    """

    predicted: int
    actual: int
    error: float
    confidence: float

    @classmethod
    def from_outputs(cls, outputs, targets):
        outputs = np.asarray(outputs, dtype=np.float64)
        targets = np.asarray(targets, dtype=np.float64)

        predicted = int(np.argmax(outputs))
        actual = int(np.argmax(targets))
        error = float(np.sum(np.abs(targets - outputs)))

        if error == 0:
            confidence = 100.0
        else:
            share = abs((targets[predicted] - outputs[predicted]) / error)
            confidence = round(share * 100, 2)

        return cls(predicted, actual, error, confidence)

    @property
    def correct(self):
        return self.predicted == self.actual

    def __str__(self):
        return (f"Network outcome: {self.predicted}. Actual: {self.actual}\n"
                f"Confidence: {self.confidence:.2f}%\n")


@dataclass
class RunResult:
    """Outcomes of one train-then-test run."""

    train_outcomes: list = field(default_factory=list)
    test_outcomes: list = field(default_factory=list)

    @property
    def train_accuracy(self):
        return _accuracy(self.train_outcomes)

    @property
    def test_accuracy(self):
        return _accuracy(self.test_outcomes)

    def confusion_matrix(self, num_classes=None):
        """Confusion matrix of the test outcomes."""
        actual = [outcome.actual for outcome in self.test_outcomes]
        predicted = [outcome.predicted for outcome in self.test_outcomes]
        return confusion_matrix(actual, predicted, num_classes)


def _accuracy(outcomes):
    return accuracy_score([o.actual for o in outcomes], [o.predicted for o in outcomes])


class Network:
    """
    Fully connected feedforward network trained by online backpropagation.

    Construction validates the dataset, partitions it once (a quarter held
    out for testing, both parts shuffled) and builds the layers: one per
    entry in config.hidden_layers, then an output layer as wide as the
    target vectors.

    Example:
        >>> from mlp import Network, NetworkConfig, load_mnist
        >>> samples = load_mnist('mnist', subset_size=2000)
        >>> network = Network(NetworkConfig(hidden_layers=[20, 20], data=samples))
        >>> result = network.run()
        >>> print(f"Test Accuracy: {result.test_accuracy:.2%}")
    """

    def __init__(self, config):
        """
        Initialize the network.

        Args:
            config: NetworkConfig

        Raises:
            DataError: dataset is empty or has non-uniform vector lengths
            RangeError: an initialization bound pair has upper < lower
        """
        self.config = config
        self.hidden_activation = config.hidden_activation
        self.output_activation = config.output_activation

        validate_samples(config.data)
        self.train_data, self.test_data = split_samples(config.data, config.rng)

        self.input_size = len(config.data[0].features)
        self.num_classes = len(config.data[0].targets)

        self.layers = self._build_network()

        self.history = {'accuracy': [], 'test_accuracy': []}

    def _build_network(self):
        """Hidden layers in order, then the output layer."""
        config = self.config
        layers = []
        input_size = self.input_size

        for width in config.hidden_layers:
            layers.append(Layer.random(width, input_size, config.rng,
                                       config.weight_bounds, config.bias_bounds))
            input_size = width

        layers.append(Layer.random(self.num_classes, input_size, config.rng,
                                   config.weight_bounds, config.bias_bounds))

        return layers

    @property
    def hidden_layers(self):
        return self.layers[:-1]

    @property
    def output_layer(self):
        return self.layers[-1]

    def forward(self, features):
        """
        Forward pass for one sample.

        Hidden neurons apply the hidden activation to their own weighted sum.
        Output neurons are activated only after every raw output sum is known,
        since the output activation may normalize across the whole layer.

        Args:
            features: Input vector

        Returns:
            Output layer activations

        Raises:
            DimensionError: features do not match the first layer's input width
        """
        inputs = np.asarray(features, dtype=np.float64)
        activation = self.hidden_activation.activation

        for layer in self.hidden_layers:
            for neuron, raw in zip(layer, layer.weighted_sums(inputs)):
                neuron.output = activation(raw)
            inputs = layer.outputs

        raw_values = self.output_layer.weighted_sums(inputs)
        for neuron, raw in zip(self.output_layer, raw_values):
            neuron.output = self.output_activation.activation(raw_values, raw)

        return self.output_layer.outputs

    def backward(self, sample):
        """
        Backward pass for one sample, right after forward(sample.features).

        Layers are processed from the output back to the first hidden layer.
        Each layer's weights are updated as soon as its gradients are known.

        Output neuron j:
            gradient = f'(output) * (target_j - output)
        Hidden neuron j:
            gradient = f'(output) * sum(d.gradient * d.weights[j] for d in next layer)
        """
        targets = sample.targets
        if len(targets) != len(self.output_layer):
            raise DimensionError(len(self.output_layer), len(targets))

        config = self.config
        last = len(self.layers) - 1

        for i in range(last, -1, -1):
            layer = self.layers[i]

            if i == last:
                derivative = self.output_activation.derivative
                for j, neuron in enumerate(layer):
                    neuron.gradient = derivative(neuron.output) * (targets[j] - neuron.output)
            else:
                derivative = self.hidden_activation.derivative
                downstream = self.layers[i + 1]
                downstream_gradients = downstream.gradients
                for j, neuron in enumerate(layer):
                    pulled = float(np.dot(downstream_gradients, downstream.weights_from(j)))
                    neuron.gradient = derivative(neuron.output) * pulled

            upstream = sample.features if i == 0 else self.layers[i - 1].outputs
            layer.update(upstream, config.delta_coefficient, config.momentum_coefficient)

    def train(self, verbose=True):
        """
        Online training over the training partition.

        Args:
            verbose: Show progress

        Returns:
            List of Outcome, one per sample seen (taken before its update)
        """
        epochs = self.config.epochs
        outcomes = []

        if verbose:
            print("Beginning Training...\n")

        for epoch in range(epochs):
            epoch_outcomes = []

            if verbose:
                pbar = tqdm(self.train_data, desc=f"Epoch {epoch+1}/{epochs}")
            else:
                pbar = self.train_data

            for sample in pbar:
                outputs = self.forward(sample.features)
                epoch_outcomes.append(Outcome.from_outputs(outputs, sample.targets))
                self.backward(sample)

                if verbose and len(epoch_outcomes) % 100 == 0:
                    pbar.set_postfix({'acc': f'{_accuracy(epoch_outcomes):.4f}'})

            self.history['accuracy'].append(_accuracy(epoch_outcomes))
            outcomes.extend(epoch_outcomes)

        if verbose:
            print("Training Complete\n")

        return outcomes

    def test(self, verbose=True):
        """
        Forward-only pass over the held-out partition.

        Args:
            verbose: Show progress and every log_every-th outcome

        Returns:
            List of Outcome, one per test sample
        """
        log_every = self.config.log_every
        outcomes = []

        if verbose:
            print("Beginning Testing...\n")
            pbar = tqdm(self.test_data, desc="Testing")
        else:
            pbar = self.test_data

        for iteration, sample in enumerate(pbar, start=1):
            outputs = self.forward(sample.features)
            outcome = Outcome.from_outputs(outputs, sample.targets)
            outcomes.append(outcome)

            if verbose and iteration % log_every == 0:
                tqdm.write(str(outcome))

        self.history['test_accuracy'].append(_accuracy(outcomes))

        return outcomes

    def run(self, verbose=True):
        """
        Train on the training partition, then evaluate on the test partition.

        Returns:
            RunResult
        """
        if verbose:
            print("Beginning Neural Net run...\n")

        result = RunResult(train_outcomes=self.train(verbose=verbose),
                           test_outcomes=self.test(verbose=verbose))

        if verbose:
            print(f"Train Accuracy: {result.train_accuracy:.2%} - "
                  f"Test Accuracy: {result.test_accuracy:.2%}")
            print("Run Complete")

        return result

    def predict(self, features):
        """Output layer activations for one input vector."""
        return self.forward(features)

    def predict_class(self, features):
        """Index of the largest output for one input vector."""
        return int(np.argmax(self.forward(features)))

    def summary(self):
        """Print model summary."""
        print("\n" + "=" * 70)
        print("Network Summary")
        print("=" * 70)
        print(f"Input size: {self.input_size}")
        print(f"Output classes: {self.num_classes}")
        print(f"Train samples: {len(self.train_data)} - Test samples: {len(self.test_data)}")
        print("-" * 70)

        total_params = 0

        for i, layer in enumerate(self.layers):
            n_params = len(layer) * (layer.input_size + 1)
            total_params += n_params
            kind = 'output' if i == len(self.layers) - 1 else 'hidden'
            print(f"{i:3d}. {str(layer) + ' ' + kind:<45} Params: {n_params:,}")

        print("-" * 70)
        print(f"Total trainable parameters: {total_params:,}")
        print("=" * 70 + "\n")

        return total_params

    def __repr__(self):
        widths = [len(layer) for layer in self.layers]
        return f"Network(input_size={self.input_size}, layers={widths})"
