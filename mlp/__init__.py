"""
MLP Library from Scratch
========================

A fully connected feedforward network trained one sample at a time.
This library demonstrates the mechanics of backpropagation including:
- Per-neuron weights, biases and momentum history
- Pluggable hidden and output activations
- Forward propagation with a layer-wide output activation (softmax)
- Backward propagation with immediate momentum updates
- A held-out test partition and per-sample outcome reporting
"""

from .activations import (HiddenActivation, OutputActivation, ReLU, LeakyReLU, Sigmoid,
                          Tanh, Linear, Softmax, get_activation)
from .exceptions import NetworkError, DataError, RangeError, DimensionError
from .layers import Neuron, Layer
from .config import NetworkConfig
from .network import Network, Outcome, RunResult
from .utils import Sample, load_mnist, samples_from_arrays, one_hot_encode
from . import visualizations

__version__ = "1.0.0"
__all__ = [
    # Activations
    'HiddenActivation', 'OutputActivation',
    'ReLU', 'LeakyReLU', 'Sigmoid', 'Tanh', 'Linear', 'Softmax', 'get_activation',
    # Errors
    'NetworkError', 'DataError', 'RangeError', 'DimensionError',
    # Layers
    'Neuron', 'Layer',
    # Main classes
    'NetworkConfig', 'Network', 'Outcome', 'RunResult',
    # Utilities
    'Sample', 'load_mnist', 'samples_from_arrays', 'one_hot_encode',
]
