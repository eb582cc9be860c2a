"""
Activation Functions for the MLP
================================

Non-linear activation functions that enable neural networks to learn complex patterns.
Each activation is a pair of plain functions: the activation itself and its
derivative. Derivatives take the neuron's *output* (the already activated value),
because that is what a neuron keeps around for the backward pass.

There are two roles:
- Hidden activations are pointwise: activation(x) -> float
- Output activations see the whole output layer: activation(raw_values, current) -> float,
  so they can normalize jointly (softmax)

Mathematical Background:
- Without non-linearities, stacking layers = single linear transformation
- Activations introduce non-linearity, enabling universal function approximation
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np


@dataclass(frozen=True)
class HiddenActivation:
    """Pointwise activation used by hidden layers."""

    name: str
    activation: Callable[[float], float]
    derivative: Callable[[float], float]


@dataclass(frozen=True)
class OutputActivation:
    """Layer-wide activation used by the output layer."""

    name: str
    activation: Callable[[np.ndarray, float], float]
    derivative: Callable[[float], float]


# ====================================
# Hidden activations
# ====================================

def relu(x):
    """
    Rectified Linear Unit: f(x) = max(0, x)

    Derivative (in terms of the output y):
        f'(y) = 1 if y > 0 else 0
    """
    return x if x > 0 else 0.0


def relu_derivative(output):
    return 1.0 if output > 0 else 0.0


def leaky_relu(x, alpha=0.01):
    """
    Leaky ReLU: f(x) = x if x > 0 else alpha * x

    The output keeps the sign of the input, so the derivative can
    still be read off the output.
    """
    return x if x > 0 else alpha * x


def leaky_relu_derivative(output, alpha=0.01):
    return 1.0 if output > 0 else alpha


def sigmoid(x):
    """
    Sigmoid: f(x) = 1 / (1 + exp(-x))

    Derivative (in terms of the output y):
        f'(y) = y * (1 - y)
    """
    # Clip for numerical stability
    x = np.clip(x, -500, 500)
    return float(1.0 / (1.0 + np.exp(-x)))


def sigmoid_derivative(output):
    return output * (1.0 - output)


def tanh(x):
    """Hyperbolic tangent, output range (-1, 1). f'(y) = 1 - y^2"""
    return float(np.tanh(x))


def tanh_derivative(output):
    return 1.0 - output ** 2


def linear(x):
    return x


def linear_derivative(output):
    return 1.0


# ====================================
# Output activations
# ====================================

def softmax(raw_values, current):
    """
    Softmax of one neuron given every raw value in the layer:
        f(x_i) = exp(x_i) / sum(exp(x_j))

    Numerical Stability:
        We subtract max(x) before exp to prevent overflow.
        This doesn't change the result: exp(x-c)/sum(exp(x-c)) = exp(x)/sum(exp(x))

    Only the diagonal of the Jacobian is used for the gradient:
        f'(y) = y * (1 - y)
    """
    raw_values = np.asarray(raw_values, dtype=np.float64)
    shift = np.max(raw_values)
    return float(np.exp(current - shift) / np.sum(np.exp(raw_values - shift)))


def softmax_derivative(output):
    return (1.0 - output) * output


def output_sigmoid(raw_values, current):
    """Independent per-neuron sigmoid; the rest of the layer is ignored."""
    return sigmoid(current)


def output_linear(raw_values, current):
    """Identity: raw scores are passed through untouched."""
    return current


# ====================================
# Activation Registry
# ====================================

ReLU = HiddenActivation('relu', relu, relu_derivative)
LeakyReLU = HiddenActivation('leaky_relu', leaky_relu, leaky_relu_derivative)
Sigmoid = HiddenActivation('sigmoid', sigmoid, sigmoid_derivative)
Tanh = HiddenActivation('tanh', tanh, tanh_derivative)
Linear = HiddenActivation('linear', linear, linear_derivative)

Softmax = OutputActivation('softmax', softmax, softmax_derivative)
SigmoidOutput = OutputActivation('sigmoid', output_sigmoid, sigmoid_derivative)
LinearOutput = OutputActivation('linear', output_linear, linear_derivative)

HIDDEN_ACTIVATIONS = {
    'relu': ReLU,
    'leaky_relu': LeakyReLU,
    'leakyrelu': LeakyReLU,
    'sigmoid': Sigmoid,
    'tanh': Tanh,
    'linear': Linear,
    'none': Linear,
}

OUTPUT_ACTIVATIONS = {
    'softmax': Softmax,
    'sigmoid': SigmoidOutput,
    'linear': LinearOutput,
    'none': LinearOutput,
}


def get_activation(name, role='hidden'):
    """
    Get activation strategy by name.

    Args:
        name: String name ('relu', 'softmax', etc.) or an activation instance
        role: 'hidden' or 'output'

    Returns:
        HiddenActivation or OutputActivation

    Example:
        >>> act = get_activation('relu')
        >>> act.activation(-1.0)
        0.0
    """
    if role == 'hidden':
        kind, registry = HiddenActivation, HIDDEN_ACTIVATIONS
    elif role == 'output':
        kind, registry = OutputActivation, OUTPUT_ACTIVATIONS
    else:
        raise ValueError(f"Unknown activation role '{role}'. Available: hidden, output")

    if isinstance(name, (HiddenActivation, OutputActivation)):
        if not isinstance(name, kind):
            raise ValueError(f"Activation '{name.name}' cannot be used as a {role} activation")
        return name

    if name is None:
        return registry['linear']

    name_lower = name.lower().replace('-', '_')
    if name_lower not in registry:
        available = ', '.join(registry.keys())
        raise ValueError(f"Unknown {role} activation '{name}'. Available: {available}")

    return registry[name_lower]
