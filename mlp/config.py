"""
Network Configuration
=====================

Everything a network needs is fixed up front in one immutable record:
topology, initialization bounds, learning rate, momentum, activations,
the dataset and the random generator.

Defaults:
    delta_coefficient = 0.05     (learning rate)
    momentum_coefficient = 0.01
    weight_bounds = (-5, 5)
    bias_bounds = (-3, 3)
"""

from dataclasses import dataclass, field

import numpy as np

from .activations import get_activation


@dataclass(frozen=True)
class NetworkConfig:
    """
    Immutable configuration for one Network.

    Args:
        hidden_layers: Width of each hidden layer, in order
        data: Full dataset (sequence of Sample), split by the network
        hidden_activation: Name or HiddenActivation (default: 'relu')
        output_activation: Name or OutputActivation (default: 'softmax')
        delta_coefficient: Learning rate
        momentum_coefficient: Fraction of the previous delta added to each update
        weight_bounds: (lower, upper) for uniform weight initialization
        bias_bounds: (lower, upper) for uniform bias initialization
        epochs: Passes over the training partition
        log_every: Test-set cadence of outcome lines when verbose
        rng: numpy Generator for initialization and shuffling

    Example:
        >>> config = NetworkConfig(hidden_layers=[20, 20], data=samples,
        ...                        rng=np.random.default_rng(0))
    """

    hidden_layers: tuple
    data: tuple
    hidden_activation: object = 'relu'
    output_activation: object = 'softmax'
    delta_coefficient: float = 0.05
    momentum_coefficient: float = 0.01
    weight_bounds: tuple = (-5.0, 5.0)
    bias_bounds: tuple = (-3.0, 3.0)
    epochs: int = 1
    log_every: int = 500
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    def __post_init__(self):
        hidden_layers = tuple(int(width) for width in self.hidden_layers)
        if any(width < 1 for width in hidden_layers):
            raise ValueError(f"Hidden layer widths must be positive, got {list(hidden_layers)}")

        if self.delta_coefficient < 0:
            raise ValueError(f"delta_coefficient must be non-negative, got {self.delta_coefficient}")
        if self.momentum_coefficient < 0:
            raise ValueError(
                f"momentum_coefficient must be non-negative, got {self.momentum_coefficient}")
        if self.epochs < 1:
            raise ValueError(f"epochs must be at least 1, got {self.epochs}")
        if self.log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {self.log_every}")

        # Bounds are only ordered-checked when drawn; here just the shape
        for name in ('weight_bounds', 'bias_bounds'):
            bounds = tuple(float(b) for b in getattr(self, name))
            if len(bounds) != 2:
                raise ValueError(f"{name} must be a (lower, upper) pair, got {bounds}")
            object.__setattr__(self, name, bounds)

        object.__setattr__(self, 'hidden_layers', hidden_layers)
        object.__setattr__(self, 'data', tuple(self.data))
        object.__setattr__(self, 'hidden_activation',
                           get_activation(self.hidden_activation, 'hidden'))
        object.__setattr__(self, 'output_activation',
                           get_activation(self.output_activation, 'output'))
