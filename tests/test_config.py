"""
Tests for NetworkConfig
=======================
"""

import dataclasses

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mlp.activations import ReLU, Softmax, Tanh
from mlp.config import NetworkConfig
from mlp.utils import Sample

DATA = [Sample([0.0, 1.0], [1, 0])]


class TestNetworkConfig:
    """Tests for configuration defaults and validation."""

    def test_defaults(self):
        """Test defaults for coefficients, bounds and activations."""
        config = NetworkConfig(hidden_layers=[20, 20], data=DATA)

        assert config.hidden_layers == (20, 20)
        assert config.hidden_activation is ReLU
        assert config.output_activation is Softmax
        assert config.delta_coefficient == 0.05
        assert config.momentum_coefficient == 0.01
        assert config.weight_bounds == (-5.0, 5.0)
        assert config.bias_bounds == (-3.0, 3.0)
        assert config.epochs == 1
        assert isinstance(config.rng, np.random.Generator)

    def test_immutable(self):
        """Test fields cannot be reassigned."""
        config = NetworkConfig(hidden_layers=[2], data=DATA)

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.delta_coefficient = 1.0

    def test_data_is_copied_to_tuple(self):
        """Test later changes to the caller's list do not leak in."""
        data = list(DATA)
        config = NetworkConfig(hidden_layers=[2], data=data)
        data.append(Sample([1.0, 1.0], [0, 1]))

        assert len(config.data) == 1

    def test_activation_names_resolved(self):
        """Test activation names become strategies."""
        config = NetworkConfig(hidden_layers=[2], data=DATA, hidden_activation='tanh')
        assert config.hidden_activation is Tanh

    @pytest.mark.parametrize("kwargs", [
        {'hidden_layers': [4, 0]},
        {'delta_coefficient': -0.1},
        {'momentum_coefficient': -0.1},
        {'epochs': 0},
        {'log_every': 0},
        {'weight_bounds': (1.0, 2.0, 3.0)},
        {'hidden_activation': 'softmax'},
        {'output_activation': 'relu'},
    ])
    def test_invalid(self, kwargs):
        """Test invalid settings are rejected up front."""
        kwargs.setdefault('hidden_layers', [2])
        with pytest.raises(ValueError):
            NetworkConfig(data=DATA, **kwargs)

    def test_inverted_bounds_accepted_until_drawn(self):
        """Test bound order is left to the draw."""
        config = NetworkConfig(hidden_layers=[2], data=DATA, weight_bounds=(1.0, -1.0))
        assert config.weight_bounds == (1.0, -1.0)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
