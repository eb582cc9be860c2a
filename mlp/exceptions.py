"""
Exceptions for the MLP Library
==============================

Every error raised by the network is fatal for the current run:
nothing is retried and nothing is swallowed.

- DataError: dataset fails validation (empty, non-uniform vectors)
- RangeError: an initialization bound pair has upper < lower
- DimensionError: a neuron received an input of the wrong length
"""


class NetworkError(Exception):
    """Base class for all network errors."""


class DataError(NetworkError, ValueError):
    """Dataset failed validation before training."""


class RangeError(NetworkError, ValueError):
    """Upper bound of a random range is below its lower bound."""

    def __init__(self, lower, upper):
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Upper range param: {upper} was not greater than lower range param: {lower}")


class DimensionError(NetworkError, ValueError):
    """Weight vector and input vector lengths disagree."""

    def __init__(self, n_weights, n_inputs):
        self.n_weights = n_weights
        self.n_inputs = n_inputs
        super().__init__(
            f"Weights count: {n_weights} does not match inputs count: {n_inputs}")
