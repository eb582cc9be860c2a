"""
Tests for Data Utilities
========================

Samples, dataset validation, the train/test partition, the IDX loader and metrics.
"""

import struct

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mlp.exceptions import DataError
from mlp.utils import (Sample, accuracy_score, confusion_matrix, load_mnist, one_hot_encode,
                       samples_from_arrays, split_samples, validate_samples)


def write_idx(directory, prefix, images, labels):
    """Write an IDX image/label file pair."""
    images = np.asarray(images, dtype=np.uint8)
    labels = np.asarray(labels, dtype=np.uint8)
    n, rows, cols = images.shape

    with open(directory / f"{prefix}-images-idx3-ubyte", 'wb') as f:
        f.write(struct.pack('>IIII', 2051, n, rows, cols))
        f.write(images.tobytes())

    with open(directory / f"{prefix}-labels-idx1-ubyte", 'wb') as f:
        f.write(struct.pack('>II', 2049, n))
        f.write(labels.tobytes())


class TestSample:
    """Tests for Sample."""

    def test_flattens_to_float(self):
        """Test features and targets become flat float arrays."""
        sample = Sample([[1, 2], [3, 4]], [0, 1])

        assert sample.features.dtype == np.float64
        assert sample.features.shape == (4,)
        assert sample.label == 1

    def test_samples_from_arrays_with_labels(self):
        """Test integer labels are one-hot encoded."""
        samples = samples_from_arrays(np.zeros((3, 2, 2)), [0, 2, 1], num_classes=4)

        assert len(samples) == 3
        assert samples[0].features.shape == (4,)
        np.testing.assert_array_equal(samples[1].targets, [0, 0, 1, 0])

    def test_samples_from_arrays_length_mismatch(self):
        """Test features and labels must pair up."""
        with pytest.raises(DataError):
            samples_from_arrays(np.zeros((3, 2)), [0, 1])


class TestValidateSamples:
    """Tests for dataset validation."""

    def test_valid(self):
        """Test a uniform dataset passes."""
        validate_samples([Sample([1, 2], [1, 0]), Sample([3, 4], [0, 1])])

    def test_empty(self):
        """Test an empty dataset is rejected."""
        with pytest.raises(DataError, match="No training data"):
            validate_samples([])

    def test_feature_lengths(self):
        """Test non-uniform feature lengths are rejected."""
        with pytest.raises(DataError, match="sizes do not match"):
            validate_samples([Sample([1, 2], [1, 0]), Sample([3], [0, 1])])

    def test_target_lengths(self):
        """Test non-uniform target lengths are rejected."""
        with pytest.raises(DataError, match="Output layer sizes"):
            validate_samples([Sample([1, 2], [1, 0]), Sample([3, 4], [0, 0, 1])])

    def test_empty_vectors(self):
        """Test samples need at least one feature and one target."""
        with pytest.raises(DataError):
            validate_samples([Sample([], [1])])
        with pytest.raises(DataError):
            validate_samples([Sample([1], [])])


class TestSplitSamples:
    """Tests for the train/test partition."""

    @pytest.mark.parametrize("n", [0, 1, 3, 4, 10, 101])
    def test_sizes_and_union(self, n):
        """Test a quarter is held out and nothing is lost or duplicated."""
        samples = [Sample([i], [1]) for i in range(n)]
        train, test = split_samples(samples, np.random.default_rng(0))

        assert len(test) == n // 4
        assert len(train) == n - n // 4
        assert sorted(id(s) for s in train + test) == sorted(id(s) for s in samples)

    def test_test_set_is_the_first_quarter(self):
        """Test the held-out samples come from the front of the dataset."""
        samples = [Sample([i], [1]) for i in range(20)]
        train, test = split_samples(samples, np.random.default_rng(0))

        assert sorted(s.features[0] for s in test) == [0, 1, 2, 3, 4]

    def test_partitions_are_shuffled(self):
        """Test both partitions are permuted by the generator."""
        samples = [Sample([i], [1]) for i in range(400)]
        train, test = split_samples(samples, np.random.default_rng(0))

        assert [s.features[0] for s in train] != list(range(100, 400))
        assert [s.features[0] for s in test] != list(range(100))

    def test_reproducible(self):
        """Test the same seed gives the same split."""
        samples = [Sample([i], [1]) for i in range(40)]
        a = split_samples(samples, np.random.default_rng(7))
        b = split_samples(samples, np.random.default_rng(7))

        assert [id(s) for s in a[0]] == [id(s) for s in b[0]]
        assert [id(s) for s in a[1]] == [id(s) for s in b[1]]


class TestLoadMnist:
    """Tests for the IDX loader."""

    def test_load(self, tmp_path):
        """Test t10k samples come first, pixels are scaled, targets one-hot."""
        write_idx(tmp_path, 't10k', np.full((2, 2, 2), 255), [7, 3])
        write_idx(tmp_path, 'train', np.zeros((3, 2, 2)), [1, 2, 9])

        samples = load_mnist(tmp_path)

        assert len(samples) == 5
        assert samples[0].features.shape == (4,)
        np.testing.assert_array_equal(samples[0].features, [1.0, 1.0, 1.0, 1.0])
        assert [s.label for s in samples] == [7, 3, 1, 2, 9]
        assert all(len(s.targets) == 10 for s in samples)

    def test_load_raw_pixels(self, tmp_path):
        """Test normalization can be turned off."""
        write_idx(tmp_path, 't10k', np.full((1, 2, 2), 128), [0])
        write_idx(tmp_path, 'train', np.full((1, 2, 2), 64), [1])

        samples = load_mnist(tmp_path, normalize=False)

        assert samples[0].features[0] == 128.0
        assert samples[1].features[0] == 64.0

    def test_subset(self, tmp_path):
        """Test a random subset keeps the original order."""
        write_idx(tmp_path, 't10k', np.zeros((4, 2, 2)), [0, 1, 2, 3])
        write_idx(tmp_path, 'train', np.zeros((6, 2, 2)), [4, 5, 6, 7, 8, 9])

        samples = load_mnist(tmp_path, subset_size=5, rng=np.random.default_rng(0))
        labels = [s.label for s in samples]

        assert len(samples) == 5
        assert labels == sorted(labels)

    def test_bad_magic(self, tmp_path):
        """Test files with the wrong magic number are rejected."""
        write_idx(tmp_path, 't10k', np.zeros((1, 2, 2)), [0])
        write_idx(tmp_path, 'train', np.zeros((1, 2, 2)), [0])
        with open(tmp_path / 'train-labels-idx1-ubyte', 'wb') as f:
            f.write(struct.pack('>II', 1234, 1))
            f.write(bytes([0]))

        with pytest.raises(ValueError, match="magic"):
            load_mnist(tmp_path)

    def test_missing_files(self, tmp_path):
        """Test a directory without MNIST files."""
        with pytest.raises(FileNotFoundError):
            load_mnist(tmp_path)


class TestMetrics:
    """Tests for encoding and metrics."""

    def test_one_hot_encode(self):
        """Test one-hot encoding with inferred class count."""
        np.testing.assert_array_equal(one_hot_encode([0, 2]), [[1, 0, 0], [0, 0, 1]])

    def test_accuracy_score(self):
        """Test accuracy for labels and one-hot inputs."""
        assert accuracy_score([0, 1, 1, 0], [0, 1, 0, 0]) == 0.75
        assert accuracy_score(np.eye(2), np.array([[0.9, 0.1], [0.2, 0.8]])) == 1.0
        assert accuracy_score([], []) == 0.0

    def test_confusion_matrix(self):
        """Test rows are true labels and columns predictions."""
        cm = confusion_matrix([0, 1, 1], [0, 0, 1], num_classes=3)

        assert cm.shape == (3, 3)
        assert cm[1, 0] == 1
        assert cm[1, 1] == 1
        assert cm.sum() == 3


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
