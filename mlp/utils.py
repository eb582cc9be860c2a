"""
Utility Functions for the MLP Library
=====================================

Helper functions for:
- Samples (one labeled example each)
- Data loading (MNIST IDX files)
- Dataset validation and the train/test partition
- Metrics
"""

from dataclasses import dataclass
from pathlib import Path
import struct

import numpy as np

from .exceptions import DataError

IMAGES_MAGIC = 2051
LABELS_MAGIC = 2049
MNIST_CLASSES = 10

# One sample in TEST_SPLIT goes to the held-out test set
TEST_SPLIT = 4


@dataclass(frozen=True, eq=False)
class Sample:
    """
    One labeled example.

    Attributes:
        features: Flat input vector
        targets: One-hot target vector
    """

    features: np.ndarray
    targets: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, 'features', np.asarray(self.features, dtype=np.float64).ravel())
        object.__setattr__(self, 'targets', np.asarray(self.targets, dtype=np.float64).ravel())

    @property
    def label(self):
        """Index of the target class."""
        return int(np.argmax(self.targets))


def samples_from_arrays(X, y, num_classes=None):
    """
    Build samples from in-memory arrays.

    Args:
        X: Features, shape (N, ...). Each row is flattened.
        y: Integer labels (N,) or one-hot targets (N, C)
        num_classes: Number of classes when y holds integer labels

    Returns:
        List of Sample
    """
    X = np.asarray(X, dtype=np.float64)
    y = np.asarray(y)

    if len(X) != len(y):
        raise DataError(f"Feature count {len(X)} does not match target count {len(y)}")

    if y.ndim == 1:
        y = one_hot_encode(y, num_classes)

    return [Sample(features, targets) for features, targets in zip(X, y)]


def load_mnist(data_dir='mnist', subset_size=None, normalize=True, rng=None):
    """
    Load the MNIST dataset from IDX binary files as one list of samples.

    The t10k files come first, then the training files. Partitioning into
    train and test is left to the network.

    Args:
        data_dir: Path to folder containing MNIST files
        subset_size: Keep only this many samples (randomly chosen), None for all
        normalize: Scale pixel values to [0, 1]
        rng: numpy Generator used to choose the subset

    Returns:
        List of Sample with 784 features and 10 one-hot targets
    """
    data_dir = Path(data_dir)

    test_images = _load_idx_images(_find_file(data_dir, 't10k-images'))
    test_labels = _load_idx_labels(_find_file(data_dir, 't10k-labels'))
    train_images = _load_idx_images(_find_file(data_dir, 'train-images'))
    train_labels = _load_idx_labels(_find_file(data_dir, 'train-labels'))

    for images, labels in ((test_images, test_labels), (train_images, train_labels)):
        if len(images) != len(labels):
            raise ValueError(f"Image count {len(images)} does not match label count {len(labels)}")

    images = np.concatenate([test_images, train_images])
    labels = np.concatenate([test_labels, train_labels])

    if subset_size is not None:
        rng = rng if rng is not None else np.random.default_rng()
        indices = np.sort(rng.permutation(len(images))[:subset_size])
        images = images[indices]
        labels = labels[indices]

    images = images.astype(np.float64)
    if normalize:
        images = images / 255.0

    return samples_from_arrays(images.reshape(len(images), -1), labels, MNIST_CLASSES)


def _find_file(data_dir, prefix):
    """Find IDX file with given prefix."""
    data_dir = Path(data_dir)

    # Try direct file
    for ext in ['.idx3-ubyte', '.idx1-ubyte', '-idx3-ubyte', '-idx1-ubyte', '']:
        candidate = data_dir / f"{prefix}{ext}"
        if candidate.exists() and candidate.is_file():
            return candidate

    if data_dir.is_dir():
        # Recursive search
        for file in sorted(data_dir.rglob('*')):
            if file.is_file() and prefix in file.name:
                return file

    raise FileNotFoundError(f"Could not find MNIST file with prefix '{prefix}' in {data_dir}")


def _load_idx_images(filepath):
    """Load images from IDX file."""
    with open(filepath, 'rb') as f:
        magic, num_images, rows, cols = struct.unpack('>IIII', f.read(16))

        if magic != IMAGES_MAGIC:
            raise ValueError(f"Invalid magic number {magic} (expected {IMAGES_MAGIC})")

        data = np.frombuffer(f.read(num_images * rows * cols), dtype=np.uint8)
        images = data.reshape(num_images, rows, cols)

    return images


def _load_idx_labels(filepath):
    """Load labels from IDX file."""
    with open(filepath, 'rb') as f:
        magic, num_labels = struct.unpack('>II', f.read(8))

        if magic != LABELS_MAGIC:
            raise ValueError(f"Invalid magic number {magic} (expected {LABELS_MAGIC})")

        labels = np.frombuffer(f.read(num_labels), dtype=np.uint8)

    return labels


def one_hot_encode(labels, num_classes=None):
    """
    Convert integer labels to one-hot encoded vectors.

    Args:
        labels: Integer labels, shape (N,)
        num_classes: Number of classes (inferred if None)

    Returns:
        One-hot matrix, shape (N, num_classes)
    """
    labels = np.asarray(labels).astype(int)

    if num_classes is None:
        num_classes = labels.max() + 1

    one_hot = np.zeros((len(labels), num_classes), dtype=np.float64)
    one_hot[np.arange(len(labels)), labels] = 1.0

    return one_hot


def validate_samples(samples):
    """
    Check that a dataset can drive a network.

    Raises:
        DataError: no samples, or feature/target lengths are not uniform
    """
    if not samples:
        raise DataError("No training data")
    if len({len(sample.features) for sample in samples}) > 1:
        raise DataError("Training data sizes do not match")
    if len({len(sample.targets) for sample in samples}) > 1:
        raise DataError("Output layer sizes do not match")
    if len(samples[0].features) == 0:
        raise DataError("Samples have no features")
    if len(samples[0].targets) == 0:
        raise DataError("Samples have no targets")


def split_samples(samples, rng):
    """
    Split samples into (train, test).

    The first len(samples) // 4 samples are held out for testing, the
    rest are for training. Each partition is shuffled on its own.

    Args:
        samples: Sequence of Sample
        rng: numpy Generator used for shuffling

    Returns:
        (train, test) lists
    """
    samples = list(samples)
    n_test = len(samples) // TEST_SPLIT

    test = [samples[i] for i in rng.permutation(n_test)]
    train = [samples[n_test + i] for i in rng.permutation(len(samples) - n_test)]

    return train, test


def accuracy_score(y_true, y_pred):
    """
    Compute classification accuracy.

    Args:
        y_true: True labels (integers or one-hot)
        y_pred: Predictions (probabilities or one-hot)

    Returns:
        Accuracy as float
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if y_true.ndim > 1:
        y_true = np.argmax(y_true, axis=1)
    if y_pred.ndim > 1:
        y_pred = np.argmax(y_pred, axis=1)

    if len(y_true) == 0:
        return 0.0

    return float(np.mean(y_true == y_pred))


def confusion_matrix(y_true, y_pred, num_classes=None):
    """
    Compute confusion matrix.

    Args:
        y_true: True labels
        y_pred: Predicted labels
        num_classes: Number of classes

    Returns:
        Confusion matrix, shape (num_classes, num_classes)
    """
    y_true = np.asarray(y_true, dtype=int)
    y_pred = np.asarray(y_pred, dtype=int)
    if y_true.ndim > 1:
        y_true = np.argmax(y_true, axis=1)
    if y_pred.ndim > 1:
        y_pred = np.argmax(y_pred, axis=1)

    if num_classes is None:
        num_classes = max(y_true.max(), y_pred.max()) + 1

    cm = np.zeros((num_classes, num_classes), dtype=int)
    for t, p in zip(y_true, y_pred):
        cm[t, p] += 1

    return cm
