"""Train and test a fully connected network on MNIST."""

import argparse
from pathlib import Path

import numpy as np

from .activations import HIDDEN_ACTIVATIONS, OUTPUT_ACTIVATIONS
from .config import NetworkConfig
from .network import Network
from .utils import MNIST_CLASSES, load_mnist
from .visualizations import plot_accuracy_history, visualize_confusion_matrix


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='mlp-train', description=__doc__)
    parser.add_argument("--data-dir", type=Path, default=Path("mnist"),
                        help="Directory holding the MNIST IDX files")
    parser.add_argument("--hidden", type=int, nargs="*", default=[20, 20],
                        help="Width of each hidden layer")
    parser.add_argument("--hidden-activation", choices=sorted(HIDDEN_ACTIVATIONS),
                        default="relu", help="Activation for hidden layers")
    parser.add_argument("--output-activation", choices=sorted(OUTPUT_ACTIVATIONS),
                        default="softmax", help="Activation for the output layer")
    parser.add_argument("--delta", type=float, default=0.05, help="Learning rate")
    parser.add_argument("--momentum", type=float, default=0.01, help="Momentum coefficient")
    parser.add_argument("--weight-bounds", type=float, nargs=2, default=[-5.0, 5.0],
                        metavar=("LOWER", "UPPER"), help="Uniform weight initialization range")
    parser.add_argument("--bias-bounds", type=float, nargs=2, default=[-3.0, 3.0],
                        metavar=("LOWER", "UPPER"), help="Uniform bias initialization range")
    parser.add_argument("--epochs", type=int, default=1, help="Passes over the training set")
    parser.add_argument("--subset", type=int, help="Use only this many samples")
    parser.add_argument("--seed", type=int, help="Seed for initialization and shuffling")
    parser.add_argument("--log-every", type=int, default=500,
                        help="Print every n-th test outcome")
    parser.add_argument("--no-normalize", action="store_true",
                        help="Keep raw 0-255 pixel values")
    parser.add_argument("--plot", type=Path, help="Save the test confusion matrix to this path")
    parser.add_argument("--plot-history", type=Path,
                        help="Save the running accuracy plot to this path")
    parser.add_argument("--quiet", action="store_true", help="Only print the final accuracies")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    rng = np.random.default_rng(args.seed)
    verbose = not args.quiet

    samples = load_mnist(args.data_dir, subset_size=args.subset,
                         normalize=not args.no_normalize, rng=rng)
    if verbose:
        print(f"Loaded MNIST: {len(samples)} samples")

    config = NetworkConfig(
        hidden_layers=args.hidden,
        data=samples,
        hidden_activation=args.hidden_activation,
        output_activation=args.output_activation,
        delta_coefficient=args.delta,
        momentum_coefficient=args.momentum,
        weight_bounds=tuple(args.weight_bounds),
        bias_bounds=tuple(args.bias_bounds),
        epochs=args.epochs,
        log_every=args.log_every,
        rng=rng,
    )
    network = Network(config)
    if verbose:
        network.summary()

    result = network.run(verbose=verbose)
    if args.quiet:
        print(f"Train Accuracy: {result.train_accuracy:.2%} - "
              f"Test Accuracy: {result.test_accuracy:.2%}")

    if args.plot:
        visualize_confusion_matrix(result.confusion_matrix(MNIST_CLASSES),
                                   save_path=args.plot, show=False)
    if args.plot_history:
        plot_accuracy_history(result, save_path=args.plot_history, show=False)

    return result


if __name__ == "__main__":  # pragma: no cover
    main()
