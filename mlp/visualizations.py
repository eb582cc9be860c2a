"""
Visualization Utilities for the MLP Library
===========================================

This module provides functions for visualizing:
- Running accuracy over the samples of a run
- Confusion matrix of the test outcomes
- Sample predictions (for image datasets such as MNIST)
"""

import numpy as np
import matplotlib.pyplot as plt


def running_accuracy(outcomes):
    """Accuracy over the first i outcomes, for every i."""
    correct = np.array([outcome.correct for outcome in outcomes], dtype=np.float64)
    if len(correct) == 0:
        return correct
    return np.cumsum(correct) / np.arange(1, len(correct) + 1)


def plot_accuracy_history(result, figsize=(14, 5), save_path=None, show=True):
    """
    Plot running accuracy of the training and testing passes.

    Args:
        result: RunResult from Network.run()
        figsize: Figure size
        save_path: Path to save figure
        show: Call plt.show()
    """
    fig, axes = plt.subplots(1, 2, figsize=figsize)

    panels = [
        (axes[0], result.train_outcomes, 'Training', 'b-'),
        (axes[1], result.test_outcomes, 'Testing', 'r-'),
    ]
    for ax, outcomes, title, style in panels:
        accuracy = running_accuracy(outcomes)
        ax.plot(np.arange(1, len(accuracy) + 1), accuracy, style, linewidth=2,
                label=f'{title} Accuracy')
        ax.set_xlabel('Sample', fontsize=12)
        ax.set_ylabel('Running Accuracy', fontsize=12)
        ax.set_title(f'{title} Accuracy', fontsize=14)
        ax.set_ylim(0, 1)
        ax.legend(fontsize=10)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Accuracy history plot saved to {save_path}")

    if show:
        plt.show()
    return fig


def visualize_confusion_matrix(cm, class_names=None, figsize=(10, 8), save_path=None, show=True):
    """
    Visualize confusion matrix.

    Args:
        cm: Confusion matrix, shape (num_classes, num_classes)
        class_names: List of class names
        figsize: Figure size
        save_path: Path to save figure
        show: Call plt.show()
    """
    fig, ax = plt.subplots(figsize=figsize)

    im = ax.imshow(cm, interpolation='nearest', cmap=plt.cm.Blues)
    ax.figure.colorbar(im, ax=ax)

    if class_names is None:
        class_names = [str(i) for i in range(len(cm))]

    ax.set(xticks=np.arange(len(class_names)),
           yticks=np.arange(len(class_names)),
           xticklabels=class_names,
           yticklabels=class_names,
           ylabel='True Label',
           xlabel='Predicted Label',
           title='Confusion Matrix')

    plt.setp(ax.get_xticklabels(), rotation=45, ha='right', rotation_mode='anchor')

    # Add text annotations
    thresh = cm.max() / 2.
    for i in range(len(class_names)):
        for j in range(len(class_names)):
            ax.text(j, i, format(cm[i, j], 'd'),
                    ha='center', va='center',
                    color='white' if cm[i, j] > thresh else 'black')

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Confusion matrix saved to {save_path}")

    if show:
        plt.show()
    return fig


def plot_sample_predictions(network, samples, image_shape=(28, 28), class_names=None,
                            n_samples=16, figsize=(12, 12), save_path=None, show=True):
    """
    Plot sample predictions with true and predicted labels.

    Args:
        network: Trained Network
        samples: Samples whose features are flattened images
        image_shape: Shape to reshape each feature vector to
        class_names: Class names for labels
        n_samples: Number of samples to show
        figsize: Figure size
        save_path: Path to save figure
        show: Call plt.show()
    """
    n_samples = min(n_samples, len(samples))
    n_cols = max(int(np.ceil(np.sqrt(n_samples))), 1)
    n_rows = max(int(np.ceil(n_samples / n_cols)), 1)

    fig, axes = plt.subplots(n_rows, n_cols, figsize=figsize)
    axes = np.array(axes).flatten()

    for i in range(n_samples):
        sample = samples[i]
        true_label = sample.label
        pred_label = network.predict_class(sample.features)

        axes[i].imshow(sample.features.reshape(image_shape), cmap='gray')

        true = class_names[true_label] if class_names else str(true_label)
        pred = class_names[pred_label] if class_names else str(pred_label)

        color = 'green' if true_label == pred_label else 'red'
        axes[i].set_title(f'True: {true}\nPred: {pred}', color=color, fontsize=9)
        axes[i].axis('off')

    for i in range(n_samples, len(axes)):
        axes[i].axis('off')

    plt.suptitle('Sample Predictions', fontsize=14)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Sample predictions saved to {save_path}")

    if show:
        plt.show()
    return fig
