"""Sample weighting example.

This example demonstrates how to attach sample weights to a dataset, e.g. to
counter class imbalance, and how mismatched weights are rejected.

Usage:
    python examples/03_sample_weighting.py
"""

import numpy as np

from lgbm_dataset import Dataset, LengthMismatchError


def class_imbalance_example() -> None:
    """Weight the minority class up."""
    print("\n--- Class Imbalance ---")
    rng = np.random.default_rng(42)
    n_samples = 1000
    n_minority = 50

    X = rng.standard_normal((n_samples, 5))
    y = np.zeros(n_samples, dtype=np.float32)
    y[:n_minority] = 1.0

    # Balanced weights: each class contributes equally
    counts = np.bincount(y.astype(int))
    weights = (n_samples / (len(counts) * counts))[y.astype(int)].astype(np.float32)

    with Dataset.from_array(X, y) as ds:
        ds.set_weights(weights)
        stored = ds.get_weights()
        print(f"Minority weight: {stored[0]:.2f}, majority weight: {stored[-1]:.2f}")

        try:
            ds.set_weights(weights[:-1])
        except LengthMismatchError as e:
            print(f"Rejected: {e}")


if __name__ == "__main__":
    class_imbalance_example()
