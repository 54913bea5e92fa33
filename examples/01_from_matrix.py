"""Dense matrix example.

This example demonstrates the two matrix constructors:
1. A flat row-major buffer plus a row count
2. A 2D numpy array

Usage:
    python examples/01_from_matrix.py
"""

import numpy as np

from lgbm_dataset import Dataset, DatasetParams, ShapeError


def flat_buffer_example() -> None:
    """Build a dataset from a flat buffer."""
    print("\n--- Flat Buffer ---")
    data = [
        1.0, 0.1, 0.2, 0.1,
        0.7, 0.4, 0.5, 0.1,
        0.9, 0.8, 0.5, 0.1,
        0.2, 0.2, 0.8, 0.7,
        0.1, 0.7, 1.0, 0.9,
    ]  # fmt: skip
    label = [0.0, 0.0, 0.0, 1.0, 1.0]

    with Dataset.from_mat(data, n_rows=5, label=label) as ds:
        print(f"Rows: {ds.n_rows()}, features: {ds.n_features()}")

    # 20 values cannot be split into 3 equal rows
    try:
        Dataset.from_mat(data, n_rows=3, label=label[:3])
    except ShapeError as e:
        print(f"Rejected: {e}")


def numpy_example() -> None:
    """Build a dataset from a numpy matrix with custom binning."""
    print("\n--- NumPy Matrix ---")
    rng = np.random.default_rng(42)
    X = rng.standard_normal((1000, 8))
    y = (X[:, 0] + 0.5 * X[:, 1] > 0).astype(np.float32)

    params = DatasetParams(max_bin=63, verbose=-1)
    with Dataset.from_array(X, y, params=params) as ds:
        print(ds)


if __name__ == "__main__":
    flat_buffer_example()
    numpy_example()
