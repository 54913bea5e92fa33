"""DataFrame example.

This example builds datasets from polars and pandas frames. The label column
is removed from the frame in place; the remaining columns become features in
their current order.

Usage:
    python examples/02_from_dataframe.py
"""

import pandas as pd
import polars as pl

from lgbm_dataset import Dataset, MissingValueError

FEATURES = {
    "feature_1": [1.0, 0.7, 0.9, 0.2, 0.1],
    "feature_2": [0.1, 0.4, 0.8, 0.2, 0.7],
    "feature_3": [0.2, 0.5, 0.5, 0.1, 0.1],
    "feature_4": [0.1, 0.1, 0.1, 0.7, 0.9],
}


def polars_example() -> None:
    """Build a dataset from a polars DataFrame."""
    print("\n--- polars ---")
    df = pl.DataFrame({**FEATURES, "label": [0.0, 0.0, 0.0, 1.0, 1.0]})
    with Dataset.from_dataframe(df, "label") as ds:
        print(ds)
    print(f"Columns left in frame: {df.columns}")


def pandas_example() -> None:
    """Build a dataset from a pandas DataFrame."""
    print("\n--- pandas ---")
    df = pd.DataFrame({**FEATURES, "label": [0, 0, 0, 1, 1]})
    with Dataset.from_dataframe(df, "label") as ds:
        print(ds)


def missing_values_example() -> None:
    """Missing labels are rejected before anything is allocated."""
    print("\n--- Missing Values ---")
    df = pl.DataFrame({**FEATURES, "label": [0.0, None, 0.0, 1.0, 1.0]})
    try:
        Dataset.from_dataframe(df, "label")
    except MissingValueError as e:
        print(f"Rejected: {e}")


if __name__ == "__main__":
    polars_example()
    pandas_example()
    missing_values_example()
