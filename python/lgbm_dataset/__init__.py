"""lgbm_dataset - owned handles over native LightGBM training datasets.

This package turns dense matrices, dataframes and delimited files into the
native dataset representation LightGBM trains on, and guarantees the native
resource is released exactly once.

Example:
    >>> import numpy as np
    >>> from lgbm_dataset import Dataset
    >>> X = np.random.rand(100, 10)
    >>> y = np.random.rand(100).astype(np.float32)
    >>> with Dataset.from_array(X, y) as ds:
    ...     ds.set_weights(np.ones(100, dtype=np.float32))
    ...     ds.shape
    (100, 10)
"""

from lgbm_dataset._log import register_logger
from lgbm_dataset._native import LightGBMLibrary, NativeEngine, get_engine, set_engine

# Config types
from lgbm_dataset.config import DatasetParams

# Data types
from lgbm_dataset.dataset import Dataset

# Error types
from lgbm_dataset.errors import (
    ColumnNotFoundError,
    DatasetClosedError,
    DatasetError,
    EncodingError,
    LengthMismatchError,
    MissingValueError,
    NativeCallError,
    RangeError,
    ShapeError,
)
from lgbm_dataset.frame import TabularFrame

__version__ = "0.1.0"

__all__ = [
    "ColumnNotFoundError",
    "Dataset",
    "DatasetClosedError",
    "DatasetError",
    "DatasetParams",
    "EncodingError",
    "LengthMismatchError",
    "LightGBMLibrary",
    "MissingValueError",
    "NativeCallError",
    "NativeEngine",
    "RangeError",
    "ShapeError",
    "TabularFrame",
    "__version__",
    "get_engine",
    "register_logger",
    "set_engine",
]
