"""Dataset: owned handle over a native LightGBM training dataset.

A `Dataset` is built once from one of the ingestion entry points and then
handed to a training routine:

    - `Dataset.from_mat`: flat row-major float64 buffer plus a row count
    - `Dataset.from_array`: 2D array-like, flattened and passed to `from_mat`
    - `Dataset.from_file`: delimited text (label first) or native binary file
    - `Dataset.from_dataframe`: polars/pandas frame with a named label column

Every successful native allocation is wrapped in a `DatasetHandle` before
any further fallible step, so a failure later in construction still releases
the native resource.
"""

from __future__ import annotations

import operator
import os
from collections.abc import Sequence
from types import TracebackType
from typing import Any, NoReturn, Self

import numpy as np
from numpy.typing import NDArray

from lgbm_dataset._handle import DatasetHandle
from lgbm_dataset._log import log_debug
from lgbm_dataset._native import (
    C_API_DTYPE_FLOAT32,
    C_API_DTYPE_FLOAT64,
    C_API_IS_ROW_MAJOR,
    NativeEngine,
    c_int32,
    c_str,
    get_engine,
)
from lgbm_dataset.config import DatasetParams
from lgbm_dataset.errors import LengthMismatchError, MissingValueError, NativeCallError, RangeError, ShapeError
from lgbm_dataset.frame import as_tabular_frame

__all__: list[str] = ["Dataset"]

LABEL_FIELD = "label"
WEIGHT_FIELD = "weight"

FeaturesInput = NDArray[Any] | Sequence[Sequence[float]]
BufferInput = NDArray[Any] | Sequence[float]
FieldInput = NDArray[Any] | Sequence[float]


def _param_bytes(params: DatasetParams | None) -> bytes:
    param_str = params.to_param_string() if params is not None else ""
    return c_str(param_str, "parameters")


def _as_field_array(values: FieldInput, name: str) -> NDArray[np.float32]:
    """Coerce a per-row field to a contiguous 1D float32 array."""
    arr = np.ascontiguousarray(values, dtype=np.float32)
    if arr.ndim != 1:
        raise ShapeError(f"{name} must be 1D array, got {arr.ndim}D")
    return arr


class Dataset:
    """Training dataset owned by the native library.

    Row and feature counts are always read from the native side. Instances are
    created only through the ``from_*`` constructors and release their native
    handle when closed, when leaving a ``with`` block, or when collected.

    Example:
        >>> from lgbm_dataset import Dataset
        >>> data = [1.0, 0.1, 0.2, 0.1, 0.7, 0.4, 0.5, 0.1]
        >>> with Dataset.from_mat(data, n_rows=2, label=[0.0, 1.0]) as ds:
        ...     ds.shape
        (2, 4)
    """

    _handle: DatasetHandle

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError(
            "Dataset cannot be instantiated directly; use Dataset.from_mat, Dataset.from_array, "
            "Dataset.from_file or Dataset.from_dataframe"
        )

    @classmethod
    def _from_handle(cls, handle: DatasetHandle) -> Self:
        instance = cls.__new__(cls)
        instance._handle = handle  # noqa: SLF001
        return instance

    # =========================================================================
    # Ingestion
    # =========================================================================

    @classmethod
    def from_mat(
        cls,
        data: BufferInput,
        n_rows: int,
        label: FieldInput,
        *,
        params: DatasetParams | None = None,
    ) -> Self:
        """Create a dataset from a dense row-major buffer.

        Zero rows with an empty buffer passes validation, but the native
        library may still reject a dataset without rows.

        Args:
            data: Flat row-major feature values, ``n_rows * n_features`` long.
                Multi-dimensional arrays are flattened in row-major order.
            n_rows: Number of rows in ``data``. Must be an integer; floats and
                booleans are rejected rather than truncated.
            label: One label per row.
            params: Native dataset parameters; empty when omitted.

        Returns:
            Dataset with the label field attached.

        Raises:
            ShapeError: If ``len(data)`` is not a multiple of ``n_rows``.
            TypeError: If ``n_rows`` is not an integer.
            RangeError: If a count does not fit a 32-bit signed integer.
            EncodingError: If the parameter string cannot be passed to C.
            NativeCallError: If the native library rejects the data or labels.
        """
        if isinstance(n_rows, bool):
            raise TypeError("number of rows must be an integer, got bool")
        n_rows = operator.index(n_rows)
        buffer = np.ascontiguousarray(data, dtype=np.float64).reshape(-1)
        if n_rows < 0:
            raise RangeError(f"number of rows ({n_rows}) must be non-negative")

        data_length = buffer.shape[0]
        if (data_length != 0 or n_rows != 0) and (n_rows == 0 or data_length % n_rows != 0):
            raise ShapeError(
                f"data len is not multiple of n_rows ({n_rows}), "
                f"but all rows should have the same number of features"
            )
        n_features = 0 if data_length == 0 and n_rows == 0 else data_length // n_rows

        label_arr = _as_field_array(label, "label")
        nrow = c_int32(n_rows, "number of rows")
        ncol = c_int32(n_features, "number of columns")
        label_len = c_int32(label_arr.shape[0], "label length")
        params_bytes = _param_bytes(params)
        label_name = c_str(LABEL_FIELD, "field name")

        engine = get_engine()
        raw = engine.dataset_create_from_mat(
            buffer,
            C_API_DTYPE_FLOAT64,
            nrow,
            ncol,
            C_API_IS_ROW_MAJOR,
            params_bytes,
            None,
        )
        # Own the handle before anything else can fail, so errors below still free it
        dataset = cls._from_handle(DatasetHandle(engine, raw))

        try:
            engine.dataset_set_field(raw, label_name, label_arr, label_len, C_API_DTYPE_FLOAT32)
            log_debug(f"created dataset from matrix with {nrow} rows and {ncol} columns")
        except BaseException:
            dataset.close()
            raise

        return dataset

    @classmethod
    def from_array(
        cls,
        features: FeaturesInput,
        label: FieldInput,
        *,
        params: DatasetParams | None = None,
    ) -> Self:
        """Create a dataset from a 2D array of shape (n_rows, n_features).

        Args:
            features: 2D array-like, converted to C-contiguous float64.
            label: One label per row.
            params: Native dataset parameters; empty when omitted.

        Raises:
            ShapeError: If ``features`` is not 2D.
        """
        try:
            arr = np.ascontiguousarray(features, dtype=np.float64)
        except (ValueError, TypeError) as e:
            type_name = type(features).__name__
            raise TypeError(f"Cannot convert {type_name} to feature array. Expected a 2D array-like.") from e
        if arr.ndim != 2:
            raise ShapeError(f"features must be 2D array, got {arr.ndim}D")
        return cls.from_mat(arr.reshape(-1), arr.shape[0], label, params=params)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str],
        *,
        params: DatasetParams | None = None,
    ) -> Self:
        """Create a dataset by loading a file with the native loader.

        Text files hold one row per line, the label first, then the feature
        values separated by tabs or spaces:

            2 0.11 0.89 0.2
            3 0.39 0.1 0.4
            0 0.1 0.9 1.0

        Files written by `save_binary` are accepted too.

        Raises:
            EncodingError: If the path cannot be passed to C.
            NativeCallError: If the native loader fails.
        """
        path_bytes = c_str(os.fspath(path), "file path")
        params_bytes = _param_bytes(params)

        engine = get_engine()
        raw = engine.dataset_create_from_file(path_bytes, params_bytes, None)
        dataset = cls._from_handle(DatasetHandle(engine, raw))
        try:
            log_debug(f"created dataset from file {os.fspath(path)}")
        except BaseException:
            dataset.close()
            raise
        return dataset

    @classmethod
    def from_dataframe(
        cls,
        dataframe: object,
        label_column: str,
        *,
        params: DatasetParams | None = None,
    ) -> Self:
        """Create a dataset from a dataframe.

        The label column is removed from ``dataframe`` in place; every other
        column becomes a feature, in its current order.

        Args:
            dataframe: polars or pandas DataFrame, or any `TabularFrame`.
            label_column: Name of the column holding the labels.
            params: Native dataset parameters; empty when omitted.

        Raises:
            ColumnNotFoundError: If ``label_column`` is not in the frame.
            MissingValueError: If the label or any feature column has missing values.
            TypeError: If ``dataframe`` is not a supported frame.
        """
        frame = as_tabular_frame(dataframe)
        n_rows, _ = frame.shape

        label_series = frame.column(label_column).cast_float32()
        if label_series.null_count() != 0:
            raise MissingValueError(
                "Cannot create a dataset with null values, encountered nulls when creating the label array"
            )

        frame.drop_in_place(label_column)

        label_values = np.ascontiguousarray(label_series.non_null_values(), dtype=np.float32)

        columns = list(frame.iter_columns())
        n_features = len(columns)
        feature_values = np.empty(n_rows * n_features, dtype=np.float64)

        for col_idx, column in enumerate(columns):
            series = column.cast_float64()
            if series.null_count() != 0:
                raise MissingValueError(
                    f"Cannot create a dataset with null values, encountered nulls in feature column {column.name!r}"
                )
            feature_values[col_idx::n_features] = series.non_null_values()

        return cls.from_mat(feature_values, n_rows, label_values, params=params)

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def engine(self) -> NativeEngine:
        """Engine that owns the native dataset."""
        return self._handle.engine

    @property
    def closed(self) -> bool:
        """Whether the native handle has been released."""
        return self._handle.released

    def n_rows(self) -> int:
        """Number of rows, as reported by the native library."""
        result = self.engine.dataset_get_num_data(self._handle.raw)
        if result < 0:
            raise NativeCallError("dataset length negative")
        return result

    def n_features(self) -> int:
        """Number of features, as reported by the native library."""
        result = self.engine.dataset_get_num_feature(self._handle.raw)
        if result < 0:
            raise NativeCallError("feature count negative")
        return result

    @property
    def shape(self) -> tuple[int, int]:
        """(n_rows, n_features)."""
        return self.n_rows(), self.n_features()

    # =========================================================================
    # Fields
    # =========================================================================

    def set_weights(self, weights: FieldInput) -> None:
        """Attach per-row sample weights.

        Raises:
            ShapeError: If ``weights`` is not 1D.
            LengthMismatchError: If there is not exactly one weight per row.
        """
        weights_arr = _as_field_array(weights, "weights")
        n_rows = self.n_rows()
        if n_rows != weights_arr.shape[0]:
            raise LengthMismatchError(f"got {weights_arr.shape[0]} weights, but dataset has {n_rows} records")
        field_name = c_str(WEIGHT_FIELD, "field name")
        length = c_int32(weights_arr.shape[0], "weights len")
        self.engine.dataset_set_field(self._handle.raw, field_name, weights_arr, length, C_API_DTYPE_FLOAT32)
        log_debug(f"set {length} weights")

    def get_label(self) -> NDArray[np.float32] | None:
        """Labels stored in the native dataset."""
        return self._get_field(LABEL_FIELD)

    def get_weights(self) -> NDArray[np.float32] | None:
        """Weights stored in the native dataset, or None if never set."""
        return self._get_field(WEIGHT_FIELD)

    def _get_field(self, name: str) -> NDArray[Any] | None:
        return self.engine.dataset_get_field(self._handle.raw, c_str(name, "field name"))

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_binary(self, path: str | os.PathLike[str]) -> None:
        """Save the dataset in the native binary format.

        The file can be loaded back with `Dataset.from_file`.
        """
        path_bytes = c_str(os.fspath(path), "file path")
        self.engine.dataset_save_binary(self._handle.raw, path_bytes)
        log_debug(f"saved dataset to {os.fspath(path)}")

    # =========================================================================
    # Lifetime
    # =========================================================================

    def close(self) -> None:
        """Release the native dataset. Safe to call more than once."""
        self._handle.release()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __copy__(self) -> NoReturn:
        raise TypeError("Dataset owns a native resource and cannot be copied")

    def __deepcopy__(self, memo: dict[int, object]) -> NoReturn:
        raise TypeError("Dataset owns a native resource and cannot be copied")

    def __reduce__(self) -> NoReturn:
        raise TypeError("Dataset owns a native resource and cannot be pickled; use save_binary instead")

    def __repr__(self) -> str:
        """Return string representation."""
        if self.closed:
            return "Dataset(closed)"
        return f"Dataset(n_rows={self.n_rows()}, n_features={self.n_features()})"
