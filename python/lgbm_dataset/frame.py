"""Tabular frame capability interface.

Tabular ingestion only needs a handful of operations from a dataframe
library. They are captured by the `TabularFrame` and `FrameColumn`
protocols, with adapters for polars and pandas. Any other frame type can be
used by implementing the protocols directly.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from lgbm_dataset.errors import ColumnNotFoundError

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl

__all__: list[str] = [
    "FrameColumn",
    "PandasFrame",
    "PolarsFrame",
    "TabularFrame",
    "as_tabular_frame",
]


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class FrameColumn(Protocol):
    """A single named column."""

    @property
    def name(self) -> str:
        """Column name."""
        ...

    def null_count(self) -> int:
        """Number of missing values."""
        ...

    def cast_float32(self) -> FrameColumn:
        """Column cast to 32-bit floats."""
        ...

    def cast_float64(self) -> FrameColumn:
        """Column cast to 64-bit floats."""
        ...

    def non_null_values(self) -> NDArray[Any]:
        """Non-missing values in row order."""
        ...


@runtime_checkable
class TabularFrame(Protocol):
    """A table of named columns."""

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, columns)."""
        ...

    def column(self, name: str) -> FrameColumn:
        """Select a column by name.

        Raises:
            ColumnNotFoundError: If no column has that name.
        """
        ...

    def drop_in_place(self, name: str) -> None:
        """Remove a column from the underlying frame."""
        ...

    def iter_columns(self) -> Iterator[FrameColumn]:
        """Columns in their current order."""
        ...


# =============================================================================
# polars
# =============================================================================


def _is_polars_dataframe(obj: object) -> bool:
    """Check if object is a polars DataFrame."""
    try:
        import polars as pl  # noqa: PLC0415 (lazy import for optional dependency)

        return isinstance(obj, pl.DataFrame)
    except ImportError:
        return False


class PolarsColumn:
    """`FrameColumn` over a polars Series."""

    def __init__(self, series: pl.Series) -> None:
        self._series = series

    @property
    def name(self) -> str:
        return self._series.name

    def null_count(self) -> int:
        return self._series.null_count()

    def cast_float32(self) -> PolarsColumn:
        import polars as pl  # noqa: PLC0415 (lazy import for optional dependency)

        return PolarsColumn(self._series.cast(pl.Float32))

    def cast_float64(self) -> PolarsColumn:
        import polars as pl  # noqa: PLC0415 (lazy import for optional dependency)

        return PolarsColumn(self._series.cast(pl.Float64))

    def non_null_values(self) -> NDArray[Any]:
        return self._series.drop_nulls().to_numpy()


class PolarsFrame:
    """`TabularFrame` over a polars DataFrame. Mutations hit the wrapped frame."""

    def __init__(self, df: pl.DataFrame) -> None:
        self._df = df

    @property
    def shape(self) -> tuple[int, int]:
        return self._df.shape

    def column(self, name: str) -> PolarsColumn:
        if name not in self._df.columns:
            raise ColumnNotFoundError(f"column {name!r} not found in dataframe")
        return PolarsColumn(self._df.get_column(name))

    def drop_in_place(self, name: str) -> None:
        if name not in self._df.columns:
            raise ColumnNotFoundError(f"column {name!r} not found in dataframe")
        self._df.drop_in_place(name)

    def iter_columns(self) -> Iterator[PolarsColumn]:
        for series in self._df.get_columns():
            yield PolarsColumn(series)


# =============================================================================
# pandas
# =============================================================================


def _is_pandas_dataframe(obj: object) -> bool:
    """Check if object is a pandas DataFrame."""
    try:
        import pandas as pd  # noqa: PLC0415 (lazy import for optional dependency)

        return isinstance(obj, pd.DataFrame)
    except ImportError:
        return False


class PandasColumn:
    """`FrameColumn` over a pandas Series."""

    def __init__(self, series: pd.Series) -> None:
        self._series = series

    @property
    def name(self) -> str:
        return str(self._series.name)

    def null_count(self) -> int:
        return int(self._series.isna().sum())

    def cast_float32(self) -> PandasColumn:
        return PandasColumn(self._series.astype(np.float32))

    def cast_float64(self) -> PandasColumn:
        return PandasColumn(self._series.astype(np.float64))

    def non_null_values(self) -> NDArray[Any]:
        return self._series.dropna().to_numpy()


class PandasFrame:
    """`TabularFrame` over a pandas DataFrame. Mutations hit the wrapped frame."""

    def __init__(self, df: pd.DataFrame) -> None:
        self._df = df

    @property
    def shape(self) -> tuple[int, int]:
        n_rows, n_cols = self._df.shape
        return n_rows, n_cols

    def column(self, name: str) -> PandasColumn:
        if name not in self._df.columns:
            raise ColumnNotFoundError(f"column {name!r} not found in dataframe")
        return PandasColumn(self._df[name])

    def drop_in_place(self, name: str) -> None:
        if name not in self._df.columns:
            raise ColumnNotFoundError(f"column {name!r} not found in dataframe")
        self._df.pop(name)

    def iter_columns(self) -> Iterator[PandasColumn]:
        for name in list(self._df.columns):
            yield PandasColumn(self._df[name])


# =============================================================================
# Dispatch
# =============================================================================


def as_tabular_frame(obj: object) -> TabularFrame:
    """Wrap a dataframe in the matching `TabularFrame` adapter.

    Objects already implementing `TabularFrame` are returned unchanged.

    Raises:
        TypeError: If the object is not a supported frame.
    """
    if isinstance(obj, (PolarsFrame, PandasFrame)):
        return obj
    if _is_polars_dataframe(obj):
        return PolarsFrame(obj)  # type: ignore[arg-type]
    if _is_pandas_dataframe(obj):
        return PandasFrame(obj)  # type: ignore[arg-type]
    if isinstance(obj, TabularFrame):
        return obj
    type_name = type(obj).__name__
    raise TypeError(
        f"Cannot use {type_name} as a tabular frame. "
        f"Expected a polars or pandas DataFrame, or an object implementing TabularFrame."
    )
