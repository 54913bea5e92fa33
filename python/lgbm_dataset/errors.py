"""Exception types raised by lgbm_dataset.

Every error derives from `DatasetError`. Each subclass also derives from the
closest builtin exception, so code written against ``ValueError`` and friends
keeps working.

Types:
    - DatasetError: Base class for everything raised by this package
    - ShapeError: Buffer or array shape is inconsistent
    - RangeError: A count does not fit the native 32-bit signed integer
    - EncodingError: A string cannot be passed to the native library
    - NativeCallError: The native library reported a failure
    - MissingValueError: Missing values in label or feature columns
    - LengthMismatchError: A per-row field has the wrong length
    - ColumnNotFoundError: The requested column does not exist in a frame
    - DatasetClosedError: The dataset handle was already released
"""

from __future__ import annotations

__all__: list[str] = [
    "ColumnNotFoundError",
    "DatasetClosedError",
    "DatasetError",
    "EncodingError",
    "LengthMismatchError",
    "MissingValueError",
    "NativeCallError",
    "RangeError",
    "ShapeError",
]


class DatasetError(Exception):
    """Base class for dataset construction and mutation errors."""


class ShapeError(DatasetError, ValueError):
    """Feature buffer or input array has an inconsistent shape."""


class RangeError(DatasetError, OverflowError):
    """A row, column or field count exceeds the native integer width."""


class EncodingError(DatasetError, ValueError):
    """A string argument cannot be represented as a native C string."""


class NativeCallError(DatasetError):
    """The native library returned a non-success status.

    The message is the native library's last error, verbatim.
    """


class MissingValueError(DatasetError, ValueError):
    """Label or feature column contains missing values."""


class LengthMismatchError(DatasetError, ValueError):
    """Per-row field length does not match the dataset row count."""


class ColumnNotFoundError(DatasetError, KeyError):
    """Requested column is not present in the tabular frame."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class DatasetClosedError(DatasetError, ValueError):
    """Operation attempted on a dataset whose native handle was released."""
