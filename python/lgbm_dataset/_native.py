"""Boundary to the native LightGBM library.

Everything that touches ``ctypes`` lives here. The rest of the package talks
to the native library through the `NativeEngine` protocol, which keeps the
handle lifetime logic testable without the shared library.

The library itself is the ``lib_lightgbm`` shipped with the ``lightgbm``
wheel; it is loaded lazily on first use and cached for the process.
"""

from __future__ import annotations

import ctypes
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from lgbm_dataset._log import log_debug, native_log_callback
from lgbm_dataset.errors import EncodingError, NativeCallError, RangeError

__all__: list[str] = [
    "C_API_DTYPE_FLOAT32",
    "C_API_DTYPE_FLOAT64",
    "C_API_DTYPE_INT32",
    "C_API_DTYPE_INT64",
    "C_API_IS_ROW_MAJOR",
    "LightGBMLibrary",
    "NativeEngine",
    "NativeHandle",
    "bundled_lib_path",
    "c_int32",
    "c_str",
    "get_engine",
    "set_engine",
]

# =============================================================================
# C API constants
# =============================================================================

C_API_DTYPE_FLOAT32 = 0
C_API_DTYPE_FLOAT64 = 1
C_API_DTYPE_INT32 = 2
C_API_DTYPE_INT64 = 3

C_API_IS_ROW_MAJOR = 1

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_CTYPES_BY_DTYPE: dict[int, type] = {
    C_API_DTYPE_FLOAT32: ctypes.c_float,
    C_API_DTYPE_FLOAT64: ctypes.c_double,
    C_API_DTYPE_INT32: ctypes.c_int32,
    C_API_DTYPE_INT64: ctypes.c_int64,
}

# Opaque to callers: a ctypes.c_void_p for the real library, anything for fakes
NativeHandle = Any

# Module-level so it outlives every loaded library; the native side only holds a raw pointer
_LOG_CALLBACK = ctypes.CFUNCTYPE(None, ctypes.c_char_p)(native_log_callback)


# =============================================================================
# Marshalling helpers
# =============================================================================


def c_str(value: str, what: str) -> bytes:
    """Encode a string as a NUL-terminated C string payload.

    Args:
        value: String to encode.
        what: Human-readable name of the value, used in error messages.

    Returns:
        UTF-8 bytes without the terminator (ctypes appends it).

    Raises:
        EncodingError: If the string contains NUL or is not UTF-8 encodable.
    """
    if "\x00" in value:
        raise EncodingError(f"failed to make C string from {what}: contains a NUL character")
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"failed to make C string from {what}: {e}") from e


def c_int32(value: int, what: str) -> int:
    """Check that a count fits the native 32-bit signed integer.

    Raises:
        RangeError: If the value is outside the int32 range.
    """
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise RangeError(f"{what} ({value}) doesn't fit into an i32")
    return value


# =============================================================================
# Engine protocol
# =============================================================================


@runtime_checkable
class NativeEngine(Protocol):
    """Primitive dataset operations of the native gradient-boosting library.

    All methods except `dataset_free` raise `NativeCallError` on a non-zero
    native status. `dataset_free` returns the status so the handle owner can
    apply its own failure policy.
    """

    def dataset_create_from_mat(
        self,
        data: NDArray[Any],
        data_type: int,
        nrow: int,
        ncol: int,
        is_row_major: int,
        params: bytes,
        reference: NativeHandle | None,
    ) -> NativeHandle:
        """Allocate a dataset from a dense matrix."""
        ...

    def dataset_create_from_file(
        self,
        filename: bytes,
        params: bytes,
        reference: NativeHandle | None,
    ) -> NativeHandle:
        """Allocate a dataset by loading a file."""
        ...

    def dataset_set_field(
        self,
        handle: NativeHandle,
        field_name: bytes,
        data: NDArray[Any],
        num_element: int,
        data_type: int,
    ) -> None:
        """Attach a named per-row field."""
        ...

    def dataset_get_field(self, handle: NativeHandle, field_name: bytes) -> NDArray[Any] | None:
        """Read a named field back, or None when it is unset."""
        ...

    def dataset_get_num_data(self, handle: NativeHandle) -> int:
        """Number of rows."""
        ...

    def dataset_get_num_feature(self, handle: NativeHandle) -> int:
        """Number of features."""
        ...

    def dataset_save_binary(self, handle: NativeHandle, filename: bytes) -> None:
        """Write the dataset in the native binary format."""
        ...

    def dataset_free(self, handle: NativeHandle) -> int:
        """Release the dataset and return the native status."""
        ...


# =============================================================================
# ctypes implementation
# =============================================================================


def bundled_lib_path() -> str:
    """Path of the ``lib_lightgbm`` shipped with the installed ``lightgbm`` package.

    ``lightgbm.libpath`` exposes the lookup as ``find_lib_path`` up to 4.6 and
    as ``_find_lib_path`` from 4.7 on.

    Raises:
        ImportError: If ``lightgbm`` is missing or provides neither lookup.
    """
    from lightgbm import libpath  # noqa: PLC0415 (loads lib_lightgbm on import)

    finder = getattr(libpath, "find_lib_path", None) or getattr(libpath, "_find_lib_path", None)
    if finder is None:
        raise ImportError("lightgbm.libpath provides neither find_lib_path nor _find_lib_path")
    return finder()[0]


class LightGBMLibrary:
    """`NativeEngine` backed by ``lib_lightgbm`` through ctypes."""

    def __init__(self, lib: ctypes.CDLL) -> None:
        self._lib = lib

    @classmethod
    def load(cls, lib_path: str | None = None) -> LightGBMLibrary:
        """Load the shared library and route its log output into Python.

        Args:
            lib_path: Explicit path to ``lib_lightgbm``. Defaults to the
                library bundled with the installed ``lightgbm`` package.
        """
        if lib_path is None:
            lib_path = bundled_lib_path()

        lib = ctypes.cdll.LoadLibrary(lib_path)
        lib.LGBM_GetLastError.restype = ctypes.c_char_p
        if lib.LGBM_RegisterLogCallback(_LOG_CALLBACK) != 0:
            raise NativeCallError(lib.LGBM_GetLastError().decode("utf-8"))
        log_debug(f"loaded native library from {lib_path}")
        return cls(lib)

    def _safe_call(self, ret: int) -> None:
        if ret != 0:
            raise NativeCallError(self._lib.LGBM_GetLastError().decode("utf-8"))

    def dataset_create_from_mat(
        self,
        data: NDArray[Any],
        data_type: int,
        nrow: int,
        ncol: int,
        is_row_major: int,
        params: bytes,
        reference: NativeHandle | None,
    ) -> NativeHandle:
        handle = ctypes.c_void_p()
        self._safe_call(
            self._lib.LGBM_DatasetCreateFromMat(
                data.ctypes.data_as(ctypes.c_void_p),
                ctypes.c_int(data_type),
                ctypes.c_int32(nrow),
                ctypes.c_int32(ncol),
                ctypes.c_int(is_row_major),
                ctypes.c_char_p(params),
                reference,
                ctypes.byref(handle),
            )
        )
        return handle

    def dataset_create_from_file(
        self,
        filename: bytes,
        params: bytes,
        reference: NativeHandle | None,
    ) -> NativeHandle:
        handle = ctypes.c_void_p()
        self._safe_call(
            self._lib.LGBM_DatasetCreateFromFile(
                ctypes.c_char_p(filename),
                ctypes.c_char_p(params),
                reference,
                ctypes.byref(handle),
            )
        )
        return handle

    def dataset_set_field(
        self,
        handle: NativeHandle,
        field_name: bytes,
        data: NDArray[Any],
        num_element: int,
        data_type: int,
    ) -> None:
        self._safe_call(
            self._lib.LGBM_DatasetSetField(
                handle,
                ctypes.c_char_p(field_name),
                data.ctypes.data_as(ctypes.c_void_p),
                ctypes.c_int(num_element),
                ctypes.c_int(data_type),
            )
        )

    def dataset_get_field(self, handle: NativeHandle, field_name: bytes) -> NDArray[Any] | None:
        out_len = ctypes.c_int(0)
        out_type = ctypes.c_int(0)
        ret = ctypes.POINTER(ctypes.c_void_p)()
        self._safe_call(
            self._lib.LGBM_DatasetGetField(
                handle,
                ctypes.c_char_p(field_name),
                ctypes.byref(out_len),
                ctypes.byref(ret),
                ctypes.byref(out_type),
            )
        )
        if out_len.value == 0:
            return None
        ctype = _CTYPES_BY_DTYPE.get(out_type.value)
        if ctype is None:
            raise NativeCallError(f"unknown field type {out_type.value} for field {field_name.decode('utf-8')!r}")
        ptr = ctypes.cast(ret, ctypes.POINTER(ctype))
        # The native buffer belongs to the dataset, copy it out
        return np.ctypeslib.as_array(ptr, shape=(out_len.value,)).copy()

    def dataset_get_num_data(self, handle: NativeHandle) -> int:
        result = ctypes.c_int32(0)
        self._safe_call(self._lib.LGBM_DatasetGetNumData(handle, ctypes.byref(result)))
        return result.value

    def dataset_get_num_feature(self, handle: NativeHandle) -> int:
        result = ctypes.c_int32(0)
        self._safe_call(self._lib.LGBM_DatasetGetNumFeature(handle, ctypes.byref(result)))
        return result.value

    def dataset_save_binary(self, handle: NativeHandle, filename: bytes) -> None:
        self._safe_call(self._lib.LGBM_DatasetSaveBinary(handle, ctypes.c_char_p(filename)))

    def dataset_free(self, handle: NativeHandle) -> int:
        return int(self._lib.LGBM_DatasetFree(handle))


# =============================================================================
# Process-wide engine
# =============================================================================

_ENGINE: NativeEngine | None = None


def get_engine() -> NativeEngine:
    """Return the process-wide engine, loading the native library on first use."""
    global _ENGINE  # noqa: PLW0603
    if _ENGINE is None:
        _ENGINE = LightGBMLibrary.load()
    return _ENGINE


def set_engine(engine: NativeEngine | None) -> NativeEngine | None:
    """Replace the process-wide engine.

    Datasets keep the engine they were created with, so swapping engines never
    routes a release to the wrong library.

    Returns:
        The previously installed engine (None if none was loaded yet).
    """
    global _ENGINE  # noqa: PLW0603
    previous = _ENGINE
    _ENGINE = engine
    return previous
