"""Owning wrapper around a native dataset handle.

A `DatasetHandle` is created right after a successful native allocation and
is the only path that releases it. Release happens exactly once: explicitly
through `release`, or from the finalizer when the wrapper is collected.
"""

from __future__ import annotations

import os
from typing import NoReturn

from lgbm_dataset._log import log_critical, log_debug
from lgbm_dataset._native import NativeEngine, NativeHandle
from lgbm_dataset.errors import DatasetClosedError

__all__: list[str] = ["DatasetHandle"]


def _abort(msg: str) -> NoReturn:
    log_critical(msg)
    os.abort()


class DatasetHandle:
    """Sole owner of one native dataset handle.

    Not copyable and not picklable: a copy would release the same native
    resource twice.
    """

    __slots__ = ("_engine", "_raw", "__weakref__")

    def __init__(self, engine: NativeEngine, raw: NativeHandle) -> None:
        self._engine = engine
        self._raw: NativeHandle | None = raw

    @property
    def engine(self) -> NativeEngine:
        """Engine that allocated the handle."""
        return self._engine

    @property
    def raw(self) -> NativeHandle:
        """The native handle.

        Raises:
            DatasetClosedError: If the handle was already released.
        """
        if self._raw is None:
            raise DatasetClosedError("dataset has been closed")
        return self._raw

    @property
    def released(self) -> bool:
        """Whether the native resource has been freed."""
        return self._raw is None

    def release(self) -> None:
        """Free the native resource. Further calls are no-ops.

        A failing native free leaves the library in an unknown state; the
        process is aborted rather than continuing on top of it.
        """
        if self._raw is None:
            return
        raw, self._raw = self._raw, None
        status = self._engine.dataset_free(raw)
        if status != 0:
            _abort(f"call to LGBM_DatasetFree failed with status {status}")
        log_debug("released native dataset handle")

    def __del__(self) -> None:
        # __init__ may not have run if allocation of the wrapper itself failed
        if getattr(self, "_raw", None) is not None:
            self.release()

    def __copy__(self) -> NoReturn:
        raise TypeError("DatasetHandle owns a native resource and cannot be copied")

    def __deepcopy__(self, memo: dict[int, object]) -> NoReturn:
        raise TypeError("DatasetHandle owns a native resource and cannot be copied")

    def __reduce__(self) -> NoReturn:
        raise TypeError("DatasetHandle owns a native resource and cannot be pickled")

    def __repr__(self) -> str:
        state = "released" if self._raw is None else "open"
        return f"DatasetHandle({state})"
