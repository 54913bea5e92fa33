"""Pytest configuration for lgbm_dataset tests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import numpy as np
import pytest
from numpy.typing import NDArray

from lgbm_dataset import _native
from lgbm_dataset.errors import NativeCallError


def _check_lightgbm() -> bool:
    """Check if the lightgbm package, and with it lib_lightgbm, imports."""
    try:
        import lightgbm  # noqa: F401

        return True
    except (ImportError, OSError):
        return False


_LIGHTGBM_AVAILABLE = _check_lightgbm()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "lightgbm: tests requiring the native lightgbm library")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Skip tests based on marker and available dependencies."""
    skip_lightgbm = pytest.mark.skip(reason="lightgbm not installed")

    for item in items:
        if "lightgbm" in item.keywords and not _LIGHTGBM_AVAILABLE:
            item.add_marker(skip_lightgbm)


# =============================================================================
# Recording engine
# =============================================================================


class RecordingEngine:
    """In-memory `NativeEngine` that records every call.

    Mimics the native library closely enough for lifetime and validation
    tests: fields must have one element per row, and files must be registered
    in ``files`` before they can be loaded.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.datasets: dict[int, dict[str, Any]] = {}
        self.freed: list[int] = []
        self.files: dict[bytes, tuple[int, int]] = {}
        self.fail_create = False
        self.fail_set_field = False
        self.free_status = 0
        self._next_handle = 1

    def _new_handle(self, n_rows: int, n_features: int, **extra: Any) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.datasets[handle] = {"n_rows": n_rows, "n_features": n_features, "fields": {}, **extra}
        return handle

    def _live(self, handle: int) -> dict[str, Any]:
        if handle in self.freed:
            raise AssertionError(f"handle {handle} used after free")
        return self.datasets[handle]

    def dataset_create_from_mat(
        self,
        data: NDArray[Any],
        data_type: int,
        nrow: int,
        ncol: int,
        is_row_major: int,
        params: bytes,
        reference: Any,
    ) -> int:
        self.calls.append(("create_from_mat", nrow, ncol))
        if self.fail_create:
            raise NativeCallError("create failed")
        return self._new_handle(
            nrow,
            ncol,
            data=data.copy(),
            data_type=data_type,
            is_row_major=is_row_major,
            params=params,
            reference=reference,
        )

    def dataset_create_from_file(self, filename: bytes, params: bytes, reference: Any) -> int:
        self.calls.append(("create_from_file", filename))
        if self.fail_create or filename not in self.files:
            raise NativeCallError(f"Could not open {filename.decode('utf-8')}")
        n_rows, n_features = self.files[filename]
        return self._new_handle(n_rows, n_features, params=params, reference=reference)

    def dataset_set_field(
        self,
        handle: int,
        field_name: bytes,
        data: NDArray[Any],
        num_element: int,
        data_type: int,
    ) -> None:
        name = field_name.decode("utf-8")
        self.calls.append(("set_field", name, num_element))
        dataset = self._live(handle)
        if self.fail_set_field:
            raise NativeCallError(f"set field {name} failed")
        if num_element != dataset["n_rows"]:
            raise NativeCallError(f"Length of {name} is not same with #data")
        dataset["fields"][name] = (data.copy(), data_type)

    def dataset_get_field(self, handle: int, field_name: bytes) -> NDArray[Any] | None:
        field = self._live(handle)["fields"].get(field_name.decode("utf-8"))
        return None if field is None else field[0].copy()

    def dataset_get_num_data(self, handle: int) -> int:
        return self._live(handle)["n_rows"]

    def dataset_get_num_feature(self, handle: int) -> int:
        return self._live(handle)["n_features"]

    def dataset_save_binary(self, handle: int, filename: bytes) -> None:
        dataset = self._live(handle)
        self.calls.append(("save_binary", filename))
        self.files[filename] = (dataset["n_rows"], dataset["n_features"])

    def dataset_free(self, handle: int) -> int:
        self.calls.append(("free", handle))
        self.freed.append(handle)
        return self.free_status

    def field_calls(self, name: str) -> list[tuple[Any, ...]]:
        """Recorded set_field calls for one field."""
        return [call for call in self.calls if call[0] == "set_field" and call[1] == name]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[RecordingEngine]:
    """Install a recording engine as the process-wide engine."""
    fake = RecordingEngine()
    monkeypatch.setattr(_native, "_ENGINE", fake)
    yield fake


@pytest.fixture
def engine_factory() -> type[RecordingEngine]:
    """Factory for additional recording engines."""
    return RecordingEngine


@pytest.fixture
def scenario_rows() -> list[list[float]]:
    """Five rows of four features."""
    return [
        [1.0, 0.1, 0.2, 0.1],
        [0.7, 0.4, 0.5, 0.1],
        [0.9, 0.8, 0.5, 0.1],
        [0.2, 0.2, 0.8, 0.7],
        [0.1, 0.7, 1.0, 0.9],
    ]


@pytest.fixture
def scenario_data(scenario_rows: list[list[float]]) -> list[float]:
    """The five rows flattened in row-major order."""
    return [value for row in scenario_rows for value in row]


@pytest.fixture
def scenario_label() -> list[float]:
    """Binary labels for the five rows."""
    return [0.0, 0.0, 0.0, 1.0, 1.0]
