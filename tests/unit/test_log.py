"""Tests for logger registration and the native log bridge."""

import logging

import pytest

from lgbm_dataset import _log, register_logger


class _ListLogger:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []

    def info(self, msg: str) -> None:
        self.infos.append(msg)

    def warning(self, msg: str) -> None:
        self.warnings.append(msg)


class _CustomMethods:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def say(self, msg: str) -> None:
        self.messages.append(msg)


@pytest.fixture
def restore_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore the module-level logger after the test."""
    monkeypatch.setattr(_log, "_LOGGER", _log._LOGGER)  # noqa: SLF001
    monkeypatch.setattr(_log, "_INFO_METHOD_NAME", _log._INFO_METHOD_NAME)  # noqa: SLF001
    monkeypatch.setattr(_log, "_WARNING_METHOD_NAME", _log._WARNING_METHOD_NAME)  # noqa: SLF001


class TestRegisterLogger:
    """Tests for custom logger registration."""

    def test_rejects_logger_without_methods(self, restore_logger) -> None:
        """Test that loggers must provide info and warning."""
        with pytest.raises(TypeError, match="'info' and 'warning'"):
            register_logger(object())

    def test_custom_method_names(self, restore_logger) -> None:
        """Test that method names are configurable."""
        custom = _CustomMethods()
        register_logger(custom, info_method_name="say", warning_method_name="say")
        _log.log_info("hello")
        _log.log_warning("careful")
        assert custom.messages == ["hello", "careful"]

    def test_critical_falls_back_to_warning(self, restore_logger) -> None:
        """Test that loggers without critical still see critical messages."""
        custom = _ListLogger()
        register_logger(custom)
        _log.log_critical("native free failed")
        assert custom.warnings == ["native free failed"]

    def test_debug_skipped_without_method(self, restore_logger) -> None:
        """Test that debug messages are dropped for loggers without debug."""
        custom = _ListLogger()
        register_logger(custom)
        _log.log_debug("created dataset")
        assert custom.infos == []


class TestNativeLogBridge:
    """Tests for messages coming from the native library."""

    def test_chunks_joined(self, restore_logger) -> None:
        """Test that native chunks are joined until a blank chunk."""
        custom = _ListLogger()
        register_logger(custom)
        _log.native_log_callback(b"[LightGBM] [Info] ")
        _log.native_log_callback(b"Construct bin mappers")
        assert custom.infos == []
        _log.native_log_callback(b"\n")
        assert custom.infos == ["[LightGBM] [Info] Construct bin mappers"]

    def test_default_logger(self, caplog) -> None:
        """Test that messages reach the standard library logger by default."""
        with caplog.at_level(logging.INFO, logger="lgbm_dataset"):
            _log.log_info("constructed")
        assert "constructed" in caplog.text
