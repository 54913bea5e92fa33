"""Logging for lgbm_dataset.

Messages go to the ``lgbm_dataset`` standard-library logger by default. A
different sink can be installed with `register_logger`, which mirrors the
logger hook of LightGBM's own Python package so both can share one logger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

__all__: list[str] = ["register_logger"]

logger = logging.getLogger("lgbm_dataset")
logger.addHandler(logging.NullHandler())

_LOGGER: Any = logger
_INFO_METHOD_NAME = "info"
_WARNING_METHOD_NAME = "warning"


def _has_method(obj: Any, method_name: str) -> bool:
    return callable(getattr(obj, method_name, None))


def register_logger(
    custom_logger: Any,
    info_method_name: str = "info",
    warning_method_name: str = "warning",
) -> None:
    """Register a custom logger.

    Args:
        custom_logger: Object receiving log messages, e.g. a `logging.Logger`.
        info_method_name: Method used for info messages.
        warning_method_name: Method used for warning messages.

    Raises:
        TypeError: If the logger does not provide both methods.
    """
    if not _has_method(custom_logger, info_method_name) or not _has_method(custom_logger, warning_method_name):
        raise TypeError(f"Logger must provide '{info_method_name}' and '{warning_method_name}' method")

    global _LOGGER, _INFO_METHOD_NAME, _WARNING_METHOD_NAME  # noqa: PLW0603
    _LOGGER = custom_logger
    _INFO_METHOD_NAME = info_method_name
    _WARNING_METHOD_NAME = warning_method_name


def log_debug(msg: str) -> None:
    # Custom loggers only promise info/warning
    if _has_method(_LOGGER, "debug"):
        _LOGGER.debug(msg)


def log_info(msg: str) -> None:
    getattr(_LOGGER, _INFO_METHOD_NAME)(msg)


def log_warning(msg: str) -> None:
    getattr(_LOGGER, _WARNING_METHOD_NAME)(msg)


def log_critical(msg: str) -> None:
    if _has_method(_LOGGER, "critical"):
        _LOGGER.critical(msg)
    else:
        log_warning(msg)


def _normalize_native_string(func: Callable[[str], None]) -> Callable[[str], None]:
    """Join log messages from the native library, which arrive in chunks."""
    msg_normalized: list[str] = []

    @wraps(func)
    def wrapper(msg: str) -> None:
        nonlocal msg_normalized
        if msg.strip() == "":
            msg = "".join(msg_normalized)
            msg_normalized = []
            return func(msg)
        msg_normalized.append(msg)
        return None

    return wrapper


@_normalize_native_string
def log_native(msg: str) -> None:
    log_info(msg)


def native_log_callback(msg: bytes) -> None:
    """Redirect logs from the native library into Python."""
    log_native(msg.decode("utf-8", errors="replace"))
