"""Host diagnostic variables exposed to templates."""

import platform
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from flask import g, has_request_context, request

from ptb import __version__

DIAGNOSTIC_KEYS = (
    "PTB_VERSION",
    "PTB_PLUGIN_COUNT",
    "PTB_LOAD_TIME",
    "PTB_SERVER_TIME",
    "PTB_PING",
    "PTB_APP_NAME",
    "PTB_LARAVEL_VERSION",
    "PTB_PHP_VERSION",
    "PTB_MEMORY_USAGE_MB",
    "PTB_REQUEST_URL",
    "PTB_REQUEST_METHOD",
    "PTB_USER_ID",
)


def framework_version() -> str:
    """Installed Flask version, or 'unknown'."""
    try:
        return version("flask")
    except PackageNotFoundError:
        return "unknown"


def memory_usage_mb() -> float:
    """Resident memory of this process in MiB, two decimals."""
    import psutil

    return round(psutil.Process().memory_info().rss / 1024 / 1024, 2)


def current_user_id() -> int | None:
    """ID of the user authenticated for the current request, if any."""
    if not has_request_context():
        return None
    user = getattr(g, "user", None)
    return getattr(user, "user_id", None)


def collect_request_diagnostics() -> dict[str, Any]:
    """Request-scoped keys; all None outside a request."""
    if not has_request_context():
        return {
            "PTB_REQUEST_URL": None,
            "PTB_REQUEST_METHOD": None,
            "PTB_USER_ID": None,
        }
    return {
        "PTB_REQUEST_URL": request.url,
        "PTB_REQUEST_METHOD": request.method,
        "PTB_USER_ID": current_user_id(),
    }


def collect_diagnostics(app: Any, plugin_count: int, elapsed: float) -> dict[str, Any]:
    """Build the full set of host diagnostic keys.

    Args:
        app: Host application; its ``config`` supplies the app name and version.
        plugin_count: Number of plugins loaded by the scan.
        elapsed: Seconds the scan took. Load time and ping share this value.

    Returns:
        Dict containing every key in DIAGNOSTIC_KEYS.
    """
    config = getattr(app, "config", None) or {}
    load_time = round(max(elapsed, 0.0), 4)

    diagnostics: dict[str, Any] = {
        "PTB_VERSION": config.get("PTB_VERSION") or __version__,
        "PTB_PLUGIN_COUNT": plugin_count,
        "PTB_LOAD_TIME": load_time,
        "PTB_SERVER_TIME": datetime.now().strftime("%H:%M:%S"),
        "PTB_PING": load_time,
        "PTB_APP_NAME": config.get("APP_NAME", "PTB"),
        "PTB_LARAVEL_VERSION": framework_version(),
        "PTB_PHP_VERSION": platform.python_version(),
        "PTB_MEMORY_USAGE_MB": memory_usage_mb(),
    }
    diagnostics.update(collect_request_diagnostics())
    return diagnostics
