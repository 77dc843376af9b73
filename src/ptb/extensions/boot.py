"""Boot configured extensions.

Extensions are listed in config, resolved by ``module:Class`` entry point,
constructed with ``(app, extension_config)`` and booted. Unlike plugins,
their failures are collected and logged by default.
"""

import importlib
import logging
from typing import Any

from ptb.config.models import ErrorPolicy, ExtensionConfig
from ptb.plugins.results import PluginOutcome, describe_error, summarize_failures

logger = logging.getLogger(__name__)

# Extension types booted even when not explicitly enabled.
ALWAYS_BOOT_TYPES = {"server", "gateway"}


class ExtensionBootError(Exception):
    """Raised when an extension fails to boot under the fail_fast policy."""

    def __init__(self, extension: str, cause: BaseException) -> None:
        self.extension = extension
        self.cause = cause
        super().__init__(f"Extension '{extension}' failed to boot: {describe_error(cause)}")


def select_bootable(extensions: list[ExtensionConfig]) -> list[ExtensionConfig]:
    """Enabled extensions plus every server/gateway one, first of each name."""
    seen: set[str] = set()
    selected = []
    for ext in extensions:
        if not (ext.enabled or ext.type in ALWAYS_BOOT_TYPES):
            continue
        if ext.extension in seen:
            continue
        seen.add(ext.extension)
        selected.append(ext)
    return selected


def resolve_entry_point(entry_point: str) -> type:
    """Import ``module:Class`` and return the class."""
    module_path, sep, attr_name = entry_point.partition(":")
    if not sep:
        raise ValueError(f"Invalid entry point '{entry_point}', expected 'module:Class'")
    module = importlib.import_module(module_path)
    return getattr(module, attr_name)


def boot_extension(app: Any, ext: ExtensionConfig) -> Any:
    """Construct one extension and call its ``boot`` method if it has one."""
    cls = resolve_entry_point(ext.entry_point)
    instance = cls(app, ext)
    boot = getattr(instance, "boot", None)
    if callable(boot):
        boot()
    return instance


def boot_extensions(
    app: Any,
    extensions: list[ExtensionConfig],
    policy: ErrorPolicy = "collect",
) -> list[PluginOutcome]:
    """Boot every selected extension.

    Args:
        app: Host application.
        extensions: Configured extensions, in priority order.
        policy: ``collect`` logs failures and continues; ``fail_fast``
            raises ExtensionBootError on the first failure.

    Returns:
        One outcome per booted extension.
    """
    outcomes = []
    for ext in select_bootable(extensions):
        try:
            boot_extension(app, ext)
        except Exception as e:
            if policy == "fail_fast":
                raise ExtensionBootError(ext.extension, e) from e
            outcomes.append(PluginOutcome(ext.extension, "failed", describe_error(e)))
            continue
        logger.info(f"Booted extension: {ext.extension}")
        outcomes.append(PluginOutcome(ext.extension, "loaded"))

    failed = [o for o in outcomes if o.status == "failed"]
    if failed:
        logger.warning(
            f"{len(failed)} extension(s) failed to boot: {summarize_failures(outcomes)}"
        )
    return outcomes
