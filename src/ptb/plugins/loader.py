"""Scan the plugin directory, boot service providers and collect template vars.

Each plugin folder ``Foo`` is expected to provide ``FooServiceProvider`` in
``Foo/FooServiceProvider.py`` (or whatever its ``plugin.yaml`` names). The
provider is constructed with the host application, booted, and asked for
template variables, which are merged into the app's registry in scan order.
Host diagnostic variables are merged last so they always win.
"""

import importlib.util
import logging
import sys
import time
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from ptb.collectors.diagnostics import collect_diagnostics
from ptb.config.models import ErrorPolicy
from ptb.web.template_vars import TemplateVarRegistry

from .discovery import PluginDescriptor, describe_plugin, iter_plugin_folders
from .results import (
    LoadResult,
    PluginBootError,
    PluginOutcome,
    describe_error,
    summarize_failures,
)

logger = logging.getLogger(__name__)


class ServiceProvider(Protocol):
    """Capability interface for plugin entry points.

    Both methods are optional: the loader only calls the ones a provider
    actually defines.
    """

    def boot(self) -> Any: ...

    def register_template_vars(self) -> Mapping[str, Any] | None: ...


def _load_module(descriptor: PluginDescriptor) -> ModuleType:
    spec = importlib.util.spec_from_file_location(
        descriptor.module_name, descriptor.source_path
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load plugin module from {descriptor.source_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[descriptor.module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(descriptor.module_name, None)
        raise
    return module


def resolve_provider_class(descriptor: PluginDescriptor) -> type | None:
    """Return the provider class, importing its source file if needed.

    Returns None when the source file does not exist or does not define
    the expected class.
    """
    module = sys.modules.get(descriptor.module_name)
    if module is None:
        if not descriptor.source_path.is_file():
            return None
        module = _load_module(descriptor)

    cls = getattr(module, descriptor.class_name, None)
    if not isinstance(cls, type):
        logger.debug(
            f"{descriptor.source_path} does not define {descriptor.class_name}"
        )
        return None
    return cls


def _boot_plugin(
    plugin_root: Path,
    folder: str,
    app: Any,
    registry: TemplateVarRegistry,
) -> tuple[PluginOutcome, ServiceProvider | None]:
    descriptor = describe_plugin(plugin_root, folder)
    provider_cls = resolve_provider_class(descriptor)
    if provider_cls is None:
        return PluginOutcome(folder, "skipped"), None

    try:
        provider: ServiceProvider = provider_cls(app)

        boot = getattr(provider, "boot", None)
        if callable(boot):
            boot()

        register_vars = getattr(provider, "register_template_vars", None)
        if callable(register_vars):
            template_vars = register_vars()
            if isinstance(template_vars, Mapping):
                registry.merge(template_vars)
    except Exception:
        # A broken provider must be re-read from disk on the next scan.
        sys.modules.pop(descriptor.module_name, None)
        raise

    logger.info(f"Loaded plugin: {folder}")
    return PluginOutcome(folder, "loaded"), provider


def scan_and_load(
    plugin_root: Path | str,
    app: Any,
    registry: TemplateVarRegistry,
    policy: ErrorPolicy = "fail_fast",
) -> LoadResult:
    """Load every plugin under ``plugin_root`` and merge host diagnostics.

    Args:
        plugin_root: Directory whose child folders are plugins.
        app: Host application passed to each provider's constructor.
        registry: Template variable registry to merge into.
        policy: ``fail_fast`` re-raises the first plugin failure as a
            PluginBootError; ``collect`` records it and keeps scanning.

    Returns:
        LoadResult with loaded folder names in scan order and elapsed seconds.

    Raises:
        PluginBootError: Under ``fail_fast``, when a plugin cannot be
            imported, constructed or booted. Diagnostics are not merged.
    """
    plugin_root = Path(plugin_root)
    result = LoadResult()
    start = time.perf_counter()

    for folder in iter_plugin_folders(plugin_root):
        try:
            outcome, provider = _boot_plugin(plugin_root, folder, app, registry)
        except Exception as e:
            if policy == "fail_fast":
                raise PluginBootError(folder, e) from e
            outcome, provider = PluginOutcome(folder, "failed", describe_error(e)), None

        result.outcomes.append(outcome)
        if outcome.status == "loaded":
            result.loaded.append(folder)
            result.providers[folder] = provider

    result.elapsed = time.perf_counter() - start

    if result.failures:
        logger.warning(
            f"{len(result.failures)} plugin(s) failed to boot: "
            f"{summarize_failures(result.outcomes)}"
        )

    registry.merge(
        collect_diagnostics(app, plugin_count=result.plugin_count, elapsed=result.elapsed)
    )
    logger.info(
        f"Plugin scan of {plugin_root} finished: {result.plugin_count} loaded "
        f"in {result.elapsed:.4f}s"
    )
    return result
