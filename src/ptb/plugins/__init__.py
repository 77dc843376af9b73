"""Folder-scanned service provider plugins."""

from .discovery import (
    PLUGIN_NAMESPACE,
    PluginDescriptor,
    describe_plugin,
    iter_plugin_folders,
)
from .loader import ServiceProvider, resolve_provider_class, scan_and_load
from .manifest import MANIFEST_FILENAME, PluginManifest, load_manifest
from .results import LoadResult, PluginBootError, PluginOutcome

__all__ = [
    "MANIFEST_FILENAME",
    "PLUGIN_NAMESPACE",
    "LoadResult",
    "PluginBootError",
    "PluginDescriptor",
    "PluginManifest",
    "PluginOutcome",
    "ServiceProvider",
    "describe_plugin",
    "iter_plugin_folders",
    "load_manifest",
    "resolve_provider_class",
    "scan_and_load",
]
