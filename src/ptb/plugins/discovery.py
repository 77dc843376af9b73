"""Plugin folder discovery and entry-point naming."""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .manifest import load_manifest

logger = logging.getLogger(__name__)

# Loaded provider modules live under this prefix in sys.modules.
PLUGIN_NAMESPACE = "ptb_plugins"
PROVIDER_SUFFIX = "ServiceProvider"


@dataclass(frozen=True)
class PluginDescriptor:
    """Where a plugin's entry point lives and what it is called."""

    folder: str
    class_name: str
    source_path: Path
    module_name: str


def iter_plugin_folders(plugin_root: Path) -> Iterator[str]:
    """Yield the names of plugin folders directly under ``plugin_root``.

    Order is whatever the filesystem listing returns. A missing root, or
    one that is not a directory, yields nothing.
    """
    if not plugin_root.is_dir():
        return

    for name in os.listdir(plugin_root):
        if name in (".", ".."):
            continue
        if not (plugin_root / name).is_dir():
            continue
        yield name


def describe_plugin(plugin_root: Path, folder: str) -> PluginDescriptor:
    """Derive the entry point for a plugin folder.

    A ``plugin.yaml`` manifest wins over the naming convention, which
    expects ``<folder>/<folder>ServiceProvider.py`` defining a class
    ``<folder>ServiceProvider``.
    """
    plugin_path = plugin_root / folder
    manifest = load_manifest(plugin_path)

    if manifest is not None:
        module = manifest.module
        class_name = manifest.class_name
    else:
        module = class_name = f"{folder}{PROVIDER_SUFFIX}"

    return PluginDescriptor(
        folder=folder,
        class_name=class_name,
        source_path=plugin_path / f"{module}.py",
        module_name=f"{PLUGIN_NAMESPACE}.{folder}.{module}",
    )
