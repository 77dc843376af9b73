"""Optional plugin manifest model."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from ptb.config.loader import ConfigError, load_yaml

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "plugin.yaml"


class PluginManifest(BaseModel):
    """Metadata a plugin folder may ship instead of relying on naming convention."""

    name: str
    version: str = "0.1.0"
    entry_point: str = Field(
        description="Module file stem and class inside the plugin folder, "
        "e.g. 'provider:BillingProvider'"
    )
    description: str = ""
    author: str = ""

    @field_validator("entry_point")
    @classmethod
    def _module_and_class(cls, value: str) -> str:
        module, sep, attr = value.partition(":")
        if not sep or not module or not attr:
            raise ValueError(f"entry_point must look like 'module:Class', got '{value}'")
        return value

    @property
    def module(self) -> str:
        return self.entry_point.split(":", 1)[0]

    @property
    def class_name(self) -> str:
        return self.entry_point.split(":", 1)[1]


def load_manifest(plugin_path: Path) -> PluginManifest | None:
    """Load ``plugin.yaml`` from a plugin folder.

    Returns:
        The manifest, or None when the folder has no manifest file.

    Raises:
        ConfigError: If the manifest exists but is invalid.
    """
    path = plugin_path / MANIFEST_FILENAME
    if not path.is_file():
        return None

    data = load_yaml(path)
    try:
        return PluginManifest(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid plugin manifest {path}: {e}") from e
