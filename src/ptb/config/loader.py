"""YAML configuration file loading with Pydantic validation."""

import os
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .models import PtbConfig

T = TypeVar("T", bound=BaseModel)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


def load_yaml(path: Path) -> dict:
    """Load a YAML file and return its contents as a dict.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML contents.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError(f"Expected a mapping at the top of {path}")
            return data
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def load_config(path: Path, model_class: type[T]) -> T:
    """Load and validate a YAML config file against a Pydantic model.

    Raises:
        ConfigError: If validation fails.
    """
    data = load_yaml(path)
    try:
        return model_class(**data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed for {path}: {e}") from e


def load_ptb_config(path: Path | None = None) -> PtbConfig:
    """Load the host configuration, applying environment overrides.

    With no path the defaults are used. ``PTB_PLUGIN_DIR`` and
    ``PTB_SECRET_KEY`` override the file values when set.
    """
    config = load_config(path, PtbConfig) if path else PtbConfig()

    overrides: dict = {}
    plugin_dir = os.environ.get("PTB_PLUGIN_DIR", "")
    if plugin_dir:
        overrides["plugin_dir"] = Path(plugin_dir)
    secret_key = os.environ.get("PTB_SECRET_KEY", "")
    if secret_key:
        overrides["secret_key"] = secret_key

    if overrides:
        config = config.model_copy(update=overrides)
    return config
