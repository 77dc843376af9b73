"""Configuration models and YAML loading."""

from .loader import ConfigError, load_config, load_ptb_config, load_yaml
from .models import ApiToken, ExtensionConfig, MailConfig, OpenApiConfig, PtbConfig

__all__ = [
    "ApiToken",
    "ConfigError",
    "ExtensionConfig",
    "MailConfig",
    "OpenApiConfig",
    "PtbConfig",
    "load_config",
    "load_ptb_config",
    "load_yaml",
]
