"""Pydantic models for PTB configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Error policies shared by the plugin scan and the extension boot loop.
ErrorPolicy = Literal["fail_fast", "collect"]

# OAuth-style token scopes the host understands.
TOKEN_SCOPES: dict[str, str] = {
    "profile": "View your profile",
}


class ApiToken(BaseModel):
    """A bearer token and the user it authenticates."""

    token: str
    user_id: int
    name: str = ""
    permissions: list[str] = Field(default_factory=list)
    scopes: list[str] = Field(default_factory=list)

    @field_validator("scopes")
    @classmethod
    def _known_scopes(cls, value: list[str]) -> list[str]:
        unknown = [s for s in value if s not in TOKEN_SCOPES]
        if unknown:
            raise ValueError(f"Unknown token scope(s): {', '.join(unknown)}")
        return value


class ExtensionConfig(BaseModel):
    """A first-party extension booted before plugins are scanned."""

    extension: str
    type: str = "other"  # 'server', 'gateway', or anything else
    enabled: bool = False
    entry_point: str = Field(
        description="Python module:class entry point, e.g. 'myext.boot:MyExtension'"
    )
    settings: dict[str, str] = Field(default_factory=dict)


class OpenApiConfig(BaseModel):
    """OpenAPI document generation settings."""

    enabled: bool = True
    title: str = "PTB Admin API"
    route_prefix: str = "api/v1/admin"
    path: str = "/docs/api.json"


class MailConfig(BaseModel):
    """Email status tracking settings."""

    track_status: bool = True
    job_name: str = "ptb.mail.Mail"


class PtbConfig(BaseModel):
    """Top-level configuration for a PTB host application."""

    app_name: str = "PTB"
    version: str | None = None  # None = package version
    plugin_dir: Path = Field(default_factory=lambda: Path.cwd() / "plugins")
    plugin_error_policy: ErrorPolicy = "fail_fast"
    extension_error_policy: ErrorPolicy = "collect"
    extensions: list[ExtensionConfig] = Field(default_factory=list)
    api_tokens: list[ApiToken] = Field(default_factory=list)
    openapi: OpenApiConfig = Field(default_factory=OpenApiConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    secret_key: str = ""
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)
    debug: bool = False
    db_path: Path = Field(default_factory=lambda: Path.home() / ".ptb" / "ptb.db")
