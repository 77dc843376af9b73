"""OpenAPI document for the admin API, built from the app's URL map."""

import inspect
import logging
import re
from typing import Any

from flask import Flask, current_app, jsonify

from ptb import __version__
from ptb.config.models import OpenApiConfig

logger = logging.getLogger(__name__)

CONFIG_KEY = "ptb.openapi"

_CONVERTER_RE = re.compile(r"<(?:(?P<converter>[a-zA-Z_]+)(?:\([^)]*\))?:)?(?P<name>[a-zA-Z_][a-zA-Z0-9_]*)>")

_PARAM_TYPES = {
    "int": {"type": "integer"},
    "float": {"type": "number"},
    "uuid": {"type": "string", "format": "uuid"},
}

_IGNORED_METHODS = {"HEAD", "OPTIONS"}


def _openapi_path(rule: str) -> tuple[str, list[dict[str, Any]]]:
    """Convert a Flask rule to an OpenAPI path and its path parameters."""
    params = []
    for match in _CONVERTER_RE.finditer(rule):
        converter = match.group("converter") or "string"
        params.append(
            {
                "name": match.group("name"),
                "in": "path",
                "required": True,
                "schema": _PARAM_TYPES.get(converter, {"type": "string"}),
            }
        )
    path = _CONVERTER_RE.sub(lambda m: "{" + m.group("name") + "}", rule)
    return path, params


def _summary(view: Any) -> str:
    doc = inspect.getdoc(view) or ""
    return doc.splitlines()[0] if doc else ""


def build_openapi_document(app: Flask, config: OpenApiConfig) -> dict[str, Any]:
    """Build an OpenAPI 3.1 document for routes under ``config.route_prefix``.

    Every operation is secured with a bearer HTTP security scheme.
    """
    prefix = "/" + config.route_prefix.strip("/")
    paths: dict[str, dict[str, Any]] = {}

    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if not rule.rule.startswith(prefix):
            continue

        path, params = _openapi_path(rule.rule)
        view = app.view_functions.get(rule.endpoint)
        operations = paths.setdefault(path, {})

        for method in sorted((rule.methods or set()) - _IGNORED_METHODS):
            operation: dict[str, Any] = {
                "operationId": f"{rule.endpoint}.{method.lower()}",
                "summary": _summary(view),
                "responses": {"200": {"description": "Successful response"}},
            }
            if params:
                operation["parameters"] = params
            operations[method.lower()] = operation

    return {
        "openapi": "3.1.0",
        "info": {
            "title": config.title,
            "version": app.config.get("PTB_VERSION") or __version__,
        },
        "paths": paths,
        "components": {
            "securitySchemes": {"bearer": {"type": "http", "scheme": "bearer"}},
        },
        "security": [{"bearer": []}],
    }


def api_document():
    """OpenAPI document for the admin API."""
    config: OpenApiConfig = current_app.extensions[CONFIG_KEY]
    return jsonify(build_openapi_document(current_app, config))


def init_openapi(app: Flask, config: OpenApiConfig) -> None:
    """Serve the OpenAPI document at ``config.path`` when enabled."""
    if not config.enabled:
        logger.debug("OpenAPI document disabled")
        return
    app.extensions[CONFIG_KEY] = config
    app.add_url_rule(config.path, endpoint="openapi.document", view_func=api_document)
