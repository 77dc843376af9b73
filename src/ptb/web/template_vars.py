"""Template variables shared by every rendered view.

The registry belongs to one Flask app (stored in ``app.extensions``), so two
apps in the same process never see each other's plugin variables.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from flask import Flask, current_app, has_request_context

from ptb.collectors.diagnostics import collect_request_diagnostics

logger = logging.getLogger(__name__)

EXTENSION_KEY = "ptb.template_vars"


class TemplateVarRegistry:
    """Flat key/value store merged into every template render.

    Later merges overwrite earlier keys; there is no namespacing.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._vars: dict[str, Any] = dict(initial or {})

    def merge(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` in, overwriting existing keys."""
        self._vars.update(values)

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of the current variables."""
        return dict(self._vars)

    def get(self, key: str, default: Any = None) -> Any:
        return self._vars.get(key, default)

    def clear(self) -> None:
        self._vars.clear()

    def __getitem__(self, key: str) -> Any:
        return self._vars[key]

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"TemplateVarRegistry({len(self._vars)} vars)"


def get_template_vars(app: Flask | None = None) -> TemplateVarRegistry:
    """Return the registry attached to ``app`` (or the current app)."""
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def init_template_vars(app: Flask) -> TemplateVarRegistry:
    """Attach an empty registry to ``app`` and inject it into every render."""
    registry = TemplateVarRegistry()
    app.extensions[EXTENSION_KEY] = registry

    @app.context_processor
    def inject_template_vars() -> dict[str, Any]:
        # Read the live registry on each render.
        if not registry:
            return {}
        values = registry.snapshot()
        if has_request_context():
            values.update(collect_request_diagnostics())
        return values

    return registry
