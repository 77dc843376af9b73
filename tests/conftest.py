"""Shared fixtures for PTB tests."""

import sys
import textwrap
from pathlib import Path

import pytest
from flask import Flask

from ptb.plugins.discovery import PLUGIN_NAMESPACE


def _forget_plugin_modules():
    for name in list(sys.modules):
        if name == PLUGIN_NAMESPACE or name.startswith(PLUGIN_NAMESPACE + "."):
            del sys.modules[name]


@pytest.fixture(autouse=True)
def clean_plugin_modules():
    """Loaded providers are cached in sys.modules; isolate each test."""
    _forget_plugin_modules()
    yield
    _forget_plugin_modules()


@pytest.fixture
def plugin_root(tmp_path):
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture
def make_plugin(plugin_root):
    """Write ``<root>/<name>/<filename>`` with the given provider source."""

    def _make(name: str, source: str | None = None, filename: str | None = None) -> Path:
        folder = plugin_root / name
        folder.mkdir()
        if source is not None:
            path = folder / (filename or f"{name}ServiceProvider.py")
            path.write_text(textwrap.dedent(source))
        return folder

    return _make


@pytest.fixture
def host_app():
    app = Flask("ptb_test_host")
    app.config["APP_NAME"] = "Test Host"
    return app


@pytest.fixture
def provider_source():
    """Build source for a conventional ``<name>ServiceProvider`` class."""

    def _source(name: str, template_vars: dict | None = None, boot: str = "pass") -> str:
        return (
            f"class {name}ServiceProvider:\n"
            f"    def __init__(self, app):\n"
            f"        self.app = app\n"
            f"        self.booted = False\n"
            f"\n"
            f"    def boot(self):\n"
            f"        self.booted = True\n"
            f"        {boot}\n"
            f"\n"
            f"    def register_template_vars(self):\n"
            f"        return {template_vars!r}\n"
        )

    return _source
