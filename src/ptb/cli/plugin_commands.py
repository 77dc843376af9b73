"""Plugin inspection CLI commands."""

from pathlib import Path

import click
from flask import Flask
from rich.console import Console
from rich.table import Table

console = Console()


def _scan(plugin_dir: Path, policy: str):
    """Scan ``plugin_dir`` against a bare host app."""
    from ptb.plugins.loader import scan_and_load
    from ptb.web.template_vars import init_template_vars

    app = Flask("ptb")
    app.config["APP_NAME"] = "PTB"
    registry = init_template_vars(app)
    result = scan_and_load(plugin_dir, app, registry, policy=policy)
    return result, registry


@click.group()
def plugins():
    """Inspect plugins in a plugin directory."""


@plugins.command("list")
@click.argument("plugin_dir", type=click.Path(path_type=Path))
@click.option("--fail-fast", is_flag=True, help="Stop at the first failing plugin")
def list_plugins(plugin_dir, fail_fast):
    """Scan PLUGIN_DIR and show each plugin's outcome."""
    from ptb.plugins.results import PluginBootError

    try:
        result, _ = _scan(plugin_dir, "fail_fast" if fail_fast else "collect")
    except PluginBootError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if not result.outcomes:
        console.print(f"No plugins found in {plugin_dir}")
        return

    table = Table(title="Plugins")
    table.add_column("Plugin", style="cyan")
    table.add_column("Status")
    table.add_column("Error")

    styles = {"loaded": "green", "skipped": "yellow", "failed": "red"}
    for outcome in result.outcomes:
        style = styles[outcome.status]
        table.add_row(outcome.name, f"[{style}]{outcome.status}[/{style}]", outcome.error or "")

    console.print(table)
    console.print(f"\n{result.plugin_count} loaded in {result.elapsed:.4f}s")
    if result.failures:
        raise SystemExit(1)


@plugins.command("vars")
@click.argument("plugin_dir", type=click.Path(path_type=Path))
def show_vars(plugin_dir):
    """Show the template variables PLUGIN_DIR's plugins produce."""
    from ptb.plugins.results import PluginBootError

    try:
        _, registry = _scan(plugin_dir, "fail_fast")
    except PluginBootError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    table = Table(title="Template Variables")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in registry.snapshot().items():
        table.add_row(key, repr(value))
    console.print(table)
