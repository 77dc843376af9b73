"""PTB CLI - Main entry point."""

import logging
from pathlib import Path

import click
from rich.console import Console

from ptb import __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="PTB")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """PTB - Flask host with folder-scanned service provider plugins."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


from .plugin_commands import plugins  # noqa: E402

cli.add_command(plugins)


@cli.command()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="YAML configuration file")
@click.option("--host", default=None, help="Bind address (overrides config)")
@click.option("--port", type=int, default=None, help="Port (overrides config)")
@click.option("--plugin-dir", type=click.Path(path_type=Path), default=None,
              help="Plugin directory (overrides config)")
def serve(config_path, host, port, plugin_dir):
    """Boot the host application and serve it."""
    from ptb.config.loader import ConfigError, load_ptb_config
    from ptb.extensions.boot import ExtensionBootError
    from ptb.plugins.results import PluginBootError
    from ptb.web.app import create_app

    try:
        config = load_ptb_config(config_path)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    overrides = {
        k: v
        for k, v in {"host": host, "port": port, "plugin_dir": plugin_dir}.items()
        if v is not None
    }
    if overrides:
        config = config.model_copy(update=overrides)

    try:
        app = create_app(config)
    except (PluginBootError, ExtensionBootError) as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(
        f"[bold green]{config.app_name}[/bold green] on http://{config.host}:{config.port}"
    )
    app.run(host=config.host, port=config.port, debug=config.debug)


def main():
    cli()


if __name__ == "__main__":
    main()
