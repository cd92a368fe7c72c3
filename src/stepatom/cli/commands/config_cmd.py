"""stepatom config — runner arguments management."""

from __future__ import annotations

from pathlib import Path

import typer
import yaml

from stepatom.core.config import find_config_path, load_args, save_args
from stepatom.core.exceptions import ConfigError
from stepatom.core.models import RunnerArgs

config_app = typer.Typer(
    name="config",
    help="Runner arguments management commands.",
    no_args_is_help=True,
)


@config_app.command(name="show")
def config_show(
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Show effective runner arguments."""
    try:
        path = Path(config_path) if config_path else None
        args = load_args(config_path=path)
        data = args.model_dump(mode="json")
        output = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        typer.echo(output)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None


@config_app.command(name="set")
def config_set(
    key: str = typer.Argument(help="Argument name (e.g. log_extend)."),
    value: str = typer.Argument(help="Value to set."),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Set a runner argument in the config file."""
    try:
        path = Path(config_path) if config_path else find_config_path()
        if key not in RunnerArgs.model_fields:
            msg = f"Unknown argument: {key}"
            raise ConfigError(msg)
        args = load_args(config_path=path, overrides={key: value})
        save_args(args, path)
        typer.echo(f"Set {key} = {value}")
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None
