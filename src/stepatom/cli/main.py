"""stepatom CLI entry point."""

import typer

app = typer.Typer(
    name="stepatom",
    help="stepatom — Atom test steps for browser automation",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        from stepatom import __version__

        typer.echo(f"stepatom {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """stepatom — Atom test steps for browser automation."""


# -- Register commands --------------------------------------------------------

from stepatom.cli.commands.config_cmd import config_app  # noqa: E402
from stepatom.cli.commands.probe_cmd import probe_command  # noqa: E402

app.add_typer(config_app, name="config")
app.command(name="probe")(probe_command)
