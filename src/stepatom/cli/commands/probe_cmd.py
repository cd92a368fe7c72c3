"""stepatom probe — run a ProbeAtom against a live page."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from stepatom.atoms.probe import TARGET_KEY, ProbeAtom
from stepatom.core.config import load_args
from stepatom.core.exceptions import StepAtomError
from stepatom.core.models import (
    BrowserSettings,
    EngineName,
    Environment,
    Envs,
    OutputFolders,
    RunArgs,
)
from stepatom.core.sinks import ConsoleLogSink
from stepatom.engine.web import PlaywrightSession


def probe_command(
    url: str = typer.Argument(help="Page URL to open."),
    selector: str = typer.Argument(help="Selector, optionally prefixed with xpath: or css:."),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
    browser_type: str = typer.Option(
        "chromium", "--browser", "-b", help="chromium | firefox | webkit"
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window."),
    extend: bool = typer.Option(False, "--extend", "-e", help="Verbose step logging."),
) -> None:
    """Count elements matching a selector on a page."""
    try:
        count = asyncio.run(_probe(url, selector, config_path, browser_type, headed, extend))
    except StepAtomError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    typer.echo(f"{count} element(s) match {selector}")


async def _probe(
    url: str,
    selector: str,
    config_path: str | None,
    browser_type: str,
    headed: bool,
    extend: bool,
) -> int:
    overrides = {"log_extend": True} if extend else None
    args = load_args(config_path=Path(config_path) if config_path else None, overrides=overrides)

    folder = Path(args.output).resolve()
    envs = Envs(args=args, output=OutputFolders(folder=folder.name, folder_full=str(folder)))
    env = Environment(
        url=url,
        browser=BrowserSettings(
            engine=EngineName.PLAYWRIGHT.value,
            browser_type=browser_type,
            headless=not headed,
        ),
    )
    sink = ConsoleLogSink(log_file=folder / args.log_file_name)
    session = PlaywrightSession(env.browser)

    try:
        await session.start()
        await session.navigate(url)
        result = await ProbeAtom().run_test(
            RunArgs(
                envs=envs,
                env=env,
                env_name=env.name,
                name="probe",
                selectors={TARGET_KEY: selector},
                browser=session.browser,
                page=session.page,
                log=sink,
            )
        )
    finally:
        await session.stop()

    return int(result["count"])
