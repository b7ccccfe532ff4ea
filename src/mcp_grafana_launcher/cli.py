"""Command line entry point."""
import asyncio
import json
import os
from pathlib import Path
from typing import NoReturn, Optional

import click

from mcp_grafana_launcher.binaries.provisioner import BinaryProvisioner
from mcp_grafana_launcher.config import (
    LOG_LEVEL_ENV,
    SETTINGS_KEY,
    default_work_dir,
    load_project,
)
from mcp_grafana_launcher.errors import LauncherError, log_error
from mcp_grafana_launcher.extension import GrafanaContextServer
from mcp_grafana_launcher.logging import configure_logging, get_logger
from mcp_grafana_launcher.types import Command

logger = get_logger("cli")

settings_option = click.option(
    "--settings",
    "settings_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with a `context_servers` section.",
)
work_dir_option = click.option(
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding downloaded server versions.",
)
target_option = click.option(
    "--target",
    default=SETTINGS_KEY,
    show_default=True,
    help="Context server identifier.",
)


def _fail(error: LauncherError) -> NoReturn:
    log_error(error, logger=logger)
    raise click.ClickException(str(error))


async def _resolve_command(
    settings_file: Optional[Path], work_dir: Optional[Path], target: str
) -> Command:
    project = load_project(settings_file)
    provisioner = BinaryProvisioner(work_dir or default_work_dir())
    return await GrafanaContextServer(provisioner).context_server_command(target, project)


@click.group()
@click.option(
    "--log-level",
    default=lambda: os.environ.get(LOG_LEVEL_ENV, "WARNING"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for stderr output.",
)
def cli(log_level: str) -> None:
    """Launch the Grafana MCP server."""
    configure_logging(log_level)


@cli.command()
@settings_option
@work_dir_option
@target_option
def command(settings_file: Optional[Path], work_dir: Optional[Path], target: str) -> None:
    """Print the server command descriptor as JSON."""
    try:
        resolved = asyncio.run(_resolve_command(settings_file, work_dir, target))
    except LauncherError as e:
        _fail(e)
    click.echo(json.dumps(resolved.to_dict(), indent=2))


@cli.command()
@settings_option
@work_dir_option
@target_option
def run(settings_file: Optional[Path], work_dir: Optional[Path], target: str) -> None:
    """Replace this process with the Grafana MCP server."""
    try:
        resolved = asyncio.run(_resolve_command(settings_file, work_dir, target))
    except LauncherError as e:
        _fail(e)

    env = {**os.environ, **dict(resolved.env)}
    logger.info({"event": "exec_server", "command": resolved.command, "args": list(resolved.args)})
    os.execve(resolved.command, [resolved.command, *resolved.args], env)


@cli.command()
@work_dir_option
@target_option
def install(work_dir: Optional[Path], target: str) -> None:
    """Download the latest server release and remove old versions."""
    provisioner = BinaryProvisioner(work_dir or default_work_dir())
    try:
        provisioned = asyncio.run(provisioner.provision(target))
    except LauncherError as e:
        _fail(e)

    click.echo(str(provisioned.executable_path))
    for outcome in provisioner.last_cleanup:
        status = "removed" if outcome.removed else f"kept ({outcome.error})"
        click.echo(f"{status}: {outcome.path}", err=True)


def main() -> None:
    """Run the launcher CLI."""
    cli()
