"""Context server command assembly for the Grafana MCP server."""
from typing import List, Mapping, Optional, Tuple

from mcp_grafana_launcher.binaries.provisioner import BinaryProvisioner
from mcp_grafana_launcher.config import (
    DEBUG_FLAG,
    ENABLED_TOOLS_FLAG,
    GRAFANA_API_KEY_ENV,
    GRAFANA_URL_ENV,
    SETTINGS_KEY,
)
from mcp_grafana_launcher.logging import get_logger
from mcp_grafana_launcher.settings import resolve_settings
from mcp_grafana_launcher.types import Command, LaunchSettings, Project

logger = get_logger(__name__)


def build_args(settings: LaunchSettings) -> List[str]:
    """Server arguments derived from the launch settings."""
    args = []
    if settings.enabled_tools is not None:
        args.extend([ENABLED_TOOLS_FLAG, ",".join(settings.enabled_tools)])
    if settings.debug:
        args.append(DEBUG_FLAG)
    return args


def build_env(settings: LaunchSettings) -> List[Tuple[str, str]]:
    """Server environment; the URL always comes first."""
    env = [(GRAFANA_URL_ENV, settings.server_url)]
    if settings.api_key is not None:
        env.append((GRAFANA_API_KEY_ENV, settings.api_key))
    return env


class GrafanaContextServer:
    """Produces the command a host runs to start the Grafana MCP server."""

    def __init__(
        self,
        provisioner: BinaryProvisioner,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.provisioner = provisioner
        self.environ = environ

    async def context_server_command(self, context_server_id: str, project: Project) -> Command:
        settings = resolve_settings(project.settings_for(SETTINGS_KEY), self.environ)
        binary_path = await self.provisioner.ensure_binary(context_server_id)

        command = Command(
            command=str(binary_path),
            args=tuple(build_args(settings)),
            env=tuple(build_env(settings)),
        )
        logger.debug(
            {"event": "context_server_command", "target": context_server_id,
             "command": command.command, "args": list(command.args),
             "env_keys": [key for key, _ in command.env]}
        )
        return command
