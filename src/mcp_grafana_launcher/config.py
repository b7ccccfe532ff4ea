"""Launcher constants and settings-file loading."""

import json
import os
from pathlib import Path
from typing import Mapping, Optional

from mcp_grafana_launcher.errors import ConfigurationError
from mcp_grafana_launcher.types import Project

REPO_NAME = "grafana/mcp-grafana"
BINARY_NAME = "mcp-grafana"
SETTINGS_KEY = "mcp-grafana"

# Environment read by the launcher
GRAFANA_URL_ENV = "GRAFANA_URL"
GRAFANA_API_KEY_ENV = "GRAFANA_API_KEY"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
HOME_ENV = "MCP_GRAFANA_LAUNCHER_HOME"
LOG_LEVEL_ENV = "MCP_GRAFANA_LAUNCHER_LOG_LEVEL"

# Server flags
ENABLED_TOOLS_FLAG = "--enabled-tools"
DEBUG_FLAG = "--debug"

DEFAULT_WORK_DIR = Path(os.path.expanduser("~/.cache/mcp-grafana-launcher"))


def default_work_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Directory that holds provisioned binary versions.

    Every entry in it other than the current version directory is removed
    after an upgrade, so it must not be shared with anything else.
    """
    environ = os.environ if environ is None else environ
    override = environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_WORK_DIR


def load_project(settings_file: Optional[Path], root: Optional[Path] = None) -> Project:
    """Build a project context from a JSON settings file.

    The file is shaped like ``{"context_servers": {"mcp-grafana": {"settings": {...}}}}``.
    A missing ``settings_file`` yields a project without context server settings.
    """
    root = root or Path.cwd()
    if settings_file is None:
        return Project(root=root)

    try:
        raw = json.loads(Path(settings_file).read_text())
    except OSError as e:
        raise ConfigurationError(
            f"failed to read settings file '{settings_file}': {e}",
            details={"path": str(settings_file)},
        ) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"invalid JSON in settings file '{settings_file}': {e}",
            details={"path": str(settings_file)},
        ) from e

    if not isinstance(raw, dict):
        raise ConfigurationError(
            "settings file must contain a JSON object",
            details={"path": str(settings_file)},
        )

    context_servers = raw.get("context_servers")
    if context_servers is None:
        context_servers = {}
    if not isinstance(context_servers, dict):
        raise ConfigurationError(
            "`context_servers` must be a JSON object",
            details={"path": str(settings_file)},
        )

    return Project(root=root, context_servers=context_servers)
