"""Launch settings resolution."""

import os
from typing import Any, Mapping, Optional

from mcp_grafana_launcher.config import GRAFANA_API_KEY_ENV, GRAFANA_URL_ENV
from mcp_grafana_launcher.errors import ConfigurationError
from mcp_grafana_launcher.types import LaunchSettings


def _env_value(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    return value or None


def _optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ConfigurationError(
        f"`{key}` setting must be a string", details={"setting": key}
    )


def _enabled_tools(payload: Mapping[str, Any]) -> Optional[tuple[str, ...]]:
    value = payload.get("enabled_tools")
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(
            "`enabled_tools` setting must be a list of strings",
            details={"setting": "enabled_tools"},
        )
    return tuple(value)


def _debug(payload: Mapping[str, Any]) -> bool:
    value = payload.get("debug", False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(
            "`debug` setting must be a boolean", details={"setting": "debug"}
        )
    return value


def resolve_settings(
    payload: Optional[Any], environ: Optional[Mapping[str, str]] = None
) -> LaunchSettings:
    """Merge structured settings with environment overrides.

    ``GRAFANA_URL`` and ``GRAFANA_API_KEY`` take precedence over the
    ``grafana_url`` and ``grafana_api_key`` settings. ``enabled_tools`` and
    ``debug`` come from the settings only. An empty environment variable
    counts as unset.
    """
    environ = os.environ if environ is None else environ

    if payload is None:
        raise ConfigurationError("missing Grafana settings")
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            "Grafana settings must be an object",
            details={"type": type(payload).__name__},
        )

    configured_url = _optional_str(payload, "grafana_url")
    configured_key = _optional_str(payload, "grafana_api_key")
    enabled_tools = _enabled_tools(payload)
    debug = _debug(payload)

    server_url = _env_value(environ, GRAFANA_URL_ENV) or configured_url
    if not server_url:
        raise ConfigurationError(
            "missing Grafana URL; configure in `grafana_url` setting or GRAFANA_URL env var"
        )

    api_key = _env_value(environ, GRAFANA_API_KEY_ENV) or configured_key

    return LaunchSettings(
        server_url=server_url,
        api_key=api_key or None,
        enabled_tools=enabled_tools,
        debug=debug,
    )
