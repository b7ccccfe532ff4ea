"""Launcher for the Grafana MCP server binary."""
from mcp_grafana_launcher.binaries.provisioner import BinaryCache, BinaryProvisioner
from mcp_grafana_launcher.extension import GrafanaContextServer
from mcp_grafana_launcher.settings import resolve_settings
from mcp_grafana_launcher.types import Command, LaunchSettings, Project

__all__ = [
    "BinaryCache",
    "BinaryProvisioner",
    "Command",
    "GrafanaContextServer",
    "LaunchSettings",
    "Project",
    "resolve_settings",
]
