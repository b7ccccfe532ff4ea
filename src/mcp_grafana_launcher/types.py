"""Core type definitions"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from mcp.client.stdio import StdioServerParameters


class Os(Enum):
    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"


class Architecture(Enum):
    AARCH64 = "aarch64"
    X86 = "x86"
    X86_64 = "x86_64"


class DownloadedFileType(Enum):
    GZIP_TAR = "gzip_tar"
    ZIP = "zip"


@dataclass(frozen=True)
class LaunchSettings:
    """Normalized launch configuration for the Grafana MCP server"""
    server_url: Optional[str]
    api_key: Optional[str] = None
    enabled_tools: Optional[Tuple[str, ...]] = None
    debug: bool = False


@dataclass(frozen=True)
class ReleaseAsset:
    """Downloadable artifact attached to a release"""
    name: str
    download_url: str


@dataclass(frozen=True)
class Release:
    """Published release and its assets"""
    version: str
    assets: Tuple[ReleaseAsset, ...] = ()

    def find_asset(self, name: str) -> Optional[ReleaseAsset]:
        return next((asset for asset in self.assets if asset.name == name), None)


@dataclass(frozen=True)
class ProvisionedBinary:
    """Binary installed inside a version-scoped directory"""
    version_dir: Path
    executable_path: Path


@dataclass(frozen=True)
class CleanupOutcome:
    """Result of removing one stale working-directory entry"""
    path: Path
    removed: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class Command:
    """Command descriptor handed back to the host"""
    command: str
    args: Tuple[str, ...] = ()
    env: Tuple[Tuple[str, str], ...] = ()

    def to_stdio_parameters(self) -> StdioServerParameters:
        return StdioServerParameters(
            command=self.command,
            args=list(self.args),
            env=dict(self.env),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "args": list(self.args),
            "env": [[key, value] for key, value in self.env],
        }


@dataclass(frozen=True)
class Project:
    """Host project/workspace context carrying context server settings"""
    root: Path
    context_servers: Mapping[str, Any] = field(default_factory=dict)

    def settings_for(self, server_key: str) -> Optional[Any]:
        entry = self.context_servers.get(server_key)
        if not isinstance(entry, Mapping):
            return None
        return entry.get("settings")
