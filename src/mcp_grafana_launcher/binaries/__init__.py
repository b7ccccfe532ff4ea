"""Binary management functionality."""
from mcp_grafana_launcher.binaries.platforms import (
    asset_name,
    current_platform,
)
from mcp_grafana_launcher.binaries.provisioner import (
    BinaryCache,
    BinaryProvisioner,
    cleanup_stale_versions,
)

__all__ = [
    "asset_name",
    "current_platform",
    "BinaryCache",
    "BinaryProvisioner",
    "cleanup_stale_versions",
]
