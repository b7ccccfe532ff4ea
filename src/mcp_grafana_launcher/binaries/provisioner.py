"""Binary provisioning: latest release download and stale version cleanup."""
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from mcp_grafana_launcher.binaries import fetcher, releases
from mcp_grafana_launcher.binaries.platforms import (
    archive_file_type,
    asset_name,
    current_platform,
    executable_name,
)
from mcp_grafana_launcher.config import BINARY_NAME, REPO_NAME
from mcp_grafana_launcher.errors import AssetNotFoundError, DownloadError, FilesystemError
from mcp_grafana_launcher.logging import get_logger, log_with_data
from mcp_grafana_launcher.types import (
    Architecture,
    CleanupOutcome,
    Os,
    ProvisionedBinary,
)

logger = get_logger(__name__)


@dataclass
class BinaryCache:
    """Resolved executable paths keyed by target identifier."""
    paths: Dict[str, Path] = field(default_factory=dict)

    def get(self, target_id: str) -> Optional[Path]:
        """Cached path for ``target_id`` if it still points to a regular file."""
        path = self.paths.get(target_id)
        if path is not None and path.is_file():
            return path
        return None

    def set(self, target_id: str, path: Path) -> None:
        self.paths[target_id] = path

    def clear(self) -> None:
        self.paths.clear()


def plan_cleanup(work_dir: Path, keep: str) -> List[Path]:
    """List every entry of ``work_dir`` other than ``keep``."""
    try:
        return sorted(entry for entry in work_dir.iterdir() if entry.name != keep)
    except OSError as e:
        raise FilesystemError(
            f"failed to list working directory {work_dir}: {e}", str(work_dir)
        ) from e


def remove_entries(entries: List[Path]) -> List[CleanupOutcome]:
    """Remove each entry, recording failures instead of raising them."""
    outcomes = []
    for entry in entries:
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            outcomes.append(CleanupOutcome(path=entry, removed=True))
        except OSError as e:
            log_with_data(logger, logging.WARNING, "Failed to remove stale entry", {
                "path": str(entry),
                "error": str(e)
            })
            outcomes.append(CleanupOutcome(path=entry, removed=False, error=str(e)))
    return outcomes


def cleanup_stale_versions(work_dir: Path, keep: str) -> List[CleanupOutcome]:
    """Remove old version directories, keeping ``keep``."""
    outcomes = remove_entries(plan_cleanup(work_dir, keep))
    removed = [str(o.path) for o in outcomes if o.removed]
    if removed:
        log_with_data(logger, logging.INFO, "Removed stale versions", {
            "work_dir": str(work_dir),
            "removed": removed
        })
    return outcomes


class BinaryProvisioner:
    """Keeps a usable copy of the latest release binary in ``work_dir``."""

    def __init__(
        self,
        work_dir: Path,
        cache: Optional[BinaryCache] = None,
        repo: str = REPO_NAME,
        binary_name: str = BINARY_NAME,
        platform: Optional[Tuple[Os, Architecture]] = None,
    ):
        self.work_dir = Path(work_dir)
        self.cache = cache if cache is not None else BinaryCache()
        self.repo = repo
        self.binary_name = binary_name
        self._platform = platform
        self.last_cleanup: List[CleanupOutcome] = []

    @property
    def platform(self) -> Tuple[Os, Architecture]:
        if self._platform is None:
            self._platform = current_platform()
        return self._platform

    def version_dir_name(self, version: str) -> str:
        return f"{self.binary_name}-{version}"

    async def ensure_binary(self, target_id: str) -> Path:
        """Return an executable path, downloading the latest release if needed."""
        cached = self.cache.get(target_id)
        if cached is not None:
            logger.debug({"event": "binary_cache_hit", "target": target_id, "path": str(cached)})
            return cached

        provisioned = await self.provision(target_id)
        return provisioned.executable_path

    async def provision(self, target_id: str) -> ProvisionedBinary:
        """Install the latest release into its version directory."""
        release = await releases.fetch_latest_release(self.repo)

        os_, arch = self.platform
        expected = asset_name(self.binary_name, os_, arch)
        asset = release.find_asset(expected)
        if asset is None:
            raise AssetNotFoundError(expected, release.version)

        dir_name = self.version_dir_name(release.version)
        version_dir = self.work_dir / dir_name
        try:
            version_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"failed to create directory '{version_dir}': {e}", str(version_dir)
            ) from e

        binary_path = version_dir / executable_name(self.binary_name, os_)

        if not binary_path.is_file():
            log_with_data(logger, logging.INFO, "Installing binary", {
                "target": target_id,
                "version": release.version,
                "asset": asset.name
            })

            await fetcher.download_archive(asset.download_url, version_dir, archive_file_type(os_))
            if not binary_path.is_file():
                raise DownloadError(
                    f"archive {asset.name} did not contain {binary_path.name}",
                    asset.download_url,
                )

            fetcher.make_executable(binary_path)

            self.last_cleanup = cleanup_stale_versions(self.work_dir, dir_name)

        self.cache.set(target_id, binary_path)
        logger.info(
            {"event": "binary_ready", "target": target_id, "version": release.version,
             "path": str(binary_path)}
        )
        return ProvisionedBinary(version_dir=version_dir, executable_path=binary_path)
