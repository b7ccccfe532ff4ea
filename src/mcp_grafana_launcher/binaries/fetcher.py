"""Archive download and extraction."""
import os
import stat
import tarfile
import tempfile
import zipfile
from pathlib import Path

import aiohttp

from mcp_grafana_launcher.errors import BinaryPermissionError, DownloadError
from mcp_grafana_launcher.logging import get_logger
from mcp_grafana_launcher.types import DownloadedFileType

logger = get_logger(__name__)

ARCHIVE_SUFFIXES = {
    DownloadedFileType.GZIP_TAR: ".tar.gz",
    DownloadedFileType.ZIP: ".zip",
}


def _extract_tar_gz(archive_path: Path, dest_dir: Path) -> None:
    with tarfile.open(archive_path, "r:gz") as archive:
        archive.extractall(dest_dir, filter="data")


def _extract_zip(archive_path: Path, dest_dir: Path) -> None:
    with zipfile.ZipFile(archive_path) as archive:
        archive.extractall(dest_dir)


ARCHIVE_EXTRACTORS = {
    DownloadedFileType.GZIP_TAR: _extract_tar_gz,
    DownloadedFileType.ZIP: _extract_zip,
}


async def download_file(url: str, dest: Path) -> None:
    """Download a file with streaming."""
    try:
        async with aiohttp.ClientSession() as session:
            logger.info({"event": "download_started", "url": url, "destination": str(dest)})

            async with session.get(url) as response:
                if response.status != 200:
                    logger.error(
                        {"event": "download_request_failed", "url": url,
                         "status": response.status, "reason": response.reason}
                    )
                    response.raise_for_status()

                downloaded = 0
                with open(dest, "wb") as f:
                    async for chunk in response.content.iter_chunked(8192):
                        f.write(chunk)
                        downloaded += len(chunk)

            logger.info({"event": "download_complete", "url": url, "size": downloaded})

    except (aiohttp.ClientError, OSError) as e:
        if dest.exists():
            dest.unlink()
        raise DownloadError(f"failed to download file: {e}", url) from e


def extract_archive(archive_path: Path, dest_dir: Path, file_type: DownloadedFileType) -> Path:
    """Extract every member of the archive into ``dest_dir``."""
    logger.debug(
        {"event": "extract_archive", "archive": str(archive_path), "dest": str(dest_dir),
         "format": file_type.value}
    )

    ARCHIVE_EXTRACTORS[file_type](archive_path, dest_dir)

    logger.info(
        {"event": "archive_extracted", "archive": str(archive_path),
         "extracted_to": str(dest_dir)}
    )
    return dest_dir


async def download_archive(url: str, dest_dir: Path, file_type: DownloadedFileType) -> Path:
    """Download an archive and unpack it into ``dest_dir``."""
    with tempfile.TemporaryDirectory() as tmpdir:
        archive_path = Path(tmpdir) / f"download{ARCHIVE_SUFFIXES[file_type]}"

        await download_file(url, archive_path)

        if not archive_path.exists() or archive_path.stat().st_size == 0:
            raise DownloadError("download failed - archive is missing or empty", url)

        try:
            return extract_archive(archive_path, dest_dir, file_type)
        except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
            logger.error(
                {"event": "extract_failed", "url": url, "error": str(e)}
            )
            raise DownloadError(f"failed to extract archive: {e}", url) from e


def make_executable(path: Path) -> None:
    """Add execute permission bits to ``path``."""
    try:
        mode = path.stat().st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise BinaryPermissionError(str(path), str(e)) from e
