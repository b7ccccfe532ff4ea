import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from mcp_grafana_launcher.types import Architecture, Os, Release, ReleaseAsset

LINUX_X86_64 = (Os.LINUX, Architecture.X86_64)


def write_tar_gz(path: Path, members: dict[str, bytes]) -> Path:
    """Write a gzip tar archive with the given file members."""
    with tarfile.open(path, "w:gz") as tf:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o644
            tf.addfile(info, io.BytesIO(content))
    return path


def write_zip(path: Path, members: dict[str, bytes]) -> Path:
    """Write a zip archive with the given file members."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


@pytest.fixture(autouse=True)
def clean_grafana_env(monkeypatch):
    """Keep the developer's environment out of settings resolution"""
    for name in ("GRAFANA_URL", "GRAFANA_API_KEY", "GITHUB_TOKEN", "MCP_GRAFANA_LAUNCHER_HOME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def release() -> Release:
    """Release with assets for every platform the server publishes"""
    names = [
        "mcp-grafana_Darwin_arm64.tar.gz",
        "mcp-grafana_Darwin_x86_64.tar.gz",
        "mcp-grafana_Linux_arm64.tar.gz",
        "mcp-grafana_Linux_i386.tar.gz",
        "mcp-grafana_Linux_x86_64.tar.gz",
        "mcp-grafana_Windows_arm64.zip",
        "mcp-grafana_Windows_i386.zip",
        "mcp-grafana_Windows_x86_64.zip",
    ]
    return Release(
        version="v0.2.0",
        assets=tuple(
            ReleaseAsset(
                name=name,
                download_url=f"https://github.com/grafana/mcp-grafana/releases/download/v0.2.0/{name}",
            )
            for name in names
        ),
    )
