"""Platform detection and release asset naming."""
import platform
from typing import Dict, NamedTuple, Optional, Tuple

from mcp_grafana_launcher.errors import LauncherError
from mcp_grafana_launcher.types import Architecture, DownloadedFileType, Os


class PlatformMapping(NamedTuple):
    """Platform-specific values."""
    os_label: str
    archive_format: str
    file_type: DownloadedFileType
    executable_suffix: str


class AssetFragments(NamedTuple):
    """Pieces of a release asset name for one (os, arch) pair."""
    os_label: str
    arch_label: str
    extension: str


PLATFORM_MAPPINGS: Dict[Os, PlatformMapping] = {
    Os.MAC: PlatformMapping(
        os_label="Darwin",
        archive_format="tar.gz",
        file_type=DownloadedFileType.GZIP_TAR,
        executable_suffix="",
    ),
    Os.LINUX: PlatformMapping(
        os_label="Linux",
        archive_format="tar.gz",
        file_type=DownloadedFileType.GZIP_TAR,
        executable_suffix="",
    ),
    Os.WINDOWS: PlatformMapping(
        os_label="Windows",
        archive_format="zip",
        file_type=DownloadedFileType.ZIP,
        executable_suffix=".exe",
    ),
}

ARCH_LABELS: Dict[Architecture, str] = {
    Architecture.AARCH64: "arm64",
    Architecture.X86: "i386",
    Architecture.X86_64: "x86_64",
}

# Every supported (os, arch) pair
ASSET_FRAGMENTS: Dict[Tuple[Os, Architecture], AssetFragments] = {
    (os_, arch): AssetFragments(
        os_label=mapping.os_label,
        arch_label=ARCH_LABELS[arch],
        extension=mapping.archive_format,
    )
    for os_, mapping in PLATFORM_MAPPINGS.items()
    for arch in Architecture
}

SYSTEM_NAMES = {
    "Darwin": Os.MAC,
    "Linux": Os.LINUX,
    "Windows": Os.WINDOWS,
}

MACHINE_NAMES = {
    "arm64": Architecture.AARCH64,
    "aarch64": Architecture.AARCH64,
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "i386": Architecture.X86,
    "i686": Architecture.X86,
    "x86": Architecture.X86,
}


def current_platform(
    system: Optional[str] = None, machine: Optional[str] = None
) -> Tuple[Os, Architecture]:
    """Get the current (os, arch) pair."""
    system = system or platform.system()
    machine = (machine or platform.machine()).lower()

    if system not in SYSTEM_NAMES:
        raise LauncherError(
            f"Unsupported operating system: {system}", details={"system": system}
        )
    if machine not in MACHINE_NAMES:
        raise LauncherError(
            f"Unsupported architecture: {machine}", details={"machine": machine}
        )

    return SYSTEM_NAMES[system], MACHINE_NAMES[machine]


def asset_name(binary_name: str, os_: Os, arch: Architecture) -> str:
    """Name of the release asset built for ``os_``/``arch``."""
    fragments = ASSET_FRAGMENTS[(os_, arch)]
    return f"{binary_name}_{fragments.os_label}_{fragments.arch_label}.{fragments.extension}"


def executable_name(binary_name: str, os_: Os) -> str:
    return f"{binary_name}{PLATFORM_MAPPINGS[os_].executable_suffix}"


def archive_file_type(os_: Os) -> DownloadedFileType:
    return PLATFORM_MAPPINGS[os_].file_type
