"""Error handling for the Grafana MCP launcher."""
import logging
from typing import Any, Dict, Optional
from mcp.types import (
    ErrorData,
    INVALID_REQUEST,
    INVALID_PARAMS,
    INTERNAL_ERROR
)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log an error with context."""
    logger = logger or logging.getLogger(__name__)

    error_info = {
        "error_type": error.__class__.__name__,
        "error_message": str(error)
    }
    if context:
        error_info["context"] = context
    if isinstance(error, LauncherError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("Launcher error occurred", extra={"data": error_info})


class LauncherError(Exception):
    """Base error class for the launcher."""
    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(
            code=self.code,
            message=str(self),
            data=self.details
        )


class ConfigurationError(LauncherError):
    """Missing or malformed launch settings."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=INVALID_PARAMS, details=details)


class ReleaseLookupError(LauncherError):
    """Release metadata could not be fetched."""
    def __init__(self, repo: str, reason: str):
        super().__init__(
            f"failed to fetch latest release of {repo}: {reason}",
            code=INTERNAL_ERROR,
            details={"repo": repo, "reason": reason}
        )


class AssetNotFoundError(LauncherError):
    """No release asset matches the current platform."""
    def __init__(self, asset_name: str, version: str):
        super().__init__(
            f"no asset found matching {asset_name!r}",
            code=INVALID_REQUEST,
            details={"asset_name": asset_name, "version": version}
        )


class FilesystemError(LauncherError):
    """Directory creation or file access failure."""
    def __init__(self, message: str, path: str):
        super().__init__(message, code=INTERNAL_ERROR, details={"path": path})


class DownloadError(LauncherError):
    """Archive fetch or extraction failure."""
    def __init__(self, message: str, url: str):
        super().__init__(message, code=INTERNAL_ERROR, details={"url": url})


class BinaryPermissionError(LauncherError):
    """Binary could not be marked executable."""
    def __init__(self, path: str, reason: str):
        super().__init__(
            f"failed to make {path} executable: {reason}",
            code=INTERNAL_ERROR,
            details={"path": path}
        )
