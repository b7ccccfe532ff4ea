"""GitHub release lookup."""
import asyncio
import os
from typing import Any, Dict, Mapping, Optional

import aiohttp

from mcp_grafana_launcher.config import GITHUB_TOKEN_ENV
from mcp_grafana_launcher.errors import ReleaseLookupError
from mcp_grafana_launcher.logging import get_logger
from mcp_grafana_launcher.types import Release, ReleaseAsset

logger = get_logger(__name__)

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"


def github_headers(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Request headers for the GitHub API, authenticated when a token is set."""
    environ = os.environ if environ is None else environ
    headers = {"Accept": "application/vnd.github+json"}
    token = environ.get(GITHUB_TOKEN_ENV)
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def parse_release(data: Dict[str, Any]) -> Release:
    """Build a Release from a GitHub release payload."""
    return Release(
        version=data["tag_name"],
        assets=tuple(
            ReleaseAsset(name=asset["name"], download_url=asset["browser_download_url"])
            for asset in data.get("assets") or []
        ),
    )


def select_latest_release(releases: list[Dict[str, Any]]) -> Optional[Release]:
    """Pick the newest published, non-prerelease release that has assets.

    GitHub lists releases newest first. Entries that are not objects are skipped.
    """
    for data in releases:
        if not isinstance(data, dict):
            continue
        if data.get("draft") or data.get("prerelease"):
            continue
        if not data.get("assets"):
            continue
        return parse_release(data)
    return None


async def fetch_latest_release(repo: str) -> Release:
    """Fetch the latest stable release of ``repo`` (``owner/name``)."""
    url = f"{GITHUB_API_BASE}/{GITHUB_REPOS_PATH}/{repo}/{RELEASES_PATH}"

    logger.debug({"event": "fetch_latest_release", "repo": repo, "url": url})

    try:
        async with aiohttp.ClientSession(headers=github_headers()) as session:
            async with session.get(url) as response:
                response.raise_for_status()
                data = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error({"event": "release_lookup_failed", "repo": repo, "error": str(e)})
        raise ReleaseLookupError(repo, str(e)) from e

    if not isinstance(data, list):
        raise ReleaseLookupError(repo, "unexpected response from release API")

    try:
        release = select_latest_release(data)
    except (KeyError, TypeError) as e:
        raise ReleaseLookupError(repo, f"malformed release payload: {e}") from e

    if release is None:
        raise ReleaseLookupError(repo, "no published release with assets")

    logger.info(
        {"event": "latest_release", "repo": repo, "version": release.version,
         "assets": len(release.assets)}
    )
    return release
