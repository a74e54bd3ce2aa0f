"""
Version Check
=============

Best-effort lookup of a newer rtx release.

The latest version is fetched over HTTP at most once a day and cached in the
rtx cache directory. Any failure (network, timeout, unreadable cache, garbage
response) means "nothing to report".
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional

import requests

from rtx import __version__

logger = logging.getLogger(__name__)


LATEST_VERSION_URL = "https://rtx.pub/VERSION"

CACHE_FILENAME = "latest-version"

# Re-check at most once per day
CACHE_TTL_SECONDS = 24 * 60 * 60

DEFAULT_TIMEOUT = 3.0


def _parse_version(output: str) -> Optional[tuple[int, ...]]:
    """Parse text that is exactly a version like ``v1.2.3`` into a comparable tuple."""
    match = re.fullmatch(r"v?(\d+(?:\.\d+)*)", output.strip())
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def is_newer(latest: str, current: str) -> bool:
    """True if ``latest`` is a strictly newer version than ``current``."""
    latest_parts = _parse_version(latest)
    current_parts = _parse_version(current)
    if latest_parts is None or current_parts is None:
        return False
    return latest_parts > current_parts


def _read_cache(cache_file: Path, ttl: float) -> Optional[str]:
    try:
        if time.time() - cache_file.stat().st_mtime > ttl:
            return None
        cached = cache_file.read_text().strip()
    except OSError:
        return None
    return cached or None


def _write_cache(cache_file: Path, version: str) -> None:
    try:
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        cache_file.write_text(version + "\n")
    except OSError as e:
        logger.debug(f"Could not write version cache {cache_file}: {e}")


def fetch_latest_version(
    url: str = LATEST_VERSION_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[str]:
    """Fetch the latest released version string, or None on any failure."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.debug(f"Version check failed: {e}")
        return None

    version = response.text.strip()
    if _parse_version(version) is None:
        logger.debug(f"Version check returned unexpected content: {version[:50]!r}")
        return None
    return version.lstrip("v")


def get_latest_version(
    cache_dir: Optional[Path] = None,
    timeout: float = DEFAULT_TIMEOUT,
    ttl: float = CACHE_TTL_SECONDS,
) -> Optional[str]:
    """Latest released version, served from the cache when it is fresh."""
    cache_file = cache_dir / CACHE_FILENAME if cache_dir else None

    if cache_file is not None:
        cached = _read_cache(cache_file, ttl)
        if cached and _parse_version(cached) is not None:
            return cached

    latest = fetch_latest_version(timeout=timeout)
    if latest and cache_file is not None:
        _write_cache(cache_file, latest)
    return latest


def check_for_new_version(
    cache_dir: Optional[Path] = None,
    timeout: float = DEFAULT_TIMEOUT,
    hide_update_warning: bool = False,
    current: str = __version__,
) -> Optional[str]:
    """
    Return the latest version if it is newer than ``current``.

    Args:
        cache_dir: Directory for the daily cache (no caching if None)
        timeout: HTTP timeout in seconds
        hide_update_warning: Skip the check entirely
        current: Version to compare against

    Returns:
        The newer version string, or None
    """
    if hide_update_warning:
        return None

    latest = get_latest_version(cache_dir=cache_dir, timeout=timeout)
    if latest and is_newer(latest, current):
        return latest
    return None
