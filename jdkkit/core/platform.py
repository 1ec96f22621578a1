"""
Host platform detection for jdkkit.

The install pipeline only needs a coarse view of the host: which of the three
platform families it runs on (it decides archive type, bundle layout and unpack
tool name) and where scratch and cache directories live. Both are resolved once
at startup into an immutable HostConfig that is passed to the pipeline, so tests
can build a HostConfig for any platform without touching the real environment.

Usage:
    from jdkkit.core.platform import detect_host

    host = detect_host()
    print(f"Platform: {host.platform}")
    print(f"Scratch directory: {host.temp_directory}")
"""

import functools
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

WINDOWS = "windows"
MAC = "mac"
LINUX = "linux"


@dataclass(frozen=True)
class HostConfig:
    """
    Process-wide host configuration.

    Attributes:
        platform: Platform family ('windows', 'mac', 'linux')
        temp_directory: Root for scratch downloads and extraction
        cache_root: Root of the persistent tool cache
    """

    platform: str
    temp_directory: Path
    cache_root: Path

    @property
    def is_windows(self) -> bool:
        return self.platform == WINDOWS

    def archive_extension(self) -> str:
        """
        Get the archive extension published for this platform.

        Returns:
            '.zip' on Windows, '.tar.gz' everywhere else
        """
        return ".zip" if self.is_windows else ".tar.gz"


def get_os_string(sys_platform: str) -> str:
    """
    Map a ``sys.platform`` value to a platform family.

    Args:
        sys_platform: Value such as 'win32', 'darwin', 'linux'

    Returns:
        'windows', 'mac' or 'linux' (the catch-all)

    Example:
        >>> get_os_string("darwin")
        'mac'
        >>> get_os_string("freebsd13")
        'linux'
    """
    if sys_platform == "win32":
        return WINDOWS
    elif sys_platform == "darwin":
        return MAC
    else:
        return LINUX


def _base_location(platform: str, environ: Mapping[str, str]) -> Path:
    if platform == WINDOWS:
        return Path(environ.get("USERPROFILE") or "C:\\")
    elif platform == MAC:
        return Path("/Users")
    return Path("/home")


def get_temp_directory(platform: str, environ: Mapping[str, str]) -> Path:
    """
    Get the scratch root directory.

    ``RUNNER_TEMP`` wins when set; otherwise a per-platform default under
    ``<base>/actions/temp`` is used.

    Args:
        platform: Platform family
        environ: Process environment

    Returns:
        Scratch root directory path
    """
    runner_temp = environ.get("RUNNER_TEMP", "")
    if runner_temp:
        return Path(runner_temp)
    return _base_location(platform, environ) / "actions" / "temp"


def get_cache_root(platform: str, environ: Mapping[str, str]) -> Path:
    """
    Get the tool cache root directory.

    ``RUNNER_TOOL_CACHE`` wins when set; otherwise a per-platform default
    under ``<base>/actions/cache`` is used.

    Args:
        platform: Platform family
        environ: Process environment

    Returns:
        Tool cache root directory path
    """
    tool_cache = environ.get("RUNNER_TOOL_CACHE", "")
    if tool_cache:
        return Path(tool_cache)
    return _base_location(platform, environ) / "actions" / "cache"


def build_host_config(
    sys_platform: str,
    environ: Mapping[str, str],
    cache_root: Optional[Path] = None,
) -> HostConfig:
    """
    Build a HostConfig from explicit inputs.

    Args:
        sys_platform: ``sys.platform`` style identifier
        environ: Environment mapping to read overrides from
        cache_root: Explicit cache root, overriding the environment

    Returns:
        Resolved HostConfig
    """
    platform = get_os_string(sys_platform)
    return HostConfig(
        platform=platform,
        temp_directory=get_temp_directory(platform, environ),
        cache_root=Path(cache_root) if cache_root else get_cache_root(platform, environ),
    )


@functools.lru_cache(maxsize=1)
def detect_host() -> HostConfig:
    """
    Detect the host configuration of the running process.

    This function is cached - it only runs detection once per process.

    Returns:
        HostConfig for the current process
    """
    return build_host_config(sys.platform, os.environ)


def clear_host_cache():
    """Clear the cached host detection (used by tests)."""
    detect_host.cache_clear()
