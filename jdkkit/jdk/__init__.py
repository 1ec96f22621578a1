"""
JDK installation for jdkkit.

This package resolves install requests, caches installed JDKs and publishes
them to the environment.
"""

from .request import (
    InstallRequest,
    get_feature_version,
    get_release_type,
    get_download_url,
    get_cache_version_spec,
)
from .cache import ToolCache
from .environment import EnvironmentPublisher
from .installer import (
    JdkInstaller,
    DownloadSettings,
    InstallResult,
    TOOL_NAME,
)

__all__ = [
    "InstallRequest",
    "get_feature_version",
    "get_release_type",
    "get_download_url",
    "get_cache_version_spec",
    "ToolCache",
    "EnvironmentPublisher",
    "JdkInstaller",
    "DownloadSettings",
    "InstallResult",
    "TOOL_NAME",
]
