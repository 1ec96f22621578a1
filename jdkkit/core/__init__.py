"""
Core functionality for jdkkit.

This package contains the foundational modules the JDK pipeline depends on.
"""

from .platform import (
    HostConfig,
    detect_host,
    build_host_config,
    get_os_string,
    clear_host_cache,
)

from .exceptions import (
    JdkKitError,
    ConfigurationError,
    FetchError,
    TransientFetchError,
    FatalFetchError,
    ExtractionError,
    ArchiveNotFoundError,
    ArchiveIsDirectoryError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    NormalizationError,
    CacheError,
    RegistryLockTimeout,
)

__all__ = [
    "HostConfig",
    "detect_host",
    "build_host_config",
    "get_os_string",
    "clear_host_cache",
    "JdkKitError",
    "ConfigurationError",
    "FetchError",
    "TransientFetchError",
    "FatalFetchError",
    "ExtractionError",
    "ArchiveNotFoundError",
    "ArchiveIsDirectoryError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "NormalizationError",
    "CacheError",
    "RegistryLockTimeout",
]
