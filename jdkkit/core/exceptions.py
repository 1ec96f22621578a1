"""
Centralized exception hierarchy for jdkkit.

Every error raised by the install pipeline derives from JdkKitError so the
CLI can translate any of them into a single failure signal.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class JdkKitError(Exception):
    """Base exception for all jdkkit errors."""

    pass


class ConfigurationError(JdkKitError):
    """Raised when a required input is missing or the config file is invalid."""

    pass


# ============================================================================
# Fetch Exceptions
# ============================================================================


class FetchError(JdkKitError):
    """Base exception for download errors."""

    pass


class TransientFetchError(FetchError):
    """A single download attempt failed; the retry loop may try again."""

    pass


class FatalFetchError(FetchError):
    """The retry budget is exhausted."""

    pass


# ============================================================================
# Extraction Exceptions
# ============================================================================


class ExtractionError(JdkKitError):
    """Failed to extract an archive."""

    pass


class ArchiveNotFoundError(ExtractionError):
    """The archive to extract does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Failed to extract {path} - it doesn't exist")


class ArchiveIsDirectoryError(ExtractionError):
    """The archive path points at a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Failed to extract {path} - it is a directory")


class UnsupportedArchiveFormat(ExtractionError):
    """The declared compression type is not in the dispatch table."""

    def __init__(self, path, compression: str):
        self.path = path
        self.compression = compression
        super().__init__(
            f"Failed to extract {path} - unknown compression '{compression}'"
        )


class InsecureArchiveError(ExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Normalization and Cache Exceptions
# ============================================================================


class NormalizationError(JdkKitError):
    """The extracted tree does not have the expected layout, or unpacking failed."""

    pass


class CacheError(JdkKitError):
    """Base exception for tool cache errors."""

    pass


class RegistryLockTimeout(CacheError):
    """Raised when the cache index lock cannot be acquired within timeout."""

    pass
