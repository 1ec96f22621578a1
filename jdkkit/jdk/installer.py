"""
JDK download, extraction and installation.

This module orchestrates the complete install of a requested JDK:
resolving the request, probing the tool cache, downloading with retries,
extracting, normalizing the tree, caching it and publishing it to the
environment.
"""

import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from jdkkit.core.download import DownloadProgress, download_file
from jdkkit.core.filesystem import extract_archive, safe_rmtree
from jdkkit.core.platform import HostConfig, detect_host
from jdkkit.core.retry import retry, DEFAULT_RETRIES, DEFAULT_INTERVAL_MS
from jdkkit.jdk.cache import ToolCache
from jdkkit.jdk.environment import EnvironmentPublisher
from jdkkit.jdk.normalizer import normalize_installation, ProcessRunner, run_process
from jdkkit.jdk.request import (
    DEFAULT_API_BASE_URL,
    InstallRequest,
    get_cache_version_spec,
    get_download_url,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "AdoptOpenJDK"


@dataclass
class DownloadSettings:
    """Network settings for JDK downloads."""

    api_base_url: str = DEFAULT_API_BASE_URL
    retries: int = DEFAULT_RETRIES
    retry_interval_ms: int = DEFAULT_INTERVAL_MS
    exponential_backoff: bool = True
    timeout: int = 30


@dataclass
class InstallResult:
    """Result of a JDK install."""

    java_home: Path
    """Path to the cached JDK home"""

    version_spec: str
    """Cache version spec the JDK is stored under"""

    url: str
    """Download URL for the request"""

    was_cached: bool
    """Whether the JDK was already cached (no download needed)"""


class JdkInstaller:
    """
    Installs JDKs into the tool cache and publishes them.

    Workflow:
    1. Build the cache version spec and probe the tool cache
    2. On a miss, download the archive with retries
    3. Extract into a fresh scratch directory
    4. Locate the JDK home and expand pack200 files
    5. Store the home in the tool cache
    6. Publish JAVA_HOME, JAVA_HOME_<version>_<arch> and PATH

    Example:
        >>> installer = JdkInstaller()
        >>> result = installer.install(InstallRequest("ga", "11"))
        >>> print(f"Installed at: {result.java_home}")
    """

    def __init__(
        self,
        host: Optional[HostConfig] = None,
        settings: Optional[DownloadSettings] = None,
        cache: Optional[ToolCache] = None,
        publisher: Optional[EnvironmentPublisher] = None,
        fetch: Callable[..., Path] = download_file,
        runner: ProcessRunner = run_process,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize installer.

        Args:
            host: Host configuration. If None, detects the current host.
            settings: Download settings. If None, uses defaults.
            cache: Tool cache. If None, uses one rooted at host.cache_root.
            publisher: Environment publisher. If None, publishes to os.environ.
            fetch: Single-attempt download function
                (url, destination, progress_callback=, timeout=)
            runner: Process runner used for unpack200
            sleep: Sleep function used between download attempts
        """
        self.host = host or detect_host()
        self.settings = settings or DownloadSettings()
        self.cache = cache or ToolCache(self.host.cache_root)
        self.publisher = publisher or EnvironmentPublisher()
        self.fetch = fetch
        self.runner = runner
        self.sleep = sleep

        logger.debug(
            f"Initialized installer for {self.host.platform} "
            f"with cache: {self.cache.root}"
        )

    def install(
        self,
        request: InstallRequest,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> InstallResult:
        """
        Install a JDK and publish it to the environment.

        Args:
            request: Normalized install request
            progress_callback: Optional callback for download progress updates

        Returns:
            InstallResult with the cached JDK home

        Raises:
            FatalFetchError: If the download fails after all retries
            ExtractionError: If the archive cannot be extracted
            NormalizationError: If the extracted tree is not a single JDK
            CacheError: If the tree cannot be stored in the cache
        """
        version_spec = get_cache_version_spec(request)
        url = get_download_url(request, self.host.platform, self.settings.api_base_url)

        java_home = self.cache.find(TOOL_NAME, version_spec, request.architecture)
        was_cached = java_home is not None

        if was_cached:
            logger.debug(f"Tool found in cache {java_home}")
        else:
            java_home = self._download_and_cache(
                request, version_spec, url, progress_callback
            )

        self.publisher.publish_java_home(
            java_home, request.version, request.architecture
        )

        return InstallResult(
            java_home=java_home,
            version_spec=version_spec,
            url=url,
            was_cached=was_cached,
        )

    def _scratch_dir(self) -> Path:
        return self.host.temp_directory / f"adoptopenjdk_{random.randrange(2000000000)}"

    def _download_and_cache(
        self,
        request: InstallRequest,
        version_spec: str,
        url: str,
        progress_callback: Optional[Callable[[DownloadProgress], None]],
    ) -> Path:
        """
        Perform the download, extraction, normalization and caching.

        Returns:
            Path to the cached JDK home
        """
        extension = self.host.archive_extension()
        scratch = self._scratch_dir()
        archive_path = scratch.with_name(scratch.name + extension)
        extract_dir = scratch

        logger.info(f"Downloading JDK from {url}")

        try:
            # Phase 1: Download
            download_start = time.time()
            retry(
                lambda: self.fetch(
                    url,
                    archive_path,
                    progress_callback=progress_callback,
                    timeout=self.settings.timeout,
                ),
                self.settings.retries,
                self.settings.retry_interval_ms,
                self.settings.exponential_backoff,
                sleep=self.sleep,
            )
            logger.debug(f"Download complete in {time.time() - download_start:.2f}s")

            # Phase 2: Extract
            extract_archive(archive_path, extension, extract_dir)

            # Phase 3: Normalize
            jdk_dir = normalize_installation(extract_dir, self.host.platform, self.runner)
            logger.debug(f"JDK extracted to {jdk_dir}")

            # Phase 4: Cache
            return self.cache.store(
                jdk_dir,
                TOOL_NAME,
                version_spec,
                request.architecture,
                source_url=url,
            )

        finally:
            self._cleanup(archive_path, extract_dir)

    def _cleanup(self, archive_path: Path, extract_dir: Path) -> None:
        """Remove the downloaded archive and the scratch directory."""
        if archive_path.exists():
            try:
                archive_path.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove archive {archive_path}: {e}")

        if extract_dir.exists():
            try:
                safe_rmtree(extract_dir, require_prefix=self.host.temp_directory)
            except Exception as e:
                logger.warning(f"Failed to remove scratch directory {extract_dir}: {e}")
