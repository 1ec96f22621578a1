"""
Pytest configuration and shared fixtures for jdkkit tests.
"""

from pathlib import Path

import pytest

from jdkkit.core.platform import HostConfig, clear_host_cache
from tests.utils.builders import JDK_ARCHIVE_FILES, build_tar_gz


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_host_cache():
    """Make sure no test sees a host detected by another one."""
    clear_host_cache()
    yield
    clear_host_cache()


def make_host(tmp_path: Path, platform: str = "linux") -> HostConfig:
    """Build a HostConfig rooted in a temporary directory."""
    temp_directory = tmp_path / "runner_temp"
    cache_root = tmp_path / "toolcache"
    temp_directory.mkdir(parents=True, exist_ok=True)
    return HostConfig(
        platform=platform, temp_directory=temp_directory, cache_root=cache_root
    )


@pytest.fixture
def linux_host(tmp_path) -> HostConfig:
    """HostConfig for a Linux runner."""
    return make_host(tmp_path, "linux")


@pytest.fixture
def jdk_tree(tmp_path) -> Path:
    """A minimal unpacked JDK home."""
    home = tmp_path / "jdk-11.0.8+10"
    (home / "bin").mkdir(parents=True)
    (home / "bin" / "java").write_text("#!/bin/sh\necho java\n")
    (home / "lib").mkdir()
    (home / "lib" / "modules").write_bytes(b"\x00\x01\x02")
    (home / "release").write_text('JAVA_VERSION="11.0.8"\n')
    return home


@pytest.fixture
def jdk_tar_gz() -> bytes:
    """A .tar.gz JDK archive with a single top-level directory."""
    return build_tar_gz(JDK_ARCHIVE_FILES)


@pytest.fixture
def host_factory(tmp_path):
    """Factory building a HostConfig for any platform family."""

    def factory(platform: str = "linux") -> HostConfig:
        return make_host(tmp_path, platform)

    return factory
