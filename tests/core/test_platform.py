"""
Tests for host platform detection.
"""

import sys
from pathlib import Path

import pytest

from jdkkit.core.platform import (
    LINUX,
    MAC,
    WINDOWS,
    HostConfig,
    build_host_config,
    clear_host_cache,
    detect_host,
    get_cache_root,
    get_os_string,
    get_temp_directory,
)


class TestGetOsString:
    """Test platform family mapping."""

    @pytest.mark.parametrize(
        "sys_platform,expected",
        [
            ("win32", WINDOWS),
            ("darwin", MAC),
            ("linux", LINUX),
            ("freebsd13", LINUX),
            ("aix", LINUX),
        ],
    )
    def test_mapping(self, sys_platform, expected):
        assert get_os_string(sys_platform) == expected


class TestHostConfig:
    """Test HostConfig."""

    def test_archive_extension(self):
        windows = HostConfig(WINDOWS, Path("t"), Path("c"))
        mac = HostConfig(MAC, Path("t"), Path("c"))
        linux = HostConfig(LINUX, Path("t"), Path("c"))

        assert windows.archive_extension() == ".zip"
        assert mac.archive_extension() == ".tar.gz"
        assert linux.archive_extension() == ".tar.gz"

    def test_flags(self):
        assert HostConfig(WINDOWS, Path("t"), Path("c")).is_windows
        assert not HostConfig(MAC, Path("t"), Path("c")).is_windows

    def test_is_frozen(self):
        host = HostConfig(LINUX, Path("t"), Path("c"))
        with pytest.raises(AttributeError):
            host.platform = MAC


class TestDirectories:
    """Test scratch and cache directory resolution."""

    def test_runner_temp_wins(self):
        assert get_temp_directory(LINUX, {"RUNNER_TEMP": "/runner/tmp"}) == Path(
            "/runner/tmp"
        )

    def test_runner_tool_cache_wins(self):
        assert get_cache_root(MAC, {"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"}) == Path(
            "/opt/hostedtoolcache"
        )

    def test_empty_variable_falls_back_to_default(self):
        assert get_temp_directory(LINUX, {"RUNNER_TEMP": ""}) == Path(
            "/home/actions/temp"
        )

    @pytest.mark.parametrize(
        "platform,expected",
        [
            (LINUX, Path("/home") / "actions" / "cache"),
            (MAC, Path("/Users") / "actions" / "cache"),
        ],
    )
    def test_default_cache_root(self, platform, expected):
        assert get_cache_root(platform, {}) == expected

    def test_windows_defaults_use_userprofile(self):
        environ = {"USERPROFILE": "D:\\Users\\runner"}
        assert get_temp_directory(WINDOWS, environ) == Path("D:\\Users\\runner") / (
            "actions"
        ) / "temp"

    def test_windows_defaults_without_userprofile(self):
        assert get_cache_root(WINDOWS, {}) == Path("C:\\") / "actions" / "cache"


class TestBuildHostConfig:
    """Test build_host_config and detect_host."""

    def test_build_from_environment(self):
        host = build_host_config(
            "darwin", {"RUNNER_TEMP": "/tmp/r", "RUNNER_TOOL_CACHE": "/tmp/c"}
        )
        assert host == HostConfig(MAC, Path("/tmp/r"), Path("/tmp/c"))

    def test_explicit_cache_root_overrides_environment(self):
        host = build_host_config(
            "linux", {"RUNNER_TOOL_CACHE": "/tmp/c"}, cache_root=Path("/srv/cache")
        )
        assert host.cache_root == Path("/srv/cache")

    def test_detect_host_is_cached(self):
        assert detect_host() is detect_host()

    def test_detect_host_matches_interpreter(self):
        assert detect_host().platform == get_os_string(sys.platform)

    def test_clear_cache(self, monkeypatch):
        first = detect_host()
        clear_host_cache()
        monkeypatch.setenv("RUNNER_TEMP", "/somewhere/else")
        second = detect_host()
        assert second is not first
        assert second.temp_directory == Path("/somewhere/else")
