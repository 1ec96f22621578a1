"""
Test utilities for jdkkit testing.
"""

from .builders import JDK_ARCHIVE_FILES, build_tar, build_tar_gz, build_zip

__all__ = ["JDK_ARCHIVE_FILES", "build_tar", "build_tar_gz", "build_zip"]
