"""
Post-extraction normalization of a JDK tree.

Two steps run after an archive is unpacked into a scratch directory:

1. Locate the JDK home. Archives carry exactly one top-level directory; on
   macOS the home sits inside the bundle at ``<entry>/Contents/Home``.
2. Expand legacy pack200 archives. Old JDK 8 builds ship some jars as
   ``.pack`` files that must be turned back into ``.jar`` files with the
   ``unpack200`` tool from the JDK's own ``bin`` directory.

Discovery of pack files is a pure traversal (find_pack_files); running the
unpack tool is a separate stage with an injectable process runner.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterator, List, Sequence

from jdkkit.core.exceptions import NormalizationError
from jdkkit.core.platform import WINDOWS, MAC

logger = logging.getLogger(__name__)

PACK_SUFFIX = ".pack"

MAC_BUNDLE_HOME = ("Contents", "Home")

ProcessRunner = Callable[[Sequence[str]], subprocess.CompletedProcess]


def get_jdk_directory(extract_root: Path, platform: str) -> Path:
    """
    Find the JDK home inside an extraction directory.

    Args:
        extract_root: Directory the archive was extracted into
        platform: Platform family the archive was built for

    Returns:
        Path to the JDK home

    Raises:
        NormalizationError: If the extraction root does not hold exactly one
            top-level entry, or the macOS bundle home is missing
    """
    entries = list(extract_root.iterdir())
    if len(entries) != 1:
        names = sorted(e.name for e in entries)
        raise NormalizationError(
            f"Expected exactly one top-level entry in {extract_root}, "
            f"found {len(entries)}: {names}"
        )

    top_level = entries[0]
    if platform == MAC:
        jdk_home = top_level.joinpath(*MAC_BUNDLE_HOME)
        if not jdk_home.is_dir():
            raise NormalizationError(f"macOS bundle home not found: {jdk_home}")
        return jdk_home

    return top_level


def find_pack_files(root: Path) -> Iterator[Path]:
    """
    Yield every pack200 file under root, depth first, in sorted order.

    Directories are always descended into; other files are skipped.
    """
    if not root.is_dir():
        if root.is_file() and root.suffix.lower() == PACK_SUFFIX:
            yield root
        return

    for entry in sorted(root.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            yield from find_pack_files(entry)
        elif entry.is_file() and entry.suffix.lower() == PACK_SUFFIX:
            yield entry


def unpack_command(pack_file: Path, java_bin: Path, platform: str) -> List[str]:
    """
    Build the unpack200 command line for one pack file.

    The jar is written next to the pack file with the same stem.
    """
    jar_file = pack_file.with_suffix(".jar")
    if platform == WINDOWS:
        tool = java_bin / "unpack200.exe"
        return [str(tool), "-r", "-v", "-l", "", str(pack_file), str(jar_file)]
    return [str(java_bin / "unpack200"), str(pack_file), str(jar_file)]


def run_process(command: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(command, capture_output=True, text=True, check=True)


def unpack_jars(
    jdk_home: Path,
    platform: str,
    runner: ProcessRunner = run_process,
) -> List[Path]:
    """
    Expand every pack200 file under a JDK home into a jar.

    Files are processed one at a time; the pipeline does not continue until
    all of them are done.

    Args:
        jdk_home: JDK home directory (must contain bin/unpack200 if packs exist)
        platform: Platform family, selects the tool name and arguments
        runner: Callable executing a command; raises on failure

    Returns:
        The pack files that were expanded

    Raises:
        NormalizationError: If the unpack tool is missing or fails
    """
    java_bin = jdk_home / "bin"
    unpacked = []

    for pack_file in find_pack_files(jdk_home):
        command = unpack_command(pack_file, java_bin, platform)
        logger.debug(f"Unpacking {pack_file}")
        try:
            runner(command)
        except FileNotFoundError as e:
            raise NormalizationError(f"Unpack tool not found: {command[0]}") from e
        except subprocess.CalledProcessError as e:
            raise NormalizationError(
                f"Failed to unpack {pack_file}: exit code {e.returncode}: {e.stderr}"
            ) from e
        unpacked.append(pack_file)

    if unpacked:
        logger.info(f"Unpacked {len(unpacked)} pack file(s) in {jdk_home}")

    return unpacked


def normalize_installation(
    extract_root: Path,
    platform: str,
    runner: ProcessRunner = run_process,
) -> Path:
    """
    Locate the JDK home in an extraction root and expand its pack files.

    Returns:
        Path to the normalized JDK home
    """
    jdk_home = get_jdk_directory(extract_root, platform)
    unpack_jars(jdk_home, platform, runner)
    return jdk_home
