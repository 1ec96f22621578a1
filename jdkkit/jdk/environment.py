"""
Publishing an installed JDK to the calling process and later CI steps.

Variables are set in the given environment mapping (normally os.environ) and,
when running under a GitHub Actions style runner, also written to the files
named by ``GITHUB_ENV`` / ``GITHUB_PATH`` so subsequent steps see them. Without
those files, the legacy ``::set-env`` / ``::add-path::`` workflow commands are
printed instead.

Command files are opened without newline translation; every record ends in
exactly one ``os.linesep``.
"""

import logging
import os
import sys
import uuid
from pathlib import Path
from typing import MutableMapping, Optional, TextIO

logger = logging.getLogger(__name__)


class EnvironmentPublisher:
    """
    Exports variables and search-path entries.

    All operations are plain assignments, so publishing the same values twice
    leaves the environment as publishing them once.
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.stream = stream or sys.stdout

    def _command_file(self, name: str) -> Optional[Path]:
        value = self.environ.get(name, "")
        return Path(value) if value else None

    def export_variable(self, name: str, value: str) -> None:
        """Set an environment variable for this process and later steps."""
        self.environ[name] = value

        env_file = self._command_file("GITHUB_ENV")
        if env_file is not None:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(env_file, "a", encoding="utf-8", newline="") as f:
                f.write(f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}")
                f.write(f"{delimiter}{os.linesep}")
        else:
            self.stream.write(f"::set-env name={name}::{value}\n")

        logger.debug(f"Exported {name}={value}")

    def add_path(self, path: str) -> None:
        """Put a directory first on the executable search path."""
        current = self.environ.get("PATH", "")
        parts = [p for p in current.split(os.pathsep) if p and p != path]
        self.environ["PATH"] = os.pathsep.join([path] + parts)

        path_file = self._command_file("GITHUB_PATH")
        if path_file is not None:
            with open(path_file, "a", encoding="utf-8", newline="") as f:
                f.write(f"{path}{os.linesep}")
        else:
            self.stream.write(f"::add-path::{path}\n")

        logger.debug(f"Added {path} to PATH")

    def publish_java_home(self, java_home: Path, version: str, arch: str) -> None:
        """
        Publish a JDK installation.

        Sets JAVA_HOME and JAVA_HOME_<version>_<arch> to the installation and
        prepends its bin directory to PATH.

        Args:
            java_home: JDK home directory
            version: Version string as originally requested
            arch: Architecture
        """
        home = str(java_home)
        self.export_variable("JAVA_HOME", home)
        self.export_variable(f"JAVA_HOME_{version}_{arch}", home)
        self.add_path(str(java_home / "bin"))
