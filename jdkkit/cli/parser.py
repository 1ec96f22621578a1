"""
jdkkit CLI argument parser.

This module implements the command-line interface for jdkkit using argparse.
Every input may come from a CLI option, an ``INPUT_*`` CI variable or the
``inputs`` section of a YAML config file, in that order of precedence.
"""

import argparse
import logging
import os
import sys
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

from jdkkit import __version__
from jdkkit.cli.utils import (
    DEFAULT_CONFIG_FILE,
    ActionsLogFormatter,
    config_bool,
    config_int,
    get_config_section,
    get_input,
    is_github_actions,
    load_yaml_config,
)
from jdkkit.core.exceptions import ConfigurationError
from jdkkit.core.download import DownloadProgress, format_progress
from jdkkit.core.platform import build_host_config, HostConfig
from jdkkit.jdk.environment import EnvironmentPublisher
from jdkkit.jdk.installer import DownloadSettings, InstallResult, JdkInstaller
from jdkkit.jdk.request import DEFAULT_API_BASE_URL, InstallRequest

logger = logging.getLogger(__name__)

# (input name, argparse dest, default); None marks a required input
INPUTS = [
    ("release_type", "release_type", "ga"),
    ("java-version", "java_version", None),
    ("openjdk_impl", "openjdk_impl", "hotspot"),
    ("architecture", "architecture", "x64"),
    ("heap_size", "heap_size", "normal"),
    ("release", "release", "latest"),
]


def get_matcher_path() -> Path:
    """Get the path of the bundled Java problem matcher."""
    return Path(str(resources.files("jdkkit") / "matchers" / "java.json"))


def log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloading: {format_progress(progress)}")


class CLI:
    """jdkkit command-line interface."""

    def __init__(self, environ=None, stdout=None):
        """
        Initialize CLI with argument parser.

        Args:
            environ: Environment mapping (default: os.environ)
            stdout: Stream for workflow commands (default: sys.stdout)
        """
        self.environ = os.environ if environ is None else environ
        self.stdout = stdout or sys.stdout
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="jdkkit",
            description="Install an AdoptOpenJDK build into the tool cache "
            "and export JAVA_HOME",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"jdkkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_FILE})",
        )

        request = parser.add_argument_group("JDK request")
        request.add_argument(
            "--java-version",
            metavar="VERSION",
            help='Feature release version, e.g. "8", "11", "openjdk11"',
        )
        request.add_argument(
            "--release-type",
            metavar="TYPE",
            help='"ga" (default) or "ea"; "releases"/"nightly" are aliases',
        )
        request.add_argument(
            "--openjdk-impl",
            metavar="IMPL",
            help='JVM implementation: "hotspot" (default) or "openj9"',
        )
        request.add_argument(
            "--architecture",
            metavar="ARCH",
            help='Architecture, e.g. "x64" (default), "x32", "aarch64", "ppc64le"',
        )
        request.add_argument(
            "--heap-size",
            metavar="SIZE",
            help='Heap size class: "normal" (default) or "large"',
        )
        request.add_argument(
            "--release",
            metavar="NAME",
            help='"latest" (default) or an exact release, e.g. "jdk-11.0.4+11.4"',
        )

        download = parser.add_argument_group("download")
        download.add_argument("--api-base-url", metavar="URL", help="Binary API base URL")
        download.add_argument(
            "--retries", type=int, metavar="N", help="Retries after the first attempt"
        )
        download.add_argument(
            "--retry-interval",
            type=int,
            metavar="MS",
            help="Delay before the first retry in milliseconds",
        )
        download.add_argument(
            "--no-exponential-backoff",
            action="store_true",
            help="Keep the retry delay fixed instead of doubling it",
        )
        download.add_argument(
            "--timeout", type=int, metavar="SECONDS", help="Per-request timeout"
        )
        parser.add_argument(
            "--cache-root",
            type=Path,
            metavar="PATH",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            config = self._load_config(parsed_args)
            request = self.build_request(parsed_args, config)
            settings = self.build_settings(parsed_args, config)
            host = self.build_host(parsed_args, config)

            result = self._install(request, settings, host)

            logger.info(f"Java {request.version} installed at {result.java_home}")
            self.stdout.write(f"##[add-matcher]{get_matcher_path()}\n")
            return 0
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(str(e))
            if parsed_args.verbose:
                logger.debug("Traceback:", exc_info=True)
            return 1

    def _install(
        self, request: InstallRequest, settings: DownloadSettings, host: HostConfig
    ) -> InstallResult:
        publisher = EnvironmentPublisher(environ=self.environ, stream=self.stdout)
        installer = JdkInstaller(host=host, settings=settings, publisher=publisher)
        return installer.install(request, progress_callback=log_progress)

    def _load_config(self, args) -> Dict[str, Any]:
        """
        Load the configuration file if one was given or exists by default.

        An explicit --config must exist; the default file is optional.
        """
        if args.config:
            return load_yaml_config(Path(args.config), required=True)
        return load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE, required=False)

    def build_request(self, args, config: Dict[str, Any]) -> InstallRequest:
        """
        Resolve every input and build the install request.

        Raises:
            ConfigurationError: If java-version is not supplied anywhere
        """
        config_inputs = get_config_section(config, "inputs")
        values = {}

        for name, dest, default in INPUTS:
            value = getattr(args, dest, None)
            if not value:
                value = get_input(name, environ=self.environ)
            if not value:
                value = str(config_inputs.get(name, "") or "").strip()
            if not value:
                if default is None:
                    raise ConfigurationError(f"Input required and not supplied: {name}")
                value = default
            values[dest] = value.strip()

        return InstallRequest(
            release_type=values["release_type"],
            version=values["java_version"],
            implementation=values["openjdk_impl"],
            architecture=values["architecture"],
            heap_size=values["heap_size"],
            release=values["release"],
        )

    def build_settings(self, args, config: Dict[str, Any]) -> DownloadSettings:
        """Build download settings from CLI options over the config file."""
        section = get_config_section(config, "download")
        defaults = DownloadSettings()

        settings = DownloadSettings(
            api_base_url=str(section.get("api_base_url", DEFAULT_API_BASE_URL)),
            retries=config_int(section, "retries", defaults.retries),
            retry_interval_ms=config_int(
                section, "retry_interval_ms", defaults.retry_interval_ms
            ),
            exponential_backoff=config_bool(
                section, "exponential_backoff", defaults.exponential_backoff
            ),
            timeout=config_int(section, "timeout", defaults.timeout),
        )

        if args.api_base_url:
            settings.api_base_url = args.api_base_url
        if args.retries is not None:
            settings.retries = args.retries
        if args.retry_interval is not None:
            settings.retry_interval_ms = args.retry_interval
        if args.no_exponential_backoff:
            settings.exponential_backoff = False
        if args.timeout is not None:
            settings.timeout = args.timeout

        if settings.retries < 0 or settings.retry_interval_ms < 0:
            raise ConfigurationError("Retries and retry interval must be >= 0")

        return settings

    def build_host(self, args, config: Dict[str, Any]) -> HostConfig:
        """Resolve the host configuration once for this invocation."""
        cache_root = args.cache_root
        if cache_root is None:
            configured = get_config_section(config, "cache").get("root")
            cache_root = Path(configured) if configured else None
        return build_host_config(sys.platform, self.environ, cache_root=cache_root)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        if is_github_actions(self.environ):
            handler = logging.StreamHandler(self.stdout)
            handler.setFormatter(ActionsLogFormatter("%(message)s"))
            logging.basicConfig(level=level, handlers=[handler], force=True)
        else:
            logging.basicConfig(
                level=level,
                format=format_str,
                force=True,  # Reconfigure if already configured
            )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
