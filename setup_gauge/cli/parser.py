"""
setup-gauge command-line interface.

Reads the gauge-version and gauge-plugins inputs (from flags or from the
runner's INPUT_* variables), installs Gauge and its plugins, and reports a
failure to the CI host as a single error message.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from setup_gauge.config.inputs import InstallRequest
from setup_gauge.config.settings import load_settings
from setup_gauge.core.exceptions import SetupGaugeError
from setup_gauge.core.runner import ActionsLogHandler, ActionsRunner
from setup_gauge.toolchain.installer import setup_gauge

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("setup-gauge")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """setup-gauge command-line interface."""

    def __init__(self, runner: Optional[ActionsRunner] = None):
        """
        Initialize CLI with argument parser.

        Args:
            runner: CI host access (default: runner over os.environ)
        """
        self.runner = runner or ActionsRunner()
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="setup-gauge",
            description="Install Gauge and Gauge plugins on a CI runner",
            epilog=(
                "Without flags, the gauge-version and gauge-plugins action "
                "inputs (INPUT_GAUGE-VERSION, INPUT_GAUGE-PLUGINS) are used."
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"setup-gauge {__version__}"
        )
        parser.add_argument(
            "--gauge-version",
            metavar="VERSION",
            help="Gauge version to install: empty for latest, 'master' to "
            "build from source, or a semantic version such as 1.5.6",
        )
        parser.add_argument(
            "--gauge-plugins",
            metavar="LIST",
            help="Comma-separated list of Gauge plugins to install",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./setup-gauge.yaml)",
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

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def build_request(self, args) -> InstallRequest:
        """Build the install request from flags, falling back to action inputs."""
        version = args.gauge_version
        if version is None:
            version = self.runner.get_input("gauge-version")
        plugins = args.gauge_plugins
        if plugins is None:
            plugins = self.runner.get_input("gauge-plugins")
        return InstallRequest.from_inputs(version, plugins)

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
            settings = load_settings(parsed_args.config, environ=self.runner.environ)
            request = self.build_request(parsed_args)
            logger.debug(f"Request: {request}")

            result, report = setup_gauge(request, settings, self.runner)
            if report.installed:
                logger.info(f"Installed plugins: {', '.join(report.installed)}")
            return 0

        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except SetupGaugeError as e:
            self.runner.set_failed(str(e))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags and the runner.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        debug = args.verbose or self.runner.environ.get("RUNNER_DEBUG") == "1"
        if debug:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        if self.runner.is_actions:
            # Workflow commands carry the level themselves
            handlers = [ActionsLogHandler()]
            format_str = "%(message)s"
            if not args.quiet:
                level = logging.DEBUG
        else:
            handlers = None

        logging.basicConfig(
            level=level,
            format=format_str,
            handlers=handlers,
            force=True,  # Reconfigure if already configured
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
