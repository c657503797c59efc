"""
CI host integration.

Implements the small part of the GitHub Actions runner protocol that
setup-gauge needs:

- RUNNER_TEMP        : scratch space for downloads and builds
- GITHUB_PATH        : file of directories prepended to PATH for later steps
- GITHUB_OUTPUT      : file of step outputs (name=value lines)
- workflow commands  : ::debug::, ::warning::, ::error:: log lines

Outside a runner every file-based operation degrades to updating the current
process only, which keeps local runs and tests free of side effects.
"""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Sequence, Tuple

from setup_gauge.core.exceptions import RunnerFileError

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def prepend_path(search_path: Sequence[str], directory: str) -> Tuple[str, ...]:
    """
    Return a new search path with directory first.

    Later occurrences of the same directory are dropped.

    Example:
        >>> prepend_path(["/usr/bin", "/opt/gauge"], "/opt/gauge")
        ('/opt/gauge', '/usr/bin')
    """
    return (directory,) + tuple(p for p in search_path if p and p != directory)


def split_search_path(value: Optional[str]) -> Tuple[str, ...]:
    """Split a PATH-style string into its entries."""
    if not value:
        return ()
    return tuple(p for p in value.split(os.pathsep) if p)


class ActionsRunner:
    """
    Access to the runner environment.

    Example:
        >>> runner = ActionsRunner()
        >>> runner.add_path(Path("/opt/hostedtoolcache/gauge/1.5.6/x64"))
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Initialize runner access.

        Args:
            environ: Environment mapping to read and update (default: os.environ)
        """
        self.environ = os.environ if environ is None else environ

    @property
    def is_actions(self) -> bool:
        """True when running inside a GitHub Actions job."""
        return self.environ.get("GITHUB_ACTIONS", "").lower() == "true"

    @property
    def temp_root(self) -> Path:
        """Runner-provided temp directory, or the system temp directory."""
        runner_temp = self.environ.get("RUNNER_TEMP")
        if runner_temp:
            return Path(runner_temp)
        return Path(tempfile.gettempdir())

    @property
    def search_path(self) -> Tuple[str, ...]:
        """Current executable search path entries."""
        return split_search_path(self.environ.get("PATH"))

    def get_input(self, name: str) -> str:
        """
        Read an action input (INPUT_<NAME> environment variable).

        Returns:
            Trimmed input value, or '' when unset
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.environ.get(key, "").strip()

    def add_path(self, directory: Path) -> None:
        """
        Prepend directory to PATH for this process and for later job steps.
        """
        directory = str(directory)
        if self.environ.get("GITHUB_PATH"):
            self._append_command_file("GITHUB_PATH", directory)
        else:
            logger.debug("GITHUB_PATH not set, updating current process only")

        self.apply_search_path(prepend_path(self.search_path, directory))

    def apply_search_path(self, search_path: Sequence[str]) -> None:
        """Replace PATH of the current process."""
        self.environ["PATH"] = os.pathsep.join(search_path)

    def child_env(self, search_path: Sequence[str]) -> Dict[str, str]:
        """Build an environment for child processes with the given PATH."""
        env = dict(self.environ)
        env["PATH"] = os.pathsep.join(search_path)
        return env

    def set_output(self, name: str, value: str) -> None:
        """Record a step output."""
        if self.environ.get("GITHUB_OUTPUT"):
            self._append_command_file("GITHUB_OUTPUT", f"{name}={value}")
        else:
            logger.debug(f"Output {name}={value}")

    def _append_command_file(self, variable: str, line: str) -> None:
        path = self.environ[variable]
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"{line}{os.linesep}")
        except OSError as e:
            raise RunnerFileError(variable, path, str(e)) from e

    def set_failed(self, message: str) -> None:
        """Report a failure to the CI host."""
        if self.is_actions:
            print(f"::error::{_escape_data(message)}", file=sys.stdout)
        else:
            print(f"ERROR: {message}", file=sys.stderr)


class ActionsLogHandler(logging.StreamHandler):
    """
    Logging handler that renders records as workflow commands.

    DEBUG records become ::debug::, WARNING ::warning::, ERROR and above
    ::error::. INFO records are printed as plain lines.
    """

    COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream=None):
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{_escape_data(message)}"


__all__ = [
    "ActionsRunner",
    "ActionsLogHandler",
    "prepend_path",
    "split_search_path",
]
