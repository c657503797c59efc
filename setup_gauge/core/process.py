"""
External command execution.

Commands inherit stdout/stderr so their output lands directly in the CI log.
"""

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

# Exit code reported when the executable cannot be started at all
COMMAND_NOT_FOUND = 127


def run_command(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run a command and wait for it to finish.

    Args:
        args: Program and arguments
        cwd: Working directory (default: current directory)
        env: Full environment for the child (default: inherited)

    Returns:
        Exit code of the command, or COMMAND_NOT_FOUND if it could not start

    Example:
        >>> run_command(["git", "clone", "https://github.com/getgauge/gauge", "/tmp/gauge"])
        0
    """
    command = [str(a) for a in args]
    logger.debug(f"[command]{' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            env=dict(env) if env is not None else None,
        )
    except (FileNotFoundError, PermissionError) as e:
        logger.error(f"Unable to run {command[0]}: {e}")
        return COMMAND_NOT_FOUND

    if result.returncode != 0:
        logger.debug(f"{command[0]} exited with code {result.returncode}")

    return result.returncode


__all__ = ["COMMAND_NOT_FOUND", "run_command"]
