"""
Gauge plugin installation.

Runs `gauge install <plugin>` once per requested plugin, in order. A failing
plugin is recorded and the remaining plugins are still attempted.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from setup_gauge.core.process import COMMAND_NOT_FOUND, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginFailure:
    """A plugin whose install command did not succeed."""

    name: str
    exit_code: int
    message: str = ""


@dataclass
class PluginReport:
    """Outcome of installing a list of plugins."""

    installed: List[str] = field(default_factory=list)
    failed: List[PluginFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class PluginInstaller:
    """
    Installs plugins through the Gauge CLI.

    Example:
        >>> report = PluginInstaller().install_all(["java", "html-report"])
        >>> report.ok
        True
    """

    def __init__(
        self, tool_name: str = "gauge", run: Callable[..., int] = run_command
    ):
        """
        Initialize plugin installer.

        Args:
            tool_name: Name of the Gauge executable
            run: Command runner (args, cwd=..., env=...) -> exit code
        """
        self.tool_name = tool_name
        self._run = run

    def resolve_executable(
        self, tool_path: Optional[Path], env: Optional[Mapping[str, str]]
    ) -> str:
        """
        Locate the executable to invoke.

        The installation directory is checked first, then the PATH of env.
        Falls back to the bare tool name.
        """
        if tool_path is not None:
            found = shutil.which(self.tool_name, path=str(tool_path))
            if found:
                return found
        search = env.get("PATH") if env is not None else os.environ.get("PATH")
        return shutil.which(self.tool_name, path=search) or self.tool_name

    def install_all(
        self,
        plugin_names: Sequence[str],
        tool_path: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> PluginReport:
        """
        Install every plugin in order.

        Args:
            plugin_names: Plugins to install
            tool_path: Directory of the installed Gauge
            env: Environment for the install commands

        Returns:
            PluginReport listing installed and failed plugins
        """
        report = PluginReport()
        if not plugin_names:
            return report

        executable = self.resolve_executable(tool_path, env)
        for name in plugin_names:
            logger.info(f"Installing plugin {name}")
            exit_code = self._run([executable, "install", name], env=env)
            if exit_code == 0:
                report.installed.append(name)
            else:
                if exit_code == COMMAND_NOT_FOUND:
                    message = f"could not run {executable}"
                else:
                    message = (
                        f"'{self.tool_name} install {name}' "
                        f"exited with code {exit_code}"
                    )
                logger.warning(f"Installing plugin {name} failed: {message}")
                report.failed.append(
                    PluginFailure(name=name, exit_code=exit_code, message=message)
                )

        return report


__all__ = ["PluginFailure", "PluginReport", "PluginInstaller"]
