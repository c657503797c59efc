"""Installer inputs.

An InstallRequest is built once from the two action inputs and never
changes afterwards.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


def parse_plugin_list(plugins: Optional[str]) -> Tuple[str, ...]:
    """
    Split a comma-separated plugin list.

    Surrounding whitespace is trimmed from every entry and empty entries
    are dropped.

    Example:
        >>> parse_plugin_list("java, html-report ,xml-report")
        ('java', 'html-report', 'xml-report')
        >>> parse_plugin_list("")
        ()
    """
    if not plugins:
        return ()
    return tuple(name.strip() for name in plugins.split(",") if name.strip())


@dataclass(frozen=True)
class InstallRequest:
    """What to install: a Gauge version and the plugins to add to it."""

    version_spec: str = ""
    plugin_names: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_inputs(
        cls, version: Optional[str], plugins: Optional[str]
    ) -> "InstallRequest":
        """Build a request from the raw gauge-version and gauge-plugins inputs."""
        return cls(
            version_spec=(version or "").strip(),
            plugin_names=parse_plugin_list(plugins),
        )
