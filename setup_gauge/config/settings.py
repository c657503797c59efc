"""YAML configuration for setup-gauge.

Settings are layered: built-in Gauge defaults, then an optional
setup-gauge.yaml file, then environment variables.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from setup_gauge.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "setup-gauge.yaml"

# Environment variable -> settings field
ENV_OVERRIDES = {
    "GITHUB_TOKEN": "github_token",
    "SETUP_GAUGE_REPO_URL": "repo_url",
    "SETUP_GAUGE_API_URL": "api_url",
}


@dataclass(frozen=True)
class Settings:
    """Installer configuration."""

    tool_name: str = "gauge"
    repo_url: str = "https://github.com/getgauge/gauge"
    api_url: str = "https://api.github.com/repos/getgauge/gauge/releases/latest"
    source_marker: str = "master"
    tool_cache: Optional[Path] = None  # default: $RUNNER_TOOL_CACHE
    temp_dir: Optional[Path] = None  # default: $RUNNER_TEMP
    http_timeout: Optional[float] = None  # None waits indefinitely
    github_token: Optional[str] = None

    @property
    def releases_url(self) -> str:
        return f"{self.repo_url.rstrip('/')}/releases"


def _parse_file(config_file: Path) -> dict:
    """Read and validate the YAML settings file."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping at the top level")

    known = {f.name for f in fields(Settings)} - {"github_token"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown setting(s) in {config_file}: {', '.join(unknown)}"
        )

    values = dict(data)
    for key in ("tool_cache", "temp_dir"):
        if values.get(key) is not None:
            values[key] = Path(values[key]).expanduser()
    if values.get("http_timeout") is not None:
        try:
            values["http_timeout"] = float(values["http_timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"http_timeout must be a number: {e}") from e
    for key in ("tool_name", "repo_url", "api_url", "source_marker"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"{key} must be a string")

    return values


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Load settings from defaults, a YAML file and the environment.

    Args:
        config_file: Explicit config file; must exist when given. If None,
            ./setup-gauge.yaml is used when present.
        environ: Environment mapping (default: os.environ)

    Returns:
        Resolved Settings

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_file}")
    else:
        default_file = Path.cwd() / DEFAULT_CONFIG_FILE
        if default_file.exists():
            config_file = default_file

    if config_file is not None:
        logger.debug(f"Loading configuration from {config_file}")
        settings = replace(settings, **_parse_file(config_file))

    overrides = {
        field_name: environ[var]
        for var, field_name in ENV_OVERRIDES.items()
        if environ.get(var)
    }
    if overrides:
        settings = replace(settings, **overrides)

    return settings
