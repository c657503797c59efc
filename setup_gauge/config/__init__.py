"""
Configuration module for setup-gauge.

Provides settings loading (YAML file and environment) and the install request
built from action inputs.
"""

from setup_gauge.config.settings import (
    DEFAULT_CONFIG_FILE,
    Settings,
    load_settings,
)
from setup_gauge.config.inputs import InstallRequest, parse_plugin_list

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "Settings",
    "load_settings",
    "InstallRequest",
    "parse_plugin_list",
]
