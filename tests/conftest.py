"""
Pytest configuration and shared fixtures for setup-gauge tests.
"""

import zipfile
from pathlib import Path

import pytest

from setup_gauge.config.settings import Settings
from setup_gauge.core.platform import PlatformInfo, clear_platform_cache
from setup_gauge.core.runner import ActionsRunner
from setup_gauge.core.tool_cache import ToolCache


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Make every test start with a fresh platform detection."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def settings() -> Settings:
    """Default Gauge settings."""
    return Settings()


@pytest.fixture
def linux_x64() -> PlatformInfo:
    """Linux on x86_64."""
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def tool_cache(tmp_path: Path) -> ToolCache:
    """Empty tool cache under the test directory."""
    return ToolCache(tmp_path / "toolcache", arch="x64")


@pytest.fixture
def runner_env(tmp_path: Path) -> dict:
    """Environment of a simulated GitHub Actions runner."""
    runner_temp = tmp_path / "runner_temp"
    runner_temp.mkdir(exist_ok=True)
    github_path = tmp_path / "github_path"
    github_path.touch()
    github_output = tmp_path / "github_output"
    github_output.touch()
    return {
        "PATH": "/usr/bin:/bin",
        "RUNNER_TEMP": str(runner_temp),
        "RUNNER_TOOL_CACHE": str(tmp_path / "toolcache"),
        "GITHUB_PATH": str(github_path),
        "GITHUB_OUTPUT": str(github_output),
    }


@pytest.fixture
def runner(runner_env: dict) -> ActionsRunner:
    """Runner over an isolated environment dict."""
    return ActionsRunner(environ=runner_env)


@pytest.fixture
def gauge_zip(tmp_path: Path) -> Path:
    """Release-style zip containing an executable gauge binary."""
    archive = tmp_path / "gauge-1.2.3-linux.x86_64.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        info = zipfile.ZipInfo("gauge")
        info.external_attr = 0o755 << 16
        zf.writestr(info, "#!/bin/sh\necho gauge\n")
    return archive
