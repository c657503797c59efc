"""
Unit tests for the runner tool cache.
"""

import pytest

from setup_gauge.core.exceptions import ToolCacheError
from setup_gauge.core.tool_cache import ToolCache, get_default_cache_root


@pytest.fixture
def source_dir(tmp_path):
    """Directory holding a fake gauge installation."""
    source = tmp_path / "extracted"
    source.mkdir()
    (source / "gauge").write_text("binary")
    return source


class TestDefaultRoot:
    """Tests for cache root selection."""

    def test_runner_tool_cache(self, monkeypatch, tmp_path):
        """Test RUNNER_TOOL_CACHE is preferred."""
        monkeypatch.setenv("RUNNER_TOOL_CACHE", str(tmp_path))
        assert get_default_cache_root() == tmp_path

    def test_home_fallback(self, monkeypatch, tmp_path):
        """Test the home directory fallback."""
        monkeypatch.delenv("RUNNER_TOOL_CACHE", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        assert get_default_cache_root() == tmp_path / ".setup-gauge" / "toolcache"


class TestToolCache:
    """Tests for ToolCache find and cache_dir."""

    def test_find_empty_cache(self, tool_cache):
        """Test lookups in an empty cache miss."""
        assert tool_cache.find("gauge", "1.2.3") is None

    def test_cache_dir_layout(self, tool_cache, source_dir):
        """Test entries use the <tool>/<version>/<arch> layout with a marker."""
        cached = tool_cache.cache_dir(source_dir, "gauge", "1.2.3")

        assert cached == tool_cache.root / "gauge" / "1.2.3" / "x64"
        assert (cached / "gauge").read_text() == "binary"
        assert (tool_cache.root / "gauge" / "1.2.3" / "x64.complete").exists()

    def test_find_after_cache(self, tool_cache, source_dir):
        """Test a cached entry is found."""
        cached = tool_cache.cache_dir(source_dir, "gauge", "1.2.3")

        assert tool_cache.find("gauge", "1.2.3") == cached
        assert tool_cache.find("gauge", "1.2.4") is None

    def test_entry_without_marker_is_ignored(self, tool_cache):
        """Test a partially written entry does not count as a hit."""
        (tool_cache.root / "gauge" / "1.2.3" / "x64").mkdir(parents=True)

        assert tool_cache.find("gauge", "1.2.3") is None

    def test_cache_dir_replaces_previous_entry(self, tool_cache, source_dir, tmp_path):
        """Test re-caching a version replaces the old files."""
        tool_cache.cache_dir(source_dir, "gauge", "master")

        newer = tmp_path / "newer"
        newer.mkdir()
        (newer / "gauge").write_text("rebuilt")
        cached = tool_cache.cache_dir(newer, "gauge", "master")

        assert (cached / "gauge").read_text() == "rebuilt"

    def test_cache_dir_missing_source(self, tool_cache, tmp_path):
        """Test caching a missing directory fails."""
        with pytest.raises(ToolCacheError, match="Source directory not found"):
            tool_cache.cache_dir(tmp_path / "missing", "gauge", "1.2.3")

        assert tool_cache.find("gauge", "1.2.3") is None

    def test_arch_keys_are_separate(self, tmp_path, source_dir):
        """Test entries for other architectures are not found."""
        ToolCache(tmp_path / "tc", arch="arm64").cache_dir(
            source_dir, "gauge", "1.2.3"
        )

        assert ToolCache(tmp_path / "tc", arch="x64").find("gauge", "1.2.3") is None

    @pytest.mark.parametrize("tool,version", [("", "1.2.3"), ("gauge", "")])
    def test_required_parameters(self, tool_cache, tool, version):
        """Test tool and version are required."""
        with pytest.raises(ValueError, match="required parameter"):
            tool_cache.find(tool, version)
