"""
Tests for the setup-gauge CLI.
"""

from unittest.mock import Mock, patch

import pytest

from setup_gauge.cli.parser import CLI
from setup_gauge.core.exceptions import InvalidVersionError, PluginInstallError
from setup_gauge.core.runner import ActionsRunner
from setup_gauge.toolchain.plugins import PluginFailure, PluginReport


@pytest.fixture
def cli(runner):
    """CLI bound to an isolated runner environment."""
    return CLI(runner=runner)


@pytest.fixture
def mock_setup():
    """Patch the install flow."""
    with patch("setup_gauge.cli.parser.setup_gauge") as mock:
        mock.return_value = (Mock(), PluginReport(installed=["java"]))
        yield mock


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self, cli):
        """Test CLI can be created."""
        assert cli.parser is not None

    def test_version_flag(self, cli, capsys):
        """Test --version flag."""
        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        assert "setup-gauge" in capsys.readouterr().out

    def test_defaults(self, cli):
        """Test default argument values."""
        args = cli.parse_args([])

        assert args.gauge_version is None
        assert args.gauge_plugins is None
        assert args.config is None
        assert args.verbose is False
        assert args.quiet is False


class TestBuildRequest:
    """Test request construction from flags and inputs."""

    def test_flags(self, cli):
        """Test flags are used when given."""
        args = cli.parse_args(["--gauge-version", "1.2.3", "--gauge-plugins", "a, b"])

        request = cli.build_request(args)

        assert request.version_spec == "1.2.3"
        assert request.plugin_names == ("a", "b")

    def test_action_inputs(self, runner_env):
        """Test INPUT_* variables are used when flags are absent."""
        runner_env["INPUT_GAUGE-VERSION"] = "master"
        runner_env["INPUT_GAUGE-PLUGINS"] = "java,html-report"
        cli = CLI(runner=ActionsRunner(environ=runner_env))

        request = cli.build_request(cli.parse_args([]))

        assert request.version_spec == "master"
        assert request.plugin_names == ("java", "html-report")

    def test_flags_win_over_inputs(self, runner_env):
        """Test an explicit empty flag overrides the input."""
        runner_env["INPUT_GAUGE-VERSION"] = "1.0.0"
        cli = CLI(runner=ActionsRunner(environ=runner_env))

        request = cli.build_request(cli.parse_args(["--gauge-version", ""]))

        assert request.version_spec == ""


class TestRun:
    """Test CLI run outcomes."""

    def test_success(self, cli, mock_setup, tmp_path, monkeypatch):
        """Test a successful install returns 0."""
        monkeypatch.chdir(tmp_path)

        assert cli.run(["--gauge-version", "1.2.3"]) == 0

        request = mock_setup.call_args.args[0]
        assert request.version_spec == "1.2.3"

    def test_fatal_error_locally(self, cli, mock_setup, tmp_path, monkeypatch, capsys):
        """Test fatal errors return 1 with a readable message."""
        monkeypatch.chdir(tmp_path)
        mock_setup.side_effect = InvalidVersionError(
            "bogus", "https://github.com/getgauge/gauge/releases"
        )

        assert cli.run(["--gauge-version", "bogus"]) == 1

        err = capsys.readouterr().err
        assert "ERROR: No valid download found for version bogus" in err

    def test_fatal_error_in_actions(
        self, runner_env, mock_setup, tmp_path, monkeypatch, capsys
    ):
        """Test fatal errors produce a single ::error:: line under Actions."""
        monkeypatch.chdir(tmp_path)
        runner_env["GITHUB_ACTIONS"] = "true"
        cli = CLI(runner=ActionsRunner(environ=runner_env))
        mock_setup.side_effect = PluginInstallError([PluginFailure("java", 1)])

        assert cli.run(["-q"]) == 1

        lines = [
            line
            for line in capsys.readouterr().out.splitlines()
            if line.startswith("::error::")
        ]
        assert lines == ["::error::Failed to install 1 plugin(s): java (exit code 1)"]

    def test_unwritable_github_path_in_actions(
        self, runner_env, mock_setup, tmp_path, monkeypatch, capsys
    ):
        """Test a runner file write failure is one ::error:: line, not a traceback."""
        monkeypatch.chdir(tmp_path)
        runner_env["GITHUB_ACTIONS"] = "true"
        runner_env["GITHUB_PATH"] = str(tmp_path)
        cli = CLI(runner=ActionsRunner(environ=runner_env))
        mock_setup.side_effect = lambda request, settings, runner: runner.add_path(
            "/opt/gauge"
        )

        assert cli.run(["-q"]) == 1

        out = capsys.readouterr().out
        errors = [line for line in out.splitlines() if line.startswith("::error::")]
        assert len(errors) == 1
        assert "GITHUB_PATH" in errors[0]
        assert "Traceback" not in out

    def test_config_error(self, cli, tmp_path, monkeypatch):
        """Test a missing config file fails the run."""
        monkeypatch.chdir(tmp_path)

        assert cli.run(["--config", str(tmp_path / "missing.yaml")]) == 1

    def test_keyboard_interrupt(self, cli, mock_setup, tmp_path, monkeypatch):
        """Test Ctrl-C returns 130."""
        monkeypatch.chdir(tmp_path)
        mock_setup.side_effect = KeyboardInterrupt

        assert cli.run([]) == 130
