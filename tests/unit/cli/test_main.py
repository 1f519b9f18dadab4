"""Unit tests for CLI main entry point."""

import pytest
from click.testing import CliRunner

from careledger.cli import cli


class TestCLIMain:
    """Test suite for CLI main entry point."""

    @pytest.fixture
    def runner(self):
        """Create a Click CLI test runner."""
        return CliRunner()

    def test_cli_help_text(self, runner):
        """Test that CLI help text is informative."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "CareLedger CLI" in result.output
        assert "Commands:" in result.output

    def test_cli_version_flag(self, runner):
        """Test that --version flag works."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    @pytest.mark.parametrize(
        "command",
        ["gst", "kilometres", "validate-expenses", "invoice-status", "register"],
    )
    def test_commands_registered(self, runner, command):
        """Test that every command is registered."""
        result = runner.invoke(cli, ["--help"])

        assert command in result.output

    def test_log_level_configures_logging(self, runner, mock_env, monkeypatch):
        """Test --log-level is passed to the logging configuration."""
        configured = []
        monkeypatch.setattr(
            "careledger.cli.configure_logging", lambda config: configured.append(config)
        )

        result = runner.invoke(cli, ["--log-level", "debug", "gst", "100"])

        assert result.exit_code == 0
        assert configured[0].log_level == "DEBUG"

    def test_unknown_command_shows_error(self, runner):
        """Test that unknown commands show helpful error."""
        result = runner.invoke(cli, ["unknown-command"])

        assert result.exit_code != 0
        assert "No such command" in result.output
