"""Tests for the command line interface."""

from unittest.mock import patch

from typer.testing import CliRunner

from relaygate.cli import app

runner = CliRunner()


class TestCli:
    """Tests for CLI commands."""

    def test_config_check(self):
        result = runner.invoke(app, ["config-check"])
        assert result.exit_code == 0
        assert "Allowed Origins" in result.stdout
        assert "Max Redirects" in result.stdout

    @patch("uvicorn.run")
    def test_serve(self, mock_run):
        result = runner.invoke(app, ["serve", "--host", "127.0.0.1", "--port", "9000"])
        assert result.exit_code == 0
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["host"] == "127.0.0.1"
        assert mock_run.call_args.kwargs["port"] == 9000
