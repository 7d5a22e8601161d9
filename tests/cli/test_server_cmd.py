"""Tests for the start command."""

from unittest.mock import patch

from tabletalk.cli.server_cmd import start_command


def test_start_runs_uvicorn(keyed_config_path):
    """Test start builds the app and hands it to uvicorn."""
    with (
        patch("uvicorn.run") as mock_run,
        patch("tabletalk.cli.server_cmd.console"),
        patch("tabletalk.logging_setup.configure_logging") as mock_logging,
    ):
        start_command(config_path=str(keyed_config_path))

    mock_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8000
    assert kwargs["log_level"] == "info"
    mock_logging.assert_called_once_with("INFO")


def test_start_with_invalid_config(tmp_config_path):
    tmp_config_path.write_text("server:\n  port: 0\n")

    with (
        patch("uvicorn.run") as mock_run,
        patch("tabletalk.cli.server_cmd.console") as mock_console,
    ):
        start_command(config_path=str(tmp_config_path))

    mock_run.assert_not_called()
    output = " ".join(str(c) for c in mock_console.print.call_args_list)
    assert "Failed to load config" in output
