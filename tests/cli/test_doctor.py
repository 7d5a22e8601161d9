"""Tests for the doctor command."""

from unittest.mock import patch

import httpx
import pytest
import respx
from httpx import Response

from tabletalk.cli.doctor import _async_doctor, doctor_command

STATEMENT_URL = "http://localhost:8080/v1/statement"


@pytest.fixture(autouse=True)
def no_env_overrides(monkeypatch):
    for var in ("OPENAI_API_KEY", "TRINO_HOST", "TRINO_PORT", "TRINO_SCHEME"):
        monkeypatch.delenv(var, raising=False)


@pytest.mark.asyncio
@respx.mock
async def test_doctor_all_good(keyed_config_path):
    respx.post(STATEMENT_URL).mock(
        return_value=Response(200, json={"id": "q1", "columns": [{"name": "test"}], "data": [[1]]})
    )

    with patch("tabletalk.cli.doctor.console") as mock_console:
        ok = await _async_doctor(keyed_config_path)

    assert ok is True
    output = " ".join(str(c) for c in mock_console.print.call_args_list)
    assert "All checks passed" in output


@pytest.mark.asyncio
@respx.mock
async def test_doctor_reports_missing_key_and_trino(tmp_config_path):
    respx.post(STATEMENT_URL).mock(side_effect=httpx.ConnectError("refused"))

    with patch("tabletalk.cli.doctor.console") as mock_console:
        ok = await _async_doctor(tmp_config_path)

    assert ok is False
    output = " ".join(str(c) for c in mock_console.print.call_args_list)
    assert "No API key" in output
    assert "Cannot query Trino" in output
    assert "No config file" in output


def test_doctor_command_runs_checks(tmp_config_path):
    with (
        patch("tabletalk.cli.doctor._async_doctor", return_value=True) as mock_check,
        patch("tabletalk.cli.doctor.console"),
    ):
        assert doctor_command(str(tmp_config_path)) is True

    mock_check.assert_awaited_once_with(tmp_config_path)
