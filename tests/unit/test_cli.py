import json
import os
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sagetrack import cli
from sagetrack.schemas.inventory import ResourceRecord
from sagetrack.shared.core.constants import ResourceKind
from sagetrack.shared.core.exceptions import ConfigurationError, TransientError


def _fake_adapter(configured=True):
    adapter = MagicMock()
    adapter.get_region.return_value = "us-west-2"
    adapter.validate_configuration = AsyncMock(return_value=configured)
    adapter.list_endpoints = AsyncMock(
        return_value=[ResourceRecord(kind=ResourceKind.ENDPOINT, name="ep", status="InService", instance_count=1)]
    )
    adapter.list_notebooks = AsyncMock(return_value=[])
    adapter.list_studio_apps = AsyncMock(return_value=[])
    return adapter


def _patched_connect(adapter=None, error=None):
    calls = []

    @asynccontextmanager
    async def _connect(region=None, **kwargs):
        calls.append(region)
        if error is not None:
            raise error
        yield adapter

    return _connect, calls


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("sagetrack.cli.setup_logging"):
        yield


def test_main_prints_report_and_exits_zero(capsys):
    connect, calls = _patched_connect(_fake_adapter())

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect):
        code = cli.main(["--region", "us-west-2"])

    out = json.loads(capsys.readouterr().out)
    assert code == cli.EXIT_OK
    assert calls == ["us-west-2"]
    assert out["region"] == "us-west-2"
    assert out["total_count"] == 1
    assert out["endpoints"][0]["name"] == "ep"


def test_main_kind_filter(capsys):
    adapter = _fake_adapter()
    connect, _ = _patched_connect(adapter)

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect):
        code = cli.main(["--kind", "notebook"])

    assert code == cli.EXIT_OK
    adapter.list_notebooks.assert_awaited_once()
    adapter.list_endpoints.assert_not_called()


def test_main_unconfigured_exits_two(capsys):
    connect, _ = _patched_connect(_fake_adapter(configured=False))

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect):
        code = cli.main([])

    assert code == cli.EXIT_UNCONFIGURED
    assert json.loads(capsys.readouterr().out)["configured"] is False


def test_main_reports_listing_errors_on_stderr(capsys):
    adapter = _fake_adapter()
    adapter.list_studio_apps.side_effect = TransientError("Rate exceeded")
    connect, _ = _patched_connect(adapter)

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect):
        code = cli.main([])

    captured = capsys.readouterr()
    assert code == cli.EXIT_ERROR
    assert "Error listing studio_app: Rate exceeded" in captured.err
    assert json.loads(captured.out)["errors"] == {"studio_app": "Rate exceeded"}


def test_main_connect_failure_exits_one(capsys):
    connect, _ = _patched_connect(error=ConfigurationError("Unable to load AWS SDK configuration: no region"))

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect):
        code = cli.main([])

    captured = capsys.readouterr()
    assert code == cli.EXIT_ERROR
    assert captured.out == ""
    assert "Error: Unable to load AWS SDK configuration" in captured.err


def test_main_debug_enables_debug_logging_without_touching_environment(monkeypatch, capsys):
    monkeypatch.delenv("DEBUG", raising=False)
    connect, _ = _patched_connect(_fake_adapter())

    with patch("sagetrack.cli.SageMakerInventoryAdapter.connect", connect), \
            patch("sagetrack.cli.setup_logging") as setup:
        assert cli.main(["--debug"]) == cli.EXIT_OK

    assert setup.call_args.args[0].DEBUG is True
    assert "DEBUG" not in os.environ
    assert cli.get_settings().DEBUG is False


def test_parse_args_rejects_unknown_kind():
    with pytest.raises(SystemExit):
        cli._parse_args(["--kind", "training_job"])
