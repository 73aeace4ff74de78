"""Shared fixtures for vdtesting tests."""

import io
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from vdtesting.config import StepConfig
from vdtesting.schemas import ListStepsResponse


def make_step(
    state: str = "complete",
    summary: str = "success",
    model: str = "Pixel2",
    version: str = "28",
    locale: str = "en",
    orientation: str = "portrait",
    **details: Dict[str, bool],
) -> Dict[str, Any]:
    """Build a step entry as returned by the poll endpoint."""
    outcome: Dict[str, Any] = {"summary": summary}
    outcome.update(details)
    return {
        "state": state,
        "outcome": outcome,
        "dimensionValue": [
            {"key": "Model", "value": model},
            {"key": "Version", "value": version},
            {"key": "Locale", "value": locale},
            {"key": "Orientation", "value": orientation},
        ],
    }


def make_response(steps: Optional[List[Dict[str, Any]]] = None) -> ListStepsResponse:
    return ListStepsResponse.model_validate({"steps": steps or []})


def make_http_response(status_code: int = 200, json_data: Any = None, text: str = "") -> MagicMock:
    """Create a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def apk_files(tmp_path):
    """Create app and test packages on disk."""
    apk = tmp_path / "app-debug.apk"
    apk.write_bytes(b"app-binary")
    test_apk = tmp_path / "app-debug-androidTest.apk"
    test_apk.write_bytes(b"test-binary")
    return apk, test_apk


@pytest.fixture
def step_config(apk_files):
    """A valid instrumentation configuration with two devices."""
    apk, test_apk = apk_files
    return StepConfig(
        api_base_url="https://vdt.example.com/test",
        api_token="secret-token",
        build_slug="build-1",
        app_slug="app-1",
        apk_path=str(apk),
        test_apk_path=str(test_apk),
        test_type="instrumentation",
        test_devices="NexusLowRes,24,en,portrait\nPixel2,28,de,landscape\n",
        test_timeout=900,
        poll_interval=0,
    )


@pytest.fixture
def console():
    """Rich console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


def console_output(console: Console) -> str:
    return console.file.getvalue()
