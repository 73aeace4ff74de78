"""Tests for the vdtesting command line entry point."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from vdtesting.__main__ import main
from vdtesting.exceptions import DataFormatError


@pytest.fixture
def step_env(apk_files):
    """Step inputs as the pipeline passes them through the environment."""
    apk, test_apk = apk_files
    return {
        "api_base_url": "https://vdt.example.com/test",
        "api_token": "secret-token",
        "BITRISE_BUILD_SLUG": "build-1",
        "BITRISE_APP_SLUG": "app-1",
        "apk_path": str(apk),
        "test_apk_path": str(test_apk),
        "test_type": "instrumentation",
        "test_devices": "Pixel2,28,en,portrait",
        "test_timeout": "600",
        "download_test_results": "true",
        "environment_variables": "A=1",
        "robo_max_depth": "",
    }


@patch("vdtesting.__main__.setup_basic_logging")
@patch("vdtesting.__main__.StepRunner")
class TestMain:
    """Tests for configuration loading and exit codes."""

    def test_reads_config_from_environment(self, mock_runner_class, mock_logging, step_env):
        mock_runner_class.return_value.run.return_value = True

        result = CliRunner().invoke(main, [], env=step_env)

        assert result.exit_code == 0
        config = mock_runner_class.call_args.args[0]
        assert config.api_token == "secret-token"
        assert config.build_slug == "build-1"
        assert config.app_slug == "app-1"
        assert config.test_timeout == 600
        assert config.download_test_results is True
        assert config.environment_variables == "A=1"
        assert config.robo_max_depth == ""
        assert config.poll_interval == 5.0
        assert config.poll_timeout is None

    def test_options_override_environment(self, mock_runner_class, mock_logging, step_env):
        mock_runner_class.return_value.run.return_value = True

        result = CliRunner().invoke(
            main, ["--test-type", "robo", "--poll-timeout", "3600", "--download-test-results", "false"], env=step_env
        )

        assert result.exit_code == 0
        config = mock_runner_class.call_args.args[0]
        assert config.test_type == "robo"
        assert config.poll_timeout == 3600.0
        assert config.download_test_results is False

    def test_failed_tests_exit_1(self, mock_runner_class, mock_logging, step_env):
        mock_runner_class.return_value.run.return_value = False

        result = CliRunner().invoke(main, [], env=step_env)

        assert result.exit_code == 1

    def test_step_error_exits_1_and_closes_client(self, mock_runner_class, mock_logging, step_env):
        runner = mock_runner_class.return_value
        runner.run.side_effect = DataFormatError("Invalid test device configuration: x")

        result = CliRunner().invoke(main, [], env=step_env)

        assert result.exit_code == 1
        runner.client.close.assert_called_once()

    def test_debug_flag_sets_level(self, mock_runner_class, mock_logging, step_env):
        import logging

        mock_runner_class.return_value.run.return_value = True

        CliRunner().invoke(main, ["--debug"], env=step_env)

        assert mock_logging.call_args.kwargs["level"] == logging.DEBUG


@patch("vdtesting.__main__.setup_basic_logging")
def test_missing_configuration_fails_before_requests(mock_logging, tmp_path):
    with patch("vdtesting.client.requests.Session") as mock_session_class:
        result = CliRunner().invoke(main, [], env={"test_type": "robo"})

    assert result.exit_code == 1
    mock_session_class.return_value.request.assert_not_called()


@patch("vdtesting.__main__.setup_basic_logging")
@pytest.mark.parametrize(
    "name,value",
    [
        ("test_timeout", "15m"),
        ("download_test_results", "maybe"),
        ("poll_interval", "soon"),
        ("poll_timeout", "1h"),
        ("request_timeout", "x"),
    ],
)
def test_malformed_typed_input_exits_1(mock_logging, name, value, step_env):
    with patch("vdtesting.client.requests.Session") as mock_session_class:
        result = CliRunner().invoke(main, [], env={**step_env, name: value})

    assert result.exit_code == 1
    mock_session_class.return_value.request.assert_not_called()
