"""Tests for StepConfig validation and the configuration summary."""

from dataclasses import replace

import pytest

from conftest import console_output
from vdtesting.config import StepConfig
from vdtesting.exceptions import ConfigValidationError


class TestValidate:
    """Tests for StepConfig.validate."""

    def test_valid_config_passes(self, step_config):
        step_config.validate()

    @pytest.mark.parametrize(
        "field, name",
        [
            ("api_base_url", "APIBaseURL"),
            ("api_token", "APIToken"),
            ("build_slug", "BuildSlug"),
            ("app_slug", "AppSlug"),
            ("test_type", "TestType"),
            ("apk_path", "ApkPath"),
            ("test_apk_path", "TestApkPath"),
        ],
    )
    def test_missing_required_input(self, step_config, field, name):
        config = replace(step_config, **{field: ""})
        with pytest.raises(ConfigValidationError, match=f"Issue with {name}: parameter not specified"):
            config.validate()

    def test_invalid_test_type(self, step_config):
        with pytest.raises(ConfigValidationError, match="instrumentation, robo, gameloop"):
            replace(step_config, test_type="monkey").validate()

    def test_missing_apk_file(self, step_config, tmp_path):
        config = replace(step_config, apk_path=str(tmp_path / "missing.apk"))
        with pytest.raises(ConfigValidationError, match="Issue with ApkPath: path not exist"):
            config.validate()

    @pytest.mark.parametrize("test_type", ["robo", "gameloop"])
    def test_test_apk_only_required_for_instrumentation(self, step_config, test_type):
        replace(step_config, test_type=test_type, test_apk_path="").validate()

    def test_non_positive_timeout(self, step_config):
        with pytest.raises(ConfigValidationError, match="TestTimeout"):
            replace(step_config, test_timeout=0).validate()

    def test_base_path(self, step_config):
        assert step_config.base_path == "app-1/build-1/secret-token"


class TestPrintSummary:
    """Tests for the configuration printout."""

    def test_prints_devices_and_instrumentation_inputs(self, step_config, console):
        step_config.print_summary(console)
        output = console_output(console)

        assert "Model" in output and "API Level" in output
        assert "NexusLowRes" in output and "landscape" in output
        assert "InstTestRunnerClass" in output
        assert "RoboMaxDepth" not in output

    def test_does_not_print_token(self, step_config, console):
        step_config.print_summary(console)
        assert "secret-token" not in console_output(console)

    def test_robo_inputs(self, console):
        StepConfig(test_type="robo", robo_max_depth="10").print_summary(console)
        output = console_output(console)

        assert "RoboMaxDepth: 10" in output
        assert "LoopScenarios" not in output

    def test_skips_malformed_device_lines(self, console):
        StepConfig(test_devices="bad,line\nPixel2,28,en,portrait").print_summary(console)
        output = console_output(console)

        assert "Pixel2" in output
        assert "bad" not in output


class TestFromInputs:
    """Tests for building a config from raw string inputs."""

    def test_converts_typed_inputs(self):
        config = StepConfig.from_inputs(
            test_timeout="600",
            download_test_results="true",
            poll_interval="2.5",
            poll_timeout="3600",
            request_timeout="30",
            test_type="robo",
        )

        assert config.test_timeout == 600
        assert config.download_test_results is True
        assert config.poll_interval == 2.5
        assert config.poll_timeout == 3600.0
        assert config.request_timeout == 30.0
        assert config.test_type == "robo"

    def test_empty_inputs_take_defaults(self):
        config = StepConfig.from_inputs()

        assert config.test_timeout == 900
        assert config.download_test_results is False
        assert config.poll_interval == 5.0
        assert config.poll_timeout is None
        assert config.request_timeout is None

    @pytest.mark.parametrize("value", ["15m", "1_000", "1.5", "0x10"])
    def test_non_integer_timeout(self, value):
        with pytest.raises(ConfigValidationError, match="Issue with TestTimeout"):
            StepConfig.from_inputs(test_timeout=value)

    def test_unknown_boolean(self):
        with pytest.raises(ConfigValidationError, match="Issue with DownloadTestResults"):
            StepConfig.from_inputs(download_test_results="maybe")

    def test_non_numeric_poll_timeout(self):
        with pytest.raises(ConfigValidationError, match="Issue with PollTimeout"):
            StepConfig.from_inputs(poll_timeout="1h")
