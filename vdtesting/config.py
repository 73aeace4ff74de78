"""
Step configuration and validation.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from .exceptions import ConfigValidationError
from .parsers import parse_lines
from .schemas import TestType


@dataclass
class StepConfig:
    """Configuration for one virtual device testing run."""

    # API
    api_base_url: str = ""
    api_token: str = ""
    build_slug: str = ""
    app_slug: str = ""

    # Shared
    apk_path: str = ""
    test_apk_path: str = ""
    test_type: str = ""
    test_devices: str = ""
    app_package_id: str = ""
    test_timeout: int = 900
    download_test_results: bool = False
    directories_to_pull: str = ""
    environment_variables: str = ""

    # Instrumentation
    inst_test_package_id: str = ""
    inst_test_runner_class: str = ""
    inst_test_targets: str = ""

    # Robo
    robo_initial_activity: str = ""
    robo_max_depth: str = ""
    robo_max_steps: str = ""
    robo_directives: str = ""

    # Game loop
    loop_scenarios: str = ""
    loop_scenario_labels: str = ""

    # Polling and transport
    poll_interval: float = 5.0
    poll_timeout: Optional[float] = None  # None = wait until the run finishes
    request_timeout: Optional[float] = None  # None = transport default

    @classmethod
    def from_inputs(
        cls,
        test_timeout: str = "",
        download_test_results: str = "",
        poll_interval: str = "",
        poll_timeout: str = "",
        request_timeout: str = "",
        **inputs: str,
    ) -> "StepConfig":
        """
        Build a config from raw step inputs.

        The numeric and boolean inputs arrive as strings; empty ones take the
        field default.

        Raises:
            ConfigValidationError: If a numeric or boolean input does not parse
        """
        return cls(
            test_timeout=_to_int(test_timeout, "TestTimeout", 900),
            download_test_results=_to_bool(download_test_results, "DownloadTestResults"),
            poll_interval=_to_float(poll_interval, "PollInterval", 5.0),
            poll_timeout=_to_float(poll_timeout, "PollTimeout", None),
            request_timeout=_to_float(request_timeout, "RequestTimeout", None),
            **inputs,
        )

    @property
    def selected_test_type(self) -> TestType:
        """The validated test type."""
        try:
            return TestType(self.test_type)
        except ValueError as e:
            options = ", ".join(t.value for t in TestType)
            raise ConfigValidationError(
                f"Issue with TestType: invalid value '{self.test_type}', expected one of: {options}"
            ) from e

    @property
    def base_path(self) -> str:
        return f"{self.app_slug}/{self.build_slug}/{self.api_token}"

    def validate(self) -> None:
        """
        Check required inputs before any request is made.

        Raises:
            ConfigValidationError: On the first missing or invalid input
        """
        _require(self.api_base_url, "APIBaseURL")
        _require(self.api_token, "APIToken")
        _require(self.build_slug, "BuildSlug")
        _require(self.app_slug, "AppSlug")
        _require(self.test_type, "TestType")
        test_type = self.selected_test_type

        _require(self.apk_path, "ApkPath")
        _require_path(self.apk_path, "ApkPath")
        if test_type == TestType.INSTRUMENTATION:
            _require(self.test_apk_path, "TestApkPath")
            _require_path(self.test_apk_path, "TestApkPath")

        if self.test_timeout <= 0:
            raise ConfigValidationError(f"Issue with TestTimeout: must be positive, got {self.test_timeout}")
        if self.poll_interval < 0:
            raise ConfigValidationError(f"Issue with PollInterval: must not be negative, got {self.poll_interval}")

    def print_summary(self, console: Console) -> None:
        """Print the effective configuration, showing only the inputs of the selected test type."""
        console.print("[bold cyan]Configs:[/bold cyan]")
        console.print(f"- ApkPath: {self.apk_path}")
        console.print(f"- TestTimeout: {self.test_timeout}")
        console.print(f"- DirectoriesToPull: {self.directories_to_pull}")
        console.print(f"- EnvironmentVariables: {self.environment_variables}")
        console.print("- TestDevices:")

        table = Table(show_header=True, header_style="bold", box=None)
        for column in ("Model", "API Level", "Locale", "Orientation"):
            table.add_column(column)
        for line in parse_lines(self.test_devices):
            fields = line.split(",")
            # malformed lines are reported when the matrix is built
            if len(fields) == 4:
                table.add_row(*fields)
        console.print(table)

        console.print(f"- AppPackageID: {self.app_package_id}")
        console.print(f"- TestType: {self.test_type}")

        if self.test_type == TestType.INSTRUMENTATION.value:
            console.print(f"- TestApkPath: {self.test_apk_path}")
            console.print(f"- InstTestPackageID: {self.inst_test_package_id}")
            console.print(f"- InstTestRunnerClass: {self.inst_test_runner_class}")
            console.print(f"- InstTestTargets: {self.inst_test_targets}")
        elif self.test_type == TestType.ROBO.value:
            console.print(f"- RoboInitialActivity: {self.robo_initial_activity}")
            console.print(f"- RoboMaxDepth: {self.robo_max_depth}")
            console.print(f"- RoboMaxSteps: {self.robo_max_steps}")
            console.print(f"- RoboDirectives: {self.robo_directives}")
        elif self.test_type == TestType.GAMELOOP.value:
            console.print(f"- LoopScenarios: {self.loop_scenarios}")
            console.print(f"- LoopScenarioLabels: {self.loop_scenario_labels}")


def _require(value: str, name: str) -> None:
    if not value:
        raise ConfigValidationError(f"Issue with {name}: parameter not specified")


def _require_path(value: str, name: str) -> None:
    if not Path(value).exists():
        raise ConfigValidationError(f"Issue with {name}: path not exist at: {value}")


def _to_int(raw: str, name: str, default: int) -> int:
    raw = raw.strip()
    if not raw:
        return default
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise ConfigValidationError(f"Issue with {name}: expected an integer, got '{raw}'")
    return int(raw)


def _to_float(raw: str, name: str, default: Optional[float]) -> Optional[float]:
    raw = raw.strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigValidationError(f"Issue with {name}: expected a number, got '{raw}'") from e


def _to_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in ("", "false", "no", "0"):
        return False
    if value in ("true", "yes", "1"):
        return True
    raise ConfigValidationError(f"Issue with {name}: expected true or false, got '{raw}'")
