"""
Typed schemas for the virtual device testing service.

Request models describe the test matrix submitted to the service, response
models describe the upload URLs and the step listing returned while a run is
in progress. Attributes are snake_case; the wire format is camelCase.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TestType(str, Enum):
    """Kind of test executed on the device matrix."""

    INSTRUMENTATION = "instrumentation"
    ROBO = "robo"
    GAMELOOP = "gameloop"


# Request models


class DeviceSpec(BaseModel):
    """One cell of the device matrix."""

    model: str = Field(..., description="Device model id", alias="androidModelId")
    api_level: str = Field(..., description="Android API level", alias="androidVersionId")
    locale: str = Field(..., description="Device locale")
    orientation: str = Field(..., description="Screen orientation")

    model_config = ConfigDict(extra="forbid", populate_by_name=True, protected_namespaces=())


class RoboDirective(BaseModel):
    """Scripted UI action applied during robo exploration."""

    resource_name: str = Field(..., alias="resourceName")
    input_text: str = Field(..., alias="inputText")
    action_type: str = Field(..., alias="actionType")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class EnvVar(BaseModel):
    """Environment variable set on the device before the test starts."""

    key: str
    value: str

    model_config = ConfigDict(extra="forbid")


class InstrumentationTest(BaseModel):
    """Instrumentation test executed from a separate test package."""

    WIRE_KEY: ClassVar[str] = "androidInstrumentationTest"

    test_type: Literal[TestType.INSTRUMENTATION] = TestType.INSTRUMENTATION
    app_package_id: Optional[str] = Field(None, alias="appPackageId")
    test_package_id: Optional[str] = Field(None, alias="testPackageId")
    test_runner_class: Optional[str] = Field(None, alias="testRunnerClass")
    test_targets: Optional[List[str]] = Field(None, alias="testTargets")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class RoboTest(BaseModel):
    """Exploration test that needs no test code."""

    WIRE_KEY: ClassVar[str] = "androidRoboTest"

    test_type: Literal[TestType.ROBO] = TestType.ROBO
    app_package_id: Optional[str] = Field(None, alias="appPackageId")
    app_initial_activity: Optional[str] = Field(None, alias="appInitialActivity")
    max_depth: Optional[int] = Field(None, alias="maxDepth")
    max_steps: Optional[int] = Field(None, alias="maxSteps")
    robo_directives: Optional[List[RoboDirective]] = Field(None, alias="roboDirectives")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class GameLoopTest(BaseModel):
    """Game-loop test driving scenarios built into the app."""

    WIRE_KEY: ClassVar[str] = "androidTestLoop"

    test_type: Literal[TestType.GAMELOOP] = TestType.GAMELOOP
    app_package_id: Optional[str] = Field(None, alias="appPackageId")
    scenarios: Optional[List[int]] = None
    scenario_labels: Optional[List[str]] = Field(None, alias="scenarioLabels")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


TestVariant = Union[InstrumentationTest, RoboTest, GameLoopTest]


class TestSpecification(BaseModel):
    """Shared test setup plus exactly one test variant."""

    test_timeout_seconds: int = Field(..., description="Maximum run time of a single test execution")
    directories_to_pull: List[str] = Field(default_factory=list)
    environment_variables: List[EnvVar] = Field(default_factory=list)
    test: TestVariant = Field(..., discriminator="test_type")

    model_config = ConfigDict(extra="forbid")

    def to_wire(self) -> Dict[str, Any]:
        setup: Dict[str, Any] = {}
        if self.directories_to_pull:
            setup["directoriesToPull"] = list(self.directories_to_pull)
        if self.environment_variables:
            setup["environmentVariables"] = [env.model_dump() for env in self.environment_variables]

        return {
            "testTimeout": f"{self.test_timeout_seconds}s",
            "testSetup": setup,
            self.test.WIRE_KEY: self.test.model_dump(by_alias=True, exclude_none=True, exclude={"test_type"}),
        }


class TestMatrix(BaseModel):
    """Device matrix and test specification submitted to start a run."""

    devices: List[DeviceSpec] = Field(default_factory=list)
    specification: TestSpecification

    model_config = ConfigDict(extra="forbid")

    def to_wire(self) -> Dict[str, Any]:
        """Render the JSON document accepted by the start endpoint."""
        return {
            "environmentMatrix": {
                "androidDeviceList": {
                    "androidDevices": [device.model_dump(by_alias=True) for device in self.devices],
                },
            },
            "testSpecification": self.specification.to_wire(),
        }


# Response models


class UploadUrls(BaseModel):
    """Signed URLs the packages are uploaded to."""

    app_url: str = Field(..., alias="appUrl")
    test_app_url: str = Field("", alias="testAppUrl")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class FailureDetail(BaseModel):
    crashed: bool = False
    not_installed: bool = Field(False, alias="notInstalled")
    other_native_crash: bool = Field(False, alias="otherNativeCrash")
    timed_out: bool = Field(False, alias="timedOut")
    unable_to_crawl: bool = Field(False, alias="unableToCrawl")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class InconclusiveDetail(BaseModel):
    aborted_by_user: bool = Field(False, alias="abortedByUser")
    infrastructure_failure: bool = Field(False, alias="infrastructureFailure")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SkippedDetail(BaseModel):
    incompatible_app_version: bool = Field(False, alias="incompatibleAppVersion")
    incompatible_architecture: bool = Field(False, alias="incompatibleArchitecture")
    incompatible_device: bool = Field(False, alias="incompatibleDevice")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SuccessDetail(BaseModel):
    other_native_crash: bool = Field(False, alias="otherNativeCrash")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Outcome(BaseModel):
    """Result of one test execution."""

    summary: str = ""
    failure_detail: Optional[FailureDetail] = Field(None, alias="failureDetail")
    inconclusive_detail: Optional[InconclusiveDetail] = Field(None, alias="inconclusiveDetail")
    skipped_detail: Optional[SkippedDetail] = Field(None, alias="skippedDetail")
    success_detail: Optional[SuccessDetail] = Field(None, alias="successDetail")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DimensionValue(BaseModel):
    key: str = ""
    value: str = ""

    model_config = ConfigDict(extra="ignore")


class TestStep(BaseModel):
    """One test execution on one device of the matrix."""

    state: str = ""
    outcome: Optional[Outcome] = None
    dimension_value: List[DimensionValue] = Field(default_factory=list, alias="dimensionValue")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("dimension_value", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return value if value is not None else []

    def dimensions(self) -> Dict[str, str]:
        """Dimension values keyed by dimension name (Model, Version, Locale, Orientation)."""
        return {entry.key: entry.value for entry in self.dimension_value}


class ListStepsResponse(BaseModel):
    """Response of the poll endpoint."""

    steps: List[TestStep] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("steps", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return value if value is not None else []
