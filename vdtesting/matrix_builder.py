"""
Translation of the flat step configuration into a test matrix.

Optional inputs left empty are not set on the variant, so they are dropped from
the submitted document and the service defaults apply.
"""

import logging

from .config import StepConfig
from .parsers import (
    parse_devices,
    parse_directives,
    parse_env_vars,
    parse_int,
    parse_int_list,
    parse_lines,
    parse_scalar_list,
)
from .schemas import GameLoopTest, InstrumentationTest, RoboTest, TestMatrix, TestSpecification, TestType, TestVariant

logger = logging.getLogger(__name__)


def build_test_matrix(config: StepConfig) -> TestMatrix:
    """Build the device matrix and test specification for a run."""
    devices = parse_devices(config.test_devices)
    logger.debug(f"Parsed {len(devices)} test device(s)")
    return TestMatrix(devices=devices, specification=build_test_specification(config))


def build_test_specification(config: StepConfig) -> TestSpecification:
    """
    Build the shared test setup and the variant selected by the test type.

    Raises:
        ConfigValidationError: If the test type is unknown
        DataFormatError: If a list, directive or numeric input is malformed
    """
    return TestSpecification(
        test_timeout_seconds=config.test_timeout,
        directories_to_pull=parse_lines(config.directories_to_pull),
        environment_variables=parse_env_vars(config.environment_variables),
        test=_build_variant(config),
    )


def _build_variant(config: StepConfig) -> TestVariant:
    test_type = config.selected_test_type

    if test_type == TestType.INSTRUMENTATION:
        return _build_instrumentation(config)
    elif test_type == TestType.ROBO:
        return _build_robo(config)
    return _build_game_loop(config)


def _build_instrumentation(config: StepConfig) -> InstrumentationTest:
    test = InstrumentationTest()
    if config.app_package_id:
        test.app_package_id = config.app_package_id
    if config.inst_test_package_id:
        test.test_package_id = config.inst_test_package_id
    if config.inst_test_runner_class:
        test.test_runner_class = config.inst_test_runner_class
    if config.inst_test_targets:
        test.test_targets = parse_scalar_list(config.inst_test_targets)
    return test


def _build_robo(config: StepConfig) -> RoboTest:
    test = RoboTest()
    if config.app_package_id:
        test.app_package_id = config.app_package_id
    if config.robo_initial_activity:
        test.app_initial_activity = config.robo_initial_activity
    if config.robo_max_depth:
        test.max_depth = parse_int(config.robo_max_depth)
    if config.robo_max_steps:
        test.max_steps = parse_int(config.robo_max_steps)
    if config.robo_directives:
        test.robo_directives = parse_directives(config.robo_directives)
    return test


def _build_game_loop(config: StepConfig) -> GameLoopTest:
    test = GameLoopTest()
    if config.app_package_id:
        test.app_package_id = config.app_package_id
    if config.loop_scenarios:
        test.scenarios = parse_int_list(config.loop_scenarios)
    if config.loop_scenario_labels:
        test.scenario_labels = parse_scalar_list(config.loop_scenario_labels)
    return test
