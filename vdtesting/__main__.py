"""
Virtual device testing step CLI.

Every option falls back to the environment variable the pipeline sets for the
step input, so the step runs without arguments inside a build.
"""

import logging
import sys

import click
from rich.console import Console

from .config import StepConfig
from .exceptions import StepError
from .logging_config import setup_basic_logging
from .runner import StepRunner

logger = logging.getLogger(__name__)


@click.command(context_settings={"show_default": True})
# API
@click.option("--api-base-url", envvar="api_base_url", default="", help="Base URL of the testing API")
@click.option("--api-token", envvar="api_token", default="", help="API token embedded in the request path")
@click.option("--build-slug", envvar="BITRISE_BUILD_SLUG", default="", help="Build slug")
@click.option("--app-slug", envvar="BITRISE_APP_SLUG", default="", help="App slug")
# Shared
@click.option("--apk-path", envvar="apk_path", default="", help="Path of the app APK")
@click.option("--test-apk-path", envvar="test_apk_path", default="", help="Path of the test APK (instrumentation)")
@click.option(
    "--test-type",
    envvar="test_type",
    default="",
    help="Test type: instrumentation, robo or gameloop",
)
@click.option("--test-devices", envvar="test_devices", default="", help="One 'model,apiLevel,locale,orientation' per line")
@click.option("--app-package-id", envvar="app_package_id", default="", help="Java package of the app under test")
@click.option("--test-timeout", envvar="test_timeout", default="900", help="Test timeout in seconds")
@click.option(
    "--download-test-results",
    envvar="download_test_results",
    default="false",
    help="Download the produced test assets (true/false)",
)
@click.option("--directories-to-pull", envvar="directories_to_pull", default="", help="Device directories, one per line")
@click.option(
    "--environment-variables", envvar="environment_variables", default="", help="KEY=VALUE pairs, one per line"
)
# Instrumentation
@click.option("--inst-test-package-id", envvar="inst_test_package_id", default="", help="Test package id")
@click.option("--inst-test-runner-class", envvar="inst_test_runner_class", default="", help="Test runner class")
@click.option("--inst-test-targets", envvar="inst_test_targets", default="", help="Comma separated test targets")
# Robo
@click.option("--robo-initial-activity", envvar="robo_initial_activity", default="", help="Initial activity")
@click.option("--robo-max-depth", envvar="robo_max_depth", default="", help="Maximum crawl depth")
@click.option("--robo-max-steps", envvar="robo_max_steps", default="", help="Maximum number of crawl steps")
@click.option(
    "--robo-directives", envvar="robo_directives", default="", help="One 'resourceName,inputText,actionType' per line"
)
# Game loop
@click.option("--loop-scenarios", envvar="loop_scenarios", default="", help="Comma separated scenario numbers")
@click.option("--loop-scenario-labels", envvar="loop_scenario_labels", default="", help="Comma separated labels")
# Polling and transport
@click.option("--poll-interval", envvar="poll_interval", default="5", help="Seconds between polls")
@click.option(
    "--poll-timeout",
    envvar="poll_timeout",
    default="",
    help="Give up waiting after this many seconds (default: wait until the run finishes)",
)
@click.option("--request-timeout", envvar="request_timeout", default="", help="Per request timeout in seconds")
@click.option("--debug/--no-debug", envvar="debug", default=False, help="Enable debug logging")
def main(
    api_base_url: str,
    api_token: str,
    build_slug: str,
    app_slug: str,
    apk_path: str,
    test_apk_path: str,
    test_type: str,
    test_devices: str,
    app_package_id: str,
    test_timeout: str,
    download_test_results: str,
    directories_to_pull: str,
    environment_variables: str,
    inst_test_package_id: str,
    inst_test_runner_class: str,
    inst_test_targets: str,
    robo_initial_activity: str,
    robo_max_depth: str,
    robo_max_steps: str,
    robo_directives: str,
    loop_scenarios: str,
    loop_scenario_labels: str,
    poll_interval: str,
    poll_timeout: str,
    request_timeout: str,
    debug: bool,
) -> None:
    """Run the app on virtual devices and report the results."""
    console = Console()
    setup_basic_logging(level=logging.DEBUG if debug else logging.INFO, console=console)

    runner = None
    try:
        config = StepConfig.from_inputs(
            api_base_url=api_base_url,
            api_token=api_token,
            build_slug=build_slug,
            app_slug=app_slug,
            apk_path=apk_path,
            test_apk_path=test_apk_path,
            test_type=test_type,
            test_devices=test_devices,
            app_package_id=app_package_id,
            test_timeout=test_timeout,
            download_test_results=download_test_results,
            directories_to_pull=directories_to_pull,
            environment_variables=environment_variables,
            inst_test_package_id=inst_test_package_id,
            inst_test_runner_class=inst_test_runner_class,
            inst_test_targets=inst_test_targets,
            robo_initial_activity=robo_initial_activity,
            robo_max_depth=robo_max_depth,
            robo_max_steps=robo_max_steps,
            robo_directives=robo_directives,
            loop_scenarios=loop_scenarios,
            loop_scenario_labels=loop_scenario_labels,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
            request_timeout=request_timeout,
        )
        runner = StepRunner(config, console=console)
        success = runner.run()
    except StepError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    finally:
        if runner is not None:
            runner.client.close()

    # Exit with appropriate code
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
