"""
Main step runner: upload, start, wait, report and download.
"""

import logging
import tempfile
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from .client import RemoteTestClient
from .config import StepConfig
from .env_export import DOWNLOADED_FILES_DIR_KEY, export_environment
from .exceptions import ProtocolError
from .matrix_builder import build_test_matrix
from .poller import PollLoop
from .reporter import ResultReporter, RunReport
from .schemas import TestType

logger = logging.getLogger(__name__)

ASSETS_DIR_PREFIX = "vdtesting_test_assets"


class StepRunner:
    """Runs one virtual device test for a build."""

    def __init__(
        self,
        config: StepConfig,
        client: Optional[RemoteTestClient] = None,
        console: Optional[Console] = None,
        poll_loop: Optional[PollLoop] = None,
    ):
        self.config = config
        self.console = console or Console()
        self.client = client or RemoteTestClient(
            config.api_base_url,
            config.app_slug,
            config.build_slug,
            config.api_token,
            timeout=config.request_timeout,
        )
        self.poll_loop = poll_loop or PollLoop(
            self.client,
            interval=config.poll_interval,
            timeout=config.poll_timeout,
            emit=self.console.print,
        )
        self.report: Optional[RunReport] = None
        self.assets_dir: Optional[Path] = None

    def run(self) -> bool:
        """
        Run every phase of the step.

        Returns:
            True if every test execution succeeded

        Raises:
            StepError: On any configuration, transport, protocol or data format failure
        """
        start_time = time.time()
        self.config.print_summary(self.console)
        self.config.validate()

        # Build before uploading so malformed inputs fail without any request
        matrix = build_test_matrix(self.config)

        self.console.print(
            Panel.fit(
                "[bold cyan]Virtual Device Testing[/bold cyan]\n"
                f"Test type: {self.config.test_type}\n"
                f"Devices: {len(matrix.devices)}",
                title="🧪 Starting test run",
            )
        )

        self._upload_packages()

        self.console.print("\n[cyan]Start test[/cyan]")
        self.client.start_test(matrix)
        self.console.print("[green]✅ Test started[/green]")

        self.console.print("\n[cyan]Waiting for test results[/cyan]")
        final = self.poll_loop.run()
        self.console.print("[green]✅ Test finished[/green]\n")

        self.report = ResultReporter(self.console).report(final)

        if self.config.download_test_results:
            self._download_assets()

        logger.debug(f"Step finished in {time.time() - start_time:.1f}s")
        return self.report.successful

    def _upload_packages(self) -> None:
        self.console.print("[cyan]Upload APKs[/cyan]")
        urls = self.client.request_upload_urls()

        self.client.upload_file(urls.app_url, self.config.apk_path)
        if self.config.selected_test_type == TestType.INSTRUMENTATION:
            self.client.upload_file(urls.test_app_url, self.config.test_apk_path)

        self.console.print("[green]✅ APKs uploaded[/green]")

    def _download_assets(self) -> None:
        self.console.print("\n[cyan]Downloading test assets[/cyan]")
        assets = self.client.list_assets()

        self.assets_dir = Path(tempfile.mkdtemp(prefix=ASSETS_DIR_PREFIX))
        for file_name, file_url in assets.items():
            local_path = self._asset_path(file_name)
            local_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Downloading {file_name}")
            self.client.download_file(file_url, local_path)

        self.console.print(f"[green]✅ {len(assets)} asset(s) downloaded[/green]")
        if export_environment(DOWNLOADED_FILES_DIR_KEY, str(self.assets_dir)):
            self.console.print(
                f"The downloaded test assets path ({self.assets_dir}) is exported to the "
                f"{DOWNLOADED_FILES_DIR_KEY} environment variable."
            )

    def _asset_path(self, file_name: str) -> Path:
        """Local path of an asset, keeping its relative folders inside the assets directory."""
        root = self.assets_dir.resolve()
        local_path = (root / file_name).resolve()
        if local_path == root or root not in local_path.parents:
            raise ProtocolError(f"Asset name escapes the download directory: {file_name}")
        return local_path
