"""
HTTP client for the virtual device testing service.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from .exceptions import ProtocolError, TransportError
from .schemas import ListStepsResponse, TestMatrix, UploadUrls

logger = logging.getLogger(__name__)

_ASSET_MAP = TypeAdapter(Dict[str, str])


class RemoteTestClient:
    """
    Client for one build's test run.

    All endpoints are keyed by `{app_slug}/{build_slug}/{api_token}`; the token
    is part of the path and no other authentication is used.
    """

    def __init__(
        self,
        base_url: str,
        app_slug: str,
        build_slug: str,
        api_token: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.key_path = f"{app_slug}/{build_slug}/{api_token}"
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def run_url(self) -> str:
        return f"{self.base_url}/{self.key_path}"

    @property
    def assets_url(self) -> str:
        return f"{self.base_url}/assets/{self.key_path}"

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RemoteTestClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request_upload_urls(self) -> UploadUrls:
        """Ask the service for signed upload URLs for the app and test packages."""
        response = self._request("POST", self.assets_url)
        return self._decode(response, UploadUrls)

    def upload_file(self, upload_url: str, file_path: str) -> None:
        """
        Upload a package with a PUT request.

        Raises:
            TransportError: If the file cannot be read or the request fails
            ProtocolError: If the upload is not answered with 200
        """
        path = Path(file_path)
        try:
            size = path.stat().st_size
            with open(path, "rb") as body:
                response = self._request(
                    "PUT",
                    upload_url,
                    data=body,
                    headers={"Content-Length": str(size)},
                    what=f"upload file({file_path})",
                )
        except OSError as e:
            raise TransportError(f"Failed to open file for upload ({file_path}): {e}") from e

        logger.debug(f"Uploaded {file_path} ({size} bytes)")

    def start_test(self, matrix: TestMatrix) -> None:
        """Submit the test matrix and start the run."""
        self._request("POST", self.run_url, json=matrix.to_wire(), what="start test")

    def list_steps(self) -> ListStepsResponse:
        """Fetch the current state of every test execution."""
        response = self._request("GET", self.run_url)
        return self._decode(response, ListStepsResponse)

    def list_assets(self) -> Dict[str, str]:
        """Fetch the file name to download URL map of the produced test assets."""
        response = self._request("GET", self.assets_url)
        try:
            return _ASSET_MAP.validate_python(response.json())
        except (ValueError, SchemaValidationError) as e:
            raise ProtocolError(f"Failed to decode response body: {e}", response.status_code) from e

    def download_file(self, url: str, local_path: Path) -> None:
        """Stream a file to `local_path`."""
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                if response.status_code != 200:
                    raise ProtocolError(
                        f"Failed to download file - non success response code: {response.status_code}",
                        response.status_code,
                    )
                with open(local_path, "wb") as out:
                    for chunk in response.iter_content(chunk_size=64 * 1024):
                        out.write(chunk)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download file ({local_path}): {e}") from e
        except OSError as e:
            raise TransportError(f"Failed to save file ({local_path}): {e}") from e

    def _request(self, method: str, url: str, what: str = "", **kwargs: Any) -> requests.Response:
        what = what or f"{method} request"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Failed to {what}, error: {e}") from e

        if response.status_code != 200:
            raise ProtocolError(f"Failed to {what}, status code: {response.status_code}", response.status_code)
        return response

    @staticmethod
    def _decode(response: requests.Response, model: Any) -> Any:
        try:
            return model.model_validate(response.json())
        except (ValueError, SchemaValidationError) as e:
            raise ProtocolError(
                f"Failed to decode response body: {e}, body: {response.text[:500]}", response.status_code
            ) from e
