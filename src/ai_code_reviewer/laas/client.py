"""
LaaS API Client

Handles authentication headers and communication with the LaaS preset
chat-completions endpoint used to review a single file.
"""

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ..config import LaaSConfig
from ..exceptions import ReviewServiceError
from ..models.file_diff import FileDiff
from ..models.review import LaaSRequest, LaaSResponse, ReviewParams


logger = logging.getLogger(__name__)


class LaaSClient:
    """
    LaaS API client for per-file code reviews.

    Failed calls are never retried; every failure surfaces as a
    ReviewServiceError for the caller to attribute to one file.
    """

    COMPLETIONS_ENDPOINT = "/chat/completions"

    def __init__(self, config: LaaSConfig, pool_size: int = 10):
        """
        Initialize LaaS client.

        Args:
            config: Validated LaaS settings (API key, project id, preset hash)
            pool_size: Connection pool size shared by concurrent reviews
        """
        self.config = config
        self.base_url = config.base_url.rstrip('/')
        self.timeout = config.timeout_seconds
        self.session = self._create_session(pool_size)

    def _create_session(self, pool_size: int) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()

        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Content-Type': 'application/json',
            'project': self.config.project_id,
            'apiKey': self.config.api_key or '',
            'User-Agent': 'AI-Code-Reviewer/1.0'
        })

        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """
        Make request to the LaaS API and decode the JSON body.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON object

        Raises:
            ReviewServiceError: For transport, HTTP and payload errors
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise ReviewServiceError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.info(f"Request failed: {e}")
            raise ReviewServiceError(f"Request failed: {str(e)}") from e

        data = self._decode(response)

        if not response.ok:
            raise ReviewServiceError(
                f"LaaS API error: {response.status_code} - {self._error_message(data) or 'Unknown error'}",
                status_code=response.status_code,
                response_data=data
            )

        if data is None:
            raise ReviewServiceError(
                "LaaS API returned a non-JSON response",
                status_code=response.status_code,
            )

        # 2xx with an error payload is still a failure
        if data.get('error') or ('message' in data and 'choices' not in data):
            raise ReviewServiceError(
                f"LaaS API error: {self._error_message(data) or 'Unknown error'}",
                status_code=response.status_code,
                response_data=data
            )

        return data

    @staticmethod
    def _decode(response: requests.Response) -> Optional[Dict[str, Any]]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _error_message(data: Optional[Dict[str, Any]]) -> Optional[str]:
        if not data:
            return None
        error = data.get('error')
        if isinstance(error, dict):
            return error.get('message') or str(error)
        if error:
            return str(error)
        message = data.get('message')
        return str(message) if message else None

    def build_request(self, file_diff: FileDiff) -> LaaSRequest:
        """Build the preset request body for one file."""
        return LaaSRequest(
            hash=self.config.preset_hash,
            params=ReviewParams(
                full_content=file_diff.full_content,
                changed_content=file_diff.changed_content,
            ),
        )

    def review(self, file_diff: FileDiff) -> LaaSResponse:
        """
        Request a review of one file.

        Args:
            file_diff: Full and changed content of the file

        Returns:
            Parsed response; the review text is ``response.content``

        Raises:
            ReviewServiceError: If the call fails or the response is malformed
        """
        body = self.build_request(file_diff)
        data = self._make_request('POST', self.COMPLETIONS_ENDPOINT, json=body.model_dump())

        try:
            return LaaSResponse(**data)
        except ValidationError as e:
            raise ReviewServiceError(f"Malformed LaaS response: {e.error_count()} validation error(s)", response_data=data) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
