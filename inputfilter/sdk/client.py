"""Python Client for the InputFilter service.

This module provides a small synchronous wrapper around the InputFilter HTTP
API. It handles authentication headers and error parsing.

Typical Usage:
    client = FilterClient(base_url="http://localhost:8000")
    client.clean("<script>alert(1)</script>Hello", "html")
"""

import os
from typing import Any, Dict, List

import requests


class FilterError(Exception):
    """Base exception for all client-side InputFilter errors."""
    pass


class FilterAPIError(FilterError):
    """Exception raised when the API returns an error response (4xx or 5xx).

    Attributes:
        status_code (int): The HTTP status code returned by the API.
    """
    def __init__(self, message, status_code):
        super().__init__(f"{message} (Status: {status_code})")
        self.status_code = status_code


class FilterClient:
    """A synchronous client wrapper for the InputFilter REST API."""

    def __init__(self, base_url: str = None, api_key: str = None, timeout: float = 10.0):
        """Initializes the client with connection details.

        Args:
            base_url (str, optional): The root URL of the service. Defaults to
                the INPUTFILTER_URL env var or "http://localhost:8000".
            api_key (str, optional): Sent as `X-API-Key` when set. Defaults to
                the INPUTFILTER_API_KEY env var.
            timeout (float): Per-request timeout in seconds.
        """
        # Remove trailing slash to prevent double-slash URLs
        self.base_url = (base_url or os.getenv("INPUTFILTER_URL", "http://localhost:8000")).rstrip("/")
        self.api_key = api_key or os.getenv("INPUTFILTER_API_KEY")
        self.timeout = timeout

        if not self.base_url:
            raise FilterError("InputFilter Base URL is required. Set INPUTFILTER_URL env var.")

    def _get_headers(self) -> Dict[str, str]:
        headers = {}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _handle_error(self, resp: requests.Response):
        """Raises a structured exception for failed responses.

        The `detail` field of the FastAPI error body is preferred over the
        raw response text.

        Raises:
            FilterAPIError: If the status code indicates failure (4xx/5xx).
        """
        try:
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            try:
                error_detail = resp.json().get("detail", str(e))
            except ValueError:
                error_detail = resp.text or str(e)

            raise FilterAPIError(error_detail, resp.status_code) from e

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = requests.post(
                f"{self.base_url}{path}",
                json=body,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise FilterError(f"Connection Failed: {e}") from e

        self._handle_error(resp)
        return resp.json()

    def health(self) -> Dict[str, Any]:
        """Returns the service health document."""
        try:
            resp = requests.get(
                f"{self.base_url}/health", headers=self._get_headers(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise FilterError(f"Connection Failed: {e}") from e

        self._handle_error(resp)
        return resp.json()

    def clean(self, value: Any, type_name: str = "string") -> Any:
        """Cleans a value remotely and returns the cleaned value."""
        return self._post("/filter", {"value": value, "type": type_name})["value"]

    def clean_payload(
        self,
        payload: Dict[str, Any],
        type_name: str = "string",
        fields: List[str] = None,
    ) -> Dict[str, Any]:
        """Cleans the string fields of `payload` remotely.

        Args:
            payload (Dict[str, Any]): The data dictionary.
            type_name (str): Filter applied to each selected field.
            fields (List[str], optional): Keys to clean; all keys if omitted.

        Returns:
            Dict[str, Any]: The cleaned payload.
        """
        body = {"payload": payload, "type": type_name, "fields": fields}
        return self._post("/filter/payload", body)["payload"]
