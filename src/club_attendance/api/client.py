from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import AuthError, ConflictError, NotFoundError, TransportError, ValidationError

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


@dataclass
class ApiConfig:
    base_url: str
    token: Optional[str] = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT


class ApiClient:
    """A client for the club backend REST API.

    Every response is a JSON envelope ``{success, data, message}``; callers get
    ``data`` back and failures surface as domain exceptions.
    """

    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None):
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout
        self._token = config.token
        self._session = session or requests.Session()

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _get_headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @staticmethod
    def _message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason or ""
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or "")
        return ""

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        """Make a request and return the envelope's ``data``.

        Raises:
            ValidationError, AuthError, NotFoundError, ConflictError: mapped
                from 400/422, 401/403, 404 and 409.
            TransportError: connection problems and any other failure status.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug("API %s %s params=%s", method, url, kwargs.get("params"))

        try:
            response = self._session.request(
                method, url, headers=self._get_headers(), timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error("API request %s %s failed: %s", method, url, e)
            raise TransportError(f"Backend unreachable: {e}") from e

        if response.status_code >= 400:
            message = self._message(response) or f"HTTP {response.status_code}"
            error = _STATUS_ERRORS.get(response.status_code)
            logger.warning("API %s %s -> %s: %s", method, url, response.status_code, message)
            if error is None:
                raise TransportError(message, status_code=response.status_code)
            raise error(message)

        if response.status_code == 204 or not response.content:
            return None
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError("Backend returned a non-JSON body", status_code=response.status_code) from e

        if isinstance(body, dict) and "data" in body:
            if body.get("success") is False:
                raise ValidationError(str(body.get("message") or "Request was rejected"))
            return body["data"]
        return body

    def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, payload: Optional[dict] = None) -> Any:
        return self._request("POST", endpoint, json=payload)
