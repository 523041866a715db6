"""
HTTP transport for the admin REST API.

Wraps ``httpx.AsyncClient`` rooted at the configured base URL. Every request
carries ``Authorization: Bearer <token>`` when the token provider returns a
token. Failures surface as ``ApiError``; there are no retries and no caching
at this layer.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generator, Optional

import httpx

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]

TRANSPORT_ERROR_MESSAGE = "Unable to reach the server. Please try again."


class ApiError(Exception):
    """Raised for any failed API call.

    Attributes:
        message: Human-readable message, from the response body when available
        status_code: HTTP status, or None for transport failures
        payload: Decoded error body, when there was one
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class BearerTokenAuth(httpx.Auth):
    """Attach the current session token, read at send time."""

    def __init__(self, token_provider: TokenProvider) -> None:
        self._token_provider = token_provider

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self._token_provider()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def extract_error_message(response: httpx.Response) -> tuple[str, Any]:
    """Pull a display message out of an error response body.

    Looks at ``message``, ``error`` and ``detail`` (string values only),
    falling back to a generic status message.
    """
    fallback = f"Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback, response.text or None

    if isinstance(body, dict):
        for field in ("message", "error", "detail"):
            value = body.get(field)
            if isinstance(value, str) and value.strip():
                return value, body
    return fallback, body


class ApiClient:
    """Thin async wrapper over the backend REST API."""

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_provider: TokenProvider = token_provider or (lambda: None)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            auth=BearerTokenAuth(self._token_provider),
            timeout=timeout,
            transport=transport,
        )

    def set_token_provider(self, token_provider: TokenProvider) -> None:
        """Swap the token source (used when the session store is built after the client)."""
        self._token_provider = token_provider
        self._client.auth = BearerTokenAuth(token_provider)

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        Args:
            method: HTTP verb
            path: Path relative to the base URL, e.g. ``/admin/users``
            json: Optional JSON request body
            params: Optional query string parameters

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            ApiError: On transport failure or non-2xx response
        """
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} transport failure: {e!r}")
            raise ApiError(TRANSPORT_ERROR_MESSAGE) from e

        if response.is_error:
            message, payload = extract_error_message(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code, payload=payload)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()
