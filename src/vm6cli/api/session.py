"""HTTP session for the VMmanager API."""

import logging
from typing import Any

import httpx

from .exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    NetworkError,
    PermissionError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-xsrf-token"


class Session:
    """Authenticated JSON transport.

    Performs exactly one HTTP exchange per call; retries are the caller's
    concern. Empty response bodies decode to None.
    """

    def __init__(
        self,
        base_url: str,
        auth_url: str | None = None,
        verify_ssl: bool = True,
        timeout: int = 30,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize session.

        Args:
            base_url: API root, e.g. https://vm.example.com/vm/v3
            auth_url: Password login endpoint
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (ownership stays with the caller)
        """
        self.base_url = base_url.rstrip("/")
        self.auth_url = auth_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(verify=verify_ssl, timeout=timeout)
        self._headers: dict[str, str] = {}

    @property
    def authenticated(self) -> bool:
        return TOKEN_HEADER in self._headers

    def set_api_token(self, token: str) -> None:
        """Attach an API token to every subsequent request."""
        self._headers[TOKEN_HEADER] = token

    async def login(self, username: str, password: str) -> None:
        """Exchange credentials for a session token.

        Args:
            username: Account email
            password: Account password

        Raises:
            AuthenticationError: If authentication fails
        """
        if not self.auth_url:
            raise AuthenticationError("No authentication endpoint configured")

        try:
            response = await self._client.post(
                self.auth_url, json={"email": username, "password": password}
            )
        except httpx.RequestError as e:
            raise AuthenticationError(f"Connection failed: {e}")

        if response.status_code in (401, 403):
            raise AuthenticationError("Invalid username or password")
        if response.status_code >= 400:
            raise AuthenticationError(f"Authentication failed: HTTP {response.status_code}")

        try:
            token = response.json()["token"]
        except (ValueError, KeyError, TypeError):
            raise AuthenticationError("Invalid response from server")

        self.set_api_token(token)
        logger.debug("Logged in as %s", username)

    async def close(self) -> None:
        """Close the underlying HTTP client if this session created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> httpx.Response:
        """Send a single request and map failures onto the exception taxonomy.

        Args:
            method: HTTP method
            path: Endpoint path relative to the API root
            params: Query parameters
            headers: Extra headers for this request
            body: JSON body

        Returns:
            HTTP response with a non-error status

        Raises:
            AuthenticationError: On 401
            PermissionError: On 403
            ResourceNotFoundError: On 404
            APIError: On any other HTTP error status
            NetworkError: On connection failures and timeouts
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        request_headers = {**self._headers, **(headers or {})}

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                headers=request_headers,
                json=body,
            )
        except httpx.TimeoutException:
            raise NetworkError(f"Request to {path} timed out")
        except httpx.RequestError as e:
            raise NetworkError(f"Network error: {e}")

        logger.debug("%s %s -> %d", method, path, response.status_code)

        if response.status_code == 401:
            raise AuthenticationError("Authentication failed or expired")
        elif response.status_code == 403:
            raise PermissionError("Permission denied for this operation")
        elif response.status_code == 404:
            raise ResourceNotFoundError("resource", path)
        elif response.status_code >= 400:
            raise APIError(self._extract_error_message(response), status_code=response.status_code)

        return response

    @staticmethod
    def _decode(response: httpx.Response, context: str) -> Any:
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON in response: {e}", context=context)

    def _extract_error_message(self, response: httpx.Response) -> str:
        """Extract error message from response.

        Args:
            response: HTTP response

        Returns:
            Error message
        """
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("msg"):
                return str(error["msg"])
            if data.get("message"):
                return str(data["message"])
        return response.text or f"HTTP {response.status_code}"

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a GET request and decode the JSON body."""
        response = await self._request("GET", path, params=params, headers=headers)
        return self._decode(response, f"GET {path}")

    async def post_json(
        self,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a POST request and decode the JSON body."""
        response = await self._request("POST", path, params=params, headers=headers, body=body)
        return self._decode(response, f"POST {path}")

    async def delete_json(
        self,
        path: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a DELETE request, optionally with a body, and decode the JSON reply."""
        response = await self._request("DELETE", path, params=params, headers=headers, body=body)
        return self._decode(response, f"DELETE {path}")

    async def delete(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Make a DELETE request and discard the body."""
        await self._request("DELETE", path, params=params, headers=headers)
