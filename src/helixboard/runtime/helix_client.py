"""
HTTP client for the backing HelixDB instance.

Queries are POSTed to {base_url}/{query_name}; introspection and graph
inspection endpoints are plain GETs. An API key, when configured, is sent
as the `x-api-key` header.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..core.errors import RemoteMetadataError, ServiceError
from ..core.query_types import IntrospectData

API_KEY_HEADER = "x-api-key"


class HelixClient:
    """
    Async HTTP client for HelixDB.

    Usage:
        client = HelixClient("http://localhost:6969")
        result = await client.query("getUserById", {"user_id": "123"})
        data = await client.fetch_introspect()
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HelixDB client.

        Args:
            base_url: HelixDB base URL (e.g., "http://localhost:6969")
            api_key: Optional API key sent as x-api-key
            timeout: HTTP timeout in seconds (None disables the timeout)
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def resolve_url(self, url_or_endpoint: str) -> str:
        """
        Resolve an endpoint against base_url. Full http(s) URLs pass through.

        Examples:
            "introspect"        -> "http://localhost:6969/introspect"
            "/nodes-edges"      -> "http://localhost:6969/nodes-edges"
            "https://x/y"       -> "https://x/y"
        """
        if url_or_endpoint.startswith(("http://", "https://")):
            return url_or_endpoint
        base = self.base_url.rstrip("/")
        endpoint = url_or_endpoint.lstrip("/")
        return f"{base}/{endpoint}"

    async def request(
        self,
        method: str,
        url_or_endpoint: str,
        data: Any = None,
    ) -> Any:
        """
        Send a request and decode the JSON response.

        Args:
            method: HTTP method
            url_or_endpoint: Full URL or endpoint relative to base_url
            data: JSON body (omitted when None)

        Returns:
            Decoded JSON response

        Raises:
            ServiceError: If the request fails or HelixDB returns a non-2xx status
        """
        client = await self._get_client()
        url = self.resolve_url(url_or_endpoint)

        headers = {}
        if self.api_key:
            headers[API_KEY_HEADER] = self.api_key

        try:
            if data is None:
                response = await client.request(method, url, headers=headers)
            else:
                response = await client.request(method, url, headers=headers, json=data)
        except httpx.RequestError as e:
            raise ServiceError(url=url, status_code=0, message=str(e)) from e

        if not response.is_success:
            raise ServiceError(
                url=url,
                status_code=response.status_code,
                message=response.text or "Unknown error",
            )

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(url=url, status_code=0, message=f"Invalid JSON response: {e}") from e

    async def get(self, url_or_endpoint: str) -> Any:
        return await self.request("GET", url_or_endpoint)

    async def post(self, url_or_endpoint: str, data: Any) -> Any:
        return await self.request("POST", url_or_endpoint, data)

    async def query(self, query_name: str, params: dict[str, Any]) -> Any:
        """
        Execute a named HelixDB query.

        Raises:
            ServiceError: If the query call fails
        """
        return await self.post(query_name, params)

    async def fetch_introspect(self) -> IntrospectData:
        """
        Fetch schema and query metadata from {base_url}/introspect.

        Raises:
            RemoteMetadataError: If the call fails or the payload is not valid
        """
        url = self.resolve_url("introspect")
        try:
            payload = await self.get(url)
        except ServiceError as e:
            raise RemoteMetadataError(url, str(e)) from e

        try:
            return IntrospectData.model_validate(payload)
        except ValidationError as e:
            raise RemoteMetadataError(url, f"Invalid introspect payload: {e}") from e
