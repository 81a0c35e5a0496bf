"""Shared plumbing for the outbound HTTP sources (TMDB and the release page)."""

from abc import ABC, abstractmethod
from typing import Any, Self

import httpx


class APIError(Exception):
    """An upstream source failed or answered with an error status.

    ``status_code`` is the upstream's HTTP status, or None when no response came back.
    """

    default_message = "External API error"
    default_status: int | None = None

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or self.default_message)
        self.status_code = status_code if status_code is not None else self.default_status


class RateLimitError(APIError):
    """The upstream source throttled us."""

    default_message = "Rate limit exceeded"
    default_status = 429

    def __init__(self, message: str | None = None, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class NotFoundError(APIError):
    """The upstream source has no such resource."""

    default_message = "Resource not found"
    default_status = 404


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After", "")
    return int(value) if value.isdigit() else None


class BaseAPIClient(ABC):
    """A lazily opened ``httpx.AsyncClient`` bound to one upstream source.

    Every way a request can go wrong, timeouts and connection errors included,
    is raised as ``APIError`` so callers only ever handle one exception family.
    Nothing is retried.
    """

    source_name = "upstream"

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def default_headers(self) -> dict[str, str]: ...

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
            )
        return self._client

    async def close(self) -> None:
        """Release the underlying connection pool, if one was opened."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def fetch(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET ``path`` relative to the base URL and return a successful response.

        Raises:
            NotFoundError: On 404.
            RateLimitError: On 429, carrying ``Retry-After`` when sent.
            APIError: On any other error status or transport failure.
        """
        client = await self._get_client()
        try:
            response = await client.request(
                method="GET",
                url=path.lstrip("/"),
                params=params,
                headers=self.default_headers,
            )
        except httpx.TimeoutException as e:
            raise APIError(f"{self.source_name} request timed out: {e}") from e
        except httpx.RequestError as e:
            raise APIError(f"{self.source_name} request failed: {e}") from e

        status = response.status_code
        if status == 404:
            raise NotFoundError(f"{self.source_name} has no resource at {path}")
        if status == 429:
            raise RateLimitError(
                f"{self.source_name} rate limit exceeded", retry_after=_retry_after(response)
            )
        if status >= 400:
            raise APIError(f"{self.source_name} error {status}: {response.text}", status)
        return response

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self.fetch(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from {self.source_name}: {e}") from e

    async def get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        response = await self.fetch(path, params)
        return response.text

    async def __aenter__(self) -> Self:
        await self._get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
