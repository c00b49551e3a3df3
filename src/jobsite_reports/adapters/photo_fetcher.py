"""Download stored photos over HTTP."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from jobsite_reports.domain.errors import PhotoFetchError


class PhotoFetcher(Protocol):
    """Interface for retrieving photo bytes by URL."""

    async def fetch(self, url: str) -> bytes:
        """Return the bytes served at the URL."""


@dataclass
class HttpxPhotoFetcher(PhotoFetcher):
    """Photo fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 20.0

    @classmethod
    def create(cls, timeout: float = 20.0) -> "HttpxPhotoFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(), timeout=timeout)

    async def fetch(self, url: str) -> bytes:
        """Download a photo, treating any non-success status as a failure."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PhotoFetchError(f"Failed to download {url}: {exc}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
