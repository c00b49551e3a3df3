"""Blob storage interface shared by photo and report flows."""

from typing import Protocol


class ObjectStore(Protocol):
    """Bucket-scoped object store with stable public URLs."""

    def put(self, path: str, data: bytes, content_type: str) -> None:
        """Store bytes at the object path, replacing any existing object."""

    def url_for(self, path: str) -> str:
        """Return the public URL of an object path."""

    def path_for(self, url: str) -> str:
        """Return the object path behind a public URL."""

    def delete(self, path: str) -> None:
        """Delete an existing object."""
