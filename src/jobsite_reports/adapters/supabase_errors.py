"""Translate Supabase client failures into record store errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from jobsite_reports.domain.errors import RecordStoreError


@contextmanager
def record_store_errors(operation: str) -> Iterator[None]:
    """Raise ``RecordStoreError`` for query and transport failures."""
    try:
        yield
    except APIError as exc:
        raise RecordStoreError(f"{operation} failed: {exc.message or exc}") from exc
    except httpx.HTTPError as exc:
        raise RecordStoreError(f"{operation} failed: {exc}") from exc
