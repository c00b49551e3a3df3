"""MinIO-backed object store for photos and reports."""

import logging
from dataclasses import dataclass
from io import BytesIO

from minio import Minio
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError as TransportError

from jobsite_reports.config import Settings, require_object_store_credentials
from jobsite_reports.domain.errors import (
    StorageDeleteError,
    StorageWriteError,
    ValidationError,
)
from jobsite_reports.services.storage import ObjectStore

logger = logging.getLogger(__name__)

_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject"}


@dataclass
class MinioObjectStore(ObjectStore):
    """Object store over a single public-read MinIO bucket.

    The SDK client is created on first use so that missing credentials only
    fail the operations that need them.
    """

    endpoint: str
    bucket: str
    secure: bool = True
    access_key: str | None = None
    secret_key: str | None = None
    client: Minio | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MinioObjectStore":
        """Create an object store from application settings."""
        return cls(
            endpoint=settings.minio_endpoint,
            bucket=settings.minio_bucket,
            secure=settings.minio_secure,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
        )

    @property
    def base_url(self) -> str:
        """Public URL prefix of the bucket."""
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.endpoint}/{self.bucket}"

    def put(self, path: str, data: bytes, content_type: str) -> None:
        """Upload bytes to the bucket."""
        client = self._client()
        try:
            client.put_object(
                self.bucket,
                path,
                BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except (MinioException, TransportError) as exc:
            raise StorageWriteError(f"Failed to upload {path}: {exc}") from exc
        logger.info("Uploaded %s (%d bytes)", path, len(data))

    def url_for(self, path: str) -> str:
        """Return the public URL of an object."""
        return f"{self.base_url}/{path}"

    def path_for(self, url: str) -> str:
        """Extract the object path from a public URL of this bucket."""
        prefix = f"{self.base_url}/"
        if url.startswith(prefix):
            path = url[len(prefix) :]
        else:
            _, _, path = url.partition(f"/{self.bucket}/")
        if not path:
            raise ValidationError(f"Invalid storage URL format: {url}")
        return path

    def delete(self, path: str) -> None:
        """Delete an object, failing if it does not exist."""
        client = self._client()
        try:
            client.stat_object(self.bucket, path)
        except S3Error as exc:
            if exc.code in _MISSING_OBJECT_CODES:
                raise StorageDeleteError(f"Object {path} does not exist") from exc
            raise StorageDeleteError(f"Failed to delete {path}: {exc}") from exc
        except (MinioException, TransportError) as exc:
            raise StorageDeleteError(f"Failed to delete {path}: {exc}") from exc
        try:
            client.remove_object(self.bucket, path)
        except (MinioException, TransportError) as exc:
            raise StorageDeleteError(f"Failed to delete {path}: {exc}") from exc
        logger.info("Deleted %s", path)

    def _client(self) -> Minio:
        if self.client is None:
            access_key, secret_key = require_object_store_credentials(
                self.access_key, self.secret_key
            )
            self.client = Minio(
                self.endpoint,
                access_key=access_key,
                secret_key=secret_key,
                secure=self.secure,
            )
        return self.client
