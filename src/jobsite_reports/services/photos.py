"""Photo upload, listing and deletion across the record and blob stores."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from jobsite_reports.domain.errors import (
    ConfigurationError,
    PhotoDeletionError,
    StorageDeleteError,
    ValidationError,
)
from jobsite_reports.domain.jobs import CategoryPhotos, Job, PhotoCategory, PhotoRecord
from jobsite_reports.domain.paths import photo_object_path
from jobsite_reports.services.jobs import PhotoCountSource
from jobsite_reports.services.storage import ObjectStore

logger = logging.getLogger(__name__)

_EXTENSION = re.compile(r"[a-z0-9]+")


class PhotoRepository(PhotoCountSource, Protocol):
    """Persistence interface for photo metadata and categories."""

    def insert_photo(
        self, job_id: str, category_id: str, storage_url: str
    ) -> PhotoRecord:
        """Create a photo row and return it."""

    def delete_photo(self, storage_url: str, job_id: str) -> int:
        """Delete photo rows matching the URL and job; return rows deleted."""


@dataclass
class PhotoService:
    """Keeps photo blobs and their metadata rows in step."""

    repository: PhotoRepository
    object_store: ObjectStore

    def list_categories(self) -> list[PhotoCategory]:
        """Return photo categories in display order."""
        return self.repository.list_categories()

    def get_category(self, category_id: str) -> PhotoCategory:
        """Return a category by id or raise if it is unknown."""
        for category in self.repository.list_categories():
            if category.id == category_id:
                return category
        raise ValidationError(f"Unknown photo category {category_id}")

    def upload_photo(
        self,
        job: Job,
        category: PhotoCategory,
        data: bytes,
        extension: str,
    ) -> PhotoRecord:
        """Store a photo and record where it lives."""
        extension = extension.strip().lstrip(".").lower()
        if not extension:
            raise ValidationError("A file extension is required for photo uploads")
        if not _EXTENSION.fullmatch(extension):
            raise ValidationError(f"Invalid photo file extension: {extension!r}")
        if not data:
            raise ValidationError("Photo upload is empty")
        path = photo_object_path(job.address, job.id, category.name, extension)
        logger.info("Uploading photo for job %s to %s", job.id, path)
        self.object_store.put(path, data, content_type=_image_content_type(extension))
        url = self.object_store.url_for(path)
        record = self.repository.insert_photo(job.id, category.id, url)
        logger.info("Saved photo metadata %s for job %s", record.id, job.id)
        return record

    def list_photos(self, job_id: str, category_id: str) -> list[str]:
        """Return photo URLs for one category of a job."""
        return self.repository.list_photo_urls(job_id, category_id)

    async def load_job_photos(self, job_id: str) -> list[CategoryPhotos]:
        """Load every category's photos for a job, categories in sort order."""
        categories = self.repository.list_categories()
        results = await asyncio.gather(
            *(
                asyncio.to_thread(self.repository.list_photo_urls, job_id, category.id)
                for category in categories
            )
        )
        return [
            CategoryPhotos(category=category, photo_urls=list(urls))
            for category, urls in zip(categories, results, strict=True)
        ]

    async def collect_photo_urls(self, job_id: str) -> list[str]:
        """Return all photo URLs of a job in category order."""
        grouped = await self.load_job_photos(job_id)
        return [url for group in grouped for url in group.photo_urls]

    def delete_photo(self, storage_url: str, job_id: str) -> None:
        """Remove a photo from storage and from the record store.

        The metadata row is always removed when possible; a storage failure is
        reported only after that delete succeeded.
        """
        path = self.object_store.path_for(storage_url)
        storage_error: StorageDeleteError | ConfigurationError | None = None
        try:
            self.object_store.delete(path)
        except (StorageDeleteError, ConfigurationError) as exc:
            logger.warning("Failed to delete %s from storage: %s", path, exc)
            storage_error = exc

        deleted = self.repository.delete_photo(storage_url, job_id)
        if deleted == 0:
            logger.warning(
                "No photo record found for %s in job %s", storage_url, job_id
            )

        if storage_error is not None:
            raise PhotoDeletionError(storage_url, storage_error) from storage_error
        logger.info("Deleted photo %s from job %s", storage_url, job_id)


def _image_content_type(extension: str) -> str:
    if extension == "jpg":
        return "image/jpeg"
    return f"image/{extension}"
