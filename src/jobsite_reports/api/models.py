"""Request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from jobsite_reports.domain.jobs import (
    CategoryPhotos,
    Job,
    JobStatus,
    PhotoCategory,
    PhotoRecord,
)


class JobCreate(BaseModel):
    """Payload for starting a new job."""

    address: str = Field(min_length=1)


class JobOut(BaseModel):
    """Job as returned by the API."""

    id: str
    address: str
    status: JobStatus
    pdf_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_job(cls, job: Job) -> "JobOut":
        return cls(
            id=job.id,
            address=job.address,
            status=job.status,
            pdf_url=job.pdf_url,
            created_at=job.created_at,
        )


class CategoryOut(BaseModel):
    """Photo category as returned by the API."""

    id: str
    name: str
    sort_order: int
    required: bool

    @classmethod
    def from_category(cls, category: PhotoCategory) -> "CategoryOut":
        return cls(
            id=category.id,
            name=category.name,
            sort_order=category.sort_order,
            required=category.required,
        )


class CategoryPhotosOut(BaseModel):
    """Photos filed under one category."""

    category: CategoryOut
    photo_urls: list[str]

    @classmethod
    def from_group(cls, group: CategoryPhotos) -> "CategoryPhotosOut":
        return cls(
            category=CategoryOut.from_category(group.category),
            photo_urls=group.photo_urls,
        )


class JobDetailOut(BaseModel):
    """Job with its photos grouped by category."""

    job: JobOut
    photo_count: int
    categories: list[CategoryPhotosOut]


class PhotoOut(BaseModel):
    """Stored photo metadata."""

    id: str
    job_id: str
    category_id: str
    storage_url: str

    @classmethod
    def from_record(cls, record: PhotoRecord) -> "PhotoOut":
        return cls(
            id=record.id,
            job_id=record.job_id,
            category_id=record.category_id,
            storage_url=record.storage_url,
        )
