"""Domain models for jobs and their photos."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class JobStatus(StrEnum):
    """Lifecycle states of a job."""

    ACTIVE = "active"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Job:
    """A single field work order."""

    id: str
    address: str
    status: JobStatus
    pdf_url: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PhotoCategory:
    """A named bucket that photos are filed under."""

    id: str
    name: str
    sort_order: int
    required: bool


@dataclass(frozen=True)
class PhotoRecord:
    """Metadata row pointing at a stored photo."""

    id: str
    job_id: str
    category_id: str
    storage_url: str


@dataclass(frozen=True)
class CategoryPhotos:
    """Photos currently filed under one category of a job."""

    category: PhotoCategory
    photo_urls: list[str] = field(default_factory=list)
