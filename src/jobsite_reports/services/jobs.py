"""Job lifecycle state machine."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Protocol

from jobsite_reports.domain.errors import (
    InvalidTransitionError,
    JobNotFoundError,
    ValidationError,
)
from jobsite_reports.domain.jobs import Job, JobStatus, PhotoCategory

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[tuple[JobStatus, str], JobStatus] = {
    (JobStatus.ACTIVE, "submit"): JobStatus.PENDING_REVIEW,
    (JobStatus.PENDING_REVIEW, "approve"): JobStatus.APPROVED,
    (JobStatus.APPROVED, "undo_approval"): JobStatus.PENDING_REVIEW,
    (JobStatus.APPROVED, "complete"): JobStatus.COMPLETED,
}

REVIEW_STATUSES = frozenset({JobStatus.PENDING_REVIEW, JobStatus.APPROVED})


class JobRepository(Protocol):
    """Persistence interface for jobs."""

    def create_job(self, address: str) -> Job:
        """Insert an active job and return it."""

    def get_active_job(self) -> Job | None:
        """Return the active job, if any."""

    def get_job(self, job_id: str) -> Job | None:
        """Return a job by id, if present."""

    def list_jobs(self, statuses: Iterable[JobStatus]) -> list[Job]:
        """Return jobs in the given statuses, newest first."""

    def update_job_status(self, job_id: str, status: JobStatus) -> None:
        """Set the status of a job."""

    def set_pdf_url(self, job_id: str, pdf_url: str | None) -> None:
        """Set or clear the report link of a job."""

    def revert_approval(self, job_id: str) -> None:
        """Move a job back to review and clear its report link in one update."""


class PhotoCountSource(Protocol):
    """Read access to photo counts used by the submission check."""

    def list_categories(self) -> list[PhotoCategory]:
        """Return categories ordered by sort order."""

    def list_photo_urls(self, job_id: str, category_id: str) -> list[str]:
        """Return photo URLs for a job and category."""

    def count_photos(self, job_id: str) -> int:
        """Return the number of photos recorded for a job."""


def next_status(current: JobStatus, event: str) -> JobStatus:
    """Return the status an event leads to, or raise if it is not allowed."""
    target = _TRANSITIONS.get((current, event))
    if target is None:
        raise InvalidTransitionError(
            f"Cannot {event.replace('_', ' ')} a job that is {current.value}"
        )
    return target


def missing_required_categories(
    categories: Iterable[PhotoCategory], counts: dict[str, int]
) -> list[PhotoCategory]:
    """Return required categories that have no photos in ``counts``."""
    return [
        category
        for category in categories
        if category.required and counts.get(category.id, 0) < 1
    ]


@dataclass
class JobService:
    """Application service for job status transitions."""

    repository: JobRepository
    photos: PhotoCountSource

    def create_job(self, address: str) -> Job:
        """Create a new active job for a site address."""
        cleaned = address.strip()
        if not cleaned:
            raise ValidationError("Job address is required")
        job = self.repository.create_job(cleaned)
        logger.info("Created job %s for %s", job.id, cleaned)
        return job

    def get_active_job(self) -> Job | None:
        """Return the job currently being documented, if any."""
        return self.repository.get_active_job()

    def get_job(self, job_id: str) -> Job:
        """Return a job or raise if it does not exist."""
        job = self.repository.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list_review_queue(self) -> list[Job]:
        """Return jobs waiting for or holding approval, newest first."""
        return self.repository.list_jobs(REVIEW_STATUSES)

    def photo_count(self, job_id: str) -> int:
        """Return how many photos are recorded for a job."""
        return self.photos.count_photos(job_id)

    def submit_for_review(self, job_id: str) -> Job:
        """Send an active job to the supervisor once required photos exist."""
        job = self.get_job(job_id)
        target = next_status(job.status, "submit")
        categories = self.photos.list_categories()
        counts = {
            category.id: len(self.photos.list_photo_urls(job_id, category.id))
            for category in categories
        }
        missing = missing_required_categories(categories, counts)
        if missing:
            names = ", ".join(category.name for category in missing)
            raise ValidationError(
                f"Please add at least one photo to all required categories: {names}"
            )
        self.repository.update_job_status(job_id, target)
        logger.info("Job %s submitted for review", job_id)
        return replace(job, status=target)

    def ensure_can_approve(self, job_id: str) -> Job:
        """Return the job if it may be approved."""
        job = self.get_job(job_id)
        next_status(job.status, "approve")
        return job

    def mark_approved(self, job_id: str) -> None:
        """Record approval; the report link must already be saved."""
        self.repository.update_job_status(job_id, JobStatus.APPROVED)
        logger.info("Job %s approved", job_id)

    def undo_approval(self, job_id: str) -> Job:
        """Return an approved job to review and drop its report link."""
        job = self.get_job(job_id)
        target = next_status(job.status, "undo_approval")
        self.repository.revert_approval(job_id)
        logger.info("Approval undone for job %s", job_id)
        return replace(job, status=target, pdf_url=None)

    def mark_complete(self, job_id: str) -> Job:
        """Close out an approved job."""
        job = self.get_job(job_id)
        target = next_status(job.status, "complete")
        self.repository.update_job_status(job_id, target)
        logger.info("Job %s marked complete", job_id)
        return replace(job, status=target)
