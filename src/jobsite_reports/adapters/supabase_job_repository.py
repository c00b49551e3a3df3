"""Supabase-backed job repository."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from jobsite_reports.adapters.supabase_errors import record_store_errors
from jobsite_reports.domain.errors import RecordStoreError
from jobsite_reports.domain.jobs import Job, JobStatus
from jobsite_reports.services.jobs import JobRepository

logger = logging.getLogger(__name__)

_JOB_COLUMNS = "id, address, status, pdf_url, created_at"


@dataclass
class SupabaseJobRepository(JobRepository):
    """Supabase implementation for job persistence."""

    client: Client

    def create_job(self, address: str) -> Job:
        """Insert an active job and return the stored row."""
        with record_store_errors("create job"):
            response = (
                self.client.table("jobs")
                .insert({"address": address, "status": JobStatus.ACTIVE.value})
                .execute()
            )
        if not response.data:
            raise RecordStoreError("create job failed: no row returned")
        return _job_from_row(response.data[0])

    def get_active_job(self) -> Job | None:
        """Return the newest active job."""
        with record_store_errors("get active job"):
            response = (
                self.client.table("jobs")
                .select(_JOB_COLUMNS)
                .eq("status", JobStatus.ACTIVE.value)
                .order("created_at", desc=True)
                .limit(2)
                .execute()
            )
        rows = response.data or []
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning("More than one active job found; using %s", rows[0]["id"])
        return _job_from_row(rows[0])

    def get_job(self, job_id: str) -> Job | None:
        """Return a job by id, if present."""
        with record_store_errors("get job"):
            response = (
                self.client.table("jobs")
                .select(_JOB_COLUMNS)
                .eq("id", job_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _job_from_row(response.data[0])

    def list_jobs(self, statuses: Iterable[JobStatus]) -> list[Job]:
        """Return jobs in the given statuses, newest first."""
        with record_store_errors("list jobs"):
            response = (
                self.client.table("jobs")
                .select(_JOB_COLUMNS)
                .in_("status", sorted(status.value for status in statuses))
                .order("created_at", desc=True)
                .execute()
            )
        return [_job_from_row(row) for row in response.data or []]

    def update_job_status(self, job_id: str, status: JobStatus) -> None:
        """Set the status of a job."""
        with record_store_errors("update job status"):
            self.client.table("jobs").update({"status": status.value}).eq(
                "id", job_id
            ).execute()

    def set_pdf_url(self, job_id: str, pdf_url: str | None) -> None:
        """Set or clear the report link of a job."""
        with record_store_errors("save PDF link"):
            self.client.table("jobs").update({"pdf_url": pdf_url}).eq(
                "id", job_id
            ).execute()

    def revert_approval(self, job_id: str) -> None:
        """Return a job to review and clear its report link."""
        with record_store_errors("undo approval"):
            self.client.table("jobs").update(
                {"status": JobStatus.PENDING_REVIEW.value, "pdf_url": None}
            ).eq("id", job_id).execute()


def _job_from_row(row: dict[str, object]) -> Job:
    created = row.get("created_at")
    return Job(
        id=str(row["id"]),
        address=str(row.get("address") or ""),
        status=JobStatus(row["status"]),
        pdf_url=row.get("pdf_url") or None,
        created_at=datetime.fromisoformat(created)
        if isinstance(created, str) and created
        else None,
    )
