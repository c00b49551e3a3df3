"""Approve-and-generate saga for supervisor review."""

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace

from jobsite_reports.domain.errors import (
    ApprovalError,
    ApprovalStep,
    JobsiteError,
    ReportRenderError,
)
from jobsite_reports.domain.jobs import Job, JobStatus
from jobsite_reports.domain.paths import report_object_path
from jobsite_reports.services.jobs import JobRepository, JobService
from jobsite_reports.services.photos import PhotoService
from jobsite_reports.services.reports import ReportBuilder
from jobsite_reports.services.storage import ObjectStore

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class ApprovalService:
    """Runs report generation, upload and approval as ordered steps.

    Steps are not rolled back. When a later step fails, the earlier ones stay
    applied and the raised ``ApprovalError`` names the failing step; calling
    ``approve`` again re-renders and overwrites the report at the same path.
    """

    job_service: JobService
    job_repository: JobRepository
    photo_service: PhotoService
    report_builder: ReportBuilder
    object_store: ObjectStore

    async def approve(self, job_id: str) -> Job:
        """Generate and store the job report, then mark the job approved."""
        job = self.job_service.ensure_can_approve(job_id)
        logger.info("Approving job %s", job_id)

        with _step(ApprovalStep.GATHER_PHOTOS):
            photo_urls = await self.photo_service.collect_photo_urls(job_id)
        logger.info("Found %d photos for job %s", len(photo_urls), job_id)

        with _step(ApprovalStep.RENDER_REPORT):
            if not job.address.strip():
                raise ReportRenderError("Job address is required for PDF generation")
            pdf_bytes = await self.report_builder.build(job.address, photo_urls)

        path = report_object_path(job.address, job.id)
        with _step(ApprovalStep.UPLOAD_REPORT):
            await asyncio.to_thread(
                self.object_store.put, path, pdf_bytes, content_type=PDF_CONTENT_TYPE
            )
        pdf_url = self.object_store.url_for(path)
        logger.info("Report for job %s uploaded to %s", job_id, pdf_url)

        with _step(ApprovalStep.SAVE_REPORT_URL):
            await asyncio.to_thread(self.job_repository.set_pdf_url, job_id, pdf_url)

        with _step(ApprovalStep.UPDATE_STATUS):
            await asyncio.to_thread(self.job_service.mark_approved, job_id)

        return replace(job, status=JobStatus.APPROVED, pdf_url=pdf_url)


@contextmanager
def _step(step: ApprovalStep) -> Iterator[None]:
    try:
        yield
    except JobsiteError as exc:
        logger.error("Approval failed during %s: %s", step.label, exc)
        raise ApprovalError(step, exc) from exc
