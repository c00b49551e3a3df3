"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from jobsite_reports.adapters.minio_object_store import MinioObjectStore
from jobsite_reports.adapters.photo_fetcher import HttpxPhotoFetcher
from jobsite_reports.adapters.supabase_job_repository import SupabaseJobRepository
from jobsite_reports.adapters.supabase_photo_repository import (
    SupabasePhotoRepository,
)
from jobsite_reports.config import Settings
from jobsite_reports.services.approval import ApprovalService
from jobsite_reports.services.jobs import JobService
from jobsite_reports.services.photos import PhotoService
from jobsite_reports.services.reports import ReportBuilder


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    job_service: JobService
    photo_service: PhotoService
    approval_service: ApprovalService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    job_repository = SupabaseJobRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    object_store = MinioObjectStore.from_settings(resolved_settings)
    photo_fetcher = HttpxPhotoFetcher.create(
        timeout=resolved_settings.photo_fetch_timeout
    )
    job_service = JobService(repository=job_repository, photos=photo_repository)
    photo_service = PhotoService(
        repository=photo_repository, object_store=object_store
    )
    approval_service = ApprovalService(
        job_service=job_service,
        job_repository=job_repository,
        photo_service=photo_service,
        report_builder=ReportBuilder(photo_fetcher),
        object_store=object_store,
    )

    async def close_resources() -> None:
        await photo_fetcher.close()

    return AppContainer(
        settings=resolved_settings,
        job_service=job_service,
        photo_service=photo_service,
        approval_service=approval_service,
        close_resources=close_resources,
    )
