"""Shared test fixtures."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from io import BytesIO
from uuid import uuid4

import pytest
from PIL import Image

from jobsite_reports.adapters.photo_fetcher import PhotoFetcher
from jobsite_reports.config import Settings
from jobsite_reports.containers import AppContainer
from jobsite_reports.domain.errors import (
    PhotoFetchError,
    RecordStoreError,
    StorageDeleteError,
    StorageWriteError,
)
from jobsite_reports.domain.jobs import Job, JobStatus, PhotoCategory, PhotoRecord
from jobsite_reports.services.approval import ApprovalService
from jobsite_reports.services.jobs import JobRepository, JobService
from jobsite_reports.services.photos import PhotoRepository, PhotoService
from jobsite_reports.services.reports import ReportBuilder
from jobsite_reports.services.storage import ObjectStore

BASE_URL = "https://minio.test/site-photos"


def make_image_bytes(
    width: int = 40, height: int = 30, color: str = "red", fmt: str = "PNG"
) -> bytes:
    """Return encoded image bytes of the given size."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


@dataclass
class InMemoryJobRepository(JobRepository):
    """In-memory job repository for tests."""

    jobs: dict[str, Job] = field(default_factory=dict)
    failing_operations: set[str] = field(default_factory=set)

    def _check(self, operation: str) -> None:
        if operation in self.failing_operations:
            raise RecordStoreError(f"{operation} failed: connection reset")

    def add(self, address: str, status: JobStatus, job_id: str | None = None) -> Job:
        job = Job(
            id=job_id or str(uuid4()),
            address=address,
            status=status,
            created_at=datetime.now(tz=UTC) + timedelta(microseconds=len(self.jobs)),
        )
        self.jobs[job.id] = job
        return job

    def create_job(self, address: str) -> Job:
        self._check("create_job")
        return self.add(address, JobStatus.ACTIVE)

    def get_active_job(self) -> Job | None:
        active = self.list_jobs([JobStatus.ACTIVE])
        return active[0] if active else None

    def get_job(self, job_id: str) -> Job | None:
        return self.jobs.get(job_id)

    def list_jobs(self, statuses: Iterable[JobStatus]) -> list[Job]:
        wanted = set(statuses)
        matches = [job for job in self.jobs.values() if job.status in wanted]
        return sorted(matches, key=lambda job: job.created_at, reverse=True)

    def update_job_status(self, job_id: str, status: JobStatus) -> None:
        self._check("update_job_status")
        self.jobs[job_id] = replace(self.jobs[job_id], status=status)

    def set_pdf_url(self, job_id: str, pdf_url: str | None) -> None:
        self._check("set_pdf_url")
        self.jobs[job_id] = replace(self.jobs[job_id], pdf_url=pdf_url)

    def revert_approval(self, job_id: str) -> None:
        self._check("revert_approval")
        self.jobs[job_id] = replace(
            self.jobs[job_id], status=JobStatus.PENDING_REVIEW, pdf_url=None
        )


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo and category repository for tests."""

    categories: list[PhotoCategory] = field(default_factory=list)
    photos: list[PhotoRecord] = field(default_factory=list)
    fail_delete: bool = False

    def add_category(
        self, name: str, sort_order: int, required: bool = False
    ) -> PhotoCategory:
        category = PhotoCategory(
            id=str(len(self.categories) + 1),
            name=name,
            sort_order=sort_order,
            required=required,
        )
        self.categories.append(category)
        return category

    def insert_photo(
        self, job_id: str, category_id: str, storage_url: str
    ) -> PhotoRecord:
        record = PhotoRecord(
            id=str(uuid4()),
            job_id=job_id,
            category_id=category_id,
            storage_url=storage_url,
        )
        self.photos.append(record)
        return record

    def list_photo_urls(self, job_id: str, category_id: str) -> list[str]:
        return [
            photo.storage_url
            for photo in self.photos
            if photo.job_id == job_id and photo.category_id == category_id
        ]

    def count_photos(self, job_id: str) -> int:
        return sum(1 for photo in self.photos if photo.job_id == job_id)

    def delete_photo(self, storage_url: str, job_id: str) -> int:
        if self.fail_delete:
            raise RecordStoreError("delete photo metadata failed: timeout")
        remaining = [
            photo
            for photo in self.photos
            if not (photo.storage_url == storage_url and photo.job_id == job_id)
        ]
        deleted = len(self.photos) - len(remaining)
        self.photos = remaining
        return deleted

    def list_categories(self) -> list[PhotoCategory]:
        return sorted(self.categories, key=lambda category: category.sort_order)


@dataclass
class FakeObjectStore(ObjectStore):
    """Object store that keeps objects in a dict."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    fail_put: bool = False
    fail_delete: bool = False

    def put(self, path: str, data: bytes, content_type: str) -> None:
        if self.fail_put:
            raise StorageWriteError(f"Failed to upload {path}: quota exceeded")
        self.objects[path] = (data, content_type)

    def url_for(self, path: str) -> str:
        return f"{BASE_URL}/{path}"

    def path_for(self, url: str) -> str:
        return url.removeprefix(f"{BASE_URL}/")

    def delete(self, path: str) -> None:
        if self.fail_delete or path not in self.objects:
            raise StorageDeleteError(f"Object {path} does not exist")
        del self.objects[path]


@dataclass
class FakePhotoFetcher(PhotoFetcher):
    """Photo fetcher serving canned bytes with optional delays."""

    responses: dict[str, bytes] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    completed: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes:
        await asyncio.sleep(self.delays.get(url, 0))
        self.completed.append(url)
        if url not in self.responses:
            raise PhotoFetchError(f"Failed to download {url}: 404 Not Found")
        return self.responses[url]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        supervisor_token="supervisor-token",
        minio_endpoint="minio.test",
        minio_bucket="site-photos",
    )


@pytest.fixture
def job_repository() -> InMemoryJobRepository:
    return InMemoryJobRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    repository = InMemoryPhotoRepository()
    repository.add_category("Front Elevation", sort_order=1, required=True)
    repository.add_category("Roof_Detail", sort_order=2, required=False)
    return repository


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def photo_fetcher() -> FakePhotoFetcher:
    return FakePhotoFetcher()


@pytest.fixture
def job_service(
    job_repository: InMemoryJobRepository, photo_repository: InMemoryPhotoRepository
) -> JobService:
    return JobService(repository=job_repository, photos=photo_repository)


@pytest.fixture
def photo_service(
    photo_repository: InMemoryPhotoRepository, object_store: FakeObjectStore
) -> PhotoService:
    return PhotoService(repository=photo_repository, object_store=object_store)


@pytest.fixture
def approval_service(
    job_service: JobService,
    job_repository: InMemoryJobRepository,
    photo_service: PhotoService,
    photo_fetcher: FakePhotoFetcher,
    object_store: FakeObjectStore,
) -> ApprovalService:
    return ApprovalService(
        job_service=job_service,
        job_repository=job_repository,
        photo_service=photo_service,
        report_builder=ReportBuilder(photo_fetcher),
        object_store=object_store,
    )


@pytest.fixture
def container(
    settings: Settings,
    job_service: JobService,
    photo_service: PhotoService,
    approval_service: ApprovalService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        job_service=job_service,
        photo_service=photo_service,
        approval_service=approval_service,
        close_resources=close_resources,
    )
