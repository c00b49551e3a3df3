"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from jobsite_reports.api.models import (
    CategoryOut,
    CategoryPhotosOut,
    JobCreate,
    JobDetailOut,
    JobOut,
    PhotoOut,
)
from jobsite_reports.api.review import router as review_router
from jobsite_reports.app_logging import configure_logging
from jobsite_reports.containers import AppContainer
from jobsite_reports.domain.errors import (
    ApprovalError,
    ConfigurationError,
    InvalidTransitionError,
    JobNotFoundError,
    JobsiteError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(review_router)

    @app.exception_handler(JobNotFoundError)
    async def not_found(_: Request, exc: JobNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition(
        _: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def invalid_request(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationError)
    async def misconfigured(_: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ApprovalError)
    async def approval_failed(_: Request, exc: ApprovalError) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "step": exc.step.value},
        )

    @app.exception_handler(JobsiteError)
    async def upstream_failed(_: Request, exc: JobsiteError) -> JSONResponse:
        logger.error("Request failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/categories")
    async def list_categories(request: Request) -> dict[str, list[CategoryOut]]:
        """Return photo categories in display order."""
        state_container: AppContainer = request.app.state.container
        categories = state_container.photo_service.list_categories()
        return {"categories": [CategoryOut.from_category(c) for c in categories]}

    @app.post("/jobs", status_code=status.HTTP_201_CREATED)
    async def create_job(payload: JobCreate, request: Request) -> JobOut:
        """Start a new job for a site address."""
        state_container: AppContainer = request.app.state.container
        job = state_container.job_service.create_job(payload.address)
        return JobOut.from_job(job)

    @app.get("/jobs/active")
    async def active_job(request: Request) -> JobOut:
        """Return the job currently being documented."""
        state_container: AppContainer = request.app.state.container
        job = state_container.job_service.get_active_job()
        if job is None:
            raise HTTPException(status_code=404, detail="No active job")
        return JobOut.from_job(job)

    @app.get("/jobs/{job_id}")
    async def job_detail(job_id: str, request: Request) -> JobDetailOut:
        """Return a job with its photos grouped by category."""
        state_container: AppContainer = request.app.state.container
        job = state_container.job_service.get_job(job_id)
        groups = await state_container.photo_service.load_job_photos(job_id)
        return JobDetailOut(
            job=JobOut.from_job(job),
            photo_count=state_container.job_service.photo_count(job_id),
            categories=[CategoryPhotosOut.from_group(group) for group in groups],
        )

    @app.post(
        "/jobs/{job_id}/categories/{category_id}/photos",
        status_code=status.HTTP_201_CREATED,
    )
    async def upload_photo(
        job_id: str, category_id: str, extension: str, request: Request
    ) -> PhotoOut:
        """Upload the raw request body as a photo for a category."""
        state_container: AppContainer = request.app.state.container
        job = state_container.job_service.get_job(job_id)
        category = state_container.photo_service.get_category(category_id)
        data = await request.body()
        record = await asyncio.to_thread(
            state_container.photo_service.upload_photo, job, category, data, extension
        )
        return PhotoOut.from_record(record)

    @app.get("/jobs/{job_id}/categories/{category_id}/photos")
    async def list_photos(
        job_id: str, category_id: str, request: Request
    ) -> dict[str, list[str]]:
        """Return photo URLs for one category of a job."""
        state_container: AppContainer = request.app.state.container
        urls = state_container.photo_service.list_photos(job_id, category_id)
        return {"photo_urls": urls}

    @app.delete("/jobs/{job_id}/photos", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_photo(job_id: str, url: str, request: Request) -> Response:
        """Delete a photo from storage and from the job."""
        state_container: AppContainer = request.app.state.container
        state_container.photo_service.delete_photo(url, job_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/jobs/{job_id}/submit")
    async def submit_job(job_id: str, request: Request) -> JobOut:
        """Submit a job for supervisor review."""
        state_container: AppContainer = request.app.state.container
        job = state_container.job_service.submit_for_review(job_id)
        return JobOut.from_job(job)

    return app
