"""Supervisor review endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from jobsite_reports.api.models import JobOut

if TYPE_CHECKING:
    from jobsite_reports.containers import AppContainer

router = APIRouter(prefix="/review", tags=["review"])


def _get_supervisor_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.supervisor_token


async def require_supervisor(
    x_supervisor_token: str | None = Header(default=None),
    supervisor_token: str = Depends(_get_supervisor_token),
) -> None:
    """Ensure requests include a valid supervisor token."""
    if not x_supervisor_token or x_supervisor_token != supervisor_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/jobs", dependencies=[Depends(require_supervisor)])
async def review_queue(request: Request) -> dict[str, list[JobOut]]:
    """Return jobs pending review or approved, newest first."""
    container: AppContainer = request.app.state.container
    jobs = container.job_service.list_review_queue()
    return {"jobs": [JobOut.from_job(job) for job in jobs]}


@router.post("/jobs/{job_id}/approve", dependencies=[Depends(require_supervisor)])
async def approve_job(job_id: str, request: Request) -> JobOut:
    """Generate the job report and approve the job."""
    container: AppContainer = request.app.state.container
    job = await container.approval_service.approve(job_id)
    return JobOut.from_job(job)


@router.post(
    "/jobs/{job_id}/undo-approval", dependencies=[Depends(require_supervisor)]
)
async def undo_approval(job_id: str, request: Request) -> JobOut:
    """Send an approved job back to review."""
    container: AppContainer = request.app.state.container
    return JobOut.from_job(container.job_service.undo_approval(job_id))


@router.post("/jobs/{job_id}/complete", dependencies=[Depends(require_supervisor)])
async def complete_job(job_id: str, request: Request) -> JobOut:
    """Mark an approved job as completed."""
    container: AppContainer = request.app.state.container
    return JobOut.from_job(container.job_service.mark_complete(job_id))
