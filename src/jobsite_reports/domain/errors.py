"""Error taxonomy for job documentation workflows."""

from enum import StrEnum


class JobsiteError(RuntimeError):
    """Base class for all workflow failures."""


class ValidationError(JobsiteError):
    """A precondition on user input or job state is not met."""


class InvalidTransitionError(ValidationError):
    """The requested status change is not allowed from the current status."""


class JobNotFoundError(ValidationError):
    """No job exists for the given id."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class ConfigurationError(JobsiteError):
    """Required configuration is missing."""


class StorageWriteError(JobsiteError):
    """Writing an object to the blob store failed."""


class StorageDeleteError(JobsiteError):
    """Deleting an object from the blob store failed."""


class RecordStoreError(JobsiteError):
    """A record store query or mutation failed."""


class ReportRenderError(JobsiteError):
    """Assembling the PDF report failed."""


class ApprovalStep(StrEnum):
    """Named steps of the approval saga, in execution order."""

    GATHER_PHOTOS = "gather_photos"
    RENDER_REPORT = "render_report"
    UPLOAD_REPORT = "upload_report"
    SAVE_REPORT_URL = "save_report_url"
    UPDATE_STATUS = "update_status"

    @property
    def label(self) -> str:
        """Human readable step name."""
        return _STEP_LABELS[self]


_STEP_LABELS = {
    ApprovalStep.GATHER_PHOTOS: "photo collection",
    ApprovalStep.RENDER_REPORT: "PDF generation",
    ApprovalStep.UPLOAD_REPORT: "PDF upload",
    ApprovalStep.SAVE_REPORT_URL: "saving the PDF link",
    ApprovalStep.UPDATE_STATUS: "job approval",
}


class ApprovalError(JobsiteError):
    """The approval saga stopped at a named step."""

    def __init__(self, step: ApprovalStep, cause: Exception) -> None:
        super().__init__(f"Failed during {step.label}: {cause}")
        self.step = step
        self.cause = cause


class PhotoDeletionError(JobsiteError):
    """The photo record was removed but its stored object was not."""

    def __init__(self, storage_url: str, cause: Exception) -> None:
        super().__init__(
            "Photo deleted from database but failed to delete from storage: "
            f"{cause}"
        )
        self.storage_url = storage_url
        self.cause = cause


class PhotoFetchError(JobsiteError):
    """Downloading a stored photo failed."""
