"""Object path derivation for photos and reports."""

import re
from uuid import uuid4

_SEPARATORS = re.compile(r"[\s_]")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")

SHORT_ID_LENGTH = 8


def sanitize_for_path(value: str) -> str:
    """Convert free text into a lowercase, hyphen-separated path segment."""
    cleaned = _SEPARATORS.sub("-", value.lower())
    cleaned = _DISALLOWED.sub("", cleaned)
    cleaned = _HYPHEN_RUNS.sub("-", cleaned)
    return cleaned.strip("-")


def short_job_id(job_id: str) -> str:
    """Return the first eight characters of a job id."""
    return job_id[:SHORT_ID_LENGTH]


def job_folder(address: str, job_id: str) -> str:
    """Return the folder that holds every object of a job."""
    return f"jobs/{sanitize_for_path(address)}_{short_job_id(job_id)}"


def photo_object_path(
    address: str,
    job_id: str,
    category_name: str,
    extension: str,
    photo_id: str | None = None,
) -> str:
    """Return the object path for a newly uploaded photo.

    A random UUID names the file unless ``photo_id`` is given, so two uploads
    never share a path.
    """
    filename = f"{photo_id or uuid4()}.{extension}"
    category = sanitize_for_path(category_name)
    return f"{job_folder(address, job_id)}/{category}/{filename}"


def report_object_path(address: str, job_id: str) -> str:
    """Return the object path of a job's PDF report."""
    stem = f"{sanitize_for_path(address)}_{short_job_id(job_id)}"
    return f"{job_folder(address, job_id)}/{stem}.pdf"
