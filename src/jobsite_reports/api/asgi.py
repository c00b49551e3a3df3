"""ASGI entrypoint for the jobsite reports API."""

from jobsite_reports.api.app import create_app
from jobsite_reports.containers import build_container

app = create_app(build_container())
