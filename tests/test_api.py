"""Tests for crew-facing HTTP endpoints."""

from fastapi.testclient import TestClient

from jobsite_reports.api.app import create_app
from jobsite_reports.domain.jobs import JobStatus
from tests.conftest import (
    BASE_URL,
    FakeObjectStore,
    InMemoryJobRepository,
    InMemoryPhotoRepository,
    make_image_bytes,
)


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_and_fetch_active_job(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/jobs/active").status_code == 404

    created = client.post("/jobs", json={"address": "3 Wharf St"})
    active = client.get("/jobs/active")

    assert created.status_code == 201
    assert created.json()["status"] == "active"
    assert active.json()["id"] == created.json()["id"]


def test_blank_address_is_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/jobs", json={"address": "   "})

    assert response.status_code == 422


def test_categories_listed_in_order(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/categories")

    names = [category["name"] for category in response.json()["categories"]]
    assert names == ["Front Elevation", "Roof_Detail"]


def test_photo_upload_listing_and_submit(
    container, object_store: FakeObjectStore
) -> None:
    client = TestClient(create_app(container))
    job_id = client.post("/jobs", json={"address": "3 Wharf St"}).json()["id"]

    blocked = client.post(f"/jobs/{job_id}/submit")
    assert blocked.status_code == 422
    assert "Front Elevation" in blocked.json()["detail"]

    uploaded = client.post(
        f"/jobs/{job_id}/categories/1/photos",
        params={"extension": "png"},
        content=make_image_bytes(),
    )
    assert uploaded.status_code == 201
    url = uploaded.json()["storage_url"]
    assert url.startswith(f"{BASE_URL}/jobs/3-wharf-st_")
    assert len(object_store.objects) == 1

    listed = client.get(f"/jobs/{job_id}/categories/1/photos")
    assert listed.json() == {"photo_urls": [url]}

    detail = client.get(f"/jobs/{job_id}").json()
    assert detail["photo_count"] == 1
    assert detail["categories"][0]["photo_urls"] == [url]

    submitted = client.post(f"/jobs/{job_id}/submit")
    assert submitted.status_code == 200
    assert submitted.json()["status"] == "pending_review"

    again = client.post(f"/jobs/{job_id}/submit")
    assert again.status_code == 409


def test_unknown_job_returns_404(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/jobs/nope").status_code == 404
    assert client.post("/jobs/nope/submit").status_code == 404


def test_delete_photo_reports_storage_failure(
    container,
    job_repository: InMemoryJobRepository,
    photo_repository: InMemoryPhotoRepository,
) -> None:
    client = TestClient(create_app(container))
    job = job_repository.add("3 Wharf St", JobStatus.ACTIVE)
    url = f"{BASE_URL}/jobs/3-wharf-st_x/front-elevation/gone.png"
    photo_repository.insert_photo(job.id, "1", url)

    response = client.delete(f"/jobs/{job.id}/photos", params={"url": url})

    assert response.status_code == 502
    assert "failed to delete from storage" in response.json()["detail"]
    assert photo_repository.list_photo_urls(job.id, "1") == []


def test_delete_photo_success(container) -> None:
    client = TestClient(create_app(container))
    job_id = client.post("/jobs", json={"address": "3 Wharf St"}).json()["id"]
    url = client.post(
        f"/jobs/{job_id}/categories/2/photos",
        params={"extension": "png"},
        content=make_image_bytes(),
    ).json()["storage_url"]

    response = client.delete(f"/jobs/{job_id}/photos", params={"url": url})

    assert response.status_code == 204
    assert client.get(f"/jobs/{job_id}/categories/2/photos").json() == {
        "photo_urls": []
    }


def test_upload_with_path_in_extension_is_rejected(
    container, object_store: FakeObjectStore
) -> None:
    client = TestClient(create_app(container))
    job_id = client.post("/jobs", json={"address": "3 Wharf St"}).json()["id"]

    response = client.post(
        f"/jobs/{job_id}/categories/1/photos",
        params={"extension": "png/../../other"},
        content=make_image_bytes(),
    )

    assert response.status_code == 422
    assert object_store.objects == {}
