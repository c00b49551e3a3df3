"""Supabase-backed photo and category repository."""

from dataclasses import dataclass

from supabase import Client

from jobsite_reports.adapters.supabase_errors import record_store_errors
from jobsite_reports.domain.errors import RecordStoreError
from jobsite_reports.domain.jobs import PhotoCategory, PhotoRecord
from jobsite_reports.services.photos import PhotoRepository


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: Client

    def insert_photo(
        self, job_id: str, category_id: str, storage_url: str
    ) -> PhotoRecord:
        """Create a photo metadata row and return it."""
        with record_store_errors("save photo metadata"):
            response = (
                self.client.table("photos")
                .insert(
                    {
                        "job_id": job_id,
                        "category_id": category_id,
                        "storage_url": storage_url,
                    }
                )
                .execute()
            )
        if not response.data:
            raise RecordStoreError("save photo metadata failed: no row returned")
        row = response.data[0]
        return PhotoRecord(
            id=str(row["id"]),
            job_id=str(row["job_id"]),
            category_id=str(row["category_id"]),
            storage_url=row["storage_url"],
        )

    def list_photo_urls(self, job_id: str, category_id: str) -> list[str]:
        """Return stored photo URLs for a job and category."""
        with record_store_errors("list photos"):
            response = (
                self.client.table("photos")
                .select("storage_url")
                .eq("job_id", job_id)
                .eq("category_id", category_id)
                .execute()
            )
        return [
            row["storage_url"] for row in response.data or [] if row.get("storage_url")
        ]

    def count_photos(self, job_id: str) -> int:
        """Return the number of photos recorded for a job."""
        with record_store_errors("count photos"):
            response = (
                self.client.table("photos").select("id").eq("job_id", job_id).execute()
            )
        return len(response.data or [])

    def delete_photo(self, storage_url: str, job_id: str) -> int:
        """Delete photo rows matching the URL and job."""
        with record_store_errors("delete photo metadata"):
            response = (
                self.client.table("photos")
                .delete()
                .eq("storage_url", storage_url)
                .eq("job_id", job_id)
                .execute()
            )
        return len(response.data or [])

    def list_categories(self) -> list[PhotoCategory]:
        """Return photo categories ordered by sort order."""
        with record_store_errors("list photo categories"):
            response = (
                self.client.table("photo_categories")
                .select("id, name, sort_order, required")
                .order("sort_order")
                .execute()
            )
        return [
            PhotoCategory(
                id=str(row["id"]),
                name=str(row.get("name") or ""),
                sort_order=int(row.get("sort_order") or 0),
                required=row.get("required") is True,
            )
            for row in response.data or []
        ]
