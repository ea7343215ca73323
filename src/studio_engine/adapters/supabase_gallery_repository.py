"""Supabase repository for galleries and gallery photos."""

from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from studio_engine.adapters.documents import (
    gallery_from_row,
    gallery_to_row,
    photo_from_row,
    photo_to_row,
)
from studio_engine.domain.galleries import Gallery, GalleryPhoto
from studio_engine.services.review import GalleryReviewRepository
from studio_engine.services.runs import GalleryRepository


@dataclass
class SupabaseGalleryRepository(GalleryRepository, GalleryReviewRepository):
    """Supabase-backed gallery storage scoped to one tenant."""

    client: Client
    tenant_id: UUID

    def get_gallery(self, gallery_id: UUID) -> Gallery | None:
        """Return a gallery by id, if present."""
        response = (
            self.client.table("galleries")
            .select("*")
            .eq("tenant_id", str(self.tenant_id))
            .eq("id", str(gallery_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return gallery_from_row(response.data[0])

    def list_photos(self, gallery_id: UUID) -> list[GalleryPhoto]:
        """Return all photos in a gallery ordered by capture time."""
        response = (
            self.client.table("gallery_photos")
            .select("*")
            .eq("tenant_id", str(self.tenant_id))
            .eq("gallery_id", str(gallery_id))
            .order("taken_at")
            .execute()
        )
        return [photo_from_row(row) for row in response.data or []]

    def save_curation(self, gallery: Gallery, photos: Sequence[GalleryPhoto]) -> None:
        """Write all curated photos and the gallery in one pass."""
        if photos:
            rows = [
                {"tenant_id": str(self.tenant_id), **photo_to_row(photo)}
                for photo in photos
            ]
            response = self.client.table("gallery_photos").upsert(rows).execute()
            if not response.data:
                raise RuntimeError("Failed to save curated photos")
        self.update_gallery(gallery)

    def update_photos(self, photos: list[GalleryPhoto]) -> None:
        """Persist review flags for the given photos."""
        for photo in photos:
            row = photo_to_row(photo)
            response = (
                self.client.table("gallery_photos")
                .update(
                    {
                        "selected": row["selected"],
                        "rejected": row["rejected"],
                        "rejection_reason": row["rejection_reason"],
                        "is_highlight": row["is_highlight"],
                        "auto_selected": row["auto_selected"],
                    }
                )
                .eq("tenant_id", str(self.tenant_id))
                .eq("id", str(photo.id))
                .execute()
            )
            if not response.data:
                raise RuntimeError(f"Failed to update photo {photo.id}")

    def update_gallery(self, gallery: Gallery) -> None:
        """Persist gallery counters, status and curation data."""
        payload = gallery_to_row(gallery)
        payload.pop("id")
        response = (
            self.client.table("galleries")
            .update(payload)
            .eq("tenant_id", str(self.tenant_id))
            .eq("id", str(gallery.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update gallery")
