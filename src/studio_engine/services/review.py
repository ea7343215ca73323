"""Human review actions on curated galleries."""

from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from studio_engine.domain.galleries import (
    STATUS_ORDER,
    Gallery,
    GalleryPhoto,
    GalleryStatus,
)
from studio_engine.errors import InvalidStatusTransition
from studio_engine.services.runs import RunRegistry


class GalleryReviewRepository(Protocol):
    """Persistence interface for review edits."""

    def get_gallery(self, gallery_id: UUID) -> Gallery | None:
        """Return a gallery by id, if present."""

    def list_photos(self, gallery_id: UUID) -> list[GalleryPhoto]:
        """Return all photos in a gallery."""

    def update_photos(self, photos: list[GalleryPhoto]) -> None:
        """Persist changed photo flags."""

    def update_gallery(self, gallery: Gallery) -> None:
        """Persist gallery counters and status."""


@dataclass(frozen=True)
class PhotoUpdate:
    """A person's change to one photo; ``None`` leaves a flag alone."""

    photo_id: UUID
    selected: bool | None = None
    rejected: bool | None = None
    is_highlight: bool | None = None
    rejection_reason: str | None = None


@dataclass
class GalleryReviewService:
    """Applies manual select, reject and highlight decisions.

    With a registry, edits to a gallery that is being curated raise
    RunAlreadyInProgress instead of racing the run's final save.
    """

    repository: GalleryReviewRepository
    registry: RunRegistry | None = None

    def apply_updates(self, gallery_id: UUID, updates: list[PhotoUpdate]) -> Gallery:
        """Apply updates and return the gallery with a fresh selected count."""
        with self._hold(gallery_id):
            gallery = self._require(gallery_id)
            photos = {
                photo.id: photo for photo in self.repository.list_photos(gallery_id)
            }
            changed: dict[UUID, GalleryPhoto] = {}
            for update in updates:
                current = changed.get(update.photo_id) or photos.get(update.photo_id)
                if current is None:
                    raise KeyError(
                        f"Photo {update.photo_id} is not in gallery {gallery_id}"
                    )
                changed[update.photo_id] = _apply(current, update)

            if changed:
                self.repository.update_photos(list(changed.values()))
            photos.update(changed)
            selected = sum(1 for photo in photos.values() if photo.selected)
            updated = replace(
                gallery, total_photos=len(photos), selected_photos=selected
            )
            self.repository.update_gallery(updated)
            return updated

    def advance_status(self, gallery_id: UUID, status: GalleryStatus) -> Gallery:
        """Move a gallery forward through processing, ready and delivered."""
        with self._hold(gallery_id):
            gallery = self._require(gallery_id)
            if status not in STATUS_ORDER:
                raise InvalidStatusTransition(gallery.status, status)
            if STATUS_ORDER.index(status) < STATUS_ORDER.index(gallery.status):
                raise InvalidStatusTransition(gallery.status, status)
            if status == gallery.status:
                return gallery
            updated = replace(gallery, status=status)
            self.repository.update_gallery(updated)
            return updated

    def _hold(self, gallery_id: UUID) -> AbstractContextManager[object]:
        if self.registry is None:
            return nullcontext()
        return self.registry.hold(gallery_id)

    def _require(self, gallery_id: UUID) -> Gallery:
        gallery = self.repository.get_gallery(gallery_id)
        if gallery is None:
            raise KeyError(f"Gallery {gallery_id} not found")
        return gallery


def _apply(photo: GalleryPhoto, update: PhotoUpdate) -> GalleryPhoto:
    """Apply one update keeping selected and rejected mutually exclusive."""
    result = photo
    if update.selected is not None:
        result = replace(result, selected=update.selected, auto_selected=False)
        if update.selected:
            result = replace(result, rejected=False, rejection_reason=None)
    if update.rejected is not None:
        result = replace(
            result,
            rejected=update.rejected,
            rejection_reason=update.rejection_reason if update.rejected else None,
        )
        if update.rejected:
            result = replace(
                result, selected=False, auto_selected=False, is_highlight=False
            )
    if update.is_highlight is not None:
        result = replace(result, is_highlight=update.is_highlight and result.selected)
    return result
