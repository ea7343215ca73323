"""Tests for human gallery review."""

import pytest

from studio_engine.domain.galleries import Gallery, GalleryPhoto
from studio_engine.errors import InvalidStatusTransition
from studio_engine.services.review import GalleryReviewService, PhotoUpdate
from tests.conftest import InMemoryGalleryRepository, make_gallery, make_photos


def _setup(
    repository: InMemoryGalleryRepository, status: str = "ready"
) -> tuple[GalleryReviewService, Gallery, list[GalleryPhoto]]:
    gallery = make_gallery(status=status)
    photos = make_photos(gallery, 5)
    repository.add(gallery, photos)
    return GalleryReviewService(repository), gallery, photos


def test_select_and_reject_update_counts(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, photos = _setup(gallery_repository)

    updated = service.apply_updates(
        gallery.id,
        [
            PhotoUpdate(photos[0].id, selected=True),
            PhotoUpdate(photos[1].id, selected=True),
            PhotoUpdate(photos[2].id, rejected=True, rejection_reason="blurry"),
        ],
    )

    assert updated.selected_photos == 2
    assert updated.total_photos == 5
    assert gallery_repository.get_gallery(gallery.id) == updated
    rejected = gallery_repository.photos[photos[2].id]
    assert rejected.rejected is True
    assert rejected.rejection_reason == "blurry"
    assert gallery_repository.photos[photos[0].id].auto_selected is False


def test_reject_clears_selection_and_highlight(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, photos = _setup(gallery_repository)
    service.apply_updates(
        gallery.id, [PhotoUpdate(photos[0].id, selected=True, is_highlight=True)]
    )

    updated = service.apply_updates(
        gallery.id, [PhotoUpdate(photos[0].id, rejected=True)]
    )

    photo = gallery_repository.photos[photos[0].id]
    assert (photo.selected, photo.rejected, photo.is_highlight) == (False, True, False)
    assert updated.selected_photos == 0


def test_select_clears_rejection(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, photos = _setup(gallery_repository)
    service.apply_updates(
        gallery.id, [PhotoUpdate(photos[3].id, rejected=True, rejection_reason="dark")]
    )

    service.apply_updates(gallery.id, [PhotoUpdate(photos[3].id, selected=True)])

    photo = gallery_repository.photos[photos[3].id]
    assert photo.selected is True
    assert photo.rejected is False
    assert photo.rejection_reason is None
    assert photo.human_decided is True


def test_highlight_requires_selection(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, photos = _setup(gallery_repository)

    service.apply_updates(gallery.id, [PhotoUpdate(photos[4].id, is_highlight=True)])

    assert gallery_repository.photos[photos[4].id].is_highlight is False


def test_unknown_photo_raises(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, _ = _setup(gallery_repository)
    other_photo = make_photos(make_gallery(), 1)[0]

    with pytest.raises(KeyError):
        service.apply_updates(gallery.id, [PhotoUpdate(other_photo.id, selected=True)])


def test_advance_status_moves_forward_only(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, _ = _setup(gallery_repository, status="processing")

    assert service.advance_status(gallery.id, "ready").status == "ready"
    assert service.advance_status(gallery.id, "delivered").status == "delivered"
    assert service.advance_status(gallery.id, "delivered").status == "delivered"

    with pytest.raises(InvalidStatusTransition) as excinfo:
        service.advance_status(gallery.id, "processing")
    assert excinfo.value.current == "delivered"
    assert gallery_repository.get_gallery(gallery.id).status == "delivered"


def test_advance_status_rejects_unknown_status(
    gallery_repository: InMemoryGalleryRepository,
) -> None:
    service, gallery, _ = _setup(gallery_repository)

    with pytest.raises(InvalidStatusTransition):
        service.advance_status(gallery.id, "archived")  # type: ignore[arg-type]
