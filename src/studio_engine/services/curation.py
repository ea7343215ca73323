"""Gallery curation: score, rank, select and highlight a photo batch."""

import asyncio
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID

from studio_engine.domain.galleries import (
    STATUS_PROCESSING,
    STATUS_READY,
    CategoryBreakdown,
    CurationData,
    CurationError,
    CurationResult,
    Gallery,
    GalleryPhoto,
    PhotoScore,
)
from studio_engine.errors import CurationAbortedError, PhotoScoringError
from studio_engine.services.scoring import PhotoScorer

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurationConfig:
    """Selection and highlight policy for curation runs."""

    default_selection_ratio: float = 0.35
    highlight_quality_threshold: float = 90.0
    highlight_top_fraction: float = 0.10
    photo_timeout_seconds: float | None = 5.0
    max_concurrency: int = 8
    prioritize_emotions: bool = False
    max_category_share: float | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.default_selection_ratio <= 1.0:
            raise ValueError("default_selection_ratio must be within [0, 1]")
        if not 0.0 <= self.highlight_top_fraction <= 1.0:
            raise ValueError("highlight_top_fraction must be within [0, 1]")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        share = self.max_category_share
        if share is not None and not 0.0 < share <= 1.0:
            raise ValueError("max_category_share must be within (0, 1]")


@dataclass
class GalleryCurator:
    """Runs a curation pass over one gallery's photos."""

    scorer: PhotoScorer = field(default_factory=PhotoScorer)
    config: CurationConfig = field(default_factory=CurationConfig)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    async def curate(
        self,
        gallery: Gallery,
        photos: Sequence[GalleryPhoto],
        target_selected_count: int | None = None,
    ) -> CurationResult:
        """Score the batch, then select and highlight photos.

        Per-photo scoring failures are reported in the result and never
        abort the run. Inputs are left untouched; the result carries the
        updated gallery and photos.
        """
        _validate_batch(gallery, photos, target_selected_count)
        scores, errors = await self.score_batch(photos)
        return self.select(gallery, photos, scores, errors, target_selected_count)

    async def score_batch(
        self, photos: Sequence[GalleryPhoto]
    ) -> tuple[dict[UUID, PhotoScore], list[CurationError]]:
        """Score photos concurrently, collecting per-photo errors."""
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        timeout = self.config.photo_timeout_seconds

        async def score_one(photo: GalleryPhoto) -> PhotoScore | CurationError:
            async with semaphore:
                try:
                    return await asyncio.wait_for(
                        asyncio.to_thread(
                            self.scorer.score, photo.raw_metrics, photo.id
                        ),
                        timeout=timeout,
                    )
                except PhotoScoringError as exc:
                    return CurationError(photo_id=photo.id, reason=exc.reason)
                except TimeoutError:
                    return CurationError(
                        photo_id=photo.id,
                        reason=f"scoring timed out after {timeout}s",
                    )

        outcomes = await asyncio.gather(*(score_one(photo) for photo in photos))
        scores: dict[UUID, PhotoScore] = {}
        errors: list[CurationError] = []
        for photo, outcome in zip(photos, outcomes, strict=True):
            if isinstance(outcome, CurationError):
                _logger.warning(
                    "Skipping photo %s from ranking: %s", photo.id, outcome.reason
                )
                errors.append(outcome)
            else:
                scores[photo.id] = outcome
        return scores, errors

    def select(  # noqa: PLR0913
        self,
        gallery: Gallery,
        photos: Sequence[GalleryPhoto],
        scores: dict[UUID, PhotoScore],
        errors: Sequence[CurationError],
        target_selected_count: int | None = None,
    ) -> CurationResult:
        """Rank already-scored photos and build the curated gallery state.

        Without an explicit target, the selection size is
        ``ceil(len(photos) * default_selection_ratio)``. The batch is the
        gallery's complete photo set, so its size becomes the curated
        ``total_photos``; a stale stored count is never used.
        """
        _validate_batch(gallery, photos, target_selected_count)
        config = self.config

        updated = [
            _reset_automation(_apply_score(photo, scores.get(photo.id)))
            for photo in photos
        ]
        human_selected = sum(1 for photo in updated if photo.selected)
        ranked = sorted(
            (
                photo
                for photo in updated
                if not photo.human_decided and photo.id in scores
            ),
            key=self._rank_key,
        )

        total = len(updated)
        if target_selected_count is None:
            requested = math.ceil(total * config.default_selection_ratio)
        else:
            requested = target_selected_count
        remaining = max(0, requested - human_selected)
        picked = {photo.id for photo in self._pick(ranked, remaining)}

        updated = [
            replace(photo, selected=True, auto_selected=True)
            if photo.id in picked
            else photo
            for photo in updated
        ]
        scored_selection = [
            photo for photo in updated if photo.selected and photo.id in scores
        ]
        highlight_ids = self._highlights(scored_selection)
        updated = [
            replace(photo, is_highlight=True) if photo.id in highlight_ids else photo
            for photo in updated
        ]

        selected_count = sum(1 for photo in updated if photo.selected)
        scored_qualities = [score.quality_score for score in scores.values()]
        curation_data = CurationData(
            run_at=self.clock(),
            weights=dict(self.scorer.config.weights),
            selection_ratio=config.default_selection_ratio,
            highlight_quality_threshold=config.highlight_quality_threshold,
            highlight_top_fraction=config.highlight_top_fraction,
            prioritize_emotions=config.prioritize_emotions,
            target_count=requested,
            auto_selected_count=len(picked),
            scoring_error_count=len(errors),
            average_quality_score=(
                round(sum(scored_qualities) / len(scored_qualities), 1)
                if scored_qualities
                else None
            ),
            max_category_share=config.max_category_share,
            ranking=tuple(photo.id for photo in ranked),
            category_breakdown=self._category_breakdown(scored_selection),
        )
        curated_gallery = replace(
            gallery,
            status=(
                STATUS_READY if gallery.status == STATUS_PROCESSING else gallery.status
            ),
            total_photos=total,
            selected_photos=selected_count,
            ai_curated=True,
            curation_data=curation_data,
        )
        _logger.info(
            "Curated gallery %s: %s selected (%s automated), %s highlights, %s errors",
            gallery.id,
            selected_count,
            len(picked),
            len(highlight_ids),
            len(errors),
        )
        return CurationResult(
            selected_count=selected_count,
            highlight_count=len(highlight_ids),
            errors=tuple(errors),
            gallery=curated_gallery,
            photos=tuple(updated),
        )

    def _rank_key(self, photo: GalleryPhoto) -> tuple:
        if not self.config.prioritize_emotions:
            return _quality_key(photo)
        quality, emotional, *rest = _quality_key(photo)
        return (emotional, quality, *rest)

    def _pick(self, ranked: list[GalleryPhoto], remaining: int) -> list[GalleryPhoto]:
        share = self.config.max_category_share
        if share is None or remaining == 0:
            return ranked[:remaining]
        cap = max(1, math.floor(share * remaining))
        picks: list[GalleryPhoto] = []
        skipped: list[GalleryPhoto] = []
        per_category: dict[str, int] = {}
        for photo in ranked:
            if len(picks) == remaining:
                break
            category = photo.category or ""
            if per_category.get(category, 0) >= cap:
                skipped.append(photo)
                continue
            per_category[category] = per_category.get(category, 0) + 1
            picks.append(photo)
        picks.extend(skipped[: remaining - len(picks)])
        return picks

    def _highlights(self, selected: list[GalleryPhoto]) -> set[UUID]:
        if not selected:
            return set()
        ordered = sorted(selected, key=_quality_key)
        top_count = math.ceil(self.config.highlight_top_fraction * len(ordered))
        highlights = {photo.id for photo in ordered[:top_count]}
        highlights.update(
            photo.id
            for photo in selected
            if (photo.quality_score or 0.0) >= self.config.highlight_quality_threshold
        )
        return highlights

    def _category_breakdown(
        self, selected: list[GalleryPhoto]
    ) -> tuple[CategoryBreakdown, ...]:
        by_category: dict[str, list[UUID]] = {}
        for photo in sorted(selected, key=self._rank_key):
            category = photo.category or "uncategorized"
            by_category.setdefault(category, []).append(photo.id)
        return tuple(
            CategoryBreakdown(
                category=category, count=len(ids), top_picks=tuple(ids[:3])
            )
            for category, ids in by_category.items()
        )


def _quality_key(photo: GalleryPhoto) -> tuple:
    taken_at = photo.taken_at
    return (
        -(photo.quality_score or 0.0),
        -(photo.emotional_impact or 0.0),
        taken_at is None,
        taken_at.timestamp() if taken_at else 0.0,
        str(photo.id),
    )


def _validate_batch(
    gallery: Gallery,
    photos: Sequence[GalleryPhoto],
    target_selected_count: int | None,
) -> None:
    if not photos:
        raise CurationAbortedError(f"Gallery {gallery.id} has no photos to curate")
    if target_selected_count is not None and target_selected_count < 0:
        raise CurationAbortedError(
            f"Target selected count must not be negative, got {target_selected_count}"
        )
    ids = [photo.id for photo in photos]
    if len(set(ids)) != len(ids):
        raise CurationAbortedError(
            f"Gallery {gallery.id} batch has duplicate photo ids"
        )
    foreign = [photo.id for photo in photos if photo.gallery_id != gallery.id]
    if foreign:
        raise CurationAbortedError(
            f"{len(foreign)} photos do not belong to gallery {gallery.id}"
        )


def _apply_score(photo: GalleryPhoto, score: PhotoScore | None) -> GalleryPhoto:
    if score is None:
        return photo
    return replace(
        photo,
        quality_score=score.quality_score,
        technical_quality=score.technical_quality,
        emotional_impact=score.emotional_impact,
        category=score.category,
        ai_reasoning=score.ai_reasoning,
    )


def _reset_automation(photo: GalleryPhoto) -> GalleryPhoto:
    """Clear automated selection and highlights; human decisions stay."""
    if photo.rejected:
        return replace(photo, selected=False, auto_selected=False, is_highlight=False)
    if photo.human_decided:
        return replace(photo, is_highlight=False, auto_selected=False)
    return replace(photo, selected=False, auto_selected=False, is_highlight=False)
