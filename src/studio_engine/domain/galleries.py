"""Domain models for galleries and photo curation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID

GalleryStatus = Literal["processing", "ready", "delivered"]

STATUS_PROCESSING: GalleryStatus = "processing"
STATUS_READY: GalleryStatus = "ready"
STATUS_DELIVERED: GalleryStatus = "delivered"
STATUS_ORDER: tuple[GalleryStatus, ...] = (
    STATUS_PROCESSING,
    STATUS_READY,
    STATUS_DELIVERED,
)


@dataclass(frozen=True)
class CaptureSettings:
    """Camera settings recorded at capture time."""

    aperture: float | None = None
    shutter_speed: str | None = None
    iso: int | None = None
    focal_length_mm: float | None = None


@dataclass(frozen=True)
class TechnicalQuality:
    """Technical sub-scores, each on a 0-100 scale."""

    sharpness: float
    exposure: float
    composition: float


@dataclass(frozen=True)
class PhotoScore:
    """Output of scoring a single photo."""

    quality_score: float
    technical_quality: TechnicalQuality
    emotional_impact: float
    category: str
    ai_reasoning: str


@dataclass(frozen=True)
class CategoryBreakdown:
    """Selected photos in one category, best first."""

    category: str
    count: int
    top_picks: tuple[UUID, ...] = ()


@dataclass(frozen=True)
class CurationData:
    """Provenance recorded for the latest curation run."""

    run_at: datetime
    weights: dict[str, float]
    selection_ratio: float
    highlight_quality_threshold: float
    highlight_top_fraction: float
    prioritize_emotions: bool
    target_count: int
    auto_selected_count: int
    scoring_error_count: int
    average_quality_score: float | None
    max_category_share: float | None = None
    ranking: tuple[UUID, ...] = ()
    category_breakdown: tuple[CategoryBreakdown, ...] = ()


@dataclass(frozen=True)
class Gallery:
    """Delivered photo collection for a shoot."""

    id: UUID
    shoot_id: UUID
    status: GalleryStatus = STATUS_PROCESSING
    total_photos: int = 0
    selected_photos: int = 0
    ai_curated: bool = False
    curation_data: CurationData | None = None


@dataclass(frozen=True)
class GalleryPhoto:
    """A photo in a gallery with AI-derived and human-override fields."""

    id: UUID
    gallery_id: UUID
    filename: str = ""
    url: str | None = None
    taken_at: datetime | None = None
    camera: str | None = None
    lens: str | None = None
    settings: CaptureSettings = field(default_factory=CaptureSettings)
    quality_score: float | None = None
    technical_quality: TechnicalQuality | None = None
    emotional_impact: float | None = None
    category: str | None = None
    is_highlight: bool = False
    ai_reasoning: str | None = None
    selected: bool = False
    rejected: bool = False
    rejection_reason: str | None = None
    auto_selected: bool = False
    raw_metrics: dict[str, object] | None = None

    @property
    def human_decided(self) -> bool:
        """Whether a person has selected or rejected this photo."""
        return self.rejected or (self.selected and not self.auto_selected)


@dataclass(frozen=True)
class CurationError:
    """A photo that could not be scored during a run."""

    photo_id: UUID
    reason: str


@dataclass(frozen=True)
class CurationResult:
    """Outcome of a curation run, ready to persist."""

    selected_count: int
    highlight_count: int
    errors: tuple[CurationError, ...]
    gallery: Gallery
    photos: tuple[GalleryPhoto, ...]
