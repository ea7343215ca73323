"""Pure per-photo scoring from raw upstream metrics."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from uuid import UUID

from pydantic import ValidationError

from studio_engine.domain.galleries import PhotoScore, TechnicalQuality
from studio_engine.domain.metrics import RawPhotoMetrics
from studio_engine.errors import PhotoScoringError

SUB_METRICS = ("sharpness", "exposure", "composition")
_EXPRESSION_SIGNALS = ("smile_probability", "eyes_open_probability", "moment_intensity")


@dataclass(frozen=True)
class CategoryRule:
    """Assigns a category when its predicate matches the metrics."""

    category: str
    signal: str
    matches: Callable[[RawPhotoMetrics], bool]


DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("group", "face_count", lambda m: (m.face_count or 0) >= 3),
    CategoryRule(
        "portrait",
        "face_area_ratio",
        lambda m: (m.face_count or 0) >= 1 and (m.face_area_ratio or 0.0) >= 0.15,
    ),
    CategoryRule(
        "moment", "moment_intensity", lambda m: (m.moment_intensity or 0.0) >= 0.7
    ),
    CategoryRule(
        "detail", "framing", lambda m: m.framing == "close" and not m.face_count
    ),
    CategoryRule(
        "landscape",
        "face_area_ratio",
        lambda m: m.framing == "wide" and (m.face_area_ratio or 0.0) < 0.05,
    ),
)


@dataclass(frozen=True)
class ScoringConfig:
    """Normalization ranges, weights and category rules for scoring."""

    sharpness_range: tuple[float, float] = (0.0, 1.0)
    composition_range: tuple[float, float] = (0.0, 1.0)
    max_exposure_deviation: float = 2.0
    weights: dict[str, float] = field(
        default_factory=lambda: {name: 1.0 for name in SUB_METRICS}
    )
    category_rules: tuple[CategoryRule, ...] = DEFAULT_CATEGORY_RULES
    default_category: str = "general"
    neutral_emotional_impact: float = 5.0

    def __post_init__(self) -> None:
        for low, high in (self.sharpness_range, self.composition_range):
            if high <= low:
                raise ValueError("metric ranges must have high > low")
        if self.max_exposure_deviation <= 0:
            raise ValueError("max_exposure_deviation must be positive")
        if set(self.weights) != set(SUB_METRICS):
            raise ValueError(f"weights must cover exactly {', '.join(SUB_METRICS)}")
        if any(weight < 0 for weight in self.weights.values()):
            raise ValueError("weights must not be negative")
        if sum(self.weights.values()) <= 0:
            raise ValueError("weights must not all be zero")


@dataclass
class PhotoScorer:
    """Stateless scorer; safe to call from several threads at once."""

    config: ScoringConfig = field(default_factory=ScoringConfig)

    def score(
        self,
        metrics: RawPhotoMetrics | Mapping[str, object] | None,
        photo_id: UUID | None = None,
    ) -> PhotoScore:
        """Score one photo, raising PhotoScoringError for bad metrics."""
        parsed = _parse(metrics, photo_id)
        config = self.config

        technical = TechnicalQuality(
            sharpness=round(_scale(parsed.sharpness, *config.sharpness_range), 1),
            exposure=round(
                _exposure_score(
                    parsed.exposure_deviation, config.max_exposure_deviation
                ),
                1,
            ),
            composition=round(_scale(parsed.composition, *config.composition_range), 1),
        )
        sub_scores = {
            "sharpness": technical.sharpness,
            "exposure": technical.exposure,
            "composition": technical.composition,
        }
        weight_sum = sum(config.weights.values())
        quality = round(
            sum(sub_scores[name] * config.weights[name] for name in SUB_METRICS)
            / weight_sum,
            1,
        )
        quality = min(max(quality, 0.0), 100.0)

        signals = {
            name: min(max(float(value), 0.0), 1.0)
            for name in _EXPRESSION_SIGNALS
            if (value := getattr(parsed, name)) is not None
        }
        if signals:
            emotional = round(10.0 * sum(signals.values()) / len(signals), 1)
        else:
            emotional = config.neutral_emotional_impact
        emotional = min(max(emotional, 0.0), 10.0)

        rule = next((r for r in config.category_rules if r.matches(parsed)), None)
        category = rule.category if rule else config.default_category

        return PhotoScore(
            quality_score=quality,
            technical_quality=technical,
            emotional_impact=emotional,
            category=category,
            ai_reasoning=_reasoning(
                quality, sub_scores, rule, category, emotional, signals
            ),
        )


def _parse(
    metrics: RawPhotoMetrics | Mapping[str, object] | None, photo_id: UUID | None
) -> RawPhotoMetrics:
    if isinstance(metrics, RawPhotoMetrics):
        return metrics
    if metrics is None:
        raise PhotoScoringError("no metrics supplied", photo_id)
    try:
        return RawPhotoMetrics.model_validate(metrics)
    except ValidationError as exc:
        fields = sorted(
            {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        )
        detail = ", ".join(fields) if fields else "payload"
        raise PhotoScoringError(f"malformed metrics: {detail}", photo_id) from exc


def _scale(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high] and map it onto 0-100."""
    clamped = min(max(value, low), high)
    return 100.0 * (clamped - low) / (high - low)


def _exposure_score(deviation_ev: float, max_deviation_ev: float) -> float:
    """Score 100 at zero EV deviation, falling to 0 at the maximum."""
    clamped = min(abs(deviation_ev), max_deviation_ev)
    return 100.0 * (1.0 - clamped / max_deviation_ev)


def _reasoning(  # noqa: PLR0913
    quality: float,
    sub_scores: dict[str, float],
    rule: CategoryRule | None,
    category: str,
    emotional: float,
    signals: dict[str, float],
) -> str:
    strongest = max(SUB_METRICS, key=lambda name: sub_scores[name])
    weakest = min(SUB_METRICS, key=lambda name: sub_scores[name])
    parts = [
        f"Quality {quality:.1f} led by {strongest} ({sub_scores[strongest]:.1f}); "
        f"weakest is {weakest} ({sub_scores[weakest]:.1f})."
    ]
    if rule is not None:
        parts.append(f"Categorized as {category} from {rule.signal}.")
    else:
        parts.append(f"No category rule matched; filed as {category}.")
    if signals:
        parts.append(f"Emotional impact {emotional:.1f} from {', '.join(signals)}.")
    else:
        parts.append(
            f"Emotional impact neutral at {emotional:.1f}; no expression signals."
        )
    return " ".join(parts)
