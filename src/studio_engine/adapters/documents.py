"""Conversion between domain records and Supabase JSON rows."""

from datetime import datetime
from uuid import UUID

from studio_engine.domain.galleries import (
    CaptureSettings,
    CategoryBreakdown,
    CurationData,
    Gallery,
    GalleryPhoto,
    TechnicalQuality,
)
from studio_engine.domain.shot_lists import ShotItem, ShotList, ShotListSection


def sections_to_json(sections: tuple[ShotListSection, ...]) -> list[dict[str, object]]:
    """Serialize shot list sections to a JSON-compatible list."""
    return [
        {
            "name": section.name,
            "shots": [
                {
                    "description": shot.description,
                    "priority": shot.priority,
                    "estimated_minutes": shot.estimated_minutes,
                    "equipment_tags": list(shot.equipment_tags),
                    "origin": shot.origin,
                }
                for shot in section.shots
            ],
        }
        for section in sections
    ]


def sections_from_json(payload: object) -> tuple[ShotListSection, ...]:
    """Parse sections stored by ``sections_to_json``."""
    if not isinstance(payload, list):
        return ()
    sections = []
    for raw in payload:
        shots = tuple(
            ShotItem(
                description=str(shot["description"]),
                priority=shot["priority"],
                estimated_minutes=float(shot["estimated_minutes"]),
                equipment_tags=tuple(shot.get("equipment_tags") or ()),
                origin=shot.get("origin") or "ai",
            )
            for shot in raw.get("shots") or []
        )
        sections.append(ShotListSection(name=str(raw["name"]), shots=shots))
    return tuple(sections)


def shot_list_to_row(shot_list: ShotList) -> dict[str, object]:
    """Build a ``shot_lists`` row payload without id or tenant."""
    return {
        "package_id": str(shot_list.package_id) if shot_list.package_id else None,
        "shoot_id": str(shot_list.shoot_id) if shot_list.shoot_id else None,
        "event_type": shot_list.event_type,
        "ai_generated": shot_list.ai_generated,
        "sections": sections_to_json(shot_list.sections),
        "total_shots": shot_list.total_shots,
        "must_have_count": shot_list.must_have_count,
        "estimated_time": shot_list.estimated_time,
        "equipment_list": list(shot_list.equipment_list),
        "lighting_plan": shot_list.lighting_plan,
        "backup_plans": list(shot_list.backup_plans),
    }


def shot_list_from_row(row: dict[str, object]) -> ShotList:
    return ShotList(
        id=_uuid(row.get("id")),
        package_id=_uuid(row.get("package_id")),
        shoot_id=_uuid(row.get("shoot_id")),
        event_type=str(row["event_type"]),
        ai_generated=bool(row.get("ai_generated", True)),
        sections=sections_from_json(row.get("sections")),
        total_shots=int(row.get("total_shots") or 0),
        must_have_count=int(row.get("must_have_count") or 0),
        estimated_time=float(row.get("estimated_time") or 0.0),
        equipment_list=tuple(row.get("equipment_list") or ()),
        lighting_plan=str(row.get("lighting_plan") or ""),
        backup_plans=tuple(row.get("backup_plans") or ()),
    )


def curation_data_to_json(data: CurationData | None) -> dict[str, object] | None:
    if data is None:
        return None
    return {
        "run_at": data.run_at.isoformat(),
        "weights": dict(data.weights),
        "selection_ratio": data.selection_ratio,
        "highlight_quality_threshold": data.highlight_quality_threshold,
        "highlight_top_fraction": data.highlight_top_fraction,
        "prioritize_emotions": data.prioritize_emotions,
        "target_count": data.target_count,
        "auto_selected_count": data.auto_selected_count,
        "scoring_error_count": data.scoring_error_count,
        "average_quality_score": data.average_quality_score,
        "max_category_share": data.max_category_share,
        "ranking": [str(photo_id) for photo_id in data.ranking],
        "category_breakdown": [
            {
                "category": entry.category,
                "count": entry.count,
                "top_picks": [str(photo_id) for photo_id in entry.top_picks],
            }
            for entry in data.category_breakdown
        ],
    }


def curation_data_from_json(payload: object) -> CurationData | None:
    if not isinstance(payload, dict):
        return None
    average = payload.get("average_quality_score")
    share = payload.get("max_category_share")
    return CurationData(
        run_at=datetime.fromisoformat(payload["run_at"]),
        weights={key: float(value) for key, value in payload["weights"].items()},
        selection_ratio=float(payload["selection_ratio"]),
        highlight_quality_threshold=float(payload["highlight_quality_threshold"]),
        highlight_top_fraction=float(payload["highlight_top_fraction"]),
        prioritize_emotions=bool(payload["prioritize_emotions"]),
        target_count=int(payload["target_count"]),
        auto_selected_count=int(payload["auto_selected_count"]),
        scoring_error_count=int(payload["scoring_error_count"]),
        average_quality_score=float(average) if average is not None else None,
        max_category_share=float(share) if share is not None else None,
        ranking=tuple(UUID(value) for value in payload.get("ranking") or ()),
        category_breakdown=tuple(
            CategoryBreakdown(
                category=str(entry["category"]),
                count=int(entry["count"]),
                top_picks=tuple(UUID(value) for value in entry.get("top_picks") or ()),
            )
            for entry in payload.get("category_breakdown") or ()
        ),
    )


def gallery_to_row(gallery: Gallery) -> dict[str, object]:
    """Build a ``galleries`` row payload without tenant."""
    return {
        "id": str(gallery.id),
        "shoot_id": str(gallery.shoot_id),
        "status": gallery.status,
        "total_photos": gallery.total_photos,
        "selected_photos": gallery.selected_photos,
        "ai_curated": gallery.ai_curated,
        "curation_data": curation_data_to_json(gallery.curation_data),
    }


def gallery_from_row(row: dict[str, object]) -> Gallery:
    return Gallery(
        id=UUID(str(row["id"])),
        shoot_id=UUID(str(row["shoot_id"])),
        status=row.get("status") or "processing",
        total_photos=int(row.get("total_photos") or 0),
        selected_photos=int(row.get("selected_photos") or 0),
        ai_curated=bool(row.get("ai_curated", False)),
        curation_data=curation_data_from_json(row.get("curation_data")),
    )


def photo_to_row(photo: GalleryPhoto) -> dict[str, object]:
    """Build a ``gallery_photos`` row payload.

    ``raw_metrics`` is batch input only and is never written.
    """
    technical = photo.technical_quality
    return {
        "id": str(photo.id),
        "gallery_id": str(photo.gallery_id),
        "filename": photo.filename,
        "url": photo.url,
        "taken_at": photo.taken_at.isoformat() if photo.taken_at else None,
        "camera": photo.camera,
        "lens": photo.lens,
        "settings": {
            "aperture": photo.settings.aperture,
            "shutter_speed": photo.settings.shutter_speed,
            "iso": photo.settings.iso,
            "focal_length_mm": photo.settings.focal_length_mm,
        },
        "quality_score": photo.quality_score,
        "technical_quality": (
            {
                "sharpness": technical.sharpness,
                "exposure": technical.exposure,
                "composition": technical.composition,
            }
            if technical
            else None
        ),
        "emotional_impact": photo.emotional_impact,
        "category": photo.category,
        "is_highlight": photo.is_highlight,
        "ai_reasoning": photo.ai_reasoning,
        "selected": photo.selected,
        "rejected": photo.rejected,
        "rejection_reason": photo.rejection_reason,
        "auto_selected": photo.auto_selected,
    }


def photo_from_row(row: dict[str, object]) -> GalleryPhoto:
    settings = row.get("settings") or {}
    technical = row.get("technical_quality")
    taken_at = row.get("taken_at")
    return GalleryPhoto(
        id=UUID(str(row["id"])),
        gallery_id=UUID(str(row["gallery_id"])),
        filename=str(row.get("filename") or ""),
        url=row.get("url"),
        taken_at=(
            datetime.fromisoformat(taken_at)
            if isinstance(taken_at, str) and taken_at
            else None
        ),
        camera=row.get("camera"),
        lens=row.get("lens"),
        settings=CaptureSettings(
            aperture=settings.get("aperture"),
            shutter_speed=settings.get("shutter_speed"),
            iso=settings.get("iso"),
            focal_length_mm=settings.get("focal_length_mm"),
        ),
        quality_score=_float(row.get("quality_score")),
        technical_quality=(
            TechnicalQuality(
                sharpness=float(technical["sharpness"]),
                exposure=float(technical["exposure"]),
                composition=float(technical["composition"]),
            )
            if isinstance(technical, dict)
            else None
        ),
        emotional_impact=_float(row.get("emotional_impact")),
        category=row.get("category"),
        is_highlight=bool(row.get("is_highlight", False)),
        ai_reasoning=row.get("ai_reasoning"),
        selected=bool(row.get("selected", False)),
        rejected=bool(row.get("rejected", False)),
        rejection_reason=row.get("rejection_reason"),
        auto_selected=bool(row.get("auto_selected", False)),
    )


def _uuid(value: object) -> UUID | None:
    return UUID(str(value)) if value else None


def _float(value: object) -> float | None:
    return float(value) if value is not None else None
