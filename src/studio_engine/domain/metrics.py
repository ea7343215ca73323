"""Models for raw photo metrics supplied by upstream analysis."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RawPhotoMetrics(BaseModel):
    """Technical and expression signals extracted from a photo."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    sharpness: float = Field(allow_inf_nan=False)
    exposure_deviation: float = Field(allow_inf_nan=False)
    composition: float = Field(allow_inf_nan=False)
    face_count: int | None = Field(default=None, ge=0)
    face_area_ratio: float | None = Field(default=None, allow_inf_nan=False)
    smile_probability: float | None = Field(default=None, allow_inf_nan=False)
    eyes_open_probability: float | None = Field(default=None, allow_inf_nan=False)
    moment_intensity: float | None = Field(default=None, allow_inf_nan=False)
    framing: Literal["wide", "medium", "close"] | None = None
