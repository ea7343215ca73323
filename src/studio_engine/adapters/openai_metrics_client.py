"""OpenAI Responses API client for photo metrics extraction."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from studio_engine.domain.galleries import GalleryPhoto
from studio_engine.services.metrics import MetricsClient

_NUMBER_OR_NULL = {"type": ["number", "null"]}

METRICS_SCHEMA: dict[str, object] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "sharpness": {"type": "number"},
        "exposure_deviation": {"type": "number"},
        "composition": {"type": "number"},
        "face_count": {"type": ["integer", "null"]},
        "face_area_ratio": _NUMBER_OR_NULL,
        "smile_probability": _NUMBER_OR_NULL,
        "eyes_open_probability": _NUMBER_OR_NULL,
        "moment_intensity": _NUMBER_OR_NULL,
        "framing": {
            "type": ["string", "null"],
            "enum": ["wide", "medium", "close", None],
        },
    },
    "required": [
        "sharpness",
        "exposure_deviation",
        "composition",
        "face_count",
        "face_area_ratio",
        "smile_probability",
        "eyes_open_probability",
        "moment_intensity",
        "framing",
    ],
}

METRICS_PROMPT = (
    "Assess this photograph. Return sharpness and composition between 0 and 1, "
    "exposure_deviation in EV stops from a correct exposure (negative is under), "
    "the number of faces, the largest face's share of the frame, smile, "
    "eyes-open and moment intensity probabilities between 0 and 1, and whether "
    "the framing is wide, medium or close. Use null when a signal does not apply."
)


@dataclass
class OpenAIMetricsClient(MetricsClient):
    """Metrics client backed by a vision model through the Responses API."""

    client: AsyncOpenAI
    model: str
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, model: str, store: bool = False
    ) -> "OpenAIMetricsClient":
        """Create an OpenAI metrics client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model, store=store)

    async def fetch_metrics(self, photo: GalleryPhoto) -> dict[str, object]:
        """Ask the model for structured metrics of one photo."""
        if not photo.url:
            raise RuntimeError(f"Photo {photo.id} has no URL to analyze")
        response = await self.client.responses.create(
            model=self.model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": METRICS_PROMPT},
                        {"type": "input_image", "image_url": photo.url},
                    ],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "photo_metrics",
                    "strict": True,
                    "schema": METRICS_SCHEMA,
                }
            },
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)
