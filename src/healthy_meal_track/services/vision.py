"""Vision recognition service returning raw food signals."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import ValidationError

from healthy_meal_track.domain.vision import FoodSignals, LabelSignal, ObjectSignal

_logger = logging.getLogger(__name__)

_SignalT = TypeVar("_SignalT", bound=LabelSignal)

_NULLABLE_NUMBER = {"anyOf": [{"type": "number"}, {"type": "null"}]}

VISION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "labels": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                },
                "required": ["name", "confidence"],
                "additionalProperties": False,
            },
        },
        "objects": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                    "bounding_box": {
                        "anyOf": [
                            {
                                "type": "object",
                                "properties": {
                                    "x": _NULLABLE_NUMBER,
                                    "y": _NULLABLE_NUMBER,
                                    "width": _NULLABLE_NUMBER,
                                    "height": _NULLABLE_NUMBER,
                                },
                                "required": ["x", "y", "width", "height"],
                                "additionalProperties": False,
                            },
                            {"type": "null"},
                        ]
                    },
                },
                "required": ["name", "confidence", "bounding_box"],
                "additionalProperties": False,
            },
        },
        "texts": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["labels", "objects", "texts"],
    "additionalProperties": False,
}

VISION_PROMPT = (
    "Describe the photo the way an image-labeling API would. "
    "Return up to 20 whole-image labels (dishes, ingredients, meal context) "
    "with a confidence between 0 and 1, up to 10 localized objects with a "
    "confidence and a bounding box in normalized 0-1 coordinates, "
    "and up to 5 pieces of visible text."
)


class RecognitionError(RuntimeError):
    """Raised when the vision collaborator cannot analyze an image."""


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class VisionService:
    """Service that requests food signals and validates the answer."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def detect_food_signals(self, image_bytes: bytes) -> FoodSignals:
        """Detect labels and objects in an image.

        Client failures raise RecognitionError. Malformed entries in an
        otherwise valid answer are dropped.
        """
        if not image_bytes:
            raise RecognitionError("Vision API failed: empty image")
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                image_data_url=_to_data_url(image_bytes),
                schema=VISION_SCHEMA,
                prompt=VISION_PROMPT,
            )
        except Exception as exc:
            raise RecognitionError(f"Vision API failed: {exc}") from exc
        return _parse_signals(raw)


def _parse_signals(raw: object) -> FoodSignals:
    if not isinstance(raw, dict):
        _logger.warning("Vision returned %s instead of an object", type(raw).__name__)
        return FoodSignals()
    labels = _validate_each(raw.get("labels"), LabelSignal)
    objects = _validate_each(raw.get("objects"), ObjectSignal)
    texts = [text for text in raw.get("texts") or [] if isinstance(text, str)]
    return FoodSignals(labels=labels, objects=objects, texts=texts)


def _validate_each(items: object, model: type[_SignalT]) -> list[_SignalT]:
    if not isinstance(items, list):
        return []
    parsed: list[_SignalT] = []
    for item in items:
        if isinstance(item, dict) and item.get("bounding_box") is not None:
            box = item["bounding_box"]
            if isinstance(box, dict) and any(value is None for value in box.values()):
                item = {**item, "bounding_box": None}
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as exc:
            _logger.warning("Dropping malformed vision entry %r: %s", item, exc)
    return parsed


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
