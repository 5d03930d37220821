"""Models for vision recognition results."""

from pydantic import BaseModel, Field


class BoundingBox(BaseModel):
    """Normalized bounding box of a localized object."""

    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    width: float = Field(ge=0.0, le=1.0)
    height: float = Field(ge=0.0, le=1.0)


class LabelSignal(BaseModel):
    """Whole-image label with a confidence score."""

    name: str
    confidence: float = Field(ge=0.0, le=1.0)


class ObjectSignal(LabelSignal):
    """Localized object with a confidence score."""

    bounding_box: BoundingBox | None = None


class FoodSignals(BaseModel):
    """Raw signals returned by the vision collaborator."""

    labels: list[LabelSignal] = Field(default_factory=list)
    objects: list[ObjectSignal] = Field(default_factory=list)
    texts: list[str] = Field(default_factory=list)
