#!/usr/bin/env python3
"""
Pydantic V2 Scene Object Models
===============================

Validated, immutable scene objects for a generative audio/visual
composition. Every object shares the base fields on SceneObject
(frame, transform, opacity, effects, ...) and adds its own fields in a
subclass registered under its type tag.

Use SceneObject.from_dict() to build the right subclass from an untyped
field bag. Anything that does not satisfy the schema raises
SceneValidationError; no partially valid object is ever returned.

Presence: a key that is missing or null is absent and left out of
to_dict(). Any other value, including 0 and false, is validated and kept.
"""

import json
import logging
from typing import Any, ClassVar, Dict, List, Literal, Mapping, Optional, Tuple, Type
from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError, field_validator

from scene_constants import (
    Effect, ParagraphStyle, TextStyle, Alignment, AttributeType, WordWrap, ScaleMode,
    VALID_OBJECT_TYPES
)
from scene_fields import (
    Number, Pair, Frame, Transform, Color,
    check_unit_interval, check_positive, check_non_negative, check_not_blank
)
from beat_grid import BeatSlot, count_hits, validate_beat_grid, validate_length

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================

class SceneValidationError(ValueError):
    """
    Raised when a field bag cannot become a scene object.

    Attributes:
        field: dotted path of the first offending field (e.g. "instructions.3.0.note")
        value: the offending input value
        errors: every problem found, as {"field": ..., "message": ...} dicts
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None,
                 errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value
        self.errors = errors or [{"field": field or "", "message": message}]

    @classmethod
    def from_pydantic(cls, exc: ValidationError, object_type: str) -> "SceneValidationError":
        """Wrap a pydantic ValidationError, reporting the first error found."""
        errors = []
        for err in exc.errors():
            message = err["msg"]
            # Messages from our own validators arrive as "Value error, ..."
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.append({"field": ".".join(str(p) for p in err["loc"]), "message": message})

        first = exc.errors()[0]
        field = errors[0]["field"]
        return cls(
            f"Invalid {object_type} field '{field}': {errors[0]['message']}",
            field=field,
            value=first.get("input"),
            errors=errors,
        )


# ============================================================================
# Base Scene Object
# ============================================================================

class SceneObject(BaseModel):
    """Base class for all scene objects with the fields every type shares."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    _registry: ClassVar[Dict[str, Type["SceneObject"]]] = {}

    type: str
    frame: Optional[Frame] = Field(None, description="x, y, width, height")
    name: Optional[str] = None
    transform: Optional[Transform] = Field(None, description="Basis vectors and translation")
    opacity: Optional[Number] = Field(None, description="0 (transparent) to 1 (opaque)")
    effects: Tuple[Effect, ...] = Field(default=(), description="Animation effects")
    originalSrc: Optional[str] = Field(None, description="Where the content came from")

    def __init_subclass__(cls, type=None, **kwargs):
        """Register each concrete subclass under its type tag."""
        super().__init_subclass__(**kwargs)
        if type is not None:
            cls._registry[type] = cls

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SceneObject":
        """
        Factory method: build the right subclass from a field bag.

        The type tag is checked before any other field is looked at.

        Raises:
            SceneValidationError: unknown type tag or any invalid field
        """
        if not isinstance(data, Mapping):
            raise SceneValidationError(
                f"Scene object must be a JSON object, got {type(data).__name__}", value=data
            )

        object_type = data.get("type")
        subclass = cls._registry.get(object_type) if isinstance(object_type, str) else None
        if subclass is None:
            raise SceneValidationError(
                f"Unknown object type: {object_type!r}. Valid types: {VALID_OBJECT_TYPES}",
                field="type",
                value=object_type,
            )
        if not issubclass(subclass, cls):
            raise SceneValidationError(
                f"Object type {object_type!r} does not match {cls.__name__}; "
                f"use SceneObject.from_dict() or {subclass.__name__}.from_dict()",
                field="type",
                value=object_type,
            )

        logger.debug("Validating %s object", object_type)
        try:
            return subclass.model_validate(dict(data))
        except ValidationError as e:
            error = SceneValidationError.from_pydantic(e, object_type)
            logger.debug("Rejected %s object: %s", object_type, error.message)
            raise error from e

    def to_dict(self) -> Dict[str, Any]:
        """Normalized wire representation; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @field_validator('opacity')
    @classmethod
    def validate_opacity(cls, v):
        return check_unit_interval(v, "Opacity")

    @field_validator('effects', mode='before')
    @classmethod
    def validate_effects_present(cls, v):
        return () if v is None else v


# ============================================================================
# Text Objects
# ============================================================================

class TextAttribute(BaseModel):
    """Bold/italic styling applied to a (start, length) character range."""
    model_config = ConfigDict(frozen=True)

    type: AttributeType
    range: Pair


class ParagraphObject(SceneObject, type="paragraph"):
    type: Literal["paragraph"] = "paragraph"
    text: str
    color: Optional[Color] = None
    style: Optional[ParagraphStyle] = None
    size: Optional[Number] = None
    alignment: Optional[Alignment] = None
    attributes: Optional[Tuple[TextAttribute, ...]] = None

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        return check_not_blank(v, "Paragraph text")

    @field_validator('size')
    @classmethod
    def validate_size(cls, v):
        return check_positive(v, "Paragraph size")


class TextObject(SceneObject, type="text"):
    type: Literal["text"] = "text"
    text: str
    color: Optional[Color] = None
    style: Optional[TextStyle] = None
    word_wrap: Optional[WordWrap] = Field(None, alias="word-wrap")
    padding: Optional[Number] = None

    @field_validator('text')
    @classmethod
    def validate_text(cls, v):
        return check_not_blank(v, "Text")

    @field_validator('padding')
    @classmethod
    def validate_padding(cls, v):
        return check_non_negative(v, "Padding")


class LinkObject(SceneObject, type="link"):
    type: Literal["link"] = "link"
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[Color] = None
    style: Optional[ParagraphStyle] = None


# ============================================================================
# Media Objects
# ============================================================================

class ImageObject(SceneObject, type="image"):
    type: Literal["image"] = "image"
    src: str
    scaleMode: ScaleMode = ScaleMode.FILL

    @field_validator('scaleMode', mode='before')
    @classmethod
    def default_scale_mode(cls, v):
        return ScaleMode.FILL if v is None else v


class GifObject(SceneObject, type="gif"):
    """Animated image; unlike a still image it fits rather than fills by default."""
    type: Literal["gif"] = "gif"
    src: str
    scaleMode: ScaleMode = ScaleMode.FIT

    @field_validator('scaleMode', mode='before')
    @classmethod
    def default_scale_mode(cls, v):
        return ScaleMode.FIT if v is None else v


class GraphicObject(SceneObject, type="graphic"):
    type: Literal["graphic"] = "graphic"
    src: str
    color: Optional[Color] = None


class VideoObject(SceneObject, type="video"):
    type: Literal["video"] = "video"
    src: str
    muted: Optional[StrictBool] = None


# ============================================================================
# Music Object
# ============================================================================

class MusicObject(SceneObject, type="music"):
    """
    Quantized beat sequence handed to the synthesizer.

    `instructions` holds length * 4 beat slots; see beat_grid for the
    rules each hit must satisfy.
    """
    type: Literal["music"] = "music"
    bpm: Number = Field(..., description="Tempo in beats per minute")
    length: Number = Field(..., description="Number of bars: even, 2-16")
    instructions: Tuple[BeatSlot, ...] = Field(..., description="length * 4 beat slots of hits")

    @field_validator('bpm')
    @classmethod
    def validate_bpm(cls, v):
        return check_positive(v, "BPM")

    @field_validator('length')
    @classmethod
    def validate_bar_length(cls, v):
        return validate_length(v)

    @field_validator('instructions')
    @classmethod
    def validate_instructions(cls, v, info):
        """Slot count must match the declared length."""
        length = info.data.get('length')
        if length is None:
            # length already failed and has its own error
            return v
        return validate_beat_grid(v, length)

    @property
    def hit_count(self) -> int:
        return count_hits(self.instructions)


# ============================================================================
# Schema Export
# ============================================================================

def get_object_types() -> List[str]:
    return list(SceneObject._registry.keys())

def create_schema() -> Dict[str, Any]:
    """Generate a JSON Schema for every object type, keyed by type tag."""
    return {
        object_type: model.model_json_schema(by_alias=True)
        for object_type, model in SceneObject._registry.items()
    }

def save_schema(filename: str = "scene-schema.json"):
    """Save JSON Schema to file."""

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(create_schema(), f, indent=2)

    logger.info("Schema saved to %s", filename)
