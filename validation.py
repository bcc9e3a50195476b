#!/usr/bin/env python3
"""
Scene Object Schema - Validation Reports
========================================

Turns scene validation failures into the structured error dictionaries
used by the MCP server and the CLI:

    {"isError": True, "errorType": "validation_error", "field": ...,
     "message": ..., "suggestion": ...}

Successful validation returns {"isError": False} together with the
normalized output.
"""

import logging
from typing import Any, Dict, List, Optional

from scene_constants import (
    VALID_OBJECT_TYPES, MELODIC_BANKS, DRUM_BANK, DRUM_NOTES,
    MIN_LENGTH, MAX_LENGTH, SUBDIVISIONS_PER_BAR, MIN_VELOCITY, MAX_VELOCITY,
    Effect, AttributeType
)
from scene_models import SceneObject, SceneValidationError
from composition import build_composition

logger = logging.getLogger(__name__)


# Suggestions keyed by the last segment of the failing field path
FIELD_SUGGESTIONS = {
    "type": f"Use one of the supported object types: {VALID_OBJECT_TYPES}",
    "frame": "Provide frame as four numbers: [x, y, width, height]",
    "transform": "Provide transform as three number pairs: [[a, b], [c, d], [tx, ty]]",
    "opacity": "Use a number between 0 and 1",
    "effects": f"Use effects from: {[e.value for e in Effect]}",
    "color": "Provide color as four numbers between 0 and 1: [r, g, b, a]",
    "text": "Provide non-empty text",
    "size": "Use a size greater than 0",
    "padding": "Use padding of 0 or greater",
    "muted": "Use true or false",
    "bpm": "Use a tempo greater than 0",
    "length": f"Use an even number of bars between {MIN_LENGTH} and {MAX_LENGTH}",
    "instructions": f"Provide exactly length x {SUBDIVISIONS_PER_BAR} beat slots, each a list of hits",
    "bank": f"Melodic hits use one of {MELODIC_BANKS}; percussive hits use '{DRUM_BANK}'",
    "note": f"Melodic notes look like 'C#/4' (octave -1 to 8); drum notes are one of {DRUM_NOTES}",
    "velo": f"Use a whole number between {MIN_VELOCITY} and {MAX_VELOCITY}",
    "velocity": f"Use a whole number between {MIN_VELOCITY} and {MAX_VELOCITY}",
    "duration": "Use a duration greater than 0",
    "time": "Use a time offset of 0 or greater",
    "name": "Provide a non-empty name",
    "placeholder": "Provide non-empty placeholder text shown before the author fills in the value",
}


def create_validation_error(error: SceneValidationError) -> Dict[str, Any]:
    """Format a SceneValidationError for LLM/author correction."""
    result = {
        "isError": True,
        "errorType": "validation_error",
        "field": error.field,
        "message": error.message,
        "suggestion": suggest_fix(error.field),
    }
    if len(error.errors) > 1:
        result["details"] = error.errors
    return result

def suggest_fix(field: Optional[str]) -> str:
    if not field:
        return "Provide each scene object as a JSON object with a 'type' field"

    segments = field.split(".")
    if segments[-1] == "type" and "instructions" in segments:
        return "Use 0 for melodic hits or 1 for percussive hits"
    if segments[-1] == "type" and "attributes" in segments:
        return f"Use one of {[a.value for a in AttributeType]}"

    # Walk back past list and tuple indices
    for segment in reversed(segments):
        if segment in FIELD_SUGGESTIONS:
            return FIELD_SUGGESTIONS[segment]
    return "Check the field against the schema (see get_json_schema)"


# ============================================================================
# Validation Pipeline
# ============================================================================

def validate_scene_data(data: Any) -> Dict[str, Any]:
    """
    Validate a single scene object field bag.

    Returns:
        Error dict if validation fails, otherwise
        {"isError": False, "object": <normalized object>}
    """
    try:
        obj = SceneObject.from_dict(data)
    except SceneValidationError as e:
        logger.info("Scene object rejected: %s", e.message)
        return create_validation_error(e)

    logger.debug("Scene object '%s' accepted", obj.type)
    return {"isError": False, "object": obj.to_dict()}

def validate_composition_data(data: Any, max_workers: Optional[int] = None) -> Dict[str, Any]:
    """
    Validate a list of scene objects as one composition.

    Returns:
        Error dict for the first failing object, otherwise
        {"isError": False, "composition": {"objects": [...]}}
    """
    if not isinstance(data, list):
        return {
            "isError": True,
            "errorType": "validation_error",
            "field": None,
            "message": "Composition must be a JSON array of scene objects",
            "suggestion": "Wrap the objects in an array: [{\"type\": \"text\", ...}, ...]",
        }

    try:
        composition = build_composition(data, max_workers=max_workers)
    except SceneValidationError as e:
        logger.info("Composition rejected: %s", e.message)
        return create_validation_error(e)

    return {"isError": False, "composition": composition.to_dict()}

def summarize_objects(objects: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count normalized objects by type tag, in first-seen order."""
    counts: Dict[str, int] = {}
    for obj in objects:
        counts[obj["type"]] = counts.get(obj["type"], 0) + 1
    return counts
