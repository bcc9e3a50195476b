#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Scene Validator - MCP Server Implementation
===========================================

FastMCP server that lets an authoring LLM check scene objects before
they are sent to the renderer/synthesizer:

- Validation of single scene objects (paragraph, text, link, image,
  graphic, gif, video, music)
- Ordered composition building from a list of objects
- JSON Schema export for every object type
- Author-facing parameter descriptors

Key MCP Implementation Details:
- stdio transport only (stdout for JSON-RPC, stderr for logging)
- Structured error responses naming the failing field, for LLM correction

Usage:
    python mcp_server.py

For Claude Desktop integration, add to config:
{
  "mcpServers": {
    "scene-validator": {
      "command": "python",
      "args": ["/path/to/mcp_server.py"]
    }
  }
}
"""

import sys
import logging
import json
from typing import Any, Dict, List, Optional
from fastmcp import FastMCP
from pydantic import BaseModel

from validation import create_validation_error, validate_scene_data, validate_composition_data
from scene_models import SceneValidationError, create_schema, get_object_types
from scene_constants import MELODIC_BANKS, DRUM_NOTES
from composition import ParameterDescriptor

# Configure logging to stderr (stdout reserved for MCP JSON-RPC protocol)
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - MCP-SCENE - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


# ============================================================================
# Response Models
# ============================================================================

class SceneResponse(BaseModel):
    """Result of a validation request."""
    success: bool
    content: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None
    warnings: List[Dict[str, Any]] = []

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "content": {"type": "text", "text": "Hello", "effects": []},
                "warnings": []
            }
        }
    }


def parse_json_argument(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {e}")
        raise SceneValidationError(f"Invalid JSON format: {e.msg} (line {e.lineno}, column {e.colno})") from e

def json_error_response(error: SceneValidationError) -> SceneResponse:
    return SceneResponse(
        success=False,
        error={
            "isError": True,
            "errorType": "json_error",
            "message": error.message,
            "suggestion": "Send the scene data as a valid JSON string"
        }
    )


# ============================================================================
# MCP Server Setup
# ============================================================================

mcp = FastMCP("Scene Validator")

@mcp.tool()
def validate_scene_object(scene_data: str) -> SceneResponse:
    """
    Validate one scene object and return its normalized form.

    Args:
        scene_data: JSON object with a "type" field and that type's fields

    Returns:
        SceneResponse with the normalized object, or an error naming the field to fix

    ## Object Types
    - **paragraph**: `{"type": "paragraph", "text": "...", "size": 24, "alignment": "center",
      "attributes": [{"type": "bold", "range": [0, 5]}]}`
    - **text**: `{"type": "text", "text": "...", "style": "eightbit", "word-wrap": "auto", "padding": 4}`
    - **link**: `{"type": "link", "url": "https://...", "title": "..."}`
    - **image** / **gif**: `{"type": "image", "src": "...", "scaleMode": "fit"}`
    - **graphic**: `{"type": "graphic", "src": "...", "color": [1, 0, 0, 1]}`
    - **video**: `{"type": "video", "src": "...", "muted": true}`
    - **music**: `{"type": "music", "bpm": 120, "length": 2, "instructions": [[...], ...]}`

    ## Shared Fields (all types)
    - frame: [x, y, width, height]
    - transform: [[a, b], [c, d], [tx, ty]]
    - opacity: 0 to 1
    - effects: any of sin, cos, wave, rotate, soon, fireworks
    - originalSrc: free text

    ## Music Grid
    CRITICAL: instructions must contain exactly length x 4 beat slots.
    Each slot is a list of hits (an empty list is a silent slot):
    ```json
    {"time": 0, "type": 0, "bank": "bass", "note": "C#/2", "velo": 100, "duration": 1}
    {"time": 0, "type": 1, "bank": "drums", "note": "Kick", "velo": 127, "duration": 0.5}
    ```
    - type 0 (melodic): bank is an instrument, note is letter A-G, optional #, "/", octave -1..8
    - type 1 (percussive): bank must be "drums", note is a drum name
    - velo: whole number 0-127; duration > 0; time >= 0
    """
    logger.info("Received scene object validation request")

    try:
        data = parse_json_argument(scene_data)
    except SceneValidationError as e:
        return json_error_response(e)

    result = validate_scene_data(data)
    if result["isError"]:
        return SceneResponse(success=False, error=result)

    return SceneResponse(success=True, content=result["object"])

@mcp.tool()
def build_composition_tool(objects_data: str) -> SceneResponse:
    """
    Validate an ordered list of scene objects as one composition.

    Objects are rendered in the order given. If any object is invalid the
    whole composition is rejected and the error names the object index.

    Args:
        objects_data: JSON array of scene objects

    Returns:
        SceneResponse whose content is {"objects": [...]} on success
    """
    logger.info("Received composition request")

    try:
        data = parse_json_argument(objects_data)
    except SceneValidationError as e:
        return json_error_response(e)

    result = validate_composition_data(data)
    if result["isError"]:
        return SceneResponse(success=False, error=result)

    logger.info(f"Composition accepted with {len(result['composition']['objects'])} objects")
    return SceneResponse(success=True, content=result["composition"])

@mcp.tool()
def create_parameter(name: str, placeholder: str) -> SceneResponse:
    """
    Describe a named text parameter for the author to fill in.

    Args:
        name: parameter name (non-empty)
        placeholder: hint text shown in the empty field (non-empty)
    """
    try:
        descriptor = ParameterDescriptor.create(name, placeholder)
    except SceneValidationError as e:
        return SceneResponse(success=False, error=create_validation_error(e))
    return SceneResponse(success=True, content=descriptor.to_config())

@mcp.tool()
def get_json_schema() -> Dict[str, Any]:
    """Return the JSON Schema for every scene object type, keyed by type tag."""
    return create_schema()


# ============================================================================
# MCP Server Startup
# ============================================================================

def main():
    """Start the MCP server in stdio mode."""
    logger.info("Starting Scene Validator MCP Server")
    logger.debug(f"Object types available: {get_object_types()}")
    logger.debug(f"Melodic banks available: {MELODIC_BANKS}")
    logger.debug(f"Drum notes available: {DRUM_NOTES}")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("MCP server stopped by user")
    except Exception as e:
        logger.error(f"MCP server error: {e}")
        raise

if __name__ == "__main__":
    main()
