#!/usr/bin/env python3
"""
Composition Container and Parameter Descriptor
==============================================

A Composition is the ordered, append-only list of validated scene
objects handed to the renderer. Order is render order and always equals
insertion order.

build_composition() validates a batch of field bags, optionally across a
thread pool, and appends the results in submission order regardless of
which validation finishes first.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, Iterator, List, Literal, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from scene_models import SceneObject, SceneValidationError

logger = logging.getLogger(__name__)


# ============================================================================
# Composition
# ============================================================================

class Composition:
    """Ordered, append-only collection of scene objects."""

    def __init__(self):
        self._objects: List[SceneObject] = []

    def append(self, obj: SceneObject) -> None:
        """
        Append an already validated object at the end.

        Objects are validated when they are built, so they are not checked
        again here; only non-objects are refused.
        """
        if obj is None:
            raise SceneValidationError("Cannot append an empty object to a composition", field="object")
        if not isinstance(obj, SceneObject):
            raise SceneValidationError(
                f"Only scene objects can be appended, got {type(obj).__name__}",
                field="object",
                value=obj,
            )
        self._objects.append(obj)

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        return tuple(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(tuple(self._objects))

    def to_dict(self) -> Dict[str, Any]:
        return {"objects": [obj.to_dict() for obj in self._objects]}


def build_composition(field_bags: Iterable[Mapping[str, Any]],
                      max_workers: Optional[int] = None) -> Composition:
    """
    Validate every field bag and collect the results into a Composition.

    Args:
        field_bags: raw scene objects in render order
        max_workers: thread pool size; 1 validates inline

    Returns:
        Composition holding the objects in the order they were given

    Raises:
        SceneValidationError: for the first bag (by position) that fails.
            No composition is returned in that case.
    """
    bags = list(field_bags)
    logger.debug("Building composition from %s objects (max_workers=%s)", len(bags), max_workers)

    if max_workers == 1 or len(bags) < 2:
        results = [_validate_indexed(idx, bag) for idx, bag in enumerate(bags)]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() yields in submission order, so results line up with bags
            results = list(executor.map(_validate_indexed, range(len(bags)), bags))

    composition = Composition()
    for obj in results:
        composition.append(obj)

    logger.info("Composition built with %s objects", len(composition))
    return composition

def _validate_indexed(index: int, bag: Mapping[str, Any]) -> SceneObject:
    try:
        return SceneObject.from_dict(bag)
    except SceneValidationError as e:
        # Prefix the position so the author knows which object to fix
        field = f"objects.{index}.{e.field}" if e.field else f"objects.{index}"
        raise SceneValidationError(
            f"Object {index}: {e.message}", field=field, value=e.value, errors=e.errors
        ) from e


# ============================================================================
# Parameter Descriptor
# ============================================================================

class ParameterDescriptor(BaseModel):
    """A named text parameter the upstream author is asked to fill in."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["text"] = "text"
    placeholder: str

    @field_validator('name', 'placeholder')
    @classmethod
    def validate_not_empty(cls, v, info):
        if not v:
            raise ValueError(f"Parameter {info.field_name} must not be empty")
        return v

    @classmethod
    def create(cls, name: str, placeholder: str) -> "ParameterDescriptor":
        """Build a descriptor, raising SceneValidationError when invalid."""
        try:
            return cls(name=name, placeholder=placeholder)
        except ValidationError as e:
            raise SceneValidationError.from_pydantic(e, "parameter") from e

    def to_config(self) -> Dict[str, Any]:
        """Wrap as the argument list the author-facing config expects."""
        return {"args": [self.model_dump()]}
