#!/usr/bin/env python3
"""
Shared Field Types and Checks
=============================

Pydantic type aliases and range checks reused by every scene object.

Numbers are strict: ints and floats are accepted as given, while
booleans and numeric strings are rejected rather than coerced. Tuple
shapes (frame, transform, color) still accept JSON arrays.
"""

from typing import Annotated, Any, Optional, Tuple, Union
from pydantic import AfterValidator, BeforeValidator, StrictFloat, StrictInt

from scene_constants import MIN_UNIT, MAX_UNIT


def require_number(value: Any) -> Any:
    # bool is an int subclass, so it has to be excluded explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a number, got {value!r}")
    return value

Number = Annotated[Union[StrictInt, StrictFloat], BeforeValidator(require_number)]

Pair = Tuple[Number, Number]

# x, y, width, height
Frame = Tuple[Number, Number, Number, Number]

# Two basis vectors followed by the translation
Transform = Tuple[Pair, Pair, Pair]


def check_unit_interval(value: Optional[float], label: str) -> Optional[float]:
    """Reject values outside [0, 1]; None passes through as absent."""
    if value is not None and not (MIN_UNIT <= value <= MAX_UNIT):
        raise ValueError(f"{label} must be between {MIN_UNIT:g} and {MAX_UNIT:g}, got {value}")
    return value

def check_color(value: Tuple[float, ...]) -> Tuple[float, ...]:
    for idx, component in enumerate(value):
        if not (MIN_UNIT <= component <= MAX_UNIT):
            raise ValueError(
                f"Color component {idx} must be between {MIN_UNIT:g} and {MAX_UNIT:g}, got {component}"
            )
    return value

# r, g, b, a
Color = Annotated[Tuple[Number, Number, Number, Number], AfterValidator(check_color)]


def check_positive(value: Optional[float], label: str) -> Optional[float]:
    if value is not None and not value > 0:
        raise ValueError(f"{label} must be greater than 0, got {value}")
    return value

def check_non_negative(value: Optional[float], label: str) -> Optional[float]:
    if value is not None and not value >= 0:
        raise ValueError(f"{label} must be 0 or greater, got {value}")
    return value

def is_integral(value: float) -> bool:
    """True for ints and for floats with no fractional part (e.g. 4.0)."""
    if isinstance(value, int):
        return True
    return float(value).is_integer()

def check_not_blank(value: str, label: str) -> str:
    # Whitespace-only counts as empty; the original text is kept untrimmed
    if not value.strip():
        raise ValueError(f"{label} must not be empty")
    return value
