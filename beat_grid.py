#!/usr/bin/env python3
"""
Beat Grid Models for Music Objects
==================================

A music object carries `length` bars at a fixed subdivision of
SUBDIVISIONS_PER_BAR slots per bar. Every slot holds an ordered list of
hits (possibly empty). Slot index and in-slot order are the timing
information the synthesizer relies on, so both are preserved as given.

Each hit is checked on its own, but its bank and note rules depend on
its kind:

- melodic (type 0): bank from MELODIC_BANKS, note like "C#/4"
- percussive (type 1): bank exactly "drums", note from DRUM_NOTES
"""

import logging
from typing import Iterator, Sequence, Tuple
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from scene_constants import (
    HitType, VALID_HIT_TYPES, MELODIC_BANKS, DRUM_BANK, DRUM_NOTES,
    MIN_LENGTH, MAX_LENGTH, MIN_VELOCITY, MAX_VELOCITY,
    is_valid_melodic_note, slot_count
)
from scene_fields import Number, check_non_negative, check_positive, is_integral

logger = logging.getLogger(__name__)


# ============================================================================
# Hit Model
# ============================================================================

class Hit(BaseModel):
    """A single note or percussion event inside a beat slot."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: Number = Field(..., description="Offset within the slot, fractional for microtiming")
    type: Number = Field(..., description="0 = melodic, 1 = percussive")
    bank: str = Field(..., description="Instrument bank, or 'drums' for percussive hits")
    note: str = Field(..., description="Pitch like 'C#/4', or a drum name like 'Kick'")
    velo: Number = Field(
        ...,
        validation_alias=AliasChoices("velo", "velocity"),
        description="MIDI-style velocity 0-127",
    )
    duration: Number = Field(..., description="Length of the hit, must be positive")

    @property
    def kind(self) -> HitType:
        return HitType(self.type)

    @field_validator('time')
    @classmethod
    def validate_time(cls, v):
        return check_non_negative(v, "Hit time")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        if not is_integral(v) or v not in VALID_HIT_TYPES:
            raise ValueError(f"Hit type must be one of {VALID_HIT_TYPES} (0 = melodic, 1 = percussive), got {v}")
        return int(v)

    @field_validator('bank')
    @classmethod
    def validate_bank(cls, v, info):
        """Bank vocabulary depends on the hit type validated just before it."""
        hit_type = info.data.get('type')
        if hit_type == HitType.MELODIC and v not in MELODIC_BANKS:
            raise ValueError(f"Invalid melodic bank '{v}'. Valid banks: {MELODIC_BANKS}")
        if hit_type == HitType.PERCUSSIVE and v != DRUM_BANK:
            raise ValueError(f"Percussive hits must use bank '{DRUM_BANK}', got '{v}'")
        return v

    @field_validator('note')
    @classmethod
    def validate_note(cls, v, info):
        hit_type = info.data.get('type')
        if hit_type == HitType.MELODIC and not is_valid_melodic_note(v):
            raise ValueError(
                f"Invalid melodic note '{v}'. Use a letter A-G, optional '#', '/', and octave -1 to 8 (e.g. 'C#/4')"
            )
        if hit_type == HitType.PERCUSSIVE and v not in DRUM_NOTES:
            raise ValueError(f"Invalid drum note '{v}'. Valid drums: {DRUM_NOTES}")
        return v

    @field_validator('velo')
    @classmethod
    def validate_velocity(cls, v):
        if not is_integral(v):
            raise ValueError(f"Velocity must be a whole number, got {v}")
        if v < MIN_VELOCITY or v > MAX_VELOCITY:
            raise ValueError(f"Velocity must be between {MIN_VELOCITY} and {MAX_VELOCITY}, got {v}")
        return v

    @field_validator('duration')
    @classmethod
    def validate_duration(cls, v):
        return check_positive(v, "Hit duration")


BeatSlot = Tuple[Hit, ...]


# ============================================================================
# Grid Validation
# ============================================================================

def validate_length(length: float) -> float:
    """Bars must be an even whole number between MIN_LENGTH and MAX_LENGTH."""
    if not is_integral(length):
        raise ValueError(f"Length must be a whole number of bars, got {length}")
    if length < MIN_LENGTH or length > MAX_LENGTH or length % 2 != 0:
        raise ValueError(f"Length must be an even number between {MIN_LENGTH} and {MAX_LENGTH}, got {length}")
    return length

def validate_beat_grid(instructions: Sequence[BeatSlot], length: float) -> Sequence[BeatSlot]:
    """
    Check the grid shape against the declared length.

    Individual hits are already validated by the time this runs; the
    remaining structural rule is that there is exactly one slot per
    subdivision of every bar.

    Raises:
        ValueError: if the slot count does not equal length * SUBDIVISIONS_PER_BAR
    """
    expected = slot_count(length)
    if len(instructions) != expected:
        raise ValueError(
            f"Music of length {length:g} needs exactly {expected} beat slots, got {len(instructions)}"
        )
    logger.debug("Beat grid accepted: %s slots, %s hits", expected, count_hits(instructions))
    return instructions

def iter_hits(instructions: Sequence[BeatSlot]) -> Iterator[Tuple[int, int, Hit]]:
    """Yield (slot_index, hit_index, hit) in playback order."""
    for slot_idx, slot in enumerate(instructions):
        for hit_idx, hit in enumerate(slot):
            yield slot_idx, hit_idx, hit

def count_hits(instructions: Sequence[BeatSlot]) -> int:
    return sum(len(slot) for slot in instructions)
