#!/usr/bin/env python3
"""
Scene Object Schema - Constants and Definitions
===============================================

Closed vocabularies for scene objects: type tags, effects, font styles,
layout enums, and the instrument/drum banks and note grammar used by
music hits.
"""

import re
from enum import Enum, IntEnum


# ============================================================================
# Object Type Constants
# ============================================================================

class ObjectType(Enum):
    """Type tags accepted at the top level of a scene object."""
    PARAGRAPH = "paragraph"
    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    GRAPHIC = "graphic"
    GIF = "gif"
    VIDEO = "video"
    MUSIC = "music"

    def __str__(self):
        return self.value

VALID_OBJECT_TYPES = [t.value for t in ObjectType]


# ============================================================================
# Shared Presentation Constants
# ============================================================================

class Effect(Enum):
    """Animation effects that can be applied to any object."""
    SIN = "sin"
    COS = "cos"
    WAVE = "wave"
    ROTATE = "rotate"
    SOON = "soon"
    FIREWORKS = "fireworks"

    def __str__(self):
        return self.value

class ParagraphStyle(Enum):
    """Font families for paragraphs and links."""
    SANS = "sans"
    SERIF = "serif"

class TextStyle(Enum):
    """Extended font families for display text."""
    SANS = "sans"
    MONO = "mono"
    PUNCHOUT = "punchout"
    EIGHTBIT = "eightbit"
    CURSIVE = "cursive"
    POSTER = "poster"
    TAPE = "tape"
    BOOK = "book"
    SERIF = "serif"

class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

class AttributeType(Enum):
    """Inline text attribute applied to a character range."""
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold-italic"

class WordWrap(Enum):
    AUTO = "auto"
    MANUAL = "manual"

class ScaleMode(Enum):
    FIT = "fit"
    FILL = "fill"

# Color components and opacity share the unit interval
MIN_UNIT = 0.0
MAX_UNIT = 1.0


# ============================================================================
# Music Constants
# ============================================================================

class HitType(IntEnum):
    """Kind discriminator for a hit; selects the bank and note vocabulary."""
    MELODIC = 0
    PERCUSSIVE = 1

VALID_HIT_TYPES = [h.value for h in HitType]

MELODIC_BANKS = [
    "bleep",
    "meow",
    "bass",
    "ping",
    "string",
    "reso",
    "arp",
    "bark",
    "mono1",
    "mono2",
    "mono3",
    "funk",
    "sax",
    "bell",
    "roboto",
    "do",
]

DRUM_BANK = "drums"

DRUM_NOTES = [
    "Kick",
    "Snare",
    "Clap",
    "Hat",
    "Thump",
    "Glitch",
    "Tambourine",
    "Whistle",
    "Block",
    "Stick",
    "Shaker",
    "Crash",
    "Tom",
    "Conga",
    "Cowbell",
    "Yeah",
]

# Pitch letter, optional sharp, slash, octave -1..8 (e.g. "C#/4")
NOTE_PATTERN = re.compile(r"^[A-G]#?/(-1|[0-8])$")

# Grid shape: length is a number of bars, each bar has a fixed subdivision
MIN_LENGTH = 2
MAX_LENGTH = 16
SUBDIVISIONS_PER_BAR = 4

MIN_VELOCITY = 0
MAX_VELOCITY = 127


def is_valid_melodic_note(note: str) -> bool:
    """Check a melodic note against the pitch grammar."""
    return isinstance(note, str) and NOTE_PATTERN.match(note) is not None

def slot_count(length: int) -> int:
    """Number of beat slots a music grid of `length` bars must contain."""
    return int(length) * SUBDIVISIONS_PER_BAR
