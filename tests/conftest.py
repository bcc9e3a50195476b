import pytest


@pytest.fixture
def make_hit():
    """Factory for hit dicts; defaults to a valid melodic hit."""
    def _make_hit(**overrides):
        hit = {"time": 0, "type": 0, "bank": "bass", "note": "C/3", "velo": 100, "duration": 1}
        hit.update(overrides)
        return hit
    return _make_hit


@pytest.fixture
def make_drum_hit():
    def _make_drum_hit(**overrides):
        hit = {"time": 0, "type": 1, "bank": "drums", "note": "Kick", "velo": 110, "duration": 0.5}
        hit.update(overrides)
        return hit
    return _make_drum_hit


@pytest.fixture
def make_music():
    """Factory for music field bags with `length * 4` empty slots unless given."""
    def _make_music(length=2, instructions=None, **overrides):
        if instructions is None:
            instructions = [[] for _ in range(int(length) * 4)]
        bag = {"type": "music", "bpm": 120, "length": length, "instructions": instructions}
        bag.update(overrides)
        return bag
    return _make_music


@pytest.fixture
def sample_objects():
    """One valid field bag per object type, in a fixed order."""
    return [
        {"type": "paragraph", "text": "Intro", "size": 18, "alignment": "center"},
        {"type": "text", "text": "HELLO", "style": "eightbit", "word-wrap": "manual"},
        {"type": "link", "url": "https://example.com", "title": "Example"},
        {"type": "image", "src": "cat.png"},
        {"type": "graphic", "src": "star.svg", "color": [1, 1, 0, 1]},
        {"type": "gif", "src": "dance.gif"},
        {"type": "video", "src": "clip.mp4", "muted": True},
        {"type": "music", "bpm": 90, "length": 2, "instructions": [[] for _ in range(8)]},
    ]
