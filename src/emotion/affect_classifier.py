"""
Valence/arousal classifiers.

Two independent partitions of the affect plane:

- ``classify_mood``: coarse grid used for the long-term temperament and the
  session mood. The grid has small gaps on its boundary lines; a point that
  lands in a gap is reported as Neutral.
- ``classify_display``: fine grid used to pick the display string from a
  fuzzed response. Built from half-open bands so every finite point maps to
  exactly one cell.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("EmotionEngine.classifier")

_INF = math.inf


class AffectiveLabel(str, Enum):
    """Named affective states produced by the coarse classifier."""

    EXCITED = "Excited"
    HAPPY = "Happy"
    RELAXED = "Relaxed"
    SURPRISED = "Surprised"
    ENERGETIC = "Energetic"
    NEUTRAL = "Neutral"
    TIRED = "Tired"
    TENSE = "Tense"
    SCARED = "Scared"
    ANGRY = "Angry"
    MISERABLE = "Miserable"
    SAD = "Sad"
    GLOOMY = "Gloomy"
    SLEEP = "Sleep"

    @classmethod
    def parse(cls, text: str) -> "AffectiveLabel | None":
        wanted = str(text or "").strip().lower()
        for label in cls:
            if label.value.lower() == wanted:
                return label
        return None


@dataclass(frozen=True, slots=True)
class _Interval:
    low: float = -_INF
    high: float = _INF
    low_inclusive: bool = False
    high_inclusive: bool = False

    def contains(self, value: float) -> bool:
        above = value >= self.low if self.low_inclusive else value > self.low
        below = value <= self.high if self.high_inclusive else value < self.high
        return above and below


@dataclass(frozen=True, slots=True)
class _Region:
    label: AffectiveLabel
    valence: _Interval
    arousal: _Interval


# Coarse grid. Boundaries are strict unless marked inclusive.
MOOD_REGIONS: tuple[_Region, ...] = (
    _Region(AffectiveLabel.EXCITED, _Interval(low=3), _Interval(low=3)),
    _Region(AffectiveLabel.HAPPY, _Interval(low=3), _Interval(-3, 3)),
    _Region(AffectiveLabel.RELAXED, _Interval(low=3), _Interval(high=-3)),
    _Region(AffectiveLabel.SURPRISED, _Interval(-2, 3), _Interval(low=8)),
    _Region(AffectiveLabel.ENERGETIC, _Interval(-2, 3), _Interval(5, 8)),
    _Region(AffectiveLabel.NEUTRAL, _Interval(-2, 3), _Interval(-3, 5)),
    _Region(AffectiveLabel.TIRED, _Interval(-2, 3), _Interval(high=-3)),
    _Region(AffectiveLabel.TENSE, _Interval(-5, -2), _Interval(low=5)),
    _Region(AffectiveLabel.SCARED, _Interval(high=-5, high_inclusive=True), _Interval(low=8)),
    _Region(AffectiveLabel.ANGRY, _Interval(high=-5, high_inclusive=True), _Interval(6, 8, high_inclusive=True)),
    _Region(AffectiveLabel.MISERABLE, _Interval(high=-2), _Interval(-3, 5, high_inclusive=True)),
    _Region(AffectiveLabel.SAD, _Interval(high=-2), _Interval(-7, -3, high_inclusive=True)),
    _Region(AffectiveLabel.GLOOMY, _Interval(high=-2), _Interval(high=-7, high_inclusive=True)),
)


def classify_mood(valence: float, arousal: float) -> AffectiveLabel:
    """Map a valence/arousal point to a coarse affective label."""
    v = float(valence)
    a = float(arousal)
    for region in MOOD_REGIONS:
        if region.valence.contains(v) and region.arousal.contains(a):
            return region.label
    logger.debug("[Classifier] (%.3f, %.3f) outside mood regions, using Neutral", v, a)
    return AffectiveLabel.NEUTRAL


# Fine grid: lower bounds of each band, highest first. Anything below the
# last bound falls into the final band.
DISPLAY_VALENCE_BANDS: tuple[float, ...] = (6.0, 3.0, -3.0, -6.0)
DISPLAY_AROUSAL_BANDS: tuple[float, ...] = (7.0, 3.0, -3.0, -7.0)

# Rows: valence band (very positive -> very negative).
# Columns: arousal band (peak -> very low).
DISPLAY_GRID: tuple[tuple[str, ...], ...] = (
    ("excited", "delighted", "happy", "content", "happy sleepy"),
    ("excited", "happy", "happy", "relaxed", "happy sleepy"),
    ("surprised", "energetic", "neutral", "tired", "sleepy"),
    ("scared", "tense", "frustrated", "sad", "sad sleepy"),
    ("angry", "angry", "miserable", "gloomy", "sad sleepy"),
)

DISPLAY_LABELS: frozenset[str] = frozenset(label for row in DISPLAY_GRID for label in row)


def _band_index(value: float, bands: tuple[float, ...]) -> int:
    for index, lower in enumerate(bands):
        if value >= lower:
            return index
    return len(bands)


def classify_display(valence: float, arousal: float) -> str:
    """Map a (fuzzed) response point to the display string shown to the user."""
    v = float(valence)
    a = float(arousal)
    if math.isnan(v) or math.isnan(a):
        logger.warning("[Classifier] display lookup with NaN input (%s, %s), using neutral", v, a)
        return "neutral"
    return DISPLAY_GRID[_band_index(v, DISPLAY_VALENCE_BANDS)][_band_index(a, DISPLAY_AROUSAL_BANDS)]
