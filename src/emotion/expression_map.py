"""
Expression profiles.

Maps every display string to the commands the presentation layer should run,
plus per-trigger overlays that apply regardless of the emotion shown.

Light names are emotion families; LIGHT_COLOURS gives the sphere colour for each:
    happy    : pink
    sad      : blue
    surprised: yellow
    scared   : grey
    angry    : red
    calm     : green
    energetic: purple
"""

from __future__ import annotations

from dataclasses import dataclass

from .affect_classifier import AffectiveLabel

LIGHT_COLOURS: dict[str, str] = {
    "happy": "pink",
    "sad": "blue",
    "surprised": "yellow",
    "scared": "grey",
    "angry": "red",
    "calm": "green",
    "energetic": "purple",
}


@dataclass(frozen=True, slots=True)
class ExpressionProfile:
    face: str
    light: str | None = None
    sound: str | None = None
    thought: str | None = None
    tail: str | None = None


@dataclass(frozen=True, slots=True)
class TriggerOverlay:
    thought: str | None = None
    sound: str | None = None


EXPRESSIONS: dict[str, ExpressionProfile] = {
    "neutral": ExpressionProfile(face="neutral"),
    # positive
    "excited": ExpressionProfile(face="happy", light="happy", sound="happy", thought="heart", tail="happy"),
    "delighted": ExpressionProfile(face="happy", light="happy", sound="happy", thought="heart", tail="happy"),
    "happy": ExpressionProfile(face="happy", light="happy", sound="happy", tail="happy"),
    "content": ExpressionProfile(face="happy", light="calm", tail="happy"),
    "relaxed": ExpressionProfile(face="happy", light="calm"),
    "happy sleepy": ExpressionProfile(face="happy", light="calm", tail="sleep"),
    # neutral valence
    "surprised": ExpressionProfile(face="surprised", light="surprised", sound="surprised", thought="exclamation", tail="surprised"),
    "energetic": ExpressionProfile(face="surprised", light="energetic", sound="peep", tail="happy"),
    "tired": ExpressionProfile(face="neutral", tail="sleep"),
    "sleepy": ExpressionProfile(face="neutral", thought="sleep", tail="sleep"),
    # negative
    "scared": ExpressionProfile(face="scared", light="scared", sound="scared", tail="scared"),
    "tense": ExpressionProfile(face="scared", light="scared", tail="scared"),
    "frustrated": ExpressionProfile(face="angry", light="angry", tail="angry"),
    "angry": ExpressionProfile(face="angry", light="angry", sound="angry", thought="storm", tail="angry"),
    "miserable": ExpressionProfile(face="sad", light="sad", sound="sad", tail="sad"),
    "sad": ExpressionProfile(face="sad", light="sad", sound="sad", thought="raincloud", tail="sad"),
    "gloomy": ExpressionProfile(face="sad", light="sad", tail="sad"),
    "sad sleepy": ExpressionProfile(face="sad", light="sad", tail="sleep"),
    # states
    "sleep": ExpressionProfile(face="sleep", thought="sleep", tail="sleep"),
    "loudnoise": ExpressionProfile(face="surprised", light="surprised", sound="surprised", thought="exclamation", tail="wakeup"),
}

# Keyed by lower-case trigger event name.
TRIGGER_OVERLAYS: dict[str, TriggerOverlay] = {
    "hungerneeded": TriggerOverlay(thought="food"),
    "foodheard": TriggerOverlay(thought="food"),
    "touchneeded": TriggerOverlay(thought="touch"),
    "socialneeded": TriggerOverlay(thought="social"),
    "restneeded": TriggerOverlay(thought="sleep"),
    "nameheard": TriggerOverlay(sound="peep"),
    "lookingtowards": TriggerOverlay(thought="looking"),
    "toofaraway": TriggerOverlay(thought="come_closer"),
}

# Ambient face derived from the session mood while nothing is being displayed.
PASSIVE_FACES: dict[AffectiveLabel, str] = {
    AffectiveLabel.EXCITED: "happy",
    AffectiveLabel.HAPPY: "happy",
    AffectiveLabel.RELAXED: "happy",
    AffectiveLabel.SURPRISED: "surprised",
    AffectiveLabel.ENERGETIC: "surprised",
    AffectiveLabel.NEUTRAL: "neutral",
    AffectiveLabel.TIRED: "neutral",
    AffectiveLabel.TENSE: "scared",
    AffectiveLabel.SCARED: "scared",
    AffectiveLabel.ANGRY: "angry",
    AffectiveLabel.MISERABLE: "sad",
    AffectiveLabel.SAD: "sad",
    AffectiveLabel.GLOOMY: "sad",
    AffectiveLabel.SLEEP: "sleep",
}


def normalize_name(name: str | None) -> str:
    return " ".join(str(name or "").strip().lower().split())


def profile_for(emotion: str) -> ExpressionProfile | None:
    return EXPRESSIONS.get(normalize_name(emotion))


def overlay_for(trigger_event: str) -> TriggerOverlay | None:
    return TRIGGER_OVERLAYS.get(normalize_name(trigger_event).replace(" ", ""))


def passive_face_for(mood: AffectiveLabel) -> str:
    return PASSIVE_FACES.get(mood, "neutral")
