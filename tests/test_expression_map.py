from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from emotion.affect_classifier import DISPLAY_LABELS, AffectiveLabel
from emotion.expression_map import (
    EXPRESSIONS,
    LIGHT_COLOURS,
    normalize_name,
    overlay_for,
    passive_face_for,
    profile_for,
)

FACES = {"happy", "sad", "angry", "scared", "surprised", "neutral", "sleep"}
TAILS = {"happy", "angry", "sad", "scared", "surprised", "wakeup", "sleep"}
SOUNDS = {"happy", "sad", "scared", "surprised", "angry", "peep"}


class ExpressionMapTest(unittest.TestCase):
    def test_every_display_label_has_a_profile(self) -> None:
        for label in DISPLAY_LABELS:
            with self.subTest(label=label):
                self.assertIsNotNone(profile_for(label))
        self.assertIsNotNone(profile_for("sleep"))
        self.assertIsNotNone(profile_for("loudnoise"))

    def test_profiles_use_known_commands(self) -> None:
        for name, profile in EXPRESSIONS.items():
            with self.subTest(name=name):
                self.assertIn(profile.face, FACES)
                if profile.light is not None:
                    self.assertIn(profile.light, LIGHT_COLOURS)
                if profile.tail is not None:
                    self.assertIn(profile.tail, TAILS)
                if profile.sound is not None:
                    self.assertIn(profile.sound, SOUNDS)

    def test_neutral_has_no_light(self) -> None:
        self.assertIsNone(profile_for("neutral").light)

    def test_names_are_normalized(self) -> None:
        self.assertEqual(normalize_name("  Happy   Sleepy "), "happy sleepy")
        self.assertIs(profile_for("HAPPY SLEEPY"), EXPRESSIONS["happy sleepy"])
        self.assertIsNone(profile_for("bored"))

    def test_trigger_overlays(self) -> None:
        self.assertEqual(overlay_for("HungerNeeded").thought, "food")
        self.assertEqual(overlay_for("foodheard").thought, "food")
        self.assertEqual(overlay_for("Looking Towards").thought, "looking")
        self.assertEqual(overlay_for("NameHeard").sound, "peep")
        self.assertIsNone(overlay_for("LookingAway"))
        self.assertIsNone(overlay_for(""))

    def test_passive_face_for_every_mood(self) -> None:
        for label in AffectiveLabel:
            self.assertIn(passive_face_for(label), FACES)
        self.assertEqual(passive_face_for(AffectiveLabel.GLOOMY), "sad")


if __name__ == "__main__":
    unittest.main()
