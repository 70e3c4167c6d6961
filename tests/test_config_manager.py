from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from core.config_manager import AppConfig, ConfigManager


class ConfigManagerTest(unittest.TestCase):
    def test_shipped_config_matches_defaults(self) -> None:
        config = ConfigManager(ROOT / "config" / "config.json").load()
        self.assertEqual(ConfigManager.to_dict(config), ConfigManager.to_dict(AppConfig()))

    def test_default_decay_rates(self) -> None:
        gauges = AppConfig().gauges
        self.assertAlmostEqual(gauges.touch.decay_rate, 100 / (3 * 3600))
        self.assertAlmostEqual(gauges.rest.decay_rate, 100 / (12 * 3600))
        self.assertAlmostEqual(gauges.social.decay_rate, 100 / (6 * 3600))
        self.assertAlmostEqual(gauges.hunger.decay_rate, 100 / (6 * 3600))

    def test_missing_file_gives_defaults(self) -> None:
        with TemporaryDirectory() as td:
            config = ConfigManager(Path(td) / "absent.json").load()
        self.assertEqual(config, AppConfig())

    def test_invalid_json_and_non_object_root(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text("{oops", encoding="utf-8")
            self.assertEqual(ConfigManager(path).load(), AppConfig())
            path.write_text("[]", encoding="utf-8")
            self.assertEqual(ConfigManager(path).load(), AppConfig())

    def test_malformed_section_only_resets_that_section(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text(
                json.dumps({"display": "fast", "mood": {"fuzz_range": 1.5, "event_bleed": "lots"}}),
                encoding="utf-8",
            )
            config = ConfigManager(path).load()
        self.assertEqual(config.display, AppConfig().display)
        self.assertEqual(config.mood.fuzz_range, 1.5)
        self.assertEqual(config.mood.event_bleed, 0.01)

    def test_overlapping_thresholds_revert(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text(
                json.dumps({"gauges": {"touch": {"needed": 80, "fulfilled": 20, "full_decay_hours": 1}}}),
                encoding="utf-8",
            )
            config = ConfigManager(path).load()
        self.assertEqual((config.gauges.touch.needed, config.gauges.touch.fulfilled), (30, 70))
        self.assertEqual(config.gauges.touch.full_decay_hours, 1.0)
        self.assertEqual(config.gauges.rest, AppConfig().gauges.rest)

    def test_values_are_clamped(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "config.json"
            path.write_text(
                json.dumps(
                    {
                        "gauges": {"hunger": {"initial": 250, "full_decay_hours": -2}},
                        "mood": {"default_long_term_valence": 40, "session_bleed": 3},
                        "testing": {"time_multiplier": 0},
                        "behavior": {"tick_interval_ms": 1},
                    }
                ),
                encoding="utf-8",
            )
            config = ConfigManager(path).load()
        self.assertEqual(config.gauges.hunger.initial, 100)
        self.assertEqual(config.gauges.hunger.full_decay_hours, 6.0)
        self.assertEqual(config.mood.default_long_term_valence, 10.0)
        self.assertEqual(config.mood.session_bleed, 1.0)
        self.assertEqual(config.testing.time_multiplier, 1.0)
        self.assertEqual(config.behavior.tick_interval_ms, 10)

    def test_speed_multiplier(self) -> None:
        config = AppConfig()
        self.assertEqual(config.testing.speed_multiplier, 1.0)
        config.testing.accelerated = True
        self.assertEqual(config.testing.speed_multiplier, 180.0)

    def test_save_and_reload(self) -> None:
        with TemporaryDirectory() as td:
            cfg_path = Path(td) / "config.json"
            manager = ConfigManager(cfg_path)
            config = manager.load()
            config.gauges.social.needed = 20
            config.gauges.social.fulfilled = 90
            config.display.cooldown_seconds = 1.5
            config.sleep.max_duration_seconds = 600
            config.persistence.enabled = False
            config.testing.accelerated = True
            config.behavior.debug_mode = True
            self.assertTrue(manager.save(config))

            reloaded = ConfigManager(cfg_path).load()
            self.assertEqual(reloaded.gauges.social.needed, 20)
            self.assertEqual(reloaded.gauges.social.fulfilled, 90)
            self.assertEqual(reloaded.display.cooldown_seconds, 1.5)
            self.assertEqual(reloaded.sleep.max_duration_seconds, 600)
            self.assertFalse(reloaded.persistence.enabled)
            self.assertTrue(reloaded.testing.accelerated)
            self.assertTrue(reloaded.behavior.debug_mode)


if __name__ == "__main__":
    unittest.main()
