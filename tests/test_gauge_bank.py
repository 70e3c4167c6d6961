from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from core.config_manager import GaugesConfig, NeedConfig
from emotion.gauge_bank import GAUGE_MAX, GAUGE_MIN, GaugeBank, crossing_check

# one point per second
_FAST_HOURS = 100 / 3600


class CrossingCheckTest(unittest.TestCase):
    def test_needed_fires_on_downward_crossing(self) -> None:
        self.assertEqual(crossing_check("touch", 30, 29, 30, 70), "TouchNeeded")
        self.assertEqual(crossing_check("touch", 50, 25, 30, 70), "TouchNeeded")

    def test_fulfilled_fires_on_upward_crossing(self) -> None:
        self.assertEqual(crossing_check("social", 70, 71, 30, 70), "SocialFulfilled")
        self.assertEqual(crossing_check("hunger", 10, 90, 30, 70), "HungerFulfilled")

    def test_no_event_without_crossing(self) -> None:
        self.assertIsNone(crossing_check("rest", 29, 20, 30, 70))
        self.assertIsNone(crossing_check("rest", 50, 50, 30, 70))
        self.assertIsNone(crossing_check("rest", 71, 90, 30, 70))
        self.assertIsNone(crossing_check("rest", 20, 30, 30, 70))


class GaugeBankTest(unittest.TestCase):
    def test_defaults(self) -> None:
        bank = GaugeBank()
        self.assertEqual(bank.values(), {"touch": 50, "rest": 50, "social": 50, "hunger": 50})
        rates = bank.decay_rates()
        self.assertAlmostEqual(rates["touch"], 100 / (3 * 3600))
        self.assertAlmostEqual(rates["rest"], 100 / (12 * 3600))
        self.assertAlmostEqual(rates["social"], 100 / (6 * 3600))
        self.assertAlmostEqual(rates["hunger"], 100 / (6 * 3600))

    def test_apply_delta_then_crossing_reports_touch_needed(self) -> None:
        bank = GaugeBank()
        self.assertTrue(bank.apply_delta("touch", -25))
        self.assertEqual(bank.touch, 25)
        self.assertEqual(bank.check_crossings(), ["TouchNeeded"])
        self.assertEqual(bank.check_crossings(), [])

    def test_apply_delta_clamps(self) -> None:
        bank = GaugeBank()
        bank.apply_delta("rest", 500)
        self.assertEqual(bank.rest, GAUGE_MAX)
        bank.apply_delta("rest", -1000)
        self.assertEqual(bank.rest, GAUGE_MIN)

    def test_apply_delta_unknown_gauge(self) -> None:
        bank = GaugeBank()
        self.assertFalse(bank.apply_delta("thirst", 10))
        self.assertEqual(bank.values(), {"touch": 50, "rest": 50, "social": 50, "hunger": 50})

    def test_get_is_case_insensitive_and_rejects_unknown(self) -> None:
        bank = GaugeBank()
        self.assertEqual(bank.get("Touch"), 50)
        with self.assertRaises(KeyError):
            bank.get("thirst")

    def test_decay_removes_whole_points_and_keeps_remainder(self) -> None:
        bank = GaugeBank()
        bank.tick(100)
        self.assertEqual(bank.touch, 50)
        bank.tick(10)
        self.assertEqual(bank.touch, 49)
        gauge = bank.gauge("touch")
        self.assertIsNotNone(gauge)
        self.assertGreater(gauge.accumulator, 0.0)
        self.assertLess(gauge.accumulator, 1.0)

    def test_speed_multiplier_scales_elapsed_time(self) -> None:
        accelerated = GaugeBank()
        realtime = GaugeBank()
        accelerated.tick(60, 180)
        realtime.tick(60 * 180)
        self.assertEqual(accelerated.values(), realtime.values())

    def test_slow_descent_fires_needed_once(self) -> None:
        config = GaugesConfig(touch=NeedConfig(initial=33, full_decay_hours=_FAST_HOURS))
        bank = GaugeBank(config)
        fired: list[str] = []
        for _ in range(12):
            fired.extend(bank.tick(1.0))
        self.assertLess(bank.touch, 30)
        self.assertEqual(fired.count("TouchNeeded"), 1)

    def test_values_stay_in_range_under_long_ticks(self) -> None:
        bank = GaugeBank()
        events = bank.tick(10_000_000)
        for value in bank.values().values():
            self.assertGreaterEqual(value, GAUGE_MIN)
            self.assertLessEqual(value, GAUGE_MAX)
        self.assertEqual(sorted(events), ["HungerNeeded", "RestNeeded", "SocialNeeded", "TouchNeeded"])

    def test_zero_or_negative_delta_does_not_decay(self) -> None:
        bank = GaugeBank()
        self.assertEqual(bank.tick(0), [])
        self.assertEqual(bank.tick(-5), [])
        self.assertEqual(bank.touch, 50)

    def test_reset_restores_initial_values(self) -> None:
        config = GaugesConfig(hunger=NeedConfig(initial=80, full_decay_hours=6))
        bank = GaugeBank(config)
        bank.apply_delta("hunger", -60)
        bank.reset(config)
        self.assertEqual(bank.hunger, 80)
        self.assertEqual(bank.check_crossings(), [])

    def test_describe_lists_every_gauge(self) -> None:
        text = GaugeBank().describe()
        for name in ("Touch", "Rest", "Social", "Hunger"):
            self.assertIn(name, text)


if __name__ == "__main__":
    unittest.main()
