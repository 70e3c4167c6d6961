from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from PySide6.QtCore import QCoreApplication

from core.config_manager import AppConfig
from core.director import Director
from emotion.emotion_engine import EmotionEngine
from emotion.entropy_engine import EntropyEngine
from emotion.response_table import ResponseTable


class _FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _EngineSpy(EmotionEngine):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.deltas: list[float] = []
        self.shutdown_calls = 0

    def tick(self, delta_seconds: float) -> None:
        self.deltas.append(delta_seconds)
        super().tick(delta_seconds)

    def shutdown(self) -> bool:
        self.shutdown_calls += 1
        return super().shutdown()


class DirectorTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self) -> None:
        self.clock = _FakeClock(100.0)
        config = AppConfig()
        config.persistence.enabled = False
        table = ResponseTable.from_rows(
            [
                ["event", "mood", "valence", "arousal", "touch", "rest", "social"],
                ["NameHeard", "Happy", "4", "0", "0", "0", "10"],
                ["NameHeard", "Excited", "4", "0", "0", "0", "10"],
                ["NameHeard", "Relaxed", "4", "0", "0", "0", "10"],
                ["NameHeard", "Neutral", "4", "0", "0", "0", "10"],
            ]
        )
        self.engine = _EngineSpy(
            config=config,
            response_table=table,
            entropy=EntropyEngine(seed=1),
            clock=self.clock,
        )
        self.director = Director(self.engine, clock=self.clock)

    def tearDown(self) -> None:
        self.director.shutdown()

    def test_interval_comes_from_config(self) -> None:
        self.assertEqual(self.director.tick_interval_ms, 100)
        self.assertEqual(Director(self.engine, tick_interval_ms=250).tick_interval_ms, 250)

    def test_start_initializes_engine_and_runs_timer(self) -> None:
        self.director.start()
        self.assertTrue(self.engine.is_initialized)
        self.assertTrue(self.director.is_running)

    def test_step_uses_clock_delta(self) -> None:
        self.director.start()
        self.clock.advance(2.5)
        self.director.step()
        self.clock.advance(0.5)
        self.director.step()
        self.assertEqual(self.engine.deltas, [2.5, 0.5])

    def test_events_ignored_before_start(self) -> None:
        seen: list[tuple[str, bool]] = []
        self.director.event_handled.connect(lambda event, shown: seen.append((event, shown)))
        self.director.on_sensor_event("NameHeard")
        self.assertEqual(seen, [])
        self.assertEqual(self.engine.gauges.social, 50)

    def test_sensor_event_reaches_engine(self) -> None:
        seen: list[tuple[str, bool]] = []
        self.director.event_handled.connect(lambda event, shown: seen.append((event, shown)))
        self.director.start()
        self.director.on_sensor_event("NameHeard")
        self.assertEqual(seen, [("NameHeard", True)])
        self.assertEqual(self.engine.gauges.social, 60)

    def test_shutdown_stops_timer_and_engine(self) -> None:
        self.director.start()
        self.assertFalse(self.director.shutdown())
        self.assertFalse(self.director.is_running)
        self.assertEqual(self.engine.shutdown_calls, 1)
        self.assertFalse(self.engine.shutdown())

    def test_status_summary(self) -> None:
        self.director.start()
        summary = self.director.get_status_summary()
        self.assertIn("mood:", summary)
        self.assertIn("display: neutral", summary)
        self.assertIn("touch=50.0", summary)


if __name__ == "__main__":
    unittest.main()
