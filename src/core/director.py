from __future__ import annotations

import logging
import time
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal, Slot

try:
    from emotion.emotion_engine import EmotionEngine
except ModuleNotFoundError:
    from ..emotion.emotion_engine import EmotionEngine

logger = logging.getLogger("EmotionEngine.director")


class Director(QObject):
    """Drives the engine from a Qt timer and routes sensor events into it."""

    event_handled = Signal(str, bool)  # event, displayed

    def __init__(
        self,
        engine: EmotionEngine,
        tick_interval_ms: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        parent=None,
    ):
        super().__init__(parent)
        self._engine = engine
        self._clock = clock
        self._last_tick: float | None = None
        self._started = False

        interval = tick_interval_ms if tick_interval_ms is not None else engine.config.behavior.tick_interval_ms
        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(max(1, int(interval)))
        self._tick_timer.timeout.connect(self._on_tick)

    @property
    def engine(self) -> EmotionEngine:
        return self._engine

    @property
    def is_running(self) -> bool:
        return self._tick_timer.isActive()

    @property
    def tick_interval_ms(self) -> int:
        return self._tick_timer.interval()

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        if not self._engine.is_initialized:
            self._engine.initialize()
        self._last_tick = self._clock()
        self._tick_timer.start()
        logger.info("[Director] started, tick every %dms", self._tick_timer.interval())

    @Slot(str)
    def on_sensor_event(self, event: str) -> None:
        if not self._started:
            logger.warning("[Director] sensor event %r before start, ignored", event)
            return
        shown = self._engine.handle_event(event)
        self.event_handled.emit(event, shown)

    def step(self) -> None:
        """Advance the engine by the wall time since the previous step."""
        now = self._clock()
        delta = 0.0 if self._last_tick is None else now - self._last_tick
        self._last_tick = now
        self._engine.tick(delta)

    def get_status_summary(self) -> str:
        status = self._engine.status()
        gauges = ", ".join(f"{name}={value:.1f}" for name, value in status["gauges"].items())
        valence, arousal = status["mood"]
        return (
            f"mood: {status['current_mood']} ({valence:.2f}, {arousal:.2f}) | "
            f"display: {status['display']} | "
            f"asleep: {'yes' if status['asleep'] else 'no'} | "
            f"gauges: {gauges}"
        )

    def shutdown(self) -> bool:
        if self._tick_timer.isActive():
            self._tick_timer.stop()
        self._started = False
        return self._engine.shutdown()

    @Slot()
    def _on_tick(self) -> None:
        try:
            self.step()
        except Exception:
            logger.exception("[Director] tick failed")
