from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from .affect_classifier import AffectiveLabel, classify_display
from .display_arbiter import DisplayArbiter
from .entropy_engine import EntropyEngine
from .gauge_bank import GAUGE_MAX, GaugeBank
from .mood_system import MoodSystem
from .presentation import PresentationBridge
from .response_table import ResponseTable

try:
    from core.config_manager import AppConfig
    from core.long_term_store import LongTermStore
except ModuleNotFoundError:
    from ..core.config_manager import AppConfig
    from ..core.long_term_store import LongTermStore

logger = logging.getLogger("EmotionEngine.engine")

LOUD_NOISE = "loudnoise"

KNOWN_EVENTS: tuple[str, ...] = (
    "StrokeFrontToBack",
    "StrokeBackToFront",
    "BeingHeld",
    "TouchNeeded",
    "TouchFulfilled",
    "RestNeeded",
    "RestFulfilled",
    "SocialNeeded",
    "SocialFulfilled",
    "HungerNeeded",
    "HungerFulfilled",
    "LoudNoise",
    "NameHeard",
    "GreetingHeard",
    "FoodHeard",
    "TooFarAway",
    "LookingTowards",
    "LookingAway",
)
_CANONICAL_EVENTS = {name.lower(): name for name in KNOWN_EVENTS}


def normalize_event(name: str) -> str:
    """Case-insensitive match against the known sensor events; unknown names pass through stripped."""
    text = str(name or "").strip()
    return _CANONICAL_EVENTS.get(text.lower(), text)


@dataclass(frozen=True, slots=True)
class EmotionalOutcome:
    emotion_to_display: str
    trigger_event: str
    fuzzed_valence: float | None = None
    fuzzed_arousal: float | None = None


class EmotionEngine:
    """
    Internal affective state of the companion.

    Owns the need gauges, the mood, the response table and the display
    arbiter. Advanced by ``tick`` from a single driving loop and by
    ``handle_event`` from sensor adapters on the same thread.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        response_table: ResponseTable | None = None,
        store: LongTermStore | None = None,
        bridge: PresentationBridge | None = None,
        entropy: EntropyEngine | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._config = config or AppConfig()
        self._table = response_table or ResponseTable()
        self._clock = clock
        self._gauges = GaugeBank(self._config.gauges)
        self._mood = MoodSystem(
            self._config.mood,
            store=store,
            entropy=entropy,
            persistence_enabled=self._config.persistence.enabled,
        )
        self._arbiter = DisplayArbiter(bridge, self._config.display, clock=clock)
        self._initialized = False
        self._shut_down = False
        self._gauge_log_elapsed = 0.0

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def gauges(self) -> GaugeBank:
        return self._gauges

    @property
    def mood(self) -> MoodSystem:
        return self._mood

    @property
    def arbiter(self) -> DisplayArbiter:
        return self._arbiter

    @property
    def bridge(self) -> PresentationBridge:
        return self._arbiter.bridge

    @property
    def response_table(self) -> ResponseTable:
        return self._table

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_asleep(self) -> bool:
        return self._arbiter.is_asleep

    @property
    def speed_multiplier(self) -> float:
        return self._config.testing.speed_multiplier

    @property
    def current_mood(self) -> AffectiveLabel:
        if self.is_asleep:
            return AffectiveLabel.SLEEP
        return self._mood.current_mood

    def initialize(self) -> None:
        """Start a session: fresh gauges, baseline load, session mood, neutral display."""
        self._gauges.reset(self._config.gauges)
        self._mood.start_session()
        self._arbiter.initialize()
        self._initialized = True
        self._shut_down = False
        self._gauge_log_elapsed = 0.0
        rates = self._gauges.decay_rates()
        logger.info(
            "[Engine] decay rates per second: %s (speed x%.0f)",
            ", ".join(f"{name}={rate:.6f}" for name, rate in rates.items()),
            self.speed_multiplier,
        )

    def calculate_emotional_response(self, trigger_event: str) -> EmotionalOutcome:
        trigger = normalize_event(trigger_event)
        if not self._initialized:
            logger.warning("[Engine] event %r before initialization, returning neutral", trigger)
            return EmotionalOutcome("neutral", trigger)

        if trigger.lower() == LOUD_NOISE:
            if self.is_asleep:
                self.wake_up(natural=False)
            return EmotionalOutcome(LOUD_NOISE, trigger)

        if self.is_asleep:
            return EmotionalOutcome("sleep", trigger)

        mood = self._mood.current_mood
        response = self._table.lookup(trigger, mood)
        if response is None:
            logger.warning("[Engine] no response for event=%s mood=%s, showing neutral", trigger, mood.value)
            return EmotionalOutcome("neutral", trigger)

        for field, amount in response.gauge_deltas().items():
            if amount:
                self._gauges.apply_delta(field, amount)

        fuzzed_valence, fuzzed_arousal = self._mood.apply_response(response)
        display = classify_display(fuzzed_valence, fuzzed_arousal)
        logger.info(
            "[Engine] %s in %s -> %s (fuzzed %.2f, %.2f; mood now %s)",
            trigger,
            mood.value,
            display,
            fuzzed_valence,
            fuzzed_arousal,
            self._mood.current_mood.value,
        )
        return EmotionalOutcome(display, trigger, fuzzed_valence, fuzzed_arousal)

    def handle_event(self, trigger_event: str) -> bool:
        """Compute a response to a sensor event and offer it to the display. Returns True if shown."""
        outcome = self.calculate_emotional_response(trigger_event)
        if not self._initialized:
            return False
        return self._arbiter.try_display(
            outcome.emotion_to_display,
            outcome.trigger_event,
            bypass_cooldown=outcome.emotion_to_display == LOUD_NOISE,
        )

    def tick(self, delta_seconds: float) -> None:
        if not self._initialized:
            return
        delta = max(0.0, float(delta_seconds))
        multiplier = self.speed_multiplier

        if self.is_asleep:
            self._gauges.apply_delta("rest", self._config.sleep.rest_regen_per_second * delta * multiplier)
            if self._should_wake():
                self.wake_up(natural=True)
        else:
            for event in self._gauges.tick(delta, multiplier):
                self.handle_event(event)

        self._arbiter.tick(self.current_mood)
        # a display still running at rest 0 (loud noise wake) finishes before sleep resumes
        if not self.is_asleep and self._gauges.rest <= 0 and not self._arbiter.is_showing_emotional_display:
            self.sleep_onset()
        self._log_gauges(delta)

    def sleep_onset(self) -> bool:
        if not self._arbiter.enter_sleep():
            return False
        logger.info("[Engine] rest depleted, going to sleep")
        return True

    def wake_up(self, natural: bool = True) -> bool:
        slept = self._arbiter.wake(natural=natural)
        if slept is None:
            return False
        logger.info(
            "[Engine] woke up after %.1fs (%.1fs simulated), rest=%.1f",
            slept,
            slept * self.speed_multiplier,
            self._gauges.rest,
        )
        return True

    def shutdown(self) -> bool:
        """End the session. Returns True if the baseline was persisted."""
        if not self._initialized or self._shut_down:
            return False
        self._shut_down = True
        saved = self._mood.end_session()
        logger.info("[Engine] shutdown, baseline saved=%s", saved)
        return saved

    def status(self) -> dict[str, Any]:
        display = self._arbiter.state
        return {
            "gauges": self._gauges.values(),
            "long_term": (self._mood.long_term_valence, self._mood.long_term_arousal),
            "mood": (self._mood.mood_valence, self._mood.mood_arousal),
            "temperament": self._mood.temperament.value,
            "current_mood": self.current_mood.value,
            "display": display.current_display,
            "trigger": display.current_trigger,
            "showing": display.is_showing_emotional_display,
            "asleep": display.is_asleep,
        }

    def _should_wake(self) -> bool:
        if self._gauges.rest >= GAUGE_MAX:
            return True
        start = self._arbiter.state.sleep_start_time
        if start is None:
            return False
        slept = (self._clock() - start) * self.speed_multiplier
        return slept >= self._config.sleep.max_duration_seconds

    def _log_gauges(self, delta: float) -> None:
        self._gauge_log_elapsed += delta
        if self._gauge_log_elapsed < self._config.behavior.gauge_log_interval_seconds:
            return
        self._gauge_log_elapsed = 0.0
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("[Engine]\n%s", self._gauges.describe())
