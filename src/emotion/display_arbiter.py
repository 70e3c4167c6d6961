from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from .affect_classifier import AffectiveLabel
from .expression_map import ExpressionProfile, normalize_name, overlay_for, passive_face_for, profile_for
from .presentation import PresentationBridge

try:
    from core.config_manager import DisplayConfig
except ModuleNotFoundError:
    from ..core.config_manager import DisplayConfig

logger = logging.getLogger("EmotionEngine.display")

NEUTRAL = "neutral"
SLEEP = "sleep"


class DisplayPhase(Enum):
    """What the companion is currently showing."""

    NEUTRAL = auto()
    DISPLAYING = auto()
    ASLEEP = auto()


# sleep is only ever left through NEUTRAL
_NEXT_PHASES: dict[DisplayPhase, frozenset[DisplayPhase]] = {
    DisplayPhase.NEUTRAL: frozenset({DisplayPhase.DISPLAYING, DisplayPhase.ASLEEP}),
    DisplayPhase.DISPLAYING: frozenset({DisplayPhase.NEUTRAL, DisplayPhase.ASLEEP}),
    DisplayPhase.ASLEEP: frozenset({DisplayPhase.NEUTRAL}),
}


@dataclass(frozen=True, slots=True)
class DisplayState:
    current_display: str
    current_trigger: str
    is_showing_emotional_display: bool
    last_display_time: float | None
    is_asleep: bool
    sleep_start_time: float | None


class DisplayArbiter:
    """
    Decides whether a computed emotion may replace what is on screen.

    Displays are gated by a cooldown measured from the last emotional display
    and by any display still active. Sleep rejects everything except the wake
    overrides. Timed behavior (auto-reset to neutral, thought bubble hide,
    ambient face refresh) is kept as deadlines checked in ``tick``.
    """

    WAKE_OVERRIDES: frozenset[str] = frozenset({"loudnoise"})

    def __init__(
        self,
        bridge: PresentationBridge | None = None,
        config: DisplayConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._bridge = bridge or PresentationBridge()
        self._config = config or DisplayConfig()
        self._clock = clock

        self._initialized = False
        self._current_display = NEUTRAL
        self._current_trigger = ""
        self._last_display_time: float | None = None
        self._sleep_start_time: float | None = None
        self._reset_deadline: float | None = None
        self._thought_deadline: float | None = None
        self._next_passive_update: float | None = None
        self._passive_face: str | None = None

        self._phase = DisplayPhase.NEUTRAL

    @property
    def bridge(self) -> PresentationBridge:
        return self._bridge

    @property
    def phase(self) -> DisplayPhase:
        return self._phase

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def is_asleep(self) -> bool:
        return self._phase == DisplayPhase.ASLEEP

    @property
    def is_showing_emotional_display(self) -> bool:
        return self._phase == DisplayPhase.DISPLAYING

    @property
    def current_display(self) -> str:
        return self._current_display

    @property
    def reset_deadline(self) -> float | None:
        return self._reset_deadline

    @property
    def state(self) -> DisplayState:
        return DisplayState(
            current_display=self._current_display,
            current_trigger=self._current_trigger,
            is_showing_emotional_display=self.is_showing_emotional_display,
            last_display_time=self._last_display_time,
            is_asleep=self.is_asleep,
            sleep_start_time=self._sleep_start_time,
        )

    def initialize(self) -> None:
        now = self._clock()
        self._initialized = True
        self._next_passive_update = now + self._config.passive_update_interval_seconds
        self._express(NEUTRAL, now)

    def try_display(self, emotion: str, trigger_event: str = "", bypass_cooldown: bool = False) -> bool:
        if not self._initialized:
            logger.warning("[Display] %r requested before initialization, ignored", emotion)
            return False

        # settle deadlines that passed since the last tick before gating
        self._expire_deadlines(self._clock())

        key = normalize_name(emotion)
        if key == SLEEP:
            return self.enter_sleep()
        if profile_for(key) is None:
            logger.warning("[Display] unknown emotion %r, falling back to neutral", emotion)
            key = NEUTRAL

        now = self._clock()
        if self.is_asleep:
            if key not in self.WAKE_OVERRIDES:
                logger.debug("[Display] %s rejected while asleep", key)
                return False
            self.wake(natural=False)
        elif not bypass_cooldown:
            if self._in_cooldown(now):
                logger.debug("[Display] %s rejected: cooldown", key)
                return False
            if self.is_showing_emotional_display:
                logger.debug("[Display] %s rejected: %s still showing", key, self._current_display)
                return False

        self._reset_deadline = None
        self._set_phase(DisplayPhase.NEUTRAL if key == NEUTRAL else DisplayPhase.DISPLAYING)
        self._current_display = key
        self._current_trigger = str(trigger_event or "")
        if key != NEUTRAL:
            self._last_display_time = now
            self._reset_deadline = now + self._config.duration_seconds
        self._passive_face = None
        self._next_passive_update = now + self._config.passive_update_interval_seconds

        self._express(key, now)
        self._apply_overlay(self._current_trigger, now)
        self._bridge.display_changed.emit(key, self._current_trigger)
        logger.info("[Display] showing %s (trigger=%s)", key, self._current_trigger or "-")
        return True

    def enter_sleep(self) -> bool:
        if not self._initialized or self.is_asleep:
            return False
        now = self._clock()
        self._set_phase(DisplayPhase.ASLEEP)
        self._sleep_start_time = now
        self._current_display = SLEEP
        self._current_trigger = ""
        self._passive_face = None
        # the sleep thought stays up until a natural wake
        self._express(SLEEP, now, timed_thought=False)
        self._bridge.display_changed.emit(SLEEP, "")
        logger.info("[Display] asleep")
        return True

    def wake(self, natural: bool = True) -> float | None:
        """Leave sleep. Returns the time slept in seconds, or None if not asleep."""
        if not self.is_asleep:
            return None
        now = self._clock()
        slept = now - (self._sleep_start_time if self._sleep_start_time is not None else now)
        self._set_phase(DisplayPhase.NEUTRAL)
        self._current_display = NEUTRAL
        self._current_trigger = ""
        self._next_passive_update = now + self._config.passive_update_interval_seconds
        self._bridge.tails_emotion("wakeup")
        if natural:
            self._bridge.hide_thought()
            self._express(NEUTRAL, now)
            self._bridge.display_changed.emit(NEUTRAL, "")
        logger.info("[Display] awake after %.1fs (%s)", slept, "natural" if natural else "interrupted")
        return slept

    def tick(self, mood: AffectiveLabel) -> None:
        if not self._initialized:
            return
        now = self._clock()
        self._expire_deadlines(now)
        self._passive_update(now, mood)

    def _expire_deadlines(self, now: float) -> None:
        if self._thought_deadline is not None and now >= self._thought_deadline:
            self._thought_deadline = None
            self._bridge.hide_thought()
        if self._reset_deadline is not None and now >= self._reset_deadline:
            self._reset_deadline = None
            self.try_display(NEUTRAL, "", bypass_cooldown=True)

    def _passive_update(self, now: float, mood: AffectiveLabel) -> None:
        if self._phase != DisplayPhase.NEUTRAL:
            return
        if self._next_passive_update is not None and now < self._next_passive_update:
            return
        self._next_passive_update = now + self._config.passive_update_interval_seconds
        face = passive_face_for(mood)
        if face != self._passive_face:
            self._passive_face = face
            self._bridge.set_face_expression(face)

    def _in_cooldown(self, now: float) -> bool:
        if self._last_display_time is None:
            return False
        return now - self._last_display_time < self._config.cooldown_seconds

    def _express(self, key: str, now: float, timed_thought: bool = True) -> None:
        profile: ExpressionProfile = profile_for(key) or profile_for(NEUTRAL)
        self._bridge.set_face_expression(profile.face)
        if profile.light:
            self._bridge.show_coloured_light(profile.light)
        else:
            self._bridge.hide_light_sphere()
        if profile.sound:
            self._bridge.play_sound(profile.sound)
        if profile.thought:
            self._show_thought(profile.thought, now, timed=timed_thought)
        if profile.tail:
            self._bridge.tails_emotion(profile.tail)

    def _apply_overlay(self, trigger_event: str, now: float) -> None:
        if not trigger_event:
            return
        overlay = overlay_for(trigger_event)
        if overlay is None:
            return
        if overlay.thought:
            self._show_thought(overlay.thought, now)
        if overlay.sound:
            self._bridge.play_sound(overlay.sound)

    def _show_thought(self, name: str, now: float, timed: bool = True) -> None:
        self._bridge.show_thought(name)
        self._thought_deadline = now + self._config.thought_duration_seconds if timed else None

    def _set_phase(self, phase: DisplayPhase) -> bool:
        previous = self._phase
        if phase == previous:
            return True
        if phase not in _NEXT_PHASES[previous]:
            logger.warning("[Display] illegal phase change %s -> %s", previous.name, phase.name)
            return False
        if previous == DisplayPhase.DISPLAYING or phase == DisplayPhase.ASLEEP:
            self._reset_deadline = None
        if phase == DisplayPhase.ASLEEP:
            self._thought_deadline = None
        self._phase = phase
        logger.debug("[Display] phase %s -> %s", previous.name, phase.name)
        return True
