from __future__ import annotations

import logging

from .affect_classifier import AffectiveLabel, classify_mood
from .entropy_engine import EntropyEngine
from .response_table import EmotionalResponse

try:
    from core.config_manager import MoodConfig
    from core.long_term_store import LongTermStore
except ModuleNotFoundError:
    from ..core.config_manager import MoodConfig
    from ..core.long_term_store import LongTermStore

logger = logging.getLogger("EmotionEngine.mood")

AXIS_MIN = -10.0
AXIS_MAX = 10.0


def clamp_axis(value: float) -> float:
    return max(AXIS_MIN, min(AXIS_MAX, float(value)))


class MoodSystem:
    """
    Long-term personality baseline plus a session mood derived from it.

    Both points live on the valence/arousal plane, range -10 -> 10.
    The session mood starts near the baseline, drifts a little with every
    response, and a share of the session's net drift is folded back into the
    baseline when the session ends.
    """

    def __init__(
        self,
        config: MoodConfig | None = None,
        store: LongTermStore | None = None,
        entropy: EntropyEngine | None = None,
        persistence_enabled: bool = True,
    ):
        self._config = config or MoodConfig()
        self._store = store
        self._entropy = entropy or EntropyEngine()
        self._persistence_enabled = bool(persistence_enabled) and store is not None

        self._long_term_valence = clamp_axis(self._config.default_long_term_valence)
        self._long_term_arousal = clamp_axis(self._config.default_long_term_arousal)
        self._mood_valence = self._long_term_valence
        self._mood_arousal = self._long_term_arousal
        self._session_start_valence = self._mood_valence
        self._session_start_arousal = self._mood_arousal
        self._session_active = False

    @property
    def long_term_valence(self) -> float:
        return self._long_term_valence

    @property
    def long_term_arousal(self) -> float:
        return self._long_term_arousal

    @property
    def mood_valence(self) -> float:
        return self._mood_valence

    @property
    def mood_arousal(self) -> float:
        return self._mood_arousal

    @property
    def session_start(self) -> tuple[float, float]:
        return self._session_start_valence, self._session_start_arousal

    @property
    def session_active(self) -> bool:
        return self._session_active

    @property
    def temperament(self) -> AffectiveLabel:
        return classify_mood(self._long_term_valence, self._long_term_arousal)

    @property
    def current_mood(self) -> AffectiveLabel:
        return classify_mood(self._mood_valence, self._mood_arousal)

    def start_session(self) -> None:
        valence = self._config.default_long_term_valence
        arousal = self._config.default_long_term_arousal
        if self._persistence_enabled:
            stored = self._store.load()
            if stored.valence is None or stored.arousal is None:
                logger.info("[Mood] no stored baseline for some keys, using configured defaults")
            if stored.valence is not None:
                valence = stored.valence
            if stored.arousal is not None:
                arousal = stored.arousal
        self._long_term_valence = clamp_axis(valence)
        self._long_term_arousal = clamp_axis(arousal)

        jitter = self._config.session_jitter
        self._mood_valence = self._entropy.jitter_axis(self._long_term_valence, jitter, AXIS_MIN, AXIS_MAX)
        self._mood_arousal = self._entropy.jitter_axis(self._long_term_arousal, jitter, AXIS_MIN, AXIS_MAX)
        self._session_start_valence = self._mood_valence
        self._session_start_arousal = self._mood_arousal
        self._session_active = True
        logger.info(
            "[Mood] session start: temperament=%s (%.2f, %.2f) mood=%s (%.2f, %.2f)",
            self.temperament.value,
            self._long_term_valence,
            self._long_term_arousal,
            self.current_mood.value,
            self._mood_valence,
            self._mood_arousal,
        )

    def apply_response(self, response: EmotionalResponse) -> tuple[float, float]:
        """
        Fuzz a response, bleed a small share into the session mood.

        Returns the fuzzed (valence, arousal) used for display mapping.
        """
        spread = self._config.fuzz_range
        fuzzed_valence = self._entropy.fuzz(response.valence, spread)
        fuzzed_arousal = self._entropy.fuzz(response.arousal, spread)
        bleed = self._config.event_bleed
        self._mood_valence = clamp_axis(self._mood_valence + fuzzed_valence * bleed)
        self._mood_arousal = clamp_axis(self._mood_arousal + fuzzed_arousal * bleed)
        return fuzzed_valence, fuzzed_arousal

    def end_session(self) -> bool:
        """Blend the session's drift into the baseline and persist it. Returns True if saved."""
        if not self._session_active:
            return False
        self._session_active = False
        if not self._persistence_enabled:
            logger.info("[Mood] persistence disabled, baseline not saved")
            return False

        share = self._config.session_bleed
        delta_valence = self._mood_valence - self._session_start_valence
        delta_arousal = self._mood_arousal - self._session_start_arousal
        self._long_term_valence = clamp_axis(self._long_term_valence + delta_valence * share)
        self._long_term_arousal = clamp_axis(self._long_term_arousal + delta_arousal * share)
        saved = self._store.save(self._long_term_valence, self._long_term_arousal)
        logger.info(
            "[Mood] session end: baseline -> (%.3f, %.3f), saved=%s",
            self._long_term_valence,
            self._long_term_arousal,
            saved,
        )
        return saved
