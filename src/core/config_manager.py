from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from PySide6.QtCore import QIODevice, QSaveFile

logger = logging.getLogger("EmotionEngine.config")

SECONDS_PER_HOUR = 60 * 60


@dataclass(slots=True)
class NeedConfig:
    initial: int = 50
    full_decay_hours: float = 6.0
    needed: int = 30
    fulfilled: int = 70

    @property
    def decay_rate(self) -> float:
        """Points lost per second when the gauge decays from 100 to 0 in ``full_decay_hours``."""
        return 100.0 / (self.full_decay_hours * SECONDS_PER_HOUR)


@dataclass(slots=True)
class GaugesConfig:
    touch: NeedConfig = field(default_factory=lambda: NeedConfig(full_decay_hours=3.0))
    rest: NeedConfig = field(default_factory=lambda: NeedConfig(full_decay_hours=12.0))
    social: NeedConfig = field(default_factory=lambda: NeedConfig(full_decay_hours=6.0))
    hunger: NeedConfig = field(default_factory=lambda: NeedConfig(full_decay_hours=6.0))

    def items(self) -> list[tuple[str, NeedConfig]]:
        return [("touch", self.touch), ("rest", self.rest), ("social", self.social), ("hunger", self.hunger)]


@dataclass(slots=True)
class DisplayConfig:
    duration_seconds: float = 3.0
    cooldown_seconds: float = 5.0
    passive_update_interval_seconds: float = 10.0
    thought_duration_seconds: float = 4.0


@dataclass(slots=True)
class SleepConfig:
    max_duration_seconds: float = 2 * SECONDS_PER_HOUR
    rest_regen_per_second: float = 100.0 / SECONDS_PER_HOUR


@dataclass(slots=True)
class MoodConfig:
    default_long_term_valence: float = 10.0
    default_long_term_arousal: float = 0.0
    session_jitter: float = 5.0
    fuzz_range: float = 3.0
    event_bleed: float = 0.01  # share of each fuzzed response added to the session mood
    session_bleed: float = 0.10  # share of the session's net mood delta kept at shutdown


@dataclass(slots=True)
class PersistenceConfig:
    enabled: bool = True


@dataclass(slots=True)
class TestingConfig:
    accelerated: bool = False
    time_multiplier: float = 180.0

    @property
    def speed_multiplier(self) -> float:
        return self.time_multiplier if self.accelerated else 1.0


@dataclass(slots=True)
class BehaviorConfig:
    debug_mode: bool = False
    tick_interval_ms: int = 100
    gauge_log_interval_seconds: float = 5.0


@dataclass(slots=True)
class AppConfig:
    version: str = "1.0.0"
    gauges: GaugesConfig = field(default_factory=GaugesConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    sleep: SleepConfig = field(default_factory=SleepConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)


class ConfigManager:
    """Load engine runtime configuration from JSON with safe defaults."""

    def __init__(self, config_path: Path):
        self._config_path = config_path

    def load(self) -> AppConfig:
        if not self._config_path.exists():
            return AppConfig()
        try:
            raw = json.loads(self._config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("[Config] unreadable config %s: %s", self._config_path, exc)
            return AppConfig()
        if not isinstance(raw, dict):
            logger.warning("[Config] config root is not an object: %s", self._config_path)
            return AppConfig()

        return AppConfig(
            version=str(raw.get("version", "1.0.0")),
            gauges=self._build_gauges(raw.get("gauges")),
            display=self._build_display(raw.get("display")),
            sleep=self._build_sleep(raw.get("sleep")),
            mood=self._build_mood(raw.get("mood")),
            persistence=self._build_persistence(raw.get("persistence")),
            testing=self._build_testing(raw.get("testing")),
            behavior=self._build_behavior(raw.get("behavior")),
        )

    def save(self, config: AppConfig) -> bool:
        payload = self.to_dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
        try:
            saver = QSaveFile(str(self._config_path))
            if not saver.open(QIODevice.OpenModeFlag.WriteOnly | QIODevice.OpenModeFlag.Truncate):
                return False
            raw = content.encode("utf-8")
            written = saver.write(raw)
            if written != len(raw):
                saver.cancelWriting()
                return False
            if not saver.commit():
                return False
        except Exception as exc:
            logger.warning("[Config] failed to save %s: %s", self._config_path, exc)
            return False
        return True

    @staticmethod
    def to_dict(config: AppConfig) -> dict[str, Any]:
        return {
            "version": str(config.version),
            "gauges": {
                name: {
                    "initial": int(need.initial),
                    "full_decay_hours": float(need.full_decay_hours),
                    "needed": int(need.needed),
                    "fulfilled": int(need.fulfilled),
                }
                for name, need in config.gauges.items()
            },
            "display": {
                "duration_seconds": float(config.display.duration_seconds),
                "cooldown_seconds": float(config.display.cooldown_seconds),
                "passive_update_interval_seconds": float(config.display.passive_update_interval_seconds),
                "thought_duration_seconds": float(config.display.thought_duration_seconds),
            },
            "sleep": {
                "max_duration_seconds": float(config.sleep.max_duration_seconds),
                "rest_regen_per_second": float(config.sleep.rest_regen_per_second),
            },
            "mood": {
                "default_long_term_valence": float(config.mood.default_long_term_valence),
                "default_long_term_arousal": float(config.mood.default_long_term_arousal),
                "session_jitter": float(config.mood.session_jitter),
                "fuzz_range": float(config.mood.fuzz_range),
                "event_bleed": float(config.mood.event_bleed),
                "session_bleed": float(config.mood.session_bleed),
            },
            "persistence": {
                "enabled": bool(config.persistence.enabled),
            },
            "testing": {
                "accelerated": bool(config.testing.accelerated),
                "time_multiplier": float(config.testing.time_multiplier),
            },
            "behavior": {
                "debug_mode": bool(config.behavior.debug_mode),
                "tick_interval_ms": int(config.behavior.tick_interval_ms),
                "gauge_log_interval_seconds": float(config.behavior.gauge_log_interval_seconds),
            },
        }

    @staticmethod
    def _number(payload: dict[str, Any], key: str, default: float) -> float:
        try:
            return float(payload.get(key, default))
        except (TypeError, ValueError):
            logger.warning("[Config] invalid value for %s: %r", key, payload.get(key))
            return float(default)

    @staticmethod
    def _build_need(name: str, payload: Any, default: NeedConfig) -> NeedConfig:
        if not isinstance(payload, dict):
            return default
        number = ConfigManager._number
        initial = int(max(0.0, min(100.0, number(payload, "initial", default.initial))))
        hours = number(payload, "full_decay_hours", default.full_decay_hours)
        if hours <= 0:
            hours = default.full_decay_hours
        needed = int(number(payload, "needed", default.needed))
        fulfilled = int(number(payload, "fulfilled", default.fulfilled))
        if not 0 <= needed < fulfilled <= 100:
            logger.warning(
                "[Config] %s thresholds needed=%s fulfilled=%s overlap, using defaults", name, needed, fulfilled
            )
            needed, fulfilled = default.needed, default.fulfilled
        return NeedConfig(initial=initial, full_decay_hours=hours, needed=needed, fulfilled=fulfilled)

    @staticmethod
    def _build_gauges(payload: Any) -> GaugesConfig:
        defaults = GaugesConfig()
        if not isinstance(payload, dict):
            return defaults
        return GaugesConfig(
            touch=ConfigManager._build_need("touch", payload.get("touch"), defaults.touch),
            rest=ConfigManager._build_need("rest", payload.get("rest"), defaults.rest),
            social=ConfigManager._build_need("social", payload.get("social"), defaults.social),
            hunger=ConfigManager._build_need("hunger", payload.get("hunger"), defaults.hunger),
        )

    @staticmethod
    def _build_display(payload: Any) -> DisplayConfig:
        if not isinstance(payload, dict):
            return DisplayConfig()
        number = ConfigManager._number
        return DisplayConfig(
            duration_seconds=max(0.1, number(payload, "duration_seconds", 3.0)),
            cooldown_seconds=max(0.0, number(payload, "cooldown_seconds", 5.0)),
            passive_update_interval_seconds=max(0.1, number(payload, "passive_update_interval_seconds", 10.0)),
            thought_duration_seconds=max(0.1, number(payload, "thought_duration_seconds", 4.0)),
        )

    @staticmethod
    def _build_sleep(payload: Any) -> SleepConfig:
        if not isinstance(payload, dict):
            return SleepConfig()
        number = ConfigManager._number
        defaults = SleepConfig()
        return SleepConfig(
            max_duration_seconds=max(1.0, number(payload, "max_duration_seconds", defaults.max_duration_seconds)),
            rest_regen_per_second=max(0.0, number(payload, "rest_regen_per_second", defaults.rest_regen_per_second)),
        )

    @staticmethod
    def _build_mood(payload: Any) -> MoodConfig:
        if not isinstance(payload, dict):
            return MoodConfig()
        number = ConfigManager._number
        return MoodConfig(
            default_long_term_valence=max(-10.0, min(10.0, number(payload, "default_long_term_valence", 10.0))),
            default_long_term_arousal=max(-10.0, min(10.0, number(payload, "default_long_term_arousal", 0.0))),
            session_jitter=max(0.0, number(payload, "session_jitter", 5.0)),
            fuzz_range=max(0.0, number(payload, "fuzz_range", 3.0)),
            event_bleed=max(0.0, min(1.0, number(payload, "event_bleed", 0.01))),
            session_bleed=max(0.0, min(1.0, number(payload, "session_bleed", 0.10))),
        )

    @staticmethod
    def _build_persistence(payload: Any) -> PersistenceConfig:
        if not isinstance(payload, dict):
            return PersistenceConfig()
        return PersistenceConfig(enabled=bool(payload.get("enabled", True)))

    @staticmethod
    def _build_testing(payload: Any) -> TestingConfig:
        if not isinstance(payload, dict):
            return TestingConfig()
        return TestingConfig(
            accelerated=bool(payload.get("accelerated", False)),
            time_multiplier=max(1.0, ConfigManager._number(payload, "time_multiplier", 180.0)),
        )

    @staticmethod
    def _build_behavior(payload: Any) -> BehaviorConfig:
        if not isinstance(payload, dict):
            return BehaviorConfig()
        number = ConfigManager._number
        return BehaviorConfig(
            debug_mode=bool(payload.get("debug_mode", False)),
            tick_interval_ms=int(max(10, min(5000, number(payload, "tick_interval_ms", 100)))),
            gauge_log_interval_seconds=max(0.5, number(payload, "gauge_log_interval_seconds", 5.0)),
        )
