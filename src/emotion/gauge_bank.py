from __future__ import annotations

import logging
import math
from dataclasses import dataclass

try:
    from core.config_manager import GaugesConfig
except ModuleNotFoundError:
    from ..core.config_manager import GaugesConfig

logger = logging.getLogger("EmotionEngine.gauges")

GAUGE_MIN = 0.0
GAUGE_MAX = 100.0
GAUGE_NAMES: tuple[str, ...] = ("touch", "rest", "social", "hunger")


def crossing_check(
    name: str,
    previous: float,
    current: float,
    needed_threshold: float,
    fulfilled_threshold: float,
) -> str | None:
    """
    Edge-triggered threshold detection for one gauge.

    Returns ``"<Name>Needed"`` when the value drops below ``needed_threshold``,
    ``"<Name>Fulfilled"`` when it rises above ``fulfilled_threshold``, else None.
    """
    label = name[:1].upper() + name[1:]
    if previous >= needed_threshold and current < needed_threshold:
        return f"{label}Needed"
    if previous <= fulfilled_threshold and current > fulfilled_threshold:
        return f"{label}Fulfilled"
    return None


@dataclass(slots=True)
class Gauge:
    name: str
    value: float
    decay_rate: float
    needed: float
    fulfilled: float
    accumulator: float = 0.0
    last_checked: float = 0.0


class GaugeBank:
    """
    Four decaying need meters (touch, rest, social, hunger).

    Decay is accumulated per gauge and only whole points are removed, so very
    small per-tick rates are not lost to rounding. Threshold crossings are
    reported once per edge: each tick compares the value seen at the previous
    check with the current value.
    """

    def __init__(self, config: GaugesConfig | None = None):
        self._gauges: dict[str, Gauge] = {}
        self.reset(config)

    def reset(self, config: GaugesConfig | None = None) -> None:
        settings = config or GaugesConfig()
        self._gauges = {}
        for name, need in settings.items():
            initial = max(GAUGE_MIN, min(GAUGE_MAX, float(need.initial)))
            self._gauges[name] = Gauge(
                name=name,
                value=initial,
                decay_rate=need.decay_rate,
                needed=float(need.needed),
                fulfilled=float(need.fulfilled),
                last_checked=initial,
            )

    def get(self, name: str) -> float:
        gauge = self._gauges.get(str(name).lower())
        if gauge is None:
            raise KeyError(name)
        return gauge.value

    def gauge(self, name: str) -> Gauge | None:
        return self._gauges.get(str(name).lower())

    @property
    def touch(self) -> float:
        return self._gauges["touch"].value

    @property
    def rest(self) -> float:
        return self._gauges["rest"].value

    @property
    def social(self) -> float:
        return self._gauges["social"].value

    @property
    def hunger(self) -> float:
        return self._gauges["hunger"].value

    def values(self) -> dict[str, float]:
        return {name: gauge.value for name, gauge in self._gauges.items()}

    def decay_rates(self) -> dict[str, float]:
        return {name: gauge.decay_rate for name, gauge in self._gauges.items()}

    def tick(self, delta_seconds: float, speed_multiplier: float = 1.0) -> list[str]:
        """Advance decay and return the threshold events fired since the last tick."""
        elapsed = float(delta_seconds) * float(speed_multiplier)
        if elapsed > 0:
            for gauge in self._gauges.values():
                gauge.accumulator += gauge.decay_rate * elapsed
                if gauge.accumulator >= 1.0:
                    whole = math.floor(gauge.accumulator)
                    gauge.value = max(GAUGE_MIN, gauge.value - whole)
                    gauge.accumulator -= whole
        return self.check_crossings()

    def check_crossings(self) -> list[str]:
        events: list[str] = []
        for gauge in self._gauges.values():
            event = crossing_check(gauge.name, gauge.last_checked, gauge.value, gauge.needed, gauge.fulfilled)
            gauge.last_checked = gauge.value
            if event is not None:
                logger.info(
                    "[Gauges] %s crossed: %s=%.1f (needed=%.0f fulfilled=%.0f)",
                    event,
                    gauge.name,
                    gauge.value,
                    gauge.needed,
                    gauge.fulfilled,
                )
                events.append(event)
        return events

    def apply_delta(self, field: str, amount: float) -> bool:
        gauge = self._gauges.get(str(field).lower())
        if gauge is None:
            logger.warning("[Gauges] unknown gauge %r, delta %.2f ignored", field, amount)
            return False
        gauge.value = max(GAUGE_MIN, min(GAUGE_MAX, gauge.value + float(amount)))
        return True

    def describe(self) -> str:
        lines = ["Current gauge values:"]
        for gauge in self._gauges.values():
            lines.append(
                f"{gauge.name.capitalize():<7}{gauge.value:6.1f}/100 "
                f"(need: {gauge.needed:.0f}, fulfilled: {gauge.fulfilled:.0f}, acc: {gauge.accumulator:.3f})"
            )
        return "\n".join(lines)
