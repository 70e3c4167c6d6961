from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

logger = logging.getLogger("EmotionEngine.responses")


@dataclass(frozen=True, slots=True)
class EmotionalResponse:
    """Deltas applied when an event is received in a given mood."""

    valence: float = 0.0
    arousal: float = 0.0
    touch: float = 0.0
    rest: float = 0.0
    social: float = 0.0
    hunger: float = 0.0

    def gauge_deltas(self) -> dict[str, float]:
        return {"touch": self.touch, "rest": self.rest, "social": self.social, "hunger": self.hunger}


NEUTRAL_RESPONSE = EmotionalResponse()


def _key_part(value: Any) -> str:
    return str(getattr(value, "value", value) or "").strip().lower()


class ResponseTable:
    """
    Immutable (event, mood) -> EmotionalResponse lookup.

    Source rows: ``event,mood,valence,arousal,touch,rest,social[,hunger]``.
    The first row is a header. Malformed rows are skipped with a warning;
    an unreadable source produces an empty table.
    """

    REQUIRED_COLUMNS = 7
    MAX_COLUMNS = 8

    def __init__(self, rows: Mapping[tuple[str, str], EmotionalResponse] | None = None):
        normalized = {(_key_part(event), _key_part(mood)): response for (event, mood), response in (rows or {}).items()}
        self._rows: Mapping[tuple[str, str], EmotionalResponse] = MappingProxyType(normalized)

    @classmethod
    def load(cls, path: Path) -> "ResponseTable":
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                table = cls.from_rows(csv.reader(handle), source=str(path))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.warning("[Responses] failed to load %s: %s; using empty table", path, exc)
            return cls()
        logger.info("[Responses] loaded %d rows from %s", len(table), path)
        return table

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]], *, has_header: bool = True, source: str = "<rows>") -> "ResponseTable":
        parsed: dict[tuple[str, str], EmotionalResponse] = {}
        header_pending = has_header
        for line_no, row in enumerate(rows, start=1):
            cells = [str(cell).strip() for cell in row]
            if not cells or not any(cells) or cells[0].startswith("#"):
                continue
            if header_pending:
                header_pending = False
                continue
            entry = cls._parse_row(cells)
            if entry is None:
                logger.warning("[Responses] %s:%d malformed row skipped: %s", source, line_no, ",".join(cells))
                continue
            key, response = entry
            if key in parsed:
                logger.warning("[Responses] %s:%d duplicate row for %s/%s, later row wins", source, line_no, *key)
            parsed[key] = response
        return cls(parsed)

    @classmethod
    def _parse_row(cls, cells: list[str]) -> tuple[tuple[str, str], EmotionalResponse] | None:
        if not cls.REQUIRED_COLUMNS <= len(cells) <= cls.MAX_COLUMNS:
            return None
        event, mood = cells[0], cells[1]
        if not event or not mood:
            return None
        try:
            numbers = [float(cell) if cell else 0.0 for cell in cells[2:]]
        except ValueError:
            return None
        if any(math.isnan(n) or math.isinf(n) for n in numbers):
            return None
        numbers.extend([0.0] * (cls.MAX_COLUMNS - 2 - len(numbers)))
        valence, arousal, touch, rest, social, hunger = numbers
        response = EmotionalResponse(
            valence=valence,
            arousal=arousal,
            touch=touch,
            rest=rest,
            social=social,
            hunger=hunger,
        )
        return (_key_part(event), _key_part(mood)), response

    def lookup(self, event: str, mood: Any) -> EmotionalResponse | None:
        return self._rows.get((_key_part(event), _key_part(mood)))

    @property
    def events(self) -> frozenset[str]:
        return frozenset(event for event, _ in self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return (_key_part(key[0]), _key_part(key[1])) in self._rows
