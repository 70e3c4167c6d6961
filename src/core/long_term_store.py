from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PySide6.QtCore import QIODevice, QSaveFile

logger = logging.getLogger("EmotionEngine.store")


@dataclass(slots=True)
class LongTermValues:
    valence: float | None = None
    arousal: float | None = None


class LongTermStore:
    """Keyed storage for the personality baseline that survives restarts."""

    VALENCE_KEY = "long_term_valence"
    AROUSAL_KEY = "long_term_arousal"

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> LongTermValues:
        if not self._path.exists():
            return LongTermValues()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("[Store] unreadable long-term file %s: %s", self._path, exc)
            return LongTermValues()
        if not isinstance(raw, dict):
            logger.warning("[Store] long-term file %s is not an object", self._path)
            return LongTermValues()
        return LongTermValues(
            valence=self._read_float(raw, self.VALENCE_KEY),
            arousal=self._read_float(raw, self.AROUSAL_KEY),
        )

    def save(self, valence: float, arousal: float) -> bool:
        payload = {self.VALENCE_KEY: float(valence), self.AROUSAL_KEY: float(arousal)}
        raw = (json.dumps(payload, indent=2) + "\n").encode("utf-8")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            saver = QSaveFile(str(self._path))
            if not saver.open(QIODevice.OpenModeFlag.WriteOnly | QIODevice.OpenModeFlag.Truncate):
                logger.warning("[Store] cannot open %s: %s", self._path, saver.errorString())
                return False
            if saver.write(raw) != len(raw):
                saver.cancelWriting()
                return False
            if not saver.commit():
                return False
        except Exception as exc:
            logger.warning("[Store] failed to save %s: %s", self._path, exc)
            return False
        return True

    @staticmethod
    def _read_float(raw: dict[str, Any], key: str) -> float | None:
        if key not in raw:
            return None
        try:
            value = float(raw[key])
        except (TypeError, ValueError):
            logger.warning("[Store] non-numeric %s: %r", key, raw[key])
            return None
        if math.isnan(value) or math.isinf(value):
            return None
        return value
