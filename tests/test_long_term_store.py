from __future__ import annotations

import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from core.long_term_store import LongTermStore


class LongTermStoreTest(unittest.TestCase):
    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = LongTermStore(Path(tmp) / "nested" / "long_term.json")
            self.assertTrue(store.save(3.25, -1.5))
            values = store.load()
            self.assertAlmostEqual(values.valence, 3.25)
            self.assertAlmostEqual(values.arousal, -1.5)
            raw = json.loads(store.path.read_text(encoding="utf-8"))
            self.assertEqual(set(raw), {"long_term_valence", "long_term_arousal"})

    def test_save_reports_unusable_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "blocker"
            blocker.write_text("", encoding="utf-8")
            store = LongTermStore(blocker / "long_term.json")
            with self.assertLogs("EmotionEngine.store", level="WARNING"):
                self.assertFalse(store.save(1.0, 2.0))
            self.assertIsNone(store.load().valence)

    def test_missing_file_means_no_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            values = LongTermStore(Path(tmp) / "long_term.json").load()
        self.assertIsNone(values.valence)
        self.assertIsNone(values.arousal)

    def test_missing_and_bad_keys_are_reported_separately(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "long_term.json"
            path.write_text(json.dumps({"long_term_valence": 4}), encoding="utf-8")
            values = LongTermStore(path).load()
            self.assertEqual(values.valence, 4.0)
            self.assertIsNone(values.arousal)

            path.write_text(json.dumps({"long_term_valence": "high", "long_term_arousal": 2}), encoding="utf-8")
            values = LongTermStore(path).load()
            self.assertIsNone(values.valence)
            self.assertEqual(values.arousal, 2.0)

    def test_corrupt_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "long_term.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertIsNone(LongTermStore(path).load().valence)
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertIsNone(LongTermStore(path).load().arousal)


if __name__ == "__main__":
    unittest.main()
