"""Where the engine reads its bundled data and writes its per-user state."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths

APP_NAME = "EmotionEngine"
CONFIG_FILE = "config.json"
LOG_FILE = "app.log"
LONG_TERM_FILE = "long_term.json"
RESPONSE_TABLE_RELATIVE = Path("data") / "response_table.csv"
# relative to the base dir, first existing one seeds the user config
BUNDLED_CONFIGS = (Path(CONFIG_FILE), Path("config") / CONFIG_FILE)

logger = logging.getLogger("EmotionEngine.paths")


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_base_dir() -> Path:
    """
    Read-only root holding ``data/`` and the bundled config.

    ``APP_BASE_DIR`` wins, then a frozen bundle's ``_MEIPASS``, then the source checkout.
    """
    override = os.environ.get("APP_BASE_DIR", "").strip()
    if override:
        return Path(override)
    bundle = getattr(sys, "_MEIPASS", None) if getattr(sys, "frozen", False) else None
    if bundle:
        return Path(bundle)
    return Path(__file__).resolve().parents[2]


def _platform_data_root() -> Path:
    if sys.platform == "win32":
        return Path(os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_user_data_dir() -> Path:
    """Writable per-user directory for config, logs and the long-term baseline."""
    qt_location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppDataLocation)
    root = Path(qt_location) if qt_location else _platform_data_root()
    # without application metadata Qt hands back a shared folder
    if root.name.lower() != APP_NAME.lower():
        root = root / APP_NAME
    return _ensure_dir(root)


def get_log_dir() -> Path:
    return _ensure_dir(get_user_data_dir() / "logs")


def get_log_file() -> Path:
    return get_log_dir() / LOG_FILE


def get_response_table_path() -> Path:
    return get_base_dir() / RESPONSE_TABLE_RELATIVE


def get_long_term_path() -> Path:
    return get_user_data_dir() / LONG_TERM_FILE


def resolve_config_path() -> Path:
    """
    Return the per-user config file, seeding it from the bundled defaults on first run.

    The path may still not exist afterwards; ``ConfigManager.load`` then uses built-in defaults.
    """
    user_config = get_user_data_dir() / CONFIG_FILE
    if user_config.exists():
        return user_config

    base = get_base_dir()
    bundled = next((base / rel for rel in BUNDLED_CONFIGS if (base / rel).exists()), None)
    if bundled is not None:
        try:
            shutil.copyfile(bundled, user_config)
        except OSError as exc:
            logger.warning("[Paths] could not seed %s from %s: %s", user_config, bundled, exc)
    return user_config
