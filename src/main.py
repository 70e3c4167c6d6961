from __future__ import annotations

import signal
import sys
import threading

from PySide6.QtCore import QCoreApplication, QObject, Signal

try:
    from core.config_manager import ConfigManager
    from core.director import Director
    from core.logger import setup_logger
    from core.long_term_store import LongTermStore
    from core.paths import (
        APP_NAME,
        get_base_dir,
        get_log_dir,
        get_log_file,
        get_long_term_path,
        get_response_table_path,
        resolve_config_path,
    )
    from emotion.emotion_engine import EmotionEngine
    from emotion.presentation import PresentationBridge, connect_command_log
    from emotion.response_table import ResponseTable
except ModuleNotFoundError:
    from .core.config_manager import ConfigManager
    from .core.director import Director
    from .core.logger import setup_logger
    from .core.long_term_store import LongTermStore
    from .core.paths import (
        APP_NAME,
        get_base_dir,
        get_log_dir,
        get_log_file,
        get_long_term_path,
        get_response_table_path,
        resolve_config_path,
    )
    from .emotion.emotion_engine import EmotionEngine
    from .emotion.presentation import PresentationBridge, connect_command_log
    from .emotion.response_table import ResponseTable


class StdinEventReader(QObject):
    """Reads one sensor event name per line from stdin on a worker thread."""

    event_received = Signal(str)
    quit_requested = Signal()

    def __init__(self, stream=None, parent=None):
        super().__init__(parent)
        self._stream = stream if stream is not None else sys.stdin
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="stdin-events", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        for raw in self._stream:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.lower() in {"quit", "exit"}:
                self.quit_requested.emit()
                return
            self.event_received.emit(line)


def main() -> int:
    app = QCoreApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    base_dir = get_base_dir()
    config_path = resolve_config_path()
    config = ConfigManager(config_path).load()
    logger = setup_logger(get_log_dir(), debug=config.behavior.debug_mode)
    logger.info("Application starting. base_dir=%s config=%s log=%s", base_dir, config_path, get_log_file())

    table = ResponseTable.load(get_response_table_path())
    store = LongTermStore(get_long_term_path()) if config.persistence.enabled else None

    bridge = PresentationBridge()
    connect_command_log(bridge, logger)

    engine = EmotionEngine(config=config, response_table=table, store=store, bridge=bridge)
    director = Director(engine)

    reader = StdinEventReader()
    reader.event_received.connect(director.on_sensor_event)
    reader.quit_requested.connect(app.quit)

    # the tick timer keeps the interpreter responsive to SIGINT
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    def _shutdown() -> None:
        logger.info("Application shutting down.")
        director.shutdown()

    app.aboutToQuit.connect(_shutdown)
    director.start()
    reader.start()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
