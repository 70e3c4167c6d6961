from __future__ import annotations

import argparse
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from PySide6.QtCore import QCoreApplication, QTimer

from core.config_manager import ConfigManager
from core.director import Director
from core.logger import setup_logger
from core.long_term_store import LongTermStore
from core.paths import get_long_term_path, get_response_table_path, resolve_config_path
from emotion.emotion_engine import KNOWN_EVENTS, EmotionEngine
from emotion.entropy_engine import EntropyEngine
from emotion.presentation import PresentationBridge
from emotion.response_table import ResponseTable


def _print_command(kind: str, value: str = "") -> None:
    print(f"  -> {kind}{(' ' + value) if value else ''}", flush=True)


def _attach_printer(bridge: PresentationBridge) -> None:
    bridge.coloured_light_requested.connect(lambda name: _print_command("light", name))
    bridge.light_sphere_hidden.connect(lambda: _print_command("light", "off"))
    bridge.sound_requested.connect(lambda name: _print_command("sound", name))
    bridge.thought_requested.connect(lambda name: _print_command("thought", name))
    bridge.thought_hidden.connect(lambda: _print_command("thought", "off"))
    bridge.face_expression_requested.connect(lambda name: _print_command("face", name))
    bridge.tail_requested.connect(lambda name: _print_command("tail", name))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Feed sensor events into a live emotion engine.")
    parser.add_argument(
        "--events",
        nargs="+",
        default=["StrokeFrontToBack", "NameHeard", "LoudNoise"],
        help=f"event names, fed in order (known: {', '.join(KNOWN_EVENTS)})",
    )
    parser.add_argument("--interval-ms", type=int, default=4000, help="delay between events")
    parser.add_argument("--accelerated", action="store_true", help="run gauges and sleep at the test speed")
    parser.add_argument("--seed", type=int, default=None, help="seed for mood jitter and fuzz")
    parser.add_argument("--no-persist", action="store_true", help="do not read or write the long-term baseline")
    parser.add_argument("--debug", action="store_true", help="log to the console")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    app = QCoreApplication(sys.argv[:1])

    config = ConfigManager(resolve_config_path()).load()
    if args.accelerated:
        config.testing.accelerated = True
    if args.no_persist:
        config.persistence.enabled = False

    log_dir = Path(tempfile.gettempdir()) / "emotion_engine_console"
    setup_logger(log_dir, debug=args.debug)

    store = LongTermStore(get_long_term_path()) if config.persistence.enabled else None
    bridge = PresentationBridge()
    _attach_printer(bridge)
    engine = EmotionEngine(
        config=config,
        response_table=ResponseTable.load(get_response_table_path()),
        store=store,
        bridge=bridge,
        entropy=EntropyEngine(seed=args.seed),
    )
    director = Director(engine)
    director.event_handled.connect(
        lambda event, shown: print(f"{event}: {'shown' if shown else 'suppressed'} | {director.get_status_summary()}", flush=True)
    )

    pending = list(args.events)
    feeder = QTimer()
    feeder.setInterval(max(1, args.interval_ms))

    def _feed_next() -> None:
        if not pending:
            feeder.stop()
            app.quit()
            return
        event = pending.pop(0)
        print(f"[{event}]", flush=True)
        director.on_sensor_event(event)

    feeder.timeout.connect(_feed_next)
    app.aboutToQuit.connect(director.shutdown)

    director.start()
    print(director.get_status_summary(), flush=True)
    QTimer.singleShot(0, _feed_next)
    feeder.start()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
