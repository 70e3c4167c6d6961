from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from .expression_map import LIGHT_COLOURS


class PresentationBridge(QObject):
    """
    Outbound commands for the presentation layer.

    The engine never renders anything itself; lights, sounds, thought bubbles,
    face and tail animations are requested through these signals.
    """

    coloured_light_requested = Signal(str)
    light_sphere_hidden = Signal()
    sound_requested = Signal(str)
    thought_requested = Signal(str)
    thought_hidden = Signal()
    face_expression_requested = Signal(str)
    tail_requested = Signal(str)
    display_changed = Signal(str, str)  # emotion, trigger event

    def show_coloured_light(self, name: str) -> None:
        self.coloured_light_requested.emit(name)

    def hide_light_sphere(self) -> None:
        self.light_sphere_hidden.emit()

    def play_sound(self, name: str) -> None:
        self.sound_requested.emit(name)

    def show_thought(self, name: str) -> None:
        self.thought_requested.emit(name)

    def hide_thought(self) -> None:
        self.thought_hidden.emit()

    def set_face_expression(self, name: str) -> None:
        self.face_expression_requested.emit(name)

    def tails_emotion(self, name: str) -> None:
        self.tail_requested.emit(name)


def connect_command_log(bridge: PresentationBridge, logger: logging.Logger) -> None:
    """Mirror every outbound command into a logger."""
    bridge.coloured_light_requested.connect(
        lambda name: logger.info("[Presentation] light=%s (%s)", name, LIGHT_COLOURS.get(name, "?"))
    )
    bridge.light_sphere_hidden.connect(lambda: logger.info("[Presentation] light hidden"))
    bridge.sound_requested.connect(lambda name: logger.info("[Presentation] sound=%s", name))
    bridge.thought_requested.connect(lambda name: logger.info("[Presentation] thought=%s", name))
    bridge.thought_hidden.connect(lambda: logger.info("[Presentation] thought hidden"))
    bridge.face_expression_requested.connect(lambda name: logger.info("[Presentation] face=%s", name))
    bridge.tail_requested.connect(lambda name: logger.info("[Presentation] tail=%s", name))
    bridge.display_changed.connect(
        lambda emotion, trigger: logger.info("[Presentation] display=%s trigger=%s", emotion, trigger or "-")
    )
