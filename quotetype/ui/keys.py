"""Translation of Qt key presses into engine key commands."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent

from quotetype.core.engine import Backspace, Char, KeyCommand, RequestFocus, RequestNewQuote


def command_from_key(key: int, modifiers: Qt.KeyboardModifier, text: str) -> Optional[KeyCommand]:
    """Map a key press to a command, or None for keys the engine does not handle."""
    shift = bool(modifiers & Qt.KeyboardModifier.ShiftModifier)

    if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
        return RequestNewQuote() if shift else None
    if key == Qt.Key.Key_Space:
        return RequestFocus() if shift else Char(" ")
    if key == Qt.Key.Key_Backspace:
        return Backspace()
    ctrl = bool(modifiers & Qt.KeyboardModifier.ControlModifier)
    alt = bool(modifiers & Qt.KeyboardModifier.AltModifier)
    # AltGr reports as Ctrl+Alt on Windows and still produces text.
    if ctrl != alt:
        return None
    if text and text.isprintable():
        return Char(text[-1])
    return None


def command_from_event(event: QKeyEvent) -> Optional[KeyCommand]:
    return command_from_key(event.key(), event.modifiers(), event.text())
