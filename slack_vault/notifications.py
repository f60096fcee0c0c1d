"""User-facing outcome reporting."""

from __future__ import annotations

import logging
from typing import Protocol

import pyperclip

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def copy_to_clipboard(self, text: str) -> None:
        ...

    def notice(self, message: str) -> None:
        ...

    def alert(self, message: str) -> None:
        ...


class DesktopNotifier:
    """Copies to the system clipboard and prints notices/alerts to the console."""

    def copy_to_clipboard(self, text: str) -> None:
        pyperclip.copy(text)

    def notice(self, message: str) -> None:
        logger.info(message)
        print(message)

    def alert(self, message: str) -> None:
        logger.error(message)
        print(f"ERROR: {message}")


class RecordingNotifier:
    """Keeps every call in memory; the clipboard is a plain attribute."""

    def __init__(self) -> None:
        self.clipboard: str | None = None
        self.clipboard_writes: list[str] = []
        self.notices: list[str] = []
        self.alerts: list[str] = []

    def copy_to_clipboard(self, text: str) -> None:
        self.clipboard = text
        self.clipboard_writes.append(text)

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def alert(self, message: str) -> None:
        self.alerts.append(message)
