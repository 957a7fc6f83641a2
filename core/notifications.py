#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
User-facing notifications

Controllers post short messages here after store operations and exports;
whatever UI is attached subscribes to ``notification_posted``. Message text
for no-op reasons and validation failures lives in this module so every
front end shows the same wording.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from .result_types import NoOpReason, ValidationResult


class NotificationLevel(Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


# Messages for operations that changed nothing
NOOP_MESSAGES = {
    NoOpReason.KEY_NOT_FOUND: "Please select a file first",
    NoOpReason.EMPTY_INPUT: "No file selected",
    NoOpReason.AT_TOP: "Cannot move the first item up",
    NoOpReason.AT_BOTTOM: "Cannot move the last item down",
    NoOpReason.ALREADY_EMPTY: "The file list is already empty",
    NoOpReason.SAME_KEY: "Select two different files to swap",
    NoOpReason.UNKNOWN_FIELD: "Nothing to update",
    NoOpReason.INVALID_VALUE: "Invalid value",
}

# Info-level no-ops; everything else is shown as a warning
_INFO_REASONS = {NoOpReason.EMPTY_INPUT, NoOpReason.ALREADY_EMPTY}


def noop_message(reason: Optional[NoOpReason]) -> str:
    return NOOP_MESSAGES.get(reason, "Nothing changed")


def noop_level(reason: Optional[NoOpReason]) -> NotificationLevel:
    return NotificationLevel.INFO if reason in _INFO_REASONS else NotificationLevel.WARNING


def validation_message(result: ValidationResult) -> str:
    """One line summarizing every field error, in rule order"""
    return "; ".join(result.messages)


class NotificationCenter(QObject):
    """Notification sink with a short in-memory history"""

    notification_posted = Signal(object)  # Notification

    def __init__(self, max_history: int = 50, parent=None):
        super().__init__(parent)
        self._history: List[Notification] = []
        self._max_history = max_history

    def post(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level, message)
        self._history.append(notification)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]
        self.notification_posted.emit(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.post(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.post(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.post(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.post(NotificationLevel.ERROR, message)

    def post_noop(self, reason: Optional[NoOpReason]) -> Notification:
        return self.post(noop_level(reason), noop_message(reason))

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def clear_history(self):
        self._history.clear()
