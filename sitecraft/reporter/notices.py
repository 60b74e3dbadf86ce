"""
User Notices

Transient, user-visible messages (info/success/error) raised by report actions.
Every notice is also logged.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class NoticeLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    level: NoticeLevel
    message: str
    created_at: datetime = field(default_factory=datetime.now)


_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.ERROR: logging.WARNING,
}


class Notifier:
    """Collects notices and forwards them to an optional sink."""

    def __init__(self, sink: Optional[Callable[[Notice], None]] = None):
        self.notices: List[Notice] = []
        self._sink = sink

    def notify(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        logger.log(_LOG_LEVELS[level], f"[{level.value}] {message}")
        if self._sink is not None:
            self._sink(notice)
        return notice

    def info(self, message: str) -> Notice:
        return self.notify(NoticeLevel.INFO, message)

    def success(self, message: str) -> Notice:
        return self.notify(NoticeLevel.SUCCESS, message)

    def error(self, message: str) -> Notice:
        return self.notify(NoticeLevel.ERROR, message)

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None
