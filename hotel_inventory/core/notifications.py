import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from hotel_inventory.core.dates import utc_now

logger = logging.getLogger(__name__)

LEVEL_SUCCESS = "success"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: str
    message: str
    created_at: datetime = field(default_factory=utc_now)


class Notifier:
    """Collects user-facing notices and mirrors them to the log."""

    def __init__(self) -> None:
        self.history: List[Notice] = []

    def success(self, message: str) -> Notice:
        logger.info(message)
        return self._record(LEVEL_SUCCESS, message)

    def error(self, message: str) -> Notice:
        logger.warning(message)
        return self._record(LEVEL_ERROR, message)

    def latest(self) -> Optional[Notice]:
        if not self.history:
            return None
        return self.history[-1]

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [notice.message for notice in self.history if level is None or notice.level == level]

    def clear(self) -> None:
        self.history.clear()

    def _record(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=str(message))
        self.history.append(notice)
        return notice


__all__ = ["LEVEL_ERROR", "LEVEL_SUCCESS", "Notice", "Notifier"]
