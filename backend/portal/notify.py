# backend/portal/notify.py
import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong. Please try again."


@dataclass
class Notice:
    level: str  # "success", "error" or "info"
    message: str


@dataclass
class Notifier:
    """Collects the toasts a user would see, newest last."""
    notices: List[Notice] = field(default_factory=list)

    def success(self, message: str):
        self.notices.append(Notice("success", message))

    def error(self, message: str = GENERIC_ERROR):
        logger.info("User-facing error: %s", message)
        self.notices.append(Notice("error", message))

    def info(self, message: str):
        self.notices.append(Notice("info", message))

    @property
    def last(self):
        return self.notices[-1] if self.notices else None

    def clear(self):
        self.notices.clear()
