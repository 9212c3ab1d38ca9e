"""User-facing notification channel (toasts in the console UI)."""
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from resource_hub.core.errors import ResourceError

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """A single message shown to the user."""
    level: NotificationLevel
    message: str
    code: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


Subscriber = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to subscribers.

    Every notification is logged as well, errors at WARNING level.
    """

    def __init__(self):
        self.history: List[Notification] = []
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def _emit(self, notification: Notification) -> Notification:
        self.history.append(notification)
        for callback in self._subscribers:
            callback(notification)
        return notification

    def success(self, message: str) -> Notification:
        logger.info(f"Notify success: {message}")
        return self._emit(Notification(level=NotificationLevel.SUCCESS, message=message))

    def info(self, message: str) -> Notification:
        logger.info(f"Notify info: {message}")
        return self._emit(Notification(level=NotificationLevel.INFO, message=message))

    def error(self, error: ResourceError) -> Notification:
        logger.warning(f"Notify error: {error.code.value} - {error.message}")
        return self._emit(
            Notification(
                level=NotificationLevel.ERROR,
                message=error.message,
                code=error.code.value,
            )
        )

    @property
    def errors(self) -> List[Notification]:
        return [n for n in self.history if n.level == NotificationLevel.ERROR]

    def clear(self) -> None:
        self.history.clear()
