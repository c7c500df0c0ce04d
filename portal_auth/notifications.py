"""Toast-style user notifications, mirrored to the log."""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List

from pydantic import BaseModel

from . import config

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    level: str
    message: str
    created_at: str


class NotificationFeed:
    """Toast-style messages for the user, newest last, bounded by maxlen."""

    def __init__(self, maxlen: int = config.NOTIFICATION_HISTORY):
        self._items: Deque[Notification] = deque(maxlen=maxlen)

    def _push(self, level: str, message: str):
        self._items.append(Notification(
            level=level,
            message=message,
            created_at=datetime.now(timezone.utc).isoformat(),
        ))

    def success(self, message: str):
        logger.info(message)
        self._push("success", message)

    def error(self, message: str):
        logger.warning(message)
        self._push("error", message)

    def recent(self) -> List[Notification]:
        return list(self._items)
