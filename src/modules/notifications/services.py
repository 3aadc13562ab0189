"""Notification fan-out.

``emit`` is the single publish operation of the review workflow.  It is
fire-and-forget: the message is handed to a Celery task and the caller
never waits for, or learns about, delivery.  Failing to even enqueue the
task is logged and swallowed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.utils import timezone

from modules.notifications.constants import ADMIN_ROOM, NOTIFICATION_KINDS, user_room
from modules.notifications.tasks import publish_notification

logger = structlog.get_logger(__name__)


class NotificationFanout:
    def __init__(self, task=publish_notification) -> None:
        self._task = task

    @staticmethod
    def rooms_for(payload: Dict[str, Any]) -> List[str]:
        rooms = [ADMIN_ROOM]
        user_id: Optional[Any] = payload.get("user_id")
        if user_id is not None:
            rooms.append(user_room(user_id))
        return rooms

    def emit(self, kind: str, review_id: Any, payload: Dict[str, Any]) -> None:
        if kind not in NOTIFICATION_KINDS:
            logger.warning(
                "notification.unknown_kind", kind=kind, review_id=str(review_id)
            )
            return
        message = {
            "type": kind,
            "review_id": str(review_id),
            "payload": payload,
            "emitted_at": timezone.now().isoformat(),
        }
        rooms = self.rooms_for(payload)
        try:
            self._task.apply_async(args=[rooms, message], retry=False)
        except Exception:
            logger.warning(
                "notification.enqueue_failed",
                kind=kind,
                review_id=str(review_id),
                exc_info=True,
            )
            return
        logger.info(
            "notification.emitted", kind=kind, review_id=str(review_id), rooms=rooms
        )


notification_fanout = NotificationFanout()


def emit(kind: str, review_id: Any, payload: Dict[str, Any]) -> None:
    notification_fanout.emit(kind, review_id, payload)
