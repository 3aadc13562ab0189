"""Celery tasks of the notifications module."""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from celery import shared_task
from django.conf import settings
from django.utils.module_loading import import_string

logger = structlog.get_logger(__name__)


def get_publisher():
    return import_string(settings.NOTIFICATION_PUBLISHER)()


@shared_task(name="notifications.publish_notification", ignore_result=True)
def publish_notification(rooms: List[str], message: Dict[str, Any]) -> int:
    """Publish ``message`` to every room; returns how many publishes succeeded.

    At-most-once: a failed room is logged and skipped, never retried.
    """
    publisher = get_publisher()
    delivered = 0
    for room in rooms:
        try:
            publisher.publish(room, message)
        except Exception:
            logger.warning(
                "notification.publish_failed",
                room=room,
                kind=message.get("type"),
                review_id=message.get("review_id"),
                exc_info=True,
            )
            continue
        delivered += 1
    logger.debug(
        "notification.published",
        kind=message.get("type"),
        review_id=message.get("review_id"),
        delivered=delivered,
    )
    return delivered
