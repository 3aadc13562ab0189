"""Event handlers translating review events into real-time notifications.

Every handler addresses the admin room and the owning customer through
``payload["user_id"]``.  Delivery is best-effort; ``emit`` never raises.
"""

from __future__ import annotations

import structlog

from modules.notifications.constants import (
    CUSTOMER_CONFIRMATION_RECEIVED,
    ORDER_STATUS_CHANGED,
    PICTURE_REPLY_UPLOADED,
)
from modules.notifications.services import emit
from modules.reviews.events import (
    PictureRepliesConfirmed,
    PictureRepliesUploaded,
    ReviewStatusChanged,
    ReviewSubmitted,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ReviewSubmittedHandler(IEventHandler[ReviewSubmitted]):
    def handle(self, event: ReviewSubmitted) -> None:
        emit(
            ORDER_STATUS_CHANGED,
            event.aggregate_id,
            {
                "user_id": event.customer_id,
                "old_status": None,
                "status": "pending",
                "item_count": event.item_count,
                "total": event.total,
            },
        )


class ReviewStatusChangedHandler(IEventHandler[ReviewStatusChanged]):
    def handle(self, event: ReviewStatusChanged) -> None:
        logger.info(
            "review.status_change_notified",
            review_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )
        emit(
            ORDER_STATUS_CHANGED,
            event.aggregate_id,
            {
                "user_id": event.customer_id,
                "old_status": event.old_status,
                "status": event.new_status,
                "admin_notes": event.admin_notes,
            },
        )


class PictureRepliesUploadedHandler(IEventHandler[PictureRepliesUploaded]):
    def handle(self, event: PictureRepliesUploaded) -> None:
        emit(
            PICTURE_REPLY_UPLOADED,
            event.aggregate_id,
            {"user_id": event.customer_id, "reply_count": event.reply_count},
        )


class PictureRepliesConfirmedHandler(IEventHandler[PictureRepliesConfirmed]):
    def handle(self, event: PictureRepliesConfirmed) -> None:
        emit(
            CUSTOMER_CONFIRMATION_RECEIVED,
            event.aggregate_id,
            {
                "user_id": event.customer_id,
                "confirmation_count": event.confirmation_count,
                "status": event.new_status,
            },
        )


review_submitted_handler = ReviewSubmittedHandler()
review_status_changed_handler = ReviewStatusChangedHandler()
picture_replies_uploaded_handler = PictureRepliesUploadedHandler()
picture_replies_confirmed_handler = PictureRepliesConfirmedHandler()
