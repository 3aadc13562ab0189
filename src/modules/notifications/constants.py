"""Notification rooms and event kinds.

Every connected admin session listens on ``ADMIN_ROOM``; a customer only
listens on their own ``user_<id>`` room.
"""

ADMIN_ROOM = "admin_room"
USER_ROOM_PREFIX = "user_"

ORDER_STATUS_CHANGED = "order_status_changed"
PICTURE_REPLY_UPLOADED = "picture_reply_uploaded"
CUSTOMER_CONFIRMATION_RECEIVED = "customer_confirmation_received"

NOTIFICATION_KINDS: frozenset[str] = frozenset(
    {ORDER_STATUS_CHANGED, PICTURE_REPLY_UPLOADED, CUSTOMER_CONFIRMATION_RECEIVED}
)


def user_room(customer_id) -> str:
    return f"{USER_ROOM_PREFIX}{customer_id}"
