"""Publishers deliver one notification message to one room.

``RedisPublisher`` is the production transport: a plain Redis ``PUBLISH``
on ``<prefix>:<room>``, which the real-time gateway relays to the sockets
joined to that room.  Nobody is listening means nobody receives it; there
is no persistence and no replay.

``InMemoryPublisher`` records messages instead and is what the test
settings select.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Tuple

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django_redis import get_redis_connection


class INotificationPublisher(ABC):
    @abstractmethod
    def publish(self, room: str, message: Dict[str, Any]) -> None:
        """Deliver ``message`` to everyone currently subscribed to ``room``."""


class RedisPublisher(INotificationPublisher):
    """Redis pub/sub publisher sharing the cache connection pool."""

    def __init__(self, alias: str = "default") -> None:
        self._alias = alias

    def channel_for(self, room: str) -> str:
        return f"{settings.NOTIFICATION_CHANNEL_PREFIX}:{room}"

    def publish(self, room: str, message: Dict[str, Any]) -> None:
        # The pool socket timeout (NOTIFICATION_PUBLISH_TIMEOUT) caps the call.
        connection = get_redis_connection(self._alias)
        connection.publish(
            self.channel_for(room), json.dumps(message, cls=DjangoJSONEncoder)
        )


class InMemoryPublisher(INotificationPublisher):
    """Keeps published ``(room, message)`` pairs in a class-level list."""

    sent: ClassVar[List[Tuple[str, Dict[str, Any]]]] = []

    def publish(self, room: str, message: Dict[str, Any]) -> None:
        self.sent.append((room, message))

    @classmethod
    def reset(cls) -> None:
        cls.sent.clear()

    @classmethod
    def messages_for(cls, room: str) -> List[Dict[str, Any]]:
        return [message for sent_room, message in cls.sent if sent_room == room]
