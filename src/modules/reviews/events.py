"""Domain events for the Reviews bounded context.

Collected on ``ReviewOrder`` while a use case runs and published on the
in-process bus once the surrounding transaction commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ReviewSubmitted(DomainEvent):
    """Raised when a customer submits a cart for review."""

    customer_id: Any = None
    item_count: int = 0
    total: str = "0.00"


@dataclass(frozen=True)
class ReviewStatusChanged(DomainEvent):
    """Raised on every admin review and every customer confirmation."""

    customer_id: Any = None
    old_status: Optional[str] = None
    new_status: str = ""
    admin_notes: Optional[str] = None


@dataclass(frozen=True)
class PictureRepliesUploaded(DomainEvent):
    customer_id: Any = None
    reply_count: int = 0


@dataclass(frozen=True)
class PictureRepliesConfirmed(DomainEvent):
    customer_id: Any = None
    confirmation_count: int = 0
    new_status: str = ""
