"""Review workflow DTOs for the Service Layer.

Immutable Pydantic v2 models built by the views from validated serializer
data.  Workflow rules (non-empty snapshot, total invariant) are checked by
``ReviewOrderService`` so they surface as ``InvalidReviewRequest``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class SubmitReviewDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: List[Dict[str, Any]]
    subtotal: Decimal
    shipping: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    total: Decimal
    submitted_at: Optional[datetime] = None


class UpdateReviewStatusDTO(BaseModel):
    """Admin review decision.

    ``status`` is kept as the raw string; the state machine decides whether
    it is acceptable.  The notes are replaced, so ``None`` clears them.
    """

    model_config = ConfigDict(frozen=True)

    status: str
    admin_notes: Optional[str] = None


class PictureReplyDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    image: str
    notes: str = ""

    @field_validator("item_id", mode="before")
    @classmethod
    def item_id_as_string(cls, v: Any) -> str:
        return str(v)


class CustomerConfirmationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    confirmed: bool
    notes: str = ""

    @field_validator("item_id", mode="before")
    @classmethod
    def item_id_as_string(cls, v: Any) -> str:
        return str(v)
