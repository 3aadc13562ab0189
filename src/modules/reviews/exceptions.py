"""Review order domain exceptions.

Raised by the Service Layer and the state machine.  The API layer catches
them and translates them into DRF exceptions with a stable error code.
"""

from __future__ import annotations


class ReviewOrderNotFound(Exception):
    """The review order does not exist, or is not visible to the caller."""


class InvalidReviewRequest(Exception):
    """The request payload violates a workflow rule (items, totals, lists)."""


class InvalidReviewStatus(Exception):
    """The requested status is not one of the admin review values."""


class InvalidStatusTransition(Exception):
    """The review order is in a state that does not accept the action."""


class ReviewPersistenceError(Exception):
    """The store failed while creating or updating a review order."""
