"""API exceptions shared by the modules.

Rendered by ``drf-standardized-errors`` like every other DRF exception:
``{"type": ..., "errors": [{"code", "detail", "attr"}]}``.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class InternalFailure(APIException):
    """The store failed; no internal detail is exposed to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The request could not be completed. Please retry later."
    default_code = "internal_failure"
