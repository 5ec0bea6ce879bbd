# carit/exceptions.py
"""
Service-level error taxonomy.
Services raise these; carit.main renders them as {"success": false, "message": ...}
with the class status code. Anything else surfaces as a 500.
"""

from fastapi import status


class CarITError(Exception):
    """Base class for errors raised by CarIT services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class InvalidArgumentError(CarITError):
    """Missing or malformed required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class NoFlowchartsError(InvalidArgumentError):
    default_message = "No flowcharts"


class IndexOutOfRangeError(InvalidArgumentError):
    default_message = "Index out of range"


class ForbiddenError(CarITError):
    """Ownership check failed. Rendered as 400 to match the garage wire contract."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Vehicle not found in garage"


class NotFoundError(CarITError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CarITError):
    """A concurrent writer kept winning; the caller may retry the request."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Concurrent update conflict"


class UpstreamError(CarITError):
    """An external collaborator (e.g. the flowchart generator) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service unavailable"


class UnauthorizedError(CarITError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Missing user identity"


class ServiceUnavailableError(CarITError):
    """A collaborator this endpoint needs is not configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"
