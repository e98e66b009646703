from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("hackhub.core")


# ---- Domain errors -------------------------------------------------------
# Raised by services and converted to the JSON envelope at the view boundary.


class DomainError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"


class NotFoundError(DomainError):
    """Missing hackathon, team, user, join request or invitation token."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ForbiddenError(DomainError):
    """Authenticated, but the wrong identity or role for this action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized."
    default_code = "forbidden"


class PermissionDeniedError(DomainError):
    """Accepted coordinator who lacks the specific permission flag."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have the required coordinator permission."
    default_code = "permission_denied"


class InvalidStateError(DomainError):
    default_detail = "Operation is not allowed in the current state."
    default_code = "invalid_state"


class ValidationError(DomainError):
    default_detail = "Invalid input."
    default_code = "invalid"


class DuplicateError(DomainError):
    default_detail = "Already exists."
    default_code = "duplicate"


class DuplicateRequestError(DuplicateError):
    default_detail = "A pending join request already exists for this user and team."
    default_code = "duplicate_request"


class TeamFullError(InvalidStateError):
    default_detail = "Team is already at its maximum size."
    default_code = "team_full"


# ---- Handler ---------------------------------------------------------------


def _first_message(data):
    """
    Pull a single human readable message out of DRF error data.
    Serializer errors nest lists/dicts; we take the first leaf.
    """
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for key, value in data.items():
            message = _first_message(value)
            if key == "non_field_errors":
                return message
            return f"{key}: {message}"
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format:
        {"success": false, "status_code": 4xx, "message": "...", "errors": ...}

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "message": _first_message(response.data),
                "errors": response.data,
            },
            status=response.status_code,
            headers={
                key: value for key, value in response.items()
                if key in ("Retry-After", "WWW-Authenticate", "Allow")
            },
        )

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "message": "Internal server error.",
            "errors": {"detail": "Internal server error."},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
