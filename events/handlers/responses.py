"""Domain error to HTTP response mapping shared by every app's handlers."""

from enum import Enum

from rest_framework import status
from rest_framework.response import Response

from events.domain.errors import DomainError, ErrorCode

STATUS_BY_CODE: dict[Enum, int] = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.CAPACITY_BELOW_ATTENDEES: status.HTTP_409_CONFLICT,
}


def register_statuses(mapping: dict[Enum, int]) -> None:
    """Let other apps add the HTTP status of their own error codes."""
    STATUS_BY_CODE.update(mapping)


def error_body(error: DomainError) -> dict:
    return {"code": error.code.value, "message": error.message, **error.details()}


def error_response(error: DomainError) -> Response:
    """Render a domain error. Unknown codes are treated as bad requests."""
    return Response(
        {"error": error_body(error)},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def validation_response(errors: dict) -> Response:
    return Response(
        {"error": {"code": "VALIDATION_ERROR", "message": "Invalid request", "fields": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )
