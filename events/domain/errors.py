"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    FORBIDDEN = "FORBIDDEN"
    CAPACITY_BELOW_ATTENDEES = "CAPACITY_BELOW_ATTENDEES"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: Enum
    message: str

    def details(self) -> dict[str, Any]:
        """Extra fields a client needs to render a precise remedy."""
        return {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class ForbiddenError(DomainError):
    """Raised when the requester's email does not own the resource."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message=f"You are not allowed to modify this {resource}",
        )
        self.resource = resource


class CapacityBelowAttendeesError(DomainError):
    """Raised when an edit would set capacity below the seats already booked."""

    def __init__(self, capacity: int, attendees: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_ATTENDEES,
            message=f"Capacity cannot be lower than the {attendees} ticket(s) already booked",
        )
        self.capacity = capacity
        self.attendees = attendees

    def details(self) -> dict[str, Any]:
        return {"attendees": self.attendees}
