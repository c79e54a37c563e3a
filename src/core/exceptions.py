"""Application errors and error codes.

Errors are normally carried as values inside ``core.result.Failure``; they
subclass ``Exception`` so callers at the process edge can still raise them.
"""

from datetime import date
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes."""

    # Collaborator errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    NOTIFIER_UNAVAILABLE = "NOTIFIER_UNAVAILABLE"
    DUPLICATE_ASSIGNMENT = "DUPLICATE_ASSIGNMENT"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    ASSIGNMENT_NOT_FOUND = "ASSIGNMENT_NOT_FOUND"

    # Domain errors
    NO_CANDIDATES = "NO_CANDIDATES"
    NO_ROSTER_FOR_WEEK = "NO_ROSTER_FOR_WEEK"
    CHIEF_NOT_FOUND = "CHIEF_NOT_FOUND"

    # Notification errors
    PARTIAL_NOTIFICATION = "PARTIAL_NOTIFICATION"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class StoreUnavailableError(AppException):
    """The roster store could not be reached or rejected the request."""

    def __init__(self, message: str = "Roster store unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
        )


class NotifierUnavailableError(AppException):
    """The messaging system could not be reached or rejected the request."""

    def __init__(self, message: str = "Notifier unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.NOTIFIER_UNAVAILABLE,
            message=message,
        )


class DuplicateAssignmentError(AppException):
    """An assignment already exists for the week."""

    def __init__(self, week_start: date) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_ASSIGNMENT,
            message=f"Assignment already exists for week of {week_start.isoformat()}",
            details={"week_start": week_start.isoformat()},
        )


class MemberNotFoundError(AppException):
    """Member not found in the roster store."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message=f"Member not found: {member_id}",
            details={"member_id": member_id},
        )


class AssignmentNotFoundError(AppException):
    """Assignment not found in the roster store."""

    def __init__(self, assignment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ASSIGNMENT_NOT_FOUND,
            message=f"Assignment not found: {assignment_id}",
            details={"assignment_id": assignment_id},
        )


class NoCandidatesError(AppException):
    """No active members are eligible for selection."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NO_CANDIDATES,
            message="No active team members found",
        )


class NoRosterForWeekError(AppException):
    """No weekly assignment exists for the requested week."""

    def __init__(self, week_start: date) -> None:
        super().__init__(
            error_code=ErrorCode.NO_ROSTER_FOR_WEEK,
            message="No roster found for current week",
            details={"week_start": week_start.isoformat()},
        )


class ChiefNotFoundError(AppException):
    """The recorded chief is not among the active members."""

    def __init__(self, chief_id: str, assignment_id: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.CHIEF_NOT_FOUND,
            message="Chief not found in active members",
            details={"chief_id": chief_id, "assignment_id": assignment_id},
        )


class PartialNotificationError(AppException):
    """The public message went out but the internal one did not."""

    def __init__(self, public_handle: str, cause: AppException) -> None:
        super().__init__(
            error_code=ErrorCode.PARTIAL_NOTIFICATION,
            message=f"Internal notification failed after public delivery: {cause.message}",
            details={"public_handle": public_handle, "cause": cause.error_code.value},
        )
        self.public_handle = public_handle
        self.cause = cause
