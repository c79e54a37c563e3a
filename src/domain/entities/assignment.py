"""Weekly assignment domain entities and workflow outcomes."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Union

from core.exceptions import AppException
from domain.entities.member import Member


class AssignmentStatus(StrEnum):
    """Status of a weekly assignment. Stores may hold other free-text values."""

    PLANNED = "Planned"


@dataclass
class WeeklyAssignment:
    """Domain entity for one rotation week.

    ``week_start`` is always a Monday. The message handles locate the
    notifications sent for this week so they can be unpinned later.
    """

    week_start: date
    chief_id: str
    backup_id: str
    id: str = ""
    status: str = AssignmentStatus.PLANNED
    public_message_handle: str | None = None
    internal_message_handle: str | None = None


@dataclass(frozen=True, slots=True)
class Selection:
    """Chief and backup picked by the selector."""

    chief: Member
    backup: Member


@dataclass(frozen=True, slots=True)
class AssignmentResult:
    """Who holds the rotation for a given week."""

    chief: Member
    backup: Member
    week_start: date

    @property
    def is_solo(self) -> bool:
        """Check if the chief is also their own backup."""
        return self.chief.id == self.backup.id


# --- Outcomes of the weekly workflow ---


@dataclass(frozen=True, slots=True)
class AssignmentCreated:
    """A new assignment was recorded.

    ``notification_error`` is set when the record exists but the
    announcements could not be fully delivered.
    """

    assignment: AssignmentResult
    record: WeeklyAssignment
    notification_error: AppException | None = None

    @property
    def is_degraded(self) -> bool:
        return self.notification_error is not None


@dataclass(frozen=True, slots=True)
class AssignmentAlreadyExists:
    """The target week already had an assignment; nothing was written."""

    week_start: date


@dataclass(frozen=True, slots=True)
class InsufficientCandidates:
    """Not enough active members to select a chief."""

    available_count: int


AssignmentOutcome = Union[AssignmentCreated, AssignmentAlreadyExists, InsufficientCandidates]
