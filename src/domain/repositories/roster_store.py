"""Roster store protocol."""

from datetime import date
from typing import Protocol

from core.result import Result
from domain.entities.assignment import WeeklyAssignment
from domain.entities.member import Member


class IRosterStore(Protocol):
    """Persistence interface for members and weekly assignments.

    Every method returns a ``Result``; implementations convert transport
    errors into ``Failure`` values instead of raising.
    """

    async def get_assignment_for_week(self, week_start: date) -> Result[WeeklyAssignment | None]:
        """Get the assignment for a week, or None if there is none."""
        ...

    async def get_active_members(self) -> Result[list[Member]]:
        """Get all members with the active flag set."""
        ...

    async def create_assignment(self, assignment: WeeklyAssignment) -> Result[str]:
        """Create a weekly assignment. Returns the new id."""
        ...

    async def update_chief_last_served(self, member_id: str, served_on: date) -> Result[None]:
        """Record a chief term: set the date, clear volunteer, bump the count."""
        ...

    async def update_assignment_message_handles(
        self,
        assignment_id: str,
        public_handle: str | None,
        internal_handle: str | None,
    ) -> Result[None]:
        """Store message handles on an assignment. Empty handles are skipped."""
        ...
