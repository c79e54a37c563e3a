"""Member domain entity."""

from dataclasses import dataclass
from datetime import date


@dataclass
class Member:
    """Domain entity for a rotation-eligible team member."""

    id: str
    name: str
    handle: str
    last_chief_date: date | None = None
    is_active: bool = True
    is_volunteer: bool = False
    chief_count: int = 0

    @property
    def has_served(self) -> bool:
        """Check if the member has been chief before."""
        return self.last_chief_date is not None
