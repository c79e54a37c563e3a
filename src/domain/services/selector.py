"""Chief and backup selection. Pure computation, no I/O."""

import random
from collections.abc import Sequence
from datetime import date

import structlog

from core.exceptions import NoCandidatesError
from core.result import Failure, Result, Success
from domain.entities.assignment import Selection
from domain.entities.member import Member

logger = structlog.get_logger()


def select_chief_and_backup(
    members: Sequence[Member],
    rng: random.Random | None = None,
) -> Result[Selection]:
    """Pick a chief and a backup from the active members.

    Ordering:
        1. Volunteers before non-volunteers.
        2. Oldest ``last_chief_date`` first; never-served counts as the
           earliest possible date.
        3. Exact ties broken by a random draw from ``rng``.

    The backup is the runner-up, or the chief again when only one member
    is eligible.
    """
    rng = rng or random.Random()
    candidates = [m for m in members if m.is_active]
    if not candidates:
        return Failure(NoCandidatesError())

    ranked = sorted(
        candidates,
        key=lambda m: (
            not m.is_volunteer,
            m.last_chief_date or date.min,
            rng.random(),
        ),
    )

    chief = ranked[0]
    backup = ranked[1] if len(ranked) > 1 else chief

    if len(ranked) == 1:
        logger.info("only_one_member_available", chief=chief.name)

    return Success(Selection(chief=chief, backup=backup))
