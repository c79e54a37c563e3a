"""SQLAlchemy implementation of the roster store."""

from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import (
    AssignmentNotFoundError,
    DuplicateAssignmentError,
    MemberNotFoundError,
    StoreUnavailableError,
)
from core.result import Failure, Result, Success
from domain.entities.assignment import WeeklyAssignment
from domain.entities.member import Member
from infrastructure.database.models import MemberModel, WeeklyAssignmentModel

logger = structlog.get_logger()


class SQLAlchemyRosterStore:
    """SQLAlchemy implementation of IRosterStore.

    Each operation runs in its own session and transaction. The unique
    constraint on ``week_start`` rejects a second assignment for the same
    week even when two runs race past the existence check.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_assignment_for_week(self, week_start: date) -> Result[WeeklyAssignment | None]:
        """Get the assignment for a week."""
        stmt = select(WeeklyAssignmentModel).where(WeeklyAssignmentModel.week_start == week_start)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            return _unavailable("db_roster_query_failed", exc)
        return Success(self._to_assignment(model) if model else None)

    async def get_active_members(self) -> Result[list[Member]]:
        """Get all active members ordered by name."""
        stmt = select(MemberModel).where(MemberModel.is_active.is_(True)).order_by(MemberModel.name)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                members = [self._to_member(model) for model in result.scalars()]
        except SQLAlchemyError as exc:
            return _unavailable("db_members_query_failed", exc)

        logger.info("db_members_retrieved", count=len(members))
        return Success(members)

    async def create_assignment(self, assignment: WeeklyAssignment) -> Result[str]:
        """Insert a weekly assignment. Returns the new id."""
        model = WeeklyAssignmentModel(
            week_start=assignment.week_start,
            chief_id=assignment.chief_id,
            backup_id=assignment.backup_id,
            status=str(assignment.status),
            public_message_handle=assignment.public_message_handle,
            internal_message_handle=assignment.internal_message_handle,
        )
        if assignment.id:
            model.id = assignment.id

        try:
            async with self._session_factory() as session:
                session.add(model)
                await session.commit()
                new_id = model.id
        except IntegrityError:
            logger.warning("db_roster_duplicate", week_start=assignment.week_start.isoformat())
            return Failure(DuplicateAssignmentError(assignment.week_start))
        except SQLAlchemyError as exc:
            return _unavailable("db_roster_create_failed", exc)

        logger.info("db_roster_created", week_start=assignment.week_start.isoformat())
        return Success(new_id)

    async def update_chief_last_served(self, member_id: str, served_on: date) -> Result[None]:
        """Set the chief date, clear the volunteer flag and bump the count."""
        try:
            async with self._session_factory() as session:
                model = await session.get(MemberModel, member_id)
                if model is None:
                    return Failure(MemberNotFoundError(member_id))
                model.last_chief_date = served_on
                model.is_volunteer = False
                model.chief_count = (model.chief_count or 0) + 1
                await session.commit()
        except SQLAlchemyError as exc:
            return _unavailable("db_member_update_failed", exc)

        logger.info("db_member_date_updated", member_id=member_id, date=served_on.isoformat())
        return Success(None)

    async def update_assignment_message_handles(
        self,
        assignment_id: str,
        public_handle: str | None,
        internal_handle: str | None,
    ) -> Result[None]:
        """Store message handles on an assignment. Empty handles are skipped."""
        if not public_handle and not internal_handle:
            return Success(None)

        try:
            async with self._session_factory() as session:
                model = await session.get(WeeklyAssignmentModel, assignment_id)
                if model is None:
                    return Failure(AssignmentNotFoundError(assignment_id))
                if public_handle:
                    model.public_message_handle = public_handle
                if internal_handle:
                    model.internal_message_handle = internal_handle
                await session.commit()
        except SQLAlchemyError as exc:
            return _unavailable("db_roster_timestamps_update_failed", exc)

        logger.info("db_roster_timestamps_updated", assignment_id=assignment_id)
        return Success(None)

    def _to_member(self, model: MemberModel) -> Member:
        """Convert ORM model to domain entity."""
        return Member(
            id=model.id,
            name=model.name,
            handle=model.handle,
            last_chief_date=model.last_chief_date,
            is_active=model.is_active,
            is_volunteer=model.is_volunteer,
            chief_count=model.chief_count,
        )

    def _to_assignment(self, model: WeeklyAssignmentModel) -> WeeklyAssignment:
        """Convert ORM model to domain entity."""
        return WeeklyAssignment(
            id=model.id,
            week_start=model.week_start,
            chief_id=model.chief_id,
            backup_id=model.backup_id,
            status=model.status,
            public_message_handle=model.public_message_handle,
            internal_message_handle=model.internal_message_handle,
        )


def _unavailable(event: str, exc: SQLAlchemyError) -> Failure:
    logger.error(event, error=str(exc))
    return Failure(StoreUnavailableError(f"Database error: {exc}"))
