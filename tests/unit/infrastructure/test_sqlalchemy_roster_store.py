"""Unit tests for the SQLAlchemy roster store on a temporary SQLite file."""

import random
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.exceptions import AssignmentNotFoundError, DuplicateAssignmentError, MemberNotFoundError
from core.result import Failure, Success
from domain.entities.assignment import AssignmentAlreadyExists, AssignmentCreated, WeeklyAssignment
from domain.services.assignment_service import AssignmentService
from infrastructure.database.models import MemberModel
from infrastructure.database.repositories.sqlalchemy_roster_store import SQLAlchemyRosterStore
from infrastructure.database.session import create_engine, create_session_factory, create_tables
from tests.unit.conftest import NEXT_MONDAY, TODAY
from tests.unit.fakes import FakeNotifier


@pytest.fixture
async def engine(tmp_path: Path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'roster.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    factory = create_session_factory(engine)
    async with factory() as session:
        session.add_all(
            [
                MemberModel(id="alice", name="Alice", handle="U111", last_chief_date=date(2026, 9, 7)),
                MemberModel(id="bob", name="Bob", handle="U222", is_volunteer=True, chief_count=2),
                MemberModel(id="carol", name="Carol", handle="U333", is_active=False),
            ]
        )
        await session.commit()
    return factory


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> SQLAlchemyRosterStore:
    return SQLAlchemyRosterStore(session_factory)


class TestMembers:
    async def test_only_active_members_ordered_by_name(self, store: SQLAlchemyRosterStore):
        result = await store.get_active_members()

        assert isinstance(result, Success)
        assert [m.id for m in result.value] == ["alice", "bob"]
        bob = result.value[1]
        assert bob.handle == "U222"
        assert bob.is_volunteer is True
        assert bob.chief_count == 2
        assert bob.last_chief_date is None

    async def test_update_chief_last_served(self, store: SQLAlchemyRosterStore):
        result = await store.update_chief_last_served("bob", NEXT_MONDAY)

        assert result == Success(None)
        members = {m.id: m for m in (await store.get_active_members()).value}
        assert members["bob"].last_chief_date == NEXT_MONDAY
        assert members["bob"].is_volunteer is False
        assert members["bob"].chief_count == 3

    async def test_update_unknown_member(self, store: SQLAlchemyRosterStore):
        result = await store.update_chief_last_served("nobody", NEXT_MONDAY)

        assert isinstance(result, Failure)
        assert isinstance(result.error, MemberNotFoundError)


class TestAssignments:
    async def test_create_then_lookup(self, store: SQLAlchemyRosterStore):
        created = await store.create_assignment(
            WeeklyAssignment(week_start=NEXT_MONDAY, chief_id="bob", backup_id="alice")
        )

        assert isinstance(created, Success)
        found = await store.get_assignment_for_week(NEXT_MONDAY)
        record = found.value
        assert record.id == created.value
        assert record.chief_id == "bob"
        assert record.backup_id == "alice"
        assert record.status == "Planned"

    async def test_lookup_of_empty_week(self, store: SQLAlchemyRosterStore):
        result = await store.get_assignment_for_week(date(2026, 10, 26))

        assert result == Success(None)

    async def test_second_assignment_for_week_is_rejected(self, store: SQLAlchemyRosterStore):
        await store.create_assignment(WeeklyAssignment(week_start=NEXT_MONDAY, chief_id="bob", backup_id="alice"))

        result = await store.create_assignment(
            WeeklyAssignment(week_start=NEXT_MONDAY, chief_id="alice", backup_id="bob")
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, DuplicateAssignmentError)
        assert (await store.get_assignment_for_week(NEXT_MONDAY)).value.chief_id == "bob"

    async def test_update_message_handles(self, store: SQLAlchemyRosterStore):
        created = await store.create_assignment(
            WeeklyAssignment(week_start=NEXT_MONDAY, chief_id="bob", backup_id="alice")
        )

        await store.update_assignment_message_handles(created.value, "1.1", None)
        await store.update_assignment_message_handles(created.value, None, "2.2")

        record = (await store.get_assignment_for_week(NEXT_MONDAY)).value
        assert record.public_message_handle == "1.1"
        assert record.internal_message_handle == "2.2"

    async def test_update_handles_of_unknown_assignment(self, store: SQLAlchemyRosterStore):
        result = await store.update_assignment_message_handles("missing", "1.1", "2.2")

        assert isinstance(result, Failure)
        assert isinstance(result.error, AssignmentNotFoundError)


class TestWorkflowOnDatabase:
    async def test_running_twice_creates_one_assignment(self, store: SQLAlchemyRosterStore):
        notifier = FakeNotifier()
        service = AssignmentService(store, notifier, rng=random.Random(5), today=lambda: TODAY)

        first = await service.run_assignment()
        second = await service.run_assignment()

        assert isinstance(first.value, AssignmentCreated)
        assert first.value.assignment.chief.id == "bob"
        assert second.value == AssignmentAlreadyExists(week_start=NEXT_MONDAY)
        assert notifier.send_public.await_count == 1
        record = (await store.get_assignment_for_week(NEXT_MONDAY)).value
        assert record.public_message_handle == "public-ts"
