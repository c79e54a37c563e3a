"""Shared fixtures for unit tests."""

import random
from collections.abc import Callable
from datetime import date

import pytest

from domain.entities.member import Member
from domain.services.assignment_service import AssignmentService
from tests.unit.fakes import FakeNotifier, FakeRosterStore

# A Wednesday: the upcoming week starts 2026-10-19, the current one 2026-10-12.
TODAY = date(2026, 10, 14)
NEXT_MONDAY = date(2026, 10, 19)
THIS_MONDAY = date(2026, 10, 12)


def make_member(member_id: str, **overrides) -> Member:
    """Build an active, never-served, non-volunteer member."""
    fields = {
        "id": member_id,
        "name": member_id.capitalize(),
        "handle": f"U{member_id.upper()}",
    }
    fields.update(overrides)
    return Member(**fields)


@pytest.fixture
def members() -> list[Member]:
    return [
        make_member("alice", last_chief_date=date(2026, 9, 7)),
        make_member("bob", last_chief_date=date(2026, 8, 3)),
        make_member("carol", last_chief_date=date(2026, 9, 28)),
    ]


@pytest.fixture
def store(members: list[Member]) -> FakeRosterStore:
    return FakeRosterStore(members)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def today() -> Callable[[], date]:
    return lambda: TODAY


@pytest.fixture
def service(
    store: FakeRosterStore, notifier: FakeNotifier, today: Callable[[], date]
) -> AssignmentService:
    return AssignmentService(store, notifier, rng=random.Random(7), today=today)
