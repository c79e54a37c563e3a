"""Unit tests for CLI commands and dispatch."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from cli.commands import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    execute_assignment,
    execute_init_db,
    execute_reminder,
)
from core.config import Settings
from core.exceptions import (
    NoRosterForWeekError,
    NotifierUnavailableError,
    PartialNotificationError,
    StoreUnavailableError,
)
from core.result import Failure, Success
from domain.entities.assignment import (
    AssignmentAlreadyExists,
    AssignmentCreated,
    AssignmentResult,
    InsufficientCandidates,
    WeeklyAssignment,
)
from main import main
from tests.unit.conftest import NEXT_MONDAY, THIS_MONDAY, make_member

ALICE = make_member("alice")
BOB = make_member("bob")


def created(chief=ALICE, backup=BOB, notification_error=None) -> Success:
    return Success(
        AssignmentCreated(
            assignment=AssignmentResult(chief=chief, backup=backup, week_start=NEXT_MONDAY),
            record=WeeklyAssignment(week_start=NEXT_MONDAY, chief_id=chief.id, backup_id=backup.id, id="r1"),
            notification_error=notification_error,
        )
    )


@pytest.fixture
def service() -> AsyncMock:
    return AsyncMock()


class TestExecuteAssignment:
    async def test_created(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_assignment.return_value = created()

        code = await execute_assignment(service)

        assert code == EXIT_SUCCESS
        assert "✅ Assignment created: Alice (Chief), Bob (Backup)" in capsys.readouterr().out

    async def test_created_solo(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_assignment.return_value = created(backup=ALICE)

        code = await execute_assignment(service)

        assert code == EXIT_SUCCESS
        assert "Alice (Chief, no backup available)" in capsys.readouterr().out

    async def test_created_with_incomplete_notifications(
        self, service: AsyncMock, capsys: pytest.CaptureFixture[str]
    ):
        error = PartialNotificationError("1.1", NotifierUnavailableError("Slack API error: not_in_channel"))
        service.run_assignment.return_value = created(notification_error=error)

        code = await execute_assignment(service)

        assert code == EXIT_SUCCESS
        assert "⚠️ Notifications incomplete" in capsys.readouterr().out

    async def test_already_exists_is_success(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_assignment.return_value = Success(AssignmentAlreadyExists(week_start=NEXT_MONDAY))

        code = await execute_assignment(service)

        assert code == EXIT_SUCCESS
        assert "ℹ️ Assignment already exists for 2026-10-19" in capsys.readouterr().out

    async def test_insufficient_candidates_fails(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_assignment.return_value = Success(InsufficientCandidates(available_count=0))

        code = await execute_assignment(service)

        assert code == EXIT_FAILURE
        assert "found 0" in capsys.readouterr().err

    async def test_failure(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_assignment.return_value = Failure(StoreUnavailableError("Notion API error: timeout"))

        code = await execute_assignment(service)

        assert code == EXIT_FAILURE
        assert "❌ Assignment failed: Notion API error: timeout" in capsys.readouterr().err


class TestExecuteReminder:
    async def test_sent(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_reminder.return_value = Success(None)

        code = await execute_reminder(service, include_handover=True)

        assert code == EXIT_SUCCESS
        service.run_reminder.assert_awaited_once_with(include_handover=True)
        assert "✅ Friday reminder sent" in capsys.readouterr().out

    async def test_failure(self, service: AsyncMock, capsys: pytest.CaptureFixture[str]):
        service.run_reminder.return_value = Failure(NoRosterForWeekError(THIS_MONDAY))

        code = await execute_reminder(service, include_handover=False)

        assert code == EXIT_FAILURE
        assert "❌ Reminder failed: No roster found for current week" in capsys.readouterr().err


class TestInitDb:
    async def test_creates_tables_for_database_backend(self, tmp_path: Path):
        db_file = tmp_path / "roster.db"
        settings = Settings(roster_backend="database", database_url=f"sqlite+aiosqlite:///{db_file}")

        code = await execute_init_db(settings)

        assert code == EXIT_SUCCESS
        assert db_file.exists()

    async def test_rejected_for_notion_backend(self, capsys: pytest.CaptureFixture[str]):
        code = await execute_init_db(Settings(roster_backend="notion"))

        assert code == EXIT_FAILURE
        assert "ROSTER_BACKEND=database" in capsys.readouterr().err


class TestMain:
    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("main.setup_logging", lambda: None)

    @pytest.mark.parametrize("argv", [["help"], [], ["bogus"], ["HELP"]])
    def test_usage_exits_zero(self, argv: list[str], capsys: pytest.CaptureFixture[str]):
        assert main(argv) == EXIT_SUCCESS
        assert "Usage: firechief" in capsys.readouterr().out

    def test_unknown_flags_are_ignored(self, capsys: pytest.CaptureFixture[str]):
        assert main(["help", "--verbose"]) == EXIT_SUCCESS

