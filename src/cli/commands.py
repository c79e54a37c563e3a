"""CLI commands. Each returns the process exit code."""

import sys

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.config import Settings
from core.result import Failure
from domain.entities.assignment import (
    AssignmentAlreadyExists,
    AssignmentCreated,
    InsufficientCandidates,
)
from domain.services.assignment_service import AssignmentService
from infrastructure.database.session import create_engine, create_tables

logger = structlog.get_logger()

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

USAGE = """\
FireChief Bot - Automated Fire Chief Assignment

Usage: firechief [command] [options]

Commands:
  assign          Run weekly assignment workflow
  remind-monday   Alias for 'assign'
  remind-friday   Send Friday handover reminder
  init-db         Create roster tables (ROSTER_BACKEND=database only)
  help            Show this help message

Options:
  --handover      With remind-friday, also pair the outgoing and incoming chiefs

Examples:
  firechief assign
  firechief remind-friday --handover
"""


async def execute_assignment(service: AssignmentService) -> int:
    """Run the weekly workflow and report its outcome."""
    result = await service.run_assignment()

    if isinstance(result, Failure):
        return handle_failure(f"❌ Assignment failed: {result.message}")

    outcome = result.value
    if isinstance(outcome, AssignmentCreated):
        chief, backup = outcome.assignment.chief, outcome.assignment.backup
        if outcome.assignment.is_solo:
            message = f"✅ Assignment created: {chief.name} (Chief, no backup available)"
        else:
            message = f"✅ Assignment created: {chief.name} (Chief), {backup.name} (Backup)"
        if outcome.notification_error is not None:
            message += f"\n⚠️ Notifications incomplete: {outcome.notification_error.message}"
        return handle_success(message)

    if isinstance(outcome, AssignmentAlreadyExists):
        return handle_success(
            f"ℹ️ Assignment already exists for {outcome.week_start.isoformat()}"
        )

    if isinstance(outcome, InsufficientCandidates):
        return handle_failure(
            f"❌ Need at least 1 active candidate, found {outcome.available_count}"
        )

    return handle_failure("❌ Unknown outcome")


async def execute_reminder(service: AssignmentService, include_handover: bool) -> int:
    """Run the reminder workflow and report its outcome."""
    result = await service.run_reminder(include_handover=include_handover)
    if isinstance(result, Failure):
        return handle_failure(f"❌ Reminder failed: {result.message}")
    return handle_success("✅ Friday reminder sent")


async def execute_init_db(settings: Settings) -> int:
    """Create the roster tables for the database backend."""
    if not settings.uses_database:
        return handle_failure("❌ init-db requires ROSTER_BACKEND=database")

    engine = create_engine(settings.database_url)
    try:
        await create_tables(engine)
    except SQLAlchemyError as exc:
        logger.error("create_tables_failed", error=str(exc))
        return handle_failure(f"❌ Could not create tables: {exc}")
    finally:
        await engine.dispose()
    return handle_success("✅ Roster tables ready")


def show_usage() -> int:
    print(USAGE)
    return EXIT_SUCCESS


def handle_success(message: str) -> int:
    print(message)
    return EXIT_SUCCESS


def handle_failure(message: str) -> int:
    print(message, file=sys.stderr)
    return EXIT_FAILURE
