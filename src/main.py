"""Command-line entry point."""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from uuid import uuid4

import structlog

from cli.commands import execute_assignment, execute_init_db, execute_reminder, show_usage
from cli.dependencies import build_assignment_service
from core.config import Settings, get_settings
from core.logging import setup_logging

logger = structlog.get_logger()

ASSIGN_COMMANDS = frozenset({"assign", "remind-monday"})
REMINDER_COMMANDS = frozenset({"remind-friday"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="firechief", add_help=False)
    parser.add_argument("command", nargs="?", default="help")
    parser.add_argument("--handover", action="store_true")
    return parser


async def run(command: str, handover: bool, settings: Settings) -> int:
    """Dispatch one command and return its exit code."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=uuid4().hex[:12], command=command)

    if command in ASSIGN_COMMANDS:
        async with build_assignment_service(settings) as service:
            return await execute_assignment(service)

    if command in REMINDER_COMMANDS:
        async with build_assignment_service(settings) as service:
            return await execute_reminder(service, handover or settings.handover_enabled)

    if command == "init-db":
        return await execute_init_db(settings)

    return show_usage()


def main(argv: Sequence[str] | None = None) -> int:
    args, _ = build_parser().parse_known_args(argv)
    command = args.command.lower()
    settings = get_settings()

    setup_logging()
    return asyncio.run(run(command, args.handover, settings))


if __name__ == "__main__":
    sys.exit(main())
