"""Wire settings into the roster store, notifier and assignment service."""

import random
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import httpx

from core.config import Settings
from domain.repositories.roster_store import IRosterStore
from domain.services.assignment_service import AssignmentService
from infrastructure.database.repositories.sqlalchemy_roster_store import SQLAlchemyRosterStore
from infrastructure.database.session import create_engine, create_session_factory
from infrastructure.notion.roster_store import NotionRosterStore
from infrastructure.slack.notifier import SlackNotifier


@asynccontextmanager
async def build_assignment_service(settings: Settings) -> AsyncIterator[AssignmentService]:
    """Yield a fully wired AssignmentService; closes HTTP clients and engines on exit."""
    async with AsyncExitStack() as stack:
        slack_client = await stack.enter_async_context(
            httpx.AsyncClient(base_url=settings.slack_api_base_url, timeout=settings.http_timeout)
        )
        notifier = SlackNotifier(
            slack_client,
            bot_token=settings.slack_bot_token,
            public_channel_id=settings.slack_public_channel_id,
            internal_channel_id=settings.slack_internal_channel_id,
        )

        roster_store: IRosterStore
        if settings.uses_database:
            engine = create_engine(settings.database_url)
            stack.push_async_callback(engine.dispose)
            roster_store = SQLAlchemyRosterStore(create_session_factory(engine))
        else:
            notion_client = await stack.enter_async_context(
                httpx.AsyncClient(
                    base_url=settings.notion_api_base_url,
                    timeout=settings.http_timeout,
                )
            )
            roster_store = NotionRosterStore(
                notion_client,
                token=settings.notion_token,
                team_database_id=settings.team_database_id,
                roster_database_id=settings.roster_database_id,
                notion_version=settings.notion_version,
            )

        yield AssignmentService(roster_store, notifier, rng=random.Random())
