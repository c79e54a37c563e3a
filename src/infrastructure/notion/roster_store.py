"""Notion implementation of the roster store.

Members and weekly assignments live in two Notion databases. Property
names below must match the database schemas.
"""

from datetime import date
from typing import Any

import httpx
import structlog

from core.exceptions import StoreUnavailableError
from core.result import Failure, Result, Success
from domain.entities.assignment import AssignmentStatus, WeeklyAssignment
from domain.entities.member import Member

logger = structlog.get_logger()

# Team database
PROP_NAME = "Name"
PROP_SLACK_ID = "Slack ID"
PROP_ACTIVE = "Active"
PROP_VOLUNTEER = "Volunteer"
PROP_LAST_CHIEF_DATE = "Recent Chief Date"
PROP_CHIEF_COUNT = "Chief Count"

# Roster database
PROP_WEEK = "Week"
PROP_CHIEF = "Chief"
PROP_BACKUP = "Backup"
PROP_STATUS = "Status"
PROP_PUBLIC_TS = "Public Message TS"
PROP_INTERNAL_TS = "Internal Message TS"


class NotionRosterStore:
    """Notion implementation of IRosterStore.

    The ``httpx.AsyncClient`` is owned by the caller and must have
    ``base_url`` pointing at the Notion API (``https://api.notion.com/v1/``).
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        team_database_id: str,
        roster_database_id: str,
        notion_version: str = "2022-06-28",
    ) -> None:
        self._client = client
        self._token = token
        self._team_database_id = team_database_id
        self._roster_database_id = roster_database_id
        self._notion_version = notion_version

    async def get_active_members(self) -> Result[list[Member]]:
        """Get all members with the Active checkbox ticked."""
        pages = await self._query_database(
            self._team_database_id,
            {"property": PROP_ACTIVE, "checkbox": {"equals": True}},
        )
        if isinstance(pages, Failure):
            logger.error("notion_members_query_failed", error=pages.message)
            return pages

        members = [_to_member(page) for page in pages.value]
        logger.info("notion_members_retrieved", count=len(members))
        return Success(members)

    async def get_assignment_for_week(self, week_start: date) -> Result[WeeklyAssignment | None]:
        """Get the roster entry whose Week date equals ``week_start``."""
        pages = await self._query_database(
            self._roster_database_id,
            {"property": PROP_WEEK, "date": {"equals": week_start.isoformat()}},
        )
        if isinstance(pages, Failure):
            logger.error(
                "notion_roster_query_failed",
                week_start=week_start.isoformat(),
                error=pages.message,
            )
            return pages

        if not pages.value:
            return Success(None)
        return Success(_to_assignment(pages.value[0], week_start))

    async def create_assignment(self, assignment: WeeklyAssignment) -> Result[str]:
        """Create a roster page. Returns the page id."""
        body = {
            "parent": {"database_id": self._roster_database_id},
            "properties": {
                PROP_WEEK: {"date": {"start": assignment.week_start.isoformat()}},
                PROP_CHIEF: {"relation": [{"id": assignment.chief_id}]},
                PROP_BACKUP: {"relation": [{"id": assignment.backup_id}]},
                PROP_STATUS: {"select": {"name": str(assignment.status)}},
            },
        }
        page = await self._request("POST", "pages", json=body)
        if isinstance(page, Failure):
            logger.error(
                "notion_roster_create_failed",
                week_start=assignment.week_start.isoformat(),
                error=page.message,
            )
            return page

        page_id = page.value.get("id")
        if not page_id:
            return Failure(StoreUnavailableError("Notion API error: created page has no id"))

        logger.info("notion_roster_created", week_start=assignment.week_start.isoformat())
        return Success(page_id)

    async def update_chief_last_served(self, member_id: str, served_on: date) -> Result[None]:
        """Set the chief date, clear Volunteer and increment Chief Count."""
        page = await self._request("GET", f"pages/{member_id}")
        if isinstance(page, Failure):
            logger.error("notion_member_update_failed", member_id=member_id, error=page.message)
            return page

        current_count = _number(page.value.get("properties", {}), PROP_CHIEF_COUNT)
        properties = {
            PROP_LAST_CHIEF_DATE: {"date": {"start": served_on.isoformat()}},
            PROP_VOLUNTEER: {"checkbox": False},
            PROP_CHIEF_COUNT: {"number": current_count + 1},
        }
        updated = await self._request("PATCH", f"pages/{member_id}", json={"properties": properties})
        if isinstance(updated, Failure):
            logger.error("notion_member_update_failed", member_id=member_id, error=updated.message)
            return updated

        logger.info("notion_member_date_updated", member_id=member_id, date=served_on.isoformat())
        return Success(None)

    async def update_assignment_message_handles(
        self,
        assignment_id: str,
        public_handle: str | None,
        internal_handle: str | None,
    ) -> Result[None]:
        """Write the Slack message timestamps onto a roster page."""
        properties: dict[str, Any] = {}
        if public_handle and public_handle.strip():
            properties[PROP_PUBLIC_TS] = _rich_text(public_handle)
        if internal_handle and internal_handle.strip():
            properties[PROP_INTERNAL_TS] = _rich_text(internal_handle)

        if not properties:
            return Success(None)

        updated = await self._request(
            "PATCH", f"pages/{assignment_id}", json={"properties": properties}
        )
        if isinstance(updated, Failure):
            logger.error(
                "notion_roster_timestamps_update_failed",
                assignment_id=assignment_id,
                error=updated.message,
            )
            return updated

        logger.info("notion_roster_timestamps_updated", assignment_id=assignment_id)
        return Success(None)

    # --- Transport ---

    async def _query_database(
        self, database_id: str, filter_: dict[str, Any]
    ) -> Result[list[dict[str, Any]]]:
        """Query a database, following ``next_cursor`` until exhausted."""
        pages: list[dict[str, Any]] = []
        body: dict[str, Any] = {"filter": filter_}
        while True:
            response = await self._request("POST", f"databases/{database_id}/query", json=body)
            if isinstance(response, Failure):
                return response
            pages.extend(p for p in response.value.get("results", []) if p.get("object") == "page")
            cursor = response.value.get("next_cursor")
            if not response.value.get("has_more") or not cursor:
                return Success(pages)
            body = {"filter": filter_, "start_cursor": cursor}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Result[dict[str, Any]]:
        if not self._token:
            logger.warning("notion_token_not_configured")
            return Failure(StoreUnavailableError("Notion token not configured"))

        try:
            response = await self._client.request(
                method,
                path,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Notion-Version": self._notion_version,
                },
                **kwargs,
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, httpx.StreamError, ValueError) as exc:
            return Failure(StoreUnavailableError(f"Notion API error: {exc}"))

        if not isinstance(body, dict):
            return Failure(StoreUnavailableError("Notion API error: response is not a JSON object"))
        return Success(body)


# --- Property mapping ---


def _to_member(page: dict[str, Any]) -> Member:
    props = page.get("properties", {})
    return Member(
        id=page["id"],
        name=_plain_text(props, PROP_NAME, "title") or "Unknown",
        handle=_plain_text(props, PROP_SLACK_ID, "rich_text") or "",
        last_chief_date=_date(props, PROP_LAST_CHIEF_DATE),
        is_active=True,
        is_volunteer=bool(props.get(PROP_VOLUNTEER, {}).get("checkbox")),
        chief_count=_number(props, PROP_CHIEF_COUNT),
    )


def _to_assignment(page: dict[str, Any], week_start: date) -> WeeklyAssignment:
    props = page.get("properties", {})
    select = props.get(PROP_STATUS, {}).get("select") or {}
    return WeeklyAssignment(
        id=page["id"],
        week_start=week_start,
        chief_id=_relation_id(props, PROP_CHIEF),
        backup_id=_relation_id(props, PROP_BACKUP),
        status=select.get("name") or AssignmentStatus.PLANNED,
        public_message_handle=_plain_text(props, PROP_PUBLIC_TS, "rich_text"),
        internal_message_handle=_plain_text(props, PROP_INTERNAL_TS, "rich_text"),
    )


def _plain_text(props: dict[str, Any], name: str, kind: str) -> str | None:
    fragments = props.get(name, {}).get(kind) or []
    if not fragments:
        return None
    return fragments[0].get("plain_text")


def _relation_id(props: dict[str, Any], name: str) -> str:
    relation = props.get(name, {}).get("relation") or []
    return relation[0]["id"] if relation else ""


def _date(props: dict[str, Any], name: str) -> date | None:
    value = props.get(name, {}).get("date") or {}
    start = value.get("start")
    # Notion returns either "YYYY-MM-DD" or a full ISO datetime.
    return date.fromisoformat(start[:10]) if start else None


def _number(props: dict[str, Any], name: str) -> int:
    number = props.get(name, {}).get("number")
    return int(number) if number is not None else 0


def _rich_text(content: str) -> dict[str, Any]:
    return {"rich_text": [{"type": "text", "text": {"content": content}}]}
