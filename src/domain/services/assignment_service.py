"""Assignment service: weekly chief assignment and end-of-week reminder."""

import asyncio
import random
from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date, timedelta

import structlog

from core.exceptions import (
    ChiefNotFoundError,
    NoRosterForWeekError,
    NotifierUnavailableError,
    PartialNotificationError,
)
from core.result import Failure, Result, Success
from domain.entities.assignment import (
    AssignmentAlreadyExists,
    AssignmentCreated,
    AssignmentOutcome,
    AssignmentResult,
    InsufficientCandidates,
    WeeklyAssignment,
)
from domain.entities.channel import Channel
from domain.entities.member import Member
from domain.repositories.notifier import INotifier
from domain.repositories.roster_store import IRosterStore
from domain.services.messages import (
    format_handover_recommendation,
    format_handover_reminder,
    format_internal_notification,
    format_public_announcement,
)
from domain.services.selector import select_chief_and_backup
from domain.services.weeks import next_monday, this_monday, utc_today

logger = structlog.get_logger()


class AssignmentService:
    """Orchestrates the roster store and notifier into the two workflows.

    Steps either abort the run (returning the failure) or log and carry on.
    The assignment record is the system of record: once it is created, no
    later failure turns the run into a failure.
    """

    def __init__(
        self,
        roster_store: IRosterStore,
        notifier: INotifier,
        rng: random.Random | None = None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._store = roster_store
        self._notifier = notifier
        self._rng = rng or random.Random()
        self._today = today

    # --- Weekly assignment ---

    async def run_assignment(self) -> Result[AssignmentOutcome]:
        """Select, record and announce the chief for the upcoming week."""
        logger.info("assignment_workflow_started")
        week_start = next_monday(self._today())

        existing = await self._store.get_assignment_for_week(week_start)
        if isinstance(existing, Failure):
            return existing
        if existing.value is not None:
            logger.info("assignment_already_exists", week_start=week_start.isoformat())
            return Success(AssignmentAlreadyExists(week_start=week_start))

        members = await self._store.get_active_members()
        if isinstance(members, Failure):
            return members

        selection = select_chief_and_backup(members.value, self._rng)
        if isinstance(selection, Failure):
            logger.error("no_active_members")
            return Success(InsufficientCandidates(available_count=0))

        chief, backup = selection.value.chief, selection.value.backup
        logger.info("chief_and_backup_selected", chief=chief.name, backup=backup.name)

        await self._unmark_previous()

        record = WeeklyAssignment(
            week_start=week_start,
            chief_id=chief.id,
            backup_id=backup.id,
        )
        created = await self._store.create_assignment(record)
        if isinstance(created, Failure):
            return created
        record = replace(record, id=created.value)

        served = await self._store.update_chief_last_served(chief.id, week_start)
        if isinstance(served, Failure):
            logger.warning("chief_date_update_failed", member_id=chief.id, error=served.message)

        assignment = AssignmentResult(chief=chief, backup=backup, week_start=week_start)
        notification_error = None

        notified = await self._send_notifications(assignment)
        if isinstance(notified, Failure):
            logger.warning(
                "notifications_failed",
                error_code=notified.error.error_code.value,
                error=notified.message,
            )
            notification_error = notified.error
        else:
            public_handle, internal_handle = notified.value
            stored = await self._store.update_assignment_message_handles(
                record.id, public_handle, internal_handle
            )
            if isinstance(stored, Failure):
                logger.warning(
                    "message_handles_update_failed",
                    assignment_id=record.id,
                    error=stored.message,
                )
            else:
                record = replace(
                    record,
                    public_message_handle=public_handle,
                    internal_message_handle=internal_handle,
                )

        logger.info("assignment_workflow_completed", assignment_id=record.id)
        return Success(
            AssignmentCreated(
                assignment=assignment,
                record=record,
                notification_error=notification_error,
            )
        )

    async def _send_notifications(self, assignment: AssignmentResult) -> Result[tuple[str, str]]:
        """Announce in both channels concurrently and combine the outcomes.

        Both sends are awaited before either result is inspected, so a
        delivered public message is still observable when the internal
        one fails.
        """
        public_outcome, internal_outcome = await asyncio.gather(
            self._send_and_mark(Channel.PUBLIC, format_public_announcement(assignment)),
            self._send_and_mark(Channel.INTERNAL, format_internal_notification(assignment)),
            return_exceptions=True,
        )
        public_result = _as_result(Channel.PUBLIC, public_outcome)
        internal_result = _as_result(Channel.INTERNAL, internal_outcome)

        # Nobody has been told publicly yet; nothing to salvage.
        if isinstance(public_result, Failure):
            return public_result

        if isinstance(internal_result, Failure):
            logger.warning(
                "public_notification_delivered_without_internal",
                public_handle=public_result.value,
                error=internal_result.message,
            )
            return Failure(PartialNotificationError(public_result.value, internal_result.error))

        return Success((public_result.value, internal_result.value))

    async def _send_and_mark(self, channel: Channel, text: str) -> Result[str]:
        """Send a message and mark it as the current reference."""
        if channel is Channel.PUBLIC:
            sent = await self._notifier.send_public(text)
        else:
            sent = await self._notifier.send_internal(text)
        if isinstance(sent, Failure):
            return sent

        marked = await self._notifier.mark_current(channel, sent.value)
        if isinstance(marked, Failure):
            logger.warning("message_mark_failed", channel=channel.value, error=marked.message)

        return sent

    async def _unmark_previous(self) -> None:
        """Clear every marked message in both channels so only the new week stays pinned."""
        result = await self._notifier.unmark_all()
        if isinstance(result, Failure):
            logger.warning("unmark_all_failed", error=result.message)
        else:
            logger.info("previous_messages_unmarked", count=result.value)

    # --- Reminder ---

    async def run_reminder(self, include_handover: bool = False) -> Result[None]:
        """Remind the current chief that their rotation ends this week.

        With ``include_handover``, also pair the outgoing chief with next
        week's chief if that assignment already exists.
        """
        logger.info("reminder_workflow_started", include_handover=include_handover)
        week_start = this_monday(self._today())

        roster = await self._store.get_assignment_for_week(week_start)
        if isinstance(roster, Failure):
            return roster
        if roster.value is None:
            logger.warning("no_assignment_for_current_week", week_start=week_start.isoformat())
            return Failure(NoRosterForWeekError(week_start))
        current = roster.value

        members = await self._store.get_active_members()
        if isinstance(members, Failure):
            return members

        chief = _find_member(members.value, current.chief_id)
        if chief is None:
            logger.warning("chief_not_found_for_assignment", assignment_id=current.id)
            return Failure(ChiefNotFoundError(current.chief_id, current.id))

        sent = await self._send_and_mark(Channel.INTERNAL, format_handover_reminder(chief))
        if isinstance(sent, Failure):
            return sent

        if include_handover:
            await self._send_handover_recommendation(week_start, chief, members.value)

        logger.info("reminder_workflow_completed", chief=chief.name)
        return Success(None)

    async def _send_handover_recommendation(
        self,
        week_start: date,
        outgoing: Member,
        members: Sequence[Member],
    ) -> None:
        upcoming = await self._store.get_assignment_for_week(week_start + timedelta(days=7))
        if isinstance(upcoming, Failure):
            logger.warning("handover_lookup_failed", error=upcoming.message)
            return
        if upcoming.value is None:
            logger.info("no_upcoming_assignment_for_handover")
            return

        incoming = _find_member(members, upcoming.value.chief_id)
        if incoming is None:
            logger.warning("incoming_chief_not_found_for_handover", chief_id=upcoming.value.chief_id)
            return
        if incoming.id == outgoing.id:
            logger.info("handover_not_needed", chief=outgoing.name)
            return

        sent = await self._notifier.send_internal(format_handover_recommendation(outgoing, incoming))
        if isinstance(sent, Failure):
            logger.warning("handover_recommendation_failed", error=sent.message)
            return

        logger.info(
            "handover_recommendation_sent",
            outgoing_chief=outgoing.name,
            incoming_chief=incoming.name,
        )


def _find_member(members: Sequence[Member], member_id: str) -> Member | None:
    return next((m for m in members if m.id == member_id), None)


def _as_result(channel: Channel, outcome: Result[str] | BaseException) -> Result[str]:
    """Turn an exception escaping a notifier into a Failure."""
    if not isinstance(outcome, BaseException):
        return outcome
    if not isinstance(outcome, Exception):
        raise outcome
    logger.error("notification_raised", channel=channel.value, error=repr(outcome))
    return Failure(NotifierUnavailableError(f"{channel.value} notification failed: {outcome}"))
