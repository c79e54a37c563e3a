"""Unit tests for Slack message templates."""

from datetime import date

from domain.entities.assignment import AssignmentResult
from domain.services.messages import (
    format_handover_recommendation,
    format_handover_reminder,
    format_internal_notification,
    format_public_announcement,
)
from tests.unit.conftest import make_member

ALICE = make_member("alice", handle="U111")
BOB = make_member("bob", handle="U222")


class TestPublicAnnouncement:
    def test_mentions_chief_and_backup(self):
        text = format_public_announcement(AssignmentResult(ALICE, BOB, date(2026, 10, 19)))

        assert "This week's Fire Chief: <@U111>" in text
        assert "Backup: <@U222>" in text

    def test_omits_backup_when_chief_is_alone(self):
        text = format_public_announcement(AssignmentResult(ALICE, ALICE, date(2026, 10, 19)))

        assert "<@U111>" in text
        assert "Backup" not in text


class TestInternalNotification:
    def test_includes_week_and_checklist(self):
        text = format_internal_notification(AssignmentResult(ALICE, BOB, date(2026, 10, 19)))

        assert "Week of Oct 19, 2026" in text
        assert "Chief: <@U111>" in text
        assert "Backup: <@U222>" in text
        assert "- Triage and create Linear issues" in text

    def test_flags_missing_backup(self):
        text = format_internal_notification(AssignmentResult(ALICE, ALICE, date(2026, 10, 19)))

        assert "No backup available (only one active member)" in text


class TestHandoverMessages:
    def test_reminder_addresses_the_chief(self):
        text = format_handover_reminder(ALICE)

        assert "<@U111> – Your Fire Chief rotation ends this week!" in text
        assert "- [ ] Review open support tickets" in text

    def test_recommendation_pairs_both_chiefs(self):
        text = format_handover_recommendation(ALICE, BOB)

        assert "<@U111> → <@U222>" in text
