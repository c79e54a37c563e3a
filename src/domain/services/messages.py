"""Slack message templates."""

from domain.entities.assignment import AssignmentResult
from domain.entities.member import Member

INTERNAL_CHECKLIST = (
    "Monitor #team-software for requests",
    "Triage and create Linear issues",
    "Shield the team from interruptions",
    "Prepare handover for next Friday",
)

HANDOVER_CHECKLIST = (
    "Review open support tickets",
    "Check pending Linear issues",
    "Brief on ongoing critical issues",
    "Schedule handover with next Chief",
)


def mention(member: Member) -> str:
    """Slack user mention for a member."""
    return f"<@{member.handle}>"


def format_public_announcement(assignment: AssignmentResult) -> str:
    backup_line = "" if assignment.is_solo else f"\n🛡️ Backup: {mention(assignment.backup)}"
    return (
        f"🔥 This week's Fire Chief: {mention(assignment.chief)}{backup_line}\n"
        "\n"
        "The Fire Chief is your go-to person for support requests this week!"
    )


def format_internal_notification(assignment: AssignmentResult) -> str:
    week = assignment.week_start.strftime("%b %d, %Y")
    if assignment.is_solo:
        backup_line = "🛡️ Backup: _No backup available (only one active member)_"
    else:
        backup_line = f"🛡️ Backup: {mention(assignment.backup)}"
    checklist = "\n".join(f"- {item}" for item in INTERNAL_CHECKLIST)
    return (
        f"🔥 Fire Chief Assignment – Week of {week}\n"
        "\n"
        f"🧑‍🚒 Chief: {mention(assignment.chief)}\n"
        f"{backup_line}\n"
        "\n"
        "Remember to:\n"
        f"{checklist}"
    )


def format_handover_reminder(chief: Member) -> str:
    checklist = "\n".join(f"- [ ] {item}" for item in HANDOVER_CHECKLIST)
    return (
        "🔥 Fire Chief Handover Reminder\n"
        "\n"
        f"{mention(chief)} – Your Fire Chief rotation ends this week!\n"
        "\n"
        "Please prepare your handover:\n"
        f"{checklist}\n"
        "\n"
        "Next Chief will be assigned Monday morning."
    )


def format_handover_recommendation(outgoing: Member, incoming: Member) -> str:
    return (
        "🤝 Fire Chief Handover\n"
        "\n"
        f"{mention(outgoing)} → {mention(incoming)}\n"
        "\n"
        f"{mention(outgoing)}, please set up a short handover with "
        f"{mention(incoming)} before Monday."
    )
