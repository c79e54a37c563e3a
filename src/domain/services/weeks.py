"""Rotation week arithmetic. Dates only, no time of day."""

from datetime import date, datetime, timedelta, timezone


def utc_today() -> date:
    """Today's date in UTC."""
    return datetime.now(timezone.utc).date()


def next_monday(today: date) -> date:
    """The Monday on or after ``today``."""
    return today + timedelta(days=(7 - today.weekday()) % 7)


def this_monday(today: date) -> date:
    """The Monday on or before ``today``."""
    return today - timedelta(days=today.weekday())
