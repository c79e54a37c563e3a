"""Messaging channel identifiers."""

from enum import StrEnum


class Channel(StrEnum):
    """The two channels every assignment is announced in."""

    PUBLIC = "public"
    INTERNAL = "internal"
