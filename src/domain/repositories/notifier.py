"""Notifier protocol."""

from typing import Protocol

from core.result import Result
from domain.entities.channel import Channel


class INotifier(Protocol):
    """Messaging interface for the public and internal channels.

    Marking a message makes it the visible reference for the week
    (a pin in Slack).
    """

    async def send_public(self, text: str) -> Result[str]:
        """Post to the public channel. Returns the message handle."""
        ...

    async def send_internal(self, text: str) -> Result[str]:
        """Post to the internal channel. Returns the message handle."""
        ...

    async def mark_current(self, channel: Channel, handle: str) -> Result[None]:
        """Mark a message as the current reference in a channel."""
        ...

    async def unmark_current(self, channel: Channel, handle: str) -> Result[None]:
        """Remove the current-reference mark from a message."""
        ...

    async def list_currently_marked(self, channel: Channel) -> Result[list[str]]:
        """List handles of every marked message in a channel."""
        ...

    async def unmark_all(self) -> Result[int]:
        """Unmark every marked message in both channels. Returns the count."""
        ...
