"""Pydantic models for the Slack Web API responses we consume."""

from pydantic import BaseModel


class SlackResponse(BaseModel):
    """Envelope shared by every Slack Web API response."""

    ok: bool
    error: str | None = None


class SlackPostMessageResponse(SlackResponse):
    """Response of ``chat.postMessage``."""

    ts: str | None = None


class SlackPinMessage(BaseModel):
    ts: str | None = None


class SlackPinItem(BaseModel):
    message: SlackPinMessage | None = None


class SlackPinsListResponse(SlackResponse):
    """Response of ``pins.list``."""

    items: list[SlackPinItem] | None = None
