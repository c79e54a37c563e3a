"""Slack implementation of the notifier, pin-based."""

import asyncio
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import ValidationError

from core.exceptions import NotifierUnavailableError
from core.result import Failure, Result, Success
from domain.entities.channel import Channel
from infrastructure.slack.schemas import (
    SlackPinsListResponse,
    SlackPostMessageResponse,
    SlackResponse,
)

logger = structlog.get_logger()

ResponseT = TypeVar("ResponseT", bound=SlackResponse)

# pins.remove errors meaning the message is already not pinned.
ALREADY_UNPINNED_ERRORS = frozenset({"no_pin", "message_not_found"})


class SlackNotifier:
    """Slack implementation of INotifier.

    Marking a message pins it. The ``httpx.AsyncClient`` is owned by the
    caller and must have ``base_url`` pointing at the Slack Web API.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        bot_token: str,
        public_channel_id: str,
        internal_channel_id: str,
    ) -> None:
        self._client = client
        self._bot_token = bot_token
        self._channel_ids = {
            Channel.PUBLIC: public_channel_id,
            Channel.INTERNAL: internal_channel_id,
        }

    async def send_public(self, text: str) -> Result[str]:
        """Post to the public channel."""
        return await self._post_message(Channel.PUBLIC, text)

    async def send_internal(self, text: str) -> Result[str]:
        """Post to the internal channel."""
        return await self._post_message(Channel.INTERNAL, text)

    async def mark_current(self, channel: Channel, handle: str) -> Result[None]:
        """Pin a message."""
        result = await self._call(
            "POST",
            "pins.add",
            SlackResponse,
            json={"channel": self._channel_ids[channel], "timestamp": handle},
        )
        if isinstance(result, Failure):
            return result
        if not result.value.ok:
            return self._api_failure(result.value, "pin_failed", channel=channel.value, ts=handle)

        logger.info("slack_message_pinned", channel=channel.value, ts=handle)
        return Success(None)

    async def unmark_current(self, channel: Channel, handle: str) -> Result[None]:
        """Unpin a message. A message that is no longer pinned counts as success."""
        if not handle:
            return Success(None)

        result = await self._call(
            "POST",
            "pins.remove",
            SlackResponse,
            json={"channel": self._channel_ids[channel], "timestamp": handle},
        )
        if isinstance(result, Failure):
            return result
        if not result.value.ok:
            if result.value.error in ALREADY_UNPINNED_ERRORS:
                logger.debug("slack_message_already_unpinned", channel=channel.value, ts=handle)
                return Success(None)
            return self._api_failure(result.value, "unpin_failed", channel=channel.value, ts=handle)

        logger.info("slack_message_unpinned", channel=channel.value, ts=handle)
        return Success(None)

    async def list_currently_marked(self, channel: Channel) -> Result[list[str]]:
        """List the timestamps of pinned messages in a channel."""
        result = await self._call(
            "GET",
            "pins.list",
            SlackPinsListResponse,
            params={"channel": self._channel_ids[channel]},
        )
        if isinstance(result, Failure):
            return result
        response = result.value
        if not response.ok:
            return self._api_failure(response, "list_pins_failed", channel=channel.value)

        timestamps = [
            item.message.ts
            for item in response.items or []
            if item.message is not None and item.message.ts
        ]
        logger.info("slack_pins_listed", channel=channel.value, count=len(timestamps))
        return Success(timestamps)

    async def unmark_all(self) -> Result[int]:
        """Unpin every pinned message in both channels.

        Channels whose pins cannot be listed are skipped. Returns the number
        of messages actually unpinned.
        """
        if not self._bot_token:
            return self._not_configured()

        channels = list(self._channel_ids)
        listings = await asyncio.gather(
            *(self.list_currently_marked(c) for c in channels),
            return_exceptions=True,
        )

        targets: list[tuple[Channel, str]] = []
        for channel, listing in zip(channels, listings):
            if isinstance(listing, BaseException):
                _reraise_if_fatal(listing)
                logger.warning("slack_pins_list_skipped", channel=channel.value, error=repr(listing))
                continue
            if isinstance(listing, Failure):
                logger.warning("slack_pins_list_skipped", channel=channel.value, error=listing.message)
                continue
            targets.extend((channel, ts) for ts in listing.value)

        if not targets:
            return Success(0)

        results = await asyncio.gather(
            *(self.unmark_current(c, ts) for c, ts in targets),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                _reraise_if_fatal(result)
                logger.warning("slack_unpin_raised", error=repr(result))
        unpinned = sum(1 for r in results if isinstance(r, Success))
        logger.info("slack_pins_cleared", unpinned=unpinned, attempted=len(targets))
        return Success(unpinned)

    # --- Transport ---

    async def _post_message(self, channel: Channel, text: str) -> Result[str]:
        result = await self._call(
            "POST",
            "chat.postMessage",
            SlackPostMessageResponse,
            json={"channel": self._channel_ids[channel], "text": text},
        )
        if isinstance(result, Failure):
            return result
        response = result.value
        if not response.ok or response.ts is None:
            return self._api_failure(response, "message_send_failed", channel=channel.value)

        logger.info("slack_message_sent", channel=channel.value, ts=response.ts)
        return Success(response.ts)

    async def _call(
        self,
        method: str,
        endpoint: str,
        response_model: type[ResponseT],
        **kwargs: Any,
    ) -> Result[ResponseT]:
        if not self._bot_token:
            return self._not_configured()

        try:
            response = await self._client.request(
                method,
                endpoint,
                headers={"Authorization": f"Bearer {self._bot_token}"},
                **kwargs,
            )
            response.raise_for_status()
            return Success(response_model.model_validate(response.json()))
        except (httpx.HTTPError, httpx.StreamError, ValidationError, ValueError) as exc:
            logger.error("slack_request_failed", endpoint=endpoint, error=str(exc))
            return Failure(NotifierUnavailableError(f"Slack API error: {exc}"))

    def _api_failure(self, response: SlackResponse, event: str, **context: Any) -> Failure:
        error = response.error or "Unknown error"
        logger.error(f"slack_{event}", error=error, **context)
        return Failure(NotifierUnavailableError(f"Slack API error: {error}"))

    def _not_configured(self) -> Failure:
        logger.warning("slack_bot_token_not_configured")
        return Failure(NotifierUnavailableError("Slack bot token not configured"))


def _reraise_if_fatal(exc: BaseException) -> None:
    """Propagate cancellation and interpreter exits collected by gather."""
    if not isinstance(exc, Exception):
        raise exc
