from __future__ import annotations

import asyncio
from logging import getLogger
from typing import Protocol, TypeAlias

import aiohttp
import discord
import msgspec

__all__ = (
    "ChannelMessageResolver",
    "FetchResult",
    "MessageFetchFailed",
    "MessageFound",
    "MessageNotFound",
    "MessageResolver",
)

log = getLogger(__name__)


class MessageFound(msgspec.Struct, frozen=True):
    content: str


class MessageNotFound(msgspec.Struct, frozen=True):
    message_id: int


class MessageFetchFailed(msgspec.Struct, frozen=True):
    message_id: int
    error: BaseException


FetchResult: TypeAlias = MessageFound | MessageNotFound | MessageFetchFailed


class MessageResolver(Protocol):
    async def fetch(self, channel: object, message_id: int) -> FetchResult:
        """Fetch the content of a message in the given channel."""
        ...


class ChannelMessageResolver:
    """Resolve message ids against the channel a command was invoked in."""

    async def fetch(self, channel: object, message_id: int) -> FetchResult:
        """Fetch a message by id.

        Unknown messages map to MessageNotFound. Every other failure, whether an
        HTTP error, a timeout or anything unexpected, maps to MessageFetchFailed.

        Args:
            channel: The invoking channel. Must support ``fetch_message``.
            message_id: The id of the message to fetch.

        Returns:
            One of MessageFound, MessageNotFound or MessageFetchFailed.
        """
        fetch_message = getattr(channel, "fetch_message", None)
        if fetch_message is None:
            return MessageFetchFailed(message_id, TypeError(f"Can not fetch messages from {channel!r}"))
        try:
            message = await fetch_message(message_id)
        except discord.NotFound:
            return MessageNotFound(message_id)
        except (discord.HTTPException, aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            return MessageFetchFailed(message_id, e)
        except Exception as e:
            log.debug("Unexpected %s fetching message %d", type(e).__name__, message_id)
            return MessageFetchFailed(message_id, e)
        return MessageFound(message.content)
