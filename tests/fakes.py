"""Fakes standing in for the message resolver and the response emitter."""

from __future__ import annotations

import asyncio

from extensions.tags.resolver import FetchResult, MessageFetchFailed, MessageFound, MessageNotFound

MODERATOR_PATTERN = "Moderator"
MODERATOR_ROLES = frozenset({"Moderator"})


class FakeResolver:
    """Resolver answering from a fixed table of messages.

    Unknown ids resolve to MessageNotFound unless a failure was registered.
    """

    def __init__(self) -> None:
        self.messages: dict[int, str] = {}
        self.failures: dict[int, BaseException] = {}
        self.calls: list[tuple[object, int]] = []

    def post(self, message_id: int, content: str) -> None:
        self.messages[message_id] = content

    def fail(self, message_id: int, error: BaseException) -> None:
        self.failures[message_id] = error

    async def fetch(self, channel: object, message_id: int) -> FetchResult:
        self.calls.append((channel, message_id))
        # yield like a real network round trip would
        await asyncio.sleep(0)
        if message_id in self.failures:
            return MessageFetchFailed(message_id, self.failures[message_id])
        if message_id in self.messages:
            return MessageFound(self.messages[message_id])
        return MessageNotFound(message_id)


class FakeResponder:
    """Responder recording every reply it is asked to send."""

    def __init__(self) -> None:
        self.replies: list[tuple[str, object]] = []
        self.deferrals = 0

    async def defer(self) -> None:
        self.deferrals += 1

    async def reply(self, text: str, *, ephemeral: bool = False) -> None:
        self.replies.append(("text", (text, ephemeral)))

    async def reply_success(self, description: str) -> None:
        self.replies.append(("success", description))

    async def reply_file(self, data: bytes, filename: str) -> None:
        self.replies.append(("file", (data, filename)))

    @property
    def only(self) -> tuple[str, object]:
        assert len(self.replies) == 1, self.replies
        return self.replies[0]

    @property
    def text(self) -> str:
        kind, payload = self.only
        assert kind == "text", self.replies
        return payload[0]  # type: ignore[index]


