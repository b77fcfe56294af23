from __future__ import annotations

import difflib
import enum
import re
from logging import getLogger
from typing import TYPE_CHECKING, Iterable, Literal, assert_never

import msgspec

from utilities.authorization import is_authorized

from .resolver import MessageFetchFailed, MessageFound, MessageNotFound
from .store import TagStoreError
from .subcommands import Create, CreateWithMessage, Delete, Edit, EditWithMessage, Raw, parse_message_id

if TYPE_CHECKING:
    from .resolver import MessageResolver
    from .responder import Responder
    from .store import TagStore
    from .subcommands import Subcommand

__all__ = ("Outcome", "Response", "TagManager", "unknown_tag_message")

log = getLogger(__name__)

DENIED = "Tags can only be managed by users with a corresponding role."
MESSAGE_FETCH_FAILED = "Something unexpected went wrong trying to locate the message."
STORE_FAILED = "Something unexpected went wrong while accessing the tags."
UNEXPECTED = "Something unexpected went wrong while handling the command."


class Outcome(enum.Enum):
    REJECTED = "rejected"
    USER_ERROR = "user_error"
    UNEXPECTED_ERROR = "unexpected_error"
    SUCCESS = "success"


class Response(msgspec.Struct, frozen=True):
    """The single terminal reply of an invocation."""

    outcome: Outcome
    text: str
    kind: Literal["text", "success", "file"] = "text"
    ephemeral: bool = False
    data: bytes | None = None


def _user_error(text: str) -> Response:
    return Response(Outcome.USER_ERROR, text, ephemeral=True)


def _success(text: str) -> Response:
    return Response(Outcome.SUCCESS, text, kind="success")


def unknown_tag_message(tag_id: str, known_ids: Iterable[str]) -> str:
    """Build the reply for an unknown tag id, suggesting similar ids if there are any."""
    message = f"Could not find any tag with id '{tag_id}'."
    candidates = difflib.get_close_matches(tag_id, list(known_ids), n=3)
    if candidates:
        names = ", ".join(f"'{c}'" for c in candidates)
        message += f" Did you perhaps mean {names}?"
    return message


class TagManager:
    """Moderator-only tag management: raw view, create, edit and delete.

    Every invocation runs strictly in order: authorize, validate input, check
    the tag's existence, resolve message content, mutate, reply. The store is
    mutated at most once, and only after every check passed. Exactly one reply
    is sent per invocation. The caller is acknowledged with a deferral before a
    message is looked up.
    """

    def __init__(self, store: TagStore, resolver: MessageResolver, role_pattern: re.Pattern[str] | str) -> None:
        """Initialize the manager.

        Args:
            store: Persistence of the tags.
            resolver: Used to look up messages for the *-with-message subcommands.
            role_pattern: Role names fully matching this pattern may manage tags.
        """
        self.store = store
        self.resolver = resolver
        self.role_pattern = re.compile(role_pattern) if isinstance(role_pattern, str) else role_pattern

    async def handle(
        self,
        invocation: Subcommand,
        *,
        role_names: Iterable[str],
        channel: object,
        responder: Responder,
    ) -> Outcome:
        """Run a tag management subcommand and reply to it.

        Args:
            invocation: The subcommand with its options.
            role_names: Names of the roles held by the caller.
            channel: The channel the command was invoked in.
            responder: Where the reply is sent to.

        Returns:
            The outcome of the invocation.
        """
        if not is_authorized(role_names, self.role_pattern):
            log.debug("Rejected tag management %r, caller lacks a matching role", invocation)
            response = Response(Outcome.REJECTED, DENIED, ephemeral=True)
        else:
            try:
                async with self.store.lock(invocation.tag_id):
                    response = await self._dispatch(invocation, channel, responder)
            except TagStoreError:
                log.exception("Tag store failed while handling %r", invocation)
                response = Response(Outcome.UNEXPECTED_ERROR, STORE_FAILED, ephemeral=True)
            except Exception:
                log.exception("Unexpected error while handling %r", invocation)
                response = Response(Outcome.UNEXPECTED_ERROR, UNEXPECTED, ephemeral=True)

        await self._emit(responder, response)
        return response.outcome

    async def _dispatch(self, invocation: Subcommand, channel: object, responder: Responder) -> Response:
        match invocation:
            case Raw(tag_id=tag_id):
                return await self._raw(tag_id)
            case Create(tag_id=tag_id, content=content):
                if await self.store.has(tag_id):
                    return self._already_exists(tag_id)
                return await self._put(tag_id, content, "created")
            case Edit(tag_id=tag_id, content=content):
                if not await self.store.has(tag_id):
                    return await self._unknown_tag(tag_id)
                return await self._put(tag_id, content, "edited")
            case Delete(tag_id=tag_id):
                if not await self.store.has(tag_id):
                    return await self._unknown_tag(tag_id)
                await self.store.remove(tag_id)
                log.info("Deleted tag %r", tag_id)
                return _success(f"Successfully deleted the tag with id '{tag_id}'.")
            case CreateWithMessage(tag_id=tag_id, message_id=message_id):
                return await self._put_from_message(tag_id, message_id, channel, responder, must_exist=False)
            case EditWithMessage(tag_id=tag_id, message_id=message_id):
                return await self._put_from_message(tag_id, message_id, channel, responder, must_exist=True)
            case _:
                assert_never(invocation)

    async def _raw(self, tag_id: str) -> Response:
        content = await self.store.get(tag_id)
        if content is None:
            return await self._unknown_tag(tag_id)
        return Response(Outcome.SUCCESS, tag_id, kind="file", data=content.encode("utf-8", errors="replace"))

    async def _put(self, tag_id: str, content: str, action: str) -> Response:
        await self.store.put(tag_id, content)
        log.info("Tag %r %s", tag_id, action)
        return _success(f"Successfully {action} the tag with id '{tag_id}'.")

    async def _put_from_message(
        self, tag_id: str, raw_message_id: str, channel: object, responder: Responder, *, must_exist: bool
    ) -> Response:
        message_id = parse_message_id(raw_message_id)
        if message_id is None:
            return _user_error(f"The given message id '{raw_message_id}' is invalid, expected a number.")

        exists = await self.store.has(tag_id)
        if must_exist and not exists:
            return await self._unknown_tag(tag_id)
        if not must_exist and exists:
            return self._already_exists(tag_id)

        await responder.defer()
        result = await self.resolver.fetch(channel, message_id)
        match result:
            case MessageFound(content=content):
                return await self._put(tag_id, content, "edited" if must_exist else "created")
            case MessageNotFound():
                return _user_error(f"The message with id '{raw_message_id}' does not exist.")
            case MessageFetchFailed(error=error):
                log.error("Failed to fetch message %d for tag %r", message_id, tag_id, exc_info=error)
                return Response(Outcome.UNEXPECTED_ERROR, MESSAGE_FETCH_FAILED, ephemeral=True)
            case _:
                assert_never(result)

    def _already_exists(self, tag_id: str) -> Response:
        return _user_error(f"The tag with id '{tag_id}' already exists.")

    async def _unknown_tag(self, tag_id: str) -> Response:
        return _user_error(unknown_tag_message(tag_id, await self.store.ids()))

    async def _emit(self, responder: Responder, response: Response) -> None:
        match response.kind:
            case "text":
                await responder.reply(response.text, ephemeral=response.ephemeral)
            case "success":
                await responder.reply_success(response.text)
            case "file":
                assert response.data is not None
                await responder.reply_file(response.data, response.text)
