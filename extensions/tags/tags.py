from __future__ import annotations

import io
from logging import getLogger
from typing import TYPE_CHECKING, Any, Sequence

import discord
from discord import app_commands, ui

from utilities.authorization import member_role_names
from utilities.base import BaseCog
from utilities.paginator import PaginatorView

from .manage import TagManager, unknown_tag_message
from .resolver import ChannelMessageResolver
from .responder import InteractionResponder
from .store import SqliteTagStore, TagStoreError
from .subcommands import Create, CreateWithMessage, Delete, Edit, EditWithMessage, Raw

if TYPE_CHECKING:
    from core import TagBot
    from utilities._types import BotItx

    from .store import TagStore
    from .subcommands import Subcommand

log = getLogger(__name__)


class TagIdTransformer(app_commands.Transformer):
    async def transform(self, itx: BotItx, value: str) -> str:
        """Pass tag ids through unchanged, they are case-sensitive and free-form."""
        return value

    async def autocomplete(self, itx: BotItx, current: str) -> list[app_commands.Choice[str]]:
        """Autocomplete known tag ids containing the current input.

        Args:
            itx (BotItx): The interaction context.
            current (str): The partial input string.

        Returns:
            list[app_commands.Choice[str]]: Up to 25 matching tag ids.
        """
        try:
            ids = await itx.client.tags.ids()
        except TagStoreError:
            log.warning("Tag id autocomplete failed", exc_info=True)
            return []
        lowered = current.lower()
        return [app_commands.Choice(name=i, value=i) for i in ids if lowered in i.lower()][:25]


TagId = app_commands.Transform[str, TagIdTransformer]

MESSAGE_LIMIT = 2000


def tag_message(tag_id: str, content: str) -> dict[str, Any]:
    """Build the keyword arguments that display a tag.

    Empty content gets an ephemeral notice. Content longer than a message
    allows is attached as a text file instead.
    """
    if not content:
        return {"content": f"The tag with id '{tag_id}' has no content.", "ephemeral": True}
    if len(content) > MESSAGE_LIMIT:
        data = content.encode("utf-8", errors="replace")
        return {"file": discord.File(io.BytesIO(data), filename=f"{tag_id}.txt")}
    return {"content": content, "allowed_mentions": discord.AllowedMentions.none()}


class TagListView(PaginatorView[str]):
    def build_page_body(self) -> Sequence[ui.Item]:
        """List the tag ids of the current page."""
        return [ui.TextDisplay("\n".join(f"- `{tag_id}`" for tag_id in self.current_page))]


class TagsCog(BaseCog):
    manage = app_commands.Group(
        name="tag-manage",
        description="Provides commands to manage all tags",
        guild_only=True,
    )

    def __init__(self, bot: TagBot, store: TagStore) -> None:
        """Initialize the tags cog.

        Args:
            bot: The bot instance.
            store: The tag store shared by all tag commands.
        """
        super().__init__(bot)
        self.store = store
        self.manager = TagManager(store, ChannelMessageResolver(), bot.config.tags.role_pattern)

    async def _run(self, itx: BotItx, invocation: Subcommand) -> None:
        await self.manager.handle(
            invocation,
            role_names=member_role_names(itx.user),
            channel=itx.channel,
            responder=InteractionResponder(itx),
        )

    @app_commands.command(name="tag")
    @app_commands.guild_only()
    @app_commands.describe(tag_id="The id of the tag to display")
    @app_commands.rename(tag_id="id")
    async def tag(self, itx: BotItx, tag_id: TagId) -> None:
        """Display a tag."""
        content = await self.store.get(tag_id)
        if content is None:
            await itx.response.send_message(unknown_tag_message(tag_id, await self.store.ids()), ephemeral=True)
            return
        await itx.response.send_message(**tag_message(tag_id, content))

    @app_commands.command(name="tags")
    @app_commands.guild_only()
    async def tags(self, itx: BotItx) -> None:
        """List the ids of all tags."""
        ids = await self.store.ids()
        if not ids:
            await itx.response.send_message("No tags have been created yet.", ephemeral=True)
            return
        view = TagListView(f"All tags ({len(ids)})", ids)
        await itx.response.send_message(view=view, ephemeral=True)
        view.original_interaction = itx

    @manage.command(name="raw")
    @app_commands.describe(tag_id="The id of the tag")
    @app_commands.rename(tag_id="id")
    async def raw(self, itx: BotItx, tag_id: TagId) -> None:
        """View the raw content of a tag, without any embed or formatting."""
        await self._run(itx, Raw(tag_id))

    @manage.command(name="create")
    @app_commands.describe(tag_id="The id of the tag", content="The content of the tag")
    @app_commands.rename(tag_id="id")
    async def create(self, itx: BotItx, tag_id: str, content: str) -> None:
        """Create a new tag."""
        await self._run(itx, Create(tag_id, content))

    @manage.command(name="create-with-message")
    @app_commands.describe(
        tag_id="The id of the tag",
        message_id="The id of the message that contains the content for the tag, must be in this channel",
    )
    @app_commands.rename(tag_id="id", message_id="message-id")
    async def create_with_message(self, itx: BotItx, tag_id: str, message_id: str) -> None:
        """Create a new tag using the content of a message in this channel."""
        await self._run(itx, CreateWithMessage(tag_id, message_id))

    @manage.command(name="edit")
    @app_commands.describe(tag_id="The id of the tag", content="The new content of the tag")
    @app_commands.rename(tag_id="id")
    async def edit(self, itx: BotItx, tag_id: TagId, content: str) -> None:
        """Edit the content of an existing tag."""
        await self._run(itx, Edit(tag_id, content))

    @manage.command(name="edit-with-message")
    @app_commands.describe(
        tag_id="The id of the tag",
        message_id="The id of the message that contains the new content for the tag, must be in this channel",
    )
    @app_commands.rename(tag_id="id", message_id="message-id")
    async def edit_with_message(self, itx: BotItx, tag_id: TagId, message_id: str) -> None:
        """Edit the content of an existing tag using the content of a message in this channel."""
        await self._run(itx, EditWithMessage(tag_id, message_id))

    @manage.command(name="delete")
    @app_commands.describe(tag_id="The id of the tag")
    @app_commands.rename(tag_id="id")
    async def delete(self, itx: BotItx, tag_id: TagId) -> None:
        """Delete an existing tag."""
        await self._run(itx, Delete(tag_id))


async def setup(bot: TagBot) -> None:
    """Set up the tags extension."""
    store = SqliteTagStore(bot.config.tags.database)
    bot.tags = store
    await bot.add_cog(TagsCog(bot, store), guild=discord.Object(id=bot.config.guild))
