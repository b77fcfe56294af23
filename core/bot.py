import logging
import os

import aiohttp
import discord
from discord.ext import commands

import extensions
import utilities.config
from extensions.tags.store import SqliteTagStore, TagStore

__all__ = ("TagBot",)


log = logging.getLogger(__name__)

intents = discord.Intents(
    guild_messages=True,
    guilds=True,
    integrations=True,
    members=True,
    message_content=True,
)


class TagBot(commands.Bot):
    _tag_store: TagStore | None = None

    def __init__(self, *, prefix: str, session: aiohttp.ClientSession) -> None:
        """Initialize Bot instance.

        Args:
            prefix: The command prefix for the bot.
            session: The aiohttp.ClientSession instance.
        """
        super().__init__(
            command_prefix=prefix,
            intents=intents,
            help_command=None,
            description="A Discord bot serving moderator-managed tags and math queries.",
        )
        self.session = session
        config = "prod" if os.getenv("BOT_ENVIRONMENT") == "production" else "dev"
        with open(f"configs/{config}.toml", "rb") as f:
            self.config = utilities.config.decode(f.read())

    async def on_ready(self) -> None:
        """Log when the bot is ready."""
        log.info(f"Logged in as {self.user}")

    async def setup_hook(self) -> None:
        """Load extensions and sync the guild's slash commands."""
        for ext in ["jishaku", *extensions.EXTENSIONS]:
            log.info(f"Loading {ext}...")
            await self.load_extension(ext)
        guild = discord.Object(id=self.config.guild)
        synced = await self.tree.sync(guild=guild)
        log.info("Synced %d commands to guild %d", len(synced), self.config.guild)

    async def close(self) -> None:
        """Close the tag store before shutting down."""
        if isinstance(self._tag_store, SqliteTagStore):
            self._tag_store.close()
        await super().close()

    @property
    def tags(self) -> TagStore:
        """Return the tag store."""
        if self._tag_store is None:
            raise AttributeError("Tag store not initialized.")
        return self._tag_store

    @tags.setter
    def tags(self, store: TagStore) -> None:
        self._tag_store = store
