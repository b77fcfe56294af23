from __future__ import annotations

import contextlib
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

import discord
from discord import NotFound, ui
from discord.ext import commands

if TYPE_CHECKING:
    import core

    from ._types import BotItx

__all__ = ("BaseCog", "BaseView")

log = getLogger(__name__)


class BaseCog(commands.Cog):
    def __init__(self, bot: core.TagBot) -> None:
        """Initialize the base cog.

        Args:
            bot (core.TagBot): The Discord bot instance.
        """
        self.bot = bot


class BaseView(ui.LayoutView):
    def __init__(self, *, timeout: float | None = 180) -> None:
        """Initialize the base UI view with timeout message.

        Args:
            timeout (float | None): Timeout in seconds before the view becomes inactive.
        """
        super().__init__(timeout=timeout)

        assert self.timeout
        timeout_dt = discord.utils.format_dt(discord.utils.utcnow() + timedelta(seconds=self.timeout), "R")
        self._end_time_string = f"-# ⚠️ This message will expire and become inactive {timeout_dt}."

        self.original_interaction: BotItx | None = None
        self.rebuild_components()

    def rebuild_components(self) -> None:
        """Override to rebuild the view's interactive components."""

    def disable_children(self) -> None:
        """Disable all interactive children in the view (e.g., buttons, selects)."""
        for child in self.walk_children():
            if isinstance(child, (ui.Button, ui.Select)):
                child.disabled = True

    async def on_timeout(self) -> None:
        """Disable the view and edit the message if the view times out."""
        self._end_time_string = "-# ⚠️ This message has expired."
        self.rebuild_components()
        self.disable_children()
        if self.original_interaction is None:
            log.debug("%s timed out without an original interaction", type(self).__qualname__)
            return
        with contextlib.suppress(NotFound):
            resp = await self.original_interaction.original_response()
            await resp.edit(view=self)
