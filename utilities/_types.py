from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import discord

    import core

    BotItx = discord.Interaction[core.TagBot]
