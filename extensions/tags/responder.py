from __future__ import annotations

import io
from typing import TYPE_CHECKING, Protocol

import discord

if TYPE_CHECKING:
    from utilities._types import BotItx

__all__ = ("InteractionResponder", "Responder")


class Responder(Protocol):
    async def defer(self) -> None:
        """Acknowledge the command before a slow step, without replying yet."""
        ...

    async def reply(self, text: str, *, ephemeral: bool = False) -> None:
        """Reply with plain text."""
        ...

    async def reply_success(self, description: str) -> None:
        """Reply with a notification titled "Success"."""
        ...

    async def reply_file(self, data: bytes, filename: str) -> None:
        """Reply with a file attachment."""
        ...


class InteractionResponder:
    """Deliver replies to the interaction that invoked a command.

    Once the interaction was deferred, replies go out as followups. A deferral
    is ephemeral, and so is the followup replacing it.
    """

    def __init__(self, itx: BotItx) -> None:
        """Initialize the responder.

        Args:
            itx: The interaction to answer.
        """
        self.itx = itx

    async def _send(self, **kwargs) -> None:  # noqa: ANN003
        if self.itx.response.is_done():
            await self.itx.followup.send(**kwargs)
        else:
            await self.itx.response.send_message(**kwargs)

    async def defer(self) -> None:
        if not self.itx.response.is_done():
            await self.itx.response.defer(ephemeral=True, thinking=True)

    async def reply(self, text: str, *, ephemeral: bool = False) -> None:
        await self._send(content=text, ephemeral=ephemeral)

    async def reply_success(self, description: str) -> None:
        embed = discord.Embed(title="Success", description=description, colour=discord.Colour.green())
        await self._send(embed=embed)

    async def reply_file(self, data: bytes, filename: str) -> None:
        await self._send(file=discord.File(io.BytesIO(data), filename=filename))
