from __future__ import annotations

import contextlib
import logging
import traceback
from typing import TYPE_CHECKING

import discord
import sentry_sdk
from discord import HTTPException, NotFound, app_commands, ui

from .base import BaseView

if TYPE_CHECKING:
    from utilities._types import BotItx

log = logging.getLogger(__name__)


class UserFacingError(app_commands.errors.AppCommandError): ...


class ErrorView(BaseView):
    def __init__(
        self,
        sentry_event_id: str | None,
        *,
        unknown_error: bool = False,
        description: str = "None",
    ) -> None:
        """Initialize the error view.

        Args:
            sentry_event_id: Id of the sentry event the error was reported as.
            unknown_error: Whether the error was unexpected rather than the user's doing.
            description: Text shown to the user.
        """
        self.sentry_event_id = sentry_event_id
        self.description = description
        self.unknown_error = unknown_error
        super().__init__(timeout=180)

    def rebuild_components(self) -> None:
        """Rebuild view components."""
        self.clear_items()
        footer = "-# Think this was a mistake? Let a moderator know what you were expecting."
        if self.unknown_error and self.sentry_event_id:
            footer = f"-# Please mention error id `{self.sentry_event_id}` when reporting this."
        container = ui.Container(
            ui.TextDisplay("## Uh-oh! Something went wrong." if self.unknown_error else "## What happened?"),
            ui.TextDisplay(f">>> Details: {self.description}"),
            ui.Separator(),
            ui.TextDisplay(footer),
            accent_color=discord.Color.red() if self.unknown_error else discord.Color.yellow(),
        )
        self.add_item(container)


async def on_command_error(itx: BotItx, error: Exception) -> None:
    """Handle application command errors."""
    exception = getattr(error, "original", error)
    if isinstance(exception, UserFacingError):
        view = ErrorView(None, description=str(exception))
    else:
        event_id = sentry_sdk.capture_exception(exception)
        view = ErrorView(event_id, description="Unknown error.", unknown_error=True)
    view.original_interaction = itx

    log.debug(traceback.format_exception(None, exception, exception.__traceback__))

    with contextlib.suppress(HTTPException, NotFound):
        if itx.response.is_done():
            await itx.edit_original_response(content=None, view=view)  # type: ignore
        else:
            await itx.response.send_message(view=view, ephemeral=True)

    if not isinstance(exception, UserFacingError):
        raise exception
