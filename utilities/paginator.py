from __future__ import annotations

from typing import TYPE_CHECKING, Generic, Literal, Sequence, TypeVar

import discord
from discord import AllowedMentions, ButtonStyle, ui

from utilities.base import BaseView

if TYPE_CHECKING:
    from utilities._types import BotItx

T = TypeVar("T")


class _StepButton(ui.Button["PaginatorView"]):
    view: "PaginatorView"

    def __init__(self, step: Literal[-1, 1]) -> None:
        """Initialize a button moving one page back or forth.

        Args:
            step (Literal[-1, 1]): Direction the button moves in.
        """
        super().__init__(style=ButtonStyle.blurple, label="Next" if step == 1 else "Previous")
        self.step = step

    async def callback(self, itx: BotItx) -> None:
        """Move to the neighbouring page and update the view.

        Args:
            itx (BotItx): The interaction context.
        """
        self.view.skip_to_page_index(self.view.current_page_index + self.step)
        await itx.response.edit_message(view=self.view, allowed_mentions=AllowedMentions.none())


class PaginatorView(BaseView, Generic[T]):
    def __init__(self, title: str, data: Sequence[T], *, page_size: int = 20) -> None:
        """Initialize a paginated view.

        Args:
            title (str): Title to display at the top of the paginator.
            data (Sequence[T]): The data to paginate.
            page_size (int, optional): Number of items per page. Defaults to 20.
        """
        self._title = title
        self._pages: list[list[T]] = [list(chunk) for chunk in discord.utils.as_chunks(data, page_size)] or [[]]
        self._current_page_index = 0
        self._previous_button = _StepButton(-1)
        self._page_number_button = ui.Button(style=ButtonStyle.grey, label=f"1/{len(self._pages)}", disabled=True)
        self._next_button = _StepButton(1)
        super().__init__(timeout=600)

    @property
    def pages(self) -> list[list[T]]:
        """list[list[T]]: Chunked pages built from input data."""
        return self._pages

    @property
    def current_page_index(self) -> int:
        """int: The index of the currently active page."""
        return self._current_page_index

    @property
    def current_page(self) -> list[T]:
        """list[T]: The current page's content."""
        return self._pages[self._current_page_index]

    def skip_to_page_index(self, value: int) -> None:
        """Jump to a page index, wrapping around at both ends.

        Args:
            value (int): The target page index (0-based).
        """
        self._current_page_index = value % len(self._pages)
        self._page_number_button.label = f"{self._current_page_index + 1}/{len(self._pages)}"
        self.rebuild_components()

    def build_page_body(self) -> Sequence[ui.Item]:
        """Build the display section for the current page.

        Raises:
            NotImplementedError: Must be implemented by subclasses.
        """
        raise NotImplementedError

    def rebuild_components(self) -> None:
        """Rebuild all components for the current page."""
        self.clear_items()
        action_row = ()
        if len(self.pages) > 1:
            action_row = (ui.ActionRow(self._previous_button, self._page_number_button, self._next_button),)

        container = ui.Container(
            ui.TextDisplay(f"# {self._title}"),
            ui.Separator(),
            *self.build_page_body(),
            ui.TextDisplay(f"# {self._end_time_string}"),
            *action_row,
        )
        self.add_item(container)
