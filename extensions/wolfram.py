from __future__ import annotations

import io
import os
import xml.etree.ElementTree as ET
from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING

import aiohttp
import discord
import msgspec
from discord import app_commands

from utilities.base import BaseCog
from utilities.errors import UserFacingError

if TYPE_CHECKING:
    from core import TagBot
    from utilities._types import BotItx

__all__ = (
    "Image",
    "LanguageMessage",
    "Pod",
    "QueryResult",
    "SubPod",
    "WolframCog",
    "parse_query_result",
    "unsuccessful_message",
)

log = getLogger(__name__)

WOLFRAM_ALPHA_APP_ID = os.getenv("WOLFRAM_ALPHA_APP_ID", "")


class Image(msgspec.Struct, frozen=True):
    source: str
    title: str = ""


class SubPod(msgspec.Struct, frozen=True):
    title: str
    image: Image | None = None
    plaintext: str | None = None


class Pod(msgspec.Struct, frozen=True):
    title: str
    subpods: list[SubPod] = []


class LanguageMessage(msgspec.Struct, frozen=True):
    english: str
    other: str = ""


class QueryResult(msgspec.Struct, frozen=True):
    success: bool
    error: bool
    timing: str
    pods: list[Pod] = []
    language_message: LanguageMessage | None = None


def parse_query_result(xml: str | bytes) -> QueryResult:
    """Parse the `queryresult` document returned by the WolframAlpha v2 query API.

    Only the fields needed to render a result are kept: pods, their subpods and
    each subpod's image and plaintext. For queries in unsupported languages the
    `languagemsg` explanation is kept as well.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed XML.
        ValueError: If the root element is not a ``queryresult``.
    """
    root = ET.fromstring(xml)
    if root.tag != "queryresult":
        raise ValueError(f"Unexpected root element <{root.tag}>")

    pods = []
    for pod in root.iterfind("pod"):
        subpods = []
        for subpod in pod.iterfind("subpod"):
            img = subpod.find("img")
            image = None
            if img is not None and img.get("src"):
                image = Image(source=img.get("src", ""), title=img.get("title", ""))
            subpods.append(SubPod(title=subpod.get("title", ""), image=image, plaintext=subpod.findtext("plaintext")))
        pods.append(Pod(title=pod.get("title", ""), subpods=subpods))

    language_message = None
    msg = root.find("languagemsg")
    if msg is not None and msg.get("english"):
        language_message = LanguageMessage(english=msg.get("english", ""), other=msg.get("other", ""))

    return QueryResult(
        success=root.get("success") == "true",
        error=root.get("error") == "true",
        timing=root.get("timing", ""),
        pods=pods,
        language_message=language_message,
    )


def unsuccessful_message(result: QueryResult) -> str:
    """Build the reply for a query WolframAlpha could not answer."""
    if result.language_message is None:
        return "Could not successfully receive the result"
    return f"Could not successfully receive the result\n{result.language_message.english}"


def _attachment_name(pod: Pod, subpod: SubPod, index: int) -> str:
    name = (subpod.image.title if subpod.image else "") or pod.title or "result"
    return f"{index}_{name}.gif"


class WolframCog(BaseCog):
    @app_commands.command(name="wolf")
    @app_commands.guild_only()
    @app_commands.describe(query="the query to send to WolframAlpha")
    async def wolf(self, itx: BotItx, query: str) -> None:
        """Renders mathematical queries using WolframAlpha."""
        if not WOLFRAM_ALPHA_APP_ID:
            raise UserFacingError("Math queries are not configured on this bot.")

        # The processing takes some time
        await itx.response.defer()

        params = {"appid": WOLFRAM_ALPHA_APP_ID, "format": "image,plaintext", "input": query}
        try:
            async with self.bot.session.get(self.bot.config.wolfram.endpoint, params=params) as resp:
                status = resp.status
                body = await resp.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            log.error("Could not get the response from the server", exc_info=e)
            await itx.followup.send("Unable to get a response from the server", ephemeral=True)
            return

        if status != HTTPStatus.OK:
            log.warning("Unexpected status code: Expected: %d Actual: %d", HTTPStatus.OK, status)
            await itx.followup.send("The response' status code was incorrect", ephemeral=True)
            return

        try:
            result = parse_query_result(body)
        except (ET.ParseError, ValueError) as e:
            log.error("Error in parsing the query result", exc_info=e)
            await itx.followup.send("Could not parse the XML received", ephemeral=True)
            return

        if not result.success:
            log.error("Not a successful result for query %r (error=%s)", query, result.error)
            await itx.followup.send(unsuccessful_message(result), ephemeral=True)
            return

        files: list[discord.File] = []
        for pod in result.pods:
            for subpod in pod.subpods:
                if subpod.image is None:
                    continue
                try:
                    async with self.bot.session.get(subpod.image.source) as image_resp:
                        image_resp.raise_for_status()
                        data = await image_resp.read()
                except (aiohttp.ClientError, TimeoutError) as e:
                    log.error("Could not get image source url %s", subpod.image.source, exc_info=e)
                    await itx.followup.send("There was an error in generating the images", ephemeral=True)
                    return
                files.append(discord.File(io.BytesIO(data), filename=_attachment_name(pod, subpod, len(files))))

        # Discord allows at most 10 attachments per message
        await itx.followup.send(f"Computed in: {result.timing}", files=files[:10])


async def setup(bot: TagBot) -> None:
    """Set up the WolframAlpha extension."""
    await bot.add_cog(WolframCog(bot), guild=discord.Object(id=bot.config.guild))
