from __future__ import annotations

import re
from typing import TypeAlias

import msgspec

__all__ = (
    "Create",
    "CreateWithMessage",
    "Delete",
    "Edit",
    "EditWithMessage",
    "Raw",
    "Subcommand",
    "parse_message_id",
)

_MESSAGE_ID = re.compile(r"[0-9]+")
_MAX_SNOWFLAKE = 2**63 - 1


class _Base(msgspec.Struct, frozen=True, forbid_unknown_fields=True, tag_field="subcommand"):
    tag_id: str


class Raw(_Base, tag="raw"): ...


class Create(_Base, tag="create"):
    content: str


class Edit(_Base, tag="edit"):
    content: str


class Delete(_Base, tag="delete"): ...


class CreateWithMessage(_Base, tag="create-with-message"):
    message_id: str


class EditWithMessage(_Base, tag="edit-with-message"):
    message_id: str


Subcommand: TypeAlias = Raw | Create | Edit | Delete | CreateWithMessage | EditWithMessage


def parse_message_id(raw: str) -> int | None:
    """Parse a message id given as text.

    Only plain ASCII digits fitting a 64 bit snowflake are accepted; signs,
    whitespace and digit separators are rejected.

    Returns:
        The message id, or None if the text is not a valid id.
    """
    if not _MESSAGE_ID.fullmatch(raw):
        return None
    value = int(raw)
    if value > _MAX_SNOWFLAKE:
        return None
    return value
