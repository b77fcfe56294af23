from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

import discord

if TYPE_CHECKING:
    from discord.abc import User

__all__ = ("is_authorized", "member_role_names")


def is_authorized(role_names: Iterable[str], pattern: re.Pattern[str] | str) -> bool:
    """Check whether any of the given role names fully matches the role pattern.

    Args:
        role_names: Names of the roles held by the caller.
        pattern: Regular expression (compiled or not) a role name must fully match.

    Returns:
        True if at least one role name matches, otherwise False.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    return any(pattern.fullmatch(name) for name in role_names)


def member_role_names(user: User) -> set[str]:
    """Return the role names of a guild member.

    Plain users (e.g. in DMs) hold no roles.
    """
    if not isinstance(user, discord.Member):
        return set()
    return {role.name for role in user.roles}
