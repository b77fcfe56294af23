from __future__ import annotations

import re

import msgspec

__all__ = ("Config", "decode")


class Base(msgspec.Struct, forbid_unknown_fields=True): ...


class Tags(Base):
    manage_role_pattern: str
    database: str = "tags.db"

    def __post_init__(self) -> None:
        """Reject role patterns that are not valid regular expressions."""
        try:
            re.compile(self.manage_role_pattern)
        except re.error as e:
            raise ValueError(f"Invalid manage_role_pattern {self.manage_role_pattern!r}: {e}") from None

    @property
    def role_pattern(self) -> re.Pattern[str]:
        """Return the compiled role pattern."""
        return re.compile(self.manage_role_pattern)


class Wolfram(Base):
    endpoint: str = "http://api.wolframalpha.com/v2/query"


class Config(Base):
    guild: int
    tags: Tags
    wolfram: Wolfram = msgspec.field(default_factory=Wolfram)


def decode(data: bytes | str) -> Config:
    """Decode a config.toml file."""
    return msgspec.toml.decode(data, type=Config)
