"""Unit tests for decoding the bot configuration."""

from pathlib import Path

import msgspec
import pytest

from utilities import config

CONFIGS = Path(__file__).resolve().parents[3] / "configs"

MINIMAL = """
guild = 1

[tags]
manage_role_pattern = "Moderator"
"""


class TestDecode:
    def test_minimal_config_uses_defaults(self):
        cfg = config.decode(MINIMAL)

        assert cfg.guild == 1
        assert cfg.tags.database == "tags.db"
        assert cfg.tags.role_pattern.fullmatch("Moderator")
        assert cfg.wolfram.endpoint == "http://api.wolframalpha.com/v2/query"

    @pytest.mark.parametrize("name", ["dev.toml", "prod.toml"])
    def test_shipped_configs_decode(self, name):
        cfg = config.decode((CONFIGS / name).read_bytes())

        assert cfg.guild > 0
        assert cfg.tags.role_pattern.fullmatch("Moderator")

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(msgspec.ValidationError):
            config.decode(MINIMAL + "unknown = 1\n")

    def test_invalid_role_pattern_is_rejected(self):
        with pytest.raises(msgspec.ValidationError, match="manage_role_pattern"):
            config.decode('guild = 1\n[tags]\nmanage_role_pattern = "Moderator("\n')

    def test_missing_tags_section_is_rejected(self):
        with pytest.raises(msgspec.ValidationError):
            config.decode("guild = 1\n")
