"""Unit tests for subcommand values and message id parsing."""

import msgspec
import pytest

from extensions.tags.subcommands import (
    Create,
    CreateWithMessage,
    Delete,
    Edit,
    EditWithMessage,
    Raw,
    Subcommand,
    parse_message_id,
)


class TestParseMessageId:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("1", 1),
            ("0", 0),
            ("007", 7),
            ("1043263345178996796", 1043263345178996796),
            (str(2**63 - 1), 2**63 - 1),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_message_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "bar", "1a", " 1", "1 ", "-1", "+1", "1_000", "1e3", "²", str(2**63)])
    def test_invalid(self, raw):
        assert parse_message_id(raw) is None


class TestSubcommand:
    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            (b'{"subcommand": "raw", "tag_id": "foo"}', Raw("foo")),
            (b'{"subcommand": "create", "tag_id": "foo", "content": "bar"}', Create("foo", "bar")),
            (b'{"subcommand": "edit", "tag_id": "foo", "content": "bar"}', Edit("foo", "bar")),
            (b'{"subcommand": "delete", "tag_id": "foo"}', Delete("foo")),
            (
                b'{"subcommand": "create-with-message", "tag_id": "foo", "message_id": "1"}',
                CreateWithMessage("foo", "1"),
            ),
            (
                b'{"subcommand": "edit-with-message", "tag_id": "foo", "message_id": "1"}',
                EditWithMessage("foo", "1"),
            ),
        ],
    )
    def test_tagged_by_slash_name(self, payload, expected):
        assert msgspec.json.decode(payload, type=Subcommand) == expected

    def test_variants_only_carry_their_fields(self):
        with pytest.raises(msgspec.ValidationError):
            msgspec.json.decode(b'{"subcommand": "raw", "tag_id": "foo", "content": "bar"}', type=Subcommand)

    def test_values_are_immutable(self):
        invocation = Create("foo", "bar")

        with pytest.raises(AttributeError):
            invocation.content = "baz"  # type: ignore[misc]
