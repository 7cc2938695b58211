"""Tests for command names and flag-style command arguments."""

from __future__ import annotations

import pytest

from bufrouter.commands import CommandArgs, command_name, parse_command_args
from bufrouter.exceptions import DispatchArgumentError


@pytest.mark.parametrize(
    "words, expected",
    [
        (("foo", "bar/baz"), "FooBarBaz"),
        (("foo", "bar///baz"), "FooBarBaz"),
        (("foo", "bar/b/az"), "FooBarBAz"),
        (("diary", "new-entry"), "DiaryNewEntry"),
        (("cmd", "path/to"), "CmdPathTo"),
        (("foo", ""), "Foo"),
    ],
)
def test_command_name(words, expected):
    assert command_name(*words) == expected


class TestParseCommandArgs:
    def test_empty(self):
        assert parse_command_args([]) == CommandArgs()

    def test_key_value(self):
        out = parse_command_args(["-id=123", "--name=John"])
        assert out.params == {"id": "123", "name": "John"}

    def test_bare_flag_is_blank(self):
        assert parse_command_args(["-verbose"]).params == {"verbose": ""}

    def test_value_may_contain_equals(self):
        assert parse_command_args(["-q=a=b"]).params == {"q": "a=b"}

    def test_repeated_key_collects_values(self):
        out = parse_command_args(["-tag=a", "-tag=b", "-tag=c"])
        assert out.params == {"tag": ["a", "b", "c"]}

    def test_hash_fragment(self):
        assert parse_command_args(["#top"]).fragment == "top"

    def test_fragment_flag(self):
        out = parse_command_args(["-fragment=section 2"])
        assert out.fragment == "section 2"
        assert out.params == {}

    def test_reuse_flag(self):
        out = parse_command_args(["-reuse", "-id=1"])
        assert out.reuse is True
        assert out.params == {"id": "1"}

    def test_reuse_with_value_is_a_param(self):
        out = parse_command_args(["-reuse=no"])
        assert out.reuse is False
        assert out.params == {"reuse": "no"}

    @pytest.mark.parametrize("raw", ["positional", "-", "--", "-=x"])
    def test_rejects(self, raw):
        with pytest.raises(DispatchArgumentError):
            parse_command_args([raw])
