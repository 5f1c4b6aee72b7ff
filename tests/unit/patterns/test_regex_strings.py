"""Tests for ``/regex/flags`` and literal pattern strings."""

from __future__ import annotations

import re

import pytest

from layermark.patterns import (
    PatternError,
    compile_pattern_string,
    parse_pattern_string,
)


class TestParse:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("/ab+/gi", ("ab+", "gi")),
            ("/ab+/", ("ab+", "")),
            ("/a/b/", ("a/b", "")),
            ("/x\ny/s", ("x\ny", "s")),
            ("a.b", None),
            ("//", None),
            ("/unterminated", None),
        ],
    )
    def test_parse(self, source: str, expected: tuple[str, str] | None) -> None:
        assert parse_pattern_string(source) == expected


class TestCompile:
    def test_literal_is_escaped(self) -> None:
        pattern = compile_pattern_string("a.b")
        assert pattern.findall("a.b axb") == ["a.b"]

    def test_regex_with_flags(self) -> None:
        pattern = compile_pattern_string("/^ab$/im")
        assert pattern.flags & re.IGNORECASE
        assert pattern.flags & re.MULTILINE
        assert pattern.findall("AB\nab\nabc") == ["AB", "ab"]

    def test_global_flag_is_ignored(self) -> None:
        assert compile_pattern_string("/o/g").findall("foo") == ["o", "o"]

    def test_unknown_flag_rejected(self) -> None:
        with pytest.raises(PatternError, match="Unsupported flag 'y'"):
            compile_pattern_string("/a/y")

    def test_invalid_regex_rejected(self) -> None:
        with pytest.raises(PatternError, match="Invalid pattern"):
            compile_pattern_string("/(unclosed/")

    def test_pattern_error_is_value_error(self) -> None:
        assert issubclass(PatternError, ValueError)
