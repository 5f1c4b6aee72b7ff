"""Tests for per-class style resolution."""

from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from layermark.markup import ClassStyle
from layermark.markup.styles import class_value, format_attr, resolve_attrs


class TestClassStyle:
    def test_defaults(self) -> None:
        style = ClassStyle()
        assert style.open_tag("mark") == "mark"
        assert style.close_tag("mark") == "</mark>"

    def test_empty_tag_end_means_no_closing_tag(self) -> None:
        assert ClassStyle(tag="br", tag_end="").close_tag("mark") == ""

    def test_tag_end_override(self) -> None:
        assert ClassStyle(tag="a", tag_end="b").close_tag("mark") == "</b>"

    def test_is_frozen(self) -> None:
        style = ClassStyle(tag="a")
        with pytest.raises(ValidationError):
            style.tag = "b"

    def test_pattern_attribute_kept_as_pattern(self) -> None:
        style = ClassStyle(attrs={"id": re.compile(r"\d+"), "href": "#$_&"})
        assert isinstance(style.attrs["id"], re.Pattern)
        assert style.attrs["href"] == "#$_&"


class TestResolveAttrs:
    def test_placeholder_replaced_once(self) -> None:
        style = ClassStyle(attrs={"v": "$_&/$_&"})
        assert resolve_attrs(style, "x") == {"v": "x/$_&"}

    def test_constant(self) -> None:
        assert resolve_attrs(ClassStyle(attrs={"t": "_blank"}), "x") == {"t": "_blank"}

    def test_extraction(self) -> None:
        style = ClassStyle(attrs={"id": re.compile(r"(?<=_\$).+?(?=\$_)")})
        assert resolve_attrs(style, "_$name$_") == {"id": "name"}


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        (False, False, "c"),
        (True, False, "c L"),
        (False, True, "c R"),
        (True, True, "c L R"),
    ],
)
def test_class_value(left: bool, right: bool, expected: str) -> None:
    assert class_value("c", left=left, right=right) == expected


def test_format_attr() -> None:
    assert format_attr("href", "a&b") == ' href="a&amp;b"'
    assert format_attr("disabled", "") == " disabled"
