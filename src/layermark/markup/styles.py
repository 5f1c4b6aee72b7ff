"""Per-class render configuration and tag construction helpers."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from layermark.markup.escape import escape_attr

if TYPE_CHECKING:
    from layermark.textmap.models import Origin, Segment, SegmentMap

# Replaced by the text an origin's range covers in literal attribute values.
MATCH_PLACEHOLDER = "$_&"

LEFT_MARKER = "L"
RIGHT_MARKER = "R"

_TAG_NAME = re.compile(r"^[A-Za-z0-9_-]+")

type AttrValue = str | re.Pattern[str]


class ClassStyle(BaseModel):
    """How origins of one class name are written out.

    Attributes:
        tag: Opening tag name.  ``None`` uses the renderer's default tag.
        tag_end: Closing tag name.  ``None`` closes with ``tag``; an empty
            string writes no closing tag at all (``<input>``-like elements).
        attrs: Extra attributes for the opening tag.  A string value is a
            literal in which ``$_&`` stands for the covered text; a compiled
            pattern yields its first match in the covered text.
    """

    model_config = ConfigDict(frozen=True)

    tag: str | None = None
    tag_end: str | None = None
    attrs: dict[str, AttrValue] = {}

    def open_tag(self, default_tag: str) -> str:
        return self.tag or default_tag

    def close_tag(self, default_tag: str) -> str:
        """Closing tag text, or ``""`` when the class has none."""
        tag = self.tag_end if self.tag_end is not None else self.open_tag(default_tag)
        if not tag:
            return ""
        name = _TAG_NAME.match(tag)
        return f"</{name.group(0) if name else tag}>"


DEFAULT_STYLE = ClassStyle()


@dataclass(frozen=True)
class TagContext:
    """Everything a markup hook is told about the tag being opened.

    Attributes:
        attrs: Attributes resolved so far (``class`` first).
        name: The origin's class name.
        origin: The origin the tag is opened for.
        depth: The origin's index in ``segment.origins``.
        segment: The segment at which the tag opens.
        map_index: Index of ``segment`` in ``map``.
        map: The whole map being rendered.
    """

    attrs: Mapping[str, str]
    name: str
    origin: Origin
    depth: int
    segment: Segment
    map_index: int
    map: SegmentMap


type MarkupHook = Callable[[TagContext], Mapping[str, str] | None]


def class_value(name: str, *, left: bool, right: bool) -> str:
    parts = [name]
    if left:
        parts.append(LEFT_MARKER)
    if right:
        parts.append(RIGHT_MARKER)
    return " ".join(parts)


def resolve_attrs(style: ClassStyle, covered: str) -> dict[str, str]:
    """Evaluate a style's static attributes against the origin's covered text."""
    attrs: dict[str, str] = {}
    for key, spec in style.attrs.items():
        if isinstance(spec, re.Pattern):
            found = spec.search(covered)
            attrs[key] = found.group(0) if found else ""
        else:
            attrs[key] = spec.replace(MATCH_PLACEHOLDER, covered, 1)
    return attrs


def format_attr(key: str, value: str) -> str:
    """``key="value"``, or a bare ``key`` when the value is empty."""
    if not value:
        return f" {key}"
    return f' {key}="{escape_attr(value)}"'
