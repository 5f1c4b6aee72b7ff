"""Render a segment map as nested, correctly bracketed markup.

Walking the map left to right, each segment:

1. writes the escaped gap text since the previous segment;
2. opens a tag for every origin past the depth it shares with the previous
   segment, outermost first;
3. writes its own escaped text;
4. closes every origin past the depth it shares with the next segment,
   innermost first.

Adjacent segments that share leading origins therefore keep those tags
open, so one origin split across several segments renders as a single
element unless an outer origin changes around it.

Each opening tag's class is the origin name, plus ``L`` when the origin
starts at that segment and ``R`` when the tag closes where the origin ends.
``R`` is only known once the tag closes.  :func:`render` works this out in
a first pass over the map; :func:`render_patched` writes the output as
fragments and patches ``R`` into an already emitted opening tag.  Both give
identical output.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from layermark.config import get_settings
from layermark.markup.escape import escape_attr, escape_text
from layermark.markup.styles import (
    DEFAULT_STYLE,
    RIGHT_MARKER,
    ClassStyle,
    TagContext,
    class_value,
    format_attr,
    resolve_attrs,
)
from layermark.textmap.models import Segment, common_depth

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from layermark.markup.styles import MarkupHook

logger = logging.getLogger(__name__)


class _Walk:
    """Shared state for one render call."""

    def __init__(
        self,
        text: str,
        smap: Sequence[Segment],
        styles: Mapping[str, ClassStyle] | None,
        hook: MarkupHook | None,
        default_tag: str | None,
    ) -> None:
        self.text = text
        self.smap = tuple(smap)
        self.styles = styles or {}
        self.hook = hook
        self.default_tag = default_tag or get_settings().render.default_tag

    def style(self, name: str) -> ClassStyle:
        return self.styles.get(name, DEFAULT_STYLE)

    def neighbours(self, i: int) -> tuple[Segment | None, Segment | None]:
        prev = self.smap[i - 1] if i > 0 else None
        nxt = self.smap[i + 1] if i + 1 < len(self.smap) else None
        return prev, nxt

    def open_tag(self, i: int, depth: int) -> tuple[str, int]:
        """Build the opening tag for ``smap[i].origins[depth]`` without ``R``.

        Returns the tag and the offset just past its class value, where
        ``R`` is inserted if the tag turns out to close at the origin's end.
        """
        seg = self.smap[i]
        origin = seg.origins[depth]
        style = self.style(origin.name)
        covered = self.text[origin.range.start : origin.range.end]

        attrs = {
            "class": class_value(
                origin.name, left=origin.range.start == seg.start, right=False
            )
        }
        attrs.update(resolve_attrs(style, covered))
        if self.hook is not None:
            overrides = self.hook(
                TagContext(
                    attrs=dict(attrs),
                    name=origin.name,
                    origin=origin,
                    depth=depth,
                    segment=seg,
                    map_index=i,
                    map=self.smap,
                )
            )
            if overrides:
                attrs.update(overrides)

        tag_name = style.open_tag(self.default_tag)
        head = f'<{tag_name} class="{escape_attr(attrs.pop("class"))}'
        rest = "".join(format_attr(key, value) for key, value in attrs.items())
        return f'{head}"{rest}>', len(head)

    def close_tag(self, seg: Segment, depth: int) -> str:
        return self.style(seg.origins[depth].name).close_tag(self.default_tag)

    def escaped(self, start: int, end: int | None = None) -> str:
        return escape_text(self.text[start:end])


def _insert_right_marker(tag: str, offset: int) -> str:
    return f"{tag[:offset]} {RIGHT_MARKER}{tag[offset:]}"


def _tag_runs(smap: Sequence[Segment]) -> dict[tuple[int, int], int]:
    """Map each opened tag ``(map_index, depth)`` to the index where it closes."""
    runs: dict[tuple[int, int], int] = {}
    open_tags: list[tuple[int, int]] = []
    for i, seg in enumerate(smap):
        prev = smap[i - 1] if i > 0 else None
        nxt = smap[i + 1] if i + 1 < len(smap) else None
        for depth in range(common_depth(seg, prev), len(seg.origins)):
            open_tags.append((i, depth))
        for _ in range(len(seg.origins) - common_depth(seg, nxt)):
            runs[open_tags.pop()] = i
    return runs


def render(
    text: str,
    smap: Sequence[Segment],
    styles: Mapping[str, ClassStyle] | None = None,
    hook: MarkupHook | None = None,
    default_tag: str | None = None,
) -> str:
    """Render *smap* over *text*, computing every ``R`` flag up front.

    Args:
        text: The text the map was built from.
        smap: Segment map; read only.
        styles: Per-name render configuration.  Names without an entry use
            the default tag with no extra attributes.
        hook: Called once per opening tag; its result is merged over the
            static attributes.
        default_tag: Tag for classes that do not name one.  Defaults to
            ``render.default_tag`` from settings.

    Returns:
        The markup string.
    """
    walk = _Walk(text, smap, styles, hook, default_tag)
    runs = _tag_runs(walk.smap)
    parts: list[str] = []
    pos = 0
    for i, seg in enumerate(walk.smap):
        prev, nxt = walk.neighbours(i)
        parts.append(walk.escaped(pos, seg.start))
        for depth in range(common_depth(seg, prev), len(seg.origins)):
            tag, offset = walk.open_tag(i, depth)
            if seg.origins[depth].range.end == walk.smap[runs[(i, depth)]].end:
                tag = _insert_right_marker(tag, offset)
            parts.append(tag)
        parts.append(walk.escaped(seg.start, seg.end))
        for depth in range(len(seg.origins) - 1, common_depth(seg, nxt) - 1, -1):
            parts.append(walk.close_tag(seg, depth))
        pos = seg.end
    parts.append(walk.escaped(pos))
    return "".join(parts)


def render_patched(
    text: str,
    smap: Sequence[Segment],
    styles: Mapping[str, ClassStyle] | None = None,
    hook: MarkupHook | None = None,
    default_tag: str | None = None,
) -> str:
    """Single-pass variant of :func:`render`.

    Output is kept as a list of fragments with each opening tag in its own
    fragment.  When a tag closes at its origin's end, ``R`` is patched into
    that fragment by index without rescanning earlier output.
    """
    walk = _Walk(text, smap, styles, hook, default_tag)
    fragments: list[str] = []
    # (fragment index, class value end offset) per currently open tag
    open_tags: list[tuple[int, int]] = []
    pos = 0
    for i, seg in enumerate(walk.smap):
        prev, nxt = walk.neighbours(i)
        fragments.append(walk.escaped(pos, seg.start))
        for depth in range(common_depth(seg, prev), len(seg.origins)):
            tag, offset = walk.open_tag(i, depth)
            open_tags.append((len(fragments), offset))
            fragments.append(tag)
        fragments.append(walk.escaped(seg.start, seg.end))
        for depth in range(len(seg.origins) - 1, common_depth(seg, nxt) - 1, -1):
            index, offset = open_tags.pop()
            if seg.origins[depth].range.end == seg.end:
                fragments[index] = _insert_right_marker(fragments[index], offset)
            fragments.append(walk.close_tag(seg, depth))
        pos = seg.end
    fragments.append(walk.escaped(pos))
    logger.debug(
        "Rendered %d segments into %d fragments", len(walk.smap), len(fragments)
    )
    return "".join(fragments)
