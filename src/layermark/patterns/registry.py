"""Ordered registry of named matchers and ranges.

The registry is owned by the caller.  Registration order fixes nesting:
entries folded into the map earlier wrap those folded later.  By default all
matcher entries are folded before all range entries, so explicit ranges
(typically selections) overlay pattern matches.

Definitions accepted by :meth:`PatternRegistry.add`::

    {
        "number": "/\\d+/",                     # regex string
        "logo": "STYLO",                        # literal string
        "word": re.compile(r"\\w+"),            # compiled pattern
        "link": {"regex": "/\\S+\\.html/", "htmltag": "a",
                 "htmlattrs": {"href": "$_&", "target": "_blank"}},
        "footnote": {"regex": "/^\\d .+/m",
                     "htmlattrs": {"id": {"extract": "/\\d/"}}},
        "input": {"regex": "/\\$_/", "htmltag": "input", "htmltagend": ""},
        "selection": {"range": {"start": 4, "end": 9}},
    }

A pattern string that fails to compile is logged and excluded; the rest of
the registry is unaffected.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from layermark.config import get_settings
from layermark.markup.renderer import render, render_patched
from layermark.markup.styles import DEFAULT_STYLE, ClassStyle
from layermark.patterns.regex_strings import PatternError, compile_pattern_string
from layermark.textmap.models import InsertMode, Range, Segment, SegmentMap
from layermark.textmap.segment_map import insert_matches, insert_range

if TYPE_CHECKING:
    from layermark.markup.styles import MarkupHook

logger = logging.getLogger(__name__)

_RENDERERS = {"two_pass": render, "patched": render_patched}


class Matcher(Protocol):
    """Anything that yields ordered, non-overlapping matches over a text."""

    def finditer(self, string: str) -> Iterator[re.Match[str]]: ...


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MatcherSource:
    matcher: Matcher
    source: str | None = None


@dataclass(frozen=True)
class RangeSource:
    range: Range


@dataclass(frozen=True)
class PatternEntry:
    """A registered name with its matcher or range and its render style."""

    name: str
    source: MatcherSource | RangeSource
    style: ClassStyle = DEFAULT_STYLE

    @property
    def is_range(self) -> bool:
        return isinstance(self.source, RangeSource)


class ExtractRule(BaseModel):
    """Attribute value taken from the first match of a pattern string."""

    model_config = ConfigDict(extra="forbid")

    extract: str


class PatternDef(BaseModel):
    """Mapping form of a definition, as read from JSON pattern files."""

    model_config = ConfigDict(extra="forbid")

    regex: str | re.Pattern[str] | None = None
    range: Range | None = None
    htmltag: str | None = None
    htmltagend: str | None = None
    htmlattrs: dict[str, str | re.Pattern[str] | ExtractRule] = {}

    @model_validator(mode="after")
    def _one_source(self) -> PatternDef:
        if (self.regex is None) == (self.range is None):
            msg = "a pattern definition needs exactly one of 'regex' or 'range'"
            raise ValueError(msg)
        return self

    def to_style(self) -> ClassStyle:
        """Build the render style.

        Raises:
            PatternError: An ``extract`` attribute rule does not compile.
        """
        attrs: dict[str, str | re.Pattern[str]] = {}
        for key, value in self.htmlattrs.items():
            if isinstance(value, ExtractRule):
                attrs[key] = compile_pattern_string(value.extract)
            else:
                attrs[key] = value
        return ClassStyle(tag=self.htmltag, tag_end=self.htmltagend, attrs=attrs)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class PatternRegistry:
    """Named matchers and ranges, folded into segment maps in order.

    Re-registering a name replaces its definition but keeps its position.
    """

    def __init__(self, defs: Mapping[str, Any] | None = None) -> None:
        self._entries: dict[str, PatternEntry] = {}
        self._hook: MarkupHook | None = None
        if defs:
            self.add(defs)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(list(self._entries.values()))

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def get(self, name: str) -> PatternEntry | None:
        return self._entries.get(name)

    # -- registration -------------------------------------------------------

    def add_regex(
        self,
        name: str,
        matcher: Matcher | str,
        style: ClassStyle | None = None,
    ) -> None:
        """Register a compiled matcher, or a pattern string (see below)."""
        if isinstance(matcher, str):
            self.add_regex_string(name, matcher, style)
            return
        self._entries[name] = PatternEntry(
            name, MatcherSource(matcher), style or DEFAULT_STYLE
        )

    def add_regex_string(
        self,
        name: str,
        source: str,
        style: ClassStyle | None = None,
    ) -> re.Pattern[str] | None:
        """Register ``/regex/flags`` or a literal string.

        Returns the compiled pattern, or ``None`` if it was rejected.  A
        rejected pattern leaves any existing entry for *name* in place.
        """
        try:
            pattern = compile_pattern_string(source)
        except PatternError as exc:
            logger.warning("Rejected pattern for %r: %s", name, exc)
            return None
        self._entries[name] = PatternEntry(
            name, MatcherSource(pattern, source), style or DEFAULT_STYLE
        )
        return pattern

    def add_range(
        self,
        name: str,
        rng: Range,
        style: ClassStyle | None = None,
    ) -> bool:
        """Register an explicit range.

        Returns ``False`` if *name* already holds this exact range.  Without
        a *style*, an existing entry's style is kept.
        """
        existing = self._entries.get(name)
        if existing is not None and existing.source == RangeSource(rng):
            return False
        if style is None:
            style = existing.style if existing is not None else DEFAULT_STYLE
        self._entries[name] = PatternEntry(name, RangeSource(rng), style)
        return True

    def add(self, defs: Mapping[str, Any]) -> list[str]:
        """Register many definitions.  Returns the names that were rejected.

        Falsy definitions are skipped.
        """
        rejected: list[str] = []
        for name, definition in defs.items():
            if not definition:
                continue
            if isinstance(definition, str | re.Pattern):
                if not self._add_source(name, definition, None):
                    rejected.append(name)
                continue
            if not isinstance(definition, PatternDef | Mapping):
                self.add_regex(name, definition)
                continue
            try:
                pdef = PatternDef.model_validate(definition)
                style = pdef.to_style()
            except (ValidationError, PatternError) as exc:
                logger.warning("Rejected definition for %r: %s", name, exc)
                rejected.append(name)
                continue
            if pdef.range is not None:
                self.add_range(name, pdef.range, style)
            elif not self._add_source(name, pdef.regex, style):
                rejected.append(name)
        if rejected:
            logger.info("Registered %d pattern(s), rejected %s", len(defs), rejected)
        return rejected

    def _add_source(
        self,
        name: str,
        source: str | re.Pattern[str] | None,
        style: ClassStyle | None,
    ) -> bool:
        if isinstance(source, str):
            return self.add_regex_string(name, source, style) is not None
        if source is None:
            return False
        self.add_regex(name, source, style)
        return True

    def remove(self, name: str) -> bool:
        return self._entries.pop(name, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def clear_regexes(self) -> None:
        self._entries = {n: e for n, e in self._entries.items() if e.is_range}

    def clear_ranges(self) -> None:
        self._entries = {n: e for n, e in self._entries.items() if not e.is_range}

    # -- rendering configuration --------------------------------------------

    def styles(self) -> dict[str, ClassStyle]:
        return {name: entry.style for name, entry in self._entries.items()}

    def set_markup_hook(self, hook: MarkupHook | None) -> MarkupHook | None:
        """Install a per-tag attribute hook; returns the one it replaces."""
        previous, self._hook = self._hook, hook
        return previous

    # -- map building --------------------------------------------------------

    def _fold(
        self,
        text: str,
        smap: Sequence[Segment],
        entry: PatternEntry,
        mode: InsertMode,
    ) -> SegmentMap:
        source = entry.source
        if isinstance(source, RangeSource):
            return insert_range(smap, source.range, entry.name, mode)
        finditer = getattr(source.matcher, "finditer", None)
        if finditer is None:
            logger.warning(
                "Matcher for %r cannot enumerate matches; skipped", entry.name
            )
            return tuple(smap)
        matches = ((m.start(), m.end()) for m in finditer(text))
        return insert_matches(smap, text, matches, entry.name, mode)

    def _build(
        self,
        text: str,
        smap: Sequence[Segment],
        entries: list[PatternEntry],
        mode: InsertMode | None,
    ) -> SegmentMap:
        mode = mode or get_settings().patterns.mode
        result = tuple(smap)
        for entry in entries:
            result = self._fold(text, result, entry, mode)
        return result

    def build_matches_map(
        self,
        text: str,
        smap: Sequence[Segment] = (),
        mode: InsertMode | None = None,
    ) -> SegmentMap:
        entries = [e for e in self._entries.values() if not e.is_range]
        return self._build(text, smap, entries, mode)

    def build_ranges_map(
        self,
        text: str,
        smap: Sequence[Segment] = (),
        mode: InsertMode | None = None,
    ) -> SegmentMap:
        entries = [e for e in self._entries.values() if e.is_range]
        return self._build(text, smap, entries, mode)

    def build_map(
        self,
        text: str,
        smap: Sequence[Segment] = (),
        overlay_ranges: bool | None = None,
        mode: InsertMode | None = None,
    ) -> SegmentMap:
        """Fold every entry into *smap*.

        With *overlay_ranges* (the configured default), matchers go first
        and ranges after; otherwise entries fold in registration order.
        """
        if overlay_ranges is None:
            overlay_ranges = get_settings().patterns.overlay_ranges
        if overlay_ranges:
            result = self.build_matches_map(text, smap, mode)
            result = self.build_ranges_map(text, result, mode)
        else:
            result = self._build(text, smap, list(self._entries.values()), mode)
        logger.debug(
            "Built map of %d segment(s) for %d entries", len(result), len(self)
        )
        return result

    def markup_map(
        self,
        text: str,
        smap: Sequence[Segment],
        default_tag: str | None = None,
    ) -> str:
        """Render an already built map with this registry's styles and hook."""
        renderer = _RENDERERS[get_settings().render.strategy]
        return renderer(text, smap, self.styles(), self._hook, default_tag)

    def markup(
        self,
        text: str,
        smap: Sequence[Segment] = (),
        overlay_ranges: bool | None = None,
        mode: InsertMode | None = None,
        default_tag: str | None = None,
    ) -> str:
        """Build the map for *text* and render it."""
        built = self.build_map(text, smap, overlay_ranges, mode)
        return self.markup_map(text, built, default_tag)


def markup(
    text: str,
    defs: Mapping[str, Any],
    hook: MarkupHook | None = None,
    default_tag: str | None = None,
    overlay_ranges: bool | None = None,
) -> str:
    """Mark up *text* with a one-off registry built from *defs*."""
    registry = PatternRegistry(defs)
    if hook is not None:
        registry.set_markup_hook(hook)
    return registry.markup(
        text, overlay_ranges=overlay_ranges, default_tag=default_tag
    )
