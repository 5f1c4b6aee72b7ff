"""Find and replace over a text using a pattern string.

A :class:`SearchSession` keeps the match map for one query over the current
text plus a "current match" cursor.  Replacing rebuilds the map for the new
text and moves the cursor to the following match.
"""

from __future__ import annotations

import logging

from layermark.patterns.regex_strings import compile_pattern_string
from layermark.textmap.models import Range, SegmentMap
from layermark.textmap.position_index import PositionIndex
from layermark.textmap.replace import replace, replace_all
from layermark.textmap.segment_map import insert_matches

logger = logging.getLogger(__name__)

SEARCH_MATCH_CLASS = "search-match"


class SearchSession:
    """Matches of *query* over *text*, with a movable current match.

    Raises:
        PatternError: *query* is not a valid pattern string.
    """

    def __init__(
        self, text: str, query: str, name: str = SEARCH_MATCH_CLASS
    ) -> None:
        self.query = query
        self.name = name
        self.pattern = compile_pattern_string(query)
        self.current: int | None = None
        self._load(text)

    def _load(self, text: str) -> None:
        self.text = text
        found = ((m.start(), m.end()) for m in self.pattern.finditer(text))
        self.matches: SegmentMap = insert_matches((), text, found, self.name)
        self._index = PositionIndex(self.matches)

    @property
    def count(self) -> int:
        return len(self.matches)

    @property
    def current_range(self) -> Range | None:
        if self.current is None:
            return None
        return self.matches[self.current].range

    def move_to(self, pos: int) -> int | None:
        """Make the match nearest to *pos* current."""
        self.current = self._index.nearest(pos)
        return self.current

    def next(self) -> int | None:
        return self._step(1)

    def prev(self) -> int | None:
        return self._step(-1)

    def _step(self, direction: int) -> int | None:
        if not self.matches:
            self.current = None
        elif self.current is None:
            self.current = 0 if direction > 0 else self.count - 1
        else:
            self.current = (self.current + direction) % self.count
        return self.current

    def replace_current(self, replacement: str) -> tuple[str, Range | None]:
        """Replace the current match.

        Returns the new text and the range the replacement now occupies, or
        the unchanged text and ``None`` when there is no current match.  The
        cursor moves to the first match after the replacement, wrapping to
        the first match of the text.
        """
        if self.current is None:
            return self.text, None
        old = self.matches[self.current].range
        new_text = replace(self.text, self.matches, self.current, replacement)
        replaced = Range(old.start, old.end + len(new_text) - len(self.text))
        self._load(new_text)
        self.current = next(
            (i for i, seg in enumerate(self.matches) if seg.start >= replaced.end),
            0 if self.matches else None,
        )
        logger.debug(
            "Replaced %r at %s; %d match(es) left", self.query, old, self.count
        )
        return new_text, replaced

    def replace_all(self, replacement: str) -> str:
        """Replace every match and clear the cursor."""
        new_text = replace_all(self.text, self.matches, {self.name: replacement})
        self._load(new_text)
        self.current = None
        return new_text
