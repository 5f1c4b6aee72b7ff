"""Offset queries over a segment map.

Every query starts from one binary search for the first segment whose end
lies beyond the position, then refines the answer.  A position counts as
inside a segment when ``start <= pos < end``; a segment's end offset belongs
to the gap (or segment) that follows it.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from layermark.textmap.models import Segment


class PositionIndex:
    """Binary-search lookups by text offset.  All queries are O(log n)."""

    __slots__ = ("_ends", "_map")

    def __init__(self, smap: Sequence[Segment]) -> None:
        self._map = smap
        self._ends = [seg.end for seg in smap]

    def __len__(self) -> int:
        return len(self._map)

    def _next(self, pos: int) -> int:
        """Index of the first segment whose end exceeds *pos* (may be ``len``)."""
        return bisect_right(self._ends, pos)

    def _inside(self, pos: int, i: int) -> bool:
        return 0 <= i < len(self._map) and self._map[i].range.contains(pos)

    def before(self, pos: int) -> int | None:
        """Index of the segment containing *pos*, else the last one before it.

        Positions ahead of the first segment clamp to 0.  Returns ``None``
        for an empty map.
        """
        if not self._map:
            return None
        i = self._next(pos)
        if self._inside(pos, i):
            return i
        return max(0, i - 1)

    def after(self, pos: int) -> int:
        """Index of the first segment that begins after *pos*.

        If *pos* lies inside a segment, that segment is skipped.  Returns
        ``len(map)`` when no segment follows.
        """
        i = self._next(pos)
        if self._inside(pos, i):
            i += 1
        return i

    def nearest(self, pos: int) -> int | None:
        """Index of the segment closest to *pos*.

        In a gap, the left segment wins when *pos* is before the gap's
        midpoint; at or past the midpoint the right one does.
        """
        if not self._map:
            return None
        i = min(self._next(pos), len(self._map) - 1)
        if i > 0 and not self._inside(pos, i):
            prev_end = self._map[i - 1].end
            midpoint = prev_end + (self._map[i].start - prev_end) / 2
            if pos < midpoint:
                i -= 1
        return i

    def at(self, pos: int) -> int | None:
        """Index of the segment containing *pos*, or ``None`` in a gap."""
        i = self._next(pos)
        if self._inside(pos, i):
            return i
        return None

    def segment_at(self, pos: int) -> Segment | None:
        i = self.at(pos)
        return None if i is None else self._map[i]
