"""Value types for segmented text maps.

A text map is a flat, ordered partition of a text into segments.  Each
segment records every matcher contribution ("origin") active over it,
ordered outermost first.  Gaps between segments are unstyled text and are
not represented.

All types here are frozen: insertion functions return new maps rather than
mutating the ones they are given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class InsertMode(StrEnum):
    """How an inserted range treats existing segments it overlaps."""

    SEGMENT = "segment"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class Range:
    """Half-open ``[start, end)`` character offsets into a text.

    ``start > end`` is accepted at construction; call :meth:`normalized`
    before storing a range in a map.
    """

    start: int
    end: int

    @property
    def length(self) -> int:
        return abs(self.end - self.start)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def normalized(self) -> Range:
        """Return this range with ``start <= end``."""
        if self.start > self.end:
            return Range(self.end, self.start)
        return self

    def contains(self, pos: int) -> bool:
        """True if *pos* lies within the range, both ends inclusive."""
        return self.start <= pos <= self.end

    def overlaps(self, other: Range) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Origin:
    """One matcher's contribution to a segment.

    Attributes:
        name: The matcher's name, used as its rendering class.
        range: The full extent the origin was inserted with, before any
            splitting against other origins.
        sequence: Zero-based index of this match among the matches added
            by a single insertion call.
    """

    name: str
    range: Range
    sequence: int = 0


@dataclass(frozen=True)
class Segment:
    """A sub-range of text with a constant, ordered tuple of origins."""

    range: Range
    origins: tuple[Origin, ...]

    @property
    def start(self) -> int:
        return self.range.start

    @property
    def end(self) -> int:
        return self.range.end

    @property
    def is_exact(self) -> bool:
        """True if this segment is a single origin that was never split."""
        return len(self.origins) == 1 and self.origins[0].range == self.range

    def names(self) -> list[str]:
        return [origin.name for origin in self.origins]


type SegmentMap = tuple[Segment, ...]


def common_depth(seg: Segment, other: Segment | None) -> int:
    """Length of the shared leading run of origins between two segments.

    Tags for origins inside this run stay open across the segment boundary.
    """
    if other is None:
        return 0
    depth = 0
    for mine, theirs in zip(seg.origins, other.origins, strict=False):
        if mine != theirs:
            break
        depth += 1
    return depth
