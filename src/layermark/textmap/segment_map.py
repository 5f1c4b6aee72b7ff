"""Build segmented text maps by folding in ranges one insertion at a time.

Two insertion policies are supported:

``InsertMode.SEGMENT``
    An incoming range that overlaps existing segments splits each of them
    three ways: a left remainder, an intersection carrying the existing
    origins followed by the new one, and a right remainder that is carried
    forward and compared against the next existing segment::

        is0----ie0  is1--ie1        is2----ie2   existing segments
            ms--------------------------me       incoming range

        is0-ms-ie0                               left, middle
               ie0----------------------me       carried forward
                    is1--ie1
               ie0--is1--ie1                     left, middle
                         ie1------------me       carried forward
                                    is2----ie2
                         ie1--------is2-me       left, middle
                                        me-ie2   carried (existing tail)

    Earlier insertions therefore always sit outermost in ``origins``.

``InsertMode.OVERWRITE``
    The incoming range replaces whatever it covers.  Uncovered remainders of
    partially overlapped segments are kept unless ``lossy_overwrite`` is
    set, in which case any overlapped segment is dropped whole.

Segments before the affected region are copied unchanged, as are segments
after it.  Zero-length fragments are never stored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from layermark.textmap.models import InsertMode, Origin, Range, Segment, SegmentMap

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Fold state
# ---------------------------------------------------------------------------


class _Fold:
    """Cursor over an existing map while a batch of ranges is merged in.

    Attributes:
        existing: The map being merged into (never modified).
        out: Segments emitted so far, in ascending order.
        i: Index of the next unconsumed segment in ``existing``.
        sequence: Sequence number for the next inserted origin.
    """

    __slots__ = ("existing", "i", "lossy", "mode", "out", "sequence")

    def __init__(
        self,
        existing: Sequence[Segment],
        mode: InsertMode,
        *,
        lossy: bool = False,
    ) -> None:
        self.existing = existing
        self.mode = mode
        self.lossy = lossy
        self.out: list[Segment] = []
        self.i = 0
        self.sequence = 0

    def push(self, seg: Segment) -> None:
        if seg.start < seg.end:
            self.out.append(seg)

    def insert(self, rng: Range, name: str) -> None:
        """Merge one non-empty, normalised range into the fold."""
        existing = self.existing
        while self.i < len(existing) and existing[self.i].end <= rng.start:
            self.out.append(existing[self.i])
            self.i += 1

        origin = Origin(name=name, range=rng, sequence=self.sequence)
        self.sequence += 1

        # A previous range from the same batch may have left the tail of an
        # existing segment extending past this range's start.
        overlapped: list[Segment] = []
        if self.out and self.out[-1].end > rng.start:
            overlapped.append(self.out.pop())
        while self.i < len(existing) and existing[self.i].start < rng.end:
            overlapped.append(existing[self.i])
            self.i += 1

        if self.mode is InsertMode.OVERWRITE:
            self._overwrite(Segment(rng, (origin,)), overlapped)
        else:
            self._segment(Segment(rng, (origin,)), overlapped)

    def _segment(self, carried: Segment, overlapped: list[Segment]) -> None:
        for seg in overlapped:
            carried = self._split(carried, seg)
        self.push(carried)

    def _split(self, new: Segment, old: Segment) -> Segment:
        """Emit the left and middle fragments; return the right remainder."""
        left = Range(min(new.start, old.start), max(new.start, old.start))
        self.push(Segment(left, new.origins if new.start < old.start else old.origins))

        middle = Range(max(new.start, old.start), min(new.end, old.end))
        self.push(Segment(middle, old.origins + new.origins))

        right = Range(min(new.end, old.end), max(new.end, old.end))
        return Segment(right, new.origins if right.start < new.end else old.origins)

    def _overwrite(self, new: Segment, overlapped: list[Segment]) -> None:
        if self.lossy:
            self.push(new)
            return
        tail: Segment | None = None
        for seg in overlapped:
            if seg.start < new.start:
                self.push(Segment(Range(seg.start, new.start), seg.origins))
            if seg.end > new.end:
                tail = Segment(Range(new.end, seg.end), seg.origins)
        self.push(new)
        if tail is not None:
            self.push(tail)

    def finish(self) -> SegmentMap:
        self.out.extend(self.existing[self.i :])
        return tuple(self.out)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def insert_matches(
    smap: Sequence[Segment],
    text: str,
    matches: Iterable[tuple[int, int]],
    name: str,
    mode: InsertMode = InsertMode.SEGMENT,
    *,
    lossy_overwrite: bool = False,
) -> SegmentMap:
    """Merge a batch of ``(start, end)`` matches into *smap*.

    *matches* must be ordered and non-overlapping, as produced by
    ``re.Pattern.finditer``.  Empty matches are skipped and do not consume a
    sequence number.  Each match is merged against the map as updated by the
    matches before it.

    Args:
        smap: Map to merge into.  Not modified.
        text: The text the offsets refer to; matches are clipped to it.
        matches: Lazy sequence of ``(start, end)`` offsets.
        name: Origin name for every match in the batch.
        mode: Insertion policy.
        lossy_overwrite: In overwrite mode, drop partially overlapped
            segments whole instead of keeping their uncovered remainders.

    Returns:
        A new map.
    """
    fold = _Fold(smap, mode, lossy=lossy_overwrite)
    limit = len(text)
    for start, end in matches:
        start, end = min(start, limit), min(end, limit)
        if start >= end:
            continue
        fold.insert(Range(start, end), name)
    result = fold.finish()
    logger.debug(
        "Inserted %d %r match(es) (%s): %d -> %d segments",
        fold.sequence,
        name,
        mode,
        len(smap),
        len(result),
    )
    return result


def insert_range(
    smap: Sequence[Segment],
    rng: Range,
    name: str,
    mode: InsertMode = InsertMode.SEGMENT,
    *,
    lossy_overwrite: bool = False,
) -> SegmentMap:
    """Merge a single explicit range into *smap*.

    The range is normalised first, so ``Range(7, 3)`` inserts ``[3, 7)``.
    An empty range returns the map unchanged.
    """
    rng = rng.normalized()
    if rng.is_empty:
        return tuple(smap)
    fold = _Fold(smap, mode, lossy=lossy_overwrite)
    fold.insert(rng, name)
    return fold.finish()
