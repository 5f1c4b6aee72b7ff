"""Text substitution over exact segments of a map.

Only exact segments are replaced: a single origin whose own range equals the
segment range.  Replacing part of a split origin is not meaningful, so such
segments are left as they are.  No function here raises; "not applicable"
shows up as an unchanged result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from layermark.textmap.models import Segment


def replace_all(
    text: str,
    smap: Sequence[Segment],
    replacements: Mapping[str, str],
) -> str:
    """Replace every exact segment by the value registered for its origin name.

    The new text is rebuilt in one left-to-right pass, so earlier length
    changes never shift later offsets.  Segments whose name has no entry in
    *replacements* are copied unchanged.
    """
    if not smap:
        return text
    parts: list[str] = []
    pos = 0
    for seg in smap:
        parts.append(text[pos : seg.start])
        name = seg.origins[0].name if seg.origins else None
        if seg.is_exact and name in replacements:
            parts.append(replacements[name])
        else:
            parts.append(text[seg.start : seg.end])
        pos = seg.end
    parts.append(text[pos:])
    return "".join(parts)


def replace(
    text: str,
    smap: Sequence[Segment],
    index: int,
    replacement: str,
) -> str:
    """Replace the text of segment *index* if that segment is exact."""
    if not 0 <= index < len(smap):
        return text
    seg = smap[index]
    if not seg.is_exact:
        return text
    return text[: seg.start] + replacement + text[seg.end :]
