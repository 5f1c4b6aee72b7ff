"""Segmented text maps built from overlapping matcher ranges."""

from layermark.textmap.models import (
    InsertMode,
    Origin,
    Range,
    Segment,
    SegmentMap,
    common_depth,
)
from layermark.textmap.position_index import PositionIndex
from layermark.textmap.replace import replace, replace_all
from layermark.textmap.segment_map import insert_matches, insert_range

__all__ = [
    "InsertMode",
    "Origin",
    "PositionIndex",
    "Range",
    "Segment",
    "SegmentMap",
    "common_depth",
    "insert_matches",
    "insert_range",
    "replace",
    "replace_all",
]
