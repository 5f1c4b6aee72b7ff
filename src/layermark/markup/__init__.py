"""Layered markup output for segment maps."""

from layermark.markup.escape import escape_attr, escape_text
from layermark.markup.renderer import render, render_patched
from layermark.markup.styles import (
    MATCH_PLACEHOLDER,
    ClassStyle,
    MarkupHook,
    TagContext,
)

__all__ = [
    "MATCH_PLACEHOLDER",
    "ClassStyle",
    "MarkupHook",
    "TagContext",
    "escape_attr",
    "escape_text",
    "render",
    "render_patched",
]
