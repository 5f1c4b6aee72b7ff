"""Pattern registration: named matchers and ranges folded into text maps."""

from layermark.patterns.regex_strings import (
    PatternError,
    compile_pattern_string,
    parse_pattern_string,
)
from layermark.patterns.registry import (
    PatternDef,
    PatternEntry,
    PatternRegistry,
    markup,
)

__all__ = [
    "PatternDef",
    "PatternEntry",
    "PatternError",
    "PatternRegistry",
    "compile_pattern_string",
    "markup",
    "parse_pattern_string",
]
