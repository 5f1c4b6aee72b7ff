"""Pattern strings: ``/regex/flags`` or plain literals.

A string wrapped in slashes with optional trailing flags is a regular
expression; anything else matches itself literally::

    compile_pattern_string("/\\d+/i")   # re.compile(r"\\d+", re.IGNORECASE)
    compile_pattern_string("a.b")       # re.compile(r"a\\.b")

Matching is always global (``finditer``), so a ``g`` flag is accepted and
ignored.
"""

from __future__ import annotations

import re

_REGEX_STRING = re.compile(r"/(?P<pattern>.+)/(?P<flags>\w*)", re.DOTALL)

_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
}


class PatternError(ValueError):
    """A pattern string could not be compiled."""


def parse_pattern_string(source: str) -> tuple[str, str] | None:
    """Split ``/pattern/flags`` into ``(pattern, flags)``.

    Returns ``None`` when *source* is a literal rather than a regex string.
    """
    parts = _REGEX_STRING.fullmatch(source)
    if parts is None:
        return None
    return parts.group("pattern"), parts.group("flags")


def compile_pattern_string(source: str) -> re.Pattern[str]:
    """Compile a regex string or an escaped literal.

    Raises:
        PatternError: Unknown flag or invalid regular expression.
    """
    parts = parse_pattern_string(source)
    if parts is None:
        return re.compile(re.escape(source))

    pattern, flag_chars = parts
    flags = re.NOFLAG
    for char in flag_chars:
        if char == "g":
            continue
        if char not in _FLAGS:
            msg = f"Unsupported flag {char!r} in pattern {source!r}"
            raise PatternError(msg)
        flags |= _FLAGS[char]
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        msg = f"Invalid pattern {source!r}: {exc}"
        raise PatternError(msg) from exc

