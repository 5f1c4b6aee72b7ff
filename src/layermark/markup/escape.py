"""Escaping for text and attribute values written into markup."""

from __future__ import annotations


def escape_text(text: str) -> str:
    """Escape ``&``, ``>`` and ``<`` in that order.

    ``&`` must go first or the entities produced for the other two would be
    escaped a second time.
    """
    return text.replace("&", "&amp;").replace(">", "&gt;").replace("<", "&lt;")


def escape_attr(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute."""
    return escape_text(value).replace('"', "&quot;")
