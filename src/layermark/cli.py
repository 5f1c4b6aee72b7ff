"""Command-line entry point: render a text file with a JSON pattern file.

Usage::

    layermark notes.txt patterns.json -o notes.html

The pattern file is a JSON object in the form accepted by
``PatternRegistry.add``.  Attribute values may be strings (with ``$_&``
standing for the matched text) or ``{"extract": "/regex/"}`` objects.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from layermark import _setup_logging
from layermark.config import get_settings
from layermark.patterns.registry import PatternRegistry
from layermark.textmap.models import InsertMode

console = Console(stderr=True)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layermark",
        description="Mark up a text file with layered, overlapping patterns.",
    )
    parser.add_argument("text", type=Path, help="UTF-8 text file to mark up")
    parser.add_argument("patterns", type=Path, help="JSON pattern definitions")
    parser.add_argument(
        "-o", "--output", type=Path, help="write markup here instead of stdout"
    )
    parser.add_argument(
        "--no-overlay-ranges",
        action="store_true",
        help="fold range entries in registration order instead of last",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="later patterns replace overlapped regions instead of nesting",
    )
    return parser


def load_pattern_defs(path: Path) -> dict[str, Any]:
    """Read a JSON pattern file.

    Raises:
        OSError: The file cannot be read.
        ValueError: The file is not a JSON object.
    """
    defs = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(defs, dict):
        msg = f"{path} must contain a JSON object of pattern definitions"
        raise ValueError(msg)
    return defs


def main(argv: list[str] | None = None) -> int:
    """Run the command; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    _setup_logging(settings.app.log_dir, settings.app.log_level)

    try:
        text = args.text.read_text(encoding="utf-8")
        defs = load_pattern_defs(args.patterns)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot read input:[/] {escape(str(exc))}")
        return 1

    registry = PatternRegistry()
    for name in registry.add(defs):
        console.print(f"[yellow]Skipped pattern[/] {escape(repr(name))} (see log)")

    html = registry.markup(
        text,
        overlay_ranges=False if args.no_overlay_ranges else None,
        mode=InsertMode.OVERWRITE if args.overwrite else None,
    )

    if args.output is None:
        sys.stdout.write(html)
        return 0

    args.output.write_text(html, encoding="utf-8")
    summary = Text()
    summary.append(f"{len(registry)} pattern(s)", style="bold")
    summary.append(f" over {len(text)} chars -> ")
    summary.append(str(args.output), style="green")
    console.print(Panel(summary, title="layermark", border_style="blue"))
    return 0


def run() -> None:
    """Console-script wrapper around :func:`main`."""
    sys.exit(main())
