"""layermark - layered markup for overlapping text matches.

Overlays named matchers (regular expressions or explicit ranges) onto plain
text, segments the regions where they overlap, and renders correctly nested
tags for every region.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from layermark.markup import ClassStyle, TagContext, render, render_patched
from layermark.patterns import PatternRegistry, markup
from layermark.search import SearchSession
from layermark.textmap import (
    InsertMode,
    Origin,
    PositionIndex,
    Range,
    Segment,
    insert_matches,
    insert_range,
    replace,
    replace_all,
)

__version__ = "0.1.0"

__all__ = [
    "ClassStyle",
    "InsertMode",
    "Origin",
    "PatternRegistry",
    "PositionIndex",
    "Range",
    "SearchSession",
    "Segment",
    "TagContext",
    "insert_matches",
    "insert_range",
    "markup",
    "render",
    "render_patched",
    "replace",
    "replace_all",
]


def _setup_logging(log_dir: Path, level: str = "INFO") -> Path:
    """Configure logging to both console and rotating file.

    Returns the log file path.  Calling again is a no-op.
    """
    root_logger = logging.getLogger()
    log_file = log_dir / "layermark.log"
    if any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers):
        return log_file

    log_dir.mkdir(parents=True, exist_ok=True)
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.debug("Logging configured. Log file: %s", log_file.absolute())
    return log_file
