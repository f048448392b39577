"""Example listener callbacks that can be referenced from configuration."""
from __future__ import annotations

import logging
from typing import Any, Dict

from .events import ChangeType
from .listeners import ChangeContext
from .store import EntryKind

logger = logging.getLogger(__name__)


def log_changes(context: ChangeContext, options: Dict[str, Any]) -> None:
    """Log one line per change record in the delivered batch."""

    level_name = str(options.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    message = options.get("message", "Filesystem change")

    for event in context.events:
        logger.log(level, "%s: %s", message, event.describe())


def summarize_changes(context: ChangeContext, options: Dict[str, Any]) -> None:
    """Summarize a batch as counts per change type plus the current tree size.

    Reads the store from the flushing thread; the totals are only exact once
    writers have stopped, e.g. on the flush issued by ``close()``.
    """

    level_name = str(options.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    counts: Dict[str, int] = {}
    for event in context.events:
        counts[event.change_type.value] = counts.get(event.change_type.value, 0) + 1

    ordered = [change_type.value for change_type in ChangeType if change_type.value in counts]
    summary = ", ".join(f"{name}: {counts[name]}" for name in ordered) or "<empty>"

    total_files = 0
    total_bytes = 0
    for _path, metadata in context.store.walk():
        if metadata.kind is EntryKind.FILE:
            total_files += 1
            total_bytes += metadata.size

    logger.log(
        level,
        "Batch of %s changes -> %s; %s files tracked, %.2f MB total",
        len(context.events),
        summary,
        total_files,
        total_bytes / (1024 * 1024) if total_bytes else 0.0,
    )
