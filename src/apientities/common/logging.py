"""Logging setup for applications that use apientities."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Attach a root handler that shows apientities records next to the caller's own.

    The library only emits through ``logging.getLogger(__name__)`` loggers under
    ``apientities``; it never configures logging on import. Applications without
    their own setup can call this once. ``level=logging.DEBUG`` also shows
    repository instantiation and skipped relationship entries. ``force=True``
    replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
