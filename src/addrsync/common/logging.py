"""Shared logging helpers for addrsync."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with defaults suited to scheduled runs.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: INFO level
    and a terse, timestamped format. Pass ``force=True`` to reconfigure from tests or
    when the CLI raises verbosity.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=force,
    )
