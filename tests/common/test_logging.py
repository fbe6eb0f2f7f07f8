from __future__ import annotations

import logging

from addrsync.common.logging import configure_logging


def test_configure_logging_force_resets_level() -> None:
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = root.handlers[:]
    try:
        configure_logging(level=logging.DEBUG, force=True)

        assert root.level == logging.DEBUG
        assert root.handlers
        formatter = root.handlers[0].formatter
        assert formatter is not None
        assert formatter._fmt == "%(asctime)s %(levelname)s [%(name)s] %(message)s"  # noqa: SLF001
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
