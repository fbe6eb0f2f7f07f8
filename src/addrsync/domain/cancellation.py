"""Cooperative cancellation for import runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import ImportCancelledError

if TYPE_CHECKING:
    from threading import Event


def raise_if_cancelled(cancel: Event | None, *, during: str = "import") -> None:
    if cancel is not None and cancel.is_set():
        raise ImportCancelledError(f"Cancelled during {during}")
