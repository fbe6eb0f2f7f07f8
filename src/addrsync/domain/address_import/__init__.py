"""Full and change import engines plus the orchestrator that drives them."""

from __future__ import annotations

from .change_import import (
    ChangeImportEngine,
    ChangeImportResult,
    KindCounters,
    order_changes,
    ordering_key,
)
from .full_import import FullImportEngine, FullImportResult
from .orchestrator import ImportOrchestrator, ImportRunResult, RunPath

__all__ = [
    "ChangeImportEngine",
    "ChangeImportResult",
    "FullImportEngine",
    "FullImportResult",
    "ImportOrchestrator",
    "ImportRunResult",
    "KindCounters",
    "RunPath",
    "order_changes",
    "ordering_key",
]
