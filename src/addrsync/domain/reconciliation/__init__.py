"""Reconciliation of feed records against the local address register."""

from __future__ import annotations

from .apply import HANDLERS, KindHandler, handler_for, reconcile
from .classify import STATUS_PARTITIONS, StatusPartition, classify
from .contracts import (
    AMBIGUOUS_TRANSITION,
    ApplyOutcome,
    ApplyResult,
    ChangeOperation,
    Classification,
    DeletedParent,
    Resolution,
    ResolutionStatus,
    Resolved,
    ResolvedReferences,
    UnresolvedReference,
)
from .mapping import map_address_status, map_road_status
from .resolve import resolve_access_address, resolve_references, resolve_unit_address
from .snapshot import IndexSnapshot, KnownIds

__all__ = [
    "AMBIGUOUS_TRANSITION",
    "HANDLERS",
    "STATUS_PARTITIONS",
    "ApplyOutcome",
    "ApplyResult",
    "ChangeOperation",
    "Classification",
    "DeletedParent",
    "IndexSnapshot",
    "KindHandler",
    "KnownIds",
    "Resolution",
    "ResolutionStatus",
    "Resolved",
    "ResolvedReferences",
    "StatusPartition",
    "UnresolvedReference",
    "classify",
    "handler_for",
    "map_address_status",
    "map_road_status",
    "reconcile",
    "resolve_access_address",
    "resolve_references",
    "resolve_unit_address",
]
