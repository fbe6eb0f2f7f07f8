"""Public interface for the registry feed adapter."""

from __future__ import annotations

from .client import RESOURCE_PATHS, FeedAPIError, RegistryFeedClient
from .schema import (
    AccessAddressPayload,
    PageResponse,
    PostCodePayload,
    RoadPayload,
    UnitAddressPayload,
)
from .translator import FeedPayloadError, parse_record

__all__ = [
    "RESOURCE_PATHS",
    "AccessAddressPayload",
    "FeedAPIError",
    "FeedPayloadError",
    "PageResponse",
    "PostCodePayload",
    "RegistryFeedClient",
    "RoadPayload",
    "UnitAddressPayload",
    "parse_record",
]
