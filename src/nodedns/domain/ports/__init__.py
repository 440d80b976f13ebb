"""Domain port definitions for adapters."""

from __future__ import annotations

from .dns import DnsProvider, ProviderError
from .nodes import EmitNodeEvent, ListError, NodeEvent, NodeEventType, NodeWatcher

__all__ = [
    "DnsProvider",
    "EmitNodeEvent",
    "ListError",
    "NodeEvent",
    "NodeEventType",
    "NodeWatcher",
    "ProviderError",
]
