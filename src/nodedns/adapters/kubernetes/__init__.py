"""Public interface for the Kubernetes adapter."""

from __future__ import annotations

from .client import KubernetesAPIError, KubernetesNodeWatcher, WatchExpiredError
from .schema import NodeListResponse, NodePayload, WatchEvent
from .translator import NodePayloadInput, is_ready, parse_node

__all__ = [
    "KubernetesAPIError",
    "KubernetesNodeWatcher",
    "NodeListResponse",
    "NodePayload",
    "NodePayloadInput",
    "WatchEvent",
    "WatchExpiredError",
    "is_ready",
    "parse_node",
]
