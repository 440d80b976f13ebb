"""Ports for observing cluster nodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from threading import Event

    from nodedns.domain.model import NodeSnapshot
    from nodedns.domain.selectors import LabelSelector


class ListError(RuntimeError):
    """Raised when the current node set cannot be enumerated."""


class NodeEventType(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"
    RESYNC = "resync"


@dataclass(frozen=True, slots=True)
class NodeEvent:
    """Notification that a node changed, or was re-delivered during a resync."""

    type: NodeEventType
    node_name: str


type EmitNodeEvent = Callable[[NodeEvent], None]


@runtime_checkable
class NodeWatcher(Protocol):
    """Maintains the current node set and streams change notifications."""

    def list_nodes(self, selector: LabelSelector | None = None) -> list[NodeSnapshot]:
        """Return the current nodes matching ``selector``; raises :class:`ListError`."""
        ...

    def watch(self, emit: EmitNodeEvent, *, stop: Event) -> None:
        """Block until ``stop`` is set, calling ``emit`` for every notification."""
        ...


__all__ = ["EmitNodeEvent", "ListError", "NodeEvent", "NodeEventType", "NodeWatcher"]
