"""Informer-style node watcher backed by the Kubernetes API.

The watcher lists the nodes once, keeps them in a local store and then follows
the watch stream. Every watch window is bounded by the resync interval; when a
window closes, every stored node is re-delivered as a resync event before the
watch resumes from the last seen resource version. Expired resource versions
(HTTP 410) and connection failures fall back to a fresh list.
"""

from __future__ import annotations

import asyncio
import threading
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from nodedns.adapters.http_resilience import ResilientClient
from nodedns.domain.ports.nodes import ListError, NodeEvent, NodeEventType, NodeWatcher
from nodedns.domain.selectors import EVERYTHING, LabelSelector

from .schema import NodeListResponse, NodePayload, StatusPayload, WatchEvent
from .translator import parse_node

if TYPE_CHECKING:
    from collections.abc import Callable

    from nodedns.config.http_resilience import ResilienceConfig
    from nodedns.config.kubernetes import KubernetesConfig
    from nodedns.domain.model import NodeSnapshot
    from nodedns.domain.ports.nodes import EmitNodeEvent

log = getLogger(__name__)

NODES_PATH = "/api/v1/nodes"
HTTP_GONE = 410
DEFAULT_RETRY_DELAY_SECONDS = 5.0

_EVENT_TYPES: dict[str, NodeEventType] = {
    "ADDED": NodeEventType.ADDED,
    "MODIFIED": NodeEventType.UPDATED,
    "DELETED": NodeEventType.DELETED,
}


class KubernetesAPIError(RuntimeError):
    """Raised when the Kubernetes API returns an unexpected response."""


class WatchExpiredError(KubernetesAPIError):
    """Raised when the watched resource version is too old to resume from."""


class KubernetesNodeWatcher:
    """Keeps a local copy of the cluster nodes and streams their changes."""

    def __init__(
        self,
        *,
        config: KubernetesConfig,
        selector: LabelSelector = EVERYTHING,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
    ) -> None:
        self._resilience = config.resilience
        self._resync_seconds = config.resync_seconds
        self._selector = selector
        self._client_factory = client_factory or ResilientClient
        self._retry_delay = retry_delay
        self._lock = threading.Lock()
        self._store: dict[str, NodeSnapshot] = {}
        self._synced = False
        self._resource_version: str | None = None

    @property
    def has_synced(self) -> bool:
        with self._lock:
            return self._synced

    def list_nodes(self, selector: LabelSelector | None = None) -> list[NodeSnapshot]:
        with self._lock:
            if not self._synced:
                raise ListError("node cache has not synced yet")
            nodes = list(self._store.values())
        effective = selector or EVERYTHING
        return sorted(
            (node for node in nodes if effective.matches(node.labels)),
            key=lambda node: node.name,
        )

    def watch(self, emit: EmitNodeEvent, *, stop: threading.Event) -> None:
        asyncio.run(self._watch_async(emit, stop))

    async def _watch_async(self, emit: EmitNodeEvent, stop: threading.Event) -> None:
        async with self._client_factory(self._resilience) as client:
            while not stop.is_set():
                try:
                    if self._resource_version is None:
                        await self._relist(client, emit)
                    await self._watch_window(client, emit, stop)
                except WatchExpiredError:
                    log.info("node watch expired, relisting")
                    self._resource_version = None
                    continue
                except (httpx.HTTPError, KubernetesAPIError) as exc:
                    log.warning("node watch failed: %s", exc)
                    self._resource_version = None
                    await asyncio.to_thread(stop.wait, self._retry_delay)
                    continue
                if not stop.is_set():
                    self._resync(emit)

    async def _relist(self, client: ResilientClient, emit: EmitNodeEvent) -> None:
        response = await client.get(NODES_PATH, params=self._selector_params())
        if response.is_error:
            raise KubernetesAPIError(f"listing nodes returned HTTP {response.status_code}")
        try:
            payload = NodeListResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise KubernetesAPIError(f"unexpected node list payload: {exc}") from exc

        listed = {snapshot.name: snapshot for snapshot in map(parse_node, payload.items)}
        with self._lock:
            previous = self._store
            self._store = listed
            self._synced = True
            self._resource_version = payload.metadata.resource_version or ""
        log.info("listed %d nodes", len(listed))

        for name in sorted(previous.keys() - listed.keys()):
            emit(NodeEvent(NodeEventType.DELETED, name))
        for name in listed:
            event_type = NodeEventType.RESYNC if name in previous else NodeEventType.ADDED
            emit(NodeEvent(event_type, name))

    async def _watch_window(
        self,
        client: ResilientClient,
        emit: EmitNodeEvent,
        stop: threading.Event,
    ) -> None:
        params = {
            **self._selector_params(),
            "watch": "1",
            "allowWatchBookmarks": "true",
            "timeoutSeconds": str(self._resync_seconds),
        }
        if self._resource_version:
            params["resourceVersion"] = self._resource_version

        async with client.stream("GET", NODES_PATH, params=params) as response:
            if response.status_code == HTTP_GONE:
                raise WatchExpiredError("resource version expired")
            if response.is_error:
                await response.aread()
                raise KubernetesAPIError(f"watching nodes returned HTTP {response.status_code}")
            async for line in response.aiter_lines():
                if stop.is_set():
                    return
                if line.strip():
                    self._handle_line(line, emit)

    def _handle_line(self, line: str, emit: EmitNodeEvent) -> None:
        try:
            event = WatchEvent.model_validate_json(line)
            if event.type == "ERROR":
                status = StatusPayload.model_validate(event.object)
                if status.code == HTTP_GONE:
                    raise WatchExpiredError(status.message or "resource version expired")
                raise KubernetesAPIError(f"watch error {status.code}: {status.message}")
            node = NodePayload.model_validate(event.object)
        except ValidationError as exc:
            raise KubernetesAPIError(f"unexpected watch event: {exc}") from exc

        resource_version = node.metadata.resource_version
        if event.type == "BOOKMARK":
            if resource_version:
                self._resource_version = resource_version
            return

        snapshot = parse_node(node)
        event_type = _EVENT_TYPES[event.type]
        with self._lock:
            if event_type is NodeEventType.DELETED:
                self._store.pop(snapshot.name, None)
            else:
                self._store[snapshot.name] = snapshot
            if resource_version:
                self._resource_version = resource_version
        emit(NodeEvent(event_type, snapshot.name))

    def _resync(self, emit: EmitNodeEvent) -> None:
        with self._lock:
            names = sorted(self._store)
        log.debug("resyncing %d nodes", len(names))
        for name in names:
            emit(NodeEvent(NodeEventType.RESYNC, name))

    def _selector_params(self) -> dict[str, str]:
        if self._selector.is_everything:
            return {}
        return {"labelSelector": str(self._selector)}


if TYPE_CHECKING:
    _watcher_check: NodeWatcher = KubernetesNodeWatcher(config=...)  # type: ignore[arg-type]
