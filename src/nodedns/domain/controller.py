"""Event loop tying node notifications to DNS reconciliation.

Node notifications may arrive from any thread. They are funnelled through a
single queue and consumed by one worker, so a pass (list -> aggregate ->
change detection -> reconcile) always completes before the next one starts.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .aggregation import aggregate_addresses
from .change_detection import ChangeDetector
from .model import SelectionPolicy
from .ports.nodes import ListError, NodeEvent
from .selectors import EVERYTHING, LabelSelector

if TYPE_CHECKING:
    from .model import DnsNameTarget
    from .ports.nodes import NodeWatcher
    from .reconciliation import DnsReconciler

log = getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.5
WATCHER_JOIN_TIMEOUT_SECONDS = 5.0


class PassOutcome(StrEnum):
    LIST_FAILED = "list_failed"
    UNCHANGED = "unchanged"
    RECONCILED = "reconciled"
    PARTIAL = "partial"
    ERROR = "error"


@dataclass(slots=True)
class NodeDnsController:
    watcher: NodeWatcher
    reconciler: DnsReconciler
    targets: tuple[DnsNameTarget, ...]
    policy: SelectionPolicy = field(default_factory=SelectionPolicy)
    selector: LabelSelector = EVERYTHING
    detector: ChangeDetector = field(default_factory=ChangeDetector)
    _events: queue.Queue[NodeEvent] = field(
        init=False, repr=False, default_factory=queue.Queue["NodeEvent"]
    )

    def submit(self, event: NodeEvent) -> None:
        """Enqueue ``event``; safe to call from any thread."""

        self._events.put(event)

    @property
    def pending(self) -> int:
        return self._events.qsize()

    def run_pass(self) -> PassOutcome:
        """Run one full pass against the current node set."""

        log.info("resyncing")
        try:
            nodes = self.watcher.list_nodes(self.selector)
        except ListError as exc:
            log.error("failed to list nodes: %s", exc)
            return PassOutcome.LIST_FAILED

        addresses = aggregate_addresses(nodes, self.policy)
        log.info("ips: %s", list(addresses))
        if not self.detector.should_reconcile(addresses):
            return PassOutcome.UNCHANGED

        result = self.reconciler.reconcile(addresses, self.targets)
        if not result.ok:
            failed = [item.target.name for item in result.names if not item.ok]
            log.warning("failed to sync %s", ", ".join(failed))
            return PassOutcome.PARTIAL
        return PassOutcome.RECONCILED

    def drain(self) -> list[PassOutcome]:
        """Handle every event queued so far, one pass per event."""

        outcomes: list[PassOutcome] = []
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return outcomes
            outcomes.append(self._handle(event))

    def process(
        self,
        stop: threading.Event,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Consume events until ``stop`` is set; checked between passes."""

        while not stop.is_set():
            try:
                event = self._events.get(timeout=poll_interval)
            except queue.Empty:
                continue
            self._handle(event)

    def run(
        self,
        stop: threading.Event,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Start the watcher in a background thread and process its events here."""

        watcher_thread = threading.Thread(
            target=self._watch,
            args=(stop,),
            name="node-watcher",
            daemon=True,
        )
        watcher_thread.start()
        try:
            self.process(stop, poll_interval=poll_interval)
        finally:
            stop.set()
            watcher_thread.join(timeout=WATCHER_JOIN_TIMEOUT_SECONDS)
        log.info("controller stopped")

    def _watch(self, stop: threading.Event) -> None:
        try:
            self.watcher.watch(self.submit, stop=stop)
        except Exception:
            log.exception("node watcher stopped unexpectedly")
            stop.set()

    def _handle(self, event: NodeEvent) -> PassOutcome:
        log.debug("node %s %s", event.node_name, event.type)
        try:
            return self.run_pass()
        except Exception:
            log.exception("unexpected error during sync pass")
            return PassOutcome.ERROR
