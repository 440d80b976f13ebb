"""Suppress reconciliation passes when the desired addresses did not change."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import DesiredAddressSet

log = getLogger(__name__)


class ChangeDetector:
    """Remembers the last desired address set that was handed to the reconciler.

    The watcher re-delivers the full node set periodically, so most passes see
    the same addresses again. Only the controller's worker writes to this
    object; it lives as long as the process.
    """

    def __init__(self, initial: DesiredAddressSet = ()) -> None:
        self._last: DesiredAddressSet = tuple(initial)

    @property
    def last_known(self) -> DesiredAddressSet:
        return self._last

    def should_reconcile(self, new_set: DesiredAddressSet) -> bool:
        if new_set == self._last:
            log.info("no change detected")
            return False
        self._last = tuple(new_set)
        return True
