"""Execute a reconciliation plan against the DNS provider.

Operations run in a fixed order: deletes, then creates, then metadata
updates. Deleting first keeps the name below provider-side record limits and
frees contents that are about to be re-added. Every operation stands on its
own: a provider failure is logged and recorded, and the remaining operations
still run. Nothing is retried within a pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from nodedns.domain.ports.dns import ProviderError

if TYPE_CHECKING:
    from nodedns.domain.model import DnsNameTarget, RecordSettings
    from nodedns.domain.ports.dns import DnsProvider

    from .plan import ReconciliationPlan

log = getLogger(__name__)


class Action(StrEnum):
    DELETE = "delete"
    CREATE = "create"
    UPDATE = "update"


@dataclass(frozen=True, slots=True, kw_only=True)
class OperationFailure:
    action: Action
    content: str
    record_id: str | None
    error: ProviderError


@dataclass(slots=True)
class ApplyResult:
    """Summary of the operations performed for one name."""

    deleted: int = 0
    created: int = 0
    updated: int = 0
    failures: list[OperationFailure] = field(default_factory=list["OperationFailure"])

    @property
    def applied(self) -> int:
        return self.deleted + self.created + self.updated

    @property
    def ok(self) -> bool:
        return not self.failures


def apply_plan(
    provider: DnsProvider,
    target: DnsNameTarget,
    plan: ReconciliationPlan,
    settings: RecordSettings,
) -> ApplyResult:
    result = ApplyResult()

    for record in plan.to_delete:
        try:
            provider.delete_record(target.zone, record.id)
        except ProviderError as exc:
            _record_failure(result, target, Action.DELETE, record.content, record.id, exc)
            continue
        log.info("deleted %s record %s -> %s", target.name, record.id, record.content)
        result.deleted += 1

    for content in plan.to_create:
        try:
            created = provider.create_record(
                target.zone, target.name, content, settings.ttl, settings.proxied
            )
        except ProviderError as exc:
            _record_failure(result, target, Action.CREATE, content, None, exc)
            continue
        log.info("created %s record %s -> %s", target.name, created.id, content)
        result.created += 1

    for record in plan.to_update:
        try:
            provider.update_record(
                target.zone, record.id, record.content, settings.ttl, settings.proxied
            )
        except ProviderError as exc:
            _record_failure(result, target, Action.UPDATE, record.content, record.id, exc)
            continue
        log.info(
            "updated %s record %s -> %s (ttl=%s, proxied=%s)",
            target.name,
            record.id,
            record.content,
            settings.ttl,
            settings.proxied,
        )
        result.updated += 1

    return result


def _record_failure(  # noqa: PLR0913
    result: ApplyResult,
    target: DnsNameTarget,
    action: Action,
    content: str,
    record_id: str | None,
    error: ProviderError,
) -> None:
    log.error("failed to %s %s record %s: %s", action, target.name, content, error)
    result.failures.append(
        OperationFailure(action=action, content=content, record_id=record_id, error=error)
    )
