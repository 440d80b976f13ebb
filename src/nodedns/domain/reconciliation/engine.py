"""Reconcile every configured name against the DNS provider.

Each pass is stateless: records are listed fresh for every name, a plan is
built from that listing and applied. A transient failure therefore heals on
the next pass without any remembered state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from nodedns.domain.model import RecordSettings
from nodedns.domain.ports.dns import ProviderError
from nodedns.domain.zones import resolve_targets

from .apply import ApplyResult, apply_plan
from .plan import ReconciliationPlan, build_plan

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nodedns.domain.model import DesiredAddressSet, DnsNameTarget
    from nodedns.domain.ports.dns import DnsProvider

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class NameResult:
    target: DnsNameTarget
    plan: ReconciliationPlan | None = None
    applied: ApplyResult = field(default_factory=ApplyResult)
    fetch_error: ProviderError | None = None

    @property
    def ok(self) -> bool:
        return self.fetch_error is None and self.applied.ok


@dataclass(slots=True)
class ReconcileResult:
    names: list[NameResult] = field(default_factory=list["NameResult"])

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.names)

    @property
    def operations(self) -> int:
        return sum(result.applied.applied for result in self.names)

    def for_name(self, name: str) -> NameResult | None:
        return next((result for result in self.names if result.target.name == name), None)


@dataclass(slots=True)
class DnsReconciler:
    provider: DnsProvider
    settings: RecordSettings

    def reconcile(
        self,
        desired: DesiredAddressSet,
        targets: Iterable[DnsNameTarget],
    ) -> ReconcileResult:
        result = ReconcileResult()
        for target in targets:
            result.names.append(self.reconcile_target(desired, target))
        return result

    def reconcile_target(self, desired: DesiredAddressSet, target: DnsNameTarget) -> NameResult:
        try:
            existing = self.provider.list_records(target.zone, target.name)
        except ProviderError as exc:
            log.error("failed to list records for %s in %s: %s", target.name, target.zone, exc)
            return NameResult(target=target, fetch_error=exc)

        plan = build_plan(target.name, desired, existing, self.settings)
        if plan.is_empty:
            log.info("%s is up to date (%d records)", target.name, len(desired))
            return NameResult(target=target, plan=plan)

        log.info(
            "syncing %s: delete=%d create=%d update=%d",
            target.name,
            len(plan.to_delete),
            len(plan.to_create),
            len(plan.to_update),
        )
        applied = apply_plan(self.provider, target, plan, self.settings)
        return NameResult(target=target, plan=plan, applied=applied)


def reconcile_names(  # noqa: PLR0913
    provider: DnsProvider,
    desired: DesiredAddressSet,
    names: Iterable[str],
    roots: Iterable[str],
    *,
    ttl: int,
    proxied: bool,
) -> ReconcileResult:
    """Resolve the zone of every name, then reconcile them all in order."""

    targets = resolve_targets(names, roots)
    reconciler = DnsReconciler(provider, RecordSettings(ttl=ttl, proxied=proxied))
    return reconciler.reconcile(desired, targets)
