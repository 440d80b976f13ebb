from __future__ import annotations

import pytest

from nodedns.domain.model import DnsNameTarget, RecordSettings
from nodedns.domain.reconciliation import DnsReconciler, reconcile_names
from nodedns.domain.zones import ZoneResolutionError
from tests.support.dns import FakeDnsProvider

ZONE = "example.com"
NAME = "nodes.example.com"
TARGET = DnsNameTarget(name=NAME, zone=ZONE)
SETTINGS = RecordSettings(ttl=120, proxied=False)


def test_reconcile_converges_provider_records() -> None:
    provider = FakeDnsProvider()
    provider.seed(ZONE, NAME, ["9.9.9.9", "1.2.3.4"])
    reconciler = DnsReconciler(provider, SETTINGS)

    result = reconciler.reconcile(("1.2.3.4", "5.6.7.8"), [TARGET])

    assert result.ok
    assert provider.writes() == [
        ("delete", ZONE, "rec-1"),
        ("create", ZONE, NAME, "5.6.7.8"),
    ]
    assert provider.contents(ZONE, NAME) == ["1.2.3.4", "5.6.7.8"]


def test_second_reconcile_without_changes_issues_no_operations() -> None:
    provider = FakeDnsProvider()
    provider.seed(ZONE, NAME, ["9.9.9.9"], ttl=300)
    reconciler = DnsReconciler(provider, SETTINGS)

    reconciler.reconcile(("1.2.3.4", "5.6.7.8"), [TARGET])
    writes_after_first = len(provider.writes())
    second = reconciler.reconcile(("1.2.3.4", "5.6.7.8"), [TARGET])

    assert len(provider.writes()) == writes_after_first
    assert second.operations == 0
    name_result = second.for_name(NAME)
    assert name_result is not None
    assert name_result.plan is not None
    assert name_result.plan.is_empty


def test_operations_run_deletes_then_creates_then_updates() -> None:
    provider = FakeDnsProvider()
    provider.seed(ZONE, NAME, ["1.2.3.4"], ttl=60)
    provider.seed(ZONE, NAME, ["9.9.9.9"])
    reconciler = DnsReconciler(provider, SETTINGS)

    reconciler.reconcile(("1.2.3.4", "5.6.7.8"), [TARGET])

    assert [call[0] for call in provider.writes()] == ["delete", "create", "update"]


def test_failed_operation_does_not_block_the_rest_of_the_plan() -> None:
    provider = FakeDnsProvider(failing={("delete", "9.9.9.9"), ("create", "5.6.7.8")})
    provider.seed(ZONE, NAME, ["9.9.9.9", "8.8.8.8"])
    reconciler = DnsReconciler(provider, SETTINGS)

    result = reconciler.reconcile(("1.2.3.4", "5.6.7.8"), [TARGET])

    assert not result.ok
    name_result = result.for_name(NAME)
    assert name_result is not None
    assert name_result.applied.deleted == 1
    assert name_result.applied.created == 1
    assert sorted(failure.content for failure in name_result.applied.failures) == [
        "5.6.7.8",
        "9.9.9.9",
    ]
    assert provider.contents(ZONE, NAME) == ["1.2.3.4", "9.9.9.9"]


def test_failed_pass_heals_on_the_next_pass() -> None:
    provider = FakeDnsProvider(failing={("create", "5.6.7.8")})
    reconciler = DnsReconciler(provider, SETTINGS)

    first = reconciler.reconcile(("5.6.7.8",), [TARGET])
    provider.failing.clear()
    second = reconciler.reconcile(("5.6.7.8",), [TARGET])

    assert not first.ok
    assert second.ok
    assert provider.contents(ZONE, NAME) == ["5.6.7.8"]


def test_listing_failure_for_one_name_does_not_block_other_names() -> None:
    other = DnsNameTarget(name="edge.example.com", zone=ZONE)
    provider = FakeDnsProvider(failing_lists={NAME})
    reconciler = DnsReconciler(provider, SETTINGS)

    result = reconciler.reconcile(("1.2.3.4",), [TARGET, other])

    failed = result.for_name(NAME)
    assert failed is not None
    assert failed.fetch_error is not None
    assert failed.plan is None
    assert provider.contents(ZONE, "edge.example.com") == ["1.2.3.4"]
    assert not result.ok


def test_empty_desired_set_removes_all_records() -> None:
    provider = FakeDnsProvider()
    provider.seed(ZONE, NAME, ["1.2.3.4", "5.6.7.8"])

    DnsReconciler(provider, SETTINGS).reconcile((), [TARGET])

    assert provider.contents(ZONE, NAME) == []


def test_reconcile_names_resolves_zones_before_syncing() -> None:
    provider = FakeDnsProvider()

    result = reconcile_names(
        provider,
        ("1.2.3.4",),
        ["node.cluster.example.com"],
        ["example.com", "cluster.example.com"],
        ttl=120,
        proxied=False,
    )

    assert result.ok
    assert provider.contents("cluster.example.com", "node.cluster.example.com") == ["1.2.3.4"]


def test_reconcile_names_rejects_names_outside_every_root() -> None:
    provider = FakeDnsProvider()

    with pytest.raises(ZoneResolutionError):
        reconcile_names(
            provider, ("1.2.3.4",), ["node.example.org"], ["example.com"], ttl=120, proxied=False
        )

    assert provider.calls == []
