from __future__ import annotations

import threading

import pytest

from nodedns.app import build_controller, sync_node_dns
from nodedns.config import build_sync_config
from nodedns.domain.ports import NodeEvent, NodeEventType
from nodedns.domain.zones import ZoneResolutionError
from tests.helpers.nodes import make_node
from tests.support.dns import FakeDnsProvider, FakeNodeWatcher


def test_build_controller_resolves_zones_and_settings(
    fake_watcher: FakeNodeWatcher, fake_provider: FakeDnsProvider
) -> None:
    config = build_sync_config(
        names="nodes.eu.example.com,nodes.example.org",
        roots="example.com,eu.example.com,example.org",
        proxied="true",
        node_selector="role in (edge)",
    )

    controller = build_controller(config, watcher=fake_watcher, provider=fake_provider)

    assert [(target.name, target.zone) for target in controller.targets] == [
        ("nodes.eu.example.com", "eu.example.com"),
        ("nodes.example.org", "example.org"),
    ]
    assert controller.reconciler.settings.ttl == 1
    assert controller.reconciler.settings.proxied is True
    assert str(controller.selector) == "role in (edge)"


def test_build_controller_invalid_selector_selects_everything(
    fake_watcher: FakeNodeWatcher, fake_provider: FakeDnsProvider
) -> None:
    config = build_sync_config(
        names="nodes.example.com", roots="example.com", node_selector="role in edge"
    )

    controller = build_controller(config, watcher=fake_watcher, provider=fake_provider)

    assert controller.selector.is_everything


def test_build_controller_rejects_name_outside_roots(
    fake_watcher: FakeNodeWatcher, fake_provider: FakeDnsProvider
) -> None:
    config = build_sync_config(names="nodes.example.org", roots="example.com")

    with pytest.raises(ZoneResolutionError):
        build_controller(config, watcher=fake_watcher, provider=fake_provider)


def test_sync_node_dns_reconciles_until_stopped(fake_provider: FakeDnsProvider) -> None:
    stop = threading.Event()

    class _OneShotWatcher(FakeNodeWatcher):
        def list_nodes(self, selector=None):  # noqa: ANN001, ANN202
            nodes = super().list_nodes(selector)
            stop.set()
            return nodes

    watcher = _OneShotWatcher(
        nodes=[
            make_node("a", external=["1.2.3.4"]),
            make_node("b", external=["5.6.7.8"], ready=False),
        ],
        events=[NodeEvent(NodeEventType.ADDED, "a")],
    )
    fake_provider.seed("example.com", "nodes.example.com", ["9.9.9.9"])
    config = build_sync_config(names="nodes.example.com", roots="example.com")

    sync_node_dns(config, stop=stop, watcher=watcher, provider=fake_provider)

    assert fake_provider.contents("example.com", "nodes.example.com") == ["1.2.3.4"]
