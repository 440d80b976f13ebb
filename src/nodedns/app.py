"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from nodedns.adapters.cloudflare import CloudflareClient
from nodedns.adapters.kubernetes import KubernetesNodeWatcher
from nodedns.config import get_cloudflare_config, get_in_cluster_config
from nodedns.domain.controller import NodeDnsController
from nodedns.domain.model import RecordSettings, SelectionPolicy
from nodedns.domain.reconciliation import DnsReconciler
from nodedns.domain.selectors import selector_or_everything
from nodedns.domain.zones import resolve_targets

if TYPE_CHECKING:
    from threading import Event

    from nodedns.config import CloudflareConfig, KubernetesConfig, SyncConfig
    from nodedns.domain.ports import DnsProvider, NodeWatcher


log = getLogger(__name__)


def build_controller(
    config: SyncConfig,
    *,
    watcher: NodeWatcher | None = None,
    provider: DnsProvider | None = None,
    cloudflare: CloudflareConfig | None = None,
    kubernetes: KubernetesConfig | None = None,
) -> NodeDnsController:
    """Wire the configured adapters into a controller.

    Zone resolution happens here so that a name outside every root, or one
    matching several roots equally well, stops the process before any node is
    watched.
    """

    targets = resolve_targets(config.names, config.roots)
    for target in targets:
        log.info("dns name %s resolved to zone %s", target.name, target.zone)

    selector = selector_or_everything(config.node_selector)
    effective_watcher = watcher or KubernetesNodeWatcher(
        config=kubernetes or get_in_cluster_config(resync_seconds=config.resync_seconds),
        selector=selector,
    )
    effective_provider = provider or CloudflareClient(config=cloudflare or get_cloudflare_config())
    reconciler = DnsReconciler(
        effective_provider,
        RecordSettings(ttl=config.record_ttl, proxied=config.proxied),
    )
    return NodeDnsController(
        watcher=effective_watcher,
        reconciler=reconciler,
        targets=targets,
        policy=SelectionPolicy(
            skip_external=config.skip_external,
            use_internal=config.use_internal,
        ),
        selector=selector,
    )


def sync_node_dns(
    config: SyncConfig,
    *,
    stop: Event,
    watcher: NodeWatcher | None = None,
    provider: DnsProvider | None = None,
    cloudflare: CloudflareConfig | None = None,
    kubernetes: KubernetesConfig | None = None,
) -> None:
    """Keep the configured DNS names in sync with the cluster until ``stop`` is set."""

    controller = build_controller(
        config,
        watcher=watcher,
        provider=provider,
        cloudflare=cloudflare,
        kubernetes=kubernetes,
    )
    log.info(
        "Starting node DNS sync: names=%s, ttl=%s, proxied=%s, "
        "skip_external=%s, use_internal=%s, selector=%r",
        ",".join(target.name for target in controller.targets),
        config.record_ttl,
        config.proxied,
        config.skip_external,
        config.use_internal,
        str(controller.selector),
    )
    controller.run(stop)
