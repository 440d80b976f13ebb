"""Derive the desired address set from observed nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .model import AddressType, DesiredAddressSet

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import NodeSnapshot, SelectionPolicy


def address_sources(policy: SelectionPolicy) -> tuple[AddressType, ...]:
    """Return the address types to consult, in priority order.

    The first type that yields at least one address wins; later types are
    fallbacks and are never mixed into a non-empty result.
    """

    sources: list[AddressType] = []
    if not policy.skip_external:
        sources.append(AddressType.EXTERNAL_IP)
    if policy.use_internal:
        sources.append(AddressType.INTERNAL_IP)
    return tuple(sources)


def collect_addresses(nodes: Iterable[NodeSnapshot], address_type: AddressType) -> list[str]:
    """All addresses of ``address_type`` on ready nodes, in observation order."""

    return [
        address
        for node in nodes
        if node.ready
        for address in node.addresses_of(address_type)
    ]


def aggregate_addresses(
    nodes: Iterable[NodeSnapshot],
    policy: SelectionPolicy,
) -> DesiredAddressSet:
    """Map ``nodes`` to a sorted, duplicate-free tuple of addresses."""

    snapshot = tuple(nodes)
    for address_type in address_sources(policy):
        addresses = collect_addresses(snapshot, address_type)
        if addresses:
            return tuple(sorted(set(addresses)))
    return ()
