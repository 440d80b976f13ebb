"""Translate Kubernetes Node payloads into domain snapshots."""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from nodedns.domain.model import AddressType, NodeAddress, NodeSnapshot

from .schema import NodePayload

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .schema import NodeAddressPayload, NodeCondition

log = getLogger(__name__)

READY_CONDITION = "Ready"
CONDITION_TRUE = "True"

type NodePayloadInput = NodePayload | Mapping[str, object]


def is_ready(conditions: Iterable[NodeCondition]) -> bool:
    return any(
        condition.type == READY_CONDITION and condition.status == CONDITION_TRUE
        for condition in conditions
    )


def _parse_addresses(payloads: Iterable[NodeAddressPayload]) -> tuple[NodeAddress, ...]:
    addresses: list[NodeAddress] = []
    for payload in payloads:
        try:
            address_type = AddressType(payload.type)
        except ValueError:
            log.debug("ignoring node address of unknown type %s", payload.type)
            continue
        addresses.append(NodeAddress(type=address_type, address=payload.address))
    return tuple(addresses)


def parse_node(payload: NodePayloadInput) -> NodeSnapshot:
    node = payload if isinstance(payload, NodePayload) else NodePayload.model_validate(payload)
    return NodeSnapshot(
        name=node.metadata.name,
        ready=is_ready(node.status.conditions),
        addresses=_parse_addresses(node.status.addresses),
        labels=MappingProxyType(dict(node.metadata.labels)),
    )
