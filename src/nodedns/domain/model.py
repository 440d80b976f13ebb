"""Value types shared by the node-to-DNS pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

type DesiredAddressSet = tuple[str, ...]


class AddressType(StrEnum):
    """Kubernetes node address types."""

    EXTERNAL_IP = "ExternalIP"
    INTERNAL_IP = "InternalIP"
    HOSTNAME = "Hostname"
    EXTERNAL_DNS = "ExternalDNS"
    INTERNAL_DNS = "InternalDNS"


@dataclass(frozen=True, slots=True)
class NodeAddress:
    type: AddressType
    address: str


def _empty_labels() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class NodeSnapshot:
    """A cluster node as observed at one point in time."""

    name: str
    ready: bool = False
    addresses: tuple[NodeAddress, ...] = ()
    labels: Mapping[str, str] = field(default_factory=_empty_labels)

    def addresses_of(self, address_type: AddressType) -> Iterator[str]:
        for entry in self.addresses:
            if entry.type is address_type:
                yield entry.address


@dataclass(frozen=True, slots=True)
class SelectionPolicy:
    """Which node address types feed the desired address set."""

    skip_external: bool = False
    use_internal: bool = False


@dataclass(frozen=True, slots=True)
class RecordSettings:
    """Metadata every managed address record must carry."""

    ttl: int
    proxied: bool = False


@dataclass(frozen=True, slots=True)
class ProviderRecord:
    """An address record as reported by the DNS provider."""

    id: str
    name: str
    content: str
    ttl: int
    proxied: bool = False

    def matches(self, settings: RecordSettings) -> bool:
        return self.ttl == settings.ttl and self.proxied == settings.proxied


@dataclass(frozen=True, slots=True)
class DnsNameTarget:
    """A configured FQDN paired with the zone that owns it."""

    name: str
    zone: str
