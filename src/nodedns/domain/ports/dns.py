"""Ports for reading and writing address records at a DNS provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from nodedns.domain.model import ProviderRecord


class ProviderError(RuntimeError):
    """Raised when a DNS provider call fails."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@runtime_checkable
class DnsProvider(Protocol):
    """Read/write access to the address records of a zone."""

    def list_records(self, zone: str, name: str) -> list[ProviderRecord]: ...

    def create_record(
        self,
        zone: str,
        name: str,
        content: str,
        ttl: int,
        proxied: bool,  # noqa: FBT001
    ) -> ProviderRecord: ...

    def update_record(
        self,
        zone: str,
        record_id: str,
        content: str,
        ttl: int,
        proxied: bool,  # noqa: FBT001
    ) -> None: ...

    def delete_record(self, zone: str, record_id: str) -> None: ...


__all__ = ["DnsProvider", "ProviderError"]
