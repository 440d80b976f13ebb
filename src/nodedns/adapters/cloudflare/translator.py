"""Translate Cloudflare payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nodedns.domain.model import ProviderRecord

from .schema import DnsRecordPayload

if TYPE_CHECKING:
    from collections.abc import Mapping

type DnsRecordInput = DnsRecordPayload | Mapping[str, object]


def parse_record(payload: DnsRecordInput) -> ProviderRecord:
    record = (
        payload
        if isinstance(payload, DnsRecordPayload)
        else DnsRecordPayload.model_validate(payload)
    )
    return ProviderRecord(
        id=record.id,
        name=record.name,
        content=record.content,
        ttl=record.ttl,
        proxied=record.proxied,
    )
