"""HTTP client for the Cloudflare v4 DNS API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from nodedns.adapters.http_resilience import ResilientClient
from nodedns.domain.ports.dns import DnsProvider, ProviderError

from .schema import (
    DeleteResponse,
    DnsRecordListResponse,
    DnsRecordResponse,
    DnsRecordWrite,
    Envelope,
    ZoneListResponse,
)
from .translator import parse_record

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from nodedns.config.cloudflare import CloudflareConfig
    from nodedns.config.http_resilience import ResilienceConfig
    from nodedns.domain.model import ProviderRecord

log = getLogger(__name__)

RECORD_TYPE = "A"
PAGE_SIZE = 100


class CloudflareAPIError(ProviderError):
    """Raised when the Cloudflare API rejects a request or cannot be reached."""


class CloudflareClient:
    """Address-record access for the zones of one Cloudflare account."""

    def __init__(
        self,
        *,
        config: CloudflareConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        # zone ids never change; record state is always fetched live
        self._zone_ids: dict[str, str] = {}

    def list_records(self, zone: str, name: str) -> list[ProviderRecord]:
        return asyncio.run(self._list_records_async(zone=zone, name=name))

    def create_record(
        self,
        zone: str,
        name: str,
        content: str,
        ttl: int,
        proxied: bool,  # noqa: FBT001
    ) -> ProviderRecord:
        body = DnsRecordWrite(name=name, content=content, ttl=ttl, proxied=proxied)
        return asyncio.run(self._create_record_async(zone=zone, body=body))

    def update_record(
        self,
        zone: str,
        record_id: str,
        content: str,
        ttl: int,
        proxied: bool,  # noqa: FBT001
    ) -> None:
        body = DnsRecordWrite(content=content, ttl=ttl, proxied=proxied)
        asyncio.run(self._update_record_async(zone=zone, record_id=record_id, body=body))

    def delete_record(self, zone: str, record_id: str) -> None:
        asyncio.run(self._delete_record_async(zone=zone, record_id=record_id))

    async def _list_records_async(self, *, zone: str, name: str) -> list[ProviderRecord]:
        records: list[ProviderRecord] = []
        page = 1
        async with self._client_factory(self._resilience) as client:
            zone_id = await self._resolve_zone_id(client, zone)
            while True:
                payload = await self._perform_request(
                    client=client,
                    method="GET",
                    path=f"zones/{zone_id}/dns_records",
                    params={
                        "type": RECORD_TYPE,
                        "name": name,
                        "page": page,
                        "per_page": PAGE_SIZE,
                    },
                    model=DnsRecordListResponse,
                )
                records.extend(
                    parse_record(item) for item in payload.result if item.type == RECORD_TYPE
                )
                info = payload.result_info
                if info is None or page >= info.total_pages:
                    break
                page += 1
        return records

    async def _create_record_async(self, *, zone: str, body: DnsRecordWrite) -> ProviderRecord:
        async with self._client_factory(self._resilience) as client:
            zone_id = await self._resolve_zone_id(client, zone)
            payload = await self._perform_request(
                client=client,
                method="POST",
                path=f"zones/{zone_id}/dns_records",
                json=body.model_dump(exclude_none=True),
                model=DnsRecordResponse,
            )
        if payload.result is None:
            raise CloudflareAPIError("Cloudflare did not return the created record")
        return parse_record(payload.result)

    async def _update_record_async(
        self,
        *,
        zone: str,
        record_id: str,
        body: DnsRecordWrite,
    ) -> None:
        async with self._client_factory(self._resilience) as client:
            zone_id = await self._resolve_zone_id(client, zone)
            await self._perform_request(
                client=client,
                method="PATCH",
                path=f"zones/{zone_id}/dns_records/{record_id}",
                json=body.model_dump(exclude_none=True),
                model=DnsRecordResponse,
            )

    async def _delete_record_async(self, *, zone: str, record_id: str) -> None:
        async with self._client_factory(self._resilience) as client:
            zone_id = await self._resolve_zone_id(client, zone)
            await self._perform_request(
                client=client,
                method="DELETE",
                path=f"zones/{zone_id}/dns_records/{record_id}",
                model=DeleteResponse,
            )

    async def _resolve_zone_id(self, client: ResilientClient, zone: str) -> str:
        cached = self._zone_ids.get(zone)
        if cached is not None:
            return cached

        payload = await self._perform_request(
            client=client,
            method="GET",
            path="zones",
            params={"name": zone},
            model=ZoneListResponse,
        )
        for item in payload.result:
            if item.name == zone:
                self._zone_ids[zone] = item.id
                return item.id
        raise CloudflareAPIError(f"Cloudflare zone {zone!r} not found")

    async def _perform_request[TEnvelope: Envelope](  # noqa: PLR0913
        self,
        *,
        client: ResilientClient,
        method: str,
        path: str,
        model: type[TEnvelope],
        params: Mapping[str, str | int] | None = None,
        json: object = None,
    ) -> TEnvelope:
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise CloudflareAPIError(f"{method} {path} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            if response.is_error:
                raise CloudflareAPIError(
                    f"{method} {path} returned HTTP {response.status_code}",
                    code=response.status_code,
                )
            raise CloudflareAPIError("Unexpected Cloudflare response payload")

        try:
            envelope = Envelope.model_validate(payload)
            if response.is_error or not envelope.success:
                log.error(f"Cloudflare API error on {method} {path}: {envelope.error_summary()}")
                raise CloudflareAPIError(
                    envelope.error_summary(),
                    code=envelope.first_error_code() or response.status_code,
                )
            return model.model_validate(payload)
        except ValidationError as exc:
            raise CloudflareAPIError(f"Unexpected Cloudflare response payload: {exc}") from exc


if TYPE_CHECKING:
    _provider_check: DnsProvider = CloudflareClient(config=...)  # type: ignore[arg-type]
