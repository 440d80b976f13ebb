"""Pydantic models describing the Cloudflare v4 API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CloudflareBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApiMessage(CloudflareBaseModel):
    code: int | None = None
    message: str = ""


class ResultInfo(CloudflareBaseModel):
    page: int = 1
    per_page: int = 0
    count: int = 0
    total_count: int = 0
    total_pages: int = 1


class Envelope(CloudflareBaseModel):
    success: bool
    errors: list[ApiMessage] = Field(default_factory=list[ApiMessage])
    messages: list[ApiMessage] = Field(default_factory=list[ApiMessage])
    result_info: ResultInfo | None = None

    def error_summary(self) -> str:
        if not self.errors:
            return "unknown error"
        return "; ".join(f"{error.code}: {error.message}" for error in self.errors)

    def first_error_code(self) -> int | None:
        return self.errors[0].code if self.errors else None


class ZonePayload(CloudflareBaseModel):
    id: str
    name: str
    status: str | None = None


class ZoneListResponse(Envelope):
    result: list[ZonePayload] = Field(default_factory=list[ZonePayload])


class DnsRecordPayload(CloudflareBaseModel):
    id: str
    name: str
    type: str
    content: str
    ttl: int = 1
    proxied: bool = False
    zone_id: str | None = None


class DnsRecordListResponse(Envelope):
    result: list[DnsRecordPayload] = Field(default_factory=list[DnsRecordPayload])


class DnsRecordResponse(Envelope):
    result: DnsRecordPayload | None = None


class DeleteResult(CloudflareBaseModel):
    id: str


class DeleteResponse(Envelope):
    result: DeleteResult | None = None


class DnsRecordWrite(CloudflareBaseModel):
    """Request body for creating or patching an address record."""

    type: str = "A"
    name: str | None = None
    content: str
    ttl: int
    proxied: bool
