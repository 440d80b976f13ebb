"""Public interface for the Cloudflare adapter."""

from __future__ import annotations

from .client import CloudflareAPIError, CloudflareClient
from .schema import DnsRecordPayload, DnsRecordWrite, Envelope
from .translator import DnsRecordInput, parse_record

__all__ = [
    "CloudflareAPIError",
    "CloudflareClient",
    "DnsRecordInput",
    "DnsRecordPayload",
    "DnsRecordWrite",
    "Envelope",
    "parse_record",
]
