"""Cloudflare configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

CLOUDFLARE_BASE_URL = "https://api.cloudflare.com/client/v4/"
CLOUDFLARE_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class CloudflareCredentials:
    """API token, or the legacy email + global key pair."""

    api_token: str | None = None
    api_email: str | None = None
    api_key: str | None = None

    def __post_init__(self) -> None:
        if not self.api_token and not (self.api_email and self.api_key):
            raise MissingConfigurationError("cloudflare api token or email+key is required")

    def headers(self) -> dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {"X-Auth-Email": self.api_email or "", "X-Auth-Key": self.api_key or ""}


@dataclass(frozen=True, slots=True)
class CloudflareConfig:
    credentials: CloudflareCredentials
    resilience: ResilienceConfig


def build_cloudflare_config(
    credentials: CloudflareCredentials,
    *,
    base_url: str = CLOUDFLARE_BASE_URL,
) -> CloudflareConfig:
    resilience = ResilienceConfig(
        name="cloudflare",
        base_url=base_url,
        timeout_seconds=CLOUDFLARE_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        default_headers={"Content-Type": "application/json", **credentials.headers()},
    )
    return CloudflareConfig(credentials=credentials, resilience=resilience)


def get_cloudflare_config() -> CloudflareConfig:
    credentials = CloudflareCredentials(
        api_token=os.getenv("CF_API_TOKEN") or None,
        api_email=os.getenv("CF_API_EMAIL") or None,
        api_key=os.getenv("CF_API_KEY") or None,
    )
    return build_cloudflare_config(credentials)
