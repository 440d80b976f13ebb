"""Synchronisation settings shared by the controller and the reconciler."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_flag, parse_bool, parse_positive_int, split_list
from .errors import MissingConfigurationError
from .kubernetes import DEFAULT_RESYNC_SECONDS

DEFAULT_TTL_SECONDS = 120
# Cloudflare reports TTL 1 ("automatic") for every proxied record
AUTOMATIC_TTL = 1


@dataclass(frozen=True, slots=True)
class SyncConfig:
    names: tuple[str, ...]
    roots: tuple[str, ...]
    ttl: int = DEFAULT_TTL_SECONDS
    proxied: bool = False
    skip_external: bool = False
    use_internal: bool = False
    node_selector: str = ""
    resync_seconds: int = DEFAULT_RESYNC_SECONDS

    def __post_init__(self) -> None:
        if not self.names:
            raise MissingConfigurationError("dns name is required")
        if not self.roots:
            raise MissingConfigurationError("dns root is required")

    @property
    def record_ttl(self) -> int:
        return AUTOMATIC_TTL if self.proxied else self.ttl


def build_sync_config(
    *,
    names: str | None,
    roots: str | None,
    ttl: str | None = None,
    proxied: str | None = None,
    skip_external: bool = False,
    use_internal: bool = False,
    node_selector: str | None = None,
    resync_seconds: str | None = None,
) -> SyncConfig:
    """Build a :class:`SyncConfig` from raw string settings, applying defaults."""

    return SyncConfig(
        names=split_list(names),
        roots=split_list(roots),
        ttl=parse_positive_int(ttl, default=DEFAULT_TTL_SECONDS, setting="CF_TTL"),
        proxied=parse_bool(proxied, default=False, setting="CF_PROXY"),
        skip_external=skip_external,
        use_internal=use_internal,
        node_selector=(node_selector or "").strip(),
        resync_seconds=parse_positive_int(
            resync_seconds, default=DEFAULT_RESYNC_SECONDS, setting="RESYNC_SECONDS"
        ),
    )


def get_sync_config() -> SyncConfig:
    return build_sync_config(
        names=os.getenv("DNS_NAME"),
        roots=os.getenv("DNS_ROOTS"),
        ttl=os.getenv("CF_TTL"),
        proxied=os.getenv("CF_PROXY"),
        skip_external=env_flag("SKIP_EXTERNAL_IP"),
        use_internal=env_flag("USE_INTERNAL_IP"),
        node_selector=os.getenv("NODE_SELECTOR"),
        resync_seconds=os.getenv("RESYNC_SECONDS"),
    )
