"""Application configuration helpers."""

from __future__ import annotations

from .cloudflare import (
    CloudflareConfig,
    CloudflareCredentials,
    build_cloudflare_config,
    get_cloudflare_config,
)
from .env import env_flag, parse_bool, parse_positive_int, require_env_vars, split_list
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .kubernetes import KubernetesConfig, build_kubernetes_config, get_in_cluster_config
from .logging import configure_logging
from .sync import DEFAULT_TTL_SECONDS, SyncConfig, build_sync_config, get_sync_config

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CloudflareConfig",
    "CloudflareCredentials",
    "ConfigurationError",
    "KubernetesConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "build_cloudflare_config",
    "build_kubernetes_config",
    "build_sync_config",
    "configure_logging",
    "env_flag",
    "get_cloudflare_config",
    "get_in_cluster_config",
    "get_sync_config",
    "parse_bool",
    "parse_positive_int",
    "require_env_vars",
    "split_list",
]
