"""Kubernetes API configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
DEFAULT_RESYNC_SECONDS = 60
KUBERNETES_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class KubernetesConfig:
    resilience: ResilienceConfig
    resync_seconds: int = DEFAULT_RESYNC_SECONDS


def build_kubernetes_config(
    *,
    base_url: str,
    token: str | None = None,
    ca_file: str | None = None,
    resync_seconds: int = DEFAULT_RESYNC_SECONDS,
) -> KubernetesConfig:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    # watch connections stay open for a whole resync window
    resilience = ResilienceConfig(
        name="kubernetes",
        base_url=base_url,
        timeout_seconds=max(KUBERNETES_TIMEOUT_SECONDS, resync_seconds + 10.0),
        retry=RetryPolicy(total=2),
        default_headers=headers,
        ca_file=ca_file,
    )
    return KubernetesConfig(resilience=resilience, resync_seconds=resync_seconds)


def get_in_cluster_config(
    *,
    resync_seconds: int = DEFAULT_RESYNC_SECONDS,
    service_account_dir: Path = SERVICE_ACCOUNT_DIR,
) -> KubernetesConfig:
    """Build the configuration used by pods talking to their own API server."""

    values = require_env_vars(("KUBERNETES_SERVICE_HOST", "KUBERNETES_SERVICE_PORT"))
    host = values["KUBERNETES_SERVICE_HOST"].strip()
    port = values["KUBERNETES_SERVICE_PORT"].strip()
    if ":" in host:
        host = f"[{host}]"

    token_path = service_account_dir / "token"
    try:
        token = token_path.read_text().strip()
    except OSError as exc:
        raise ConfigurationError(f"unable to read service account token: {exc}") from exc

    ca_path = service_account_dir / "ca.crt"
    return build_kubernetes_config(
        base_url=f"https://{host}:{port}",
        token=token,
        ca_file=str(ca_path) if ca_path.exists() else None,
        resync_seconds=resync_seconds,
    )
