#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from nodedns.app import sync_node_dns
from nodedns.config import (
    CloudflareCredentials,
    ConfigurationError,
    build_cloudflare_config,
    build_sync_config,
    configure_logging,
    env_flag,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Keep Cloudflare A records in sync with the ready nodes of a cluster"
    )
    parser.add_argument(
        "--dns-roots",
        default=os.getenv("DNS_ROOTS"),
        help="the dns root domain, comma-separated for multiple",
    )
    parser.add_argument(
        "--dns-name",
        default=os.getenv("DNS_NAME"),
        help=(
            "the FQDN name for the nodes, comma-separated for multiple. "
            "Needs to be within one of the roots in --dns-roots"
        ),
    )
    parser.add_argument(
        "--cloudflare-api-email",
        default=os.getenv("CF_API_EMAIL"),
        help="the email address to use for cloudflare",
    )
    parser.add_argument(
        "--cloudflare-api-key",
        default=os.getenv("CF_API_KEY"),
        help="the key to use for cloudflare",
    )
    parser.add_argument(
        "--cloudflare-api-token",
        default=os.getenv("CF_API_TOKEN"),
        help="the token to use for cloudflare",
    )
    parser.add_argument(
        "--cloudflare-proxy",
        default=os.getenv("CF_PROXY"),
        help="enable cloudflare proxy on dns (default false)",
    )
    parser.add_argument(
        "--cloudflare-ttl",
        default=os.getenv("CF_TTL"),
        help="ttl for dns (default 120)",
    )
    parser.add_argument(
        "--use-internal-ip",
        action="store_true",
        default=env_flag("USE_INTERNAL_IP"),
        help="use internal ips too if external ip's are not available",
    )
    parser.add_argument(
        "--skip-external-ip",
        action="store_true",
        default=env_flag("SKIP_EXTERNAL_IP"),
        help="don't sync external IPs (use in conjunction with --use-internal-ip)",
    )
    parser.add_argument(
        "--node-selector",
        default=os.getenv("NODE_SELECTOR"),
        help="node selector query",
    )
    parser.add_argument(
        "--resync-seconds",
        default=os.getenv("RESYNC_SECONDS"),
        help="interval between full re-deliveries of the node set (default 60)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO").upper(),
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="logging verbosity (default: %(default)s)",
    )
    return parser


def _install_signal_handlers(stop: threading.Event) -> None:
    def handler(signal_received: int, _frame: FrameType | None) -> None:
        log.info("Received signal %s, shutting down", signal_received)
        stop.set()

    signal(SIGINT, handler)
    signal(SIGTERM, handler)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else sys.argv[1:])
    configure_logging(level=args.log_level)

    try:
        config = build_sync_config(
            names=args.dns_name,
            roots=args.dns_roots,
            ttl=args.cloudflare_ttl,
            proxied=args.cloudflare_proxy,
            skip_external=args.skip_external_ip,
            use_internal=args.use_internal_ip,
            node_selector=args.node_selector,
            resync_seconds=args.resync_seconds,
        )
        cloudflare = build_cloudflare_config(
            CloudflareCredentials(
                api_token=args.cloudflare_api_token or None,
                api_email=args.cloudflare_api_email or None,
                api_key=args.cloudflare_api_key or None,
            )
        )
    except ConfigurationError as exc:
        parser.print_usage(sys.stderr)
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)

    stop = threading.Event()
    _install_signal_handlers(stop)

    try:
        sync_node_dns(config, stop=stop, cloudflare=cloudflare)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


if __name__ == "__main__":
    main()
