"""Map configured DNS names onto the zones that own them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nodedns.config.errors import ConfigurationError

from .model import DnsNameTarget

if TYPE_CHECKING:
    from collections.abc import Iterable


class ZoneResolutionError(ConfigurationError):
    """Raised when a configured name cannot be mapped to exactly one zone."""


def normalize_domain(value: str) -> str:
    return value.strip().rstrip(".").lower()


def _is_within(name: str, root: str) -> bool:
    return name == root or name.endswith(f".{root}")


def resolve_zone(name: str, roots: Iterable[str]) -> str:
    """Return the most specific root that ``name`` equals or is a subdomain of."""

    normalized = normalize_domain(name)
    if not normalized:
        raise ZoneResolutionError("dns name must not be empty")

    matches = [
        root
        for root in (normalize_domain(candidate) for candidate in roots)
        if root and _is_within(normalized, root)
    ]
    if not matches:
        raise ZoneResolutionError(f"dns name {name!r} is not within any of the dns roots")

    longest = max(len(root) for root in matches)
    best = [root for root in matches if len(root) == longest]
    if len(best) > 1:
        raise ZoneResolutionError(
            f"dns name {name!r} matches {len(best)} equally specific dns roots: {best[0]!r}"
        )
    return best[0]


def resolve_targets(names: Iterable[str], roots: Iterable[str]) -> tuple[DnsNameTarget, ...]:
    """Resolve every configured name, keeping configuration order."""

    root_list = [root for root in roots if normalize_domain(root)]
    if not root_list:
        raise ZoneResolutionError("at least one dns root is required")

    targets: dict[str, DnsNameTarget] = {}
    for name in names:
        normalized = normalize_domain(name)
        if normalized in targets:
            continue
        targets[normalized] = DnsNameTarget(name=normalized, zone=resolve_zone(name, root_list))

    if not targets:
        raise ZoneResolutionError("at least one dns name is required")
    return tuple(targets.values())
