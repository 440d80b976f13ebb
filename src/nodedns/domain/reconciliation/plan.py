"""Diff desired addresses against provider records for one name.

The plan is an ephemeral value: it is rebuilt from a fresh record listing on
every pass and never carried over, so a failed operation is simply planned
again the next time the name is reconciled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from nodedns.domain.model import DesiredAddressSet, ProviderRecord, RecordSettings


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationPlan:
    """Operations that make the records of ``name`` equal the desired set."""

    name: str
    to_delete: tuple[ProviderRecord, ...] = ()
    to_create: tuple[str, ...] = ()
    to_update: tuple[ProviderRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.to_delete or self.to_create or self.to_update)

    @property
    def operation_count(self) -> int:
        return len(self.to_delete) + len(self.to_create) + len(self.to_update)


def build_plan(
    name: str,
    desired: DesiredAddressSet,
    existing: Iterable[ProviderRecord],
    settings: RecordSettings,
) -> ReconciliationPlan:
    """Compute the create/delete/update sets for ``name``.

    Records whose content is not desired are deleted. When the provider holds
    more than one record with the same content, the record with the lowest id
    is kept and the others are deleted, so every address ends up with exactly
    one record. Kept records whose ttl or proxy flag differ from ``settings``
    are updated in place.
    """

    wanted = set(desired)
    kept: dict[str, ProviderRecord] = {}
    to_delete: list[ProviderRecord] = []

    for record in sorted(existing, key=lambda item: (item.content, item.id)):
        if record.content not in wanted or record.content in kept:
            to_delete.append(record)
            continue
        kept[record.content] = record

    to_create = tuple(sorted(wanted.difference(kept)))
    to_update = tuple(record for record in kept.values() if not record.matches(settings))

    return ReconciliationPlan(
        name=name,
        to_delete=tuple(to_delete),
        to_create=to_create,
        to_update=to_update,
    )
