"""
Production — Expenditure Reconciliation

Diffs the expenditures persisted for a production record against the list
sent with an update and returns the write-set needed to make them match.
No database access; production.services applies the plan.

@file production/reconciliation.py
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class ExpenditurePlan:
    """Three disjoint write lists for one record's expenditures."""

    to_create: list[dict[str, Any]] = field(default_factory=list)
    to_update: list[dict[str, Any]] = field(default_factory=list)
    to_delete: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)


def reconcile_expenditures(
    persisted: Iterable[Any],
    desired: list[Mapping[str, Any]] | None,
) -> ExpenditurePlan:
    """
    persisted: current rows (anything with id, name, amount).
    desired: incoming entries {id?, name, amount}; None leaves rows untouched.

    Entries carrying the id of a persisted row update it (only when name or
    amount differ). Entries without an id, or with an id that does not belong
    to this record, are created. Persisted rows not referenced are deleted.
    """
    if desired is None:
        return ExpenditurePlan()

    current = {row.id: row for row in persisted}
    to_create: list[dict[str, Any]] = []
    to_update: list[dict[str, Any]] = []
    kept: set[int] = set()

    for entry in desired:
        entry_id = entry.get('id')
        row = current.get(entry_id) if entry_id is not None else None
        if row is None:
            to_create.append({'name': entry['name'], 'amount': entry['amount']})
            continue
        kept.add(entry_id)
        if row.name != entry['name'] or row.amount != entry['amount']:
            to_update.append({'id': entry_id, 'name': entry['name'], 'amount': entry['amount']})

    to_delete = [row_id for row_id in current if row_id not in kept]
    return ExpenditurePlan(to_create=to_create, to_update=to_update, to_delete=to_delete)
