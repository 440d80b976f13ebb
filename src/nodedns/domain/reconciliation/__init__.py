"""Reconciliation of provider address records with the desired address set.

Layered flow for every configured name:
1) list the provider's current records
2) build a plan (deletes, creates, metadata updates)
3) apply the plan with per-operation failure isolation
"""

from __future__ import annotations

from .apply import Action, ApplyResult, OperationFailure, apply_plan
from .engine import DnsReconciler, NameResult, ReconcileResult, reconcile_names
from .plan import ReconciliationPlan, build_plan

__all__ = [
    "Action",
    "ApplyResult",
    "DnsReconciler",
    "NameResult",
    "OperationFailure",
    "ReconcileResult",
    "ReconciliationPlan",
    "apply_plan",
    "build_plan",
    "reconcile_names",
]
