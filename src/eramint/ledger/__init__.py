# src/eramint/ledger/__init__.py
"""Deterministic monetary computations.

Everything in this package is integer-only and import-safe (no I/O).
"""

from __future__ import annotations

from eramint.ledger.fixed_point import Perbill, Percent
from eramint.ledger.inflation import PayoutResult, Phase, compute_payout, compute_scheduled_payout
from eramint.ledger.policy import InflationPolicy, PolicySchedule
from eramint.ledger.supply import U32, U64, U128, UIntWidth

__all__ = [
    "Perbill",
    "Percent",
    "PayoutResult",
    "Phase",
    "compute_payout",
    "compute_scheduled_payout",
    "InflationPolicy",
    "PolicySchedule",
    "U32",
    "U64",
    "U128",
    "UIntWidth",
]
