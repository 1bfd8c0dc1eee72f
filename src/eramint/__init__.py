# src/eramint/__init__.py
"""
eramint: era inflation schedule for proof-of-stake ledgers

  - ledger.fixed_point: exact Perbill/Percent fractions with explicit rounding
  - ledger.supply: fixed-width saturating supply amounts
  - ledger.policy: validated, era-versioned policy constants
  - ledger.inflation: the (staker_payout, maximum_payout) evaluator
  - ledger.rewards: applies an era's payout to a ledger state dict
  - api: read-only HTTP surface
"""

from __future__ import annotations

__version__ = "0.1.0"
