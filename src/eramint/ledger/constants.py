# src/eramint/ledger/constants.py
from __future__ import annotations

"""Reference monetary policy constants.

Observed schedule:
- Growth bonus applied at era 0: 233,278 per billion of the base
- Per-era decay: 0.99995
- Staker share of each era's mint: 70%
- Cutover era: 360,000 (one-time final mint, then no more minting)
- Final supply target: 7,777,777,777 units
"""

BONUS_RATE_NUMERATOR: int = 233_278
BONUS_RATE_DENOMINATOR: int = 1_000_000_000

DECAY_RATE_NUMERATOR: int = 999_950_000
DECAY_RATE_DENOMINATOR: int = 1_000_000_000

STAKER_SPLIT_NUMERATOR: int = 7
STAKER_SPLIT_DENOMINATOR: int = 10

CUTOVER_ERA: int = 360_000

FINAL_SUPPLY_TARGET: int = 7_777_777_777

# Canonical ledger account ids credited by era payouts
STAKING_POT_ACCOUNT_ID: str = "STAKING_POT"
TREASURY_ACCOUNT_ID: str = "TREASURY"
