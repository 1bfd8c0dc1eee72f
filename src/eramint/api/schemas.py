from __future__ import annotations

"""Pydantic response schemas for the public API.

Supply amounts are serialized as JSON integers; u128 values exceed the
float-safe range of some clients, so explorers should parse them as bigints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PayoutResponse(BaseModel):
    ok: bool = True
    era: int = Field(..., description="Era index the payout was computed for")
    phase: str = Field(..., description="growth | cutover | terminal")
    policy_version: str
    supply_width: str
    total_tokens: int
    total_issuance: Optional[int] = Field(default=None, description="Absent for the tokens-only variant")
    staker_payout: int
    maximum_payout: int
    treasury_payout: int


class PolicyResponse(BaseModel):
    ok: bool = True
    era: int
    activation_era: int
    version: str
    bonus_rate: str = Field(..., description="parts/accuracy")
    decay_rate: str = Field(..., description="parts/accuracy")
    split_ratio: str = Field(..., description="parts/accuracy")
    cutover_era: Optional[int] = None
    final_supply_target: int
    pow_mode: str
