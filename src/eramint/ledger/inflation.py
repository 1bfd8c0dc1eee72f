# src/eramint/ledger/inflation.py
from __future__ import annotations

"""Era inflation schedule evaluator.

compute_payout(era, total_tokens, total_issuance) -> (staker_payout, maximum_payout)

Phases (selected once per call from the era index):

  GROWTH    era <  cutover:
              maximum = ceil(decay^era * (issuance + ceil(bonus * issuance)))
              staker  = min(uncapped, floor(split * maximum))
  CUTOVER   era == cutover:
              maximum = final_supply_target - issuance   (saturating at 0)
              staker  = floor(split * maximum)
  TERMINAL  era >  cutover:
              (0, 0)

The growth base is total_issuance. When total_issuance is not supplied the
tokens-only variant applies: total_tokens is the base and every era uses the
growth formula, with no cutover.

Every step saturates within the supply width; the evaluator cannot fail.
"""

from enum import Enum
from typing import NamedTuple, Optional

from eramint.ledger.policy import DEFAULT_SCHEDULE, REFERENCE_POLICY, InflationPolicy, PolicySchedule
from eramint.ledger.supply import U128, UIntWidth


class Phase(str, Enum):
    GROWTH = "growth"
    CUTOVER = "cutover"
    TERMINAL = "terminal"


class PayoutResult(NamedTuple):
    staker_payout: int
    maximum_payout: int

    @property
    def treasury_payout(self) -> int:
        return self.maximum_payout - self.staker_payout


def select_phase(era_index: int, cutover_era: Optional[int]) -> Phase:
    if cutover_era is None:
        return Phase.GROWTH
    era = max(int(era_index), 0)
    cut = int(cutover_era)
    if era < cut:
        return Phase.GROWTH
    if era == cut:
        return Phase.CUTOVER
    return Phase.TERMINAL


def growth_maximum_payout(era_index: int, base: int, policy: InflationPolicy, width: UIntWidth) -> int:
    b = width.saturate(base)
    bonus = policy.bonus_rate.mul_ceil(b, width)
    decay = policy.decay_factor(era_index)
    return decay.mul_ceil(width.saturating_add(b, bonus), width)


def _growth(era_index: int, base: int, policy: InflationPolicy, width: UIntWidth) -> PayoutResult:
    maximum = growth_maximum_payout(era_index, base, policy, width)
    uncapped = maximum
    staker_cap = policy.split_ratio.mul_floor(maximum, width)
    # cap wins over the formula share
    return PayoutResult(min(uncapped, staker_cap), maximum)


def _cutover(total_issuance: int, policy: InflationPolicy, width: UIntWidth) -> PayoutResult:
    target = width.from_reference(policy.final_supply_target)
    maximum = width.saturating_sub(target, total_issuance)
    return PayoutResult(policy.split_ratio.mul_floor(maximum, width), maximum)


def _terminal() -> PayoutResult:
    return PayoutResult(0, 0)


def compute_payout(
    era_index: int,
    total_tokens: int,
    total_issuance: Optional[int] = None,
    *,
    policy: Optional[InflationPolicy] = None,
    width: UIntWidth = U128,
) -> PayoutResult:
    """Return (staker_payout, maximum_payout) for an era.

    Inputs outside the width are saturated into it, and negative era indexes
    are treated as era 0.
    """
    p = policy or REFERENCE_POLICY
    era = max(int(era_index), 0)

    if total_issuance is None:
        return _growth(era, width.saturate(total_tokens), p, width)

    issuance = width.saturate(total_issuance)
    phase = select_phase(era, p.cutover_era)
    if phase is Phase.GROWTH:
        return _growth(era, issuance, p, width)
    if phase is Phase.CUTOVER:
        return _cutover(issuance, p, width)
    return _terminal()


def compute_scheduled_payout(
    era_index: int,
    total_tokens: int,
    total_issuance: Optional[int] = None,
    *,
    schedule: Optional[PolicySchedule] = None,
    width: UIntWidth = U128,
) -> PayoutResult:
    """compute_payout with the policy active at era_index."""
    sched = schedule or DEFAULT_SCHEDULE
    return compute_payout(
        era_index,
        total_tokens,
        total_issuance,
        policy=sched.policy_for(era_index),
        width=width,
    )
