# src/eramint/ledger/rewards.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eramint.ledger.constants import STAKING_POT_ACCOUNT_ID, TREASURY_ACCOUNT_ID
from eramint.ledger.inflation import compute_payout, select_phase
from eramint.ledger.policy import DEFAULT_SCHEDULE, PolicySchedule
from eramint.ledger.supply import U128, UIntWidth
from eramint.util.event_log import log_event

Json = Dict[str, Any]

_log = logging.getLogger("eramint.rewards")


@dataclass
class RewardError(RuntimeError):
    code: str
    reason: str
    details: Json

    def __str__(self) -> str:
        return f"{self.code}:{self.reason}:{self.details}"


def _as_int(x: Any, default: int = 0) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return int(default)


def _ensure_accounts(state: Json) -> Json:
    accts = state.get("accounts")
    if not isinstance(accts, dict):
        accts = {}
        state["accounts"] = accts
    return accts


def _ensure_account(state: Json, account_id: str) -> Json:
    accts = _ensure_accounts(state)
    acct = accts.get(account_id)
    if not isinstance(acct, dict):
        acct = {"balance": 0}
        accts[account_id] = acct
    if "balance" not in acct:
        acct["balance"] = 0
    return acct


def _ensure_economics_root(state: Json) -> Json:
    econ = state.get("economics")
    if not isinstance(econ, dict):
        econ = {}
        state["economics"] = econ
    return econ


def _ensure_inflation(econ: Json) -> Json:
    inf = econ.get("inflation")
    if not isinstance(inf, dict):
        inf = {}
        econ["inflation"] = inf

    inf.setdefault("total_issuance", 0)
    inf.setdefault("total_tokens", inf.get("total_issuance", 0))
    inf.setdefault("last_paid_era", None)

    return inf


def apply_era_payout(
    state: Json,
    *,
    era_index: int,
    schedule: Optional[PolicySchedule] = None,
    width: UIntWidth = U128,
) -> Json:
    """Mint an era's payout into a ledger state dict.

    The staker share is credited to the staking pot; the rest of the era's
    maximum payout goes to the treasury. total_issuance grows by the maximum
    payout. Each era can be paid once, in increasing order.
    """
    if not isinstance(state, dict):
        raise RewardError("invalid_state", "state_not_dict", {"type": str(type(state))})

    era = _as_int(era_index, -1)
    if era < 0:
        raise RewardError("invalid_era", "era_must_be_non_negative", {"era_index": era_index})

    econ = _ensure_economics_root(state)
    inf = _ensure_inflation(econ)

    last = inf.get("last_paid_era")
    if last is not None and era <= _as_int(last, -1):
        raise RewardError("era_already_paid", "era_not_after_last_paid", {"era_index": era, "last_paid_era": last})

    sched = schedule or DEFAULT_SCHEDULE
    policy = sched.policy_for(era)

    issuance = width.saturate(_as_int(inf.get("total_issuance"), 0))
    tokens = width.saturate(_as_int(inf.get("total_tokens"), issuance))

    phase = select_phase(era, policy.cutover_era)
    result = compute_payout(era, tokens, issuance, policy=policy, width=width)
    staker = int(result.staker_payout)
    treasury = int(result.treasury_payout)

    if staker > 0:
        pot = _ensure_account(state, STAKING_POT_ACCOUNT_ID)
        pot["balance"] = width.saturating_add(_as_int(pot.get("balance"), 0), staker)
    if treasury > 0:
        tre = _ensure_account(state, TREASURY_ACCOUNT_ID)
        tre["balance"] = width.saturating_add(_as_int(tre.get("balance"), 0), treasury)

    inf["total_issuance"] = width.saturating_add(issuance, result.maximum_payout)
    inf["last_paid_era"] = era

    receipt: Json = {
        "applied": "ERA_PAYOUT",
        "era_index": era,
        "phase": phase.value,
        "policy_version": policy.version,
        "staker_payout": staker,
        "treasury_payout": treasury,
        "maximum_payout": int(result.maximum_payout),
        "issuance_before": int(issuance),
        "issuance_after": int(inf["total_issuance"]),
    }
    log_event(_log, "era_payout", **receipt)
    return receipt
