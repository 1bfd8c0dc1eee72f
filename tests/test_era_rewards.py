from __future__ import annotations

import logging
from copy import deepcopy

import pytest

from eramint.ledger.constants import STAKING_POT_ACCOUNT_ID, TREASURY_ACCOUNT_ID
from eramint.ledger.policy import HISTORICAL_POLICY, PolicySchedule
from eramint.ledger.rewards import RewardError, apply_era_payout
from eramint.ledger.supply import U32


def _mk_state(issuance: int = 77_777_777) -> dict:
    return {
        "accounts": {},
        "economics": {"inflation": {"total_issuance": issuance, "total_tokens": issuance, "last_paid_era": None}},
    }


def test_era_zero_payout_credits_pot_and_treasury() -> None:
    st = _mk_state()
    r = apply_era_payout(st, era_index=0)

    assert r["applied"] == "ERA_PAYOUT"
    assert r["phase"] == "growth"
    assert r["policy_version"] == "v1"
    assert r["staker_payout"] == 54_457_144
    assert r["maximum_payout"] == 77_795_921
    assert r["treasury_payout"] == 77_795_921 - 54_457_144

    assert st["accounts"][STAKING_POT_ACCOUNT_ID]["balance"] == 54_457_144
    assert st["accounts"][TREASURY_ACCOUNT_ID]["balance"] == 23_338_777
    assert st["economics"]["inflation"]["total_issuance"] == 77_777_777 + 77_795_921
    assert st["economics"]["inflation"]["last_paid_era"] == 0


def test_payouts_accumulate_and_issuance_feeds_next_era() -> None:
    st = _mk_state()
    r0 = apply_era_payout(st, era_index=0)
    r1 = apply_era_payout(st, era_index=1)

    assert r1["issuance_before"] == r0["issuance_after"]
    pot = st["accounts"][STAKING_POT_ACCOUNT_ID]["balance"]
    assert pot == r0["staker_payout"] + r1["staker_payout"]


def test_cutover_then_terminal() -> None:
    st = _mk_state()
    r = apply_era_payout(st, era_index=360_000)
    assert r["phase"] == "cutover"
    assert r["maximum_payout"] == 7_700_000_000
    assert st["economics"]["inflation"]["total_issuance"] == 7_777_777_777

    r = apply_era_payout(st, era_index=360_001)
    assert r["phase"] == "terminal"
    assert r["maximum_payout"] == 0
    assert st["economics"]["inflation"]["total_issuance"] == 7_777_777_777


def test_replayed_era_is_rejected_without_mutation() -> None:
    st = _mk_state()
    apply_era_payout(st, era_index=5)
    before = deepcopy(st)

    for era in (5, 4):
        with pytest.raises(RewardError) as ei:
            apply_era_payout(st, era_index=era)
        assert ei.value.code == "era_already_paid"

    assert st == before


@pytest.mark.parametrize("state,era,code", [([], 0, "invalid_state"), ({}, -1, "invalid_era"), ({}, "x", "invalid_era")])
def test_invalid_inputs(state, era, code: str) -> None:
    with pytest.raises(RewardError) as ei:
        apply_era_payout(state, era_index=era)
    assert ei.value.code == code


def test_missing_economics_root_is_initialized() -> None:
    st: dict = {}
    r = apply_era_payout(st, era_index=0)
    assert r["maximum_payout"] == 0
    assert st["economics"]["inflation"]["total_issuance"] == 0
    assert st["economics"]["inflation"]["last_paid_era"] == 0
    assert st.get("accounts", {}) == {}


def test_uses_schedule_and_width() -> None:
    st = _mk_state(issuance=U32.max_value)
    r = apply_era_payout(st, era_index=0, schedule=PolicySchedule.single(HISTORICAL_POLICY), width=U32)
    assert r["policy_version"] == HISTORICAL_POLICY.version
    assert r["maximum_payout"] == U32.max_value
    # issuance saturates at the width instead of overflowing
    assert st["economics"]["inflation"]["total_issuance"] == U32.max_value


def test_emits_log_event(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="eramint.rewards")
    apply_era_payout(_mk_state(), era_index=0)
    assert any('"event":"era_payout"' in rec.getMessage() for rec in caplog.records)
