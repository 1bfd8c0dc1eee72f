from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from eramint.api.routes_public_parts.common import _schedule, _uint_param, _width
from eramint.api.schemas import PayoutResponse, PolicyResponse
from eramint.ledger.inflation import Phase, compute_payout, select_phase

router = APIRouter()

_log = logging.getLogger("eramint.api.inflation")


@router.get("/inflation/payout", response_model=PayoutResponse)
def inflation_payout(request: Request):
    """
    Evaluate the era payout for the given supply figures.

    Mounted under /v1 by routes_public.py, so the full path is:
      GET /v1/inflation/payout?era=..&total_tokens=..[&total_issuance=..]

    Omitting total_issuance selects the tokens-only variant (no cutover).
    """
    era = _uint_param(request, "era", required=True)
    tokens = _uint_param(request, "total_tokens", required=True)
    issuance = _uint_param(request, "total_issuance", required=False)

    sched = _schedule(request)
    width = _width(request)
    policy = sched.policy_for(era)

    res = compute_payout(era, tokens, issuance, policy=policy, width=width)
    phase = Phase.GROWTH if issuance is None else select_phase(era, policy.cutover_era)
    _log.debug("payout era=%s phase=%s version=%s", era, phase.value, policy.version)

    return PayoutResponse(
        era=era,
        phase=phase.value,
        policy_version=policy.version,
        supply_width=width.name,
        total_tokens=width.saturate(tokens),
        total_issuance=None if issuance is None else width.saturate(issuance),
        staker_payout=res.staker_payout,
        maximum_payout=res.maximum_payout,
        treasury_payout=res.treasury_payout,
    )


@router.get("/inflation/policy", response_model=PolicyResponse)
def inflation_policy(request: Request):
    """Return the policy active at ?era= (default 0)."""
    era = _uint_param(request, "era", required=False) or 0
    sched = _schedule(request)

    activation = sched.activation_for(era)

    return PolicyResponse(era=era, activation_era=activation.activation_era, **activation.policy.to_json())
