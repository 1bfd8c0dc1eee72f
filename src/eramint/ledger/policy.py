# src/eramint/ledger/policy.py
from __future__ import annotations

"""Inflation policy constants, validated once and versioned by era.

A policy is never edited in place: a new version is appended to the
`PolicySchedule` with the era it activates at, so every past era can be
recomputed with the constants it was minted under.

Raw config values are checked here (load time). Anything that would only
be caught by silent saturation later, such as a decay rate of one or more
or a split above 100%, raises PolicyError.
"""

import bisect
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from eramint.ledger.constants import (
    BONUS_RATE_DENOMINATOR,
    BONUS_RATE_NUMERATOR,
    CUTOVER_ERA,
    DECAY_RATE_DENOMINATOR,
    DECAY_RATE_NUMERATOR,
    FINAL_SUPPLY_TARGET,
    STAKER_SPLIT_DENOMINATOR,
    STAKER_SPLIT_NUMERATOR,
)
from eramint.ledger.fixed_point import Fraction, Perbill, Percent

Json = Dict[str, Any]

POW_MODE_BINARY = "binary"
POW_MODE_STEPWISE = "stepwise"

_POW_MODES = {POW_MODE_BINARY, POW_MODE_STEPWISE}


@dataclass
class PolicyError(ValueError):
    """A policy document or value that must not reach the payout path."""

    code: str
    reason: str
    details: Optional[Json] = None

    def __str__(self) -> str:
        if not self.details:
            return f"{self.code}:{self.reason}"
        fields = ",".join(f"{k}={v!r}" for k, v in sorted(self.details.items()))
        return f"{self.code}:{self.reason}({fields})"


def _bad(reason: str, **details: Any) -> PolicyError:
    return PolicyError("invalid_policy", reason, details or None)


def _as_int(v: Any, name: str) -> int:
    if isinstance(v, bool):
        raise _bad("not_an_integer", field=name, value=v)
    if isinstance(v, float) and not v.is_integer():
        raise _bad("not_an_integer", field=name, value=v)
    try:
        return int(v)
    except (TypeError, ValueError):
        raise _bad("not_an_integer", field=name, value=v) from None


def parse_rate(kind: Type[Fraction], v: Any, name: str) -> Fraction:
    """Parse a rate given as "n/d", [n, d], integer parts or a fraction.

    Ratios above one are rejected rather than clamped.
    """
    if isinstance(v, kind):
        return v
    if isinstance(v, Fraction):
        raise _bad("wrong_fraction_kind", field=name, expected=kind.__name__, got=type(v).__name__)

    if isinstance(v, str) and "/" in v:
        a, b = v.split("/", 1)
        num, den = _as_int(a.strip(), name), _as_int(b.strip(), name)
    elif isinstance(v, (list, tuple)):
        if len(v) != 2:
            raise _bad("rate_must_be_pair", field=name, value=list(v))
        num, den = _as_int(v[0], name), _as_int(v[1], name)
    else:
        parts = _as_int(v, name)
        num, den = parts, kind.ACCURACY

    if den <= 0:
        raise _bad("zero_denominator", field=name, value=v)
    if num < 0:
        raise _bad("negative_rate", field=name, value=v)
    if num > den:
        raise _bad("rate_above_one", field=name, value=v)

    if den == kind.ACCURACY:
        return kind.from_parts(num)
    return kind.from_rational(num, den)


@dataclass(frozen=True)
class InflationPolicy:
    version: str
    bonus_rate: Perbill
    decay_rate: Perbill
    split_ratio: Percent
    cutover_era: Optional[int]  # None: growth formula applies to every era
    final_supply_target: int
    pow_mode: str = POW_MODE_BINARY

    def __post_init__(self) -> None:
        validate_policy(self)

    @property
    def has_cutover(self) -> bool:
        return self.cutover_era is not None

    def decay_factor(self, era_index: int) -> Perbill:
        if self.pow_mode == POW_MODE_STEPWISE:
            return self.decay_rate.saturating_pow_stepwise(era_index)
        return self.decay_rate.saturating_pow(era_index)

    def to_json(self) -> Json:
        return {
            "version": self.version,
            "bonus_rate": str(self.bonus_rate),
            "decay_rate": str(self.decay_rate),
            "split_ratio": str(self.split_ratio),
            "cutover_era": self.cutover_era,
            "final_supply_target": int(self.final_supply_target),
            "pow_mode": self.pow_mode,
        }


def validate_policy(p: InflationPolicy) -> None:
    if not isinstance(p.version, str) or not p.version.strip():
        raise _bad("version_required")
    if not isinstance(p.bonus_rate, Perbill):
        raise _bad("wrong_fraction_kind", field="bonus_rate", expected="Perbill")
    if not isinstance(p.decay_rate, Perbill):
        raise _bad("wrong_fraction_kind", field="decay_rate", expected="Perbill")
    if not isinstance(p.split_ratio, Percent):
        raise _bad("wrong_fraction_kind", field="split_ratio", expected="Percent")
    if p.decay_rate.is_one():
        raise _bad("decay_rate_must_be_below_one", decay_rate=str(p.decay_rate))
    if p.cutover_era is not None and int(p.cutover_era) < 0:
        raise _bad("negative_cutover_era", cutover_era=p.cutover_era)
    if int(p.final_supply_target) < 0:
        raise _bad("negative_final_supply_target", final_supply_target=p.final_supply_target)
    if p.pow_mode not in _POW_MODES:
        raise _bad("unknown_pow_mode", pow_mode=p.pow_mode, allowed=sorted(_POW_MODES))


def policy_from_json(raw: Json, *, defaults: Optional[InflationPolicy] = None) -> InflationPolicy:
    if not isinstance(raw, dict):
        raise _bad("policy_must_be_object", type=type(raw).__name__)

    d = defaults or REFERENCE_POLICY

    cutover: Optional[int]
    if "cutover_era" in raw:
        cutover = None if raw["cutover_era"] is None else _as_int(raw["cutover_era"], "cutover_era")
    else:
        cutover = d.cutover_era

    return InflationPolicy(
        version=str(raw.get("version") or d.version),
        bonus_rate=parse_rate(Perbill, raw["bonus_rate"], "bonus_rate") if "bonus_rate" in raw else d.bonus_rate,
        decay_rate=parse_rate(Perbill, raw["decay_rate"], "decay_rate") if "decay_rate" in raw else d.decay_rate,
        split_ratio=parse_rate(Percent, raw["split_ratio"], "split_ratio") if "split_ratio" in raw else d.split_ratio,
        cutover_era=cutover,
        final_supply_target=_as_int(raw.get("final_supply_target", d.final_supply_target), "final_supply_target"),
        pow_mode=str(raw.get("pow_mode") or d.pow_mode).strip().lower(),
    )


@dataclass(frozen=True)
class PolicyActivation:
    activation_era: int
    policy: InflationPolicy


@dataclass(frozen=True)
class PolicySchedule:
    activations: Tuple[PolicyActivation, ...]
    _eras: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        acts = tuple(self.activations)
        if not acts:
            raise _bad("empty_schedule")
        if int(acts[0].activation_era) != 0:
            raise _bad("first_activation_must_be_era_0", activation_era=acts[0].activation_era)
        eras = [int(a.activation_era) for a in acts]
        for prev, cur in zip(eras, eras[1:]):
            if cur <= prev:
                raise _bad("activations_not_increasing", previous=prev, current=cur)
        object.__setattr__(self, "activations", acts)
        object.__setattr__(self, "_eras", tuple(eras))

    @classmethod
    def single(cls, policy: InflationPolicy) -> "PolicySchedule":
        return cls((PolicyActivation(0, policy),))

    def activation_for(self, era_index: int) -> PolicyActivation:
        era = max(int(era_index), 0)
        i = bisect.bisect_right(self._eras, era) - 1
        return self.activations[i]

    def policy_for(self, era_index: int) -> InflationPolicy:
        return self.activation_for(era_index).policy

    def to_json(self) -> Json:
        return {
            "policies": [
                dict(a.policy.to_json(), activation_era=int(a.activation_era)) for a in self.activations
            ]
        }


def schedule_from_json(raw: Any) -> PolicySchedule:
    """Build a schedule from {"policies": [...]} or a bare list of policies."""
    items: Sequence[Any]
    if isinstance(raw, dict) and "policies" in raw:
        items = raw.get("policies") or []
    elif isinstance(raw, dict):
        items = [dict(raw, activation_era=raw.get("activation_era", 0))]
    elif isinstance(raw, list):
        items = raw
    else:
        raise _bad("schedule_must_be_object_or_list", type=type(raw).__name__)

    if not isinstance(items, list):
        raise _bad("policies_must_be_list", type=type(items).__name__)

    acts: List[PolicyActivation] = []
    for it in items:
        if not isinstance(it, dict):
            raise _bad("policy_must_be_object", type=type(it).__name__)
        era = _as_int(it.get("activation_era", 0), "activation_era")
        acts.append(PolicyActivation(era, policy_from_json(it)))
    return PolicySchedule(tuple(acts))


REFERENCE_POLICY = InflationPolicy(
    version="v1",
    bonus_rate=Perbill.from_rational(BONUS_RATE_NUMERATOR, BONUS_RATE_DENOMINATOR),
    decay_rate=Perbill.from_rational(DECAY_RATE_NUMERATOR, DECAY_RATE_DENOMINATOR),
    split_ratio=Percent.from_rational(STAKER_SPLIT_NUMERATOR, STAKER_SPLIT_DENOMINATOR),
    cutover_era=CUTOVER_ERA,
    final_supply_target=FINAL_SUPPLY_TARGET,
    pow_mode=POW_MODE_BINARY,
)

# Same constants, decayed the way eras were originally minted.
HISTORICAL_POLICY = InflationPolicy(
    version="v1-stepwise",
    bonus_rate=REFERENCE_POLICY.bonus_rate,
    decay_rate=REFERENCE_POLICY.decay_rate,
    split_ratio=REFERENCE_POLICY.split_ratio,
    cutover_era=CUTOVER_ERA,
    final_supply_target=FINAL_SUPPLY_TARGET,
    pow_mode=POW_MODE_STEPWISE,
)

# Tokens-only schedule: no cutover, no issuance cap.
LEGACY_TOKENS_POLICY = InflationPolicy(
    version="v0-tokens",
    bonus_rate=REFERENCE_POLICY.bonus_rate,
    decay_rate=REFERENCE_POLICY.decay_rate,
    split_ratio=REFERENCE_POLICY.split_ratio,
    cutover_era=None,
    final_supply_target=FINAL_SUPPLY_TARGET,
    pow_mode=POW_MODE_BINARY,
)

DEFAULT_SCHEDULE = PolicySchedule.single(REFERENCE_POLICY)
