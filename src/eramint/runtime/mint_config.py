# src/eramint/runtime/mint_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from eramint.ledger.policy import DEFAULT_SCHEDULE, PolicyError, PolicySchedule, schedule_from_json
from eramint.ledger.supply import UIntWidth, width_by_name


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


def _as_opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


@dataclass(frozen=True)
class MintConfig:
    mode: str  # "dev" | "testnet" | "prod"

    # Policy schedule document (JSON or YAML). None: built-in reference policy.
    policy_path: Optional[str]
    supply_width: str  # "u32" | "u64" | "u128"

    api_host: str
    api_port: int

    log_level: str

    @property
    def width(self) -> UIntWidth:
        return width_by_name(self.supply_width)


_ALLOWED_MODES = {"dev", "testnet", "prod"}
_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_mint_config(cfg: MintConfig) -> None:
    """Fail-fast validation for operator config.

    A misconfigured policy must stop the node at startup, not surface as a
    saturated payout at an era boundary.
    """

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {_ALLOWED_MODES}; got: {cfg.mode!r}")

    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")

    if str(cfg.log_level).strip().upper() not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {_ALLOWED_LOG_LEVELS}; got: {cfg.log_level!r}")

    # raises ValueError on unknown widths
    width_by_name(cfg.supply_width)

    if cfg.policy_path is not None:
        p = Path(cfg.policy_path)
        if not p.is_file():
            raise ValueError(f"policy_path does not exist or is not a file: {cfg.policy_path!r}")


def default_mint_config() -> MintConfig:
    return MintConfig(
        mode="prod",
        policy_path=None,
        supply_width="u128",
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
    )


def read_mint_config_file(path: str) -> MintConfig:
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("mint config must be a JSON object")

    d = default_mint_config()

    policy_path = _as_opt_str(raw.get("policy_path"))
    if policy_path is not None and not Path(policy_path).is_absolute():
        # relative to the config file
        policy_path = str((p.parent / policy_path).resolve())

    cfg = MintConfig(
        mode=_as_str(raw.get("mode"), d.mode),
        policy_path=policy_path,
        supply_width=_as_str(raw.get("supply_width"), d.supply_width).strip().lower(),
        api_host=_as_str(raw.get("api_host"), d.api_host),
        api_port=_as_int(raw.get("api_port"), d.api_port),
        log_level=_as_str(raw.get("log_level"), d.log_level).strip().upper(),
    )

    validate_mint_config(cfg)
    return cfg


def load_mint_config(*, config_path: Optional[str] = None) -> MintConfig:
    """Load config from a file (arg or ERAMINT_CONFIG_PATH), else defaults.

    ERAMINT_POLICY_PATH and ERAMINT_SUPPLY_WIDTH, when set, override the
    matching field of either.
    """
    p = config_path or os.environ.get("ERAMINT_CONFIG_PATH")
    cfg = read_mint_config_file(p) if p else default_mint_config()

    policy_path = _as_opt_str(os.environ.get("ERAMINT_POLICY_PATH"))
    if policy_path is not None:
        cfg = replace(cfg, policy_path=policy_path)

    supply_width = _as_opt_str(os.environ.get("ERAMINT_SUPPLY_WIDTH"))
    if supply_width is not None:
        cfg = replace(cfg, supply_width=supply_width.lower())

    validate_mint_config(cfg)
    return cfg


def read_policy_schedule_file(path: str) -> PolicySchedule:
    """Parse a policy schedule from a .json, .yaml or .yml file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    suffix = p.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PolicyError("invalid_policy", "unparseable_policy_file", {"path": str(p), "error": str(e)}) from e
    return schedule_from_json(raw)


def load_policy_schedule(cfg: Optional[MintConfig] = None) -> PolicySchedule:
    c = cfg or load_mint_config()
    if c.policy_path is None:
        return DEFAULT_SCHEDULE
    return read_policy_schedule_file(c.policy_path)


def apply_mint_config_to_env(cfg: MintConfig) -> None:
    validate_mint_config(cfg)
    os.environ["ERAMINT_MODE"] = (cfg.mode or "prod").strip().lower()
    os.environ["ERAMINT_SUPPLY_WIDTH"] = cfg.supply_width
    os.environ["ERAMINT_LOG_LEVEL"] = cfg.log_level
    if cfg.policy_path is not None:
        os.environ["ERAMINT_POLICY_PATH"] = cfg.policy_path
