# src/eramint/ledger/supply.py
from __future__ import annotations

"""Fixed-width unsigned supply amounts.

Supply amounts are plain Python ints. A `UIntWidth` describes the integer
width a chain stores balances in and provides the saturating operations the
payout math relies on:

  - saturate: clamp any int into [0, max_value]
  - saturating_add / saturating_sub / saturating_mul
  - from_reference: saturating conversion from the reference u128 width

No operation here raises on overflow or underflow.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UIntWidth:
    name: str
    bits: int

    @property
    def max_value(self) -> int:
        return (1 << int(self.bits)) - 1

    def saturate(self, x: Any) -> int:
        try:
            v = int(x)
        except (TypeError, ValueError):
            return 0
        if v <= 0:
            return 0
        return min(v, self.max_value)

    def saturating_add(self, a: int, b: int) -> int:
        return self.saturate(self.saturate(a) + self.saturate(b))

    def saturating_sub(self, a: int, b: int) -> int:
        return self.saturate(self.saturate(a) - self.saturate(b))

    def saturating_mul(self, a: int, b: int) -> int:
        return self.saturate(self.saturate(a) * self.saturate(b))

    def from_reference(self, x: int) -> int:
        """Narrow a reference-width (u128) value into this width."""
        return self.saturate(U128.saturate(x))

    def __str__(self) -> str:  # pragma: no cover
        return self.name


U32 = UIntWidth("u32", 32)
U64 = UIntWidth("u64", 64)
U128 = UIntWidth("u128", 128)

REFERENCE_WIDTH = U128

_BY_NAME = {w.name: w for w in (U32, U64, U128)}


def width_by_name(name: str) -> UIntWidth:
    key = str(name or "").strip().lower()
    w = _BY_NAME.get(key)
    if w is None:
        raise ValueError(f"unknown supply width {name!r}; expected one of {sorted(_BY_NAME)}")
    return w
