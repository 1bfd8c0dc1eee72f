# src/eramint/ledger/fixed_point.py
from __future__ import annotations

"""Exact fixed-point fractions for monetary rates.

A fraction is stored as integer parts of a fixed ACCURACY:

  Perbill: parts / 1_000_000_000  (decay and bonus rates)
  Percent: parts / 100            (staker/treasury split)

Every operation is integer-only so results are identical on every node.
Rounding is always explicit (mul_ceil / mul_floor) and values stay within
[0, 1]: constructors clamp instead of overflowing.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from eramint.ledger.supply import REFERENCE_WIDTH, UIntWidth

POW_GUARD_BITS: int = 64


@dataclass(frozen=True, order=True)
class Fraction:
    parts: int

    ACCURACY: ClassVar[int] = 1

    def __post_init__(self) -> None:
        p = int(self.parts)
        if p < 0:
            p = 0
        if p > self.ACCURACY:
            p = self.ACCURACY
        object.__setattr__(self, "parts", p)

    # --- constructors ---

    @classmethod
    def zero(cls):
        return cls(0)

    @classmethod
    def one(cls):
        return cls(cls.ACCURACY)

    @classmethod
    def from_parts(cls, parts: int):
        return cls(int(parts))

    @classmethod
    def from_rational(cls, numerator: int, denominator: int):
        """Approximate numerator/denominator, rounding down.

        A zero denominator is treated as 1 and the ratio saturates at one.
        Both sides are first reduced by (denominator // ACCURACY + 1) so the
        intermediate product stays within twice the accuracy's width; the
        resulting parts are therefore identical to the on-chain runtime.
        """
        q = max(int(denominator), 1)
        p = min(max(int(numerator), 0), q)
        factor = q // cls.ACCURACY + 1
        q_reduce = q // factor
        p_reduce = p // factor
        return cls(p_reduce * cls.ACCURACY // q_reduce)

    # --- predicates ---

    def is_zero(self) -> bool:
        return self.parts == 0

    def is_one(self) -> bool:
        return self.parts == self.ACCURACY

    # --- arithmetic against supply amounts ---

    def mul_ceil(self, amount: int, width: UIntWidth = REFERENCE_WIDTH) -> int:
        """ceil(self * amount), never above amount."""
        x = width.saturate(amount)
        return width.saturate(-((-x * self.parts) // self.ACCURACY))

    def mul_floor(self, amount: int, width: UIntWidth = REFERENCE_WIDTH) -> int:
        """floor(self * amount), never above amount."""
        x = width.saturate(amount)
        return width.saturate((x * self.parts) // self.ACCURACY)

    # --- powers ---

    def saturating_pow(self, exponent: int):
        """self ** exponent by square-and-multiply, rounded down.

        Intermediate products carry POW_GUARD_BITS extra bits so the floor
        errors of up to ~2*log2(exponent) multiplications stay far below one
        part; the result is floor(self ** exponent) and never increases with
        the exponent. Stops early once the running result reaches zero.
        """
        e = max(int(exponent), 0)
        if e == 0 or self.is_one():
            return self.one()
        if self.is_zero():
            return self.zero()

        ext = self.ACCURACY << POW_GUARD_BITS
        result = ext
        base = self.parts << POW_GUARD_BITS
        while e > 0 and result > 0:
            if e & 1:
                result = (result * base) // ext
            e >>= 1
            if e:
                base = (base * base) // ext
        return type(self)(result >> POW_GUARD_BITS)

    def saturating_pow_stepwise(self, exponent: int):
        """Repeated multiplication s <- floor(s * self), starting from one.

        This is the decay rule historical eras were minted with, so it must be
        kept bit-exact. Each step subtracts ceil(s * (1 - self)); runs of steps
        sharing the same decrement are applied in one go, which bounds the
        loop by the number of distinct decrements instead of the exponent.
        A zero or one base is returned unchanged.
        """
        if self.is_zero() or self.is_one():
            return self

        acc = self.ACCURACY
        r = acc - self.parts
        s = acc
        remaining = max(int(exponent), 0)

        while remaining > 0 and s > 0:
            dec = -((-s * r) // acc)
            # smallest s that still has this decrement
            lo = ((dec - 1) * acc) // r + 1
            steps = min(remaining, (s - lo) // dec + 1)
            s -= steps * dec
            remaining -= steps

        return type(self)(max(s, 0))

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.parts}/{self.ACCURACY}"


@dataclass(frozen=True, order=True)
class Perbill(Fraction):
    ACCURACY: ClassVar[int] = 1_000_000_000


@dataclass(frozen=True, order=True)
class Percent(Fraction):
    ACCURACY: ClassVar[int] = 100


def fraction_from_parts(kind: type, numerator: int, denominator: Optional[int] = None) -> Fraction:
    """Build a `kind` fraction from a ratio, or from raw parts if no denominator."""
    if denominator is None:
        return kind.from_parts(int(numerator))
    return kind.from_rational(int(numerator), int(denominator))


def mul_ceil(fraction: Fraction, amount: int, width: UIntWidth = REFERENCE_WIDTH) -> int:
    return fraction.mul_ceil(amount, width)


def mul_floor(fraction: Fraction, amount: int, width: UIntWidth = REFERENCE_WIDTH) -> int:
    return fraction.mul_floor(amount, width)


def saturating_power(fraction: Fraction, exponent: int) -> Fraction:
    return fraction.saturating_pow(exponent)
