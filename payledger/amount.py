"""
amount.py - Fixed-point money amounts

Amount wraps a scaled integer so that money arithmetic never picks up
floating-point error. Decimal is used only at the boundary: converting an
input token into an Amount, and rendering an Amount for output.

    >>> a = Amount.from_decimal("0.3")
    >>> a + a + a == Amount.from_decimal("0.9")
    True
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, DecimalException, ROUND_HALF_UP, localcontext
from typing import Union

from .core import (
    AMOUNT_SCALE, AMOUNT_MULTIPLIER,
    AMOUNT_MIN_SCALED, AMOUNT_MAX_SCALED,
    AmountOutOfRange,
)


# Enough precision to scale any finite input exactly before rounding.
_CONVERSION_PRECISION = 80

AmountLike = Union[Decimal, int, float, str]


def _checked(scaled: int) -> int:
    if not AMOUNT_MIN_SCALED <= scaled <= AMOUNT_MAX_SCALED:
        raise AmountOutOfRange(
            f"Scaled value {scaled} is outside the representable amount range"
        )
    return scaled


def _normalize_decimal(d: Decimal) -> str:
    """
    Render a Decimal in its shortest fixed-point form.

    Decimal("1.5000") becomes "1.5", Decimal("100.0000") becomes "100".
    """
    normalized = d.normalize()
    if normalized == normalized.to_integral_value():
        return str(int(normalized))
    return format(normalized, 'f')


@dataclass(frozen=True, slots=True, order=True)
class Amount:
    """
    An exact decimal money value with AMOUNT_SCALE fractional digits.

    The value is stored as an integer count of 1/AMOUNT_MULTIPLIER sub-units
    in the signed 64-bit range. Equality and ordering compare the scaled
    integers; comparing with anything other than an Amount is unsupported.

    Attributes:
        scaled: Number of sub-units (e.g. 15000 represents 1.5)
    """
    scaled: int

    def __post_init__(self):
        if not isinstance(self.scaled, int) or isinstance(self.scaled, bool):
            raise TypeError(f"Amount.scaled must be int, got {type(self.scaled)}")
        _checked(self.scaled)

    # ------------------------------------------------------------------
    # Construction / conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_decimal(cls, value: AmountLike) -> Amount:
        """
        Convert a boundary value into an Amount.

        The value is rounded to the nearest representable amount, halves
        away from zero. Floats are converted from their exact binary value,
        so 0.3 becomes 0.3000 rather than drifting.

        Args:
            value: Decimal, int, float or numeric string

        Returns:
            The closest Amount

        Raises:
            AmountOutOfRange: If value is not finite, not numeric, or too large
        """
        if isinstance(value, Amount):
            return value
        if isinstance(value, bool):
            raise AmountOutOfRange(f"Cannot convert {value!r} to an amount")
        scaled = None
        try:
            with localcontext() as ctx:
                ctx.prec = _CONVERSION_PRECISION
                if isinstance(value, str):
                    dec = Decimal(value.strip())
                else:
                    dec = Decimal(value)
                if dec.is_finite():
                    scaled = int(
                        (dec * AMOUNT_MULTIPLIER).to_integral_value(rounding=ROUND_HALF_UP)
                    )
        except (DecimalException, TypeError, ValueError) as e:
            raise AmountOutOfRange(f"Cannot convert {value!r} to an amount") from e
        if scaled is None:
            raise AmountOutOfRange(f"Amount must be finite, got {value!r}")
        return cls(_checked(scaled))

    @classmethod
    def from_scaled(cls, scaled: int) -> Amount:
        """Create an Amount directly from a sub-unit count."""
        return cls(scaled)

    @classmethod
    def zero(cls) -> Amount:
        """The zero amount, equal to the module constant ZERO."""
        return cls(0)

    def to_decimal(self) -> Decimal:
        """Exact Decimal value of this amount, with AMOUNT_SCALE places."""
        return Decimal(self.scaled).scaleb(-AMOUNT_SCALE)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: Amount) -> Amount:
        return Amount(_checked(self.scaled + other.scaled))

    def subtract(self, other: Amount) -> Amount:
        return Amount(_checked(self.scaled - other.scaled))

    def negate(self) -> Amount:
        return Amount(_checked(-self.scaled))

    def is_negative(self) -> bool:
        return self.scaled < 0

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> Amount:
        return self.negate()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return _normalize_decimal(self.to_decimal())

    def __repr__(self) -> str:
        return f"Amount({self})"


ZERO = Amount(0)
