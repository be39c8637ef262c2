"""
Values -- Immutable monetary value object.

Responsibility:
    Provides Amount, the fixed-point monetary type every other module uses.
    An Amount is a signed integer count of minor units (cents); there is
    no float anywhere in its state.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O, no dependencies.

Invariants enforced:
    - minor_units is always an int.
    - Addition, subtraction and negation are exact integer arithmetic.
    - Scalar multiplication and division go through Decimal and round the
      minor-unit result ROUND_HALF_UP (half away from zero), so the only
      precision ever lost is that single rounding step.
    - Amount // Amount is the exact floor of the ratio.

Failure modes:
    - TypeError on construction with a non-int minor_units
    - ValueError when parsing malformed text or more than two decimals
    - ZeroDivisionError when dividing by a zero scalar or a zero Amount
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MINOR_UNITS_PER_MAJOR = 100
DEFAULT_CURRENCY_SYMBOL = "€"

_CENT = Decimal("0.01")


def _to_decimal(value: Decimal | int | str | float) -> Decimal:
    """Convert a scalar operand to Decimal; floats go through their repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a valid scalar")
    if isinstance(value, (int, str, float)):
        return Decimal(str(value))
    raise TypeError(f"Unsupported scalar type: {type(value).__name__}")


@dataclass(frozen=True, slots=True, order=True)
class Amount:
    """
    Signed monetary amount in minor units.

    Contract:
        Immutable value type; created by arithmetic or parsing, never
        mutated. Comparison is the total order of minor_units.

    Guarantees:
        - Hashable and totally ordered
        - Exact integer arithmetic for +, -, unary -, abs
        - Deterministic ROUND_HALF_UP rounding for scalar * and /

    Non-goals:
        - Does NOT carry a currency; the symbol is a display concern
        - Does NOT perform currency conversion
    """

    minor_units: int

    def __post_init__(self) -> None:
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"minor_units must be int, got {type(self.minor_units).__name__}"
            )

    @classmethod
    def zero(cls) -> Amount:
        """Create the canonical zero amount."""
        return cls(0)

    @classmethod
    def from_int_and_frac(cls, integer: int, frac: int) -> Amount:
        """
        Build an amount from its integer part and two-digit fraction.

        The fraction takes the sign of the integer part, so
        ``from_int_and_frac(-1, 50)`` is -1.50.
        """
        if not 0 <= frac < MINOR_UNITS_PER_MAJOR:
            raise ValueError(f"Fraction must be in [0, 99], got {frac}")
        if integer < 0:
            return cls(integer * MINOR_UNITS_PER_MAJOR - frac)
        return cls(integer * MINOR_UNITS_PER_MAJOR + frac)

    @classmethod
    def from_decimal(cls, value: Decimal) -> Amount:
        """
        Create from a Decimal in major units.

        Raises:
            ValueError: If the value has more than two decimal places, or
                too many digits to be represented exactly.
        """
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {value}")
        try:
            quantized = value.quantize(_CENT)
        except InvalidOperation as e:
            raise ValueError(f"Amount out of range: {value}") from e
        if value != quantized:
            raise ValueError(f"Amount has more than two decimal places: {value}")
        return cls(int(value * MINOR_UNITS_PER_MAJOR))

    @classmethod
    def parse(cls, text: str) -> Amount:
        """
        Parse a decimal string in major units, e.g. ``"-12.34"``.

        A trailing currency symbol is accepted so that ``str(amount)``
        round-trips.
        """
        cleaned = text.strip().removesuffix(DEFAULT_CURRENCY_SYMBOL).strip()
        try:
            value = Decimal(cleaned)
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {text!r}") from e
        return cls.from_decimal(value)

    @property
    def is_zero(self) -> bool:
        return self.minor_units == 0

    @property
    def is_positive(self) -> bool:
        return self.minor_units > 0

    @property
    def is_negative(self) -> bool:
        return self.minor_units < 0

    def to_decimal(self) -> Decimal:
        """Value in major units, with exactly two decimal places."""
        return (Decimal(self.minor_units) / MINOR_UNITS_PER_MAJOR).quantize(_CENT)

    def to_decimal_string(self) -> str:
        """Serialization form, e.g. ``"-12.34"``."""
        return str(self.to_decimal())

    def format(self, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
        """Display form ``<sign><integer>.<2-digit fraction><symbol>``."""
        sign = "-" if self.minor_units < 0 else ""
        integer, frac = divmod(abs(self.minor_units), MINOR_UNITS_PER_MAJOR)
        return f"{sign}{integer}.{frac:02d}{symbol}"

    def __add__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.minor_units + other.minor_units)

    def __sub__(self, other: Amount) -> Amount:
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.minor_units - other.minor_units)

    def __neg__(self) -> Amount:
        return Amount(-self.minor_units)

    def __abs__(self) -> Amount:
        return Amount(abs(self.minor_units))

    def __mul__(self, factor: Decimal | int | str | float) -> Amount:
        """Multiply by a scalar, rounding the result to whole minor units."""
        if isinstance(factor, Amount):
            return NotImplemented
        product = Decimal(self.minor_units) * _to_decimal(factor)
        return Amount(int(product.to_integral_value(rounding=ROUND_HALF_UP)))

    def __rmul__(self, factor: Decimal | int | str | float) -> Amount:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Amount | Decimal | int | str | float) -> Decimal | Amount:
        """
        ``Amount / Amount`` is the Decimal ratio of the two amounts.
        ``Amount / scalar`` is an Amount rounded to whole minor units.
        """
        if isinstance(divisor, Amount):
            if divisor.minor_units == 0:
                raise ZeroDivisionError("Amount division by zero amount")
            return Decimal(self.minor_units) / Decimal(divisor.minor_units)
        scalar = _to_decimal(divisor)
        if scalar == 0:
            raise ZeroDivisionError("Amount division by zero")
        quotient = Decimal(self.minor_units) / scalar
        return Amount(int(quotient.to_integral_value(rounding=ROUND_HALF_UP)))

    def __floordiv__(self, other: Amount) -> int:
        """Exact floor of ``self / other``."""
        if not isinstance(other, Amount):
            return NotImplemented
        if other.minor_units == 0:
            raise ZeroDivisionError("Amount division by zero amount")
        return self.minor_units // other.minor_units

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Amount({self.to_decimal_string()!r})"
