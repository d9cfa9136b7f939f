"""Fixed-point conversion for dual-ID balances (18 decimals).

Conversions are exact: they work on the decimal digits directly, never
through Decimal arithmetic, whose context precision would round long
quantities.
"""

from decimal import Decimal, InvalidOperation

FIXED_POINT_DECIMALS = 18
_SCALE = 10 ** FIXED_POINT_DECIMALS
MAX_UINT256 = 2 ** 256 - 1


def to_fixed_point(value: str | int | Decimal) -> int:
    """Convert a human decimal quantity into base units.

    Raises:
        ValueError: If the value is not a finite decimal, has more
            fractional digits than the fixed-point unit supports, or
            does not fit in a uint256
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"not a decimal number: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"not a finite number: {value!r}")

    sign, digits, exponent = amount.as_tuple()
    coefficient = int("".join(map(str, digits)) or "0")
    shift = exponent + FIXED_POINT_DECIMALS
    if coefficient and len(digits) + shift > len(str(MAX_UINT256)):
        raise ValueError(f"{value!r} does not fit in a uint256")

    if shift >= 0:
        base_units = coefficient * 10 ** shift
    else:
        base_units, remainder = divmod(coefficient, 10 ** -shift)
        if remainder:
            raise ValueError(
                f"{value!r} has more than {FIXED_POINT_DECIMALS} fractional digits"
            )
    if base_units > MAX_UINT256:
        raise ValueError(f"{value!r} does not fit in a uint256")
    return -base_units if sign else base_units


def from_fixed_point(base_units: int) -> Decimal:
    """Convert base units back into a human decimal quantity."""
    whole, fraction = divmod(abs(base_units), _SCALE)
    sign = "-" if base_units < 0 else ""
    if not fraction:
        return Decimal(f"{sign}{whole}")
    digits = f"{fraction:0{FIXED_POINT_DECIMALS}d}".rstrip("0")
    return Decimal(f"{sign}{whole}.{digits}")
