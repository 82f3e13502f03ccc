"""
Numeric Normalization

Coerces raw field values (numbers, numeric strings, blanks, garbage) into
finite floats and provides the rounding and guarded-division helpers the
rest of the engine is built on. Nothing in this module raises.
"""

import math
from typing import Any, Tuple


def to_number(value: Any) -> float:
    """
    Parse a raw field value into a finite float.

    Accepts ints, floats and numeric strings ("1,250,000", " 42.5 ").
    Anything else (None, booleans, non-numeric text, NaN, infinity)
    becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0

    if not math.isfinite(number):
        return 0.0
    return number


def round_to(value: float, decimals: int = 0) -> float:
    """
    Round half away from zero to a fixed number of decimals.

    Matches spreadsheet ROUND() rather than Python's banker's rounding:
    round_to(2.5) == 3.0 and round_to(-2.5) == -3.0.

    Args:
        value: Number to round
        decimals: Non-negative number of decimal places

    Returns:
        Rounded value, or 0.0 if value is not finite
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return 0.0
    if not math.isfinite(value):
        return 0.0

    factor = 10 ** max(0, int(decimals))
    scaled = abs(value) * factor
    # Magnitudes this large carry no fractional digits to round away
    if not math.isfinite(scaled):
        return float(value)

    result = math.copysign(math.floor(scaled + 0.5) / factor, value)

    # Collapse -0.0 so callers never see a signed zero
    return result if result != 0 else 0.0


def safe_divide(numerator: Any, denominator: Any, default: float = 0.0) -> float:
    """
    Divide after normalizing both operands.

    Returns `default` when the denominator is zero, negative or not a number.
    """
    denom = to_number(denominator)
    if denom <= 0:
        return default
    return to_number(numerator) / denom


def positive_or_default(value: Any, default: float) -> Tuple[float, bool]:
    """
    Normalize a value that must be strictly positive.

    Returns:
        (number, used_default) tuple
    """
    number = to_number(value)
    if number > 0:
        return number, False
    return default, True


def non_negative(value: Any) -> float:
    """Normalize a monetary amount, clamping negatives to zero."""
    return max(0.0, to_number(value))
