# Formatter.py
"""""
Turns evaluation results into display strings.

- Floating point noise is removed (3.9999999999999996 -> 4, 0.30000000000000004 -> 0.3)
- Non-integers are shown as fractions when a close, small-denominator fraction exists
- Errors become the fixed display messages from error.py
"""""

import math
import sys

from . import error as E

SNAP_TOLERANCE = sys.float_info.epsilon * 1000
SIGNIFICANT_DIGITS = 15


def decimal_to_fraction(value, tolerance=1.0e-9, max_denominator=1000000):
    """Return 'numerator/denominator' for value, or value itself if no fraction fits.

    Continued-fraction expansion: convergents h/k are built with the standard
    recurrence until the relative error is within tolerance or k exceeds
    max_denominator. The sign is carried on the numerator.
    """
    if not math.isfinite(value) or float(value).is_integer():
        return value

    sign = -1 if value < 0 else 1
    abs_value = abs(value)

    h1, h2, k1, k2 = 1, 0, 0, 1
    b = abs_value

    while True:
        a = math.floor(b)
        h1, h2 = a * h1 + h2, h1
        k1, k2 = a * k1 + k2, k1

        if abs(value - sign * h1 / k1) <= abs_value * tolerance or k1 > max_denominator:
            break
        remainder = b - a
        if remainder == 0:
            break
        b = 1 / remainder
        if not math.isfinite(b):
            break

    if k1 > max_denominator or h1 == 0 or abs(value - sign * h1 / k1) > tolerance:
        return value

    return f"{sign * h1}/{k1}"


def clean_float(value):
    """Round to 15 significant digits, the safe limit for a 64-bit float."""
    return float(f"{value:.{SIGNIFICANT_DIGITS}g}")


def format_integer(value):
    if abs(value) >= 1e21:
        return repr(float(value))
    return str(int(value))


def format_result(result, fractions=True):
    """Render an EvaluationResult (or a bare number / status string) for the display."""
    if isinstance(result, str):
        return result  # already a status text, pass through
    if isinstance(result, E.EvaluationResult):
        if result.is_error:
            return E.DISPLAY_MESSAGES[result.error]
        result = result.value

    result = float(result)
    if math.isinf(result):
        return E.DISPLAY_MESSAGES[E.ErrorKind.DIVISION_BY_ZERO]
    if math.isnan(result):
        return E.DISPLAY_MESSAGES[E.ErrorKind.INVALID_INPUT]

    # 1. Snap values that are extremely close to an integer
    nearest = round(result)
    if abs(result - nearest) < SNAP_TOLERANCE:
        return format_integer(nearest)

    # 2. Remove representation noise
    cleaned = clean_float(result)
    if cleaned.is_integer():
        return format_integer(cleaned)

    # 3. Prefer a fraction when one fits
    if fractions:
        return str(decimal_to_fraction(cleaned))
    return str(cleaned)
