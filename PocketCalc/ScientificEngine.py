# ScientificEngine
"""""
Numeric primitives for the calculator: constants, factorial, power/division with
IEEE-style results, and the named functions the parser can call.

Domain errors never raise here; they come back as nan or +-inf so that
MathEngine can classify the final value.
"""""
import math
from enum import Enum


class AngleMode(Enum):
    DEG = "deg"
    RAD = "rad"


CONSTANTS = {
    "PI": math.pi,
    "E": math.e,
    "PHI": (1 + math.sqrt(5)) / 2,
}

# Spellings accepted in raw input -> canonical constant name
CONSTANT_ALIASES = {
    "PI": "PI",
    "pi": "PI",
    "E": "E",
    "e": "E",
    "PHI": "PHI",
    "phi": "PHI",
}

TRIG_FUNCTIONS = ["sin", "cos", "tan", "csc", "sec", "cot"]
FUNCTIONS = TRIG_FUNCTIONS + ["log", "ln", "sqrt", "abs"]

DEG_TO_RAD = math.pi / 180


def to_radians(value, angle_mode):
    if AngleMode(angle_mode) == AngleMode.DEG:
        return value * DEG_TO_RAD
    return value


def factorial(n):
    """Return n! as a float for integers n >= 0, nan otherwise.

    Non-integer input is rejected instead of being truncated; the product
    overflows to inf from 171! upwards.
    """
    n = float(n)
    if math.isnan(n) or math.isinf(n) or n < 0:
        return math.nan
    if not n.is_integer():
        return math.nan

    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
        if math.isinf(result):
            break
    return result


def reciprocal(value):
    if value == 0:
        return math.copysign(math.inf, value)
    return 1 / value


def divide(left, right):
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def power(base, exponent):
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and int(exponent) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # 0 ** negative
        if base == 0 and exponent < 0:
            return math.inf
        return math.nan


def trigonometry(name, value, angle_mode):  # sin / cos / tan and their reciprocals
    radians = to_radians(value, angle_mode)
    if name == "sin":
        return math.sin(radians)
    elif name == "cos":
        return math.cos(radians)
    elif name == "tan":
        return math.tan(radians)
    elif name == "csc":
        return reciprocal(math.sin(radians))
    elif name == "sec":
        return reciprocal(math.cos(radians))
    elif name == "cot":
        return reciprocal(math.tan(radians))
    raise ValueError(f"Not a trigonometric function: {name}")


def logarithm(name, value):
    if value == 0:
        return -math.inf
    if name == "log":
        return math.log10(value)
    return math.log(value)


def root(value):
    return math.sqrt(value)


def apply_function(name, value, angle_mode=AngleMode.DEG):
    """Dispatch a named function call; math domain errors become nan, overflow becomes inf."""
    try:
        if name in TRIG_FUNCTIONS:
            return trigonometry(name, value, angle_mode)
        elif name == "log" or name == "ln":
            return logarithm(name, value)
        elif name == "sqrt":
            return root(value)
        elif name == "abs":
            return abs(value)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf

    raise KeyError(name)
