"""Binary operators with IEEE-754 semantics."""
import math
import operator
from typing import Callable, Dict, Tuple


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]


def _signed_infinity(base: float, exponent: float) -> float:
    """Infinity carrying the sign pow() would give for this base/exponent."""
    odd_exponent = exponent.is_integer() and math.fmod(exponent, 2.0) != 0.0
    return math.copysign(math.inf, base) if odd_exponent else math.inf


def power(base: float, exponent: float) -> float:
    """pow() returning inf/NaN where Python would raise."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return _signed_infinity(base, exponent)
    except ValueError:
        # 0 raised to a negative power is a pole, anything else a domain error
        if base == 0.0:
            return _signed_infinity(base, exponent)
        return math.nan


def divide(left: float, right: float) -> float:
    """Floating division, x/0 gives a signed infinity and 0/0 gives NaN."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def modulus(left: float, right: float) -> float:
    """C fmod(): result takes the sign of the dividend, NaN on domain errors."""
    try:
        return math.fmod(left, right)
    except ValueError:
        return math.nan


# Mapping of operator symbols to (reduction phase, function)
# Phase 0 binds tightest, phase 2 loosest
OPERATORS: Dict[str, Tuple[int, OperatorFn]] = {
    "^": (0, power),
    "*": (1, operator.mul),
    "/": (1, divide),
    "%": (1, modulus),
    "+": (2, operator.add),
    "-": (2, operator.sub),
}

PHASE_COUNT = 3
