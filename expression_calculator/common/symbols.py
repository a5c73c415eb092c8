"""Named constants and single-argument functions."""
import math
from typing import Callable, Dict, Optional, Tuple


# Type alias for unary functions (taking one float, returning a float)
FunctionFn = Callable[[float], float]


def _ieee(fn: FunctionFn) -> FunctionFn:
    """Wrap a math function so domain errors give NaN instead of raising."""

    def wrapper(arg: float) -> float:
        try:
            return fn(arg)
        except ValueError:
            return math.nan

    wrapper.__name__ = fn.__name__
    return wrapper


# Mapping of constant names to (value, description)
CONSTANTS: Dict[str, Tuple[float, str]] = {
    "pi": (math.pi, "The ratio of a circle's circumference to its diameter"),
    "e": (math.e, "Euler's number, base of the natural logarithm"),
}

# Mapping of function names to (function, description)
FUNCTIONS: Dict[str, Tuple[FunctionFn, str]] = {
    "sin": (_ieee(math.sin), "Sine function"),
    "cos": (_ieee(math.cos), "Cosine function"),
    "sqrt": (_ieee(math.sqrt), "Square-root function"),
}


def lookup_constant(name: str) -> Optional[float]:
    """
    Resolve a constant by name.

    :param str name: Identifier as written in the expression

    :return: Constant value, or None if the name is not a constant
    :rtype: Optional[float]
    """
    entry = CONSTANTS.get(name)
    return None if entry is None else entry[0]


def lookup_function(name: str) -> Optional[FunctionFn]:
    """
    Resolve a function by name.

    :param str name: Identifier as written in the expression

    :return: Function, or None if the name is not a function
    :rtype: Optional[FunctionFn]
    """
    entry = FUNCTIONS.get(name)
    return None if entry is None else entry[0]


def describe_symbols() -> str:
    """Render the constant and function tables for the ``-c`` CLI flag."""
    lines = [f"\t{name:<6}\t{value:<15.10f}\t{text}" for name, (value, text) in CONSTANTS.items()]
    lines.append("")
    lines.extend(f"\t{name + '()':<7}\t{text}" for name, (_, text) in FUNCTIONS.items())
    return "\n".join(lines)
