"""Render evaluation results for display."""
import math


def format_result(value: float) -> str:
    """
    Render a result the way the calculator prints it.

    Integral values are shown in base 10 and base 16 (of the truncated
    integer, sign kept); anything else as fixed-point with 10 decimals.
    Negative integers keep a minus sign in base 16 (``-FF``) instead of
    a 64-bit two's complement (``FFFFFFFFFFFFFF01``).

    :param float value: Evaluated result

    :return: Display text, possibly spanning two lines
    :rtype: str
    """
    if not math.isfinite(value):
        return str(value)

    if value == math.floor(value):
        integer = int(value)
        sign = "-" if integer < 0 else ""
        return f"Base 10: {integer}\nBase 16: {sign}{abs(integer):X}"

    return f"{value:.10f}"
