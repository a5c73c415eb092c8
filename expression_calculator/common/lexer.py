"""
Lexical helpers for the expression evaluator.

The evaluator works on one shared, whitespace-free expression string and
addresses it through ``[start, end)`` spans, so every helper here takes the
text plus the span bounds and returns the cursor position it stopped at.
"""
from enum import Enum
import math
import re
import string
from typing import Tuple

from expression_calculator.common.errors import UnbalancedParensError


OPERATOR_CHARS = "^*/%+-"
NUMERIC_CHARS = "0123456789xX-."
IDENTIFIER_CHARS = string.ascii_lowercase

# Literal prefixes accepted where a number starts, mirroring C's
# strtoll(..., 0) and strtod() (hexadecimal floats included)
_INTEGER_LITERAL = re.compile(r"-?(?:0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_FLOAT_LITERAL = re.compile(
    r"-?(?:"
    r"0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r")"
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
# Decimal digits of INT64_MAX; longer decimal literals saturate without conversion
INT64_DECIMAL_DIGITS = 19


class LexemeKind(Enum):
    """Class of the lexeme starting at a cursor position."""

    IDENTIFIER = "identifier"
    GROUP = "group"
    NUMBER = "number"
    NONE = "none"


def classify(char: str) -> LexemeKind:
    """
    Decide which kind of lexeme starts with ``char``.

    Lowercase letters are tested first, so ``x`` on its own is an identifier
    even though it also belongs to the numeric charset (hex prefix), while
    ``X`` is read as a number.

    :param str char: Character under the cursor

    :return: Lexeme kind, ``LexemeKind.NONE`` if no class matches
    :rtype: LexemeKind
    """
    if char in IDENTIFIER_CHARS:
        return LexemeKind.IDENTIFIER
    if char == "(":
        return LexemeKind.GROUP
    if char in NUMERIC_CHARS:
        return LexemeKind.NUMBER
    return LexemeKind.NONE


def is_operator(char: str) -> bool:
    """Return True if ``char`` is a binary operator symbol."""
    return len(char) == 1 and char in OPERATOR_CHARS


def read_identifier(text: str, start: int, end: int) -> Tuple[str, int]:
    """
    Consume a run of letters.

    :param str text: Expression buffer
    :param int start: Cursor on the first letter
    :param int end: End of the current span

    :return: Tuple of (identifier, cursor after the last letter)
    :rtype: Tuple[str, int]
    """
    cursor = start
    while cursor < end and text[cursor] in IDENTIFIER_CHARS:
        cursor += 1
    return text[start:cursor], cursor


def match_parenthesis(text: str, open_index: int, end: int, owner: str = "Expression") -> int:
    """
    Find the parenthesis closing the one at ``open_index``.

    :param str text: Expression buffer
    :param int open_index: Index of the opening parenthesis
    :param int end: End of the current span
    :param str owner: What the group belongs to, used in the error message

    :return: Index of the matching closing parenthesis
    :rtype: int
    :raises UnbalancedParensError: If the nesting level never returns to zero
    """
    level = 0
    for index in range(open_index, end):
        if text[index] == "(":
            level += 1
        elif text[index] == ")":
            level -= 1
            if level == 0:
                return index
    raise UnbalancedParensError(f"{owner} found without closing parenthesis")


def scan_numeric_run(text: str, start: int, end: int) -> int:
    """
    Return the end of the numeric-charset run starting at ``start``.

    A trailing ``-`` is left out of the run: it is the operator that follows
    the literal, not part of it.
    """
    cursor = start
    while cursor < end and text[cursor] in NUMERIC_CHARS:
        cursor += 1
    if cursor > start and text[cursor - 1] == "-":
        cursor -= 1
    return cursor


def _integer_value(literal: str) -> float:
    """Convert an integer literal with automatic base detection."""
    negative = literal.startswith("-")
    digits = literal[1:] if negative else literal

    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits.startswith("0"):
        value = int(digits, 8)
    elif len(digits) > INT64_DECIMAL_DIGITS:
        value = INT64_MAX + 1
    else:
        value = int(digits, 10)

    if negative:
        value = -value
    # Saturate like strtoll
    return float(min(max(value, INT64_MIN), INT64_MAX))


def _float_value(literal: str) -> float:
    """Convert a decimal or hexadecimal floating-point literal."""
    if "x" in literal or "X" in literal:
        try:
            return float.fromhex(literal)
        except OverflowError:
            # strtod gives HUGE_VAL
            return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def parse_number(text: str, start: int, end: int) -> Tuple[float, int]:
    """
    Parse the numeric literal starting at ``start``.

    If the numeric run contains a ``.`` the literal is read as a float,
    otherwise as an integer whose base is picked from its prefix
    (``0x`` hexadecimal, leading ``0`` octal, decimal otherwise).
    The longest valid literal is consumed, so ``2-3`` stops before ``-``.

    When no literal can be read (e.g. ``-`` in front of ``(``), the value is
    ``0.0`` and the cursor does not move: the caller then sees the ``-``
    as a binary operator, which makes ``-(2)`` evaluate as ``0-2``.

    :param str text: Expression buffer
    :param int start: Cursor on the first character of the literal
    :param int end: End of the current span

    :return: Tuple of (value, cursor after the literal)
    :rtype: Tuple[float, int]
    """
    run_end = scan_numeric_run(text, start, end)
    is_float = "." in text[start:run_end]

    pattern = _FLOAT_LITERAL if is_float else _INTEGER_LITERAL
    match = pattern.match(text, start, end)
    if match is None:
        return 0.0, start

    literal = match.group()
    value = _float_value(literal) if is_float else _integer_value(literal)
    return value, match.end()
