"""Collapse a flat token/operator sequence to one value by precedence."""
from typing import List

from expression_calculator.common.errors import InvariantViolationError
from expression_calculator.common.logger import logger
from expression_calculator.common.operators import OPERATORS, PHASE_COUNT


def rebuild_equation(tokens: List[float], operators: List[str]) -> str:
    """Render a token/operator sequence back as text, for debug output."""
    parts: List[str] = []
    for index, token in enumerate(tokens):
        if index > 0:
            parts.append(f" {operators[index - 1]} ")
        parts.append(f"{token:.6f}")
    return "".join(parts)


def reduce_tokens(tokens: List[float], operators: List[str]) -> float:
    """
    Reduce a token/operator sequence to a single value.

    ``operators[i]`` sits between ``tokens[i]`` and ``tokens[i + 1]``.
    Three left-to-right passes are made, one per precedence phase:

        0. ``^``
        1. ``*``, ``/``, ``%``
        2. ``+``, ``-``

    Each reduction stores the result at the left operand's index and removes
    the right operand and the operator, then the same index is examined again
    so chains like ``8/2/2`` fold left to right.

    Both lists are consumed in place.

    :param List[float] tokens: Operand values
    :param List[str] operators: Operator symbols, one fewer than tokens

    :return: The value left once every operator has been applied
    :rtype: float
    :raises InvariantViolationError: If the sequence is inconsistent or a
        non-additive operator survives to the last phase
    """
    if not tokens or len(operators) != len(tokens) - 1:
        raise InvariantViolationError(
            f"Token/operator sequence out of step: {len(tokens)} tokens, {len(operators)} operators"
        )

    for phase in range(PHASE_COUNT):
        index = 0
        while index < len(operators):
            symbol = operators[index]
            if symbol not in OPERATORS:
                raise InvariantViolationError(f"Somehow, a non-operator character got into the operators list: {symbol!r}")

            symbol_phase, fn = OPERATORS[symbol]
            if symbol_phase != phase:
                if phase == PHASE_COUNT - 1:
                    raise InvariantViolationError(f"Found invalid operator {symbol!r} in last phase of evaluation")
                index += 1
                continue

            left, right = tokens[index], tokens[index + 1]
            tokens[index] = fn(left, right)
            logger.debug(f"🧮 Calc: {left:.6f} {symbol} {right:.6f} = {tokens[index]:.6f}")

            # Shift the rest of the sequence left by one; retry the same index
            del tokens[index + 1]
            del operators[index]

    return tokens[0]
