"""Parse and evaluate arithmetic expressions safely."""
from typing import Generator, List

from pydantic import BaseModel, ConfigDict, Field

from expression_calculator.common.errors import (
    EmptyExpressionError,
    EmptyTokenRunError,
    EvaluationError,
    ExpectedOperatorError,
    MissingOperatorError,
    OperatorWithoutOperandError,
    RecursionLimitError,
    UnknownIdentifierError,
)
from expression_calculator.common.lexer import (
    LexemeKind,
    classify,
    is_operator,
    match_parenthesis,
    parse_number,
    read_identifier,
)
from expression_calculator.common.logger import logger
from expression_calculator.common.models import Frame, OperationRequest, OperationResult
from expression_calculator.common.reducer import rebuild_equation, reduce_tokens
from expression_calculator.common.symbols import lookup_constant, lookup_function


# A frame scanner yields the child frame it needs evaluated and is resumed
# with that child's value; its return value is the frame's own result.
FrameScanner = Generator[Frame, float, float]


class ExpressionParser(BaseModel):
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Deterministic computation, no state kept between calls
        - Hard, configurable bounds on nesting depth, tokens per level and
          scanning iterations per level

    Algorithm:
        1. Scan one expression level left to right into a flat sequence of
           tokens (numbers) and the operators between them
        2. Parenthesized groups and function arguments are evaluated as
           nested levels, and their value becomes a single token
        3. Reduce the flat sequence in three precedence passes
           (``^``, then ``* / %``, then ``+ -``)

    Nesting is handled by an explicit stack of frame scanners rather than
    native recursion, so the depth ceiling does not depend on Python's
    recursion limit.

    Examples:
        - ``2+3*4`` scans to tokens ``[2, 3, 4]`` and operators ``[+, *]``,
          and reduces to ``14``
        - ``sqrt(2*8)+1`` evaluates ``2*8`` as a nested level first
    """

    # Limits are fixed for the lifetime of a parser
    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(default=1000, ge=0, description="Deepest allowed nesting of subexpressions")
    max_tokens: int = Field(default=50, ge=1, description="Most tokens allowed in one expression level")
    max_iterations: int = Field(default=10000, ge=1, description="Scanning iterations allowed per expression level")

    def evaluate(self, expr: str, depth: int = 0) -> float:
        """
        Evaluate an arithmetic expression.

        :param str expr: Arithmetic expression; whitespace is ignored
        :param int depth: Recursion depth to start at, 0 for a top-level call

        :return: Computed result as float
        :rtype: float
        :raises EvaluationError: If the expression is malformed or a limit is hit
        """
        text: str = "".join(expr.split())
        logger.debug(f"🔎 Evaluating expression: {text}")

        scanners: List[FrameScanner] = [self._scan(text, self._open_frame(0, len(text), depth))]
        value = None
        while True:
            try:
                child: Frame = scanners[-1].send(value)
            except StopIteration as done:
                scanners.pop()
                if not scanners:
                    return done.value
                # Resume the parent with the value of the level just finished
                value = done.value
                continue

            value = None
            scanners.append(self._scan(text, child))

    def try_evaluate(self, expr: str, depth: int = 0) -> OperationResult:
        """
        Evaluate an expression and report failures in the result instead of raising.

        The text is validated as an ``OperationRequest`` first, so over-long or
        non-ASCII input fails with ``InvalidExpressionError``.

        :param str expr: Arithmetic expression
        :param int depth: Recursion depth to start at

        :return: Result with ``failed`` set if the evaluation did not complete
        :rtype: OperationResult
        """
        try:
            request = OperationRequest.from_text(expr, depth)
            value: float = self.evaluate(request.expression, request.depth)
        except EvaluationError as exc:
            return OperationResult.from_error(expr, exc)
        return OperationResult(expression=expr, result=value)

    def _open_frame(self, start: int, end: int, depth: int) -> Frame:
        """Create the frame for a span, enforcing the empty and depth guards."""
        if start >= end:
            raise EmptyExpressionError("Empty expression or subexpression")
        if depth > self.max_depth:
            raise RecursionLimitError(f"Welcome to infinite-recursion hell: nesting deeper than {self.max_depth} levels")
        return Frame.for_span(start, end, depth)

    @staticmethod
    def _apply_function(name: str, argument: float) -> float:
        fn = lookup_function(name)
        if fn is None:
            raise UnknownIdentifierError(name, role="function")
        return fn(argument)

    @staticmethod
    def _resolve_constant(name: str) -> float:
        value = lookup_constant(name)
        if value is None:
            raise UnknownIdentifierError(name)
        return value

    def _scan(self, text: str, frame: Frame) -> FrameScanner:
        """
        Scan one expression level and reduce it.

        Yields the frame of each nested group or function argument and is
        resumed with its value.

        :param str text: Whole expression buffer
        :param Frame frame: Level to scan, covering ``text[frame.start:frame.end]``

        :return: Value of the level
        :rtype: float
        """
        logger.debug(f"↘️ Depth {frame.depth}: {text[frame.start:frame.end]}")

        while frame.remaining:
            frame.tick(self.max_iterations)
            frame.check_capacity(self.max_tokens)
            scanned: int = len(frame.tokens)
            kind: LexemeKind = classify(text[frame.cursor])

            if kind is LexemeKind.IDENTIFIER:
                name, frame.cursor = read_identifier(text, frame.cursor, frame.end)

                # A function name is followed by its parenthesized argument
                if frame.remaining and text[frame.cursor] == "(":
                    close: int = match_parenthesis(text, frame.cursor, frame.end, owner="Function")
                    argument: float = yield self._open_frame(frame.cursor + 1, close, frame.depth + 1)
                    frame.cursor = close + 1
                    frame.tokens.append(self._apply_function(name, argument))
                else:
                    frame.tokens.append(self._resolve_constant(name))

                if frame.remaining and not is_operator(text[frame.cursor]):
                    raise ExpectedOperatorError(
                        f"Function/variable followed with an unrecognized operator: '{text[frame.cursor]}'"
                    )

            elif kind is LexemeKind.GROUP:
                close = match_parenthesis(text, frame.cursor, frame.end)
                value: float = yield self._open_frame(frame.cursor + 1, close, frame.depth + 1)
                frame.cursor = close + 1
                frame.tokens.append(value)

            elif kind is LexemeKind.NUMBER:
                number, frame.cursor = parse_number(text, frame.cursor, frame.end)
                frame.tokens.append(number)

            if len(frame.tokens) == scanned:
                raise EmptyTokenRunError(
                    f"Invalid expression; no numerical token found at '{text[frame.cursor]}'"
                )

            # Grab the operator following the token if there is one
            if frame.remaining:
                symbol: str = text[frame.cursor]
                if not is_operator(symbol):
                    raise MissingOperatorError(f"Numeric constant followed by non-operator character '{symbol}'")
                frame.bind_operator(symbol)
                frame.cursor += 1

        if len(frame.operators) == len(frame.tokens):
            raise OperatorWithoutOperandError(f"Operator '{frame.operators[-1]}' is missing its right operand")

        logger.debug(f"🧾 Equation rebuilt from tokens/operators: {rebuild_equation(frame.tokens, frame.operators)}")
        result: float = reduce_tokens(frame.tokens, frame.operators)
        logger.debug(f"↗️ Depth {frame.depth} result: {result:.10f}")
        return result
