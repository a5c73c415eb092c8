"""Pydantic models for evaluation requests, results and frames."""
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from expression_calculator.common.errors import (
    CapacityExceededError,
    EvaluationError,
    InvalidExpressionError,
    OperatorWithoutOperandError,
    RunawayLoopError,
)


# Longest expression accepted, the size of the original input buffer
MAX_EXPRESSION_LENGTH = 4095


class OperationRequest(BaseModel):
    """A single expression to evaluate, whitespace already removed."""

    expression: str = Field(..., description="Arithmetic expression as a string")
    depth: int = Field(default=0, ge=0, description="Recursion depth the evaluation starts at")

    @field_validator("expression")
    def expression_must_be_compact_ascii(cls, v: str) -> str:
        """Drop whitespace and reject over-long or non-ASCII expressions."""
        v = "".join(v.split())
        if len(v) > MAX_EXPRESSION_LENGTH:
            raise ValueError(f"Expression is too long ({len(v)} > {MAX_EXPRESSION_LENGTH} characters)")
        if not v.isascii() or "\x00" in v:
            raise ValueError("Expression must be printable ASCII")
        return v

    @classmethod
    def from_text(cls, expression: str, depth: int = 0) -> "OperationRequest":
        """
        Validate raw input text.

        Empty text passes; the evaluator reports it as an empty expression.

        :param str expression: Expression as typed
        :param int depth: Recursion depth the evaluation starts at

        :return: Validated request
        :rtype: OperationRequest
        :raises InvalidExpressionError: If the text is rejected
        """
        try:
            return cls(expression=expression, depth=depth)
        except ValidationError as exc:
            raise InvalidExpressionError(exc.errors()[0]["msg"]) from exc


class OperationResult(BaseModel):
    """
    Outcome of one evaluation.

    ``failed`` tells whether ``result`` can be trusted; on failure it is 0.0
    and ``error`` / ``error_kind`` describe what went wrong.
    """

    expression: str = Field(..., description="Original arithmetic expression")
    result: float = Field(default=0.0, description="Evaluated numeric result of the expression")
    failed: bool = Field(default=False, description="True if the evaluation did not complete")
    error: Optional[str] = Field(default=None, description="Error message when failed")
    error_kind: Optional[str] = Field(default=None, description="Error class name when failed")
    fatal: bool = Field(default=False, description="True if the error must terminate the caller")

    @classmethod
    def from_error(cls, expression: str, exc: EvaluationError) -> "OperationResult":
        """Build a failed result from an evaluation error."""
        return cls(
            expression=expression,
            failed=True,
            error=str(exc),
            error_kind=exc.kind,
            fatal=exc.fatal,
        )


class Frame(BaseModel):
    """
    One level of the evaluation: a ``[start, end)`` span of the expression
    buffer together with the flat token/operator sequence scanned from it.
    """

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    depth: int = Field(..., ge=0)
    cursor: int = Field(..., ge=0)
    iterations: int = Field(default=0, ge=0)
    tokens: List[float] = Field(default_factory=list)
    operators: List[str] = Field(default_factory=list)

    @classmethod
    def for_span(cls, start: int, end: int, depth: int) -> "Frame":
        """Create an empty frame with its cursor on the first character."""
        return cls(start=start, end=end, depth=depth, cursor=start)

    @property
    def remaining(self) -> bool:
        return self.cursor < self.end

    def tick(self, max_iterations: int) -> None:
        """Count one scanning iteration, failing fatally past the ceiling."""
        self.iterations += 1
        if self.iterations > max_iterations:
            raise RunawayLoopError(
                "Look out! Runaway loop! It seems to be stuck in an infinite loop"
            )

    def check_capacity(self, max_tokens: int) -> None:
        """Refuse to scan another token once the frame is full."""
        if len(self.tokens) >= max_tokens:
            raise CapacityExceededError(f"Too many tokens in expression (limit {max_tokens})")

    def bind_operator(self, symbol: str) -> None:
        """Attach an operator to the last token scanned."""
        if len(self.operators) >= len(self.tokens):
            raise OperatorWithoutOperandError(
                f"Found operator '{symbol}', but no token (numeric value) to apply it to"
            )
        self.operators.append(symbol)
