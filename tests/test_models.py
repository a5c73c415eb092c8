"""Test classes OperationRequest, OperationResult and Frame."""
from pydantic import ValidationError
import pytest

from expression_calculator.common.errors import (
    CapacityExceededError,
    InvalidExpressionError,
    OperatorWithoutOperandError,
    RecursionLimitError,
    RunawayLoopError,
    UnknownIdentifierError,
)
from expression_calculator.common.models import (
    MAX_EXPRESSION_LENGTH,
    Frame,
    OperationRequest,
    OperationResult,
)


def test_operation_request_strips_whitespace() -> None:
    """Whitespace is removed from the expression."""
    req = OperationRequest(expression=" 2 + 2 *\t3 ")
    assert req.expression == "2+2*3"
    assert req.depth == 0


@pytest.mark.parametrize("expression", ["2 × 3", "1\x00", "1" * (MAX_EXPRESSION_LENGTH + 1)])
def test_operation_request_rejects_bad_text(expression) -> None:
    """Non-ASCII and over-long expressions are rejected."""
    with pytest.raises(ValidationError):
        OperationRequest(expression=expression)


def test_operation_request_allows_empty_text() -> None:
    """Blank text is left for the evaluator to reject."""
    assert OperationRequest(expression="  \t").expression == ""


def test_operation_request_length_ignores_whitespace() -> None:
    """Only the compacted expression counts against the length limit."""
    req = OperationRequest(expression="1 " * MAX_EXPRESSION_LENGTH)
    assert len(req.expression) == MAX_EXPRESSION_LENGTH


def test_operation_request_from_text() -> None:
    """from_text reports rejected text as an evaluation error."""
    assert OperationRequest.from_text("1 + 1", depth=2).depth == 2
    with pytest.raises(InvalidExpressionError, match="too long"):
        OperationRequest.from_text("9" * (MAX_EXPRESSION_LENGTH + 1))
    with pytest.raises(InvalidExpressionError, match="ASCII"):
        OperationRequest.from_text("π")


def test_operation_request_invalid_type() -> None:
    """Test that non-string expressions raise a validation error."""
    with pytest.raises(ValidationError):
        # int instead of str
        OperationRequest(expression=123)


def test_operation_request_negative_depth() -> None:
    """Depth cannot be negative."""
    with pytest.raises(ValidationError):
        OperationRequest(expression="1", depth=-1)


def test_operation_result_valid() -> None:
    """Test that a valid OperationResult can be created."""
    res = OperationResult(expression="2 + 2 * 3", result=8.0)
    assert res.expression == "2 + 2 * 3"
    assert res.result == 8.0
    assert not res.failed
    assert isinstance(res.result, float)


def test_operation_result_invalid_result_type() -> None:
    """Test that invalid result type raises a validation error."""
    with pytest.raises(ValidationError):
        OperationResult(expression="2 + 2", result="not a float")


def test_operation_result_from_recoverable_error() -> None:
    """from_error copies the message and kind of a recoverable error."""
    res = OperationResult.from_error("q", UnknownIdentifierError("q"))
    assert res.failed
    assert not res.fatal
    assert res.result == 0.0
    assert res.error_kind == "UnknownIdentifierError"
    assert "quit" in res.error


def test_operation_result_from_fatal_error() -> None:
    """from_error marks fatal errors."""
    res = OperationResult.from_error("((1))", RecursionLimitError("too deep"))
    assert res.fatal
    assert res.error == "too deep"


def test_frame_for_span() -> None:
    """A new frame starts empty with its cursor at the span start."""
    frame = Frame.for_span(3, 8, depth=1)
    assert frame.cursor == 3
    assert frame.remaining
    assert frame.tokens == [] and frame.operators == []


def test_frame_bind_operator_needs_token() -> None:
    """An operator cannot be bound before a token exists."""
    frame = Frame.for_span(0, 3, depth=0)
    with pytest.raises(OperatorWithoutOperandError):
        frame.bind_operator("+")
    frame.tokens.append(1.0)
    frame.bind_operator("+")
    assert frame.operators == ["+"]
    with pytest.raises(OperatorWithoutOperandError):
        frame.bind_operator("*")


def test_frame_tick_and_capacity() -> None:
    """The iteration and token guards fire past their limits."""
    frame = Frame.for_span(0, 1, depth=0)
    frame.tick(1)
    with pytest.raises(RunawayLoopError):
        frame.tick(1)

    frame.tokens.extend([1.0, 2.0])
    frame.check_capacity(3)
    with pytest.raises(CapacityExceededError):
        frame.check_capacity(2)
