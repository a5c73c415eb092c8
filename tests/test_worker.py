"""Unit tests for WorkerProcess using real Pipe connections."""
from multiprocessing import Pipe

import pytest

from expression_calculator.common.errors import FATAL_EXIT_CODE
from expression_calculator.common.parser import ExpressionParser
from expression_calculator.sandbox.worker import WorkerProcess, run_isolated

TOO_DEEP = "(" * 1001 + "1" + ")" * 1001


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("2 + 3", 5.0),
        ("10 - 4", 6.0),
        ("3 * 4", 12.0),
        ("8 / 2", 4.0),
        ("sqrt(16) + 0x10", 20.0),
    ],
)
def test_worker_sends_result_for_valid_expression(expr: str, expected: float) -> None:
    """Worker sends computed result through the connection for valid expressions."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression=expr)
    worker.run()

    msg = parent_conn.recv()
    assert msg["expression"] == expr
    assert msg["result"] == expected
    assert "error" not in msg


@pytest.mark.parametrize(
    "expr",
    [
        "2 +",         # Trailing operator
        "+ 3 4",       # Leading operator
        "(2 + 3",      # Unclosed group
        "foo",         # Unknown constant
    ],
)
def test_worker_sends_error_for_invalid_expression(expr: str) -> None:
    """Worker sends an error message for malformed arithmetic expressions."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression=expr)
    worker.run()

    msg = parent_conn.recv()
    assert msg["expression"] == expr
    assert isinstance(msg["error"], str)
    assert msg["fatal"] is False


def test_worker_exits_on_fatal_error() -> None:
    """Worker reports a fatal error, then exits with the fatal status."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression=TOO_DEEP)

    with pytest.raises(SystemExit) as info:
        worker.run()
    assert info.value.code == FATAL_EXIT_CODE

    msg = parent_conn.recv()
    assert msg["fatal"] is True
    assert msg["kind"] == "RecursionLimitError"


def test_worker_rejects_empty_expression() -> None:
    """Pydantic validation prevents creating WorkerProcess with empty expression."""
    _, child_conn = Pipe()
    with pytest.raises(ValueError):
        WorkerProcess(conn=child_conn, expression="")


def test_run_isolated_success() -> None:
    """run_isolated returns the child's result."""
    result = run_isolated("2*21")
    assert not result.failed
    assert result.result == 42.0


def test_run_isolated_recoverable_error() -> None:
    """A recoverable error comes back as a failed, non-fatal result."""
    result = run_isolated("2++")
    assert result.failed
    assert not result.fatal
    assert result.error_kind == "EmptyTokenRunError"


def test_run_isolated_depth_ceiling() -> None:
    """Nesting past the ceiling terminates the child, not the caller."""
    result = run_isolated(TOO_DEEP)
    assert result.failed
    assert result.fatal
    assert result.error_kind == "RecursionLimitError"


def test_run_isolated_custom_limits() -> None:
    """The parser limits travel to the child process."""
    result = run_isolated("1+2+3", parser=ExpressionParser(max_iterations=2))
    assert result.fatal
    assert result.error_kind == "RunawayLoopError"


def test_worker_reports_invalid_text() -> None:
    """Non-ASCII input is validated before evaluation and reported as an error."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression="2 × 3")
    worker.run()

    msg = parent_conn.recv()
    assert msg["kind"] == "InvalidExpressionError"
    assert msg["fatal"] is False


def test_run_isolated_hex_float_overflow() -> None:
    """An overflowing literal reaches the parent as infinity."""
    result = run_isolated("0x1.0p99999")
    assert not result.failed
    assert result.result == float("inf")
