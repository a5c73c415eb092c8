"""Worker process evaluating one expression in isolation."""
from multiprocessing import Pipe, Process
from multiprocessing.connection import Connection
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expression_calculator.common.errors import FATAL_EXIT_CODE
from expression_calculator.common.logger import logger
from expression_calculator.common.models import OperationResult
from expression_calculator.common.parser import ExpressionParser


class WorkerProcess(BaseModel):
    """
    Worker responsible for evaluating a single arithmetic expression.

    Lifecycle:
        - Spawned in a child process by ``run_isolated``
        - Receives one expression only
        - Sends the computed result or error through a Pipe
        - Exits with ``FATAL_EXIT_CODE`` when the error is fatal, so the
          parent sees a controlled termination
    """

    # Make the Pydantic instance immutable (read-only) for safety
    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Connection object for sending results back to the parent")
    expression: str = Field(..., description="Single arithmetic expression to evaluate")
    parser: ExpressionParser = Field(default_factory=ExpressionParser, description="Evaluator and its limits")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v

    def run(self) -> None:
        """
        Evaluate the expression and send the result or error through the pipe.

        :return: None
        :raises SystemExit: With ``FATAL_EXIT_CODE`` after reporting a fatal error
        """
        logger.info(f"👷🏁 Worker started: {self.expression}")

        outcome: Union[OperationResult, None] = None

        try:
            outcome = self.parser.try_evaluate(self.expression)
            if not outcome.failed:
                self.conn.send({"expression": self.expression, "result": outcome.result})
            else:
                log = logger.critical if outcome.fatal else logger.error
                log(f"👷❌ Worker failed: {outcome.error}\nCould not evaluate: {self.expression!r}")

                self.conn.send(
                    {
                        "expression": self.expression,
                        "error": outcome.error,
                        "kind": outcome.error_kind,
                        "fatal": outcome.fatal,
                    }
                )

        finally:
            # Always close the connection
            self.conn.close()

        if outcome.fatal:
            raise SystemExit(FATAL_EXIT_CODE)
        if not outcome.failed:
            logger.info(f"👷✅ Worker finished: {outcome.result}")


def run_isolated(expression: str, parser: Union[ExpressionParser, None] = None) -> OperationResult:
    """
    Evaluate an expression in a child process.

    A fatal error terminates only the child; the parent gets a failed,
    fatal result back.

    :param str expression: Arithmetic expression
    :param ExpressionParser parser: Evaluator to use, default limits if omitted

    :return: Result of the evaluation
    :rtype: OperationResult
    """
    parent_conn, child_conn = Pipe(duplex=False)
    worker = WorkerProcess(conn=child_conn, expression=expression, parser=parser or ExpressionParser())
    process = Process(target=worker.run)
    process.start()
    # The parent keeps only the reading end
    child_conn.close()

    try:
        payload: dict = parent_conn.recv()
    except EOFError:
        payload = {"expression": expression, "error": "Worker exited without a result", "kind": "WorkerCrash"}
    finally:
        parent_conn.close()
        process.join()

    if "result" in payload:
        return OperationResult(expression=expression, result=payload["result"])

    return OperationResult(
        expression=expression,
        failed=True,
        error=payload["error"],
        error_kind=payload["kind"],
        fatal=payload.get("fatal", False) or process.exitcode == FATAL_EXIT_CODE,
    )
