"""Line-oriented input mode."""
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from expression_calculator.common.errors import FATAL_EXIT_CODE
from expression_calculator.common.formatting import format_result
from expression_calculator.common.logger import logger
from expression_calculator.common.parser import ExpressionParser

QUIT_COMMANDS = ("quit", "qq")

BANNER = (
    "Running in input mode. Type 'quit' or 'qq' to exit\n"
    "Ctrl-C will clear the current input.\n"
)


class InputSession(BaseModel):
    """
    Interactive session reading one expression per line.

    - Blank lines are skipped
    - ``quit`` or ``qq`` ends the session
    - Recoverable errors are reported and the next line is requested
    - A fatal error ends the session with ``FATAL_EXIT_CODE``
    """

    model_config = ConfigDict(frozen=True)

    parser: ExpressionParser = Field(default_factory=ExpressionParser, description="Evaluator and its limits")
    prompt: str = Field(default="Enter expression> ", description="Prompt shown before each line")

    def run(self, read_line: Optional[Callable[[str], str]] = None) -> int:
        """
        Read and evaluate lines until the user quits or input ends.

        :param read_line: Function prompting for and returning one line, ``input`` if None

        :return: Process exit status
        :rtype: int
        """
        read_line = read_line or input
        print(BANNER)

        while True:
            try:
                line: str = read_line(self.prompt)
            except KeyboardInterrupt:
                # Ctrl-C drops the line being typed
                print()
                continue
            except EOFError:
                print()
                return 0

            expression: str = "".join(line.split())
            if not expression:
                continue

            if expression in QUIT_COMMANDS:
                print("Goodbye!")
                return 0

            result = self.parser.try_evaluate(expression)
            if result.fatal:
                logger.critical(f"💥 {result.error}")
                return FATAL_EXIT_CODE
            if result.failed:
                logger.error(f"❌ {result.error}")
                continue

            print(format_result(result.result))
