"""
Command-line entry point of the calculator.

This script either:
- evaluates the expression given as arguments and prints the result, or
- runs the line-oriented input mode (``-i``)

Exit status: 0 on success, 1 on a recoverable error (or missing arguments),
2 on a fatal evaluation error.
"""

import argparse
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from expression_calculator.cli.repl import InputSession
from expression_calculator.common.errors import FATAL_EXIT_CODE
from expression_calculator.common.formatting import format_result
from expression_calculator.common.logger import logger, set_debug
from expression_calculator.common.models import MAX_EXPRESSION_LENGTH
from expression_calculator.common.parser import ExpressionParser
from expression_calculator.common.symbols import describe_symbols

DESCRIPTION = """\
This is a simplistic expression calculator that's very easy to use from the shell.
It can take values in Base 10, 16, or 8. It has some built in constants and
functions. Expression inputs are evaluated according to the order of
operations: PE(MD)(AS)."""

EPILOG = """\
Supported operators:

\t^ - Exponent
\t* - Multiply
\t/ - Divide
\t% - Modulus
\t+ - Addition
\t- - Subtraction"""


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expression : List[str]
        Words of the expression, joined before evaluation.
    debug : bool
        Enable debug output of the evaluation.
    show_symbols : bool
        Print supported constants and functions.
    input_mode : bool
        Read expressions from the terminal.
    """

    expression: List[str] = Field(default_factory=list)
    debug: bool = False
    show_symbols: bool = False
    input_mode: bool = False

    @field_validator("expression")
    def expression_must_fit(cls, v: List[str]) -> List[str]:
        """Reject expressions longer than the input buffer."""
        if len("".join(v)) > MAX_EXPRESSION_LENGTH:
            raise ValueError("Expression is too long. What are you feeding me?")
        return v


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser of the ``calc`` command."""
    parser = argparse.ArgumentParser(
        prog="calc",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-d", dest="debug", action="store_true", help="Enable debug output")
    parser.add_argument("-c", dest="show_symbols", action="store_true", help="Print supported constants & functions")
    parser.add_argument("-i", dest="input_mode", action="store_true", help="Input mode. Reads expression input from the terminal")
    parser.add_argument("expression", nargs="*", help="Expression to evaluate; spaces are ignored")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments without the program name, ``sys.argv[1:]`` if None

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        return CliArgs(**vars(args))
    except ValidationError as exc:
        parser.error(str(exc))


def evaluate_once(parser: ExpressionParser, expression: str) -> int:
    """
    Evaluate one expression, print it and return the exit status.

    :param ExpressionParser parser: Evaluator
    :param str expression: Expression to evaluate

    :return: 0 on success, 1 on a recoverable error, 2 on a fatal one
    :rtype: int
    """
    result = parser.try_evaluate(expression)

    if result.fatal:
        logger.critical(f"💥 {result.error}")
        return FATAL_EXIT_CODE
    if result.failed:
        logger.error(f"❌ {result.error}")
        return 1

    print(format_result(result.result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``calc`` command.
    """
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        build_arg_parser().print_help()
        return 1

    cli_args = parse_args(argv)
    set_debug(cli_args.debug)

    if cli_args.show_symbols:
        print(describe_symbols())
        print()

    parser = ExpressionParser()

    if cli_args.input_mode:
        return InputSession(parser=parser).run()

    if not cli_args.expression:
        return 0

    return evaluate_once(parser, " ".join(cli_args.expression))


if __name__ == "__main__":
    sys.exit(main())
