"""Errors raised while evaluating an arithmetic expression."""

# Exit status of a process that stopped on a fatal evaluation error
FATAL_EXIT_CODE = 2


class EvaluationError(ValueError):
    """
    Base class of every evaluation failure.

    Recoverable errors leave the caller free to request the next expression.
    Fatal errors (``fatal = True``) mean a hard resource guard was exhausted;
    the caller must stop evaluating and terminate.
    """

    fatal: bool = False

    @property
    def kind(self) -> str:
        """Name of the error class, used in result payloads."""
        return type(self).__name__


class ExpressionSyntaxError(EvaluationError):
    """Malformed expression structure."""


class UnbalancedParensError(ExpressionSyntaxError):
    """An opening parenthesis is never closed."""


class MissingOperatorError(ExpressionSyntaxError):
    """A token is followed by a character that is not an operator."""


class ExpectedOperatorError(ExpressionSyntaxError):
    """A constant or function call is followed by a non-operator character."""


class OperatorWithoutOperandError(ExpressionSyntaxError):
    """An operator has no operand to bind to."""


class EmptyTokenRunError(ExpressionSyntaxError):
    """A scanning step produced no token."""


class EmptyExpressionError(ExpressionSyntaxError):
    """An expression or subexpression is empty, e.g. ``()``."""


class InvalidExpressionError(ExpressionSyntaxError):
    """Input text is too long or not printable ASCII."""


class UnknownIdentifierError(EvaluationError):
    """A name is neither a known constant nor a known function."""

    def __init__(self, name: str, role: str = "variable"):
        message = f"Unrecognized {role} name: '{name}'"
        if name == "q":
            message += ". Perhaps you meant 'qq' or 'quit'?"
        super().__init__(message)
        self.name = name


class CapacityExceededError(EvaluationError):
    """Too many tokens in one expression level."""


class FatalEvaluationError(EvaluationError):
    """Base class of unrecoverable evaluation failures."""

    fatal = True


class RunawayLoopError(FatalEvaluationError):
    """The per-frame scanning loop exceeded its iteration ceiling."""


class RecursionLimitError(FatalEvaluationError):
    """Subexpressions are nested deeper than the depth ceiling."""


class InvariantViolationError(FatalEvaluationError):
    """The token/operator sequence reached an impossible state."""
