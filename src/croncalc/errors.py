# src/croncalc/errors.py
"""
Errors raised while turning an expression into a Schedule.

Every failure is detected before any search starts. The search itself never
raises: it returns the caller's end bound when nothing matches.
"""


class ExpressionError(ValueError):
    """Base class for every expression parsing failure."""


class NullInputError(ExpressionError):
    """The expression was None."""


class TokenCountError(ExpressionError):
    """The expression did not split into 5 or 6 fields."""


class ValueOutOfRangeError(ExpressionError):
    """A numeric literal fell outside its field's domain."""


class UnknownNameError(ExpressionError):
    """A symbolic value matched no name by prefix."""


class MalformedTokenError(ExpressionError):
    """Any other syntax problem, including a bad step."""
