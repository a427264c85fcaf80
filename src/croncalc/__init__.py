# src/croncalc/__init__.py
from importlib.metadata import version, PackageNotFoundError

from .errors import (
    ExpressionError,
    MalformedTokenError,
    NullInputError,
    TokenCountError,
    UnknownNameError,
    ValueOutOfRangeError,
)
from .expression import FieldKind, Schedule, parse_expression
from .fieldset import FieldDomain, FieldSet
from .occurrence import (
    default_end,
    iter_fires,
    iter_occurrences,
    local_now,
    next_fire,
    next_occurrence,
)

try:
    __version__ = version("croncalc")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ExpressionError",
    "FieldDomain",
    "FieldKind",
    "FieldSet",
    "MalformedTokenError",
    "NullInputError",
    "Schedule",
    "TokenCountError",
    "UnknownNameError",
    "ValueOutOfRangeError",
    "default_end",
    "iter_fires",
    "iter_occurrences",
    "local_now",
    "next_fire",
    "next_occurrence",
    "parse_expression",
]
