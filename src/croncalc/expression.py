# src/croncalc/expression.py
from enum import IntEnum
from typing import NamedTuple

from .errors import ExpressionError, NullInputError, TokenCountError
from .fieldset import FieldDomain, FieldSet

#
# Five-part expression:
#
#   minute  hour  day-of-month  month  day-of-week
#
# Six-part expression (leading seconds):
#
#   second  minute  hour  day-of-month  month  day-of-week
#
# Fields are read from the right, so the optional seconds field is the
# one that may be missing.
#

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class FieldKind(IntEnum):
    SECOND = 0
    MINUTE = 1
    HOUR = 2
    DAY_OF_MONTH = 3
    MONTH = 4
    DAY_OF_WEEK = 5

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


DOMAINS: dict[FieldKind, FieldDomain] = {
    FieldKind.SECOND: FieldDomain(0, 59),
    FieldKind.MINUTE: FieldDomain(0, 59),
    FieldKind.HOUR: FieldDomain(0, 23),
    FieldKind.DAY_OF_MONTH: FieldDomain(1, 31),
    FieldKind.MONTH: FieldDomain(1, 12, MONTH_NAMES),
    FieldKind.DAY_OF_WEEK: FieldDomain(0, 6, DAY_NAMES),
}

# right-to-left assignment order for the tokens of an expression
TOKEN_ORDER = (
    FieldKind.DAY_OF_WEEK,
    FieldKind.MONTH,
    FieldKind.DAY_OF_MONTH,
    FieldKind.HOUR,
    FieldKind.MINUTE,
    FieldKind.SECOND,
)

DEFAULT_SECONDS = "0"


class Schedule(NamedTuple):
    """Parsed expression: one FieldSet per FieldKind, indexable by kind."""

    second: FieldSet
    minute: FieldSet
    hour: FieldSet
    day_of_month: FieldSet
    month: FieldSet
    day_of_week: FieldSet


def parse_field(kind: FieldKind, token: str) -> FieldSet:
    try:
        return FieldSet.for_domain(token, DOMAINS[kind])
    except ExpressionError as e:
        raise type(e)(f"{kind.label}: {e}") from e


def parse_expression(expression: str) -> Schedule:
    """
    Build a Schedule from a 5 or 6 field cron expression.

    Raises:
        NullInputError: expression is None.
        TokenCountError: not 5 or 6 whitespace separated fields.
        ValueOutOfRangeError, UnknownNameError, MalformedTokenError:
            from the field that failed to parse.
    """
    if expression is None:
        raise NullInputError("expression must not be None")

    tokens = expression.split()
    if not 5 <= len(tokens) <= 6:
        raise TokenCountError(
            f"expression must contain 5 or 6 tokens (actual {len(tokens)} : {expression!r})"
        )

    fields: dict[FieldKind, FieldSet] = {}
    for kind, token in zip(TOKEN_ORDER, reversed(tokens)):
        fields[kind] = parse_field(kind, token)

    if FieldKind.SECOND not in fields:
        fields[FieldKind.SECOND] = parse_field(FieldKind.SECOND, DEFAULT_SECONDS)

    return Schedule(*(fields[kind] for kind in FieldKind))
