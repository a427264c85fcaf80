# src/croncalc/fieldset.py
import re
from typing import Iterator, NamedTuple, Optional, Sequence

from .errors import (
    ExpressionError,
    MalformedTokenError,
    UnknownNameError,
    ValueOutOfRangeError,
)

DIGITS = re.compile(r"^[0-9]+$")

COMMA = ","
SLASH = "/"
DASH = "-"
STAR = "*"


class FieldDomain(NamedTuple):
    """Inclusive value range of one schedule field, with optional names."""

    minimum: int
    maximum: int
    names: tuple[str, ...] = ()


class FieldSet:
    """
    The values allowed for one schedule field, kept as a bitmask.

    Bit ``v - minimum`` is set when ``v`` is allowed. ``min_set`` and
    ``max_set`` bound the set bits and only ever widen while the token's
    subtokens are merged in.

    Token syntax (comma separated, each part optionally ``/step``):

        *        every value
        */n      every n-th value starting at minimum
        a        the single value a
        a-b      a through b, swapped when a > b
        a-b/n    every n-th value from a through b
        a/0      a through maximum (legacy form)

    Values are digits or, for fields with names, a case-insensitive prefix
    of a name ("mon", "Jan").
    """

    def __init__(
        self,
        token: str,
        minimum: int,
        maximum: int,
        names: Optional[Sequence[str]] = None,
    ):
        self._minimum = minimum
        self._maximum = maximum
        self._names = tuple(names or ())
        self._bits = 0
        self._min_set: Optional[int] = None
        self._max_set: Optional[int] = None
        self._token = token

        try:
            self._parse_token(token)
        except ExpressionError as e:
            raise type(e)(f'can\'t parse token "{token}": {e}') from e

    @classmethod
    def for_domain(cls, token: str, domain: FieldDomain) -> "FieldSet":
        return cls(token, domain.minimum, domain.maximum, domain.names)

    # --- properties ---

    @property
    def minimum(self) -> int:
        return self._minimum

    @property
    def maximum(self) -> int:
        return self._maximum

    @property
    def min_set(self) -> Optional[int]:
        return self._min_set

    @property
    def max_set(self) -> Optional[int]:
        return self._max_set

    @property
    def token(self) -> str:
        return self._token

    # --- parsing ---

    def _parse_token(self, token: str):
        if token is None or not token.strip():
            raise MalformedTokenError("empty token")

        if COMMA in token:
            for subtoken in token.split(COMMA):
                self._parse_token(subtoken)
            return

        step = 1
        slash = token.find(SLASH)
        if slash == 0:
            raise MalformedTokenError(f'"{token}" has no value before "/"')
        if slash > 0:
            step = self._parse_step(token[slash + 1 :])
            token = token[:slash]

        if token == STAR:
            self._accumulate(self._minimum, self._maximum, max(step, 1))
            return

        dash = token.find(DASH)
        if dash > 0:
            first = self._parse_value(token[:dash])
            last = self._parse_value(token[dash + 1 :])
            if first > last:
                first, last = last, first
            self._accumulate(first, last, max(step, 1))
            return

        value = self._parse_value(token)

        if step == 1:
            self._accumulate(value, value, 1)
            return

        # "a/0" means a through maximum; any other step needs a range
        if step == 0:
            self._accumulate(value, self._maximum, 1)
            return

        raise MalformedTokenError(
            f'"{token}/{step}" has a step but no range; use "a-b/{step}" or "*/{step}"'
        )

    def _parse_step(self, text: str) -> int:
        if not DIGITS.match(text):
            raise MalformedTokenError(
                f'"{text}" is not a valid step; it must be a non-negative integer'
            )
        return int(text)

    def _parse_value(self, text: str) -> int:
        if not text or not text.strip():
            raise MalformedTokenError("missing value")

        if "0" <= text[0] <= "9":
            if not DIGITS.match(text):
                raise MalformedTokenError(f'"{text}" is not a number')
            value = int(text)
            if value < self._minimum or value > self._maximum:
                raise ValueOutOfRangeError(
                    f"{value} is out of [{self._minimum}, {self._maximum}]"
                )
            return value

        if not self._names:
            raise MalformedTokenError(
                f'"{text}" is not a valid crontab field value. It must be a '
                f"numeric value between {self._minimum} and {self._maximum} "
                "(all inclusive)."
            )

        prefix = text.lower()
        for i, name in enumerate(self._names):
            if name.lower().startswith(prefix):
                return self._minimum + i

        raise UnknownNameError(
            f'"{text}" is not a known value name. Use one of the following: '
            f"{', '.join(self._names)}."
        )

    def _accumulate(self, start: int, end: int, step: int):
        last = start
        for value in range(start, end + 1, step):
            self._bits |= 1 << (value - self._minimum)
            last = value

        if self._min_set is None or start < self._min_set:
            self._min_set = start
        if self._max_set is None or last > self._max_set:
            self._max_set = last

    # --- queries ---

    def first(self) -> Optional[int]:
        """Smallest allowed value, or None for an empty set."""
        if self._min_set is None:
            return None
        return self.next(self._min_set)

    def next(self, start: int) -> Optional[int]:
        """
        Smallest allowed value >= start, or None when there is none.

        ``start`` may lie past ``maximum`` (a carried field); the answer is
        then None.
        """
        if self._min_set is None:
            return None
        start = max(start, self._min_set)
        if start > self._max_set:
            return None

        remaining = self._bits >> (start - self._minimum)
        if not remaining:
            return None
        # index of the lowest set bit
        return start + (remaining & -remaining).bit_length() - 1

    def contains(self, value: int) -> bool:
        return bool((self._bits >> (value - self._minimum)) & 1)

    def values(self) -> list[int]:
        return list(self)

    def __contains__(self, value: int) -> bool:
        if value < self._minimum or value > self._maximum:
            return False
        return self.contains(value)

    def __iter__(self) -> Iterator[int]:
        value = self.first()
        while value is not None:
            yield value
            value = self.next(value + 1)

    def __len__(self) -> int:
        return bin(self._bits).count("1")

    def __eq__(self, other) -> bool:
        if not isinstance(other, FieldSet):
            return NotImplemented
        return (
            self._minimum == other._minimum
            and self._maximum == other._maximum
            and self._bits == other._bits
        )

    def __hash__(self) -> int:
        return hash((self._minimum, self._maximum, self._bits))

    def __repr__(self) -> str:
        return (
            f"FieldSet({self._token!r}, [{self._minimum}, {self._maximum}], "
            f"values={self.values()})"
        )
