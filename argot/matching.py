"""
Match engine: locate the first unclaimed token satisfying a short code or long name.

Sweep
- Unclaimed positions are visited in ascending order; for every token the
  short form is tried before the long form, and the first hit wins.

Value location
- ABSENT:      the option stands alone ("-f", "--file", or a cluster hit
               when no value is expected).
- TAKES_NEXT:  the value is the following token, which is still unclaimed
               (or the option ends a cluster and a value is expected).
- EQUALS:      the value is the suffix after the "=" found at `offset`.
  EQUALS is reported even when no value is expected, so callers can reject
  "flag given a value" with their own error.
"""
from enum import Enum
from typing import NamedTuple


class ValueLocation(Enum):
    ABSENT = "absent"
    TAKES_NEXT = "takes-next"
    EQUALS = "equals"


class FoundMatch(NamedTuple):
    """
    Transient result of one engine query.

    - position: index of the matched token.
    - runs: characters claimed inside a cluster (0 when not a cluster hit).
    - location: where the value, if any, lives.
    - offset: index of "=" inside the token for EQUALS, otherwise None.
    """
    position: int
    runs: int = 0
    location: ValueLocation = ValueLocation.ABSENT
    offset: int | None = None


class MatchEngine:
    """
    Structural matcher over a token store, its consumption mask and run resolver.
    """
    __slots__ = ("_store", "_mask", "_runs")

    def __init__(self, store, mask, runs, /):
        self._store = store
        self._mask = mask
        self._runs = runs

    def _standalone(self, position, expect_value):
        if expect_value and position + 1 in self._mask:
            return FoundMatch(position, 0, ValueLocation.TAKES_NEXT)
        return FoundMatch(position, 0, ValueLocation.ABSENT)

    def _cluster(self, position, short, expect_value):
        if not (count := self._runs.resolve(position, short, expect_value)):
            return None
        location = ValueLocation.TAKES_NEXT if expect_value else ValueLocation.ABSENT
        return FoundMatch(position, count, location)

    def match_short(self, position, short, expect_value):
        """
        Short-form test for the token at `position` (None when it does not match).
        """
        if not short:
            return None

        token = self._store[position]
        if len(token) < 2:
            return None

        if self._runs.tracked(position):
            return self._cluster(position, short, expect_value)

        # positional-looking or long-looking
        if token[0] != "-" or token[1] == "-":
            return None

        if token[1] != short:
            if len(token) > 2 and token[2] != "=":
                return self._cluster(position, short, expect_value)
            return None

        if len(token) == 2:
            return self._standalone(position, expect_value)

        if token[2] == "=":
            return FoundMatch(position, 0, ValueLocation.EQUALS, 2)

        return self._cluster(position, short, expect_value)

    def match_long(self, position, long, expect_value):
        """
        Long-form test for the token at `position` (None when it does not match).
        """
        if not long:
            return None

        token = self._store[position]
        end = 2 + len(long)

        if len(token) < end or not token.startswith("--") or token[2:end] != long:
            return None

        if len(token) == end:
            return self._standalone(position, expect_value)

        if token[end] == "=":
            return FoundMatch(position, 0, ValueLocation.EQUALS, end)

        return None

    def find_match(self, short, long, expect_value):
        """
        First unclaimed token matching `short` or `long`, or None.
        """
        for position in self._mask:
            if found := self.match_short(position, short, expect_value):
                return found
            if found := self.match_long(position, long, expect_value):
                return found
        return None

    def find_subcommand(self, name):
        """
        First unclaimed token equal to `name`, or None.
        """
        for position in self._mask:
            if self._store[position] == name:
                return FoundMatch(position)
        return None


__all__ = (
    "ValueLocation",
    "FoundMatch",
    "MatchEngine",
)
