"""
Token store and unused-token reporting.

The store owns the immutable input sequence (token 0 is conventionally the
program name) and remembers where the first literal "--" sits. Everything
after that sentinel is never matched structurally; it is only handed, in
order, to a variadic positional collector.
"""
from enum import StrEnum
from typing import NamedTuple

from .utils import mirror

ARGSTOP = "--"


class TokenStore:
    """
    Immutable, indexable view over the input tokens.

    Attributes
    - tokens: tuple[str, ...] of every token, program name included.
    - argstop: position of the first "--" token, or None.
    """
    __slots__ = ("_tokens", "_argstop")

    tokens = mirror("tokens")
    argstop = mirror("argstop")

    def __init__(self, tokens, /):
        self._tokens = tuple(tokens)
        for token in self._tokens:
            if not isinstance(token, str):
                raise TypeError("TokenStore() argument must be an iterable of strings")
        try:
            self._argstop = self._tokens.index(ARGSTOP)
        except ValueError:
            self._argstop = None

    @property
    def bound(self):
        """
        Exclusive upper position for structural matching.
        """
        return len(self._tokens) if self._argstop is None else self._argstop

    def trailing(self):
        """
        Tokens located after the argstop sentinel, in original order.
        """
        if self._argstop is None:
            return ()
        return self._tokens[self._argstop + 1:]

    def __getitem__(self, position, /):
        return self._tokens[position]

    def __len__(self):
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __repr__(self):
        return f"TokenStore({list(self._tokens)!r})"


class LooksLike(StrEnum):
    """
    Best guess of what an unclaimed token was meant to be.
    """
    SHORT = "short-arg"
    LONG = "long-arg"
    POSITIONAL = "positional"

    @classmethod
    def classify(cls, token, /):
        if token.startswith("--"):
            return cls.LONG
        if token.startswith("-"):
            return cls.SHORT
        return cls.POSITIONAL


class Unused(NamedTuple):
    """
    One entry of the unused report: the token text and how it looks.

    Characters left over inside a short-option cluster are reported as their
    own "-c" entries with looks_like=LooksLike.SHORT.
    """
    token: str
    looks_like: LooksLike
    position: int | None = None

    @classmethod
    def of(cls, token, position=None, /):
        return cls(token, LooksLike.classify(token), position)

    def __str__(self):
        if self.looks_like is LooksLike.POSITIONAL:
            return f"unused positional or arg-value: {self.token}"
        return f"unused or unknown argument: {self.token}"


__all__ = (
    "TokenStore",
    "LooksLike",
    "Unused",
)
