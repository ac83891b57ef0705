"""
Tokens module behavioral tests (store, argstop, unused classification).

Scope
- Validate TokenStore indexing, argstop detection and trailing tokens.
- Validate LooksLike classification by leading characters.
- Validate Unused entries and their user-facing text.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot.tokens import TokenStore, LooksLike, Unused


class TestTokenStore(TestCase):
    """Behavioral tests for TokenStore."""

    def testIndexingAndLength(self):
        store = TokenStore(["prog", "-v", "file"])
        self.assertEqual(len(store), 3)
        self.assertEqual(store[1], "-v")
        self.assertEqual(list(store), ["prog", "-v", "file"])
        self.assertEqual(store.tokens, ("prog", "-v", "file"))

    def testNoArgstop(self):
        store = TokenStore(["prog", "a", "b"])
        self.assertIsNone(store.argstop)
        self.assertEqual(store.bound, 3)
        self.assertEqual(store.trailing(), ())

    def testFirstArgstopWins(self):
        store = TokenStore(["prog", "a", "--", "b", "--", "c"])
        self.assertEqual(store.argstop, 2)
        self.assertEqual(store.bound, 2)
        self.assertEqual(store.trailing(), ("b", "--", "c"))

    def testArgstopAtEnd(self):
        store = TokenStore(["prog", "a", "--"])
        self.assertEqual(store.argstop, 2)
        self.assertEqual(store.trailing(), ())

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            TokenStore(["prog", 3])

    def testReadOnly(self):
        store = TokenStore(["prog"])
        with self.assertRaises(AttributeError):
            store.tokens = ("other",)


class TestLooksLike(TestCase):
    """Behavioral tests for unused-token classification."""

    def testClassify(self):
        self.assertIs(LooksLike.classify("--file"), LooksLike.LONG)
        self.assertIs(LooksLike.classify("-f"), LooksLike.SHORT)
        self.assertIs(LooksLike.classify("file"), LooksLike.POSITIONAL)
        self.assertIs(LooksLike.classify(""), LooksLike.POSITIONAL)

    def testValues(self):
        self.assertEqual(LooksLike.SHORT, "short-arg")
        self.assertEqual(LooksLike.LONG, "long-arg")
        self.assertEqual(LooksLike.POSITIONAL, "positional")


class TestUnused(TestCase):
    """Behavioral tests for Unused entries."""

    def testOf(self):
        entry = Unused.of("--file", 3)
        self.assertEqual(entry, Unused("--file", LooksLike.LONG, 3))

    def testText(self):
        self.assertEqual(str(Unused.of("boo.berry")), "unused positional or arg-value: boo.berry")
        self.assertEqual(str(Unused.of("--file")), "unused or unknown argument: --file")
        self.assertEqual(str(Unused.of("-x")), "unused or unknown argument: -x")


if __name__ == "__main__":
    unittest.main()
