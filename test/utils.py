"""
Utilities module behavioral tests (sentinel, coalesce, rename, mirror, ordinal).

Scope
- Validate the Unset sentinel: singleton identity, falsiness, sealing.
- Validate coalesce() only replaces the sentinel.
- Validate rename() in both call and decorator forms.
- Validate mirror() snapshots containers instead of aliasing them.
- Validate ordinal() labels used in position-first fault messages.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from argot.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndRepr(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSubclassingRejected(self):
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # noqa
                pass

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | UnsetType)
        self.assertIsInstance("text", str | Unset)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalsyValues(self):
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """Behavioral tests for rename() call and decorator forms."""

    def testCallForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for read-only mirrored properties."""

    class Holder:
        items = mirror("items")
        table = mirror("table")
        tags = mirror("tags")
        label = mirror("label")

        def __init__(self):
            self._items = [1, 2]
            self._table = {"a": 1}
            self._tags = {"x"}
            self._label = "plain"

    def testSnapshots(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.label, "plain")

    def testSnapshotDoesNotAlias(self):
        holder = self.Holder()
        items = holder.items
        holder._items.append(3)
        self.assertEqual(items, (1, 2))
        self.assertEqual(holder.items, (1, 2, 3))

    def testReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.items = ()


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal labels."""

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(102), "102nd")
        self.assertEqual(ordinal(111), "111th")


if __name__ == "__main__":
    unittest.main()
