"""
Slots module behavioral tests (caller-owned scalar storage).

Scope
- Validate converter resolution from explicit types and current values.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import TestCase

from argot import Slot


class TestSlot(TestCase):
    """Behavioral tests for Slot."""

    def testDefaultValue(self):
        self.assertIsNone(Slot().value)
        self.assertEqual(Slot(3).value, 3)

    def testConverterFromValue(self):
        self.assertIs(Slot(0).converter(), int)
        self.assertIs(Slot(0.5).converter(), float)
        self.assertIs(Slot(Path(".")).converter(), type(Path(".")))

    def testConverterForNone(self):
        self.assertIs(Slot().converter(), str)

    def testExplicitConverterWins(self):
        self.assertIs(Slot(0).converter(float), float)

    def testExplicitConverterMustBeCallable(self):
        with self.assertRaises(TypeError):
            Slot().converter("int")

    def testTextForms(self):
        self.assertEqual(repr(Slot("a")), "Slot('a')")
        self.assertEqual(str(Slot(7)), "7")


if __name__ == "__main__":
    unittest.main()
