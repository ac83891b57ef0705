"""
Masks module behavioral tests (consumption mask, cluster run resolution).

Scope
- Validate the consumption mask range, claiming and ascending snapshots.
- Validate per-character cluster claiming and retirement of exhausted clusters.
- Validate the valued-option-inside-a-cluster fault.

Conventions
- Test method names follow CamelCase per project convention.
- Positions are 1-based token indices; position 0 is the program name.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot.faults import ValuedArgInRunError, FaultCode
from argot.masks import ConsumptionMask, RunResolver
from argot.tokens import TokenStore


class TestConsumptionMask(TestCase):
    """Behavioral tests for ConsumptionMask."""

    def testInitialRangeSkipsProgramName(self):
        mask = ConsumptionMask(4)
        self.assertEqual(list(mask), [1, 2, 3])
        self.assertNotIn(0, mask)
        self.assertEqual(len(mask), 3)

    def testClaimIsIdempotent(self):
        mask = ConsumptionMask(4)
        mask.claim(2)
        mask.claim(2)
        self.assertEqual(list(mask), [1, 3])

    def testFirst(self):
        mask = ConsumptionMask(4)
        self.assertEqual(mask.first(), 1)
        mask.claim(1)
        self.assertEqual(mask.first(), 2)
        mask.claim(2)
        mask.claim(3)
        self.assertIsNone(mask.first())
        self.assertFalse(mask)

    def testIterationIsSnapshot(self):
        mask = ConsumptionMask(5)
        seen = []
        for position in mask:
            seen.append(position)
            mask.claim(position + 1)
        self.assertEqual(seen, [1, 2, 3, 4])
        self.assertEqual(list(mask), [1])

    def testEmptyInput(self):
        self.assertEqual(list(ConsumptionMask(1)), [])
        self.assertEqual(list(ConsumptionMask(0)), [])


class TestRunResolver(TestCase):
    """Behavioral tests for RunResolver."""

    def setUp(self):
        self.store = TokenStore(["prog", "-vxvx", "-vf", "file"])
        self.mask = ConsumptionMask(self.store.bound)
        self.runs = RunResolver(self.store, self.mask)

    def testClaimsEveryOccurrence(self):
        self.assertEqual(self.runs.resolve(1, "v", False), 2)
        self.assertTrue(self.runs.tracked(1))
        self.assertEqual(self.runs.remaining(1), [2, 4])
        self.assertIn(1, self.mask)

    def testSecondLookupFindsNothing(self):
        self.runs.resolve(1, "v", False)
        self.assertEqual(self.runs.resolve(1, "v", False), 0)

    def testExhaustedClusterRetiresToken(self):
        self.runs.resolve(1, "v", False)
        self.assertEqual(self.runs.resolve(1, "x", False), 2)
        self.assertEqual(self.runs.remaining(1), [])
        self.assertNotIn(1, self.mask)

    def testAbsentCharacterDoesNotTrack(self):
        self.assertEqual(self.runs.resolve(1, "q", False), 0)
        self.assertFalse(self.runs.tracked(1))

    def testTrackingIsPermanent(self):
        self.runs.resolve(1, "v", False)
        self.runs.resolve(1, "x", False)
        self.assertTrue(self.runs.tracked(1))
        self.assertEqual(self.runs.resolve(1, "v", False), 0)

    def testValuedOptionAtEnd(self):
        self.assertEqual(self.runs.resolve(2, "f", True), 1)
        self.assertEqual(self.runs.remaining(2), [1])

    def testValuedOptionInsideCluster(self):
        with self.assertRaises(ValuedArgInRunError) as context:
            self.runs.resolve(1, "v", True)
        self.assertEqual(context.exception.options["code"], FaultCode.VALUED_ARG_IN_RUN)
        self.assertEqual(context.exception.options["position"], 1)

    def testValuedLookupSkipsClusterWithoutCode(self):
        self.assertEqual(self.runs.resolve(1, "f", True), 0)
        self.assertFalse(self.runs.tracked(1))

    def testUntrackedRemaining(self):
        self.assertEqual(self.runs.remaining(3), [])


if __name__ == "__main__":
    unittest.main()
