#!/usr/bin/env python3

from fractions import Fraction
import unittest
import sys

from mpmath import mp

from testutils import DpkTestCase
from .interval import Interval, ALL_VALUES, narrowest


class TestInterval(DpkTestCase):
    def test_contains(self):
        self.assertTrue(Interval.nonnegative().contains(0))
        self.assertFalse(Interval.positive().contains(0))
        self.assertTrue(Interval.positive().contains(Fraction(1, 2)))
        self.assertTrue(Interval.closed(-1, 1).contains(mp.mpf(1)))
        self.assertFalse(Interval.open(-1, 1).contains(1.0))
        self.assertIn(0.5, Interval.closed(0, 1))

    def test_unrestricted(self):
        self.assertTrue(ALL_VALUES.is_unrestricted())
        self.assertTrue(ALL_VALUES.contains(mp.mpc(1, 1)))
        self.assertFalse(Interval.closed(0, 1).is_unrestricted())

    def test_rejects_non_real(self):
        self.assertFalse(Interval.closed(0, 1).contains(1j))
        self.assertFalse(Interval.closed(0, 1).contains(float('nan')))
        self.assertTrue(Interval.closed(0, 1).contains(mp.mpc(1, 0)))

    def test_infinite_bounds_are_open(self):
        rng = Interval(0, None, True, True)
        self.assertTrue(rng.lower_closed)
        self.assertFalse(rng.upper_closed)

    def test_narrowest(self):
        result = narrowest(Interval(-1, 2), Interval.open(0, 5))
        self.assertEqual(result, Interval(0, 2, False, True))
        self.assertEqual(narrowest(), ALL_VALUES)
        self.assertEqual(narrowest(ALL_VALUES, Interval.nonnegative()),
                         Interval.nonnegative())
        self.assertEqual(narrowest(ALL_VALUES, None), ALL_VALUES)

    def test_disjoint(self):
        with self.assertLogs('symfunc.exprs.interval', level='WARNING'):
            result = narrowest(Interval.closed(0, 1), Interval.closed(2, 3))
        self.assertTrue(result.is_empty())
        self.assertFalse(result.contains(0))

    def test_subsets(self):
        self.assertTrue(Interval.closed(0, 10).contains_interval(Interval.closed(1, 2)))
        self.assertFalse(Interval.open(0, 1).contains_interval(Interval.closed(0, 1)))
        self.assertTrue(Interval.closed(0, 1).overlaps(Interval.closed(1, 2)))
        self.assertFalse(Interval.open(0, 1).overlaps(Interval.closed(1, 2)))

    def test_representation(self):
        self.assertEqual(repr(Interval.nonnegative()), "Interval[0, +inf)")
        self.assertEqual(str(Interval.open(0, 1)), "(0, 1)")
        self.assertEqual(hash(Interval.closed(0, 1)), hash(Interval(0, 1)))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
