#!/usr/bin/env python3

from fractions import Fraction
import unittest
import sys

import numpy as np
import sympy as sp
from mpmath import mp

from testutils import DpkTestCase
from .numutils import NumericKind, kind_of, coerce, conform, normalize
from .numutils import add, subtract, multiply, divide, negate, compare, power
from .numutils import factorial
from .numutils import inf_norm1d, to_sympy_number
from .numutils import CoercionError, DivisionByZeroError, NumericalError


class TestKinds(DpkTestCase):
    def test_kind_of(self):
        self.assertEqual(kind_of(3), NumericKind.INTEGER)
        self.assertEqual(kind_of(np.int64(3)), NumericKind.INTEGER)
        self.assertEqual(kind_of(Fraction(1, 3)), NumericKind.RATIONAL)
        self.assertEqual(kind_of(1.5), NumericKind.REAL)
        self.assertEqual(kind_of(mp.mpf(1)), NumericKind.REAL)
        self.assertEqual(kind_of(1j), NumericKind.COMPLEX)
        self.assertEqual(kind_of(mp.mpc(1, 2)), NumericKind.COMPLEX)
        with self.assertRaises(CoercionError):
            kind_of("1")

    def test_ordering(self):
        self.assertTrue(NumericKind.INTEGER < NumericKind.RATIONAL
                        < NumericKind.REAL < NumericKind.COMPLEX)

    def test_exact_coercions(self):
        self.assertIsType(coerce(mp.mpf(2), NumericKind.INTEGER), int)
        self.assertEqual(coerce(mp.mpf(2), NumericKind.INTEGER), 2)
        self.assertEqual(coerce(0.5, NumericKind.RATIONAL), Fraction(1, 2))
        self.assertEqual(coerce(Fraction(4, 2), NumericKind.INTEGER), 2)
        self.assertEqual(coerce(mp.mpc(3, 0), NumericKind.REAL), 3)
        self.assertIsType(coerce(2, NumericKind.COMPLEX), mp.mpc)

    def test_lossy_coercions(self):
        with self.assertRaises(CoercionError):
            coerce(Fraction(1, 3), NumericKind.INTEGER)
        with self.assertRaises(CoercionError):
            coerce(mp.mpc(1, 1), NumericKind.REAL)
        with self.assertRaises(CoercionError):
            coerce(2.5, NumericKind.INTEGER)
        with self.assertRaises(CoercionError):
            coerce(mp.inf, NumericKind.RATIONAL)
        self.assertTrue(issubclass(CoercionError, NumericalError))

    def test_conform(self):
        self.assertIsType(conform(3, NumericKind.REAL), int)
        self.assertEqual(conform(mp.mpc(2, 0), NumericKind.REAL), 2)
        with self.assertRaises(CoercionError):
            conform(1j, NumericKind.REAL)

    def test_normalize(self):
        self.assertIsType(normalize(Fraction(6, 3)), int)
        self.assertIsType(normalize(Fraction(1, 3)), Fraction)


class TestArithmetic(DpkTestCase):
    def test_exact_division(self):
        self.assertEqual(divide(1, 3), Fraction(1, 3))
        self.assertIsType(divide(6, 3), int)
        self.assertEqual(add(Fraction(1, 2), Fraction(1, 2)), 1)
        self.assertIsType(add(Fraction(1, 2), Fraction(1, 2)), int)

    def test_mixed_kinds(self):
        self.assertEqual(add(1, 0.5), 1.5)
        self.assertIsType(add(1, 0.5), mp.mpf)
        self.assertEqual(subtract(Fraction(1, 2), 1), Fraction(-1, 2))
        self.assertEqual(multiply(Fraction(2, 3), 3), 2)
        self.assertEqual(negate(Fraction(1, 2)), Fraction(-1, 2))

    def test_division_by_zero(self):
        with self.assertRaises(DivisionByZeroError):
            divide(1, 0)
        with self.assertRaises(ZeroDivisionError):
            divide(Fraction(1, 2), 0.0)

    def test_compare(self):
        self.assertEqual(compare(Fraction(1, 2), 0.5), 0)
        self.assertEqual(compare(1, mp.inf), -1)
        self.assertEqual(compare(mp.mpc(2, 0), 1), 1)

    def test_powers(self):
        self.assertEqual(power(Fraction(4, 9), Fraction(1, 2)), Fraction(2, 3))
        self.assertEqual(power(-8, Fraction(1, 3)), -2)
        self.assertEqual(power(2, -2), Fraction(1, 4))
        self.assertEqual(power(Fraction(8, 27), Fraction(2, 3)), Fraction(4, 9))
        self.assertAlmostEqual(float(power(2, Fraction(1, 2))), 2**0.5)
        with self.assertRaises(DivisionByZeroError):
            power(0, -1)

    def test_combinatorics(self):
        self.assertEqual(factorial(5), 120)
        self.assertEqual(factorial(0), 1)

    def test_to_sympy(self):
        self.assertEqual(to_sympy_number(Fraction(1, 3)), sp.Rational(1, 3))
        self.assertEqual(to_sympy_number(7), sp.Integer(7))


class TestInfNorm(DpkTestCase):
    def test_interior_maximum(self):
        x, delta = inf_norm1d(lambda x: x*(1-x), domain=(0, 1))
        self.assertAlmostEqual(x, 0.5, places=5)
        self.assertAlmostEqual(delta, 0.25, places=8)

    def test_infinite_domain(self):
        with self.assertRaises(ValueError):
            inf_norm1d(lambda x: x, domain=(0, mp.inf))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
