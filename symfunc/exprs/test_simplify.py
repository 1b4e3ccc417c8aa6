#!/usr/bin/env python3

import unittest
import sys

from testutils import DpkTestCase
from .analytic import SinExpression, CosExpression
from .basics import ConstantExpression, IdentityExpression
from .basics import SumExpression, ProductExpression, QuotientExpression
from .basics import PowerExpression, NegateExpression, sum_of
from .common import DivisionByZeroError
from .curry import CurriedUnaryExpression
from .poly import PolyTerm, Polynomial
from .simplify import Simplifier, simplify


class TestSimplifier(DpkTestCase):
    def test_unchanged(self):
        sin = SinExpression()
        self.assertIs(simplify(sin), sin)
        self.assertIs(Simplifier()(sin), sin)

    def test_constant_inner(self):
        result = simplify(sum_of(PowerExpression(2, inner=ConstantExpression(3)), 1))
        self.assertIsType(result, ConstantExpression)
        self.assertEqual(result.value, 10)
        result = simplify(NegateExpression(inner=ConstantExpression(4)))
        self.assertIsType(result, ConstantExpression)
        self.assertEqual(result.value, -4)
        self.assertEqual(PowerExpression(2).compose_with(ConstantExpression(3)).value, 9)

    def test_double_negation(self):
        sin = SinExpression()
        expr = NegateExpression(inner=NegateExpression(inner=sin))
        self.assertEqual(simplify(expr), sin)

    def test_nested_powers(self):
        expr = PowerExpression(2, inner=PowerExpression(3))
        self.assertEqual(simplify(expr), PowerExpression(6))

    def test_inside_composition(self):
        x = IdentityExpression()
        inner = SumExpression(ProductExpression(x, x), ConstantExpression(0))
        expr = SinExpression().compose_with(inner)
        result = simplify(expr)
        self.assertEqual(result, SinExpression().compose_with(PowerExpression(2)))
        self.assertEqual(simplify(result), result)

    def test_bottom_up(self):
        x = IdentityExpression()
        expr = SumExpression(ProductExpression(x, ConstantExpression(2)),
                             ProductExpression(ConstantExpression(-2), x),
                             CosExpression())
        self.assertEqual(expr.simplified(), CosExpression())

    def test_quotients(self):
        x = IdentityExpression()
        expr = QuotientExpression(ProductExpression(x, x, x), x)
        self.assertEqual(simplify(expr), PowerExpression(2))
        with self.assertRaises(DivisionByZeroError):
            simplify(QuotientExpression(x, sum_of(1, -1)))

    def test_idempotent(self):
        x = IdentityExpression()
        expr = 3 * x**2 - x / (x + 1) + x**2 * x
        once = simplify(expr)
        self.assertEqual(simplify(once), once)
        self.assertEqual(once(2), expr(2))


class TestMultipleArguments(DpkTestCase):
    def setUp(self):
        super(TestMultipleArguments, self).setUp()
        self.p = Polynomial(PolyTerm(1, dict(x=2, y=1)))

    def test_without_mapping(self):
        self.assertIs(simplify(self.p), self.p)

    def test_with_mapping(self):
        result = simplify(self.p, curry=dict(y=3))
        self.assertIsType(result, CurriedUnaryExpression)
        self.assertEqual(result(2), 12)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
