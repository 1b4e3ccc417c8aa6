#!/usr/bin/env python3

from fractions import Fraction
import unittest
import sys

from mpmath import mp
import numpy as np
import sympy as sp

from testutils import DpkTestCase
from ..numutils import NumericKind
from .analytic import SinExpression, CosExpression, ExpExpression, LogExpression
from .basics import ConstantExpression, IdentityExpression, SimpleExpression
from .basics import SumExpression, ProductExpression, QuotientExpression
from .basics import PowerExpression, NegateExpression
from .basics import sum_of, product_of, negation_of
from .common import ArityError, DomainError, UnsupportedOperationError
from .derivative import Differentiator, FiniteDifferenceExpression, differentiate
from .interval import Interval
from .poly import PolyTerm, Polynomial


class TestBasicRules(DpkTestCase):
    def test_leaves(self):
        self.assertEqual(differentiate(ConstantExpression(5)), ConstantExpression(0))
        self.assertEqual(differentiate(IdentityExpression()), ConstantExpression(1))
        self.assertEqual(differentiate(NegateExpression()), ConstantExpression(-1))

    def test_powers(self):
        x = IdentityExpression()
        self.assertEqual(differentiate(PowerExpression(0)), ConstantExpression(0))
        self.assertEqual(differentiate(PowerExpression(1)), ConstantExpression(1))
        self.assertEqual(differentiate(x**3)(2), 12)
        self.assertEqual(differentiate(x**3, n=2)(2), 12)
        self.assertEqual(differentiate(PowerExpression(-1))(2), Fraction(-1, 4))

    def test_root_keeps_domain(self):
        df = differentiate(PowerExpression(Fraction(1, 2)))
        self.assertEqual(df(4), Fraction(1, 4))
        with self.assertRaises(DomainError):
            df(-4)

    def test_sum(self):
        expr = sum_of(SinExpression(), IdentityExpression(), 5)
        self.assertEqual(differentiate(expr),
                         SumExpression(CosExpression(), ConstantExpression(1)))

    def test_product_of_two(self):
        x = IdentityExpression()
        self.assertEqual(differentiate(x**2 * x**3)(2), 80)

    def test_product_of_many(self):
        x = IdentityExpression()
        sin, exp = SinExpression(), ExpExpression()
        df = differentiate(product_of(x, sin, exp))
        expected = mp.e * (2*mp.sin(1) + mp.cos(1))
        self.assertAlmostEqual(float(df(1)), float(expected))
        df = differentiate(product_of(2, x, sin))
        self.assertAlmostEqual(float(df(1)), float(2*mp.sin(1) + 2*mp.cos(1)))

    def test_scaled_product_at_zero(self):
        x = IdentityExpression()
        df = differentiate(3 * (x * SinExpression()))
        self.assertEqual(df(0), 0)
        self.assertAlmostEqual(float(df(1)), float(3*mp.sin(1) + 3*mp.cos(1)))
        df = differentiate(2 * x * ExpExpression())
        self.assertEqual(df(0), 2)
        df = differentiate(product_of(2, x, x**2, SinExpression()))
        self.assertAlmostEqual(float(df(1)), float(6*mp.sin(1) + 2*mp.cos(1)))

    def test_product_with_zero_factor(self):
        x = IdentityExpression()
        expr = product_of(x, 0, SinExpression())
        self.assertEqual(len(expr.terms), 3)
        self.assertEqual(differentiate(expr), ConstantExpression(0))

    def test_quotient(self):
        x = IdentityExpression()
        df = differentiate(QuotientExpression(PowerExpression(3), x))
        self.assertEqual(df, ProductExpression(x, ConstantExpression(2)))
        self.assertEqual(df(2), 4)
        self.assertEqual(df.simplify(), df)
        df = differentiate(1 / (x + 1))
        self.assertEqual(df(1), Fraction(-1, 4))


class TestChainRule(DpkTestCase):
    def test_composed(self):
        f = SinExpression().compose_with(PowerExpression(2))
        df = differentiate(f)
        self.assertAlmostEqual(float(df(.5)), float(mp.cos(.25)))

    def test_composing(self):
        h = SinExpression().and_then(ExpExpression())
        df = differentiate(h)
        self.assertEqual(df(0), 1)
        self.assertAlmostEqual(float(df(1)), float(mp.exp(mp.sin(1)) * mp.cos(1)))

    def test_both_links(self):
        f = SinExpression().compose_with(PowerExpression(2)).and_then(ExpExpression())
        self.assertIsNotNone(f.composed)
        self.assertIsNotNone(f.composing)
        expected = mp.exp(mp.sin(1)) * mp.cos(1) * 2
        self.assertAlmostEqual(float(differentiate(f)(1)), float(expected))

    def test_power_of_power(self):
        f = PowerExpression(2).compose_with(PowerExpression(3))
        self.assertEqual(f, PowerExpression(6))
        self.assertEqual(differentiate(f)(2), 192)

    def test_power_of_inner(self):
        f = PowerExpression(2, inner=SinExpression())
        self.assertAlmostEqual(float(differentiate(f)(1)),
                               float(2*mp.sin(1)*mp.cos(1)))

    def test_negation(self):
        f = negation_of(ExpExpression())
        self.assertAlmostEqual(float(differentiate(f)(1)), -float(mp.e))

    def test_polynomial_as_outer(self):
        from .numexpr import compose
        p = Polynomial(PolyTerm(1, dict(x=2)))
        f = compose(p, SinExpression())
        self.assertAlmostEqual(float(f(1)), float(mp.sin(1)**2))
        self.assertAlmostEqual(float(differentiate(f)(1)),
                               float(2*mp.sin(1)*mp.cos(1)))


class TestAnalytic(DpkTestCase):
    def test_derivatives(self):
        self.assertEqual(SinExpression().diff(), CosExpression())
        self.assertEqual(CosExpression().diff(), negation_of(SinExpression()))
        self.assertEqual(SinExpression().diff(2), negation_of(SinExpression()))
        self.assertEqual(ExpExpression().diff(), ExpExpression())
        self.assertAlmostEqual(float(SinExpression().diff(4)(1)), float(mp.sin(1)))

    def test_log(self):
        dlog = LogExpression().diff()
        self.assertEqual(dlog, PowerExpression(-1, domain=Interval.positive()))
        self.assertEqual(dlog(2), Fraction(1, 2))
        with self.assertRaises(DomainError):
            dlog(-1)


class TestFiniteDifferences(DpkTestCase):
    def test_opaque_function(self):
        f = SimpleExpression(lambda x: x**3, desc="x^3")
        df = differentiate(f)
        self.assertIsType(df, FiniteDifferenceExpression)
        self.assertAlmostEqual(float(df(2)), 12.0, places=5)

    def test_epsilon(self):
        self.assertEqual(Differentiator(epsilon='1e-4').epsilon, mp.mpf('1e-4'))
        df = differentiate(SimpleExpression(lambda x: x**2), epsilon='1e-3')
        self.assertEqual(df.epsilon, mp.mpf('1e-3'))
        self.assertAlmostEqual(float(df(3)), 6.0, places=8)

    def test_unusual_epsilon(self):
        with self.assertLogs('symfunc.exprs.derivative', level='WARNING'):
            engine = Differentiator(epsilon=2)
        self.assertEqual(engine.epsilon, 2)
        with self.assertLogs('symfunc.exprs.derivative', level='WARNING'):
            engine = Differentiator(epsilon=-1e-3)
        self.assertAlmostEqual(float(engine.epsilon), 1e-3)

    def test_complex_not_supported(self):
        f = SimpleExpression(lambda x: mp.mpc(x, x), kind=NumericKind.COMPLEX)
        with self.assertRaises(UnsupportedOperationError):
            differentiate(f)


class TestCurrying(DpkTestCase):
    def setUp(self):
        super(TestCurrying, self).setUp()
        self.p = Polynomial(PolyTerm(1, dict(x=2, y=1)))

    def test_no_mapping(self):
        with self.assertRaises(ArityError):
            differentiate(self.p)

    def test_mapping(self):
        engine = Differentiator(curry=dict(y=3))
        self.assertEqual(engine(self.p)(2), 12)
        self.assertEqual(differentiate(self.p, curry=dict(y=3, z=1))(2), 12)
        self.assertEqual(differentiate(self.p, curry=dict(x=2))(5), 4)

    def test_all_mapped(self):
        with self.assertRaises(ArityError):
            differentiate(self.p, curry=dict(x=1, y=2))

    def test_unary_unaffected(self):
        engine = Differentiator(curry=dict(y=3))
        self.assertEqual(engine(SinExpression()), CosExpression())


class TestAgainstSympy(DpkTestCase):
    def setUp(self):
        super(TestAgainstSympy, self).setUp()
        x = IdentityExpression()
        self.exprs = [
            SinExpression().compose_with(PowerExpression(2)),
            sum_of(x**3, ExpExpression()),
            product_of(x, SinExpression()),
            SinExpression().and_then(ExpExpression()),
            1 / (x**2 + 1),
            PowerExpression(2, inner=CosExpression()),
        ]
        self.points = [float(p) for p in np.linspace(-1.5, 1.5, 7)]

    def test_symbolic_derivatives(self):
        X = sp.Symbol('x')
        for expr in self.exprs:
            df = differentiate(expr)
            expected = sp.lambdify(X, sp.diff(expr.to_sympy(), X), 'mpmath')
            for pt in self.points:
                self.assertAlmostEqual(float(df(pt)), float(expected(pt)), places=10)

    def test_linearity(self):
        for f, g in zip(self.exprs, self.exprs[1:]):
            dsum = differentiate(f + 3*g)
            df, dg = differentiate(f), differentiate(g)
            values = [float(dsum(pt)) for pt in self.points]
            expected = [float(df(pt)) + 3*float(dg(pt)) for pt in self.points]
            self.assertListAlmostEqual(values, expected, places=10)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
