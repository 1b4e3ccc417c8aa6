#!/usr/bin/env python3

from fractions import Fraction
import unittest
import sys

import sympy as sp

from testutils import DpkTestCase
from .analytic import SinExpression
from .basics import ConstantExpression, IdentityExpression, PowerExpression
from .common import ArgumentError, DomainError, UnsupportedOperationError
from .derivative import differentiate
from .interval import Interval
from .poly import Term, ConstantTerm, PolyTerm, RationalExponentPolyTerm, make_term
from .poly import Polynomial, PolynomialBuilder


class TestTerms(DpkTestCase):
    def test_make_term(self):
        self.assertIsType(make_term(3, dict(x=0)), ConstantTerm)
        self.assertIsType(make_term(1, dict(x=2)), PolyTerm)
        self.assertIsType(make_term(1, dict(x=Fraction(4, 2))), PolyTerm)
        self.assertIsType(make_term(1, dict(x=Fraction(1, 2))), RationalExponentPolyTerm)

    def test_abstract_base(self):
        with self.assertRaises(TypeError):
            Term(1, dict(x=1))

    def test_exponent_kinds(self):
        with self.assertRaises(ArgumentError):
            PolyTerm(1, dict(x=Fraction(1, 2)))
        with self.assertRaises(ArgumentError):
            RationalExponentPolyTerm(1, dict(x=0.5))
        self.assertEqual(PolyTerm(1, dict(x=2, y=0)).arg_names, ('x',))

    def test_evaluation(self):
        term = PolyTerm(1, dict(y=1, x=2))
        self.assertEqual(term.arg_names, ('x', 'y'))
        self.assertEqual(term(2, 3), 12)
        self.assertEqual(term(dict(x=2, y=3)), 12)
        self.assertEqual(ConstantTerm(5)(), 5)
        self.assertEqual(RationalExponentPolyTerm(2, dict(x=Fraction(1, 2)))(9), 6)

    def test_rational_domain(self):
        term = RationalExponentPolyTerm(1, dict(x=Fraction(1, 2)))
        self.assertEqual(term.input_range('x'), Interval.nonnegative())
        with self.assertRaises(DomainError):
            term(-1)
        with self.assertRaises(ArgumentError):
            term.input_range('z')

    def test_signature(self):
        a = PolyTerm(2, dict(x=1))
        self.assertTrue(a.has_matching_signature(PolyTerm(5, dict(x=1))))
        self.assertFalse(a.has_matching_signature(PolyTerm(5, dict(x=2))))
        self.assertFalse(a.has_matching_signature(RationalExponentPolyTerm(5, dict(x=1))))

    def test_scale(self):
        term = PolyTerm(2, dict(x=1))
        self.assertIs(term.scale(1), term)
        self.assertEqual(term.scale(0), ConstantTerm(0))
        self.assertEqual(term.scale(Fraction(1, 2)), PolyTerm(1, dict(x=1)))
        rterm = RationalExponentPolyTerm(1, dict(x=Fraction(1, 2)))
        self.assertIsType(rterm.with_coefficient(3), RationalExponentPolyTerm)

    def test_multiply(self):
        term = PolyTerm(2, dict(x=1))
        self.assertEqual(term.multiply(PolyTerm(3, dict(x=2))), PolyTerm(6, dict(x=3)))
        self.assertEqual(term.multiply(PowerExpression(2)), PolyTerm(2, dict(x=3)))
        self.assertEqual(term.multiply(IdentityExpression()), PolyTerm(2, dict(x=2)))
        self.assertEqual(term.multiply(ConstantExpression(3)), PolyTerm(6, dict(x=1)))
        self.assertEqual(term.multiply(PolyTerm(1, dict(x=-1))), ConstantTerm(2))
        with self.assertRaises(ArgumentError):
            term.multiply(PowerExpression(2, inner=SinExpression()))

    def test_new_variables_logged(self):
        with self.assertLogs('symfunc.exprs.poly', level='INFO'):
            result = PolyTerm(1, dict(x=1)).multiply(PolyTerm(1, dict(y=1)))
        self.assertEqual(result, PolyTerm(1, dict(x=1, y=1)))

    def test_differentiate(self):
        term = PolyTerm(3, dict(x=2, y=1))
        self.assertEqual(term.differentiate('x'), PolyTerm(6, dict(x=1, y=1)))
        self.assertEqual(term.differentiate('z'), ConstantTerm(0))
        self.assertEqual(PolyTerm(4, dict(x=1)).differentiate('x'), ConstantTerm(4))
        self.assertEqual(differentiate(PolyTerm(1, dict(x=1))), ConstantExpression(1))

    def test_order_and_str(self):
        term = PolyTerm(3, dict(x=2, y=1))
        self.assertEqual(term.order('x'), 2)
        self.assertEqual(term.order('z'), 0)
        self.assertEqual(RationalExponentPolyTerm(1, dict(x=Fraction(5, 2))).order('x'), 2)
        self.assertEqual(term.str(), "(3*x^2*y)")
        self.assertEqual(PolyTerm(1, dict(x=1)).str(), "(x)")


class TestPolynomial(DpkTestCase):
    def setUp(self):
        super(TestPolynomial, self).setUp()
        self.p = Polynomial(PolyTerm(3, dict(x=2)), PolyTerm(-1, dict(x=1, y=1)),
                            ConstantTerm(5))

    def test_evaluation(self):
        self.assertEqual(self.p.arg_names, ('x', 'y'))
        self.assertEqual(self.p(dict(x=2, y=1)), 15)
        self.assertEqual(Polynomial()(), 0)

    def test_merging(self):
        p = Polynomial(PolyTerm(1, dict(x=1)), PolyTerm(2, dict(x=1)))
        self.assertEqual(p.count_terms(), 1)
        self.assertEqual(p.terms[0].coefficient, 3)
        p = Polynomial(PolyTerm(1, dict(x=1)), PolyTerm(-1, dict(x=1)))
        self.assertEqual(p.count_terms(), 0)
        self.assertTrue(p.is_zero_expression())
        p = Polynomial(PolyTerm(1, dict(x=1)), RationalExponentPolyTerm(1, dict(x=1)))
        self.assertEqual(p.count_terms(), 2)

    def test_order(self):
        self.assertEqual(self.p.order('x'), 2)
        self.assertEqual(self.p.order('y'), 1)
        self.assertEqual(self.p.order('z'), 0)

    def test_differentiate(self):
        self.assertEqual(self.p.differentiate('x'),
                         Polynomial(PolyTerm(6, dict(x=1)), PolyTerm(-1, dict(y=1))))
        q = Polynomial(PolyTerm(3, dict(x=2)), PolyTerm(1, dict(x=1)), ConstantTerm(5))
        self.assertEqual(differentiate(q), Polynomial(PolyTerm(6, dict(x=1)),
                                                      ConstantTerm(1)))
        self.assertEqual(differentiate(Polynomial(ConstantTerm(5))), ConstantExpression(0))

    def test_arithmetic(self):
        p = Polynomial(PolyTerm(1, dict(x=1)), ConstantTerm(1))
        q = Polynomial(PolyTerm(1, dict(x=1)), ConstantTerm(-1))
        self.assertEqual(p.multiply(q), Polynomial(PolyTerm(1, dict(x=2)), ConstantTerm(-1)))
        self.assertEqual(p.add(q), Polynomial(PolyTerm(2, dict(x=1))))
        self.assertEqual(p.add(5), Polynomial(PolyTerm(1, dict(x=1)), ConstantTerm(6)))
        self.assertEqual(p.scale(2), Polynomial(PolyTerm(2, dict(x=1)), ConstantTerm(2)))
        self.assertEqual(p.add(PowerExpression(2)).count_terms(), 3)

    def test_multiply_expressions(self):
        x = IdentityExpression()
        p = Polynomial(PolyTerm(2, dict(x=1)))
        self.assertEqual(p.multiply(x + 1),
                         Polynomial(PolyTerm(2, dict(x=2)), PolyTerm(2, dict(x=1))))
        self.assertEqual(p.multiply(-x**2), Polynomial(PolyTerm(-2, dict(x=3))))
        with self.assertRaises(UnsupportedOperationError):
            p.multiply(SinExpression())

    def test_sorting(self):
        p = Polynomial(ConstantTerm(1), PolyTerm(1, dict(x=3)), PolyTerm(1, dict(x=1)))
        orders = [t.order('x') for t in p.sort_by_order_in('x').terms]
        self.assertEqual(orders, [0, 1, 3])
        orders = [t.order('x') for t in p.sort_by_order_in('x', reverse=True).terms]
        self.assertEqual(orders, [3, 1, 0])
        self.assertEqual(p.first_n(2).count_terms(), 2)

    def test_input_range(self):
        p = Polynomial(RationalExponentPolyTerm(1, dict(x=Fraction(1, 2))),
                       PolyTerm(1, dict(y=1)))
        self.assertEqual(p.input_range('x'), Interval.nonnegative())
        self.assertEqual(p.domain['y'], Interval())
        with self.assertRaises(ArgumentError):
            p.input_range('z')

    def test_to_sympy(self):
        X, Y = sp.symbols('x y')
        self.assertEqual(self.p.to_sympy(), 3*X**2 - X*Y + 5)


class TestPolynomialBuilder(DpkTestCase):
    def test_build(self):
        builder = PolynomialBuilder()
        builder.add(PolyTerm(1, dict(x=1)))
        builder.add(Polynomial(PolyTerm(2, dict(x=1)), ConstantTerm(1)))
        self.assertEqual(len(builder), 2)
        self.assertEqual(builder.build(),
                         Polynomial(PolyTerm(3, dict(x=1)), ConstantTerm(1)))

    def test_unknown_term_kind(self):
        with self.assertRaises(ArgumentError):
            PolynomialBuilder().add(SinExpression())


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
