r"""@package symfunc.exprs.derivative

Symbolic differentiation of expressions.

The Differentiator turns an expression into a new expression representing its
derivative. The rules are tried in the following order:

    1. Expressions of more than one argument are curried to a single free
       variable using the curry mapping of the differentiator.
    2. Composed views use the chain rule, e.g. for `f.compose_with(g)`:
       \f$ (f \circ g)' = (f' \circ g) \cdot g' \f$.
    3. Sums are differentiated term by term.
    4. Quotients use the quotient rule. The result is simplified.
    5. Products use the product rule. For more than two factors, the
       logarithmic derivative \f$ (\prod f_i)' = \prod f_i \sum f_i'/f_i \f$
       is used. Note that this form cannot be evaluated where any of the
       factors vanishes.
    6. Expressions implementing numexpr.SelfDifferentiable produce their own
       derivative.
    7. Everything else is differentiated numerically using central finite
       differences with step width `epsilon`.

@b Examples

```
    x = IdentityExpression()
    f = SinExpression().compose_with(x**2)
    df = Differentiator()(f)
    df2 = differentiate(f, n=2)
```
"""

import logging

from mpmath import mp

from ..numutils import NumericKind, coerce, magnitude, add, subtract, multiply, divide
from ..settings import Settings
from .basics import (SumBuilder, SumExpression, ProductExpression,
                     QuotientExpression, ConstantExpression, sum_of,
                     product_of, negation_of, power_of, is_const_equivalent,
                     const_value)
from .common import UnsupportedOperationError
from .curry import MetaFunction
from .numexpr import UnaryExpression, SelfDifferentiable, ensure_expr, compose
from .simplify import Simplifier


__all__ = [
    "Differentiator",
    "FiniteDifferenceExpression",
    "differentiate",
]


logger = logging.getLogger(__name__)


class Differentiator(MetaFunction):
    r"""Meta function producing derivative expressions.

    An instance can be called with an expression to obtain its derivative.
    """

    def __init__(self, epsilon=None, curry=None):
        r"""Create a new differentiator.

        Args:
            epsilon: Step width for finite differences. Default is taken from
                settings.Settings.epsilon. Values outside of `(0, 1)` are
                accepted (using their magnitude) but logged as warning.
            curry: Dictionary of argument values used to reduce
                multi-argument expressions to a single free variable.
        """
        super(Differentiator, self).__init__(curry=curry)
        self._epsilon = None
        self.epsilon = epsilon
        self._simplifier = Simplifier()

    @property
    def epsilon(self):
        r"""Step width for finite differences."""
        return self._epsilon
    @epsilon.setter
    def epsilon(self, value):
        if value is None:
            value = Settings.default_epsilon()
        elif isinstance(value, str):
            value = mp.mpf(value)
        value = coerce(value, NumericKind.REAL)
        if not 0 < value < 1:
            logger.warning("Epsilon %s for finite differences should lie in (0, 1).",
                           value)
        self._epsilon = magnitude(value)

    def __call__(self, expr):
        return self.differentiate(expr)

    def differentiate(self, expr):
        r"""Return the derivative of `expr`.

        @b Raises

        ArityError if `expr` cannot be reduced to a single free variable,
        UnsupportedOperationError if a complex valued expression would need
        finite differences.
        """
        expr = self.reduce_to_unary(ensure_expr(expr))
        if isinstance(expr, UnaryExpression) and expr.original is not None:
            if expr.composed is not None and expr.composing is not None:
                inner = compose(expr.original, expr.composed)
                return self.chain_rule(expr.composing, inner)
            if expr.composed is not None:
                return self.chain_rule(expr.original, expr.composed)
            if expr.composing is not None:
                return self.chain_rule(expr.composing, expr.original)
        if isinstance(expr, SumExpression):
            builder = SumBuilder(expr.arg_name)
            return builder.extend(self.differentiate(t) for t in expr.terms).build()
        if isinstance(expr, QuotientExpression):
            return self._quotient_rule(expr)
        if isinstance(expr, ProductExpression):
            return self._product_rule(expr)
        if isinstance(expr, SelfDifferentiable):
            return expr.self_derivative(self)
        return self.finite_difference(expr)

    def chain_rule(self, outer, inner):
        r"""Derivative of ``outer(inner(x))``."""
        outer_diff = self.differentiate(outer)
        inner_diff = self.differentiate(inner)
        return product_of(compose(outer_diff, inner), inner_diff)

    def _quotient_rule(self, expr):
        num, den = expr.numerator, expr.denominator
        arg = expr.arg_name
        numerator = sum_of(
            product_of(self.differentiate(num), den, arg_name=arg),
            negation_of(product_of(num, self.differentiate(den), arg_name=arg)),
            arg_name=arg,
        )
        result = QuotientExpression(numerator, power_of(den, 2), arg_name=arg)
        return self._simplifier.simplify(result)

    def _product_rule(self, expr):
        arg = expr.arg_name
        coeff = 1
        factors = []
        for f in expr.terms:
            if is_const_equivalent(f):
                coeff = multiply(coeff, const_value(f))
            else:
                factors.append(f)
        if coeff == 0 or not factors:
            return ConstantExpression(0, arg_name=arg)
        if len(factors) == 1:
            result = self.differentiate(factors[0])
        elif len(factors) == 2:
            f0, f1 = factors
            result = sum_of(product_of(f0, self.differentiate(f1), arg_name=arg),
                            product_of(f1, self.differentiate(f0), arg_name=arg),
                            arg_name=arg)
        else:
            logs = SumBuilder(arg)
            for f in factors:
                quotient = QuotientExpression(self.differentiate(f), f, arg_name=arg)
                logs.append(self._simplifier.simplify(quotient))
            result = product_of(product_of(*factors, arg_name=arg), logs.build(),
                                arg_name=arg)
        if coeff == 1:
            return result
        return product_of(result, coeff, arg_name=arg)

    def finite_difference(self, expr):
        r"""Numerical derivative of `expr` using central differences.

        @b Raises

        UnsupportedOperationError for complex valued expressions.
        """
        if expr.result_kind == NumericKind.COMPLEX:
            raise UnsupportedOperationError(
                "Cannot use finite differences for complex valued %s." % expr.nice_name
            )
        logger.debug("Using finite differences for %s.", expr.nice_name)
        return FiniteDifferenceExpression(expr, self._epsilon)


class FiniteDifferenceExpression(UnaryExpression):
    r"""Central finite difference approximation of a derivative.

    Evaluates \f$ (f(x+h) - f(x-h)) / (2h) \f$.
    """

    def __init__(self, func, epsilon, name='fdiff'):
        func = ensure_expr(func)
        super(FiniteDifferenceExpression, self).__init__(
            arg_name=func.arg_names[0], result_kind=NumericKind.REAL,
            arg_kind=func.arg_kind, name=name, func=func,
        )
        self._epsilon = epsilon

    @property
    def func(self):
        return self._sub_expr('func')

    @property
    def epsilon(self):
        return self._epsilon

    def _natural_domain(self):
        return self.func.domain

    def _eval(self, x):
        h = self._epsilon
        upper = self.func.apply(add(x, h))
        lower = self.func.apply(subtract(x, h))
        return divide(subtract(upper, lower), multiply(2, h))

    def _key(self):
        return (self.func, self._epsilon)

    def _expr_str(self):
        return "fdiff(%s, h=%s)" % (self.func.str(), self._epsilon)


def differentiate(expr, n=1, epsilon=None, curry=None):
    r"""Compute the n'th derivative of an expression.

    Args:
        expr: The expression to differentiate.
        n: Order of the derivative. Default is `1`.
        epsilon: Step width for finite differences.
        curry: Dictionary of argument values used to reduce multi-argument
            expressions to a single free variable.
    """
    engine = Differentiator(epsilon=epsilon, curry=curry)
    for _ in range(n):
        expr = engine.differentiate(expr)
    return expr
