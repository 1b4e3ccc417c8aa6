r"""@package symfunc.exprs.simplify

Simplification of complete expression trees.

The Simplifier walks an expression tree bottom-up. Composed views are
simplified by simplifying their parts and composing them again, so that the
algebraic identities of composition (e.g. for powers of powers or double
negations) are applied. Sums, products and quotients are rebuilt from their
simplified children and then simplified using the rules local to them (see
basics.SumExpression.simplify() etc.).

Simplification is idempotent, i.e. simplifying an already simplified
expression results in an equal expression.
"""

import logging

from .basics import SumExpression, ProductExpression, QuotientExpression
from .curry import MetaFunction
from .numexpr import UnaryExpression, ensure_expr, compose, chain


__all__ = [
    "Simplifier",
    "simplify",
]


logger = logging.getLogger(__name__)


class Simplifier(MetaFunction):
    r"""Meta function simplifying expressions.

    Multi-argument expressions are first curried using the curry mapping if
    any of their arguments is mapped. Otherwise only their local
    simplification is applied.
    """

    def __call__(self, expr):
        return self.simplify(expr)

    def simplify(self, expr):
        r"""Return a simplified version of `expr`."""
        expr = ensure_expr(expr)
        if expr.arity > 1:
            if not any(n in self._curry for n in expr.arg_names):
                return expr.simplify()
            expr = self.reduce_to_unary(expr)
        if isinstance(expr, UnaryExpression) and expr.original is not None:
            return self._simplify_composition(expr)
        if isinstance(expr, (SumExpression, ProductExpression)):
            expr = type(expr)(*[self.simplify(t) for t in expr.terms],
                              arg_name=expr.arg_name)
        elif isinstance(expr, QuotientExpression):
            expr = QuotientExpression(self.simplify(expr.numerator),
                                      self.simplify(expr.denominator),
                                      arg_name=expr.arg_name)
        return expr.simplify()

    def _simplify_composition(self, expr):
        result = self.simplify(expr.original)
        if expr.composed is not None:
            result = compose(result, self.simplify(expr.composed))
        if expr.composing is not None:
            result = chain(result, self.simplify(expr.composing))
        return result


def simplify(expr, curry=None):
    r"""Simplify an expression.

    Args:
        expr: The expression to simplify.
        curry: Optional dictionary of argument values used to reduce
            multi-argument expressions to a single free variable.
    """
    return Simplifier(curry=curry).simplify(expr)
