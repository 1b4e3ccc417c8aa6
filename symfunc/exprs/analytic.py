r"""@package symfunc.exprs.analytic

Elementary transcendental functions with known derivatives.

The functions are evaluated using `mpmath`, so that they respect the
precision set e.g. via numexpr.NumericExpression.context(). Composition with
other expressions is done as usual, e.g. ``SinExpression().compose_with(f)``
for `sin(f(x))`.
"""

from mpmath import mp
import sympy as sp

from ..numutils import NumericKind, coerce
from .basics import PowerExpression, negation_of
from .interval import ALL_VALUES, Interval
from .numexpr import UnaryExpression, SelfDifferentiable


__all__ = [
    "SinExpression",
    "CosExpression",
    "ExpExpression",
    "LogExpression",
]


class _AnalyticExpression(UnaryExpression, SelfDifferentiable):
    r"""Base for functions evaluated by a single `mpmath` function."""

    ## Name of the function in `mpmath` and `sympy`.
    _func_name = None

    def __init__(self, arg_name='x', domain=None, kind=NumericKind.REAL,
                 name=None):
        super(_AnalyticExpression, self).__init__(
            arg_name=arg_name, domain=domain, result_kind=kind, arg_kind=kind,
            name=name or self._func_name,
        )

    def _same_kind(self, cls):
        r"""Create an instance of `cls` with the same argument and domain."""
        return cls(arg_name=self.arg_name, domain=self._declared_domain,
                   kind=self.arg_kind)

    def _eval(self, x):
        x = coerce(x, max(self.arg_kind, NumericKind.REAL))
        return getattr(mp, self._func_name)(x)

    def _expr_str(self):
        return "%s(%s)" % (self._func_name, self.arg_name)

    def _key(self):
        return (self._declared_domain, self.arg_kind)

    def _to_sympy(self):
        return getattr(sp, self._func_name)(sp.Symbol(self.arg_name))


class SinExpression(_AnalyticExpression):
    r"""Sine function."""
    _func_name = 'sin'

    def self_derivative(self, engine):
        return self._same_kind(CosExpression)


class CosExpression(_AnalyticExpression):
    r"""Cosine function."""
    _func_name = 'cos'

    def self_derivative(self, engine):
        return negation_of(self._same_kind(SinExpression))


class ExpExpression(_AnalyticExpression):
    r"""Exponential function."""
    _func_name = 'exp'

    def self_derivative(self, engine):
        return self._same_kind(ExpExpression)


class LogExpression(_AnalyticExpression):
    r"""Natural logarithm.

    For real arguments, the domain is restricted to positive values.
    """
    _func_name = 'log'

    def _natural_domain(self):
        if self.arg_kind <= NumericKind.REAL:
            return Interval.positive()
        return ALL_VALUES

    def self_derivative(self, engine):
        return PowerExpression(-1, arg_name=self.arg_name,
                               domain=self.input_range(), kind=self.arg_kind)
