r"""@package symfunc.exprs.evaluators

Evaluators and derivative caches for numexpr.NumericExpression objects.

Users of the expression system usually obtain evaluators through
numexpr.NumericExpression.evaluator(). These are light-weight callables that
additionally provide derivatives of the expression via a shared
DerivativeCache, which computes each derivative expression only once.
"""

import logging
import threading

from ..numutils import NumericKind, coerce
from ..settings import Settings
from .common import _zero_function
from .derivative import Differentiator
from .numexpr import NumericExpression
from .simplify import Simplifier


__all__ = [
    "DerivativeCache",
    "Evaluator",
]


logger = logging.getLogger(__name__)


class DerivativeCache(object):
    r"""Thread safe cache of successive derivatives of an expression.

    The n'th derivative is computed from the (n-1)'th one the first time it
    is requested. Concurrent requests are serialized using a reentrant lock
    so that each derivative is computed exactly once.
    """

    def __init__(self, expr, differentiator=None, simplify=False):
        r"""Create a cache for the derivatives of `expr`.

        @param expr
            Expression of one free variable.
        @param differentiator
            derivative.Differentiator to use. A new one with default settings
            is used if not given.
        @param simplify
            Whether each derivative should be simplified before caching.
        """
        ## Lock guarding the list of cached derivatives.
        self.lock = threading.RLock()
        self._funcs = [expr]
        self._differentiator = differentiator or Differentiator()
        self._simplifier = Simplifier() if simplify else None

    def __len__(self):
        with self.lock:
            return len(self._funcs)

    def get(self, n):
        r"""Return the n'th derivative expression (n=0 being the expression)."""
        with self.lock:
            for i in range(len(self._funcs), n+1):
                self._funcs.append(self._create_function(i))
            return self._funcs[n]

    def _create_function(self, n):
        f = self._differentiator(self._funcs[n-1])
        if self._simplifier is not None:
            f = self._simplifier(f)
        logger.debug("Derivative of order %d: %s", n, f.str())
        return f


class _Evaluator(object):
    r"""Base class for evaluators.

    Each evaluator has a `domain` attribute, which is populated with the
    expression's domain at initialization time.
    """

    def __init__(self, expr):
        ## Domain of the expression this evaluator was created for.
        self.domain = expr.domain

    def store_domain(self, obj):
        r"""Store the domain of this evaluator on the given object."""
        obj.domain = self.domain


class Evaluator(_Evaluator):
    r"""Evaluate an expression and its derivatives at points `x`.

    Results are converted to floats (or complex numbers) unless `use_mp` is
    set, in which case `mpmath` numbers are returned, computed with `dps`
    decimal places.
    """

    def __init__(self, expr, use_mp=False, dps=None, derivatives=None):
        super(Evaluator, self).__init__(expr)
        ## Boolean indicating if results should be `mpmath` numbers.
        self.use_mp = use_mp
        ## Decimal places used in `mpmath` mode.
        self.dps = Settings.dps if use_mp and dps is None else dps
        complex_valued = expr.result_kind == NumericKind.COMPLEX
        kind = NumericKind.COMPLEX if complex_valued else NumericKind.REAL
        if use_mp:
            self.converter = lambda v: coerce(v, kind)
        else:
            cast = complex if complex_valued else float
            self.converter = lambda v: cast(coerce(v, kind))
        self._derivatives = derivatives or DerivativeCache(expr)

    def __call__(self, x):
        r"""Compute the value of the expression at a point x."""
        return self.diff(x, 0)

    def diff(self, x, n=1):
        r"""Evaluate the n'th derivative of the expression at a point x."""
        f = self._derivatives.get(n)
        with NumericExpression.context(self.use_mp, self.dps):
            return self.converter(f.apply(x))

    def is_zero_function(self, n=0):
        r"""Return whether the n'th derivative is known to vanish identically."""
        return self._derivatives.get(n).is_zero_expression()

    def function(self, n=0):
        r"""Return a callable for the n'th derivative."""
        if self.is_zero_function(n):
            return _zero_function
        fn = lambda x: self.diff(x, n)
        self.store_domain(fn)
        return fn
