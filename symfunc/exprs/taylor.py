r"""@package symfunc.exprs.taylor

Taylor polynomials of single argument expressions.

A TaylorPolynomial approximates a function \f$ f \f$ around a point
\f$ a_0 \f$ by
\f[
    T_n(x) = \sum_{k=0}^n \frac{f^{(k)}(a_0)}{k!} (x - a_0)^k.
\f]
Terms are generated lazily and are never recomputed: requesting more terms
extends the existing list. The derivatives \f$ f^{(k)} \f$ are cached in an
evaluators.DerivativeCache which may be shared by several threads.

@b Examples

```
    t = TaylorPolynomial(ExpExpression(), a0=0)
    t5 = t.get_for_n_terms(5)
    print(t5(0.1), t5.max_error(domain=(-0.5, 0.5)))
```
"""

import copy
import logging

import numpy as np

from ..numutils import NumericKind, divide, factorial, subtract, negate
from ..numutils import inf_norm1d
from ..settings import Settings
from .basics import ConstantExpression, IdentityExpression, sum_of
from .common import ArityError, ArgumentError
from .evaluators import DerivativeCache
from .numexpr import UnaryExpression, SelfDifferentiable, ensure_expr, compose
from .poly import ConstantTerm, PolyTerm, Polynomial


__all__ = [
    "TaylorPolynomial",
]


logger = logging.getLogger(__name__)


class TaylorPolynomial(UnaryExpression, SelfDifferentiable):
    r"""Lazily extended Taylor polynomial of an expression.

    Terms are kept per degree, including terms with a vanishing coefficient
    (which the Polynomial returned by the `polynomial` property drops).

    Taylor polynomials are mutable in the sense that requesting more terms
    extends them, so they compare equal only to themselves.
    """

    def __init__(self, func, a0=0, differentiator=None, simplify=None,
                 name='taylor'):
        r"""Create the zeroth order Taylor polynomial of `func` around `a0`.

        Args:
            func: Expression of one argument to expand.
            a0: Point of expansion. Must lie in the domain of `func`.
            differentiator: derivative.Differentiator used for computing the
                derivatives of `func`.
            simplify: Whether to simplify each derivative. Default is taken
                from settings.Settings.simplify_taylor_derivatives.
        """
        func = ensure_expr(func)
        if func.arity != 1:
            raise ArityError("Taylor polynomials need a function of one "
                             "variable, got %s." % ", ".join(func.arg_names))
        super(TaylorPolynomial, self).__init__(
            arg_name=func.arg_names[0], name=name,
            result_kind=max(func.result_kind, NumericKind.RATIONAL),
            arg_kind=func.arg_kind, func=func,
        )
        if simplify is None:
            simplify = Settings.simplify_taylor_derivatives
        self._a0 = a0
        self._derivatives = DerivativeCache(func, differentiator=differentiator,
                                            simplify=simplify)
        ## Lock shared with the derivative cache.
        self._lock = self._derivatives.lock
        self._coefficients = []
        self._terms = []
        self._polynomial = None
        self._generate_up_to(0)

    @property
    def func(self):
        r"""The expanded expression."""
        return self._sub_expr('func')

    @property
    def a0(self):
        r"""Point of expansion."""
        return self._a0

    @property
    def order(self):
        r"""Highest degree of the generated terms."""
        with self._lock:
            return len(self._terms) - 1

    @property
    def terms(self):
        r"""Tuple of the terms by degree, in the shifted variable."""
        with self._lock:
            return tuple(self._terms)

    def coefficients(self):
        r"""NumPy object array of the exact coefficients by degree."""
        with self._lock:
            return np.array(self._coefficients, dtype=object)

    @property
    def polynomial(self):
        r"""The terms as Polynomial in the shifted variable \f$ x - a_0 \f$."""
        with self._lock:
            if self._polynomial is None:
                self._polynomial = Polynomial(*self._terms)
            return self._polynomial

    def get_for_n_terms(self, n):
        r"""Return the Taylor polynomial with all terms up to degree `n`.

        Missing terms are generated and appended. Previously generated terms
        are kept as they are. If more terms exist already, a truncated copy
        is returned.
        """
        with self._lock:
            self._generate_up_to(n)
            if n < self.order:
                return self.first_n(n + 1)
            return self

    def first_n(self, n):
        r"""Copy of this Taylor polynomial with only the first `n` terms.

        The copy shares the derivative cache with this polynomial.
        """
        with self._lock:
            self._generate_up_to(n - 1)
            result = copy.copy(self)
            result._terms = self._terms[:n]
            result._coefficients = self._coefficients[:n]
            result._polynomial = None
            return result

    def _generate_up_to(self, n):
        for k in range(len(self._terms), n+1):
            fk = self._derivatives.get(k)
            value = divide(fk.apply(self._a0), factorial(k))
            self._coefficients.append(value)
            if k == 0:
                self._terms.append(ConstantTerm(value))
            else:
                self._terms.append(PolyTerm(value, {self.arg_name: k}))
            self._polynomial = None
            logger.debug("Taylor coefficient of order %d around %s: %s",
                         k, self._a0, value)

    def _shift(self):
        r"""The expression \f$ x - a_0 \f$."""
        return sum_of(IdentityExpression(self.arg_name),
                      ConstantExpression(negate(self._a0), arg_name=self.arg_name))

    def _eval(self, x):
        poly = self.polynomial
        if not poly.arg_names:
            return poly.apply(None)
        return poly.apply({self.arg_name: subtract(x, self._a0)})

    def self_derivative(self, engine):
        poly = self.polynomial.differentiate(self.arg_name)
        if not poly.arg_names:
            return ConstantExpression(poly.apply(None), arg_name=self.arg_name)
        return compose(poly, self._shift())

    def max_error(self, domain=None, Ns=50):
        r"""Maximum deviation from the expanded function.

        @param domain
            Interval ``(a, b)`` to search in. Defaults to the domain of the
            expanded function, which needs to be finite in this case.
        @param Ns
            Number of samples for the initial brute force search.

        @return A pair ``(x, delta)`` of the point of maximum deviation and
            the deviation at that point.
        """
        if domain is None:
            domain = self.func.domain
            if domain.is_unrestricted():
                raise ArgumentError("A finite domain is needed for %s."
                                    % self.func.nice_name)
        return inf_norm1d(self, self.func, domain=domain, Ns=Ns)

    def _expr_str(self):
        return "taylor(%s, a0=%s, order=%d)" % (self.func.str(), self._a0,
                                                self.order)
