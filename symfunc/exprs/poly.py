r"""@package symfunc.exprs.poly

Multivariate polynomials with integer or rational exponents.

A Polynomial is a sum of Term objects. A term is a coefficient times a
product of powers of named variables, e.g. `3 x^2 y`. Terms with the same
*signature* (i.e. the same variables raised to the same exponents) are merged
when added to a polynomial, and terms whose coefficients sum to zero are
dropped.

Arguments of terms and polynomials are ordered by name, so that e.g.
``PolyTerm(1, dict(y=1, x=2))(2, 3)`` evaluates \f$ x^2 y \f$ at `x=2, y=3`.

@b Examples

```
    p = Polynomial(PolyTerm(3, dict(x=2)), PolyTerm(-1, dict(x=1, y=1)), ConstantTerm(5))
    p(dict(x=2, y=1))        # 15
    p.differentiate('x')     # 6 x - y
    p.order('x')             # 2
```
"""

from abc import abstractmethod
import logging
import math

import sympy as sp

from ..numutils import NumericKind, kind_of, coerce, normalize, is_zero, is_one
from ..numutils import add, subtract, multiply, power, to_sympy_number
from ..numutils import CoercionError
from ..utils import flatten_args
from .basics import (ConstantExpression, IdentityExpression, PowerExpression,
                     NegateExpression, SumExpression, ProductExpression)
from .common import ArgumentError, UnsupportedOperationError
from .interval import ALL_VALUES, Interval, narrowest
from .numexpr import (NumericExpression, SelfDifferentiable,
                      PartiallyDifferentiable)


__all__ = [
    "Term",
    "ConstantTerm",
    "PolyTerm",
    "RationalExponentPolyTerm",
    "make_term",
    "Polynomial",
    "PolynomialBuilder",
]


logger = logging.getLogger(__name__)


def make_term(coefficient, exponents=None):
    r"""Create the most specific term for the given coefficient and exponents.

    Variables with a zero exponent are dropped. The result is a ConstantTerm
    if no variables remain, a PolyTerm if all exponents are integers and a
    RationalExponentPolyTerm otherwise.
    """
    exponents = dict((v, normalize(e)) for v, e in (exponents or {}).items()
                     if not is_zero(e))
    if not exponents:
        return ConstantTerm(coefficient)
    if all(kind_of(e) == NumericKind.INTEGER for e in exponents.values()):
        return PolyTerm(coefficient, exponents)
    return RationalExponentPolyTerm(coefficient, exponents)


class Term(NumericExpression, SelfDifferentiable, PartiallyDifferentiable):
    r"""Coefficient times a product of powers of variables.

    Subclasses restrict the allowed exponents by implementing
    _check_exponent().
    """

    def __init__(self, coefficient, exponents=None, name=None):
        super(Term, self).__init__(
            name=name,
            result_kind=max(kind_of(coefficient), NumericKind.REAL),
        )
        self._coefficient = normalize(coefficient)
        exponents = exponents or {}
        self._exponents = dict(
            (v, self._check_exponent(exponents[v])) for v in sorted(exponents)
            if not is_zero(exponents[v])
        )

    @abstractmethod
    def _check_exponent(self, exponent):
        r"""Validate and normalize a single exponent."""
        pass

    @property
    def coefficient(self):
        return self._coefficient

    @property
    def exponents(self):
        r"""Dictionary mapping variable names to their exponents."""
        return dict(self._exponents)

    @property
    def arg_names(self):
        return tuple(self._exponents)

    def input_range(self, arg_name):
        if arg_name not in self._exponents:
            raise ArgumentError("%s has no argument %r." % (self.nice_name, arg_name))
        e = self._exponents[arg_name]
        if kind_of(e) == NumericKind.RATIONAL and e.denominator % 2 == 0:
            return Interval.positive() if e < 0 else Interval.nonnegative()
        return ALL_VALUES

    def _eval_args(self, args):
        result = self._coefficient
        for v, e in self._exponents.items():
            result = multiply(result, power(args[v], e))
        return result

    def is_constant(self):
        r"""Whether the term does not depend on any variable."""
        return not self._exponents

    def is_zero_expression(self):
        return is_zero(self._coefficient)

    def signature(self):
        r"""Frozen set of ``(variable, exponent)`` pairs."""
        return frozenset(self._exponents.items())

    def has_matching_signature(self, other):
        r"""Whether `other` is a term of the same kind with the same signature."""
        return (isinstance(other, Term) and type(other) is type(self)
                and other.signature() == self.signature())

    def with_coefficient(self, coefficient):
        r"""Return a term of the same kind and signature with a new coefficient."""
        return type(self)(coefficient, self._exponents)

    def order(self, arg_name):
        r"""Exponent of a variable rounded down (zero for absent variables)."""
        return math.floor(self._exponents.get(arg_name, 0))

    def scale(self, factor):
        r"""Return this term multiplied by a number."""
        if is_one(factor):
            return self
        if is_zero(factor):
            return ConstantTerm(0)
        return self.with_coefficient(multiply(self._coefficient, factor))

    def multiply(self, other):
        r"""Multiply by another term, a number or a bare power or identity."""
        if isinstance(other, Term):
            exponents = dict(self._exponents)
            new_vars = [v for v in other.arg_names if v not in exponents]
            if new_vars and exponents:
                logger.info("Multiplication of %s and %s introduces variables %s.",
                            self.str(), other.str(), ", ".join(new_vars))
            for v, e in other.exponents.items():
                exponents[v] = add(exponents.get(v, 0), e)
            return make_term(multiply(self._coefficient, other.coefficient), exponents)
        if isinstance(other, PowerExpression):
            if other.inner is not None:
                raise ArgumentError("Cannot multiply %s by a power of %s."
                                    % (self.str(), other.inner.str()))
            return self.multiply(make_term(1, {other.arg_name: other.exponent}))
        if isinstance(other, IdentityExpression) and other.is_identity():
            return self.multiply(PolyTerm(1, {other.arg_name: 1}))
        if isinstance(other, ConstantExpression):
            return self.scale(other.value)
        if not isinstance(other, NumericExpression):
            return self.scale(other)
        raise ArgumentError("Cannot multiply %s by %r." % (self.str(), other))

    def differentiate(self, arg_name):
        r"""Partial derivative with respect to a variable."""
        e = self._exponents.get(arg_name)
        if e is None:
            return ConstantTerm(0)
        exponents = dict(self._exponents)
        exponents[arg_name] = subtract(e, 1)
        return make_term(multiply(self._coefficient, e), exponents)

    def partial_derivative(self, arg_name):
        return self.differentiate(arg_name)

    def self_derivative(self, engine):
        return _unary_derivative(self)

    def _key(self):
        return (self._coefficient, self.signature())

    def _expr_str(self):
        factors = ["%s" % (self._coefficient,)] if self._exponents else []
        for v, e in self._exponents.items():
            factors.append(v if is_one(e) else "%s^%s" % (v, e))
        if not factors:
            return "%s" % (self._coefficient,)
        if is_one(self._coefficient):
            factors = factors[1:]
        return "*".join(factors)

    def _to_sympy(self):
        result = to_sympy_number(self._coefficient)
        for v, e in self._exponents.items():
            result = result * sp.Symbol(v) ** to_sympy_number(e)
        return result


class ConstantTerm(Term):
    r"""Term without any variables."""

    def __init__(self, value, name='const'):
        super(ConstantTerm, self).__init__(value, name=name)

    def _check_exponent(self, exponent):
        raise ArgumentError("Constant terms have no variables.")

    def multiply(self, other):
        if is_zero(self._coefficient):
            return self
        if is_one(self._coefficient) and isinstance(other, Term):
            return other
        return super(ConstantTerm, self).multiply(other)

    def with_coefficient(self, coefficient):
        return ConstantTerm(coefficient)

    def differentiate(self, arg_name):
        return ConstantTerm(0)


class PolyTerm(Term):
    r"""Term with integer exponents."""

    def __init__(self, coefficient, exponents=None, name='term'):
        super(PolyTerm, self).__init__(coefficient, exponents, name=name)

    def _check_exponent(self, exponent):
        try:
            return coerce(exponent, NumericKind.INTEGER)
        except CoercionError:
            raise ArgumentError("Exponent %s of a polynomial term is not an integer."
                                % (exponent,))


class RationalExponentPolyTerm(Term):
    r"""Term with rational exponents."""

    def __init__(self, coefficient, exponents=None, name='rterm'):
        super(RationalExponentPolyTerm, self).__init__(coefficient, exponents,
                                                       name=name)

    def _check_exponent(self, exponent):
        if kind_of(exponent) > NumericKind.RATIONAL:
            raise ArgumentError("Exponent %r is not rational." % (exponent,))
        return coerce(exponent, NumericKind.RATIONAL)


def _unary_derivative(expr):
    r"""Derivative of a term or polynomial of at most one variable."""
    if expr.arity == 0:
        return ConstantExpression(0)
    arg_name = expr.arg_names[0]
    result = expr.partial_derivative(arg_name)
    if result.arity == 0:
        return ConstantExpression(result.apply(None), arg_name=arg_name)
    return result


_TERM_KINDS = (ConstantTerm, PolyTerm, RationalExponentPolyTerm)


def _merge_term(terms, term):
    r"""Add a term to a list of terms in place, merging equal signatures."""
    if type(term) not in _TERM_KINDS:
        raise ArgumentError("Unsupported term kind: %s" % type(term).__name__)
    if term.is_constant():
        for i, t in enumerate(terms):
            if t.is_constant():
                value = add(t.coefficient, term.coefficient)
                if is_zero(value):
                    del terms[i]
                else:
                    terms[i] = ConstantTerm(value)
                return
    else:
        for i, t in enumerate(terms):
            if t.has_matching_signature(term):
                value = add(t.coefficient, term.coefficient)
                if is_zero(value):
                    del terms[i]
                else:
                    terms[i] = t.with_coefficient(value)
                return
    if not is_zero(term.coefficient):
        terms.append(term)


def _terms_of(expr):
    r"""Convert an expression (or number) to a list of polynomial terms.

    @b Raises

    UnsupportedOperationError for expressions that are not polynomials.
    """
    if isinstance(expr, Polynomial):
        return list(expr.terms)
    if isinstance(expr, Term):
        return [expr]
    if not isinstance(expr, NumericExpression):
        return [ConstantTerm(expr)]
    if isinstance(expr, ConstantExpression):
        return [ConstantTerm(expr.value)]
    if isinstance(expr, IdentityExpression) and expr.is_identity():
        return [PolyTerm(1, {expr.arg_name: 1})]
    if isinstance(expr, PowerExpression) and expr.inner is None:
        return [make_term(1, {expr.arg_name: expr.exponent})]
    if isinstance(expr, NegateExpression):
        inner = expr.inner if expr.inner is not None else IdentityExpression(expr.arg_name)
        return [t.scale(-1) for t in _terms_of(inner)]
    if isinstance(expr, SumExpression):
        return [t for s in expr.terms for t in _terms_of(s)]
    if isinstance(expr, ProductExpression):
        result = [ConstantTerm(1)]
        for f in expr.terms:
            result = [a.multiply(b) for a in result for b in _terms_of(f)]
        return result
    raise UnsupportedOperationError("%s is not a polynomial." % expr.nice_name)


class Polynomial(NumericExpression, SelfDifferentiable, PartiallyDifferentiable):
    r"""Sum of polynomial terms.

    Terms are kept in the order they were first added. Adding a term of a
    signature already present merges the two terms.
    """

    def __init__(self, *terms, name='poly'):
        merged = []
        for t in flatten_args(terms):
            _merge_term(merged, t)
        kinds = [t.result_kind for t in merged]
        super(Polynomial, self).__init__(
            name=name, result_kind=max(kinds, default=NumericKind.REAL),
            **dict(("t%d" % i, t) for i, t in enumerate(merged))
        )
        self._terms = tuple(merged)

    @property
    def terms(self):
        return self._terms

    def count_terms(self):
        return len(self._terms)

    @property
    def arg_names(self):
        return tuple(sorted(set(v for t in self._terms for v in t.arg_names)))

    def input_range(self, arg_name):
        ranges = [t.input_range(arg_name) for t in self._terms
                  if arg_name in t.arg_names]
        if not ranges:
            raise ArgumentError("%s has no argument %r." % (self.nice_name, arg_name))
        return narrowest(*ranges)

    def _eval_args(self, args):
        result = 0
        for t in self._terms:
            result = add(result, t.apply(args))
        return result

    def is_zero_expression(self):
        return not self._terms

    def add(self, other):
        r"""Return the sum with a term, polynomial or polynomial expression."""
        return Polynomial(*(list(self._terms) + _terms_of(other)))

    def scale(self, factor):
        return Polynomial(*[t.scale(factor) for t in self._terms])

    def multiply(self, other):
        r"""Return the product with a term, polynomial, number or expression.

        Expressions need to be polynomials themselves, i.e. built from
        constants, the identity, bare powers, negations, sums and products.
        """
        if isinstance(other, Term):
            return Polynomial(*[t.multiply(other) for t in self._terms])
        if not isinstance(other, NumericExpression):
            return self.scale(other)
        others = _terms_of(other)
        return Polynomial(*[a.multiply(b) for a in self._terms for b in others])

    def differentiate(self, arg_name):
        r"""Partial derivative with respect to a variable."""
        return Polynomial(*[t.differentiate(arg_name) for t in self._terms])

    def partial_derivative(self, arg_name):
        return self.differentiate(arg_name)

    def self_derivative(self, engine):
        return _unary_derivative(self)

    def order(self, arg_name):
        r"""Highest (rounded down) exponent of a variable."""
        return max([t.order(arg_name) for t in self._terms], default=0)

    def first_n(self, n):
        r"""Polynomial of the first `n` terms."""
        return Polynomial(*self._terms[:n])

    def sort_by_order_in(self, arg_name, reverse=False):
        r"""Polynomial with terms sorted by their order in a variable."""
        return Polynomial(*sorted(self._terms, key=lambda t: t.order(arg_name),
                                  reverse=reverse))

    def _key(self):
        return (frozenset(self._terms),)

    def _expr_str(self):
        if not self._terms:
            return "0"
        return " + ".join(t.str() for t in self._terms)

    def _to_sympy(self):
        return sp.Add(*[t.to_sympy() for t in self._terms])


class PolynomialBuilder(object):
    r"""Assemble a polynomial term by term."""

    def __init__(self):
        self._terms = []

    def __len__(self):
        return len(self._terms)

    def add(self, term):
        r"""Add a term (or all terms of a polynomial) and return the builder."""
        if isinstance(term, Polynomial):
            for t in term.terms:
                _merge_term(self._terms, t)
        else:
            _merge_term(self._terms, term)
        return self

    def build(self):
        return Polynomial(*self._terms)
