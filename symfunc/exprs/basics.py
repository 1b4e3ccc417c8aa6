r"""@package symfunc.exprs.basics

Collection of basic numexpr.NumericExpression subclasses.

These are the building blocks of the expression algebra: constants, the
identity, sums, products, quotients, powers and negation. Sums, products and
quotients are the aggregate nodes the differentiation engine has generic
rules for. Powers and negations additionally implement algebraic identities
of composition, e.g.

~~~.py
PowerExpression(2).compose_with(PowerExpression(3))   # -> PowerExpression(6)
NegateExpression().compose_with(NegateExpression())   # -> IdentityExpression()
~~~

Aggregates store their terms verbatim. Two kinds of normalization exist:
the builders (SumBuilder, ProductBuilder, and the factories sum_of() and
product_of() using them) merge constants while a sum or product is being
assembled, while the simplify() method of each aggregate applies the
simplification rules local to that aggregate.

@b Examples

```
    x = IdentityExpression()
    expr = sum_of(product_of(3, x**2), negation_of(x), 5)
    print(expr(2))  # 15
```
"""

import logging

import sympy as sp

from ..numutils import NumericKind, kind_of, normalize, is_zero, is_one
from ..numutils import add, multiply, divide, subtract, negate, power
from ..numutils import to_sympy_number, DivisionByZeroError
from ..utils import flatten_args
from .common import UnsupportedOperationError, ArgumentError
from .interval import ALL_VALUES, Interval, narrowest
from .numexpr import UnaryExpression, SelfDifferentiable, ensure_expr


__all__ = [
    "ConstantExpression",
    "IdentityExpression",
    "SimpleExpression",
    "SumExpression",
    "ProductExpression",
    "QuotientExpression",
    "PowerExpression",
    "NegateExpression",
    "SumBuilder",
    "ProductBuilder",
    "const",
    "identity",
    "sum_of",
    "product_of",
    "quotient_of",
    "power_of",
    "negation_of",
    "is_const_equivalent",
    "const_value",
    "is_negate_equivalent",
]


logger = logging.getLogger(__name__)


class ConstantExpression(UnaryExpression, SelfDifferentiable):
    r"""Represent an expression that is constant.

    The value may be of any numeric kind. Any argument (even a complex one)
    is accepted and ignored.
    """

    def __init__(self, value=0, arg_name='x', name='const'):
        super(ConstantExpression, self).__init__(
            arg_name=arg_name, name=name, result_kind=kind_of(value),
            arg_kind=NumericKind.COMPLEX,
        )
        self._value = normalize(value)

    @property
    def value(self):
        r"""The constant value."""
        return self._value

    @property
    def nice_name(self):
        return "%s (%s)" % (self.name, self._value)

    def is_zero_expression(self):
        return is_zero(self._value)

    def _eval(self, x):
        return self._value

    def _expr_str(self):
        return "%s" % (self._value,)

    def _key(self):
        return (self._value,)

    def _compose_with(self, inner):
        if inner.arg_names == self.arg_names:
            return self
        return ConstantExpression(self._value, arg_name=inner.arg_names[0],
                                  name=self.name)

    def self_derivative(self, engine):
        return ConstantExpression(0, arg_name=self.arg_name)

    def _to_sympy(self):
        return to_sympy_number(self._value)


class IdentityExpression(UnaryExpression, SelfDifferentiable):
    r"""The function returning its argument.

    Composition with the (unrestricted) identity is a no-op in both
    directions.
    """

    def __init__(self, arg_name='x', domain=None, kind=NumericKind.REAL,
                 name='Id'):
        super(IdentityExpression, self).__init__(
            arg_name=arg_name, domain=domain, result_kind=kind, arg_kind=kind,
            name=name,
        )

    def is_identity(self):
        return self.input_range().is_unrestricted()

    def _eval(self, x):
        return x

    def _expr_str(self):
        return self.arg_name

    def _key(self):
        return (self._declared_domain, self.arg_kind)

    def _compose_with(self, inner):
        if self.is_identity():
            return inner
        return super(IdentityExpression, self)._compose_with(inner)

    def _and_then(self, outer):
        if self.is_identity() and outer.arg_names == self.arg_names:
            return outer
        return super(IdentityExpression, self)._and_then(outer)

    def self_derivative(self, engine):
        return ConstantExpression(1, arg_name=self.arg_name)

    def _to_sympy(self):
        return sp.Symbol(self.arg_name)


class SimpleExpression(UnaryExpression):
    r"""Wrap an arbitrary Python callable.

    Such expressions have no symbolic derivative. The differentiation engine
    uses central finite differences for them.
    """

    def __init__(self, func, desc='f(x)', arg_name='x', domain=None,
                 kind=NumericKind.REAL, name='simple'):
        super(SimpleExpression, self).__init__(
            arg_name=arg_name, domain=domain, result_kind=kind, arg_kind=kind,
            name=name,
        )
        self._func = func
        self._desc = desc

    def _eval(self, x):
        return self._func(x)

    def _expr_str(self):
        return self._desc

    def _key(self):
        return (self._func, self._desc, self._declared_domain)


def _common_arg_name(exprs):
    r"""Argument name shared by the non-constant expressions in `exprs`."""
    names = [e.arg_names[0] for e in exprs
             if e.arity == 1 and not isinstance(e, ConstantExpression)]
    if not names:
        return 'x'
    if len(set(names)) > 1:
        logger.warning("Combining functions of different arguments %s. All "
                       "will receive the value of %r.",
                       ", ".join(sorted(set(names))), names[0])
    return names[0]


class _AggregateExpression(UnaryExpression):
    r"""Base for sums and products of arbitrarily many terms."""

    def __init__(self, *terms, arg_name=None, name=None):
        terms = [ensure_expr(t) for t in flatten_args(terms)]
        if arg_name is None:
            arg_name = _common_arg_name(terms)
        sub_exprs = dict(("t%d" % i, t) for i, t in enumerate(terms))
        super(_AggregateExpression, self).__init__(
            arg_name=arg_name, name=name,
            result_kind=max([t.result_kind for t in terms],
                            default=NumericKind.INTEGER),
            arg_kind=min([t.arg_kind for t in terms],
                         default=NumericKind.COMPLEX),
            **sub_exprs
        )
        self._terms = tuple(terms)

    @property
    def terms(self):
        r"""Tuple of all terms (or factors) in the order given."""
        return self._terms

    def _natural_domain(self):
        return narrowest(*[t.domain for t in self._terms if t.arity == 1])

    def _flat_terms(self):
        r"""Generate all terms, recursing into nested aggregates of this type."""
        for t in self._terms:
            if isinstance(t, type(self)):
                yield from t._flat_terms()
            else:
                yield t

    def _key(self):
        return (self._terms,)


class SumExpression(_AggregateExpression):
    r"""Sum of an arbitrary number of terms."""

    def __init__(self, *terms, arg_name=None, name='add'):
        super(SumExpression, self).__init__(*terms, arg_name=arg_name, name=name)

    def is_zero_expression(self):
        return all(t.is_zero_expression() for t in self._terms)

    def _eval(self, x):
        result = 0
        for t in self._terms:
            result = add(result, t.apply(x))
        return result

    def _expr_str(self):
        if not self._terms:
            return "0"
        return " + ".join(t.str() for t in self._terms)

    def _to_sympy(self):
        return sp.Add(*[t.to_sympy() for t in self._terms])

    def simplify(self):
        r"""Combine constants and like terms.

        Nested sums are flattened. All constant-equivalent terms are folded
        into one constant and terms differing only in their constant
        coefficient are combined, e.g. ``3*x + (-3)*x`` becomes zero.
        """
        arg = self.arg_name
        constant = 0
        groups = []
        for t in self._flat_terms():
            c, base = _split_coefficient(t)
            if base is None:
                constant = add(constant, c)
                continue
            for group in groups:
                if group[1] == base:
                    group[0] = add(group[0], c)
                    break
            else:
                groups.append([c, base])
        terms = [_scaled(base, c, arg) for c, base in groups if not is_zero(c)]
        if not is_zero(constant):
            terms.append(ConstantExpression(constant, arg_name=arg))
        if not terms:
            return ConstantExpression(0, arg_name=arg)
        if len(terms) == 1:
            return terms[0]
        return SumExpression(*terms, arg_name=arg)


class ProductExpression(_AggregateExpression):
    r"""Product of an arbitrary number of factors."""

    def __init__(self, *terms, arg_name=None, name='mult'):
        super(ProductExpression, self).__init__(*terms, arg_name=arg_name,
                                                name=name)

    def is_zero_expression(self):
        return any(t.is_zero_expression() for t in self._terms)

    def _eval(self, x):
        result = 1
        for t in self._terms:
            result = multiply(result, t.apply(x))
        return result

    def _expr_str(self):
        if not self._terms:
            return "1"
        return " * ".join(t.str() for t in self._terms)

    def _to_sympy(self):
        return sp.Mul(*[t.to_sympy() for t in self._terms])

    def simplify(self):
        r"""Fold constants and merge powers of a common base.

        A vanishing constant factor turns the whole product into zero, an
        overall factor of `-1` into a negation.
        """
        arg = self.arg_name
        c, base = _split_coefficient(self)
        if is_zero(c):
            return ConstantExpression(0, arg_name=arg)
        if base is None:
            return ConstantExpression(c, arg_name=arg)
        factors = base.terms if isinstance(base, ProductExpression) else [base]
        factors = _merge_powers(factors)
        if not factors:
            return ConstantExpression(c, arg_name=arg)
        if len(factors) == 1:
            return _scaled(factors[0], c, arg)
        return _scaled(ProductExpression(*factors, arg_name=arg), c, arg)


class QuotientExpression(UnaryExpression):
    r"""Quotient of two expressions.

    Evaluating at a point where the denominator vanishes raises a
    DivisionByZeroError.
    """

    def __init__(self, numerator, denominator, arg_name=None, name='div'):
        numerator = ensure_expr(numerator)
        denominator = ensure_expr(denominator)
        if arg_name is None:
            arg_name = _common_arg_name([numerator, denominator])
        super(QuotientExpression, self).__init__(
            arg_name=arg_name, name=name,
            numerator=numerator, denominator=denominator,
            result_kind=max(numerator.result_kind, denominator.result_kind,
                            NumericKind.RATIONAL),
            arg_kind=min(numerator.arg_kind, denominator.arg_kind),
        )

    @property
    def numerator(self):
        return self._sub_expr('numerator')

    @property
    def denominator(self):
        return self._sub_expr('denominator')

    def _natural_domain(self):
        return narrowest(self.numerator.domain, self.denominator.domain)

    def is_zero_expression(self):
        return self.numerator.is_zero_expression()

    def _eval(self, x):
        den = self.denominator.apply(x)
        if is_zero(den):
            raise DivisionByZeroError("Denominator of %s vanishes at %s=%s."
                                      % (self.str(), self.arg_name, x))
        return divide(self.numerator.apply(x), den)

    def _key(self):
        return (self.numerator, self.denominator)

    def _expr_str(self):
        return "%s / %s" % (self.numerator.str(), self.denominator.str())

    def _to_sympy(self):
        return self.numerator.to_sympy() / self.denominator.to_sympy()

    def simplify(self):
        r"""Apply the local quotient rules.

        In this order:
            * negations in numerator and denominator are pulled in front of
              the quotient
            * quotients of two constant-equivalent expressions are folded
            * constant denominators are turned into a factor
            * constant-equivalent numerators are folded into a single
              constant
            * powers of a common base are combined into a single power
            * equal numerator and denominator give a constant

        @b Raises

        DivisionByZeroError if the denominator folds to zero.
        """
        num, den = self.numerator, self.denominator
        arg = self.arg_name
        neg_num, neg_den = is_negate_equivalent(num), is_negate_equivalent(den)
        if neg_num or neg_den:
            if neg_num:
                num = _strip_negation(num)
            if neg_den:
                den = _strip_negation(den)
            result = QuotientExpression(num, den, arg_name=arg).simplify()
            return result if neg_num and neg_den else negation_of(result)
        if is_const_equivalent(den):
            dv = const_value(den)
            if is_zero(dv):
                raise DivisionByZeroError("Denominator of %s folds to zero."
                                          % self.str())
            if is_const_equivalent(num):
                return ConstantExpression(divide(const_value(num), dv), arg_name=arg)
            if is_one(dv):
                return num
            return _simplified_scaled(num, divide(1, dv), arg)
        if is_const_equivalent(num):
            nv = const_value(num)
            if is_zero(nv):
                return ConstantExpression(0, arg_name=arg)
            if isinstance(num, ConstantExpression):
                return self
            return QuotientExpression(ConstantExpression(nv, arg_name=arg),
                                      den, arg_name=arg)
        cn, bn = _split_coefficient(num)
        cd, bd = _split_coefficient(den)
        if bn == bd:
            return ConstantExpression(divide(cn, cd), arg_name=arg)
        pn, pd = _power_parts(bn), _power_parts(bd)
        if pn is not None and pd is not None and _same_base(pn, pd):
            p = _make_power(subtract(pn[0], pd[0]), pn[1], pn[2],
                            narrowest(pn[3], pd[3]))
            return _simplified_scaled(p, divide(cn, cd), arg)
        return self


def _check_exponent(exponent):
    kind = kind_of(exponent)
    if kind > NumericKind.RATIONAL:
        raise ArgumentError("Exponents must be integers or rationals, got %r."
                            % (exponent,))
    return normalize(exponent)


def _can_merge_exponents(outer_exponent, inner_power):
    r"""Whether ``(b^m)^n == b^(m*n)`` holds on the domain of `inner_power`."""
    if kind_of(outer_exponent) == NumericKind.INTEGER:
        return True
    lower = inner_power.input_range().lower
    return lower >= 0


class PowerExpression(UnaryExpression, SelfDifferentiable):
    r"""Integer or rational power of the argument or of an inner expression.

    A bare power `x^n` has no links. A power of an inner expression
    (`PowerExpression(n, inner=f)`) is a composed view with the bare power as
    `original` and `f` as `composed`.

    Rational exponents with an even denominator restrict the domain to
    nonnegative (for negative exponents: positive) real arguments.
    """

    def __init__(self, exponent, inner=None, arg_name=None, domain=None,
                 kind=NumericKind.REAL, name='pow'):
        exponent = _check_exponent(exponent)
        original = None
        if inner is not None:
            inner = ensure_expr(inner)
            kind = max(kind, inner.result_kind)
            arg_name = inner.arg_names[0]
            arg_kind = inner.arg_kind
            original = PowerExpression(exponent, arg_name=arg_name, kind=kind)
        else:
            arg_name = arg_name or 'x'
            arg_kind = kind
        super(PowerExpression, self).__init__(
            arg_name=arg_name, domain=domain, original=original,
            composed=inner, result_kind=kind, arg_kind=arg_kind, name=name,
        )
        self._exponent = exponent

    @property
    def exponent(self):
        return self._exponent

    @property
    def inner(self):
        r"""The expression raised to the power (`None` for bare powers)."""
        return self.composed

    @property
    def nice_name(self):
        return "%s (%s)" % (self.name, self._exponent)

    def _natural_domain(self):
        if self.inner is not None:
            return self.inner.domain
        n = self._exponent
        if (self.arg_kind <= NumericKind.REAL
                and kind_of(n) == NumericKind.RATIONAL
                and n.denominator % 2 == 0):
            return Interval.positive() if n < 0 else Interval.nonnegative()
        return ALL_VALUES

    def _eval(self, x):
        if self.inner is not None:
            return self.original.apply(self.inner.apply(x))
        return power(x, self._exponent)

    def _key(self):
        return (self._exponent, self.inner, self._declared_domain)

    def _expr_str(self):
        if self.inner is not None:
            return "%s^%s" % (self.inner.str(), self._exponent)
        return "%s^%s" % (self.arg_name, self._exponent)

    def _to_sympy(self):
        base = sp.Symbol(self.arg_name) if self.inner is None else self.inner.to_sympy()
        return base ** to_sympy_number(self._exponent)

    def self_derivative(self, engine):
        if self.inner is not None:
            return engine.chain_rule(self.original, self.inner)
        n = self._exponent
        arg = self.arg_name
        if is_zero(n):
            return ConstantExpression(0, arg_name=arg)
        m = subtract(n, 1)
        if is_zero(m):
            return ConstantExpression(n, arg_name=arg)
        return ProductExpression(ConstantExpression(n, arg_name=arg),
                                 _make_power(m, None, arg, self.input_range()),
                                 arg_name=arg)

    def _compose_with(self, inner):
        if isinstance(inner, ConstantExpression):
            return ConstantExpression(self.apply(inner.value), arg_name=inner.arg_name)
        if self.inner is not None:
            from .numexpr import compose
            return PowerExpression(self._exponent, inner=compose(self.inner, inner),
                                   kind=self.result_kind)
        if isinstance(inner, PowerExpression):
            if _can_merge_exponents(self._exponent, inner):
                return _make_power(multiply(self._exponent, inner.exponent),
                                   inner.inner, inner.arg_name, inner.input_range())
            logger.debug("Not merging exponents of %s and %s (base may be negative).",
                         self.str(), inner.str())
        if isinstance(inner, IdentityExpression) and inner.is_identity():
            return PowerExpression(self._exponent, arg_name=inner.arg_name,
                                   domain=self._declared_domain,
                                   kind=self.result_kind)
        return PowerExpression(self._exponent, inner=inner,
                               kind=max(self.result_kind, inner.result_kind))

    def _and_then(self, outer):
        if (isinstance(outer, PowerExpression) and outer.inner is None
                and _can_merge_exponents(outer.exponent, self)):
            return _make_power(multiply(self._exponent, outer.exponent),
                               self.inner, self.arg_name, self.input_range())
        return super(PowerExpression, self)._and_then(outer)


class NegateExpression(UnaryExpression, SelfDifferentiable):
    r"""Negation of the argument or of an inner expression.

    Like PowerExpression, a negation of an inner expression is a composed
    view with the bare negation as `original`.
    """

    def __init__(self, inner=None, arg_name=None, kind=NumericKind.REAL,
                 name='neg'):
        original = None
        if inner is not None:
            inner = ensure_expr(inner)
            kind = inner.result_kind
            arg_name = inner.arg_names[0]
            arg_kind = inner.arg_kind
            original = NegateExpression(arg_name=arg_name, kind=kind)
        else:
            arg_name = arg_name or 'x'
            arg_kind = kind
        super(NegateExpression, self).__init__(
            arg_name=arg_name, original=original, composed=inner,
            result_kind=kind, arg_kind=arg_kind, name=name,
        )

    @property
    def inner(self):
        r"""The negated expression (`None` for a bare negation)."""
        return self.composed

    def _eval(self, x):
        if self.inner is not None:
            return negate(self.inner.apply(x))
        return negate(x)

    def _key(self):
        return (self.inner, self.arg_kind)

    def _expr_str(self):
        if self.inner is not None:
            return "-%s" % self.inner.str()
        return "-%s" % self.arg_name

    def _to_sympy(self):
        if self.inner is not None:
            return -self.inner.to_sympy()
        return -sp.Symbol(self.arg_name)

    def self_derivative(self, engine):
        if self.inner is not None:
            return engine.chain_rule(self.original, self.inner)
        return ConstantExpression(-1, arg_name=self.arg_name)

    def _compose_with(self, inner):
        if isinstance(inner, ConstantExpression):
            return ConstantExpression(self.apply(inner.value), arg_name=inner.arg_name)
        if self.inner is not None:
            from .numexpr import compose
            return negation_of(compose(self.inner, inner))
        if isinstance(inner, NegateExpression):
            return _positive_part(inner)
        if isinstance(inner, IdentityExpression) and inner.is_identity():
            return NegateExpression(arg_name=inner.arg_name, kind=self.result_kind)
        return NegateExpression(inner=inner)

    def _and_then(self, outer):
        if isinstance(outer, NegateExpression) and outer.inner is None:
            return _positive_part(self)
        return super(NegateExpression, self)._and_then(outer)


def _positive_part(negation):
    r"""Return `f` for the negation `-f` (the identity for bare negations)."""
    if negation.inner is not None:
        return negation.inner
    return IdentityExpression(negation.arg_name, kind=negation.arg_kind)


class SumBuilder(object):
    r"""Assemble a sum term by term, merging constant terms on the way."""

    def __init__(self, arg_name=None):
        self._arg_name = arg_name
        self._terms = []

    def __len__(self):
        return len(self._terms)

    def append(self, term):
        r"""Add a term to the sum and return the builder."""
        term = ensure_expr(term)
        if isinstance(term, ConstantExpression):
            for i, t in enumerate(self._terms):
                if isinstance(t, ConstantExpression):
                    value = add(t.value, term.value)
                    if is_zero(value):
                        del self._terms[i]
                    else:
                        self._terms[i] = ConstantExpression(value, arg_name=t.arg_name)
                    return self
            if is_zero(term.value):
                return self
        self._terms.append(term)
        return self

    def extend(self, terms):
        for t in terms:
            self.append(t)
        return self

    def build(self):
        return SumExpression(*self._terms, arg_name=self._arg_name)


class ProductBuilder(object):
    r"""Assemble a product factor by factor.

    Nested products are flattened and all constant factors are folded into a
    single trailing constant, which is dropped if it is one.
    """

    def __init__(self, arg_name=None):
        self._arg_name = arg_name
        self._terms = []

    def __len__(self):
        return len(self._terms)

    def append(self, term):
        r"""Add a factor to the product and return the builder."""
        term = ensure_expr(term)
        if isinstance(term, ProductExpression):
            return self.extend(term.terms)
        if isinstance(term, ConstantExpression):
            value = term.value
            rest = []
            for t in self._terms:
                if isinstance(t, ConstantExpression):
                    value = multiply(value, t.value)
                else:
                    rest.append(t)
            if not is_one(value):
                rest.append(ConstantExpression(value, arg_name=term.arg_name))
            self._terms = rest
            return self
        self._terms.append(term)
        return self

    def extend(self, terms):
        for t in terms:
            self.append(t)
        return self

    def build(self):
        return ProductExpression(*self._terms, arg_name=self._arg_name)


def const(value, arg_name='x'):
    r"""Create a ConstantExpression."""
    return ConstantExpression(value, arg_name=arg_name)


def identity(arg_name='x', domain=None, kind=NumericKind.REAL):
    r"""Create an IdentityExpression."""
    return IdentityExpression(arg_name, domain=domain, kind=kind)


def sum_of(*terms, arg_name=None):
    r"""Create a sum, merging constant terms."""
    return SumBuilder(arg_name).extend(flatten_args(terms)).build()


def product_of(*terms, arg_name=None):
    r"""Create a product, flattening nested products and folding constants."""
    return ProductBuilder(arg_name).extend(flatten_args(terms)).build()


def quotient_of(numerator, denominator):
    r"""Create a quotient of two expressions (or numbers)."""
    return QuotientExpression(numerator, denominator)


def power_of(expr, exponent):
    r"""Raise an expression to an integer or rational power.

    Powers of powers and powers of the identity are merged where possible.
    """
    from .numexpr import compose
    expr = ensure_expr(expr)
    kind = max(NumericKind.REAL, expr.result_kind)
    return compose(PowerExpression(exponent, arg_name=expr.arg_names[0], kind=kind),
                   expr)


def negation_of(expr):
    r"""Negate an expression, collapsing double negations."""
    expr = ensure_expr(expr)
    if isinstance(expr, ConstantExpression):
        return ConstantExpression(negate(expr.value), arg_name=expr.arg_name)
    if isinstance(expr, NegateExpression):
        return _positive_part(expr)
    return NegateExpression(inner=expr)


def is_const_equivalent(expr):
    r"""Whether an expression is a constant or an aggregate of constants."""
    if isinstance(expr, ConstantExpression):
        return True
    if isinstance(expr, (SumExpression, ProductExpression)):
        return all(is_const_equivalent(t) for t in expr.terms)
    if isinstance(expr, QuotientExpression):
        return (is_const_equivalent(expr.numerator)
                and is_const_equivalent(expr.denominator))
    return False


def const_value(expr):
    r"""Fold a constant-equivalent expression to its value.

    @b Raises

    DivisionByZeroError for quotients with a denominator folding to zero and
    UnsupportedOperationError for expressions that are not
    constant-equivalent.
    """
    if isinstance(expr, ConstantExpression):
        return expr.value
    if isinstance(expr, SumExpression):
        result = 0
        for t in expr.terms:
            result = add(result, const_value(t))
        return result
    if isinstance(expr, ProductExpression):
        result = 1
        for t in expr.terms:
            result = multiply(result, const_value(t))
        return result
    if isinstance(expr, QuotientExpression):
        return divide(const_value(expr.numerator), const_value(expr.denominator))
    raise UnsupportedOperationError("Not a constant expression: %r" % (expr,))


def is_negate_equivalent(expr):
    r"""Whether an expression is a negation of another one.

    This is the case for negations and for products containing at least one
    non-constant factor whose constant factors multiply to `-1`.
    """
    if isinstance(expr, NegateExpression):
        return True
    if isinstance(expr, ProductExpression) and len(expr.terms) >= 2:
        consts = [t for t in expr.terms if isinstance(t, ConstantExpression)]
        if len(consts) == len(expr.terms):
            return False
        value = 1
        for c in consts:
            value = multiply(value, c.value)
        return value == -1
    return False


def _strip_negation(expr):
    r"""Return `f` for a negate-equivalent expression `-f`."""
    if isinstance(expr, NegateExpression):
        return _positive_part(expr)
    rest = [t for t in expr.terms if not isinstance(t, ConstantExpression)]
    if len(rest) == 1:
        return rest[0]
    return ProductExpression(*rest, arg_name=expr.arg_name)


def _split_coefficient(expr):
    r"""Split an expression into a constant coefficient and the remainder.

    @return A pair ``(c, base)`` with ``expr == c * base``. For
        constant-equivalent expressions, `base` is `None`.
    """
    if is_const_equivalent(expr):
        return const_value(expr), None
    if isinstance(expr, NegateExpression):
        c, base = _split_coefficient(_positive_part(expr))
        return negate(c), base
    if isinstance(expr, ProductExpression):
        c = 1
        factors = []
        for t in expr._flat_terms():
            tc, tb = _split_coefficient(t)
            c = multiply(c, tc)
            if tb is None:
                continue
            if isinstance(tb, ProductExpression):
                factors.extend(tb.terms)
            else:
                factors.append(tb)
        if not factors:
            return c, None
        if len(factors) == 1:
            return c, factors[0]
        return c, ProductExpression(*factors, arg_name=expr.arg_name)
    return 1, expr


def _scaled(base, c, arg_name):
    r"""Return ``c * base`` in normal form."""
    if base is None or is_zero(c):
        return ConstantExpression(c if base is None else 0, arg_name=arg_name)
    if is_one(c):
        return base
    if c == -1:
        return negation_of(base)
    factors = list(base.terms) if isinstance(base, ProductExpression) else [base]
    return ProductExpression(*(factors + [ConstantExpression(c, arg_name=arg_name)]),
                             arg_name=arg_name)


def _simplified_scaled(base, c, arg_name):
    result = _scaled(base, c, arg_name)
    if isinstance(result, ProductExpression):
        return result.simplify()
    return result


def _power_parts(expr):
    r"""Describe power-like expressions as powers of a base.

    @return A tuple ``(exponent, inner, arg_name, domain)`` for powers and
        the unrestricted identity (exponent one), `None` otherwise. The
        `inner` element is `None` if the base is the argument itself.
    """
    if isinstance(expr, PowerExpression):
        return expr.exponent, expr.inner, expr.arg_name, expr.input_range()
    if isinstance(expr, IdentityExpression) and expr.is_identity():
        return 1, None, expr.arg_name, ALL_VALUES
    return None


def _same_base(p, q):
    if p[1] is None and q[1] is None:
        return p[2] == q[2]
    return p[1] == q[1]


def _make_power(exponent, inner, arg_name, domain=None):
    r"""Create the simplest expression for ``base^exponent``.

    The `domain` is kept on the result, so that e.g. ``x^(1/2) * x^(1/2)``
    still rejects negative arguments.
    """
    exponent = normalize(exponent)
    restricted = domain is not None and not domain.is_unrestricted()
    if is_zero(exponent):
        return ConstantExpression(1, arg_name=arg_name)
    if is_one(exponent):
        if inner is not None:
            return inner
        return IdentityExpression(arg_name, domain=domain if restricted else None)
    return PowerExpression(exponent, inner=inner, arg_name=arg_name,
                           domain=domain if restricted else None)


def _merge_powers(factors):
    r"""Combine power-like factors of a common base by adding exponents."""
    merged = []
    for f in factors:
        parts = _power_parts(f)
        if parts is not None:
            for entry in merged:
                if entry[0] is not None and _same_base(entry[0], parts):
                    old = entry[0]
                    entry[0] = (add(old[0], parts[0]), old[1], old[2],
                                narrowest(old[3], parts[3]))
                    break
            else:
                merged.append([parts, f])
        else:
            merged.append([None, f])
    result = []
    for parts, f in merged:
        if parts is None:
            result.append(f)
            continue
        p = _make_power(*parts)
        if isinstance(p, ConstantExpression) and is_one(p.value):
            continue
        result.append(p)
    return result
