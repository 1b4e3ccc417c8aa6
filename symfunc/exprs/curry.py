r"""@package symfunc.exprs.curry

Fixing arguments of multi-argument expressions.

Currying a function of several arguments with values for some of them
produces a function of the remaining ones. The differentiation and
simplification engines (MetaFunction subclasses) use this to reduce
multi-argument expressions to expressions of a single free variable:

~~~.py
p = Polynomial(PolyTerm(1, dict(x=2, y=1)))   # x^2 y
engine = Differentiator(curry=dict(y=3))
dp = engine(p)                                 # 6 x
~~~
"""

import logging

from ..numutils import to_sympy_number
from ..utils import merge_dicts
from .basics import ConstantExpression
from .common import ArgumentError, ArityError, DomainError
from .numexpr import (NumericExpression, UnaryExpression, SelfDifferentiable,
                      PartiallyDifferentiable)


__all__ = [
    "MetaFunction",
    "Curry",
    "CurriedExpression",
    "CurriedUnaryExpression",
    "curry",
]


logger = logging.getLogger(__name__)


def curry(func, fixed=None, **kwargs):
    r"""Fix values for some arguments of an expression.

    Args:
        func: The expression to curry.
        fixed: Dictionary mapping argument names to values. Further values
            may be given as keyword arguments.

    @return A ConstantExpression if all arguments are fixed, an expression
        of one argument if exactly one remains free, and a CurriedExpression
        otherwise. Without any fixed values, `func` itself is returned.

    @b Raises

    ArgumentError for names that are not arguments of `func`, DomainError
    for values outside the respective input range.
    """
    fixed = merge_dicts(fixed or {}, kwargs)
    if not fixed:
        return func
    unknown = [name for name in fixed if name not in func.arg_names]
    if unknown:
        raise ArgumentError("%s has no argument(s) %s."
                            % (func.nice_name, ", ".join(unknown)))
    for name, value in fixed.items():
        rng = func.input_range(name)
        if not rng.contains(value):
            raise DomainError("Value %s for argument %s outside of %s."
                              % (value, name, rng))
    remaining = [n for n in func.arg_names if n not in fixed]
    if not remaining:
        return ConstantExpression(func.apply(fixed))
    if len(remaining) == 1:
        return CurriedUnaryExpression(func, fixed)
    return CurriedExpression(func, fixed)


class CurriedExpression(NumericExpression):
    r"""Expression with some arguments of another one fixed."""

    def __init__(self, func, fixed, name='curried'):
        super(CurriedExpression, self).__init__(
            name=name, result_kind=func.result_kind, arg_kind=func.arg_kind,
            func=func,
        )
        self._fixed = dict(fixed)
        self._arg_names = tuple(n for n in func.arg_names if n not in self._fixed)

    @property
    def func(self):
        return self._sub_expr('func')

    @property
    def fixed_values(self):
        r"""Dictionary of the fixed argument values."""
        return dict(self._fixed)

    @property
    def arg_names(self):
        return self._arg_names

    def input_range(self, arg_name):
        if arg_name not in self._arg_names:
            raise ArgumentError("%s has no free argument %r." % (self.nice_name, arg_name))
        return self.func.input_range(arg_name)

    def _eval_args(self, args):
        return self.func.apply(merge_dicts(self._fixed, args))

    def _key(self):
        return (self.func, tuple(sorted(self._fixed.items())))

    def _expr_str(self):
        return "%s with %s" % (
            self.func.str(),
            ", ".join("%s=%s" % (k, v) for k, v in sorted(self._fixed.items())),
        )

    def _to_sympy(self):
        import sympy as sp
        return self.func.to_sympy().subs(
            dict((sp.Symbol(k), to_sympy_number(v)) for k, v in self._fixed.items())
        )


class CurriedUnaryExpression(UnaryExpression, SelfDifferentiable):
    r"""Expression with all arguments but one of another expression fixed.

    If the underlying expression can be differentiated partially (e.g.
    polynomials), the derivative is computed symbolically. Otherwise the
    differentiation engine falls back to finite differences.
    """

    def __init__(self, func, fixed, name='curried'):
        remaining = [n for n in func.arg_names if n not in fixed]
        if len(remaining) != 1:
            raise ArityError("Expected exactly one free argument, got %s."
                             % (", ".join(remaining) or "none"))
        super(CurriedUnaryExpression, self).__init__(
            arg_name=remaining[0], name=name, result_kind=func.result_kind,
            arg_kind=func.arg_kind, func=func,
        )
        self._fixed = dict(fixed)

    @property
    def func(self):
        return self._sub_expr('func')

    @property
    def fixed_values(self):
        return dict(self._fixed)

    def _natural_domain(self):
        return self.func.input_range(self.arg_name)

    def _eval(self, x):
        return self.func.apply(merge_dicts(self._fixed, {self.arg_name: x}))

    def _key(self):
        return (self.func, tuple(sorted(self._fixed.items())))

    def _expr_str(self):
        return "%s with %s" % (
            self.func.str(),
            ", ".join("%s=%s" % (k, v) for k, v in sorted(self._fixed.items())),
        )

    def _to_sympy(self):
        import sympy as sp
        return self.func.to_sympy().subs(
            dict((sp.Symbol(k), to_sympy_number(v)) for k, v in self._fixed.items())
        )

    def self_derivative(self, engine):
        if not isinstance(self.func, PartiallyDifferentiable):
            return engine.finite_difference(self)
        partial = self.func.partial_derivative(self.arg_name)
        fixed = dict((k, v) for k, v in self._fixed.items() if k in partial.arg_names)
        result = curry(partial, fixed)
        if result.arity == 0:
            return ConstantExpression(result.apply(None), arg_name=self.arg_name)
        if isinstance(result, ConstantExpression):
            return ConstantExpression(result.value, arg_name=self.arg_name)
        return result


class MetaFunction(object):
    r"""Base class for functions operating on expressions.

    A meta function carries a curry mapping of argument names to fixed values
    which it uses to reduce expressions of several arguments to a single free
    variable before operating on them.
    """

    def __init__(self, curry=None):
        ## Mapping of argument names to the values they are fixed to.
        self._curry = dict(curry or {})

    @property
    def curry_mappings(self):
        r"""Copy of the current curry mapping."""
        return dict(self._curry)

    def set_curry_mapping(self, arg_name, value):
        r"""Fix `arg_name` to `value`, replacing any previous value."""
        self._curry[arg_name] = value

    def add_curry_mappings(self, mappings):
        r"""Add several mappings at once.

        @b Raises

        ArgumentError if a name is already mapped to a different value. No
        mapping is added in this case.
        """
        for name, value in mappings.items():
            if name in self._curry and self._curry[name] != value:
                raise ArgumentError("Conflicting values for argument %s: %s and %s."
                                    % (name, self._curry[name], value))
        self._curry.update(mappings)

    def clear_curry_mappings(self):
        self._curry.clear()

    def retain_only(self, arg_names):
        r"""Drop all mappings except for the given argument names."""
        arg_names = set(arg_names)
        self._curry = dict((k, v) for k, v in self._curry.items() if k in arg_names)

    def curry(self, func):
        r"""Apply the mappings relevant to `func`."""
        fixed = dict((k, v) for k, v in self._curry.items() if k in func.arg_names)
        return curry(func, fixed)

    def reduce_to_unary(self, func):
        r"""Curry `func` down to a single free variable.

        Functions of at most one argument are returned unchanged.

        @b Raises

        ArityError if the curry mapping does not leave exactly one free
        argument.
        """
        if func.arity <= 1:
            return func
        remaining = [n for n in func.arg_names if n not in self._curry]
        if len(remaining) != 1:
            raise ArityError(
                "Cannot reduce %s of arguments %s to a single free variable "
                "with values for %s." % (
                    func.nice_name, ", ".join(func.arg_names),
                    ", ".join(sorted(self._curry)) or "no arguments",
                )
            )
        result = self.curry(func)
        logger.debug("Curried %s to %s.", func.nice_name, result.str())
        return result


class Curry(MetaFunction):
    r"""Plain meta function applying its curry mapping.

    @b Examples

    ```
        c = Curry(dict(y=3))
        f = c(Polynomial(PolyTerm(1, dict(x=2, y=1))))   # 3 x^2
    ```
    """

    def __call__(self, func):
        return self.curry(func)
