r"""@package symfunc.exprs.numexpr

Base of the expression system.

The idea is to have a notion of a numeric expression which is 'self aware'
and can e.g. produce symbolic derivatives of itself. Furthermore, we want to
be able to build composite expressions out of other, more basic expressions
and keep track of how an expression was composed, such that the chain rule
and simplifications can "see through" composition.

Every expression has one or more named arguments, a valid input range
(interval.Interval) per argument, the kind of values it accepts and the kind
of values it produces (numutils.NumericKind). Expressions are immutable:
all operations (composition, differentiation, simplification, arithmetic)
return new expressions.

Single argument expressions (UnaryExpression subclasses) additionally carry
up to three composition links:

    * `original`: the base expression a composed view was created from,
    * `composed`: the inner function the base is applied to,
    * `composing`: an outer function applied to the result of the base.

A composed expression `f.compose_with(g)` evaluates `f(g(x))` and has
`original=f` and `composed=g`, while `f.and_then(h)` evaluates `h(f(x))`
with `original=f` and `composing=h`. The links always point from a view to
its parts and never back, so expression trees never contain cycles.

As a simple example, let's compose a sine with a square and differentiate
the result:

~~~.py
x = IdentityExpression()
expr = SinExpression().compose_with(x**2)
dexpr = expr.diff()      # 2 x cos(x^2)
print("f'(.5) =", dexpr(.5))
~~~
"""

from abc import ABCMeta, abstractmethod
from contextlib import contextmanager

from mpmath import mp

from ..numutils import NumericKind, conform
from ..utils import merge_dicts
from .common import (ArityError, DomainError, TypeMismatchError,
                     UnsupportedOperationError, ArgumentError)
from .interval import ALL_VALUES, Interval, narrowest


__all__ = [
    "NumericExpression",
    "UnaryExpression",
    "ComposedExpression",
    "SelfDifferentiable",
    "PartiallyDifferentiable",
    "ensure_expr",
    "compose",
    "chain",
    "check_composable",
]


def ensure_expr(expr):
    """Ensure an object is an expression, converting it if necessary.

    If `expr` is not an expression object, it is converted to a
    `ConstantExpression`.
    """
    if isinstance(expr, NumericExpression):
        return expr
    from .basics import ConstantExpression
    return ConstantExpression(expr)


def _to_interval(domain):
    r"""Convert `None`, pairs ``(a, b)`` or intervals to an Interval."""
    if domain is None:
        return ALL_VALUES
    if isinstance(domain, Interval):
        return domain
    a, b = domain
    return Interval(a, b)


def check_composable(outer, inner):
    r"""Raise if `outer` cannot be applied to the results of `inner`.

    @b Raises

    ArityError if `inner` is not a function of exactly one variable or
    `outer` takes more than one argument, TypeMismatchError if `inner`
    produces values wider than `outer` accepts.
    """
    if inner.arity != 1 or outer.arity > 1:
        raise ArityError(
            "Only single argument functions can be composed (got %s and %s)."
            % (outer.nice_name, inner.nice_name)
        )
    if inner.result_kind > outer.arg_kind:
        raise TypeMismatchError(
            "Cannot feed %s values of %s into %s accepting %s values."
            % (inner.result_kind.name, inner.nice_name, outer.nice_name,
               outer.arg_kind.name)
        )


def compose(outer, inner):
    r"""Return `outer` composed with `inner`, i.e. ``outer(inner(x))``.

    Contrary to UnaryExpression.compose_with(), this works for any single
    argument expression (e.g. polynomials) as `outer`.
    """
    if isinstance(outer, UnaryExpression):
        return outer.compose_with(inner)
    inner = ensure_expr(inner)
    check_composable(outer, inner)
    return ComposedExpression(outer, composed=inner)


def chain(first, then):
    r"""Return the expression ``then(first(x))``."""
    if isinstance(first, UnaryExpression):
        return first.and_then(then)
    then = ensure_expr(then)
    check_composable(then, first)
    return ComposedExpression(first, composing=then)


class SelfDifferentiable(metaclass=ABCMeta):
    r"""Capability of expressions that know their own derivative.

    The differentiation engine (derivative.Differentiator) checks for this
    capability after trying the generic rules for composed expressions, sums,
    quotients and products. Expressions not implementing it are
    differentiated numerically.
    """

    @abstractmethod
    def self_derivative(self, engine):
        r"""Return the derivative of this expression as a new expression.

        @param engine
            The derivative.Differentiator asking for the derivative. It may
            be used to differentiate sub-expressions.
        """
        pass


class PartiallyDifferentiable(metaclass=ABCMeta):
    r"""Capability of multi-argument expressions to differentiate in one argument."""

    @abstractmethod
    def partial_derivative(self, arg_name):
        r"""Return the partial derivative with respect to `arg_name`."""
        pass


class NumericExpression(metaclass=ABCMeta):
    """Parent class for numeric expressions.

    The methods a child has to override are:
        * `arg_names` returning the names of the expected arguments
        * input_range() returning the valid interval for an argument
        * _eval_args() computing the value for a dictionary of arguments
        * _expr_str() returning a representation of the expression

    Children representing values (as opposed to e.g. mutable builders) should
    also override _key() to enable structural comparison.
    """
    # pylint: disable=too-many-public-methods

    def __init__(self, name=None, result_kind=NumericKind.REAL,
                 arg_kind=NumericKind.REAL, **sub_exprs):
        r"""Base class init for numeric expressions.

        The ``**sub_exprs`` sub expressions given as keyword arguments here
        are stored in this object and can be accessed with the keys used here.
        They are used when traversing through a complete expression hierarchy
        in e.g. print_tree() or traverse_tree(). Values of `None` are ignored.

        Args:
            name: (string, optional)
                Name for the expression. Can be useful to label expressions in
                a more complex expression tree to indicate their role/meaning.
                By default, the current class name is used as name.
            result_kind: (numutils.NumericKind, optional)
                Widest kind of values this expression produces. Results are
                checked against it. Default is `REAL`.
            arg_kind: (numutils.NumericKind, optional)
                Widest kind of values accepted as arguments. Default is
                `REAL`.
        """
        self.__name = name if name else self.__class__.__name__
        self._result_kind = NumericKind(result_kind)
        self._arg_kind = NumericKind(arg_kind)
        self.__sub_expressions = dict()
        for key, expr in sub_exprs.items():
            if expr is not None:
                self.__sub_expressions[key] = ensure_expr(expr)

    @property
    def name(self):
        r"""Name given to this instance of the expression."""
        return self.__name
    @name.setter
    def name(self, name):
        self.__name = name

    @property
    def nice_name(self):
        r"""More descriptive name, which may be overridden by sub classes."""
        return self.__name

    @property
    def result_kind(self):
        r"""Widest kind of values produced by this expression."""
        return self._result_kind

    @property
    def arg_kind(self):
        r"""Widest kind of values accepted as arguments."""
        return self._arg_kind

    @property
    @abstractmethod
    def arg_names(self):
        r"""Tuple of the names of all arguments of this expression."""
        pass

    @property
    def arity(self):
        r"""Number of arguments this expression expects."""
        return len(self.arg_names)

    @abstractmethod
    def input_range(self, arg_name):
        r"""Narrowest known interval of valid values for an argument."""
        pass

    @property
    def domain(self):
        r"""Valid input range.

        This is an interval.Interval for expressions of one variable and a
        dictionary mapping argument names to intervals otherwise.
        """
        names = self.arg_names
        if not names:
            return ALL_VALUES
        if len(names) == 1:
            return self.input_range(names[0])
        return dict((n, self.input_range(n)) for n in names)

    def is_identity(self):
        r"""Whether this expression returns its (unrestricted) argument."""
        return False

    def is_zero_expression(self):
        r"""Return whether this expression is zero and constant.

        Child classes should override this if they can determine whether
        they're zero. By default, all expressions will deny being zero.
        """
        return False

    def apply(self, arguments=None, **kwargs):
        r"""Evaluate the expression.

        Args:
            arguments:
                A single value (for expressions of one argument), a sequence
                of values for all arguments in the order of `arg_names`, or a
                dictionary mapping argument names to values. Additional
                values may be given as keyword arguments.

        @b Raises

        ArityError for missing arguments, DomainError for arguments outside
        of input_range(), numutils.CoercionError if an argument or the
        result cannot be represented in the declared kinds.
        """
        args = self._normalize_arguments(arguments, kwargs)
        for name in self.arg_names:
            args[name] = self._check_argument(name, args[name])
        return conform(self._eval_args(args), self._result_kind)

    def __call__(self, *args, **kwargs):
        r"""Shortcut for apply() accepting the arguments positionally."""
        if len(args) > 1:
            return self.apply(args, **kwargs)
        return self.apply(args[0] if args else None, **kwargs)

    def _normalize_arguments(self, arguments, kwargs):
        names = self.arg_names
        if not names:
            return {}
        if isinstance(arguments, dict):
            values = merge_dicts(arguments, kwargs)
        elif arguments is None:
            values = dict(kwargs)
        elif isinstance(arguments, (list, tuple)):
            if len(arguments) != len(names):
                raise ArityError("Expected %d arguments, got %d."
                                 % (len(names), len(arguments)))
            values = merge_dicts(dict(zip(names, arguments)), kwargs)
        elif len(names) == 1:
            values = merge_dicts(kwargs, {names[0]: arguments})
        else:
            raise ArityError("Expression of arguments %s called with a single value."
                             % (", ".join(names),))
        missing = [n for n in names if n not in values]
        if missing:
            raise ArityError("Missing value for argument(s): %s" % ", ".join(missing))
        return dict((n, values[n]) for n in names)

    def _check_argument(self, name, value):
        value = conform(value, self._arg_kind)
        rng = self.input_range(name)
        if not rng.contains(value):
            raise DomainError("Argument %s=%s outside of valid range %s of %s."
                              % (name, value, rng, self.nice_name))
        return value

    @abstractmethod
    def _eval_args(self, args):
        r"""Compute the value for a complete and checked argument dictionary."""
        pass

    def _sub_expr(self, key):
        r"""Return the sub expression stored under `key` or `None`."""
        return self.__sub_expressions.get(key)

    def traverse_tree(self, include_root=False, skip_zeros=False, parents=None):
        r"""Generator that walks through a complete expression tree.

        In each iteration, the returned values represent the current node's
        parents (as a list from root to immediate parent), its key under which
        it is stored in its parent, and the node itself.

        Args:
            include_root: Whether to include the root as first item. Default
                is `False`.
            skip_zeros: Whether to skip zero (i.e. unused) sub expressions.
                Default is `False`.
            parents: Optional list of parents of the root. Normally only used
                internally for the recursion.

        @b Examples
        \code
            for parents, name, expr in root_expr.traverse_tree():
                print("-"*len(parents), name)
        \endcode

        """
        if parents is None:
            parents = []
        if include_root:
            yield parents, "", self
        parents = parents + [self]
        for name, expr in self.__sub_expressions.items():
            if not (skip_zeros and expr.is_zero_expression()):
                yield parents, name, expr
            for node in expr.traverse_tree(include_root=False,
                                           skip_zeros=skip_zeros,
                                           parents=parents):
                yield node

    def print_tree(self, root_name='root', nice_names=True, skip_zeros=False):
        r"""Print the whole expression tree.

        Each expression's key under which it is stored as sub expression will
        be shown as well as its actual name and the class name.

        Args:
            root_name: Key name to print for the root expression.
            nice_names: Whether to use the nice more descriptive name (when
                implemented) or the usually shorter abstract names.
            skip_zeros: Whether to skip zero (i.e. unused) sub expressions.
        """
        def _p(expr, name, parents=()):
            n = expr.nice_name if nice_names else expr.name
            print("%s%s [%s] <%s>" % (
                ". " * len(parents), name, n, type(expr).__name__
            ))
        _p(self, root_name)
        for parents, name, expr in self.traverse_tree(skip_zeros=skip_zeros):
            _p(expr, name, parents)

    def _key(self):
        r"""Data identifying this expression structurally.

        Two expressions of the same type and with equal argument names are
        considered equal if their keys are equal. By default, expressions are
        only equal to themselves.
        """
        return (id(self),)

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, NumericExpression):
            return NotImplemented
        return (type(self) is type(other)
                and self.arg_names == other.arg_names
                and self._key() == other._key())

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash((type(self).__name__, self.arg_names, self._key()))

    def __repr__(self):
        r"""Return a string representing the whole expression tree."""
        cls = self.__class__.__name__
        return "<%s%s>" % (cls, self.str())

    def str(self):
        """Return the expression and any values of local parameters as a string."""
        return "(%s)" % self._expr_str()

    @abstractmethod
    def _expr_str(self):
        """String representing the expression with any parameter values.

        If the expression contains sub-expressions, be sure to use their `str`
        method and not the `_expr_str`.
        """
        pass

    def evaluator(self, use_mp=False, dps=None):
        r"""Create an evaluator for the expression.

        Args:
            use_mp: Whether results should be `mpmath` numbers (if `True`) or
                floats. Default is `False`.
            dps: Decimal places used in `mpmath` mode. By default,
                settings.Settings.dps is used.
        """
        from .evaluators import Evaluator
        return Evaluator(self, use_mp=use_mp, dps=dps)

    def diff(self, n=1, **kwargs):
        r"""Return the n'th derivative expression.

        Keyword arguments are passed to derivative.differentiate().
        """
        from .derivative import differentiate
        return differentiate(self, n=n, **kwargs)

    def simplify(self):
        r"""Apply simplification rules local to this kind of expression.

        The default is to return the expression unchanged. Use simplified()
        to simplify a complete expression tree.
        """
        return self

    def simplified(self, **kwargs):
        r"""Return the simplification of the complete expression tree."""
        from .simplify import simplify
        return simplify(self, **kwargs)

    def to_sympy(self):
        r"""Convert the expression to a SymPy expression.

        Arguments become SymPy symbols of the same name.

        @b Raises

        UnsupportedOperationError for expressions without symbolic
        representation (e.g. wrapped Python callables).
        """
        return self._to_sympy()

    def _to_sympy(self):
        raise UnsupportedOperationError(
            "%s has no symbolic representation." % self.nice_name
        )

    @classmethod
    @contextmanager
    def context(cls, use_mp, dps):
        r"""Convenience function to be used as context manager.

        This will configure the desired decimal places of `mpmath`
        computations in case `use_mp` is `True` and `dps` is given.

        Args:
            use_mp: Whether to use `mp` (if `True`) or `fp`.
            dps:    Decimal places to use in `mp` computations.
        """
        if not use_mp or dps is None:
            dps = mp.dps
        with mp.workdps(dps):
            yield mp


class UnaryExpression(NumericExpression):
    r"""Parent class of expressions of exactly one argument.

    These can be composed with other single argument expressions and support
    the usual arithmetic operators, e.g.

    ~~~.py
    x = IdentityExpression()
    expr = 3 * x**2 - x / (x + 1)
    ~~~

    Child classes need to implement _eval() and _expr_str(). They may
    override _natural_domain() to restrict the valid input range and
    _compose_with() and _and_then() to implement algebraic identities of
    composition.
    """

    def __init__(self, arg_name='x', domain=None, original=None,
                 composed=None, composing=None, **kw):
        r"""Base class init for single argument expressions.

        Args:
            arg_name: Name of the argument. Default is ``'x'``.
            domain: Declared valid interval (or pair ``(a, b)``). Combined
                with the natural domain of the expression.
            original: Base expression of a composed view.
            composed: Inner function of a composed view.
            composing: Outer function of a composed view.
            **kw: Further arguments for NumericExpression.__init__().
        """
        super(UnaryExpression, self).__init__(
            original=original, composed=composed, composing=composing, **kw
        )
        self._arg_name = arg_name
        self._declared_domain = _to_interval(domain)

    @property
    def arg_name(self):
        r"""Name of the single argument."""
        return self._arg_name

    @property
    def arg_names(self):
        return (self._arg_name,)

    @property
    def original(self):
        r"""The base expression of a composed view (or `None`)."""
        return self._sub_expr('original')

    @property
    def composed(self):
        r"""The inner function of a composed view (or `None`)."""
        return self._sub_expr('composed')

    @property
    def composing(self):
        r"""The outer function of a composed view (or `None`)."""
        return self._sub_expr('composing')

    def input_range(self, arg_name=None):
        if arg_name is not None and arg_name != self._arg_name:
            raise ArgumentError("%s has no argument %r." % (self.nice_name, arg_name))
        return narrowest(self._declared_domain, self._natural_domain())

    def _natural_domain(self):
        r"""Valid interval implied by the kind of expression itself."""
        return ALL_VALUES

    def _eval_args(self, args):
        return self._eval(args[self._arg_name])

    @abstractmethod
    def _eval(self, x):
        r"""Compute the value for a checked argument `x`."""
        pass

    def compose_with(self, inner):
        r"""Return this expression composed with `inner`, i.e. ``self(inner(x))``.

        The result takes the argument of `inner`.

        @b Raises

        TypeMismatchError if the values produced by `inner` are of a wider
        kind than accepted by this expression.
        """
        inner = ensure_expr(inner)
        check_composable(self, inner)
        if inner.is_identity() and inner.arg_names == self.arg_names:
            return self
        return self._compose_with(inner)

    def and_then(self, outer):
        r"""Return `outer` applied to the results of this expression."""
        outer = ensure_expr(outer)
        check_composable(outer, self)
        if outer.is_identity():
            return self
        return self._and_then(outer)

    def _compose_with(self, inner):
        return ComposedExpression(self, composed=inner)

    def _and_then(self, outer):
        return ComposedExpression(self, composing=outer)

    def __add__(self, other):
        from .basics import sum_of
        return sum_of(self, other)

    def __radd__(self, other):
        from .basics import sum_of
        return sum_of(other, self)

    def __sub__(self, other):
        from .basics import sum_of, negation_of
        return sum_of(self, negation_of(other))

    def __rsub__(self, other):
        from .basics import sum_of, negation_of
        return sum_of(other, negation_of(self))

    def __mul__(self, other):
        from .basics import product_of
        return product_of(self, other)

    def __rmul__(self, other):
        from .basics import product_of
        return product_of(other, self)

    def __truediv__(self, other):
        from .basics import quotient_of
        return quotient_of(self, other)

    def __rtruediv__(self, other):
        from .basics import quotient_of
        return quotient_of(other, self)

    def __neg__(self):
        from .basics import negation_of
        return negation_of(self)

    def __pow__(self, exponent):
        from .basics import power_of
        return power_of(self, exponent)


class ComposedExpression(UnaryExpression):
    r"""Generic composed view ``composing(original(composed(x)))``.

    Either of `composed` and `composing` may be missing (but not both). This
    view is what UnaryExpression.compose_with() and
    UnaryExpression.and_then() produce when no algebraic identity applies.
    """

    def __init__(self, original, composed=None, composing=None, name='composition'):
        if composed is None and composing is None:
            raise ArgumentError("Composition needs an inner or outer function.")
        original = ensure_expr(original)
        first = ensure_expr(composed) if composed is not None else original
        last = ensure_expr(composing) if composing is not None else original
        super(ComposedExpression, self).__init__(
            arg_name=first.arg_names[0],
            original=original, composed=composed, composing=composing,
            result_kind=last.result_kind, arg_kind=first.arg_kind,
            name=name,
        )

    def _natural_domain(self):
        first = self.composed if self.composed is not None else self.original
        return first.domain

    def _eval(self, x):
        value = x
        if self.composed is not None:
            value = self.composed.apply(value)
        value = self.original.apply(value)
        if self.composing is not None:
            value = self.composing.apply(value)
        return value

    def _compose_with(self, inner):
        if self.composed is not None:
            return ComposedExpression(self.original,
                                      composed=compose(self.composed, inner),
                                      composing=self.composing)
        return ComposedExpression(self.original, composed=inner,
                                  composing=self.composing)

    def _and_then(self, outer):
        if self.composing is not None:
            return ComposedExpression(self.original, composed=self.composed,
                                      composing=chain(self.composing, outer))
        return ComposedExpression(self.original, composed=self.composed,
                                  composing=outer)

    def _key(self):
        return (self.original, self.composed, self.composing)

    def _expr_str(self):
        parts = [self.composing, self.original, self.composed]
        return " o ".join(p.str() for p in parts if p is not None)

    def _to_sympy(self):
        import sympy as sp
        expr = self.original.to_sympy()
        if self.composed is not None:
            sym = sp.Symbol(self.original.arg_names[0])
            expr = expr.subs(sym, self.composed.to_sympy())
        if self.composing is not None:
            sym = sp.Symbol(self.composing.arg_names[0])
            expr = self.composing.to_sympy().subs(sym, expr)
        return expr
