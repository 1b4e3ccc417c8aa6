r"""@package symfunc.numutils

Numeric value model and miscellaneous numerical utilities.

Values flowing through expressions are of one of four kinds, ordered from
narrowest to widest:

    * integers (Python `int`, including NumPy integers),
    * rationals (`fractions.Fraction`),
    * reals (`mpmath.mpf`, Python and NumPy floats are accepted as input),
    * complex values (`mpmath.mpc`, Python `complex` accepted as input).

The arithmetic functions in this module first promote both operands to the
wider of their kinds and then operate on them, so that exact computations
stay exact as long as possible. Conversions to a narrower kind are always
*checked*: a value that cannot be represented exactly in the target kind
raises a CoercionError instead of being rounded silently.


@b Examples

```
    >>> divide(1, 3)
    Fraction(1, 3)
    >>> power(Fraction(4, 9), Fraction(1, 2))
    Fraction(2, 3)
    >>> coerce(mp.mpf(2), NumericKind.INTEGER)
    2
    >>> factorial(5)
    120
```
"""

from fractions import Fraction
import enum
import numbers

from scipy import optimize
import numpy as np
import sympy as sp
from mpmath import mp


__all__ = [
    "NumericKind",
    "kind_of",
    "coerce",
    "conform",
    "normalize",
    "add",
    "subtract",
    "multiply",
    "divide",
    "negate",
    "magnitude",
    "compare",
    "power",
    "is_zero",
    "is_one",
    "factorial",
    "inf_norm1d",
    "to_sympy_number",
    "NumericalError",
    "CoercionError",
    "DivisionByZeroError",
]


class NumericalError(Exception):
    r"""Exception raised for problems with numerical evaluation.

    All errors raised by the expression system derive from this class.
    """
    pass


class CoercionError(NumericalError, ValueError):
    r"""Raised when a value cannot be represented exactly in a target kind."""
    pass


class DivisionByZeroError(NumericalError, ZeroDivisionError):
    r"""Raised when dividing by a value that is exactly zero.

    Since this derives from `ZeroDivisionError`, it is also an
    `ArithmeticError`.
    """
    pass


class NumericKind(enum.IntEnum):
    r"""Kinds of numeric values, ordered by increasing generality."""
    INTEGER = 0
    RATIONAL = 1
    REAL = 2
    COMPLEX = 3


def kind_of(value):
    r"""Return the NumericKind of a value.

    Raises a CoercionError for objects that are not numbers.
    """
    if isinstance(value, numbers.Integral):
        return NumericKind.INTEGER
    if isinstance(value, numbers.Rational):
        return NumericKind.RATIONAL
    if isinstance(value, (mp.mpf, numbers.Real)):
        return NumericKind.REAL
    if isinstance(value, (mp.mpc, numbers.Complex)):
        return NumericKind.COMPLEX
    raise CoercionError("Not a supported numeric value: %r" % (value,))


def normalize(value):
    r"""Turn rationals with unit denominator into integers."""
    if isinstance(value, Fraction) and value.denominator == 1:
        return int(value.numerator)
    return value


def coerce(value, kind):
    r"""Convert a value to the given kind, failing if this loses information.

    Widening conversions always succeed. Narrowing conversions succeed only
    if the value is exactly representable in the target kind, i.e.:

        * a complex value needs a vanishing imaginary part to become real,
        * a finite real is converted to the rational number it represents
          exactly (its binary expansion),
        * a real or rational needs to be integral to become an integer.

    @param value
        The numeric value to convert.
    @param kind
        The target NumericKind.

    @return The converted value.

    @b Raises

    CoercionError if the conversion is not exact.
    """
    kind = NumericKind(kind)
    current = kind_of(value)
    if kind == NumericKind.COMPLEX:
        if current == NumericKind.COMPLEX:
            return value if isinstance(value, mp.mpc) else mp.mpc(complex(value))
        return mp.mpc(_to_real(value, current))
    if current == NumericKind.COMPLEX:
        if value.imag != 0:
            raise CoercionError("Cannot represent %s as %s." % (value, kind.name))
        real = value.real
        return coerce(real, kind)
    if kind == NumericKind.REAL:
        return _to_real(value, current)
    if kind == NumericKind.RATIONAL:
        if current == NumericKind.INTEGER:
            return Fraction(int(value))
        if current == NumericKind.RATIONAL:
            return Fraction(value.numerator, value.denominator)
        return _real_to_rational(_to_real(value, current))
    if current == NumericKind.INTEGER:
        return int(value)
    if current == NumericKind.RATIONAL:
        if value.denominator != 1:
            raise CoercionError("Cannot represent %s as INTEGER." % (value,))
        return int(value.numerator)
    real = _to_real(value, current)
    if not mp.isint(real):
        raise CoercionError("Cannot represent %s as INTEGER." % (real,))
    return int(real)


def _to_real(value, current):
    r"""Widen a non-complex value to an `mpmath` real."""
    if current == NumericKind.INTEGER:
        return mp.mpf(int(value))
    if current == NumericKind.RATIONAL:
        return mp.mpf(int(value.numerator)) / int(value.denominator)
    if isinstance(value, mp.mpf):
        return value
    return mp.mpf(float(value))


def _real_to_rational(real):
    r"""Convert a finite `mpf` to the exact rational it represents."""
    if mp.isinf(real) or mp.isnan(real):
        raise CoercionError("Cannot represent %s as RATIONAL." % (real,))
    sign, man, exp, _ = real._mpf_
    result = Fraction(int(man)) * Fraction(2) ** int(exp)
    return -result if sign else result


def conform(value, kind):
    r"""Narrow a value to `kind` if it is wider, otherwise leave it untouched.

    This is used to enforce declared result kinds of expressions without
    losing exactness of narrower results (e.g. an integer result of a real
    valued expression stays an integer).
    """
    if kind_of(value) > kind:
        return coerce(value, kind)
    return value


def _promote(a, b):
    r"""Convert two values to their common (wider) kind."""
    kind = max(kind_of(a), kind_of(b))
    return coerce(a, kind), coerce(b, kind), kind


def is_zero(value):
    r"""Return whether a value is exactly zero."""
    return value == 0


def is_one(value):
    r"""Return whether a value is exactly one."""
    return value == 1


def add(a, b):
    r"""Add two values of possibly different kinds."""
    a, b, _ = _promote(a, b)
    return normalize(a + b)


def subtract(a, b):
    r"""Subtract `b` from `a`."""
    a, b, _ = _promote(a, b)
    return normalize(a - b)


def multiply(a, b):
    r"""Multiply two values of possibly different kinds."""
    a, b, _ = _promote(a, b)
    return normalize(a * b)


def divide(a, b):
    r"""Divide `a` by `b`.

    Dividing two integers results in an exact rational (or an integer in case
    the division has no remainder).

    @b Raises

    DivisionByZeroError if `b` is exactly zero.
    """
    if is_zero(b):
        raise DivisionByZeroError("Division of %s by zero." % (a,))
    a, b, kind = _promote(a, b)
    if kind == NumericKind.INTEGER:
        return normalize(Fraction(a, b))
    return normalize(a / b)


def negate(a):
    r"""Return the additive inverse of a value."""
    kind_of(a)
    return -a


def magnitude(a):
    r"""Return the absolute value (modulus for complex values)."""
    kind_of(a)
    return abs(a)


def compare(a, b):
    r"""Compare two real-representable values.

    @return `-1`, `0` or `1` if `a` is smaller, equal or larger than `b`,
        respectively.

    @b Raises

    CoercionError if either value has a nonzero imaginary part.
    """
    kind = max(kind_of(a), kind_of(b))
    if kind == NumericKind.COMPLEX:
        kind = NumericKind.REAL
    a = coerce(a, kind)
    b = coerce(b, kind)
    return int(a > b) - int(a < b)


def power(base, exponent):
    r"""Raise a value to an integer, rational or real power.

    Integer powers of exact values stay exact. Rational powers of exact values
    are exact whenever the corresponding root exists in the rationals, e.g.
    ``power(Fraction(8, 27), Fraction(2, 3)) == Fraction(4, 9)``. For negative
    bases and rational exponents with odd denominator, the real root is
    returned (i.e. ``power(-8, Fraction(1, 3)) == -2``), while even
    denominators lead to the principal complex value.

    @b Raises

    DivisionByZeroError if zero is raised to a negative power.
    """
    exponent = normalize(exponent)
    exp_kind = kind_of(exponent)
    if exp_kind == NumericKind.INTEGER:
        return _int_power(base, int(exponent))
    if exp_kind == NumericKind.RATIONAL:
        return _rational_power(base, coerce(exponent, NumericKind.RATIONAL))
    if is_zero(base) and compare(exponent, 0) < 0:
        raise DivisionByZeroError("Zero raised to negative power %s." % (exponent,))
    base = coerce(base, max(kind_of(base), NumericKind.REAL))
    exponent = coerce(exponent, exp_kind)
    return mp.power(base, exponent)


def _int_power(base, n):
    if n < 0:
        if is_zero(base):
            raise DivisionByZeroError("Zero raised to negative power %s." % n)
        return divide(1, _int_power(base, -n))
    kind = kind_of(base)
    if kind == NumericKind.INTEGER:
        return int(base) ** n
    if kind == NumericKind.RATIONAL:
        return normalize(coerce(base, kind) ** n)
    return coerce(base, kind) ** n


def _rational_power(base, q):
    if is_zero(base):
        if q < 0:
            raise DivisionByZeroError("Zero raised to negative power %s." % q)
        return 0
    kind = kind_of(base)
    real_q = coerce(q, NumericKind.REAL)
    if kind == NumericKind.COMPLEX:
        return mp.power(coerce(base, kind), real_q)
    negative = compare(base, 0) < 0
    if negative and q.denominator % 2 == 0:
        return mp.power(coerce(base, NumericKind.COMPLEX), real_q)
    sign = -1 if negative and q.numerator % 2 else 1
    abs_base = magnitude(base)
    if kind <= NumericKind.RATIONAL:
        root = _exact_root(coerce(abs_base, NumericKind.RATIONAL), q.denominator)
        if root is not None:
            return multiply(sign, _int_power(root, q.numerator))
    result = mp.power(coerce(abs_base, NumericKind.REAL), real_q)
    return -result if sign < 0 else result


def _exact_root(r, n):
    r"""Return the exact n'th root of a nonnegative rational or `None`."""
    num, num_exact = sp.integer_nthroot(int(r.numerator), n)
    den, den_exact = sp.integer_nthroot(int(r.denominator), n)
    if num_exact and den_exact:
        return normalize(Fraction(int(num), int(den)))
    return None


def factorial(n):
    r"""Compute n! as an exact integer."""
    return int(sp.factorial(n))



def to_sympy_number(value):
    r"""Convert a value of any supported kind to a SymPy number."""
    kind = kind_of(value)
    if kind == NumericKind.INTEGER:
        return sp.Integer(int(value))
    if kind == NumericKind.RATIONAL:
        return sp.Rational(int(value.numerator), int(value.denominator))
    if kind == NumericKind.REAL:
        return sp.Float(coerce(value, kind))
    value = coerce(value, kind)
    return sp.Float(value.real) + sp.I * sp.Float(value.imag)


def inf_norm1d(f1, f2=None, domain=None, Ns=50, xatol=1e-12):
    r"""Compute the L^inf norm of f1-f2.

    The `scipy.optimize.brute` method is used to find a candidate close to the
    global maximum difference. This is then taken as starting point for a
    search for the local maximum difference. Setting the number of samples
    `Ns` high enough should lead to the global maximum difference being found.

    @param f1
        First function. May also be an expression.
    @param f2
        Second function. May also be an expression. If not given, simply
        finds the maximum absolute value of `f1`.
    @param domain
        Domain ``[a, b]`` inside which to search for the maximum difference.
        May be a pair or an interval object with finite bounds. By default,
        `f1` is queried for the domain.
    @param Ns
        Number of initial samples for the `scipy.optimize.brute` call. In case
        ``Ns <= 2``, the `brute()` step is skipped an a local extremum is
        found inside the given `domain`. Default is `50`.

    @return A pair ``(x, delta)``, where `x` is the point at which the maximum
        difference was found and `delta` is the difference at that point.
    """
    if domain is None:
        domain = f1.domain
    if hasattr(domain, 'lower'):
        domain = (domain.lower, domain.upper)
    a, b = float(domain[0]), float(domain[1])
    if not (np.isfinite(a) and np.isfinite(b)):
        raise ValueError("A finite domain is required, got %s." % (domain,))
    if f2 is None:
        f2 = lambda x: 0.0
    def func(x):
        x = float(np.squeeze(x))
        if not a <= x <= b:
            return 0.
        return -float(magnitude(subtract(f1(x), f2(x))))
    if Ns <= 2:
        bounds = [a, b]
    else:
        x0 = float(np.squeeze(optimize.brute(func, [(a, b)], Ns=Ns, finish=None)))
        step = (b-a)/(Ns-1)
        bounds = [x0-step, x0+step]
    res = optimize.minimize_scalar(
        func, bounds=bounds, method='bounded',
        options=dict(xatol=xatol),
    )
    return res.x, -res.fun
