r"""@package symfunc.exprs.common

Exceptions and small helpers used by multiple modules in symfunc.exprs.

All exceptions derive from numutils.NumericalError and additionally from the
most closely matching builtin exception, so that callers may catch either.
"""

from ..numutils import NumericalError, CoercionError, DivisionByZeroError


__all__ = [
    "ExpressionError",
    "DomainError",
    "ArityError",
    "TypeMismatchError",
    "UnsupportedOperationError",
    "ArgumentError",
    "CoercionError",
    "DivisionByZeroError",
]


class ExpressionError(NumericalError):
    r"""Base class for errors raised by expressions."""
    pass


class DomainError(ExpressionError, ValueError):
    r"""Raised when evaluating an expression outside its valid interval."""
    pass


class ArityError(ExpressionError, TypeError):
    r"""Raised for arguments not matching the variables of an expression.

    This is also raised by the differentiation and simplification engines if
    currying cannot reduce a function to exactly one free variable.
    """
    pass


class TypeMismatchError(ExpressionError, TypeError):
    r"""Raised when composing expressions with incompatible value kinds."""
    pass


class UnsupportedOperationError(ExpressionError, NotImplementedError):
    r"""Raised when no rule exists for a requested operation."""
    pass


class ArgumentError(ExpressionError, ValueError):
    r"""Raised for invalid arguments to expression methods."""
    pass


def _zero_function(x):
    """Constant function 0.

    Returned by evaluators for derivatives known to vanish identically.
    """
    # pylint: disable=unused-argument
    return 0


def is_zero_function(func):
    r"""Check whether a given function is the zero function.

    This checks the identity of the given function with a particular zero
    function returned by evaluators which know a derivative vanishes.
    """
    return func is _zero_function
