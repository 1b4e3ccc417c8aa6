r"""@package symfunc.exprs

Expression system for composing functions and computing their derivatives.

The idea is to have each expression represent either a function (like
\f$ \sin(x) \f$ or a polynomial \f$ \sum_n a_n x^n \f$) or a composite
expression of one or more functions (like \f$ f_1(x) + f_2(x) \f$ or
\f$ f_1(f_2(x)) \f$, where \f$ f_i \f$ are other numeric expressions).

Expressions are immutable and structurally comparable. Composition keeps
track of the parts an expression was built from, which the differentiation
engine (derivative.Differentiator) uses to apply the chain rule. Functions
without a known symbolic derivative are differentiated using central finite
differences.

Expressions can be evaluated directly by calling them, which keeps results
exact where possible (integers and fractions). For repeated evaluation of an
expression and its derivatives, use an *evaluator* (see
numexpr.NumericExpression.evaluator()), which can either produce floats or
`mpmath` numbers of configurable precision.
"""

from .basics import (ConstantExpression, IdentityExpression, SimpleExpression,
                     SumExpression, ProductExpression, QuotientExpression,
                     PowerExpression, NegateExpression, const, identity,
                     sum_of, product_of, quotient_of, power_of, negation_of)
from .analytic import SinExpression, CosExpression, ExpExpression, LogExpression
from .curry import MetaFunction, Curry, curry
from .derivative import Differentiator, differentiate
from .simplify import Simplifier, simplify
from .poly import ConstantTerm, PolyTerm, RationalExponentPolyTerm, Polynomial
from .taylor import TaylorPolynomial
