r"""@package symfunc

Symbolic function algebra over exact and arbitrary precision numbers.

Functions of one variable are represented as composable expression trees in
the symfunc.exprs package. These can be differentiated symbolically (with a
numerical fallback for opaque functions), simplified and expanded into Taylor
polynomials.

The numeric values flowing through the expressions are plain Python integers,
`fractions.Fraction` objects and `mpmath` reals/complex numbers. The rules
for combining and converting them are collected in symfunc.numutils.
"""
