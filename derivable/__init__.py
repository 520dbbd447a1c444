r"""@package derivable

Symbolic differentiation of real functions of one variable.

Functions are represented as expression trees built from constants and the
identity function using sums, differences, products, divisions and
compositions. The expression system lives in the derivable.exprs package,
where derivable.exprs.derivatives.D() turns any expression into the
expression of its exact derivative.
"""
