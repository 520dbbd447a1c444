r"""@package derivable.exprs.symbolic

Conversion of expressions to SymPy.

This is useful for displaying expressions in a readable (and simplified) form
and to compare results of derivatives.D() against `sympy.diff()`.

@b Examples
\code
    from derivable.exprs import X, D, to_sympy
    f = (X*X + X - 5) / (X - X*X)
    print(sympy.simplify(to_sympy(D(f))))
\endcode
"""

import sympy as sp

from .numexpr import NumericExpression
from .common import ExpressionKind, check_exhaustive, evaluate_tree


__all__ = [
    "to_sympy",
]


def to_sympy(expr, symbol=None):
    r"""Convert an expression to a SymPy expression.

    @param expr
        The expression to convert.
    @param symbol
        SymPy symbol (or any SymPy expression) to use for the variable.
        Default is a new symbol `x`.
    """
    if not isinstance(expr, NumericExpression):
        raise TypeError("Can only convert expressions, got %s."
                        % type(expr).__name__)
    if symbol is None:
        symbol = sp.Symbol('x')
    return evaluate_tree(expr, sp.sympify(symbol), dict(), _RULES)


def _constant(expr, arg):
    # pylint: disable=unused-argument
    return sp.sympify(expr.c)


def _identity(expr, arg):
    # pylint: disable=unused-argument
    return arg


def _sum(expr, arg, f, g):
    # pylint: disable=unused-argument
    return f + g


def _difference(expr, arg, f, g):
    # pylint: disable=unused-argument
    return f - g


def _product(expr, arg, f, g):
    # pylint: disable=unused-argument
    return f * g


def _division(expr, arg, f, g):
    # pylint: disable=unused-argument
    return f / g


def _composition(expr, arg, inner, outer):
    # pylint: disable=unused-argument
    return outer


_RULES = check_exhaustive({
    ExpressionKind.CONSTANT: _constant,
    ExpressionKind.IDENTITY: _identity,
    ExpressionKind.SUM: _sum,
    ExpressionKind.DIFFERENCE: _difference,
    ExpressionKind.PRODUCT: _product,
    ExpressionKind.DIVISION: _division,
    ExpressionKind.COMPOSITION: _composition,
}, "conversion to SymPy")
