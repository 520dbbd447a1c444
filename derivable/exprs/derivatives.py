r"""@package derivable.exprs.derivatives

Symbolic differentiation of expressions.

The derivative D() of an expression is again an expression. It is obtained by
a purely structural rewrite of the expression tree, using one rule per node
kind:

| Expression        | Derivative                                   |
|-------------------|----------------------------------------------|
| `c`               | `0`                                          |
| `x`               | `1`                                          |
| `f + g`           | `f' + g'`                                    |
| `f - g`           | `f' - g'`                                    |
| `f * g`           | `f' * g + f * g'`                            |
| `f / g`           | `(f' * g - f * g') / (g * g)`                |
| `f(g(x))`         | `f'(g(x)) * g'(x)`                           |

No simplification takes place, i.e. the result will contain terms like
`0 * x` or `x + 0`. Evaluating it gives the correct values nonetheless.

The input expression is not modified, and unchanged sub-trees of it (like `g`
in the product rule) are shared with the result.
"""

import logging
import numbers

from .numexpr import NumericExpression
from .common import ExpressionKind, check_exhaustive, reduce_tree
from .basics import ConstantExpression
from .combinators import add, sub, mul, div, compose


__all__ = [
    "D",
    "derivative",
]


logger = logging.getLogger(__name__)


def D(expr):
    r"""Return the expression representing the derivative of `expr`."""
    # pylint: disable=invalid-name
    if not isinstance(expr, NumericExpression):
        raise TypeError("Can only differentiate expressions, got %s."
                        % type(expr).__name__)
    return reduce_tree(expr, dict(), _RULES)


def derivative(expr, n=1):
    r"""Return the expression of the n'th derivative of `expr`.

    For ``n == 0``, `expr` itself is returned.
    """
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise TypeError("Derivative order must be an integer, got %s."
                        % type(n).__name__)
    if n < 0:
        raise ValueError("Derivative order must be non-negative, got %s." % n)
    for order in range(1, n+1):
        expr = D(expr)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Derivative of order %d has %d nodes.",
                         order, expr.size())
    return expr


def _constant(expr):
    # pylint: disable=unused-argument
    return ConstantExpression(0)


def _identity(expr):
    # pylint: disable=unused-argument
    return ConstantExpression(1)


def _sum(expr, df, dg):
    # pylint: disable=unused-argument
    return add(df, dg)


def _difference(expr, df, dg):
    # pylint: disable=unused-argument
    return sub(df, dg)


def _product(expr, df, dg):
    f, g = expr.f, expr.g
    return add(mul(df, g), mul(f, dg))


def _division(expr, df, dg):
    f, g = expr.f, expr.g
    return div(sub(mul(df, g), mul(f, dg)), mul(g, g))


def _composition(expr, df, dg):
    return mul(compose(df, expr.inner), dg)


_RULES = check_exhaustive({
    ExpressionKind.CONSTANT: _constant,
    ExpressionKind.IDENTITY: _identity,
    ExpressionKind.SUM: _sum,
    ExpressionKind.DIFFERENCE: _difference,
    ExpressionKind.PRODUCT: _product,
    ExpressionKind.DIVISION: _division,
    ExpressionKind.COMPOSITION: _composition,
}, "differentiation")
