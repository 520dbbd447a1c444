r"""@package derivable.exprs.evaluators

Numerical evaluation of expressions.

The function evaluate() reduces an expression tree to a value at a given
point. It works for any numeric type implementing `+`, `-`, `*` and `/`, and
it returns a value of that type (following Python's rules, e.g. dividing two
`int` values gives a `float`). Arithmetic errors like `ZeroDivisionError` are
not intercepted.

The ExpressionEvaluator class provides callable *snapshots* of an expression,
which are created via numexpr.NumericExpression.evaluator(). They convert the
argument to a float or `mpmath.mpf` and give easy access to derivatives.
"""

import warnings
import numbers
import threading

import numpy as np
from mpmath import mp

from .numexpr import NumericExpression, ExpressionWarning
from .common import ExpressionKind, check_exhaustive, convert_constant
from .common import evaluate_tree
from .derivatives import D


__all__ = [
    "evaluate",
    "ExpressionEvaluator",
]


def evaluate(expr, x):
    r"""Evaluate an expression at the point `x`.

    Each distinct node of the tree is evaluated only once, i.e. shared
    sub-trees (as produced e.g. by repeated differentiation) do not lead to
    repeated computations.

    @param expr
        The expression to evaluate.
    @param x
        Point at which to evaluate. May be any numeric type or a NumPy array,
        in which case the expression is evaluated element-wise.
    """
    if not isinstance(expr, NumericExpression):
        raise TypeError("Can only evaluate expressions, got %s."
                        % type(expr).__name__)
    return evaluate_tree(expr, x, dict(), _RULES)


def _constant(expr, x):
    r"""Convert the constant to the type of `x`.

    Narrowing to another inexact type (e.g. a `Fraction` to a float) happens
    silently. A warning is issued only if the value changes on conversion to
    an integral type, e.g. `0.5` at an `int` point.
    """
    c = expr.c
    value = convert_constant(c, x)
    if isinstance(value, numbers.Integral) and c == c and value != c:
        warnings.warn(
            "Constant %r changed to %r when converted to %s."
            % (c, value, type(x).__name__),
            ExpressionWarning
        )
    return value


def _identity(expr, x):
    # pylint: disable=unused-argument
    return x


def _sum(expr, x, f, g):
    # pylint: disable=unused-argument
    return f + g


def _difference(expr, x, f, g):
    # pylint: disable=unused-argument
    return f - g


def _product(expr, x, f, g):
    # pylint: disable=unused-argument
    return f * g


def _division(expr, x, f, g):
    # pylint: disable=unused-argument
    return f / g


def _composition(expr, x, inner, outer):
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
}, "evaluation")


class ExpressionEvaluator(object):
    r"""Callable snapshot of an expression and its derivatives.

    Evaluators convert the point they are called with to a float (or to an
    `mpmath.mpf` if created with `use_mp=True`) before evaluating. NumPy
    arrays are converted element-wise.

    Derivative expressions are created when first needed and cached, so
    evaluating e.g. the second derivative at many points differentiates the
    expression only twice.

    @b Examples
    \code
        ev = (X*X*X).evaluator()
        ev(2)           # 8.0
        ev.diff(2)      # 12.0
        ev.diff(2, 3)   # 6.0
        ddf = ev.function(2)
        ddf(1)          # 6.0
    \endcode
    """
    def __init__(self, expr, use_mp=False, dps=None):
        r"""Create an evaluator for an expression.

        @param expr
            The expression object for which this evaluator is created.
        @param use_mp
            Whether to evaluate using `mpmath` arbitrary precision numbers
            (if `True`) or floats (default).
        @param dps
            Decimal places for `mpmath` computations. Defaults to the current
            global setting. Ignored for `use_mp==False`.
        """
        if not isinstance(expr, NumericExpression):
            raise TypeError("Can only create evaluators for expressions, got %s."
                            % type(expr).__name__)
        ## Boolean indicating if computation should use `mpmath` (if `True`)
        ## or floating point operations.
        self.use_mp = use_mp
        ## Decimal places used in `mpmath` computations.
        self.dps = dps
        ## Either `mpmath.mp` or `mpmath.fp`, depending on `use_mp`.
        self.ctx = expr.mpmath_context(use_mp)
        ## Convenience function that converts scalar values to floats or
        ## `mp.mpf`, depending on the `use_mp` setting.
        self.converter = mp.mpf if use_mp else float
        self._exprs = [expr]
        self._lock = threading.Lock()

    @property
    def expr(self):
        r"""The expression this evaluator was created for."""
        return self._exprs[0]

    def expression(self, n=0):
        r"""Return the (cached) expression of the n'th derivative."""
        if n < 0:
            raise ValueError("Derivative order must be non-negative, got %s." % n)
        with self._lock:
            for _ in range(len(self._exprs), n+1):
                self._exprs.append(D(self._exprs[-1]))
            return self._exprs[n]

    def convert(self, x):
        r"""Convert a point to the number type used by this evaluator."""
        if isinstance(x, np.ndarray):
            if not self.use_mp:
                return x.astype(float)
            return np.array([self.converter(v) for v in x.flat],
                            dtype=object).reshape(x.shape)
        return self.converter(x)

    def __call__(self, x):
        r"""Evaluate the expression at a point x."""
        return self.diff(x, 0)

    def diff(self, x, n=1):
        r"""Evaluate the n'th derivative of the expression at a point x."""
        expr = self.expression(n)
        with NumericExpression.context(self.use_mp, self.dps):
            return evaluate(expr, self.convert(x))

    def function(self, n=0):
        r"""Return a callable for the n'th derivative."""
        self.expression(n)
        return lambda x: self.diff(x, n)
