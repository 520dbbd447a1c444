r"""@package derivable.exprs.combinators

Functions building composite expressions out of expressions and scalars.

These are the only places where scalars are implicitly converted: if one
operand is an expression and the other one is a scalar number, the scalar is
wrapped in a basics.ConstantExpression. If neither operand is an expression,
a `TypeError` is raised.

The arithmetic operators of numexpr.NumericExpression objects are implemented
using these functions. For example, the following two lines are equivalent:

~~~.py
f = add(mul(X, X), 1)
f = X*X + 1
~~~
"""

from .numexpr import NumericExpression
from .common import is_scalar
from .basics import ConstantExpression, SumExpression, DifferenceExpression
from .basics import ProductExpression, DivisionExpression, CompositionExpression


__all__ = [
    "is_expression",
    "as_expression",
    "add",
    "sub",
    "mul",
    "div",
    "compose",
]


def is_expression(obj):
    r"""Return whether `obj` is an expression object."""
    return isinstance(obj, NumericExpression)


def as_expression(obj):
    r"""Return `obj` if it is an expression or wrap it as a constant.

    Raises a `TypeError` if `obj` is neither an expression nor a scalar.
    """
    if is_expression(obj):
        return obj
    if is_scalar(obj):
        return ConstantExpression(obj)
    raise TypeError("Cannot use object of type %s as expression."
                    % type(obj).__name__)


def _combine(cls, f, g):
    r"""Create a `cls` node from two operands, wrapping a scalar operand."""
    if not (is_expression(f) or is_expression(g)):
        raise TypeError(
            "At least one operand of %s must be an expression, got %s and %s."
            % (cls.__name__, type(f).__name__, type(g).__name__)
        )
    return cls(as_expression(f), as_expression(g))


def add(f, g):
    r"""Expression representing \f$ f(x) + g(x) \f$."""
    return _combine(SumExpression, f, g)


def sub(f, g):
    r"""Expression representing \f$ f(x) - g(x) \f$."""
    return _combine(DifferenceExpression, f, g)


def mul(f, g):
    r"""Expression representing \f$ f(x) g(x) \f$."""
    return _combine(ProductExpression, f, g)


def div(f, g):
    r"""Expression representing \f$ f(x) / g(x) \f$."""
    return _combine(DivisionExpression, f, g)


def compose(outer, inner):
    r"""Expression representing \f$ outer(inner(x)) \f$.

    A scalar `outer` results in a constant function, a scalar `inner` in a
    function evaluating `outer` always at that scalar.
    """
    return _combine(CompositionExpression, outer, inner)
