r"""@package derivable.exprs.basics

The node classes of the expression system.

Each class represents one member of common.ExpressionKind. The leaves
(ConstantExpression and IdentityExpression) may be created directly. Composite
nodes should be created via the functions in the combinators module or the
arithmetic operators of the expressions, which take care of wrapping scalars
as constants.
"""

from .numexpr import NumericExpression
from .common import ExpressionKind, is_scalar


__all__ = [
    "ConstantExpression",
    "IdentityExpression",
    "SumExpression",
    "DifferenceExpression",
    "ProductExpression",
    "DivisionExpression",
    "CompositionExpression",
    "Constant",
    "Identity",
    "X",
]


class ConstantExpression(NumericExpression):
    r"""Represent an expression that is a constant.

    Represents an expression of the form \f$ f(x) = c = \mathrm{const} \f$.

    The value of the constant can be accessed through the `c` (or `value`)
    property. It keeps its own type and is converted to the type of the
    evaluation point only when evaluated.
    """
    kind = ExpressionKind.CONSTANT

    def __init__(self, value=0, name='const'):
        r"""Init function.

        Args:
            value:  The constant value. Must be a scalar number.
            name:   Name of the expression (e.g. for print_tree()).
        """
        if not is_scalar(value):
            raise TypeError("Constant value must be a scalar number, got %s."
                            % type(value).__name__)
        super(ConstantExpression, self).__init__(name=name)
        ## The constant value this expression represents.
        self.c = value

    @property
    def value(self):
        r"""The constant value this expression represents."""
        return self.c

    def _expr_str(self):
        return "%s" % (self.c,)

    def str(self):
        return self._expr_str()

    @property
    def nice_name(self):
        return "%s (%s)" % (self.name, self.c)

    def is_zero_expression(self):
        return self.c == 0

    def _same_payload(self, other):
        return self.c == other.c and type(self.c) is type(other.c)


class IdentityExpression(NumericExpression):
    r"""Identity expression \f$ f(x) = x \f$."""
    kind = ExpressionKind.IDENTITY

    def __init__(self, name='x'):
        super(IdentityExpression, self).__init__(name=name)

    def _expr_str(self):
        return "x"

    def str(self):
        return self._expr_str()


class _BinaryExpression(NumericExpression):
    r"""Base class for expressions combining two sub-expressions.

    The two operands are accessible as attributes `f` and `g`.
    """
    kind = None

    ## Symbol used for printing.
    _op = None

    def __init__(self, f, g, name=None):
        r"""Init function.

        Args:
            f:      First (left) expression.
            g:      Second (right) expression.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(_BinaryExpression, self).__init__(f=f, g=g, name=name)

    def _expr_str(self):
        return "%s %s %s" % (self.f.str(), self._op, self.g.str())

    @property
    def nice_name(self):
        return "%s (f %s g)" % (self.name, self._op)


class SumExpression(_BinaryExpression):
    r"""Sum of two expressions, \f$ f(x) + g(x) \f$."""
    kind = ExpressionKind.SUM
    _op = "+"

    def __init__(self, f, g, name='add'):
        super(SumExpression, self).__init__(f, g, name=name)


class DifferenceExpression(_BinaryExpression):
    r"""Difference of two expressions, \f$ f(x) - g(x) \f$."""
    kind = ExpressionKind.DIFFERENCE
    _op = "-"

    def __init__(self, f, g, name='sub'):
        super(DifferenceExpression, self).__init__(f, g, name=name)


class ProductExpression(_BinaryExpression):
    r"""Multiply two expressions, \f$ f(x) g(x) \f$."""
    kind = ExpressionKind.PRODUCT
    _op = "*"

    def __init__(self, f, g, name='mult'):
        super(ProductExpression, self).__init__(f, g, name=name)


class DivisionExpression(_BinaryExpression):
    r"""Divide one expression by another, \f$ f(x) / g(x) \f$.

    No special treatment of points where `g` vanishes takes place. The
    behaviour there is that of the numeric type used for evaluation.
    """
    kind = ExpressionKind.DIVISION
    _op = "/"

    def __init__(self, f, g, name='divide'):
        super(DivisionExpression, self).__init__(f, g, name=name)


class CompositionExpression(_BinaryExpression):
    r"""Composition of two expressions, \f$ f(g(x)) \f$.

    The outer function `f` is also accessible as `outer` and the inner
    function `g` as `inner`.
    """
    kind = ExpressionKind.COMPOSITION
    _op = "|"

    def __init__(self, outer, inner, name='compose'):
        r"""Init function.

        Args:
            outer:  Outer function `f`.
            inner:  Inner function `g`, i.e. the argument of `outer`.
            name:   Name of the expression (e.g. for print_tree()).
        """
        super(CompositionExpression, self).__init__(outer, inner, name=name)

    @property
    def outer(self):
        r"""The outer function of the composition."""
        return self.f

    @property
    def inner(self):
        r"""The inner function of the composition."""
        return self.g

    @property
    def nice_name(self):
        return "%s (f(g))" % self.name


## Short name for creating constants.
Constant = ConstantExpression

## Short name for creating identity expressions.
Identity = IdentityExpression

## The identity function, for writing expressions like `X*X + 1`.
X = IdentityExpression()
