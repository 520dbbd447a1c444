r"""@package derivable.exprs

Expression system for composing functions of one variable, evaluating them
and computing their derivatives symbolically.

Each expression represents either a constant, the identity function
\f$ x \mapsto x \f$, or a combination of one or two other expressions, like
\f$ f(x) + g(x) \f$ or \f$ f(g(x)) \f$. Expressions are immutable trees.

The derivative of an expression is computed by rewriting the tree, applying
the constant, identity, sum, product, quotient and chain rules (see the
derivatives module). The result is again an expression, which can be
evaluated or differentiated further:

~~~.py
from derivable.exprs import X, D
f = (X*X + X - 5) / (X - X*X)
df = D(f)
ddf = D(df)
print(f(3.0), df(3.0), ddf(3.0))
~~~

The node kinds form a closed set (common.ExpressionKind). Every operation on
the trees has one rule per kind, which is checked when the respective module
is imported.

All expressions are *picklable*, which means they can easily be stored to
disk and retrieved later. The numexpr.NumericExpression class has a
convenience method numexpr.NumericExpression.save() for this purpose, and the
class method numexpr.NumericExpression.load() restores such an expression.
"""

from .common import ExpressionKind, ExhaustivenessError
from .numexpr import NumericExpression, ExpressionWarning, isclose
from .basics import ConstantExpression, IdentityExpression, SumExpression
from .basics import DifferenceExpression, ProductExpression, DivisionExpression
from .basics import CompositionExpression, Constant, Identity, X
from .combinators import is_expression, as_expression
from .combinators import add, sub, mul, div, compose
from .derivatives import D, derivative
from .evaluators import evaluate, ExpressionEvaluator
from .symbolic import to_sympy
