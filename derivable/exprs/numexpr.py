r"""@package derivable.exprs.numexpr

Base of the expression system.

An expression represents a real function of one variable as a tree of
immutable nodes. The leaves are constants and the identity function \f$ x
\mapsto x \f$, the inner nodes are sums, differences, products, divisions and
compositions of their children. Each expression knows how to be evaluated at a
point and how to be turned into the expression of its exact derivative (see
derivatives.D()).

Expressions can be built using the functions in the combinators module or via
the usual arithmetic operators, where the `|` operator stands for function
composition. As a simple example, let's create
\f$ f(x) = (x^2 + 1) / x \f$ and its derivative:

~~~.py
from derivable.exprs import X, D
f = (X*X + 1) / X
df = D(f)
print("f(2) =", f(2.0), "f'(2) =", df(2.0))
~~~

Evaluation works for any numeric type supporting the four basic arithmetic
operations, e.g. `float`, `fractions.Fraction`, `mpmath.mpf` or NumPy arrays.
The result has the type of the point the expression is evaluated at.
Alternatively, an *evaluator* can be created via NumericExpression.evaluator(),
which converts its arguments to floats (or `mpmath` arbitrary precision
numbers) and provides convenient access to derivatives of any order.

Once constructed, expressions cannot be modified. Sub-trees are therefore
freely shared between expressions, which keeps e.g. repeated differentiation
cheap.

All expressions are *picklable*. The NumericExpression class has a convenience
method NumericExpression.save() to store an expression to disk, which can be
loaded back using NumericExpression.load().
"""

from contextlib import contextmanager
from abc import ABCMeta, abstractmethod

from mpmath import mp, fp

from ..pickle_helpers import prepare_dict, restore_dict
from ..utils import save_to_file, load_from_file
from .common import ExpressionKind, ExhaustivenessError, is_scalar
from .common import reduce_tree


__all__ = [
    "NumericExpression",
    "ExpressionWarning",
    "isclose",
]


class ExpressionWarning(UserWarning):
    """Warning issued when expressions might not evaluate as expected."""
    pass


def isclose(a, b, rel_tol=None, abs_tol=None, use_mp=False):
    r"""Test if two numbers agree within an absolute/relative tolerance.

    For floating point comparison (i.e. if `use_mp==False`), the default
    relative tolerance is `1e-9` and the absolute one `0.0`.
    """
    if use_mp:
        return mp.almosteq(a, b, rel_eps=rel_tol, abs_eps=abs_tol)
    if rel_tol is None:
        rel_tol = 1e-9
    if abs_tol is None:
        abs_tol = 0.0
    return abs(a-b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)


class _ExpressionMeta(ABCMeta):
    r"""Metaclass freezing expression objects after their construction."""
    def __call__(cls, *args, **kwargs):
        obj = super(_ExpressionMeta, cls).__call__(*args, **kwargs)
        object.__setattr__(obj, '_frozen', True)
        return obj


def _operator(name, reflected=False):
    r"""Create an operator method delegating to a combinators function.

    Operands that are neither expressions nor scalars make the method return
    `NotImplemented`, so that Python raises its usual `TypeError`.
    """
    def op(self, other):
        from . import combinators
        if not (isinstance(other, NumericExpression) or is_scalar(other)):
            return NotImplemented
        combine = getattr(combinators, name)
        if reflected:
            return combine(other, self)
        return combine(self, other)
    op.__name__ = "__%s%s__" % ("r" if reflected else "", name)
    return op


class NumericExpression(metaclass=_ExpressionMeta):
    """Parent class for all expression nodes.

    Each concrete child class represents one of the node kinds listed in
    common.ExpressionKind and must declare it in its `kind` class attribute.
    Intermediate base classes declare `kind = None` and cannot be
    instantiated. A class not declaring its kind at all is rejected with an
    common.ExhaustivenessError as soon as it is defined.

    The methods a child has to override are:
        * _expr_str() returning a representation of the expression
    """
    # pylint: disable=too-many-public-methods

    ## Node kind of this expression class.
    kind = None

    ## Make NumPy defer to our reflected operators (e.g. `np.float64(1) + X`).
    __array_ufunc__ = None

    def __init_subclass__(cls, **kwargs):
        super(NumericExpression, cls).__init_subclass__(**kwargs)
        if 'kind' not in cls.__dict__:
            raise ExhaustivenessError(
                "Expression class %s must declare its `kind` (one of %s, or "
                "None for abstract classes)."
                % (cls.__name__, ", ".join(k.name for k in ExpressionKind))
            )
        if cls.kind is not None and not isinstance(cls.kind, ExpressionKind):
            raise ExhaustivenessError(
                "Unknown node kind %r of expression class %s."
                % (cls.kind, cls.__name__)
            )

    def __init__(self, name=None, **sub_exprs):
        r"""Base class init for expressions.

        The ``**sub_exprs`` sub expressions given as keyword arguments here
        are stored in this object and can be accessed with the keys used here.
        They are used when traversing through a complete expression hierarchy
        in e.g. print_tree() or traverse_tree().

        Args:
            name: (string, optional)
                Name for the expression. Can be useful to label expressions in
                a more complex expression tree to indicate their role/meaning.
                By default, the current class name is used as name.
            **sub_exprs:
                Child expressions. These have to be NumericExpression objects
                already; use the functions in the combinators module to
                convert scalars.
        """
        if self.kind is None:
            raise TypeError("Cannot instantiate abstract expression class %s."
                            % type(self).__name__)
        for key, expr in sub_exprs.items():
            if not isinstance(expr, NumericExpression):
                raise TypeError(
                    "Sub expression `%s` of %s must be an expression, got %s."
                    % (key, type(self).__name__, type(expr).__name__)
                )
        self._name = name if name else self.__class__.__name__
        self._sub_expressions = dict(sub_exprs)
        for key, expr in sub_exprs.items():
            setattr(self, key, expr)

    def __setattr__(self, attr, value):
        if self.__dict__.get('_frozen', False):
            raise AttributeError("Expressions are immutable, cannot set `%s` "
                                 "on %s." % (attr, type(self).__name__))
        object.__setattr__(self, attr, value)

    def __delattr__(self, attr):
        if self.__dict__.get('_frozen', False):
            raise AttributeError("Expressions are immutable, cannot delete "
                                 "`%s` on %s." % (attr, type(self).__name__))
        object.__delattr__(self, attr)

    @property
    def name(self):
        r"""Name given to this instance of the expression."""
        return self._name

    @property
    def nice_name(self):
        r"""More descriptive name, which may be overridden by sub classes."""
        return self._name

    def sub_expressions(self):
        r"""Return a list of `(key, expr)` pairs of the direct children."""
        return list(self._sub_expressions.items())

    def traverse_tree(self, include_root=False, skip_zeros=False, parents=None):
        r"""Generator that walks through a complete expression tree.

        In each iteration, the returned values represent the current node's
        parents (as a list from root to immediate parent), its key under which
        it is stored in its parent, and the node itself.

        Shared sub-trees are visited once for each place they occur in.

        Args:
            include_root: Whether to include the root as first item. Default
                is `False`.
            skip_zeros: Whether to skip zero constants. Default is `False`.
            parents: Optional list of parents of the root. Normally only used
                internally for the recursion.

        @b Examples
        \code
            for parents, name, expr in root_expr.traverse_tree():
                print("-"*len(parents), name)
        \endcode

        """
        if parents is None:
            parents = []
        if include_root:
            yield parents, "", self
        parents = parents + [self]
        for name, expr in self._sub_expressions.items():
            if not (skip_zeros and expr.is_zero_expression()):
                yield parents, name, expr
            for node in expr.traverse_tree(include_root=False,
                                           skip_zeros=skip_zeros,
                                           parents=parents):
                yield node

    def print_tree(self, root_name='root', nice_names=True, skip_zeros=False):
        r"""Print the whole expression tree.

        Each expression's key under which it is stored as sub expression will
        be shown as well as its actual name and the class name.

        Args:
            root_name: Key name to print for the root expression.
            nice_names: Whether to use the nice more descriptive name (when
                implemented) or the usually shorter abstract names.
            skip_zeros: Whether to skip zero constants.
        """
        def _p(expr, name, parents=()):
            n = expr.nice_name if nice_names else expr.name
            print("%s%s [%s] <%s>" % (
                ". " * len(parents), name, n, type(expr).__name__
            ))
        _p(self, root_name)
        for parents, name, expr in self.traverse_tree(skip_zeros=skip_zeros):
            _p(expr, name, parents)

    def size(self):
        r"""Number of nodes of the expression tree.

        A sub-tree shared by several parents is counted once for each parent.
        """
        count = lambda node, *sizes: 1 + sum(sizes)
        return reduce_tree(self, dict(), dict((k, count) for k in ExpressionKind))

    def same_as(self, other):
        r"""Return whether `other` is a structurally identical expression.

        Two expressions are the same if they have the same node kinds in the
        same places and equal constant values. Names are ignored.
        """
        seen = set()
        def _same(a, b):
            if a is b or (id(a), id(b)) in seen:
                return True
            if not isinstance(b, NumericExpression) or a.kind is not b.kind:
                return False
            if not a._same_payload(b):
                return False
            subs_a, subs_b = a.sub_expressions(), b.sub_expressions()
            if len(subs_a) != len(subs_b):
                return False
            if not all(_same(ea, eb) for (_, ea), (_, eb) in zip(subs_a, subs_b)):
                return False
            seen.add((id(a), id(b)))
            return True
        return _same(self, other)

    def _same_payload(self, other):
        r"""Compare the data of this node (not its children) with `other`'s."""
        # pylint: disable=unused-argument
        return True

    def save(self, filename, overwrite=False, verbose=True):
        r"""Save the expression object to disk.

        Args:
            filename: The file name to store the data in. An extension
                ``'.npy'`` will be added if not already there.
            overwrite: Whether to overwrite an existing file with the same
                name. If `False` (default) and such a file exists, a
                `RuntimeError` is raised.
            verbose: Whether to print when the file was written. Default is
                `True`.
        """
        save_to_file(
            filename, self, overwrite=overwrite, verbose=verbose,
            showname="%s [%s]" % (self.nice_name, type(self).__name__)
        )

    @classmethod
    def load(cls, filename):
        r"""Static function to load an expression object from disk."""
        return load_from_file(filename)

    def __getstate__(self):
        r"""Return a picklable state object representing the whole expression.

        Some care is taken to ensure even `mpmath` constants successfully
        pickle/unpickle.
        """
        return prepare_dict(self.__dict__)

    def __setstate__(self, state):
        r"""Restore a complete expression from the given unpickled state."""
        self.__dict__.update(restore_dict(state))

    def __repr__(self):
        r"""Return a string representing the whole expression tree."""
        cls = self.__class__.__name__
        return "<%s(%s)>" % (cls, self._expr_str())

    def __str__(self):
        return self.str()

    def str(self):
        """Return the expression as an (infix) string."""
        return "(%s)" % self._expr_str()

    @abstractmethod
    def _expr_str(self):
        """String representing the expression.

        If the expression has sub-expressions, be sure to use their `str`
        method and not the `_expr_str`. For example:

            def _expr_str(self):
                return "%s + %s" % (self.f.str(), self.g.str())
        """
        pass

    def is_zero_expression(self):
        r"""Return whether this expression is a constant zero.

        Only constants can be zero here. No attempt is made to detect
        composite expressions that vanish identically.
        """
        return False

    def __call__(self, x):
        r"""Evaluate the expression at the point `x`.

        See evaluators.evaluate() for details.
        """
        from .evaluators import evaluate
        return evaluate(self, x)

    def evaluator(self, use_mp=False, dps=None):
        r"""Create an evaluator for the expression.

        Use `use_mp` to control whether the evaluator will use floating point
        arithmetics (for `False`) or arbitrary precision mpmath computations
        (for `True`). Default is `False`.

        Args:
            use_mp: Boolean indicating whether the evaluator should use
                `mpmath` math operations or standard (and faster) floating
                point operations.
            dps: Decimal places to use for `mpmath` computations. Defaults to
                the current global `mp.dps` setting.
        """
        from .evaluators import ExpressionEvaluator
        return ExpressionEvaluator(self, use_mp=use_mp, dps=dps)

    def derivative(self, n=1):
        r"""Return the expression of the n'th derivative of this expression."""
        from .derivatives import derivative
        return derivative(self, n)

    @classmethod
    def mpmath_context(cls, use_mp):
        r"""Return the `mpmath.mp` or `mpmath.fp` contexts."""
        return mp if use_mp else fp

    @classmethod
    @contextmanager
    def context(cls, use_mp, dps=None):
        r"""Convenience function to be used as context manager.

        This will automatically choose the correct context (`mp` or `fp`)
        based on the choice of `use_mp` and configure the desired decimal
        places.

        Args:
            use_mp: Whether to use `mp` (if `True`) or `fp`.
            dps:    Decimal places to use in `mp` computations.
        """
        ctx = cls.mpmath_context(use_mp)
        if not use_mp or dps is None:
            yield ctx
            return
        with mp.workdps(dps):
            yield ctx

    __add__ = _operator('add')
    __radd__ = _operator('add', reflected=True)
    __sub__ = _operator('sub')
    __rsub__ = _operator('sub', reflected=True)
    __mul__ = _operator('mul')
    __rmul__ = _operator('mul', reflected=True)
    __truediv__ = _operator('div')
    __rtruediv__ = _operator('div', reflected=True)
    __or__ = _operator('compose')
    __ror__ = _operator('compose', reflected=True)

    def __neg__(self):
        from .combinators import sub
        return sub(0, self)

    def __pos__(self):
        return self
