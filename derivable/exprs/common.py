r"""@package derivable.exprs.common

Utils used by multiple modules in derivable.exprs.
"""

from enum import Enum
import numbers

import numpy as np
import mpmath


__all__ = [
    "ExpressionKind",
    "ExhaustivenessError",
    "check_exhaustive",
    "is_scalar",
    "convert_constant",
    "reduce_tree",
    "evaluate_tree",
]


class ExpressionKind(Enum):
    r"""The closed set of node kinds an expression tree is built from.

    Each concrete expression class is tagged with exactly one of these
    members via its `kind` class attribute. Every operation dispatching on the
    kind of a node (evaluation, differentiation, conversion to SymPy) keeps a
    table with one rule per member, which is verified by check_exhaustive()
    when the respective module is imported.
    """
    CONSTANT = "constant"
    IDENTITY = "identity"
    SUM = "sum"
    DIFFERENCE = "difference"
    PRODUCT = "product"
    DIVISION = "division"
    COMPOSITION = "composition"


class ExhaustivenessError(TypeError):
    r"""Raised when a node kind lacks a tag or a rule for some operation."""
    pass


def check_exhaustive(rules, what):
    r"""Ensure a dispatch table has exactly one rule per ExpressionKind.

    @param rules
        Dictionary mapping ExpressionKind members to callables.
    @param what
        Name of the operation, used in the error message.

    @return The unchanged `rules` dictionary.
    """
    missing = [k.name for k in ExpressionKind if k not in rules]
    unknown = [repr(k) for k in rules if not isinstance(k, ExpressionKind)]
    if missing or unknown:
        raise ExhaustivenessError(
            "Rules for %s do not match the node kinds (missing: %s; unknown: %s)."
            % (what, ", ".join(missing) or "none", ", ".join(unknown) or "none")
        )
    return rules


def is_scalar(value):
    r"""Return whether a value may be wrapped as a constant expression.

    Accepted are all `numbers.Number` instances (including NumPy scalars,
    `fractions.Fraction` and `decimal.Decimal`) as well as `mpmath` real and
    complex numbers and constants like `mp.pi`.
    """
    if hasattr(value, '_mpf_') or hasattr(value, '_mpc_'):
        return True
    return isinstance(value, numbers.Number)


def convert_constant(value, x):
    r"""Cast a constant's value to the numeric type of the point `x`.

    The cast is unchecked: e.g. `0.5` evaluated at an integer point becomes
    `0`. NumPy arrays get an array of the same shape and dtype filled with
    the value.
    """
    if isinstance(x, np.ndarray):
        return np.full_like(x, value)
    if hasattr(x, '_mpf_'):
        return mpmath.mpf(value)
    if hasattr(x, '_mpc_'):
        return mpmath.mpc(value)
    return type(x)(value)


def reduce_tree(expr, cache, rules):
    r"""Reduce an expression tree bottom-up, without recursion.

    Each distinct node is visited once after all its children. The rule for
    its kind is called as ``rule(node, *results)``, where `results` are the
    results of the children in the order of
    NumericExpression.sub_expressions().

    @param expr
        Root of the tree to reduce.
    @param cache
        Dictionary mapping node ids to results. It is filled during the
        reduction and may already contain results of shared sub-trees.
    @param rules
        Dictionary mapping each ExpressionKind to its rule.

    @return The result for `expr`.
    """
    stack = [(expr, False)]
    while stack:
        node, children_done = stack.pop()
        key = id(node)
        children = [e for _, e in node.sub_expressions()]
        if children_done:
            cache[key] = rules[node.kind](node, *[cache[id(e)] for e in children])
        elif key not in cache:
            stack.append((node, True))
            stack.extend((e, False) for e in reversed(children))
    return cache[id(expr)]


def evaluate_tree(expr, x, cache, rules):
    r"""Reduce an expression tree at the point `x`, without recursion.

    This is like reduce_tree(), except that each rule gets the point as
    second argument: ``rule(node, x, *results)``. For compositions, the inner
    function is reduced at `x` and the outer function at the inner result,
    using a fresh cache. The composition rule is called as
    ``rule(node, x, inner_result, outer_result)``.

    The `cache` belongs to the point `x` and must not be reused for another
    point.
    """
    # Entries are (node, point, cache, state) with state None for unvisited
    # nodes, True once the children (or the inner function) are done, and
    # the outer function's cache while a composition waits for it.
    stack = [(expr, x, cache, None)]
    while stack:
        node, point, results, state = stack.pop()
        key = id(node)
        composition = node.kind is ExpressionKind.COMPOSITION
        if state is None:
            if key in results:
                continue
            stack.append((node, point, results, True))
            if composition:
                stack.append((node.inner, point, results, None))
            else:
                stack.extend((e, point, results, None)
                             for _, e in reversed(node.sub_expressions()))
        elif composition and state is True:
            outer_cache = dict()
            stack.append((node, point, results, outer_cache))
            stack.append((node.outer, results[id(node.inner)], outer_cache, None))
        elif composition:
            results[key] = rules[node.kind](
                node, point, results[id(node.inner)], state[id(node.outer)]
            )
        else:
            values = [results[id(e)] for _, e in node.sub_expressions()]
            results[key] = rules[node.kind](node, point, *values)
    return cache[id(expr)]
