#!/usr/bin/env python3
r"""@package derivable.exprs.test_basics

Tests for the expression nodes and their common base class.
"""

import unittest
import sys
import io
import os.path as op
import pickle
import tempfile
from contextlib import redirect_stdout

from mpmath import mp

from testutils import ExprTestCase
from .common import ExpressionKind, ExhaustivenessError
from .numexpr import NumericExpression
from .basics import ConstantExpression, IdentityExpression, SumExpression
from .basics import ProductExpression, CompositionExpression, X
from .combinators import add, compose
from .derivatives import D


class TestNodes(ExprTestCase):
    r"""Test construction and properties of the node classes."""
    def test_kinds(self):
        self.assertIs(ConstantExpression(1).kind, ExpressionKind.CONSTANT)
        self.assertIs(X.kind, ExpressionKind.IDENTITY)
        self.assertIs((X + 1).kind, ExpressionKind.SUM)
        self.assertIs((X - 1).kind, ExpressionKind.DIFFERENCE)
        self.assertIs((X * 1).kind, ExpressionKind.PRODUCT)
        self.assertIs((X / 1).kind, ExpressionKind.DIVISION)
        self.assertIs((X | 1).kind, ExpressionKind.COMPOSITION)

    def test_constant(self):
        c = ConstantExpression(2.5)
        self.assertEqual(c.c, 2.5)
        self.assertEqual(c.value, 2.5)
        self.assertIsType(ConstantExpression(3).c, int)
        self.assertEqual(ConstantExpression().c, 0)
        with self.assertRaises(TypeError):
            ConstantExpression("3")
        with self.assertRaises(TypeError):
            ConstantExpression([1, 2])
        with self.assertRaises(TypeError):
            ConstantExpression(None)

    def test_children(self):
        expr = X * 2
        self.assertIs(expr.f, X)
        self.assertIs(type(expr.g), ConstantExpression)
        comp = compose(X * X, X + 1)
        self.assertIs(comp.outer, comp.f)
        self.assertIs(comp.inner, comp.g)
        self.assertEqual([k for k, _ in comp.sub_expressions()], ['f', 'g'])

    def test_no_implicit_conversion_in_nodes(self):
        with self.assertRaises(TypeError):
            SumExpression(X, 1)
        with self.assertRaises(TypeError):
            ProductExpression(2, X)
        with self.assertRaises(TypeError):
            CompositionExpression(X, "x")

    def test_immutable(self):
        c = ConstantExpression(1)
        with self.assertRaises(AttributeError):
            c.c = 2
        expr = X + 1
        with self.assertRaises(AttributeError):
            expr.f = X
        with self.assertRaises(AttributeError):
            del expr.g
        with self.assertRaises(AttributeError):
            expr.foo = "bar"
        self.assertEqual(c.c, 1)
        self.assertIs(expr.f, X)

    def test_names(self):
        self.assertEqual(ConstantExpression(2).name, 'const')
        self.assertEqual(ConstantExpression(2).nice_name, 'const (2)')
        self.assertEqual(X.name, 'x')
        self.assertEqual((X + 1).name, 'add')
        self.assertEqual((X - 1).name, 'sub')
        self.assertEqual((X * 1).name, 'mult')
        self.assertEqual((X / 1).name, 'divide')
        self.assertEqual((X | 1).name, 'compose')
        self.assertEqual((X + 1).nice_name, 'add (f + g)')
        self.assertEqual(SumExpression(X, X, name='double').name, 'double')

    def test_strings(self):
        self.assertEqual((X*X + 1).str(), "((x * x) + 1)")
        self.assertEqual(str(X / (X - 2.5)), "(x / (x - 2.5))")
        self.assertEqual(str(X*X | X + 1), "((x * x) | (x + 1))")
        self.assertEqual(repr(X + 1), "<SumExpression(x + 1)>")
        self.assertEqual(repr(ConstantExpression(2)), "<ConstantExpression(2)>")
        self.assertEqual(repr(X), "<IdentityExpression(x)>")

    def test_string_clashing(self):
        expr1 = (X - 2) * X
        expr2 = X - 2 * X
        self.assertNotEqual(expr1.str(), expr2.str())
        self.assertNotEqual(expr1(.5), expr2(.5))

    def test_zero_expression(self):
        self.assertTrue(ConstantExpression(0).is_zero_expression())
        self.assertTrue(ConstantExpression(0.0).is_zero_expression())
        self.assertFalse(ConstantExpression(2).is_zero_expression())
        self.assertFalse(X.is_zero_expression())
        self.assertFalse((X - X).is_zero_expression())


class TestNumericExpression(ExprTestCase):
    r"""Test the common functionality of the expression base class."""
    def test_undeclared_kind(self):
        with self.assertRaises(ExhaustivenessError):
            class _NoKind(NumericExpression):
                def _expr_str(self): return "?"

    def test_unknown_kind(self):
        with self.assertRaises(ExhaustivenessError):
            class _BadKind(NumericExpression):
                kind = "sum"
                def _expr_str(self): return "?"

    def test_abstract_class(self):
        class _Abstract(NumericExpression):
            kind = None
            def _expr_str(self): return "?"
        with self.assertRaises(TypeError):
            _Abstract()

    def test_traverse_tree(self):
        expr = X*X + 1
        nodes = list(expr.traverse_tree())
        self.assertEqual([name for _, name, _ in nodes], ['f', 'f', 'g', 'g'])
        self.assertEqual([len(parents) for parents, _, _ in nodes], [1, 2, 2, 1])
        self.assertIs(nodes[1][2], X)
        self.assertIs(nodes[1][0][-1], expr.f)
        nodes = list(expr.traverse_tree(include_root=True))
        self.assertIs(nodes[0][2], expr)
        self.assertEqual(len(nodes), 5)

    def test_traverse_skip_zeros(self):
        expr = D(X + 3)
        nodes = list(expr.traverse_tree(skip_zeros=True))
        self.assertEqual(len(nodes), 1)
        self.assertEqual(nodes[0][2].c, 1)

    def test_print_tree(self):
        out = io.StringIO()
        with redirect_stdout(out):
            (X*X + 1).print_tree()
        self.assertEqual(out.getvalue().splitlines(), [
            "root [add (f + g)] <SumExpression>",
            ". f [mult (f * g)] <ProductExpression>",
            ". . f [x] <IdentityExpression>",
            ". . g [x] <IdentityExpression>",
            ". g [const (1)] <ConstantExpression>",
        ])
        out = io.StringIO()
        with redirect_stdout(out):
            (X + 0).print_tree(root_name='expr', nice_names=False, skip_zeros=True)
        self.assertEqual(out.getvalue().splitlines(), [
            "expr [add] <SumExpression>",
            ". f [x] <IdentityExpression>",
        ])

    def test_size(self):
        self.assertEqual(X.size(), 1)
        self.assertEqual((X*X).size(), 3)
        self.assertEqual(D(X*X).size(), 7)
        sq = X*X
        self.assertEqual((sq + sq).size(), 7)

    def test_same_as(self):
        self.assertTrue((X*X + 1).same_as(X*X + 1))
        self.assertFalse((X*X + 1).same_as(X*X + 2))
        self.assertFalse((X*X + 1).same_as(X*X + 1.0))
        self.assertFalse((X*X + 1).same_as(X*X - 1))
        self.assertFalse((X + 1).same_as(1 + X))
        self.assertTrue(X.same_as(IdentityExpression()))
        self.assertFalse(X.same_as(3))
        self.assertTrue(add(X, 1).same_as(SumExpression(X, ConstantExpression(1))))

    def test_hashable(self):
        a, b = X + 1, X + 1
        self.assertEqual(len({a, b, a}), 2)

    def test_pickle(self):
        expr = (X*X + mp.pi) / 2
        s = pickle.dumps(expr)
        loaded = pickle.loads(s)
        self.assertIs(type(loaded), type(expr))
        self.assertTrue(loaded.same_as(expr))
        self.assertIs(loaded.f.g.c, mp.pi)
        self.assertEqual(loaded(3.0), expr(3.0))
        with self.assertRaises(AttributeError):
            loaded.f = X

    def test_pickle_sharing(self):
        sq = X*X
        loaded = pickle.loads(pickle.dumps(sq + sq))
        self.assertIs(loaded.f, loaded.g)

    def test_save_load(self):
        expr = D((X*X + X - 5) / (X - X*X))
        with tempfile.TemporaryDirectory() as tmpdir:
            fname = op.join(tmpdir, "sub", "deriv")
            expr.save(fname, verbose=False)
            self.assertTrue(op.isfile(fname + ".npy"))
            loaded = NumericExpression.load(fname + ".npy")
            self.assertTrue(loaded.same_as(expr))
            self.assertEqual(loaded(3.0), expr(3.0))
            with self.assertRaises(RuntimeError):
                expr.save(fname, verbose=False)
            (X + 1).save(fname, overwrite=True, verbose=False)
            self.assertTrue(NumericExpression.load(fname + ".npy").same_as(X + 1))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
