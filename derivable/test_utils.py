#!/usr/bin/env python3
r"""@package derivable.test_utils

Tests for the utils module.
"""

import unittest
import sys
import io
import os
import os.path as op
import tempfile
from contextlib import redirect_stdout

import numpy as np

from testutils import ExprTestCase
from .utils import save_to_file, load_from_file


class TestFiles(ExprTestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_save_load(self):
        fname = op.join(self.tmpdir.name, "data")
        data = dict(a=[1, 2, 3], b="foo")
        out = io.StringIO()
        with redirect_stdout(out):
            save_to_file(fname, data, showname="stuff")
        self.assertEqual(out.getvalue().strip(),
                         "stuff saved to: %s.npy" % fname)
        self.assertEqual(load_from_file(fname + ".npy"), data)
        self.assertEqual(os.listdir(self.tmpdir.name), ["data.npy"])

    def test_overwrite(self):
        fname = op.join(self.tmpdir.name, "data.npy")
        save_to_file(fname, 1, verbose=False)
        with self.assertRaises(RuntimeError):
            save_to_file(fname, 2, verbose=False)
        self.assertEqual(load_from_file(fname), 1)
        save_to_file(fname, 2, overwrite=True, verbose=False)
        self.assertEqual(load_from_file(fname), 2)

    def test_sequence_data(self):
        fname = op.join(self.tmpdir.name, "seq")
        save_to_file(fname, [1, 2], verbose=False)
        self.assertEqual(load_from_file(fname + ".npy"), [1, 2])

    def test_plain_arrays(self):
        fname = op.join(self.tmpdir.name, "arr.npy")
        np.save(fname, np.arange(3))
        result = load_from_file(fname)
        self.assertListAlmostEqual(result, [0, 1, 2])

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_from_file(op.join(self.tmpdir.name, "nothing.npy"))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
