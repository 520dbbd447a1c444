r"""@package testutils

Utilities to add more features to `unittest` classes.

This module provides a custom subclass of `unittest.TestCase`, namely
ExprTestCase, which obeys the global configuration settings in TestSettings.
The latter can be configured by the script invoking the test run.

ExprTestCase also knows how to compare two expressions at sample points,
which is how derivatives computed by the expression system are checked
against derivatives computed by hand (or by an external program).

This module also introduces a new decorator slowtest, which, when applied,
leads to the test being skipped on normal runs. The script starting the test
must set `TestSettings.skipslow` to `False` for the slow tests to be run.
"""

import sys
import functools
import numbers
import unittest
import time


__all__ = [
    "ExprTestCase",
    "TestSettings",
    "slowtest",
    "values_match",
]


def slowtest(func):
    """Decorator for skipping a test if TestSettings.skipslow is true."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("skipping slow tests")
        return func(*args, **kwargs)
    return wrapper


def values_match(a, b, delta=1e-5):
    r"""Compare two values obtained by evaluating expressions.

    Exact (e.g. integer or rational) values have to be equal, all others have
    to agree within an absolute tolerance `delta`.
    """
    if isinstance(a, numbers.Rational) and isinstance(b, numbers.Rational):
        return a == b
    return abs(a-b) < delta


class ExprTestCase(unittest.TestCase):
    """Tweaked baseclass for unit tests.

    By deriving from this class, you:
        * Get timed individual tests (needs `verbosity=2`) if
          TestSettings.timing is true.
        * Can implement a hook (failureHook()) that is called after a test has
          failed (or errored). It is called before tearDown(), allowing you
          to, for example, collect generated files for inspection before they
          are deleted.
        * Can compare expressions at sample points using
          assertEvaluatesEqual() and assertEvaluatesDifferent().
    """
    @classmethod
    def setUpClass(cls):
        if cls is not ExprTestCase:
            if cls.setUp is not ExprTestCase.setUp:
                setUp = cls.setUp
                @functools.wraps(setUp)
                def setUpWrapper(self, *args, **kwargs):
                    ExprTestCase.setUp(self)
                    return setUp(self, *args, **kwargs)
                cls.setUp = setUpWrapper
            if cls.tearDown is not ExprTestCase.tearDown:
                tearDown = cls.tearDown
                @functools.wraps(tearDown)
                def tearDownWrapper(self, *args, **kwargs):
                    ExprTestCase.tearDown(self)
                    return tearDown(self, *args, **kwargs)
                cls.tearDown = tearDownWrapper

    def __lastTestSkipped(self):
        r"""Return whether the previous test was skipped."""
        if self.__result is None:
            return False
        return len(getattr(self.__result, "skipped", ())) > self.__prevSkipped

    def __lastTestOK(self):
        r"""Return whether the previous test result was success."""
        if self.__result is None:
            return True
        if len(getattr(self.__result, "errors", ())) > self.__prevErrors or len(getattr(self.__result, "failures", ())) > self.__prevFailures:
            return False
        return True

    def __shouldPrintTiming(self):
        r"""Return whether timing information should be printed."""
        if not TestSettings.timing or self.__lastTestSkipped() or not self.__lastTestOK():
            return False
        if self.__result is None:
            return True
        return not getattr(self.__result, 'dots', True) and getattr(self.__result, 'showAll', False)

    def run(self, result=None):
        self.__result = result
        self.__prevErrors = 0
        self.__prevFailures = 0
        self.__prevSkipped = 0
        if result is not None:
            # Runners like pytest pass result objects without these lists.
            self.__prevErrors = len(getattr(result, "errors", ()))
            self.__prevFailures = len(getattr(result, "failures", ()))
            self.__prevSkipped = len(getattr(result, "skipped", ()))
        return unittest.TestCase.run(self, result)

    def setUp(self):
        self.startTime = time.time()
        self.__tornDown = False

    def tearDown(self):
        if self.__tornDown: return
        self.__tornDown = True
        if not self.__lastTestOK():
            self.failureHook(self.__result)
        if self.__shouldPrintTiming():
            duration = time.time() - self.startTime
            print("(%.4f seconds) ... " % (duration), file=sys.stderr, end='')

    def failureHook(self, result):
        r"""Custom function called just after a fail/error occurred.

        Subclasses may implement this function to e.g. collect result data
        before tearDown() gets called.
        """
        pass

    def assertIsType(self, obj, cls):
        r"""Assert that an object is exactly of a certain type."""
        self.assertIs(type(obj), cls)

    def assertListAlmostEqual(self, a, b, places=None, delta=None):
        r"""Assert that two iterables contain (almost) the same values."""
        if places is not None and delta is not None:
            raise TypeError("Cannot use delta and places at the same time")
        if places is None and delta is None:
            places = 7
        if len(a) != len(b):
            raise self.failureException("Lists have different lengths (%d != %d)" % (len(a), len(b)))
        fails = []
        for i in range(len(a)):
            if a[i] == b[i]:
                continue
            if delta is not None:
                if abs(a[i]-b[i]) > delta:
                    fails.append(i)
            else:
                if round(abs(a[i]-b[i]), places) != 0:
                    fails.append(i)
        if fails:
            msg = "%d elements differ.\n" % len(fails)
            maxN = 9
            if len(fails) <= maxN:
                msg += "Differing elements:\n"
            else:
                msg += "First few differing elements:\n"
            msg += "\n".join(["  [{i}] {a} != {b}    (difference: {d})".format(i=i, a=a[i], b=b[i], d=(b[i]-a[i]))
                              for i in fails[:maxN]])
            raise self.failureException(msg)

    def __checkEvaluation(self, f, g, x, equal, delta):
        r"""Evaluate two expressions at x and compare the results."""
        value_f = f(x)
        value_g = g(x)
        if values_match(value_f, value_g, delta=delta) != equal:
            raise self.failureException(
                "Expected %s values when x = %s\n\t f(x) = %s\n\t g(x) = %s"
                % ("equal" if equal else "different", x, value_f, value_g)
            )

    def assertEvaluatesEqual(self, f, g, x, delta=1e-5):
        r"""Assert that two expressions evaluate to the same value at x."""
        self.__checkEvaluation(f, g, x, True, delta)

    def assertEvaluatesDifferent(self, f, g, x, delta=1e-5):
        r"""Assert that two expressions evaluate to different values at x."""
        self.__checkEvaluation(f, g, x, False, delta)


class TestSettings(object):
    """Global settings for tests."""
    ## Stop test run on first fail/error.
    failfast = False
    ## Whether output is buffered.\ Just information, cannot be used to toggle output buffering.
    buffering = False
    ## Whether the timing for each test case should be printed.
    timing = False
    ## Control whether tests marked as slowtest should be skipped.
    skipslow = True
