r"""@package derivable.pickle_helpers

Helper functions to (un)pickle problematic objects.

The main problem are mpmath constants such as `mp.pi`, which may be used as
values of constant expressions. Running all your values to pickle through
prepare_value() replaces them with placeholders. To restore the values to
their original form, run them through restore_value().

For convenience, prepare_dict() and restore_dict() do this on the values of
dictionaries, which is suitable for use in a `__getstate__()` and
`__setstate__()` implementation, respectively.

Example implementations might look like:

\code
def __getstate__(self):
    return prepare_dict(self.__dict__)

def __setstate__(self, state):
    self.__dict__.update(restore_dict(state))
\endcode
"""

from mpmath import mp


__all__ = [
    "prepare_value",
    "prepare_dict",
    "restore_value",
    "restore_dict",
]


## Names of the `mpmath` constants that are replaced by placeholders.
_MP_CONSTANTS = (
    "pi", "e", "phi", "euler", "catalan", "ln2", "ln10", "degree",
    "khinchin", "glaisher", "apery", "mertens", "twinprime",
)


class _MpConstant(object):
    r"""Placeholder representing one of the mpmath constants."""
    # pylint: disable=too-few-public-methods
    def __init__(self, name):
        ## Attribute name of the constant on the `mp` context.
        self.name = name

    @property
    def value(self):
        r"""The actual mpmath constant, e.g. `mp.pi`."""
        return getattr(mp, self.name)


def prepare_value(value):
    r"""Prepare a value for being pickled.

    Most values are left untouched, only problematic ones are replaced by
    placeholders that can be pickled.
    """
    if type(value) is tuple:
        return tuple(prepare_value(v) for v in value)
    if type(value) is list:
        return [prepare_value(v) for v in value]
    for name in _MP_CONSTANTS:
        if value is getattr(mp, name):
            return _MpConstant(name)
    return value


def restore_value(value):
    r"""Restore an unpickled value to its original form."""
    if type(value) is tuple:
        return tuple(restore_value(v) for v in value)
    if type(value) is list:
        return [restore_value(v) for v in value]
    if isinstance(value, _MpConstant):
        return value.value
    return value


def prepare_dict(data):
    r"""Convenience method to run prepare_value() on a dict."""
    return dict((k, prepare_value(v)) for k, v in data.items())


def restore_dict(data):
    r"""Convenience method to run restore_value() on a dict."""
    return dict((k, restore_value(v)) for k, v in data.items())
