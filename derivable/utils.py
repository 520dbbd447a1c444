r"""@package derivable.utils

General utilities for storing objects on disk.
"""

from tempfile import NamedTemporaryFile
import os
import os.path as op
import time

import numpy as np


__all__ = [
    "save_to_file",
    "load_from_file",
]


def save_to_file(filename, data, overwrite=False, verbose=True,
                 showname='data', mkpath=True):
    r"""Save an object to disk.

    This uses `numpy.save()` to store an object in a file. Use
    load_from_file() to restore the data afterwards.

    This operation is atomic for ``overwrite=True``. This means that any
    failure during saving will leave the original file untouched. This may
    happen e.g. when the data to save is not picklable.

    @param filename
        The file name to store the data in. An extension ``'.npy'`` will be
        added if not already there.
    @param overwrite
        Whether to overwrite an existing file with the same name. If `False`
        (default) and such a file exists, a `RuntimeError` is raised.
    @param verbose
        Whether to print when the file was written. Default is `True`.
    @param showname
        Name to print in the confirmation message in case `verbose==True`.
    @param mkpath
        If the parent folder(s) of the given filename don't exist, they are
        created if ``mkpath==True`` (default). Otherwise, an error is raised.

    @b Notes

    The data will be put into a 1-element object array to avoid creating
    0-dimensional numpy arrays.
    """
    filename = op.expanduser(filename)
    if not filename.endswith('.npy'):
        filename += '.npy'
    path = op.abspath(op.normpath(op.dirname(filename)))
    if mkpath:
        os.makedirs(path, exist_ok=True)
    if op.exists(filename) and not overwrite:
        raise RuntimeError("File already exists.")
    container = np.empty(1, dtype=object)
    container[0] = data
    tname = None
    try:
        with NamedTemporaryFile(dir=path, delete=False) as tfile:
            tname = tfile.name
            np.save(tfile, container)
        # Writing may have taken some time.
        if op.exists(filename) and not overwrite:
            raise RuntimeError("File already exists.")
        os.replace(tname, filename)
        if verbose:
            print("%s saved to: %s" % (showname, filename))
    finally:
        if tname is not None and op.exists(tname):
            os.unlink(tname)


def load_from_file(filename, allow_pickle=True, retries=0, sleep=5,
                   verbose=False, **kw):
    r"""Load an object from disk.

    If the object had been stored using save_to_file(), the result should be a
    perfect copy of the object.

    @param allow_pickle
        Passed to `numpy.load()` to allow loading objects stored in the file.
    @param retries
        How often to retry in case of failure. Default is `0`, i.e. fail
        immediately if something goes wrong.
    @param sleep
        Seconds to wait between trying. Default is `5`.
    @param verbose
        If `True`, print messages when loading fails. Default is `False`.
    @param **kw
        Further keyword arguments are passed to `numpy.load()`.

    @b Notes

    This assumes the object is the only element of an array stored in the
    file, which will be the case if the file was created using
    save_to_file(). If the data is not a single-element array, it is returned
    as is.
    """
    filename = op.expanduser(filename)
    for retry_count in range(retries+1):
        try:
            result = np.load(filename, allow_pickle=allow_pickle, **kw)
            break
        except (OSError, ValueError) as e:
            if retry_count == retries:
                raise
            if verbose:
                print("Could not load %s" % filename)
                print("%s: %s" % (type(e).__name__, e))
                print("  ... will retry in %s seconds" % sleep)
            time.sleep(sleep)
    if result.shape == (1,):
        return result[0]
    # Not a single value. Return as is.
    return result
