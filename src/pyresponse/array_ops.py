#!/usr/bin/env python3
"""
Small array helpers shared by the response code.
"""

import numpy as np


def reverse(values) -> np.ndarray:
    """Return a new array holding ``values`` in reverse order."""
    arr = np.asarray(values)
    return arr[::-1].copy()


def read_only(values, dtype=None) -> np.ndarray:
    """
    Copy ``values`` into a 1-D array that callers cannot write to.

    The owning buffer is frozen and a view of it is returned; numpy
    refuses to set ``writeable`` back on a view of a read-only base.
    """
    arr = np.array(np.ravel(values), dtype=dtype)
    arr.flags.writeable = False
    return arr.view()
