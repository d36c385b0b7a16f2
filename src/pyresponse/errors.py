#!/usr/bin/env python3
"""
Exception hierarchy for frequency-response computation.
"""


class PyResponseError(Exception):
    """Base class for all errors raised by pyresponse."""


class InvalidArgumentError(PyResponseError, ValueError):
    """Bad point count or unusable filter coefficients."""


class IndexOutOfRangeError(PyResponseError, IndexError):
    """Accessor index outside [0, N)."""
