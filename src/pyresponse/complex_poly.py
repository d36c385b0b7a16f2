#!/usr/bin/env python3
"""
Complex polynomial evaluation
=============================

A polynomial is held by its coefficients in *descending* power order,

    p(x) = c[0]*x^k + c[1]*x^(k-1) + ... + c[k]

and evaluated with Horner's scheme: one multiply-add per coefficient,
highest degree first.  Coefficients are promoted to complex128 so the
same object serves real and complex filters.
"""

from typing import Sequence, Union

import numpy as np

from .array_ops import read_only

ArrayLike = Union[complex, float, Sequence[complex], np.ndarray]


class ComplexPolynomial:
    """
    Immutable polynomial with complex coefficients.

    Parameters
    ----------
    coefficients : sequence of complex
        Coefficients ordered from the highest power down to the constant
        term.  An empty sequence is the constant-zero polynomial.
    """

    def __init__(self, coefficients: Sequence[complex]):
        self._coefficients = read_only(coefficients, np.complex128)

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients

    @property
    def degree(self) -> int:
        """Polynomial degree; -1 for the empty (zero) polynomial."""
        return len(self._coefficients) - 1

    def evaluate(self, x: ArrayLike) -> Union[np.complex128, np.ndarray]:
        """
        Evaluate the polynomial at ``x`` using Horner's method.

        ``x`` may be a scalar or an array; arrays are evaluated
        elementwise and an array of the same shape is returned.
        The empty polynomial evaluates to zero everywhere.
        """
        z = np.asarray(x, dtype=np.complex128)
        acc = np.zeros_like(z)
        for c in self._coefficients:
            acc = acc * z + c
        return acc[()] if acc.ndim == 0 else acc

    __call__ = evaluate

    def __len__(self) -> int:
        return len(self._coefficients)

    def __repr__(self) -> str:
        return f"ComplexPolynomial({self._coefficients.tolist()!r})"
