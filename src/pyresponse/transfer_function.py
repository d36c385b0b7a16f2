#!/usr/bin/env python3
"""
Complex Frequency Response Sampler
==================================

Samples H(e^jw) = B(e^-jw) / A(e^-jw) at N equally spaced angular
frequencies

    w[i] = i * pi / N,    i = 0 .. N-1

so the grid covers [0, pi) and never includes pi itself.

Both polynomials are evaluated with Horner's method after reversing the
ascending-order filter coefficients into descending order.  Division is
plain IEEE complex division: a pole sitting exactly on a sample point
produces an inf/nan gain at that index instead of an exception, and
callers are expected to check with :meth:`TransferFunction.non_finite_indices`.
"""

from __future__ import annotations

import logging
import operator
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

import numpy as np

from .array_ops import read_only, reverse
from .complex_poly import ComplexPolynomial
from .errors import IndexOutOfRangeError, InvalidArgumentError
from .filter_coeffs import FilterCoefficients, as_coefficient_array

log = logging.getLogger(__name__)


def _point_count(number_of_points) -> int:
    if isinstance(number_of_points, bool):
        raise InvalidArgumentError("Number of points must be an integer, not bool")
    try:
        n = operator.index(number_of_points)
    except TypeError as e:
        raise InvalidArgumentError(
            f"Number of points must be an integer, got {number_of_points!r}") from e
    if n <= 0:
        raise InvalidArgumentError(f"Number of points must be positive, got {n}")
    return n


@dataclass(frozen=True, eq=False)
class TransferFunction:
    """
    Sampled complex frequency response of a filter.

    Instances are immutable: ``frequencies`` and ``gain`` are read-only
    numpy arrays.  Use :meth:`compute` to build one from filter
    coefficients; the plain constructor only wraps precomputed arrays.

    Attributes
    ----------
    frequencies : np.ndarray
        Angular frequencies in radians/sample, float64, in [0, pi)
    gain : np.ndarray
        Complex response at each frequency, complex128
    filter_coefficients : FilterCoefficients, optional
        The object the response was computed from, as passed to :meth:`compute`
    """
    frequencies: np.ndarray
    gain: np.ndarray
    filter_coefficients: Optional[FilterCoefficients] = None

    def __post_init__(self):
        freqs = read_only(self.frequencies, np.float64)
        gain = read_only(self.gain, np.complex128)
        if len(freqs) != len(gain):
            raise InvalidArgumentError(
                f"frequencies ({len(freqs)}) and gain ({len(gain)}) differ in length")
        object.__setattr__(self, "frequencies", freqs)
        object.__setattr__(self, "gain", gain)

    # ───────────────────────── factory ────────────────────────── #

    @classmethod
    def compute(cls, number_of_points: int, filter_coefficients) -> 'TransferFunction':
        """
        Sample the frequency response of ``filter_coefficients``.

        Parameters
        ----------
        number_of_points : int
            Number of frequencies N (> 0)
        filter_coefficients : FilterCoefficients
            Any object providing ``get_b_coefficients()`` and
            ``get_a_coefficients()`` in ascending power order

        Returns
        -------
        TransferFunction
            Fully populated response

        Raises
        ------
        InvalidArgumentError
            If N is not a positive integer or a coefficient sequence is
            missing or empty.  Nothing is sampled in that case.
            Non-finite coefficients are not rejected; they surface as
            inf/nan gains like any other degeneracy.
        """
        n = _point_count(number_of_points)
        if filter_coefficients is None:
            raise InvalidArgumentError("Filter coefficients must not be None")
        b = as_coefficient_array(filter_coefficients.get_b_coefficients(), "numerator")
        a = as_coefficient_array(filter_coefficients.get_a_coefficients(), "denominator")

        t0 = time.perf_counter()
        log.info("Computing %d-point response (order %d)", n, max(len(b), len(a)) - 1)

        numerator = ComplexPolynomial(reverse(b))
        denominator = ComplexPolynomial(reverse(a))

        frequencies = np.arange(n) * np.pi / n
        exponent = np.exp(-1j * frequencies)

        # Each sample is independent, so evaluate the whole grid at once.
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            gain = numerator.evaluate(exponent) / denominator.evaluate(exponent)

        tf = cls(frequencies, gain, filter_coefficients)

        bad = tf.non_finite_indices()
        if len(bad):
            log.warning("Non-finite gain at %d sample(s); first at w=%.6f rad",
                        len(bad), frequencies[bad[0]])
        log.debug("Response computed in %.3f ms", (time.perf_counter() - t0) * 1e3)
        return tf

    # ───────────────────────── accessors ────────────────────────── #

    def _check_index(self, index) -> int:
        i = operator.index(index)
        if not 0 <= i < len(self.frequencies):
            raise IndexOutOfRangeError(
                f"Index {i} out of range for response of size {len(self.frequencies)}")
        return i

    def get_size(self) -> int:
        return len(self.frequencies)

    def __len__(self) -> int:
        return self.get_size()

    def get_frequencies(self) -> np.ndarray:
        return self.frequencies

    def get_frequency(self, index: int) -> float:
        return float(self.frequencies[self._check_index(index)])

    def get_gain(self, index: Optional[int] = None) -> Union[np.ndarray, complex]:
        """Whole gain array, or the single value at ``index`` when given."""
        if index is None:
            return self.gain
        return complex(self.gain[self._check_index(index)])

    def points(self) -> Iterator[Tuple[float, complex]]:
        """Iterate over (frequency, gain) pairs in frequency order."""
        for w, h in zip(self.frequencies, self.gain):
            yield float(w), complex(h)

    # ───────────────────────── derived views ────────────────────────── #

    def magnitude(self) -> np.ndarray:
        return np.abs(self.gain)

    def magnitude_db(self, floor: float = 1e-300) -> np.ndarray:
        return 20 * np.log10(np.abs(self.gain) + floor)

    def phase(self, unwrap: bool = True) -> np.ndarray:
        """Phase in radians; nan where the gain is not finite."""
        finite = np.isfinite(self.gain)
        ph = np.full(len(self.gain), np.nan)
        ph[finite] = np.angle(self.gain[finite])
        if unwrap and np.any(finite):
            # poles on the grid are skipped when unwrapping
            ph[finite] = np.unwrap(ph[finite])
        return ph

    def group_delay(self) -> np.ndarray:
        """Group delay in samples, -d(phase)/dw, by finite differences."""
        if len(self.frequencies) < 2:
            return np.zeros(len(self.frequencies))
        return -np.gradient(self.phase(unwrap=True), self.frequencies)

    def non_finite_indices(self) -> np.ndarray:
        """Indices where the gain is inf or nan (a pole on a sample point)."""
        return np.flatnonzero(~np.isfinite(self.gain))

    def to_hz(self, sample_rate: float) -> np.ndarray:
        """Frequency axis converted to Hz for the given sample rate."""
        return self.frequencies * sample_rate / (2 * np.pi)

    # ───────────────────────── persistence ────────────────────────── #

    def save(self, path: Union[str, Path]) -> None:
        """Save frequencies, gain and source coefficients to ``.npz``."""
        extra = {}
        if self.filter_coefficients is not None:
            coeffs = self.filter_coefficients
            extra = {"b": coeffs.get_b_coefficients(), "a": coeffs.get_a_coefficients()}
        np.savez(path, frequencies=self.frequencies, gain=self.gain, **extra)
        log.info("Saved %d-point response to %s", len(self), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'TransferFunction':
        with np.load(path) as data:
            coeffs = None
            if "b" in data.files and "a" in data.files:
                coeffs = FilterCoefficients(data["b"], data["a"])
            return cls(data["frequencies"], data["gain"], coeffs)


def compute_transfer_function(number_of_points: int, filter_coefficients) -> TransferFunction:
    """Module-level alias for :meth:`TransferFunction.compute`."""
    return TransferFunction.compute(number_of_points, filter_coefficients)
