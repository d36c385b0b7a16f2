#!/usr/bin/env python3
"""
Filter coefficients as consumed by the transfer-function sampler.

Ordering contract
-----------------
Both sequences are in *ascending* power of z^-1, index 0 being the
constant term:

    H(z) = (b[0] + b[1] z^-1 + ... ) / (a[0] + a[1] z^-1 + ... )

This is the same convention as ``scipy.signal.lfilter``/``freqz``.
The polynomial evaluator wants descending order, so the sampler reverses
both sequences before evaluating.  Normalisation (a[0] == 1) is the
caller's business and is not enforced here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Sequence, Union

import numpy as np

from .array_ops import read_only
from .errors import InvalidArgumentError

log = logging.getLogger(__name__)


def as_coefficient_array(values, name: str) -> np.ndarray:
    if values is None:
        raise InvalidArgumentError(f"{name} coefficients must not be None")
    arr = np.asarray(values)
    if np.iscomplexobj(arr):
        raise InvalidArgumentError(f"{name} coefficients must be real")
    try:
        arr = arr.astype(np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} coefficients are not numeric: {e}") from e
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise InvalidArgumentError(
            f"{name} coefficients must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise InvalidArgumentError(f"{name} coefficients must not be empty")
    return read_only(arr)


@dataclass(frozen=True, eq=False)
class FilterCoefficients:
    """Numerator (b) and denominator (a) of a digital filter, ascending power order."""
    b: np.ndarray
    a: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "b", as_coefficient_array(self.b, "numerator"))
        object.__setattr__(self, "a", as_coefficient_array(self.a, "denominator"))

    def get_b_coefficients(self) -> np.ndarray:
        return self.b

    def get_a_coefficients(self) -> np.ndarray:
        return self.a

    @property
    def order(self) -> int:
        return max(len(self.b), len(self.a)) - 1

    @property
    def is_fir(self) -> bool:
        """True when the denominator is a bare constant."""
        return len(self.a) == 1

    def normalized(self) -> 'FilterCoefficients':
        """Return a copy scaled so that a[0] == 1."""
        a0 = self.a[0]
        if a0 == 0:
            raise InvalidArgumentError("Cannot normalise: leading denominator coefficient is 0")
        return FilterCoefficients(self.b / a0, self.a / a0)

    def to_dict(self) -> Dict[str, Any]:
        return {"b": self.b.tolist(), "a": self.a.tolist()}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FilterCoefficients':
        return cls(b=d["b"], a=d["a"])

    def save(self, path: Union[str, Path]) -> None:
        """Write the coefficients to an ``.npz`` file (keys ``b`` and ``a``)."""
        np.savez(path, b=self.b, a=self.a)
        log.debug("Saved %d/%d coefficients to %s", len(self.b), len(self.a), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'FilterCoefficients':
        """Read coefficients previously written by :meth:`save`."""
        log.info("Loading filter coefficients from %s...", path)
        try:
            data = np.load(path)
        except (ValueError, EOFError) as e:
            raise InvalidArgumentError(f"{path} is not an .npz archive: {e}") from e
        if not hasattr(data, "files"):
            raise InvalidArgumentError(f"{path} is not an .npz archive")
        with data:
            missing = {"b", "a"} - set(data.files)
            if missing:
                raise InvalidArgumentError(
                    f"{path} is missing coefficient arrays: {', '.join(sorted(missing))}")
            return cls(b=data["b"], a=data["a"])

    @classmethod
    def fir(cls, taps: Sequence[float]) -> 'FilterCoefficients':
        """FIR filter: the taps over a unit denominator."""
        return cls(b=taps, a=[1.0])
