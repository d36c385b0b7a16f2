#!/usr/bin/env python3
"""
Verification tools for sampled frequency responses.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np
from scipy import signal

from .transfer_function import TransferFunction

log = logging.getLogger(__name__)


def reference_response(tf: TransferFunction) -> np.ndarray:
    """Response of the same filter on the same grid from ``scipy.signal.freqz``."""
    if tf.filter_coefficients is None:
        raise ValueError("Response carries no filter coefficients to verify against")
    coeffs = tf.filter_coefficients
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        w, h = signal.freqz(coeffs.get_b_coefficients(), coeffs.get_a_coefficients(),
                            worN=tf.get_size())
    return h


def verify_response(
    tf: TransferFunction,
    rtol: float = 1e-9,
    atol: float = 1e-12,
) -> Dict[str, Any]:
    """
    Check a computed response against scipy's independent implementation.

    Parameters
    ----------
    tf : TransferFunction
        Response to check; must carry its filter coefficients
    rtol : float
        Relative tolerance
    atol : float
        Absolute tolerance

    Returns
    -------
    dict
        Verification results.  Samples where either response is not
        finite are excluded from the error figures and listed under
        ``non_finite``.
    """
    ours = tf.get_gain()
    ref = reference_response(tf)

    finite = np.isfinite(ours) & np.isfinite(ref)
    err = np.abs(ours[finite] - ref[finite])
    scale = np.abs(ref[finite])

    max_abs = float(np.max(err)) if err.size else 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        rel = np.where(scale > 0, err / scale, err)
    max_rel = float(np.max(rel)) if rel.size else 0.0

    # Both must agree on where the degeneracies are.
    same_poles = bool(np.array_equal(np.isfinite(ours), np.isfinite(ref)))
    close = bool(np.allclose(ours[finite], ref[finite], rtol=rtol, atol=atol))

    results = {
        'points': tf.get_size(),
        'max_abs_error': max_abs,
        'max_rel_error': max_rel,
        'non_finite': tf.non_finite_indices().tolist(),
        'same_non_finite': same_poles,
        'matches': close and same_poles,
    }

    log.info("Max |error| vs scipy.signal.freqz: %.3e (rel %.3e) over %d points",
             max_abs, max_rel, tf.get_size())
    if not results['matches']:
        log.warning("Response does NOT match reference (rtol=%.1e, atol=%.1e)", rtol, atol)
    return results


def summarize_response(tf: TransferFunction, sample_rate: Optional[float] = None) -> Dict[str, Any]:
    """
    Key figures of a response: DC gain, gain at the top of the grid,
    peak gain and where it sits, and the -3 dB point below the peak.

    Frequencies are in rad/sample, or Hz when ``sample_rate`` is given.
    """
    freqs = tf.to_hz(sample_rate) if sample_rate else tf.get_frequencies()
    mag_db = tf.magnitude_db()
    finite = np.isfinite(mag_db)

    summary = {
        'dc_gain_db': float(mag_db[0]),
        'last_gain_db': float(mag_db[-1]),
        'peak_gain_db': None,
        'peak_frequency': None,
        'f_3db': None,
        'non_finite': int(np.count_nonzero(~finite)),
    }
    if not np.any(finite):
        return summary

    masked = np.where(finite, mag_db, -np.inf)
    idx_peak = int(np.argmax(masked))
    peak_db = float(masked[idx_peak])
    summary['peak_gain_db'] = peak_db
    summary['peak_frequency'] = float(freqs[idx_peak])

    below = np.flatnonzero(masked[idx_peak:] <= peak_db - 3.0)
    if below.size:
        summary['f_3db'] = float(freqs[idx_peak + below[0]])
    return summary
