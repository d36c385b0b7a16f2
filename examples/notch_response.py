#!/usr/bin/env python3
"""
Example: frequency response of a 50 Hz notch at 1 kHz sample rate.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pyresponse import FilterCoefficients, TransferFunction, summarize_response, verify_response
from pyresponse.plotting import plot_response
from scipy import signal
import logging


def main():
    # Setup logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    fs = 1000.0
    b, a = signal.iirnotch(50.0, Q=30.0, fs=fs)
    coeffs = FilterCoefficients(b, a)

    tf = TransferFunction.compute(4096, coeffs)

    print("\nNotch filter response:")
    print("-" * 50)
    summary = summarize_response(tf, sample_rate=fs)
    print(f"DC gain:        {summary['dc_gain_db']:.4f} dB")
    print(f"Peak gain:      {summary['peak_gain_db']:.4f} dB")

    hz = tf.to_hz(fs)
    idx = int(abs(hz - 50.0).argmin())
    print(f"Gain at {hz[idx]:.2f} Hz: {tf.magnitude_db()[idx]:.1f} dB")

    results = verify_response(tf)
    print(f"Max error vs scipy.signal.freqz: {results['max_abs_error']:.2e}")
    print("✓ Matches reference" if results['matches'] else "✗ Mismatch")

    plot_response(tf, sample_rate=fs, title="50 Hz notch (Q=30)")


if __name__ == '__main__':
    main()
