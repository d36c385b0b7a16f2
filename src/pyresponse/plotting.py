#!/usr/bin/env python3
"""
Magnitude / phase / group-delay plots of a sampled response.
"""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .transfer_function import TransferFunction


def plot_response(
    tf: TransferFunction,
    sample_rate: Optional[float] = None,
    title: str = 'Frequency Response',
    min_db: float = -120.0,
    show: bool = True,
):
    """
    Plot magnitude (dB), unwrapped phase and group delay.

    Non-finite samples (poles on the grid) are left as gaps.

    Returns
    -------
    matplotlib.figure.Figure
    """
    if sample_rate:
        freq = tf.to_hz(sample_rate) / 1000
        xlabel = 'Frequency (kHz)'
    else:
        freq = tf.get_frequencies() / np.pi
        xlabel = 'Normalized Frequency (×π rad/sample)'

    finite = np.isfinite(tf.get_gain())
    mag_db = np.where(finite, tf.magnitude_db(), np.nan)
    phase = np.where(finite, tf.phase(unwrap=True), np.nan)
    gd = np.where(finite, tf.group_delay(), np.nan)

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(10, 12), sharex=True)

    ax1.plot(freq, mag_db)
    ax1.set_ylabel('Magnitude (dB)')
    ax1.set_title(title)
    ax1.grid(True, alpha=0.3)
    if np.any(finite):
        ax1.set_ylim(max(min_db, np.nanmin(mag_db)) - 5, np.nanmax(mag_db) + 5)

    ax2.plot(freq, phase)
    ax2.set_ylabel('Phase (radians)')
    ax2.grid(True, alpha=0.3)

    ax3.plot(freq, gd)
    ax3.set_xlabel(xlabel)
    ax3.set_ylabel('Group Delay (samples)')
    ax3.grid(True, alpha=0.3)

    fig.tight_layout()
    if show:
        plt.show()
    return fig
