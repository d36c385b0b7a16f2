#!/usr/bin/env python3
"""
Command-line front end: sample a filter's frequency response.

CLI examples
------------
# One-pole low-pass 1/(1 - 0.5 z^-1), 1024 points:
pyresponse --b 1 --a 1 -0.5 --points 1024

# 5-tap moving average, response in Hz at 48 kHz, saved to ma5.npz/ma5.txt:
pyresponse --b 0.2 0.2 0.2 0.2 0.2 --sample-rate 48000 --output ma5

# Coefficients from an .npz file (arrays 'b' and 'a'), checked against scipy:
pyresponse --load biquad.npz --verify --plot
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

import numpy as np

from .errors import InvalidArgumentError, PyResponseError
from .filter_coeffs import FilterCoefficients
from .transfer_function import TransferFunction
from .verification import summarize_response, verify_response

log = logging.getLogger("pyresponse")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pyresponse",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description=(
            "Sample the complex frequency response H(e^jw) of a digital filter\n"
            "at N points w = i*pi/N, i = 0..N-1.  Coefficients are given in\n"
            "ascending power of z^-1 (b[0] + b[1] z^-1 + ...)."
        ),
    )

    # ─── Coefficient source ───
    g = p.add_argument_group("Coefficients")
    g.add_argument("--b", type=float, nargs="+", metavar="B",
                   help="Numerator coefficients b[0] b[1] ...")
    g.add_argument("--a", type=float, nargs="+", metavar="A",
                   help="Denominator coefficients a[0] a[1] ... "
                        "Defaults to 1 (FIR) when only --b is given.")
    g.add_argument("--load", type=Path,
                   help="Read coefficients from an .npz file holding arrays 'b' and 'a'.")
    g.add_argument("--normalize", action="store_true",
                   help="Scale both polynomials so that a[0] == 1 before sampling.")

    # ─── Sampling ───
    g = p.add_argument_group("Sampling")
    g.add_argument("--points", "-N", type=int, default=512,
                   help="Number of frequency points in [0, pi).")
    g.add_argument("--sample-rate", type=float,
                   help="Report frequencies in Hz for this sample rate.")

    # ─── Output/Analysis ───
    g = p.add_argument_group("Output/Analysis")
    g.add_argument("--output", "-o",
                   help="Filename stem; writes STEM.npz and a STEM.txt table.")
    g.add_argument("--verify", action="store_true",
                   help="Cross-check the result against scipy.signal.freqz.")
    g.add_argument("--plot", action="store_true",
                   help="Show magnitude, phase and group-delay plots (matplotlib).")

    # ─── Misc ───
    g = p.add_argument_group("Misc")
    g.add_argument("--debug", action="store_true",
                   help="Enable DEBUG-level logging for extra detail.")
    g.add_argument("--log-file", type=str,
                   help="Also write log output to this file.")
    return p


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_format = "%(levelname)s: %(message)s"
    if log_file:
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
        handlers.append(logging.FileHandler(log_file, mode="w"))
    logging.basicConfig(
        handlers=handlers,
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        force=True,
    )


def load_coefficients(args: argparse.Namespace) -> FilterCoefficients:
    if args.load is not None:
        if args.b or args.a:
            raise InvalidArgumentError("--load cannot be combined with --b/--a")
        coeffs = FilterCoefficients.load(args.load)
    elif args.b:
        coeffs = FilterCoefficients(args.b, args.a if args.a else [1.0])
    else:
        raise InvalidArgumentError("No coefficients given: use --b [--a] or --load")
    if args.normalize:
        coeffs = coeffs.normalized()
    return coeffs


def write_table(path: Path, tf: TransferFunction, sample_rate: Optional[float] = None) -> None:
    """Plain-text table: frequency, Re, Im, magnitude (dB), unwrapped phase."""
    freqs = tf.to_hz(sample_rate) if sample_rate else tf.get_frequencies()
    unit = "Hz" if sample_rate else "rad/sample"
    gain = tf.get_gain()
    table = np.column_stack([freqs, gain.real, gain.imag, tf.magnitude_db(), tf.phase()])
    np.savetxt(path, table, fmt="%.18e",
               header=f"frequency[{unit}] real imag magnitude[dB] phase[rad]")


def print_summary(tf: TransferFunction, sample_rate: Optional[float] = None) -> None:
    s = summarize_response(tf, sample_rate)
    unit = "Hz" if sample_rate else "rad/sample"

    def fmt(v):
        return "n/a" if v is None else f"{v:.6g}"

    print("\n=== Frequency Response Summary ===")
    print(f"Points:            {tf.get_size()}")
    print(f"Filter order:      {tf.filter_coefficients.order}")
    print(f"DC gain:           {fmt(s['dc_gain_db'])} dB")
    print(f"Gain at last pt:   {fmt(s['last_gain_db'])} dB")
    print(f"Peak gain:         {fmt(s['peak_gain_db'])} dB @ {fmt(s['peak_frequency'])} {unit}")
    print(f"-3 dB below peak:  {fmt(s['f_3db'])} {unit}")
    if s['non_finite']:
        print(f"Non-finite gain:   {s['non_finite']} point(s) (pole on grid)")


def run(args: argparse.Namespace) -> int:
    t0 = time.perf_counter()
    coeffs = load_coefficients(args)
    log.debug("b = %s", coeffs.b.tolist())
    log.debug("a = %s", coeffs.a.tolist())

    tf = TransferFunction.compute(args.points, coeffs)
    print_summary(tf, args.sample_rate)

    ok = True
    if args.verify:
        results = verify_response(tf)
        ok = results['matches']
        log.info("Verification %s", "PASS" if ok else "FAIL")

    if args.output:
        stem = args.output
        tf.save(stem + ".npz")
        write_table(Path(stem + ".txt"), tf, args.sample_rate)
        log.info("Saved %s.npz and %s.txt", stem, stem)

    if args.plot:
        from .plotting import plot_response
        plot_response(tf, sample_rate=args.sample_rate,
                      title=f"Frequency response (order {coeffs.order})")

    log.info("Done in %.2f s", time.perf_counter() - t0)
    return 0 if ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.debug, args.log_file)
        return run(args)
    except (PyResponseError, OSError) as e:
        logging.error("Fatal: %s", e)
        logging.debug("Traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
