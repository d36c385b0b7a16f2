#!/usr/bin/env python3
"""
Tests for filter coefficients and the transfer-function sampler.
"""

import cmath
import dataclasses
import math
import os
import sys
import warnings

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from pyresponse import (
    FilterCoefficients,
    IndexOutOfRangeError,
    InvalidArgumentError,
    TransferFunction,
    compute_transfer_function,
)

ONE_POLE = FilterCoefficients(b=[1.0], a=[1.0, -0.5])


class PlainCoefficients:
    """Anything exposing the two getters is accepted."""

    def __init__(self, b, a):
        self._b, self._a = b, a

    def get_b_coefficients(self):
        return self._b

    def get_a_coefficients(self):
        return self._a


# ───────────────────────── grid ────────────────────────── #

@pytest.mark.parametrize("n", [1, 2, 7, 64, 1000])
def test_size_and_frequency_grid(n):
    tf = TransferFunction.compute(n, ONE_POLE)
    assert tf.get_size() == n
    assert len(tf) == n
    assert len(tf.get_frequencies()) == len(tf.get_gain()) == n
    assert tf.get_frequency(0) == 0.0
    assert tf.get_frequency(n - 1) == pytest.approx((n - 1) * math.pi / n)
    assert tf.get_frequency(n - 1) < math.pi
    assert np.all(np.diff(tf.get_frequencies()) > 0)


def test_frequencies_follow_formula():
    n = 16
    tf = compute_transfer_function(n, ONE_POLE)
    expected = [i * math.pi / n for i in range(n)]
    np.testing.assert_allclose(tf.get_frequencies(), expected, rtol=0, atol=1e-15)


# ───────────────────────── gain ────────────────────────── #

def test_identity_filter_is_flat():
    tf = TransferFunction.compute(32, FilterCoefficients([1.0], [1.0]))
    np.testing.assert_allclose(tf.get_gain(), np.ones(32), atol=1e-12)
    assert all(g == pytest.approx(1 + 0j) for _, g in tf.points())


def test_one_pole_dc_gain():
    tf = TransferFunction.compute(128, ONE_POLE)
    assert tf.get_gain(0) == pytest.approx(2 + 0j)
    # H(e^jw) = 1 / (1 - 0.5 e^-jw)
    w = tf.get_frequency(40)
    assert tf.get_gain(40) == pytest.approx(1 / (1 - 0.5 * cmath.exp(-1j * w)))


def test_pure_delay_has_constant_group_delay():
    tf = TransferFunction.compute(64, FilterCoefficients.fir([0.0, 0.0, 1.0]))
    np.testing.assert_allclose(tf.magnitude(), 1.0, atol=1e-12)
    np.testing.assert_allclose(tf.group_delay(), 2.0, atol=1e-9)
    np.testing.assert_allclose(tf.phase(), -2 * tf.get_frequencies(), atol=1e-9)


def test_pole_on_grid_gives_non_finite_gain():
    # 1 / (1 - z^-1) has a pole at w = 0
    coeffs = FilterCoefficients(b=[1.0], a=[1.0, -1.0])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        tf = TransferFunction.compute(8, coeffs)
    assert not cmath.isfinite(tf.get_gain(0))
    assert all(cmath.isfinite(tf.get_gain(i)) for i in range(1, 8))
    assert tf.non_finite_indices().tolist() == [0]
    phase = tf.phase()
    assert np.isnan(phase[0])
    assert np.all(np.isfinite(phase[1:]))


def test_magnitude_db_of_one_pole():
    tf = TransferFunction.compute(8, ONE_POLE)
    assert tf.magnitude_db()[0] == pytest.approx(20 * math.log10(2))


def test_to_hz():
    tf = TransferFunction.compute(4, ONE_POLE)
    np.testing.assert_allclose(tf.to_hz(48000), [0, 6000, 12000, 18000])


# ───────────────────────── immutability / bounds ────────────────────────── #

def test_results_are_read_only():
    tf = TransferFunction.compute(8, ONE_POLE)
    with pytest.raises(ValueError):
        tf.get_gain()[0] = 0
    with pytest.raises(ValueError):
        tf.get_frequencies()[0] = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        tf.gain = np.zeros(8)


def test_results_cannot_be_made_writeable():
    tf = TransferFunction.compute(8, ONE_POLE)
    gain = tf.get_gain()
    with pytest.raises(ValueError):
        gain.flags.writeable = True
    with pytest.raises(ValueError):
        tf.get_frequencies().flags.writeable = True
    with pytest.raises(ValueError):
        ONE_POLE.get_a_coefficients().flags.writeable = True
    assert tf.get_gain(0) == pytest.approx(2 + 0j)


@pytest.mark.parametrize("index", [8, 100, -1])
def test_out_of_range_index(index):
    tf = TransferFunction.compute(8, ONE_POLE)
    with pytest.raises(IndexOutOfRangeError):
        tf.get_gain(index)
    with pytest.raises(IndexError):
        tf.get_frequency(index)
    # Object still usable afterwards
    assert tf.get_size() == 8
    assert tf.get_gain(0) == pytest.approx(2 + 0j)


# ───────────────────────── invalid input ────────────────────────── #

@pytest.mark.parametrize("n", [0, -5, 2.5, True, "8", None])
def test_bad_point_count(n):
    with pytest.raises(InvalidArgumentError):
        TransferFunction.compute(n, ONE_POLE)


def test_numpy_integer_point_count():
    assert TransferFunction.compute(np.int64(5), ONE_POLE).get_size() == 5


@pytest.mark.parametrize("b, a", [
    ([], [1.0]),
    ([1.0], []),
    (None, [1.0]),
    ([1.0], None),
])
def test_bad_coefficients_from_collaborator(b, a):
    with pytest.raises(InvalidArgumentError):
        TransferFunction.compute(8, PlainCoefficients(b, a))


def test_missing_coefficients():
    with pytest.raises(InvalidArgumentError):
        TransferFunction.compute(8, None)


def test_duck_typed_coefficients(tmp_path):
    source = PlainCoefficients([1.0], (1.0, -0.5))
    tf = TransferFunction.compute(8, source)
    assert tf.filter_coefficients is source
    assert tf.get_gain(0) == pytest.approx(2 + 0j)

    path = tmp_path / "duck.npz"
    tf.save(path)
    np.testing.assert_array_equal(TransferFunction.load(path).filter_coefficients.a, [1.0, -0.5])


def test_non_finite_coefficients_surface_as_gain():
    tf = TransferFunction.compute(8, FilterCoefficients([np.nan], [1.0]))
    assert tf.non_finite_indices().tolist() == list(range(8))

    tf = TransferFunction.compute(8, FilterCoefficients([1.0], [1.0, np.inf]))
    assert tf.get_size() == 8


def test_plain_constructor_checks_lengths():
    with pytest.raises(InvalidArgumentError):
        TransferFunction(np.zeros(3), np.zeros(4))
    empty = TransferFunction([], [])
    assert empty.get_size() == 0


# ───────────────────────── FilterCoefficients ────────────────────────── #

def test_coefficient_validation():
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients([1.0 + 1j], [1.0])
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients([[1.0, 2.0]], [1.0])
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients(["x"], [1.0])


def test_coefficient_properties():
    c = FilterCoefficients([0.5, 0.5, 0.25], [2.0, -1.0])
    assert c.order == 2
    assert not c.is_fir
    n = c.normalized()
    np.testing.assert_allclose(n.a, [1.0, -0.5])
    np.testing.assert_allclose(n.b, [0.25, 0.25, 0.125])
    assert FilterCoefficients.fir([1, 2, 3]).is_fir
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients([1.0], [0.0, 1.0]).normalized()


def test_coefficient_dict_and_file(tmp_path):
    c = FilterCoefficients.from_dict(ONE_POLE.to_dict())
    np.testing.assert_array_equal(c.b, ONE_POLE.b)
    np.testing.assert_array_equal(c.a, ONE_POLE.a)

    path = tmp_path / "one_pole.npz"
    ONE_POLE.save(path)
    loaded = FilterCoefficients.load(path)
    np.testing.assert_array_equal(loaded.a, [1.0, -0.5])

    bad = tmp_path / "bad.npz"
    np.savez(bad, b=[1.0])
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients.load(bad)


@pytest.mark.parametrize("content", ["1.0 -0.5\n", ""])
def test_coefficient_file_not_an_archive(tmp_path, content):
    path = tmp_path / "coeffs.txt"
    path.write_text(content)
    with pytest.raises(InvalidArgumentError):
        FilterCoefficients.load(path)


def test_response_file(tmp_path):
    tf = TransferFunction.compute(16, ONE_POLE)
    path = tmp_path / "resp.npz"
    tf.save(path)
    back = TransferFunction.load(path)
    np.testing.assert_array_equal(back.get_gain(), tf.get_gain())
    np.testing.assert_array_equal(back.get_frequencies(), tf.get_frequencies())
    np.testing.assert_array_equal(back.filter_coefficients.a, ONE_POLE.a)
