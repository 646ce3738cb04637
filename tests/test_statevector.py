"""Tests for amplitudes and state vectors."""

import math

import numpy as np
import pytest

from qubit_quest import Amplitude, StateVector, StateError


# ---------------------------------------------------------------------------
# Amplitude
# ---------------------------------------------------------------------------

def test_amplitude_probability_and_magnitude():
    amp = Amplitude(0.6, 0.8)
    assert amp.probability == pytest.approx(1.0)
    assert amp.magnitude == pytest.approx(1.0)


def test_amplitude_rotation_by_quarter_turn():
    amp = Amplitude(1.0, 0.0).rotated(math.pi / 2)
    assert amp.real == pytest.approx(0.0, abs=1e-12)
    assert amp.imaginary == pytest.approx(1.0)


def test_amplitude_distance():
    assert Amplitude(0.0, 0.0).distance(Amplitude(3.0, 4.0)) == pytest.approx(5.0)


def test_amplitude_complex_roundtrip():
    amp = Amplitude.from_complex(0.5 - 0.25j)
    assert amp == Amplitude(0.5, -0.25)
    assert amp.to_complex() == 0.5 - 0.25j


def test_amplitude_from_bad_pair():
    with pytest.raises(StateError):
        Amplitude.from_pair([1.0])


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 3, 5])
def test_initial_state(n):
    sv = StateVector.initial(n)
    assert len(sv) == 2 ** n
    assert sv.num_qubits == n
    assert sv[0] == Amplitude(1.0, 0.0)
    assert all(a == Amplitude(0.0, 0.0) for a in list(sv)[1:])


def test_initial_state_needs_a_qubit():
    with pytest.raises(StateError):
        StateVector.initial(0)


def test_from_amplitudes_copies_without_normalising():
    sv = StateVector.from_amplitudes([2, 0])
    assert sv[0] == Amplitude(2.0, 0.0)
    assert sv.norm() == pytest.approx(4.0)
    assert not sv.is_normalized()


def test_from_amplitudes_accepts_mixed_inputs():
    sv = StateVector.from_amplitudes([Amplitude(0.6, 0), 0.8j, [0, 0], 0])
    assert sv.num_qubits == 2
    assert sv[1] == Amplitude(0.0, 0.8)


@pytest.mark.parametrize("length", [0, 1, 3, 6])
def test_length_must_be_power_of_two(length):
    with pytest.raises(StateError):
        StateVector.from_amplitudes([0] * length)


def test_pairs_roundtrip():
    pairs = [[0.6, 0.0], [0.0, 0.8]]
    sv = StateVector.from_pairs(pairs)
    assert sv.to_pairs() == pairs


def test_numpy_conversion():
    vec = np.array([1, 1j]) / np.sqrt(2)
    sv = StateVector.from_numpy(vec)
    np.testing.assert_allclose(sv.to_numpy(), vec, atol=1e-12)
    np.testing.assert_allclose(sv.probabilities(), [0.5, 0.5], atol=1e-12)


# ---------------------------------------------------------------------------
# Labels and equality
# ---------------------------------------------------------------------------

def test_basis_label_qubit_zero_rightmost():
    sv = StateVector.initial(2)
    assert sv.basis_label(0) == '00'
    assert sv.basis_label(1) == '01'
    assert sv.basis_label(2) == '10'


def test_equality_and_hash():
    a = StateVector.initial(2)
    b = StateVector.from_amplitudes([1, 0, 0, 0])
    assert a == b
    assert hash(a) == hash(b)
    assert a != StateVector.initial(1)


def test_is_normalized():
    sv = StateVector.from_amplitudes([1 / math.sqrt(2), 1 / math.sqrt(2)])
    assert sv.is_normalized()
    assert sv.is_normalized(tol=1e-12)
