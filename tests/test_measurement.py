"""Tests for Born-rule measurement sampling."""

import numpy as np
import pytest

from qcircuit.engine.algorithms import AlgorithmTemplate
from qcircuit.engine.measurement import (
    MeasurementEngine, MeasurementSession, SeededStream, seeded_random,
)
from qcircuit.engine.simulator import Simulator
from qcircuit.engine.state_vector import StateVector


@pytest.fixture
def bell():
    return Simulator().execute(AlgorithmTemplate.bell_state())


# ---------------------------------------------------------------------------
# Seeded draws
# ---------------------------------------------------------------------------

def test_seeded_random_is_deterministic_and_in_range():
    draws = seeded_random(np.arange(0, 5000))
    assert np.all(draws >= 0.0) and np.all(draws < 1.0)
    np.testing.assert_array_equal(draws, seeded_random(np.arange(0, 5000)))


def test_seeded_random_scalar_matches_vector():
    assert float(seeded_random(42)) == seeded_random(np.array([42]))[0]


def test_seeded_random_is_roughly_uniform():
    draws = seeded_random(np.arange(1, 20001))
    assert abs(draws.mean() - 0.5) < 0.02


def test_stream_advances():
    stream = SeededStream(10)
    first = stream.next()
    assert first == float(seeded_random(10))
    np.testing.assert_array_equal(stream.take(3), seeded_random(np.arange(11, 14)))
    assert stream.seed == 14


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

def test_same_seed_gives_identical_counts(bell):
    a = MeasurementEngine.measure(bell, 1024, seed=42)
    b = MeasurementEngine.measure(bell, 1024, seed=42)
    assert a.counts == b.counts
    assert a.collapsed == b.collapsed


def test_bell_counts_are_balanced(bell):
    result = MeasurementEngine.measure(bell, 1024, seed=42)
    assert set(result.counts) <= {"00", "11"}
    assert sum(result.counts.values()) == 1024
    for label in ("00", "11"):
        assert 0.35 <= result.counts[label] / 1024 <= 0.65
    assert result.collapsed in {"00", "11"}
    assert result.collapsed == max(result.counts, key=result.counts.get)


def test_basis_state_always_measures_itself():
    sv = StateVector.initialize(3).apply_gate("X", 0).apply_gate("X", 2)
    result = MeasurementEngine.measure(sv, 200, seed=7)
    assert result.counts == {"101": 200}
    assert result.collapsed == "101"
    assert result.probability("101") == 1.0


def test_bitstrings_are_zero_padded():
    result = MeasurementEngine.measure(StateVector.initialize(4), 10, seed=1)
    assert list(result.counts) == ["0000"]


def test_zero_shots():
    sv = StateVector.initialize(2)
    result = MeasurementEngine.measure(sv, 0, seed=3)
    assert result.counts == {}
    assert result.collapsed == "00"
    assert result.probability("00") == 0.0


def test_negative_shots_rejected(bell):
    with pytest.raises(ValueError):
        MeasurementEngine.measure(bell, -1)


def test_sample_frequencies_follow_born_rule():
    sv = StateVector.from_amplitudes([np.sqrt(0.2), np.sqrt(0.8)])
    result = MeasurementEngine.measure(sv, 5000, seed=11)
    assert result.counts["1"] / 5000 == pytest.approx(0.8, abs=0.04)


def test_draw_past_rounded_total_lands_on_last_nonzero_outcome():
    # Total probability slightly below 1 after normalization rounding.
    sv = StateVector.from_amplitudes([0.6, 0.8, 0.0, 0.0])
    indices = MeasurementEngine.sample_indices(sv, 2000, seed=5)
    assert set(np.unique(indices)) <= {0, 1}


def test_zero_draw_never_selects_impossible_outcome():
    # seeded_random(0) is exactly 0.0
    assert float(seeded_random(0)) == 0.0
    one = StateVector.initialize(1).apply_gate("X", 0)
    result = MeasurementEngine.measure(one, 10, seed=0)
    assert result.counts == {"1": 10}


def test_zero_draw_skips_leading_zero_amplitudes():
    sv = StateVector.from_amplitudes([0.0, 0.0, 0.6, 0.8])
    indices = MeasurementEngine.sample_indices(sv, 50, seed=-10)
    assert set(np.unique(indices)) <= {2, 3}


def test_collapse_returns_basis_state(bell):
    collapsed = MeasurementEngine.collapse(bell, "11")
    assert collapsed.probabilities[3] == pytest.approx(1.0)
    with pytest.raises(ValueError):
        MeasurementEngine.collapse(bell, "1")


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def test_session_advances_seed_by_shots(bell):
    session = MeasurementSession(seed=42, shots=100)
    first = session.measure(bell)
    assert session.seed == 142
    second = session.measure(bell)
    assert session.seed == 242
    assert first.counts == MeasurementEngine.measure(bell, 100, 42).counts
    assert second.counts == MeasurementEngine.measure(bell, 100, 142).counts


def test_session_shot_override(bell):
    session = MeasurementSession(seed=0, shots=100)
    result = session.measure(bell, shots=10)
    assert result.shots == 10
    assert session.seed == 10
