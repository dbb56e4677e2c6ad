"""Tests for the state vector engine."""

import numpy as np
import pytest

from qcircuit.engine.errors import WireIndexError
from qcircuit.engine.gate_registry import GateRegistry
from qcircuit.engine.state_vector import StateVector, wire_mask


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_initialize_is_all_zeros():
    sv = StateVector.initialize(3)
    expected = np.zeros(8, dtype=np.complex128)
    expected[0] = 1.0
    np.testing.assert_allclose(sv.data, expected)
    assert sv.num_qubits == 3
    assert sv.dimension == 8


def test_initialize_rejects_zero_qubits():
    with pytest.raises(ValueError):
        StateVector.initialize(0)


def test_no_hard_qubit_cap():
    sv = StateVector.initialize(10)
    assert sv.dimension == 1024


def test_from_amplitudes_requires_power_of_two():
    with pytest.raises(ValueError):
        StateVector.from_amplitudes([1, 0, 0])
    with pytest.raises(ValueError):
        StateVector.from_amplitudes([1])


def test_data_is_read_only():
    sv = StateVector.initialize(2)
    with pytest.raises(ValueError):
        sv.data[0] = 0.5


def test_wire_zero_is_most_significant_bit():
    assert wire_mask(0, 3) == 0b100
    assert wire_mask(2, 3) == 0b001
    sv = StateVector.initialize(3).apply_gate("X", 0)
    assert sv.probabilities[0b100] == pytest.approx(1.0)


def test_bitstring_is_wire_ordered():
    sv = StateVector.initialize(3)
    assert sv.bitstring(0b110) == "110"


# ---------------------------------------------------------------------------
# Immutability and normalization
# ---------------------------------------------------------------------------

def test_apply_gate_returns_new_state():
    sv = StateVector.initialize(2)
    out = sv.apply_gate("H", 0)
    assert out is not sv
    np.testing.assert_allclose(sv.data, [1, 0, 0, 0])


def test_normalized_all_zero_vector_does_not_divide_by_zero():
    sv = StateVector.from_amplitudes(np.zeros(4))
    np.testing.assert_allclose(sv.normalized().data, np.zeros(4))


def test_normalized_scales_to_unit_norm():
    sv = StateVector.from_amplitudes([3, 4])
    assert sv.normalized().norm == pytest.approx(1.0)


@pytest.mark.parametrize("name", GateRegistry.instance().gate_names())
def test_every_gate_preserves_norm(random_state, placement, name):
    target, c1, c2 = placement(name)
    for _ in range(10):
        psi = random_state(3)
        out = psi.apply_gate(name, target, c1, c2, param=0.4)
        assert out.norm ** 2 == pytest.approx(psi.norm ** 2, abs=1e-9)


# ---------------------------------------------------------------------------
# Gate semantics
# ---------------------------------------------------------------------------

def test_hadamard_superposition():
    sv = StateVector.initialize(1).apply_gate("H", 0)
    np.testing.assert_allclose(sv.data, np.array([1, 1]) / np.sqrt(2), atol=1e-12)


def test_cnot_only_fires_with_control_set():
    sv = StateVector.initialize(2).apply_gate("CNOT", 1, 0)
    assert sv.probabilities[0] == pytest.approx(1.0)
    sv = StateVector.initialize(2).apply_gate("X", 0).apply_gate("CNOT", 1, 0)
    assert sv.probabilities[0b11] == pytest.approx(1.0)


def test_toffoli_needs_both_controls():
    sv = StateVector.initialize(3).apply_gate("X", 0).apply_gate("CCX", 2, 0, 1)
    assert sv.probabilities[0b100] == pytest.approx(1.0)
    sv = sv.apply_gate("X", 1).apply_gate("CCX", 2, 0, 1)
    assert sv.probabilities[0b111] == pytest.approx(1.0)


def test_swap_exchanges_adjacent_wires():
    sv = StateVector.initialize(3).apply_gate("X", 1).apply_gate("SWAP", 1)
    assert sv.probabilities[0b001] == pytest.approx(1.0)


def test_cswap_exchanges_target_and_partner_under_control():
    sv = StateVector.initialize(3).apply_gate("X", 2).apply_gate("CSWAP", 1, 0)
    assert sv.probabilities[0b001] == pytest.approx(1.0)
    sv = sv.apply_gate("X", 0).apply_gate("CSWAP", 1, 0)
    assert sv.probabilities[0b110] == pytest.approx(1.0)


def test_phase_gates():
    plus = StateVector.initialize(1).apply_gate("X", 0)
    assert plus.apply_gate("Z", 0).data[1] == pytest.approx(-1)
    assert plus.apply_gate("S", 0).data[1] == pytest.approx(1j)
    assert plus.apply_gate("T", 0).data[1] == pytest.approx(np.exp(1j * np.pi / 4))
    assert plus.apply_gate("RZ", 0, param=np.pi).data[1] == pytest.approx(1j)


# ---------------------------------------------------------------------------
# No-op and guard behaviour
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("name", ["CNOT", "CZ", "CPHASE", "CSWAP"])
def test_missing_control_is_a_no_op(random_state, name):
    psi = random_state(3)
    out = psi.apply_gate(name, 1)
    np.testing.assert_allclose(out.data, psi.data)


def test_toffoli_with_one_control_is_a_no_op(random_state):
    psi = random_state(3)
    np.testing.assert_allclose(psi.apply_gate("CCX", 2, 0).data, psi.data)


def test_swap_on_last_wire_is_a_no_op(random_state):
    psi = random_state(2)
    np.testing.assert_allclose(psi.apply_gate("SWAP", 1).data, psi.data)


def test_target_out_of_range_raises():
    with pytest.raises(WireIndexError):
        StateVector.initialize(2).apply_gate("H", 2)


def test_control_out_of_range_raises():
    with pytest.raises(WireIndexError):
        StateVector.initialize(2).apply_gate("CNOT", 0, 5)


def test_control_equal_to_target_raises():
    with pytest.raises(WireIndexError):
        StateVector.initialize(2).apply_gate("CNOT", 0, 0)


def test_control_only_in_second_slot_is_a_no_op(random_state):
    psi = random_state(2)
    np.testing.assert_allclose(psi.apply_gate("CNOT", 1, None, 0).data, psi.data)


def test_cswap_control_on_partner_wire_raises():
    with pytest.raises(WireIndexError, match="partner"):
        StateVector.initialize(3).apply_gate("CSWAP", 0, 1)


def test_wire_index_error_is_value_error():
    with pytest.raises(ValueError):
        StateVector.initialize(1).apply_gate("X", -1)


def test_inner_product_and_dimension_check():
    a = StateVector.initialize(1)
    b = a.apply_gate("X", 0)
    assert a.inner(b) == pytest.approx(0)
    assert a.inner(a) == pytest.approx(1)
    with pytest.raises(ValueError):
        a.inner(StateVector.initialize(2))
