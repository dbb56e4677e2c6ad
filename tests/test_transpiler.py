"""Tests for transpilation into {H, T, CNOT}."""

import numpy as np
import pytest

from qcircuit.engine.algorithms import AlgorithmTemplate
from qcircuit.engine.circuit import GateInstance, QuantumCircuit
from qcircuit.engine.gate_registry import GateRegistry, UNIVERSAL_GATE_SET
from qcircuit.engine.simulator import Simulator, apply_gate_instance
from qcircuit.engine.transpiler import Transpiler


@pytest.fixture
def transpiler():
    return Transpiler()


def _all_gate_circuit(placement):
    gates = []
    for pos, name in enumerate(GateRegistry.instance().gate_names()):
        target, c1, c2 = placement(name)
        gates.append(GateInstance(name, target, pos, control_wire=c1, control_wire2=c2,
                                  param=1.0 if name == "RZ" else None, gate_id=f"g{pos}"))
    return gates


def test_closure_over_every_gate(transpiler, placement):
    out = transpiler.transpile(_all_gate_circuit(placement), num_qubits=3)
    assert out
    assert {g.gate_type for g in out} <= UNIVERSAL_GATE_SET


def test_closure_over_presets(transpiler):
    for circuit in AlgorithmTemplate.presets().values():
        out = transpiler.transpile(circuit.gates, circuit.num_qubits)
        assert {g.gate_type for g in out} <= UNIVERSAL_GATE_SET


def test_fresh_positions_and_ids(transpiler):
    gates = [GateInstance("CZ", 1, 4, control_wire=0, gate_id="gate-3")]
    out = transpiler.transpile(gates)
    assert [g.position for g in out] == [0, 1, 2]
    assert [g.gate_id for g in out] == ["gate-3-t0", "gate-3-t1", "gate-3-t2"]
    assert [(g.gate_type, g.target, g.control_wire) for g in out] == \
        [("H", 1, None), ("CNOT", 1, 0), ("H", 1, None)]


def test_follows_position_order(transpiler):
    gates = [GateInstance("T", 0, 5, gate_id="late"), GateInstance("H", 0, 1, gate_id="early")]
    out = transpiler.transpile(gates)
    assert [g.gate_id for g in out] == ["early-t0", "late-t0"]


def test_swap_roles(transpiler):
    out = transpiler.transpile([GateInstance("SWAP", 1, 0, gate_id="s")], num_qubits=3)
    assert [(g.target, g.control_wire) for g in out] == [(2, 1), (1, 2), (2, 1)]


def test_missing_control_emits_nothing(transpiler):
    assert transpiler.transpile([GateInstance("CNOT", 1, 0, gate_id="c")]) == []
    assert transpiler.transpile([GateInstance("CCX", 2, 0, control_wire=0, gate_id="c")]) == []


def test_swap_on_last_wire_emits_nothing(transpiler):
    assert transpiler.transpile([GateInstance("SWAP", 1, 0, gate_id="s")], num_qubits=2) == []


def test_input_is_untouched(transpiler):
    gates = [GateInstance("X", 0, 3, gate_id="x")]
    transpiler.transpile(gates)
    assert (gates[0].gate_type, gates[0].position) == ("X", 3)


@pytest.mark.parametrize("name", ["H", "X", "Z", "S", "T", "CNOT", "CZ", "SWAP"])
def test_exact_decompositions_reproduce_the_gate(transpiler, random_state, placement, name):
    assert GateRegistry.instance().get(name).exact_decomposition
    target, c1, c2 = placement(name)
    gate = GateInstance(name, target, 0, control_wire=c1, control_wire2=c2, gate_id="g")
    for _ in range(5):
        psi = random_state(3)
        expected = apply_gate_instance(psi, gate)
        actual = psi
        for step in transpiler.transpile([gate], num_qubits=3):
            actual = apply_gate_instance(actual, step)
        np.testing.assert_allclose(actual.data, expected.data, atol=1e-12)


def test_transpiled_circuit_is_executable(transpiler, placement):
    gates = _all_gate_circuit(placement)
    out = transpiler.transpile(gates, num_qubits=3)
    circuit = QuantumCircuit(num_qubits=3, gates=out)
    assert circuit.gate_count() == len(out)


def test_swap_on_last_wire_without_wire_count_stays_executable(transpiler):
    circuit = QuantumCircuit(num_qubits=2, gates=[
        GateInstance("X", 1, 0), GateInstance("SWAP", 1, 1)])
    out = transpiler.transpile(circuit.gates)
    assert [g.gate_type for g in out] == ["X"]
    before = Simulator().execute(circuit)
    after = Simulator().execute(circuit.with_gates(out))
    np.testing.assert_allclose(after.data, before.data, atol=1e-12)


def test_circuit_argument_supplies_wire_count(transpiler):
    circuit = QuantumCircuit(num_qubits=3, gates=[GateInstance("SWAP", 1, 0)])
    assert len(transpiler.transpile(circuit)) == 3
    assert transpiler.transpile(circuit.gates) == []


def test_control_in_second_slot_of_cnot_emits_nothing(transpiler):
    gate = GateInstance("CNOT", 1, 0, control_wire2=0, gate_id="c")
    assert transpiler.transpile([gate], num_qubits=2) == []
