"""Quantum circuit simulator - folds a circuit's gates through a state vector."""

from __future__ import annotations

import logging
from typing import Callable, Generator

from .state_vector import StateVector
from .circuit import QuantumCircuit, GateInstance
from .errors import SimulationCancelled

logger = logging.getLogger(__name__)


def apply_gate_instance(state: StateVector, gate: GateInstance) -> StateVector:
    """Apply a single placed gate to the state."""
    return state.apply_gate(gate.gate_type, gate.target,
                            gate.control_wire, gate.control_wire2, gate.param)


class Simulator:
    """Executes a QuantumCircuit from |00...0> in position order."""

    def execute(self, circuit: QuantumCircuit,
                should_stop: Callable[[], bool] | None = None) -> StateVector:
        """Run every gate and return the final state.

        Args:
            circuit: The circuit to execute.
            should_stop: Optional cancellation check, polled between gates
                (never during one).

        Raises:
            SimulationCancelled: should_stop returned True.
        """
        state = StateVector.initialize(circuit.num_qubits)
        for applied, gate in enumerate(circuit.ordered_gates()):
            if should_stop is not None and should_stop():
                logger.info("Execution cancelled after %d gate(s)", applied)
                raise SimulationCancelled(applied)
            state = apply_gate_instance(state, gate)
        return state

    def run_step_by_step(self, circuit: QuantumCircuit
                         ) -> Generator[tuple[StateVector, GateInstance], None, None]:
        """Yields (state, gate) after each gate application."""
        state = StateVector.initialize(circuit.num_qubits)
        for gate in circuit.ordered_gates():
            state = apply_gate_instance(state, gate)
            yield state, gate
