"""Transpilation of circuits into the universal gate set {H, T, CNOT}."""

from __future__ import annotations

import logging

from .circuit import GateInstance, QuantumCircuit, order_by_position
from .gate_registry import GateRegistry
from .gates import TARGET, CONTROL, CONTROL2, PARTNER

logger = logging.getLogger(__name__)


class Transpiler:
    """Replaces every gate by its registry decomposition.

    Emitted gates get fresh positions 0, 1, 2, ... in emission order.
    Decompositions of Y, RZ, CPHASE, CCX and CSWAP are approximations
    (see ``GateDefinition.exact_decomposition``).
    """

    def __init__(self):
        self._registry = GateRegistry.instance()

    @staticmethod
    def _roles(gate: GateInstance) -> dict[str, int | None]:
        return {
            TARGET: gate.target,
            CONTROL: gate.control_wire,
            CONTROL2: gate.control_wire2,
            PARTNER: gate.target + 1,
        }

    @staticmethod
    def _wire_count(gates: list[GateInstance]) -> int:
        """Smallest register holding every target and control in ``gates``."""
        wires = [w for g in gates for w in [g.target] + g.controls]
        return max(wires, default=0) + 1

    def transpile(self, gates: list[GateInstance] | QuantumCircuit,
                  num_qubits: int | None = None) -> list[GateInstance]:
        """Returns a new gate list using only H, T and CNOT.

        ``gates`` may be a QuantumCircuit, whose wire count is then used.
        For a bare list without ``num_qubits`` the wire count is the
        smallest register that holds the gates.  Gates whose execution is
        a no-op (a controlled gate missing a control, or a swap without an
        adjacent wire) emit nothing.
        """
        if isinstance(gates, QuantumCircuit):
            if num_qubits is None:
                num_qubits = gates.num_qubits
            gates = gates.gates
        if num_qubits is None:
            num_qubits = self._wire_count(gates)
        output: list[GateInstance] = []
        position = 0
        for gate in order_by_position(gates):
            gate_def = self._registry.get(gate.gate_type)
            if len(gate.active_controls(gate_def.num_controls)) < gate_def.num_controls:
                logger.debug("Dropping %s (%s): missing control wire",
                             gate.gate_type, gate.gate_id)
                continue
            if gate_def.swaps_partner and gate.target + 1 >= num_qubits:
                logger.debug("Dropping %s (%s): no adjacent wire",
                             gate.gate_type, gate.gate_id)
                continue

            roles = self._roles(gate)
            for k, step in enumerate(gate_def.decompose(gate.param)):
                output.append(GateInstance(
                    gate_type=step.gate_type,
                    target=roles[step.target_role],
                    position=position,
                    control_wire=roles[step.control_role] if step.control_role else None,
                    gate_id=f"{gate.gate_id}-t{k}",
                ))
                position += 1

        logger.info("Transpiled %d gate(s) into %d", len(gates), len(output))
        return output
