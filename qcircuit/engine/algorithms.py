"""Built-in circuit presets."""

from __future__ import annotations

from .circuit import QuantumCircuit, GateInstance


class AlgorithmTemplate:
    """Factory for small demonstration circuits."""

    @staticmethod
    def bell_state() -> QuantumCircuit:
        """Bell state |Phi+> = (|00> + |11>) / sqrt(2)."""
        circuit = QuantumCircuit(num_qubits=2)
        circuit.add_gate(GateInstance("H", 0, 0))
        circuit.add_gate(GateInstance("CNOT", 1, 1, control_wire=0))
        return circuit

    @staticmethod
    def ghz_state(num_qubits: int = 3) -> QuantumCircuit:
        """GHZ state (|00...0> + |11...1>) / sqrt(2), built as a CNOT ladder."""
        if num_qubits < 2:
            raise ValueError(f"GHZ needs at least 2 qubits, got {num_qubits}")
        circuit = QuantumCircuit(num_qubits=num_qubits)
        circuit.add_gate(GateInstance("H", 0, 0))
        for i in range(1, num_qubits):
            circuit.add_gate(GateInstance("CNOT", i, i, control_wire=i - 1))
        return circuit

    @staticmethod
    def uniform_superposition(num_qubits: int = 2) -> QuantumCircuit:
        circuit = QuantumCircuit(num_qubits=num_qubits)
        for i in range(num_qubits):
            circuit.add_gate(GateInstance("H", i, 0))
        return circuit

    @staticmethod
    def toffoli_demo() -> QuantumCircuit:
        """|110> -> |111> through a Toffoli on wire 2."""
        circuit = QuantumCircuit(num_qubits=3)
        circuit.add_gate(GateInstance("X", 0, 0))
        circuit.add_gate(GateInstance("X", 1, 0))
        circuit.add_gate(GateInstance("CCX", 2, 1, control_wire=0, control_wire2=1))
        return circuit

    @staticmethod
    def phase_kickback() -> QuantumCircuit:
        """Phase kickback: the target's -1 eigenphase flips the control to |1>."""
        circuit = QuantumCircuit(num_qubits=2)
        circuit.add_gate(GateInstance("X", 1, 0))
        circuit.add_gate(GateInstance("H", 0, 1))
        circuit.add_gate(GateInstance("H", 1, 1))
        circuit.add_gate(GateInstance("CNOT", 1, 2, control_wire=0))
        circuit.add_gate(GateInstance("H", 0, 3))
        circuit.add_gate(GateInstance("H", 1, 3))
        return circuit

    @classmethod
    def presets(cls) -> dict[str, QuantumCircuit]:
        return {
            "bell": cls.bell_state(),
            "ghz3": cls.ghz_state(3),
            "ghz4": cls.ghz_state(4),
            "superposition": cls.uniform_superposition(2),
            "toffoli": cls.toffoli_demo(),
            "kickback": cls.phase_kickback(),
        }
