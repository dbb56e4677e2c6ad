"""Gate descriptor table using the Singleton pattern.

Each row carries a gate's arity, its pair action on the state vector and its
decomposition into the universal set {H, T, CNOT}.  The state vector engine
and the transpiler both dispatch through this table.
"""

from __future__ import annotations

import numpy as np

from .errors import UnknownGateError
from .gates import (
    GateDefinition, GateKind, DecompositionStep, steps, _const,
    TARGET, CONTROL, CONTROL2, PARTNER, DEFAULT_RZ_ANGLE,
    X_MATRIX, Y_MATRIX, Z_MATRIX, H_MATRIX, S_MATRIX, T_MATRIX,
    CNOT_MATRIX, CZ_MATRIX, CPHASE_MATRIX, SWAP_MATRIX,
    TOFFOLI_MATRIX, FREDKIN_MATRIX, rz_matrix,
    h_action, x_action, y_action, z_action, s_action, t_action, rz_action,
)

UNIVERSAL_GATE_SET = frozenset({"H", "T", "CNOT"})


def _toffoli_template(t: str, c1: str, c2: str) -> tuple[DecompositionStep, ...]:
    """Standard 6-CNOT Toffoli network with every T-dagger replaced by T.

    Only approximates CCX: T-dagger is not available as a single gate.
    """
    return steps(
        ("H", t), ("CNOT", t, c2), ("T", t), ("CNOT", t, c1), ("T", t),
        ("CNOT", t, c2), ("T", t), ("CNOT", t, c1), ("T", c2), ("T", t),
        ("H", t), ("CNOT", c2, c1), ("T", c1), ("T", c2), ("CNOT", c2, c1),
    )


def _rz_template(theta: float | None) -> tuple[DecompositionStep, ...]:
    # RZ(theta) puts e^{i theta/2} on |1>, T puts e^{i pi/4}.
    if theta is None:
        theta = DEFAULT_RZ_ANGLE
    count = int(round(2 * theta / np.pi)) % 8
    return steps(*(["T"] * count))


class GateRegistry:
    """Singleton registry mapping gate names to GateDefinition objects."""

    _instance: GateRegistry | None = None

    def __init__(self):
        self._gates: dict[str, GateDefinition] = {}

    @classmethod
    def instance(cls) -> GateRegistry:
        if cls._instance is None:
            cls._instance = cls()
            cls._instance._register_builtins()
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset the singleton (for testing)."""
        cls._instance = None

    def _register_builtins(self):
        # Single-qubit gates
        self.register(GateDefinition(
            name="H", display_name="Hadamard", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=h_action, matrix_func=_const(H_MATRIX),
            decomposition=steps("H"), description="Creates superposition"))

        self.register(GateDefinition(
            name="X", display_name="Pauli-X", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=x_action, matrix_func=_const(X_MATRIX),
            decomposition=steps("H", "T", "T", "T", "T", "H"),
            description="Bit flip (NOT)"))

        self.register(GateDefinition(
            name="Y", display_name="Pauli-Y", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=y_action, matrix_func=_const(Y_MATRIX),
            decomposition=steps("T", "T", "H", "T", "T", "T", "T", "H",
                                "T", "T", "T"),
            exact_decomposition=False,
            description="Bit & phase flip"))

        self.register(GateDefinition(
            name="Z", display_name="Pauli-Z", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=z_action, matrix_func=_const(Z_MATRIX),
            decomposition=steps("T", "T", "T", "T"),
            description="Phase flip"))

        self.register(GateDefinition(
            name="S", display_name="S Gate", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=s_action, matrix_func=_const(S_MATRIX),
            decomposition=steps("T", "T"), description="π/2 phase"))

        self.register(GateDefinition(
            name="T", display_name="T Gate", gate_kind=GateKind.SINGLE,
            num_qubits=1, action=t_action, matrix_func=_const(T_MATRIX),
            decomposition=steps("T"), description="π/4 phase"))

        self.register(GateDefinition(
            name="RZ", display_name="Rz(θ)", gate_kind=GateKind.SINGLE,
            num_qubits=1, num_params=1, action=rz_action, matrix_func=rz_matrix,
            decomposition=(), param_decomposition=_rz_template,
            exact_decomposition=False, description="Z-rotation by θ"))

        # Two-qubit gates
        self.register(GateDefinition(
            name="CNOT", display_name="CNOT", gate_kind=GateKind.CONTROLLED,
            num_qubits=2, num_controls=1, action=x_action,
            matrix_func=_const(CNOT_MATRIX),
            decomposition=steps(("CNOT", TARGET, CONTROL)),
            description="Controlled NOT"))

        self.register(GateDefinition(
            name="CZ", display_name="CZ", gate_kind=GateKind.CONTROLLED,
            num_qubits=2, num_controls=1, action=z_action,
            matrix_func=_const(CZ_MATRIX),
            decomposition=steps("H", ("CNOT", TARGET, CONTROL), "H"),
            description="Controlled-Z"))

        self.register(GateDefinition(
            name="CPHASE", display_name="CPHASE", gate_kind=GateKind.CONTROLLED,
            num_qubits=2, num_controls=1, action=t_action,
            matrix_func=_const(CPHASE_MATRIX),
            decomposition=steps(("CNOT", TARGET, CONTROL), "T",
                                ("CNOT", TARGET, CONTROL)),
            exact_decomposition=False,
            description="Controlled π/4 phase"))

        self.register(GateDefinition(
            name="SWAP", display_name="SWAP", gate_kind=GateKind.MULTI,
            num_qubits=2, swaps_partner=True, action=x_action,
            matrix_func=_const(SWAP_MATRIX),
            decomposition=steps(("CNOT", PARTNER, TARGET),
                                ("CNOT", TARGET, PARTNER),
                                ("CNOT", PARTNER, TARGET)),
            description="Swap qubits"))

        # Three-qubit gates
        self.register(GateDefinition(
            name="CCX", display_name="Toffoli", gate_kind=GateKind.CONTROLLED,
            num_qubits=3, num_controls=2, action=x_action,
            matrix_func=_const(TOFFOLI_MATRIX),
            decomposition=_toffoli_template(TARGET, CONTROL, CONTROL2),
            exact_decomposition=False,
            description="Controlled-Controlled-X (3-qubit)"))

        self.register(GateDefinition(
            name="CSWAP", display_name="Fredkin", gate_kind=GateKind.CONTROLLED,
            num_qubits=3, num_controls=1, swaps_partner=True, action=x_action,
            matrix_func=_const(FREDKIN_MATRIX),
            decomposition=(
                steps(("CNOT", TARGET, PARTNER))
                + _toffoli_template(PARTNER, CONTROL, TARGET)
                + steps(("CNOT", TARGET, PARTNER))
            ),
            exact_decomposition=False,
            description="Controlled-SWAP (3-qubit)"))

    def register(self, gate_def: GateDefinition):
        self._gates[gate_def.name] = gate_def

    def get(self, name: str) -> GateDefinition:
        if name not in self._gates:
            raise UnknownGateError(f"Gate '{name}' not found in registry")
        return self._gates[name]

    def contains(self, name: str) -> bool:
        return name in self._gates

    def all_gates(self) -> list[GateDefinition]:
        return list(self._gates.values())

    def single_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values()
                if g.gate_kind == GateKind.SINGLE]

    def multi_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values() if g.num_qubits > 1]

    def controlled_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values() if g.is_controlled]

    def gate_names(self) -> list[str]:
        return list(self._gates.keys())
