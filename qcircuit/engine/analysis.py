"""Structural analysis of circuits and quantitative analysis of states.

Provides:
- CircuitAnalyzer: depth / parallelism layering and structural verification
- StateAnalysis: fidelity, entropy, expectation values, tomography
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .circuit import GateInstance, order_by_position
from .gate_registry import GateRegistry
from .state_vector import StateVector, wire_mask

logger = logging.getLogger(__name__)

ERROR = "error"
WARNING = "warning"


# =========================================================================
# CircuitAnalyzer -- layering and verification
# =========================================================================

@dataclass
class Layer:
    """Gates sharing one time-slot."""
    position: int
    gates: list[GateInstance]

    @property
    def parallelism(self) -> int:
        return len(self.gates)


@dataclass
class DepthInfo:
    depth: int
    layers: list[Layer] = field(default_factory=list)
    avg_parallelism: float = 0.0

    @property
    def total_ops(self) -> int:
        return sum(layer.parallelism for layer in self.layers)

    @property
    def critical_path(self) -> int:
        return self.depth


@dataclass(frozen=True)
class VerificationIssue:
    gate_id: str
    severity: str  # "error" | "warning"
    message: str


class CircuitAnalyzer:
    """Static analysis over a circuit's gate list."""

    @staticmethod
    def analyze_depth(gates: list[GateInstance]) -> DepthInfo:
        """Group gates by position; depth is the number of distinct positions."""
        if not gates:
            return DepthInfo(depth=0)
        by_position: dict[int, list[GateInstance]] = {}
        for gate in gates:
            by_position.setdefault(gate.position, []).append(gate)
        layers = [Layer(p, by_position[p]) for p in sorted(by_position)]
        return DepthInfo(
            depth=len(layers),
            layers=layers,
            avg_parallelism=len(gates) / len(layers),
        )

    @staticmethod
    def verify(gates: list[GateInstance], num_qubits: int) -> list[VerificationIssue]:
        """Structural checks. Never raises; problems come back as issues."""
        registry = GateRegistry.instance()
        issues: list[VerificationIssue] = []

        def report(gate: GateInstance, severity: str, message: str):
            issues.append(VerificationIssue(gate.gate_id, severity, message))

        def in_range(wire: int) -> bool:
            return 0 <= wire < num_qubits

        for gate in order_by_position(gates):
            if not registry.contains(gate.gate_type):
                report(gate, ERROR, f"Unknown gate type '{gate.gate_type}'")
                continue
            gate_def = registry.get(gate.gate_type)

            if not in_range(gate.target):
                report(gate, ERROR,
                       f"Target wire {gate.target} out of range (0-{num_qubits - 1})")

            if gate_def.num_qubits == 3 and num_qubits < 3:
                report(gate, ERROR,
                       f"{gate.gate_type} needs 3 qubits, circuit has {num_qubits}")

            controls = gate.active_controls(gate_def.num_controls)
            for c in controls:
                if not in_range(c):
                    report(gate, ERROR,
                           f"Control wire {c} out of range (0-{num_qubits - 1})")
                elif c == gate.target:
                    report(gate, ERROR, f"Control wire {c} equals target wire")
                elif gate_def.swaps_partner and c == gate.target + 1:
                    report(gate, ERROR, f"Control wire {c} equals the swap partner wire")
            if len(controls) == 2 and controls[0] == controls[1]:
                report(gate, ERROR, f"Both control wires are {controls[0]}")

            if len(controls) < gate_def.num_controls:
                report(gate, WARNING,
                       f"{gate.gate_type} has {len(controls)} of "
                       f"{gate_def.num_controls} control wire(s) set; "
                       f"the gate has no effect")

            if gate_def.swaps_partner and in_range(gate.target) \
                    and gate.target + 1 >= num_qubits:
                report(gate, WARNING,
                       f"{gate.gate_type} on the last wire has no adjacent wire; "
                       f"the gate has no effect")

        seen: dict[tuple[int, int], str] = {}
        for gate in order_by_position(gates):
            key = (gate.target, gate.position)
            if key in seen:
                report(gate, WARNING,
                       f"Shares wire {gate.target} at position {gate.position} "
                       f"with {seen[key]}")
            else:
                seen[key] = gate.gate_id

        if issues:
            logger.debug("Verification found %d issue(s)", len(issues))
        return issues

    @staticmethod
    def has_errors(issues: list[VerificationIssue]) -> bool:
        return any(issue.severity == ERROR for issue in issues)


# =========================================================================
# StateAnalysis -- metrics on pure states
# =========================================================================

@dataclass
class TomographyResult:
    density_matrix: np.ndarray
    purity: float
    von_neumann_entropy: float
    x_basis_probs: np.ndarray
    y_basis_probs: np.ndarray
    z_basis_probs: np.ndarray


class StateAnalysis:
    """Static methods for quantitative analysis of quantum states."""

    @staticmethod
    def state_fidelity(psi: StateVector, phi: StateVector) -> float:
        """Fidelity between two pure states: |<psi|phi>|^2, clipped to [0, 1]."""
        return float(min(1.0, max(0.0, abs(psi.inner(phi)) ** 2)))

    @staticmethod
    def shannon_entropy(state: StateVector) -> float:
        """Entropy of the measurement distribution in bits."""
        probs = state.probabilities
        probs = probs / (probs.sum() or 1.0)
        probs = probs[probs > 0]
        return float(-np.sum(probs * np.log2(probs)))

    @staticmethod
    def qubit_probability(state: StateVector, qubit: int) -> tuple[float, float]:
        """(P(0), P(1)) for a single wire."""
        mask = wire_mask(qubit, state.num_qubits)
        indices = np.arange(state.dimension)
        prob1 = float(np.sum(state.probabilities[(indices & mask) != 0]))
        return 1.0 - prob1, prob1

    @staticmethod
    def expectation_z(state: StateVector, qubit: int) -> float:
        prob0, prob1 = StateAnalysis.qubit_probability(state, qubit)
        return prob0 - prob1

    @staticmethod
    def expectation_zz(state: StateVector, q1: int, q2: int) -> float:
        n = state.num_qubits
        indices = np.arange(state.dimension)
        z1 = np.where(indices & wire_mask(q1, n), -1.0, 1.0)
        z2 = np.where(indices & wire_mask(q2, n), -1.0, 1.0)
        return float(np.sum(z1 * z2 * state.probabilities))

    @staticmethod
    def _rotated_probabilities(state: StateVector, basis: str) -> np.ndarray:
        rotated = state
        for q in range(state.num_qubits):
            if basis == "Y":
                # S^3 = S-dagger
                for _ in range(3):
                    rotated = rotated.apply_gate("S", q)
            rotated = rotated.apply_gate("H", q)
        return rotated.probabilities

    @staticmethod
    def tomography(state: StateVector) -> TomographyResult:
        """Pure-state tomography report from X, Y and Z basis probabilities."""
        psi = state.data
        rho = np.outer(psi, np.conj(psi))
        purity = float(np.clip(np.real(np.trace(rho @ rho)), 0.0, 1.0))
        entropy = 0.0 if purity > 0.99 else float(-np.log2(purity))
        return TomographyResult(
            density_matrix=rho,
            purity=purity,
            von_neumann_entropy=entropy,
            x_basis_probs=StateAnalysis._rotated_probabilities(state, "X"),
            y_basis_probs=StateAnalysis._rotated_probabilities(state, "Y"),
            z_basis_probs=state.probabilities,
        )
