"""Approximate noisy execution: stochastic Pauli errors plus phase damping.

This is a seeded single-trajectory approximation, not a density-matrix
channel simulation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .analysis import CircuitAnalyzer, StateAnalysis
from .circuit import QuantumCircuit
from .gate_registry import GateRegistry
from .measurement import SeededStream
from .simulator import apply_gate_instance
from .state_vector import StateVector

logger = logging.getLogger(__name__)

# Error probability multiplier per gate arity.
ARITY_FACTORS = {1: 1.0, 2: 2.0, 3: 5.0}

PAULI_ERRORS = ("X", "Y", "Z")

DECOHERENCE_COEFFICIENT = 0.1
SEED_OFFSET = 1000


@dataclass
class NoiseResult:
    """Outcome of a noisy re-execution."""
    fidelity: float
    error_rate: float
    decoherence_effect: float
    noisy_state: StateVector
    injected_errors: int = 0


@dataclass
class ComparisonResult:
    """Side-by-side view of ideal and noisy executions."""
    ideal_state: StateVector
    noisy_state: StateVector
    fidelity: float
    ideal_probs: np.ndarray
    noisy_probs: np.ndarray
    state_overlap: np.ndarray
    prob_difference: np.ndarray


class NoiseSimulator:
    """Re-executes a circuit with injected errors and compares it to the ideal state.

    Args:
        decoherence_coefficient: Scale of the phase-damping pass per unit of
            noise level and circuit depth.
        seed_offset: Added to the caller's seed so noise draws do not
            coincide with measurement draws for the same seed.
    """

    def __init__(self, decoherence_coefficient: float = DECOHERENCE_COEFFICIENT,
                 seed_offset: int = SEED_OFFSET):
        self._registry = GateRegistry.instance()
        self._coefficient = decoherence_coefficient
        self._seed_offset = seed_offset

    def simulate(self, circuit: QuantumCircuit, ideal_state: StateVector,
                 noise_level: float, seed: int) -> NoiseResult:
        """Noisy execution from |00...0> and its fidelity against ``ideal_state``."""
        if not 0.0 <= noise_level <= 1.0:
            raise ValueError(f"noise_level must be in [0, 1], got {noise_level}")

        stream = SeededStream(seed + self._seed_offset)
        state = StateVector.initialize(circuit.num_qubits)
        p_total = 0.0
        injected = 0

        for gate in circuit.ordered_gates():
            state = apply_gate_instance(state, gate)

            arity = self._registry.get(gate.gate_type).num_qubits
            p_gate = min(1.0, noise_level * ARITY_FACTORS[arity])
            p_total = p_total + p_gate * (1.0 - p_total)

            if stream.next() < p_gate:
                pauli = PAULI_ERRORS[min(int(stream.next() * 3), 2)]
                state = state.apply_gate(pauli, gate.target)
                injected += 1
                logger.debug("Injected %s error on wire %d after %s",
                             pauli, gate.target, gate.gate_id)

        depth = CircuitAnalyzer.analyze_depth(circuit.gates).depth
        decoherence = noise_level * depth * self._coefficient
        state = self._phase_damping(state, decoherence, stream)

        fidelity = StateAnalysis.state_fidelity(ideal_state, state)
        return NoiseResult(
            fidelity=fidelity,
            error_rate=p_total,
            decoherence_effect=min(1.0, decoherence),
            noisy_state=state,
            injected_errors=injected,
        )

    @staticmethod
    def _phase_damping(state: StateVector, decoherence: float,
                       stream: SeededStream) -> StateVector:
        """Scale each amplitude down and rotate its phase by a seeded amount, then renormalize."""
        scale_draws = stream.take(state.dimension)
        phase_draws = stream.take(state.dimension)
        damping = np.maximum(0.0, 1.0 - decoherence * scale_draws)
        angles = decoherence * np.pi * (2.0 * phase_draws - 1.0)
        damped = state.data * damping * np.exp(1j * angles)
        return StateVector.from_amplitudes(damped).normalized()

    def compare(self, circuit: QuantumCircuit, ideal_state: StateVector,
                noise_level: float, seed: int) -> ComparisonResult:
        result = self.simulate(circuit, ideal_state, noise_level, seed)
        ideal_probs = ideal_state.probabilities
        noisy_probs = result.noisy_state.probabilities
        overlap = np.minimum(ideal_probs, noisy_probs) / np.maximum(
            np.maximum(ideal_probs, noisy_probs), 0.001)
        return ComparisonResult(
            ideal_state=ideal_state,
            noisy_state=result.noisy_state,
            fidelity=result.fidelity,
            ideal_probs=ideal_probs,
            noisy_probs=noisy_probs,
            state_overlap=overlap,
            prob_difference=noisy_probs - ideal_probs,
        )
