"""Measurement sampling for quantum states under the Born rule."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .state_vector import StateVector

DEFAULT_SHOTS = 1024
DEFAULT_SEED = 42


def seeded_random(seed):
    """Deterministic draw in [0, 1) for an integer seed (or an array of seeds)."""
    x = np.sin(np.asarray(seed, dtype=np.float64)) * 10000.0
    return x - np.floor(x)


class SeededStream:
    """Sequence of draws seeded_random(seed), seeded_random(seed + 1), ..."""

    def __init__(self, seed: int):
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def next(self) -> float:
        value = float(seeded_random(self._seed))
        self._seed += 1
        return value

    def take(self, count: int) -> np.ndarray:
        values = seeded_random(np.arange(self._seed, self._seed + count))
        self._seed += count
        return values


@dataclass
class MeasurementResult:
    """Outcome counts of a sampling run."""
    shots: int
    counts: dict[str, int]
    collapsed: str

    def probability(self, bitstring: str) -> float:
        if self.shots == 0:
            return 0.0
        return self.counts.get(bitstring, 0) / self.shots


class MeasurementEngine:
    """Samples measurement outcomes from a state vector."""

    @staticmethod
    def sample_indices(state: StateVector, shots: int, seed: int) -> np.ndarray:
        """Basis index drawn for each shot k from seeded_random(seed + k)."""
        probs = state.probabilities
        total = probs.sum() or 1.0
        cumulative = np.cumsum(probs / total)
        draws = SeededStream(seed).take(shots)
        outcomes = np.searchsorted(cumulative, draws, side="left")
        nonzero = np.flatnonzero(probs)
        if not nonzero.size:
            return np.zeros(shots, dtype=np.intp)
        # A draw of exactly 0 lands on index 0 and rounding can leave a draw
        # past the last cumulative value; both move to the next possible outcome.
        slot = np.minimum(np.searchsorted(nonzero, outcomes, side="left"), nonzero.size - 1)
        return nonzero[slot]

    @staticmethod
    def measure(state: StateVector, shots: int = DEFAULT_SHOTS,
                seed: int = DEFAULT_SEED) -> MeasurementResult:
        """Sample ``shots`` outcomes; identical (state, seed) pairs give identical counts."""
        if shots < 0:
            raise ValueError(f"shots must be >= 0, got {shots}")
        counts: dict[str, int] = {}
        for index in MeasurementEngine.sample_indices(state, shots, seed):
            label = state.bitstring(int(index))
            counts[label] = counts.get(label, 0) + 1

        # max() keeps the first maximal entry, i.e. the first-encountered outcome.
        if counts:
            collapsed = max(counts.items(), key=lambda item: item[1])[0]
        else:
            collapsed = state.bitstring(0)
        return MeasurementResult(shots=shots, counts=counts, collapsed=collapsed)

    @staticmethod
    def collapse(state: StateVector, bitstring: str) -> StateVector:
        """Post-measurement basis state for an observed bitstring."""
        if len(bitstring) != state.num_qubits:
            raise ValueError(
                f"Bitstring '{bitstring}' does not match {state.num_qubits} qubits")
        data = np.zeros(state.dimension, dtype=np.complex128)
        data[int(bitstring, 2)] = 1.0
        return StateVector.from_amplitudes(data)


class MeasurementSession:
    """Measures repeatedly with an advancing seed base.

    Each call consumes ``shots`` seeds so consecutive measurements do not
    replay the same draws.
    """

    def __init__(self, seed: int = DEFAULT_SEED, shots: int = DEFAULT_SHOTS):
        self._seed = seed
        self._shots = shots

    @property
    def seed(self) -> int:
        return self._seed

    def measure(self, state: StateVector, shots: int | None = None) -> MeasurementResult:
        shots = self._shots if shots is None else shots
        result = MeasurementEngine.measure(state, shots, self._seed)
        self._seed += shots
        return result
