"""Shared fixtures for the qcircuit test suite."""

import numpy as np
import pytest

from qcircuit.engine.state_vector import StateVector

# Valid wire assignment per gate type on 3 wires: (target, control, control2)
PLACEMENTS = {
    "CNOT": (1, 0, None),
    "CZ": (1, 0, None),
    "CPHASE": (1, 0, None),
    "SWAP": (0, None, None),
    "CCX": (2, 0, 1),
    "CSWAP": (1, 0, None),
}


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def random_state(rng):
    """Factory for random normalized states on n wires."""
    def _make(num_qubits: int) -> StateVector:
        dim = 2 ** num_qubits
        data = rng.normal(size=dim) + 1j * rng.normal(size=dim)
        return StateVector.from_amplitudes(data / np.linalg.norm(data))
    return _make


@pytest.fixture
def placement():
    """(target, control, control2) for a gate type on 3 wires."""
    def _get(gate_type: str):
        return PLACEMENTS.get(gate_type, (0, None, None))
    return _get
