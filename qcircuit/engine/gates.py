"""Quantum gate definitions: reference matrices, pair actions and GateDefinition."""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional
from enum import Enum


class GateKind(Enum):
    SINGLE = "single"
    CONTROLLED = "controlled"
    MULTI = "multi"


# Wire roles used by decomposition templates.
TARGET = "target"
CONTROL = "control"
CONTROL2 = "control2"
PARTNER = "partner"  # wire target + 1, used by SWAP / CSWAP


@dataclass(frozen=True)
class DecompositionStep:
    """One gate of a decomposition template, expressed in wire roles."""
    gate_type: str
    target_role: str = TARGET
    control_role: Optional[str] = None


# action(old, new, i, j, param) writes the result for every (i, j) pair into new.
PairAction = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray, Optional[float]], None]


@dataclass(frozen=True)
class GateDefinition:
    """Immutable definition of a quantum gate."""
    name: str
    display_name: str
    gate_kind: GateKind
    num_qubits: int
    action: PairAction
    matrix_func: Callable[..., np.ndarray]
    decomposition: tuple[DecompositionStep, ...]
    exact_decomposition: bool = True
    num_controls: int = 0
    swaps_partner: bool = False
    num_params: int = 0
    description: str = ""
    param_decomposition: Optional[Callable[[Optional[float]], tuple[DecompositionStep, ...]]] = None

    @property
    def is_controlled(self) -> bool:
        return self.num_controls > 0

    def decompose(self, param: float | None = None) -> tuple[DecompositionStep, ...]:
        """Decomposition into {H, T, CNOT}, resolved for a gate parameter."""
        if self.param_decomposition is not None:
            return self.param_decomposition(param)
        return self.decomposition


# --- Fixed single-qubit gate matrices ---

X_MATRIX = np.array([[0, 1],
                      [1, 0]], dtype=np.complex128)

Y_MATRIX = np.array([[0, -1j],
                      [1j, 0]], dtype=np.complex128)

Z_MATRIX = np.array([[1, 0],
                      [0, -1]], dtype=np.complex128)

H_MATRIX = np.array([[1, 1],
                      [1, -1]], dtype=np.complex128) / np.sqrt(2)

S_MATRIX = np.array([[1, 0],
                      [0, 1j]], dtype=np.complex128)

T_PHASE = np.exp(1j * np.pi / 4)

T_MATRIX = np.array([[1, 0],
                      [0, T_PHASE]], dtype=np.complex128)

DEFAULT_RZ_ANGLE = np.pi / 4


def rz_phase(theta: float | None) -> complex:
    """Phase applied to the |1> component by RZ(theta)."""
    if theta is None:
        theta = DEFAULT_RZ_ANGLE
    return complex(np.exp(1j * theta / 2))


def rz_matrix(theta: float | None = None) -> np.ndarray:
    return np.array([[1, 0],
                      [0, rz_phase(theta)]], dtype=np.complex128)


# --- Fixed multi-qubit gate matrices (control / first wire is the MSB) ---

CNOT_MATRIX = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0]], dtype=np.complex128)

CZ_MATRIX = np.diag([1, 1, 1, -1]).astype(np.complex128)

CPHASE_MATRIX = np.diag([1, 1, 1, T_PHASE]).astype(np.complex128)

SWAP_MATRIX = np.array([
    [1, 0, 0, 0],
    [0, 0, 1, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1]], dtype=np.complex128)

# Toffoli (CCX) - 8x8
TOFFOLI_MATRIX = np.eye(8, dtype=np.complex128)
TOFFOLI_MATRIX[6, 6] = 0
TOFFOLI_MATRIX[7, 7] = 0
TOFFOLI_MATRIX[6, 7] = 1
TOFFOLI_MATRIX[7, 6] = 1

# Fredkin (CSWAP) - 8x8
FREDKIN_MATRIX = np.eye(8, dtype=np.complex128)
FREDKIN_MATRIX[5, 5] = 0
FREDKIN_MATRIX[6, 6] = 0
FREDKIN_MATRIX[5, 6] = 1
FREDKIN_MATRIX[6, 5] = 1


# --- Pair actions ---
#
# Every gate acts on amplitude pairs (i, j) where j = i ^ flip_mask and i is
# the member with the target bit cleared.  Phase-type gates only touch j.

def h_action(old, new, i, j, param=None):
    a, b = old[i], old[j]
    new[i] = (a + b) / np.sqrt(2)
    new[j] = (a - b) / np.sqrt(2)


def x_action(old, new, i, j, param=None):
    new[i] = old[j]
    new[j] = old[i]


def y_action(old, new, i, j, param=None):
    # newA = {b.imag, -b.real}, newB = {-a.imag, a.real}
    a, b = old[i], old[j]
    new[i] = -1j * b
    new[j] = 1j * a


def _phase_action(phase: complex) -> PairAction:
    def _fn(old, new, i, j, param=None):
        new[j] = old[j] * phase
    return _fn


z_action = _phase_action(-1.0 + 0.0j)
s_action = _phase_action(1j)
t_action = _phase_action(T_PHASE)


def rz_action(old, new, i, j, param=None):
    new[j] = old[j] * rz_phase(param)


def _const(matrix: np.ndarray) -> Callable[..., np.ndarray]:
    """Returns a callable that ignores parameters and returns the given matrix."""
    def _fn(*_params) -> np.ndarray:
        return matrix
    return _fn


def steps(*specs) -> tuple[DecompositionStep, ...]:
    """Build a decomposition from (gate, target_role[, control_role]) tuples or bare names."""
    result = []
    for spec in specs:
        if isinstance(spec, str):
            result.append(DecompositionStep(spec))
        else:
            result.append(DecompositionStep(*spec))
    return tuple(result)
