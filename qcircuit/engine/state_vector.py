"""Core quantum state representation using state vectors."""

from __future__ import annotations

import numpy as np

from .errors import WireIndexError
from .gate_registry import GateRegistry


def wire_mask(wire: int, num_qubits: int) -> int:
    """Bitmask of a wire inside a basis index (wire 0 is the most significant bit)."""
    return 1 << (num_qubits - 1 - wire)


class StateVector:
    """Represents an n-qubit quantum state as a flat complex numpy array.

    Gates are applied with bitmask indexing over basis indices, never by
    building a 2^n x 2^n unitary.  Instances are immutable: every operation
    returns a new StateVector and the exposed array is read-only.
    """

    def __init__(self, num_qubits: int):
        if num_qubits < 1:
            raise ValueError(f"num_qubits must be >= 1, got {num_qubits}")
        self._num_qubits = num_qubits
        data = np.zeros(2 ** num_qubits, dtype=np.complex128)
        data[0] = 1.0 + 0.0j  # |00...0>
        self._set_data(data)

    @classmethod
    def initialize(cls, num_qubits: int) -> StateVector:
        """Fresh |00...0> state on num_qubits wires."""
        return cls(num_qubits)

    @classmethod
    def from_amplitudes(cls, amplitudes) -> StateVector:
        """Wrap an existing amplitude array of length 2^n (copied, not normalized)."""
        data = np.array(amplitudes, dtype=np.complex128).reshape(-1)
        size = data.shape[0]
        if size < 2 or size & (size - 1):
            raise ValueError(f"Amplitude count must be a power of two >= 2, got {size}")
        sv = cls.__new__(cls)
        sv._num_qubits = size.bit_length() - 1
        sv._set_data(data)
        return sv

    def _set_data(self, data: np.ndarray):
        data.setflags(write=False)
        self._data = data

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dimension(self) -> int:
        return self._data.shape[0]

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def probabilities(self) -> np.ndarray:
        """Returns |amplitude|^2 for each basis state."""
        return np.abs(self._data) ** 2

    @property
    def norm(self) -> float:
        return float(np.sqrt(np.sum(self.probabilities)))

    def bitstring(self, index: int) -> str:
        return format(index, f'0{self._num_qubits}b')

    def inner(self, other: StateVector) -> complex:
        """<self|other>."""
        if other.dimension != self.dimension:
            raise ValueError("State vectors have different dimensions")
        return complex(np.vdot(self._data, other.data))

    def normalized(self) -> StateVector:
        """Copy scaled to unit norm; an all-zero vector divides by 1."""
        norm = self.norm or 1.0
        return StateVector.from_amplitudes(self._data / norm)

    def copy(self) -> StateVector:
        return StateVector.from_amplitudes(self._data)

    def _check_wires(self, gate_type: str, wires: list[int]):
        n = self._num_qubits
        for w in wires:
            if not 0 <= w < n:
                raise WireIndexError(
                    f"{gate_type}: wire {w} out of range [0, {n - 1}]")
        if len(set(wires)) != len(wires):
            raise WireIndexError(
                f"{gate_type}: target and control wires must differ, got {wires}")

    def apply_gate(self, gate_type: str, target: int,
                   control: int | None = None,
                   control2: int | None = None,
                   param: float | None = None) -> StateVector:
        """Applies a gate and returns the resulting state.

        Every basis index i with the target bit cleared (and, for swap-type
        gates, the partner bit set) is paired with j = i ^ flip_mask.  Pairs
        are only touched when all control bits of i are 1.  A controlled
        gate missing a control, or a swap on the last wire, is a no-op.

        Raises:
            WireIndexError: a wire is outside [0, n) or wires collide.
            UnknownGateError: gate_type is not registered.
        """
        gate_def = GateRegistry.instance().get(gate_type)
        n = self._num_qubits

        controls = [c for c in (control, control2)[:gate_def.num_controls]
                    if c is not None]
        self._check_wires(gate_type, [target] + controls)
        if gate_def.swaps_partner and target + 1 in controls:
            raise WireIndexError(
                f"{gate_type}: control wire {target + 1} is the swap partner wire")

        if len(controls) < gate_def.num_controls:
            return self.copy()

        target_mask = wire_mask(target, n)
        indices = np.arange(self.dimension)

        if gate_def.swaps_partner:
            if target + 1 >= n:
                return self.copy()
            partner_mask = wire_mask(target + 1, n)
            selected = ((indices & target_mask) == 0) & ((indices & partner_mask) != 0)
            flip_mask = target_mask | partner_mask
        else:
            selected = (indices & target_mask) == 0
            flip_mask = target_mask

        for c in controls:
            selected &= (indices & wire_mask(c, n)) != 0

        i = indices[selected]
        j = i ^ flip_mask

        new_data = self._data.copy()
        gate_def.action(self._data, new_data, i, j, param)
        return StateVector.from_amplitudes(new_data)

    def __repr__(self) -> str:
        return f"StateVector(num_qubits={self._num_qubits})"
