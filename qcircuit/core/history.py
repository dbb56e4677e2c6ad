"""Undo / redo history for circuit edits.

Each edit records a snapshot of the circuit taken *before* the edit, so
undo restores it exactly and redo re-applies the snapshot that undo
replaced.
"""

from __future__ import annotations

import copy

from qcircuit.engine.circuit import QuantumCircuit

MAX_HISTORY = 50


class CircuitHistory:
    """Bounded snapshot stack.

    Usage::

        history = CircuitHistory()
        history.record(circuit)        # before mutating
        circuit.add_gate(...)
        circuit = history.undo(circuit)
    """

    def __init__(self, max_size: int = MAX_HISTORY):
        self._max_size = max_size
        self._undo: list[QuantumCircuit] = []
        self._redo: list[QuantumCircuit] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._undo)

    def record(self, circuit: QuantumCircuit):
        """Snapshot ``circuit`` ahead of an edit; clears the redo stack."""
        self._undo.append(copy.deepcopy(circuit))
        if len(self._undo) > self._max_size:
            del self._undo[0]
        self._redo.clear()

    def undo(self, current: QuantumCircuit) -> QuantumCircuit:
        """Previous snapshot, or ``current`` when there is nothing to undo."""
        if not self._undo:
            return current
        self._redo.append(copy.deepcopy(current))
        return self._undo.pop()

    def redo(self, current: QuantumCircuit) -> QuantumCircuit:
        if not self._redo:
            return current
        self._undo.append(copy.deepcopy(current))
        return self._redo.pop()

    def clear(self):
        self._undo.clear()
        self._redo.clear()
