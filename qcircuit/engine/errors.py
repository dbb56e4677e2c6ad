"""Exception types raised by the circuit engine."""

from __future__ import annotations


class QCircuitError(Exception):
    """Base class for engine errors."""


class WireIndexError(QCircuitError, ValueError):
    """A gate references a wire outside [0, n) or reuses a wire."""


class UnknownGateError(QCircuitError, KeyError):
    """A gate type is not present in the gate registry."""

    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable.
        return str(self.args[0]) if self.args else ""


class CircuitImportError(QCircuitError, ValueError):
    """Serialized circuit data is malformed or incomplete."""


class SimulationCancelled(QCircuitError):
    """Execution was stopped between two gate applications."""

    def __init__(self, gates_applied: int):
        super().__init__(f"Simulation cancelled after {gates_applied} gate(s)")
        self.gates_applied = gates_applied
