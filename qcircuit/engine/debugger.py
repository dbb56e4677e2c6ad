"""Quantum Circuit Debugger -- gate-by-gate execution with state inspection.

Provides breakpoints on gate ids, conditional breaks on qubit probability
or entropy, and forward/backward stepping over a cached history.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .analysis import StateAnalysis
from .circuit import QuantumCircuit, GateInstance
from .simulator import apply_gate_instance
from .state_vector import StateVector


@dataclass
class DebugState:
    """State captured after a gate (or the initial state, step 0)."""

    step_index: int
    state: StateVector
    gate: GateInstance | None
    entropy: float

    @property
    def probabilities(self) -> np.ndarray:
        return self.state.probabilities


@dataclass
class BreakCondition:
    """Stop once a metric crosses a threshold.

    ``kind`` is "probability" (P(|1>) of ``qubit``) or "entropy" (Shannon
    entropy of the full distribution, in bits).
    """

    kind: str
    threshold: float
    comparison: str = "above"  # "above" | "below"
    qubit: int | None = None

    def is_met(self, state: StateVector) -> bool:
        if self.kind == "probability":
            if self.qubit is None:
                return False
            value = StateAnalysis.qubit_probability(state, self.qubit)[1]
        elif self.kind == "entropy":
            value = StateAnalysis.shannon_entropy(state)
        else:
            raise ValueError(f"Unknown break condition kind '{self.kind}'")
        if self.comparison == "above":
            return value > self.threshold
        return value < self.threshold


class CircuitDebugger:
    """Steps through a circuit one gate at a time.

    Usage::

        dbg = CircuitDebugger(circuit)
        dbg.step_forward()                 # after the first gate
        dbg.toggle_breakpoint("gate-3")
        dbg.run_until_break()              # stops before gate-3
        dbg.step_backward()
    """

    def __init__(self, circuit: QuantumCircuit):
        self._num_qubits = circuit.num_qubits
        self._gates = circuit.ordered_gates()
        self._breakpoints: set[str] = set()
        self._conditions: list[BreakCondition] = []
        self.hit_breakpoint: str | None = None
        self.hit_condition: BreakCondition | None = None
        initial = StateVector.initialize(circuit.num_qubits)
        self._history: list[DebugState] = [DebugState(0, initial, None, 0.0)]

    # ---- Inspection -------------------------------------------------------

    @property
    def gates(self) -> list[GateInstance]:
        return list(self._gates)

    @property
    def current_step(self) -> int:
        return len(self._history) - 1

    @property
    def current(self) -> DebugState:
        return self._history[-1]

    @property
    def history(self) -> list[DebugState]:
        return list(self._history)

    @property
    def at_end(self) -> bool:
        return self.current_step >= len(self._gates)

    @property
    def breakpoints(self) -> set[str]:
        return set(self._breakpoints)

    @property
    def conditions(self) -> list[BreakCondition]:
        return list(self._conditions)

    # ---- Stepping ---------------------------------------------------------

    def step_forward(self) -> DebugState:
        self.hit_breakpoint = None
        self.hit_condition = None
        if self.at_end:
            return self.current
        gate = self._gates[self.current_step]
        state = apply_gate_instance(self.current.state, gate)
        snapshot = DebugState(
            step_index=self.current_step + 1,
            state=state,
            gate=gate,
            entropy=StateAnalysis.shannon_entropy(state),
        )
        self._history.append(snapshot)
        return snapshot

    def step_backward(self) -> DebugState:
        self.hit_breakpoint = None
        self.hit_condition = None
        if self.current_step > 0:
            self._history.pop()
        return self.current

    def run_until_break(self) -> DebugState:
        """Run until a breakpointed gate is next, a condition is met, or the end.

        A breakpoint that stopped the previous run is stepped over.
        """
        resume_from = self.hit_breakpoint
        while not self.at_end:
            next_gate = self._gates[self.current_step]
            if next_gate.gate_id in self._breakpoints and next_gate.gate_id != resume_from:
                self.hit_breakpoint = next_gate.gate_id
                return self.current
            snapshot = self.step_forward()
            for condition in self._conditions:
                if condition.is_met(snapshot.state):
                    self.hit_condition = condition
                    return snapshot
        return self.current

    def run_to_gate(self, gate_index: int) -> DebugState:
        """Move to the state just before ``gate_index`` (clamped to the circuit)."""
        gate_index = max(0, min(gate_index, len(self._gates)))
        while self.current_step > gate_index:
            self.step_backward()
        while self.current_step < gate_index:
            self.step_forward()
        return self.current

    # ---- Breakpoints ------------------------------------------------------

    def toggle_breakpoint(self, gate_id: str) -> bool:
        """Returns True if the breakpoint is now set."""
        if gate_id in self._breakpoints:
            self._breakpoints.discard(gate_id)
            return False
        self._breakpoints.add(gate_id)
        return True

    def add_break_condition(self, condition: BreakCondition):
        self._conditions.append(condition)

    def remove_break_condition(self, index: int):
        if 0 <= index < len(self._conditions):
            del self._conditions[index]
