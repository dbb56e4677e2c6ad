"""Quantum circuit data model."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass
class GateInstance:
    """A specific gate placed in the circuit.

    ``target`` is the wire the gate is drawn on; ``position`` is its
    time-slot.  Controlled gates name their control wire(s) explicitly and
    swap-type gates act on ``target`` and ``target + 1``.
    """
    gate_type: str
    target: int
    position: int = 0
    control_wire: int | None = None
    control_wire2: int | None = None
    param: float | None = None
    gate_id: str = ""

    @property
    def controls(self) -> list[int]:
        return [c for c in (self.control_wire, self.control_wire2) if c is not None]

    def active_controls(self, num_controls: int) -> list[int]:
        """Controls the engine uses: the first ``num_controls`` slots that are set."""
        slots = (self.control_wire, self.control_wire2)[:num_controls]
        return [c for c in slots if c is not None]

    @property
    def is_controlled(self) -> bool:
        return bool(self.controls)

    def wires(self) -> list[int]:
        """Wires this gate reads or writes, target first."""
        wires = [self.target] + self.controls
        if self.gate_type in ("SWAP", "CSWAP"):
            wires.append(self.target + 1)
        return wires

    def with_changes(self, **changes) -> GateInstance:
        return replace(self, **changes)

    def to_dict(self) -> dict:
        d = {
            "type": self.gate_type,
            "wireIndex": self.target,
            "position": self.position,
            "controlWire": self.control_wire,
        }
        if self.control_wire2 is not None:
            d["controlWire2"] = self.control_wire2
        if self.param is not None:
            d["parameter"] = self.param
        return d

    @classmethod
    def from_dict(cls, data: dict, gate_id: str = "") -> GateInstance:
        return cls(
            gate_type=data["type"],
            target=data["wireIndex"],
            position=data["position"],
            control_wire=data.get("controlWire"),
            control_wire2=data.get("controlWire2"),
            param=data.get("parameter"),
            gate_id=data.get("id", gate_id),
        )


def _id_number(gate_id) -> int:
    if not isinstance(gate_id, str):
        return 0
    head, _, tail = gate_id.rpartition("-")
    return int(tail) if head == "gate" and tail.isdigit() else 0


def order_by_position(gates: list[GateInstance]) -> list[GateInstance]:
    """Stable sort by position: gates sharing a slot keep insertion order."""
    return sorted(gates, key=lambda g: g.position)


@dataclass
class QuantumCircuit:
    """The full circuit model - a sparse placement of gates on n wires."""
    num_qubits: int = 2
    gates: list[GateInstance] = field(default_factory=list)
    _next_id: int = field(default=1, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.num_qubits < 1:
            raise ValueError(f"num_qubits must be >= 1, got {self.num_qubits}")
        gates, self.gates = self.gates, []
        for gate in gates:
            self.add_gate(gate)

    def add_gate(self, gate: GateInstance) -> GateInstance:
        """Place a gate; a gate without an id receives the next ``gate-N``."""
        if not gate.gate_id:
            gate.gate_id = f"gate-{self._next_id}"
            self._next_id += 1
        else:
            self._next_id = max(self._next_id, _id_number(gate.gate_id) + 1)
        self.gates.append(gate)
        return gate

    def remove_gate(self, gate_id: str) -> GateInstance | None:
        """Remove a gate by id. Positions of the remaining gates are untouched."""
        gate = self.get_gate(gate_id)
        if gate is not None:
            self.gates.remove(gate)
        return gate

    def get_gate(self, gate_id: str) -> GateInstance | None:
        for gate in self.gates:
            if gate.gate_id == gate_id:
                return gate
        return None

    def move_gate(self, gate_id: str, new_position: int, new_target: int | None = None):
        gate = self.get_gate(gate_id)
        if gate is not None:
            gate.position = new_position
            if new_target is not None:
                gate.target = new_target

    def get_column_count(self) -> int:
        if not self.gates:
            return 0
        return max(g.position for g in self.gates) + 1

    def get_gates_at_position(self, position: int) -> list[GateInstance]:
        return [g for g in self.gates if g.position == position]

    def ordered_gates(self) -> list[GateInstance]:
        return order_by_position(self.gates)

    def gates_on_wire(self, wire: int) -> list[GateInstance]:
        """Gates touching ``wire`` (as target, control or swap partner), by position."""
        return [g for g in self.ordered_gates() if wire in g.wires()]

    def compute_layers(self) -> list[list[GateInstance]]:
        """Group gates by position, sorted by position ascending."""
        by_position: dict[int, list[GateInstance]] = {}
        for gate in self.gates:
            by_position.setdefault(gate.position, []).append(gate)
        return [by_position[p] for p in sorted(by_position)]

    def circuit_hash(self) -> int:
        """Compute a hash of the circuit structure for invalidation checks."""
        parts: list = [self.num_qubits]
        for g in self.gates:
            parts.append((g.gate_type, g.target, g.position, g.control_wire,
                          g.control_wire2, g.param))
        return hash(tuple(parts))

    def clear(self):
        self.gates.clear()

    def set_num_qubits(self, n: int):
        if n < 1:
            raise ValueError(f"num_qubits must be >= 1, got {n}")
        # Remove gates that reference wires >= n
        self.gates = [g for g in self.gates if all(w < n for w in [g.target] + g.controls)]
        self.num_qubits = n

    def gate_count(self) -> int:
        return len(self.gates)

    def with_gates(self, gates: list[GateInstance]) -> QuantumCircuit:
        """New circuit on the same wires holding ``gates``."""
        return QuantumCircuit(num_qubits=self.num_qubits, gates=list(gates))

    def to_dict(self) -> dict:
        return {
            "version": "1.0",
            "numQubits": self.num_qubits,
            "gates": [g.to_dict() for g in self.ordered_gates()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> QuantumCircuit:
        circuit = cls(num_qubits=data["numQubits"])
        for idx, g_data in enumerate(data["gates"]):
            circuit.add_gate(GateInstance.from_dict(g_data, gate_id=f"gate-{idx + 1}"))
        return circuit
