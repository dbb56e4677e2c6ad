"""JSON save/load for quantum circuits."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, asdict
from pathlib import Path

from qcircuit.engine.circuit import QuantumCircuit
from qcircuit.engine.errors import CircuitImportError

logger = logging.getLogger(__name__)

_REQUIRED_GATE_FIELDS = ("type", "wireIndex", "position")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CircuitSerializer:
    """JSON save/load for quantum circuits.

    Format: ``{"version", "numQubits", "gates": [{"type", "wireIndex",
    "position", "controlWire", "controlWire2"?, "parameter"?}]}``.
    """

    FILE_VERSION = "1.0"

    @staticmethod
    def validate(data) -> None:
        """Raise CircuitImportError unless ``data`` has the shape of a saved circuit."""
        if not isinstance(data, dict):
            raise CircuitImportError("Circuit data must be a JSON object")
        if "numQubits" not in data:
            raise CircuitImportError("Missing 'numQubits'")
        if "gates" not in data:
            raise CircuitImportError("Missing 'gates'")
        if not _is_int(data["numQubits"]) or data["numQubits"] < 1:
            raise CircuitImportError(
                f"'numQubits' must be a positive integer, got {data['numQubits']!r}")
        if not isinstance(data["gates"], list):
            raise CircuitImportError("'gates' must be a list")
        version = data.get("version", CircuitSerializer.FILE_VERSION)
        if version != CircuitSerializer.FILE_VERSION:
            logger.warning("Circuit file version %s, expected %s; loading anyway",
                           version, CircuitSerializer.FILE_VERSION)
        for idx, gate in enumerate(data["gates"]):
            if not isinstance(gate, dict):
                raise CircuitImportError(f"Gate #{idx} is not an object")
            missing = [k for k in _REQUIRED_GATE_FIELDS if k not in gate]
            if missing:
                raise CircuitImportError(f"Gate #{idx} is missing {', '.join(missing)}")
            if not isinstance(gate["type"], str):
                raise CircuitImportError(f"Gate #{idx} has a non-string type")
            for key in ("wireIndex", "position", "controlWire", "controlWire2"):
                value = gate.get(key)
                if value is not None and not _is_int(value):
                    raise CircuitImportError(f"Gate #{idx} has a non-integer '{key}'")
            if gate.get("id") is not None and not isinstance(gate["id"], str):
                raise CircuitImportError(f"Gate #{idx} has a non-string id")
            param = gate.get("parameter")
            if param is not None and (isinstance(param, bool)
                                      or not isinstance(param, (int, float))):
                raise CircuitImportError(f"Gate #{idx} has a non-numeric parameter")

    @staticmethod
    def dumps(circuit: QuantumCircuit) -> str:
        return json.dumps(circuit.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def loads(text: str) -> QuantumCircuit:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CircuitImportError(f"Invalid JSON: {e}") from e
        CircuitSerializer.validate(data)
        return QuantumCircuit.from_dict(data)

    @staticmethod
    def import_or_keep(text: str, current: QuantumCircuit) -> QuantumCircuit:
        """Parse ``text``; on failure log it and return ``current`` untouched."""
        try:
            return CircuitSerializer.loads(text)
        except CircuitImportError as e:
            logger.warning("Circuit import failed, keeping current circuit: %s", e, exc_info=True)
            return current

    @staticmethod
    def save(circuit: QuantumCircuit, filepath: Path | str):
        filepath = Path(filepath)
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(CircuitSerializer.dumps(circuit))

    @staticmethod
    def load(filepath: Path | str) -> QuantumCircuit:
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8') as f:
            return CircuitSerializer.loads(f.read())


@dataclass
class SavedCircuit:
    """A named circuit stored in a CircuitLibrary."""
    id: str
    name: str
    created_at: float
    updated_at: float
    circuit: dict


class CircuitLibrary:
    """Named circuits kept together in one JSON file."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    def _read(self) -> list[SavedCircuit]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                entries = json.load(f)
            return [SavedCircuit(**entry) for entry in entries]
        except (json.JSONDecodeError, OSError, TypeError):
            logger.warning("Circuit library %s is unreadable; treating it as empty",
                           self._path, exc_info=True)
            return []

    def _write(self, entries: list[SavedCircuit]):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, 'w', encoding='utf-8') as f:
            json.dump([asdict(e) for e in entries], f, indent=2, ensure_ascii=False)

    def list(self) -> list[SavedCircuit]:
        return self._read()

    def save(self, name: str, circuit: QuantumCircuit,
             existing_id: str | None = None) -> SavedCircuit:
        entries = self._read()
        now = time.time()
        previous = next((e for e in entries if e.id == existing_id), None)
        entry = SavedCircuit(
            id=existing_id or f"circuit-{int(now * 1000)}",
            name=name,
            created_at=previous.created_at if previous else now,
            updated_at=now,
            circuit=circuit.to_dict(),
        )
        if previous is not None:
            entries[entries.index(previous)] = entry
        else:
            entries.insert(0, entry)
        self._write(entries)
        return entry

    def load(self, circuit_id: str) -> QuantumCircuit | None:
        for entry in self._read():
            if entry.id == circuit_id:
                CircuitSerializer.validate(entry.circuit)
                return QuantumCircuit.from_dict(entry.circuit)
        return None

    def delete(self, circuit_id: str):
        self._write([e for e in self._read() if e.id != circuit_id])

    def rename(self, circuit_id: str, new_name: str):
        entries = self._read()
        for entry in entries:
            if entry.id == circuit_id:
                entry.name = new_name
                entry.updated_at = time.time()
                self._write(entries)
                return
