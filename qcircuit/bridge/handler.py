"""Command dispatch for the bridge protocol.

Holds one working circuit and the last executed state, and answers
BridgeMessage requests against them.
"""

from __future__ import annotations

import logging

from qcircuit.core.config import EngineConfig
from qcircuit.core.serialization import CircuitSerializer
from qcircuit.engine.analysis import CircuitAnalyzer, StateAnalysis
from qcircuit.engine.circuit import GateInstance, QuantumCircuit
from qcircuit.engine.measurement import MeasurementEngine
from qcircuit.engine.noise import NoiseSimulator
from qcircuit.engine.optimizer import CircuitOptimizer
from qcircuit.engine.simulator import Simulator
from qcircuit.engine.state_vector import StateVector
from qcircuit.engine.transpiler import Transpiler

from .protocol import BridgeMessage

logger = logging.getLogger(__name__)


def _state_payload(state: StateVector) -> dict:
    return {
        "num_qubits": state.num_qubits,
        "amplitudes": [{"re": float(a.real), "im": float(a.imag)} for a in state.data],
        "probabilities": state.probabilities.tolist(),
    }


class BridgeCommandHandler:
    """Processes incoming commands and produces responses.

    Every public entry point returns a BridgeMessage; failures become
    error responses and are logged, they never propagate.
    """

    def __init__(self, config: EngineConfig | None = None):
        self._config = config or EngineConfig()
        self._circuit = QuantumCircuit(num_qubits=2)
        self._state: StateVector | None = None
        self._simulator = Simulator()
        self._noise = NoiseSimulator(
            decoherence_coefficient=self._config.decoherence_coefficient,
            seed_offset=self._config.noise_seed_offset,
        )

    @property
    def circuit(self) -> QuantumCircuit:
        return self._circuit

    def handle(self, msg: BridgeMessage) -> BridgeMessage:
        """Route a request message to the appropriate handler."""
        action = msg.action
        handler = getattr(self, f"_cmd_{action}", None)
        if handler is None:
            return BridgeMessage.error_response(msg.id, f"Unknown action: {action}")
        try:
            return handler(msg)
        except Exception as e:
            logger.error("Bridge command '%s' failed: %s", action, e, exc_info=True)
            return BridgeMessage.error_response(msg.id, str(e))

    def handle_line(self, line: str) -> str:
        """One JSON request line in, one JSON response line out."""
        try:
            msg = BridgeMessage.from_json(line)
        except ValueError as e:
            return BridgeMessage.error_response("", f"Invalid message: {e}").to_line()
        return self.handle(msg).to_line()

    # -- helpers --

    def _executed_state(self) -> StateVector:
        if self._state is None:
            self._state = self._simulator.execute(self._circuit)
        return self._state

    def _invalidate(self):
        self._state = None

    # -- circuit editing --

    def _cmd_ping(self, msg: BridgeMessage) -> BridgeMessage:
        return BridgeMessage.ok_response(msg.id, {"pong": True})

    def _cmd_get_circuit(self, msg: BridgeMessage) -> BridgeMessage:
        return BridgeMessage.ok_response(msg.id, self._circuit.to_dict())

    def _cmd_set_circuit(self, msg: BridgeMessage) -> BridgeMessage:
        circuit_dict = msg.params.get("circuit")
        if circuit_dict is None:
            return BridgeMessage.error_response(msg.id, "Missing 'circuit' param")
        CircuitSerializer.validate(circuit_dict)
        if circuit_dict["numQubits"] > self._config.max_qubits:
            return BridgeMessage.error_response(
                msg.id, f"Circuit has {circuit_dict['numQubits']} qubits, "
                        f"limit is {self._config.max_qubits}")
        self._circuit = QuantumCircuit.from_dict(circuit_dict)
        self._invalidate()
        return BridgeMessage.ok_response(msg.id, {
            "num_qubits": self._circuit.num_qubits,
            "gate_count": self._circuit.gate_count(),
        })

    def _cmd_add_gate(self, msg: BridgeMessage) -> BridgeMessage:
        p = msg.params
        if "type" not in p or "wireIndex" not in p:
            return BridgeMessage.error_response(msg.id, "Missing 'type' or 'wireIndex' param")
        gate = GateInstance.from_dict({
            "type": p["type"],
            "wireIndex": p["wireIndex"],
            "position": p.get("position", self._circuit.get_column_count()),
            "controlWire": p.get("controlWire"),
            "controlWire2": p.get("controlWire2"),
            "parameter": p.get("parameter"),
        })
        self._circuit.add_gate(gate)
        self._invalidate()
        return BridgeMessage.ok_response(msg.id, {
            "gate_id": gate.gate_id,
            "gate_count": self._circuit.gate_count(),
        })

    def _cmd_remove_gate(self, msg: BridgeMessage) -> BridgeMessage:
        gate_id = msg.params.get("gate_id", "")
        if self._circuit.remove_gate(gate_id) is None:
            return BridgeMessage.error_response(msg.id, f"No gate with id '{gate_id}'")
        self._invalidate()
        return BridgeMessage.ok_response(msg.id, {"gate_count": self._circuit.gate_count()})

    def _cmd_clear_circuit(self, msg: BridgeMessage) -> BridgeMessage:
        self._circuit.clear()
        self._invalidate()
        return BridgeMessage.ok_response(msg.id)

    # -- execution --

    def _cmd_run(self, msg: BridgeMessage) -> BridgeMessage:
        self._state = self._simulator.execute(self._circuit)
        return BridgeMessage.ok_response(msg.id, _state_payload(self._state))

    def _cmd_get_state(self, msg: BridgeMessage) -> BridgeMessage:
        if self._state is None:
            return BridgeMessage.error_response(msg.id, "No simulation result")
        return BridgeMessage.ok_response(msg.id, _state_payload(self._state))

    def _cmd_measure(self, msg: BridgeMessage) -> BridgeMessage:
        shots = int(msg.params.get("shots", self._config.default_shots))
        seed = int(msg.params.get("seed", self._config.default_seed))
        result = MeasurementEngine.measure(self._executed_state(), shots, seed)
        return BridgeMessage.ok_response(msg.id, {
            "shots": result.shots,
            "counts": result.counts,
            "collapsed": result.collapsed,
        })

    # -- analysis and transformation --

    def _cmd_analyze(self, msg: BridgeMessage) -> BridgeMessage:
        info = CircuitAnalyzer.analyze_depth(self._circuit.gates)
        state = self._executed_state()
        return BridgeMessage.ok_response(msg.id, {
            "depth": info.depth,
            "total_ops": info.total_ops,
            "avg_parallelism": info.avg_parallelism,
            "layers": [
                {"position": layer.position,
                 "gates": [g.gate_id for g in layer.gates]}
                for layer in info.layers
            ],
            "entropy": StateAnalysis.shannon_entropy(state),
        })

    def _cmd_verify(self, msg: BridgeMessage) -> BridgeMessage:
        issues = CircuitAnalyzer.verify(self._circuit.gates, self._circuit.num_qubits)
        return BridgeMessage.ok_response(msg.id, {
            "valid": not CircuitAnalyzer.has_errors(issues),
            "issues": [
                {"gate_id": i.gate_id, "severity": i.severity, "message": i.message}
                for i in issues
            ],
        })

    def _cmd_optimize(self, msg: BridgeMessage) -> BridgeMessage:
        result = CircuitOptimizer().optimize(self._circuit.gates)
        if msg.params.get("apply", True):
            self._circuit = self._circuit.with_gates(result.gates)
            self._invalidate()
        return BridgeMessage.ok_response(msg.id, {
            "removed": result.removed_count,
            "passes": result.passes,
            "gates": [g.to_dict() for g in result.gates],
        })

    def _cmd_transpile(self, msg: BridgeMessage) -> BridgeMessage:
        gates = Transpiler().transpile(self._circuit.gates, self._circuit.num_qubits)
        if msg.params.get("apply", False):
            self._circuit = self._circuit.with_gates(gates)
            self._invalidate()
        return BridgeMessage.ok_response(msg.id, {
            "gate_count": len(gates),
            "gates": [g.to_dict() for g in gates],
        })

    # -- noise --

    def _noise_args(self, msg: BridgeMessage) -> tuple[float, int]:
        return (float(msg.params.get("noise_level", self._config.noise_level)),
                int(msg.params.get("seed", self._config.default_seed)))

    def _cmd_simulate_noise(self, msg: BridgeMessage) -> BridgeMessage:
        noise_level, seed = self._noise_args(msg)
        result = self._noise.simulate(self._circuit, self._executed_state(), noise_level, seed)
        return BridgeMessage.ok_response(msg.id, {
            "fidelity": result.fidelity,
            "error_rate": result.error_rate,
            "decoherence_effect": result.decoherence_effect,
            "injected_errors": result.injected_errors,
        })

    def _cmd_compare(self, msg: BridgeMessage) -> BridgeMessage:
        noise_level, seed = self._noise_args(msg)
        cmp = self._noise.compare(self._circuit, self._executed_state(), noise_level, seed)
        return BridgeMessage.ok_response(msg.id, {
            "fidelity": cmp.fidelity,
            "ideal_probs": cmp.ideal_probs.tolist(),
            "noisy_probs": cmp.noisy_probs.tolist(),
            "state_overlap": cmp.state_overlap.tolist(),
            "prob_difference": cmp.prob_difference.tolist(),
        })
