"""Quantum Circuit Simulator - command-line entry point.

Usage:
    python main.py circuit.json --shots 1024 --seed 42 --noise 0.01
    python main.py circuit.json --optimize --transpile --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

from qcircuit.core.config import EngineConfig
from qcircuit.core.serialization import CircuitSerializer
from qcircuit.engine.analysis import CircuitAnalyzer
from qcircuit.engine.errors import CircuitImportError
from qcircuit.engine.measurement import MeasurementEngine
from qcircuit.engine.noise import NoiseSimulator
from qcircuit.engine.optimizer import CircuitOptimizer
from qcircuit.engine.simulator import Simulator
from qcircuit.engine.transpiler import Transpiler

logger = logging.getLogger(__name__)

# Amplitudes below this magnitude are not printed.
_PRINT_EPS = 1e-10


def _build_parser(config: EngineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a saved quantum circuit")
    parser.add_argument("circuit", help="Circuit JSON file")
    parser.add_argument("--shots", type=int, default=config.default_shots)
    parser.add_argument("--seed", type=int, default=config.default_seed)
    parser.add_argument("--noise", type=float, default=None,
                        help="Noise level in [0, 1]; enables the noise report")
    parser.add_argument("--optimize", action="store_true",
                        help="Run the gate-cancellation optimizer first")
    parser.add_argument("--transpile", action="store_true",
                        help="Rewrite into {H, T, CNOT} before executing")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv=None) -> int:
    config = EngineConfig.load()
    args = _build_parser(config).parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        circuit = CircuitSerializer.load(args.circuit)
    except (CircuitImportError, OSError) as e:
        print(f"Cannot load {args.circuit}: {e}", file=sys.stderr)
        return 2
    logger.info("Loaded %s: %d qubit(s), %d gate(s)",
                args.circuit, circuit.num_qubits, circuit.gate_count())
    config.add_recent_file(str(Path(args.circuit).resolve()))
    try:
        config.save()
    except OSError as e:
        logger.warning("Could not save config to %s: %s", config.config_path, e)

    issues = CircuitAnalyzer.verify(circuit.gates, circuit.num_qubits)
    for issue in issues:
        print(f"[{issue.severity}] {issue.gate_id}: {issue.message}")
    if CircuitAnalyzer.has_errors(issues):
        return 1

    if args.optimize:
        result = CircuitOptimizer().optimize(circuit.gates)
        circuit = circuit.with_gates(result.gates)
        print(f"Optimizer removed {result.removed_count} gate(s)")
    if args.transpile:
        circuit = circuit.with_gates(Transpiler().transpile(circuit.gates, circuit.num_qubits))
        print(f"Transpiled to {circuit.gate_count()} gate(s) over {{H, T, CNOT}}")

    info = CircuitAnalyzer.analyze_depth(circuit.gates)
    print(f"Qubits: {circuit.num_qubits}  Gates: {info.total_ops}  Depth: {info.depth}  "
          f"Avg parallelism: {info.avg_parallelism:.2f}")

    state = Simulator().execute(circuit)
    print("Amplitudes:")
    for index, amp in enumerate(state.data):
        if abs(amp) > _PRINT_EPS:
            print(f"  |{state.bitstring(index)}>  {amp.real:+.4f}{amp.imag:+.4f}j  "
                  f"p={abs(amp) ** 2:.4f}")

    measured = MeasurementEngine.measure(state, args.shots, args.seed)
    print(f"Counts ({measured.shots} shots, seed {args.seed}):")
    for bitstring in sorted(measured.counts):
        print(f"  {bitstring}: {measured.counts[bitstring]}")
    print(f"Collapsed: |{measured.collapsed}>")

    if args.noise is not None:
        noise = NoiseSimulator(
            decoherence_coefficient=config.decoherence_coefficient,
            seed_offset=config.noise_seed_offset,
        )
        report = noise.simulate(circuit, state, args.noise, args.seed)
        print(f"Noise {args.noise:.3f}: fidelity={report.fidelity:.4f}  "
              f"error_rate={report.error_rate:.4f}  "
              f"decoherence={report.decoherence_effect:.4f}  "
              f"injected={report.injected_errors}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
