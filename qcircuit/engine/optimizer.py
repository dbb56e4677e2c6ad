"""Algebraic circuit optimization -- peephole cancellation of adjacent gates.

Provides:
- OptimizationResult: optimized gate list plus bookkeeping
- CircuitOptimizer: fixed-point rewriting followed by position compaction
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .circuit import GateInstance, order_by_position
from .gate_registry import GateRegistry
from .gates import GateKind

logger = logging.getLogger(__name__)

# Adjacent identical pairs that multiply to the identity.
SELF_INVERSE = frozenset({"H", "X", "Y", "Z"})

# Adjacent identical pairs that merge into a single gate.
MERGE_RULES = {"S": "Z"}


@dataclass
class OptimizationResult:
    """Result of an optimization run."""

    gates: list[GateInstance]
    removed_count: int
    passes: int


class CircuitOptimizer:
    """Removes H·H, X·X, Y·Y, Z·Z and rewrites S·S as Z until nothing changes.

    Two gates are adjacent on a wire when no other gate touching that wire
    (as target, control or swap partner) sits between them.  Only
    uncontrolled single-qubit gates take part in a rewrite.
    """

    def __init__(self, max_passes: int = 1000):
        self._registry = GateRegistry.instance()
        self._max_passes = max_passes

    def _is_candidate(self, gate: GateInstance, wire: int) -> bool:
        if gate.target != wire or gate.is_controlled:
            return False
        if not self._registry.contains(gate.gate_type):
            return False
        return self._registry.get(gate.gate_type).gate_kind == GateKind.SINGLE

    def _rewrite_once(self, gates: list[GateInstance]) -> tuple[list[GateInstance], int] | None:
        """Apply the first matching identity. Returns (gates, removed) or None."""
        wires = sorted({w for g in gates for w in g.wires()})
        for wire in wires:
            on_wire = [g for g in order_by_position(gates) if wire in g.wires()]
            for first, second in zip(on_wire, on_wire[1:]):
                if first.position == second.position:
                    continue
                if not (self._is_candidate(first, wire) and self._is_candidate(second, wire)):
                    continue
                if first.gate_type != second.gate_type:
                    continue

                if first.gate_type in SELF_INVERSE:
                    logger.debug("Cancel %s·%s on wire %d (%s, %s)", first.gate_type,
                                 second.gate_type, wire, first.gate_id, second.gate_id)
                    return [g for g in gates if g is not first and g is not second], 2

                merged_type = MERGE_RULES.get(first.gate_type)
                if merged_type is not None:
                    logger.debug("Merge %s·%s -> %s on wire %d", first.gate_type,
                                 second.gate_type, merged_type, wire)
                    result = []
                    for g in gates:
                        if g is first:
                            result.append(g.with_changes(gate_type=merged_type))
                        elif g is not second:
                            result.append(g)
                    return result, 1
        return None

    @staticmethod
    def compact(gates: list[GateInstance]) -> list[GateInstance]:
        """Close position gaps while keeping every wire's gate order.

        Gates are placed in original position order at the earliest slot
        after the last gate on any wire they touch, so a wire holding only
        single-qubit gates ends up on positions 0..k-1.
        """
        next_free: dict[int, int] = {}
        compacted = []
        for gate in order_by_position(gates):
            wires = gate.wires()
            slot = max(next_free.get(w, 0) for w in wires)
            for w in wires:
                next_free[w] = slot + 1
            compacted.append(gate.with_changes(position=slot))
        return compacted

    def optimize(self, gates: list[GateInstance]) -> OptimizationResult:
        """Rewrite to a fixed point, then compact. The input list is not mutated."""
        current = [g.with_changes() for g in gates]
        removed = 0
        passes = 0
        while passes < self._max_passes:
            rewritten = self._rewrite_once(current)
            if rewritten is None:
                break
            current, count = rewritten
            removed += count
            passes += 1
        else:
            logger.warning("Optimizer stopped after %d passes without reaching a fixed point",
                           self._max_passes)

        logger.info("Optimizer removed %d gate(s) in %d pass(es)", removed, passes)
        return OptimizationResult(
            gates=self.compact(current),
            removed_count=removed,
            passes=passes,
        )
