"""Lazy data-pin evaluation with a generation-stamped memo cache.

`evaluate(node_id, pin_id)` resolves the value flowing into an input pin by
walking its wire back to the source node and computing that node's output.
The source's own inputs are resolved depth-first with an explicit stack,
so chain length is not bounded by the recursion limit. Unwired inputs fall
back to a node property when the kind declares one.

Outputs of pure nodes are cached per (node, pin) and stamped with the
current generation. The interpreter bumps the generation whenever mutable
state changes (variable write/clear, loop advance), so cached values are
reused within one exec step but never go stale. Reads of mutable state
(GetVariable, ForLoop.Index) bypass the cache.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Set, Tuple

from ..core.vars import VariableStore
from ..graph.kinds import NodeKind, data_kinds, get_kind_spec
from ..graph.models import Graph, Node, Pin, Wire
from .builtins import BUILTIN_HANDLERS, NodeWarning
from .loops import LoopStateTracker
from .trace import TraceSink

# Kinds whose output reflects mutable run state; never cached.
VOLATILE_KINDS = frozenset({NodeKind.GET_VARIABLE, NodeKind.FOR_LOOP})


@dataclass
class _Frame:
    """One node whose data inputs are being gathered."""

    node: Node
    pin: Pin
    pending: Deque[Pin]
    inputs: Dict[str, Any] = field(default_factory=dict)
    # label of the input currently being resolved further down the stack
    waiting: str = ""


class PinEvaluator:
    def __init__(
        self,
        graph: Graph,
        *,
        variables: VariableStore,
        loops: LoopStateTracker,
        trace: TraceSink,
        rng: Optional[random.Random] = None,
    ):
        self._graph = graph
        self._variables = variables
        self._loops = loops
        self._trace = trace
        self._rng = rng or random.Random()
        self._generation = 0
        self._cache: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self._in_progress: Set[str] = set()
        self._stateful: Dict[NodeKind, Callable[[Node, Pin], Any]] = {
            NodeKind.GET_VARIABLE: self._read_variable,
            NodeKind.FOR_LOOP: self._read_loop_index,
        }
        self.cache_hits = 0

    @property
    def generation(self) -> int:
        return self._generation

    def bump(self) -> int:
        """Invalidate every cached output (called after a state mutation)."""
        self._generation += 1
        return self._generation

    def evaluate(self, node_id: str, pin_id: str) -> Any:
        node = self._graph.node(node_id)
        if node is None:
            return None
        for pin in node.outputs:
            if pin.id == pin_id:
                return self._output(node, pin)
        for pin in node.inputs:
            if pin.id == pin_id:
                return self._input(node, pin)
        return None

    def input_value(self, node: Node, label: str) -> Any:
        """Value of the input pin labelled `label` (property fallback if unwired or missing)."""
        pin = node.input_pin(label)
        if pin is None:
            return self._fallback(node, label)
        return self._input(node, pin)

    def _fallback(self, node: Node, label: str) -> Any:
        prop = get_kind_spec(node.kind).property_fallbacks.get(label)
        if prop is None:
            return None
        return node.properties.get(prop)

    def _source(self, wire: Wire) -> Tuple[Optional[Node], Optional[Pin]]:
        source = self._graph.node(wire.from_node_id)
        if source is None:
            return None, None
        for out in source.outputs:
            if out.id == wire.from_pin_id:
                return source, out
        return source, None

    def _input(self, node: Node, pin: Pin) -> Any:
        wire = self._graph.incoming_wire(node.id, pin.id)
        if wire is None:
            return self._fallback(node, pin.label)
        source, out = self._source(wire)
        if source is None or out is None:
            return None
        return self._output(source, out)

    def _ready(self, node: Node, pin: Pin) -> Tuple[bool, Any]:
        """(True, value) when the output is known without running a handler."""
        if pin.is_exec or not get_kind_spec(node.kind).is_data:
            return True, None

        stateful = self._stateful.get(node.kind)
        if stateful is not None:
            return True, stateful(node, pin)

        cached = self._cache.get((node.id, pin.id))
        if cached is not None and cached[0] == self._generation:
            self.cache_hits += 1
            return True, cached[1]

        if node.id in self._in_progress:
            self._trace.warning(node, "has a circular data dependency. Returning no value.")
            return True, None
        return False, None

    def _open(self, node: Node, pin: Pin) -> _Frame:
        self._in_progress.add(node.id)
        return _Frame(
            node=node,
            pin=pin,
            pending=deque(p for p in node.inputs if not p.is_exec),
            inputs={"_properties": node.properties, "_rng": self._rng},
        )

    def _output(self, node: Node, pin: Pin) -> Any:
        done, value = self._ready(node, pin)
        if done:
            return value

        stack: List[_Frame] = [self._open(node, pin)]
        try:
            while True:
                frame = stack[-1]
                if frame.pending:
                    input_pin = frame.pending.popleft()
                    wire = self._graph.incoming_wire(frame.node.id, input_pin.id)
                    if wire is None:
                        frame.inputs[input_pin.label] = self._fallback(frame.node, input_pin.label)
                        continue
                    source, out = self._source(wire)
                    if source is None or out is None:
                        frame.inputs[input_pin.label] = None
                        continue
                    done, value = self._ready(source, out)
                    if done:
                        frame.inputs[input_pin.label] = value
                        continue
                    frame.waiting = input_pin.label
                    stack.append(self._open(source, out))
                    continue

                stack.pop()
                value = self._compute(frame)
                if not stack:
                    return value
                parent = stack[-1]
                parent.inputs[parent.waiting] = value
        finally:
            for frame in stack:
                self._in_progress.discard(frame.node.id)

    def _compute(self, frame: _Frame) -> Any:
        node = frame.node
        self._in_progress.discard(node.id)
        handler = BUILTIN_HANDLERS[node.kind]
        try:
            value = handler(frame.inputs)
        except NodeWarning as w:
            self._trace.warning(node, w.message)
            value = w.fallback
        self._cache[(node.id, frame.pin.id)] = (self._generation, value)
        return value

    def _read_variable(self, node: Node, pin: Pin) -> Any:
        name = node.properties.get("name")
        if name is None:
            return None
        return self._variables.get(str(name))

    def _read_loop_index(self, node: Node, pin: Pin) -> Any:
        return self._loops.current_index(node.id)


def _check_exhaustive() -> None:
    covered = set(BUILTIN_HANDLERS) | VOLATILE_KINDS
    missing = sorted(k.value for k in data_kinds() if k not in covered)
    if missing:
        raise RuntimeError(f"Data-producing kinds without an evaluation rule: {', '.join(missing)}")


_check_exhaustive()
