"""Control-flow interpreter for blueprint graphs.

A run drives a FIFO work queue of exec nodes seeded with the single
`BeginPlay` node. Each dequeued node is dispatched by kind; its behavior may
read data pins (through the `PinEvaluator`), mutate the variable store or loop
state (bumping the evaluator's generation) and returns the successor nodes to
enqueue.

Guards keep every run bounded:
- a global cap on dequeued steps (cycles made of Branch/Sequence wires)
- a per-loop-instance iteration cap (ForLoop / WhileLoop)

The run never raises: problems become trace lines with a defined fallback,
and the trailer (`---` + variable dump) is always appended except when the
entry node is missing.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional

from ..core.config import EngineConfig
from ..core.values import describe, display_string, is_truthy, to_integer
from ..core.vars import VariableStore
from ..graph.kinds import NodeKind, exec_kinds
from ..graph.models import Graph, Node, Wire
from ..logging import get_logger
from .evaluator import PinEvaluator
from .loops import LoopStateTracker, LoopStep
from .trace import TraceSink

logger = get_logger(__name__)

ENTRY_NOT_FOUND = 'Error: "Begin Play" entry node not found.'
MAX_STEPS_REACHED = "Error: Maximum execution limit reached. Possible infinite loop."

LOOP_BODY = "Loop Body"
COMPLETED = "Completed"

# Exec-bearing kind -> Interpreter method implementing it.
EXEC_BEHAVIORS: Dict[NodeKind, str] = {
    NodeKind.BEGIN_PLAY: "_exec_passthrough",
    NodeKind.SEQUENCE: "_exec_sequence",
    NodeKind.PRINT_STRING: "_exec_print",
    NodeKind.SET_VARIABLE: "_exec_set_variable",
    NodeKind.CLEAR_VARIABLE: "_exec_clear_variable",
    NodeKind.BRANCH: "_exec_branch",
    NodeKind.FOR_LOOP: "_exec_for_loop",
    NodeKind.WHILE_LOOP: "_exec_while_loop",
}


class Interpreter:
    """Executes one graph. Every `run()` starts from fresh run-scoped state."""

    def __init__(self, graph: Graph, *, config: Optional[EngineConfig] = None):
        self.graph = graph
        self.config = config or EngineConfig()
        self._dispatch: Dict[NodeKind, Callable[[Node], List[Node]]] = {
            kind: getattr(self, name) for kind, name in EXEC_BEHAVIORS.items()
        }
        self._reset()

    def _reset(self) -> None:
        self.trace = TraceSink()
        self.variables = VariableStore()
        self.loops = LoopStateTracker()
        self.evaluator = PinEvaluator(
            self.graph,
            variables=self.variables,
            loops=self.loops,
            trace=self.trace,
            rng=random.Random(self.config.seed),
        )
        self.steps = 0

    def run(self) -> List[str]:
        self._reset()
        entries = self.graph.nodes_of_kind(NodeKind.BEGIN_PLAY)
        if not entries:
            logger.warning("blueprint run aborted: no entry node", nodes=len(self.graph))
            return [ENTRY_NOT_FOUND]
        if len(entries) > 1:
            logger.warning("multiple entry nodes; using the first", entry=entries[0].id, count=len(entries))

        log = logger.bind(entry=entries[0].id)
        log.debug("blueprint run started", nodes=len(self.graph), wires=len(self.graph.wires))

        queue: Deque[Node] = deque([entries[0]])
        max_steps = self.config.max_steps
        while queue and self.steps < max_steps:
            node = queue.popleft()
            self.steps += 1
            queue.extend(self._step(node))

        aborted = bool(queue)
        if aborted:
            log.warning("execution step limit reached", max_steps=max_steps, pending=len(queue))
            self.trace.error(MAX_STEPS_REACHED)

        self.trace.append_trailer(self.variables)
        log.debug(
            "blueprint run finished",
            steps=self.steps,
            aborted=aborted,
            warnings=self.trace.warnings,
            errors=self.trace.errors,
            cache_hits=self.evaluator.cache_hits,
        )
        return self.trace.lines

    def _step(self, node: Node) -> List[Node]:
        handler = self._dispatch.get(node.kind)
        if handler is None:
            # Pure data kinds have no exec pins and are never reached by exec wires.
            return []
        try:
            return handler(node)
        except Exception as e:
            logger.exception("node execution failed", node_id=node.id, kind=node.kind.value)
            self.trace.error(f"Error: {node.display_name} [{node.kind.value}] failed: {e}")
            return []

    # Successor lookup

    def _targets(self, wires: Iterable[Wire]) -> List[Node]:
        out: List[Node] = []
        for wire in wires:
            nxt = self.graph.node(wire.to_node_id)
            if nxt is not None:
                out.append(nxt)
        return out

    def _follow(self, node: Node, label: str) -> List[Node]:
        """Destinations of every exec output labelled `label`, in wire order."""
        out: List[Node] = []
        for pin in node.exec_outputs(label):
            out.extend(self._targets(self.graph.outgoing_wires(node.id, pin.id)))
        return out

    # Exec behaviors

    def _exec_passthrough(self, node: Node) -> List[Node]:
        return self._follow(node, "")

    def _exec_sequence(self, node: Node) -> List[Node]:
        out: List[Node] = []
        for pin in node.exec_outputs():
            out.extend(self._targets(self.graph.outgoing_wires(node.id, pin.id)))
        return out

    def _exec_print(self, node: Node) -> List[Node]:
        value = self.evaluator.input_value(node, "In String")
        self.trace.print(display_string(value))
        return self._follow(node, "")

    def _variable_name(self, node: Node) -> Optional[str]:
        name = node.properties.get("name")
        if name is None or not str(name).strip():
            self.trace.warning(node, "has no variable name. Skipping.")
            return None
        return str(name)

    def _exec_set_variable(self, node: Node) -> List[Node]:
        name = self._variable_name(node)
        if name is not None:
            self.variables.set(name, self.evaluator.input_value(node, "Value"))
            self.evaluator.bump()
        return self._follow(node, "")

    def _exec_clear_variable(self, node: Node) -> List[Node]:
        name = self._variable_name(node)
        if name is not None:
            self.variables.clear(name)
            self.evaluator.bump()
        return self._follow(node, "")

    def _exec_branch(self, node: Node) -> List[Node]:
        condition = is_truthy(self.evaluator.input_value(node, "Condition"))
        return self._follow(node, "True" if condition else "False")

    def _exec_for_loop(self, node: Node) -> List[Node]:
        state = self.loops.for_state(node.id)
        if state is None:
            raw_start = self.evaluator.input_value(node, "Start")
            raw_end = self.evaluator.input_value(node, "End")
            start = to_integer(raw_start)
            end = to_integer(raw_end)
            if start is None or end is None:
                self.trace.warning(
                    node,
                    f"received invalid Start/End values {describe(raw_start)} and {describe(raw_end)}. Skipping loop.",
                )
                return self._follow(node, COMPLETED)

            raw_step = self.evaluator.input_value(node, "Step")
            step = 1 if raw_step is None else to_integer(raw_step)
            if step is None or step == 0:
                step = 1 if start <= end else -1
                self.trace.warning(
                    node,
                    f"Step must be a non-zero integer but received {describe(raw_step)}. Using {step}.",
                )
            state = self.loops.start_for(node.id, start=start, end=end, step=step)

        outcome = state.advance(self.config.max_loop_iterations)
        if outcome is LoopStep.BODY:
            self.evaluator.bump()
            return self._follow(node, LOOP_BODY) + [node]

        self.loops.finish(node.id)
        if outcome is LoopStep.ABORTED:
            self._loop_aborted(node)
        return self._follow(node, COMPLETED)

    def _exec_while_loop(self, node: Node) -> List[Node]:
        state = self.loops.while_state(node.id)
        condition = is_truthy(self.evaluator.input_value(node, "Condition"))
        outcome = state.advance(condition, self.config.max_loop_iterations)
        if outcome is LoopStep.BODY:
            self.evaluator.bump()
            return self._follow(node, LOOP_BODY) + [node]

        self.loops.finish(node.id)
        if outcome is LoopStep.ABORTED:
            self._loop_aborted(node)
        return self._follow(node, COMPLETED)

    def _loop_aborted(self, node: Node) -> None:
        limit = self.config.max_loop_iterations
        logger.warning("loop iteration limit reached", node_id=node.id, kind=node.kind.value, limit=limit)
        self.trace.error(f"Error: {node.display_name} [{node.kind.value}] exceeded {limit} iterations. Loop aborted.")


def _check_exhaustive() -> None:
    missing = sorted(k.value for k in exec_kinds() if k not in EXEC_BEHAVIORS)
    if missing:
        raise RuntimeError(f"Exec-bearing kinds without interpreter behavior: {', '.join(missing)}")


_check_exhaustive()


def execute_blueprint(
    nodes: Iterable[Node],
    wires: Iterable[Wire],
    *,
    config: Optional[EngineConfig] = None,
) -> List[str]:
    """Run a node/wire collection and return the trace lines."""
    return Interpreter(Graph(nodes, wires), config=config).run()


def run_graph(graph: Graph, *, config: Optional[EngineConfig] = None) -> List[str]:
    return Interpreter(graph, config=config).run()
