"""Per-loop-node iteration state.

Loop nodes don't recurse: each visit advances an explicit state machine
keyed by node id, and the interpreter re-enqueues the loop node after its
body. State exists only while a loop is iterating; it is discarded on
completion or when the iteration guard trips.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class LoopStep(str, Enum):
    BODY = "body"            # run the body once more, then revisit the loop node
    COMPLETED = "completed"  # follow the Completed exec output
    ABORTED = "aborted"      # iteration cap reached; treated as completed


@dataclass
class ForLoopState:
    next_index: int
    end: int
    step: int
    direction: int
    iterations: int = 0
    current_index: int = 0

    def past_end(self) -> bool:
        if self.direction > 0:
            return self.next_index > self.end
        return self.next_index < self.end

    def advance(self, max_iterations: int) -> LoopStep:
        if self.past_end():
            return LoopStep.COMPLETED
        if self.iterations >= max_iterations:
            return LoopStep.ABORTED
        self.current_index = self.next_index
        self.next_index += self.step
        self.iterations += 1
        return LoopStep.BODY


@dataclass
class WhileLoopState:
    iterations: int = 0

    def advance(self, condition: bool, max_iterations: int) -> LoopStep:
        if not condition:
            return LoopStep.COMPLETED
        if self.iterations >= max_iterations:
            return LoopStep.ABORTED
        self.iterations += 1
        return LoopStep.BODY


class LoopStateTracker:
    def __init__(self):
        self._for: Dict[str, ForLoopState] = {}
        self._while: Dict[str, WhileLoopState] = {}

    def for_state(self, node_id: str) -> Optional[ForLoopState]:
        return self._for.get(node_id)

    def start_for(self, node_id: str, *, start: int, end: int, step: int) -> ForLoopState:
        """Begin iterating; `step`'s sign is normalized to the start -> end direction."""
        direction = 1 if start <= end else -1
        state = ForLoopState(
            next_index=start,
            end=end,
            step=abs(step) * direction,
            direction=direction,
            current_index=start,
        )
        self._for[node_id] = state
        return state

    def while_state(self, node_id: str) -> WhileLoopState:
        state = self._while.get(node_id)
        if state is None:
            state = WhileLoopState()
            self._while[node_id] = state
        return state

    def current_index(self, node_id: str) -> int:
        """Index of the active ForLoop instance, 0 when none is iterating."""
        state = self._for.get(node_id)
        return state.current_index if state is not None else 0

    def finish(self, node_id: str) -> None:
        self._for.pop(node_id, None)
        self._while.pop(node_id, None)

    def active(self) -> int:
        return len(self._for) + len(self._while)
