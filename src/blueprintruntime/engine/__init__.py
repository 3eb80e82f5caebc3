"""Blueprint execution engine: pin evaluation, loop state and the exec interpreter."""

from .builtins import BUILTIN_HANDLERS, NodeWarning, get_builtin_handler
from .evaluator import PinEvaluator
from .interpreter import (
    ENTRY_NOT_FOUND,
    MAX_STEPS_REACHED,
    Interpreter,
    execute_blueprint,
    run_graph,
)
from .loops import ForLoopState, LoopStateTracker, LoopStep, WhileLoopState
from .trace import SEPARATOR, TraceSink

__all__ = [
    "Interpreter",
    "execute_blueprint",
    "run_graph",
    "ENTRY_NOT_FOUND",
    "MAX_STEPS_REACHED",
    "PinEvaluator",
    "NodeWarning",
    "BUILTIN_HANDLERS",
    "get_builtin_handler",
    "LoopStateTracker",
    "ForLoopState",
    "WhileLoopState",
    "LoopStep",
    "TraceSink",
    "SEPARATOR",
]
