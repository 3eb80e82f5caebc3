"""
Blueprint Runtime

Execution engine for blueprint-style visual scripts.

A blueprint is a graph of typed nodes connected by wires:
- exec wires define control flow (what runs next)
- data wires carry values, resolved lazily when a node needs them

`execute_blueprint(nodes, wires)` runs a graph to completion and returns the
console trace (prints, warnings, errors, then the final variable dump).
Canvas editing and rendering live in the editor, not here.
"""

from .core.config import EngineConfig
from .core.vars import VariableStore
from .engine import Interpreter, PinEvaluator, TraceSink, execute_blueprint, run_graph
from .graph import (
    DataType,
    Graph,
    GraphBuilder,
    GraphError,
    Node,
    NodeKind,
    Pin,
    PinDirection,
    Wire,
    create_node,
    load_graph_json,
)

__version__ = "0.1.0"

__all__ = [
    # Graph model
    "DataType",
    "PinDirection",
    "NodeKind",
    "Pin",
    "Node",
    "Wire",
    "Graph",
    "GraphError",
    "load_graph_json",
    "create_node",
    "GraphBuilder",
    # Engine
    "EngineConfig",
    "VariableStore",
    "PinEvaluator",
    "TraceSink",
    "Interpreter",
    "execute_blueprint",
    "run_graph",
]
