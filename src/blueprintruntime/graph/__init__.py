"""Blueprint graph model: node kinds, pins, wires and construction helpers."""

from .builder import GraphBuilder, create_node
from .datatypes import DataType, PinDirection
from .kinds import KIND_SPECS, KindSpec, NodeKind, PinTemplate, get_kind_spec
from .models import Graph, GraphError, Node, Pin, Wire, load_graph_json

__all__ = [
    "DataType",
    "PinDirection",
    "NodeKind",
    "KindSpec",
    "PinTemplate",
    "KIND_SPECS",
    "get_kind_spec",
    "Pin",
    "Node",
    "Wire",
    "Graph",
    "GraphError",
    "load_graph_json",
    "create_node",
    "GraphBuilder",
]
