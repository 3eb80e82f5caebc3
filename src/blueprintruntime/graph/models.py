"""Stdlib-only models for blueprint graphs (nodes, pins, wires).

These mirror the JSON document produced by the blueprint editor:
- Nodes carry a closed `kind` tag plus an untyped `properties` bag.
- Pins are owned by nodes; wires connect an output pin to an input pin.

The models are permissive on load (unknown fields are ignored) and read-only
during a run. Wire type compatibility is an editor concern and is not
re-checked here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .datatypes import DataType, PinDirection
from .kinds import NodeKind


class GraphError(ValueError):
    """Raised when a blueprint graph document is malformed."""


@dataclass(frozen=True)
class Pin:
    id: str
    node_id: str
    label: str
    data_type: DataType
    direction: PinDirection

    @property
    def is_exec(self) -> bool:
        return self.data_type == DataType.EXEC


@dataclass(frozen=True)
class Node:
    id: str
    kind: NodeKind
    inputs: List[Pin] = field(default_factory=list)
    outputs: List[Pin] = field(default_factory=list)
    # Intentionally untyped: literal values, variable names, loop bounds...
    properties: Dict[str, Any] = field(default_factory=dict)
    title: str = ""
    comment: str = ""
    x: float = 0.0
    y: float = 0.0

    @property
    def display_name(self) -> str:
        return self.title or self.kind.value

    def input_pin(self, label: str) -> Optional[Pin]:
        for pin in self.inputs:
            if pin.label == label:
                return pin
        return None

    def output_pin(self, label: str) -> Optional[Pin]:
        for pin in self.outputs:
            if pin.label == label:
                return pin
        return None

    def exec_outputs(self, label: Optional[str] = None) -> List[Pin]:
        """Exec output pins in declared order, optionally filtered by label."""
        return [p for p in self.outputs if p.is_exec and (label is None or p.label == label)]


@dataclass(frozen=True)
class Wire:
    id: str
    from_node_id: str
    from_pin_id: str
    to_node_id: str
    to_pin_id: str
    data_type: DataType = DataType.ANY


PinKey = Tuple[str, str]


class Graph:
    """Read-only view over a node/wire collection with wire lookups.

    - `incoming_wire(node_id, pin_id)`: the single wire feeding an input pin.
    - `outgoing_wires(node_id, pin_id)`: wires leaving an output pin, in declared order.
    """

    def __init__(self, nodes: Iterable[Node] = (), wires: Iterable[Wire] = ()):
        self._nodes: Dict[str, Node] = {}
        for node in nodes:
            self._nodes.setdefault(node.id, node)

        self._wires: List[Wire] = list(wires)
        self._incoming: Dict[PinKey, Wire] = {}
        self._outgoing: Dict[PinKey, List[Wire]] = {}
        for wire in self._wires:
            # First wire wins; an input pin never merges several sources.
            self._incoming.setdefault((wire.to_node_id, wire.to_pin_id), wire)
            self._outgoing.setdefault((wire.from_node_id, wire.from_pin_id), []).append(wire)

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def wires(self) -> List[Wire]:
        return list(self._wires)

    def node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def nodes_of_kind(self, kind: NodeKind) -> List[Node]:
        return [n for n in self._nodes.values() if n.kind == kind]

    def incoming_wire(self, node_id: str, pin_id: str) -> Optional[Wire]:
        return self._incoming.get((node_id, pin_id))

    def outgoing_wires(self, node_id: str, pin_id: str) -> List[Wire]:
        return list(self._outgoing.get((node_id, pin_id), ()))

    def __len__(self) -> int:
        return len(self._nodes)


def _coerce_tag(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        s = value.strip()
        # Serializers may stringify enums as "NodeKind.X" / "DataType.X".
        if "." in s:
            prefix, member = s.split(".", 1)
            if prefix in {"NodeKind", "DataType", "PinDirection"} and member.strip():
                return member.strip()
        return s
    if isinstance(value, dict):
        v = value.get("value")
        if isinstance(v, str):
            return v
    return str(value or "")


def _coerce_enum(enum_cls: Any, value: Any, *, default: Any = None) -> Any:
    tag = _coerce_tag(value)
    if not tag:
        if default is not None:
            return default
        raise GraphError(f"Missing {enum_cls.__name__} value")
    try:
        return enum_cls(tag)
    except ValueError:
        pass
    # Accept member names regardless of case ("integer", "Integer").
    for member in enum_cls:
        if member.name.lower() == tag.lower() or str(member.value).lower() == tag.lower():
            return member
    raise GraphError(f"Unknown {enum_cls.__name__} '{tag}'")


def _first(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _load_pins(raw_pins: Any, *, node_id: str, direction: PinDirection) -> List[Pin]:
    pins: list[Pin] = []
    if not isinstance(raw_pins, list):
        return pins
    for p in raw_pins:
        if not isinstance(p, dict):
            continue
        pid = str(p.get("id") or "").strip()
        if not pid:
            continue
        label = p.get("label")
        pins.append(
            Pin(
                id=pid,
                node_id=str(_first(p, "nodeId", "node_id") or node_id),
                label="" if label is None else str(label),
                data_type=_coerce_enum(DataType, _first(p, "dataType", "data_type"), default=DataType.ANY),
                direction=_coerce_enum(PinDirection, p.get("direction"), default=direction),
            )
        )
    return pins


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def load_graph_json(raw: Any) -> Graph:
    """Parse a blueprint JSON document (dict) into a `Graph`.

    Also accepts Pydantic-like models by calling `model_dump()` or `dict()`.
    """
    if hasattr(raw, "model_dump"):
        try:
            raw = raw.model_dump(mode="json")
        except TypeError:
            raw = raw.model_dump()
    elif hasattr(raw, "dict") and not isinstance(raw, dict):
        raw = raw.dict()

    if not isinstance(raw, dict):
        raise GraphError("Blueprint graph must be a JSON object (dict)")

    nodes_raw = raw.get("nodes")
    if nodes_raw is not None and not isinstance(nodes_raw, list):
        raise GraphError("Blueprint 'nodes' must be a list")
    wires_raw = raw.get("wires", raw.get("edges"))
    if wires_raw is not None and not isinstance(wires_raw, list):
        raise GraphError("Blueprint 'wires' must be a list")

    nodes: list[Node] = []
    for n in nodes_raw or []:
        if not isinstance(n, dict):
            continue
        nid = str(n.get("id") or "").strip()
        if not nid:
            continue
        kind = _coerce_enum(NodeKind, _first(n, "type", "kind"))
        props = n.get("properties")
        nodes.append(
            Node(
                id=nid,
                kind=kind,
                inputs=_load_pins(n.get("inputs"), node_id=nid, direction=PinDirection.INPUT),
                outputs=_load_pins(n.get("outputs"), node_id=nid, direction=PinDirection.OUTPUT),
                properties=dict(props) if isinstance(props, dict) else {},
                title=str(n.get("title") or ""),
                comment=str(n.get("comment") or ""),
                x=_to_float(n.get("x", 0)),
                y=_to_float(n.get("y", 0)),
            )
        )

    wires: list[Wire] = []
    for i, w in enumerate(wires_raw or []):
        if not isinstance(w, dict):
            continue
        src = str(_first(w, "fromNodeId", "from_node_id") or "").strip()
        src_pin = str(_first(w, "fromPinId", "from_pin_id") or "").strip()
        dst = str(_first(w, "toNodeId", "to_node_id") or "").strip()
        dst_pin = str(_first(w, "toPinId", "to_pin_id") or "").strip()
        # Wires are defined by both endpoints; skip malformed ones.
        if not (src and src_pin and dst and dst_pin):
            continue
        wires.append(
            Wire(
                id=str(w.get("id") or f"wire-{i}"),
                from_node_id=src,
                from_pin_id=src_pin,
                to_node_id=dst,
                to_pin_id=dst_pin,
                data_type=_coerce_enum(DataType, _first(w, "dataType", "data_type"), default=DataType.ANY),
            )
        )

    return Graph(nodes, wires)
