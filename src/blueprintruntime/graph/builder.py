"""Graph construction helpers (editor-side).

`create_node` instantiates a node from its kind template; `GraphBuilder`
accumulates nodes and wires the way the blueprint editor does and enforces
the single-incoming-wire rule for data input pins.
"""

from __future__ import annotations

import copy
import itertools
from typing import Any, Dict, List, Optional, Sequence

from .datatypes import DataType, PinDirection
from .kinds import KindSpec, NodeKind, PinTemplate, get_kind_spec
from .models import Graph, GraphError, Node, Pin, Wire


def _create_pins(node_id: str, templates: Sequence[PinTemplate]) -> List[Pin]:
    return [
        Pin(
            id=f"{node_id}_{t.direction.value}_{t.label or t.data_type.value}_{index}",
            node_id=node_id,
            label=t.label,
            data_type=t.data_type,
            direction=t.direction,
        )
        for index, t in enumerate(templates)
    ]


def create_node(
    kind: NodeKind,
    *,
    node_id: str,
    x: float = 0.0,
    y: float = 0.0,
    properties: Optional[Dict[str, Any]] = None,
    title: Optional[str] = None,
    comment: str = "",
) -> Node:
    """Instantiate a node from its kind template.

    Template properties are deep-copied; `properties` entries override them.
    """
    spec: KindSpec = get_kind_spec(kind)
    props = copy.deepcopy(dict(spec.properties))
    if properties:
        props.update(properties)
    return Node(
        id=node_id,
        kind=kind,
        inputs=_create_pins(node_id, spec.inputs),
        outputs=_create_pins(node_id, spec.outputs),
        properties=props,
        title=spec.title if title is None else title,
        comment=comment,
        x=x,
        y=y,
    )


class GraphBuilder:
    """Mutable node/wire collection that produces read-only `Graph`s.

    Example:
        b = GraphBuilder()
        start = b.add_node(NodeKind.BEGIN_PLAY)
        say = b.add_node(NodeKind.PRINT_STRING, properties={"text": "hi"})
        b.connect(start, "", say, "")
        graph = b.build()
    """

    def __init__(self, *, id_prefix: str = "node"):
        self._id_prefix = id_prefix
        self._ids = itertools.count(1)
        self._nodes: Dict[str, Node] = {}
        self._wires: List[Wire] = []

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def wires(self) -> List[Wire]:
        return list(self._wires)

    def add_node(
        self,
        kind: NodeKind,
        *,
        x: float = 0.0,
        y: float = 0.0,
        properties: Optional[Dict[str, Any]] = None,
        title: Optional[str] = None,
        comment: str = "",
    ) -> Node:
        node = create_node(
            kind,
            node_id=self._next_id(self._id_prefix),
            x=x,
            y=y,
            properties=properties,
            title=title,
            comment=comment,
        )
        self._nodes[node.id] = node
        return node

    def _pin(self, node: Node, label: str, direction: PinDirection) -> Pin:
        current = self._nodes.get(node.id)
        if current is None:
            raise GraphError(f"Unknown node '{node.id}'")
        pins = current.outputs if direction == PinDirection.OUTPUT else current.inputs
        for pin in pins:
            if pin.label == label:
                return pin
        side = "output" if direction == PinDirection.OUTPUT else "input"
        raise GraphError(f"Node '{current.display_name}' has no {side} pin labelled '{label}'")

    def connect(self, source: Node, source_label: str, target: Node, target_label: str) -> Wire:
        """Wire `source.<source_label>` (output) into `target.<target_label>` (input)."""
        from_pin = self._pin(source, source_label, PinDirection.OUTPUT)
        to_pin = self._pin(target, target_label, PinDirection.INPUT)
        # Data inputs never merge sources; exec inputs may be entered from several places.
        if not to_pin.is_exec and any(w.to_node_id == target.id and w.to_pin_id == to_pin.id for w in self._wires):
            raise GraphError(f"Input pin '{target_label}' of '{target.display_name}' already has a wire")

        data_type = from_pin.data_type
        if data_type == DataType.ANY:
            data_type = to_pin.data_type
        wire = Wire(
            id=self._next_id("wire"),
            from_node_id=source.id,
            from_pin_id=from_pin.id,
            to_node_id=target.id,
            to_pin_id=to_pin.id,
            data_type=data_type,
        )
        self._wires.append(wire)
        return wire

    def disconnect(self, wire_id: str) -> None:
        self._wires = [w for w in self._wires if w.id != wire_id]

    def remove_node(self, node_id: str) -> None:
        """Remove a node together with every wire touching it."""
        self._nodes.pop(node_id, None)
        self._wires = [w for w in self._wires if w.from_node_id != node_id and w.to_node_id != node_id]

    def duplicate_node(self, node_id: str, *, offset: float = 40.0) -> Node:
        original = self._nodes.get(node_id)
        if original is None:
            raise GraphError(f"Unknown node '{node_id}'")
        return self.add_node(
            original.kind,
            x=original.x + offset,
            y=original.y + offset,
            properties=copy.deepcopy(original.properties),
            title=original.title,
            comment=original.comment,
        )

    def build(self) -> Graph:
        return Graph(self._nodes.values(), self._wires)
