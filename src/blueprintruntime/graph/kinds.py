"""Node kind registry.

Every node kind fixes its pin shape (used to instantiate nodes from a
template), its default properties and which input pins fall back to a
property when left unwired. Whether a kind is data-producing and/or
exec-bearing follows from its pins:

- `is_data`: has at least one non-exec output pin (evaluated on demand).
- `is_exec`: has at least one exec pin (dispatched by the interpreter).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from .datatypes import DataType, PinDirection


class NodeKind(str, Enum):
    # Flow control
    BEGIN_PLAY = "BeginPlay"
    BRANCH = "Branch"
    SEQUENCE = "Sequence"
    FOR_LOOP = "ForLoop"
    WHILE_LOOP = "WhileLoop"
    PRINT_STRING = "PrintString"

    # Variables
    SET_VARIABLE = "SetVariable"
    GET_VARIABLE = "GetVariable"
    CLEAR_VARIABLE = "ClearVariable"

    # Literals
    STRING_LITERAL = "StringLiteral"
    INTEGER_LITERAL = "IntegerLiteral"
    FLOAT_LITERAL = "FloatLiteral"
    BOOLEAN_LITERAL = "BooleanLiteral"

    # Integer arithmetic & utilities
    ADD_INTEGER = "AddInteger"
    SUBTRACT_INTEGER = "SubtractInteger"
    MULTIPLY_INTEGER = "MultiplyInteger"
    DIVIDE_INTEGER = "DivideInteger"
    MODULO_INTEGER = "ModuloInteger"
    CLAMP_INTEGER = "ClampInteger"
    RANDOM_INTEGER = "RandomInteger"
    ABSOLUTE_INTEGER = "AbsoluteInteger"
    MIN_INTEGER = "MinInteger"
    MAX_INTEGER = "MaxInteger"

    # Float arithmetic & utilities
    ADD_FLOAT = "AddFloat"
    SUBTRACT_FLOAT = "SubtractFloat"
    MULTIPLY_FLOAT = "MultiplyFloat"
    DIVIDE_FLOAT = "DivideFloat"
    CLAMP_FLOAT = "ClampFloat"
    RANDOM_FLOAT = "RandomFloat"
    ABSOLUTE_FLOAT = "AbsoluteFloat"
    MIN_FLOAT = "MinFloat"
    MAX_FLOAT = "MaxFloat"
    POWER_FLOAT = "PowerFloat"
    SQUARE_ROOT_FLOAT = "SquareRootFloat"
    FLOOR_FLOAT = "FloorFloat"
    CEIL_FLOAT = "CeilFloat"
    ROUND_FLOAT = "RoundFloat"
    LERP_FLOAT = "LerpFloat"

    # Comparison
    GREATER_THAN_INTEGER = "GreaterThanInteger"
    LESS_THAN_INTEGER = "LessThanInteger"
    EQUALS_INTEGER = "EqualsInteger"
    GREATER_THAN_FLOAT = "GreaterThanFloat"
    LESS_THAN_FLOAT = "LessThanFloat"
    EQUALS_FLOAT = "EqualsFloat"

    # Strings
    CONCAT_STRING = "ConcatString"
    STRING_LENGTH = "StringLength"
    TO_STRING = "ToString"

    # Boolean
    BOOLEAN_NOT = "BooleanNot"

    # Conversions
    INT_TO_FLOAT = "IntToFloat"
    FLOAT_TO_INT = "FloatToInt"


@dataclass(frozen=True)
class PinTemplate:
    label: str
    data_type: DataType
    direction: PinDirection


@dataclass(frozen=True)
class KindSpec:
    kind: NodeKind
    title: str
    inputs: Tuple[PinTemplate, ...] = ()
    outputs: Tuple[PinTemplate, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict)
    # input pin label -> property name used when the pin has no incoming wire
    property_fallbacks: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_exec(self) -> bool:
        return any(p.data_type == DataType.EXEC for p in (*self.inputs, *self.outputs))

    @property
    def is_data(self) -> bool:
        return any(p.data_type != DataType.EXEC for p in self.outputs)


def _in(label: str, data_type: DataType) -> PinTemplate:
    return PinTemplate(label, data_type, PinDirection.INPUT)


def _out(label: str, data_type: DataType) -> PinTemplate:
    return PinTemplate(label, data_type, PinDirection.OUTPUT)


EXEC_IN = _in("", DataType.EXEC)
EXEC_OUT = _out("", DataType.EXEC)


def _binary(kind: NodeKind, title: str, operand: DataType, result: DataType) -> KindSpec:
    return KindSpec(kind, title, inputs=(_in("A", operand), _in("B", operand)), outputs=(_out("Result", result),))


def _unary(kind: NodeKind, title: str, operand: DataType, result: DataType, label: str = "Value") -> KindSpec:
    return KindSpec(kind, title, inputs=(_in(label, operand),), outputs=(_out("Result", result),))


def _literal(kind: NodeKind, title: str, data_type: DataType, default: Any) -> KindSpec:
    return KindSpec(kind, title, outputs=(_out("Value", data_type),), properties={"value": default})


_I = DataType.INTEGER
_F = DataType.FLOAT
_B = DataType.BOOLEAN
_S = DataType.STRING

_SPECS = (
    KindSpec(NodeKind.BEGIN_PLAY, "Begin Play", outputs=(EXEC_OUT,)),
    KindSpec(
        NodeKind.BRANCH,
        "Branch",
        inputs=(EXEC_IN, _in("Condition", _B)),
        outputs=(_out("True", DataType.EXEC), _out("False", DataType.EXEC)),
    ),
    KindSpec(
        NodeKind.SEQUENCE,
        "Sequence",
        inputs=(EXEC_IN,),
        outputs=(_out("Then 0", DataType.EXEC), _out("Then 1", DataType.EXEC)),
    ),
    KindSpec(
        NodeKind.FOR_LOOP,
        "For Loop",
        inputs=(EXEC_IN, _in("Start", _I), _in("End", _I), _in("Step", _I)),
        outputs=(_out("Loop Body", DataType.EXEC), _out("Index", _I), _out("Completed", DataType.EXEC)),
        properties={"start": 0, "end": 10, "step": 1},
        property_fallbacks={"Start": "start", "End": "end", "Step": "step"},
    ),
    KindSpec(
        NodeKind.WHILE_LOOP,
        "While Loop",
        inputs=(EXEC_IN, _in("Condition", _B)),
        outputs=(_out("Loop Body", DataType.EXEC), _out("Completed", DataType.EXEC)),
    ),
    KindSpec(
        NodeKind.PRINT_STRING,
        "Print String",
        inputs=(EXEC_IN, _in("In String", _S)),
        outputs=(EXEC_OUT,),
        properties={"text": "Hello World"},
        property_fallbacks={"In String": "text"},
    ),
    KindSpec(
        NodeKind.SET_VARIABLE,
        "Set Variable",
        inputs=(EXEC_IN, _in("Value", DataType.ANY)),
        outputs=(EXEC_OUT,),
        properties={"name": "myVar"},
    ),
    KindSpec(NodeKind.GET_VARIABLE, "Get Variable", outputs=(_out("Value", DataType.ANY),), properties={"name": "myVar"}),
    KindSpec(NodeKind.CLEAR_VARIABLE, "Clear Variable", inputs=(EXEC_IN,), outputs=(EXEC_OUT,), properties={"name": "myVar"}),
    _literal(NodeKind.STRING_LITERAL, "String Literal", _S, ""),
    _literal(NodeKind.INTEGER_LITERAL, "Integer Literal", _I, 0),
    _literal(NodeKind.FLOAT_LITERAL, "Float Literal", _F, 0.0),
    _literal(NodeKind.BOOLEAN_LITERAL, "Boolean Literal", _B, False),
    _binary(NodeKind.ADD_INTEGER, "Add Integer (+)", _I, _I),
    _binary(NodeKind.SUBTRACT_INTEGER, "Subtract Integer (-)", _I, _I),
    _binary(NodeKind.MULTIPLY_INTEGER, "Multiply Integer (*)", _I, _I),
    _binary(NodeKind.DIVIDE_INTEGER, "Divide Integer (/)", _I, _I),
    _binary(NodeKind.MODULO_INTEGER, "Modulo Integer (%)", _I, _I),
    KindSpec(
        NodeKind.CLAMP_INTEGER,
        "Clamp Integer",
        inputs=(_in("Value", _I), _in("Min", _I), _in("Max", _I)),
        outputs=(_out("Result", _I),),
    ),
    KindSpec(NodeKind.RANDOM_INTEGER, "Random Integer", inputs=(_in("Min", _I), _in("Max", _I)), outputs=(_out("Result", _I),)),
    _unary(NodeKind.ABSOLUTE_INTEGER, "Absolute Integer", _I, _I),
    _binary(NodeKind.MIN_INTEGER, "Min Integer", _I, _I),
    _binary(NodeKind.MAX_INTEGER, "Max Integer", _I, _I),
    _binary(NodeKind.ADD_FLOAT, "Add Float (+)", _F, _F),
    _binary(NodeKind.SUBTRACT_FLOAT, "Subtract Float (-)", _F, _F),
    _binary(NodeKind.MULTIPLY_FLOAT, "Multiply Float (*)", _F, _F),
    _binary(NodeKind.DIVIDE_FLOAT, "Divide Float (/)", _F, _F),
    KindSpec(
        NodeKind.CLAMP_FLOAT,
        "Clamp Float",
        inputs=(_in("Value", _F), _in("Min", _F), _in("Max", _F)),
        outputs=(_out("Result", _F),),
    ),
    KindSpec(NodeKind.RANDOM_FLOAT, "Random Float", inputs=(_in("Min", _F), _in("Max", _F)), outputs=(_out("Result", _F),)),
    _unary(NodeKind.ABSOLUTE_FLOAT, "Absolute Float", _F, _F),
    _binary(NodeKind.MIN_FLOAT, "Min Float", _F, _F),
    _binary(NodeKind.MAX_FLOAT, "Max Float", _F, _F),
    KindSpec(
        NodeKind.POWER_FLOAT,
        "Power (^)",
        inputs=(_in("Base", _F), _in("Exponent", _F)),
        outputs=(_out("Result", _F),),
    ),
    _unary(NodeKind.SQUARE_ROOT_FLOAT, "Square Root", _F, _F),
    _unary(NodeKind.FLOOR_FLOAT, "Floor", _F, _I),
    _unary(NodeKind.CEIL_FLOAT, "Ceil", _F, _I),
    _unary(NodeKind.ROUND_FLOAT, "Round", _F, _I),
    KindSpec(
        NodeKind.LERP_FLOAT,
        "Lerp",
        inputs=(_in("A", _F), _in("B", _F), _in("Alpha", _F)),
        outputs=(_out("Result", _F),),
    ),
    _binary(NodeKind.GREATER_THAN_INTEGER, "Greater Than (>)", _I, _B),
    _binary(NodeKind.LESS_THAN_INTEGER, "Less Than (<)", _I, _B),
    _binary(NodeKind.EQUALS_INTEGER, "Equals (==)", _I, _B),
    _binary(NodeKind.GREATER_THAN_FLOAT, "Greater Than Float (>)", _F, _B),
    _binary(NodeKind.LESS_THAN_FLOAT, "Less Than Float (<)", _F, _B),
    _binary(NodeKind.EQUALS_FLOAT, "Equals Float (==)", _F, _B),
    _binary(NodeKind.CONCAT_STRING, "Concatenate", _S, _S),
    _unary(NodeKind.STRING_LENGTH, "String Length", _S, _I),
    _unary(NodeKind.TO_STRING, "To String", DataType.ANY, _S),
    _unary(NodeKind.BOOLEAN_NOT, "NOT", _B, _B),
    _unary(NodeKind.INT_TO_FLOAT, "Integer To Float", _I, _F),
    _unary(NodeKind.FLOAT_TO_INT, "Float To Integer", _F, _I),
)

KIND_SPECS: Dict[NodeKind, KindSpec] = {spec.kind: spec for spec in _SPECS}

missing = [k.value for k in NodeKind if k not in KIND_SPECS]
if missing:
    raise RuntimeError(f"Node kinds without a registry entry: {', '.join(missing)}")
del missing


def get_kind_spec(kind: NodeKind) -> KindSpec:
    """Get the registry entry for a node kind."""
    return KIND_SPECS[kind]


def data_kinds() -> frozenset[NodeKind]:
    return frozenset(k for k, spec in KIND_SPECS.items() if spec.is_data)


def exec_kinds() -> frozenset[NodeKind]:
    return frozenset(k for k, spec in KIND_SPECS.items() if spec.is_exec)
