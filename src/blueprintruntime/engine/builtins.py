"""Built-in handlers for data-producing node kinds.

These are intentionally pure: each handler receives the node's resolved input
values keyed by pin label and returns the value of its single data output.
The evaluator injects helper keys:
- `_properties`: the node's property bag (literal values)
- `_rng`: the run's `random.Random` instance

When an input cannot be used, handlers raise `NodeWarning` carrying the
message and the documented fallback value; the evaluator turns it into a
trace line and returns the fallback.
"""

from __future__ import annotations

import math
import random
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.values import Number, describe, display_string, is_truthy, parse_number, to_float, to_integer
from ..graph.kinds import NodeKind


class NodeWarning(Exception):
    """Non-fatal evaluation problem; the node yields `fallback`."""

    def __init__(self, message: str, fallback: Any):
        super().__init__(message)
        self.message = message
        self.fallback = fallback


Handler = Callable[[Dict[str, Any]], Any]
Coerce = Callable[[Any], Optional[Number]]


def get_builtin_handler(kind: NodeKind) -> Optional[Handler]:
    """Get a built-in handler function for a node kind."""
    return BUILTIN_HANDLERS.get(kind)


def _operands(inputs: Dict[str, Any], coerce: Coerce, fallback: Any) -> Tuple[Any, Any]:
    raw_a = inputs.get("A")
    raw_b = inputs.get("B")
    a = coerce(raw_a)
    b = coerce(raw_b)
    if a is None or b is None:
        raise NodeWarning(
            f"expected numeric inputs but received {describe(raw_a)} and {describe(raw_b)}.",
            fallback,
        )
    return a, b


def _operand(inputs: Dict[str, Any], label: str, coerce: Coerce, fallback: Any) -> Any:
    raw = inputs.get(label)
    value = coerce(raw)
    if value is None:
        raise NodeWarning(f"expected a numeric {label} but received {describe(raw)}.", fallback)
    return value


def _rng(inputs: Dict[str, Any]) -> random.Random:
    rng = inputs.get("_rng")
    return rng if isinstance(rng, random.Random) else random.Random()


# Literals
def literal_value(inputs: Dict[str, Any]) -> Any:
    """Return the stored `value` property verbatim."""
    props = inputs.get("_properties")
    return props.get("value") if isinstance(props, dict) else None


# Integer arithmetic (operands truncated toward zero)
def int_add(inputs: Dict[str, Any]) -> int:
    a, b = _operands(inputs, to_integer, 0)
    return a + b


def int_subtract(inputs: Dict[str, Any]) -> int:
    a, b = _operands(inputs, to_integer, 0)
    return a - b


def int_multiply(inputs: Dict[str, Any]) -> int:
    a, b = _operands(inputs, to_integer, 0)
    return a * b


def int_divide(inputs: Dict[str, Any]) -> int:
    """Integer division truncating toward zero (not Python's floor division)."""
    a, b = _operands(inputs, to_integer, 0)
    if b == 0:
        raise NodeWarning("attempted to divide by zero. Returning 0.", 0)
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def int_modulo(inputs: Dict[str, Any]) -> int:
    """Remainder normalized to [0, |B|)."""
    a, b = _operands(inputs, to_integer, 0)
    if b == 0:
        raise NodeWarning("attempted modulo by zero. Returning 0.", 0)
    return a % abs(b)


def _clamp(inputs: Dict[str, Any], coerce: Coerce, fallback: Number) -> Number:
    raw = (inputs.get("Value"), inputs.get("Min"), inputs.get("Max"))
    value, lo, hi = (coerce(v) for v in raw)
    if value is None or lo is None or hi is None:
        raise NodeWarning(
            "expected numeric Value, Min and Max but received "
            f"{describe(raw[0])}, {describe(raw[1])} and {describe(raw[2])}.",
            fallback,
        )
    if lo > hi:
        lo, hi = hi, lo
    return min(max(value, lo), hi)


def int_clamp(inputs: Dict[str, Any]) -> int:
    return _clamp(inputs, to_integer, 0)


def int_random(inputs: Dict[str, Any]) -> int:
    """Random integer in [Min, Max] (inclusive, bounds normalized)."""
    raw_min = inputs.get("Min")
    raw_max = inputs.get("Max")
    lo = to_integer(raw_min)
    hi = to_integer(raw_max)
    if lo is None or hi is None:
        raise NodeWarning(
            f"expected numeric Min and Max but received {describe(raw_min)} and {describe(raw_max)}.",
            0,
        )
    if hi < lo:
        lo, hi = hi, lo
    return _rng(inputs).randint(lo, hi)


def int_abs(inputs: Dict[str, Any]) -> int:
    return abs(_operand(inputs, "Value", to_integer, 0))


def _pick(inputs: Dict[str, Any], coerce: Coerce, fallback: Number, choose: Callable[[Any, Any], Any]) -> Any:
    raw_a = inputs.get("A")
    raw_b = inputs.get("B")
    a = coerce(raw_a)
    b = coerce(raw_b)
    if a is None and b is None:
        raise NodeWarning(
            f"expected numeric inputs but received {describe(raw_a)} and {describe(raw_b)}.",
            fallback,
        )
    # One invalid operand falls back to the other.
    if a is None:
        return b
    if b is None:
        return a
    return choose(a, b)


def int_min(inputs: Dict[str, Any]) -> int:
    return _pick(inputs, to_integer, 0, min)


def int_max(inputs: Dict[str, Any]) -> int:
    return _pick(inputs, to_integer, 0, max)


# Float arithmetic & utilities
def float_add(inputs: Dict[str, Any]) -> float:
    a, b = _operands(inputs, to_float, 0.0)
    return a + b


def float_subtract(inputs: Dict[str, Any]) -> float:
    a, b = _operands(inputs, to_float, 0.0)
    return a - b


def float_multiply(inputs: Dict[str, Any]) -> float:
    a, b = _operands(inputs, to_float, 0.0)
    return a * b


def float_divide(inputs: Dict[str, Any]) -> float:
    a, b = _operands(inputs, to_float, 0.0)
    if b == 0:
        raise NodeWarning("attempted to divide by zero. Returning 0.", 0.0)
    return a / b


def float_clamp(inputs: Dict[str, Any]) -> float:
    return _clamp(inputs, to_float, 0.0)


def float_random(inputs: Dict[str, Any]) -> float:
    """Random float in [Min, Max]."""
    raw_min = inputs.get("Min")
    raw_max = inputs.get("Max")
    lo = to_float(raw_min)
    hi = to_float(raw_max)
    if lo is None or hi is None:
        raise NodeWarning(
            f"expected numeric Min and Max but received {describe(raw_min)} and {describe(raw_max)}.",
            0.0,
        )
    if hi < lo:
        lo, hi = hi, lo
    span = hi - lo
    if span == 0 or not math.isfinite(span):
        return lo
    return lo + span * _rng(inputs).random()


def float_abs(inputs: Dict[str, Any]) -> float:
    return abs(_operand(inputs, "Value", to_float, 0.0))


def float_min(inputs: Dict[str, Any]) -> float:
    return _pick(inputs, to_float, 0.0, min)


def float_max(inputs: Dict[str, Any]) -> float:
    return _pick(inputs, to_float, 0.0, max)


def float_power(inputs: Dict[str, Any]) -> float:
    raw_base = inputs.get("Base")
    raw_exp = inputs.get("Exponent")
    base = to_float(raw_base)
    exp = to_float(raw_exp)
    if base is None or exp is None:
        raise NodeWarning(
            f"expected numeric inputs but received {describe(raw_base)} and {describe(raw_exp)}.",
            0.0,
        )
    if base == 0 and exp < 0:
        return math.inf
    try:
        return math.pow(base, exp)
    except OverflowError:
        return math.inf
    except ValueError:
        # Negative base with a fractional exponent.
        return math.nan


def float_sqrt(inputs: Dict[str, Any]) -> float:
    value = _operand(inputs, "Value", to_float, 0.0)
    if value < 0:
        return math.nan
    return math.sqrt(value)


def float_floor(inputs: Dict[str, Any]) -> int:
    return math.floor(_operand(inputs, "Value", to_float, 0))


def float_ceil(inputs: Dict[str, Any]) -> int:
    return math.ceil(_operand(inputs, "Value", to_float, 0))


def float_round(inputs: Dict[str, Any]) -> int:
    """Round half up (2.5 -> 3, -2.5 -> -2), not Python's banker's rounding."""
    return math.floor(_operand(inputs, "Value", to_float, 0) + 0.5)


def float_lerp(inputs: Dict[str, Any]) -> float:
    """A + (B - A) * Alpha; absent B defaults to A, absent Alpha to 0."""
    a = _operand(inputs, "A", to_float, 0.0)
    b = a if inputs.get("B") is None else _operand(inputs, "B", to_float, 0.0)
    alpha = 0.0 if inputs.get("Alpha") is None else _operand(inputs, "Alpha", to_float, 0.0)
    return a + (b - a) * alpha


# Comparison (operands are compared as numbers, no truncation)
def compare_greater(inputs: Dict[str, Any]) -> bool:
    a, b = _operands(inputs, parse_number, False)
    return a > b


def compare_less(inputs: Dict[str, Any]) -> bool:
    a, b = _operands(inputs, parse_number, False)
    return a < b


def compare_equals(inputs: Dict[str, Any]) -> bool:
    a, b = _operands(inputs, parse_number, False)
    return a == b


# Conversions
def int_to_float(inputs: Dict[str, Any]) -> float:
    return float(_operand(inputs, "Value", to_integer, 0.0))


def float_to_int(inputs: Dict[str, Any]) -> int:
    return math.trunc(_operand(inputs, "Value", to_float, 0))


# Strings
def string_concat(inputs: Dict[str, Any]) -> str:
    """Concatenate A and B (absent counts as empty)."""
    return display_string(inputs.get("A")) + display_string(inputs.get("B"))


def string_length(inputs: Dict[str, Any]) -> int:
    return len(display_string(inputs.get("Value")))


def to_string(inputs: Dict[str, Any]) -> str:
    return display_string(inputs.get("Value"))


# Boolean
def boolean_not(inputs: Dict[str, Any]) -> bool:
    return not is_truthy(inputs.get("Value"))


# Handler registry (stateless kinds only; GetVariable and ForLoop.Index are read by the evaluator)
BUILTIN_HANDLERS: Dict[NodeKind, Handler] = {
    # Literals
    NodeKind.STRING_LITERAL: literal_value,
    NodeKind.INTEGER_LITERAL: literal_value,
    NodeKind.FLOAT_LITERAL: literal_value,
    NodeKind.BOOLEAN_LITERAL: literal_value,
    # Integer
    NodeKind.ADD_INTEGER: int_add,
    NodeKind.SUBTRACT_INTEGER: int_subtract,
    NodeKind.MULTIPLY_INTEGER: int_multiply,
    NodeKind.DIVIDE_INTEGER: int_divide,
    NodeKind.MODULO_INTEGER: int_modulo,
    NodeKind.CLAMP_INTEGER: int_clamp,
    NodeKind.RANDOM_INTEGER: int_random,
    NodeKind.ABSOLUTE_INTEGER: int_abs,
    NodeKind.MIN_INTEGER: int_min,
    NodeKind.MAX_INTEGER: int_max,
    # Float
    NodeKind.ADD_FLOAT: float_add,
    NodeKind.SUBTRACT_FLOAT: float_subtract,
    NodeKind.MULTIPLY_FLOAT: float_multiply,
    NodeKind.DIVIDE_FLOAT: float_divide,
    NodeKind.CLAMP_FLOAT: float_clamp,
    NodeKind.RANDOM_FLOAT: float_random,
    NodeKind.ABSOLUTE_FLOAT: float_abs,
    NodeKind.MIN_FLOAT: float_min,
    NodeKind.MAX_FLOAT: float_max,
    NodeKind.POWER_FLOAT: float_power,
    NodeKind.SQUARE_ROOT_FLOAT: float_sqrt,
    NodeKind.FLOOR_FLOAT: float_floor,
    NodeKind.CEIL_FLOAT: float_ceil,
    NodeKind.ROUND_FLOAT: float_round,
    NodeKind.LERP_FLOAT: float_lerp,
    # Comparison
    NodeKind.GREATER_THAN_INTEGER: compare_greater,
    NodeKind.LESS_THAN_INTEGER: compare_less,
    NodeKind.EQUALS_INTEGER: compare_equals,
    NodeKind.GREATER_THAN_FLOAT: compare_greater,
    NodeKind.LESS_THAN_FLOAT: compare_less,
    NodeKind.EQUALS_FLOAT: compare_equals,
    # Conversions
    NodeKind.INT_TO_FLOAT: int_to_float,
    NodeKind.FLOAT_TO_INT: float_to_int,
    # String
    NodeKind.CONCAT_STRING: string_concat,
    NodeKind.STRING_LENGTH: string_length,
    NodeKind.TO_STRING: to_string,
    # Boolean
    NodeKind.BOOLEAN_NOT: boolean_not,
}
