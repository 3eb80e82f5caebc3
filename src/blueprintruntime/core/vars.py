"""Run-scoped variable store.

Variables are untyped: a SetVariable node may overwrite a string with a
number, mirroring the "Any" pin semantics of the editor. The store is
mutated only by SetVariable / ClearVariable and read by GetVariable and the
final dump. Iteration order is insertion order.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

from .values import json_literal

NO_VARIABLES_LINE = "  (no variables)"


class VariableStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def clear(self, name: str) -> bool:
        """Remove `name` if present; returns whether it existed."""
        if name in self._values:
            del self._values[name]
            return True
        return False

    def items(self) -> List[Tuple[str, Any]]:
        return list(self._values.items())

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)

    def dump_lines(self) -> List[str]:
        """One `  name: <JSON literal>` line per variable, or the empty marker."""
        if not self._values:
            return [NO_VARIABLES_LINE]
        return [f"  {name}: {json_literal(value)}" for name, value in self._values.items()]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
