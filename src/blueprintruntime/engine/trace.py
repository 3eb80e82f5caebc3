"""Ordered textual trace returned by a run.

Lines are appended in execution order: print output, warnings and errors
interleaved, then the trailer (`---` plus the final variable dump).
"""

from __future__ import annotations

from typing import List

from ..core.vars import VariableStore
from ..graph.models import Node
from ..logging import get_logger

logger = get_logger(__name__)

SEPARATOR = "---"


class TraceSink:
    def __init__(self):
        self._lines: List[str] = []
        self.warnings = 0
        self.errors = 0

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def print(self, text: str) -> None:
        self._lines.append(text)

    def warning(self, node: Node, message: str) -> None:
        """Append `Warning: <title> [<kind>] <message>`."""
        self.warnings += 1
        self._lines.append(f"Warning: {node.display_name} [{node.kind.value}] {message}")
        logger.debug("node warning", node_id=node.id, kind=node.kind.value, message=message)

    def error(self, message: str) -> None:
        self.errors += 1
        self._lines.append(message)
        logger.debug("run error", message=message)

    def append_trailer(self, variables: VariableStore) -> None:
        self._lines.append(SEPARATOR)
        self._lines.extend(variables.dump_lines())

    def __len__(self) -> int:
        return len(self._lines)
