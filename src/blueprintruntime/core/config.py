"""blueprintruntime.core.config

Engine configuration for run guards and randomness.

`EngineConfig` centralizes the limits that keep a run bounded:
- a global cap on dequeued exec steps (protects against Branch/Sequence cycles)
- a per-loop-instance iteration cap (ForLoop / WhileLoop)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

DEFAULT_MAX_STEPS = 1000
DEFAULT_MAX_LOOP_ITERATIONS = 1000


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for one interpreter run.

    Attributes:
        max_steps: Maximum number of dequeued exec nodes per run (default: 1000)
        max_loop_iterations: Maximum iterations per loop node instance (default: 1000)
        seed: Seed for RandomInteger/RandomFloat (None = nondeterministic)

    Example:
        >>> config = EngineConfig(max_steps=50)
        >>> config.with_limits(max_loop_iterations=10).max_loop_iterations
        10
    """

    max_steps: int = DEFAULT_MAX_STEPS
    max_loop_iterations: int = DEFAULT_MAX_LOOP_ITERATIONS
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if int(self.max_steps) < 1:
            raise ValueError("max_steps must be >= 1")
        if int(self.max_loop_iterations) < 0:
            raise ValueError("max_loop_iterations must be >= 0")

    def with_limits(
        self,
        *,
        max_steps: Optional[int] = None,
        max_loop_iterations: Optional[int] = None,
    ) -> "EngineConfig":
        """Create a new EngineConfig with updated guard limits (None keeps the current value)."""
        changes: Dict[str, Any] = {}
        if max_steps is not None:
            changes["max_steps"] = int(max_steps)
        if max_loop_iterations is not None:
            changes["max_loop_iterations"] = int(max_loop_iterations)
        return replace(self, **changes)

    def to_limits_dict(self) -> Dict[str, Any]:
        return {
            "max_steps": self.max_steps,
            "max_loop_iterations": self.max_loop_iterations,
        }
