from .config import DEFAULT_MAX_LOOP_ITERATIONS, DEFAULT_MAX_STEPS, EngineConfig
from .vars import VariableStore

__all__ = [
    "EngineConfig",
    "DEFAULT_MAX_STEPS",
    "DEFAULT_MAX_LOOP_ITERATIONS",
    "VariableStore",
]
