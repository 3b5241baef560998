"""
Execution settings for the Brainfloat interpreter.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .errors import ConfigurationError


DEFAULT_CELL_LIMIT = 256
# Passing this as the yield interval turns time-based yielding off.
NO_YIELD = -1
# Command-line spelling for an unbounded cell.
UNBOUNDED_CELL_SIZE = -1


@dataclass
class ExecutionConfig:
    """
    Interpreter settings.

    ``cell_limit`` wraps cell values into ``[0, cell_limit)``; ``None`` leaves
    them unbounded. ``yield_interval_ms`` is the minimum spacing between
    cooperative yields, or ``NO_YIELD``.
    """
    cell_limit: Optional[int] = DEFAULT_CELL_LIMIT
    yield_interval_ms: int = NO_YIELD

    def __post_init__(self):
        if self.cell_limit is not None and self.cell_limit <= 0:
            raise ConfigurationError(f"Cell limit must be positive, got {self.cell_limit}")
        if self.yield_interval_ms < 0 and self.yield_interval_ms != NO_YIELD:
            raise ConfigurationError(
                f"Yield interval must be non-negative or {NO_YIELD}, got {self.yield_interval_ms}")

    @classmethod
    def from_options(cls, cell_size: Optional[int] = None,
                     yield_interval_ms: Optional[int] = None) -> "ExecutionConfig":
        """Build a config from command-line style values (-1 cell size is unbounded)."""
        config = {}
        if cell_size is not None:
            config["cell_limit"] = None if cell_size == UNBOUNDED_CELL_SIZE else cell_size
        if yield_interval_ms is not None:
            config["yield_interval_ms"] = yield_interval_ms
        return cls(**config)

    @property
    def yields(self) -> bool:
        return self.yield_interval_ms != NO_YIELD

    def wrap_function(self) -> Callable[[int], int]:
        """Return the function that maps a cell value into range."""
        limit = self.cell_limit
        if limit is None:
            return lambda value: value
        if limit == 256:
            return lambda value: value & 0xFF
        # Python's % already corrects negatives into [0, limit).
        return lambda value: value % limit
