"""Process and filesystem primitives."""

from .files import atomic_write_text
from .process import ExecutionResult, run_command

__all__ = ["ExecutionResult", "atomic_write_text", "run_command"]
