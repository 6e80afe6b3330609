"""CHIP-8 Interpreter Core Package."""

from .interpreter import Interpreter, InterpreterOptions
from .runner import run_rom, RunOptions, RunResult
from .errors import (
    Chip8Error,
    CapacityExceeded,
    Chip8RuntimeError,
    StackOverflow,
    StackUnderflow,
    InvalidKey,
)

__all__ = [
    "Interpreter",
    "InterpreterOptions",
    "run_rom",
    "RunOptions",
    "RunResult",
    "Chip8Error",
    "CapacityExceeded",
    "Chip8RuntimeError",
    "StackOverflow",
    "StackUnderflow",
    "InvalidKey",
]
