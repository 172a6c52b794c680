"""CHIP-8 Interpreter Core Package."""

from .machine import Chip8
from .runner import run_rom, RunOptions, RunResult
from .errors import (
    Chip8Error,
    RomError,
    RomTooLarge,
    RomLoadError,
    UnknownOpcode,
    MachineFault,
    StackOverflow,
    StackUnderflow,
    MemoryAccessError,
)

__all__ = [
    "Chip8",
    "run_rom",
    "RunOptions",
    "RunResult",
    "Chip8Error",
    "RomError",
    "RomTooLarge",
    "RomLoadError",
    "UnknownOpcode",
    "MachineFault",
    "StackOverflow",
    "StackUnderflow",
    "MemoryAccessError",
]
