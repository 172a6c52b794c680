"""Custom exceptions for the CHIP-8 interpreter."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    opcode: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "opcode": self.opcode,
        }


class Chip8Error(Exception):
    """Base exception for all CHIP-8 errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        opcode: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.opcode = opcode

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            opcode=self.opcode,
        )


class RomError(Chip8Error):
    """ROM could not be loaded."""
    pass


class RomTooLarge(RomError):
    """ROM does not fit between 0x200 and the end of memory."""
    pass


class RomLoadError(RomError):
    """ROM source could not be read."""
    pass


class UnknownOpcode(Chip8Error):
    """Opcode not in the instruction table. Skipped, never fatal."""
    pass


class MachineFault(Chip8Error):
    """Unrecoverable execution error surfaced to the host."""
    pass


class StackOverflow(MachineFault):
    """CALL with every stack slot in use."""
    pass


class StackUnderflow(MachineFault):
    """RET with an empty stack."""
    pass


class MemoryAccessError(MachineFault):
    """Memory address or program counter out of range."""
    pass
