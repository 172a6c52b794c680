"""CPU state model for the CHIP-8 interpreter."""

from typing import Optional
from .errors import StackOverflow, StackUnderflow
from .memory import PROGRAM_START

NUM_REGISTERS = 16
STACK_DEPTH = 16
FLAG = 0xF


class CPU:
    """Register file, call stack and timers.

    VF is an ordinary register. ADD, SUB, SHR, SUBN, SHL and DRW overwrite it
    as a side effect, so it is stored with the others rather than as a
    separate flag.
    """

    def __init__(self):
        self.v: list[int] = [0] * NUM_REGISTERS
        self.i: int = 0
        self.pc: int = PROGRAM_START
        self.stack: list[int] = [0] * STACK_DEPTH
        self.sp: int = 0
        self.delay_timer: int = 0
        self.sound_timer: int = 0
        # Register index targeted by a pending LD Vx,K, or None
        self.waiting_register: Optional[int] = None

    def set_v(self, index: int, value: int) -> None:
        """Set Vx, wrapping to 8 bits."""
        self.v[index] = value & 0xFF

    def set_flag(self, value: int) -> None:
        """Set VF."""
        self.v[FLAG] = value & 0xFF

    def set_i(self, value: int) -> None:
        """Set I, wrapping to 16 bits."""
        self.i = value & 0xFFFF

    def push(self, addr: int) -> None:
        """Push a return address."""
        if self.sp >= STACK_DEPTH:
            raise StackOverflow(
                f"Call stack overflow: depth {STACK_DEPTH} exceeded",
                addr=self.pc,
            )
        self.stack[self.sp] = addr & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        """Pop a return address."""
        if self.sp == 0:
            raise StackUnderflow("Return with empty call stack", addr=self.pc)
        self.sp -= 1
        return self.stack[self.sp]

    @property
    def awaiting_key(self) -> bool:
        return self.waiting_register is not None

    def tick(self) -> None:
        """Decrement both timers by one, floored at zero."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        return {
            "v": list(self.v),
            "i": self.i,
            "pc": self.pc,
            "sp": self.sp,
            "stack": self.stack[:self.sp],
            "delay_timer": self.delay_timer,
            "sound_timer": self.sound_timer,
            "awaiting_key": self.awaiting_key,
        }

    def reset(self, start_address: int = PROGRAM_START) -> None:
        """Reset CPU to initial state."""
        self.v = [0] * NUM_REGISTERS
        self.i = 0
        self.pc = start_address
        self.stack = [0] * STACK_DEPTH
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.waiting_register = None
