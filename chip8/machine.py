"""Interpreter engine for the CHIP-8 virtual machine."""

import logging
import random
from pathlib import Path
from typing import Iterable, Optional, Union
from .cpu import CPU
from .display import Framebuffer
from .errors import (
    Chip8Error,
    MemoryAccessError,
    RomLoadError,
    UnknownOpcode,
)
from .instructions import Devices, Opcode, execute_instruction
from .keypad import Keypad
from .memory import MEMORY_SIZE, PROGRAM_START, Memory, check_rom_size

logger = logging.getLogger(__name__)


class Chip8:
    """A complete machine: memory, CPU, framebuffer and keypad.

    The host drives it by calling step() some number of times per frame
    and tick() at 60Hz, reading the framebuffer and writing the keypad in
    between. Neither call blocks.
    """

    def __init__(self, seed: Optional[int] = None):
        self.cpu = CPU()
        self.memory = Memory()
        self.devices = Devices(rng=random.Random(seed))
        self.cycles = 0

    @property
    def framebuffer(self) -> Framebuffer:
        return self.devices.framebuffer

    @property
    def keypad(self) -> Keypad:
        return self.devices.keypad

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running."""
        return self.cpu.sound_timer > 0

    def seed(self, value: Optional[int]) -> None:
        """Reseed the generator behind RND."""
        self.devices.rng.seed(value)

    def reset(self) -> None:
        """Return every component to its power-on state."""
        self.cpu.reset(PROGRAM_START)
        self.memory.reset()
        self.framebuffer.reset()
        self.keypad.reset()
        self.cycles = 0

    def load_rom(self, rom: Union[bytes, bytearray, Iterable[int]]) -> None:
        """Reset the machine and install a program at 0x200.

        Raises:
            RomTooLarge: if the image exceeds 3584 bytes. The machine is
                left exactly as it was.
        """
        rom = bytes(rom)
        check_rom_size(rom)
        self.reset()
        self.memory.load_rom(rom)
        logger.info("Loaded %d byte ROM at %#05x", len(rom), PROGRAM_START)

    def load_rom_file(self, path: Union[str, Path]) -> None:
        """Read a ROM image from disk and load it.

        Raises:
            RomLoadError: if the file cannot be read
            RomTooLarge: if the image does not fit
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM {path}: {e}") from e
        self.load_rom(data)

    def _fetch(self) -> Opcode:
        pc = self.cpu.pc
        if pc < PROGRAM_START or pc > MEMORY_SIZE - 2 or pc % 2:
            raise MemoryAccessError(f"Program counter out of range: {pc:#05x}", addr=pc)
        return Opcode(self.memory.read_word(pc))

    def _resume_key_wait(self) -> None:
        """Complete a pending LD Vx,K if a key is now down."""
        cpu = self.cpu
        key = self.keypad.first_pressed()
        if key is None:
            return
        logger.debug("Key %X stored in V%X", key, cpu.waiting_register)
        cpu.set_v(cpu.waiting_register, key)
        cpu.waiting_register = None
        cpu.pc = (cpu.pc + 2) & 0xFFFF

    def step(self) -> None:
        """Run one fetch-decode-execute cycle.

        While awaiting a key the cycle only checks the keypad. Unknown
        opcodes are logged and skipped.

        Raises:
            MachineFault: stack overflow/underflow or an out of range
                access. Raised before the faulting instruction changes
                any state.
        """
        cpu = self.cpu
        pc = cpu.pc
        op: Optional[Opcode] = None
        try:
            if cpu.awaiting_key:
                self._resume_key_wait()
            else:
                op = self._fetch()
                try:
                    new_pc = execute_instruction(op, cpu, self.memory, self.devices)
                except UnknownOpcode as e:
                    logger.warning("%s at %#05x, skipped", e.message, pc)
                    new_pc = None
                cpu.pc = new_pc if new_pc is not None else (pc + 2) & 0xFFFF
        except Chip8Error as e:
            # Attach context to error
            e.step = self.cycles + 1
            e.addr = pc
            if op is not None:
                e.opcode = op.word
            raise
        self.cycles += 1

    def tick(self) -> None:
        """Advance the delay and sound timers by one 60Hz period."""
        self.cpu.tick()

    def get_state(self) -> dict:
        """Get registers, timers and counters as a dictionary."""
        state = self.cpu.get_state()
        state["cycles"] = self.cycles
        state["dirty"] = self.framebuffer.dirty
        return state
