"""Memory model for the CHIP-8 interpreter."""

from typing import Iterable
from .errors import MemoryAccessError, RomTooLarge

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
FONT_START = 0x000
FONT_GLYPH_SIZE = 5

FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def check_rom_size(rom: bytes) -> None:
    """Raise RomTooLarge if `rom` does not fit above PROGRAM_START."""
    if len(rom) > MAX_ROM_SIZE:
        raise RomTooLarge(
            f"ROM is {len(rom)} bytes, limit is {MAX_ROM_SIZE}",
            addr=PROGRAM_START,
        )


def font_address(digit: int) -> int:
    """Return the address of the glyph for a hex digit."""
    return FONT_START + digit * FONT_GLYPH_SIZE


class Memory:
    """Flat byte-addressed memory with bounds checking."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = bytearray(size)
        self.install_fontset()

    def _check_bounds(self, addr: int, length: int = 1) -> None:
        """Check that [addr, addr + length) lies inside memory."""
        if addr < 0 or addr + length > self.size:
            raise MemoryAccessError(
                f"Memory address out of range: {addr:#05x}", addr=addr
            )

    def read(self, addr: int) -> int:
        """Read one byte."""
        self._check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write one byte, truncated to 8 bits."""
        self._check_bounds(addr)
        self._data[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit word."""
        self._check_bounds(addr, 2)
        return (self._data[addr] << 8) | self._data[addr + 1]

    def read_block(self, addr: int, length: int) -> bytes:
        """Read `length` bytes starting at `addr`."""
        self._check_bounds(addr, length)
        return bytes(self._data[addr:addr + length])

    def write_block(self, addr: int, values: Iterable[int]) -> None:
        """Write a sequence of bytes starting at `addr`."""
        values = bytes(v & 0xFF for v in values)
        self._check_bounds(addr, len(values))
        self._data[addr:addr + len(values)] = values

    def install_fontset(self) -> None:
        """Copy the built-in hex digit glyphs into low memory."""
        self._data[FONT_START:FONT_START + len(FONTSET)] = FONTSET

    def load_rom(self, rom: bytes) -> None:
        """Copy a program image to PROGRAM_START."""
        check_rom_size(rom)
        self._data[PROGRAM_START:PROGRAM_START + len(rom)] = rom

    def reset(self) -> None:
        """Zero all memory and reinstall the fontset."""
        self._data = bytearray(self.size)
        self.install_fontset()

    def snapshot(self) -> bytes:
        """Return a copy of the entire memory."""
        return bytes(self._data)
