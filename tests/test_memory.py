"""Tests for the Memory module."""

import pytest
from chip8.memory import (
    Memory,
    FONTSET,
    MAX_ROM_SIZE,
    PROGRAM_START,
    check_rom_size,
    font_address,
)
from chip8.errors import MemoryAccessError, RomTooLarge


class TestMemory:
    """Memory module tests."""

    def test_fontset_installed(self):
        """Glyphs occupy the first 80 bytes."""
        mem = Memory()
        assert mem.read_block(0, 80) == FONTSET
        assert mem.read(80) == 0

    def test_program_area_zeroed(self):
        """Everything past the fontset starts at zero."""
        mem = Memory()
        assert mem.read_block(0x50, 4096 - 0x50) == bytes(4096 - 0x50)

    def test_write_and_read(self):
        """Can write and read back values."""
        mem = Memory()
        mem.write(0x300, 42)
        assert mem.read(0x300) == 42

    def test_write_wraps_to_byte(self):
        """Writes keep only the low 8 bits."""
        mem = Memory()
        mem.write(0x300, 0x1FF)
        assert mem.read(0x300) == 0xFF
        mem.write(0x300, -1)
        assert mem.read(0x300) == 0xFF

    def test_read_word_big_endian(self):
        """Words combine high byte first."""
        mem = Memory()
        mem.write_block(0x200, [0x12, 0x34])
        assert mem.read_word(0x200) == 0x1234

    def test_bounds_check_read(self):
        """Reading out of bounds raises error."""
        mem = Memory()
        with pytest.raises(MemoryAccessError):
            mem.read(4096)
        with pytest.raises(MemoryAccessError):
            mem.read(-1)

    def test_bounds_check_word(self):
        """A word cannot straddle the end of memory."""
        mem = Memory()
        assert mem.read_word(4094) == 0
        with pytest.raises(MemoryAccessError):
            mem.read_word(4095)

    def test_bounds_check_block(self):
        """Block writes are all-or-nothing."""
        mem = Memory()
        with pytest.raises(MemoryAccessError):
            mem.write_block(4094, [1, 2, 3])
        assert mem.read(4094) == 0
        assert mem.read(4095) == 0

    def test_font_address(self):
        """Each glyph is five bytes long."""
        assert font_address(0) == 0
        assert font_address(0xA) == 50
        assert font_address(0xF) == 75

    def test_load_rom(self):
        """ROM lands at 0x200."""
        mem = Memory()
        mem.load_rom(b"\x60\x0A")
        assert mem.read(PROGRAM_START) == 0x60
        assert mem.read(PROGRAM_START + 1) == 0x0A

    def test_check_rom_size(self):
        """Limit is exactly 3584 bytes."""
        check_rom_size(bytes(MAX_ROM_SIZE))
        with pytest.raises(RomTooLarge):
            check_rom_size(bytes(MAX_ROM_SIZE + 1))

    def test_load_rom_too_large(self):
        """ROM over the limit is refused."""
        mem = Memory()
        with pytest.raises(RomTooLarge):
            mem.load_rom(bytes(MAX_ROM_SIZE + 1))

    def test_reset(self):
        """Reset zeroes memory but keeps the font."""
        mem = Memory()
        mem.write(0x300, 7)
        mem.write(0x00, 0)
        mem.reset()
        assert mem.read(0x300) == 0
        assert mem.read(0x00) == 0xF0

    def test_snapshot(self):
        """Snapshot returns copy of memory."""
        mem = Memory()
        snap = mem.snapshot()
        assert len(snap) == 4096
        mem.write(0x300, 1)
        assert snap[0x300] == 0
