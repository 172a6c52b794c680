"""Tests for the CPU module."""

import pytest
from chip8.cpu import CPU
from chip8.errors import StackOverflow, StackUnderflow


class TestCPU:
    """CPU module tests."""

    def test_default_initialization(self):
        """CPU starts at the program area with zeroed registers."""
        cpu = CPU()
        assert cpu.v == [0] * 16
        assert cpu.i == 0
        assert cpu.pc == 0x200
        assert cpu.sp == 0
        assert cpu.delay_timer == 0
        assert cpu.sound_timer == 0
        assert cpu.awaiting_key is False

    def test_register_wraps(self):
        """Registers wrap modulo 256."""
        cpu = CPU()
        cpu.set_v(3, 256 + 5)
        assert cpu.v[3] == 5
        cpu.set_v(3, -1)
        assert cpu.v[3] == 255

    def test_index_wraps(self):
        """I wraps modulo 65536."""
        cpu = CPU()
        cpu.set_i(0x10001)
        assert cpu.i == 1

    def test_flag_is_vf(self):
        """The flag is stored in V15."""
        cpu = CPU()
        cpu.set_flag(1)
        assert cpu.v[0xF] == 1

    def test_push_pop(self):
        """Stack returns addresses in reverse order."""
        cpu = CPU()
        cpu.push(0x202)
        cpu.push(0x304)
        assert cpu.sp == 2
        assert cpu.pop() == 0x304
        assert cpu.pop() == 0x202
        assert cpu.sp == 0

    def test_stack_overflow(self):
        """Seventeenth push raises."""
        cpu = CPU()
        for n in range(16):
            cpu.push(0x200 + n * 2)
        with pytest.raises(StackOverflow):
            cpu.push(0x400)
        assert cpu.sp == 16

    def test_stack_underflow(self):
        """Pop from empty stack raises."""
        cpu = CPU()
        with pytest.raises(StackUnderflow):
            cpu.pop()
        assert cpu.sp == 0

    def test_tick_floors_at_zero(self):
        """Timers never go below zero."""
        cpu = CPU()
        cpu.delay_timer = 3
        cpu.sound_timer = 1
        for _ in range(5):
            cpu.tick()
        assert cpu.delay_timer == 0
        assert cpu.sound_timer == 0

    def test_tick_timers_independent(self):
        """Each timer counts down on its own."""
        cpu = CPU()
        cpu.delay_timer = 2
        cpu.tick()
        assert cpu.delay_timer == 1
        assert cpu.sound_timer == 0

    def test_get_state(self):
        """Get state returns correct dict."""
        cpu = CPU()
        cpu.set_v(0, 10)
        cpu.i = 0x300
        cpu.push(0x202)
        state = cpu.get_state()
        assert state["v"][0] == 10
        assert state["i"] == 0x300
        assert state["pc"] == 0x200
        assert state["sp"] == 1
        assert state["stack"] == [0x202]
        assert state["awaiting_key"] is False

    def test_reset(self):
        """Reset returns CPU to initial state."""
        cpu = CPU()
        cpu.set_v(1, 5)
        cpu.i = 9
        cpu.pc = 0x400
        cpu.push(0x202)
        cpu.delay_timer = 4
        cpu.waiting_register = 2
        cpu.reset()
        assert cpu.v[1] == 0
        assert cpu.i == 0
        assert cpu.pc == 0x200
        assert cpu.sp == 0
        assert cpu.delay_timer == 0
        assert cpu.awaiting_key is False
