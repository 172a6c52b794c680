"""Instruction decoding and execution for the CHIP-8 interpreter."""

import random
from dataclasses import dataclass, field
from typing import Callable, Optional
from .cpu import CPU
from .display import Framebuffer
from .errors import UnknownOpcode
from .keypad import Keypad
from .memory import Memory, font_address


@dataclass(frozen=True)
class Opcode:
    """A 16-bit instruction word split into its standard fields."""
    word: int

    @property
    def group(self) -> int:
        return (self.word & 0xF000) >> 12

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    @property
    def nn(self) -> int:
        return self.word & 0x00FF

    @property
    def n(self) -> int:
        return self.word & 0x000F

    @property
    def x(self) -> int:
        return (self.word & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.word & 0x00F0) >> 4

    def __str__(self) -> str:
        return f"{self.word:04X}"


@dataclass
class Devices:
    """Peripherals an instruction may touch besides CPU and memory."""
    framebuffer: Framebuffer = field(default_factory=Framebuffer)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)


# Instruction executor type. Returns the new PC, or None to advance by 2.
InstructionExecutor = Callable[[Opcode, CPU, Memory, Devices], Optional[int]]


def _skip(cpu: CPU) -> int:
    """PC of the instruction after next."""
    return cpu.pc + 4


def execute_cls(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00E0 CLS"""
    dev.framebuffer.clear()
    return None


def execute_ret(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00EE RET"""
    return cpu.pop()


def execute_jp(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """1NNN JP addr"""
    return op.nnn


def execute_call(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """2NNN CALL addr"""
    cpu.push(cpu.pc + 2)
    return op.nnn


def execute_se_byte(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """3XNN SE Vx, byte"""
    if cpu.v[op.x] == op.nn:
        return _skip(cpu)
    return None


def execute_sne_byte(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """4XNN SNE Vx, byte"""
    if cpu.v[op.x] != op.nn:
        return _skip(cpu)
    return None


def execute_se_reg(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """5XYN SE Vx, Vy (low nibble ignored)"""
    if cpu.v[op.x] == cpu.v[op.y]:
        return _skip(cpu)
    return None


def execute_ld_byte(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """6XNN LD Vx, byte"""
    cpu.set_v(op.x, op.nn)
    return None


def execute_add_byte(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """7XNN ADD Vx, byte (VF untouched)"""
    cpu.set_v(op.x, cpu.v[op.x] + op.nn)
    return None


def execute_ld_reg(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY0 LD Vx, Vy"""
    cpu.set_v(op.x, cpu.v[op.y])
    return None


def execute_or(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY1 OR Vx, Vy"""
    cpu.set_v(op.x, cpu.v[op.x] | cpu.v[op.y])
    return None


def execute_and(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY2 AND Vx, Vy"""
    cpu.set_v(op.x, cpu.v[op.x] & cpu.v[op.y])
    return None


def execute_xor(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY3 XOR Vx, Vy"""
    cpu.set_v(op.x, cpu.v[op.x] ^ cpu.v[op.y])
    return None


# The 8XY4..8XYE forms read both operands before writing anything. VF is
# written before Vx, so with x == F the arithmetic result is what remains.

def execute_add_reg(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY4 ADD Vx, Vy: VF = carry"""
    total = cpu.v[op.x] + cpu.v[op.y]
    cpu.set_flag(1 if total > 0xFF else 0)
    cpu.set_v(op.x, total)
    return None


def execute_sub(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY5 SUB Vx, Vy: VF = Vx > Vy"""
    vx, vy = cpu.v[op.x], cpu.v[op.y]
    cpu.set_flag(1 if vx > vy else 0)
    cpu.set_v(op.x, vx - vy)
    return None


def execute_shr(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY6 SHR Vx: VF = bit shifted out"""
    vx = cpu.v[op.x]
    cpu.set_flag(vx & 0x01)
    cpu.set_v(op.x, vx >> 1)
    return None


def execute_subn(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY7 SUBN Vx, Vy: VF = Vy > Vx"""
    vx, vy = cpu.v[op.x], cpu.v[op.y]
    cpu.set_flag(1 if vy > vx else 0)
    cpu.set_v(op.x, vy - vx)
    return None


def execute_shl(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XYE SHL Vx: VF = bit shifted out"""
    vx = cpu.v[op.x]
    cpu.set_flag((vx >> 7) & 0x01)
    cpu.set_v(op.x, vx << 1)
    return None


def execute_sne_reg(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """9XY0 SNE Vx, Vy"""
    if cpu.v[op.x] != cpu.v[op.y]:
        return _skip(cpu)
    return None


def execute_ld_i(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """ANNN LD I, addr"""
    cpu.set_i(op.nnn)
    return None


def execute_jp_v0(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """BNNN JP V0, addr"""
    return (op.nnn + cpu.v[0]) & 0xFFFF


def execute_rnd(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """CXNN RND Vx, byte"""
    cpu.set_v(op.x, dev.rng.randint(0, 0xFF) & op.nn)
    return None


def execute_drw(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """DXYN DRW Vx, Vy, nibble: VF = collision"""
    sprite = mem.read_block(cpu.i, op.n)
    collision = dev.framebuffer.draw_sprite(cpu.v[op.x], cpu.v[op.y], sprite)
    cpu.set_flag(1 if collision else 0)
    return None


def execute_skp(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EX9E SKP Vx"""
    if dev.keypad.is_pressed(cpu.v[op.x]):
        return _skip(cpu)
    return None


def execute_sknp(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EXA1 SKNP Vx"""
    if not dev.keypad.is_pressed(cpu.v[op.x]):
        return _skip(cpu)
    return None


def execute_ld_vx_dt(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX07 LD Vx, DT"""
    cpu.set_v(op.x, cpu.delay_timer)
    return None


def execute_ld_key(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX0A LD Vx, K

    Completes at once if a key is already down. Otherwise the CPU enters
    the awaiting-key state and PC stays on this instruction.
    """
    key = dev.keypad.first_pressed()
    if key is None:
        cpu.waiting_register = op.x
        return cpu.pc
    cpu.set_v(op.x, key)
    return None


def execute_ld_dt(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX15 LD DT, Vx"""
    cpu.delay_timer = cpu.v[op.x]
    return None


def execute_ld_st(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX18 LD ST, Vx"""
    cpu.sound_timer = cpu.v[op.x]
    return None


def execute_add_i(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX1E ADD I, Vx (VF untouched)"""
    cpu.set_i(cpu.i + cpu.v[op.x])
    return None


def execute_ld_font(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX29 LD F, Vx"""
    cpu.set_i(font_address(cpu.v[op.x]))
    return None


def execute_ld_bcd(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX33 LD B, Vx"""
    value = cpu.v[op.x]
    mem.write_block(cpu.i, (value // 100, (value // 10) % 10, value % 10))
    return None


def execute_store_regs(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX55 LD [I], Vx (I unchanged)"""
    mem.write_block(cpu.i, cpu.v[:op.x + 1])
    return None


def execute_load_regs(op: Opcode, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX65 LD Vx, [I] (I unchanged)"""
    for index, value in enumerate(mem.read_block(cpu.i, op.x + 1)):
        cpu.set_v(index, value)
    return None


# Second-level tables, keyed by nn (groups 0, E, F) or n (group 8)
SYSTEM_EXECUTORS: dict[int, InstructionExecutor] = {
    0xE0: execute_cls,
    0xEE: execute_ret,
}

ALU_EXECUTORS: dict[int, InstructionExecutor] = {
    0x0: execute_ld_reg,
    0x1: execute_or,
    0x2: execute_and,
    0x3: execute_xor,
    0x4: execute_add_reg,
    0x5: execute_sub,
    0x6: execute_shr,
    0x7: execute_subn,
    0xE: execute_shl,
}

KEY_EXECUTORS: dict[int, InstructionExecutor] = {
    0x9E: execute_skp,
    0xA1: execute_sknp,
}

MISC_EXECUTORS: dict[int, InstructionExecutor] = {
    0x07: execute_ld_vx_dt,
    0x0A: execute_ld_key,
    0x15: execute_ld_dt,
    0x18: execute_ld_st,
    0x1E: execute_add_i,
    0x29: execute_ld_font,
    0x33: execute_ld_bcd,
    0x55: execute_store_regs,
    0x65: execute_load_regs,
}

# Instruction dispatch table, keyed by the top nibble
INSTRUCTION_EXECUTORS: dict[int, InstructionExecutor] = {
    0x1: execute_jp,
    0x2: execute_call,
    0x3: execute_se_byte,
    0x4: execute_sne_byte,
    0x5: execute_se_reg,
    0x6: execute_ld_byte,
    0x7: execute_add_byte,
    0xA: execute_ld_i,
    0xB: execute_jp_v0,
    0xC: execute_rnd,
    0xD: execute_drw,
}


def lookup_executor(op: Opcode) -> InstructionExecutor:
    """Find the executor for an opcode.

    Raises:
        UnknownOpcode: if no instruction form matches
    """
    group = op.group
    executor: Optional[InstructionExecutor]
    if group == 0x0:
        executor = SYSTEM_EXECUTORS.get(op.nn)
    elif group == 0x8:
        executor = ALU_EXECUTORS.get(op.n)
    elif group == 0x9:
        executor = execute_sne_reg if op.n == 0 else None
    elif group == 0xE:
        executor = KEY_EXECUTORS.get(op.nn)
    elif group == 0xF:
        executor = MISC_EXECUTORS.get(op.nn)
    else:
        executor = INSTRUCTION_EXECUTORS.get(group)
    if executor is None:
        raise UnknownOpcode(f"Unknown opcode: {op}", opcode=op.word)
    return executor


def execute_instruction(
    op: Opcode,
    cpu: CPU,
    mem: Memory,
    dev: Devices,
) -> Optional[int]:
    """Execute a single instruction.

    Returns:
        New PC value if the instruction sets it, None otherwise
    """
    return lookup_executor(op)(op, cpu, mem, dev)
