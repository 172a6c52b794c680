"""Headless ROM runner for the CHIP-8 interpreter."""

import logging
from dataclasses import dataclass, field
from typing import Optional
from .errors import Chip8Error, ErrorInfo, RomError
from .machine import Chip8

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Options for ROM execution."""
    frames: int = 60
    steps_per_frame: int = 10
    max_steps: int = 100000
    keys: list[int] = field(default_factory=list)
    seed: Optional[int] = None
    include_display: bool = True


@dataclass
class RunResult:
    """Result of ROM execution."""
    status: str  # "ok" | "error"
    steps_executed: int
    frames_executed: int
    final_state: dict
    display: list[str]
    sound_active: bool = False
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "steps_executed": self.steps_executed,
            "frames_executed": self.frames_executed,
            "final_state": self.final_state,
            "display": self.display,
            "sound_active": self.sound_active,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_rom(rom: bytes, options: Optional[RunOptions] = None) -> RunResult:
    """Run a CHIP-8 ROM without a window.

    Each frame executes `steps_per_frame` instructions followed by one
    timer tick, so timers advance at the emulated 60Hz regardless of how
    fast the host is. Configured keys are held down for the whole run.

    Args:
        rom: Program image
        options: Execution options

    Returns:
        RunResult with execution status, final state and screen contents
    """
    if options is None:
        options = RunOptions()

    machine = Chip8(seed=options.seed)
    error_info: Optional[ErrorInfo] = None
    frames_executed = 0

    try:
        machine.load_rom(rom)
    except RomError as e:
        logger.error("ROM rejected: %s", e.message)
        return RunResult(
            status="error",
            steps_executed=0,
            frames_executed=0,
            final_state=machine.get_state(),
            display=[],
            error=e.to_error_info(),
        )

    for key in options.keys:
        machine.keypad.press(key)

    try:
        while frames_executed < options.frames and machine.cycles < options.max_steps:
            budget = min(options.steps_per_frame, options.max_steps - machine.cycles)
            for _ in range(budget):
                machine.step()
            machine.tick()
            frames_executed += 1
    except Chip8Error as e:
        logger.error("Machine fault at %#05x: %s", e.addr, e.message)
        error_info = e.to_error_info()

    return RunResult(
        status="ok" if error_info is None else "error",
        steps_executed=machine.cycles,
        frames_executed=frames_executed,
        final_state=machine.get_state(),
        display=machine.framebuffer.rows() if options.include_display else [],
        sound_active=machine.sound_active,
        error=error_info,
    )
