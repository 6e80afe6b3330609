"""Headless host driver with tracing for the CHIP-8 interpreter."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .interpreter import Interpreter, InterpreterOptions
from .errors import Chip8Error, Chip8RuntimeError, ErrorInfo

logger = logging.getLogger(__name__)

TIMER_HZ = 60
TICKS_PER_FRAME = 10  # 600 instructions/second against 60 Hz timers


@dataclass
class RunOptions:
    """Options for a headless run."""
    frames: int = TIMER_HZ
    ticks_per_frame: int = TICKS_PER_FRAME
    held_keys: list[int] = field(default_factory=list)
    trace: bool = False
    trace_limit: int = 1000
    interpreter: InterpreterOptions = field(default_factory=InterpreterOptions)


@dataclass
class TraceRow:
    """Machine state after one executed instruction."""
    step: int
    addr: int
    opcode: int
    instr_text: str
    pc: int
    i: int
    v: list[int]

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "addr": self.addr,
            "opcode": f"{self.opcode:04X}",
            "instr_text": self.instr_text,
            "pc": self.pc,
            "i": self.i,
            "v": self.v,
        }


@dataclass
class RunResult:
    """Result of a headless run."""
    status: str  # "ok" | "error"
    steps_executed: int
    frames_executed: int
    final_state: dict
    display: list[str]
    sound_active: bool
    trace: list[dict]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "steps_executed": self.steps_executed,
            "frames_executed": self.frames_executed,
            "final_state": self.final_state,
            "display": self.display,
            "sound_active": self.sound_active,
            "trace": self.trace,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_rom(rom: bytes, options: Optional[RunOptions] = None) -> RunResult:
    """Run a CHIP-8 program image for a fixed number of frames.

    Each frame executes ticks_per_frame instructions followed by one timer
    advance. No wall-clock pacing is done here.

    Args:
        rom: Raw program bytes, loaded at 0x200
        options: Run options

    Returns:
        RunResult with final state, framebuffer and optional trace
    """
    if options is None:
        options = RunOptions()

    trace_rows: list[dict] = []
    error_info: Optional[ErrorInfo] = None
    steps_executed = 0
    frames_executed = 0

    interp = Interpreter(options.interpreter)

    try:
        interp.load(rom)
        for key in options.held_keys:
            interp.keypress(key, True)

        for _ in range(options.frames):
            for _ in range(options.ticks_per_frame):
                addr = interp.cpu.pc
                instr = interp.tick()
                steps_executed += 1

                if options.trace and len(trace_rows) < options.trace_limit:
                    row = TraceRow(
                        step=steps_executed,
                        addr=addr,
                        opcode=instr.opcode,
                        instr_text=instr.text,
                        pc=interp.cpu.pc,
                        i=interp.cpu.i,
                        v=list(interp.cpu.v),
                    )
                    trace_rows.append(row.to_dict())

            interp.advance_timers()
            frames_executed += 1

    except Chip8Error as e:
        # Attach context to error
        if isinstance(e, Chip8RuntimeError):
            e.step = steps_executed + 1
        else:
            e.step = steps_executed
        error_info = e.to_error_info()
        logger.warning(
            "Run stopped at step %d: %s: %s", e.step, error_info.type, e.message
        )

    return RunResult(
        status="ok" if error_info is None else "error",
        steps_executed=steps_executed,
        frames_executed=frames_executed,
        final_state=interp.get_state(),
        display=interp.display.to_text(),
        sound_active=interp.is_sound_active(),
        trace=trace_rows,
        error=error_info,
    )
