"""Interpreter engine: owns machine state and runs the fetch-decode-execute cycle."""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from .cpu import CPU
from .memory import Memory, ADDRESS_MASK, PROGRAM_START
from .display import Display
from .keypad import Keypad
from .decoder import Instruction, decode
from .instructions import Devices, execute_instruction
from .errors import Chip8RuntimeError

logger = logging.getLogger(__name__)


@dataclass
class InterpreterOptions:
    """Behavior switches for an interpreter instance."""
    sprite_wrap: bool = False  # wrap sprites at screen edges instead of clipping
    load_font: bool = False  # install the hex font at address 0 on reset
    seed: Optional[int] = None  # seed for CXNN


class Interpreter:
    """A CHIP-8 machine.

    The host calls tick() at its instruction rate, advance_timers() at 60 Hz,
    and reads get_display() / get_sound_timer() once per rendered frame.
    """

    def __init__(self, options: Optional[InterpreterOptions] = None):
        self.options = options or InterpreterOptions()
        self.cpu = CPU(start_address=PROGRAM_START)
        self.memory = Memory()
        self.display = Display()
        self.keypad = Keypad()
        self.devices = Devices(
            display=self.display,
            keypad=self.keypad,
            rng=random.Random(self.options.seed),
            sprite_wrap=self.options.sprite_wrap,
        )
        self.reset()

    def reset(self) -> None:
        """Restore every field to its power-on default."""
        self.cpu.reset()
        self.memory.clear()
        self.display.clear()
        self.keypad.reset()
        self.devices.rng.seed(self.options.seed)
        if self.options.load_font:
            self.memory.load_font()
        logger.debug("Interpreter reset")

    def load(self, program: bytes) -> None:
        """Copy a program image into memory at the program start address.

        Raises:
            CapacityExceeded: if the image is larger than the program area
        """
        self.memory.load(program, start=PROGRAM_START)

    def keypress(self, key: int, pressed: bool) -> None:
        """Set the state of hex key 0x0-0xF."""
        self.keypad.set(key, pressed)

    def tick(self) -> Instruction:
        """Fetch, decode and execute one instruction.

        On a runtime error the program counter is restored to the faulting
        instruction and the error is re-raised with its address and opcode.

        Returns:
            The decoded instruction that was executed
        """
        addr = self.cpu.pc
        opcode = self.memory.read_word(addr)
        self.cpu.pc = (addr + 2) & ADDRESS_MASK

        instr = decode(opcode)
        if instr.pattern is None:
            logger.debug("Ignoring unrecognized opcode %04X at 0x%03X", opcode, addr)

        try:
            new_pc = execute_instruction(instr, self.cpu, self.memory, self.devices)
        except Chip8RuntimeError as e:
            self.cpu.pc = addr
            e.addr = addr
            e.opcode = opcode
            raise

        if new_pc is not None:
            self.cpu.pc = new_pc & ADDRESS_MASK
        return instr

    def advance_timers(self) -> None:
        """Count the delay and sound timers down by one (60 Hz)."""
        self.cpu.tick_timers()

    def get_display(self) -> tuple[tuple[bool, ...], ...]:
        """Read-only framebuffer, 32 rows of 64 pixels."""
        return self.display.snapshot()

    def get_sound_timer(self) -> int:
        return self.cpu.st

    def is_sound_active(self) -> bool:
        """True while the host should emit a tone."""
        return self.cpu.st > 0

    def get_state(self) -> dict:
        """Register, timer and key state for reporting."""
        state = self.cpu.get_state()
        state["keys"] = self.keypad.snapshot()
        return state
