"""CPU state model for the CHIP-8 interpreter."""

from .errors import StackOverflow, StackUnderflow

NUM_REGS = 16
STACK_SIZE = 16
START_ADDRESS = 0x200
FLAG_REGISTER = 0xF

BYTE_MASK = 0xFF
WORD_MASK = 0xFFFF


class CPU:
    """Registers, call stack and timers."""

    def __init__(self, start_address: int = START_ADDRESS):
        self.start_address = start_address

        # Registers
        self.v: list[int] = [0] * NUM_REGS
        self.i: int = 0
        self.pc: int = start_address
        self.sp: int = 0
        self.stack: list[int] = [0] * STACK_SIZE

        # Timers
        self.dt: int = 0
        self.st: int = 0

    def set_v(self, index: int, value: int) -> None:
        """Set VX, wrapping the value to 8 bits."""
        self.v[index & 0xF] = value & BYTE_MASK

    def set_flag(self, value: int) -> None:
        """Set VF."""
        self.v[FLAG_REGISTER] = value & BYTE_MASK

    def set_i(self, value: int) -> None:
        """Set the index register, wrapping to 16 bits."""
        self.i = value & WORD_MASK

    def push(self, addr: int) -> None:
        """Push a return address onto the call stack."""
        if self.sp >= STACK_SIZE:
            raise StackOverflow(f"Call stack overflow: {STACK_SIZE} entries in use")
        self.stack[self.sp] = addr & WORD_MASK
        self.sp += 1

    def pop(self) -> int:
        """Pop the most recent return address."""
        if self.sp == 0:
            raise StackUnderflow("Return with empty call stack")
        self.sp -= 1
        return self.stack[self.sp]

    def tick_timers(self) -> None:
        """Count both timers down by one, stopping at zero."""
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            self.st -= 1

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        return {
            "v": list(self.v),
            "i": self.i,
            "pc": self.pc,
            "sp": self.sp,
            "stack": self.stack[:self.sp],
            "dt": self.dt,
            "st": self.st,
        }

    def reset(self) -> None:
        """Reset CPU to initial state."""
        self.v = [0] * NUM_REGS
        self.i = 0
        self.pc = self.start_address
        self.sp = 0
        self.stack = [0] * STACK_SIZE
        self.dt = 0
        self.st = 0
