"""Custom exceptions for the CHIP-8 interpreter."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    opcode: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "opcode": f"{self.opcode:04X}" if self.opcode is not None else None,
        }


class Chip8Error(Exception):
    """Base exception for all CHIP-8 errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        opcode: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.opcode = opcode

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            opcode=self.opcode,
        )


class ProgramLoadError(Chip8Error):
    """Error while copying a program image into memory."""
    pass


class CapacityExceeded(ProgramLoadError):
    """Program does not fit between the load address and the end of memory."""
    pass


class Chip8RuntimeError(Chip8Error):
    """Error during program execution."""
    pass


class StackOverflow(Chip8RuntimeError):
    """CALL with all call-stack entries in use."""
    pass


class StackUnderflow(Chip8RuntimeError):
    """RET with an empty call stack."""
    pass


class InvalidKey(Chip8Error):
    """Key index outside the 16-key hex keypad."""
    pass
