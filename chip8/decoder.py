"""Opcode decoder for the CHIP-8 instruction set."""

from dataclasses import dataclass
from typing import Optional


# Opcode patterns, Cowgod notation. X/Y are register nibbles, N/NN/NNN immediates.
VALID_PATTERNS = {
    "0000",
    "00E0",
    "00EE",
    "1NNN",
    "2NNN",
    "3XNN",
    "4XNN",
    "5XY0",
    "6XNN",
    "7XNN",
    "8XY0",
    "8XY1",
    "8XY2",
    "8XY3",
    "8XY4",
    "8XY5",
    "8XY6",
    "8XY7",
    "8XYE",
    "9XY0",
    "ANNN",
    "BNNN",
    "CXNN",
    "DXYN",
    "EX9E",
    "EXA1",
    "FX07",
    "FX0A",
    "FX15",
    "FX18",
    "FX1E",
    "FX29",
    "FX33",
    "FX55",
    "FX65",
}

# Families fully identified by the high nibble
_SIMPLE_FAMILIES = {
    0x1: "1NNN",
    0x2: "2NNN",
    0x3: "3XNN",
    0x4: "4XNN",
    0x6: "6XNN",
    0x7: "7XNN",
    0xA: "ANNN",
    0xB: "BNNN",
    0xC: "CXNN",
    0xD: "DXYN",
}

_FAMILY_0 = {0x0000: "0000", 0x00E0: "00E0", 0x00EE: "00EE"}

_FAMILY_8 = {
    0x0: "8XY0",
    0x1: "8XY1",
    0x2: "8XY2",
    0x3: "8XY3",
    0x4: "8XY4",
    0x5: "8XY5",
    0x6: "8XY6",
    0x7: "8XY7",
    0xE: "8XYE",
}

_FAMILY_E = {0x9E: "EX9E", 0xA1: "EXA1"}

_FAMILY_F = {
    0x07: "FX07",
    0x0A: "FX0A",
    0x15: "FX15",
    0x18: "FX18",
    0x1E: "FX1E",
    0x29: "FX29",
    0x33: "FX33",
    0x55: "FX55",
    0x65: "FX65",
}

# Disassembly templates
_MNEMONICS = {
    "0000": "NOP",
    "00E0": "CLS",
    "00EE": "RET",
    "1NNN": "JP {nnn}",
    "2NNN": "CALL {nnn}",
    "3XNN": "SE V{x:X}, {nn}",
    "4XNN": "SNE V{x:X}, {nn}",
    "5XY0": "SE V{x:X}, V{y:X}",
    "6XNN": "LD V{x:X}, {nn}",
    "7XNN": "ADD V{x:X}, {nn}",
    "8XY0": "LD V{x:X}, V{y:X}",
    "8XY1": "OR V{x:X}, V{y:X}",
    "8XY2": "AND V{x:X}, V{y:X}",
    "8XY3": "XOR V{x:X}, V{y:X}",
    "8XY4": "ADD V{x:X}, V{y:X}",
    "8XY5": "SUB V{x:X}, V{y:X}",
    "8XY6": "SHR V{x:X}",
    "8XY7": "SUBN V{x:X}, V{y:X}",
    "8XYE": "SHL V{x:X}",
    "9XY0": "SNE V{x:X}, V{y:X}",
    "ANNN": "LD I, {nnn}",
    "BNNN": "JP V0, {nnn}",
    "CXNN": "RND V{x:X}, {nn}",
    "DXYN": "DRW V{x:X}, V{y:X}, {n}",
    "EX9E": "SKP V{x:X}",
    "EXA1": "SKNP V{x:X}",
    "FX07": "LD V{x:X}, DT",
    "FX0A": "LD V{x:X}, K",
    "FX15": "LD DT, V{x:X}",
    "FX18": "LD ST, V{x:X}",
    "FX1E": "ADD I, V{x:X}",
    "FX29": "LD F, V{x:X}",
    "FX33": "LD B, V{x:X}",
    "FX55": "LD [I], V{x:X}",
    "FX65": "LD V{x:X}, [I]",
}


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit opcode."""
    opcode: int
    pattern: Optional[str]  # None for unrecognized bit patterns

    @property
    def family(self) -> int:
        return self.opcode >> 12

    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.opcode & 0xF

    @property
    def nn(self) -> int:
        return self.opcode & 0xFF

    @property
    def nnn(self) -> int:
        return self.opcode & 0xFFF

    @property
    def text(self) -> str:
        """Disassembled form, e.g. 'ADD V1, V2'."""
        if self.pattern is None:
            return f"DW 0x{self.opcode:04X}"
        return _MNEMONICS[self.pattern].format(
            x=self.x,
            y=self.y,
            n=self.n,
            nn=f"0x{self.nn:02X}",
            nnn=f"0x{self.nnn:03X}",
        )


def decode(opcode: int) -> Instruction:
    """Split an opcode into nibbles and identify its pattern."""
    opcode &= 0xFFFF
    family = opcode >> 12
    low_nibble = opcode & 0xF
    low_byte = opcode & 0xFF

    if family == 0x0:
        pattern = _FAMILY_0.get(opcode)
    elif family in (0x5, 0x9):
        pattern = f"{family:X}XY0" if low_nibble == 0 else None
    elif family == 0x8:
        pattern = _FAMILY_8.get(low_nibble)
    elif family == 0xE:
        pattern = _FAMILY_E.get(low_byte)
    elif family == 0xF:
        pattern = _FAMILY_F.get(low_byte)
    else:
        pattern = _SIMPLE_FAMILIES[family]

    return Instruction(opcode=opcode, pattern=pattern)
