"""Instruction execution for the CHIP-8 interpreter."""

import random
from typing import Callable, Optional

from .cpu import CPU
from .memory import Memory, FONT_ADDRESS, FONT_GLYPH_SIZE
from .display import Display
from .keypad import Keypad
from .decoder import Instruction


class Devices:
    """Peripherals reachable from instructions: screen, keys and RNG."""

    def __init__(
        self,
        display: Display,
        keypad: Keypad,
        rng: random.Random,
        sprite_wrap: bool = False,
    ):
        self.display = display
        self.keypad = keypad
        self.rng = rng
        self.sprite_wrap = sprite_wrap


# Instruction executor type. Returns the new PC, or None to fall through.
InstructionExecutor = Callable[[Instruction, CPU, Memory, Devices], Optional[int]]


def _skip_if(cpu: CPU, condition: bool) -> Optional[int]:
    """Skip the next instruction when condition holds."""
    if condition:
        return cpu.pc + 2
    return None


def execute_nop(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """0000: do nothing"""
    return None


def execute_cls(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00E0: clear the display"""
    dev.display.clear()
    return None


def execute_ret(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00EE: PC := pop()"""
    return cpu.pop()


def execute_jp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """1NNN: PC := NNN"""
    return instr.nnn


def execute_call(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """2NNN: push(PC), PC := NNN"""
    cpu.push(cpu.pc)
    return instr.nnn


def execute_se_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """3XNN: skip if VX == NN"""
    return _skip_if(cpu, cpu.v[instr.x] == instr.nn)


def execute_sne_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """4XNN: skip if VX != NN"""
    return _skip_if(cpu, cpu.v[instr.x] != instr.nn)


def execute_se_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """5XY0: skip if VX == VY"""
    return _skip_if(cpu, cpu.v[instr.x] == cpu.v[instr.y])


def execute_ld_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """6XNN: VX := NN"""
    cpu.set_v(instr.x, instr.nn)
    return None


def execute_add_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """7XNN: VX := VX + NN (no carry flag)"""
    cpu.set_v(instr.x, cpu.v[instr.x] + instr.nn)
    return None


def execute_ld_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY0: VX := VY"""
    cpu.set_v(instr.x, cpu.v[instr.y])
    return None


def execute_or(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY1: VX := VX OR VY"""
    cpu.set_v(instr.x, cpu.v[instr.x] | cpu.v[instr.y])
    return None


def execute_and(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY2: VX := VX AND VY"""
    cpu.set_v(instr.x, cpu.v[instr.x] & cpu.v[instr.y])
    return None


def execute_xor(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY3: VX := VX XOR VY"""
    cpu.set_v(instr.x, cpu.v[instr.x] ^ cpu.v[instr.y])
    return None


def execute_add_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY4: VX := VX + VY, VF := carry"""
    total = cpu.v[instr.x] + cpu.v[instr.y]
    cpu.set_v(instr.x, total)
    cpu.set_flag(1 if total > 0xFF else 0)
    return None


def execute_sub(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY5: VX := VX - VY, VF := NOT borrow"""
    vx, vy = cpu.v[instr.x], cpu.v[instr.y]
    cpu.set_v(instr.x, vx - vy)
    cpu.set_flag(0 if vy > vx else 1)
    return None


def execute_shr(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY6: VF := VX bit 0, VX := VX >> 1"""
    vx = cpu.v[instr.x]
    cpu.set_v(instr.x, vx >> 1)
    cpu.set_flag(vx & 0x01)
    return None


def execute_subn(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY7: VX := VY - VX, VF := NOT borrow"""
    vx, vy = cpu.v[instr.x], cpu.v[instr.y]
    cpu.set_v(instr.x, vy - vx)
    cpu.set_flag(0 if vx > vy else 1)
    return None


def execute_shl(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XYE: VF := VX bit 7, VX := VX << 1"""
    vx = cpu.v[instr.x]
    cpu.set_v(instr.x, vx << 1)
    cpu.set_flag((vx >> 7) & 0x01)
    return None


def execute_sne_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """9XY0: skip if VX != VY"""
    return _skip_if(cpu, cpu.v[instr.x] != cpu.v[instr.y])


def execute_ld_i(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """ANNN: I := NNN"""
    cpu.set_i(instr.nnn)
    return None


def execute_jp_v0(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """BNNN: PC := V0 + NNN"""
    return cpu.v[0] + instr.nnn


def execute_rnd(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """CXNN: VX := random byte AND NN"""
    cpu.set_v(instr.x, dev.rng.randrange(256) & instr.nn)
    return None


def execute_drw(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """DXYN: draw N sprite rows from MEM[I] at (VX, VY), VF := collision"""
    sprite = mem.read_block(cpu.i, instr.n)
    collision = dev.display.draw_sprite(
        cpu.v[instr.x], cpu.v[instr.y], sprite, wrap=dev.sprite_wrap
    )
    cpu.set_flag(1 if collision else 0)
    return None


def execute_skp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EX9E: skip if key VX is pressed"""
    return _skip_if(cpu, dev.keypad.is_pressed(cpu.v[instr.x]))


def execute_sknp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EXA1: skip if key VX is not pressed"""
    return _skip_if(cpu, not dev.keypad.is_pressed(cpu.v[instr.x]))


def execute_ld_vx_dt(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX07: VX := DT"""
    cpu.set_v(instr.x, cpu.dt)
    return None


def execute_ld_key(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX0A: wait for a key press, VX := key"""
    key = dev.keypad.first_pressed()
    if key is None:
        # Re-run this instruction on the next tick
        return cpu.pc - 2
    cpu.set_v(instr.x, key)
    return None


def execute_ld_dt(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX15: DT := VX"""
    cpu.dt = cpu.v[instr.x]
    return None


def execute_ld_st(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX18: ST := VX"""
    cpu.st = cpu.v[instr.x]
    return None


def execute_add_i(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX1E: I := I + VX"""
    cpu.set_i(cpu.i + cpu.v[instr.x])
    return None


def execute_ld_font(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX29: I := address of font glyph for digit VX"""
    cpu.set_i(FONT_ADDRESS + (cpu.v[instr.x] & 0xF) * FONT_GLYPH_SIZE)
    return None


def execute_bcd(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX33: MEM[I..I+2] := decimal digits of VX"""
    vx = cpu.v[instr.x]
    mem.write(cpu.i, vx // 100)
    mem.write(cpu.i + 1, (vx // 10) % 10)
    mem.write(cpu.i + 2, vx % 10)
    return None


def execute_store(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX55: MEM[I..I+X] := V0..VX"""
    for idx in range(instr.x + 1):
        mem.write(cpu.i + idx, cpu.v[idx])
    return None


def execute_load(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX65: V0..VX := MEM[I..I+X]"""
    for idx in range(instr.x + 1):
        cpu.set_v(idx, mem.read(cpu.i + idx))
    return None


# Instruction dispatch table
INSTRUCTION_EXECUTORS: dict[str, InstructionExecutor] = {
    "0000": execute_nop,
    "00E0": execute_cls,
    "00EE": execute_ret,
    "1NNN": execute_jp,
    "2NNN": execute_call,
    "3XNN": execute_se_byte,
    "4XNN": execute_sne_byte,
    "5XY0": execute_se_reg,
    "6XNN": execute_ld_byte,
    "7XNN": execute_add_byte,
    "8XY0": execute_ld_reg,
    "8XY1": execute_or,
    "8XY2": execute_and,
    "8XY3": execute_xor,
    "8XY4": execute_add_reg,
    "8XY5": execute_sub,
    "8XY6": execute_shr,
    "8XY7": execute_subn,
    "8XYE": execute_shl,
    "9XY0": execute_sne_reg,
    "ANNN": execute_ld_i,
    "BNNN": execute_jp_v0,
    "CXNN": execute_rnd,
    "DXYN": execute_drw,
    "EX9E": execute_skp,
    "EXA1": execute_sknp,
    "FX07": execute_ld_vx_dt,
    "FX0A": execute_ld_key,
    "FX15": execute_ld_dt,
    "FX18": execute_ld_st,
    "FX1E": execute_add_i,
    "FX29": execute_ld_font,
    "FX33": execute_bcd,
    "FX55": execute_store,
    "FX65": execute_load,
}


def execute_instruction(
    instr: Instruction,
    cpu: CPU,
    mem: Memory,
    dev: Devices,
) -> Optional[int]:
    """Execute a single decoded instruction.

    Unrecognized patterns are a no-op.

    Returns:
        New PC value if the instruction transfers control, None otherwise
    """
    if instr.pattern is None:
        return None
    executor = INSTRUCTION_EXECUTORS[instr.pattern]
    return executor(instr, cpu, mem, dev)
