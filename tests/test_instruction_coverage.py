"""Ensure every opcode has a dedicated behavioral test."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import pytest

from chip8 import Interpreter
from chip8.decoder import VALID_PATTERNS
from chip8.instructions import INSTRUCTION_EXECUTORS


def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def expect_v(index: int, value: int) -> Callable:
    def _check(interp):
        assert interp.cpu.v[index] == value

    return _check


def expect_vf(value: int) -> Callable:
    return expect_v(0xF, value)


def expect_pc(value: int) -> Callable:
    def _check(interp):
        assert interp.cpu.pc == value

    return _check


def expect_i(value: int) -> Callable:
    def _check(interp):
        assert interp.cpu.i == value

    return _check


def expect_mem(addr: int, values: bytes) -> Callable:
    def _check(interp):
        assert interp.memory.read_block(addr, len(values)) == values

    return _check


def expect_sp(value: int) -> Callable:
    def _check(interp):
        assert interp.cpu.sp == value

    return _check


def expect_stack(entries: list[int]) -> Callable:
    def _check(interp):
        assert interp.cpu.get_state()["stack"] == entries

    return _check


def expect_timers(dt: int, st: int) -> Callable:
    def _check(interp):
        assert interp.cpu.dt == dt
        assert interp.get_sound_timer() == st

    return _check


def expect_pixel(x: int, y: int, lit: bool) -> Callable:
    def _check(interp):
        assert interp.display.pixel(x, y) is lit

    return _check


def expect_all(*checks: Callable) -> Callable:
    def _check(interp):
        for check in checks:
            check(interp)

    return _check


@dataclass
class InstructionCase:
    pattern: str
    words: tuple[int, ...]
    checker: Callable
    setup: Optional[Callable] = None
    ticks: Optional[int] = None


INSTRUCTION_CASES = [
    InstructionCase("0000", (0x0000,), expect_pc(0x202)),
    InstructionCase(
        "00E0",
        (0x00E0,),
        expect_pixel(0, 0, False),
        setup=lambda interp: interp.display.draw_sprite(0, 0, b"\x80"),
    ),
    InstructionCase(
        "00EE",
        (0x2206, 0x0000, 0x0000, 0x00EE),
        expect_all(expect_pc(0x202), expect_sp(0)),
        ticks=2,
    ),
    InstructionCase("1NNN", (0x1208,), expect_pc(0x208)),
    InstructionCase(
        "2NNN",
        (0x2208,),
        expect_all(expect_pc(0x208), expect_stack([0x202])),
    ),
    InstructionCase("3XNN", (0x6105, 0x3105), expect_pc(0x206)),
    InstructionCase("4XNN", (0x6105, 0x4106), expect_pc(0x206)),
    InstructionCase("5XY0", (0x6105, 0x6205, 0x5120), expect_pc(0x208)),
    InstructionCase("6XNN", (0x6A42,), expect_v(0xA, 0x42)),
    InstructionCase("7XNN", (0x61FF, 0x7102), expect_all(expect_v(1, 0x01), expect_vf(0))),
    InstructionCase("8XY0", (0x6207, 0x8120), expect_v(1, 7)),
    InstructionCase("8XY1", (0x610C, 0x6205, 0x8121), expect_v(1, 0x0D)),
    InstructionCase("8XY2", (0x610C, 0x6205, 0x8122), expect_v(1, 0x04)),
    InstructionCase("8XY3", (0x610C, 0x6205, 0x8123), expect_v(1, 0x09)),
    InstructionCase("8XY4", (0x61FF, 0x6201, 0x8124), expect_all(expect_v(1, 0x00), expect_vf(1))),
    InstructionCase("8XY5", (0x6101, 0x6202, 0x8125), expect_all(expect_v(1, 0xFF), expect_vf(0))),
    InstructionCase("8XY6", (0x6103, 0x8106), expect_all(expect_v(1, 0x01), expect_vf(1))),
    InstructionCase("8XY7", (0x6101, 0x6203, 0x8127), expect_all(expect_v(1, 0x02), expect_vf(1))),
    InstructionCase("8XYE", (0x6181, 0x810E), expect_all(expect_v(1, 0x02), expect_vf(1))),
    InstructionCase("9XY0", (0x6101, 0x6202, 0x9120), expect_pc(0x208)),
    InstructionCase("ANNN", (0xA123,), expect_i(0x123)),
    InstructionCase("BNNN", (0x6004, 0xB300), expect_pc(0x304)),
    InstructionCase("CXNN", (0x61FF, 0xC100), expect_v(1, 0)),
    InstructionCase(
        "DXYN",
        (0xA206, 0xD011, 0x0000, 0x8000),
        expect_all(expect_pixel(0, 0, True), expect_pixel(1, 0, False), expect_vf(0)),
        ticks=2,
    ),
    InstructionCase(
        "EX9E",
        (0x6105, 0xE19E),
        expect_pc(0x206),
        setup=lambda interp: interp.keypress(5, True),
    ),
    InstructionCase("EXA1", (0x6105, 0xE1A1), expect_pc(0x206)),
    InstructionCase(
        "FX07",
        (0xF107,),
        expect_v(1, 9),
        setup=lambda interp: setattr(interp.cpu, "dt", 9),
    ),
    InstructionCase(
        "FX0A",
        (0xF10A,),
        expect_all(expect_v(1, 0xB), expect_pc(0x202)),
        setup=lambda interp: interp.keypress(0xB, True),
    ),
    InstructionCase("FX15", (0x6120, 0xF115), expect_timers(0x20, 0)),
    InstructionCase("FX18", (0x6120, 0xF118), expect_timers(0, 0x20)),
    InstructionCase("FX1E", (0xA100, 0x6105, 0xF11E), expect_i(0x105)),
    InstructionCase("FX29", (0x610A, 0xF129), expect_i(50)),
    InstructionCase("FX33", (0xA300, 0x61FE, 0xF133), expect_mem(0x300, b"\x02\x05\x04")),
    InstructionCase(
        "FX55",
        (0xA300, 0x6011, 0x6122, 0xF155),
        expect_all(expect_mem(0x300, b"\x11\x22\x00"), expect_i(0x300)),
    ),
    InstructionCase(
        "FX65",
        (0xA300, 0xF165),
        expect_all(expect_v(0, 7), expect_v(1, 8), expect_v(2, 0), expect_i(0x300)),
        setup=lambda interp: (interp.memory.write(0x300, 7), interp.memory.write(0x301, 8)),
    ),
]


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.pattern)
def test_all_instructions_have_behavioral_tests(case: InstructionCase):
    interp = Interpreter()
    interp.load(program(*case.words))
    if case.setup:
        case.setup(interp)
    ticks = case.ticks if case.ticks is not None else len(case.words)
    for _ in range(ticks):
        assert interp.tick().pattern is not None
    case.checker(interp)


def test_instruction_case_coverage_matches_valid_patterns():
    covered = {case.pattern for case in INSTRUCTION_CASES}
    assert covered == VALID_PATTERNS
    assert set(INSTRUCTION_EXECUTORS) == VALID_PATTERNS
