"""Integration tests with small complete programs."""

from chip8 import run_rom, RunOptions, InterpreterOptions


def program(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def test_sample_countdown_loop():
    """Count V0 down from 5 and park in a halt loop."""
    rom = program(
        0x6005,  # 200 LD V0, 5
        0x70FF,  # 202 ADD V0, -1
        0x3000,  # 204 SE V0, 0
        0x1202,  # 206 JP 202
        0x1208,  # 208 JP 208
    )
    result = run_rom(rom, options=RunOptions(frames=1, ticks_per_frame=50))
    assert result.status == "ok"
    assert result.final_state["v"][0] == 0
    assert result.final_state["v"][0xF] == 0
    assert result.final_state["pc"] == 0x208


def test_sample_bcd_score():
    """Render the decimal digits of 137 with the font set."""
    rom = program(
        0x6089,  # 200 LD V0, 137
        0xA300,  # 202 LD I, 0x300
        0xF033,  # 204 LD B, V0
        0xF265,  # 206 LD V2, [I]
        0x6300,  # 208 LD V3, 0   (x)
        0x6400,  # 20A LD V4, 0   (y)
        0xF029,  # 20C LD F, V0
        0xD345,  # 20E DRW V3, V4, 5
        0x7305,  # 210 ADD V3, 5
        0xF129,  # 212 LD F, V1
        0xD345,  # 214 DRW V3, V4, 5
        0x7305,  # 216 ADD V3, 5
        0xF229,  # 218 LD F, V2
        0xD345,  # 21A DRW V3, V4, 5
        0x121C,  # 21C JP 21C
    )
    opts = RunOptions(frames=2, interpreter=InterpreterOptions(load_font=True))
    result = run_rom(rom, options=opts)
    assert result.status == "ok"
    assert result.final_state["v"][:3] == [1, 3, 7]
    rows = [row[:15] for row in result.display[:5]]
    assert rows == [
        "..#..####.####.",
        ".##.....#....#.",
        "..#..####...#..",
        "..#.....#..#...",
        ".###.####..#...",
    ]


def test_sample_subroutine_with_timer_wait():
    """Call a routine that sets the delay timer and busy-waits on it."""
    rom = program(
        0x2206,  # 200 CALL 206
        0x6A01,  # 202 LD VA, 1
        0x1204,  # 204 JP 204
        0x6003,  # 206 LD V0, 3
        0xF015,  # 208 LD DT, V0
        0xF107,  # 20A LD V1, DT
        0x3100,  # 20C SE V1, 0
        0x120A,  # 20E JP 20A
        0x00EE,  # 210 RET
    )
    result = run_rom(rom, options=RunOptions(frames=5))
    assert result.status == "ok"
    assert result.final_state["v"][0xA] == 1
    assert result.final_state["sp"] == 0
    assert result.final_state["dt"] == 0
