"""FastAPI web adapter for the CHIP-8 interpreter."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional
import base64
import binascii
import logging
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chip8 import run_rom, RunOptions, InterpreterOptions
from chip8.decoder import VALID_PATTERNS
from chip8.memory import MAX_PROGRAM_SIZE


# Constants
MAX_FRAMES = 3600  # one minute of emulated time


# Request/Response models
class InterpreterOptionsModel(BaseModel):
    sprite_wrap: bool = False
    load_font: bool = False
    seed: Optional[int] = None


class RunOptionsModel(BaseModel):
    frames: int = Field(default=60, ge=0, le=MAX_FRAMES)
    ticks_per_frame: int = Field(default=10, ge=1, le=1000)
    held_keys: list[int] = Field(default_factory=list)
    trace: bool = False
    trace_limit: int = Field(default=1000, ge=0, le=100000)
    interpreter: InterpreterOptionsModel = Field(default_factory=InterpreterOptionsModel)


class RunRequest(BaseModel):
    rom: str  # base64-encoded program image
    options: Optional[RunOptionsModel] = None


class RunResponse(BaseModel):
    status: str
    steps_executed: int
    frames_executed: int
    final_state: dict
    display: list[str]
    sound_active: bool
    trace: list[dict]
    error: Optional[dict] = None


# Create FastAPI app
app = FastAPI(
    title="CHIP-8 Interpreter",
    description="Web API for running CHIP-8 programs headlessly",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    """Run a CHIP-8 program for a number of frames.

    Args:
        request: Base64 program image and run options

    Returns:
        Run result with final registers, framebuffer and trace
    """
    try:
        rom = base64.b64decode(request.rom, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="ROM is not valid base64")

    # Validate program size
    if len(rom) > MAX_PROGRAM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"ROM size exceeds limit of {MAX_PROGRAM_SIZE} bytes",
        )

    # Build options
    opts = request.options or RunOptionsModel()

    for key in opts.held_keys:
        if not 0 <= key <= 0xF:
            raise HTTPException(status_code=400, detail=f"Invalid key index: {key}")

    run_opts = RunOptions(
        frames=opts.frames,
        ticks_per_frame=opts.ticks_per_frame,
        held_keys=opts.held_keys,
        trace=opts.trace,
        trace_limit=opts.trace_limit,
        interpreter=InterpreterOptions(
            sprite_wrap=opts.interpreter.sprite_wrap,
            load_font=opts.interpreter.load_font,
            seed=opts.interpreter.seed,
        ),
    )

    result = run_rom(rom, options=run_opts)

    return result.to_dict()


@app.get("/api/opcodes")
async def list_opcodes():
    """List supported opcode patterns."""
    return {"opcodes": sorted(VALID_PATTERNS)}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8080)
