"""FastAPI web adapter for the CHIP-8 interpreter."""

import base64
import binascii
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from chip8 import run_rom, RunOptions
from chip8.memory import MAX_ROM_SIZE


# Constants
MAX_ENCODED_SIZE = (MAX_ROM_SIZE + 2) // 3 * 4


# Request/Response models
class RunOptionsModel(BaseModel):
    frames: int = Field(default=60, ge=0, le=36000)
    steps_per_frame: int = Field(default=10, ge=1, le=1000)
    max_steps: int = Field(default=100000, ge=1, le=1000000)
    keys: list[int] = Field(default_factory=list)
    seed: Optional[int] = None
    include_display: bool = True


class RunRequest(BaseModel):
    rom: str = Field(description="Base64-encoded ROM image")
    options: Optional[RunOptionsModel] = None


class ErrorResponse(BaseModel):
    type: str
    message: str
    step: int
    addr: int
    opcode: Optional[int] = None


class RunResponse(BaseModel):
    status: str
    steps_executed: int
    frames_executed: int
    final_state: dict
    display: list[str]
    sound_active: bool
    error: Optional[ErrorResponse] = None


# Create FastAPI app
app = FastAPI(
    title="CHIP-8 Interpreter",
    description="Web API for running CHIP-8 ROMs headlessly",
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


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/run", response_model=RunResponse)
def run_code(request: RunRequest):
    """Run a CHIP-8 ROM for a number of frames.

    Args:
        request: Base64 ROM image and execution options

    Returns:
        Execution result with final registers and screen contents
    """
    # Validate encoded size before decoding
    if len(request.rom) > MAX_ENCODED_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"ROM size exceeds limit of {MAX_ROM_SIZE} bytes",
        )

    try:
        rom = base64.b64decode(request.rom, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="ROM is not valid base64")

    if len(rom) > MAX_ROM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"ROM size exceeds limit of {MAX_ROM_SIZE} bytes",
        )

    opts = request.options or RunOptionsModel()

    for key in opts.keys:
        if not 0 <= key <= 0xF:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid key: {key}",
            )

    run_opts = RunOptions(
        frames=opts.frames,
        steps_per_frame=opts.steps_per_frame,
        max_steps=opts.max_steps,
        keys=opts.keys,
        seed=opts.seed,
        include_display=opts.include_display,
    )

    result = run_rom(rom, options=run_opts)

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8080)
