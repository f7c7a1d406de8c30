"""
Kami - FastAPI Backend Server

Serves the web app and provides API endpoints for editing, playing and solving.
"""

from pathlib import Path
import sys

# Add project root to path for kami_solver imports
_project_root = Path(__file__).parent.parent
sys.path.insert(0, str(_project_root))

from fastapi import FastAPI, HTTPException, APIRouter
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Literal, Optional
import uvicorn

from kami_solver import GameGrid, GameSession, Solution, SolvePerformance, solve_grid
from kami_solver.config import DEFAULT_MAX_DEPTH
from app.database import init_db, save_edit_state, load_edit_state

# Initialize database on import
init_db()

app = FastAPI(title="Kami")
api_router = APIRouter(prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# The one board this server works on
session = GameSession()


def load_edit_state_or_init() -> None:
    """Restore the saved edit state, or start a fresh board if there is none."""
    loaded = load_edit_state()
    if loaded is not None:
        grid, palette = loaded
        session.restore(grid, palette)
        print(f"[DEBUG] Restored edit state: {grid.rows}x{grid.cols}, {len(palette)} colors")
    else:
        session.init_grid()
        save_edit_state(session.snapshot())


def save_if_editing() -> None:
    if session.mode == "EDIT":
        save_edit_state(session.snapshot())


load_edit_state_or_init()


# Request/Response models
class Snapshot(BaseModel):
    rows: int
    cols: int
    colorCount: Optional[int] = None
    colors: Optional[list[str]] = None  # Legacy format
    grid: list[list[int]]


class StateResponse(BaseModel):
    mode: str
    palette: list[str]
    selected_color_index: int
    region_count: Optional[int] = None  # None while editing
    step_count: int
    snapshot: Snapshot


class ModeRequest(BaseModel):
    mode: Literal["EDIT", "PLAY"]


class PaintRequest(BaseModel):
    r: int
    c: int
    color_index: Optional[int] = None  # Selected color if omitted


class PaintResponse(BaseModel):
    changed: bool
    region_count: Optional[int] = None
    step_count: int


class SelectColorRequest(BaseModel):
    index: int


class SolveRequest(BaseModel):
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=0, le=40)


class SolveSnapshotRequest(BaseModel):
    snapshot: Snapshot
    colors: list[str] = []
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=0, le=40)


class StepModel(BaseModel):
    r: int
    c: int
    color: str
    description: str


class PerformanceModel(BaseModel):
    elapsed_ms: float
    states_visited: int
    max_depth: int
    initial_region_count: int
    found: bool


class SolveResponse(BaseModel):
    success: bool
    steps: Optional[int] = None
    path: list[StepModel] = []
    performance: Optional[PerformanceModel] = None
    error: Optional[str] = None


class HighlightCell(BaseModel):
    r: int
    c: int
    color: str


class HighlightResponse(BaseModel):
    index: int
    cells: list[HighlightCell]


def state_response() -> StateResponse:
    return StateResponse(
        mode=session.mode,
        palette=session.palette,
        selected_color_index=session.selected_color_index,
        region_count=session.region_count,
        step_count=session.step_count,
        snapshot=Snapshot(**session.grid.to_json()),
    )


def solve_response(solution: Optional[Solution], performance: Optional[SolvePerformance], max_depth: int) -> SolveResponse:
    perf = PerformanceModel(**vars(performance)) if performance is not None else None
    if solution is None:
        return SolveResponse(
            success=False,
            performance=perf,
            error=f"No solution found within {max_depth} moves"
        )
    path = [
        StepModel(r=step.region.r, c=step.region.c, color=step.color, description=step.description)
        for step in solution.path
    ]
    return SolveResponse(success=True, steps=solution.steps, path=path, performance=perf)


# Routes
@api_router.get("/state", response_model=StateResponse)
async def get_state():
    """Current board, palette and counters."""
    return state_response()


@api_router.post("/init", response_model=StateResponse)
async def init_grid():
    """Reset to an empty board with the default palette."""
    session.init_grid()
    save_if_editing()
    return state_response()


@api_router.post("/mode", response_model=StateResponse)
async def set_mode(request: ModeRequest):
    """Switch between EDIT and PLAY. Entering EDIT reloads the saved state."""
    session.set_mode(request.mode)
    if request.mode == "EDIT":
        load_edit_state_or_init()
    return state_response()


@api_router.post("/paint", response_model=PaintResponse)
async def paint(request: PaintRequest):
    """Paint one cell (EDIT) or flood-fill its region (PLAY)."""
    try:
        changed = session.paint(request.r, request.c, request.color_index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if changed:
        save_if_editing()
    return PaintResponse(changed=changed, region_count=session.region_count, step_count=session.step_count)


@api_router.post("/select-color", response_model=StateResponse)
async def select_color(request: SelectColorRequest):
    if not session.select_color(request.index):
        raise HTTPException(status_code=400, detail=f"No color at index {request.index}")
    return state_response()


@api_router.post("/palette", response_model=StateResponse)
async def add_color():
    """Add a palette color (EDIT only)."""
    if not session.add_color():
        raise HTTPException(status_code=409, detail="Palette can only be edited in EDIT mode")
    save_if_editing()
    return state_response()


@api_router.delete("/palette/{index}", response_model=StateResponse)
async def remove_color(index: int):
    """Remove a palette color (EDIT only, at least one color stays)."""
    if not session.remove_color(index):
        raise HTTPException(status_code=409, detail=f"Cannot remove color {index}")
    save_if_editing()
    return state_response()


@api_router.post("/solve", response_model=SolveResponse)
def solve_board(request: SolveRequest):
    """
    Solve the current board.

    Returns the fewest paint operations, each as the representative cell of
    the region to paint and the color to paint it.
    """
    try:
        solution = session.solve(request.max_depth)
    except Exception as e:
        print(f"[DEBUG] solve failed: {type(e).__name__}: {e}")
        return SolveResponse(success=False, error=str(e))
    return solve_response(solution, session.performance, request.max_depth)


@api_router.post("/solve-snapshot", response_model=SolveResponse)
def solve_snapshot(request: SolveSnapshotRequest):
    """Solve a posted board without touching the session."""
    try:
        grid = GameGrid.from_json(request.snapshot.model_dump(exclude_none=True))
    except ValueError as e:
        return SolveResponse(success=False, error=str(e))

    colors = request.colors or request.snapshot.colors or []
    print(f"[DEBUG] solve-snapshot: {grid.rows}x{grid.cols}, {grid.region_count()} regions")
    solution, performance = solve_grid(grid, colors, request.max_depth)
    return solve_response(solution, performance, request.max_depth)


@api_router.get("/solution/steps/{index}", response_model=HighlightResponse)
async def get_step_cells(index: int):
    """Cells to highlight for one step of the last solution."""
    try:
        cells = session.step_cells(index)
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return HighlightResponse(
        index=index,
        cells=[HighlightCell(r=cell.r, c=cell.c, color=color) for cell, color in cells]
    )


# Register the API router
app.include_router(api_router)

# Serve the front end if it has been built - MUST be last
static_path = Path(__file__).parent / "static"
if static_path.is_dir():
    app.mount("/", StaticFiles(directory=static_path, html=True), name="static")

if __name__ == "__main__":
    print("Starting Kami server at http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
