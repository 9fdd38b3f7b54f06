"""FastAPI main application."""

from concurrent.futures import Executor, ProcessPoolExecutor
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.exceptions import DegenerateInput, InvalidOptions, OrphanPoint
from ..core.pipeline import GenerationOptions
from ..core.sampler import grid_shape
from ..serialization import mesh_to_payload
from ..utils.logging import configure_logging
from ..worker import generate_async

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Planet Mesh API",
    description="Seeded Voronoi meshes for planet-surface maps",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process pool used for generation, None means the default thread pool
executor: Optional[Executor] = None


# Request/Response models
class MeshGenerationRequest(BaseModel):
    """Request to generate a mesh."""

    seed: str = Field(..., min_length=1, description="Seed string for reproducible generation")
    width: float = Field(settings.default_width, gt=0, le=settings.max_map_width, description="Map width")
    height: float = Field(settings.default_height, gt=0, le=settings.max_map_height, description="Map height")
    space: float = Field(settings.default_space, gt=0, description="Spacing between sample points")
    chaos: float = Field(settings.default_chaos, ge=0, le=1, description="Jitter as a fraction of spacing")

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(
            seed=self.seed, width=self.width, height=self.height,
            space=self.space, chaos=self.chaos,
        )


class CellResponse(BaseModel):
    """One serialized mesh cell."""

    center: Tuple[float, float]
    polygon: List[Tuple[float, float]]
    elevation: float


class AdjacencyRequest(BaseModel):
    """Ask whether two cells of a mesh are adjacent."""

    options: MeshGenerationRequest
    a: int = Field(..., ge=0, description="First cell index")
    b: int = Field(..., ge=0, description="Second cell index")


class AdjacencyResponse(BaseModel):
    a: int
    b: int
    adjacent: bool


# Error mapping
@app.exception_handler(InvalidOptions)
async def invalid_options_handler(request: Request, exc: InvalidOptions):
    logger.warning("Invalid generation options", error=str(exc), field=exc.field)
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(DegenerateInput)
async def degenerate_input_handler(request: Request, exc: DegenerateInput):
    logger.warning("Degenerate sampling", error=str(exc), kind=type(exc).__name__)
    return JSONResponse(status_code=422, content={"detail": str(exc), "kind": type(exc).__name__})


@app.exception_handler(OrphanPoint)
async def orphan_point_handler(request: Request, exc: OrphanPoint):
    logger.error("Orphan point in tessellation", error=str(exc), index=exc.index)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Start the generation process pool if configured."""
    global executor
    logger.info("Starting Planet Mesh API", worker_processes=settings.worker_processes)
    if settings.worker_processes > 0:
        executor = ProcessPoolExecutor(max_workers=settings.worker_processes)
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    global executor
    logger.info("Shutting down Planet Mesh API")
    if executor is not None:
        executor.shutdown(cancel_futures=True)
        executor = None


def _check_point_budget(request: MeshGenerationRequest) -> None:
    columns, rows = grid_shape(request.width, request.height, request.space)
    if columns * rows > settings.max_points:
        raise HTTPException(
            status_code=422,
            detail=f"Request would sample {columns * rows} points, limit is {settings.max_points}",
        )


async def _generate(request: MeshGenerationRequest):
    _check_point_budget(request)
    return await generate_async(request.to_options(), executor)


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Planet Mesh API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/meshes/generate", response_model=List[CellResponse])
async def generate_mesh(request: MeshGenerationRequest):
    """Generate a mesh and return its cells in point order."""
    logger.info("Mesh generation requested", request=request.model_dump())
    mesh = await _generate(request)
    return mesh_to_payload(mesh)


@app.post("/meshes/adjacency", response_model=AdjacencyResponse)
async def mesh_adjacency(request: AdjacencyRequest):
    """Generate a mesh and report whether cells ``a`` and ``b`` are adjacent."""
    mesh = await _generate(request.options)
    for index in (request.a, request.b):
        if index >= len(mesh):
            raise HTTPException(status_code=404, detail=f"Cell {index} not found")
    return AdjacencyResponse(a=request.a, b=request.b, adjacent=mesh.adjacent(request.a, request.b))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
