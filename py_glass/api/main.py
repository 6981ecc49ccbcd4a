"""FastAPI application serving generated glass maps."""

import threading
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, Field

from ..config import settings
from ..core.glass import GlassConfig, GlassMap, generate_or_reuse_glass
from ..core.render import render_image, render_png_bytes
from ..core.sites import Color
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Stained Glass API",
    description="Approximate Voronoi cells, colored so no two neighbours match",
    version="0.1.0"
)

# Last generated map, reused when the same parameters come in again
_last_glass: Optional[GlassMap] = None
_glass_lock = threading.Lock()


class GlassRequest(BaseModel):
    """Request to generate a glass map."""

    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")
    width: int = Field(settings.width, ge=1, le=4000, description="Image width")
    height: int = Field(settings.height, ge=1, le=4000, description="Image height")
    num_points: int = Field(settings.num_points, ge=1, le=500, description="Number of sites")


class SiteInfo(BaseModel):
    """One site and its assigned color."""

    x: float
    y: float
    color: str
    neighbors: List[int]


class GlassResponse(BaseModel):
    """Generated glass map."""

    seed: str
    width: int
    height: int
    sites: List[SiteInfo]
    edges: List[Tuple[int, int]]
    colors_used: int


def hex_color(color: Optional[Color]) -> str:
    if color is None:
        return "#000000"
    return "#{:02x}{:02x}{:02x}".format(*color)


def get_glass(seed: Optional[str], width: int, height: int, num_points: int) -> GlassMap:
    """Generate (or reuse) a glass map, mapping failures to HTTP errors."""
    global _last_glass
    config = GlassConfig(width=width, height=height, num_points=num_points)
    with _glass_lock:
        previous = _last_glass
    try:
        glass = generate_or_reuse_glass(
            previous, config, seed,
            tolerance=settings.tolerance,
            threshold=settings.degree_threshold,
            workers=settings.workers,
        )
    except ValueError as e:
        logger.warning("Rejected glass request", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        logger.error("Glass generation failed", error=str(e))
        raise HTTPException(status_code=500, detail="Glass generation failed")
    with _glass_lock:
        _last_glass = glass
    return glass


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Stained Glass API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/glass", response_model=GlassResponse)
def generate(request: GlassRequest):
    """Generate a glass map and return its sites, adjacency and colors."""
    logger.info("Glass generation requested", request=request.model_dump())
    glass = get_glass(request.seed, request.width, request.height, request.num_points)

    position = {site.key: i for i, site in enumerate(glass.sites)}
    sites = [
        SiteInfo(
            x=site.x,
            y=site.y,
            color=hex_color(site.color),
            neighbors=sorted(position[n] for n in glass.graph.neighbors(site.key)),
        )
        for site in glass.sites
    ]
    edges = sorted(tuple(sorted((position[a], position[b]))) for a, b in glass.graph.edges())

    return GlassResponse(
        seed=glass.seed,
        width=glass.width,
        height=glass.height,
        sites=sites,
        edges=edges,
        colors_used=len(set(glass.colors.values())),
    )


@app.get("/image.png")
def image(
    seed: Optional[str] = Query(None),
    width: int = Query(settings.width, ge=1, le=4000),
    height: int = Query(settings.height, ge=1, le=4000),
    num_points: int = Query(settings.num_points, ge=1, le=500),
    boundaries: bool = Query(True),
    grid: bool = Query(True),
):
    """Render a glass map as PNG."""
    glass = get_glass(seed, width, height, num_points)
    img = render_image(glass, boundaries=boundaries, grid=settings.grid if grid else None)
    return Response(
        content=render_png_bytes(img),
        media_type="image/png",
        headers={"X-Glass-Seed": glass.seed},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
