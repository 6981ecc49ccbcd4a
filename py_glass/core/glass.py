"""Stained-glass generation pipeline: sites -> adjacency -> order -> colors."""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional

import numpy as np
import structlog

from .adjacency import DEFAULT_TOLERANCE, AdjacencyGraph, AdjacencyRecorder, build_adjacency
from .coloring import PALETTE, color_sites
from .ordering import DEGREE_THRESHOLD, elimination_order
from .sites import Color, Site, SiteKey, generate_sites
from .spatial_index import SpatialIndex
from ..utils.random import resolve_seed

logger = structlog.get_logger()


class GlassConfig(NamedTuple):
    """Configuration for glass generation."""
    width: int
    height: int
    num_points: int


@dataclass
class GlassMap:
    """Everything produced by one generation run."""
    width: int
    height: int
    seed: str
    sites: List[Site]
    index: SpatialIndex
    graph: AdjacencyGraph
    order: List[SiteKey]
    colors: Dict[SiteKey, Color]
    boundary_samples: np.ndarray = field(default_factory=lambda: np.empty((0, 2)))
    tolerance: float = DEFAULT_TOLERANCE

    @property
    def num_points(self) -> int:
        return len(self.sites)

    def nearest_site(self, point) -> Site:
        return self.index.nearest_site(point)

    def color_at(self, point) -> Optional[Color]:
        return self.nearest_site(point).color

    def should_regenerate(self, config: GlassConfig, seed: Optional[str]) -> bool:
        """Check whether a new run is needed for these parameters."""
        same_size = self.width == config.width and self.height == config.height
        same_points = self.num_points == config.num_points
        return not (same_size and same_points and self.seed == seed)


def generate_glass(config: GlassConfig, seed: Optional[str] = None,
                   tolerance: float = DEFAULT_TOLERANCE,
                   threshold: int = DEGREE_THRESHOLD,
                   workers: int = 1,
                   sites: Optional[List[Site]] = None) -> GlassMap:
    """
    Run the whole pipeline.

    Args:
        config: Drawable area and number of sites
        seed: Random seed; a fresh one is drawn (and logged) when None
        tolerance: Squared-distance tolerance for adjacency
        threshold: Residual degree threshold for the elimination order
        workers: Threads used for bisector sampling
        sites: Use these sites instead of generating random ones

    Returns:
        Complete GlassMap
    """
    seed = resolve_seed(seed)
    logger.info("Generating glass", width=config.width, height=config.height,
                num_points=config.num_points, seed=seed)

    if sites is None:
        sites = generate_sites(config.width, config.height, config.num_points, seed)
    index = SpatialIndex(sites)

    boundary = np.empty((0, 2))
    if len(index) > 1:
        recorder = AdjacencyRecorder(index, tolerance=tolerance)
        graph = build_adjacency(sites, config.width, config.height,
                                workers=workers, recorder=recorder)
        boundary = recorder.boundary_samples
    else:
        graph = build_adjacency(sites, config.width, config.height, index=index)

    order = elimination_order(graph, threshold=threshold)
    colors = color_sites(graph, sites, seed, order=order, palette=PALETTE)

    logger.info("Glass generated", seed=seed, edges=graph.edge_count,
                colors_used=len(set(colors.values())))

    return GlassMap(
        width=config.width,
        height=config.height,
        seed=seed,
        sites=list(sites),
        index=index,
        graph=graph,
        order=order,
        colors=colors,
        boundary_samples=boundary,
        tolerance=tolerance,
    )


def generate_or_reuse_glass(existing: Optional[GlassMap], config: GlassConfig,
                            seed: Optional[str] = None, **kwargs) -> GlassMap:
    """Return ``existing`` if it was built from the same parameters, else regenerate."""
    if existing is None or seed is None or existing.should_regenerate(config, seed):
        return generate_glass(config, seed, **kwargs)
    logger.info("Reusing existing glass", seed=existing.seed, sites=existing.num_points)
    return existing
