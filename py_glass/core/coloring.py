"""Greedy, neighbour-aware coloring over a degeneracy order."""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from .adjacency import AdjacencyGraph
from .ordering import elimination_order
from .sites import Color, Site, SiteKey
from ..utils.random import prng_for

logger = structlog.get_logger()

PALETTE: Tuple[Color, ...] = (
    Color(155, 17, 30),
    Color(190, 83, 28),
    Color(241, 196, 0),
    Color(19, 104, 67),
    Color(135, 206, 235),
    Color(89, 49, 95),
)


def color_sites(graph: AdjacencyGraph, sites: Iterable[Site], seed: Optional[str] = None,
                order: Optional[Sequence[SiteKey]] = None,
                palette: Sequence[Color] = PALETTE) -> Dict[SiteKey, Color]:
    """
    Assign each site a palette color different from all its neighbours.

    Walks the elimination order back to front. For each vertex the colors of
    already-colored neighbours are excluded, the palette is shuffled and the
    first remaining color is taken. The chosen color is also written to
    ``site.color``.

    Args:
        graph: Adjacency graph over the sites
        sites: The sites (every graph vertex must be one of them)
        seed: Seed for the per-vertex palette shuffles
        order: Elimination order (computed from ``graph`` if None)
        palette: Available colors

    Returns:
        Mapping of site key to assigned color

    Raises:
        RuntimeError: If some vertex has no free color left. The degeneracy
            order makes this impossible for palettes of at least
            ``DEGREE_THRESHOLD`` colors, so it means a broken order.
    """
    by_key = {site.key: site for site in sites}
    if order is None:
        order = elimination_order(graph, threshold=len(palette))

    prng = prng_for(seed, "colors")
    colors: Dict[SiteKey, Color] = {}

    for key in reversed(order):
        taken = {colors[n] for n in graph.neighbors(key) if n in colors}
        choice = next((c for c in prng.shuffled(palette) if c not in taken), None)
        if choice is None:
            logger.error("No free color", site=key, neighbor_colors=len(taken),
                         palette=len(palette))
            raise RuntimeError(
                f"Coloring exhausted at site {key}: {len(taken)} neighbour colors "
                f"cover the {len(palette)}-color palette"
            )
        colors[key] = choice
        by_key[key].color = choice

    logger.info("Sites colored", sites=len(colors), colors_used=len(set(colors.values())))
    return colors


def coloring_conflicts(graph: AdjacencyGraph,
                       colors: Dict[SiteKey, Color]) -> List[Tuple[SiteKey, SiteKey]]:
    """Edges whose endpoints share a color (or are uncolored)."""
    return [
        (a, b) for a, b in graph.edges()
        if colors.get(a) is None or colors.get(a) == colors.get(b)
    ]
