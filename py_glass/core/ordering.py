"""
Degeneracy (smallest-last) elimination ordering.

Vertices are peeled off the adjacency graph one at a time, always taking the
one with the fewest still-unseen neighbours. Coloring the resulting order
back to front means each vertex sees at most ``threshold - 1`` colored
neighbours, which a palette of ``threshold`` colors can always satisfy.
"""

from typing import Dict, Iterable, List, Optional

import structlog

from .adjacency import AdjacencyGraph
from .sites import SiteKey, as_key

logger = structlog.get_logger()

# Planar graphs have average degree below 6, and the palette has 6 colors.
DEGREE_THRESHOLD = 6


def elimination_order(graph: AdjacencyGraph, seen: Optional[Iterable] = None,
                      threshold: int = DEGREE_THRESHOLD) -> List[SiteKey]:
    """
    Linearize the graph for greedy coloring.

    Each step marks one unseen vertex seen and appends it to the order. The
    vertex is the unseen one with the lowest residual degree (count of unseen
    neighbours) when that degree is below ``threshold``; otherwise the first
    unseen vertex in graph order is taken. Ties go to the vertex that entered
    its degree bucket first, so the result is deterministic.

    Args:
        graph: Adjacency graph
        seen: Vertices already seen; excluded from the order and from
            residual degrees
        threshold: Residual degree below which a vertex may be peeled

    Returns:
        Permutation of the unseen vertices
    """
    seen_keys = {as_key(v) for v in seen} if seen else set()

    # Insertion-ordered dicts serve as ordered sets throughout
    remaining: Dict[SiteKey, None] = dict.fromkeys(v for v in graph if v not in seen_keys)
    residual = {
        v: sum(1 for n in graph.neighbors(v) if n in remaining) for v in remaining
    }
    max_degree = max(residual.values(), default=0)
    buckets: List[Dict[SiteKey, None]] = [{} for _ in range(max_degree + 1)]
    for v in remaining:
        buckets[residual[v]][v] = None

    order: List[SiteKey] = []
    fallbacks = 0
    low = 0
    while remaining:
        while not buckets[low]:
            low += 1

        if low < threshold:
            v = next(iter(buckets[low]))
        else:
            v = next(iter(remaining))
            fallbacks += 1
            logger.debug("No low-degree vertex, taking next in graph order",
                         vertex=v, min_residual=low)

        del buckets[residual[v]][v]
        del remaining[v]
        order.append(v)

        for n in sorted(graph.neighbors(v)):
            if n not in remaining:
                continue
            d = residual[n]
            del buckets[d][n]
            residual[n] = d - 1
            buckets[d - 1][n] = None
            if d - 1 < low:
                low = d - 1

    if fallbacks:
        logger.warning("Elimination order used fallback picks", count=fallbacks,
                       threshold=threshold)
    logger.debug("Elimination order built", vertices=len(order), preseen=len(seen_keys))
    return order
