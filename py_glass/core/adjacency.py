"""
Cell adjacency discovery without building Voronoi geometry.

For every pair of sites the perpendicular bisector is sampled across the
drawable area. A sample whose two nearest sites are (within tolerance)
equally far away lies on a Voronoi edge between those two cells, so the two
sites are recorded as neighbours. Enough samples recover the cell adjacency
graph with high probability, though not with certainty.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np
import structlog

from .bisector import bisector, sample_line, site_pairs
from .sites import Site, SiteKey, as_key
from .spatial_index import SpatialIndex

logger = structlog.get_logger()

# Squared-distance units. Coupled to the unit sampling step and the
# coordinate scale: samples lie exactly on the bisector, so this only needs
# to absorb floating point error and near-ties with a third site.
DEFAULT_TOLERANCE = 1.0


class AdjacencyGraph:
    """
    Undirected graph of Voronoi-adjacent sites, keyed by SiteKey.

    Every edge is stored on both endpoints. Vertices iterate in insertion
    order, which is the order the sites were supplied in.
    """

    def __init__(self, vertices: Iterable = ()):
        self._adj: Dict[SiteKey, Set[SiteKey]] = {}
        self._lock = threading.Lock()
        for v in vertices:
            self.add_vertex(v)

    def add_vertex(self, v) -> SiteKey:
        key = as_key(v)
        self._adj.setdefault(key, set())
        return key

    def link(self, a, b) -> None:
        """Record a symmetric edge. Linking a site to itself is a caller bug."""
        a, b = as_key(a), as_key(b)
        if a == b:
            raise ValueError(f"Refusing to link site {a} to itself")
        with self._lock:
            self._adj.setdefault(a, set()).add(b)
            self._adj.setdefault(b, set()).add(a)

    def neighbors(self, v) -> Set[SiteKey]:
        return self._adj[as_key(v)]

    def degree(self, v) -> int:
        return len(self._adj[as_key(v)])

    @property
    def vertices(self) -> List[SiteKey]:
        return list(self._adj)

    def edges(self) -> List[Tuple[SiteKey, SiteKey]]:
        """Unique edges as sorted (low, high) key pairs, in sorted order."""
        return sorted(
            (a, b) for a, nbrs in self._adj.items() for b in nbrs if a < b
        )

    @property
    def edge_count(self) -> int:
        return sum(len(nbrs) for nbrs in self._adj.values()) // 2

    def is_symmetric(self) -> bool:
        return all(a in self._adj.get(b, ()) for a, nbrs in self._adj.items() for b in nbrs)

    def to_dict(self) -> Dict[SiteKey, List[SiteKey]]:
        return {v: sorted(nbrs) for v, nbrs in self._adj.items()}

    def __len__(self) -> int:
        return len(self._adj)

    def __iter__(self) -> Iterator[SiteKey]:
        return iter(self._adj)

    def __contains__(self, v) -> bool:
        return as_key(v) in self._adj

    def __eq__(self, other) -> bool:
        if not isinstance(other, AdjacencyGraph):
            return NotImplemented
        return self._adj == other._adj

    def __repr__(self) -> str:
        return f"AdjacencyGraph(vertices={len(self)}, edges={self.edge_count})"


class AdjacencyRecorder:
    """
    Turns bisector samples into adjacency edges.

    Each sample is checked against its nearest sites. The two nearest are
    linked when their squared distances differ by less than ``tolerance``
    and, if a third site exists, it is not also within tolerance. The second
    condition rejects Voronoi vertices, where three or more sites tie and the
    index would return an arbitrary two of them.
    """

    def __init__(self, index: SpatialIndex, graph: Optional[AdjacencyGraph] = None,
                 tolerance: float = DEFAULT_TOLERANCE):
        if len(index) < 2:
            raise ValueError("Adjacency needs at least two sites")
        self.index = index
        self.graph = graph if graph is not None else AdjacencyGraph(index)
        self.tolerance = tolerance
        self.k = min(3, len(index))
        self._boundary: List[np.ndarray] = []
        self._lock = threading.Lock()

    def record(self, samples: np.ndarray) -> int:
        """
        Check samples and link the sites they separate.

        Args:
            samples: Candidate points, shape (n, 2)

        Returns:
            Number of samples that produced an edge
        """
        if len(samples) == 0:
            return 0

        sq, idx = self.index.query(samples, self.k)
        hits = np.abs(sq[:, 0] - sq[:, 1]) < self.tolerance
        if self.k > 2:
            hits &= (sq[:, 2] - sq[:, 1]) >= self.tolerance

        n_hits = int(np.count_nonzero(hits))
        if n_hits == 0:
            return 0

        pairs = np.unique(np.sort(idx[hits, :2], axis=1), axis=0)
        for i, j in pairs:
            self.graph.link(self.index.site_at(i), self.index.site_at(j))

        with self._lock:
            self._boundary.append(samples[hits])
        return n_hits

    @property
    def boundary_samples(self) -> np.ndarray:
        """All samples that produced an edge, shape (n, 2)."""
        with self._lock:
            if not self._boundary:
                return np.empty((0, 2))
            return np.vstack(self._boundary)

    def record_pair(self, p: Site, q: Site, width: int, height: int) -> int:
        return self.record(sample_line(bisector(p, q), width, height))


def build_adjacency(sites: Sequence[Site], width: int, height: int,
                    tolerance: float = DEFAULT_TOLERANCE, workers: int = 1,
                    index: Optional[SpatialIndex] = None,
                    recorder: Optional[AdjacencyRecorder] = None) -> AdjacencyGraph:
    """
    Build the cell adjacency graph for a site set.

    A pure function of the sites and bounds: the sampling is deterministic,
    and running it on several worker threads yields the same edge set.

    Args:
        sites: Distinct sites
        width: Drawable width
        height: Drawable height
        tolerance: Squared-distance tolerance for "equidistant"
        workers: Number of threads sampling bisector pairs
        index: Prebuilt spatial index over ``sites`` (built if None)
        recorder: Recorder to use, e.g. to keep boundary samples afterwards

    Returns:
        AdjacencyGraph with every site as a vertex
    """
    if recorder is None:
        if index is None:
            index = SpatialIndex(sites)
        if len(index) < 2:
            logger.info("Adjacency built", vertices=len(index), edges=0)
            return AdjacencyGraph(index)
        recorder = AdjacencyRecorder(index, tolerance=tolerance)

    pairs = list(site_pairs(recorder.index.sites))
    logger.info("Sampling bisectors", sites=len(recorder.index), pairs=len(pairs),
                width=width, height=height, workers=workers)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            hits = sum(pool.map(lambda pq: recorder.record_pair(pq[0], pq[1], width, height), pairs))
    else:
        hits = sum(recorder.record_pair(p, q, width, height) for p, q in pairs)

    graph = recorder.graph
    logger.info("Adjacency built", vertices=len(graph), edges=graph.edge_count,
                boundary_samples=hits)
    return graph
