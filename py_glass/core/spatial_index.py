"""
Spatial index over the site set.

Build-once, read-many wrapper around ``sklearn.neighbors.KDTree``. Distances
handed back to callers are squared Euclidean, recomputed from the site
coordinates so they are exactly ``dx*dx + dy*dy``.
"""

from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np
import structlog
from sklearn.neighbors import KDTree

from .sites import Site, SiteKey, as_key

logger = structlog.get_logger()


class SpatialIndex:
    """Answers "k nearest sites to P" queries for a fixed set of sites."""

    def __init__(self, sites: Sequence[Site], leaf_size: int = 40):
        """
        Build the index.

        Args:
            sites: Non-empty sequence of sites with distinct coordinates
            leaf_size: KDTree leaf size

        Raises:
            ValueError: If ``sites`` is empty or holds duplicate coordinates
        """
        if len(sites) == 0:
            raise ValueError("Cannot build a spatial index over zero sites")

        self._sites: List[Site] = list(sites)
        self._by_key: Dict[SiteKey, int] = {}
        for i, site in enumerate(self._sites):
            if site.key in self._by_key:
                raise ValueError(f"Duplicate site at {site.key}")
            self._by_key[site.key] = i

        self.coordinates = np.array([site.xy for site in self._sites], dtype=np.float64)
        self._tree = KDTree(self.coordinates, leaf_size=leaf_size)

        logger.debug("Spatial index built", sites=len(self._sites))

    def __len__(self) -> int:
        return len(self._sites)

    def __iter__(self) -> Iterator[Site]:
        return iter(self._sites)

    def __contains__(self, point) -> bool:
        return as_key(point) in self._by_key

    @property
    def sites(self) -> List[Site]:
        return list(self._sites)

    def site(self, key) -> Site:
        """Look up a site by its coordinate key."""
        return self._sites[self._by_key[as_key(key)]]

    def site_at(self, i: int) -> Site:
        return self._sites[i]

    def index_of(self, key) -> int:
        return self._by_key[as_key(key)]

    def query(self, points, k: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Batch k-nearest query.

        Args:
            points: Array-like of shape (n, 2)
            k: Number of neighbours per point

        Returns:
            Tuple of (squared distances, site indices), both shaped (n, k)
            and sorted by ascending distance along axis 1

        Raises:
            ValueError: If k is not in [1, len(self)]
        """
        if k < 1 or k > len(self._sites):
            raise ValueError(
                f"k-nearest query for k={k} on an index of {len(self._sites)} sites"
            )

        points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(points) == 0:
            return np.empty((0, k)), np.empty((0, k), dtype=np.intp)

        _, indices = self._tree.query(points, k=k, sort_results=True)
        diff = self.coordinates[indices] - points[:, None, :]
        sq_distances = np.einsum("nkd,nkd->nk", diff, diff)
        return sq_distances, indices

    def k_nearest(self, point, k: int) -> List[Site]:
        """Return the k sites nearest to ``point``, closest first."""
        _, indices = self.query([as_key(point)], k)
        return [self._sites[i] for i in indices[0]]

    def nearest_site(self, point) -> Site:
        """Return the site whose cell contains ``point``."""
        return self.k_nearest(point, 1)[0]
