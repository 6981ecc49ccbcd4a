"""Sites: the points whose Voronoi cells get colored."""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import structlog

from ..utils.random import prng_for

logger = structlog.get_logger()


class SiteKey(NamedTuple):
    """Coordinate key identifying a site. Equality and hash are by value."""
    x: float
    y: float


class Color(NamedTuple):
    """RGB color."""
    r: int
    g: int
    b: int


@dataclass
class Site:
    """A site: fixed coordinates plus the color assigned by the colorer."""
    x: float
    y: float
    color: Optional[Color] = field(default=None, compare=False)

    @property
    def key(self) -> SiteKey:
        return SiteKey(self.x, self.y)

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)


def as_key(point) -> SiteKey:
    """Coerce a Site, SiteKey or (x, y) pair to a SiteKey."""
    if isinstance(point, Site):
        return point.key
    x, y = point
    return SiteKey(float(x), float(y))


def generate_sites(width: float, height: float, count: int,
                   seed: Optional[str] = None) -> List[Site]:
    """
    Place ``count`` distinct sites uniformly at random in the drawable area.

    Args:
        width: Area width
        height: Area height
        count: Number of sites
        seed: Random seed for reproducibility

    Returns:
        List of sites, in draw order
    """
    if count < 1:
        raise ValueError(f"Need at least one site, got {count}")

    prng = prng_for(seed, "sites")
    sites: List[Site] = []
    taken = set()
    while len(sites) < count:
        site = Site(prng.random() * width, prng.random() * height)
        if site.key in taken:
            # duplicates would break the index
            continue
        taken.add(site.key)
        sites.append(site)

    logger.info("Sites generated", count=count, width=width, height=height, seed=seed)
    return sites
