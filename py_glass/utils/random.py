"""
Seed utilities.

Every random draw in py-glass goes through an ``AleaPRNG`` built from a
string seed. When none is supplied a short random one is drawn so the run
can still be reproduced from the logged value.
"""

import uuid
from typing import Optional

from ..core.alea_prng import AleaPRNG


def new_seed() -> str:
    """Draw a fresh, printable seed."""
    return uuid.uuid4().hex[:8]


def resolve_seed(seed: Optional[str]) -> str:
    """Return ``seed`` as a string, or a fresh one if it is unset."""
    if seed is None or seed == "":
        return new_seed()
    return str(seed)


def prng_for(seed: Optional[str], stream: str) -> AleaPRNG:
    """
    Build an independent generator for one named stream of a seed.

    Site placement and palette shuffling draw from separate streams so that
    changing how many shuffles happen never moves the sites.

    Args:
        seed: Run seed ("default" when None)
        stream: Stream name, e.g. "sites" or "colors"

    Returns:
        AleaPRNG instance
    """
    return AleaPRNG([seed if seed is not None else "default", stream])
